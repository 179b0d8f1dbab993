"""Keeping the provider's host key in ~/.ssh/known_hosts."""

from pathlib import Path

from .errors import ExternalToolError
from .paths import append_text
from .runner import ProcessRunner

KNOWN_HOSTS_MODE = 0o644


def line_names_host(line: str, host: str) -> bool:
    """Check whether a known_hosts line is for `host`.

    The first field may list several names separated by commas.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return False
    names = line.split(maxsplit=1)[0]
    return host in names.split(",")


def host_in_known_hosts(path: Path, host: str) -> bool:
    """Check whether a known_hosts file has an entry for `host`.

    A missing file counts as "not present".
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return any(line_names_host(line, host) for line in f)
    except FileNotFoundError:
        return False


def ensure_host_present(
    ssh_dir: Path,
    runner: ProcessRunner,
    host: str = "github.com",
    keyscan: str = "ssh-keyscan",
) -> bool:
    """Add the host's keys to known_hosts unless they're already there.

    Args:
        ssh_dir: SSH directory holding known_hosts
        runner: Process runner used to invoke ssh-keyscan
        host: Hostname to look up and scan
        keyscan: ssh-keyscan executable

    Returns:
        True if keys were appended, False if the host was already present

    Raises:
        ExternalToolError: If the host is missing and the scan fails
    """
    path = ssh_dir / "known_hosts"
    if host_in_known_hosts(path, host):
        return False

    result = runner.run(keyscan, [host])
    if result.exit_code != 0:
        raise ExternalToolError(
            keyscan, f"exit status {result.exit_code}", result.stderr.strip()
        )
    if not result.stdout.strip():
        raise ExternalToolError(keyscan, f"no host keys returned for {host}")

    output = result.stdout
    if not output.endswith("\n"):
        output += "\n"
    append_text(path, output, KNOWN_HOSTS_MODE)
    return True
