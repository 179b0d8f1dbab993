"""Ed25519 key pair generation for per-account identities."""

from dataclasses import dataclass
from pathlib import Path

from .errors import AlreadyExistsError, ExternalToolError
from .paths import set_mode
from .runner import ProcessRunner

KEY_PREFIX = "id_ed25519_"
PRIVATE_KEY_MODE = 0o600
PUBLIC_KEY_MODE = 0o644


@dataclass
class Identity:
    """A key pair found in the SSH directory."""
    label: str
    private_key: Path
    public_key: Path
    comment: str | None = None

    @property
    def has_public_key(self) -> bool:
        return self.public_key.exists()


def key_path(ssh_dir: Path, label: str) -> Path:
    """Path of the private key for a label."""
    return ssh_dir / f"{KEY_PREFIX}{label}"


def public_key_path(ssh_dir: Path, label: str) -> Path:
    """Path of the public key for a label."""
    return ssh_dir / f"{KEY_PREFIX}{label}.pub"


def generate(
    ssh_dir: Path,
    label: str,
    runner: ProcessRunner,
    provider: str = "github",
    keygen: str = "ssh-keygen",
) -> Path:
    """Generate an Ed25519 key pair for a label.

    Never overwrites: an existing private key aborts before ssh-keygen runs.

    Args:
        ssh_dir: Directory to write the key pair into
        label: Identity label (already validated)
        runner: Process runner used to invoke ssh-keygen
        provider: Provider name used in the key comment (`<label>@<provider>`)
        keygen: ssh-keygen executable

    Returns:
        Path to the private key

    Raises:
        AlreadyExistsError: If the private key file is already present
        ExternalToolError: If ssh-keygen fails
    """
    path = key_path(ssh_dir, label)
    if path.exists():
        raise AlreadyExistsError(path)

    result = runner.run(keygen, [
        "-t", "ed25519",
        "-C", f"{label}@{provider}",
        "-f", str(path),
        "-N", "",  # No passphrase
    ])
    if result.exit_code != 0:
        raise ExternalToolError(
            keygen, f"exit status {result.exit_code}", result.stderr.strip()
        )

    set_mode(path, PRIVATE_KEY_MODE)
    pub_path = public_key_path(ssh_dir, label)
    if pub_path.exists():
        set_mode(pub_path, PUBLIC_KEY_MODE)

    return path


def read_public_key(ssh_dir: Path, label: str) -> str:
    """Read the public key text for a label.

    Raises:
        FileNotFoundError: If no public key exists for the label
    """
    path = public_key_path(ssh_dir, label)
    if not path.exists():
        raise FileNotFoundError(f"No public key found at {path} (generate the key first)")
    return path.read_text(encoding="utf-8").strip()


def _key_comment(public_key: str) -> str | None:
    # Format: "<type> <base64> [comment]"
    parts = public_key.split(maxsplit=2)
    if len(parts) == 3:
        return parts[2]
    return None


def list_identities(ssh_dir: Path) -> list[Identity]:
    """List the key pairs this tool manages in an SSH directory."""
    if not ssh_dir.exists():
        return []

    identities = []
    for path in sorted(ssh_dir.glob(f"{KEY_PREFIX}*")):
        if path.suffix == ".pub" or not path.is_file():
            continue
        label = path.name[len(KEY_PREFIX):]
        pub_path = public_key_path(ssh_dir, label)
        comment = None
        if pub_path.exists():
            comment = _key_comment(pub_path.read_text(encoding="utf-8").strip())
        identities.append(Identity(
            label=label,
            private_key=path,
            public_key=pub_path,
            comment=comment,
        ))
    return identities
