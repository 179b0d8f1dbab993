"""Reading and appending Host blocks in ~/.ssh/config."""

import re
from pathlib import Path

from .paths import append_text, touch_private

CONFIG_MODE = 0o600

_HOST_LINE = re.compile(r"^host(?:\s*=\s*|\s+)(.*)$", re.IGNORECASE)
_KEYWORD_SPLIT = re.compile(r"\s*=\s*|\s+")


def declared_aliases(text: str) -> list[str]:
    """Return every alias declared on a `Host` line, in file order.

    A single line can declare several aliases (`Host foo bar`).
    """
    aliases = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _HOST_LINE.match(line)
        if match:
            aliases.extend(match.group(1).split())
    return aliases


def identity_files(text: str) -> list[tuple[str, str]]:
    """Pair each declared alias with the IdentityFile values in its block.

    Quotes are stripped and backslashes turned into forward slashes.
    """
    pairs = []
    current: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _HOST_LINE.match(line)
        if match:
            current = match.group(1).split()
            continue
        keyword, _, value = _KEYWORD_SPLIT.sub(" ", line, count=1).partition(" ")
        if keyword.lower() == "match":
            current = []
        elif keyword.lower() == "identityfile" and current:
            path = value.strip().strip('"').replace("\\", "/")
            pairs.extend((alias, path) for alias in current)
    return pairs


def has_host_alias(text: str, alias: str) -> bool:
    """Case-insensitive check for an alias on any `Host` line."""
    needle = alias.lower()
    return any(declared.lower() == needle for declared in declared_aliases(text))


def render_host_block(alias: str, key_path: Path | str, hostname: str = "github.com") -> str:
    """Build the config block for an alias.

    IdentityFile always uses forward slashes and is quoted, so Windows paths
    and paths with spaces both work.
    """
    identity = str(key_path).replace("\\", "/")
    return (
        f"Host {alias}\n"
        f"  HostName {hostname}\n"
        f"  User git\n"
        f'  IdentityFile "{identity}"\n'
        f"  AddKeysToAgent yes\n"
        f"  IdentitiesOnly yes\n"
    )


def ensure_config_file(config_path: Path) -> None:
    """Create an empty owner-only config file if it's missing."""
    touch_private(config_path, CONFIG_MODE)


def read_config(config_path: Path) -> str:
    """Read the config file, creating it empty first if needed.

    Bytes that are not UTF-8 are replaced; nothing read here is written back.
    """
    ensure_config_file(config_path)
    return config_path.read_text(encoding="utf-8", errors="replace")


def ensure_entry(
    config_path: Path,
    alias: str,
    key_path: Path | str,
    hostname: str = "github.com",
) -> bool:
    """Append a Host block for `alias` unless one is already declared.

    The file is only ever appended to, so hand edits elsewhere survive.

    Args:
        config_path: Path to the SSH config file
        alias: Host alias to add
        key_path: Private key to use for the alias
        hostname: Real hostname the alias points at

    Returns:
        True if a block was appended, False if the alias already existed

    Raises:
        OSError: If the file can't be read or written
    """
    content = read_config(config_path)
    if has_host_alias(content, alias):
        return False

    separator = "\n"
    if content and not content.endswith("\n"):
        separator = "\n\n"
    append_text(config_path, separator + render_host_block(alias, key_path, hostname), CONFIG_MODE)
    return True
