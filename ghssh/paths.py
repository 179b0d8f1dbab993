"""SSH directory resolution and owner-only file primitives."""

import os
from pathlib import Path

from .errors import ConfigurationError

SSH_DIR_MODE = 0o700


def supports_posix_modes() -> bool:
    """Whether chmod-style permission bits are meaningful on this platform."""
    return os.name != "nt"


def set_mode(path: Path, mode: int) -> None:
    """Apply permission bits to a path, skipped where they don't exist."""
    if supports_posix_modes():
        path.chmod(mode)


def touch_private(path: Path, mode: int = 0o600) -> None:
    """Create an empty file with the given mode if missing, then re-assert the mode."""
    if not path.exists():
        fd = os.open(path, os.O_CREAT | os.O_WRONLY, mode)
        os.close(fd)
    set_mode(path, mode)


def append_text(path: Path, text: str, mode: int = 0o600) -> None:
    """Append text to a file, creating it with `mode` if it doesn't exist.

    Existing content is never truncated.
    """
    fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, mode)
    with os.fdopen(fd, "a", encoding="utf-8", newline="\n") as f:
        f.write(text)


class PlatformPaths:
    """Locates the current user's home and SSH directories.

    Windows uses USERPROFILE, everything else HOME. The environment mapping
    can be swapped out for tests.
    """

    def __init__(self, environ: dict[str, str] | None = None, os_name: str | None = None):
        self.environ = os.environ if environ is None else environ
        self.os_name = os.name if os_name is None else os_name

    @property
    def home_variable(self) -> str:
        return "USERPROFILE" if self.os_name == "nt" else "HOME"

    def home(self) -> Path:
        """Return the home directory.

        Raises:
            ConfigurationError: If the home variable is unset or empty
        """
        value = self.environ.get(self.home_variable, "").strip()
        if not value:
            raise ConfigurationError(
                f"Failed to resolve user home directory: {self.home_variable} is not set"
            )
        return Path(value)

    def ssh_dir(self) -> Path:
        return self.home() / ".ssh"


def resolve_and_prepare(platform: PlatformPaths | None = None) -> Path:
    """Resolve ~/.ssh and make sure it exists with owner-only permissions.

    Safe to call repeatedly; the mode is re-applied every time.

    Args:
        platform: Path resolver, defaults to the real environment

    Returns:
        Path to the SSH directory

    Raises:
        ConfigurationError: If the home directory cannot be resolved
    """
    platform = platform or PlatformPaths()
    ssh_dir = platform.ssh_dir()
    ssh_dir.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
    set_mode(ssh_dir, SSH_DIR_MODE)
    return ssh_dir
