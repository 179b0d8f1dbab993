"""Error types raised by ghssh operations."""

from pathlib import Path
from typing import Any


class GhsshError(Exception):
    """Base class for errors reported to the user as a single message."""


class ConfigurationError(GhsshError):
    """The environment or settings file cannot be used."""


class ValidationError(GhsshError):
    """A label, host alias or token failed its syntax check."""


class AlreadyExistsError(GhsshError):
    """Key generation refused because the key file is already present."""

    def __init__(self, path: Path):
        super().__init__(f"Key already exists: {path}")
        self.path = path


class ExternalToolError(GhsshError):
    """A spawned tool failed to start, timed out or exited non-zero."""

    def __init__(self, command: str, message: str, stderr: str = ""):
        detail = f"{command} failed: {message}"
        if stderr:
            detail = f"{detail}: {stderr}"
        super().__init__(detail)
        self.command = command
        self.stderr = stderr


class RemoteError(GhsshError):
    """The provider API rejected the request or sent an unusable response.

    Attributes:
        status: HTTP status code, or None if no response was received
        message: Provider message (or a synthesized one)
        payload: Decoded response body, when there was one
    """

    def __init__(
        self,
        status: int | None,
        message: str,
        payload: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.payload = payload
