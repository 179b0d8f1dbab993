"""Settings file for ghssh."""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import tomllib
import tomli_w  # type: ignore
import typer

from .errors import ConfigurationError

APP_NAME = "ghssh"
SETTINGS_ENV = "GHSSH_SETTINGS"


@dataclass
class Settings:
    """Tunable values for talking to the provider and running tools.

    Attributes:
        provider_host: Real SSH hostname of the provider
        provider_name: Short name used in key comments (`<label>@<name>`)
        api_url: Base URL of the REST API
        api_version: Value sent in X-GitHub-Api-Version
        user_agent: User-Agent header for API calls
        request_timeout: Seconds before an API call is abandoned
        process_timeout: Seconds before an external tool is killed
        keygen: ssh-keygen executable
        keyscan: ssh-keyscan executable
        ssh: ssh executable
    """
    provider_host: str = "github.com"
    provider_name: str = "github"
    api_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    user_agent: str = "github-ssh-manager"
    request_timeout: float = 20.0
    process_timeout: float = 60.0
    keygen: str = "ssh-keygen"
    keyscan: str = "ssh-keyscan"
    ssh: str = "ssh"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown settings field(s): {', '.join(sorted(unknown))}"
            )
        settings = cls(**data)
        for name in ("request_timeout", "process_timeout"):
            value = getattr(settings, name)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number")
            setattr(settings, name, float(value))
        return settings

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def default_settings_path() -> Path:
    """Settings location: $GHSSH_SETTINGS, else the per-user app directory."""
    env_path = os.environ.get(SETTINGS_ENV)
    if env_path:
        return Path(env_path)
    return Path(typer.get_app_dir(APP_NAME)) / "config.toml"


def load_settings(path: Path | None = None) -> Settings:
    """Read settings, falling back to defaults when the file is missing.

    Raises:
        ConfigurationError: If the file is not valid TOML or has bad values
    """
    path = path or default_settings_path()
    if not path.exists():
        return Settings()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid settings file {path}: {e}")

    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings as TOML, creating parent directories."""
    path = path or default_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "wb") as f:
        tomli_w.dump(settings.to_dict(), f)
    return path
