"""Syntax checks for user-supplied labels, host aliases and tokens."""

import re

from .errors import ValidationError

LABEL_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
HOST_ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def validate_label(label: str) -> None:
    """Check an identity label.

    Raises:
        ValidationError: If the label is not 1-64 allowed characters
    """
    if not LABEL_PATTERN.fullmatch(label):
        raise ValidationError(
            "Label must be 1-64 chars and only include letters, numbers, '.', '-', '_'"
        )


def validate_host_alias(alias: str, provider_host: str = "github.com") -> None:
    """Check a host alias.

    Args:
        alias: Alias to be written as a `Host` entry
        provider_host: Canonical provider hostname the alias must not shadow

    Raises:
        ValidationError: If the alias is malformed or equals the provider host
    """
    if not HOST_ALIAS_PATTERN.fullmatch(alias):
        raise ValidationError(
            "Host alias must be 1-128 chars and only include letters, numbers, '.', '-', '_'"
        )
    if alias.lower() == provider_host.lower():
        raise ValidationError(f"Host alias must not be {provider_host}")


def require_token(token: str | None) -> None:
    """Check that an API token was supplied."""
    if token is None or not token.strip():
        raise ValidationError("GitHub token is required")
