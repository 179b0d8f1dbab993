"""Tests for the SSH config editor."""

import stat
from pathlib import Path

import pytest

from ghssh import ssh_config
from ghssh.paths import supports_posix_modes

EXISTING = """\
# Personal settings
Host *
  ServerAliveInterval 30

Host foo bar
  HostName example.com
  IdentityFile ~/.ssh/id_foo

host=baz
  IdentityFile "C:\\Users\\me\\.ssh\\id_baz"
"""


def test_declared_aliases():
    """Every token after Host counts, including multi-alias and Host= lines."""
    assert ssh_config.declared_aliases(EXISTING) == ["*", "foo", "bar", "baz"]


def test_declared_aliases_ignores_comments_and_hostname():
    """Comments and HostName lines declare nothing."""
    text = "# Host commented\n  #Host also-commented\nHostName not-an-alias\n"
    assert ssh_config.declared_aliases(text) == []


@pytest.mark.parametrize("alias, expected", [
    ("foo", True),
    ("BAR", True),
    ("Baz", True),
    ("fo", False),
    ("commented", False),
])
def test_has_host_alias(alias, expected):
    """Lookup is case-insensitive and exact."""
    text = EXISTING + "# Host commented\n"
    assert ssh_config.has_host_alias(text, alias) is expected


def test_identity_files():
    """IdentityFile values are paired with every alias of their block."""
    pairs = ssh_config.identity_files(EXISTING)
    assert pairs == [
        ("foo", "~/.ssh/id_foo"),
        ("bar", "~/.ssh/id_foo"),
        ("baz", "C:/Users/me/.ssh/id_baz"),
    ]


def test_render_host_block_normalizes_windows_path():
    """Paths use forward slashes and are quoted."""
    block = ssh_config.render_host_block("github-work", r"C:\Users\Jane Doe\.ssh\id_ed25519_work")
    assert block == (
        "Host github-work\n"
        "  HostName github.com\n"
        "  User git\n"
        '  IdentityFile "C:/Users/Jane Doe/.ssh/id_ed25519_work"\n'
        "  AddKeysToAgent yes\n"
        "  IdentitiesOnly yes\n"
    )


def test_ensure_entry_creates_file(tmp_path: Path):
    """A missing config is created with the new block."""
    config_path = tmp_path / "config"
    key = tmp_path / "id_ed25519_work"

    assert ssh_config.ensure_entry(config_path, "github-work", key) is True

    content = config_path.read_text()
    assert content.startswith("\nHost github-work\n")
    assert f'IdentityFile "{key.as_posix()}"' in content


@pytest.mark.skipif(not supports_posix_modes(), reason="needs POSIX modes")
def test_ensure_entry_file_mode(tmp_path: Path):
    """The config is owner-only."""
    config_path = tmp_path / "config"
    ssh_config.ensure_entry(config_path, "github-work", tmp_path / "key")
    assert stat.S_IMODE(config_path.stat().st_mode) == 0o600


def test_ensure_entry_preserves_existing_content(tmp_path: Path):
    """Existing text is kept byte for byte; the new block is appended."""
    config_path = tmp_path / "config"
    config_path.write_text(EXISTING)

    ssh_config.ensure_entry(config_path, "github-work", tmp_path / "key")

    content = config_path.read_text()
    assert content.startswith(EXISTING)
    assert content[len(EXISTING):].startswith("\nHost github-work\n")


def test_ensure_entry_is_idempotent(tmp_path: Path):
    """Repeated calls produce exactly one block."""
    config_path = tmp_path / "config"
    key = tmp_path / "id_ed25519_work"

    results = [ssh_config.ensure_entry(config_path, "github-work", key) for _ in range(5)]

    assert results == [True, False, False, False, False]
    assert ssh_config.declared_aliases(config_path.read_text()) == ["github-work"]


def test_ensure_entry_detects_multi_alias_case_insensitive(tmp_path: Path):
    """`Host foo bar` already covers alias BAR."""
    config_path = tmp_path / "config"
    config_path.write_text(EXISTING)

    assert ssh_config.ensure_entry(config_path, "BAR", tmp_path / "key") is False
    assert config_path.read_text() == EXISTING


def test_ensure_entry_missing_final_newline(tmp_path: Path):
    """The new Host line never joins the last existing line."""
    config_path = tmp_path / "config"
    config_path.write_text("Host old\n  User git")

    ssh_config.ensure_entry(config_path, "new", tmp_path / "key")

    lines = config_path.read_text().splitlines()
    assert lines[:4] == ["Host old", "  User git", "", "Host new"]


def test_ensure_entry_custom_hostname(tmp_path: Path):
    """The block points at the configured hostname."""
    config_path = tmp_path / "config"
    ssh_config.ensure_entry(config_path, "ghe-work", tmp_path / "key", hostname="git.example.com")
    assert "  HostName git.example.com\n" in config_path.read_text()


def test_read_config_creates_empty(tmp_path: Path):
    """A missing config reads as empty and is created."""
    config_path = tmp_path / "config"
    assert ssh_config.read_config(config_path) == ""
    assert config_path.exists()


def test_ensure_entry_non_utf8_config(tmp_path: Path):
    """Undecodable bytes neither stop the append nor get rewritten."""
    config_path = tmp_path / "config"
    original = b"# Caf\xe9 server\nHost old\n  HostName example.com\n"
    config_path.write_bytes(original)

    assert ssh_config.ensure_entry(config_path, "github-work", tmp_path / "key") is True
    assert ssh_config.ensure_entry(config_path, "old", tmp_path / "key") is False

    content = config_path.read_bytes()
    assert content.startswith(original)
    assert content[len(original):].startswith(b"\nHost github-work\n")
