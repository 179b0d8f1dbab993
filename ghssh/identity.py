"""Identity operations: create, show, upload, verify and inspect.

Each operation takes an explicit Context instead of touching global state,
reports progress to the context's reporter, and raises GhsshError (or
OSError for filesystem failures) for the caller to display.
"""

from dataclasses import dataclass, field
from pathlib import Path

from . import connectivity, keys, known_hosts, ssh_config
from .config import Settings
from .errors import ExternalToolError
from .github import GitHubClient, RegisteredKey
from .reporting import Reporter
from .runner import ProcessRunner
from .validation import require_token, validate_host_alias, validate_label


@dataclass
class Context:
    """Everything an operation needs: where, how and who to tell."""
    ssh_dir: Path
    settings: Settings
    runner: ProcessRunner
    reporter: Reporter

    @property
    def config_path(self) -> Path:
        return self.ssh_dir / "config"


@dataclass
class IdentitySummary:
    """A managed key pair plus the config aliases that use it."""
    label: str
    private_key: Path
    public_key: Path | None
    comment: str | None
    aliases: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "private_key": str(self.private_key),
            "public_key": str(self.public_key) if self.public_key else None,
            "comment": self.comment,
            "aliases": self.aliases,
        }


def create_identity(ctx: Context, label: str, alias: str) -> Path:
    """Generate a key pair for `label` and wire it up under `alias`.

    Steps: generate the key, make sure the provider is in known_hosts, then
    append the config block. A known_hosts failure only warns. Nothing is
    rolled back if a later step fails; the key pair stays usable.

    Returns:
        Path to the new private key

    Raises:
        ValidationError: If label or alias are malformed
        AlreadyExistsError: If a key for the label already exists
        ExternalToolError: If ssh-keygen fails
        OSError: If the SSH config can't be updated
    """
    settings = ctx.settings
    validate_label(label)
    validate_host_alias(alias, settings.provider_host)

    ctx.reporter.info(f"Generating SSH key for label: {label}, host: {alias}")
    key_path = keys.generate(
        ctx.ssh_dir,
        label,
        ctx.runner,
        provider=settings.provider_name,
        keygen=settings.keygen,
    )
    ctx.reporter.success(f"SSH key generated: {key_path}")

    try:
        added = known_hosts.ensure_host_present(
            ctx.ssh_dir,
            ctx.runner,
            host=settings.provider_host,
            keyscan=settings.keyscan,
        )
    except (ExternalToolError, OSError) as e:
        ctx.reporter.warn(f"Could not update known_hosts: {e}")
    else:
        if added:
            ctx.reporter.success(f"{settings.provider_host} added to known_hosts")
        else:
            ctx.reporter.info(f"{settings.provider_host} already present in known_hosts")

    if ssh_config.ensure_entry(ctx.config_path, alias, key_path, settings.provider_host):
        ctx.reporter.success(f"SSH config updated for host {alias}")
    else:
        ctx.reporter.warn(f"Host alias '{alias}' already exists in config, left unchanged")

    return key_path


def show_public_key(ctx: Context, label: str) -> str:
    """Return the public key text for a label."""
    validate_label(label)
    public_key = keys.read_public_key(ctx.ssh_dir, label)
    ctx.reporter.info(f"Public key loaded: {keys.public_key_path(ctx.ssh_dir, label)}")
    return public_key


def upload_key(
    ctx: Context,
    label: str,
    alias: str,
    token: str,
    client: GitHubClient | None = None,
) -> RegisteredKey:
    """Register the label's public key on GitHub under `<label>-<alias>`.

    The token reference is dropped as soon as the call returns, whatever the
    outcome.

    Raises:
        ValidationError: If label, alias or token are malformed
        FileNotFoundError: If the key hasn't been generated
        RemoteError: If GitHub rejects the key or can't be reached
    """
    settings = ctx.settings
    try:
        validate_label(label)
        validate_host_alias(alias, settings.provider_host)
        require_token(token)

        public_key = keys.read_public_key(ctx.ssh_dir, label)
        title = f"{label}-{alias}"
        ctx.reporter.info(f"Uploading SSH key to GitHub (key title: {title})")

        own_client = client is None
        if own_client:
            client = GitHubClient(
                api_url=settings.api_url,
                api_version=settings.api_version,
                user_agent=settings.user_agent,
                timeout=settings.request_timeout,
            )
        try:
            registered = client.register(token.strip(), title, public_key)
        finally:
            if own_client:
                client.close()
    finally:
        del token

    ctx.reporter.success(f"Key uploaded to GitHub (ID: {registered.id})")
    return registered


def verify_connection(ctx: Context, alias: str) -> connectivity.ConnectionResult:
    """Probe `git@<alias>` and report whether authentication works."""
    validate_host_alias(alias, ctx.settings.provider_host)

    ctx.reporter.info(f"Testing SSH connection to git@{alias}")
    result = connectivity.verify(alias, ctx.runner, ssh=ctx.settings.ssh)
    if result.ok:
        ctx.reporter.success(f"SSH connection verified for {alias}")
    else:
        ctx.reporter.error(f"SSH test failed: {result.output}")
    return result


def view_config(ctx: Context) -> str:
    """Return the SSH config text, with a placeholder when it's empty."""
    content = ssh_config.read_config(ctx.config_path)
    ctx.reporter.info(f"SSH config loaded ({len(content)} bytes)")
    if not content.strip():
        return "# SSH config is empty\n"
    return content


def list_identities(ctx: Context) -> list[IdentitySummary]:
    """List managed key pairs and the Host aliases that point at them."""
    config_path = ctx.config_path
    content = config_path.read_text(encoding="utf-8", errors="replace") if config_path.exists() else ""
    alias_keys = ssh_config.identity_files(content)

    summaries = []
    for identity in keys.list_identities(ctx.ssh_dir):
        wanted = str(identity.private_key).replace("\\", "/")
        aliases = [alias for alias, path in alias_keys if path == wanted]
        summaries.append(IdentitySummary(
            label=identity.label,
            private_key=identity.private_key,
            public_key=identity.public_key if identity.has_public_key else None,
            comment=identity.comment,
            aliases=aliases,
        ))
    return summaries
