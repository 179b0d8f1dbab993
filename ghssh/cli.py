"""ghssh CLI - manage per-account GitHub SSH identities."""

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml

from . import identity
from .config import Settings, default_settings_path, load_settings, save_settings
from .errors import AlreadyExistsError, GhsshError
from .paths import resolve_and_prepare
from .reporting import ActivityLog, ConsoleReporter
from .runner import SubprocessRunner
from .validation import validate_host_alias, validate_label

TOKEN_SETTINGS_URL = "https://github.com/settings/tokens"
TOKEN_SCOPES = "admin:public_key, repo"

app = typer.Typer(
    name="ghssh",
    help="Manage SSH keys for multiple GitHub accounts.",
    no_args_is_help=True,
)


@dataclass
class CLIState:
    """Options shared by every command."""
    settings_path: Path
    log: ActivityLog
    quiet: bool = False


@app.callback()
def callback(
    ctx: typer.Context,
    settings_path: Optional[Path] = typer.Option(
        None, "--settings", help="Settings file (default: $GHSSH_SETTINGS or app dir)"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Append this session's activity log to a file"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
):
    """Manage SSH keys for multiple GitHub accounts."""
    state = CLIState(
        settings_path=settings_path or default_settings_path(),
        log=ActivityLog(),
        quiet=quiet,
    )
    ctx.obj = state

    if log_file is not None:
        ctx.call_on_close(lambda: state.log.save(log_file))


def get_context(
    ctx: typer.Context,
    labels: tuple[str, ...] = (),
    aliases: tuple[str, ...] = (),
) -> identity.Context:
    """Build the operation context: settings, ~/.ssh, runner and reporter.

    Labels and aliases are validated before ~/.ssh is created, so a rejected
    argument leaves the filesystem untouched.
    """
    state: CLIState = ctx.obj
    reporter = ConsoleReporter(state.log, quiet=state.quiet)
    try:
        settings = load_settings(state.settings_path)
        for label in labels:
            validate_label(label.strip())
        for alias in aliases:
            validate_host_alias(alias.strip(), settings.provider_host)
        ssh_dir = resolve_and_prepare()
    except (GhsshError, OSError) as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    reporter.info(f"SSH directory: {ssh_dir}")
    return identity.Context(
        ssh_dir=ssh_dir,
        settings=settings,
        runner=SubprocessRunner(timeout=settings.process_timeout),
        reporter=reporter,
    )


def fail(op: identity.Context, error: Exception) -> NoReturn:
    """Report an operation error and exit non-zero."""
    if isinstance(error, AlreadyExistsError):
        op.reporter.warn(str(error))
    else:
        op.reporter.error(str(error))
    raise typer.Exit(1)


# =============================================================================
# Identity Commands
# =============================================================================

@app.command()
def generate(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Account label, e.g. work or personal"),
    alias: str = typer.Argument(..., help="Host alias, e.g. github-work"),
):
    """Generate a key pair and add a Host entry to ~/.ssh/config."""
    op = get_context(ctx, labels=(label,), aliases=(alias,))
    try:
        key_path = identity.create_identity(op, label.strip(), alias.strip())
    except (GhsshError, OSError) as e:
        fail(op, e)

    typer.secho(f"\nKey created: {key_path}", fg=typer.colors.GREEN)
    typer.echo(f"Use it in git remotes as: git@{alias.strip()}:<owner>/<repo>.git")


@app.command("show-key")
def show_key(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Account label"),
):
    """Print the public key for a label."""
    op = get_context(ctx, labels=(label,))
    try:
        public_key = identity.show_public_key(op, label.strip())
    except (GhsshError, OSError) as e:
        fail(op, e)

    typer.echo(public_key)


@app.command()
def upload(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Account label"),
    alias: str = typer.Argument(..., help="Host alias (used in the key title)"),
    token: str = typer.Option(
        ..., "--token", prompt="GitHub token", hide_input=True,
        help="Personal access token with admin:public_key scope",
    ),
):
    """Upload the public key to the GitHub account that owns the token."""
    op = get_context(ctx, labels=(label,), aliases=(alias,))
    try:
        registered = identity.upload_key(op, label.strip(), alias.strip(), token)
    except (GhsshError, OSError) as e:
        fail(op, e)
    finally:
        del token

    typer.secho("Key uploaded successfully.", fg=typer.colors.GREEN)
    typer.echo(f"  Title: {registered.title}")
    typer.echo(f"  ID: {registered.id}")


@app.command("test")
def verify(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Host alias to test"),
):
    """Check that ssh authenticates to GitHub through the alias."""
    op = get_context(ctx, aliases=(alias,))
    try:
        result = identity.verify_connection(op, alias.strip())
    except (GhsshError, OSError) as e:
        fail(op, e)

    typer.echo(result.output)
    if not result.ok:
        raise typer.Exit(1)


# =============================================================================
# Inspection Commands
# =============================================================================

@app.command("view-config")
def view_config(ctx: typer.Context):
    """Print ~/.ssh/config."""
    op = get_context(ctx)
    try:
        content = identity.view_config(op)
    except (GhsshError, OSError) as e:
        fail(op, e)

    typer.echo(f"# {op.config_path}")
    typer.echo(content, nl=False)


@app.command("list")
def list_identities(
    ctx: typer.Context,
    as_yaml: bool = typer.Option(False, "--yaml", help="Print as YAML"),
):
    """List generated identities and the aliases that use them."""
    op = get_context(ctx)
    try:
        summaries = identity.list_identities(op)
    except (GhsshError, OSError) as e:
        fail(op, e)

    if as_yaml:
        typer.echo(yaml.safe_dump(
            [s.to_dict() for s in summaries], default_flow_style=False, sort_keys=False,
        ), nl=False)
        return

    typer.echo(f"Identities: {len(summaries)}")
    for summary in summaries:
        aliases = ", ".join(summary.aliases) if summary.aliases else "(no Host entry)"
        typer.echo(f"  {summary.label}: {aliases}")
        typer.echo(f"    key: {summary.private_key}")
        if summary.public_key is None:
            typer.secho("    public key missing", fg=typer.colors.YELLOW)


# =============================================================================
# Utility Commands
# =============================================================================

@app.command("init-settings")
def init_settings(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a settings file with the default values."""
    state: CLIState = ctx.obj
    path = state.settings_path
    if path.exists() and not force:
        typer.echo(f"Settings already exist at {path} (use --force to overwrite)")
        raise typer.Exit(1)

    save_settings(Settings(), path)
    typer.secho(f"Wrote settings: {path}", fg=typer.colors.GREEN)


@app.command()
def scopes():
    """Show the token scopes needed for uploading keys."""
    typer.echo(f"Required token scopes: {TOKEN_SCOPES}")
    typer.echo("  admin:public_key  upload keys (required)")
    typer.echo("  repo              private repository access (optional)")
    typer.echo(f"Create a token at: {TOKEN_SETTINGS_URL}")


def main():
    app()


if __name__ == "__main__":
    main()
