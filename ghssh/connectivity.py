"""Checking that an alias authenticates against GitHub over SSH."""

from dataclasses import dataclass

from .runner import ProcessRunner

SUCCESS_PHRASE = "successfully authenticated"
NO_OUTPUT = "SSH returned no output"


@dataclass
class ConnectionResult:
    """Outcome of an `ssh -T` check."""
    output: str
    ok: bool


def classify(stdout: str, stderr: str) -> ConnectionResult:
    """Decide whether captured ssh output means authentication worked.

    GitHub exits 1 after a successful auth-only login, so only the text is
    used. The greeting usually arrives on stderr.
    """
    combined = f"{stderr}\n{stdout}".strip()
    if SUCCESS_PHRASE in combined.lower():
        return ConnectionResult(output=combined, ok=True)
    return ConnectionResult(output=combined or NO_OUTPUT, ok=False)


def verify(alias: str, runner: ProcessRunner, ssh: str = "ssh") -> ConnectionResult:
    """Run `ssh -T git@<alias>` and classify the result.

    Raises:
        ExternalToolError: If ssh can't be started or times out
    """
    result = runner.run(ssh, ["-T", f"git@{alias}"])
    return classify(result.stdout, result.stderr)
