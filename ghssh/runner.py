"""Running external tools (ssh-keygen, ssh-keyscan, ssh)."""

import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from .errors import ExternalToolError

DEFAULT_TIMEOUT = 60.0


@dataclass
class ProcessResult:
    """Captured output of a finished process."""
    stdout: str
    stderr: str
    exit_code: int


class ProcessRunner(Protocol):
    """Anything that can run a command and hand back its captured output."""

    def run(self, command: str, args: Sequence[str]) -> ProcessResult:
        ...


class SubprocessRunner:
    """ProcessRunner backed by subprocess.run with a bounded timeout.

    A non-zero exit status is returned, not raised; callers decide what
    counts as failure (ssh -T exits 1 even when authentication works).
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(self, command: str, args: Sequence[str]) -> ProcessResult:
        """Run a command to completion.

        Raises:
            ExternalToolError: If the command can't be started or times out
        """
        cmd = [command, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise ExternalToolError(command, "command not found")
        except subprocess.TimeoutExpired:
            raise ExternalToolError(command, f"timed out after {self.timeout:g}s")
        except OSError as e:
            raise ExternalToolError(command, str(e))

        return ProcessResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.returncode,
        )
