"""Activity reporting: coloured terminal output plus a saveable log."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol

import typer

LOG_TITLE = "GitHub SSH Manager - Activity Log"


class Reporter(Protocol):
    """Sink that operations report progress to."""

    def info(self, message: str) -> None: ...
    def success(self, message: str) -> None: ...
    def warn(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


@dataclass
class LogEntry:
    timestamp: datetime
    level: str
    message: str

    def format(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.level}: {self.message}"


@dataclass
class ActivityLog:
    """In-memory record of everything reported during a session."""
    entries: list[LogEntry] = field(default_factory=list)

    def add(self, level: str, message: str) -> LogEntry:
        entry = LogEntry(timestamp=datetime.now(), level=level, message=message)
        self.entries.append(entry)
        return entry

    def clear(self) -> None:
        self.entries.clear()

    def render(self) -> str:
        header = f"{LOG_TITLE}\nGenerated: {datetime.now():%Y-%m-%d %H:%M:%S}\n\n"
        return header + "".join(f"{entry.format()}\n" for entry in self.entries)

    def save(self, path: Path) -> Path:
        """Append the rendered log to a file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(self.render())
        return path


class ConsoleReporter:
    """Reporter that echoes through typer and mirrors into an ActivityLog."""

    def __init__(self, log: ActivityLog | None = None, quiet: bool = False):
        self.log = log if log is not None else ActivityLog()
        self.quiet = quiet

    def _emit(self, level: str, message: str, fg: str | None = None, err: bool = False) -> None:
        entry = self.log.add(level, message)
        if self.quiet and level in ("INFO", "SUCCESS"):
            return
        typer.secho(entry.format(), fg=fg, err=err)

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def success(self, message: str) -> None:
        self._emit("SUCCESS", message, fg=typer.colors.GREEN)

    def warn(self, message: str) -> None:
        self._emit("WARN", message, fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        self._emit("ERROR", message, fg=typer.colors.RED, err=True)


class MemoryReporter:
    """Reporter that only keeps (level, message) pairs."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def levels(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]
