"""JSONL activity log for shell sessions."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single activity log entry."""

    timestamp: str
    event: str
    actor: str | None = None
    user_id: int | None = None
    event_id: int | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured activity records in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "activity.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".eventdesk" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_actor: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_actor(self, actor: str | None) -> None:
        """Set the logged-in email for all subsequent logs."""
        self._current_actor = actor

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        actor: str | None = None,
        user_id: int | None = None,
        event_id: int | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an activity."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            actor=actor or self._current_actor,
            user_id=user_id,
            event_id=event_id,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_login(self, email: str, success: bool, *, admin: bool = False) -> None:
        """Log a user or admin login attempt."""
        kind = "admin_login" if admin else "login"
        if success:
            self.log(kind, actor=email)
        else:
            self.log(f"{kind}_failed", actor=email, error="unknown email")

    def log_invalid_input(self, screen: str, value: str) -> None:
        """Log input rejected by a shell screen."""
        self.log("invalid_input", screen=screen, value=value)


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
