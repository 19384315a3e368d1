"""Runtime settings for eventdesk.

Defaults match the fixed relative file names the program has always used.
Each value can be overridden from the environment (a ``.env`` file is loaded
by the entry point before settings are read).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_USERS_FILE = Path("users.txt")
DEFAULT_EVENTS_FILE = Path("events.txt")
DEFAULT_ADMIN_EMAIL = "@admin"
DEFAULT_LOG_MAX_MB = 10.0


@dataclass
class Settings:
    """Configuration for the repository, admin account and activity log.

    Attributes:
        users_file: Path of the pipe-delimited users file.
        events_file: Path of the pipe-delimited events file.
        admin_email: Email that unlocks the admin menu.
        log_dir: Directory for the activity log (~/.eventdesk/logs if None).
        log_max_size_mb: Size at which the activity log is rotated.
    """

    users_file: Path = DEFAULT_USERS_FILE
    events_file: Path = DEFAULT_EVENTS_FILE
    admin_email: str = DEFAULT_ADMIN_EMAIL
    log_dir: Path | None = None
    log_max_size_mb: float = DEFAULT_LOG_MAX_MB

    def __post_init__(self) -> None:
        if self.log_dir is None:
            self.log_dir = Path.home() / ".eventdesk" / "logs"

        if not self.admin_email:
            raise ValueError("admin_email cannot be empty")

        if self.log_max_size_mb <= 0:
            raise ValueError("log_max_size_mb must be positive")


def _float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Invalid number %r, using default %s", value, default)
        return default
    if parsed <= 0:
        logger.warning("Non-positive number %r, using default %s", value, default)
        return default
    return parsed


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    log_dir = os.getenv("EVENTDESK_LOG_DIR")

    return Settings(
        users_file=Path(os.getenv("EVENTDESK_USERS_FILE") or DEFAULT_USERS_FILE),
        events_file=Path(os.getenv("EVENTDESK_EVENTS_FILE") or DEFAULT_EVENTS_FILE),
        admin_email=os.getenv("EVENTDESK_ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL,
        log_dir=Path(log_dir).expanduser() if log_dir else None,
        log_max_size_mb=_float(os.getenv("EVENTDESK_LOG_MAX_MB"), DEFAULT_LOG_MAX_MB),
    )
