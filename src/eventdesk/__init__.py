"""eventdesk: console event-registration manager."""

from .config import Settings, load_settings
from .models import Admin, Event, RecordParseError, User
from .repository import RegistrationOutcome, Repository
from .shell import Shell

__version__ = "0.1.0"

__all__ = [
    "Admin",
    "Event",
    "RecordParseError",
    "RegistrationOutcome",
    "Repository",
    "Settings",
    "Shell",
    "User",
    "load_settings",
]
