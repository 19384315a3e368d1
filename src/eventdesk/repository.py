"""File-backed storage for users and events.

Both collections live in memory and are written back to two pipe-delimited
text files. Every mutation rewrites both files in full. There is no
partial-write protection: a crash in the middle of ``save()`` can leave one
file truncated while the other is intact.
"""

import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, TypeVar

from .config import Settings
from .models import DEFAULT_ROLE, Event, RecordParseError, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RegistrationOutcome(Enum):
    """Result of registering a user for an event."""

    REGISTERED = "registered"
    ALREADY_REGISTERED = "already_registered"
    EVENT_NOT_FOUND = "event_not_found"


def _read_records(path: Path, parse: Callable[[str], T]) -> list[T]:
    """Parse every line of a file, skipping the ones that don't parse."""
    if not path.exists():
        logger.debug("No data file at %s, starting empty", path)
        return []

    records: list[T] = []
    with open(path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.debug("Skipping %s:%d: %s", path, lineno, e)
                continue
            if not line.strip():
                continue
            try:
                records.append(parse(line))
            except RecordParseError as e:
                logger.debug("Skipping %s:%d: %s", path, lineno, e)
    return records


def _write_records(path: Path, lines: list[str]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")


class Repository:
    """In-memory users and events with whole-file persistence.

    Ids are assigned as ``len(collection) + 1``. After an event is deleted
    the next created event can reuse an id that is still present, or that
    users still carry in their history.
    """

    def __init__(self, users_path: Path, events_path: Path) -> None:
        """Initialize the repository with its two backing files.

        Args:
            users_path: File holding one user per line.
            events_path: File holding one event per line.
        """
        self.users_path = Path(users_path)
        self.events_path = Path(events_path)
        self._users: list[User] = []
        self._events: list[Event] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "Repository":
        return cls(settings.users_file, settings.events_file)

    @property
    def users(self) -> list[User]:
        """All users in registration order."""
        return list(self._users)

    @property
    def events(self) -> list[Event]:
        """All events in creation order."""
        return list(self._events)

    def load(self) -> None:
        """Replace the in-memory collections with the contents of both files.

        Missing files count as empty collections. Malformed lines are skipped.
        """
        self._users = _read_records(self.users_path, User.from_line)
        self._events = _read_records(self.events_path, Event.from_line)
        logger.info(
            "Loaded %d user(s) and %d event(s)", len(self._users), len(self._events)
        )

    def save(self) -> None:
        """Truncate and rewrite both files from the in-memory state."""
        _write_records(self.users_path, [user.to_line() for user in self._users])
        _write_records(self.events_path, [event.to_line() for event in self._events])
        logger.debug(
            "Saved %d user(s) and %d event(s)", len(self._users), len(self._events)
        )

    # Lookups

    def find_user_by_email(self, email: str) -> User | None:
        """Return the first user whose email matches, ignoring case."""
        wanted = email.lower()
        for user in self._users:
            if user.email.lower() == wanted:
                return user
        return None

    def find_event_by_id(self, event_id: int) -> Event | None:
        """Return the first event with the given id."""
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def search_events(self, term: str) -> list[Event]:
        """Events whose title contains term, ignoring case."""
        needle = term.lower()
        return [event for event in self._events if needle in event.title.lower()]

    def search_users(self, term: str) -> list[User]:
        """Users whose name or email contains term, ignoring case."""
        needle = term.lower()
        return [
            user
            for user in self._users
            if needle in user.name.lower() or needle in user.email.lower()
        ]

    def registration_history(self, user: User) -> list[tuple[int, Event | None]]:
        """Pair each id in the user's history with its event.

        Ids of deleted events are kept and paired with None.
        """
        return [(event_id, self.find_event_by_id(event_id)) for event_id in user.event_history]

    # Mutations

    def register_user(self, name: str, email: str, role: str = DEFAULT_ROLE) -> User:
        """Add a user and persist."""
        user = User(id=len(self._users) + 1, name=name, email=email, role=role)
        self._users.append(user)
        self.save()
        return user

    def create_event(self, title: str, description: str, event_date: date) -> Event:
        """Add an event and persist."""
        event = Event(
            id=len(self._events) + 1,
            title=title,
            description=description,
            date=event_date,
        )
        self._events.append(event)
        self.save()
        return event

    def delete_event(self, event_id: int) -> Event | None:
        """Remove an event and persist.

        User histories are left untouched.

        Returns:
            The removed event, or None if no event has that id.
        """
        event = self.find_event_by_id(event_id)
        if event is None:
            return None
        self._events.remove(event)
        self.save()
        return event

    def register_for_event(self, user: User, event_id: int) -> RegistrationOutcome:
        """Append event_id to the user's history if the event exists."""
        if self.find_event_by_id(event_id) is None:
            return RegistrationOutcome.EVENT_NOT_FOUND
        if user.is_registered_for(event_id):
            return RegistrationOutcome.ALREADY_REGISTERED
        user.event_history.append(event_id)
        self.save()
        return RegistrationOutcome.REGISTERED

    def leave_event(self, user: User, event_id: int) -> bool:
        """Drop event_id from the user's history.

        Returns:
            True if the id was in the history, False otherwise.
        """
        if not user.is_registered_for(event_id):
            return False
        user.event_history.remove(event_id)
        self.save()
        return True
