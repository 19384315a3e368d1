"""Data models for users, admins and events.

Each record knows how to render itself as one pipe-delimited line and how to
parse that line back. The line format is what the repository writes to
``users.txt`` and ``events.txt``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

FIELD_SEPARATOR = "|"
HISTORY_SEPARATOR = ","
DEFAULT_ROLE = "User"

# Written by older releases of the program (US short date + long time).
LEGACY_DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"

INPUT_DATE_FORMAT = "%Y-%m-%d"


class RecordParseError(Exception):
    """Raised when a stored line cannot be turned into a record."""

    pass


def _parse_id(raw: str, line: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise RecordParseError(f"Invalid id {raw!r} in line: {line!r}") from e


def parse_event_date(raw: str) -> date:
    """Parse a stored event date.

    Accepts ISO dates (``2025-01-01``), ISO datetimes (the date part is kept)
    and the legacy ``1/1/2025 12:00:00 AM`` format.

    Raises:
        ValueError: If no known format matches.
    """
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    return datetime.strptime(text, LEGACY_DATE_FORMAT).date()


def parse_input_date(raw: str) -> date:
    """Parse a date typed at the ``yyyy-mm-dd`` prompt.

    Zero padding is optional (``2025-1-1``); ISO week and basic forms such
    as ``20250101`` are rejected.

    Raises:
        ValueError: If the text is not year-month-day.
    """
    return datetime.strptime(raw.strip(), INPUT_DATE_FORMAT).date()


@dataclass
class User:
    """A registered user.

    Attributes:
        id: Sequential id assigned at registration.
        name: Display name.
        email: Login identifier, compared case-insensitively.
        role: Free-form role label, "User" for everyone registered via the shell.
        event_history: Ids of events the user registered for, in order.
    """

    id: int
    name: str
    email: str
    role: str = DEFAULT_ROLE
    event_history: list[int] = field(default_factory=list)

    def is_registered_for(self, event_id: int) -> bool:
        """Check if the event id is in the history."""
        return event_id in self.event_history

    def to_line(self) -> str:
        """Serialize to ``id|name|email|role|ids``."""
        history = HISTORY_SEPARATOR.join(str(event_id) for event_id in self.event_history)
        return FIELD_SEPARATOR.join(
            [str(self.id), self.name, self.email, self.role, history]
        )

    @classmethod
    def from_line(cls, line: str) -> "User":
        """Parse a stored user line.

        The history column is optional. Duplicate history ids are collapsed,
        keeping the first occurrence.

        Raises:
            RecordParseError: On a wrong field count or non-integer ids.
        """
        parts = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(parts) not in (4, 5):
            raise RecordParseError(
                f"Expected 4 or 5 fields, got {len(parts)}: {line!r}"
            )

        history: list[int] = []
        if len(parts) == 5:
            for raw in parts[4].split(HISTORY_SEPARATOR):
                if not raw.strip():
                    continue
                event_id = _parse_id(raw.strip(), line)
                if event_id not in history:
                    history.append(event_id)

        return cls(
            id=_parse_id(parts[0], line),
            name=parts[1],
            email=parts[2],
            role=parts[3],
            event_history=history,
        )


@dataclass(frozen=True)
class Admin:
    """The single administrator account. Never persisted."""

    id: int
    name: str
    email: str

    def matches(self, email: str) -> bool:
        """Case-insensitive comparison against the admin email."""
        return email.lower() == self.email.lower()

    def to_line(self) -> str:
        return FIELD_SEPARATOR.join([str(self.id), self.name, self.email, "Admin"])


@dataclass(frozen=True)
class Event:
    """An event users can register for."""

    id: int
    title: str
    description: str
    date: date

    def to_line(self) -> str:
        """Serialize to ``id|title|description|YYYY-MM-DD``."""
        return FIELD_SEPARATOR.join(
            [str(self.id), self.title, self.description, self.date.isoformat()]
        )

    @classmethod
    def from_line(cls, line: str) -> "Event":
        """Parse a stored event line.

        Raises:
            RecordParseError: On a wrong field count, non-integer id or
                unparsable date.
        """
        parts = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(parts) != 4:
            raise RecordParseError(f"Expected 4 fields, got {len(parts)}: {line!r}")

        event_id = _parse_id(parts[0], line)
        try:
            event_date = parse_event_date(parts[3])
        except ValueError as e:
            raise RecordParseError(f"Invalid date {parts[3]!r} in line: {line!r}") from e

        return cls(id=event_id, title=parts[1], description=parts[2], date=event_date)
