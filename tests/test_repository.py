"""Tests for the file-backed Repository."""

from datetime import date
from pathlib import Path

import pytest

from eventdesk.config import Settings
from eventdesk.models import Event
from eventdesk.repository import RegistrationOutcome, Repository


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """Create an empty Repository backed by temporary files."""
    repository = Repository(tmp_path / "users.txt", tmp_path / "events.txt")
    repository.load()
    return repository


def reload(repository: Repository) -> Repository:
    fresh = Repository(repository.users_path, repository.events_path)
    fresh.load()
    return fresh


class TestRepositoryLoad:
    """Tests for loading from disk."""

    def test_missing_files_are_empty(self, repo: Repository):
        assert repo.users == []
        assert repo.events == []

    def test_loads_valid_lines(self, tmp_path: Path):
        (tmp_path / "users.txt").write_text("1|Alice|a@x.com|User|1\n2|Bob|b@x.com|User|\n")
        (tmp_path / "events.txt").write_text("1|Meetup|d|2025-01-01\n")

        repository = Repository(tmp_path / "users.txt", tmp_path / "events.txt")
        repository.load()

        assert [u.name for u in repository.users] == ["Alice", "Bob"]
        assert repository.users[0].event_history == [1]
        assert repository.events == [
            Event(id=1, title="Meetup", description="d", date=date(2025, 1, 1))
        ]

    def test_skips_malformed_lines(self, tmp_path: Path):
        (tmp_path / "users.txt").write_text(
            "1|Alice|a@x.com|User|\n"
            "garbage\n"
            "\n"
            "x|Bad|id@x.com|User|\n"
            "3|Carol|c@x.com|User|\n"
        )
        (tmp_path / "events.txt").write_text(
            "1|Meetup|d|2025-01-01\n"
            "2|Broken|d|someday\n"
            "3|Too|many|fields|here\n"
        )

        repository = Repository(tmp_path / "users.txt", tmp_path / "events.txt")
        repository.load()

        assert [u.id for u in repository.users] == [1, 3]
        assert [e.id for e in repository.events] == [1]

    def test_skips_lines_that_are_not_utf8(self, tmp_path: Path):
        (tmp_path / "users.txt").write_bytes(
            b"1|Alice|a@x.com|User|\n2|Jos\xe9|j@x.com|User|\n3|Carol|c@x.com|User|2\n"
        )
        (tmp_path / "events.txt").write_bytes(
            b"1|F\xeate|d|2025-01-01\n2|Meetup|d|2025-02-01\n"
        )

        repository = Repository(tmp_path / "users.txt", tmp_path / "events.txt")
        repository.load()

        assert [u.id for u in repository.users] == [1, 3]
        assert repository.users[1].event_history == [2]
        assert [e.title for e in repository.events] == ["Meetup"]

    def test_loads_windows_line_endings(self, tmp_path: Path):
        (tmp_path / "users.txt").write_bytes(b"1|Alice|a@x.com|User|1\r\n")
        (tmp_path / "events.txt").write_bytes(b"1|Meetup|d|2025-01-01\r\n")

        repository = Repository(tmp_path / "users.txt", tmp_path / "events.txt")
        repository.load()

        assert repository.users[0].event_history == [1]
        assert repository.events[0].date == date(2025, 1, 1)

    def test_load_replaces_state(self, repo: Repository):
        repo.register_user("Alice", "a@x.com")
        repo.users_path.write_text("")
        repo.load()
        assert repo.users == []

    def test_from_settings(self, tmp_path: Path):
        settings = Settings(
            users_file=tmp_path / "u.txt",
            events_file=tmp_path / "e.txt",
            log_dir=tmp_path / "logs",
        )
        repository = Repository.from_settings(settings)
        assert repository.users_path == tmp_path / "u.txt"
        assert repository.events_path == tmp_path / "e.txt"


class TestRepositorySave:
    """Tests for whole-file persistence."""

    def test_save_writes_both_files(self, repo: Repository):
        repo.create_event("Meetup", "d", date(2025, 1, 1))
        repo.register_user("Alice", "a@x.com")

        assert repo.users_path.read_text() == "1|Alice|a@x.com|User|\n"
        assert repo.events_path.read_text() == "1|Meetup|d|2025-01-01\n"

    def test_round_trip(self, repo: Repository):
        repo.create_event("Meetup", "Monthly chat", date(2025, 1, 1))
        repo.create_event("Workshop", "Hands-on", date(2025, 2, 14))
        alice = repo.register_user("Alice", "a@x.com")
        repo.register_user("Bob", "b@x.com")
        repo.register_for_event(alice, 2)
        repo.register_for_event(alice, 1)

        loaded = reload(repo)

        assert loaded.users == repo.users
        assert loaded.events == repo.events
        assert loaded.users[0].event_history == [2, 1]

    def test_delimiter_in_free_text_loses_record(self, repo: Repository):
        repo.create_event("Meetup", "a|b", date(2025, 1, 1))
        repo.create_event("Gala", "fine", date(2025, 3, 1))

        loaded = reload(repo)

        assert [e.title for e in loaded.events] == ["Gala"]

    def test_read_only_queries_do_not_write(self, repo: Repository):
        repo.search_events("x")
        repo.search_users("x")
        repo.find_user_by_email("a@x.com")
        repo.find_event_by_id(1)
        assert not repo.users_path.exists()
        assert not repo.events_path.exists()


class TestRepositoryLookup:
    """Tests for find and search operations."""

    def test_find_user_by_email_ignores_case(self, repo: Repository):
        alice = repo.register_user("Alice", "a@x.com")
        assert repo.find_user_by_email("A@X.COM") is alice

    def test_find_user_by_email_returns_first_match(self, repo: Repository):
        first = repo.register_user("Alice", "a@x.com")
        repo.register_user("Alice Again", "a@x.com")
        assert repo.find_user_by_email("a@x.com") is first

    def test_find_user_not_found(self, repo: Repository):
        assert repo.find_user_by_email("nobody@x.com") is None

    def test_find_event_by_id(self, repo: Repository):
        event = repo.create_event("Meetup", "d", date(2025, 1, 1))
        assert repo.find_event_by_id(1) == event
        assert repo.find_event_by_id(2) is None

    def test_search_events_substring_ignores_case(self, repo: Repository):
        repo.create_event("Python Meetup", "d", date(2025, 1, 1))
        repo.create_event("Gala", "d", date(2025, 1, 2))
        repo.create_event("MEETING", "d", date(2025, 1, 3))

        assert [e.id for e in repo.search_events("meet")] == [1, 3]

    def test_search_events_does_not_match_description(self, repo: Repository):
        repo.create_event("Gala", "a meetup", date(2025, 1, 1))
        assert repo.search_events("meetup") == []

    def test_search_events_empty_term_matches_all(self, repo: Repository):
        repo.create_event("A", "d", date(2025, 1, 1))
        repo.create_event("B", "d", date(2025, 1, 2))
        assert len(repo.search_events("")) == 2

    def test_search_users_by_name_or_email(self, repo: Repository):
        repo.register_user("Alice", "alice@example.com")
        repo.register_user("Bob", "bob@corp.io")
        repo.register_user("Carol", "carol@EXAMPLE.com")

        assert [u.name for u in repo.search_users("example")] == ["Alice", "Carol"]
        assert [u.name for u in repo.search_users("BOB")] == ["Bob"]
        assert repo.search_users("zed") == []


class TestRepositoryMutations:
    """Tests for registration, creation and deletion."""

    def test_ids_are_count_plus_one(self, repo: Repository):
        assert repo.register_user("Alice", "a@x.com").id == 1
        assert repo.register_user("Bob", "b@x.com").id == 2
        assert repo.create_event("A", "d", date(2025, 1, 1)).id == 1
        assert repo.create_event("B", "d", date(2025, 1, 2)).id == 2

    def test_register_user_defaults(self, repo: Repository):
        user = repo.register_user("Alice", "a@x.com")
        assert user.role == "User"
        assert user.event_history == []

    def test_register_for_event(self, repo: Repository):
        repo.create_event("Meetup", "d", date(2025, 1, 1))
        user = repo.register_user("Alice", "a@x.com")

        assert repo.register_for_event(user, 1) is RegistrationOutcome.REGISTERED
        assert user.event_history == [1]
        assert reload(repo).users[0].event_history == [1]

    def test_register_twice_is_idempotent(self, repo: Repository):
        repo.create_event("Meetup", "d", date(2025, 1, 1))
        user = repo.register_user("Alice", "a@x.com")
        repo.register_for_event(user, 1)

        assert repo.register_for_event(user, 1) is RegistrationOutcome.ALREADY_REGISTERED
        assert user.event_history == [1]

    def test_register_for_missing_event(self, repo: Repository):
        user = repo.register_user("Alice", "a@x.com")
        assert repo.register_for_event(user, 9) is RegistrationOutcome.EVENT_NOT_FOUND
        assert user.event_history == []

    def test_leave_event(self, repo: Repository):
        repo.create_event("Meetup", "d", date(2025, 1, 1))
        user = repo.register_user("Alice", "a@x.com")
        repo.register_for_event(user, 1)

        assert repo.leave_event(user, 1) is True
        assert user.event_history == []
        assert reload(repo).users[0].event_history == []

    def test_leave_event_not_registered(self, repo: Repository):
        user = repo.register_user("Alice", "a@x.com")
        assert repo.leave_event(user, 1) is False

    def test_delete_event(self, repo: Repository):
        event = repo.create_event("Meetup", "d", date(2025, 1, 1))
        assert repo.delete_event(1) == event
        assert repo.find_event_by_id(1) is None
        assert reload(repo).events == []

    def test_delete_missing_event(self, repo: Repository):
        assert repo.delete_event(1) is None

    def test_delete_leaves_stale_history(self, repo: Repository):
        repo.create_event("Meetup", "d", date(2025, 1, 1))
        user = repo.register_user("Alice", "a@x.com")
        repo.register_for_event(user, 1)

        repo.delete_event(1)

        assert user.event_history == [1]
        assert repo.registration_history(user) == [(1, None)]
        assert repo.leave_event(user, 1) is True

    def test_ids_can_collide_after_delete(self, repo: Repository):
        repo.create_event("A", "d", date(2025, 1, 1))
        repo.create_event("B", "d", date(2025, 1, 2))
        repo.delete_event(1)

        created = repo.create_event("C", "d", date(2025, 1, 3))

        assert created.id == 2
        assert [e.id for e in repo.events] == [2, 2]

    def test_registration_history_pairs_events(self, repo: Repository):
        first = repo.create_event("A", "d", date(2025, 1, 1))
        second = repo.create_event("B", "d", date(2025, 1, 2))
        user = repo.register_user("Alice", "a@x.com")
        repo.register_for_event(user, 2)
        repo.register_for_event(user, 1)

        assert repo.registration_history(user) == [(2, second), (1, first)]

    def test_snapshots_are_copies(self, repo: Repository):
        repo.register_user("Alice", "a@x.com")
        repo.users.clear()
        assert len(repo.users) == 1


class TestScenario:
    """End-to-end repository scenario."""

    def test_meetup_lifecycle(self, repo: Repository):
        event = repo.create_event("Meetup", "d", date(2025, 1, 1))
        assert event.id == 1

        alice = repo.register_user("Alice", "a@x.com")
        assert alice.id == 1
        assert alice.role == "User"

        repo.register_for_event(alice, 1)
        assert alice.event_history == [1]

        repo.leave_event(alice, 1)
        assert alice.event_history == []

        assert repo.search_events("meet") == [event]

        repo.register_for_event(alice, 1)
        repo.delete_event(1)
        assert repo.find_event_by_id(1) is None
        assert alice.event_history == [1]
