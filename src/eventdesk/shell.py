"""Interactive menu shell for eventdesk."""

import shutil
import sys
from typing import Callable

from .logging import JSONLLogger, get_logger
from .models import Admin, Event, User, parse_input_date
from .repository import RegistrationOutcome, Repository

CYAN = "\033[36m"
RESET = "\033[0m"
CLEAR_SCREEN = "\033[2J\033[H"
RULE = "=" * 40

InputFunc = Callable[[str], str]
MenuOptions = dict[str, tuple[str, Callable[[], None] | None]]


def format_event(event: Event) -> str:
    return f"ID: {event.id}, Title: {event.title}, Date: {event.date.isoformat()}"


def format_user(user: User) -> str:
    return f"ID: {user.id}, Name: {user.name}, Email: {user.email}"


def format_user_match(user: User) -> str:
    return f"ID: {user.id} - {user.name} ({user.email})"


class Shell:
    """Numbered-menu console interface over a Repository.

    Main menu -> user login -> user menu, or admin login -> admin menu.
    Sub-menus return to the main menu on logout; the program ends from the
    main menu's Exit option or at end of input.
    """

    def __init__(
        self,
        repository: Repository,
        admin: Admin,
        logger: JSONLLogger | None = None,
        input_func: InputFunc | None = None,
    ) -> None:
        self.repository = repository
        self.admin = admin
        self.logger = logger or get_logger()
        self._input: InputFunc = input_func or input

    # Rendering helpers

    def _center(self, text: str) -> str:
        width = shutil.get_terminal_size((80, 24)).columns
        padding = max((width - len(text)) // 2, 0)
        return " " * padding + text

    def _clear(self) -> None:
        if sys.stdout.isatty():
            print(CLEAR_SCREEN, end="")

    def _print_header(self, title: str) -> None:
        print(CYAN + self._center(RULE))
        print(self._center(f"          {title}"))
        print(self._center(RULE) + RESET)

    def _say(self, message: str) -> None:
        print(self._center(message))

    def _screen(self, title: str) -> None:
        self._clear()
        self._print_header(title)

    def _pause(self, message: str = "Press Enter to continue...") -> None:
        self._input(f"\n{message}")

    def _read_int(self, prompt: str, screen: str) -> int | None:
        """Prompt for an integer. Reports and returns None on bad input."""
        raw = self._input(prompt).strip()
        try:
            return int(raw)
        except ValueError:
            self._say("Invalid event ID.")
            self.logger.log_invalid_input(screen, raw)
            return None

    def _menu_loop(self, title: str, options: MenuOptions) -> None:
        """Show a menu until an option without a handler is picked."""
        while True:
            self._screen(title)
            for key, (label, _) in options.items():
                self._say(f"{key}. {label}")

            choice = self._input(f"\nSelect an option (1-{len(options)}): ").strip()
            if choice not in options:
                self.logger.log_invalid_input(title, choice)
                self._pause("Invalid choice! Press Enter to try again.")
                continue

            _, handler = options[choice]
            if handler is None:
                return
            handler()

    # Menus

    def run(self) -> None:
        """Run the interactive shell until Exit or end of input."""
        self.logger.log("session_start")
        try:
            self._menu_loop(
                "Event Management System",
                {
                    "1": ("Register User", self.register_user),
                    "2": ("Login", self.user_login),
                    "3": ("Admin Login", self.admin_login),
                    "4": ("Exit", None),
                },
            )
        except (KeyboardInterrupt, EOFError):
            print()
        finally:
            self.logger.set_actor(None)
            self.logger.log("session_end")
        print("Goodbye!")

    def user_menu(self, user: User) -> None:
        self._menu_loop(
            "User Menu",
            {
                "1": ("View All Events", self.view_all_events),
                "2": ("Register for an Event", lambda: self.register_for_event(user)),
                "3": ("Search Events", self.search_events),
                "4": ("View Registration History", lambda: self.view_history(user)),
                "5": ("Leave an Event", lambda: self.leave_event(user)),
                "6": ("Logout", None),
            },
        )

    def admin_menu(self) -> None:
        self._menu_loop(
            "Admin Menu",
            {
                "1": ("View All Users", self.view_all_users),
                "2": ("View All Events", self.view_all_events),
                "3": ("Create an Event", self.create_event),
                "4": ("Delete an Event", self.delete_event),
                "5": ("Search Events", self.search_events),
                "6": ("Search Users", self.search_users),
                "7": ("Logout", None),
            },
        )

    # Main menu screens

    def register_user(self) -> None:
        self._screen("Register User")
        name = self._input("Enter your name: ")
        email = self._input("Enter your email: ")

        user = self.repository.register_user(name, email)
        self.logger.log("user_registered", actor=user.email, user_id=user.id)
        self._say(f"User registered successfully! Your user ID is {user.id}.")
        self._pause()

    def user_login(self) -> None:
        self._screen("User Login")
        email = self._input("Enter your email: ")

        user = self.repository.find_user_by_email(email)
        if user is None:
            self.logger.log_login(email, success=False)
            self._say("User not found, please register.")
            self._pause()
            return

        self.logger.log_login(user.email, success=True)
        self.logger.set_actor(user.email)
        try:
            self.user_menu(user)
        finally:
            self.logger.set_actor(None)

    def admin_login(self) -> None:
        self._screen("Admin Login")
        email = self._input("Enter admin email: ")

        if not self.admin.matches(email):
            self.logger.log_login(email, success=False, admin=True)
            self._say("Invalid admin credentials.")
            self._pause()
            return

        self.logger.log_login(self.admin.email, success=True, admin=True)
        self.logger.set_actor(self.admin.email)
        try:
            self.admin_menu()
        finally:
            self.logger.set_actor(None)

    # Shared screens

    def view_all_events(self) -> None:
        self._screen("All Events")
        events = self.repository.events
        if not events:
            self._say("No events available.")
        for event in events:
            self._say(format_event(event))
        self._pause()

    def search_events(self) -> None:
        self._screen("Search Events")
        term = self._input("Enter search term (title): ")

        found = self.repository.search_events(term)
        if not found:
            self._say("No events found with that title.")
        for event in found:
            self._say(format_event(event))
        self._pause()

    # User screens

    def register_for_event(self, user: User) -> None:
        self._screen("Register for Event")
        event_id = self._read_int("Enter the event ID to register: ", "Register for Event")
        if event_id is not None:
            outcome = self.repository.register_for_event(user, event_id)
            if outcome is RegistrationOutcome.EVENT_NOT_FOUND:
                self._say("Event not found.")
            elif outcome is RegistrationOutcome.ALREADY_REGISTERED:
                self._say("You are already registered for this event.")
            else:
                event = self.repository.find_event_by_id(event_id)
                assert event is not None
                self.logger.log("event_joined", user_id=user.id, event_id=event_id)
                self._say(f"Successfully registered for the event: {event.title}.")
        self._pause()

    def view_history(self, user: User) -> None:
        self._screen("Event Registration History")
        history = self.repository.registration_history(user)
        if not history:
            self._say("You have not registered for any events.")
        for event_id, event in history:
            if event is None:
                self._say(f"ID: {event_id} (event no longer available)")
            else:
                self._say(format_event(event))
        self._pause()

    def leave_event(self, user: User) -> None:
        self._screen("Leave an Event")
        event_id = self._read_int("Enter the event ID to leave: ", "Leave an Event")
        if event_id is not None:
            if self.repository.leave_event(user, event_id):
                self.logger.log("event_left", user_id=user.id, event_id=event_id)
                self._say("You have successfully left the event.")
            else:
                self._say("You are not registered for this event.")
        self._pause()

    # Admin screens

    def view_all_users(self) -> None:
        self._screen("All Users")
        users = self.repository.users
        if not users:
            self._say("No users registered.")
        for user in users:
            self._say(format_user(user))
        self._pause()

    def create_event(self) -> None:
        self._screen("Create Event")
        title = self._input("Enter the event title: ").strip()
        description = self._input("Enter the event description: ").strip()
        raw_date = self._input("Enter the event date (yyyy-mm-dd): ").strip()

        try:
            event_date = parse_input_date(raw_date)
        except ValueError:
            self.logger.log_invalid_input("Create Event", raw_date)
            self._say("Invalid date format.")
        else:
            event = self.repository.create_event(title, description, event_date)
            self.logger.log("event_created", event_id=event.id, title=event.title)
            self._say(f"Event created successfully! (ID: {event.id})")
        self._pause()

    def delete_event(self) -> None:
        self._screen("Delete Event")
        event_id = self._read_int("Enter the event ID to delete: ", "Delete Event")
        if event_id is not None:
            event = self.repository.delete_event(event_id)
            if event is None:
                self._say("Event not found.")
            else:
                self.logger.log("event_deleted", event_id=event.id, title=event.title)
                self._say("Event deleted successfully!")
        self._pause()

    def search_users(self) -> None:
        self._screen("Search Users")
        term = self._input("Enter search term (name or email): ")

        found = self.repository.search_users(term)
        if not found:
            self._say("No users found.")
        for user in found:
            self._say(format_user_match(user))
        self._pause()
