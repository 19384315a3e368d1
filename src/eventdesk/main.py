"""eventdesk entry point."""

from dotenv import find_dotenv, load_dotenv

from .config import load_settings
from .logging import configure_logger
from .models import Admin
from .repository import Repository
from .shell import Shell


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    settings = load_settings()
    logger = configure_logger(settings.log_dir, max_size_mb=settings.log_max_size_mb)

    repository = Repository.from_settings(settings)
    repository.load()

    admin = Admin(id=1, name="Admin", email=settings.admin_email)
    Shell(repository, admin, logger=logger).run()


if __name__ == "__main__":
    main()
