from __future__ import annotations

import logging

from birthday_keeper.config_store import ensure_default_config, load_config
from birthday_keeper.console import Console
from birthday_keeper.menu import BirthdayMenu
from birthday_keeper.repository import BirthdayRepository
from birthday_keeper.settings import load_settings

LOGGER = logging.getLogger(__name__)


def resolve_log_level(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=resolve_log_level(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    ensure_default_config(settings.config_path)
    config = load_config(settings.config_path)

    repository = BirthdayRepository(
        settings.database_path,
        leap_day_rule=config.leap_day_rule,
        upcoming_limit=config.upcoming_limit,
    )
    LOGGER.info("Using database %s", repository.db_path)

    console = Console()
    menu = BirthdayMenu(repository, console)
    try:
        menu.run()
    except (EOFError, KeyboardInterrupt):
        console.print("\nGoodbye!")


if __name__ == "__main__":
    main()
