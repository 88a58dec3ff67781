"""Logging setup shared by the CLI and any embedding application."""

import logging
import sys

from motopsy_config.settings import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging.

    Sets up:
    - Console output with timestamps and module names
    - Configurable log level for motopsy modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    settings = settings or get_settings()
    log_level_str = settings.log_level.upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("motopsy_identity").setLevel(log_level)
    logging.getLogger("motopsy_config").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
