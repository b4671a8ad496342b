"""Logging setup: console output plus an optional log file."""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "INFO", log_file: Path | None = None) -> None:
    """Configure root logging for the alarmhorn process.

    Args:
        level: Log level name or number
        log_file: Optional file receiving the same records as the console

    Raises:
        ValueError: If the level name is unknown.
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # google-cloud clients are chatty at DEBUG
    if level > logging.DEBUG:
        logging.getLogger("google").setLevel(logging.WARNING)
