from __future__ import annotations

import logging
from pathlib import Path

from textual.logging import TextualHandler  # type: ignore[import]

from .config import LoggingSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def configure_logging(settings: LoggingSettings, *, debug: bool = False) -> None:
    """Route stdlib logging into the Textual console and, optionally, a log file.

    Writing to stdout would corrupt the terminal UI, so the only console
    handler is Textual's own.
    """
    root_logger = logging.getLogger()
    level = logging.DEBUG if debug else getattr(logging, settings.level.upper(), logging.WARNING)
    root_logger.setLevel(level)
    if any(isinstance(handler, TextualHandler) for handler in root_logger.handlers):
        return
    root_logger.addHandler(TextualHandler())
    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)
    logging.debug("Logging initialized at %s", logging.getLevelName(level))
