import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_FILENAME = "checkgate.log"
LOG_RETENTION_DAYS = 7

CONSOLE_HANDLER_NAME = "checkgate.console"
FILE_HANDLER_NAME = "checkgate.file"


class ISO8601Formatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")


def setup_logging(log_level: str = "INFO", log_to_file: bool = False, log_dir: str = "logs") -> None:
    """
    Root logger to stdout, plus a file under log_dir rotated at midnight when log_to_file is set.

    Handlers are recognised by name, so calling this again only adjusts the level
    and adds the file handler if it was not there yet.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(LOG_LEVEL_MAP.get(log_level.upper(), logging.INFO))

    installed = {handler.get_name() for handler in root_logger.handlers}

    if CONSOLE_HANDLER_NAME not in installed:
        root_logger.addHandler(_prepare(logging.StreamHandler(sys.stdout), CONSOLE_HANDLER_NAME))

    if log_to_file and FILE_HANDLER_NAME not in installed:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            directory / LOG_FILENAME, when="midnight", backupCount=LOG_RETENTION_DAYS, encoding="utf-8"
        )
        root_logger.addHandler(_prepare(file_handler, FILE_HANDLER_NAME))


def _prepare(handler: logging.Handler, name: str) -> logging.Handler:
    handler.set_name(name)
    handler.setFormatter(ISO8601Formatter(LOG_FORMAT))
    return handler
