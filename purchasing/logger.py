import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import settings

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO (requests logs every connection).
QUIET_LOGGERS = ("urllib3",)


def _file_handler(log_file: Path, log_level: int | str) -> RotatingFileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"  # 5 MB
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logger(
    name: Optional[str] = None,
    log_level: int | str = settings.LOG_LEVEL,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configures console and rotating-file output for a run.
    With no name the root logger is configured, so every
    logging.getLogger(__name__) in the package reports through it.
    Calling it again only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    # Console stays minimal; the file keeps timestamps and module names.
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logger.addHandler(_file_handler(log_file or settings.LOG_FILE, log_level))

    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
