"""Logging setup for builds: Rich on the console, plain text in the log file."""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = "inkpage"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Console output goes to stderr through Rich at ``level``. When a log
    file is given it always receives DEBUG records, so the logger itself
    is opened up to DEBUG.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)
    logger.handlers.clear()

    # Post titles and paths may contain square brackets
    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """Logs the start, end and duration of a build stage."""

    def __init__(self, logger: logging.Logger, stage: str):
        self.logger = logger
        self.stage = stage
        self.started = 0.0

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started

    def __enter__(self):
        self.started = time.perf_counter()
        self.logger.info(f"Starting: {self.stage}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(f"Failed: {self.stage} - {exc_val}")
        else:
            self.logger.info(f"Completed: {self.stage} ({self.elapsed:.2f}s)")
        return False
