# snippet_autocompleter/utils/logger_utils.py - logging setup and performance metrics

import logging
import os
import time
from datetime import datetime
from typing import Optional

from rich.logging import RichHandler

# Directory where all log files will be stored
LOG_DIR = "logs"

# Path to the default log file, can be overriden
DEFAULT_LOG_PATH = os.path.join(LOG_DIR, "autocompleter.log")

LOGGER_NAME = "snippet_autocompleter"

_configured = False


def setup_logging(level: int = logging.INFO, path: Optional[str] = None, console: bool = True) -> logging.Logger:
    """
    Configure the package logger once.
    Console output goes through rich, file output is plain and append-only:
        [YYYY-MM-DD HH:MM:SS] LEVEL   | name | message
    Calling it again only adjusts the level.
    """
    global _configured
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if _configured:
        return root

    path = path or DEFAULT_LOG_PATH
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)  # Create the folder if it doesn't already exist

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)-7s | %(name)s | %(message)s", "%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(file_handler)

    if console:
        root.addHandler(RichHandler(show_path=False, markup=False, rich_tracebacks=True))

    _configured = True
    return root


class Log:
    """Thin facade over the package logger plus metric helpers."""

    _logger = logging.getLogger(LOGGER_NAME)

    @classmethod
    def write(cls, msg: str) -> None:
        cls._logger.info(msg)

    @classmethod
    def warning(cls, msg: str) -> None:
        cls._logger.warning(msg)

    @classmethod
    def metric(cls, tag: str, value, unit: str = "") -> None:
        """
        Record a metric (like timing, counts, or performance stats).
        Example: [12:45:02] rank_completions: 1.234ms
        """
        ts = datetime.now().strftime("%H:%M:%S")
        cls._logger.debug(f"[{ts}] {tag}: {value}{unit}")

    @staticmethod
    def time_block(label: str, budget_ms: Optional[float] = None) -> "_Timer":
        """
        Helper for measuring execution time of a code block.
        To use:
            with Log.time_block("rank_completions", budget_ms=10):
                do_some_work()
        The duration is recorded as a metric; going over the budget logs a warning.
        """
        return _Timer(label, budget_ms)


class _Timer:
    """Context manager used internally to measure time for a code block."""

    def __init__(self, label: str, budget_ms: Optional[float] = None):
        self.label = label
        self.budget_ms = budget_ms
        self.elapsed_ms = 0.0
        self.start = time.perf_counter()

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed_ms = round((time.perf_counter() - self.start) * 1000, 3)
        Log.metric(self.label, self.elapsed_ms, "ms")
        if self.budget_ms is not None and self.elapsed_ms > self.budget_ms:
            Log.warning(f"{self.label} took {self.elapsed_ms:.2f}ms (target: <{self.budget_ms:g}ms)")
        return False
