# src/config/logging_config.py

"""Per-run timestamped logging configuration for estate_predict.

Each launch creates a dedicated log file inside ``logs/`` named with
the launch timestamp (e.g. ``logs/run_20261019_153045.log``). Every
``estate_predict.*`` logger routes through that file, so catalog
loads, prediction requests and history writes from one session end up
side by side.

The stderr handler is optional: the Textual UI owns the terminal, so
interactive runs keep warnings in the file only.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Resolve the stderr level from settings, defaulting to WARNING."""
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(console: bool = True) -> Path:
    """Initialise the root ``estate_predict`` logger for the current run.

    Args:
        console: Attach a stderr handler in addition to the log file.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("estate_predict")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, CLI after TUI) keep the first run's handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_console_level())
        console_handler.setFormatter(
            logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging initialised (console=%s), log file: %s",
        console,
        log_file,
    )

    return log_file
