"""Logging setup — Rich console handler plus a log file in the output directory."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE = "gitdetect.log"
LOGGER_NAME = "gitdetect"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def init_logging(output_dir: Path, *, verbose: bool = False) -> Path:
    """Send ``gitdetect.*`` records to stderr and to ``<output_dir>/gitdetect.log``.

    Safe to call more than once; handlers from an earlier call are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
    )
    logger.addHandler(console_handler)

    log_path = Path(output_dir) / LOG_FILE
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(file_handler)

    return log_path
