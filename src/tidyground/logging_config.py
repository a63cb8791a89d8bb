"""Logging Configuration

Sets up the logger of the ``tidyground`` namespace.

Library modules only ever get their own logger through
``logging.getLogger(__name__)``, handlers are installed
by the command line tools through :func:`setup_logging`.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """Configure the logger for the ``tidyground`` namespace.

    Logs are written to stderr, so that they never mix
    with documents printed on stdout.

    :param level: Logging level (e.g. logging.DEBUG, logging.INFO)
    :param log_file: Optional path to also save logs to a file.
    """
    logger = logging.getLogger("tidyground")
    logger.setLevel(level)

    # Avoid duplicate logs when configured more than once.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
