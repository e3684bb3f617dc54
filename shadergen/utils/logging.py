"""
Logging Setup
=============

Configures console and optional file logging for the `shadergen` logger.
Library modules only call `logging.getLogger(__name__)`; handlers are
installed here, by the command-line entry points.
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    logger_name: str = 'shadergen'
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Args:
        level: Logging level, as a number or a level name such as "DEBUG".
        log_file: Path of a log file to append to, if any.
        logger_name: Logger to configure.

    Returns:
        The configured logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
