# utils/logging_config.py
import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_level(level: Union[int, str]) -> int:
    """
    Translate a level name such as "DEBUG" into its numeric value.
    Integers are passed through unchanged.
    """
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return numeric


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Set up logging with a console handler and optionally a file handler.

    Args:
        level: Logging level (e.g., logging.INFO or "DEBUG").
        log_file: Optional path to a file for logging output.
    """
    logger = logging.getLogger()
    logger.setLevel(resolve_level(level))

    # Clear existing handlers to avoid duplicates
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(formatter)
        logger.addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a module logger. Levels are left to setup_logging() so that
    library modules never override the application's configuration.
    """
    return logging.getLogger(name)
