# File: qoe/utils/logging_utils.py

"""
Logging setup shared by the engine, the CLI and the tests.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by whoever owns the process.
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str = "qoe", log_dir: Optional[Union[str, Path]] = None,
                 level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Configure a named logger with a console handler and, optionally, a file handler.

    Args:
        name: Logger name; "qoe" configures every engine module
        log_dir: Directory for ``<name>.log``; no file output when None
        level: Logging level name or number

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    # Re-running setup replaces handlers instead of stacking duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / f"{name}.log")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``qoe`` hierarchy, so ``setup_logger()`` covers it."""
    if name != "qoe" and not name.startswith("qoe."):
        name = f"qoe.{name}"
    return logging.getLogger(name)
