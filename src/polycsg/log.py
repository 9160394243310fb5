"""Logging setup for polyCSG.

The library itself only ever calls ``logging.getLogger(__name__)``;
applications that want to see its output call :func:`setup_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = 'polycsg'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int | str = logging.INFO,
                  log_file: str | Path | None = None) -> logging.Logger:
    """Configure the ``polycsg`` logger namespace.

    Parameters
    ----------
    level : int or str
        Logging level, e.g. ``logging.DEBUG`` or ``'DEBUG'``.
    log_file : str or path-like, optional
        If given, log records are also written to this file.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f'unknown logging level {level!r}')
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # repeated calls replace, not stack, handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


__all__ = ['LOGGER_NAME', 'LOG_FORMAT', 'setup_logging']
