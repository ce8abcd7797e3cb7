"""Logging setup for shipctl.

All shipctl modules log through loggers under the ``shipctl`` namespace.
The CLI calls ``setup_logging`` once per command based on its verbosity flags.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "shipctl"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a shipctl module.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger nested under the ``shipctl`` namespace.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the shipctl root logger.

    Args:
        verbose: Log at DEBUG level, including SDK loggers
        quiet: Only log errors (takes precedence over verbose)
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    third_party_level = logging.DEBUG if verbose and not quiet else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
