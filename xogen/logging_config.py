"""Logging configuration for xogen.

All modules obtain their logger through :func:`get_logger` so that output
is namespaced under ``xogen`` and can be routed through a rich console
handler by :func:`setup_logging`.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "xogen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``xogen`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: int | str = logging.INFO,
    use_rich: bool = True,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Configure the package root logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Logging level for the ``xogen`` logger.
        use_rich: Render records through ``rich.logging.RichHandler``.
        console: Optional rich console (defaults to stderr).

    Returns:
        The configured root package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    logger.propagate = False

    return logger
