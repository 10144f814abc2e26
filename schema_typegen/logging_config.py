"""Logging setup for schema_typegen.

Modules obtain loggers through :func:`get_logger`; the CLI (or an embedding
application) calls :func:`configure_logging` once to install a handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "schema_typegen"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING,
    rich_output: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Install a handler on the package logger.

    Args:
        level: Log level name or number.
        rich_output: Use rich formatting (stderr) instead of a plain handler.
        console: Optional rich console to log to.

    Returns:
        The configured package logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    if rich_output:
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

    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
    return logger
