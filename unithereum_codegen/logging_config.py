"""Logging setup shared by the library and the CLI.

Library modules only call :func:`get_logger`; handlers are installed by the
CLI through :func:`setup_logging`.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "unithereum_codegen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package logger."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> None:
    """Attach a rich handler to the package logger.

    Args:
        level: Logging level name or number.
        console: Console to log to (stderr console when omitted).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level)
