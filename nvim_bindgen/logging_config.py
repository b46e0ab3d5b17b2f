"""Logging setup for nvim_bindgen.

Every module obtains its logger through :func:`get_logger` so that all
records live under the ``nvim_bindgen`` namespace. The CLI calls
:func:`setup_logging` once to route them through rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "nvim_bindgen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: int = logging.WARNING, debug: bool = False) -> None:
    """Configure package logging with a rich handler.

    Args:
        level: Log level for the package logger.
        debug: Show source paths next to each record.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    rich_handler = RichHandler(
        level=level,
        console=Console(stderr=True),
        show_time=False,
        show_level=True,
        show_path=debug,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger.addHandler(rich_handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
