"""Logging configuration for the Waypoint CLI."""

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from waypoint.config.schema import LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    config: "LoggingConfig | None" = None,
    verbose: bool = False,
    console: Console | None = None,
) -> None:
    """
    Install handlers on the waypoint logger.

    Console output goes through rich; an optional file handler records
    everything at DEBUG.

    Args:
        config: Logging section of the configuration.
        verbose: Force DEBUG on the console.
        console: Console for the rich handler (stderr by default).
    """
    level_name = "DEBUG" if verbose else (config.level if config else "WARNING")
    level = logging.getLevelName(level_name)

    root = logging.getLogger("waypoint")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setLevel(level)
    root.addHandler(rich_handler)

    root_level = level
    if config is not None and config.file is not None:
        config.file.expanduser().parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.file.expanduser(), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)
        root_level = logging.DEBUG

    root.setLevel(root_level)
    root.propagate = False
