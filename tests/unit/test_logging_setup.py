"""Tests for logging configuration."""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from waypoint.config.schema import LoggingConfig
from waypoint.logging_setup import configure_logging


@pytest.fixture
def waypoint_logger():
    logger = logging.getLogger("waypoint")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_handler_level(self, waypoint_logger):
        configure_logging(LoggingConfig(level="ERROR"))

        handlers = waypoint_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
        assert handlers[0].level == logging.ERROR
        assert waypoint_logger.propagate is False

    def test_verbose_forces_debug(self, waypoint_logger):
        configure_logging(LoggingConfig(level="ERROR"), verbose=True)

        assert waypoint_logger.handlers[0].level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self, waypoint_logger):
        configure_logging()
        configure_logging()

        assert len(waypoint_logger.handlers) == 1

    def test_file_handler_records_debug(self, waypoint_logger, temp_dir):
        log_file = temp_dir / "logs" / "waypoint.log"
        console_output = io.StringIO()
        configure_logging(
            LoggingConfig(level="WARNING", file=log_file),
            console=Console(file=console_output),
        )

        logging.getLogger("waypoint.tools.dispatcher").debug("dispatching read_file")
        for handler in waypoint_logger.handlers:
            handler.flush()

        assert "dispatching read_file" in log_file.read_text()
        assert "dispatching read_file" not in console_output.getvalue()
