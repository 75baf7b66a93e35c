"""
Tests for the central logging setup.
"""
import logging

import pytest

from core.events import Event, EventKind, EventRegistry
from core.logging import logger as logger_module
from core.logging.logger import (
    LOG_FILE_NAME,
    ColoredFormatter,
    get_logger,
    is_verbose_logging,
    setup_logging,
)
from core.settings import DispatchSettings


@pytest.fixture
def temp_log_dir(tmp_path):
    """Route logging into a temporary directory and undo it afterwards."""
    log_dir = tmp_path / "logs"
    root = logging.getLogger()
    previous_level = root.level
    yield log_dir
    for handler in list(logger_module._INSTALLED_HANDLERS):
        root.removeHandler(handler)
        handler.close()
    logger_module._INSTALLED_HANDLERS.clear()
    logger_module._LOG_DIR = None
    logger_module._VERBOSE = False
    root.setLevel(previous_level)


def _flush():
    for handler in logger_module._INSTALLED_HANDLERS:
        handler.flush()


def test_setup_logging_creates_log_file(temp_log_dir):
    log_file = setup_logging(log_dir=temp_log_dir)

    assert log_file == temp_log_dir / LOG_FILE_NAME
    assert log_file.exists()

    get_logger("tests.logging").info("hello from test")
    _flush()

    text = log_file.read_text(encoding="utf-8")
    assert "logging initialized" in text
    assert "hello from test" in text


def test_setup_logging_replaces_its_handlers(temp_log_dir):
    root = logging.getLogger()

    setup_logging(debug=True, log_dir=temp_log_dir)
    first = list(logger_module._INSTALLED_HANDLERS)
    setup_logging(log_dir=temp_log_dir)

    assert len(logger_module._INSTALLED_HANDLERS) == 1
    for handler in first:
        assert handler not in root.handlers


def test_verbose_flag(temp_log_dir):
    setup_logging(verbose=True, log_dir=temp_log_dir)

    assert is_verbose_logging() is True
    assert logging.getLogger().level == logging.DEBUG


def test_dispatch_is_logged_at_debug(temp_log_dir):
    log_file = setup_logging(debug=True, log_dir=temp_log_dir)
    registry = EventRegistry(DispatchSettings())

    class Emitter:
        pass

    emitter = Emitter()
    registry.add_event_listener(emitter, EventKind.CHANGE, lambda e: None)
    registry.dispatch_event(emitter, Event(EventKind.CHANGE, emitter))
    _flush()

    text = log_file.read_text(encoding="utf-8")
    assert "Added listener" in text
    assert "Dispatching change from Emitter to 1 handler(s)" in text
    registry.clear()


def test_colored_formatter_restores_levelname():
    formatter = ColoredFormatter('%(levelname)s - %(message)s')
    record = logging.LogRecord(
        name="test",
        level=logging.WARNING,
        pathname="",
        lineno=0,
        msg="careful",
        args=(),
        exc_info=None,
    )

    output = formatter.format(record)

    assert "careful" in output
    assert output.startswith(ColoredFormatter.COLORS['WARNING'])
    assert record.levelname == "WARNING"
