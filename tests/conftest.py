"""
Shared pytest fixtures for event dispatcher tests.
"""
import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def event_registry():
    """Create an isolated EventRegistry for testing."""
    from core.events import EventRegistry
    from core.settings import DispatchSettings
    registry = EventRegistry(DispatchSettings())
    yield registry
    registry.clear()


@pytest.fixture(autouse=True)
def default_registry():
    """Give every test a fresh process-wide registry."""
    from core.events import reset_event_registry
    from core.settings import DispatchSettings
    registry = reset_event_registry(DispatchSettings())
    yield registry
    registry.clear()
