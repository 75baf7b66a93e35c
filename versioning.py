"""Centralised version and naming information for the event dispatcher.

Single source of truth for the name and version reported at runtime; keep
APP_VERSION in step with the version in pyproject.toml.
"""
from __future__ import annotations


APP_NAME: str = "EventDispatcher"
APP_VERSION: str = "1.0.0"
