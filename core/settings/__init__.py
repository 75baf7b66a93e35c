"""Configuration for the event dispatcher."""

from .dispatch_settings import DispatchSettings, to_bool

__all__ = ['DispatchSettings', 'to_bool']
