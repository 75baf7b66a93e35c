"""Event dispatching: registry, capability mixin and observable values."""

from .event_types import Event, EventHandler, EventKind
from .event_system import (
    ALL_KINDS,
    EventRegistry,
    add_event_listener,
    dispatch_event,
    get_event_registry,
    remove_event_listener,
    reset_event_registry,
)
from .dispatcher import Dispatcher, EventDispatcher
from .dispatching_value import DispatchingValue

__all__ = [
    'Event',
    'EventHandler',
    'EventKind',
    'ALL_KINDS',
    'EventRegistry',
    'add_event_listener',
    'dispatch_event',
    'get_event_registry',
    'remove_event_listener',
    'reset_event_registry',
    'Dispatcher',
    'EventDispatcher',
    'DispatchingValue',
]
