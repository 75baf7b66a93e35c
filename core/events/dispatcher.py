"""
The Dispatcher capability: anything that can add, remove and dispatch
event listeners on itself.
"""
from typing import Any, ClassVar, Optional, Protocol, Union, runtime_checkable

from core.events.event_system import EventRegistry, HandlerLike, get_event_registry
from core.events.event_types import Event, EventHandler, EventKind


@runtime_checkable
class Dispatcher(Protocol):
    """Structural type for emitters."""

    def add_event_listener(self, kind: Any, handler: HandlerLike) -> str: ...

    def remove_event_listener(self, kind: Any, handler: Union[EventHandler, str]) -> bool: ...

    def dispatch_event(self, event: Event) -> int: ...


class EventDispatcher:
    """
    Mixin granting the Dispatcher capability.

    Nothing is stored on the instance: listeners are kept in an
    EventRegistry keyed by the instance. Subclasses may set
    ``event_registry`` to use a specific registry instead of the
    process-wide one.
    """

    event_registry: ClassVar[Optional[EventRegistry]] = None

    def _registry(self) -> EventRegistry:
        return type(self).event_registry or get_event_registry()

    def add_event_listener(self, kind: Any, handler: HandlerLike) -> str:
        return self._registry().add_event_listener(self, kind, handler)

    def remove_event_listener(self, kind: Any, handler: Union[EventHandler, str]) -> bool:
        return self._registry().remove_event_listener(self, kind, handler)

    def dispatch_event(self, event: Event) -> int:
        return self._registry().dispatch_event(self, event)

    def dispatch_change(self) -> int:
        return self.dispatch_event(Event(EventKind.CHANGE, self))

    def dispatch_tap(self) -> int:
        return self.dispatch_event(Event(EventKind.TAP, self))
