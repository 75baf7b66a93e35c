"""
Event registry implementation for the event dispatcher.

Listener sets live in a side table keyed by emitter identity rather than on
the emitter itself, so any weak-referenceable object (including third-party
Qt controls) can dispatch events. The registry holds only weak references
to emitters; an emitter's entry is dropped once the emitter is collected.
"""
from contextlib import nullcontext
from typing import Any, Callable, Dict, List, Optional, Union
import threading
import weakref

from core.events.event_types import Event, EventHandler, EventKind
from core.logging.logger import get_logger, is_verbose_logging
from core.settings.dispatch_settings import DispatchSettings

logger = get_logger(__name__)

HandlerLike = Union[EventHandler, Callable[[Event], None]]

# Default for the kind argument of the introspection helpers: every kind.
# Any hashable value, None included, can be a real kind.
ALL_KINDS: Any = object()


class _Listener:
    """One registration: its own handler plus the id of the handler it came from."""

    __slots__ = ('origin_id', 'handler')

    def __init__(self, origin_id: str, handler: EventHandler):
        self.origin_id = origin_id
        self.handler = handler


class _EmitterEntry:
    """Weak reference to one emitter plus its kind -> listener set map."""

    __slots__ = ('ref', 'listeners')

    def __init__(self, ref: 'weakref.ref[Any]'):
        self.ref = ref
        # Registration id -> listener. Plain dicts keep registration order,
        # which is the dispatch order.
        self.listeners: Dict[Any, Dict[str, _Listener]] = {}


class EventRegistry:
    """
    Maps emitters to per-kind listener sets.

    All mutations and the snapshot taken at the start of a dispatch happen
    under one re-entrant lock (unless settings.thread_safe is off). Handlers
    themselves run outside the lock, so they may add or remove listeners;
    such changes apply from the next dispatch on.
    """

    def __init__(self, settings: Optional[DispatchSettings] = None):
        """
        Initialize the registry.

        Args:
            settings: Behaviour switches, defaults to DispatchSettings()
        """
        self._settings = settings or DispatchSettings()
        self._entries: Dict[int, _EmitterEntry] = {}
        self._lock = threading.RLock() if self._settings.thread_safe else nullcontext()

        logger.info("EventRegistry initialized (thread_safe=%s)", self._settings.thread_safe)

    @property
    def settings(self) -> DispatchSettings:
        return self._settings

    def _entry_for(self, emitter: Any, create: bool = False) -> Optional[_EmitterEntry]:
        # Caller holds the lock.
        key = id(emitter)
        entry = self._entries.get(key)
        if entry is not None and entry.ref() is emitter:
            return entry
        if not create:
            return None

        try:
            ref = weakref.ref(emitter, lambda r, k=key: self._on_emitter_collected(k, r))
        except TypeError as e:
            raise TypeError(
                f"Emitter of type {type(emitter).__name__} cannot be weak-referenced"
            ) from e

        entry = _EmitterEntry(ref)
        self._entries[key] = entry
        return entry

    def _on_emitter_collected(self, key: int, ref: 'weakref.ref[Any]') -> None:
        with self._lock:
            entry = self._entries.get(key)
            # The id may already belong to a newer emitter.
            if entry is not None and entry.ref is ref:
                del self._entries[key]
        if is_verbose_logging():
            logger.debug("Dropped listeners of collected emitter %#x", key)

    def add_event_listener(self, emitter: Any, kind: Any, handler: HandlerLike) -> str:
        """
        Register a handler for an event kind on an emitter.

        Every call is a separate registration with its own id, even when the
        same EventHandler or function is passed again.

        Args:
            emitter: Object the handler listens to
            kind: Event kind, normally an EventKind member. Any hashable
                value is accepted.
            handler: EventHandler or a plain callable

        Returns:
            str: Registration id for remove_event_listener()

        Raises:
            TypeError: If handler is not callable, kind is unhashable or
                emitter cannot be weak-referenced
        """
        hash(kind)
        if isinstance(handler, EventHandler):
            origin_id = handler.id
            registration = EventHandler(handler.function)
        else:
            registration = EventHandler(handler)
            origin_id = registration.id

        with self._lock:
            entry = self._entry_for(emitter, create=True)
            listeners = entry.listeners.setdefault(kind, {})
            listeners[registration.id] = _Listener(origin_id, registration)
            count = len(listeners)

        logger.debug(
            "Added listener %s for %s on %s (listeners=%d)",
            registration.id, _kind_name(kind), type(emitter).__name__, count,
        )
        return registration.id

    def remove_event_listener(
        self, emitter: Any, kind: Any, handler: Union[EventHandler, str]
    ) -> bool:
        """
        Unregister a handler. Unknown emitters, kinds and ids are ignored.

        A registration id removes exactly that registration. An
        EventHandler removes every registration made with it on this
        emitter and kind.

        Args:
            emitter: Object the handler was registered on
            kind: Event kind it was registered for
            handler: Registration id or the EventHandler that was registered

        Returns:
            bool: True if at least one listener was removed
        """
        with self._lock:
            entry = self._entry_for(emitter)
            if entry is None:
                return False
            listeners = entry.listeners.get(kind)
            if not listeners:
                return False

            if isinstance(handler, EventHandler):
                removed_ids = [
                    reg_id for reg_id, listener in listeners.items()
                    if listener.origin_id == handler.id
                ]
            else:
                removed_ids = [handler] if handler in listeners else []
            if not removed_ids:
                return False

            for reg_id in removed_ids:
                del listeners[reg_id]
            if not listeners:
                del entry.listeners[kind]
            if not entry.listeners:
                del self._entries[id(emitter)]

        logger.debug(
            "Removed listener(s) %s for %s on %s",
            ", ".join(removed_ids), _kind_name(kind), type(emitter).__name__,
        )
        return True

    def dispatch_event(self, emitter: Any, event: Event) -> int:
        """
        Call every handler registered for event.kind on emitter.

        Handlers run synchronously in registration order. The handler list
        is copied when the dispatch starts.

        Args:
            emitter: Object whose listeners should receive the event
            event: Event to deliver

        Returns:
            int: Number of handlers invoked (0 when nobody listens)
        """
        with self._lock:
            entry = self._entry_for(emitter)
            listeners = entry.listeners.get(event.kind) if entry is not None else None
            handlers: List[EventHandler] = (
                [listener.handler for listener in listeners.values()] if listeners else []
            )

        if not handlers:
            if is_verbose_logging():
                logger.debug(
                    "No listeners for %s on %s", _kind_name(event.kind), type(emitter).__name__
                )
            return 0

        if self._settings.log_dispatch:
            logger.debug(
                "Dispatching %s from %s to %d handler(s)",
                _kind_name(event.kind), type(emitter).__name__, len(handlers),
            )

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                if self._settings.propagate_handler_errors:
                    raise
                logger.error(
                    "Error in event handler %s for %s: %s",
                    handler.id, _kind_name(event.kind), e, exc_info=True,
                )
        return len(handlers)

    def listener_count(self, emitter: Any, kind: Any = ALL_KINDS) -> int:
        """Number of listeners on emitter, for one kind or for all kinds."""
        with self._lock:
            entry = self._entry_for(emitter)
            if entry is None:
                return 0
            if kind is not ALL_KINDS:
                return len(entry.listeners.get(kind, ()))
            return sum(len(listeners) for listeners in entry.listeners.values())

    def has_listeners(self, emitter: Any, kind: Any = ALL_KINDS) -> bool:
        return self.listener_count(emitter, kind) > 0

    def emitter_count(self) -> int:
        """Number of live emitters that currently have listeners."""
        with self._lock:
            return sum(1 for entry in list(self._entries.values()) if entry.ref() is not None)

    def remove_all_listeners(self, emitter: Any, kind: Any = ALL_KINDS) -> int:
        """
        Drop every listener on emitter, or only those for one kind.

        Returns:
            int: Number of listeners removed
        """
        with self._lock:
            entry = self._entry_for(emitter)
            if entry is None:
                return 0
            if kind is ALL_KINDS:
                removed = sum(len(listeners) for listeners in entry.listeners.values())
                entry.listeners.clear()
            else:
                removed = len(entry.listeners.pop(kind, {}))
            if not entry.listeners:
                del self._entries[id(emitter)]

        if removed:
            logger.debug("Removed %d listener(s) from %s", removed, type(emitter).__name__)
        return removed

    def clear(self) -> None:
        """Forget all emitters and listeners."""
        with self._lock:
            self._entries.clear()

        logger.info("EventRegistry cleared")


def _kind_name(kind: Any) -> str:
    return kind.value if isinstance(kind, EventKind) else str(kind)


# Process-wide registry used by EventDispatcher and the module functions below.
_default_registry: Optional[EventRegistry] = None
_default_registry_lock = threading.Lock()


def get_event_registry() -> EventRegistry:
    """Return the process-wide registry, creating it from the environment."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = EventRegistry(DispatchSettings.from_env())
        return _default_registry


def reset_event_registry(settings: Optional[DispatchSettings] = None) -> EventRegistry:
    """Replace the process-wide registry with a fresh one and return it."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is not None:
            _default_registry.clear()
        _default_registry = EventRegistry(settings or DispatchSettings.from_env())
        return _default_registry


def add_event_listener(emitter: Any, kind: Any, handler: HandlerLike) -> str:
    """Register handler on emitter in the process-wide registry."""
    return get_event_registry().add_event_listener(emitter, kind, handler)


def remove_event_listener(emitter: Any, kind: Any, handler: Union[EventHandler, str]) -> bool:
    """Unregister handler from emitter in the process-wide registry."""
    return get_event_registry().remove_event_listener(emitter, kind, handler)


def dispatch_event(emitter: Any, event: Event) -> int:
    """Dispatch event to emitter's listeners in the process-wide registry."""
    return get_event_registry().dispatch_event(emitter, event)
