"""
Event type definitions for the event dispatcher.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class EventKind(Enum):
    """Categories of events an emitter can dispatch."""
    CHANGE = "change"
    TAP = "tap"

    @classmethod
    def from_string(cls, value: str) -> 'EventKind':
        """Convert a raw string (e.g. "change") to an EventKind."""
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(
            f"Unknown event kind '{value}'. Allowed: {', '.join(m.value for m in cls)}"
        )


@dataclass(frozen=True)
class Event:
    """What happened (kind) and which emitter produced it (source)."""
    kind: EventKind
    source: Any


@dataclass(frozen=True, eq=False)
class EventHandler:
    """
    Callable wrapper with a stable identity.

    Functions cannot be meaningfully compared, so every handler carries an
    id generated when it is created. Equality and hashing use that id only:
    two handlers wrapping the same function are still two handlers.
    """
    function: Callable[[Event], None]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not callable(self.function):
            raise TypeError("EventHandler function must be callable")

    def __call__(self, event: Event) -> None:
        self.function(event)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventHandler):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
