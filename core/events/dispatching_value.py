"""Observable value cell built on EventDispatcher."""
from typing import Generic, TypeVar

from core.events.dispatcher import EventDispatcher

T = TypeVar('T')


class DispatchingValue(EventDispatcher, Generic[T]):
    """
    Holds a value and dispatches a CHANGE event every time it is assigned.

    Assigning an equal value still dispatches; there is no equality check.
    Construction does not dispatch.
    """

    def __init__(self, value: T):
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._value = new_value
        self.dispatch_change()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"
