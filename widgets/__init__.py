"""Qt control bindings for the event dispatcher."""

from .control_adapter import ControlEventAdapter, bind_control, unbind_control

__all__ = [
    'ControlEventAdapter',
    'bind_control',
    'unbind_control',
]
