"""
Bridge from Qt control signals to the event registry.

A bound control dispatches ``EventKind.CHANGE`` when its value changes and
``EventKind.TAP`` when it is pressed. Listeners are keyed on the control
itself, either through the adapter or through the registry API::

    slider = QSlider()
    adapter = bind_control(slider)
    adapter.add_event_listener(EventKind.CHANGE, on_slider_changed)
    add_event_listener(slider, EventKind.CHANGE, on_slider_moved)

Native signals are connected while the control sits inside a parent and
disconnected once it is removed from it.
"""
from __future__ import annotations

import weakref
from typing import List, Optional, Tuple, Union

from PySide6.QtCore import QEvent, QObject
from PySide6.QtWidgets import (
    QAbstractButton,
    QAbstractSlider,
    QComboBox,
    QDateTimeEdit,
    QDoubleSpinBox,
    QLineEdit,
    QSpinBox,
    QWidget,
)

from core.events.event_system import EventRegistry, HandlerLike, get_event_registry
from core.events.event_types import Event, EventHandler, EventKind
from core.logging.logger import get_logger

logger = get_logger(__name__)

_ADAPTER_ATTR = "_event_adapter"


def _native_signals(control: QWidget) -> Tuple[List[object], List[object]]:
    """Return (value-changed signals, primary-action signals) for control."""
    change: List[object] = []
    tap: List[object] = []

    if isinstance(control, (QAbstractSlider, QSpinBox, QDoubleSpinBox)):
        change.append(control.valueChanged)
    elif isinstance(control, QDateTimeEdit):
        change.append(control.dateTimeChanged)
    elif isinstance(control, QComboBox):
        change.append(control.currentIndexChanged)
    elif isinstance(control, QLineEdit):
        change.append(control.textChanged)

    if isinstance(control, QAbstractButton):
        tap.append(control.pressed)
        # Qt only emits toggled for checkable buttons, so a button made
        # checkable after attach() is covered too.
        change.append(control.toggled)

    return change, tap


class ControlEventAdapter(QObject):
    """Forwards one control's native signals into dispatch_event()."""

    def __init__(self, control: QWidget, registry: Optional[EventRegistry] = None):
        super().__init__(control)
        self._control_ref = weakref.ref(control)
        self._registry = registry
        self._change_signals: List[object] = []
        self._tap_signals: List[object] = []
        self._attached = False

        control.installEventFilter(self)
        if control.parent() is not None:
            self.attach()

    @property
    def control(self) -> Optional[QWidget]:
        return self._control_ref()

    @property
    def is_attached(self) -> bool:
        return self._attached

    def _get_registry(self) -> EventRegistry:
        return self._registry or get_event_registry()

    def attach(self) -> None:
        """Connect the control's native signals. Idempotent."""
        control = self.control
        if self._attached or control is None:
            return

        self._change_signals, self._tap_signals = _native_signals(control)
        for signal in self._change_signals:
            signal.connect(self._on_native_change)
        for signal in self._tap_signals:
            signal.connect(self._on_native_action)
        self._attached = True

        logger.debug(
            "Attached %s (change=%d, tap=%d)",
            type(control).__name__, len(self._change_signals), len(self._tap_signals),
        )

    def detach(self) -> None:
        """Disconnect the native signals connected by attach(). Idempotent."""
        if not self._attached:
            return

        for signal in self._change_signals:
            self._disconnect(signal, self._on_native_change)
        for signal in self._tap_signals:
            self._disconnect(signal, self._on_native_action)
        self._change_signals = []
        self._tap_signals = []
        self._attached = False

        control = self.control
        logger.debug("Detached %s", type(control).__name__ if control is not None else "<deleted>")

    @staticmethod
    def _disconnect(signal, slot) -> None:
        try:
            signal.disconnect(slot)
        except (RuntimeError, TypeError):
            # Control already torn down on the C++ side.
            logger.debug("Signal already disconnected", exc_info=True)

    # Dispatcher capability, with the control as the emitter.

    def add_event_listener(self, kind, handler: HandlerLike) -> str:
        control = self.control
        if control is None:
            raise RuntimeError("Cannot add a listener: control has been deleted")
        return self._get_registry().add_event_listener(control, kind, handler)

    def remove_event_listener(self, kind, handler: Union[EventHandler, str]) -> bool:
        control = self.control
        if control is None:
            return False
        return self._get_registry().remove_event_listener(control, kind, handler)

    def dispatch_event(self, event: Event) -> int:
        control = self.control
        if control is None:
            return 0
        return self._get_registry().dispatch_event(control, event)

    def _dispatch(self, kind: EventKind) -> None:
        control = self.control
        if control is None:
            return
        self.dispatch_event(Event(kind, control))

    def _on_native_change(self, *args) -> None:
        self._dispatch(EventKind.CHANGE)

    def _on_native_action(self, *args) -> None:
        self._dispatch(EventKind.TAP)

    def eventFilter(self, watched, event):  # type: ignore[override]
        """Attach when the control gains a parent, detach when it loses it."""
        if event is not None and event.type() == QEvent.Type.ParentChange:
            if watched.parent() is None:
                self.detach()
            else:
                self.attach()
        return False


def bind_control(control: QWidget, registry: Optional[EventRegistry] = None) -> ControlEventAdapter:
    """
    Give control the Dispatcher capability, returning its adapter.

    Binding an already bound control returns the existing adapter.

    Raises:
        ValueError: If control is already bound to a different registry
    """
    adapter = getattr(control, _ADAPTER_ATTR, None)
    if isinstance(adapter, ControlEventAdapter):
        if registry is not None and registry is not adapter._get_registry():
            raise ValueError(
                f"{type(control).__name__} is already bound to another registry; "
                "call unbind_control() first"
            )
        return adapter

    adapter = ControlEventAdapter(control, registry)
    setattr(control, _ADAPTER_ATTR, adapter)
    return adapter


def unbind_control(control: QWidget) -> bool:
    """
    Detach and drop the control's adapter.

    Listeners registered on the control are left in the registry; they
    simply stop receiving native events.

    Returns:
        bool: True if the control had an adapter
    """
    adapter = getattr(control, _ADAPTER_ATTR, None)
    if not isinstance(adapter, ControlEventAdapter):
        return False

    adapter.detach()
    control.removeEventFilter(adapter)
    setattr(control, _ADAPTER_ATTR, None)
    adapter.setParent(None)
    adapter.deleteLater()
    return True
