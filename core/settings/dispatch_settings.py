"""
Runtime settings for the event registry.

Values come from constructor arguments or from EVENTDISPATCH_* environment
variables. Unrecognised environment values fall back to the defaults.
"""
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.logging.logger import get_logger

logger = get_logger(__name__)

ENV_THREAD_SAFE = "EVENTDISPATCH_THREAD_SAFE"
ENV_PROPAGATE_ERRORS = "EVENTDISPATCH_PROPAGATE_ERRORS"
ENV_LOG_DISPATCH = "EVENTDISPATCH_LOG_DISPATCH"


def to_bool(value: Any, default: bool = False) -> bool:
    """Normalize a raw setting value to bool.

    Accepts common string forms ("true", "1", "yes", "on") as True and
    ("false", "0", "no", "off") as False. Unrecognised strings and None
    return the provided default.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("true", "1", "yes", "on"):
            return True
        if v in ("false", "0", "no", "off"):
            return False
        return default
    if value is None:
        return default
    return bool(value)


@dataclass(frozen=True)
class DispatchSettings:
    """
    Behaviour switches for an EventRegistry.

    Attributes:
        thread_safe: Guard registry mutation and dispatch snapshots with a
            lock. Turn off only when all access happens on one thread.
        propagate_handler_errors: Re-raise the first handler exception to
            the dispatching caller instead of logging it and continuing.
        log_dispatch: Emit a DEBUG line for every dispatch.
    """
    thread_safe: bool = True
    propagate_handler_errors: bool = False
    log_dispatch: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DispatchSettings':
        """Build settings from EVENTDISPATCH_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        settings = cls(
            thread_safe=to_bool(env.get(ENV_THREAD_SAFE), defaults.thread_safe),
            propagate_handler_errors=to_bool(
                env.get(ENV_PROPAGATE_ERRORS), defaults.propagate_handler_errors
            ),
            log_dispatch=to_bool(env.get(ENV_LOG_DISPATCH), defaults.log_dispatch),
        )
        if settings != defaults:
            logger.debug("Dispatch settings from environment: %s", settings)
        return settings
