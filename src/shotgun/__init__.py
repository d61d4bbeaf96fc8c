"""Top-level package for shotgun, a hierarchical in-process event bus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import BusConfig, load_config
    from .events import (
        DirectorySnapshot,
        EventBus,
        EventRemoved,
        InternalEvents,
        ListenerAdded,
        ListenerRemoved,
    )
    from .exceptions import (
        ConfigValidationError,
        InternalEventNotRegisteredError,
        InvalidEventPathError,
        ShotgunError,
    )
    from .keys import KeyGenerator

__all__ = [
    "BusConfig",
    "ConfigValidationError",
    "DirectorySnapshot",
    "EventBus",
    "EventRemoved",
    "InternalEventNotRegisteredError",
    "InternalEvents",
    "InvalidEventPathError",
    "KeyGenerator",
    "ListenerAdded",
    "ListenerRemoved",
    "ShotgunError",
    "load_config",
]

_EVENT_EXPORTS = {
    "DirectorySnapshot",
    "EventBus",
    "EventRemoved",
    "InternalEvents",
    "ListenerAdded",
    "ListenerRemoved",
}
_EXCEPTION_EXPORTS = {
    "ConfigValidationError",
    "InternalEventNotRegisteredError",
    "InvalidEventPathError",
    "ShotgunError",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the package stays cheap."""
    if name in _EVENT_EXPORTS:
        from . import events

        return getattr(events, name)
    if name in _EXCEPTION_EXPORTS:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"BusConfig", "load_config"}:
        from .config import BusConfig, load_config

        return {"BusConfig": BusConfig, "load_config": load_config}[name]
    if name == "KeyGenerator":
        from .keys import KeyGenerator

        return KeyGenerator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
