"""Path-addressed event directories, dispatch and the bus built on them."""

from .bus import EventBus
from .directory import Directory, DirectorySnapshot, resolve
from .dispatch import dispatch
from .domain import EventRemoved, InternalEvents, ListenerAdded, ListenerRemoved
from .paths import EventPath, parse_event_path

__all__ = [
    "Directory",
    "DirectorySnapshot",
    "EventBus",
    "EventPath",
    "EventRemoved",
    "InternalEvents",
    "ListenerAdded",
    "ListenerRemoved",
    "dispatch",
    "parse_event_path",
    "resolve",
]
