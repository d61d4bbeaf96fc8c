from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


class InternalEvents:
    """Internal event names registered on every bus."""

    NEW_LISTENER = "newListener"
    RM_EVENT = "rmEvent"
    RM_LISTENER = "rmListener"
    TRY_ERROR = "tryError"

    ALL = (NEW_LISTENER, RM_EVENT, RM_LISTENER, TRY_ERROR)


@dataclass(frozen=True)
class ListenerAdded:
    path: str
    key: str
    fn: Callable[..., Any]


@dataclass(frozen=True)
class ListenerRemoved:
    path: str
    key: str


@dataclass(frozen=True)
class EventRemoved:
    path: str
