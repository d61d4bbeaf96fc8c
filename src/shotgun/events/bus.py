"""Hierarchical publish/subscribe bus.

Usage:
    bus = EventBus()

    def on_saved(document):
        print(f"saved {document}")

    key = bus.listen("documents/saved", on_saved)
    bus.fire("documents/saved", ["report.txt"])
    bus.fire("documents/*", ["report.txt"])   # documents and everything below
    bus.remove("documents/saved", key)

Internal lifecycle events live in a separate tree addressed with the
``system:`` prefix, e.g. ``bus.listen("system:tryError", handler)``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractContextManager, nullcontext
from importlib import metadata
import logging
import threading
from typing import Any

from ..config import BusConfig
from ..exceptions import InternalEventNotRegisteredError, InvalidEventPathError
from ..keys import KeyGenerator, default_key_generator
from .directory import Directory, DirectorySnapshot, Listener, resolve
from .dispatch import dispatch
from .domain import EventRemoved, InternalEvents, ListenerAdded, ListenerRemoved
from .paths import EventPath, parse_event_path

LOGGER = logging.getLogger(__name__)

_DISTRIBUTION = "shotgun-bus"


def _package_version() -> str:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


class EventBus:
    """In-process event bus with path-addressed directories.

    Every public method runs synchronously on the caller's thread. With
    ``BusConfig.thread_safe`` the tree is guarded by one re-entrant lock, so
    listeners may call back into the bus while a dispatch is running.
    """

    def __init__(
        self,
        config: BusConfig | None = None,
        key_generator: KeyGenerator | None = None,
    ) -> None:
        self._config = config or BusConfig()
        self._keys = key_generator or self._default_key_generator(self._config)
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self._config.thread_safe else nullcontext()
        )
        self._user_root = Directory("events", key_generator=self._keys)
        self._internal_root = Directory("internal_events", key_generator=self._keys)
        self.version = _package_version()
        self.register_internal(*InternalEvents.ALL, *self._config.internal_events)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> EventBus:
        """Build a bus from a dictionary returned by ``load_config``."""
        return cls(BusConfig.model_validate(config.get("bus", {})))

    @staticmethod
    def _default_key_generator(config: BusConfig) -> KeyGenerator:
        defaults = BusConfig()
        if (
            config.key_prefix == defaults.key_prefix
            and config.key_suffix_length == defaults.key_suffix_length
        ):
            return default_key_generator
        return KeyGenerator(config.key_prefix, config.key_suffix_length)

    @property
    def config(self) -> BusConfig:
        return self._config

    def __repr__(self) -> str:
        return (
            f"EventBus(internal_prefix={self._config.internal_prefix!r}, "
            f"thread_safe={self._config.thread_safe})"
        )

    # -- path helpers -------------------------------------------------------

    def _parse(self, path: str) -> EventPath:
        return parse_event_path(path, self._config.internal_prefix)

    def _root_for(self, parsed: EventPath) -> Directory:
        return self._internal_root if parsed.internal else self._user_root

    def _qualified(self, parsed: EventPath) -> str:
        if parsed.internal:
            return f"{self._config.internal_prefix}{parsed.name}"
        return parsed.name

    def _fire_internal(
        self, name: str, args: Sequence[Any], key: str | None = None
    ) -> bool:
        return dispatch(resolve(self._internal_root, (name,)), args, key=key)

    # -- publishing ---------------------------------------------------------

    def fire(
        self, path: str, args: Sequence[Any] | str = (), key: str | None = None
    ) -> bool:
        """Invoke listeners at ``path`` with ``args``.

        A trailing ``/*`` also invokes every directory below ``path``, unless
        ``key`` is given: a keyed fire only calls that one listener at the top
        directory. A string in place of ``args`` is taken as the key, so
        ``fire("jobs/done", "k")`` equals ``fire("jobs/done", (), "k")``.
        Returns ``True`` when at least one listener ran; firing an unknown
        path is a silent no-op.
        """
        if isinstance(args, str):
            if key is not None:
                raise TypeError("fire() got a key both as args and as key.")
            args, key = (), args
        parsed = self._parse(path)
        with self._lock:
            directory = resolve(self._root_for(parsed), parsed.segments)
            return dispatch(directory, args, key=key, recursive=parsed.recursive)

    def fire_key(self, path: str, key: str, args: Sequence[Any] = ()) -> bool:
        """Invoke only the listener stored under ``key`` at ``path``."""
        return self.fire(path, args, key)

    # -- subscriptions ------------------------------------------------------

    def listen(self, path: str, fn: Listener, key: str | None = None) -> str:
        """Subscribe ``fn`` at ``path`` and return the key it is stored under.

        User directories are created on demand. Internal paths must have been
        declared with ``register_internal`` first. Once stored, the internal
        ``newListener`` event receives a ``ListenerAdded`` payload.
        """
        if not callable(fn):
            raise TypeError("Listener must be callable.")
        parsed = self._parse(path)
        if parsed.is_root:
            raise InvalidEventPathError("Cannot subscribe to the root of an event tree.")

        with self._lock:
            if parsed.internal:
                directory = resolve(self._internal_root, parsed.segments)
                if directory is None:
                    raise InternalEventNotRegisteredError(
                        f"Internal event {parsed.name!r} has not been registered."
                    )
            else:
                directory = self._user_root
                for segment in parsed.segments:
                    directory = directory.ensure_child(segment)

            real_key = key if key is not None else self._keys.next_id()
            directory.listeners[real_key] = fn
            qualified = self._qualified(parsed)
            LOGGER.debug(
                "bus.listen",
                extra={"event": "bus.listen", "path": qualified, "key": real_key},
            )
            self._fire_internal(
                InternalEvents.NEW_LISTENER,
                [ListenerAdded(path=qualified, key=real_key, fn=fn)],
            )
        return real_key

    def register_internal(self, *paths: str) -> bool:
        """Declare internal event paths so they can be subscribed to.

        Paths are given without the internal prefix. Registering an existing
        path again changes nothing. Every path is validated before any
        directory is created.
        """
        parsed_paths: list[EventPath] = []
        for path in paths:
            parsed = parse_event_path(path, self._config.internal_prefix)
            if parsed.is_root:
                raise InvalidEventPathError("Cannot register the root of an event tree.")
            if parsed.recursive:
                raise InvalidEventPathError(
                    f"Internal event {path!r} must not end with a wildcard."
                )
            parsed_paths.append(parsed)

        with self._lock:
            for parsed in parsed_paths:
                directory = self._internal_root
                for segment in parsed.segments:
                    directory = directory.ensure_child(segment)
                LOGGER.debug(
                    "bus.register_internal",
                    extra={"event": "bus.register_internal", "path": parsed.name},
                )
        return True

    def remove(self, path: str, key: str | None = None) -> bool:
        """Remove one listener, or a whole directory when ``key`` is omitted.

        Keyed removal publishes ``rmListener`` and reports whether the key was
        present. Unkeyed removal drops the directory's listeners, unlinks it
        together with its subtree and publishes ``rmEvent``. A path that does
        not resolve is left alone and reported as ``False``.
        """
        parsed = self._parse(path)
        if parsed.is_root:
            raise InvalidEventPathError("Cannot remove the root of an event tree.")

        with self._lock:
            directory = resolve(self._root_for(parsed), parsed.segments)
            if directory is None:
                return False
            qualified = self._qualified(parsed)

            if key is not None:
                removed = directory.listeners.pop(key, None) is not None
                LOGGER.debug(
                    "bus.remove_listener",
                    extra={
                        "event": "bus.remove_listener",
                        "path": qualified,
                        "key": key,
                        "removed": removed,
                    },
                )
                self._fire_internal(
                    InternalEvents.RM_LISTENER,
                    [ListenerRemoved(path=qualified, key=key)],
                )
                return removed

            directory.detach()
            LOGGER.debug(
                "bus.remove_event",
                extra={"event": "bus.remove_event", "path": qualified},
            )
            self._fire_internal(InternalEvents.RM_EVENT, [EventRemoved(path=qualified)])
            return True

    # -- fault isolation ----------------------------------------------------

    def attempt(
        self,
        path_or_fn: str | Callable[[], Any],
        fn: Callable[[], Any] | str | None = None,
        key: str | None = None,
    ) -> None:
        """Call a function and turn any exception it raises into events.

        Accepts ``attempt(path, fn, key=None)`` or, without an error path,
        ``attempt(fn, key=None)``. On failure the error path (when given) and
        the internal ``tryError`` event are fired with ``(error, fn)`` and
        ``key``. The error itself is never re-raised.
        """
        if callable(path_or_fn):
            path, target = None, path_or_fn
            if fn is not None:
                if key is not None:
                    raise TypeError("attempt() got a key both positionally and as key.")
                key = fn
        else:
            path, target = path_or_fn, fn
            if not callable(target):
                raise TypeError("attempt() needs a callable to invoke.")

        parsed = self._parse(path) if path is not None else None
        try:
            target()
        except Exception as exc:
            payload = (exc, target)
            if path is not None:
                self.fire(path, payload, key)
            targets_try_error = (
                parsed is not None
                and parsed.internal
                and parsed.segments == (InternalEvents.TRY_ERROR,)
            )
            if not targets_try_error:
                with self._lock:
                    self._fire_internal(InternalEvents.TRY_ERROR, payload, key)

    # -- introspection ------------------------------------------------------

    def get_user_events(self) -> DirectorySnapshot:
        with self._lock:
            return self._user_root.snapshot()

    def get_internal_events(self) -> DirectorySnapshot:
        with self._lock:
            return self._internal_root.snapshot()
