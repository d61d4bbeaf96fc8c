"""Parsing of ``/``-delimited event names."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import InvalidEventPathError

WILDCARD = "*"
SEPARATOR = "/"


@dataclass(frozen=True)
class EventPath:
    """A parsed event name.

    ``segments`` never contains the wildcard; a trailing ``*`` is recorded in
    ``recursive`` instead. ``internal`` selects the protected event tree.
    """

    raw: str
    segments: tuple[str, ...]
    internal: bool = False
    recursive: bool = False

    @property
    def name(self) -> str:
        return SEPARATOR.join(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments


def parse_event_path(raw: str, internal_prefix: str) -> EventPath:
    """Split ``raw`` into segments and detect the internal marker and wildcard.

    Only a bare ``*`` may address the root of a tree; any other path without
    segments, or with an empty segment, raises ``InvalidEventPathError``.
    """
    if not isinstance(raw, str):
        raise InvalidEventPathError(f"Event path must be a string, got {type(raw).__name__}.")

    name = raw.strip()
    internal = name.startswith(internal_prefix)
    if internal:
        name = name[len(internal_prefix):]

    name = name.strip(SEPARATOR)
    recursive = False
    if name == WILDCARD or name.endswith(SEPARATOR + WILDCARD):
        recursive = True
        name = name[: -len(WILDCARD)].rstrip(SEPARATOR)

    if not name:
        if recursive:
            return EventPath(raw=raw, segments=(), internal=internal, recursive=True)
        raise InvalidEventPathError(f"Event path {raw!r} has no segments.")

    segments = tuple(name.split(SEPARATOR))
    if any(not segment for segment in segments):
        raise InvalidEventPathError(f"Event path {raw!r} contains an empty segment.")
    if WILDCARD in segments:
        raise InvalidEventPathError(
            f"Event path {raw!r} may only use '*' as its final segment."
        )
    return EventPath(raw=raw, segments=segments, internal=internal, recursive=recursive)
