"""Invocation of listeners stored in a resolved directory."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .directory import Directory


def dispatch(
    directory: Directory | None,
    args: Sequence[Any] = (),
    key: str | None = None,
    recursive: bool = False,
) -> bool:
    """Invoke listeners of ``directory`` with ``args``.

    A keyed dispatch calls only that listener and never descends into
    children, whatever ``recursive`` says. Without a key every listener of the
    directory runs, followed depth-first by each child subtree when
    ``recursive`` is set. Listener exceptions propagate to the caller.

    Returns ``True`` when at least one listener was invoked.
    """
    if directory is None:
        return False

    if key is not None:
        listener = directory.listeners.get(key)
        if listener is None:
            return False
        listener(*args)
        return True

    invoked = False
    for listener in list(directory.listeners.values()):
        listener(*args)
        invoked = True

    if not recursive:
        return invoked

    for child in list(directory.children.values()):
        if dispatch(child, args, recursive=True):
            invoked = True
    return invoked
