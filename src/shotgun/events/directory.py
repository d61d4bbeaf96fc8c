"""Hierarchical event directories and path resolution."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any
import weakref

from ..keys import KeyGenerator, default_key_generator

Listener = Callable[..., Any]


@dataclass(frozen=True)
class DirectorySnapshot:
    """Read-only copy of a directory and its subtree."""

    name: str
    id: str
    listeners: dict[str, Listener] = field(default_factory=dict)
    children: dict[str, DirectorySnapshot] = field(default_factory=dict)


class Directory:
    """One path segment of an event tree.

    ``children`` and ``listeners`` are separate maps, so a listener key and a
    child segment may share a name. The parent is held weakly; a directory is
    owned only by its parent's ``children`` map.
    """

    def __init__(
        self,
        name: str,
        parent: Directory | None = None,
        key_generator: KeyGenerator | None = None,
    ) -> None:
        self._key_generator = key_generator or default_key_generator
        self.name = name
        self.id = self._key_generator.next_id()
        self.children: dict[str, Directory] = {}
        self.listeners: dict[str, Listener] = {}
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return (
            f"Directory(name={self.name!r}, listeners={len(self.listeners)}, "
            f"children={sorted(self.children)})"
        )

    @property
    def parent(self) -> Directory | None:
        return self._parent() if self._parent is not None else None

    def child(self, name: str) -> Directory | None:
        return self.children.get(name)

    def ensure_child(self, name: str) -> Directory:
        """Return the named child, creating an empty one when absent."""
        existing = self.children.get(name)
        if existing is not None:
            return existing
        created = Directory(name, parent=self, key_generator=self._key_generator)
        self.children[name] = created
        return created

    def detach(self) -> bool:
        """Discard this directory's listeners and unlink it from its parent.

        Descendants are left attached to this node and become unreachable
        from the root once the parent entry is gone.
        """
        self.listeners = {}
        parent = self.parent
        self._parent = None
        if parent is None or parent.children.get(self.name) is not self:
            return False
        del parent.children[self.name]
        return True

    def snapshot(self) -> DirectorySnapshot:
        return DirectorySnapshot(
            name=self.name,
            id=self.id,
            listeners=dict(self.listeners),
            children={name: child.snapshot() for name, child in self.children.items()},
        )


def resolve(root: Directory, segments: Iterable[str]) -> Directory | None:
    """Follow ``segments`` from ``root``; return ``None`` at the first gap."""
    current = root
    for segment in segments:
        found = current.child(segment)
        if found is None:
            return None
        current = found
    return current
