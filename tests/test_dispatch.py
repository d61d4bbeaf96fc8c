"""Tests for listener dispatch over directories."""

from __future__ import annotations

import unittest

from shotgun.events.directory import Directory
from shotgun.events.dispatch import dispatch


class DispatchTests(unittest.TestCase):
    """Validate keyed, plain and recursive dispatch."""

    def setUp(self) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.root = Directory("events")
        self.a = self.root.ensure_child("a")
        self.b = self.a.ensure_child("b")

    def _record(self, label: str):
        def listener(*args):
            self.calls.append((label, args))

        return listener

    def test_missing_directory_is_not_invoked(self) -> None:
        self.assertFalse(dispatch(None, [1]))

    def test_keyed_dispatch_invokes_only_that_listener(self) -> None:
        self.a.listeners["k1"] = self._record("one")
        self.a.listeners["k2"] = self._record("two")
        self.assertTrue(dispatch(self.a, [1, 2], key="k1"))
        self.assertEqual(self.calls, [("one", (1, 2))])

    def test_keyed_dispatch_with_unknown_key(self) -> None:
        self.a.listeners["k1"] = self._record("one")
        self.assertFalse(dispatch(self.a, [], key="nope"))
        self.assertEqual(self.calls, [])

    def test_keyed_dispatch_ignores_recursion(self) -> None:
        self.a.listeners["k"] = self._record("a")
        self.b.listeners["k"] = self._record("b")
        self.assertTrue(dispatch(self.a, [], key="k", recursive=True))
        self.assertEqual([label for label, _ in self.calls], ["a"])

    def test_plain_dispatch_invokes_all_listeners_without_children(self) -> None:
        self.a.listeners["x"] = self._record("x")
        self.a.listeners["y"] = self._record("y")
        self.b.listeners["z"] = self._record("z")
        self.assertTrue(dispatch(self.a, ["arg"]))
        self.assertEqual(sorted(label for label, _ in self.calls), ["x", "y"])

    def test_recursive_dispatch_visits_parent_before_children(self) -> None:
        c = self.b.ensure_child("c")
        self.a.listeners["x"] = self._record("a")
        self.b.listeners["x"] = self._record("b")
        c.listeners["x"] = self._record("c")
        self.assertTrue(dispatch(self.a, [], recursive=True))
        self.assertEqual([label for label, _ in self.calls], ["a", "b", "c"])

    def test_recursive_dispatch_reports_listeners_found_below(self) -> None:
        self.b.listeners["x"] = self._record("b")
        self.assertTrue(dispatch(self.a, [], recursive=True))
        self.assertFalse(dispatch(self.a, []))

    def test_empty_directory_is_not_invoked(self) -> None:
        self.assertFalse(dispatch(self.a, []))

    def test_listener_errors_propagate(self) -> None:
        def boom():
            raise KeyError("boom")

        self.a.listeners["x"] = boom
        with self.assertRaises(KeyError):
            dispatch(self.a, [])

    def test_listener_may_remove_itself_during_dispatch(self) -> None:
        def once():
            self.calls.append(("once", ()))
            del self.a.listeners["once"]

        self.a.listeners["once"] = once
        self.a.listeners["other"] = self._record("other")
        dispatch(self.a, [])
        self.assertEqual(sorted(label for label, _ in self.calls), ["once", "other"])
        self.assertNotIn("once", self.a.listeners)


if __name__ == "__main__":
    unittest.main()
