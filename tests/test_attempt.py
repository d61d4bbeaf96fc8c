"""Tests for the attempt() fault-isolation wrapper."""

from __future__ import annotations

import unittest

from shotgun.events import EventBus
from shotgun.exceptions import InvalidEventPathError


class Recorder:
    """Callable that remembers every argument tuple it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)


class AttemptTests(unittest.TestCase):
    """Validate that wrapped faults are rerouted as events."""

    def setUp(self) -> None:
        self.bus = EventBus()
        self.error = RuntimeError("boom")

    def _failing(self):
        error = self.error

        def fn() -> None:
            raise error

        return fn

    def test_success_fires_nothing(self) -> None:
        try_error = Recorder()
        ran: list[bool] = []
        self.bus.listen("system:tryError", try_error)
        self.assertIsNone(self.bus.attempt(lambda: ran.append(True)))
        self.assertEqual(ran, [True])
        self.assertEqual(try_error.calls, [])

    def test_error_is_absorbed_and_reported_to_try_error(self) -> None:
        try_error = Recorder()
        self.bus.listen("system:tryError", try_error)
        fn = self._failing()

        self.bus.attempt(fn)
        self.assertEqual(try_error.calls, [(self.error, fn)])

    def test_error_without_any_listener_is_silent(self) -> None:
        self.bus.attempt(self._failing())

    def test_custom_path_and_try_error_both_receive_payload(self) -> None:
        custom, other_key, try_error = Recorder(), Recorder(), Recorder()
        self.bus.listen("custom/path", custom, "k")
        self.bus.listen("custom/path", other_key, "unrelated")
        self.bus.listen("system:tryError", try_error, "k")
        fn = self._failing()

        self.bus.attempt("custom/path", fn, "k")
        self.assertEqual(custom.calls, [(self.error, fn)])
        self.assertEqual(other_key.calls, [])
        self.assertEqual(try_error.calls, [(self.error, fn)])

    def test_key_limits_try_error_listeners(self) -> None:
        matching, unkeyed = Recorder(), Recorder()
        self.bus.listen("system:tryError", matching, "k")
        self.bus.listen("system:tryError", unkeyed)

        self.bus.attempt(self._failing(), key="k")
        self.assertEqual(len(matching.calls), 1)
        self.assertEqual(unkeyed.calls, [])

    def test_function_first_takes_key_as_second_argument(self) -> None:
        matching, unkeyed = Recorder(), Recorder()
        self.bus.listen("system:tryError", matching, "k")
        self.bus.listen("system:tryError", unkeyed)
        fn = self._failing()

        self.bus.attempt(fn, "k")
        self.assertEqual(matching.calls, [(self.error, fn)])
        self.assertEqual(unkeyed.calls, [])

    def test_path_without_function_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self.bus.attempt("custom/path")

    def test_key_given_twice_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self.bus.attempt(self._failing(), "k", key="other")

    def test_unkeyed_custom_path_reaches_all_listeners(self) -> None:
        first, second = Recorder(), Recorder()
        self.bus.listen("errors/db", first)
        self.bus.listen("errors/db", second)
        self.bus.attempt("errors/db", self._failing())
        self.assertEqual(len(first.calls), 1)
        self.assertEqual(len(second.calls), 1)

    def test_missing_custom_path_still_reports_try_error(self) -> None:
        try_error = Recorder()
        self.bus.listen("system:tryError", try_error)
        self.bus.attempt("not/subscribed", self._failing())
        self.assertEqual(len(try_error.calls), 1)

    def test_try_error_as_custom_path_is_not_duplicated(self) -> None:
        try_error = Recorder()
        self.bus.listen("system:tryError", try_error)
        self.bus.attempt("system:tryError", self._failing())
        self.assertEqual(len(try_error.calls), 1)

    def test_publish_inside_attempt_is_isolated(self) -> None:
        try_error = Recorder()
        self.bus.listen("system:tryError", try_error)

        def bad_listener() -> None:
            raise KeyError("listener")

        self.bus.listen("jobs/run", bad_listener)
        self.bus.attempt(lambda: self.bus.fire("jobs/run"))
        self.assertEqual(len(try_error.calls), 1)
        self.assertIsInstance(try_error.calls[0][0], KeyError)

    def test_invalid_error_path_raises_before_calling(self) -> None:
        ran: list[bool] = []
        with self.assertRaises(InvalidEventPathError):
            self.bus.attempt("a//b", lambda: ran.append(True))
        self.assertEqual(ran, [])

    def test_error_handler_may_retry_through_the_bus(self) -> None:
        attempts: list[int] = []

        def flaky() -> None:
            attempts.append(1)
            if len(attempts) < 3:
                raise ValueError("not yet")

        def retry(_error, fn) -> None:
            self.bus.attempt("retry", fn)

        self.bus.listen("retry", retry)
        self.bus.attempt("retry", flaky)
        self.assertEqual(len(attempts), 3)


if __name__ == "__main__":
    unittest.main()
