"""Generation of practically-unique keys for anonymous subscriptions."""

from __future__ import annotations

import random
import string
import threading
import time

KEY_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

_COUNTER_START = 1_000_000
_COUNTER_MAX = 9_999_999


class KeyGenerator:
    """Build ``<prefix><epoch-ms>-<counter>-<random>`` identifiers.

    The timestamp and counter pair carry uniqueness. The counter always has
    seven digits and wraps back to its start value after ``9999999``. The
    random suffix only lowers the odds further when two generators share a
    millisecond.
    """

    def __init__(self, prefix: str = "SG-", suffix_length: int = 25) -> None:
        if suffix_length < 0:
            raise ValueError("suffix_length must not be negative.")
        self._prefix = prefix
        self._suffix_length = suffix_length
        self._counter = _COUNTER_START - 1
        self._lock = threading.Lock()
        self._random = random.SystemRandom()

    @property
    def prefix(self) -> str:
        return self._prefix

    def _next_counter(self) -> int:
        with self._lock:
            if self._counter >= _COUNTER_MAX:
                self._counter = _COUNTER_START
            else:
                self._counter += 1
            return self._counter

    def next_id(self) -> str:
        """Return a new key that has not been issued by this generator before."""
        timestamp = time.time_ns() // 1_000_000
        counter = self._next_counter()
        suffix = "".join(self._random.choices(KEY_ALPHABET, k=self._suffix_length))
        return f"{self._prefix}{timestamp}-{counter}-{suffix}"

    __call__ = next_id


# Shared by every bus that is not given its own generator.
default_key_generator = KeyGenerator()
