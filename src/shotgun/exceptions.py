"""Domain exception hierarchy for the shotgun event bus."""

from __future__ import annotations


class ShotgunError(RuntimeError):
    """Base class for all event bus errors."""


class InternalEventNotRegisteredError(ShotgunError):
    """Raised when subscribing under an internal path that was never registered."""


class InvalidEventPathError(ShotgunError, ValueError):
    """Raised when an event path is empty or contains empty segments."""


class ConfigValidationError(ShotgunError):
    """Raised when configuration cannot be validated safely."""
