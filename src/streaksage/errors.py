"""Exceptions raised by the analytics core."""

from __future__ import annotations


class InvalidWindowError(ValueError):
    """A window or lookback length was zero, negative or inconsistent."""


class InvalidCadenceError(ValueError):
    """A cadence value could not be interpreted."""


def require_window(value: int, name: str) -> int:
    """Return ``value`` when it is a positive integer, raise otherwise."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidWindowError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidWindowError(f"{name} must be positive, got {value}")
    return value
