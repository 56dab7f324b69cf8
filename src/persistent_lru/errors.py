"""
Errors raised by persistent-lru.

There is exactly one: a cache cannot be built with a capacity that is not a
non-negative integer, or with a capacity that contradicts its config.
Everything else (misses, evictions, capacity zero) is ordinary cache policy
and is reported through return values.
"""

from typing import Optional


class InvalidCapacityError(ValueError):
    """Raised for a negative or non-integer capacity, or one that contradicts a config."""

    def __init__(self, capacity: object, message: Optional[str] = None):
        self.capacity = capacity
        super().__init__(
            message or f"capacity must be a non-negative integer, got {capacity!r}"
        )


def check_capacity(capacity: object) -> int:
    """Return `capacity` unchanged if valid, raise InvalidCapacityError otherwise."""
    # bool is an int subclass but True/False as a capacity is always a mistake
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidCapacityError(capacity)
    if capacity < 0:
        raise InvalidCapacityError(capacity)
    return capacity
