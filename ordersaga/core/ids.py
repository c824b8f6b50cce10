"""
Order identifier generation.

The coordinator asks an IdGenerator for every new order id. Production code
uses random UUIDs; tests inject SequentialIdGenerator to get predictable ids.
"""

import itertools
import uuid
from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class IdGenerator(Protocol):
    """Anything callable with no arguments that returns a fresh unique id."""

    def __call__(self) -> str: ...


def uuid_generator(prefix: str = "") -> Callable[[], str]:
    """
    Build a generator returning random UUID4 strings.

    Args:
        prefix: Optional prefix, e.g. "ord-" gives "ord-0b9c..."
    """

    def generate() -> str:
        return f"{prefix}{uuid.uuid4()}"

    return generate


class SequentialIdGenerator:
    """
    Deterministic id generator for tests.

    Example:
        >>> gen = SequentialIdGenerator("order-")
        >>> gen(), gen()
        ('order-1', 'order-2')
    """

    def __init__(self, prefix: str = "order-", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
