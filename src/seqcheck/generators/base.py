"""Value generator protocol shared by argument generation and shrinking.

A ValueGenerator produces random values of one shape and, given a value,
a lazy sequence of strictly simpler candidates. The engine only touches
generators through CommandSpec.args_generator, so any object implementing
this interface can stand in for the bundled primitives.

Contract:
    generate(rng): Draw a value using ONLY the given random source. The
        same rng state must always yield the same value, which is what makes
        a reported seed reproducible.
    shrink(value): Return a fresh, finite iterator of candidates. Calling it
        again restarts the sequence. Every candidate must have a smaller
        size() than the value it was derived from; candidates that do not
        are ignored by the shrinker.
    size(value): Non-negative complexity measure. Zero means fully shrunk.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator
    from random import Random

__all__ = ["ValueGenerator", "value_size"]

T = TypeVar("T")


class ValueGenerator(ABC, Generic[T]):
    """Abstract base for random value generators with built-in shrinking."""

    __slots__ = ()

    @abstractmethod
    def generate(self, rng: Random) -> T:
        """Draw a random value from ``rng``."""

    def shrink(self, value: T) -> Iterator[T]:  # noqa: ARG002 - default has no candidates
        """Yield strictly simpler candidates for ``value``.

        The default generator cannot shrink.
        """
        return iter(())

    def size(self, value: T) -> int:
        """Complexity of ``value``; the shrinker only accepts decreases."""
        return value_size(value)


def value_size(value: object) -> int:
    """Structural complexity of a plain value.

    Used when a generator does not know better. Integers measure their
    magnitude, strings and containers their length plus the sizes of their
    members. Anything else is treated as atomic.

    Examples:
        >>> value_size(-3)
        3
        >>> value_size((1, "ab", [True]))
        8
    """
    match value:
        case bool():
            return int(value)
        case int():
            return abs(value)
        case float():
            return int(abs(value)) if value == value and abs(value) != float("inf") else 0
        case str() | bytes():
            return len(value)
        case Mapping():
            return len(value) + sum(
                value_size(k) + value_size(v) for k, v in value.items()
            )
        case tuple() | list() | set() | frozenset():
            return len(value) + sum(value_size(item) for item in value)
        case _:
            return 0
