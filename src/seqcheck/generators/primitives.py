"""Primitive value generators.

Small combinator library implementing ValueGenerator for the shapes command
arguments usually take. Each generator shrinks toward a canonical simplest
value:

    integers      -> the bound closest to zero
    booleans      -> False
    sampled_from  -> the first element
    weighted      -> the first choice
    tuples        -> element-wise
    lists         -> shorter, then element-wise

Every generator is a frozen dataclass, so generators can be built once and
shared between commands and threads.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from seqcheck.constants import DEFAULT_MAX_LIST_SIZE, DEFAULT_MAX_NATURAL

from .base import ValueGenerator

if TYPE_CHECKING:
    from collections.abc import Iterator
    from random import Random

__all__ = [
    "Booleans",
    "Integers",
    "Just",
    "Lists",
    "SampledFrom",
    "Tuples",
    "Weighted",
    "booleans",
    "integers",
    "just",
    "lists",
    "naturals",
    "no_args",
    "sampled_from",
    "tuples",
    "weighted",
]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Integers(ValueGenerator[int]):
    """Uniform integers in ``[min_value, max_value]``.

    Shrinks by halving the distance to the shrink target, which is zero
    when it lies within the bounds and the nearest bound otherwise.
    """

    min_value: int
    max_value: int

    def __post_init__(self) -> None:
        if self.min_value > self.max_value:
            msg = f"min_value ({self.min_value}) must be <= max_value ({self.max_value})"
            raise ValueError(msg)

    @property
    def target(self) -> int:
        """Simplest value within the bounds."""
        return min(max(0, self.min_value), self.max_value)

    def generate(self, rng: Random) -> int:
        return rng.randint(self.min_value, self.max_value)

    def shrink(self, value: int) -> Iterator[int]:
        target = self.target
        if value == target:
            return
        yield target
        # value - half walks from the midpoint toward value, always strictly
        # closer to target than value itself.
        delta = value - target
        half = delta
        while True:
            half = abs(half) // 2 * (1 if delta > 0 else -1)
            if half == 0:
                return
            yield value - half

    def size(self, value: int) -> int:
        return abs(value - self.target)


@dataclass(frozen=True, slots=True)
class Booleans(ValueGenerator[bool]):
    """Fair coin. Shrinks True to False."""

    def generate(self, rng: Random) -> bool:
        return rng.random() < 0.5

    def shrink(self, value: bool) -> Iterator[bool]:
        if value:
            yield False

    def size(self, value: bool) -> int:
        return int(value)


@dataclass(frozen=True, slots=True)
class Just(ValueGenerator[T]):
    """Always the same value. Never shrinks."""

    value: T

    def generate(self, rng: Random) -> T:  # noqa: ARG002 - constant
        return self.value

    def size(self, value: T) -> int:  # noqa: ARG002 - constant
        return 0


@dataclass(frozen=True, slots=True)
class SampledFrom(ValueGenerator[T]):
    """Uniform choice among ``elements``. Shrinks toward earlier elements."""

    elements: tuple[T, ...]

    def __post_init__(self) -> None:
        if not self.elements:
            msg = "sampled_from requires at least one element"
            raise ValueError(msg)

    def generate(self, rng: Random) -> T:
        return rng.choice(self.elements)

    def shrink(self, value: T) -> Iterator[T]:
        index = self._index(value)
        yield from self.elements[:index]

    def size(self, value: T) -> int:
        return self._index(value)

    def _index(self, value: T) -> int:
        try:
            return self.elements.index(value)
        except ValueError:
            # Foreign value: cannot shrink, rank it last.
            return len(self.elements)


@dataclass(frozen=True, slots=True)
class Weighted(ValueGenerator[T]):
    """Weighted choice among ``(weight, value)`` pairs.

    Shrinks toward earlier choices regardless of weight, so list the
    simplest choice first.
    """

    choices: tuple[tuple[float, T], ...]

    def __post_init__(self) -> None:
        if not self.choices:
            msg = "weighted requires at least one choice"
            raise ValueError(msg)
        if any(weight < 0 for weight, _ in self.choices):
            msg = "weights must be non-negative"
            raise ValueError(msg)
        if not any(weight > 0 for weight, _ in self.choices):
            msg = "at least one weight must be positive"
            raise ValueError(msg)

    def generate(self, rng: Random) -> T:
        weights = [weight for weight, _ in self.choices]
        values = [value for _, value in self.choices]
        return rng.choices(values, weights=weights, k=1)[0]

    def shrink(self, value: T) -> Iterator[T]:
        limit = self.size(value)
        for weight, choice in self.choices[:limit]:
            if weight > 0:
                yield choice

    def size(self, value: T) -> int:
        for index, (_, choice) in enumerate(self.choices):
            if choice == value:
                return index
        return len(self.choices)


@dataclass(frozen=True, slots=True)
class Tuples(ValueGenerator[tuple[Any, ...]]):
    """Fixed-length tuple with one generator per position.

    ``Tuples()`` with no elements always produces ``()`` and is the
    argument generator of commands that take no arguments.
    """

    elements: tuple[ValueGenerator[Any], ...]

    def generate(self, rng: Random) -> tuple[Any, ...]:
        return tuple(element.generate(rng) for element in self.elements)

    def shrink(self, value: tuple[Any, ...]) -> Iterator[tuple[Any, ...]]:
        for index, element in enumerate(self.elements):
            for candidate in element.shrink(value[index]):
                yield (*value[:index], candidate, *value[index + 1 :])

    def size(self, value: tuple[Any, ...]) -> int:
        return sum(
            element.size(item) for element, item in zip(self.elements, value, strict=True)
        )


@dataclass(frozen=True, slots=True)
class Lists(ValueGenerator[list[T]]):
    """Variable-length list of ``element`` values.

    Shrinks by cutting to ``min_size``, then dropping single elements, then
    shrinking elements in place.
    """

    element: ValueGenerator[T]
    min_size: int = 0
    max_size: int = DEFAULT_MAX_LIST_SIZE

    def __post_init__(self) -> None:
        if self.min_size < 0:
            msg = "min_size must be non-negative"
            raise ValueError(msg)
        if self.max_size < self.min_size:
            msg = f"max_size ({self.max_size}) must be >= min_size ({self.min_size})"
            raise ValueError(msg)

    def generate(self, rng: Random) -> list[T]:
        length = rng.randint(self.min_size, self.max_size)
        return [self.element.generate(rng) for _ in range(length)]

    def shrink(self, value: list[T]) -> Iterator[list[T]]:
        if len(value) > self.min_size:
            if self.min_size < len(value) - 1:
                yield value[: self.min_size]
            for index in range(len(value)):
                yield value[:index] + value[index + 1 :]
        for index, item in enumerate(value):
            for candidate in self.element.shrink(item):
                yield [*value[:index], candidate, *value[index + 1 :]]

    def size(self, value: list[T]) -> int:
        return len(value) + sum(self.element.size(item) for item in value)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================


def integers(min_value: int, max_value: int) -> Integers:
    """Integers in the closed range ``[min_value, max_value]``."""
    return Integers(min_value, max_value)


def naturals(max_value: int = DEFAULT_MAX_NATURAL) -> Integers:
    """Non-negative integers up to ``max_value``, shrinking toward 0."""
    return Integers(0, max_value)


def booleans() -> Booleans:
    """True or False, shrinking toward False."""
    return Booleans()


def just(value: T) -> Just[T]:
    """Constant generator."""
    return Just(value)


def sampled_from(elements: Sequence[T]) -> SampledFrom[T]:
    """Uniform choice among ``elements``, shrinking toward the first."""
    return SampledFrom(tuple(elements))


def weighted(choices: Sequence[tuple[float, T]]) -> Weighted[T]:
    """Choice among ``(weight, value)`` pairs, shrinking toward the first."""
    return Weighted(tuple(choices))


def tuples(*elements: ValueGenerator[Any]) -> Tuples:
    """Tuple with one value per generator.

    Example:
        >>> args = tuples(naturals(), booleans())
        >>> args.generate(random.Random(0))  # doctest: +SKIP
        (49, True)
    """
    return Tuples(tuple(elements))


def lists(
    element: ValueGenerator[T],
    *,
    min_size: int = 0,
    max_size: int = DEFAULT_MAX_LIST_SIZE,
) -> Lists[T]:
    """Lists of ``element`` values with length in ``[min_size, max_size]``."""
    return Lists(element, min_size, max_size)


_NO_ARGS = Tuples(())


def no_args() -> Tuples:
    """Argument generator for commands without arguments. Always ``()``."""
    return _NO_ARGS
