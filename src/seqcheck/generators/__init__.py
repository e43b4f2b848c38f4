"""Random value generators with built-in shrinking.

The engine draws command arguments, command choices and sequence lengths
exclusively through ValueGenerator objects. The primitives here cover the
common argument shapes; user code can subclass ValueGenerator for others.

Python 3.13+. Zero external dependencies.
"""

from .base import ValueGenerator, value_size
from .primitives import (
    booleans,
    integers,
    just,
    lists,
    naturals,
    no_args,
    sampled_from,
    tuples,
    weighted,
)

__all__ = [
    "ValueGenerator",
    "booleans",
    "integers",
    "just",
    "lists",
    "naturals",
    "no_args",
    "sampled_from",
    "tuples",
    "value_size",
    "weighted",
]
