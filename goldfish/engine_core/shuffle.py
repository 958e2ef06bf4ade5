"""
Shuffle - Fisher-Yates over any mutable sequence.

Walks i from the last index down to 1, picks j uniformly from [0, i]
and swaps. Every permutation is equally likely as long as the random
source is uniform, so the rng is always passed in.
"""

from __future__ import annotations
from typing import MutableSequence, TypeVar
import random

T = TypeVar("T")


def fisher_yates(items: MutableSequence[T], rng: random.Random) -> MutableSequence[T]:
    """Shuffle items in place and return them."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def shuffled(items: list[T], rng: random.Random) -> list[T]:
    """Return a shuffled copy, leaving the input untouched."""
    return list(fisher_yates(list(items), rng))
