"""Injectable random sources for sequencing and puzzle selection."""

import random
from typing import Iterable, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def next(self) -> float:
        ...


class SystemRandomSource:
    """Random source backed by Python's Mersenne Twister."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()


class SequenceRandomSource:
    """Replays a fixed sequence of draws, cycling when exhausted.

    Used to reproduce exact puzzle and shuffle decisions in tests.
    """

    def __init__(self, values: Iterable[float]):
        self._values: List[float] = list(values)
        if not self._values:
            raise ValueError("SequenceRandomSource needs at least one value")
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Random draw out of range [0, 1): {value}")
        self._index = 0

    def next(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value

    @property
    def draws(self) -> int:
        """Number of values consumed so far."""
        return self._index


def random_index(source: RandomSource, length: int) -> int:
    """Draw a uniform index in [0, length)."""
    return min(int(source.next() * length), length - 1)


def shuffle(items: List[T], source: RandomSource) -> List[T]:
    """Return a Fisher-Yates shuffled copy of items."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = random_index(source, i + 1)
        result[i], result[j] = result[j], result[i]
    return result
