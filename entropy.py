"""
Entropy providers for shuffling decks and rolling dice.

Every call that needs randomness takes a provider explicitly, so a game
replays bit-for-bit from the same seed. Nothing here touches the global
``random`` module state.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional
import random


class EntropyProvider(ABC):
    """Source of integers for shuffles and dice."""

    @abstractmethod
    def next_int(self, low: int, high: int) -> int:
        """Return an integer N with low <= N < high.

        Args:
            low: Inclusive lower bound
            high: Exclusive upper bound (must be greater than low)

        Returns:
            Integer in [low, high)
        """
        ...


class SeededEntropy(EntropyProvider):
    """Provider backed by a private ``random.Random`` instance."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_int(self, low: int, high: int) -> int:
        if high <= low:
            raise ValueError(f"empty range [{low}, {high})")
        return self._rng.randrange(low, high)


class ScriptedEntropy(EntropyProvider):
    """Replays a fixed sequence of integers, for exact reproduction of a game.

    Each scripted value is clamped into the requested range by taking it
    modulo the range width, so a script written for dice (1-6) also works
    for shuffles of any size.
    """

    def __init__(self, values: Iterable[int]):
        self.values = tuple(values)
        self.position = 0

    def next_int(self, low: int, high: int) -> int:
        if high <= low:
            raise ValueError(f"empty range [{low}, {high})")
        if not self.values:
            return low
        value = self.values[self.position % len(self.values)]
        self.position += 1
        if low <= value < high:
            return value
        return low + (value - low) % (high - low)
