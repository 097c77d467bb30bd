"""Random sources for symbol generation."""
import random
import secrets
from abc import ABC, abstractmethod
from typing import Sequence, TypeVar


T = TypeVar("T")


class RNGBase(ABC):
    """Abstract RNG interface. Each engine owns its own instance."""

    @abstractmethod
    def randint(self, a: int, b: int) -> int:
        """Return random int in [a, b] inclusive."""
        pass

    def choice(self, values: Sequence[T]) -> T:
        """Pick one entry with flat probability per entry."""
        if not values:
            raise IndexError("Cannot choose from an empty sequence")
        return values[self.randint(0, len(values) - 1)]


class ProductionRNG(RNGBase):
    """
    Production RNG.

    Uses cryptographically secure source, no fixed seed.
    """

    def randint(self, a: int, b: int) -> int:
        return secrets.randbelow(b - a + 1) + a


class SeededRNG(RNGBase):
    """
    Test/Simulation RNG.

    Deterministic, fully controlled by seed.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)
