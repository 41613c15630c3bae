"""
Seeded pseudo-random number generator for world generation.

Mulberry32 is a tiny 32-bit generator with a good distribution for game
content. Every generation request owns its own instance so concurrent
requests never share state, and an identical seed replays an identical
world.
"""

from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & _MASK32


class SeededPRNG:
    """
    Mulberry32 PRNG.

    Produces floats in [0, 1). All other helpers are derived from random()
    so the sequence of draws is fully determined by the seed.
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed (reduced to 32 bits)."""
        self.seed = _uint32(seed)
        self._state = self.seed
        self.call_count = 0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self._state = (self._state + _INCREMENT) & _MASK32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t ^= (t + ((t ^ (t >> 7)) * (t | 61))) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def randint(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("randint() upper bound must be positive")
        return int(self.random() * n)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        if probability >= 1:
            return True
        if probability <= 0:
            return False
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]

    def derive_seed(self) -> int:
        """Draw a 32-bit seed for a dependent generator (e.g. a noise field)."""
        return int(self.random() * _TWO_POW_32) & _MASK32
