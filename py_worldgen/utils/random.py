"""
Random number generation utilities.

Generation code never touches Python's global random module or NumPy's
global generator: every request seeds its own SeededPRNG from
resolve_seed(), so two requests can run side by side without interfering.
"""

import secrets
from typing import Optional

from ..core.prng import SeededPRNG


def resolve_seed(seed: Optional[int] = None) -> int:
    """
    Return the seed to use for a generation request.

    Args:
        seed: Explicit seed, or None for a non-deterministic one

    Returns:
        32-bit unsigned integer seed
    """
    if seed is None:
        return secrets.randbits(32)
    return int(seed) & 0xFFFFFFFF


def create_prng(seed: Optional[int] = None) -> SeededPRNG:
    """Create a fresh PRNG for one generation request."""
    return SeededPRNG(resolve_seed(seed))
