"""
Seed source for "new map" requests.

Terrain seeds are drawn from a process-wide Alea PRNG so that a run can be
replayed by fixing the source seed with ``set_random_seed``.
"""

import os
import time

from ..core.alea_prng import AleaPRNG

# Seeds are drawn in [0, SEED_RANGE)
SEED_RANGE = 1000.0

# Global PRNG instance
_prng = None


def set_random_seed(seed) -> None:
    """
    Fix the source used by ``next_seed``.

    Args:
        seed: Seed for the process-wide Alea PRNG
    """
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the process-wide PRNG, creating a time-seeded one on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = AleaPRNG([time.time_ns(), os.getpid()])
    return _prng


def next_seed() -> float:
    """Draw a fresh terrain seed in [0, 1000)."""
    return get_prng().random() * SEED_RANGE
