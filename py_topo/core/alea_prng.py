"""
Alea pseudo-random generator used to seed the noise permutation table.

Based on Johannes Baagøe's Alea algorithm. The seed is mashed through its
string form, so any scalar (including 0 and negative floats) produces a
well-mixed internal state.
"""

from typing import MutableSequence


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _make_mash():
    """Create a stateful Mash hash function."""
    mash_n = 0xEFC8249D  # 4022871197

    def mash(data):
        nonlocal mash_n
        for char in str(data):
            mash_n = mash_n + ord(char)
            h = 0.02519603282416938 * mash_n
            mash_n = _uint32(h)
            h -= mash_n
            h *= mash_n
            mash_n = _uint32(h)
            h -= mash_n
            mash_n += h * 0x100000000  # 2^32
        return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

    return mash


class AleaPRNG:
    """
    Seeded random source producing floats in [0, 1).

    Two instances built from the same seed yield the same sequence.
    """

    def __init__(self, seed):
        """Initialize with a seed scalar, string or iterable of either."""
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash = _make_mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def randint(self, upper: int) -> int:
        """Return an integer in [0, upper)."""
        if upper <= 0:
            raise ValueError(f"upper must be positive, got {upper}")
        r = self.random()
        if not 0.0 <= r < 1.0:
            raise ValueError(f"Random source produced {r!r} outside [0, 1)")
        return int(r * upper)

    def shuffle(self, seq: MutableSequence) -> None:
        """
        Shuffle a mutable sequence in place (Fisher-Yates, descending).

        Args:
            seq: Sequence to permute
        """
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(i + 1)
            seq[i], seq[j] = seq[j], seq[i]
