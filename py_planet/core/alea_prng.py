"""
Seedable Alea PRNG used for reproducible generator point sampling.

Based on Johannes Baagøe's Alea algorithm. Seeds may be strings or numbers,
so a planet can be regenerated from a memorable seed such as "terra".
"""

import math


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _make_mash():
    """Create a Mash hash function with its own running state."""
    state = 0xEFC8249D

    def mash(data):
        nonlocal state
        for char in str(data):
            state += ord(char)
            h = 0.02519603282416938 * state
            state = _uint32(h)
            h -= state
            h *= state
            state = _uint32(h)
            h -= state
            state += h * 0x100000000  # 2^32
        return _uint32(state) * 2.3283064365386963e-10  # 2^-32

    return mash


class AleaPRNG:
    """
    Alea PRNG producing floats in [0, 1).

    The same seed always yields the same sequence, which keeps sphere
    sampling (and therefore the whole planet) reproducible.
    """

    def __init__(self, seed):
        """Initialize with a seed string, number or iterable of those."""
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
            self.s0 = self._wrap(self.s0 - mash(arg))
            self.s1 = self._wrap(self.s1 - mash(arg))
            self.s2 = self._wrap(self.s2 - mash(arg))

    @staticmethod
    def _wrap(value):
        return value + 1 if value < 0 else value

    def random(self):
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low, high):
        """Generate a float in [low, high)."""
        return low + (high - low) * self.random()

    def angle(self):
        """Generate an angle in radians in [0, 2*pi)."""
        return self.random() * 2.0 * math.pi
