"""
Random number generation utilities.

Point sampling draws from a shared Alea PRNG so that a whole planet can be
reproduced from its seed. Python's random and NumPy's random are not used
for generator points.
"""

from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng = None


def set_random_seed(seed: Union[str, int]) -> None:
    """
    Reseed the shared Alea PRNG.

    Args:
        seed: Seed string or number
    """
    global _prng
    _prng = AleaPRNG(seed)


def get_prng(seed: Optional[Union[str, int]] = None) -> AleaPRNG:
    """
    Get a PRNG for sampling.

    A seed gives a fresh, independent generator; without one the shared
    instance is returned (created with the "default" seed on first use).

    Returns:
        AleaPRNG instance
    """
    global _prng
    if seed is not None:
        return AleaPRNG(seed)
    if _prng is None:
        _prng = AleaPRNG("default")
    return _prng
