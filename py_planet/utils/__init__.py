"""
Shared utilities.
"""

from .random import set_random_seed, get_prng

__all__ = ['set_random_seed', 'get_prng']
