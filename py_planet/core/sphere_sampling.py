"""Generator point sampling on the unit sphere."""

from typing import Optional, Union

import numpy as np
import structlog

from ..utils.random import get_prng

logger = structlog.get_logger()


def sample_unit_sphere(n: int, seed: Optional[Union[str, int]] = None) -> np.ndarray:
    """
    Draw n points uniformly over the surface of the unit sphere.

    Uses the analytic method: z is uniform in [-1, 1] and the azimuth is
    uniform in [0, 2*pi). By Archimedes' hat-box theorem this gives equal
    area density everywhere, so the poles are not over-sampled.

    Args:
        n: Number of points
        seed: Optional seed; without one the shared PRNG is used

    Returns:
        Array of shape (n, 3) holding unit vectors
    """
    if n < 0:
        raise ValueError(f"Cannot sample a negative number of points: {n}")

    prng = get_prng(seed)

    points = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        z = prng.uniform(-1.0, 1.0)
        phi = prng.angle()
        r = np.sqrt(max(0.0, 1.0 - z * z))
        points[i] = (r * np.cos(phi), r * np.sin(phi), z)

    logger.debug("Sampled generator points", count=n, seed=seed)
    return points
