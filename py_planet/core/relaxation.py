"""Lloyd relaxation of generator points on the unit sphere."""

import numpy as np
import structlog

from .convex_hull import DEFAULT_TOLERANCE
from .spherical_voronoi import build_spherical_voronoi, normalize_rows

logger = structlog.get_logger()


def lloyd_step(points: np.ndarray, tolerance: float = DEFAULT_TOLERANCE) -> np.ndarray:
    """
    Move every generator point to the centroid of its Voronoi cell.

    The centroid is the mean of the cell's boundary vertices, projected back
    onto the sphere. A generator without a cell keeps its position, so the
    output is always index-aligned with the input.

    Args:
        points: (N, 3) generator points

    Returns:
        New (N, 3) array; the input is not modified
    """
    graph = build_spherical_voronoi(points, tolerance, sort_boundaries=False)

    relaxed = np.array(points, dtype=np.float64, copy=True)
    if graph.groups:
        relaxed[graph.generator_indices] = normalize_rows(graph.cell_centers())
    return relaxed


def relax_points(points: np.ndarray, iterations: int = 1,
                 tolerance: float = DEFAULT_TOLERANCE) -> np.ndarray:
    """Apply a fixed number of Lloyd relaxation steps.

    There is no convergence check: exactly ``iterations`` steps are run,
    each one rebuilding the hull from the previous step's output.

    Args:
        points: (N, 3) generator points
        iterations: Number of relaxation steps, 0 returns an unchanged copy
        tolerance: Convex hull merge tolerance

    Returns:
        Relaxed point coordinates
    """
    if iterations < 0:
        raise ValueError(f"Relaxation iterations must be >= 0, got {iterations}")

    logger.info("Starting Lloyd's relaxation", iterations=iterations, points=len(points))

    relaxed = np.array(points, dtype=np.float64, copy=True)
    for iteration in range(iterations):
        relaxed = lloyd_step(relaxed, tolerance)
        logger.info("Relaxation iteration complete", iteration=iteration + 1)

    return relaxed
