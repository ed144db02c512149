"""
Convex hull adapter.

Wraps scipy.spatial.ConvexHull (Qhull) and returns the hull as an index
buffer of triangles, the form the dual graph builder consumes.
"""

import numpy as np
from scipy.spatial import ConvexHull, QhullError
import structlog

logger = structlog.get_logger()

DEFAULT_TOLERANCE = 1e-6


def orient_outward(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Reorder triangle corners so every face normal points away from the origin.

    Qhull does not guarantee a consistent winding for its simplices. The
    hull of points on a sphere always contains the origin, so a face whose
    normal has a negative dot product with its first corner is flipped.

    Args:
        points: (N, 3) point coordinates
        triangles: (T, 3) point indices

    Returns:
        (T, 3) triangles wound counter-clockwise seen from outside
    """
    triangles = np.array(triangles, dtype=np.int64, copy=True)
    if len(triangles) == 0:
        return triangles

    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]]
    c = points[triangles[:, 2]]
    normals = np.cross(b - a, c - a)
    inward = np.einsum("ij,ij->i", normals, a) < 0

    triangles[inward] = triangles[inward][:, [0, 2, 1]]
    return triangles


def build_convex_hull(points: np.ndarray, tolerance: float = DEFAULT_TOLERANCE) -> np.ndarray:
    """
    Build the triangulated convex hull of a point cloud.

    Args:
        points: (N, 3) point coordinates
        tolerance: Qhull pre-merge radius; near-coplanar facets closer than
            this are merged before triangulation

    Returns:
        (T, 3) array of point indices, one row per hull triangle
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Expected an (N, 3) point array, got shape {points.shape}")
    if len(points) < 4:
        raise ValueError(f"A 3D convex hull needs at least 4 points, got {len(points)}")

    try:
        # Qhull may rescale its input buffer in place
        hull = ConvexHull(points.copy(), qhull_options=f"Qc C-{tolerance:g}")
    except QhullError as e:
        raise ValueError(f"Convex hull construction failed: {e}") from e

    triangles = orient_outward(points, hull.simplices)

    logger.debug("Convex hull built", points=len(points), triangles=len(triangles))
    return triangles
