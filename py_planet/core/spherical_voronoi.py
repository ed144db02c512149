"""Spherical Voronoi graph built as the dual of a convex hull.

Points on the unit sphere are all extreme points of their convex hull, and
the hull triangles are exactly the spherical Delaunay triangles. Each
triangle therefore contributes one Voronoi vertex (its circumcenter pushed
out to the sphere), and the triangles around a generator point bound that
point's Voronoi cell.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import structlog

from .convex_hull import DEFAULT_TOLERANCE, build_convex_hull

logger = structlog.get_logger()

# |det(A)| at or below this is treated as "triangle coplanar with origin"
DEGENERATE_DET_EPS = 1e-12
# dot(x1, x2) at or below -1 + this is treated as antiparallel
ANTIPARALLEL_EPS = 1e-12


def normalize(v: np.ndarray) -> np.ndarray:
    """Return v scaled to unit length; the zero vector is returned unchanged."""
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v
    return v / norm


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Normalize each row of an (N, 3) array, leaving zero rows untouched."""
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    norms[norms == 0.0] = 1.0
    return vectors / norms


@dataclass
class SphericalVoronoiGraph:
    """Voronoi diagram of generator points on the unit sphere.

    ``groups[k]`` lists the vertex ids bounding the cell of generator
    ``generator_indices[k]``. Vertex ``t`` is the dual of hull triangle ``t``.
    """
    points: np.ndarray             # (N, 3) generator points
    triangles: np.ndarray          # (T, 3) hull triangles as point indices
    vertices: np.ndarray           # (T, 3) Voronoi vertices on the sphere
    generator_indices: np.ndarray  # (R,) generator owning each group
    groups: List[List[int]]        # boundary vertex ids per cell

    def cell_centers(self) -> np.ndarray:
        """Mean of each cell's boundary vertices (not projected to the sphere)."""
        if not self.groups:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([self.vertices[group].mean(axis=0) for group in self.groups])

    def hull_edges(self) -> np.ndarray:
        """Three edges per hull triangle, in triangle order."""
        t = self.triangles
        edges = np.stack([t[:, [0, 1]], t[:, [1, 2]], t[:, [2, 0]]], axis=1)
        return edges.reshape(-1, 2)

    def hull_faces(self) -> np.ndarray:
        return self.triangles.copy()


def _planar_circumcenter(x1: np.ndarray, x2: np.ndarray, x3: np.ndarray) -> np.ndarray:
    """Circumcenter direction for a triangle whose plane contains the origin."""
    if np.dot(x1, x2) <= -1.0 + ANTIPARALLEL_EPS:
        x2 = x3

    a = np.cross(x1, x2)
    denom = 2.0 * np.dot(a, a)
    return (np.cross(a, x1) + np.cross(-a, x2)) / denom


def compute_circumcenters(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Compute one Voronoi vertex per hull triangle.

    For a triangle (x1, x2, x3) the circumcenter c of the tetrahedron it
    forms with the origin solves A c = 0.5 * (|x1|^2, |x2|^2, |x3|^2) where
    A has rows x1, x2, x3. When A is singular the triangle and the origin
    are coplanar and the planar circumcenter formula is used instead.

    Args:
        points: (N, 3) generator points
        triangles: (T, 3) hull triangles

    Returns:
        (T, 3) unit vectors, in triangle order
    """
    triangles = np.asarray(triangles, dtype=np.int64)
    if len(triangles) == 0:
        return np.empty((0, 3), dtype=np.float64)

    A = points[triangles]
    dets = np.linalg.det(A)
    b = 0.5 * np.einsum("tij,tij->ti", A, A)

    centers = np.empty((len(triangles), 3), dtype=np.float64)
    regular = np.abs(dets) > DEGENERATE_DET_EPS
    if np.any(regular):
        centers[regular] = np.linalg.solve(A[regular], b[regular][..., None])[..., 0]

    degenerate = np.flatnonzero(~regular)
    for t in degenerate:
        centers[t] = _planar_circumcenter(*A[t])
    if len(degenerate):
        logger.debug("Degenerate hull triangles", count=len(degenerate))

    return normalize_rows(centers)


def build_associations(triangles: np.ndarray) -> np.ndarray:
    """
    Pair every hull triangle with each of its three generator points.

    Returns:
        (3T, 2) array of (generator, triangle) rows sorted by generator,
        then by triangle
    """
    triangles = np.asarray(triangles, dtype=np.int64)
    generators = triangles.reshape(-1)
    tri_ids = np.repeat(np.arange(len(triangles), dtype=np.int64), 3)

    order = np.lexsort((tri_ids, generators))
    return np.column_stack((generators[order], tri_ids[order]))


def group_associations(associations: np.ndarray) -> Tuple[np.ndarray, List[List[int]]]:
    """
    Split sorted associations into one run per generator point.

    Generators that never appear (no incident hull triangle) get no group.

    Returns:
        Tuple of (generator index per group, triangle ids per group)
    """
    if len(associations) == 0:
        return np.empty(0, dtype=np.int64), []

    generators = associations[:, 0]
    starts = np.flatnonzero(np.diff(generators)) + 1
    runs = np.split(associations[:, 1], starts)
    generator_indices = generators[np.concatenate(([0], starts))]

    return generator_indices, [run.tolist() for run in runs]


def boundary_sort_keys(vertices: np.ndarray, group: List[int]) -> List[Tuple[int, float]]:
    """
    Precompute the angular sort key of every vertex in a cell boundary.

    The first vertex is the reference ("top"). Every other vertex is
    classified counter-clockwise or clockwise from the reference, seen from
    outside the sphere, and carries the cosine of its angle to the reference
    measured around the unnormalised cell center.

    Key layout: (0, 0) for the reference, (1, -cos) for counter-clockwise
    vertices, (2, cos) for clockwise ones. Ascending order then walks the
    boundary in one rotational direction starting at the reference.
    """
    polygon = vertices[group]
    center = polygon.mean(axis=0)
    inward = normalize(center - normalize(center))
    up = normalize(polygon[0] - center)

    keys = [(0, 0.0)]
    for point in polygon[1:]:
        direction = normalize(point - center)
        normal = normalize(np.cross(up, direction))
        cos_angle = float(np.dot(up, direction))

        if np.dot(normal, inward) < 0.0:
            keys.append((1, -cos_angle))
        else:
            keys.append((2, cos_angle))

    return keys


def sort_cell_boundary(vertices: np.ndarray, group: List[int]) -> List[int]:
    """Order a cell's boundary vertices into a simple polygon, reference first."""
    keys = boundary_sort_keys(vertices, group)
    order = sorted(range(len(group)), key=keys.__getitem__)
    return [group[i] for i in order]


def build_spherical_voronoi(points: np.ndarray, tolerance: float = DEFAULT_TOLERANCE,
                            sort_boundaries: bool = True) -> SphericalVoronoiGraph:
    """
    Build the spherical Voronoi graph of generator points.

    Args:
        points: (N, 3) unit vectors
        tolerance: Convex hull merge tolerance
        sort_boundaries: Order each cell boundary cyclically. Relaxation only
            needs cell centroids and skips this.

    Returns:
        SphericalVoronoiGraph
    """
    points = np.asarray(points, dtype=np.float64)

    triangles = build_convex_hull(points, tolerance)
    vertices = compute_circumcenters(points, triangles)

    associations = build_associations(triangles)
    generator_indices, groups = group_associations(associations)

    if sort_boundaries:
        groups = [sort_cell_boundary(vertices, group) for group in groups]

    dropped = len(points) - len(groups)
    logger.info("Spherical Voronoi graph built",
                generators=len(points), triangles=len(triangles),
                cells=len(groups), dropped_generators=dropped)

    return SphericalVoronoiGraph(
        points=points,
        triangles=triangles,
        vertices=vertices,
        generator_indices=generator_indices,
        groups=groups,
    )
