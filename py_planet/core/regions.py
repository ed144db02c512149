"""
Voronoi regions and the shared vertex arena they index into.

Regions never hold vertex coordinates directly. Every position lives in one
VertexArena and regions refer to it by index, so appending center vertices
can never invalidate what a region points at.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .spherical_voronoi import SphericalVoronoiGraph, normalize

logger = structlog.get_logger()


class VertexArena:
    """Growable, index-stable store of 3D vertex positions."""

    def __init__(self, positions: Optional[np.ndarray] = None, capacity: int = 0):
        if positions is None:
            positions = np.empty((0, 3), dtype=np.float64)
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)

        self._size = len(positions)
        self._data = np.empty((max(capacity, self._size, 16), 3), dtype=np.float64)
        self._data[:self._size] = positions

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index):
        return self.positions[index]

    @property
    def positions(self) -> np.ndarray:
        """View of the stored positions."""
        return self._data[:self._size]

    def append(self, position: Sequence[float]) -> int:
        """Store a position and return its permanent index."""
        if self._size == len(self._data):
            grown = np.empty((2 * len(self._data), 3), dtype=np.float64)
            grown[:self._size] = self._data[:self._size]
            self._data = grown

        index = self._size
        self._data[index] = position
        self._size += 1
        return index

    def scale(self, factors: np.ndarray) -> None:
        """Scale every position radially by its own factor, in place."""
        factors = np.asarray(factors, dtype=np.float64)
        if factors.shape != (self._size,):
            raise ValueError(f"Expected {self._size} scale factors, got shape {factors.shape}")
        self._data[:self._size] *= factors[:, None]

    def to_array(self) -> np.ndarray:
        return self.positions.copy()


@dataclass
class Region:
    """One Voronoi cell: an ordered boundary plus a synthesized center vertex."""
    generator_index: int
    boundary: Tuple[int, ...]
    center_idx: int
    elevation_multiplier: float = 1.0

    @classmethod
    def from_boundary(cls, generator_index: int, boundary: Sequence[int],
                      arena: VertexArena) -> "Region":
        """
        Create a region and append its center vertex to the arena.

        The center is the mean of the boundary vertices projected onto the
        unit sphere.
        """
        boundary = tuple(int(i) for i in boundary)
        if len(boundary) < 3:
            raise ValueError(
                f"Region of generator {generator_index} has {len(boundary)} boundary vertices, need at least 3"
            )

        center = normalize(arena.positions[list(boundary)].mean(axis=0))
        center_idx = arena.append(center)
        return cls(generator_index=int(generator_index), boundary=boundary, center_idx=center_idx)

    def vertex_indices(self) -> Tuple[int, ...]:
        """Every vertex this region owns: its boundary followed by its center."""
        return self.boundary + (self.center_idx,)

    def edges(self) -> List[Tuple[int, int]]:
        """Boundary edges, closing the loop from the last vertex to the first."""
        k = len(self.boundary)
        return [(self.boundary[i], self.boundary[(i + 1) % k]) for i in range(k)]

    def fan_triangles(self) -> List[Tuple[int, int, int]]:
        """Triangle fan from the center over every boundary edge."""
        return [(self.center_idx, a, b) for a, b in self.edges()]

    def mesh_data(self) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int, int]]]:
        return self.edges(), self.fan_triangles()


def make_regions(graph: SphericalVoronoiGraph, arena: VertexArena) -> List[Region]:
    """
    Turn the sorted cell boundaries of a Voronoi graph into regions.

    The arena must already hold the graph's Voronoi vertices at indices
    matching ``graph.vertices``. One center vertex per region is appended.

    Args:
        graph: Voronoi graph with sorted boundaries
        arena: Shared vertex arena

    Returns:
        Regions in generator order
    """
    if len(arena) < len(graph.vertices):
        raise ValueError("Vertex arena does not contain the Voronoi vertices")

    regions = [
        Region.from_boundary(generator, group, arena)
        for generator, group in zip(graph.generator_indices, graph.groups)
        if len(group) > 0
    ]

    logger.info("Regions assembled", regions=len(regions), vertices=len(arena))
    return regions
