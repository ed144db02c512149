"""
Planet mesh generation.

Runs the full pipeline: sample generator points, relax them, build the
spherical Voronoi graph, assemble regions, simulate elevation and emit the
index buffers a renderer draws.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import numpy as np
import structlog

from .convex_hull import DEFAULT_TOLERANCE
from .elevation import ElevationConfig, ElevationSimulator
from .regions import Region, VertexArena, make_regions
from .relaxation import relax_points
from .sphere_sampling import sample_unit_sphere
from .spherical_voronoi import SphericalVoronoiGraph, build_spherical_voronoi

logger = structlog.get_logger()


@dataclass
class PlanetMesh:
    """Read-only mesh data for rendering a planet.

    ``vertices`` holds the Voronoi vertices followed by one center vertex per
    region. ``lines`` and ``faces`` index into it. The ``hull_*`` buffers
    describe the convex hull of the final generator points instead.
    """
    vertices: np.ndarray      # (V, 3) float64
    lines: np.ndarray         # (E, 2) int64
    faces: np.ndarray         # (F, 3) int64
    hull_points: np.ndarray   # (N, 3) float64
    hull_indices: np.ndarray  # (3T, 2) int64
    hull_faces: np.ndarray    # (T, 3) int64
    regions: List[Region] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        return {
            "vertices": len(self.vertices),
            "lines": len(self.lines),
            "faces": len(self.faces),
            "regions": len(self.regions),
            "hull_points": len(self.hull_points),
            "hull_faces": len(self.hull_faces),
        }


def assemble_mesh_buffers(regions: List[Region]):
    """
    Concatenate every region's boundary edges and fan triangles.

    Returns:
        Tuple of (lines (E, 2), faces (F, 3)) integer arrays
    """
    lines = []
    faces = []
    for region in regions:
        region_lines, region_faces = region.mesh_data()
        lines.extend(region_lines)
        faces.extend(region_faces)

    return (np.array(lines, dtype=np.int64).reshape(-1, 2),
            np.array(faces, dtype=np.int64).reshape(-1, 3))


def mesh_from_graph(graph: SphericalVoronoiGraph, noise_seed: int,
                    elevation_config: Optional[ElevationConfig] = None) -> PlanetMesh:
    """
    Assemble regions, simulate elevation and build the planet mesh.

    Args:
        graph: Voronoi graph of the final generator points, with sorted boundaries
        noise_seed: Seed for the elevation noise
        elevation_config: Noise parameters, defaults to ElevationConfig()

    Returns:
        PlanetMesh
    """
    arena = VertexArena(graph.vertices, capacity=len(graph.vertices) + len(graph.groups))
    regions = make_regions(graph, arena)

    simulator = ElevationSimulator(elevation_config, seed=noise_seed)
    simulator.run(regions, arena)

    lines, faces = assemble_mesh_buffers(regions)

    return PlanetMesh(
        vertices=arena.to_array(),
        lines=lines,
        faces=faces,
        hull_points=graph.points.copy(),
        hull_indices=graph.hull_edges(),
        hull_faces=graph.hull_faces(),
        regions=regions,
    )


def build_planet_mesh(points: np.ndarray, noise_seed: int, iterations: int = 1,
                      tolerance: float = DEFAULT_TOLERANCE,
                      elevation_config: Optional[ElevationConfig] = None) -> PlanetMesh:
    """
    Build a planet mesh from existing generator points.

    Args:
        points: (N, 3) unit vectors
        noise_seed: Seed for the elevation noise
        iterations: Lloyd relaxation steps applied before building the graph
        tolerance: Convex hull merge tolerance
        elevation_config: Noise parameters

    Returns:
        PlanetMesh
    """
    points = np.asarray(points, dtype=np.float64)
    if iterations:
        points = relax_points(points, iterations, tolerance)

    logger.info("Generating Voronoi regions", generators=len(points))
    graph = build_spherical_voronoi(points, tolerance)

    mesh = mesh_from_graph(graph, noise_seed, elevation_config)
    logger.info("Planet mesh generated", **mesh.summary())
    return mesh


def generate_planet_mesh(num_points: int, noise_seed: int, iterations: int = 1,
                         point_seed: Optional[Union[str, int]] = None,
                         tolerance: float = DEFAULT_TOLERANCE,
                         elevation_config: Optional[ElevationConfig] = None) -> PlanetMesh:
    """
    Generate a planet from scratch.

    This is the main entry point: sample ``num_points`` generator points,
    then run build_planet_mesh() on them.

    Args:
        num_points: Number of generator points (one region each)
        noise_seed: Seed for the elevation noise
        iterations: Lloyd relaxation steps
        point_seed: Seed for point sampling; None uses the shared PRNG
        tolerance: Convex hull merge tolerance
        elevation_config: Noise parameters

    Returns:
        PlanetMesh
    """
    logger.info("Generating planet", num_points=num_points,
                noise_seed=noise_seed, iterations=iterations, point_seed=point_seed)

    points = sample_unit_sphere(num_points, point_seed)
    return build_planet_mesh(points, noise_seed, iterations, tolerance, elevation_config)
