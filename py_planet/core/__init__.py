"""
Core planet generation functionality.
"""

from .sphere_sampling import sample_unit_sphere
from .convex_hull import build_convex_hull
from .spherical_voronoi import SphericalVoronoiGraph, build_spherical_voronoi
from .relaxation import lloyd_step, relax_points
from .regions import Region, VertexArena, make_regions
from .elevation import ElevationConfig, ElevationSimulator, FractalNoise
from .planet_mesh import PlanetMesh, build_planet_mesh, generate_planet_mesh

__all__ = ['sample_unit_sphere', 'build_convex_hull',
           'SphericalVoronoiGraph', 'build_spherical_voronoi',
           'lloyd_step', 'relax_points',
           'Region', 'VertexArena', 'make_regions',
           'ElevationConfig', 'ElevationSimulator', 'FractalNoise',
           'PlanetMesh', 'build_planet_mesh', 'generate_planet_mesh']
