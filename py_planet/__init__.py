"""
Procedural planet mesh generation from spherical Voronoi diagrams.
"""

__version__ = "0.1.0"
