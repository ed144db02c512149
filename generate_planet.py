#!/usr/bin/env python3
"""
Generate a planet mesh and optionally render it.

Usage:
    python generate_planet.py [-n POINTS] [-s SEED] [--hull] [--output planet.png] [--show]

Defaults come from py_planet.config.settings (PLANET_* environment variables).
"""

import argparse
import logging
import sys

import numpy as np
import structlog

from py_planet.config import settings
from py_planet.core.planet_mesh import PlanetMesh, generate_planet_mesh


def configure_logging(level: str, log_format: str) -> None:
    """Route structlog through the stdlib logger at the given level."""
    renderers = {
        "json": structlog.processors.JSONRenderer,
        "console": structlog.dev.ConsoleRenderer,
    }
    if log_format not in renderers:
        raise ValueError(f"Unknown log format {log_format!r}, expected one of {sorted(renderers)}")
    renderer = renderers[log_format]()

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def render_planet(mesh: PlanetMesh, show_hull: bool = False, output=None, show: bool = False):
    """Draw the planet (or its generator hull) with matplotlib."""
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d.art3d import Poly3DCollection

    fig = plt.figure(figsize=(10, 10))
    ax = fig.add_subplot(111, projection="3d")

    if show_hull:
        triangles = mesh.hull_points[mesh.hull_faces]
        collection = Poly3DCollection(triangles, facecolors="lightgray",
                                      edgecolors="black", linewidths=0.2)
        title = f"Convex hull ({len(mesh.hull_points)} generator points)"
    else:
        triangles = mesh.vertices[mesh.faces]
        # Colour each fan triangle by the radial height of its center vertex
        heights = np.linalg.norm(mesh.vertices[mesh.faces[:, 0]], axis=1)
        norm = plt.Normalize(heights.min(), heights.max())
        collection = Poly3DCollection(triangles, facecolors=plt.cm.terrain(norm(heights)),
                                      linewidths=0)
        title = f"Planet ({len(mesh.regions)} regions)"

    ax.add_collection3d(collection)
    ax.set_xlim(-1.1, 1.1)
    ax.set_ylim(-1.1, 1.1)
    ax.set_zlim(-1.1, 1.1)
    ax.set_box_aspect((1, 1, 1))
    ax.set_axis_off()
    ax.set_title(title)

    if output:
        plt.savefig(output, dpi=150, bbox_inches="tight")
        print(f"Saved render to {output}")
    if show:
        plt.show()
    plt.close(fig)


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Generate a procedural planet mesh")
    parser.add_argument("-n", "--points", type=int, default=settings.num_points,
                        help="Number of Voronoi regions, between 500 and 100000")
    parser.add_argument("-s", "--seed", type=int, default=settings.noise_seed,
                        help="Seed for the height noise function, between 0 and 4,294,967,295")
    parser.add_argument("--point-seed", default=settings.point_seed,
                        help="Seed for generator point sampling")
    parser.add_argument("--iterations", type=int, default=settings.relax_iterations,
                        help="Lloyd relaxation iterations")
    parser.add_argument("-l", "--hull", action="store_true",
                        help="Render the convex hull of the generator points instead of the planet")
    parser.add_argument("-o", "--output", help="Save a PNG render to this path")
    parser.add_argument("--show", action="store_true", help="Open an interactive window")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args()

    if not 500 <= args.points <= 100000:
        parser.error("--points must be between 500 and 100000")
    if not 0 <= args.seed <= 4294967295:
        parser.error("--seed must be between 0 and 4294967295")
    if args.iterations < 0:
        parser.error("--iterations must be >= 0")

    configure_logging(args.log_level, settings.log_format)

    mesh = generate_planet_mesh(
        args.points,
        args.seed,
        iterations=args.iterations,
        point_seed=args.point_seed,
        tolerance=settings.hull_tolerance,
    )

    print("Planet generated:")
    for key, value in mesh.summary().items():
        print(f"  {key}: {value}")

    if args.output or args.show:
        render_planet(mesh, show_hull=args.hull, output=args.output, show=args.show)


if __name__ == "__main__":
    main()
