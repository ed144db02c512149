"""
Elevation simulation for planet regions.

Each region samples multi-octave simplex noise at its center and turns it
into a radial elevation multiplier. Vertices shared between regions are
raised by the average multiplier of every region that owns them, which
keeps the surface closed: neighbouring cells always agree on the height of
their common border.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import opensimplex
import structlog

from .regions import Region, VertexArena

logger = structlog.get_logger()


@dataclass(frozen=True)
class ElevationConfig:
    """Noise and scaling parameters for the elevation simulation."""

    frequency: float = 1.0
    amplitude: float = 1.0
    lacunarity: float = 6.0
    persistence: float = 1.0 / 6.0
    divisor: float = 10.0  # noise in [-1, 1] becomes +/-10% elevation
    octaves: int = 24

    def __post_init__(self):
        if self.octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {self.octaves}")
        if self.divisor == 0:
            raise ValueError("divisor must be non-zero")


class FractalNoise:
    """Fractal (fBm) sum of 3D OpenSimplex noise octaves."""

    def __init__(self, seed: int, frequency: float = 1.0, amplitude: float = 1.0,
                 lacunarity: float = 2.0, persistence: float = 0.5):
        self.seed = seed
        self.frequency = frequency
        self.amplitude = amplitude
        self.lacunarity = lacunarity
        self.persistence = persistence
        self._simplex = opensimplex.OpenSimplex(seed=seed)

    @classmethod
    def from_config(cls, config: ElevationConfig, seed: int) -> "FractalNoise":
        return cls(seed, config.frequency, config.amplitude,
                   config.lacunarity, config.persistence)

    def noise(self, x: float, y: float, z: float) -> float:
        return self._simplex.noise3(x, y, z)

    def fractal(self, octaves: int, x: float, y: float, z: float) -> float:
        """
        Sum ``octaves`` layers of noise and normalise by the total amplitude.

        Each octave multiplies the frequency by the lacunarity and the
        amplitude by the persistence. The result is nominally in [-1, 1].
        """
        output = 0.0
        denom = 0.0
        frequency = self.frequency
        amplitude = self.amplitude

        for _ in range(octaves):
            output += amplitude * self.noise(x * frequency, y * frequency, z * frequency)
            denom += amplitude
            frequency *= self.lacunarity
            amplitude *= self.persistence

        return output / denom


class ElevationSimulator:
    """
    Assigns elevation multipliers to regions and raises the shared vertices.

    Usage:
        simulator = ElevationSimulator(ElevationConfig(), seed=8675309)
        simulator.run(regions, arena)
    """

    def __init__(self, config: Optional[ElevationConfig] = None, seed: int = 0):
        self.config = config or ElevationConfig()
        self.seed = seed
        self.noise = FractalNoise.from_config(self.config, seed)

    def compute_multiplier(self, center: Sequence[float]) -> float:
        x, y, z = (float(c) for c in center)
        value = self.noise.fractal(self.config.octaves, x, y, z)
        return 1.0 + value / self.config.divisor

    def assign_multipliers(self, regions: List[Region], arena: VertexArena) -> None:
        """Set every region's multiplier from the noise at its center vertex."""
        positions = arena.positions
        for region in regions:
            region.elevation_multiplier = self.compute_multiplier(positions[region.center_idx])

    def accumulate(self, regions: List[Region], n_vertices: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Count owners and sum multipliers for every vertex.

        Returns:
            Tuple of (owner_count, multiplier_sum), both of length n_vertices
        """
        owner_count = np.zeros(n_vertices, dtype=np.int64)
        multiplier_sum = np.zeros(n_vertices, dtype=np.float64)

        for region in regions:
            indices = list(region.vertex_indices())
            np.add.at(owner_count, indices, 1)
            np.add.at(multiplier_sum, indices, region.elevation_multiplier)

        return owner_count, multiplier_sum

    def apply(self, regions: List[Region], arena: VertexArena) -> np.ndarray:
        """
        Scale every vertex by the average multiplier of the regions owning it.

        Raises:
            ValueError: If a vertex is owned by no region. The arena is left
                untouched in that case.

        Returns:
            The per-vertex scale factors that were applied
        """
        owner_count, multiplier_sum = self.accumulate(regions, len(arena))

        orphans = np.flatnonzero(owner_count == 0)
        if len(orphans):
            raise ValueError(
                f"{len(orphans)} vertices are not owned by any region (first: {orphans[0]})"
            )

        factors = multiplier_sum / owner_count
        arena.scale(factors)
        return factors

    def run(self, regions: List[Region], arena: VertexArena) -> np.ndarray:
        """Assign multipliers, then apply them to the arena exactly once."""
        self.assign_multipliers(regions, arena)
        factors = self.apply(regions, arena)

        multipliers = [r.elevation_multiplier for r in regions]
        logger.info("Elevation simulation complete",
                    regions=len(regions), seed=self.seed,
                    min_multiplier=float(min(multipliers)) if multipliers else None,
                    max_multiplier=float(max(multipliers)) if multipliers else None)
        return factors
