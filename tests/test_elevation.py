"""Tests for the elevation simulation."""

import pytest
import numpy as np
from py_planet.core.elevation import ElevationConfig, ElevationSimulator, FractalNoise
from py_planet.core.regions import Region, VertexArena, make_regions
from py_planet.core.sphere_sampling import sample_unit_sphere
from py_planet.core.spherical_voronoi import build_spherical_voronoi


@pytest.fixture(scope="module")
def graph():
    return build_spherical_voronoi(sample_unit_sphere(120, seed="elevation"))


def assemble(graph):
    arena = VertexArena(graph.vertices)
    return make_regions(graph, arena), arena


class TestElevationConfig:
    """Test elevation parameters."""

    def test_defaults(self):
        config = ElevationConfig()
        assert config.frequency == 1.0
        assert config.amplitude == 1.0
        assert config.lacunarity == 6.0
        assert config.persistence == pytest.approx(1 / 6)
        assert config.divisor == 10.0
        assert config.octaves == 24

    def test_invalid(self):
        with pytest.raises(ValueError):
            ElevationConfig(octaves=0)
        with pytest.raises(ValueError):
            ElevationConfig(divisor=0)


class TestFractalNoise:
    """Test multi-octave noise."""

    def test_deterministic(self):
        a = FractalNoise(seed=5, lacunarity=6.0, persistence=1 / 6)
        b = FractalNoise(seed=5, lacunarity=6.0, persistence=1 / 6)
        assert a.fractal(24, 0.3, -0.2, 0.9) == b.fractal(24, 0.3, -0.2, 0.9)

    def test_seed_changes_field(self):
        a = FractalNoise(seed=1)
        b = FractalNoise(seed=2)
        samples = sample_unit_sphere(20, seed="noise")
        assert [a.fractal(4, *p) for p in samples] != [b.fractal(4, *p) for p in samples]

    def test_single_octave_is_plain_noise(self):
        noise = FractalNoise(seed=3, frequency=2.0, amplitude=0.5)
        assert noise.fractal(1, 0.1, 0.2, 0.3) == pytest.approx(noise.noise(0.2, 0.4, 0.6))

    def test_range(self):
        noise = FractalNoise(seed=11, lacunarity=6.0, persistence=1 / 6)
        values = [noise.fractal(8, *p) for p in sample_unit_sphere(200, seed="range")]
        assert min(values) >= -1.0
        assert max(values) <= 1.0


class TestElevationSimulator:
    """Test multiplier assignment and vertex scaling."""

    def test_default_config(self):
        simulator = ElevationSimulator()
        assert simulator.config == ElevationConfig()
        assert simulator.seed == 0

    def test_multipliers_within_ten_percent(self, graph):
        regions, arena = assemble(graph)
        ElevationSimulator(seed=8675309).assign_multipliers(regions, arena)

        multipliers = np.array([r.elevation_multiplier for r in regions])
        assert np.all(np.abs(multipliers - 1.0) <= 0.1)
        assert len(np.unique(multipliers)) > 1

    def test_divisor_scales_variation(self, graph):
        regions, arena = assemble(graph)
        ElevationSimulator(ElevationConfig(divisor=10.0), seed=1).assign_multipliers(regions, arena)
        ten = np.array([r.elevation_multiplier for r in regions])
        ElevationSimulator(ElevationConfig(divisor=20.0), seed=1).assign_multipliers(regions, arena)
        twenty = np.array([r.elevation_multiplier for r in regions])

        np.testing.assert_allclose(twenty - 1.0, (ten - 1.0) / 2, atol=1e-12)

    def test_accumulate_counts_owners(self, graph):
        regions, arena = assemble(graph)
        simulator = ElevationSimulator(seed=0)
        simulator.assign_multipliers(regions, arena)
        owner_count, multiplier_sum = simulator.accumulate(regions, len(arena))

        n_dual = len(graph.vertices)
        np.testing.assert_array_equal(owner_count[:n_dual], 3)
        np.testing.assert_array_equal(owner_count[n_dual:], 1)
        for region in regions:
            assert multiplier_sum[region.center_idx] == region.elevation_multiplier

    def test_radial_scale_is_average_multiplier(self, graph):
        regions, arena = assemble(graph)
        original = arena.to_array()
        simulator = ElevationSimulator(seed=42)
        simulator.assign_multipliers(regions, arena)
        owner_count, multiplier_sum = simulator.accumulate(regions, len(arena))

        factors = simulator.apply(regions, arena)

        np.testing.assert_allclose(factors, multiplier_sum / owner_count)
        ratio = np.linalg.norm(arena.positions, axis=1) / np.linalg.norm(original, axis=1)
        np.testing.assert_allclose(ratio, factors)
        # Directions are unchanged
        np.testing.assert_allclose(
            arena.positions / np.linalg.norm(arena.positions, axis=1, keepdims=True),
            original, atol=1e-12)

    def test_deterministic(self, graph):
        results = []
        for _ in range(2):
            regions, arena = assemble(graph)
            ElevationSimulator(seed=99).run(regions, arena)
            results.append(([r.elevation_multiplier for r in regions], arena.to_array()))

        assert results[0][0] == results[1][0]
        np.testing.assert_array_equal(results[0][1], results[1][1])

    def test_unowned_vertex_fails_fast(self):
        arena = VertexArena(np.vstack([np.eye(3), [[0.0, 0.0, -1.0]]]))
        region = Region.from_boundary(0, [0, 1, 2], arena)
        before = arena.to_array()

        with pytest.raises(ValueError, match="not owned"):
            ElevationSimulator(seed=0).run([region], arena)
        np.testing.assert_array_equal(arena.positions, before)
