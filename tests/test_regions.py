"""Tests for the vertex arena and region assembly."""

import pytest
import numpy as np
from scipy.spatial import cKDTree
from py_planet.core.regions import Region, VertexArena, make_regions
from py_planet.core.sphere_sampling import sample_unit_sphere
from py_planet.core.spherical_voronoi import build_spherical_voronoi


class TestVertexArena:
    """Test index-stable vertex storage."""

    def test_append_returns_stable_indices(self):
        arena = VertexArena(np.eye(3))
        assert len(arena) == 3

        indices = [arena.append([i, i, i]) for i in range(40)]
        assert indices == list(range(3, 43))
        # Growth past the initial capacity keeps earlier data intact
        np.testing.assert_array_equal(arena[:3], np.eye(3))
        np.testing.assert_array_equal(arena[42], [39, 39, 39])

    def test_empty(self):
        arena = VertexArena()
        assert len(arena) == 0
        assert arena.positions.shape == (0, 3)

    def test_scale(self):
        arena = VertexArena(np.eye(3))
        arena.scale(np.array([1.0, 2.0, 0.5]))
        np.testing.assert_array_equal(arena.positions, np.diag([1.0, 2.0, 0.5]))

    def test_scale_wrong_length(self):
        arena = VertexArena(np.eye(3))
        with pytest.raises(ValueError):
            arena.scale(np.ones(2))

    def test_to_array_is_a_copy(self):
        arena = VertexArena(np.eye(3))
        snapshot = arena.to_array()
        arena.scale(np.full(3, 2.0))
        np.testing.assert_array_equal(snapshot, np.eye(3))


class TestRegion:
    """Test a single region."""

    @pytest.fixture
    def triangle_region(self):
        arena = VertexArena(np.eye(3))
        return Region.from_boundary(7, [0, 1, 2], arena), arena

    def test_center_vertex_appended(self, triangle_region):
        region, arena = triangle_region
        assert region.center_idx == 3
        assert len(arena) == 4
        np.testing.assert_allclose(arena[3], np.ones(3) / np.sqrt(3))

    def test_minimum_polygon_mesh_data(self, triangle_region):
        """Three boundary vertices still give three edges and three triangles."""
        region, _ = triangle_region
        edges, faces = region.mesh_data()

        assert edges == [(0, 1), (1, 2), (2, 0)]
        assert faces == [(3, 0, 1), (3, 1, 2), (3, 2, 0)]

    def test_vertex_indices(self, triangle_region):
        region, _ = triangle_region
        assert region.vertex_indices() == (0, 1, 2, 3)
        assert region.generator_index == 7
        assert region.elevation_multiplier == 1.0

    def test_too_few_vertices(self):
        arena = VertexArena(np.eye(3))
        with pytest.raises(ValueError):
            Region.from_boundary(0, [0, 1], arena)


class TestMakeRegions:
    """Test region assembly from a Voronoi graph."""

    @pytest.fixture
    def graph(self):
        return build_spherical_voronoi(sample_unit_sphere(150, seed="regions"))

    def test_one_region_per_cell(self, graph):
        arena = VertexArena(graph.vertices)
        regions = make_regions(graph, arena)

        assert len(regions) == len(graph.groups)
        assert len(arena) == len(graph.vertices) + len(regions)
        assert [r.center_idx for r in regions] == list(
            range(len(graph.vertices), len(graph.vertices) + len(regions)))

    def test_boundaries_preserved(self, graph):
        regions = make_regions(graph, VertexArena(graph.vertices))
        for region, group, generator in zip(regions, graph.groups, graph.generator_indices):
            assert list(region.boundary) == group
            assert region.generator_index == generator

    def test_center_inside_own_cell(self, graph):
        """The closest generator to a region center is the one that seeded it."""
        arena = VertexArena(graph.vertices)
        regions = make_regions(graph, arena)

        centers = arena[[r.center_idx for r in regions]]
        _, nearest = cKDTree(graph.points).query(centers)
        np.testing.assert_array_equal(nearest, [r.generator_index for r in regions])

    def test_arena_missing_vertices(self, graph):
        with pytest.raises(ValueError):
            make_regions(graph, VertexArena())
