"""Tests for the plane-grid terrain mesh."""

import numpy as np
import pytest
from py_topo.core import heightfield as heightfield_module
from py_topo.core.heightfield import height
from py_topo.core.noise import build_permutation_table
from py_topo.core.terrain_mesh import build_plane_grid
from py_topo.exceptions import NonFiniteInputError


class TestBuildPlaneGrid:
    """Test grid construction."""

    def test_counts(self):
        """Test vertex and triangle counts for a 3x3 grid."""
        mesh = build_plane_grid(10, 10, 3, 3)
        assert mesh.vertex_count == 16
        assert mesh.triangle_count == 18
        assert mesh.stride == 3

    def test_rectangular_counts(self):
        """Test counts when segment numbers differ."""
        mesh = build_plane_grid(4, 2, 4, 2)
        assert mesh.vertex_count == 15
        assert mesh.triangle_count == 16

    def test_single_cell_layout(self):
        """Test vertex order and winding for one cell."""
        mesh = build_plane_grid(2, 2, 1, 1)
        np.testing.assert_array_equal(
            mesh.positions,
            [[-1, 1, 0], [1, 1, 0], [-1, -1, 0], [1, -1, 0]],
        )
        np.testing.assert_array_equal(mesh.indices, [[0, 2, 1], [2, 3, 1]])

    def test_counter_clockwise_winding(self):
        """Test that every triangle winds counter-clockwise seen from +z."""
        mesh = build_plane_grid(6, 4, 3, 2)
        p = mesh.positions[mesh.indices]
        cross = (p[:, 1, 0] - p[:, 0, 0]) * (p[:, 2, 1] - p[:, 0, 1]) - (
            p[:, 2, 0] - p[:, 0, 0]
        ) * (p[:, 1, 1] - p[:, 0, 1])
        assert np.all(cross > 0)

    def test_extent(self):
        """Test that the grid is centred on the origin."""
        mesh = build_plane_grid(10, 6, 5, 3)
        assert mesh.positions[:, 0].min() == pytest.approx(-5)
        assert mesh.positions[:, 0].max() == pytest.approx(5)
        assert mesh.positions[:, 1].min() == pytest.approx(-3)
        assert mesh.positions[:, 1].max() == pytest.approx(3)
        assert np.all(mesh.positions[:, 2] == 0)

    def test_indices_in_range(self):
        """Test that indices reference existing vertices."""
        mesh = build_plane_grid(10, 10, 7, 5)
        assert mesh.indices.min() == 0
        assert mesh.indices.max() == mesh.vertex_count - 1

    @pytest.mark.parametrize("segments", [0, -1, 2.5, True])
    def test_invalid_segments(self, segments):
        """Test that segment counts must be positive integers."""
        with pytest.raises(ValueError):
            build_plane_grid(10, 10, segments, 3)

    @pytest.mark.parametrize("size", [0, -2.0, float("inf"), float("nan")])
    def test_invalid_size(self, size):
        """Test that dimensions must be positive and finite."""
        with pytest.raises(ValueError):
            build_plane_grid(size, 10, 3, 3)


class TestPopulateHeights:
    """Test elevation synthesis on the mesh."""

    @pytest.fixture
    def mesh(self):
        return build_plane_grid(10, 10, 3, 3)

    def test_heights_match_synthesizer(self, mesh):
        """Test that each vertex z equals the synthesized height."""
        table = build_permutation_table(12.0)
        mesh.populate_heights(table, 12.0)
        for i in range(mesh.vertex_count):
            x, y, z = mesh.vertex(i)
            assert z == pytest.approx(height(table, x, y, 12.0), abs=1e-12)

    def test_topology_invariant(self, mesh):
        """Test that five regenerations change only z."""
        indices_before = mesh.indices.tobytes()
        xy_before = mesh.positions[:, :2].copy()

        for seed in (1.0, 2.0, 3.0, 4.0, 5.0):
            mesh.populate_heights(build_permutation_table(seed), seed)

        assert mesh.indices.tobytes() == indices_before
        assert mesh.triangle_count == 18
        np.testing.assert_array_equal(mesh.positions[:, :2], xy_before)

    def test_seeds_give_different_heights(self, mesh):
        """Test that distinct seeds produce distinct height fields."""
        mesh.populate_heights(build_permutation_table(1.0), 1.0)
        first = mesh.heights.copy()
        mesh.populate_heights(build_permutation_table(2.0), 2.0)
        assert not np.array_equal(first, mesh.heights)

    def test_dirty_flag_and_version(self, mesh):
        """Test that a rebuild marks geometry dirty."""
        assert not mesh.needs_update
        mesh.populate_heights(build_permutation_table(1.0), 1.0)
        assert mesh.needs_update
        assert mesh.version == 1
        assert mesh.seed == 1.0

        mesh.mark_clean()
        assert not mesh.needs_update
        mesh.populate_heights(build_permutation_table(2.0), 2.0)
        assert mesh.needs_update
        assert mesh.version == 2

    def test_heights_view_read_only(self, mesh):
        """Test that elevations cannot be written through the heights view."""
        with pytest.raises(ValueError):
            mesh.heights[0] = 1.0

    def test_non_finite_seed_keeps_heights(self, mesh):
        """Test that a bad seed leaves the previous height field in place."""
        mesh.populate_heights(build_permutation_table(1.0), 1.0)
        before = mesh.positions.copy()

        with pytest.raises(NonFiniteInputError):
            mesh.populate_heights(build_permutation_table(1.0), float("nan"))

        np.testing.assert_array_equal(mesh.positions, before)
        assert mesh.version == 1
        assert mesh.seed == 1.0

    def test_non_numeric_seed_keeps_heights(self, mesh):
        """Test that a seed that is not a number is rejected before any write."""
        mesh.populate_heights(build_permutation_table(1.0), 1.0)
        before = mesh.positions.copy()

        with pytest.raises(NonFiniteInputError):
            mesh.populate_heights(build_permutation_table(1.0), "hills")

        np.testing.assert_array_equal(mesh.positions, before)
        assert mesh.version == 1

    def test_huge_seed(self, mesh):
        """Test that a finite seed near the float limit populates finite heights."""
        mesh.populate_heights(build_permutation_table(1.7e308), 1.7e308)
        assert np.all(np.isfinite(mesh.heights))
        assert mesh.version == 1

    def test_non_finite_result_keeps_heights(self, mesh, monkeypatch):
        """Test that a partially bad height pass is not applied."""
        mesh.populate_heights(build_permutation_table(1.0), 1.0)
        before = mesh.positions.copy()

        def corrupt(table, xs, ys, seed, config):
            values = np.zeros(len(xs))
            values[5] = np.inf
            return values

        monkeypatch.setattr(heightfield_module, "heights", corrupt)
        with pytest.raises(NonFiniteInputError) as excinfo:
            mesh.populate_heights(build_permutation_table(2.0), 2.0)

        assert excinfo.value.index == 5
        np.testing.assert_array_equal(mesh.positions, before)
