"""Tests for triangle visibility."""

import numpy as np
import pytest
from py_topo.core.projection import ProjectedPoint
from py_topo.core.visibility import VisibilityFilter, VisibilityMode, is_visible


def _pt(depth, x=10.0, y=10.0):
    return ProjectedPoint(x, y, depth)


class TestIsVisible:
    """Test the baseline depth test."""

    def test_all_in_front(self):
        assert is_visible(_pt(0.5), _pt(0.5), _pt(0.999))

    def test_one_at_far_plane(self):
        """Test that depth exactly 1 excludes the triangle."""
        assert not is_visible(_pt(0.5), _pt(0.5), _pt(1.0))

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_any_vertex_beyond(self, position):
        """Test that a single far vertex hides the triangle wherever it is."""
        points = [_pt(0.2), _pt(0.2), _pt(0.2)]
        points[position] = _pt(1.5)
        assert not is_visible(*points)

    def test_all_at_boundary(self):
        assert is_visible(_pt(0.999), _pt(0.999), _pt(0.999))

    def test_behind_camera_not_rejected(self):
        """Test that the depth-only test keeps depths below -1."""
        assert is_visible(_pt(-3.0), _pt(0.5), _pt(0.5))

    def test_nan_depth_hidden(self):
        assert not is_visible(_pt(np.nan), _pt(0.5), _pt(0.5))


class TestVisibilityFilter:
    """Test the configurable filter."""

    def test_default_matches_is_visible(self):
        """Test that the default mode is the plain depth test."""
        vf = VisibilityFilter()
        assert vf.mode is VisibilityMode.DEPTH
        assert vf(_pt(0.5), _pt(0.5), _pt(0.999))
        assert not vf(_pt(0.5), _pt(0.5), _pt(1.0))
        assert vf(_pt(0.5, x=-500), _pt(0.5, x=-600), _pt(0.5, x=-700))

    def test_mode_from_string(self):
        vf = VisibilityFilter("strict", 100, 100)
        assert vf.mode is VisibilityMode.STRICT

    def test_strict_needs_viewport(self):
        with pytest.raises(ValueError):
            VisibilityFilter(VisibilityMode.STRICT)

    def test_strict_rejects_behind_near_plane(self):
        vf = VisibilityFilter(VisibilityMode.STRICT, 100, 100)
        assert not vf(_pt(-1.5), _pt(0.5), _pt(0.5))
        assert vf(_pt(-0.5), _pt(0.5), _pt(0.5))

    def test_strict_rejects_off_screen(self):
        """Test that a triangle entirely outside the viewport is hidden."""
        vf = VisibilityFilter(VisibilityMode.STRICT, 100, 100)
        assert not vf(_pt(0.5, x=-10), _pt(0.5, x=-20), _pt(0.5, x=-30))
        assert vf(_pt(0.5, x=-10), _pt(0.5, x=50), _pt(0.5, x=-30))

    def test_strict_still_applies_far_plane(self):
        vf = VisibilityFilter(VisibilityMode.STRICT, 100, 100)
        assert not vf(_pt(0.5), _pt(0.5), _pt(1.0))

    @pytest.mark.parametrize("mode", list(VisibilityMode))
    def test_mask_matches_calls(self, mode):
        """Test that the vectorized mask agrees with per-triangle calls."""
        rng = np.random.default_rng(5)
        projected = np.column_stack(
            [
                rng.uniform(-50, 150, 30),
                rng.uniform(-50, 150, 30),
                rng.uniform(-1.5, 1.2, 30),
            ]
        )
        indices = rng.integers(0, 30, size=(40, 3))
        vf = VisibilityFilter(mode, 100, 100)

        expected = [vf(projected[a], projected[b], projected[c]) for a, b, c in indices]
        np.testing.assert_array_equal(vf.mask(projected, indices), expected)
