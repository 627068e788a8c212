"""
Per-triangle visibility decisions for vector export.

The default test only looks at depth: a triangle is kept when none of its
vertices lies beyond the far plane. It does no occlusion, back-face or
near-plane handling. ``VisibilityMode.STRICT`` adds a near-plane bound and
requires the triangle to touch the viewport.
"""

from enum import Enum
from typing import Optional, Sequence

import numpy as np


class VisibilityMode(str, Enum):
    """Strictness of the visibility test."""

    DEPTH = "depth"
    STRICT = "strict"


def is_visible(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> bool:
    """True iff all three projected depths are strictly less than 1."""
    return a[2] < 1 and b[2] < 1 and c[2] < 1


class VisibilityFilter:
    """
    Configurable triangle visibility test.

    Instances are callables with the same signature as ``is_visible`` and
    also expose a vectorized ``mask`` over a whole index list.
    """

    def __init__(
        self,
        mode: VisibilityMode = VisibilityMode.DEPTH,
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
    ):
        self.mode = VisibilityMode(mode)
        if self.mode is VisibilityMode.STRICT and (viewport_width is None or viewport_height is None):
            raise ValueError("Strict visibility needs the viewport size")
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height

    def __call__(self, a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> bool:
        if not is_visible(a, b, c):
            return False
        if self.mode is VisibilityMode.DEPTH:
            return True

        if not (a[2] > -1 and b[2] > -1 and c[2] > -1):
            return False
        return any(self._in_viewport(p[0], p[1]) for p in (a, b, c))

    def _in_viewport(self, x: float, y: float) -> bool:
        return 0 <= x <= self.viewport_width and 0 <= y <= self.viewport_height

    def mask(self, projected: np.ndarray, indices: np.ndarray) -> np.ndarray:
        """
        Visibility of every triangle at once.

        Args:
            projected: (N, 3) array of (screen_x, screen_y, depth)
            indices: (T, 3) triangle index array

        Returns:
            Boolean array of length T
        """
        corners = np.asarray(projected)[np.asarray(indices)]  # (T, 3, 3)
        depth = corners[:, :, 2]
        visible = np.all(depth < 1, axis=1)
        if self.mode is VisibilityMode.DEPTH:
            return visible

        visible &= np.all(depth > -1, axis=1)
        x = corners[:, :, 0]
        y = corners[:, :, 1]
        inside = (x >= 0) & (x <= self.viewport_width) & (y >= 0) & (y <= self.viewport_height)
        return visible & np.any(inside, axis=1)
