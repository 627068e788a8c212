"""
Regular plane-grid terrain mesh.

The grid topology (x, y and the triangle index list) is fixed when the mesh
is built. Only the elevation column is rewritten by ``populate_heights``.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import structlog

from ..exceptions import NonFiniteInputError
from . import heightfield
from .heightfield import DEFAULT_CONFIG, HeightfieldConfig

logger = structlog.get_logger()


@dataclass(eq=False)
class TerrainMesh:
    """Grid vertices plus triangle index list.

    ``positions`` rows are (x, y, z). ``indices`` rows are vertex triples in
    counter-clockwise order seen from +z.
    """

    width: float
    height: float
    segments_x: int
    segments_y: int
    positions: np.ndarray
    indices: np.ndarray

    # Bumped on every successful height rebuild
    version: int = 0
    # Geometry-dirty flag for the rendering side; cleared with mark_clean()
    needs_update: bool = False
    seed: Optional[float] = field(default=None)

    stride = 3

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def heights(self) -> np.ndarray:
        """Read-only view of the elevation column."""
        view = self.positions[:, 2]
        view.setflags(write=False)
        return view

    def vertex(self, i: int) -> Tuple[float, float, float]:
        x, y, z = self.positions[i]
        return float(x), float(y), float(z)

    def populate_heights(
        self,
        table: np.ndarray,
        seed: float,
        config: HeightfieldConfig = DEFAULT_CONFIG,
    ) -> None:
        """
        Recompute every vertex elevation from the noise table.

        New elevations are computed into a separate buffer and swapped in
        only once all of them are finite, so a failed pass leaves the
        previous height field intact.

        Args:
            table: Permutation table for ``seed``
            seed: Terrain seed
            config: Octave configuration

        Raises:
            NonFiniteInputError: If the seed or any computed elevation is not finite
        """
        try:
            seed = float(seed)
        except (TypeError, ValueError) as e:
            raise NonFiniteInputError(f"Seed must be a finite number, got {seed!r}") from e
        if not math.isfinite(seed):
            raise NonFiniteInputError(f"Seed must be finite, got {seed!r}")

        new_heights = heightfield.heights(table, self.positions[:, 0], self.positions[:, 1], seed, config)

        bad = np.flatnonzero(~np.isfinite(new_heights))
        if bad.size:
            logger.error("Non-finite elevation", vertex=int(bad[0]), seed=seed)
            raise NonFiniteInputError(
                f"Elevation for vertex {int(bad[0])} is not finite", index=int(bad[0])
            )

        self.positions[:, 2] = new_heights
        self.seed = seed
        self.version += 1
        self.needs_update = True

        logger.debug(
            "Heights populated",
            seed=seed,
            vertices=self.vertex_count,
            min_height=float(new_heights.min()),
            max_height=float(new_heights.max()),
        )

    def mark_clean(self) -> None:
        """Acknowledge the latest geometry change."""
        self.needs_update = False


def build_plane_grid(
    width: float, height: float, segments_x: int, segments_y: int
) -> TerrainMesh:
    """
    Build a flat grid centred on the origin.

    Vertices run row by row from the top edge (y = +height/2) down, and
    left to right within a row. Each cell contributes triangles (a, b, d)
    and (b, c, d).

    Args:
        width: Extent along x
        height: Extent along y
        segments_x: Cells along x
        segments_y: Cells along y

    Returns:
        TerrainMesh with (segments_x+1)*(segments_y+1) vertices at z = 0
        and 2*segments_x*segments_y triangles
    """
    for name, value in (("segments_x", segments_x), ("segments_y", segments_y)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
    for name, value in (("width", width), ("height", height)):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive and finite, got {value!r}")

    grid_x = segments_x + 1
    grid_y = segments_y + 1

    xs = np.arange(grid_x, dtype=np.float64) * (width / segments_x) - width / 2
    ys = height / 2 - np.arange(grid_y, dtype=np.float64) * (height / segments_y)
    gx, gy = np.meshgrid(xs, ys)

    positions = np.zeros((grid_x * grid_y, 3), dtype=np.float64)
    positions[:, 0] = gx.ravel()
    positions[:, 1] = gy.ravel()

    ix, iy = np.meshgrid(np.arange(segments_x), np.arange(segments_y))
    ix = ix.ravel()
    iy = iy.ravel()
    a = ix + grid_x * iy
    b = ix + grid_x * (iy + 1)
    c = (ix + 1) + grid_x * (iy + 1)
    d = (ix + 1) + grid_x * iy

    indices = np.empty((2 * segments_x * segments_y, 3), dtype=np.int64)
    indices[0::2] = np.stack([a, b, d], axis=1)
    indices[1::2] = np.stack([b, c, d], axis=1)
    indices.setflags(write=False)

    logger.debug(
        "Plane grid built",
        vertices=len(positions),
        triangles=len(indices),
        segments_x=segments_x,
        segments_y=segments_y,
    )

    return TerrainMesh(
        width=float(width),
        height=float(height),
        segments_x=int(segments_x),
        segments_y=int(segments_y),
        positions=positions,
        indices=indices,
    )
