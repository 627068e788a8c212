"""
Seeded 2D simplex noise.

Classic simplex noise (Gustavson) over a 512-entry permutation table. The
table is the only state: it is built once per seed and then shared read-only
by every sample call.
"""

import math

import numpy as np
import structlog

from ..exceptions import ConstructionError
from .alea_prng import AleaPRNG

logger = structlog.get_logger()

TABLE_SIZE = 256

# Skewing and unskewing factors for 2 dimensions
F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# Output scale bringing the summed corner contributions to roughly [-1, 1]
NOISE_SCALE = 70.0

# Doubles past 2**53 carry no fractional part and may overflow the skew.
# Such coordinates sample as zero.
COORDINATE_LIMIT = 2.0 ** 53

GRAD3 = np.array(
    [
        (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
        (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
        (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
    ],
    dtype=np.float64,
)


def build_permutation_table(seed: float) -> np.ndarray:
    """
    Build the 512-entry permutation table for a seed.

    The identity sequence 0..255 is shuffled with an Alea PRNG seeded by
    ``seed`` and then duplicated, so lookups of ``i + table[j]`` never need
    to wrap.

    Args:
        seed: Terrain seed

    Returns:
        int16 array of length 512 where every value in [0, 255] appears twice

    Raises:
        ConstructionError: If the random source fails or yields values
            outside [0, 1)
    """
    p = list(range(TABLE_SIZE))
    prng = AleaPRNG(seed)
    try:
        prng.shuffle(p)
    except (TypeError, ValueError, OverflowError) as e:
        logger.error(
            "Permutation table construction failed",
            seed=seed,
            draws=prng.call_count,
            error=str(e),
        )
        raise ConstructionError(f"Cannot build permutation table for seed {seed!r}: {e}") from e

    table = np.array(p + p, dtype=np.int16)
    table.setflags(write=False)
    return table


def sample(table: np.ndarray, x: float, y: float) -> float:
    """
    Sample 2D simplex noise at a single point.

    Args:
        table: Permutation table from ``build_permutation_table``
        x: X coordinate
        y: Y coordinate

    Returns:
        Noise value in roughly [-1, 1]
    """
    if abs(x) >= COORDINATE_LIMIT or abs(y) >= COORDINATE_LIMIT:
        return 0.0

    # Skew the input space to determine which simplex cell we're in
    s = (x + y) * F2
    i = math.floor(x + s)
    j = math.floor(y + s)
    t = (i + j) * G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the skewed cell
    if x0 > y0:
        i1, j1 = 1, 0
    else:
        i1, j1 = 0, 1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = int(i) & 255
    jj = int(j) & 255
    gi0 = int(table[ii + table[jj]]) % 12
    gi1 = int(table[ii + i1 + table[jj + j1]]) % 12
    gi2 = int(table[ii + 1 + table[jj + 1]]) % 12

    n = 0.0
    for gi, dx, dy in ((gi0, x0, y0), (gi1, x1, y1), (gi2, x2, y2)):
        falloff = 0.5 - dx * dx - dy * dy
        if falloff >= 0:
            falloff *= falloff
            n += falloff * falloff * (GRAD3[gi, 0] * dx + GRAD3[gi, 1] * dy)

    return float(NOISE_SCALE * n)


def sample_grid(table: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """
    Vectorized simplex noise over arrays of coordinates.

    Produces the same values as calling ``sample`` point by point.

    Args:
        table: Permutation table
        xs: X coordinates (any shape)
        ys: Y coordinates (broadcastable against ``xs``)

    Returns:
        Noise values with the broadcast shape of ``xs`` and ``ys``
    """
    xs, ys = np.broadcast_arrays(
        np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
    )
    perm = np.asarray(table, dtype=np.int64)

    far = (np.abs(xs) >= COORDINATE_LIMIT) | (np.abs(ys) >= COORDINATE_LIMIT)
    if far.any():
        xs = np.where(far, 0.0, xs)
        ys = np.where(far, 0.0, ys)

    s = (xs + ys) * F2
    i = np.floor(xs + s)
    j = np.floor(ys + s)
    t = (i + j) * G2
    x0 = xs - (i - t)
    y0 = ys - (j - t)

    upper = x0 > y0
    i1 = np.where(upper, 1, 0)
    j1 = np.where(upper, 0, 1)

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 - 1.0 + 2.0 * G2
    y2 = y0 - 1.0 + 2.0 * G2

    ii = np.mod(i, TABLE_SIZE).astype(np.int64)
    jj = np.mod(j, TABLE_SIZE).astype(np.int64)
    gi0 = perm[ii + perm[jj]] % 12
    gi1 = perm[ii + i1 + perm[jj + j1]] % 12
    gi2 = perm[ii + 1 + perm[jj + 1]] % 12

    total = np.zeros(xs.shape, dtype=np.float64)
    for gi, dx, dy in ((gi0, x0, y0), (gi1, x1, y1), (gi2, x2, y2)):
        falloff = 0.5 - dx * dx - dy * dy
        inside = falloff >= 0
        falloff = falloff * falloff
        contrib = falloff * falloff * (GRAD3[gi, 0] * dx + GRAD3[gi, 1] * dy)
        total += np.where(inside, contrib, 0.0)

    return NOISE_SCALE * np.where(far, 0.0, total)


class NoiseField:
    """Noise function bound to one seed and its permutation table."""

    def __init__(self, seed: float):
        try:
            seed = float(seed)
        except (TypeError, ValueError) as e:
            raise ConstructionError(f"Seed must be a number, got {seed!r}") from e
        self.seed = seed
        self.table = build_permutation_table(seed)

    def sample(self, x: float, y: float) -> float:
        return sample(self.table, x, y)

    def sample_array(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return sample_grid(self.table, xs, ys)
