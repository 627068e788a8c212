"""
Multi-octave height synthesis.

Sums three octaves of simplex noise at doubling frequency and halving
amplitude. The seed offsets the sampled window on both axes.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .noise import sample, sample_grid


@dataclass(frozen=True)
class HeightfieldConfig:
    """Configuration for height synthesis."""

    scale: float = 0.5
    # (frequency multiplier, amplitude) per octave
    octaves: Tuple[Tuple[float, float], ...] = ((1.0, 1.0), (2.0, 0.5), (4.0, 0.25))

    @property
    def max_amplitude(self) -> float:
        """Upper bound of |height| implied by the octave amplitudes."""
        return float(sum(abs(amplitude) for _, amplitude in self.octaves))


DEFAULT_CONFIG = HeightfieldConfig()


def height(
    table: np.ndarray,
    x: float,
    y: float,
    seed: float,
    config: HeightfieldConfig = DEFAULT_CONFIG,
) -> float:
    """
    Elevation at one grid position.

    Args:
        table: Permutation table
        x: Local terrain-plane x
        y: Local terrain-plane y
        seed: Terrain seed, added to both sampled coordinates
        config: Octave configuration

    Returns:
        Unnormalized elevation in roughly [-max_amplitude, max_amplitude]
    """
    total = 0.0
    for frequency, amplitude in config.octaves:
        f = config.scale * frequency
        total += sample(table, x * f + seed, y * f + seed) * amplitude
    return total


def heights(
    table: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    seed: float,
    config: HeightfieldConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """Vectorized ``height`` over coordinate arrays."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    total = np.zeros(np.broadcast(xs, ys).shape, dtype=np.float64)
    for frequency, amplitude in config.octaves:
        f = config.scale * frequency
        total += sample_grid(table, xs * f + seed, ys * f + seed) * amplitude
    return total
