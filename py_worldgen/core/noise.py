"""
Coherent 2D noise built on OpenSimplex.

The noise permutation is seeded from the generation PRNG, so a fixed world
seed yields a fixed noise field. Grid variants evaluate whole coordinate
axes at once with NumPy, which is what the terrain and resistance stages
use; the scalar variants exist for point lookups and tests.
"""

import numpy as np
from opensimplex import OpenSimplex

from .errors import ConfigurationError
from .prng import SeededPRNG


def _check_fractal_params(octaves: int, persistence: float) -> None:
    if octaves < 1:
        raise ConfigurationError(f"octaves must be >= 1, got {octaves}")
    if persistence <= 0:
        raise ConfigurationError(f"persistence must be > 0, got {persistence}")


class NoiseField:
    """2D noise sampler returning values in [-1, 1]."""

    def __init__(self, prng: SeededPRNG):
        self.seed = prng.derive_seed()
        self._simplex = OpenSimplex(seed=self.seed)

    def sample(self, x: float, y: float) -> float:
        """Sample noise at a single point."""
        value = self._simplex.noise2(x, y)
        return float(min(1.0, max(-1.0, value)))

    def fractal(
        self, x: float, y: float, octaves: int = 4, persistence: float = 0.5
    ) -> float:
        """
        Sum of octaves at doubling frequency and decaying amplitude.

        The sum is divided by the total amplitude so the output stays in
        [-1, 1] regardless of octave count.
        """
        _check_fractal_params(octaves, persistence)
        value = 0.0
        max_amp = 0.0
        freq = 1.0
        amp = 1.0
        for _ in range(octaves):
            value += self.sample(x * freq, y * freq) * amp
            max_amp += amp
            amp *= persistence
            freq *= 2
        return value / max_amp

    def sample_grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Sample noise for every (x, y) combination.

        Args:
            xs: 1D array of x coordinates (length W)
            ys: 1D array of y coordinates (length H)

        Returns:
            Array of shape (H, W)
        """
        values = self._simplex.noise2array(
            np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
        )
        return np.clip(values, -1.0, 1.0)

    def fractal_grid(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
        octaves: int = 4,
        persistence: float = 0.5,
    ) -> np.ndarray:
        """Vectorized counterpart of fractal(), shape (len(ys), len(xs))."""
        _check_fractal_params(octaves, persistence)
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)

        value = np.zeros((len(ys), len(xs)), dtype=np.float64)
        max_amp = 0.0
        freq = 1.0
        amp = 1.0
        for _ in range(octaves):
            value += self.sample_grid(xs * freq, ys * freq) * amp
            max_amp += amp
            amp *= persistence
            freq *= 2
        return value / max_amp
