"""Tests for the noise field."""

import numpy as np
import pytest

from py_worldgen.core.errors import ConfigurationError
from py_worldgen.core.noise import NoiseField
from py_worldgen.core.prng import SeededPRNG


class TestNoiseField:
    """Test coherent noise sampling."""

    @pytest.fixture
    def noise(self):
        return NoiseField(SeededPRNG(42))

    def test_sample_range(self, noise):
        for i in range(200):
            value = noise.sample(i * 0.37, i * 0.11)
            assert -1.0 <= value <= 1.0

    def test_repeatable_for_seed(self):
        a = NoiseField(SeededPRNG(7))
        b = NoiseField(SeededPRNG(7))
        assert a.seed == b.seed
        assert a.sample(1.5, 2.5) == b.sample(1.5, 2.5)

    def test_continuity(self, noise):
        """Nearby points give nearby values."""
        base = noise.sample(3.0, 4.0)
        near = noise.sample(3.001, 4.0)
        assert abs(base - near) < 0.05

    def test_fractal_range(self, noise):
        for i in range(100):
            value = noise.fractal(i * 0.21, i * 0.13, octaves=6, persistence=0.8)
            assert -1.0 <= value <= 1.0

    def test_single_octave_matches_sample(self, noise):
        assert noise.fractal(0.3, 0.7, octaves=1) == pytest.approx(noise.sample(0.3, 0.7))

    def test_grid_matches_scalar(self, noise):
        xs = np.array([0.0, 0.5, 1.25])
        ys = np.array([0.1, 2.0])
        grid = noise.sample_grid(xs, ys)
        assert grid.shape == (2, 3)
        for j, y in enumerate(ys):
            for i, x in enumerate(xs):
                assert grid[j, i] == pytest.approx(noise.sample(x, y), abs=1e-9)

    def test_fractal_grid_matches_scalar(self, noise):
        xs = np.linspace(-1, 1, 4)
        ys = np.linspace(-1, 1, 3)
        grid = noise.fractal_grid(xs, ys, octaves=3, persistence=0.5)
        assert grid.shape == (3, 4)
        assert grid[1, 2] == pytest.approx(noise.fractal(xs[2], ys[1], 3, 0.5), abs=1e-9)
        assert np.all(np.abs(grid) <= 1.0)

    @pytest.mark.parametrize("octaves,persistence", [(0, 0.5), (4, 0.0), (4, -1.0)])
    def test_invalid_fractal_params(self, noise, octaves, persistence):
        with pytest.raises(ConfigurationError):
            noise.fractal(0.0, 0.0, octaves=octaves, persistence=persistence)
