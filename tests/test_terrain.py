"""Tests for continent synthesis."""

import numpy as np
import pytest

from py_worldgen.core.errors import ConfigurationError
from py_worldgen.core.prng import SeededPRNG
from py_worldgen.core.terrain import (
    LAND,
    OCEAN,
    OCEAN_VALUE,
    TerrainOptions,
    apply_ocean_margin,
    edge_distance,
    generate_continents_map,
)


class TestEdgeMask:
    """Test the ocean margin helpers."""

    def test_edge_distance_zero_on_ring(self):
        edge = edge_distance(10, 8)
        assert edge.shape == (8, 10)
        assert np.all(edge[0, :] == 0)
        assert np.all(edge[-1, :] == 0)
        assert np.all(edge[:, 0] == 0)
        assert np.all(edge[:, -1] == 0)
        assert edge[4, 5] > edge[1, 5]

    def test_full_strength_margin_forces_ocean_value_at_edge(self):
        values = np.ones((10, 10))
        masked = apply_ocean_margin(values, border_strength=1.0, border_width=0.2)
        assert masked[0, 0] == pytest.approx(OCEAN_VALUE)
        # Centre is outside the margin and untouched
        assert masked[5, 5] == pytest.approx(1.0)

    def test_zero_strength_is_identity(self):
        values = np.random.default_rng(0).uniform(-1, 1, (6, 6))
        masked = apply_ocean_margin(values, border_strength=0.0, border_width=0.2)
        assert np.array_equal(masked, values)


class TestGenerateContinents:
    """Test land/ocean classification."""

    def test_shape_and_labels(self):
        grid = generate_continents_map(60, 40, SeededPRNG(1))
        assert grid.shape == (40, 60)
        assert set(np.unique(grid).tolist()) <= {LAND, OCEAN}

    def test_deterministic(self):
        a = generate_continents_map(50, 50, SeededPRNG(99))
        b = generate_continents_map(50, 50, SeededPRNG(99))
        assert np.array_equal(a, b)

    def test_strong_margin_keeps_edges_ocean(self):
        """With full border strength and threshold 0 the outer ring is always ocean."""
        options = TerrainOptions(border_strength=1.0, border_width=0.3, threshold=0.0)
        grid = generate_continents_map(80, 60, SeededPRNG(5), options)
        assert np.all(grid[0, :] == OCEAN)
        assert np.all(grid[-1, :] == OCEAN)
        assert np.all(grid[:, 0] == OCEAN)
        assert np.all(grid[:, -1] == OCEAN)

    def test_threshold_controls_land_amount(self):
        low = generate_continents_map(60, 60, SeededPRNG(3), TerrainOptions(threshold=-0.5))
        high = generate_continents_map(60, 60, SeededPRNG(3), TerrainOptions(threshold=0.5))
        assert np.count_nonzero(low == LAND) >= np.count_nonzero(high == LAND)

    def test_threshold_above_one_is_all_ocean(self):
        grid = generate_continents_map(20, 20, SeededPRNG(3), TerrainOptions(threshold=1.0))
        assert np.all(grid == OCEAN)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 5)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ConfigurationError):
            generate_continents_map(width, height, SeededPRNG(1))
