"""
Continent synthesis.

This module produces the raw land/ocean grid:
- Fractal OpenSimplex noise centred on the map midpoint
- A rectangular ocean margin blended in near the map edges
- Threshold classification into LAND and OCEAN

The result may still contain inland lakes and tiny islands; see
connectivity.py for the repair passes.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .errors import ConfigurationError
from .noise import NoiseField
from .prng import SeededPRNG

logger = structlog.get_logger()

# Cell labels shared by every stage. Region ids are >= 0.
OCEAN = -1
LAND = -2

# Noise value representing pure ocean
OCEAN_VALUE = -1.0


@dataclass
class TerrainOptions:
    """Continent shaping options."""

    scale: float = 0.015  # smaller = larger continents
    threshold: float = 0.0  # 0 = roughly 50/50 land/ocean
    border_strength: float = 0.5  # how hard the margin pulls toward ocean
    border_width: float = 0.2  # margin width as a fraction of half the map
    octaves: int = 4
    persistence: float = 0.5


def edge_distance(width: int, height: int) -> np.ndarray:
    """
    Normalised distance of every cell to the nearest map edge.

    0 on the outermost ring, roughly 1 at the centre.
    """
    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)
    edge_x = np.minimum(xs, width - 1 - xs) / (width / 2)
    edge_y = np.minimum(ys, height - 1 - ys) / (height / 2)
    return np.minimum(edge_x[np.newaxis, :], edge_y[:, np.newaxis])


def apply_ocean_margin(
    values: np.ndarray, border_strength: float, border_width: float
) -> np.ndarray:
    """Blend noise values toward OCEAN_VALUE close to the map edges."""
    height, width = values.shape
    if border_width <= 0 or border_strength == 0:
        return values

    edge = edge_distance(width, height)
    mask = np.where(
        edge < border_width, border_strength * (1 - edge / border_width), 0.0
    )
    return values * (1 - mask) + OCEAN_VALUE * mask


def generate_continents_map(
    width: int,
    height: int,
    prng: SeededPRNG,
    options: TerrainOptions = None,
) -> np.ndarray:
    """
    Generate a land/ocean grid.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        prng: Generation PRNG; the noise field is seeded from it
        options: Terrain shaping options

    Returns:
        int32 array of shape (height, width) holding LAND or OCEAN
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(
            f"Map dimensions must be positive, got {width}x{height}"
        )
    options = options or TerrainOptions()

    noise = NoiseField(prng)
    xs = (np.arange(width, dtype=np.float64) - width / 2) * options.scale
    ys = (np.arange(height, dtype=np.float64) - height / 2) * options.scale
    values = noise.fractal_grid(xs, ys, options.octaves, options.persistence)
    masked = apply_ocean_margin(values, options.border_strength, options.border_width)

    grid = np.where(masked > options.threshold, LAND, OCEAN).astype(np.int32)

    land_cells = int(np.count_nonzero(grid == LAND))
    logger.info(
        "Continents generated",
        width=width,
        height=height,
        land_cells=land_cells,
        land_ratio=round(land_cells / grid.size, 3),
        noise_seed=noise.seed,
    )
    return grid
