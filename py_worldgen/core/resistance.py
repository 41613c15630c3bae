"""
Growth resistance field.

A secondary noise layer assigns every land cell a cost in
[min_resistance, max_resistance]; ocean costs +inf. Territory growth is
repelled by high-cost cells, which gives region borders their ragged,
mountain-like look. The field is a growth-time lookup only and is never
stored on a region.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .errors import ConfigurationError
from .noise import NoiseField
from .terrain import LAND

logger = structlog.get_logger()


@dataclass
class ResistanceOptions:
    """Resistance field options."""

    scale: float = 0.09  # higher = more granular resistance
    min_resistance: float = 0.0
    max_resistance: float = 130.0

    @property
    def midpoint(self) -> float:
        return (self.min_resistance + self.max_resistance) / 2


def build_resistance_field(
    grid: np.ndarray, noise: NoiseField, options: ResistanceOptions = None
) -> np.ndarray:
    """
    Compute the per-cell growth cost.

    Args:
        grid: LAND/OCEAN grid
        noise: Noise field dedicated to resistance
        options: Resistance options

    Returns:
        float64 array with the same shape as grid
    """
    options = options or ResistanceOptions()
    if options.min_resistance > options.max_resistance:
        raise ConfigurationError(
            "min_resistance must not exceed max_resistance "
            f"({options.min_resistance} > {options.max_resistance})"
        )

    height, width = grid.shape
    xs = np.arange(width, dtype=np.float64) * options.scale
    ys = np.arange(height, dtype=np.float64) * options.scale
    spread = options.max_resistance - options.min_resistance
    cost = options.min_resistance + spread * np.abs(noise.sample_grid(xs, ys))

    resistance = np.where(grid == LAND, cost, np.inf)
    logger.debug(
        "Resistance field built",
        midpoint=options.midpoint,
        high_cost_cells=int(np.count_nonzero(resistance[grid == LAND] > options.midpoint)),
    )
    return resistance
