"""
Territory growth: partition land into regions.

Every region starts from one random land cell. All regions then grow
through one shared frontier; each step samples a random frontier entry, so
growth interleaves across regions instead of one region filling up before
the next starts. Two biases shape the borders:
- the first enumerated neighbour is preferred over a random one, which
  gives axis-aligned jaggedness
- cells above the resistance midpoint are usually skipped, so costly
  terrain is claimed late and becomes the seam between regions

Cells are addressed by flat index (y * width + x) and the grid is worked on
as a flat list; neighbours are computed on demand.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

import numpy as np
import structlog

from .errors import ConfigurationError
from .prng import SeededPRNG
from .terrain import LAND, OCEAN

logger = structlog.get_logger()


class SeedPoint(NamedTuple):
    """Starting cell of a region."""

    x: int
    y: int
    region_id: int


@dataclass
class GrowthOptions:
    """Territory growth options."""

    skip_probability: float = 0.99  # chance to skip a high-resistance cell
    random_pick_probability: float = 0.3  # chance to pick a random neighbour


@dataclass
class GrowthResult:
    """Region grid produced by grow_territories()."""

    grid: np.ndarray
    seeds: List[SeedPoint] = field(default_factory=list)
    steps: int = 0
    claimed: int = 0
    skipped: int = 0
    unclaimed: int = 0


def pick_seeds(grid: np.ndarray, country_count: int, prng: SeededPRNG) -> List[SeedPoint]:
    """
    Pick distinct random LAND cells, one per region.

    Raises:
        ConfigurationError: country_count is not positive or exceeds the
            number of LAND cells
    """
    if country_count <= 0:
        raise ConfigurationError(f"country_count must be positive, got {country_count}")

    width = grid.shape[1]
    land = np.flatnonzero(grid == LAND).tolist()
    if country_count > len(land):
        raise ConfigurationError(
            f"country_count ({country_count}) exceeds available land cells ({len(land)})"
        )

    seeds = []
    for region_id in range(country_count):
        pick = prng.randint(len(land))
        cell = land[pick]
        land[pick] = land[-1]
        land.pop()
        seeds.append(SeedPoint(cell % width, cell // width, region_id))
    return seeds


def grow_territories(
    grid: np.ndarray,
    country_count: int,
    resistance: np.ndarray,
    resistance_midpoint: float,
    prng: SeededPRNG,
    options: Optional[GrowthOptions] = None,
) -> GrowthResult:
    """
    Grow country_count regions over the LAND cells of grid.

    Args:
        grid: Repaired LAND/OCEAN grid (not modified)
        country_count: Number of regions to seed
        resistance: Per-cell growth cost, same shape as grid
        resistance_midpoint: Cost above which cells may be skipped
        prng: Generation PRNG
        options: Growth options

    Returns:
        GrowthResult whose grid holds OCEAN, region ids, and LAND for any
        cell no seed could reach
    """
    options = options or GrowthOptions()
    if not 0 <= options.skip_probability < 1:
        # At 1.0 a costly cell is never claimed and its frontier entry never dies
        raise ConfigurationError(
            f"skip_probability must be in [0, 1), got {options.skip_probability}"
        )
    height, width = grid.shape

    seeds = pick_seeds(grid, country_count, prng)

    cells = grid.ravel().tolist()
    cost = resistance.ravel().tolist()
    frontier = []
    for seed in seeds:
        index = seed.y * width + seed.x
        cells[index] = seed.region_id
        frontier.append((index, seed.region_id))

    result = GrowthResult(grid=grid, seeds=seeds, claimed=len(seeds))
    skip_probability = options.skip_probability
    random_pick = options.random_pick_probability

    while frontier:
        result.steps += 1
        i = prng.randint(len(frontier))
        cell, region_id = frontier[i]
        x = cell % width

        candidates = []
        if x + 1 < width and cells[cell + 1] == LAND:
            candidates.append(cell + 1)
        if cell + width < len(cells) and cells[cell + width] == LAND:
            candidates.append(cell + width)
        if x > 0 and cells[cell - 1] == LAND:
            candidates.append(cell - 1)
        if cell >= width and cells[cell - width] == LAND:
            candidates.append(cell - width)

        if not candidates:
            # dead end
            frontier[i] = frontier[-1]
            frontier.pop()
            continue

        if len(candidates) > 1 and prng.chance(random_pick):
            target = prng.choice(candidates)
        else:
            target = candidates[0]

        if cost[target] > resistance_midpoint and prng.random() < skip_probability:
            result.skipped += 1
            continue

        cells[target] = region_id
        frontier.append((target, region_id))
        result.claimed += 1

    result.grid = np.array(cells, dtype=np.int32).reshape(height, width)
    result.unclaimed = int(np.count_nonzero(result.grid == LAND))

    logger.info(
        "Territories grown",
        regions=country_count,
        steps=result.steps,
        claimed=result.claimed,
        skipped=result.skipped,
        unclaimed=result.unclaimed,
    )
    return result


def demote_orphans(grid: np.ndarray) -> int:
    """
    Turn LAND cells left unclaimed after growth into OCEAN, in place.

    Unclaimed land only exists in components no seed landed on, and those
    components are bordered by ocean alone, so demoting them cannot enclose
    a lake or split a claimed component.

    Returns:
        Number of cells demoted
    """
    orphans = grid == LAND
    count = int(np.count_nonzero(orphans))
    if count:
        grid[orphans] = OCEAN
        logger.info("Unreachable land demoted to ocean", cells=count)
    return count
