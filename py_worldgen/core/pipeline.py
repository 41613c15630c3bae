"""
World generation pipeline.

Stages, in order:
1. Continents - fractal noise with an ocean margin
2. Connectivity repair - fill lakes, drop small islands
3. Resistance field - growth cost per land cell
4. Territory growth - partition land into regions
5. Orphan demotion - unreachable land becomes ocean
6. Borders and neighbours
7. Consolidation - merge undersized regions, then re-index
8. Names and continents, final validation

The whole run is synchronous and owns all of its state; any failure aborts
it and nothing partial is returned.
"""

import time
from typing import Any, Dict, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .borders import refresh_regions
from .connectivity import DEFAULT_MIN_ISLAND_SIZE, repair_connectivity
from .consolidation import DEFAULT_MIN_COUNTRY_SIZE, consolidate_regions, reindex_regions
from .errors import ConfigurationError
from .names import assign_names
from .noise import NoiseField
from .prng import SeededPRNG
from .region import regions_from_grid
from .resistance import ResistanceOptions, build_resistance_field
from .terrain import TerrainOptions, generate_continents_map
from .territory import GrowthOptions, demote_orphans, grow_territories
from .world_map import WorldMap
from ..utils import random as _random

logger = structlog.get_logger()


class WorldGenOptions(BaseModel):
    """All recognised generation options."""

    model_config = ConfigDict(extra="forbid")

    seed: Optional[int] = Field(None, description="Seed for deterministic generation")

    # Continents
    scale: float = Field(0.015, gt=0, description="Continent noise frequency")
    threshold: float = Field(0.0, ge=-1, le=1, description="Land cutoff")
    border_strength: float = Field(0.5, ge=0, le=1, description="Ocean margin strength")
    border_width: float = Field(0.2, ge=0, le=1, description="Ocean margin width")
    octaves: int = Field(4, ge=1, le=16, description="Fractal octaves")
    persistence: float = Field(0.5, gt=0, le=1, description="Amplitude decay per octave")

    # Territory growth
    resistance_scale: float = Field(0.09, gt=0, description="Resistance noise frequency")
    min_resistance: float = Field(0.0, ge=0, description="Lowest growth cost")
    max_resistance: float = Field(130.0, ge=0, description="Highest growth cost")
    skip_probability: float = Field(0.99, ge=0, lt=1, description="Chance to skip costly cells")
    random_pick_probability: float = Field(0.3, ge=0, le=1, description="Chance to pick a random neighbour")

    # Clean-up
    min_country_size: int = Field(DEFAULT_MIN_COUNTRY_SIZE, ge=0, description="Merge regions below this size")
    min_island_size: int = Field(DEFAULT_MIN_ISLAND_SIZE, ge=0, description="Drop islands below this size")

    use_real_names: bool = Field(True, description="Prefer real country names")

    def terrain_options(self) -> TerrainOptions:
        return TerrainOptions(
            scale=self.scale,
            threshold=self.threshold,
            border_strength=self.border_strength,
            border_width=self.border_width,
            octaves=self.octaves,
            persistence=self.persistence,
        )

    def resistance_options(self) -> ResistanceOptions:
        return ResistanceOptions(
            scale=self.resistance_scale,
            min_resistance=self.min_resistance,
            max_resistance=self.max_resistance,
        )

    def growth_options(self) -> GrowthOptions:
        return GrowthOptions(
            skip_probability=self.skip_probability,
            random_pick_probability=self.random_pick_probability,
        )


def coerce_options(
    options: Union[WorldGenOptions, Dict[str, Any], None]
) -> WorldGenOptions:
    """Accept options as a model, a plain dict or None."""
    if options is None:
        return WorldGenOptions()
    if isinstance(options, WorldGenOptions):
        return options
    try:
        return WorldGenOptions(**options)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid generation options: {e}") from e


def generate_world(
    width: int,
    height: int,
    country_count: int,
    options: Union[WorldGenOptions, Dict[str, Any], None] = None,
) -> WorldMap:
    """
    Generate a world map.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        country_count: Number of regions to seed
        options: Generation options (model or dict)

    Returns:
        Validated WorldMap

    Raises:
        ConfigurationError: invalid dimensions, count or options, or more
            regions requested than there are land cells
    """
    options = coerce_options(options)
    for name, value in (("width", width), ("height", height), ("country_count", country_count)):
        if not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

    seed = _random.resolve_seed(options.seed)
    prng = SeededPRNG(seed)
    log = logger.bind(seed=seed, width=width, height=height, country_count=country_count)
    log.info("Starting world generation")
    started = time.perf_counter()

    terrain = generate_continents_map(width, height, prng, options.terrain_options())
    terrain, _ = repair_connectivity(terrain, options.min_island_size)

    resistance_options = options.resistance_options()
    resistance = build_resistance_field(terrain, NoiseField(prng), resistance_options)

    growth = grow_territories(
        terrain,
        country_count,
        resistance,
        resistance_options.midpoint,
        prng,
        options.growth_options(),
    )
    grid = growth.grid
    demote_orphans(grid)

    regions = regions_from_grid(grid, country_count)
    refresh_regions(grid, regions)
    consolidate_regions(grid, regions, options.min_country_size)
    reindex_regions(grid, regions)
    assign_names(regions, prng, options.use_real_names)

    recorded = options.model_dump()
    recorded["seed"] = seed
    world = WorldMap(
        width=width,
        height=height,
        grid=grid,
        regions=regions,
        seed=seed,
        options=recorded,
    )
    world.create_continents()
    world.validate(
        min_island_size=options.min_island_size,
        min_country_size=options.min_country_size,
    )

    log.info(
        "World generation completed",
        regions=len(regions),
        continents=len(world.continents),
        land_cells=world.land_cells,
        generation_time_seconds=round(time.perf_counter() - started, 3),
    )
    return world


def generate_world_dict(
    width: int,
    height: int,
    country_count: int,
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """generate_world() returning plain data, for use in worker processes."""
    return generate_world(width, height, country_count, options).to_dict()
