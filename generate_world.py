#!/usr/bin/env python3
"""
Generate a world map and write it as JSON.

The output holds the cell grid (-1 is ocean, other values are region ids)
and every region with its cells, borders, ocean borders and neighbours.

Usage:
    python generate_world.py 200 150 12 --seed 42 --output world.json
"""

import json
import sys
from pathlib import Path

import structlog

from py_worldgen.core import ConfigurationError, generate_world

logger = structlog.get_logger()


def summarize(world):
    """Print a short human-readable summary of a generated world."""
    print(f"World {world.width}x{world.height}, seed {world.seed}")
    print(f"  Land cells: {world.land_cells} ({world.land_cells / world.grid.size * 100:.1f}%)")
    print(f"  Regions: {len(world.regions)}  Continents: {len(world.continents)}")
    for region in world.regions:
        cx, cy = region.center()
        print(
            f"  {region.id:3d} {region.name:<28} {region.size:6d} cells  "
            f"center=({cx:.0f}, {cy:.0f})  neighbours={region.neighbors}"
        )


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate a world map with political regions")
    parser.add_argument("width", type=int, help="Grid width in cells")
    parser.add_argument("height", type=int, help="Grid height in cells")
    parser.add_argument("country_count", type=int, help="Number of regions to seed")
    parser.add_argument("--seed", type=int, help="Seed for reproducible output")
    parser.add_argument("--min-country-size", type=int, help="Merge regions smaller than this")
    parser.add_argument("--min-island-size", type=int, help="Drop islands smaller than this")
    parser.add_argument("--fantasy-names", action="store_true", help="Use generated names only")
    parser.add_argument("--output", type=Path, help="Write the world as JSON to this file")

    args = parser.parse_args()

    options = {"seed": args.seed, "use_real_names": not args.fantasy_names}
    if args.min_country_size is not None:
        options["min_country_size"] = args.min_country_size
    if args.min_island_size is not None:
        options["min_island_size"] = args.min_island_size

    try:
        world = generate_world(args.width, args.height, args.country_count, options)
    except ConfigurationError as e:
        logger.error("World generation failed", error=str(e))
        sys.exit(2)

    summarize(world)
    if args.output:
        args.output.write_text(json.dumps(world.to_dict()))
        print(f"Saved to {args.output}")
