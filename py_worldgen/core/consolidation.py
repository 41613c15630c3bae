"""
Merging of undersized regions.

A region below the minimum size is folded into its smallest neighbour.
A merge can push another region's situation over the edge (its smallest
neighbour just grew, or it lost its only neighbour), so passes repeat until
one completes without merging anything.
"""

from typing import Dict, List

import numpy as np
import structlog

from .borders import refresh_regions
from .region import Region

logger = structlog.get_logger()

DEFAULT_MIN_COUNTRY_SIZE = 100


def merge_region(grid: np.ndarray, source: Region, target: Region) -> None:
    """Move every cell of source into target, relabelling the grid in place."""
    if source.coordinates:
        xs, ys = zip(*source.coordinates)
        grid[np.array(ys), np.array(xs)] = target.id
    target.coordinates.extend(source.coordinates)
    source.coordinates = []


def consolidate_regions(
    grid: np.ndarray,
    regions: List[Region],
    min_country_size: int = DEFAULT_MIN_COUNTRY_SIZE,
) -> int:
    """
    Merge undersized regions until a full pass performs no merge.

    Regions must carry current borders and neighbours on entry. grid and
    regions are modified in place; merged-away regions are removed from
    the list and all derived views are rebuilt after each merge.

    Args:
        grid: Region grid
        regions: Regions on the grid
        min_country_size: Regions below this many cells get merged

    Returns:
        Total number of merges performed
    """
    total = 0
    passes = 0
    while True:
        passes += 1
        merges = 0
        alive = {r.id for r in regions}
        # Snapshot, highest id first, so removal from the live list is safe
        for region in sorted(regions, key=lambda r: r.id, reverse=True):
            if region.id not in alive:
                continue
            if region.size >= min_country_size or not region.neighbors:
                continue

            by_id: Dict[int, Region] = {r.id: r for r in regions}
            target = min(
                (by_id[n] for n in region.neighbors), key=lambda r: (r.size, r.id)
            )
            logger.debug(
                "Merging region",
                region=region.id,
                size=region.size,
                into=target.id,
                into_size=target.size,
            )
            merge_region(grid, region, target)
            regions.remove(region)
            alive.discard(region.id)
            refresh_regions(grid, regions)
            merges += 1

        total += merges
        if merges == 0:
            break

    logger.info(
        "Regions consolidated",
        merges=total,
        passes=passes,
        regions=len(regions),
        min_country_size=min_country_size,
    )
    return total


def reindex_regions(grid: np.ndarray, regions: List[Region]) -> Dict[int, int]:
    """
    Renumber regions to contiguous ids 0..n-1 in ascending id order.

    The grid, region ids and neighbour lists are rewritten in place and
    regions is re-sorted so that regions[i].id == i.

    Returns:
        Mapping of old id to new id
    """
    regions.sort(key=lambda r: r.id)
    mapping = {region.id: new_id for new_id, region in enumerate(regions)}
    if not mapping:
        return mapping

    lookup = np.full(max(mapping) + 1, -1, dtype=np.int32)
    for old_id, new_id in mapping.items():
        lookup[old_id] = new_id

    owned = grid >= 0
    grid[owned] = lookup[grid[owned]]

    for region in regions:
        region.id = mapping[region.id]
        region.neighbors = sorted(mapping[n] for n in region.neighbors)
    return mapping
