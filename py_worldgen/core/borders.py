"""
Region borders and adjacency.

A region cell is a border cell when any of its 4 neighbours lies outside
the grid, is ocean, or belongs to another region. It is an ocean-border
cell when one of those neighbours is ocean or off-grid.

Adjacency is derived from border cells only: two regions are neighbours
when a border cell of one touches a border cell of the other. Both views
are rebuilt from scratch after every structural change to the grid.
"""

from typing import Dict, List, Sequence, Set, Tuple

import numpy as np

from .region import Coordinate, Region
from .terrain import OCEAN

DIRECTIONS = ((1, 0), (0, 1), (-1, 0), (0, -1))


def _extract(
    rows: List[List[int]], width: int, height: int, region_id: int, coordinates
) -> Tuple[List[Coordinate], List[Coordinate]]:
    border = []
    ocean_border = []
    for x, y in coordinates:
        on_border = False
        on_ocean = False
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                on_border = on_ocean = True
                continue
            label = rows[ny][nx]
            if label == OCEAN:
                on_border = on_ocean = True
            elif label != region_id:
                on_border = True
        if on_border:
            border.append((x, y))
            if on_ocean:
                ocean_border.append((x, y))
    return border, ocean_border


def extract_borders(
    grid: np.ndarray, region_id: int, coordinates: Sequence[Coordinate]
) -> Tuple[List[Coordinate], List[Coordinate]]:
    """
    Find the border and ocean-border cells of one region.

    Args:
        grid: Region grid
        region_id: Id of the region
        coordinates: The region's (x, y) cells

    Returns:
        (border, ocean_border) with ocean_border a subset of border
    """
    height, width = grid.shape
    return _extract(grid.tolist(), width, height, region_id, coordinates)


def build_neighbor_graph(regions: Sequence[Region]) -> Dict[int, Set[int]]:
    """
    Build symmetric region adjacency from region border cells.

    Regions must already carry up-to-date border lists.

    Returns:
        Mapping of region id to the set of neighbouring region ids
    """
    owner: Dict[Coordinate, int] = {}
    for region in regions:
        for cell in region.border:
            owner[cell] = region.id

    graph: Dict[int, Set[int]] = {region.id: set() for region in regions}
    for region in regions:
        for x, y in region.border:
            for dx, dy in DIRECTIONS:
                other = owner.get((x + dx, y + dy))
                if other is not None and other != region.id:
                    graph[region.id].add(other)
                    graph[other].add(region.id)
    return graph


def refresh_regions(grid: np.ndarray, regions: Sequence[Region]) -> None:
    """Recompute borders, ocean borders and neighbours of every region in place."""
    height, width = grid.shape
    rows = grid.tolist()
    for region in regions:
        region.border, region.ocean_border = _extract(
            rows, width, height, region.id, region.coordinates
        )

    graph = build_neighbor_graph(regions)
    for region in regions:
        region.neighbors = sorted(graph[region.id])
