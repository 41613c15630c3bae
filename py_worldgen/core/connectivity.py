"""
Connectivity repair for the raw continent grid.

Two flood-fill passes over 4-connected neighbourhoods:
1. Lake removal - ocean not reachable from the map edge becomes land
2. Island removal - land components below a minimum size become ocean

Lakes are resolved first so a filled lake can merge the land around it into
one component before island sizes are measured.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import structlog
from scipy import ndimage

from .terrain import LAND, OCEAN

logger = structlog.get_logger()

DEFAULT_MIN_ISLAND_SIZE = 1000

# 4-connectivity (no diagonals)
FOUR_CONNECTED = ndimage.generate_binary_structure(2, 1)


@dataclass
class ConnectivityReport:
    """Summary of what the repair passes changed."""

    lakes_filled: int = 0
    lake_cells_filled: int = 0
    islands_removed: int = 0
    island_cells_removed: int = 0


def label_components(mask: np.ndarray) -> Tuple[np.ndarray, int]:
    """Label 4-connected components of a boolean mask (labels start at 1)."""
    return ndimage.label(mask, structure=FOUR_CONNECTED)


def edge_labels(labels: np.ndarray) -> np.ndarray:
    """Component labels present on the outer ring of the grid."""
    ring = np.concatenate(
        [labels[0, :], labels[-1, :], labels[:, 0], labels[:, -1]]
    )
    return np.unique(ring[ring > 0])


def remove_lakes(grid: np.ndarray, report: ConnectivityReport = None) -> np.ndarray:
    """
    Turn every OCEAN cell unreachable from the map edge into LAND.

    Args:
        grid: LAND/OCEAN grid (not modified)
        report: Optional report to update

    Returns:
        New grid without inland lakes
    """
    result = grid.copy()
    labels, count = label_components(grid == OCEAN)
    if count == 0:
        return result

    open_sea = edge_labels(labels)
    lakes = (labels > 0) & ~np.isin(labels, open_sea)
    result[lakes] = LAND

    if report is not None:
        report.lakes_filled += count - len(open_sea)
        report.lake_cells_filled += int(np.count_nonzero(lakes))
    return result


def remove_small_islands(
    grid: np.ndarray,
    min_island_size: int = DEFAULT_MIN_ISLAND_SIZE,
    report: ConnectivityReport = None,
) -> np.ndarray:
    """
    Turn every LAND component smaller than min_island_size into OCEAN.

    Args:
        grid: LAND/OCEAN grid (not modified)
        min_island_size: Minimum number of cells for a component to survive
        report: Optional report to update

    Returns:
        New grid without undersized islands
    """
    result = grid.copy()
    labels, count = label_components(grid == LAND)
    if count == 0:
        return result

    sizes = np.bincount(labels.ravel())
    too_small = sizes < min_island_size
    too_small[0] = False  # background
    removed = too_small[labels]
    result[removed] = OCEAN

    if report is not None:
        report.islands_removed += int(np.count_nonzero(too_small))
        report.island_cells_removed += int(np.count_nonzero(removed))
    return result


def repair_connectivity(
    grid: np.ndarray, min_island_size: int = DEFAULT_MIN_ISLAND_SIZE
) -> Tuple[np.ndarray, ConnectivityReport]:
    """Run lake removal, then island removal."""
    report = ConnectivityReport()
    repaired = remove_lakes(grid, report)
    repaired = remove_small_islands(repaired, min_island_size, report)

    logger.info(
        "Connectivity repaired",
        lakes_filled=report.lakes_filled,
        lake_cells_filled=report.lake_cells_filled,
        islands_removed=report.islands_removed,
        island_cells_removed=report.island_cells_removed,
        land_cells=int(np.count_nonzero(repaired == LAND)),
    )
    return repaired, report
