"""Region (country) data structure."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np

Coordinate = Tuple[int, int]  # (x, y)


@dataclass
class Region:
    """
    A political region on the world grid.

    coordinates is the authoritative cell list. border, ocean_border and
    neighbors are views derived from the grid and are recomputed by
    borders.refresh_regions() whenever the grid changes.
    """

    id: int
    coordinates: List[Coordinate] = field(default_factory=list)
    border: List[Coordinate] = field(default_factory=list)
    ocean_border: List[Coordinate] = field(default_factory=list)
    neighbors: List[int] = field(default_factory=list)
    name: str = ""

    @property
    def size(self) -> int:
        return len(self.coordinates)

    @property
    def is_coastal(self) -> bool:
        return len(self.ocean_border) > 0

    def center(self) -> Tuple[float, float]:
        """Mean (x, y) of the region's cells."""
        if not self.coordinates:
            raise ValueError(f"Region {self.id} has no cells")
        xs, ys = zip(*self.coordinates)
        return sum(xs) / len(xs), sum(ys) / len(ys)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form (lists and ints only)."""
        return {
            "id": self.id,
            "name": self.name,
            "coordinates": [[x, y] for x, y in self.coordinates],
            "border": [[x, y] for x, y in self.border],
            "ocean_border": [[x, y] for x, y in self.ocean_border],
            "neighbors": list(self.neighbors),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Region":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            coordinates=[(int(x), int(y)) for x, y in data["coordinates"]],
            border=[(int(x), int(y)) for x, y in data.get("border", [])],
            ocean_border=[(int(x), int(y)) for x, y in data.get("ocean_border", [])],
            neighbors=[int(n) for n in data.get("neighbors", [])],
        )


def regions_from_grid(grid: np.ndarray, region_count: int) -> List[Region]:
    """
    Collect region cell lists from a region grid.

    Cells are listed in row-major order so the result is deterministic.
    Regions with no cells are kept (they are caught by validation).
    """
    regions = [Region(id=region_id) for region_id in range(region_count)]
    ys, xs = np.nonzero(grid >= 0)
    labels = grid[ys, xs]
    for x, y, label in zip(xs.tolist(), ys.tolist(), labels.tolist()):
        regions[label].coordinates.append((x, y))
    return regions
