"""
Generated world: the region grid plus the ordered region list.

A WorldMap is built once by pipeline.generate_world() and never changed by
this package afterwards. It converts to and from plain data (lists, ints,
strings) so it can cross a thread or process boundary.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np
import structlog

from .connectivity import edge_labels, label_components
from .errors import InvariantViolation
from .region import Region
from .terrain import LAND, OCEAN

logger = structlog.get_logger()

# Sea routes cost this many times the straight-line distance
SEA_DISTANCE_FACTOR = 5


@dataclass
class WorldMap:
    """Static board produced by world generation."""

    width: int
    height: int
    grid: np.ndarray
    regions: List[Region]
    seed: int
    continents: List[List[int]] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def land_cells(self) -> int:
        return int(np.count_nonzero(self.grid >= 0))

    def region(self, region_id: int) -> Region:
        return self.regions[region_id]

    def _resolve(self, region: Union[Region, int]) -> Region:
        return self.region(region) if isinstance(region, int) else region

    def create_continents(self) -> List[List[int]]:
        """
        Group regions into continents: clusters connected through neighbours.

        Returns:
            Lists of region ids, in order of each cluster's lowest region
        """
        visited = set()
        continents = []
        for region in self.regions:
            if region.id in visited:
                continue
            visited.add(region.id)
            queue = deque([region.id])
            members = []
            while queue:
                current = queue.popleft()
                members.append(current)
                for neighbor in self.regions[current].neighbors:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        queue.append(neighbor)
            continents.append(sorted(members))
        self.continents = continents
        return continents

    def distance(
        self, a: Union[Region, int], b: Union[Region, int]
    ) -> Optional[float]:
        """
        Travel distance between two regions.

        Neighbours are the straight-line distance between their centres
        apart. Non-neighbours that both touch the ocean are reachable by
        sea at SEA_DISTANCE_FACTOR times that distance. Anything else is
        unreachable and returns None.
        """
        a = self._resolve(a)
        b = self._resolve(b)
        ax, ay = a.center()
        bx, by = b.center()
        dist = math.hypot(ax - bx, ay - by)
        if b.id in a.neighbors or a.id in b.neighbors:
            return dist
        if a.is_coastal and b.is_coastal:
            return dist * SEA_DISTANCE_FACTOR
        return None

    def check_consistency(self) -> bool:
        """
        Check that grid labels and region cell lists agree.

        Every non-negative grid label must index a region and every region
        cell must carry that region's id. Mismatches are logged.
        """
        consistent = True
        labels = np.unique(self.grid[self.grid >= 0])
        for label in labels.tolist():
            if label >= len(self.regions):
                logger.error("Grid label has no region", label=label)
                consistent = False

        for index, region in enumerate(self.regions):
            if region.id != index:
                logger.error("Region id does not match position", index=index, id=region.id)
                consistent = False
            for x, y in region.coordinates:
                if not (0 <= x < self.width and 0 <= y < self.height):
                    logger.error("Region cell out of bounds", region=region.id, x=x, y=y)
                    consistent = False
                elif self.grid[y, x] != region.id:
                    logger.error(
                        "Region cell mislabelled",
                        region=region.id,
                        x=x,
                        y=y,
                        label=int(self.grid[y, x]),
                    )
                    consistent = False
        return consistent

    def validate(
        self,
        min_island_size: Optional[int] = None,
        min_country_size: Optional[int] = None,
    ) -> None:
        """
        Assert the structural invariants of a finished world.

        Raises:
            InvariantViolation: on the first broken invariant
        """
        if np.any(self.grid == LAND):
            raise InvariantViolation("Unassigned land remains after growth")
        if np.any((self.grid < 0) & (self.grid != OCEAN)):
            raise InvariantViolation("Grid contains unknown cell labels")
        if not self.check_consistency():
            raise InvariantViolation("Grid and region cell lists disagree")
        if sum(region.size for region in self.regions) != self.land_cells:
            raise InvariantViolation("Region cell lists do not cover the land exactly")

        for region in self.regions:
            if region.size == 0:
                raise InvariantViolation(f"Region {region.id} has no cells")
            for neighbor in region.neighbors:
                if region.id not in self.regions[neighbor].neighbors:
                    raise InvariantViolation(
                        f"Neighbour graph is asymmetric: {region.id} -> {neighbor}"
                    )
            if not set(region.ocean_border) <= set(region.border):
                raise InvariantViolation(
                    f"Region {region.id} has ocean border cells outside its border"
                )
            if (
                min_country_size is not None
                and region.size < min_country_size
                and region.neighbors
            ):
                raise InvariantViolation(
                    f"Region {region.id} is below the minimum size and has neighbours"
                )

        ocean_labels, ocean_count = label_components(self.grid == OCEAN)
        if ocean_count and len(edge_labels(ocean_labels)) != ocean_count:
            raise InvariantViolation("Ocean contains lakes not connected to the map edge")

        if min_island_size is not None:
            land_labels, land_count = label_components(self.grid >= 0)
            if land_count:
                sizes = np.bincount(land_labels.ravel())[1:]
                if sizes.min() < min_island_size:
                    raise InvariantViolation(
                        f"Land component of {int(sizes.min())} cells is below "
                        f"the minimum island size {min_island_size}"
                    )

    def to_dict(self) -> Dict[str, Any]:
        """Self-contained plain-data form of the world."""
        return {
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "grid": self.grid.tolist(),
            "regions": [region.to_dict() for region in self.regions],
            "continents": [list(c) for c in self.continents],
            "options": dict(self.options),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldMap":
        """Re-link a world from to_dict() output."""
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            grid=np.array(data["grid"], dtype=np.int32).reshape(
                int(data["height"]), int(data["width"])
            ),
            regions=[Region.from_dict(r) for r in data["regions"]],
            seed=int(data["seed"]),
            continents=[list(c) for c in data.get("continents", [])],
            options=dict(data.get("options", {})),
        )
