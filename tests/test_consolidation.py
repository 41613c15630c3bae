"""Tests for region consolidation."""

import numpy as np

from py_worldgen.core.borders import refresh_regions
from py_worldgen.core.consolidation import consolidate_regions, merge_region, reindex_regions
from py_worldgen.core.region import regions_from_grid
from py_worldgen.core.terrain import OCEAN


def strip(widths, height=3):
    """Horizontal strip of regions with the given column widths."""
    columns = []
    for region_id, width in enumerate(widths):
        columns.extend([region_id] * width)
    grid = np.array([columns] * height, dtype=np.int32)
    regions = regions_from_grid(grid, len(widths))
    refresh_regions(grid, regions)
    return grid, regions


class TestConsolidateRegions:
    """Test merging of undersized regions."""

    def test_merges_into_smallest_neighbour(self):
        grid, regions = strip([5, 1, 4])  # sizes 15, 3, 12
        merges = consolidate_regions(grid, regions, min_country_size=5)

        assert merges == 1
        assert [r.id for r in regions] == [0, 2]
        assert regions[1].size == 15
        assert np.all(grid[:, 5] == 2)
        assert regions[0].neighbors == [2]
        assert regions[1].neighbors == [0]

    def test_cascading_merges(self):
        """A merge result that is still too small keeps merging."""
        grid, regions = strip([1, 1, 6, 1])  # sizes 3, 3, 18, 3
        merges = consolidate_regions(grid, regions, min_country_size=10)

        assert len(regions) == 1
        assert regions[0].size == 27
        assert merges == 3
        assert regions[0].neighbors == []

    def test_isolated_small_region_survives(self):
        grid = np.array([
            [0, 0, 0, OCEAN, 1],
            [0, 0, 0, OCEAN, OCEAN],
        ], dtype=np.int32)
        regions = regions_from_grid(grid, 2)
        refresh_regions(grid, regions)
        merges = consolidate_regions(grid, regions, min_country_size=5)

        assert merges == 0
        assert len(regions) == 2
        assert regions[1].size == 1

    def test_idempotent(self):
        grid, regions = strip([2, 1, 3, 1, 2])
        consolidate_regions(grid, regions, min_country_size=6)
        assert consolidate_regions(grid, regions, min_country_size=6) == 0

    def test_fixpoint_invariant(self):
        grid, regions = strip([1, 2, 1, 5, 1, 1, 3])
        consolidate_regions(grid, regions, min_country_size=8)
        for region in regions:
            assert region.size >= 8 or not region.neighbors

    def test_tie_broken_by_lowest_id(self):
        grid, regions = strip([4, 1, 4])  # 12, 3, 12
        consolidate_regions(grid, regions, min_country_size=5)
        assert [r.id for r in regions] == [0, 2]
        assert regions[0].size == 15


class TestMergeAndReindex:
    """Test the helpers used by consolidation."""

    def test_merge_region_relabels_grid(self):
        grid, regions = strip([2, 2], height=1)
        merge_region(grid, regions[1], regions[0])
        assert np.all(grid == 0)
        assert regions[0].size == 4
        assert regions[1].size == 0

    def test_reindex_compacts_ids(self):
        grid, regions = strip([3, 1, 3])
        consolidate_regions(grid, regions, min_country_size=4)
        mapping = reindex_regions(grid, regions)

        assert mapping == {0: 0, 2: 1}
        assert [r.id for r in regions] == [0, 1]
        assert set(np.unique(grid).tolist()) == {0, 1}
        assert regions[0].neighbors == [1]
        assert regions[1].neighbors == [0]
        for region in regions:
            for x, y in region.coordinates:
                assert grid[y, x] == region.id
