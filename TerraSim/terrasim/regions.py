"""Square region grid with per-region carrying capacity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from . import config
from .config import SimulationConfig
from .terrain import HeightField


@dataclass(frozen=True)
class RegionBounds:
    start_x: int
    end_x: int
    start_y: int
    end_y: int

    @property
    def width(self) -> int:
        return self.end_x - self.start_x

    @property
    def height(self) -> int:
        return self.end_y - self.start_y


@dataclass(frozen=True)
class HighestPoint:
    x: int
    y: int
    height: float


@dataclass(frozen=True)
class RegionStatistics:
    average_height: float
    carrying_capacity: int
    highest_point: HighestPoint


@dataclass(frozen=True)
class Region:
    index: int
    bounds: RegionBounds
    statistics: RegionStatistics

    def contains_point(self, x: float, y: float) -> bool:
        b = self.bounds
        return b.start_x <= x < b.end_x and b.start_y <= y < b.end_y

    @property
    def carrying_capacity(self) -> int:
        return self.statistics.carrying_capacity


class RegionPartition:
    """Regions tiling the world, computed once at startup and read-only afterwards.

    Statistics come from a fixed sample grid inside each region; carrying
    capacity is each region's floored share of ``starting_organisms`` in
    proportion to its average height. A caller may instead hand over a
    ready-made region list, which is used as is.
    """

    def __init__(
        self,
        cfg: SimulationConfig,
        terrain: HeightField,
        regions: Optional[Sequence[Region]] = None,
    ) -> None:
        self.cfg = cfg
        self.terrain = terrain
        if regions is not None:
            self._regions = list(regions)
        else:
            self._regions = self._calculate_regions()

    @property
    def regions(self) -> List[Region]:
        return list(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    def _calculate_bounds(self) -> List[RegionBounds]:
        per_side = self.cfg.regions_per_side
        size = self.cfg.region_size
        bounds = []
        for ry in range(per_side):
            for rx in range(per_side):
                bounds.append(
                    RegionBounds(
                        start_x=rx * size,
                        end_x=(rx + 1) * size,
                        start_y=ry * size,
                        end_y=(ry + 1) * size,
                    )
                )
        return bounds

    def _sample(self, bounds: RegionBounds) -> tuple[float, HighestPoint]:
        step_x = max(1, bounds.width // config.REGION_SAMPLE_GRID)
        step_y = max(1, bounds.height // config.REGION_SAMPLE_GRID)
        total = 0.0
        count = 0
        best = HighestPoint(x=bounds.start_x, y=bounds.start_y, height=-1.0)
        for y in range(bounds.start_y, bounds.end_y, step_y):
            for x in range(bounds.start_x, bounds.end_x, step_x):
                height = self.terrain.get_height(x, y)
                total += height
                count += 1
                if height > best.height:
                    best = HighestPoint(x=x, y=y, height=height)
        return total / count, best

    def _calculate_regions(self) -> List[Region]:
        all_bounds = self._calculate_bounds()
        samples = [self._sample(bounds) for bounds in all_bounds]
        total_average = sum(average for average, _ in samples)

        regions = []
        for index, (bounds, (average, highest)) in enumerate(zip(all_bounds, samples)):
            if total_average > 0:
                capacity = int(self.cfg.starting_organisms * (average / total_average))
            else:
                capacity = self.cfg.starting_organisms // len(all_bounds)
            regions.append(
                Region(
                    index=index,
                    bounds=bounds,
                    statistics=RegionStatistics(
                        average_height=average,
                        carrying_capacity=capacity,
                        highest_point=highest,
                    ),
                )
            )
        return regions

    def region_at(self, x: float, y: float) -> Optional[Region]:
        for region in self._regions:
            if region.contains_point(x, y):
                return region
        return None

    def region_index_at(self, x: float, y: float) -> Optional[int]:
        for position, region in enumerate(self._regions):
            if region.contains_point(x, y):
                return position
        return None

    def index_of(self, region: Region) -> int:
        for position, candidate in enumerate(self._regions):
            if candidate is region:
                return position
        return self._regions.index(region)

    def total_carrying_capacity(self) -> int:
        return sum(region.carrying_capacity for region in self._regions)

    def high_point_region(self) -> Optional[Region]:
        """Region holding the world's single highest sampled point (first on ties)."""
        best: Optional[Region] = None
        for region in self._regions:
            if best is None or region.statistics.highest_point.height > best.statistics.highest_point.height:
                best = region
        return best

    def high_point_region_index(self) -> Optional[int]:
        region = self.high_point_region()
        if region is None:
            return None
        return self.index_of(region)
