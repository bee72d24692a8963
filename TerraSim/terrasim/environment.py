"""Environment and round loop."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from numpy.typing import ArrayLike

from . import config
from .config import SimulationConfig
from .organisms import Organism
from .regions import Region, RegionPartition
from .rng import SeededRandom
from .strategies import ReproductionContext, ReproductionStrategy, get_strategy
from .terrain import HeightField


@dataclass
class RoundStats:
    round_number: int
    population: int
    births: int
    deaths: int
    pending_deaths: int


class Environment:
    """Owns the terrain, the region grid and the population of one run.

    Construction draws the terrain from the generator; ``initialize`` spawns the
    starting cohort and ``run_round`` advances one round. Every random draw goes
    through ``self.rng`` in a fixed order, so two environments built from equal
    configurations evolve identically.
    """

    def __init__(
        self,
        cfg: SimulationConfig,
        rng: Optional[SeededRandom] = None,
        height_map: Optional[ArrayLike] = None,
        regions: Optional[Sequence[Region]] = None,
    ) -> None:
        self.cfg = cfg
        self.rng = rng if rng is not None else SeededRandom(cfg.random_seed)
        self.terrain = HeightField(cfg, self.rng, height_map=height_map)
        self.partition = RegionPartition(cfg, self.terrain, regions=regions)
        self.strategy: ReproductionStrategy = get_strategy(cfg.strategy)
        self.context = ReproductionContext(cfg=cfg, rng=self.rng)
        self.organisms: List[Organism] = []
        self.round_number = 0

    def initialize(self) -> None:
        center = self.cfg.world_center
        for _ in range(self.cfg.starting_organisms):
            age = self.rng.next_int(0, self.cfg.max_life_span - 1)
            traits = self.strategy.initial_traits(self.context)
            self.organisms.append(Organism(x=center, y=center, rounds_lived=age, traits=traits))

    def initialize_with_organisms(self, organisms: Iterable[Organism]) -> None:
        self.organisms = [organism.copy() for organism in organisms]

    def reset(self) -> None:
        self.organisms = []
        self.round_number = 0

    def run_round(self) -> RoundStats:
        for organism in self.organisms:
            organism.step_age(self.cfg.max_life_span)
        pending_deaths = sum(1 for organism in self.organisms if organism.marked_for_death)

        offspring = self._reproduce()
        self.organisms.extend(offspring)

        survivors = [organism for organism in self.organisms if not organism.marked_for_death]
        deaths = len(self.organisms) - len(survivors)
        self.organisms = survivors
        self.round_number += 1
        return RoundStats(
            round_number=self.round_number,
            population=len(self.organisms),
            births=len(offspring),
            deaths=deaths,
            pending_deaths=pending_deaths,
        )

    def _reproduce(self) -> List[Organism]:
        groups = self.group_organisms_by_region()
        offspring: List[Organism] = []
        for index, region in enumerate(self.partition.regions):
            members = groups.get(index, [])
            living = sum(1 for organism in members if not organism.marked_for_death)
            capacity = region.carrying_capacity
            if living >= capacity or not members:
                continue

            target = capacity - living
            eligible = [o for o in members if o.is_eligible_parent(config.MIN_PARENT_AGE)]
            if not eligible:
                continue
            selected = self._sort_by_height(eligible)[:target]
            for position in range(len(selected)):
                offspring.extend(self.strategy.reproduce(selected, position, self.context))
        return offspring

    def _sort_by_height(self, organisms: Sequence[Organism]) -> List[Organism]:
        """Highest first; equal heights are ordered by a draw from the generator."""
        rated: List[Tuple[float, Organism]] = [
            (self.terrain.get_height(o.x, o.y), o) for o in organisms
        ]

        def compare(a: Tuple[float, Organism], b: Tuple[float, Organism]) -> float:
            if a[0] != b[0]:
                return b[0] - a[0]
            return self.rng.next_float(0, 1) - 0.5

        rated.sort(key=cmp_to_key(compare))
        return [organism for _, organism in rated]

    def group_organisms_by_region(self) -> Dict[int, List[Organism]]:
        groups: Dict[int, List[Organism]] = {}
        for organism in self.organisms:
            index = self.partition.region_index_at(organism.x, organism.y)
            if index is None:
                continue
            groups.setdefault(index, []).append(organism)
        return groups

    def find_first_organism_in_region(self, region: Region) -> Optional[Organism]:
        for organism in self.organisms:
            if region.contains_point(organism.x, organism.y):
                return organism.copy()
        return None

    @property
    def organism_count(self) -> int:
        return len(self.organisms)

    def get_organisms(self) -> List[Organism]:
        return [organism.copy() for organism in self.organisms]

    def get_height(self, x: float, y: float) -> float:
        return self.terrain.get_height(x, y)

    @property
    def regions(self) -> List[Region]:
        return self.partition.regions

    def high_point_region(self) -> Optional[Region]:
        return self.partition.high_point_region()

    def high_point_region_index(self) -> Optional[int]:
        return self.partition.high_point_region_index()
