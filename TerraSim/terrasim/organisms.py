"""Organism record and the heritable payload carried by each strategy."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union
import math


def wrap(coord: float, size: int) -> int:
    return math.floor(coord) % size


def clamp(value: int, low: int, high: int) -> int:
    return low if value < low else high if value > high else value


@dataclass(frozen=True)
class DirectOffsetTraits:
    deliberate_mutation_x: int = 0
    deliberate_mutation_y: int = 0
    offsprings_x_distance: int = 0
    offsprings_y_distance: int = 0


@dataclass(frozen=True)
class RandomOffsetTraits:
    pass


@dataclass(frozen=True)
class Gene:
    deliberate_mutation: bool
    size_of_relative_mutation: int
    absolute_position: int
    dominance_factor: int


@dataclass(frozen=True)
class GeneSet:
    gene_x: Gene
    gene_y: Gene


@dataclass(frozen=True)
class GeneticTraits:
    gene_set_1: GeneSet
    gene_set_2: GeneSet


Traits = Union[DirectOffsetTraits, RandomOffsetTraits, GeneticTraits]


@dataclass
class Organism:
    x: int
    y: int
    rounds_lived: int
    traits: Traits
    marked_for_death: bool = False

    def __post_init__(self) -> None:
        self.x = math.floor(self.x)
        self.y = math.floor(self.y)
        if self.rounds_lived < 0:
            raise ValueError(f"rounds_lived must be non-negative, got {self.rounds_lived}")

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def step_age(self, max_life_span: int) -> None:
        self.rounds_lived += 1
        if self.rounds_lived >= max_life_span:
            self.marked_for_death = True

    def should_die(self, max_life_span: int) -> bool:
        return self.rounds_lived >= max_life_span

    def mark_for_death(self) -> None:
        self.marked_for_death = True

    def is_eligible_parent(self, min_age: int = 1) -> bool:
        return self.rounds_lived >= min_age

    def copy(self) -> "Organism":
        return replace(self)
