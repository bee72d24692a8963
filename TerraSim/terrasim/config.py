"""Simulation tunables and the per-run configuration value."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional
import math
import time

# World
WORLD_SIZE = 1200
WORLD_MAX_HEIGHT = 1000.0
REGION_COUNT = 100

# Population
STARTING_ORGANISMS = 1000
MAX_LIFE_SPAN = 10
DELIBERATE_MUTATION_PROBABILITY = 0.2

# Terrain generation
GAUSSIAN_COUNT = 12
GAUSSIAN_AMPLITUDE_MIN = 0.3
GAUSSIAN_AMPLITUDE_MAX = 1.0
GAUSSIAN_SIGMA_MIN = 0.05
GAUSSIAN_SIGMA_MAX = 0.2

# Region statistics are sampled on this many points per axis
REGION_SAMPLE_GRID = 10

# Reproduction
DOMINANCE_MAX = 10000
RANDOM_OFFSET_RANGE = 5
MIN_PARENT_AGE = 1

STRATEGY_DIRECT_OFFSET = "direct_offset"
STRATEGY_RANDOM_OFFSET = "random_offset"
STRATEGY_GENETIC = "genetic"
STRATEGY_GENETIC_PROBABILISTIC = "genetic_probabilistic"

STRATEGY_NAMES = (
    STRATEGY_DIRECT_OFFSET,
    STRATEGY_RANDOM_OFFSET,
    STRATEGY_GENETIC,
    STRATEGY_GENETIC_PROBABILISTIC,
)

# Historical single-letter names of the organism species.
STRATEGY_ALIASES: Dict[str, str] = {
    "A": STRATEGY_DIRECT_OFFSET,
    "B": STRATEGY_RANDOM_OFFSET,
    "C": STRATEGY_GENETIC,
    "D": STRATEGY_GENETIC_PROBABILISTIC,
}


class ConfigError(ValueError):
    """Raised when a configuration cannot describe a valid world."""


def _clock_seed() -> int:
    return int(time.time() * 1000) & 0xFFFFFFFF


@dataclass(frozen=True)
class SimulationConfig:
    world_size: int = WORLD_SIZE
    world_max_height: float = WORLD_MAX_HEIGHT
    random_seed: Optional[int] = None
    starting_organisms: int = STARTING_ORGANISMS
    max_life_span: int = MAX_LIFE_SPAN
    deliberate_mutation_probability: float = DELIBERATE_MUTATION_PROBABILITY
    region_count: int = REGION_COUNT
    strategy: str = STRATEGY_DIRECT_OFFSET
    _regions_per_side: int = field(init=False, repr=False, compare=False, default=0)

    def __post_init__(self) -> None:
        if self.random_seed is None:
            object.__setattr__(self, "random_seed", _clock_seed())
        strategy = STRATEGY_ALIASES.get(self.strategy, self.strategy)
        if strategy not in STRATEGY_NAMES:
            raise ConfigError(
                f"unknown strategy {self.strategy!r}; expected one of {', '.join(STRATEGY_NAMES)}"
            )
        object.__setattr__(self, "strategy", strategy)

        if self.world_size <= 0:
            raise ConfigError(f"world_size must be positive, got {self.world_size}")
        if self.world_max_height <= 0:
            raise ConfigError(f"world_max_height must be positive, got {self.world_max_height}")
        if self.starting_organisms < 0:
            raise ConfigError(f"starting_organisms must be non-negative, got {self.starting_organisms}")
        if self.max_life_span < 1:
            raise ConfigError(f"max_life_span must be at least 1, got {self.max_life_span}")
        if not 0.0 <= self.deliberate_mutation_probability <= 1.0:
            raise ConfigError(
                "deliberate_mutation_probability must be within [0, 1], "
                f"got {self.deliberate_mutation_probability}"
            )
        if self.region_count < 1:
            raise ConfigError(f"region_count must be positive, got {self.region_count}")
        per_side = math.isqrt(self.region_count)
        if per_side * per_side != self.region_count:
            raise ConfigError(f"region_count must be a perfect square, got {self.region_count}")
        if self.world_size % per_side != 0:
            raise ConfigError(
                f"world_size {self.world_size} is not divisible by {per_side} regions per side"
            )
        object.__setattr__(self, "_regions_per_side", per_side)

    @property
    def regions_per_side(self) -> int:
        return self._regions_per_side

    @property
    def region_size(self) -> int:
        return self.world_size // self._regions_per_side

    @property
    def half_region_size(self) -> int:
        return self.region_size // 2

    @property
    def world_center(self) -> int:
        return self.world_size // 2

    def replace(self, **changes: Any) -> "SimulationConfig":
        return replace(self, **changes)
