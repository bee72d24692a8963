"""Shared fixtures for the terrasim test suite."""

from collections import deque
from typing import Any, Deque, Dict, List, Tuple

import numpy as np
import pytest

from terrasim.config import SimulationConfig
from terrasim.regions import HighestPoint, Region, RegionBounds, RegionStatistics
from terrasim.rng import SeededRandom
from terrasim.strategies import ReproductionContext


class ScriptedRandom:
    """Stand-in generator that replays queued values and records every call."""

    def __init__(self, ints=(), floats=(), booleans=()) -> None:
        self.queues: Dict[str, Deque[Any]] = {
            "next_int": deque(ints),
            "next_float": deque(floats),
            "next_boolean": deque(booleans),
        }
        self.calls: List[Tuple[str, tuple]] = []

    def _pop(self, name: str, args: tuple) -> Any:
        self.calls.append((name, args))
        queue = self.queues[name]
        if not queue:
            raise AssertionError(f"unexpected {name}{args}; nothing left in the script")
        return queue.popleft()

    def next_int(self, min_value, max_value):
        return self._pop("next_int", (min_value, max_value))

    def next_float(self, min_value, max_value):
        return self._pop("next_float", (min_value, max_value))

    def next_boolean(self, probability=0.5):
        return self._pop("next_boolean", (probability,))

    def exhausted(self) -> bool:
        return all(not queue for queue in self.queues.values())

    def methods(self) -> List[str]:
        return [name for name, _ in self.calls]


def flat_map(size: int, height: float = 100.0) -> np.ndarray:
    return np.full((size, size), height, dtype=np.float64)


def single_region(size: int, capacity: int, peak: float = 100.0) -> Region:
    return Region(
        index=0,
        bounds=RegionBounds(start_x=0, end_x=size, start_y=0, end_y=size),
        statistics=RegionStatistics(
            average_height=peak,
            carrying_capacity=capacity,
            highest_point=HighestPoint(x=0, y=0, height=peak),
        ),
    )


@pytest.fixture
def small_config() -> SimulationConfig:
    """Small, fast world for tests."""
    return SimulationConfig(
        world_size=100,
        world_max_height=1000.0,
        random_seed=12345,
        starting_organisms=50,
        max_life_span=10,
        deliberate_mutation_probability=0.2,
        region_count=4,
    )


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def make_context(small_config):
    def _make(rng=None, **changes) -> ReproductionContext:
        cfg = small_config.replace(**changes) if changes else small_config
        return ReproductionContext(cfg=cfg, rng=rng if rng is not None else SeededRandom(cfg.random_seed))

    return _make
