"""Seeded evolution simulation on a toroidal height field."""

from .config import ConfigError, SimulationConfig
from .environment import Environment, RoundStats
from .rng import InvalidRangeError, SeededRandom
from .simulation import SimulationRun, TerminalEvent, detect_terminal_event, run_simulation

__all__ = [
    "ConfigError",
    "Environment",
    "InvalidRangeError",
    "RoundStats",
    "SeededRandom",
    "SimulationConfig",
    "SimulationRun",
    "TerminalEvent",
    "detect_terminal_event",
    "run_simulation",
]
