"""Simulation driver."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional
import csv

from .config import SimulationConfig
from .environment import Environment, RoundStats


@dataclass(frozen=True)
class TerminalEvent:
    organism_x: int
    organism_y: int
    region_index: int
    round_number: int


def detect_terminal_event(environment: Environment) -> Optional[TerminalEvent]:
    """First organism standing in the region that holds the world's highest point."""
    region = environment.high_point_region()
    if region is None:
        return None
    organism = environment.find_first_organism_in_region(region)
    if organism is None:
        return None
    return TerminalEvent(
        organism_x=organism.x,
        organism_y=organism.y,
        region_index=environment.high_point_region_index(),
        round_number=environment.round_number,
    )


class SimulationRun:
    """Drives one environment round by round until the terminal event fires."""

    def __init__(self, environment: Environment) -> None:
        self.environment = environment
        self.stats: List[RoundStats] = []
        self.terminal_event: Optional[TerminalEvent] = None

    @property
    def stopped(self) -> bool:
        return self.terminal_event is not None

    def advance(self) -> Optional[RoundStats]:
        if self.stopped:
            return None
        round_stats = self.environment.run_round()
        self.stats.append(round_stats)
        self.terminal_event = detect_terminal_event(self.environment)
        return round_stats

    def run(self, max_rounds: Optional[int] = None) -> List[RoundStats]:
        produced: List[RoundStats] = []
        while not self.stopped and (max_rounds is None or len(produced) < max_rounds):
            produced.append(self.advance())
        return produced


def _write_csv(stats: List[RoundStats], csv_path: str) -> None:
    with open(csv_path, "w", newline="") as handle:
        if not stats:
            return
        writer = csv.DictWriter(handle, fieldnames=list(asdict(stats[0]).keys()))
        writer.writeheader()
        for row in stats:
            writer.writerow(asdict(row))


def _summarize(stats: List[RoundStats], event: Optional[TerminalEvent] = None) -> Dict[str, object]:
    if not stats:
        return {
            "rounds": 0,
            "final_pop": 0,
            "peak_pop": 0,
            "avg_pop": 0.0,
            "total_births": 0,
            "total_deaths": 0,
            "terminal_event": event,
        }
    return {
        "rounds": len(stats),
        "final_pop": stats[-1].population,
        "peak_pop": max(s.population for s in stats),
        "avg_pop": sum(s.population for s in stats) / len(stats),
        "total_births": sum(s.births for s in stats),
        "total_deaths": sum(s.deaths for s in stats),
        "terminal_event": event,
    }


def _print_summary(summary: Dict[str, object]) -> None:
    print("summary:")
    print(f"  rounds={summary['rounds']} final_pop={summary['final_pop']} peak_pop={summary['peak_pop']}")
    print(
        f"  total_births={summary['total_births']} total_deaths={summary['total_deaths']} "
        f"avg_pop={summary['avg_pop']:.1f}"
    )
    event = summary["terminal_event"]
    if event is None:
        print("  terminal_event=none")
    else:
        print(
            f"  terminal_event round={event.round_number} region={event.region_index} "
            f"x={event.organism_x} y={event.organism_y}"
        )


def run_simulation(
    cfg: SimulationConfig,
    max_rounds: Optional[int] = None,
    log_every: int = 1,
    csv_path: Optional[str] = None,
    summary: bool = True,
) -> SimulationRun:
    env = Environment(cfg)
    env.initialize()
    sim = SimulationRun(env)

    if log_every:
        print(
            f"seed={cfg.random_seed} strategy={cfg.strategy} world={cfg.world_size} "
            f"regions={len(env.regions)} capacity={env.partition.total_carrying_capacity()} "
            f"pop={env.organism_count}"
        )
    while not sim.stopped and (max_rounds is None or len(sim.stats) < max_rounds):
        round_stats = sim.advance()
        if log_every and round_stats.round_number % log_every == 0:
            print(
                f"round={round_stats.round_number} pop={round_stats.population} "
                f"births={round_stats.births} deaths={round_stats.deaths} "
                f"pending={round_stats.pending_deaths}"
            )
    if log_every and sim.terminal_event is not None:
        event = sim.terminal_event
        print(
            f"terminal round={event.round_number} region={event.region_index} "
            f"x={event.organism_x} y={event.organism_y}"
        )
    if csv_path:
        _write_csv(sim.stats, csv_path)
    if summary:
        _print_summary(_summarize(sim.stats, sim.terminal_event))
    return sim
