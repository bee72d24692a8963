"""Reproduction strategies.

Every strategy turns one selected parent (addressed by its index in the
height-sorted parent list of a region) into zero or more offspring. Draws from
the shared generator happen in a fixed order per strategy; reordering them
changes every later draw of the run.

direct_offset
    One child per parent. The child inherits the parent's deliberate-mutation
    values, each flipped with ``deliberate_mutation_probability`` (+-1 becomes
    0, 0 becomes +1 or -1). The child's cumulative offset is the parent's
    offset plus the parent's pre-mutation value, clamped to half a region. The
    child is placed at the parent's position shifted by the parent's offset on
    each axis whose pre-mutation value is non-zero.

random_offset
    One child per parent, shifted by ``next_int(-5, 5)`` on x then y.

genetic / genetic_probabilistic
    Parents at odd 0-based indices mate with the preceding parent and produce
    two children; a trailing parent of an odd-length list reproduces alone.
    All genes of every child are mutated in order, then each child is placed
    from its dominant genes. ``genetic`` lets the higher dominance factor win
    (set 1 on ties); ``genetic_probabilistic`` draws the winner.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from . import config
from .config import SimulationConfig
from .organisms import (
    DirectOffsetTraits,
    Gene,
    GeneSet,
    GeneticTraits,
    Organism,
    RandomOffsetTraits,
    Traits,
    clamp,
    wrap,
)
from .rng import SeededRandom


@dataclass(frozen=True)
class ReproductionContext:
    cfg: SimulationConfig
    rng: SeededRandom

    @property
    def world_size(self) -> int:
        return self.cfg.world_size

    @property
    def mutation_probability(self) -> float:
        return self.cfg.deliberate_mutation_probability

    @property
    def max_relative_mutation(self) -> int:
        return self.cfg.half_region_size


class ReproductionStrategy:
    name = ""

    def initial_traits(self, ctx: ReproductionContext) -> Traits:
        raise NotImplementedError

    def reproduce(self, parents: Sequence[Organism], index: int, ctx: ReproductionContext) -> List[Organism]:
        raise NotImplementedError


def flip_mutation(value: int, probability: float, rng: SeededRandom) -> int:
    if rng.next_boolean(probability):
        if value == 0:
            return 1 if rng.next_boolean() else -1
        return 0
    return value


class DirectOffsetStrategy(ReproductionStrategy):
    name = config.STRATEGY_DIRECT_OFFSET

    def initial_traits(self, ctx: ReproductionContext) -> Traits:
        return DirectOffsetTraits(
            deliberate_mutation_x=ctx.rng.next_int(0, 2) - 1,
            deliberate_mutation_y=ctx.rng.next_int(0, 2) - 1,
        )

    def reproduce(self, parents: Sequence[Organism], index: int, ctx: ReproductionContext) -> List[Organism]:
        parent = parents[index]
        traits = parent.traits
        if not isinstance(traits, DirectOffsetTraits):
            raise TypeError(f"{self.name} strategy cannot breed {type(traits).__name__}")

        p = ctx.mutation_probability
        new_mutation_x = flip_mutation(traits.deliberate_mutation_x, p, ctx.rng)
        new_mutation_y = flip_mutation(traits.deliberate_mutation_y, p, ctx.rng)

        offset_x = traits.offsprings_x_distance if traits.deliberate_mutation_x != 0 else 0
        offset_y = traits.offsprings_y_distance if traits.deliberate_mutation_y != 0 else 0

        limit = ctx.cfg.half_region_size
        child_traits = DirectOffsetTraits(
            deliberate_mutation_x=new_mutation_x,
            deliberate_mutation_y=new_mutation_y,
            offsprings_x_distance=clamp(
                traits.offsprings_x_distance + traits.deliberate_mutation_x, -limit, limit
            ),
            offsprings_y_distance=clamp(
                traits.offsprings_y_distance + traits.deliberate_mutation_y, -limit, limit
            ),
        )
        return [
            Organism(
                x=wrap(parent.x + offset_x, ctx.world_size),
                y=wrap(parent.y + offset_y, ctx.world_size),
                rounds_lived=0,
                traits=child_traits,
            )
        ]


class RandomOffsetStrategy(ReproductionStrategy):
    name = config.STRATEGY_RANDOM_OFFSET

    def initial_traits(self, ctx: ReproductionContext) -> Traits:
        return RandomOffsetTraits()

    def reproduce(self, parents: Sequence[Organism], index: int, ctx: ReproductionContext) -> List[Organism]:
        parent = parents[index]
        dx = ctx.rng.next_int(-config.RANDOM_OFFSET_RANGE, config.RANDOM_OFFSET_RANGE)
        dy = ctx.rng.next_int(-config.RANDOM_OFFSET_RANGE, config.RANDOM_OFFSET_RANGE)
        return [
            Organism(
                x=wrap(parent.x + dx, ctx.world_size),
                y=wrap(parent.y + dy, ctx.world_size),
                rounds_lived=0,
                traits=RandomOffsetTraits(),
            )
        ]


def mutate_gene(gene: Gene, ctx: ReproductionContext) -> Gene:
    """Flip the deliberate flag, then drift an active gene by -1, 0 or +1."""
    rng = ctx.rng
    deliberate = gene.deliberate_mutation
    if rng.next_boolean(ctx.mutation_probability):
        deliberate = not deliberate
    if not deliberate:
        return replace(gene, deliberate_mutation=False)

    limit = ctx.max_relative_mutation
    size = clamp(gene.size_of_relative_mutation + rng.next_int(-1, 1), -limit, limit)
    dominance = gene.dominance_factor
    if size != 0 and rng.next_boolean(ctx.mutation_probability):
        dominance = rng.next_int(0, config.DOMINANCE_MAX)
    return Gene(
        deliberate_mutation=True,
        size_of_relative_mutation=size,
        absolute_position=wrap(gene.absolute_position + size, ctx.world_size),
        dominance_factor=dominance,
    )


def mutate_gene_set(gene_set: GeneSet, ctx: ReproductionContext) -> GeneSet:
    gene_x = mutate_gene(gene_set.gene_x, ctx)
    gene_y = mutate_gene(gene_set.gene_y, ctx)
    return GeneSet(gene_x=gene_x, gene_y=gene_y)


def cross(current: GeneticTraits, partner: GeneticTraits) -> Tuple[GeneticTraits, GeneticTraits]:
    """Pair x genes of one parent with y genes of the other."""
    a1, a2 = current.gene_set_1, current.gene_set_2
    b1, b2 = partner.gene_set_1, partner.gene_set_2
    first = GeneticTraits(
        gene_set_1=GeneSet(gene_x=a1.gene_x, gene_y=b2.gene_y),
        gene_set_2=GeneSet(gene_x=a2.gene_x, gene_y=b1.gene_y),
    )
    second = GeneticTraits(
        gene_set_1=GeneSet(gene_x=b1.gene_x, gene_y=a2.gene_y),
        gene_set_2=GeneSet(gene_x=b2.gene_x, gene_y=a1.gene_y),
    )
    return first, second


def dominance_outcome(rng: SeededRandom, df1: int, df2: int) -> int:
    """Pick gene 0 or 1; dominance is a tendency, not a strict ordering."""
    midpoint = (df1 + df2) / 2
    roll = rng.next_int(0, config.DOMINANCE_MAX)
    if df1 == df2:
        return 0 if roll < midpoint else 1
    lower, higher = (0, 1) if df1 < df2 else (1, 0)
    return lower if roll < midpoint else higher


class GeneticStrategy(ReproductionStrategy):
    name = config.STRATEGY_GENETIC

    def initial_traits(self, ctx: ReproductionContext) -> Traits:
        center = ctx.cfg.world_center
        genes = [
            Gene(
                deliberate_mutation=False,
                size_of_relative_mutation=0,
                absolute_position=center,
                dominance_factor=ctx.rng.next_int(0, config.DOMINANCE_MAX),
            )
            for _ in range(4)
        ]
        return GeneticTraits(
            gene_set_1=GeneSet(gene_x=genes[0], gene_y=genes[1]),
            gene_set_2=GeneSet(gene_x=genes[2], gene_y=genes[3]),
        )

    def _choose(self, gene1: Gene, gene2: Gene, ctx: ReproductionContext) -> Gene:
        return gene1 if gene1.dominance_factor >= gene2.dominance_factor else gene2

    def place(self, traits: GeneticTraits, ctx: ReproductionContext) -> Tuple[int, int]:
        s1, s2 = traits.gene_set_1, traits.gene_set_2
        gene_x = self._choose(s1.gene_x, s2.gene_x, ctx)
        gene_y = self._choose(s1.gene_y, s2.gene_y, ctx)
        return wrap(gene_x.absolute_position, ctx.world_size), wrap(gene_y.absolute_position, ctx.world_size)

    def _mutate(self, traits: GeneticTraits, ctx: ReproductionContext) -> GeneticTraits:
        gene_set_1 = mutate_gene_set(traits.gene_set_1, ctx)
        gene_set_2 = mutate_gene_set(traits.gene_set_2, ctx)
        return GeneticTraits(gene_set_1=gene_set_1, gene_set_2=gene_set_2)

    def reproduce(self, parents: Sequence[Organism], index: int, ctx: ReproductionContext) -> List[Organism]:
        current = parents[index].traits
        if not isinstance(current, GeneticTraits):
            raise TypeError(f"{self.name} strategy cannot breed {type(current).__name__}")

        if index % 2 == 1:
            partner = parents[index - 1].traits
            if not isinstance(partner, GeneticTraits):
                raise TypeError(f"{self.name} strategy cannot breed {type(partner).__name__}")
            first, second = cross(current, partner)
            children = [self._mutate(first, ctx), self._mutate(second, ctx)]
        elif index == len(parents) - 1:
            children = [self._mutate(current, ctx)]
        else:
            return []

        offspring = []
        for traits in children:
            x, y = self.place(traits, ctx)
            offspring.append(Organism(x=x, y=y, rounds_lived=0, traits=traits))
        return offspring


class ProbabilisticGeneticStrategy(GeneticStrategy):
    name = config.STRATEGY_GENETIC_PROBABILISTIC

    def _choose(self, gene1: Gene, gene2: Gene, ctx: ReproductionContext) -> Gene:
        if dominance_outcome(ctx.rng, gene1.dominance_factor, gene2.dominance_factor) == 0:
            return gene1
        return gene2


STRATEGIES: Dict[str, type[ReproductionStrategy]] = {
    DirectOffsetStrategy.name: DirectOffsetStrategy,
    RandomOffsetStrategy.name: RandomOffsetStrategy,
    GeneticStrategy.name: GeneticStrategy,
    ProbabilisticGeneticStrategy.name: ProbabilisticGeneticStrategy,
}


def get_strategy(name: str) -> ReproductionStrategy:
    name = config.STRATEGY_ALIASES.get(name, name)
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"unknown reproduction strategy {name!r}") from None
