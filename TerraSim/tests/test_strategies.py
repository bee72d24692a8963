import pytest

from terrasim import config
from terrasim.organisms import (
    DirectOffsetTraits,
    Gene,
    GeneSet,
    GeneticTraits,
    Organism,
    RandomOffsetTraits,
)
from terrasim.strategies import (
    DirectOffsetStrategy,
    GeneticStrategy,
    ProbabilisticGeneticStrategy,
    RandomOffsetStrategy,
    cross,
    dominance_outcome,
    get_strategy,
    mutate_gene,
)


def _gene(df, pos=50, deliberate=False, size=0) -> Gene:
    return Gene(
        deliberate_mutation=deliberate,
        size_of_relative_mutation=size,
        absolute_position=pos,
        dominance_factor=df,
    )


def _genetic(x1, y1, x2, y2) -> GeneticTraits:
    return GeneticTraits(gene_set_1=GeneSet(gene_x=x1, gene_y=y1), gene_set_2=GeneSet(gene_x=x2, gene_y=y2))


def _genetic_parent(seed_df, x=50, y=50) -> Organism:
    traits = _genetic(_gene(seed_df), _gene(seed_df + 1), _gene(seed_df + 2), _gene(seed_df + 3))
    return Organism(x=x, y=y, rounds_lived=3, traits=traits)


def _direct_parent(dm_x, dm_y, off_x, off_y, x=50, y=50) -> Organism:
    traits = DirectOffsetTraits(
        deliberate_mutation_x=dm_x,
        deliberate_mutation_y=dm_y,
        offsprings_x_distance=off_x,
        offsprings_y_distance=off_y,
    )
    return Organism(x=x, y=y, rounds_lived=3, traits=traits)


# ---------------------------------------------------------------------------
# direct offset
# ---------------------------------------------------------------------------


def test_direct_offset_initial_traits(make_context, scripted):
    rng = scripted(ints=[0, 2])
    traits = DirectOffsetStrategy().initial_traits(make_context(rng=rng))
    assert traits == DirectOffsetTraits(deliberate_mutation_x=-1, deliberate_mutation_y=1)
    assert rng.calls == [("next_int", (0, 2)), ("next_int", (0, 2))]


def test_direct_offset_uses_pre_mutation_values(make_context, scripted):
    rng = scripted(booleans=[False, True, True])
    parent = _direct_parent(1, 0, 10, 7)
    (child,) = DirectOffsetStrategy().reproduce([parent], 0, make_context(rng=rng))

    assert rng.calls == [("next_boolean", (0.2,)), ("next_boolean", (0.2,)), ("next_boolean", (0.5,))]
    assert child.traits == DirectOffsetTraits(
        deliberate_mutation_x=1,
        deliberate_mutation_y=1,
        offsprings_x_distance=11,
        offsprings_y_distance=7,
    )
    assert child.position == (60, 50)
    assert child.rounds_lived == 0
    assert not child.marked_for_death


def test_direct_offset_flip_to_zero(make_context, scripted):
    rng = scripted(booleans=[True, False])
    (child,) = DirectOffsetStrategy().reproduce([_direct_parent(-1, 1, 0, 0)], 0, make_context(rng=rng))
    assert child.traits.deliberate_mutation_x == 0
    assert child.traits.deliberate_mutation_y == 1
    assert rng.exhausted()


def test_direct_offset_clamped_to_half_region(make_context, scripted):
    limit = make_context().cfg.half_region_size
    rng = scripted(booleans=[False, False])
    parent = _direct_parent(1, -1, limit, -limit)
    (child,) = DirectOffsetStrategy().reproduce([parent], 0, make_context(rng=rng))
    assert child.traits.offsprings_x_distance == limit
    assert child.traits.offsprings_y_distance == -limit


def test_direct_offset_zero_mutation_means_no_move(make_context, scripted):
    rng = scripted(booleans=[False, False])
    parent = _direct_parent(0, 0, 20, -20, x=12, y=34)
    (child,) = DirectOffsetStrategy().reproduce([parent], 0, make_context(rng=rng))
    assert child.position == (12, 34)


def test_direct_offset_wraps_position(make_context, scripted):
    rng = scripted(booleans=[False, False])
    parent = _direct_parent(1, -1, 10, -5, x=95, y=3)
    (child,) = DirectOffsetStrategy().reproduce([parent], 0, make_context(rng=rng))
    assert child.position == (5, 98)


# ---------------------------------------------------------------------------
# random offset
# ---------------------------------------------------------------------------


def test_random_offset(make_context, scripted):
    rng = scripted(ints=[3, -5])
    parent = Organism(x=98, y=2, rounds_lived=2, traits=RandomOffsetTraits())
    (child,) = RandomOffsetStrategy().reproduce([parent], 0, make_context(rng=rng))
    assert child.position == (1, 97)
    assert rng.calls == [("next_int", (-5, 5)), ("next_int", (-5, 5))]


def test_random_offset_initial_traits_draw_nothing(make_context, scripted):
    rng = scripted()
    assert RandomOffsetStrategy().initial_traits(make_context(rng=rng)) == RandomOffsetTraits()
    assert rng.calls == []


# ---------------------------------------------------------------------------
# gene mutation
# ---------------------------------------------------------------------------


def test_gene_unchanged_when_flag_stays_off(make_context, scripted):
    rng = scripted(booleans=[False])
    gene = _gene(100)
    assert mutate_gene(gene, make_context(rng=rng)) == gene
    assert rng.exhausted()


def test_gene_switched_on_drifts_and_redraws_dominance(make_context, scripted):
    rng = scripted(booleans=[True, True], ints=[1, 7777])
    mutated = mutate_gene(_gene(100, pos=50), make_context(rng=rng))
    assert mutated == _gene(7777, pos=51, deliberate=True, size=1)
    assert rng.methods() == ["next_boolean", "next_int", "next_boolean", "next_int"]
    assert rng.calls[1] == ("next_int", (-1, 1))
    assert rng.calls[3] == ("next_int", (0, config.DOMINANCE_MAX))


def test_gene_switched_off(make_context, scripted):
    rng = scripted(booleans=[True])
    mutated = mutate_gene(_gene(100, pos=50, deliberate=True, size=3), make_context(rng=rng))
    assert mutated == _gene(100, pos=50, deliberate=False, size=3)


def test_gene_size_clamped_and_position_wraps(make_context, scripted):
    limit = make_context().cfg.half_region_size
    rng = scripted(booleans=[False, False], ints=[1])
    mutated = mutate_gene(_gene(100, pos=99, deliberate=True, size=limit), make_context(rng=rng))
    assert mutated.size_of_relative_mutation == limit
    assert mutated.absolute_position == (99 + limit) % 100
    assert mutated.dominance_factor == 100


def test_gene_size_back_to_zero_skips_dominance_draw(make_context, scripted):
    rng = scripted(booleans=[False], ints=[-1])
    mutated = mutate_gene(_gene(100, pos=40, deliberate=True, size=1), make_context(rng=rng))
    assert mutated.size_of_relative_mutation == 0
    assert mutated.absolute_position == 40
    assert rng.exhausted()


# ---------------------------------------------------------------------------
# genetic strategies
# ---------------------------------------------------------------------------


def test_genetic_initial_traits(make_context, scripted):
    rng = scripted(ints=[1, 2, 3, 4])
    ctx = make_context(rng=rng)
    traits = GeneticStrategy().initial_traits(ctx)
    center = ctx.cfg.world_center
    assert traits == _genetic(_gene(1, center), _gene(2, center), _gene(3, center), _gene(4, center))
    assert all(call == ("next_int", (0, config.DOMINANCE_MAX)) for call in rng.calls)


def test_cross_pattern():
    a = _genetic(_gene(1), _gene(2), _gene(3), _gene(4))
    b = _genetic(_gene(11), _gene(12), _gene(13), _gene(14))
    first, second = cross(a, b)
    assert first == _genetic(_gene(1), _gene(14), _gene(3), _gene(12))
    assert second == _genetic(_gene(11), _gene(4), _gene(13), _gene(2))


def test_strict_placement_higher_dominance_wins_ties_favor_set_one(make_context):
    traits = _genetic(_gene(500, pos=10), _gene(1, pos=30), _gene(500, pos=20), _gene(2, pos=40))
    assert GeneticStrategy().place(traits, make_context()) == (10, 40)


@pytest.mark.parametrize(
    "df1, df2, roll, expected",
    [
        (100, 100, 50, 0),
        (100, 100, 100, 1),
        (200, 800, 499, 0),
        (200, 800, 500, 1),
        (800, 200, 10, 1),
        (800, 200, 9000, 0),
    ],
)
def test_dominance_outcome(scripted, df1, df2, roll, expected):
    rng = scripted(ints=[roll])
    assert dominance_outcome(rng, df1, df2) == expected
    assert rng.calls == [("next_int", (0, config.DOMINANCE_MAX))]


def test_probabilistic_placement_draws_x_then_y(make_context, scripted):
    rng = scripted(ints=[0, 10000])
    traits = _genetic(_gene(10, pos=1), _gene(10, pos=2), _gene(20, pos=3), _gene(20, pos=4))
    assert ProbabilisticGeneticStrategy().place(traits, make_context(rng=rng)) == (1, 4)
    assert rng.exhausted()


@pytest.mark.parametrize("strategy_cls", [GeneticStrategy, ProbabilisticGeneticStrategy])
@pytest.mark.parametrize("count", [1, 2, 4, 5, 7])
def test_genetic_offspring_count_matches_parent_count(make_context, strategy_cls, count):
    parents = [_genetic_parent(10 * i) for i in range(count)]
    ctx = make_context()
    strategy = strategy_cls()
    produced = [len(strategy.reproduce(parents, i, ctx)) for i in range(count)]
    assert sum(produced) == count
    assert all(n == 0 for n in produced[0:-1:2])


def test_sexual_reproduction_mutates_everything_before_placing(make_context, scripted):
    rng = scripted(booleans=[False] * 8, ints=[0, 0, 0, 0])
    parents = [_genetic_parent(100), _genetic_parent(200)]
    children = ProbabilisticGeneticStrategy().reproduce(parents, 1, make_context(rng=rng))
    assert len(children) == 2
    assert rng.methods() == ["next_boolean"] * 8 + ["next_int"] * 4
    first, second = cross(parents[1].traits, parents[0].traits)
    assert [c.traits for c in children] == [first, second]


def test_asexual_child_copies_parent_genes(make_context, scripted):
    rng = scripted(booleans=[False] * 4)
    parents = [_genetic_parent(100), _genetic_parent(200), _genetic_parent(300)]
    (child,) = GeneticStrategy().reproduce(parents, 2, make_context(rng=rng))
    assert child.traits == parents[2].traits
    assert child.rounds_lived == 0
    assert rng.exhausted()


def test_even_index_that_is_not_last_produces_nothing(make_context, scripted):
    rng = scripted()
    parents = [_genetic_parent(100), _genetic_parent(200)]
    assert GeneticStrategy().reproduce(parents, 0, make_context(rng=rng)) == []
    assert rng.calls == []


def test_get_strategy():
    assert isinstance(get_strategy("A"), DirectOffsetStrategy)
    assert isinstance(get_strategy("random_offset"), RandomOffsetStrategy)
    assert isinstance(get_strategy("D"), ProbabilisticGeneticStrategy)
    with pytest.raises(ValueError):
        get_strategy("Z")


def test_wrong_payload_rejected(make_context):
    parent = Organism(x=0, y=0, rounds_lived=1, traits=RandomOffsetTraits())
    with pytest.raises(TypeError):
        DirectOffsetStrategy().reproduce([parent], 0, make_context())
