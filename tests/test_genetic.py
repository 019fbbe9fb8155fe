import numpy as np
import pytest

from niceembed.genetic import Crossover, Mutation, genetic_algorithm


def _numeric_setup(seed=0):
    '''organisms are floats, the optimum is 3'''
    rng = np.random.default_rng(seed)
    created = []

    def random_organism():
        x = float(rng.uniform(-100, 100))
        created.append(x)
        return x

    def cost(x):
        return abs(x - 3.)

    crossover = Crossover(lambda a, b: (a + b)/2, 0.7)
    mutations = [Mutation(lambda x: x + float(rng.normal()), 0.5),
                 Mutation(lambda x: x*0.9, 0.2)]
    return cost, crossover, mutations, random_organism, created


def test_finds_no_worse_than_initial_population():
    cost, crossover, mutations, random_organism, created = _numeric_setup()
    best = genetic_algorithm(cost, crossover, mutations, random_organism,
                             20, 30, rng=1)
    assert len(created) == 20
    assert cost(best) <= min(cost(x) for x in created)


def test_is_reproducible_with_seeds():
    results = []
    for _ in range(2):
        cost, crossover, mutations, random_organism, _ = _numeric_setup(7)
        results.append(genetic_algorithm(cost, crossover, mutations,
                                         random_organism, 10, 15, rng=7))
    assert results[0] == results[1]


def test_costs_are_memoized():
    calls = []

    def cost(x):
        calls.append(x)
        return x

    values = iter(range(10))
    best = genetic_algorithm(cost, Crossover(lambda a, b: a + b, 0.),
                             [Mutation(lambda x: x - 1, 0.)],
                             lambda: next(values), 10, 25, rng=0)
    # nothing changes after the initial population: no re-evaluation
    assert len(calls) == 10
    assert best == 0


def test_best_is_tracked_across_generations():
    calls = []

    def cost(x):
        calls.append(x)
        return x

    counter = iter(range(100, 200))
    # every offspring is worse than its parent
    best = genetic_algorithm(cost, Crossover(lambda a, b: max(a, b) + 1, 1.),
                             [], lambda: next(counter), 5, 10, rng=0)
    assert best == 100
    assert len(calls) == 5 + 5*10


def test_mutations_do_not_alter_parents():
    created = []

    def random_organism():
        organism = [len(created)]
        created.append(organism)
        return organism

    def grow(organism):
        organism.append(0)
        return organism

    best = genetic_algorithm(len, Crossover(lambda a, b: a, 0.),
                             [Mutation(grow, 1.)], random_organism,
                             6, 4, rng=3)
    snapshot = [list(organism) for organism in created]
    assert snapshot == [[i] for i in range(6)]
    assert len(best) == 1


def test_mutations_do_not_alter_second_parent():
    created = []

    def random_organism():
        organism = [len(created)]
        created.append(organism)
        return organism

    def grow(organism):
        organism.append(0)
        return organism

    best = genetic_algorithm(len, Crossover(lambda a, b: b, 1.),
                             [Mutation(grow, 1.)], random_organism,
                             6, 4, rng=3)
    assert [list(organism) for organism in created] == [[i] for i in range(6)]
    assert len(best) == 1
    assert any(best is organism for organism in created)


def test_unchanged_second_parent_keeps_its_cost():
    calls = []

    def cost(x):
        calls.append(x)
        return x

    values = iter(range(8))
    best = genetic_algorithm(cost, Crossover(lambda a, b: b, 1.), [],
                             lambda: next(values), 8, 5, rng=0)
    assert len(calls) == 8
    assert best == 0


def test_mutations_are_chained():
    seen = []

    def first(x):
        seen.append(('first', x))
        return x + 1

    def second(x):
        seen.append(('second', x))
        return x*10

    best = genetic_algorithm(lambda x: -x, Crossover(lambda a, b: a, 0.),
                             [Mutation(first, 1.), Mutation(second, 1.)],
                             lambda: 0, 2, 1, rng=0, copier=lambda x: x)
    assert seen[:2] == [('first', 0), ('second', 1)]
    assert best == 10


def test_errors_from_user_code_propagate():
    def cost(x):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        genetic_algorithm(cost, Crossover(lambda a, b: a, 0.5), [],
                          lambda: 1., 4, 3)

    def failing_mutation(x):
        raise ArithmeticError('mutation')

    with pytest.raises(ArithmeticError):
        genetic_algorithm(abs, Crossover(lambda a, b: a, 0.5),
                          [Mutation(failing_mutation, 1.)],
                          lambda: 1., 4, 3)


@pytest.mark.parametrize('population_size, max_steps', [
    (0, 10), (10, 0), (-2, 3), (2.5, 3), (4, 'many')])
def test_rejects_bad_budgets(population_size, max_steps):
    with pytest.raises((TypeError, ValueError)):
        genetic_algorithm(abs, Crossover(lambda a, b: a, 0.5), [],
                          lambda: 1., population_size, max_steps)


def test_rejects_bad_operators():
    with pytest.raises(TypeError):
        genetic_algorithm(abs, Mutation(abs, 0.5), [], lambda: 1., 4, 3)
    with pytest.raises(TypeError):
        genetic_algorithm(abs, Crossover(lambda a, b: a, 0.5),
                          [Crossover(lambda a, b: a, 0.5)], lambda: 1., 4, 3)
    with pytest.raises(TypeError):
        genetic_algorithm(abs, Crossover(lambda a, b: a, 0.5), [], 1., 4, 3)


@pytest.mark.parametrize('ratio', [-0.1, 1.5, float('inf')])
def test_operator_ratio_out_of_range(ratio):
    with pytest.raises(ValueError):
        Mutation(abs, ratio)
    with pytest.raises(ValueError):
        Crossover(max, ratio)


def test_operator_validation():
    with pytest.raises(TypeError):
        Mutation(abs, 'often')
    with pytest.raises(TypeError):
        Mutation('abs', 0.5)
    assert Mutation(abs, '0.25').ratio == 0.25


def test_crossover_run():
    rng = np.random.default_rng(0)
    assert Crossover(lambda a, b: a + b, 1.).run(1, 2, rng) == 3
    assert Crossover(lambda a, b: a + b, 0.).run(1, 2, rng) == 1
