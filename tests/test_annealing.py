import logging

import numpy as np
import pytest

from niceembed.annealing import simulated_annealing


def test_does_not_end_worse_than_start():
    rng = np.random.default_rng(4)

    def cost(x):
        return abs(x - 3.)

    def step(x, temperature):
        return x + float(rng.normal())

    best = simulated_annealing(cost, step, 500, 40., 10., rng=4)
    assert cost(best) <= cost(40.)


def test_returns_start_when_every_move_is_worse():
    calls = []

    def cost(x):
        calls.append(x)
        return x

    best = simulated_annealing(cost, lambda x, T: x + 1, 20, 0, 1., k=1e-3,
                               rng=0)
    assert best == 0
    assert len(calls) == 21


def test_improvements_are_always_accepted():
    best = simulated_annealing(lambda x: x, lambda x, T: x - 1, 30, 0, 1e-9,
                               k=1e-9, rng=0)
    assert best == -30


def test_worse_moves_accepted_at_high_temperature():
    seen = []

    def step(x, temperature):
        seen.append(x)
        return x + 1

    best = simulated_annealing(lambda x: x, step, 10, 0, 1e6, k=1e6, rng=0)
    assert seen == list(range(10))
    # the lowest-cost solution visited is returned, not the last one
    assert best == 0


def test_temperature_schedule():
    temperatures = []

    def step(x, temperature):
        temperatures.append(temperature)
        return x

    simulated_annealing(abs, step, 3000, 1., 1., alpha=0.5, rng=0)
    assert temperatures[:7] == [1., 1., 0.5, 0.5, 0.5, 0.25, 0.25]

    temperatures.clear()
    simulated_annealing(abs, step, 3, 1., 8., alpha=0.5, rng=0)
    assert temperatures == [4., 2., 1.]


def test_start_solution_is_not_altered():
    start = [1, 2]

    def grow(organism, temperature):
        organism.append(0)
        return organism

    best = simulated_annealing(len, grow, 5, start, 1., rng=0)
    assert start == [1, 2]
    assert best is start


def test_is_reproducible_with_seeds():
    def run():
        rng = np.random.default_rng(11)
        return simulated_annealing(
            lambda x: (x - 5.)**2, lambda x, T: x + float(rng.normal())*T,
            200, 0., 3., rng=11)
    assert run() == run()


@pytest.mark.parametrize('kwargs, error', [
    (dict(max_steps=0), ValueError),
    (dict(max_steps=2.5), ValueError),
    (dict(max_steps='many'), TypeError),
    (dict(T0=0), ValueError),
    (dict(T0=None), TypeError),
    (dict(k=-1), ValueError),
    (dict(alpha=0), ValueError),
    (dict(alpha=1), ValueError),
    (dict(alpha='slow'), TypeError),
])
def test_rejects_bad_parameters(kwargs, error):
    args = dict(max_steps=10, T0=1., k=1., alpha=0.9)
    args.update(kwargs)
    with pytest.raises(error):
        simulated_annealing(abs, lambda x, T: x, args['max_steps'], 1.,
                            args['T0'], args['k'], args['alpha'])


def test_rejects_non_callables():
    with pytest.raises(TypeError):
        simulated_annealing(None, lambda x, T: x, 10, 1., 1.)
    with pytest.raises(TypeError):
        simulated_annealing(abs, 'step', 10, 1., 1.)
    with pytest.raises(TypeError):
        simulated_annealing(abs, lambda x, T: x, 10, 1., 1., copier=3)


def test_errors_from_user_code_propagate():
    def step(x, temperature):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        simulated_annealing(abs, step, 10, 1., 1.)


def test_verbose_logs_each_step(caplog):
    with caplog.at_level(logging.INFO, logger='niceembed'):
        simulated_annealing(abs, lambda x, T: x - 1, 3, 5., 1., rng=0,
                            verbose=True)
    assert 'step 3 | temperature' in caplog.text
