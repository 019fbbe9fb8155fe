# SPDX-License-Identifier: LGPL-2.1-or-later

import copy
import logging
import math
from collections.abc import Callable

import numpy as np

from .utils import (make_rng, progress_logging, to_number, to_positive_int,
                    to_positive_number)

logger = logging.getLogger(__name__)

# number of times the temperature is lowered over a run
TEMPERATURE_UPDATES = 1000


def _accept(delta: float, k: float, T: float,
            rng: np.random.Generator) -> bool:
    '''Metropolis criterion: moves that do not increase the cost are always
    accepted, worse ones with probability exp(-delta/(k*T)).'''
    if not delta > 0.:
        return True
    kT = k*T
    if kT <= 0.:
        return False
    return math.exp(-delta/kT) > rng.random()


def simulated_annealing(cost: Callable[..., float],
                        update_step: Callable, max_steps: int, P0,
                        T0: float, k: float = 1., alpha: float = 0.98, *,
                        rng=None, verbose: bool = False,
                        copier: Callable = copy.deepcopy):
    '''Minimize `cost` by simulated annealing, starting from `P0`.

    At each step a candidate is produced by `update_step` and accepted by the
    Metropolis criterion at the current temperature. The temperature starts
    at `T0` and is multiplied by `alpha` every `max_steps/1000` steps (every
    step for runs shorter than 1000 steps).

    Args:
      cost: solution -> float (lower is better)
      update_step: (solution, temperature) -> candidate; it receives a copy
        of the current solution (made by `copier`) and may alter it
      max_steps: number of steps
      P0: starting solution (never altered)
      T0: initial temperature (positive)
      k: Boltzmann constant (positive); higher values make the acceptance
        of worse solutions more likely
      alpha: temperature decay rate, in (0, 1)
      rng: numpy Generator, seed or None
      verbose: log a summary of each step (INFO)
      copier: solution -> independent copy

    Returns:
      lowest-cost solution visited (possibly `P0` itself)
    '''
    fname = 'simulated_annealing'
    if not callable(cost):
        raise TypeError(f'{fname}: invalid cost: {cost!r}')
    if not callable(update_step):
        raise TypeError(f'{fname}: invalid update_step: {update_step!r}')
    if not callable(copier):
        raise TypeError(f'{fname}: invalid copier: {copier!r}')
    max_steps = to_positive_int(max_steps, fname, 'max_steps')
    T0 = to_positive_number(T0, fname, 'T0')
    k = to_positive_number(k, fname, 'k')
    alpha = to_number(alpha, fname, 'alpha')
    if not 0. < alpha < 1.:
        raise ValueError(f'{fname}: invalid alpha: {alpha!r}')
    rng = make_rng(rng)
    update_every = max(1, round(max_steps/TEMPERATURE_UPDATES))

    current, current_cost = P0, cost(P0)
    best, best_cost = current, current_cost
    T = T0
    with progress_logging(verbose):
        for step in range(1, max_steps + 1):
            if step % update_every == 0:
                T *= alpha
            candidate = update_step(copier(current), T)
            candidate_cost = cost(candidate)
            delta = candidate_cost - current_cost
            accepted = _accept(delta, k, T, rng)
            if accepted:
                current, current_cost = candidate, candidate_cost
                if current_cost < best_cost:
                    best, best_cost = current, current_cost
            if verbose:
                logger.info('step %d | temperature %g | delta %g | '
                            'accepted %s | cost %g | best %g', step, T,
                            delta, accepted, current_cost, best_cost)
    return best
