# SPDX-License-Identifier: LGPL-2.1-or-later

import copy
import logging
import operator
from collections.abc import Callable, Sequence

import numpy as np

from . import DEFAULT_TOURNAMENT_SIZE
from .utils import make_rng, progress_logging, to_number, to_positive_int

logger = logging.getLogger(__name__)


class Operator():
    '''A transformation of organisms applied with probability `ratio`.'''

    def __init__(self, method: Callable, ratio: float):
        name = self.__class__.__name__
        if not callable(method):
            raise TypeError(f'{name}: invalid method: {method!r}')
        ratio = to_number(ratio, name, 'ratio')
        if not 0. <= ratio <= 1.:
            raise ValueError(f'{name}: invalid ratio: {ratio!r}')
        self.method = method
        self.ratio = ratio

    def fires(self, rng: np.random.Generator) -> bool:
        return rng.random() < self.ratio

    def __repr__(self):
        return (f'{self.__class__.__name__}('
                f'{getattr(self.method, "__name__", self.method)}, '
                f'{self.ratio})')


class Crossover(Operator):
    '''`method(a, b)` returns a new organism mixing parents `a` and `b`.'''

    def run(self, a, b, rng: np.random.Generator):
        if self.fires(rng):
            return self.method(a, b)
        return a


class Mutation(Operator):
    '''`method(organism)` returns the altered organism (it may alter and
    return its argument).'''


class Individual():
    '''Organism paired with its (already evaluated) cost.'''
    __slots__ = ('organism', 'cost')

    def __init__(self, organism, cost: float):
        self.organism = organism
        self.cost = cost

    def __repr__(self):
        return f'Individual(cost={self.cost!r})'


_by_cost = operator.attrgetter('cost')


def _tournament(population: list[Individual], size: int,
                rng: np.random.Generator) -> Individual:
    entrants = rng.choice(len(population), size=min(size, len(population)),
                          replace=False)
    return min((population[i] for i in entrants), key=_by_cost)


def genetic_algorithm(cost: Callable[..., float], crossover: Crossover,
                      mutations: Sequence[Mutation],
                      random_organism: Callable[[], object],
                      population_size: int, max_steps: int, *,
                      tournament_size: int = DEFAULT_TOURNAMENT_SIZE,
                      rng=None, verbose: bool = False,
                      copier: Callable = copy.deepcopy):
    '''Minimize `cost` over a population of organisms.

    Each generation replaces the whole population: every offspring comes from
    two parents picked by tournament selection, is their crossover (with
    probability `crossover.ratio`, otherwise it is the first parent) and then
    goes through each of `mutations` independently. The organisms are opaque
    to this function: only `cost`, the operators and `copier` touch them.

    Mutations may alter their argument, so an offspring that is still one of
    its parents is passed through `copier` before being mutated. Costs are
    computed once per organism.

    Args:
      cost: organism -> float (lower is better)
      crossover: Crossover operator
      mutations: sequence of Mutation operators
      random_organism: factory called `population_size` times
      population_size: number of organisms per generation
      max_steps: number of generations
      tournament_size: number of organisms sampled at each selection
      rng: numpy Generator, seed or None
      verbose: log a summary of each generation (INFO)
      copier: organism -> independent copy

    Returns:
      best organism found over all generations
    '''
    fname = 'genetic_algorithm'
    if not callable(cost):
        raise TypeError(f'{fname}: invalid cost: {cost!r}')
    if not isinstance(crossover, Crossover):
        raise TypeError(f'{fname}: invalid crossover: {crossover!r}')
    mutations = tuple(mutations)
    if not all(isinstance(m, Mutation) for m in mutations):
        raise TypeError(f'{fname}: invalid mutations: {mutations!r}')
    if not callable(random_organism):
        raise TypeError(
            f'{fname}: invalid random_organism: {random_organism!r}')
    if not callable(copier):
        raise TypeError(f'{fname}: invalid copier: {copier!r}')
    population_size = to_positive_int(population_size, fname,
                                      'population_size')
    max_steps = to_positive_int(max_steps, fname, 'max_steps')
    tournament_size = to_positive_int(tournament_size, fname,
                                      'tournament_size')
    rng = make_rng(rng)

    with progress_logging(verbose):
        population = []
        for _ in range(population_size):
            organism = random_organism()
            population.append(Individual(organism, cost(organism)))
        best = min(population, key=_by_cost)
        if verbose:
            logger.info('initial population | best %g', best.cost)

        for step in range(1, max_steps + 1):
            offspring = []
            for _ in range(population_size):
                a = _tournament(population, tournament_size, rng)
                b = _tournament(population, tournament_size, rng)
                organism = crossover.run(a.organism, b.organism, rng)
                if organism is a.organism:
                    parent = a
                elif organism is b.organism:
                    parent = b
                else:
                    parent = None
                for mutation in mutations:
                    if mutation.fires(rng):
                        if parent is not None:
                            organism = copier(organism)
                            parent = None
                        organism = mutation.method(organism)
                offspring.append(parent if parent is not None
                                 else Individual(organism, cost(organism)))
            population = offspring
            generation_best = min(population, key=_by_cost)
            if generation_best.cost < best.cost:
                best = generation_best
            if verbose:
                logger.info('generation %d | best %g | generation best %g',
                            step, best.cost, generation_best.cost)
    return best.organism
