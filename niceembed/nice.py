# SPDX-License-Identifier: LGPL-2.1-or-later

import logging
from functools import partial

import networkx as nx
import numpy as np
from scipy.spatial.distance import pdist

from . import DEFAULT_WIDTH, DEFAULT_HEIGHT
from .annealing import simulated_annealing
from .embedding import Embedding
from .genetic import Crossover, Mutation, genetic_algorithm
from .geometric import Point
from .utils import check_graph, make_rng, to_number, to_positive_number

logger = logging.getLogger(__name__)


def _check_lambdas(fname, *lambdas):
    return tuple(to_number(value, fname, f'lambda{i}')
                 for i, value in enumerate(lambdas, start=1))


def nice_embedding(G: nx.Graph, max_steps: int,
                   lambda1: float, lambda2: float,
                   lambda3: float, lambda4: float, *,
                   population_size: int = 50,
                   crossover_ratio: float = 0.7,
                   mutation1_ratio: float = 0.1,
                   mutation2_ratio: float = 0.2,
                   mutation3_ratio: float = 0.7,
                   width: float = DEFAULT_WIDTH,
                   height: float = DEFAULT_HEIGHT,
                   verbose: bool = False, rng=None) -> Embedding:
    '''Embedding of `G` loosely inspired by force-directed drawing.

    Adapts the cost of Davidson & Harel's "Drawing graphs nicely using
    simulated annealing" (ACM ToG 15(4), 1996) to a genetic algorithm whose
    organisms are embeddings.

    Args:
      G: non-empty networkx graph
      max_steps: number of generations to evolve
      lambda1: weight of the repulsion between vertices
      lambda2: weight of the repulsion from the canvas border (higher values
        push the vertices towards the center)
      lambda3: weight of the edges' squared length (higher values favor
        shorter edges)
      lambda4: weight of the number of crossings
      population_size: organisms per generation
      crossover_ratio: probability of mating the two selected parents
        (otherwise the first parent goes through unchanged)
      mutation1_ratio: probability of swapping the positions of two vertices
      mutation2_ratio: probability of moving a vertex anywhere on the canvas
      mutation3_ratio: probability of nudging a vertex from its position
      width, height: canvas size
      verbose: log a summary of each generation
      rng: numpy Generator, seed or None

    Returns:
      best embedding found
    '''
    fname = 'nice_embedding'
    check_graph(G, fname)
    lambda1, lambda2, lambda3, lambda4 = _check_lambdas(
        fname, lambda1, lambda2, lambda3, lambda4)
    width = to_positive_number(width, fname, 'width')
    height = to_positive_number(height, fname, 'height')
    rng = make_rng(rng)

    crossover = Crossover(partial(merge_embeddings, rng=rng),
                          crossover_ratio)
    mutations = (
        Mutation(partial(swap_vertices, rng=rng), mutation1_ratio),
        Mutation(partial(reset_vertex, width=width, height=height, rng=rng),
                 mutation2_ratio),
        Mutation(partial(update_vertex, width=width, height=height, rng=rng),
                 mutation3_ratio),
    )
    cost = partial(embedding_cost, width=width, height=height,
                   lambda1=lambda1, lambda2=lambda2,
                   lambda3=lambda3, lambda4=lambda4)
    random_embedding = partial(Embedding.for_graph, G, width=width,
                               height=height, rng=rng)

    return genetic_algorithm(cost, crossover, mutations, random_embedding,
                             population_size, max_steps, rng=rng,
                             verbose=verbose, copier=Embedding.clone)


def embedding_cost(embedding: Embedding, width: float, height: float,
                   lambda1: float, lambda2: float,
                   lambda3: float, lambda4: float) -> float:
    '''Cost of `embedding` (lower is better).

    Sum of four terms, each multiplied by its lambda:
      - lambda1: 2/d² for each pair of vertices at distance d
      - lambda2: 1/x² + 1/y² + 1/(W - x)² + 1/(H - y)² for each vertex
      - lambda3: squared length of each edge (loops excluded)
      - lambda4: number of crossings

    A vertex on the border (or two overlapping vertices) gives an infinite
    cost if the corresponding lambda is not zero.
    '''
    VertexC = embedding.coordinates()
    total = 0.
    with np.errstate(divide='ignore'):
        if lambda1:
            total += 2*lambda1*(1./pdist(VertexC, 'sqeuclidean')).sum()
        if lambda2:
            X, Y = VertexC.T
            total += lambda2*(1./X**2 + 1./Y**2
                              + 1./(width - X)**2
                              + 1./(height - Y)**2).sum()
    if lambda3:
        Edge = embedding.edge_index
        Edge = Edge[Edge[:, 0] != Edge[:, 1]]
        total += lambda3*((VertexC[Edge[:, 0]]
                           - VertexC[Edge[:, 1]])**2).sum()
    if lambda4:
        total += lambda4*embedding.intersections()
    return float(total)


def merge_embeddings(a: Embedding, b: Embedding,
                     rng: np.random.Generator) -> Embedding:
    '''Single-point crossover: copy of `a` where the vertices after a random
    split point of `b`'s vertex order take their positions from `b`.'''
    vertices = tuple(b.vertices)
    n = len(vertices)
    merged = a.clone()
    if n < 2:
        return merged
    # split between 0 and n - 2 (both included)
    split = rng.integers(0, n - 1)
    for v in vertices[split + 1:]:
        merged.set_vertex_position(v.id, v.position)
    return merged


def swap_positions(embedding: Embedding, u, v) -> Embedding:
    '''Exchange the positions of vertices `u` and `v` (in place).'''
    uP, vP = embedding.position(u), embedding.position(v)
    embedding.set_vertex_position(u, vP)
    embedding.set_vertex_position(v, uP)
    return embedding


def swap_vertices(embedding: Embedding,
                  rng: np.random.Generator) -> Embedding:
    '''Swap the positions of two random vertices (in place).'''
    order = embedding.vertex_order
    i, j = rng.integers(0, len(order), size=2)
    if i != j:
        swap_positions(embedding, order[i], order[j])
    return embedding


def reset_vertex(embedding: Embedding, width: float, height: float,
                 rng: np.random.Generator) -> Embedding:
    '''Move a random vertex to a uniform position in [1, width - 1) ×
    [1, height - 1), at least 1 away from the border (in place).'''
    order = embedding.vertex_order
    n = order[rng.integers(0, len(order))]
    embedding.set_vertex_position(
        n, Point(float(rng.uniform(1., width - 1.)),
                 float(rng.uniform(1., height - 1.))))
    return embedding


def update_vertex(embedding: Embedding, width: float, height: float,
                  rng: np.random.Generator) -> Embedding:
    '''Shift a random vertex by up to half the canvas size along each axis,
    clamped to [1, width - 1] × [1, height - 1] (in place).'''
    order = embedding.vertex_order
    n = order[rng.integers(0, len(order))]
    x, y = embedding.position(n)
    x = min(max(x + rng.uniform(0., width/2), 1.), width - 1.)
    y = min(max(y + rng.uniform(0., height/2), 1.), height - 1.)
    embedding.set_vertex_position(n, Point(float(x), float(y)))
    return embedding


def nudge_vertex(embedding: Embedding, width: float, height: float,
                 spread: float, rng: np.random.Generator) -> Embedding:
    '''Shift a random vertex by up to `spread` times the canvas size in any
    direction, clamped to [1, width - 1] × [1, height - 1] (in place).'''
    order = embedding.vertex_order
    n = order[rng.integers(0, len(order))]
    x, y = embedding.position(n)
    x = min(max(x + width*rng.uniform(-spread, spread), 1.), width - 1.)
    y = min(max(y + height*rng.uniform(-spread, spread), 1.), height - 1.)
    embedding.set_vertex_position(n, Point(float(x), float(y)))
    return embedding


def annealing_step(width: float, height: float, rng: np.random.Generator,
                   *, swap_ratio: float, reset_ratio: float, spread: float,
                   shrink: float = 1., min_spread: float = 0.02):
    '''Random transition between embeddings for `simulated_annealing`.

    With probability `swap_ratio` two vertices swap positions, with
    probability `reset_ratio` a vertex is moved anywhere on the canvas,
    otherwise a vertex is nudged by up to `spread` times the canvas size.
    The spread is multiplied by `shrink` at each nudge (never going below
    `min_spread`), narrowing the search as the run goes on.

    Returns:
      function (embedding, temperature) -> embedding
    '''
    def step(embedding, temperature):
        nonlocal spread
        choice = rng.random()
        if choice < swap_ratio:
            return swap_vertices(embedding, rng)
        if choice < swap_ratio + reset_ratio:
            return reset_vertex(embedding, width, height, rng)
        spread = max(min_spread, shrink*spread)
        return nudge_vertex(embedding, width, height, spread, rng)
    return step


def starting_embedding(G: nx.Graph, P0: Embedding | None, width: float,
                       height: float, rng: np.random.Generator,
                       fname: str) -> Embedding:
    '''Private copy of `P0` if given (it must embed the vertices of `G`),
    otherwise a random embedding of `G`.'''
    if P0 is None:
        return Embedding.for_graph(G, width=width, height=height, rng=rng)
    if not isinstance(P0, Embedding):
        raise TypeError(f'{fname}: invalid P0: {P0!r}')
    if set(P0.vertex_order) != set(G.nodes):
        raise ValueError(f'{fname}: P0 does not embed the graph\'s vertices')
    return P0.clone()


def annealed_nice_embedding(G: nx.Graph, max_steps: int,
                            lambda1: float, lambda2: float,
                            lambda3: float, lambda4: float, *,
                            P0: Embedding | None = None,
                            T0: float = 1000., k: float = 1e9,
                            alpha: float = 0.9,
                            width: float = DEFAULT_WIDTH,
                            height: float = DEFAULT_HEIGHT,
                            verbose: bool = False, rng=None) -> Embedding:
    '''Same cost as `nice_embedding`, minimized by simulated annealing.

    Each step swaps two vertices (20%), moves a vertex anywhere (40%) or
    nudges a vertex within a range starting at half the canvas size and
    shrinking along the run (40%).

    Args:
      G: non-empty networkx graph
      max_steps: number of annealing steps
      lambda1..lambda4: weights of the cost terms (see `embedding_cost`)
      P0: starting embedding (random if omitted; it is not altered)
      T0, k, alpha: annealing schedule (see `simulated_annealing`)
      width, height: canvas size
      verbose: log a summary of each step
      rng: numpy Generator, seed or None

    Returns:
      lowest-cost embedding visited
    '''
    fname = 'annealed_nice_embedding'
    check_graph(G, fname)
    lambda1, lambda2, lambda3, lambda4 = _check_lambdas(
        fname, lambda1, lambda2, lambda3, lambda4)
    width = to_positive_number(width, fname, 'width')
    height = to_positive_number(height, fname, 'height')
    rng = make_rng(rng)
    P0 = starting_embedding(G, P0, width, height, rng, fname)
    cost = partial(embedding_cost, width=width, height=height,
                   lambda1=lambda1, lambda2=lambda2,
                   lambda3=lambda3, lambda4=lambda4)
    step = annealing_step(width, height, rng, swap_ratio=0.2,
                          reset_ratio=0.4, spread=0.5, shrink=0.999)
    return simulated_annealing(cost, step, max_steps, P0, T0, k, alpha,
                               rng=rng, verbose=verbose,
                               copier=Embedding.clone)


def force_directed_embedding(G: nx.Graph, max_steps: int,
                             lambda1: float, lambda2: float,
                             lambda3: float, lambda4: float, *,
                             T0: float = 1000., k: float = 1e9,
                             alpha: float = 0.9,
                             width: float = DEFAULT_WIDTH,
                             height: float = DEFAULT_HEIGHT,
                             verbose: bool = False, rng=None) -> Embedding:
    '''Force-directed flavour of `annealed_nice_embedding`: mostly local
    moves (80% of the steps nudge a vertex by up to a tenth of the canvas
    size, 10% swap two vertices, 10% move a vertex anywhere), always
    starting from a random embedding.'''
    fname = 'force_directed_embedding'
    check_graph(G, fname)
    lambda1, lambda2, lambda3, lambda4 = _check_lambdas(
        fname, lambda1, lambda2, lambda3, lambda4)
    width = to_positive_number(width, fname, 'width')
    height = to_positive_number(height, fname, 'height')
    rng = make_rng(rng)
    P0 = Embedding.for_graph(G, width=width, height=height, rng=rng)
    cost = partial(embedding_cost, width=width, height=height,
                   lambda1=lambda1, lambda2=lambda2,
                   lambda3=lambda3, lambda4=lambda4)
    step = annealing_step(width, height, rng, swap_ratio=0.1,
                          reset_ratio=0.1, spread=0.1)
    return simulated_annealing(cost, step, max_steps, P0, T0, k, alpha,
                               rng=rng, verbose=verbose,
                               copier=Embedding.clone)
