# SPDX-License-Identifier: LGPL-2.1-or-later

import logging

import networkx as nx

from . import DEFAULT_WIDTH, DEFAULT_HEIGHT
from .annealing import simulated_annealing
from .embedding import Embedding
from .nice import annealing_step, starting_embedding
from .utils import (check_graph, make_rng, progress_logging,
                    to_positive_int, to_positive_number)

logger = logging.getLogger(__name__)


def minimum_intersections_embedding(G: nx.Graph, runs: int,
                                    width: float = DEFAULT_WIDTH,
                                    height: float = DEFAULT_HEIGHT, *,
                                    verbose: bool = False,
                                    rng=None) -> Embedding:
    '''Random sampling search for the embedding with fewest crossings.

    Draws `runs` random embeddings of `G` on a `width` × `height` canvas and
    returns the one with the smallest number of crossings (the earliest one
    in case of ties). Stops early if an embedding without crossings is found.

    Args:
      G: non-empty networkx graph
      runs: number of random embeddings to draw
      width, height: canvas size
      verbose: log the best count after each run
      rng: numpy Generator, seed or None

    Returns:
      best embedding found
    '''
    fname = 'minimum_intersections_embedding'
    check_graph(G, fname)
    runs = to_positive_int(runs, fname, 'runs')
    width = to_positive_number(width, fname, 'width')
    height = to_positive_number(height, fname, 'height')
    rng = make_rng(rng)

    best_embedding = None
    best_intersections = None
    with progress_logging(verbose):
        for i in range(runs):
            embedding = Embedding.for_graph(G, width=width, height=height,
                                            rng=rng)
            intersections = embedding.intersections()
            if best_embedding is None or intersections < best_intersections:
                best_embedding = embedding
                best_intersections = intersections
            if verbose:
                logger.info('run %d | best %d', i, best_intersections)
            if best_intersections == 0:
                break
    return best_embedding


def annealed_minimum_intersections_embedding(
        G: nx.Graph, max_steps: int, width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT, *, P0: Embedding | None = None,
        T0: float = 200., k: float = 0.1, alpha: float = 0.98,
        verbose: bool = False, rng=None) -> Embedding:
    '''Simulated annealing search for the embedding with fewest crossings.

    The cost is the number of crossings. Each step swaps two vertices (20%),
    moves a vertex anywhere (20%) or nudges a vertex by up to a tenth of the
    canvas size (60%).

    Args:
      G: non-empty networkx graph
      max_steps: number of annealing steps
      width, height: canvas size
      P0: starting embedding (random if omitted; it is not altered)
      T0, k, alpha: annealing schedule (see `simulated_annealing`)
      verbose: log a summary of each step
      rng: numpy Generator, seed or None

    Returns:
      embedding with the fewest crossings visited
    '''
    fname = 'annealed_minimum_intersections_embedding'
    check_graph(G, fname)
    width = to_positive_number(width, fname, 'width')
    height = to_positive_number(height, fname, 'height')
    rng = make_rng(rng)
    P0 = starting_embedding(G, P0, width, height, rng, fname)
    step = annealing_step(width, height, rng, swap_ratio=0.2,
                          reset_ratio=0.2, spread=0.1)
    return simulated_annealing(Embedding.intersections, step, max_steps, P0,
                               T0, k, alpha, rng=rng, verbose=verbose,
                               copier=Embedding.clone)
