# SPDX-License-Identifier: LGPL-2.1-or-later

# author, version, license, and long description
__version__ = '0.0.1'

__doc__ = """
`niceembed` finds straight-line drawings of graphs with few edge crossings,
either by evolving a population of embeddings under a force-directed cost
(genetic algorithm), by simulated annealing or by plain random sampling.
"""

__license__ = "LGPL-2.1-or-later"

import sys
import logging

logger = logging.getLogger(__name__)

# WARNING, ERROR, CRITICAL go to stderr
stderr_handler = logging.StreamHandler()
stderr_handler.setLevel(logging.WARNING)
formatter = logging.Formatter('%(levelname)s: %(message)s '
                              '[%(name)s:%(funcName)s]')
stderr_handler.setFormatter(formatter)
logger.addHandler(stderr_handler)

# DEBUG, INFO go to stdout (as well as any level below WARNING)
def _log_stdout_filter(record):
    return record.levelno < logging.WARNING

stdout_handler = logging.StreamHandler(sys.stdout)
stdout_handler.addFilter(_log_stdout_filter)
stdout_handler.setLevel(logging.NOTSET)
logger.addHandler(stdout_handler)

info = logger.info
debug = logger.debug
warn = logger.warning
error = logger.error

# global module constants
DEFAULT_WIDTH = 480.
DEFAULT_HEIGHT = 480.
DEFAULT_VERTEX_RADIUS = 15.
DEFAULT_EDGE_BEZIER_CONTROL_DISTANCE = 40.
DEFAULT_EDGE_LOOP_RADIUS = 25.
DEFAULT_TOURNAMENT_SIZE = 3

from .geometric import Point, is_crossing, count_crossings, orientation
from .embedding import EmbeddedVertex, EmbeddedEdge, Embedding
from .genetic import Crossover, Mutation, genetic_algorithm
from .annealing import simulated_annealing
from .nice import (nice_embedding, embedding_cost, annealed_nice_embedding,
                   force_directed_embedding)
from .mcn import (minimum_intersections_embedding,
                  annealed_minimum_intersections_embedding)
from .synthetic import complete_embedding, complete_bipartite_embedding

__all__ = [
    'Point',
    'is_crossing',
    'count_crossings',
    'orientation',
    'EmbeddedVertex',
    'EmbeddedEdge',
    'Embedding',
    'Crossover',
    'Mutation',
    'genetic_algorithm',
    'nice_embedding',
    'embedding_cost',
    'minimum_intersections_embedding',
    'simulated_annealing',
    'annealed_nice_embedding',
    'force_directed_embedding',
    'annealed_minimum_intersections_embedding',
    'complete_embedding',
    'complete_bipartite_embedding',
]
