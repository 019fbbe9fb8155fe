# SPDX-License-Identifier: LGPL-2.1-or-later

import logging
import math
import numbers
from contextlib import contextmanager

import networkx as nx
import numpy as np


def _invalid(fname, argname, value):
    return f'{fname}: invalid {argname}: {value!r}'


def to_number(value, fname: str, argname: str) -> float:
    '''Coerce `value` to float.

    Accepts real numbers (numpy scalars included) and numeric strings.
    Booleans, None and anything else raise TypeError; NaN raises ValueError.
    '''
    if value is None or isinstance(value, bool):
        raise TypeError(_invalid(fname, argname, value))
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            raise TypeError(_invalid(fname, argname, value)) from None
    else:
        raise TypeError(_invalid(fname, argname, value))
    if math.isnan(number):
        raise ValueError(_invalid(fname, argname, value))
    return number


def to_positive_number(value, fname: str, argname: str) -> float:
    number = to_number(value, fname, argname)
    if not (0 < number < math.inf):
        raise ValueError(_invalid(fname, argname, value))
    return number


def to_positive_int(value, fname: str, argname: str) -> int:
    '''Coerce `value` to a positive int (integral floats and numeric strings
    are accepted).'''
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        number = int(value)
    else:
        real = to_number(value, fname, argname)
        if not real.is_integer():
            raise ValueError(_invalid(fname, argname, value))
        number = int(real)
    if number <= 0:
        raise ValueError(_invalid(fname, argname, value))
    return number


def check_graph(G, fname: str) -> None:
    '''Raise TypeError if `G` is not a networkx graph and ValueError if it has
    no vertices.'''
    if not isinstance(G, nx.Graph):
        raise TypeError(_invalid(fname, 'graph', G))
    if G.number_of_nodes() == 0:
        raise ValueError(f'{fname}: graph must not be empty')


def make_rng(rng=None) -> np.random.Generator:
    '''Return a numpy Generator from `rng` (Generator, int seed or None).'''
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None or (isinstance(rng, numbers.Integral)
                       and not isinstance(rng, bool)):
        return np.random.default_rng(rng)
    raise TypeError(_invalid('make_rng', 'rng', rng))


@contextmanager
def progress_logging(verbose: bool):
    '''Lower the package logger's level to INFO while the block runs if
    `verbose` is set and INFO messages would otherwise be dropped.'''
    pkg_logger = logging.getLogger(__name__.rpartition('.')[0])
    previous = pkg_logger.level
    if verbose and pkg_logger.getEffectiveLevel() > logging.INFO:
        pkg_logger.setLevel(logging.INFO)
    try:
        yield
    finally:
        pkg_logger.setLevel(previous)
