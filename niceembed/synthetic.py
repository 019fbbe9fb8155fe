# SPDX-License-Identifier: LGPL-2.1-or-later

import math

import networkx as nx

from . import DEFAULT_VERTEX_RADIUS
from .embedding import Embedding
from .geometric import Point
from .utils import to_positive_int, to_positive_number


def _at_least_two(value, fname, argname):
    number = to_positive_int(value, fname, argname)
    if number < 2:
        raise ValueError(f'{fname}: invalid {argname}: {value!r}')
    return number


def complete_embedding(n: int, canvas_size: float,
                       directed: bool = False) -> Embedding:
    '''
    Returns an embedding of the complete graph K_n (vertices 1 to n) with
    the vertices evenly spaced on a circle inscribed in the square canvas.
    '''
    fname = 'complete_embedding'
    n = _at_least_two(n, fname, 'n')
    canvas_size = to_positive_number(canvas_size, fname, 'canvas_size')
    G = nx.complete_graph(range(1, n + 1),
                          create_using=nx.DiGraph if directed else nx.Graph)
    delta = 2*math.pi/n
    center = canvas_size/2
    radius = center - DEFAULT_VERTEX_RADIUS
    coordinates = {
        v: Point(center + radius*math.cos((v - 1)*delta),
                 center + radius*math.sin((v - 1)*delta))
        for v in G.nodes
    }
    return Embedding.for_graph(G, width=canvas_size, height=canvas_size,
                               coordinates=coordinates)


def complete_bipartite_embedding(n: int, m: int, canvas_size: float,
                                 directed: bool = False) -> Embedding:
    '''
    Returns an embedding of the complete bipartite graph K_{n,m}: vertices
    1 to n in a column near the left border of the square canvas and
    vertices n + 1 to n + m in a column near the right border.
    '''
    fname = 'complete_bipartite_embedding'
    n = _at_least_two(n, fname, 'n')
    m = _at_least_two(m, fname, 'm')
    canvas_size = to_positive_number(canvas_size, fname, 'canvas_size')
    G = nx.complete_bipartite_graph(
        n, m, create_using=nx.DiGraph if directed else nx.Graph)
    G = nx.relabel_nodes(G, {v: v + 1 for v in G.nodes})
    r = DEFAULT_VERTEX_RADIUS
    delta_n = (canvas_size - 2*r)/(n - 1)
    delta_m = (canvas_size - 2*r)/(m - 1)
    coordinates = {}
    for v in G.nodes:
        if v <= n:
            coordinates[v] = Point(2*r, r + (v - 1)*delta_n)
        else:
            coordinates[v] = Point(canvas_size - 2*r, r + (v - n - 1)*delta_m)
    return Embedding.for_graph(G, width=canvas_size, height=canvas_size,
                               coordinates=coordinates)
