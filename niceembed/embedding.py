# SPDX-License-Identifier: LGPL-2.1-or-later

import json
import logging
from collections import Counter
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Any, NamedTuple

import networkx as nx
import numpy as np

from . import (DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_VERTEX_RADIUS,
               DEFAULT_EDGE_BEZIER_CONTROL_DISTANCE, DEFAULT_EDGE_LOOP_RADIUS)
from .geometric import Point, count_crossings, is_crossing
from .utils import check_graph, make_rng, to_number, to_positive_number

logger = logging.getLogger(__name__)


def _as_point(position, fname: str) -> Point:
    if isinstance(position, Point):
        return position
    if isinstance(position, (tuple, list, np.ndarray)) and len(position) == 2:
        x, y = position
        return Point.of(to_number(x, fname, 'position'),
                        to_number(y, fname, 'position'))
    raise TypeError(f'{fname}: invalid position: {position!r}')


@dataclass(frozen=True)
class EmbeddedVertex:
    '''A graph vertex with a position on the canvas.

    `radius` is only used for drawing; it defaults to a size proportional to
    `weight` (any number is accepted, negative ones included).
    '''
    id: Hashable
    position: Point
    weight: float = 1.
    radius: float | None = None

    def __post_init__(self):
        if not isinstance(self.position, Point):
            object.__setattr__(self, 'position',
                               _as_point(self.position, 'EmbeddedVertex'))
        if self.radius is None:
            object.__setattr__(self, 'radius',
                               DEFAULT_VERTEX_RADIUS*self.weight)

    def moved_to(self, position: Point) -> 'EmbeddedVertex':
        return replace(self, position=position)

    def to_dict(self) -> dict[str, Any]:
        return dict(id=self.id, position=list(self.position),
                    weight=self.weight, radius=self.radius)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EmbeddedVertex':
        return cls(data['id'], Point.of(*data['position']),
                   weight=data.get('weight', 1.), radius=data.get('radius'))


@dataclass(frozen=True)
class EmbeddedEdge:
    '''Straight-line drawing of an edge between two embedded vertices.

    `arc_control_distance` is the distance of the control point of the
    quadratic Bézier curve used to draw the edge as an arc (or the radius of
    a loop). It is cosmetic: crossings are always computed on the segment
    between the endpoints.
    '''
    source: EmbeddedVertex
    destination: EmbeddedVertex
    directed: bool = False
    weight: float = 1.
    label: str | None = None
    arc_control_distance: float | None = None

    def __post_init__(self):
        for argname in ('source', 'destination'):
            if not isinstance(getattr(self, argname), EmbeddedVertex):
                raise TypeError(f'EmbeddedEdge: invalid {argname}: '
                                f'{getattr(self, argname)!r}')
        if not isinstance(self.directed, bool):
            raise TypeError(
                f'EmbeddedEdge: invalid directed: {self.directed!r}')
        if self.arc_control_distance is None:
            object.__setattr__(self, 'arc_control_distance',
                               DEFAULT_EDGE_LOOP_RADIUS if self.is_loop()
                               else DEFAULT_EDGE_BEZIER_CONTROL_DISTANCE)
        else:
            object.__setattr__(self, 'arc_control_distance', to_number(
                self.arc_control_distance, 'EmbeddedEdge',
                'arc_control_distance'))

    def is_loop(self) -> bool:
        return self.source.id == self.destination.id

    def length(self) -> float:
        return self.source.position.distance_to(self.destination.position)

    def is_crossing(self, other: 'EmbeddedEdge') -> bool:
        '''Check if the segment drawing this edge crosses the segment drawing
        `other`. Touching endpoints count as a crossing.'''
        if not isinstance(other, EmbeddedEdge):
            raise TypeError(f'EmbeddedEdge.is_crossing: invalid other: '
                            f'{other!r}')
        return is_crossing(self.source.position, self.destination.position,
                           other.source.position,
                           other.destination.position)

    def to_dict(self) -> dict[str, Any]:
        return dict(source=self.source.to_dict(),
                    destination=self.destination.to_dict(),
                    directed=self.directed, weight=self.weight,
                    label=self.label,
                    arc_control_distance=self.arc_control_distance)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EmbeddedEdge':
        return cls(EmbeddedVertex.from_dict(data['source']),
                   EmbeddedVertex.from_dict(data['destination']),
                   directed=data.get('directed', False),
                   weight=data.get('weight', 1.),
                   label=data.get('label'),
                   arc_control_distance=data.get('arc_control_distance'))


class _EdgeRecord(NamedTuple):
    source: Hashable
    destination: Hashable
    directed: bool
    weight: float
    label: str | None
    arc_control_distance: float


class Embedding():
    '''Positions of every vertex of a graph, plus the straight-line drawing
    of its edges.

    The embedding is the single owner of the positions: edges are rebuilt
    from the current positions each time `edges` is read. The vertex order
    is fixed at creation and shared by all clones.
    '''

    __hash__ = None

    def __init__(self, vertices: Iterable[EmbeddedVertex],
                 edges: Iterable[EmbeddedEdge] = ()):
        if not isinstance(vertices, Iterable):
            raise TypeError(f'Embedding: invalid vertices: {vertices!r}')
        if not isinstance(edges, Iterable):
            raise TypeError(f'Embedding: invalid edges: {edges!r}')
        vertices = tuple(vertices)
        edges = tuple(edges)
        if not all(isinstance(v, EmbeddedVertex) for v in vertices):
            raise TypeError(f'Embedding: invalid vertices: {vertices!r}')
        if not all(isinstance(e, EmbeddedEdge) for e in edges):
            raise TypeError(f'Embedding: invalid edges: {edges!r}')
        VertexD = {}
        for v in vertices:
            if v.id in VertexD:
                raise ValueError(f'Embedding: duplicate vertex: {v.id!r}')
            VertexD[v.id] = v
        records = []
        for e in edges:
            for end in (e.source, e.destination):
                if end.id not in VertexD:
                    raise ValueError(
                        f'Embedding: edge endpoint not found: {end.id!r}')
            records.append(_EdgeRecord(e.source.id, e.destination.id,
                                       e.directed, e.weight, e.label,
                                       e.arc_control_distance))
        self._setup(VertexD, tuple(VertexD), tuple(records))

    def _setup(self, VertexD, order, records, Edge=None):
        self._vertices = VertexD
        self._order = order
        self._records = records
        if Edge is None:
            index = {n: i for i, n in enumerate(order)}
            Edge = np.array([(index[r.source], index[r.destination])
                             for r in records],
                            dtype=np.int_).reshape(-1, 2)
        self._Edge = Edge

    @classmethod
    def for_graph(cls, G: nx.Graph, width: float = DEFAULT_WIDTH,
                  height: float = DEFAULT_HEIGHT,
                  coordinates: dict | None = None,
                  rng=None) -> 'Embedding':
        '''Create an embedding of `G` on a `width` × `height` canvas.

        Vertices found in `coordinates` (a mapping of node -> (x, y)) are
        placed there, the others are placed uniformly at random.

        Args:
          G: non-empty networkx graph (node and edge attribute 'weight' is
            read, as well as edge attribute 'label')
          width, height: canvas size
          coordinates: optional fixed positions
          rng: numpy Generator, seed or None

        Returns:
          new Embedding
        '''
        check_graph(G, 'Embedding.for_graph')
        width = to_positive_number(width, 'Embedding.for_graph', 'width')
        height = to_positive_number(height, 'Embedding.for_graph', 'height')
        if coordinates is None:
            coordinates = {}
        elif not isinstance(coordinates, dict):
            raise TypeError('Embedding.for_graph: invalid coordinates: '
                            f'{coordinates!r}')
        rng = make_rng(rng)
        directed = G.is_directed()

        VertexD = {}
        for n, nodeD in G.nodes(data=True):
            if n in coordinates:
                position = _as_point(coordinates[n], 'Embedding.for_graph')
            else:
                position = Point.random(width, height, rng)
            VertexD[n] = EmbeddedVertex(n, position,
                                        weight=nodeD.get('weight', 1.))
        records = []
        for u, v, edgeD in G.edges(data=True):
            records.append(_EdgeRecord(
                u, v, directed, edgeD.get('weight', 1.), edgeD.get('label'),
                DEFAULT_EDGE_LOOP_RADIUS if u == v
                else DEFAULT_EDGE_BEZIER_CONTROL_DISTANCE))
        embedding = cls.__new__(cls)
        embedding._setup(VertexD, tuple(VertexD), tuple(records))
        logger.debug('embedding for %d vertices and %d edges on a %g×%g '
                     'canvas', len(VertexD), len(records), width, height)
        return embedding

    @property
    def vertices(self) -> Iterator[EmbeddedVertex]:
        '''vertices in the embedding's fixed order (a new iterator each time)'''
        return (self._vertices[n] for n in self._order)

    @property
    def edges(self) -> Iterator[EmbeddedEdge]:
        '''edges drawn between the current positions of their endpoints'''
        VertexD = self._vertices
        return (EmbeddedEdge(VertexD[r.source], VertexD[r.destination],
                             directed=r.directed, weight=r.weight,
                             label=r.label,
                             arc_control_distance=r.arc_control_distance)
                for r in self._records)

    @property
    def vertex_order(self) -> tuple:
        return self._order

    @property
    def edge_index(self) -> np.ndarray:
        '''(E×2) array of edge endpoints as indices into `vertex_order`'''
        return self._Edge.copy()

    @property
    def pos(self) -> dict:
        '''node -> (x, y) mapping, as expected by networkx's drawing'''
        return {n: tuple(self._vertices[n].position) for n in self._order}

    def number_of_vertices(self) -> int:
        return len(self._order)

    def number_of_edges(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._order)

    def get_vertex(self, vertex) -> EmbeddedVertex:
        n = vertex.id if isinstance(vertex, EmbeddedVertex) else vertex
        try:
            return self._vertices[n]
        except KeyError:
            raise KeyError(f'vertex not found: {n!r}') from None

    def position(self, vertex) -> Point:
        return self.get_vertex(vertex).position

    def set_vertex_position(self, vertex, position) -> None:
        '''Move `vertex` (an EmbeddedVertex or a vertex id) to `position`.'''
        position = _as_point(position, 'Embedding.set_vertex_position')
        v = self.get_vertex(vertex)
        self._vertices[v.id] = v.moved_to(position)

    def coordinates(self) -> np.ndarray:
        '''(V×2) array of positions, in vertex order'''
        VertexD = self._vertices
        return np.array([VertexD[n].position for n in self._order],
                        dtype=np.float64).reshape(-1, 2)

    def intersections(self) -> int:
        '''Number of pairs of edges whose segments cross.

        Self-loops are ignored, as are pairs of edges sharing an endpoint
        (these always touch at the common vertex).
        '''
        if self._Edge.shape[0] < 2:
            return 0
        return int(count_crossings(self.coordinates(), self._Edge))

    def is_plane(self) -> bool:
        return self.intersections() == 0

    def clone(self) -> 'Embedding':
        clone = self.__class__.__new__(self.__class__)
        # vertices are immutable: copying the mapping is a full copy
        clone._setup(dict(self._vertices), self._order, self._records,
                     self._Edge)
        return clone

    def __eq__(self, other) -> bool:
        if not isinstance(other, Embedding):
            return NotImplemented
        return (self._vertices == other._vertices
                and Counter(self.edges) == Counter(other.edges))

    def __repr__(self) -> str:
        return (f'<{self.__class__.__name__} V={len(self._order)} '
                f'E={len(self._records)}>')

    def to_dict(self) -> dict[str, list]:
        return dict(vertices=[v.to_dict() for v in self.vertices],
                    edges=[e.to_dict() for e in self.edges])

    @classmethod
    def from_dict(cls, data: dict[str, list]) -> 'Embedding':
        return cls((EmbeddedVertex.from_dict(v) for v in data['vertices']),
                   (EmbeddedEdge.from_dict(e) for e in data['edges']))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> 'Embedding':
        return cls.from_dict(json.loads(text))
