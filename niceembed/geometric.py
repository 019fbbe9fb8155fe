# SPDX-License-Identifier: LGPL-2.1-or-later

import math
from typing import NamedTuple

import numba as nb
import numpy as np


class Point(NamedTuple):
    '''Immutable point of the 2D cartesian plane.'''
    x: float
    y: float

    @classmethod
    def of(cls, x, y) -> 'Point':
        return cls(float(x), float(y))

    @classmethod
    def random(cls, width: float, height: float,
               rng: np.random.Generator) -> 'Point':
        '''uniform random point in [0, width] × [0, height]'''
        return cls(float(rng.uniform(0., width)),
                   float(rng.uniform(0., height)))

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@nb.njit('int_(f8, f8, f8, f8, f8, f8)', cache=True, inline='always')
def _orientation(px: float, py: float, qx: float, qy: float,
                 rx: float, ry: float) -> int:
    # sign of (q - p) × (r - p): 1 ccw, -1 cw, 0 collinear
    val = (qx - px)*(ry - py) - (qy - py)*(rx - px)
    if val > 0.:
        return 1
    elif val < 0.:
        return -1
    return 0


@nb.njit('b1(f8, f8, f8, f8, f8, f8)', cache=True, inline='always')
def _on_segment(px: float, py: float, qx: float, qy: float,
                rx: float, ry: float) -> bool:
    # q is collinear with p–r: check it falls within the bounding box
    return (min(px, rx) <= qx <= max(px, rx)
            and min(py, ry) <= qy <= max(py, ry))


@nb.njit('b1(f8, f8, f8, f8, f8, f8, f8, f8)', cache=True, inline='always')
def _segments_cross(ux: float, uy: float, vx: float, vy: float,
                    sx: float, sy: float, tx: float, ty: float) -> bool:
    o1 = _orientation(ux, uy, vx, vy, sx, sy)
    o2 = _orientation(ux, uy, vx, vy, tx, ty)
    o3 = _orientation(sx, sy, tx, ty, ux, uy)
    o4 = _orientation(sx, sy, tx, ty, vx, vy)

    if o1 != o2 and o3 != o4:
        return True

    # collinear cases: an endpoint touches the other segment
    if o1 == 0 and _on_segment(ux, uy, sx, sy, vx, vy):
        return True
    if o2 == 0 and _on_segment(ux, uy, tx, ty, vx, vy):
        return True
    if o3 == 0 and _on_segment(sx, sy, ux, uy, tx, ty):
        return True
    if o4 == 0 and _on_segment(sx, sy, vx, vy, tx, ty):
        return True
    return False


@nb.njit('int_(f8[:, :], int_[:, :])', cache=True)
def count_crossings(VertexC: np.ndarray, Edge: np.ndarray) -> int:
    '''Count the pairs of edges in `Edge` (E×2 indices into `VertexC`) whose
    straight segments cross.

    Self-loops and pairs of edges sharing an endpoint are skipped.

    Args:
      VertexC: (V×2) float coordinates
      Edge: (E×2) int array of vertex indices
    Returns:
      number of crossing pairs
    '''
    crossings = 0
    E = Edge.shape[0]
    for i in range(E - 1):
        u = Edge[i, 0]
        v = Edge[i, 1]
        if u == v:
            continue
        for j in range(i + 1, E):
            s = Edge[j, 0]
            t = Edge[j, 1]
            if s == t or s == u or s == v or t == u or t == v:
                continue
            if _segments_cross(VertexC[u, 0], VertexC[u, 1],
                               VertexC[v, 0], VertexC[v, 1],
                               VertexC[s, 0], VertexC[s, 1],
                               VertexC[t, 0], VertexC[t, 1]):
                crossings += 1
    return crossings


def orientation(p, q, r) -> int:
    '''Orientation of the ordered triple (`p`, `q`, `r`) of 2D points:
    1 counter-clockwise, -1 clockwise, 0 collinear.'''
    (px, py), (qx, qy), (rx, ry) = p, q, r
    return _orientation(float(px), float(py), float(qx), float(qy),
                        float(rx), float(ry))


def is_crossing(uC, vC, sC, tC) -> bool:
    '''checks if segment (uC, vC) crosses segment (sC, tC)

    Segments are closed: touching (an endpoint lying on the other segment,
    shared endpoints included) and collinear overlap count as crossing.
    '''
    (ux, uy), (vx, vy), (sx, sy), (tx, ty) = uC, vC, sC, tC
    return bool(_segments_cross(float(ux), float(uy), float(vx), float(vy),
                                float(sx), float(sy), float(tx), float(ty)))
