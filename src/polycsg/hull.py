## convex hull and Minkowski sum for polyCSG
## Copyright (c) 2026 the polyCSG authors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Convex hulls and Minkowski sums.

``convex_hull`` flattens any mix of meshes, polygons, paths, line
segments, vertices and points into a cloud of attributed points and
builds the hull incrementally: an initial tetrahedron from extreme
points, then one point at a time, replacing the faces the point can
see with a cone joining it to their horizon.  Orientation decisions
use :func:`polycsg.geom_util.orient3d`.

Flat input gives a two-sided polygon; collinear input or fewer than
three distinct points gives an empty mesh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Dict, List, NamedTuple, Sequence, Tuple

from polycsg import tolerance
from polycsg.color import Color, blend
from polycsg.geom_util import cross_2d, orient3d, projector
from polycsg.line import LineSegment
from polycsg.mesh import Mesh
from polycsg.path import Path, PathPoint
from polycsg.plane import Plane
from polycsg.polygon import Polygon
from polycsg.tessellation import detessellate
from polycsg.vector import Vector, vector
from polycsg.vertex import Vertex
from polycsg.vertexset import VertexSet

logger = logging.getLogger(__name__)


class HullPoint(NamedTuple):
    position: Vector
    color: Color | None = None
    material: object = None


def hull_points(operands: Iterable) -> List[HullPoint]:
    """Flatten hull operands into attributed points, in input order."""
    out: List[HullPoint] = []
    stack = list(operands)
    stack.reverse()
    while stack:
        item = stack.pop()
        if isinstance(item, Mesh):
            for p in item.polygons:
                out.extend(HullPoint(v.position, v.color, p.material) for v in p.vertices)
        elif isinstance(item, Polygon):
            out.extend(HullPoint(v.position, v.color, item.material) for v in item.vertices)
        elif isinstance(item, Path):
            out.extend(HullPoint(p.position, p.color) for p in item.points)
        elif isinstance(item, PathPoint):
            out.append(HullPoint(item.position, item.color))
        elif isinstance(item, LineSegment):
            out.append(HullPoint(item.start))
            out.append(HullPoint(item.end))
        elif isinstance(item, Vertex):
            out.append(HullPoint(item.position, item.color))
        elif isinstance(item, HullPoint):
            out.append(item)
        elif isinstance(item, Vector):
            out.append(HullPoint(item))
        elif isinstance(item, (list, tuple)) and item and all(
                isinstance(c, (int, float)) for c in item):
            out.append(HullPoint(vector(item)))
        elif isinstance(item, Iterable) and not isinstance(item, (str, bytes)):
            nested = list(item)
            nested.reverse()
            stack.extend(nested)
        else:
            raise TypeError(f'bad convex hull operand: {item!r}')
    return out


def _unique(points: Sequence[HullPoint]) -> List[HullPoint]:
    weld = VertexSet(tolerance.weld_precision)
    seen = set()
    out = []
    for p in points:
        key = weld.insert_position(p.position)
        if key in seen:
            continue
        seen.add(key)
        out.append(HullPoint(key, p.color, p.material))
    return out


def convex_hull(*operands, material=None) -> Mesh:
    """The smallest convex solid enclosing every operand.

    Face vertices carry the colours of the input points and faces the
    material of their first point, unless ``material`` overrides it.
    """
    return hull_of_points(hull_points(operands), material=material)


def hull_of_points(points: Sequence[HullPoint], material=None) -> Mesh:
    points = _unique(points)
    logger.debug('convex hull of %d distinct points', len(points))
    if len(points) < 3:
        return Mesh()
    start = _initial_simplex(points)
    if start is None:
        return Mesh()
    if len(start) == 3:
        polygons = _flat_hull(points, start, material)
    else:
        polygons = _solid_hull(points, start, material)
    if not polygons:
        return Mesh()
    # merged faces may drop a collinear vertex their neighbour keeps
    return Mesh(detessellate(polygons, ensure_convex=True), is_convex=True).make_watertight()


def _initial_simplex(points: Sequence[HullPoint]):
    """Indices of an extreme tetrahedron, three indices for coplanar
    input, or None for collinear input."""
    pos = [p.position for p in points]
    i0 = min(range(len(pos)), key=lambda i: (pos[i].x, pos[i].y, pos[i].z))
    i1 = max(range(len(pos)), key=lambda i: pos[i].distance(pos[i0]))
    axis = pos[i1] - pos[i0]
    if axis.length < tolerance.epsilon:
        return None

    def line_distance(i):
        return axis.cross(pos[i] - pos[i0]).length / axis.length

    i2 = max(range(len(pos)), key=line_distance)
    if line_distance(i2) <= tolerance.plane_epsilon:
        return None
    normal = axis.cross(pos[i2] - pos[i0]).normalized()
    base = Plane(normal, normal.dot(pos[i0]))
    i3 = max(range(len(pos)), key=lambda i: abs(base.distance(pos[i])))
    if abs(base.distance(pos[i3])) <= tolerance.plane_epsilon:
        return (i0, i1, i2)
    return (i0, i1, i2, i3)


def _face_plane(pos: Sequence[Vector], face: Tuple[int, int, int]) -> Plane:
    a, b, c = (pos[i] for i in face)
    normal = (b - a).cross(c - a).normalized()
    return Plane(normal, normal.dot(a))


def _solid_hull(points: Sequence[HullPoint], start, material) -> List[Polygon]:
    pos = [p.position for p in points]
    a, b, c, d = start
    if orient3d(pos[a], pos[b], pos[c], pos[d]) > 0:
        b, c = c, b
    faces: Dict[Tuple[int, int, int], Plane] = {}
    for face in ((a, b, c), (a, d, b), (b, d, c), (a, c, d)):
        faces[face] = _face_plane(pos, face)

    center = (pos[a] + pos[b] + pos[c] + pos[d]) / 4.0
    remaining = [i for i in range(len(pos)) if i not in start]
    # farthest first, so points that end up on hull edges are rarely kept
    remaining.sort(key=lambda i: -pos[i].distance(center))
    eps = tolerance.plane_epsilon
    for i in remaining:
        p = pos[i]
        visible = [f for f, plane in faces.items() if plane.distance(p) > eps]
        if not visible:
            continue
        edges = set()
        for f in visible:
            edges.update(((f[0], f[1]), (f[1], f[2]), (f[2], f[0])))
        horizon = [e for f in visible
                   for e in ((f[0], f[1]), (f[1], f[2]), (f[2], f[0]))
                   if (e[1], e[0]) not in edges]
        for f in visible:
            del faces[f]
        for e0, e1 in horizon:
            face = (e0, e1, i)
            faces[face] = _face_plane(pos, face)

    polygons = []
    for face, plane in faces.items():
        verts = [Vertex(pos[k], plane.normal, color=points[k].color) for k in face]
        m = points[face[0]].material if material is None else material
        polygons.append(Polygon(verts, plane, material=m, is_convex=True))
    return polygons


def _flat_hull(points: Sequence[HullPoint], start, material) -> List[Polygon]:
    pos = [p.position for p in points]
    a, b, c = start
    normal = (pos[b] - pos[a]).cross(pos[c] - pos[a]).normalized()
    project = projector(normal)
    flat = [project(p) for p in pos]
    order = sorted(range(len(pos)), key=lambda i: flat[i])

    def chain(indices):
        out: List[int] = []
        for i in indices:
            while len(out) >= 2 and cross_2d(flat[out[-2]], flat[out[-1]], flat[i]) <= 0:
                out.pop()
            out.append(i)
        return out

    lower = chain(order)
    upper = chain(reversed(order))
    loop = lower[:-1] + upper[:-1]
    if len(loop) < 3:
        return []
    plane = Plane(normal, normal.dot(pos[loop[0]]))
    m = points[loop[0]].material if material is None else material
    verts = [Vertex(pos[k], normal, color=points[k].color) for k in loop]
    face = Polygon(verts, plane, material=m, is_convex=True)
    return [face, face.inverted()]


# ----------------------------------------------------------------------
# Minkowski sum
# ----------------------------------------------------------------------

def _is_convex(mesh: Mesh) -> bool:
    return mesh.is_known_convex or mesh.is_actually_convex


def _convex_parts(mesh: Mesh) -> List[List[HullPoint]]:
    if _is_convex(mesh):
        return [hull_points([mesh])]
    return [hull_points([p]) for p in mesh.tessellate().polygons]


def _sum_points(a: Sequence[HullPoint], b: Sequence[HullPoint]) -> List[HullPoint]:
    return [HullPoint(p.position + q.position, blend(p.color, q.color),
                      blend(p.material, q.material))
            for p in a for q in b]


def minkowski_sum(a: Mesh, b: Mesh) -> Mesh:
    """The set of all sums of a point of ``a`` and a point of ``b``.

    Two convex operands are summed directly as the hull of pairwise
    vertex sums.  Otherwise each operand is decomposed into convex
    parts (the whole mesh if convex, its convex faces if not), the
    parts are summed pairwise, and the pieces are unioned together with
    a translated copy of each non-convex operand filling its interior.
    Colours and materials combine multiplicatively.
    """
    if a.is_empty:
        return b
    if b.is_empty:
        return a
    a_convex, b_convex = _is_convex(a), _is_convex(b)
    if a_convex and b_convex:
        pa, pb = _unique(hull_points([a])), _unique(hull_points([b]))
        return hull_of_points(_sum_points(pa, pb))

    from polycsg.csg import union_all

    pieces: List[Mesh] = []
    for pa in _convex_parts(a):
        for pb in _convex_parts(b):
            piece = hull_of_points(_sum_points(pa, pb))
            if not piece.is_empty:
                pieces.append(piece)
    if not a_convex:
        pieces.append(a.translated(b.polygons[0].vertices[0].position))
    if not b_convex:
        pieces.append(b.translated(a.polygons[0].vertices[0].position))
    logger.debug('minkowski sum: %d convex pieces', len(pieces))
    return union_all(pieces)


__all__ = ['HullPoint', 'convex_hull', 'hull_of_points', 'hull_points', 'minkowski_sum']
