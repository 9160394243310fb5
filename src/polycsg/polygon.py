## planar polygons for polyCSG
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

"""Planar polygons for **polyCSG**

====================
OVERVIEW
====================

A :class:`Polygon` is a closed loop of three or more :class:`Vertex`
values lying in a common :class:`Plane`.  Its winding determines the
plane normal by the right-hand rule, and the normal points out of the
solid the polygon bounds.

Polygons are immutable.  The plane is computed once at construction
and convexity and bounds are cached lazily on first use.

Construct validated polygons with :func:`polygon`, which returns
``None`` rather than raising for degenerate input (fewer than three
points, zero-length edges, collinear points, non-planar or
self-intersecting loops).  The :class:`Polygon` constructor itself
performs no validation and is reserved for code that already knows
its input is well-formed.

=============================
splitting and clipping
=============================

:meth:`Polygon.split` partitions a polygon by a plane into front and
back fragments.  Vertices are classified against the plane with a
half-thickness of ``tolerance.plane_epsilon``; new vertices are
interpolated, all attributes included, at each crossing.  Concave
polygons are tessellated into convex pieces before splitting, so
either side may receive several fragments.

Fragments produced while clipping inherit an ``id`` shared with their
siblings so that the BSP can stitch neighbouring fragments of the
same source polygon back together afterwards.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

from polycsg import tolerance
from polycsg.bounds import EMPTY, Bounds
from polycsg.geom_util import (
    face_normal,
    loop_area,
    point_in_loop_2d,
    point_on_segment_2d,
    points_are_convex,
    points_are_coplanar,
    points_are_degenerate,
    points_are_self_intersecting,
    projector,
)
from polycsg.line import LineSegment
from polycsg.plane import Plane, PlaneComparison
from polycsg.transform import Transform
from polycsg.vector import ZERO, Vector, centroid, vector
from polycsg.vertex import Vertex, vertex


class Polygon:
    """An immutable planar vertex loop.

    Parameters
    ----------
    vertices : sequence of Vertex
        The loop, without a repeated closing vertex.
    plane : Plane, optional
        The supporting plane; computed from the vertices if omitted.
    material : hashable, optional
        Opaque surface tag, propagated to every fragment.
    id : int
        Fragment group identifier; zero means "not a fragment".
    is_convex : bool, optional
        Known convexity, if the caller has it to hand.
    """

    __slots__ = ('vertices', 'plane', 'material', 'id', '_is_convex', '_bounds')

    def __init__(self, vertices: Sequence[Vertex], plane: Plane | None = None, *,
                 material=None, id: int = 0, is_convex: bool | None = None):
        self.vertices: Tuple[Vertex, ...] = tuple(vertices)
        if plane is None:
            positions = [v.position for v in self.vertices]
            normal = face_normal(positions)
            w = sum(normal.dot(p) for p in positions) / len(positions)
            plane = Plane(normal, w)
        self.plane = plane
        self.material = material
        self.id = id
        self._is_convex = is_convex
        self._bounds = None

    def __repr__(self) -> str:
        return f'Polygon({list(self.vertices)!r}, material={self.material!r})'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return self.vertices == other.vertices and self.material == other.material

    def __hash__(self) -> int:
        return hash((self.vertices, self.material))

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    # ------------------------------------------------------------------
    # derived properties
    # ------------------------------------------------------------------

    @property
    def positions(self) -> List[Vector]:
        return [v.position for v in self.vertices]

    @property
    def is_convex(self) -> bool:
        if self._is_convex is None:
            self._is_convex = points_are_convex(self.positions, self.plane.normal)
        return self._is_convex

    @property
    def bounds(self) -> Bounds:
        if self._bounds is None:
            self._bounds = Bounds.from_points(self.positions)
        return self._bounds

    @property
    def center(self) -> Vector:
        return centroid(self.positions)

    @property
    def area(self) -> float:
        return loop_area(self.positions)

    @property
    def has_texcoords(self) -> bool:
        return any(v.texcoord != ZERO for v in self.vertices)

    @property
    def edges(self) -> List[LineSegment]:
        """directed edges in winding order"""
        verts = self.vertices
        count = len(verts)
        return [LineSegment(verts[i].position, verts[(i + 1) % count].position)
                for i in range(count)]

    @property
    def undirected_edges(self) -> List[LineSegment]:
        return [e.undirected() for e in self.edges]

    @property
    def edge_planes(self) -> List[Plane]:
        """planes through each edge, perpendicular to the polygon and
        facing away from its interior"""
        planes = []
        normal = self.plane.normal
        verts = self.vertices
        count = len(verts)
        for i in range(count):
            p0 = verts[i].position
            p1 = verts[(i + 1) % count].position
            n = (p1 - p0).cross(normal).normalized()
            planes.append(Plane(n, n.dot(p0)))
        return planes

    # ------------------------------------------------------------------
    # simple derived polygons
    # ------------------------------------------------------------------

    def _derived(self, vertices: Sequence[Vertex], *, plane: Plane | None = None,
                 material=..., id: int | None = None,
                 is_convex: bool | None = None) -> 'Polygon':
        return Polygon(vertices,
                       self.plane if plane is None else plane,
                       material=self.material if material is ... else material,
                       id=self.id if id is None else id,
                       is_convex=is_convex)

    def inverted(self) -> 'Polygon':
        return Polygon([v.inverted() for v in reversed(self.vertices)],
                       self.plane.inverted(),
                       material=self.material, id=self.id, is_convex=self._is_convex)

    def with_material(self, material) -> 'Polygon':
        return self._derived(self.vertices, material=material, is_convex=self._is_convex)

    def with_id(self, id: int) -> 'Polygon':
        if id == self.id:
            return self
        return self._derived(self.vertices, id=id, is_convex=self._is_convex)

    def without_texcoords(self) -> 'Polygon':
        if not self.has_texcoords:
            return self
        return self._derived([v.with_texcoord(ZERO) for v in self.vertices],
                             is_convex=self._is_convex)

    def transformed(self, transform) -> 'Polygon':
        verts = [v.transformed(transform) for v in self.vertices]
        if transform.is_flipping:
            verts.reverse()
        positions = [v.position for v in verts]
        normal = face_normal(positions)
        plane = Plane(normal, sum(normal.dot(p) for p in positions) / len(positions))
        return Polygon(verts, plane, material=self.material, id=self.id,
                       is_convex=self._is_convex)

    def translated(self, offset) -> 'Polygon':
        offset = vector(offset)
        verts = [v.with_position(v.position + offset) for v in self.vertices]
        plane = Plane(self.plane.normal, self.plane.w + self.plane.normal.dot(offset))
        return Polygon(verts, plane, material=self.material, id=self.id,
                       is_convex=self._is_convex)

    def rotated(self, rotation) -> 'Polygon':
        return self.transformed(Transform(rotation=rotation))

    def scaled(self, scale) -> 'Polygon':
        return self.transformed(Transform.scaling(scale))

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def compare(self, plane: Plane) -> PlaneComparison:
        result = PlaneComparison.COPLANAR
        for v in self.vertices:
            result |= plane.compare(v.position)
            if result == PlaneComparison.SPANNING:
                break
        return result

    def contains_point(self, point: Vector) -> bool:
        """True if ``point`` lies on the polygon, boundary included"""
        if not self.plane.contains_point(point):
            return False
        if not self.bounds.contains_point(point, tolerance.plane_epsilon):
            return False
        project = projector(self.plane.normal)
        loop = [project(p) for p in self.positions]
        p = project(point)
        count = len(loop)
        for i in range(count):
            if point_on_segment_2d(p, loop[i], loop[(i + 1) % count]):
                return True
        return point_in_loop_2d(p, loop)

    # ------------------------------------------------------------------
    # splitting and clipping
    # ------------------------------------------------------------------

    def split(self, plane: Plane) -> Tuple[List['Polygon'], List['Polygon']]:
        """Split by ``plane`` into ``(front, back)`` fragment lists.

        A polygon wholly on one side is returned unchanged on that
        side.  A polygon lying in the plane goes to the side its
        normal faces.  A convex polygon yields at most one fragment on
        each side.
        """
        coplanar: List[Polygon] = []
        front: List[Polygon] = []
        back: List[Polygon] = []
        self._split_into(plane, coplanar, front, back, fragment_ids())
        for p in coplanar:
            if plane.normal.dot(p.plane.normal) > 0:
                front.append(p)
            else:
                back.append(p)
        return front, back

    def clipped(self, plane: Plane) -> List['Polygon']:
        """the fragments of the polygon in front of ``plane``"""
        return self.split(plane)[0]

    def _split_into(self, plane: Plane, coplanar: List['Polygon'],
                    front: List['Polygon'], back: List['Polygon'],
                    ids: Iterator[int]) -> None:
        comparison = self.compare(plane)
        if comparison == PlaneComparison.COPLANAR:
            coplanar.append(self)
        elif comparison == PlaneComparison.FRONT:
            front.append(self)
        elif comparison == PlaneComparison.BACK:
            back.append(self)
        else:
            poly = self if self.id else self.with_id(next(ids))
            if not poly.is_convex:
                for piece in poly.tessellate():
                    piece._split_into(plane, coplanar, front, back, ids)
                return
            poly._split_spanning(plane, front, back)

    def _split_spanning(self, plane: Plane, front: List['Polygon'],
                        back: List['Polygon']) -> None:
        eps = tolerance.plane_epsilon
        verts = self.vertices
        count = len(verts)
        distances = [plane.distance(v.position) for v in verts]
        sides = [PlaneComparison.FRONT if d > eps else
                 PlaneComparison.BACK if d < -eps else
                 PlaneComparison.COPLANAR for d in distances]
        f: List[Vertex] = []
        b: List[Vertex] = []
        for i in range(count):
            j = (i + 1) % count
            vi, si, di = verts[i], sides[i], distances[i]
            if si != PlaneComparison.BACK:
                f.append(vi)
            if si != PlaneComparison.FRONT:
                b.append(vi)
            if (si | sides[j]) == PlaneComparison.SPANNING:
                t = di / (di - distances[j])
                v = vi.lerp(verts[j], t)
                f.append(v)
                b.append(v)
        for loop, out in ((f, front), (b, back)):
            loop = _remove_duplicates(loop)
            if not points_are_degenerate([v.position for v in loop]):
                out.append(self._derived(loop, is_convex=True))

    def _clip_to(self, polygons: Sequence['Polygon'], inside: List['Polygon'],
                 outside: List['Polygon'], ids: Iterator[int]) -> None:
        """Route coplanar regions of this polygon covered by any of
        ``polygons`` to ``inside`` and the rest to ``outside``."""
        if not self.is_convex:
            for piece in self.tessellate():
                piece._clip_to(polygons, inside, outside, ids)
            return
        to_test = [self]
        for other in polygons:
            for clipper in other.tessellate():
                if not to_test:
                    break
                remaining: List[Polygon] = []
                for p in to_test:
                    p._clip_to_convex(clipper, inside, remaining, ids)
                to_test = remaining
        outside.extend(to_test)

    def _clip_to_convex(self, clipper: 'Polygon', inside: List['Polygon'],
                        outside: List['Polygon'], ids: Iterator[int]) -> None:
        poly = self
        coplanar: List[Polygon] = []
        for edge_plane in clipper.edge_planes:
            back: List[Polygon] = []
            poly._split_into(edge_plane, coplanar, outside, back, ids)
            if not back:
                return
            poly = back[0]
        inside.append(poly)

    # ------------------------------------------------------------------
    # joining and merging
    # ------------------------------------------------------------------

    def _join(self, other: 'Polygon') -> 'Polygon | None':
        """Join two coplanar polygons sharing exactly one edge.

        Performs no coplanarity or material checks.  Redundant
        collinear vertices at the two ends of the removed edge are
        dropped.  Returns None if the polygons do not share exactly
        two vertices forming an oppositely-wound edge.
        """
        va, vb = self.vertices, other.vertices
        na, nb = len(va), len(vb)
        shared = []
        for i, v in enumerate(va):
            for j, w in enumerate(vb):
                if v.position.is_equal(w.position):
                    shared.append((i, j))
                    break
        if len(shared) != 2:
            return None
        (i0, j0), (i1, j1) = shared
        if (i1 - i0) % na == 1:
            s, e, bs, be = i0, i1, j0, j1
        elif (i0 - i1) % na == 1:
            s, e, bs, be = i1, i0, j1, j0
        else:
            return None
        if (bs - be) % nb != 1:
            return None
        result = [va[(e + 1 + k) % na] for k in range(na - 2)]
        join_start = len(result)
        result.extend(vb[(bs + k) % nb] for k in range(nb))
        join_end = len(result) - 1
        for index in (join_end, join_start):
            count = len(result)
            if count <= 3:
                break
            prev = result[index - 1].position
            cur = result[index].position
            nxt = result[(index + 1) % count].position
            ab = (cur - prev).normalized()
            bc = (nxt - cur).normalized()
            if ab.cross(bc).length < tolerance.epsilon and ab.dot(bc) > 0:
                del result[index]
        positions = [v.position for v in result]
        if points_are_degenerate(positions):
            return None
        return Polygon(result, self.plane, material=self.material, id=self.id)

    def merge(self, other: 'Polygon', ensure_convex: bool = False) -> 'Polygon | None':
        """Merge with a coplanar polygon sharing exactly one edge.

        Returns None if the polygons are not coplanar, differ in
        material, do not share a single edge, or (with
        ``ensure_convex``) would merge into a concave polygon.
        """
        if self.material != other.material:
            return None
        return self._merge_unchecked(other, ensure_convex)

    def _merge_unchecked(self, other: 'Polygon', ensure_convex: bool) -> 'Polygon | None':
        if not self.plane.is_equal(other.plane):
            return None
        if not self.bounds.intersects(other.bounds):
            return None
        joined = self._join(other)
        if joined is None:
            return None
        if ensure_convex and not joined.is_convex:
            return None
        if points_are_self_intersecting(joined.positions, joined.plane.normal):
            return None
        return joined

    # ------------------------------------------------------------------
    # other constructions
    # ------------------------------------------------------------------

    def triangulate(self) -> List['Polygon']:
        from polycsg.tessellation import triangulate
        return triangulate(self)

    def tessellate(self, max_sides: int | None = None) -> List['Polygon']:
        from polycsg.tessellation import tessellate
        return tessellate(self, max_sides)

    def inset(self, distance: float) -> 'Polygon | None':
        """Move every edge inward by ``distance`` (outward if negative).

        Returns None if the result is degenerate.
        """
        verts = self.vertices
        count = len(verts)
        normal = self.plane.normal
        out = []
        for i in range(count):
            p0 = verts[i - 1].position
            p1 = verts[i].position
            p2 = verts[(i + 1) % count].position
            n0 = normal.cross((p1 - p0).normalized())
            n1 = normal.cross((p2 - p1).normalized())
            bisector = (n0 + n1).normalized()
            denom = bisector.dot(n0)
            if abs(denom) < tolerance.epsilon:
                return None
            out.append(verts[i].with_position(p1 + bisector * (distance / denom)))
        for i in range(count):
            # an edge that turned around means the inset overshot
            before = verts[(i + 1) % count].position - verts[i].position
            after = out[(i + 1) % count].position - out[i].position
            if after.dot(before) < 0:
                return None
        result = polygon(out, material=self.material)
        if result is None:
            return None
        if result.plane.normal.dot(normal) < 0:
            return None
        return result

    def insert_edge_point(self, point: Vector, tol: float | None = None) -> 'Polygon | None':
        """Return a copy with ``point`` inserted into the edge it lies on.

        The new vertex interpolates the edge's attributes.  Returns None
        if ``point`` is already a vertex or lies on no edge.
        """
        if tol is None:
            tol = tolerance.epsilon
        verts = self.vertices
        if any(v.position.is_equal(point, tol) for v in verts):
            return None
        count = len(verts)
        for i in range(count):
            a = verts[i]
            b = verts[(i + 1) % count]
            segment = LineSegment(a.position, b.position)
            if not segment.interior_contains_point(point, tol):
                continue
            t = (point - a.position).length / segment.length
            new = a.lerp(b, t).with_position(point)
            out = list(verts[:i + 1]) + [new] + list(verts[i + 1:])
            return Polygon(out, self.plane, material=self.material, id=self.id,
                           is_convex=self._is_convex)
        return None


def fragment_ids(start: int = 1) -> Iterator[int]:
    n = start
    while True:
        yield n
        n += 1


def _remove_duplicates(loop: List[Vertex]) -> List[Vertex]:
    out: List[Vertex] = []
    for v in loop:
        if out and out[-1].position.is_equal(v.position):
            continue
        out.append(v)
    while len(out) > 1 and out[0].position.is_equal(out[-1].position):
        out.pop()
    return out


def polygon(points: Iterable, material=None) -> Polygon | None:
    """Validated polygon constructor.

    ``points`` may contain :class:`Vertex` values or anything
    :func:`polycsg.vector.vector` accepts.  A repeated closing point is
    dropped.  Returns None for fewer than three points, zero-length
    edges, collinear, non-planar or self-intersecting loops.  Vertices
    without a normal receive the face normal.
    """
    verts = [p if isinstance(p, Vertex) else vertex(p) for p in points]
    if len(verts) > 3 and verts[0].position.is_equal(verts[-1].position):
        verts = verts[:-1]
    positions = [v.position for v in verts]
    if points_are_degenerate(positions):
        return None
    normal = face_normal(positions)
    if normal == ZERO:
        return None
    if not points_are_coplanar(positions, normal):
        return None
    if points_are_self_intersecting(positions, normal):
        return None
    w = sum(normal.dot(p) for p in positions) / len(positions)
    verts = [v if v.normal != ZERO else v.with_normal(normal) for v in verts]
    return Polygon(verts, Plane(normal, w), material=material)


def polygons_bounds(polygons: Iterable[Polygon]) -> Bounds:
    result = None
    for p in polygons:
        result = p.bounds if result is None else result.union(p.bounds)
    if result is None:
        return EMPTY
    return result


__all__ = ['Polygon', 'polygon', 'polygons_bounds']
