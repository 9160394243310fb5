"""Paths: ordered point sequences that drive the shape builders.

A :class:`Path` is a polyline of :class:`PathPoint` values.  It is
closed when its last point repeats its first, and it may hold several
disjoint subpaths, each ending where a point repeats the subpath's
starting point.  Points flagged ``is_curved`` are control points that
:meth:`Path.smoothed` rounds off by repeated corner cutting.

Closed, planar paths become faces through :meth:`Path.face_polygons`;
nested closed subpaths are treated as holes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

from polycsg.bounds import Bounds
from polycsg.color import Color, color
from polycsg.geom_util import face_normal, point_in_loop_2d, points_are_coplanar, projector
from polycsg.line import LineSegment
from polycsg.plane import Plane
from polycsg.polygon import Polygon, polygon as make_polygon
from polycsg.transform import Transform
from polycsg.vector import ZERO, Vector, vector
from polycsg.vertex import Vertex


@dataclass(frozen=True, slots=True)
class PathPoint:
    position: Vector
    texcoord: Vector | None = None
    color: Color | None = None
    is_curved: bool = False

    @classmethod
    def point(cls, position, texcoord=None, c=None) -> 'PathPoint':
        return cls(vector(position), None if texcoord is None else vector(texcoord),
                   None if c is None else color(c), False)

    @classmethod
    def curve(cls, position, texcoord=None, c=None) -> 'PathPoint':
        return cls(vector(position), None if texcoord is None else vector(texcoord),
                   None if c is None else color(c), True)

    def with_position(self, position: Vector) -> 'PathPoint':
        return replace(self, position=position)

    def transformed(self, transform: Transform) -> 'PathPoint':
        return replace(self, position=transform.apply(self.position))

    def lerp(self, other: 'PathPoint', t: float) -> 'PathPoint':
        texcoord = None
        if self.texcoord is not None or other.texcoord is not None:
            texcoord = (self.texcoord or ZERO).lerp(other.texcoord or ZERO, t)
        c = None
        if self.color is not None or other.color is not None:
            c = (self.color or Color()).lerp(other.color or Color(), t)
        return PathPoint(self.position.lerp(other.position, t), texcoord, c,
                         self.is_curved or other.is_curved)

    def is_equal(self, other: 'PathPoint', tol: float | None = None) -> bool:
        return self.position.is_equal(other.position, tol)

    def to_vertex(self, normal: Vector = ZERO) -> Vertex:
        return Vertex(self.position, normal,
                      ZERO if self.texcoord is None else self.texcoord, self.color)


def path_point(value) -> PathPoint:
    if isinstance(value, PathPoint):
        return value
    if isinstance(value, Vertex):
        return PathPoint(value.position, value.texcoord, value.color)
    return PathPoint.point(value)


def _sanitize(points: Iterable) -> List[PathPoint]:
    out: List[PathPoint] = []
    for p in points:
        p = path_point(p)
        if out and out[-1].is_equal(p):
            # a repeated point keeps the sharper corner
            if not p.is_curved:
                out[-1] = p
            continue
        out.append(p)
    return out


class Path:
    """An immutable polyline, possibly closed, possibly made of
    several subpaths."""

    __slots__ = ('points', 'is_closed', 'plane', '_subpaths', '_bounds')

    def __init__(self, points: Iterable = ()):
        self.points: Tuple[PathPoint, ...] = tuple(_sanitize(points))
        pts = self.points
        self.is_closed = len(pts) > 2 and pts[0].is_equal(pts[-1])
        self.plane = _path_plane([p.position for p in pts])
        self._subpaths = None
        self._bounds = None

    def __repr__(self) -> str:
        return f'Path(<{len(self.points)} points{", closed" if self.is_closed else ""}>)'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.points == other.points

    def __hash__(self) -> int:
        return hash(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def positions(self) -> List[Vector]:
        return [p.position for p in self.points]

    @property
    def bounds(self) -> Bounds:
        if self._bounds is None:
            self._bounds = Bounds.from_points(self.positions)
        return self._bounds

    @property
    def length(self) -> float:
        pts = self.positions
        return sum(pts[i].distance(pts[i + 1]) for i in range(len(pts) - 1))

    @property
    def edges(self) -> List[LineSegment]:
        pts = self.positions
        return [LineSegment(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]

    @property
    def subpaths(self) -> List['Path']:
        """The disjoint pieces of the path.

        A new subpath starts after any point that repeats the start of
        the current one.  A path with one piece returns ``[self]``.
        """
        if self._subpaths is None:
            pieces: List[List[PathPoint]] = []
            pts = self.points
            start = 0
            for i in range(start + 1, len(pts)):
                if i - start >= 2 and pts[i].is_equal(pts[start]):
                    pieces.append(list(pts[start:i + 1]))
                    start = i + 1
            if len(pts) - start >= 2:
                pieces.append(list(pts[start:]))
            if len(pieces) <= 1:
                self._subpaths = [self]
            else:
                self._subpaths = [Path(p) for p in pieces]
        return self._subpaths

    @property
    def has_curves(self) -> bool:
        return any(p.is_curved for p in self.points)

    def closed(self) -> 'Path':
        if self.is_closed or len(self.points) < 3:
            return self
        return Path(self.points + (self.points[0],))

    def inverted(self) -> 'Path':
        return Path(reversed(self.points))

    def transformed(self, transform: Transform) -> 'Path':
        return Path(p.transformed(transform) for p in self.points)

    def translated(self, offset) -> 'Path':
        return self.transformed(Transform.translation(offset))

    def rotated(self, rotation) -> 'Path':
        return self.transformed(Transform.rotating(rotation))

    def scaled(self, scale) -> 'Path':
        return self.transformed(Transform.scaling(scale))

    def smoothed(self, detail: int) -> 'Path':
        """Round off curved points by ``detail`` rounds of corner cutting.

        Each round replaces every curved corner with two points a
        quarter of the way along its adjacent edges.  The end points of
        an open path are never moved.
        """
        if detail < 1 or not self.has_curves:
            return self
        if len(self.subpaths) > 1:
            out: List[PathPoint] = []
            for sub in self.subpaths:
                out.extend(sub.smoothed(detail).points)
            return Path(out)
        closed = self.is_closed
        pts = list(self.points[:-1] if closed else self.points)
        for _ in range(detail):
            count = len(pts)
            out = []
            for i, p in enumerate(pts):
                if not p.is_curved or (not closed and (i == 0 or i == count - 1)):
                    out.append(p)
                    continue
                prev = pts[i - 1]
                nxt = pts[(i + 1) % count]
                out.append(p.lerp(prev, 0.25))
                out.append(p.lerp(nxt, 0.25))
            pts = out
        if closed:
            pts.append(pts[0])
        return Path(pts)

    def face_vertices(self) -> List[Vertex] | None:
        """vertices of a single closed planar loop, or None"""
        if not self.is_closed or self.plane is None or len(self.subpaths) > 1:
            return None
        return [p.to_vertex() for p in self.points[:-1]]

    def face_polygon(self, material=None) -> Polygon | None:
        """the path as a single polygon, or None if it is not one"""
        verts = self.face_vertices()
        if verts is None:
            return None
        return make_polygon(verts, material=material)

    def face_polygons(self, material=None) -> List[Polygon]:
        """Fill the closed subpaths of a planar path.

        Subpaths nested an odd number of levels deep are holes in the
        subpath enclosing them.  A loop that cannot form a simple
        polygon is triangulated instead, which gives a partial result
        for self-intersecting input.  Open and non-planar paths give
        an empty list.
        """
        if self.plane is None:
            return []
        loops = [sub for sub in self.subpaths if sub.is_closed]
        if not loops:
            return []
        if len(loops) == 1:
            p = loops[0].face_polygon(material)
            if p is not None:
                return [p]
            return _triangulated(loops[0], [], material)

        project = projector(self.plane.normal)
        flat = [[project(p.position) for p in loop.points[:-1]] for loop in loops]
        depth = _depths(flat)
        result: List[Polygon] = []
        for i, loop in enumerate(loops):
            if depth[i] % 2:
                continue
            holes = [loops[j] for j in range(len(loops))
                     if depth[j] == depth[i] + 1 and point_in_loop_2d(flat[j][0], flat[i])]
            if not holes:
                p = loop.face_polygon(material)
                if p is not None:
                    result.append(p)
                    continue
            result.extend(_triangulated(loop, holes, material))
        return result


def _depths(flat: Sequence[Sequence[Tuple[float, float]]]) -> List[int]:
    return [sum(1 for j, other in enumerate(flat) if j != i and point_in_loop_2d(loop[0], other))
            for i, loop in enumerate(flat)]


def loop_depths(loops: Sequence[Path], normal: Vector) -> List[int]:
    """nesting depth of each closed loop among the others; odd depths are holes"""
    project = projector(normal)
    return _depths([[project(p.position) for p in loop.points[:-1]] for loop in loops])


def _path_plane(positions: Sequence[Vector]) -> Plane | None:
    if len(positions) < 3:
        return None
    normal = face_normal(positions)
    if normal == ZERO:
        return None
    if not points_are_coplanar(positions, normal):
        return None
    w = sum(normal.dot(p) for p in positions) / len(positions)
    return Plane(normal, w)


def _triangulated(outer: Path, holes: Sequence[Path], material) -> List[Polygon]:
    from polycsg.tessellation import detessellate, earcut_indices

    loops = [list(outer.points[:-1])]
    for hole in holes:
        loops.append(list(hole.points[:-1]))
    normal = face_normal([p.position for p in loops[0]])
    if normal == ZERO:
        return []
    project = projector(normal)
    flat = [[project(p.position) for p in loop] for loop in loops]
    points = [p for loop in loops for p in loop]
    triangles = []
    for a, b, c in earcut_indices(flat):
        tri = make_polygon([points[a].to_vertex(), points[b].to_vertex(),
                            points[c].to_vertex()], material=material)
        if tri is not None:
            triangles.append(tri)
    return detessellate(triangles)


# ----------------------------------------------------------------------
# path factories
# ----------------------------------------------------------------------

def line(start, end) -> Path:
    return Path([start, end])


def ellipse(width: float = 1.0, height: float = 1.0, segments: int = 16) -> Path:
    """closed counter-clockwise ellipse in the XY plane, curved points"""
    if segments < 3:
        raise ValueError(f'ellipse needs at least 3 segments, got {segments!r}')
    rx, ry = width / 2.0, height / 2.0
    pts = []
    for i in range(segments):
        theta = 2.0 * math.pi * i / segments
        pts.append(PathPoint.curve((rx * math.cos(theta), ry * math.sin(theta))))
    pts.append(pts[0])
    return Path(pts)


def circle(radius: float = 0.5, segments: int = 16) -> Path:
    return ellipse(radius * 2, radius * 2, segments)


def rectangle(width: float = 1.0, height: float = 1.0) -> Path:
    """closed counter-clockwise rectangle centred on the origin"""
    w, h = width / 2.0, height / 2.0
    return Path([(-w, -h), (w, -h), (w, h), (-w, h), (-w, -h)])


def square(size: float = 1.0) -> Path:
    return rectangle(size, size)


def rounded_rectangle(width: float = 1.0, height: float = 1.0, radius: float = 0.25,
                      detail: int = 4) -> Path:
    w, h = width / 2.0, height / 2.0
    radius = min(radius, w, h)
    if radius <= 0:
        return rectangle(width, height)
    steps = max(detail, 1)
    corners = [(w - radius, -h + radius, -math.pi / 2), (w - radius, h - radius, 0.0),
               (-w + radius, h - radius, math.pi / 2), (-w + radius, -h + radius, math.pi)]
    pts = []
    for cx, cy, start in corners:
        for i in range(steps + 1):
            theta = start + (math.pi / 2) * i / steps
            pts.append((cx + radius * math.cos(theta), cy + radius * math.sin(theta)))
    pts.append(pts[0])
    return Path(pts)


def polygon(radius: float = 0.5, sides: int = 5) -> Path:
    """closed regular polygon with a vertex on the +Y axis"""
    if sides < 3:
        raise ValueError(f'a polygon needs at least 3 sides, got {sides!r}')
    pts = []
    for i in range(sides):
        theta = math.pi / 2 + 2.0 * math.pi * i / sides
        pts.append((radius * math.cos(theta), radius * math.sin(theta)))
    pts.append(pts[0])
    return Path(pts)


def star(points: int = 5, inner_radius: float = 0.25, outer_radius: float = 0.5) -> Path:
    if points < 2:
        raise ValueError(f'a star needs at least 2 points, got {points!r}')
    pts = []
    for i in range(points * 2):
        r = outer_radius if i % 2 == 0 else inner_radius
        theta = math.pi / 2 + math.pi * i / points
        pts.append((r * math.cos(theta), r * math.sin(theta)))
    pts.append(pts[0])
    return Path(pts)


def curve(control_points: Sequence, detail: int = 4) -> Path:
    """Smooth open curve guided by ``control_points``.

    The first and last points are end points of the curve; interior
    points pull it toward themselves.
    """
    pts = [path_point(p) for p in control_points]
    count = len(pts)
    marked = [p if i in (0, count - 1) else replace(p, is_curved=True)
              for i, p in enumerate(pts)]
    return Path(marked).smoothed(detail)


__all__ = ['PathPoint', 'Path', 'path_point', 'loop_depths', 'line', 'circle', 'ellipse', 'rectangle',
           'square', 'rounded_rectangle', 'polygon', 'star', 'curve']
