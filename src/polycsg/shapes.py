## solid and surface builders for polyCSG
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

"""
=============================
Mesh builders for **polyCSG**
=============================

Parametric primitives (:func:`cube`, :func:`sphere`, :func:`cylinder`,
:func:`cone`) and path-driven builders (:func:`fill`, :func:`extrude`,
:func:`lathe`, :func:`loft`, :func:`stroke`).

Primitives are centred on the origin unless a ``center`` is given.
Lathes revolve a profile drawn in the XY plane (``x >= 0``) around
the Y axis.  Builders that produce closed solids orient their faces
outward whatever the winding of the input path.

Which sides of a surface are generated is controlled by
:class:`Faces`: closed solids default to ``FRONT``, open surfaces
(filled shapes, open extrusions) to ``FRONT_AND_BACK``.  Builders
degrade to an empty or partial mesh on self-intersecting or otherwise
unusable input.
"""

from __future__ import annotations

import enum
import math
from typing import Iterable, List, Sequence

from polycsg import tolerance
from polycsg.geom_util import face_normal, points_are_coplanar
from polycsg.mesh import Mesh
from polycsg.path import Path, loop_depths
from polycsg.plane import Plane
from polycsg.polygon import Polygon, polygon
from polycsg.vector import UNIT_Z, ZERO, Vector, centroid, perpendicular, vector
from polycsg.vertex import Vertex


class Faces(enum.Enum):
    FRONT = 'front'
    BACK = 'back'
    FRONT_AND_BACK = 'front_and_back'
    DEFAULT = 'default'


def _apply_faces(polygons: List[Polygon], faces: Faces, default: Faces) -> List[Polygon]:
    if faces is Faces.DEFAULT:
        faces = default
    if faces is Faces.FRONT:
        return polygons
    back = [p.inverted() for p in polygons]
    if faces is Faces.BACK:
        return back
    return polygons + back


def _outward(polygons: List[Polygon]) -> List[Polygon]:
    """flip a closed surface that came out inside-out"""
    if Mesh(polygons).volume < 0:
        return [p.inverted() for p in polygons]
    return polygons


def _face(points: Sequence[Vertex], material) -> List[Polygon]:
    """Polygon(s) for a loop that may contain repeated points.

    Non-planar quads are split into two triangles.
    """
    loop: List[Vertex] = []
    for v in points:
        if loop and loop[-1].position.is_equal(v.position):
            continue
        loop.append(v)
    while len(loop) > 1 and loop[0].position.is_equal(loop[-1].position):
        loop.pop()
    if len(loop) < 3:
        return []
    if len(loop) == 4 and not points_are_coplanar([v.position for v in loop]):
        halves = (polygon(loop[:3], material), polygon([loop[0], loop[2], loop[3]], material))
        return [p for p in halves if p is not None]
    p = polygon(loop, material)
    return [] if p is None else [p]


# ----------------------------------------------------------------------
# primitives
# ----------------------------------------------------------------------

_CUBE_FACES = (((0, 4, 6, 2), (-1, 0, 0)), ((1, 3, 7, 5), (1, 0, 0)),
               ((0, 1, 5, 4), (0, -1, 0)), ((2, 6, 7, 3), (0, 1, 0)),
               ((0, 2, 3, 1), (0, 0, -1)), ((4, 5, 7, 6), (0, 0, 1)))
_CUBE_TEXCOORDS = (Vector(0.0, 0.0), Vector(1.0, 0.0), Vector(1.0, 1.0), Vector(0.0, 1.0))


def cube(center=(0, 0, 0), size=1.0, faces: Faces = Faces.DEFAULT, material=None) -> Mesh:
    """Axis-aligned box; ``size`` is a number or an ``(x, y, z)`` triple."""
    c = vector(center)
    s = vector(size)
    if s.x <= 0 or s.y <= 0 or s.z <= 0:
        return Mesh()
    polygons = []
    for loop, n in _CUBE_FACES:
        normal = Vector(*map(float, n))
        verts = []
        for corner, tc in zip(loop, _CUBE_TEXCOORDS):
            offset = Vector(((corner & 1) - 0.5) * s.x, (((corner >> 1) & 1) - 0.5) * s.y,
                            (((corner >> 2) & 1) - 0.5) * s.z)
            verts.append(Vertex(c + offset, normal, tc))
        plane = Plane(normal, normal.dot(verts[0].position))
        polygons.append(Polygon(verts, plane, material=material, is_convex=True))
    polygons = _apply_faces(polygons, faces, Faces.FRONT)
    return Mesh(polygons, is_convex=faces in (Faces.FRONT, Faces.DEFAULT))


def sphere(radius: float = 0.5, slices: int = 16, stacks: int | None = None,
           center=(0, 0, 0), faces: Faces = Faces.DEFAULT, material=None) -> Mesh:
    """UV sphere with its poles on the Y axis and radial vertex normals."""
    if stacks is None:
        stacks = max(slices // 2, 2)
    if radius <= 0 or slices < 3 or stacks < 2:
        return Mesh()
    c = vector(center)

    def vertex_at(i: int, j: int) -> Vertex:
        texcoord = Vector(i / slices, j / stacks)
        if j == 0:
            direction = Vector(0.0, 1.0, 0.0)
        elif j == stacks:
            direction = Vector(0.0, -1.0, 0.0)
        else:
            phi = math.pi * j / stacks
            theta = 2.0 * math.pi * (i % slices) / slices
            direction = Vector(math.sin(phi) * math.cos(theta), math.cos(phi),
                               -math.sin(phi) * math.sin(theta))
        return Vertex(c + direction * radius, direction, texcoord)

    polygons: List[Polygon] = []
    for i in range(slices):
        for j in range(stacks):
            loop = [vertex_at(i, j), vertex_at(i, j + 1),
                    vertex_at(i + 1, j + 1), vertex_at(i + 1, j)]
            polygons.extend(_face(loop, material))
    polygons = _apply_faces(polygons, faces, Faces.FRONT)
    return Mesh(polygons, is_convex=faces in (Faces.FRONT, Faces.DEFAULT))


def cylinder(radius: float = 0.5, height: float = 1.0, slices: int = 16,
             faces: Faces = Faces.DEFAULT, material=None) -> Mesh:
    """cylinder along the Y axis, centred on the origin"""
    if radius <= 0 or height <= 0:
        return Mesh()
    h = height / 2.0
    profile = Path([(0, h), (radius, h), (radius, -h), (0, -h)])
    result = lathe(profile, slices, faces=faces, material=material)
    return Mesh(result.polygons, is_convex=faces in (Faces.FRONT, Faces.DEFAULT))


def cone(radius: float = 0.5, height: float = 1.0, slices: int = 16,
         faces: Faces = Faces.DEFAULT, material=None) -> Mesh:
    """cone along the Y axis with its apex at ``+height / 2``"""
    if radius <= 0 or height <= 0:
        return Mesh()
    h = height / 2.0
    profile = Path([(0, h), (radius, -h), (0, -h)])
    result = lathe(profile, slices, faces=faces, material=material)
    return Mesh(result.polygons, is_convex=faces in (Faces.FRONT, Faces.DEFAULT))


# ----------------------------------------------------------------------
# path builders
# ----------------------------------------------------------------------

def fill(path: Path, faces: Faces = Faces.DEFAULT, material=None, detail: int = 0) -> Mesh:
    """Flat face(s) filling a closed planar path; nested subpaths are holes."""
    polygons = path.smoothed(detail).face_polygons(material)
    return Mesh(_apply_faces(polygons, faces, Faces.FRONT_AND_BACK))


def extrude(path: Path, depth: float = 1.0, faces: Faces = Faces.DEFAULT, material=None,
            detail: int = 0) -> Mesh:
    """Sweep ``path`` along its plane normal, centred on the path.

    A closed path gives a capped solid; an open one gives a
    two-sided ribbon.  Non-planar paths are swept along the Z axis
    without caps.
    """
    path = path.smoothed(detail)
    if len(path.points) < 2:
        return Mesh()
    normal = path.plane.normal if path.plane is not None else UNIT_Z
    offset = normal * (depth / 2.0)
    subpaths = path.subpaths
    loops = [s for s in subpaths if s.is_closed]
    depths = loop_depths(loops, normal) if loops else []

    polygons: List[Polygon] = []
    for sub in subpaths:
        points = [p.to_vertex() for p in sub.points]
        if sub.is_closed:
            is_hole = depths[loops.index(sub)] % 2 == 1
            ccw = face_normal([v.position for v in points]).dot(normal) > 0
            if ccw == is_hole:
                points.reverse()
        for a, b in zip(points, points[1:]):
            polygons.extend(_face([a.with_position(a.position - offset),
                                   b.with_position(b.position - offset),
                                   b.with_position(b.position + offset),
                                   a.with_position(a.position + offset)], material))

    closed = bool(loops) and len(loops) == len(subpaths) and path.plane is not None
    if closed:
        for cap in path.face_polygons(material):
            if cap.plane.normal.dot(normal) < 0:
                cap = cap.inverted()
            polygons.append(cap.translated(offset))
            polygons.append(cap.inverted().translated(-offset))
        polygons = _outward(polygons)
    default = Faces.FRONT if closed else Faces.FRONT_AND_BACK
    return Mesh(_apply_faces(polygons, faces, default))


def lathe(path: Path, slices: int = 16, faces: Faces = Faces.DEFAULT, material=None,
          detail: int = 0) -> Mesh:
    """Revolve a profile in the XY plane around the Y axis.

    Profile points on the axis collapse to single vertices, so a
    profile running from the axis back to the axis gives a closed
    solid.
    """
    if slices < 3:
        return Mesh()
    path = path.smoothed(detail)
    profile = path.positions
    if len(profile) < 2:
        return Mesh()
    count = len(profile)

    def vertex_at(i: int, k: int) -> Vertex:
        p = profile[k]
        texcoord = Vector(i / slices, k / (count - 1))
        if abs(p.x) < 1e-12:
            return Vertex(Vector(0.0, p.y, 0.0), ZERO, texcoord)
        theta = 2.0 * math.pi * (i % slices) / slices
        return Vertex(Vector(p.x * math.cos(theta), p.y, -p.x * math.sin(theta)),
                      ZERO, texcoord)

    def on_axis(p: Vector) -> bool:
        return abs(p.x) < 1e-12

    polygons: List[Polygon] = []
    for k in range(count - 1):
        a, b = profile[k], profile[k + 1]
        if on_axis(a) != on_axis(b) and abs(a.y - b.y) < 1e-12:
            # flat disc: one polygon instead of a fan
            if on_axis(a):
                ring = [vertex_at(i, k + 1) for i in range(slices)]
            else:
                ring = [vertex_at(i, k) for i in reversed(range(slices))]
            polygons.extend(_face(ring, material))
            continue
        for i in range(slices):
            loop = [vertex_at(i, k), vertex_at(i, k + 1),
                    vertex_at(i + 1, k + 1), vertex_at(i + 1, k)]
            polygons.extend(_face(loop, material))
    solid = path.is_closed or (abs(profile[0].x) < 1e-12 and abs(profile[-1].x) < 1e-12)
    if solid:
        polygons = _outward(polygons)
    default = Faces.FRONT if solid else Faces.FRONT_AND_BACK
    return Mesh(_apply_faces(polygons, faces, default))


def _bridge(lower: Sequence[Vertex], upper: Sequence[Vertex], material) -> List[Polygon]:
    """side faces joining two point sequences"""
    out: List[Polygon] = []
    n, m = len(lower), len(upper)
    if n == m:
        for i in range(n - 1):
            out.extend(_face([lower[i], lower[i + 1], upper[i + 1], upper[i]], material))
        return out
    i = j = 0
    while i < n - 1 or j < m - 1:
        advance_lower = j == m - 1 or (i < n - 1 and (i + 1) / (n - 1) <= (j + 1) / (m - 1))
        if advance_lower:
            out.extend(_face([lower[i], lower[i + 1], upper[j]], material))
            i += 1
        else:
            out.extend(_face([lower[i], upper[j + 1], upper[j]], material))
            j += 1
    return out


def loft(paths: Iterable[Path], faces: Faces = Faces.DEFAULT, material=None) -> Mesh:
    """Skin a sequence of cross-section paths.

    Successive sections are joined point to point; sections with
    different point counts are joined by triangles distributed along
    their lengths.  If every section is closed, the first and last
    are capped.
    """
    paths = [p for p in paths if len(p.points) >= 2]
    if not paths:
        return Mesh()
    if len(paths) == 1:
        return fill(paths[0], faces, material)
    sections = [[p.to_vertex() for p in path.points] for path in paths]
    polygons: List[Polygon] = []
    for lower, upper in zip(sections, sections[1:]):
        polygons.extend(_bridge(lower, upper, material))
    closed = all(p.is_closed for p in paths)
    if closed:
        first, last = paths[0], paths[-1]
        toward = centroid(paths[1].positions) - centroid(first.positions)
        for cap in first.face_polygons(material):
            polygons.append(cap.inverted() if cap.plane.normal.dot(toward) > 0 else cap)
        away = centroid(last.positions) - centroid(paths[-2].positions)
        for cap in last.face_polygons(material):
            polygons.append(cap if cap.plane.normal.dot(away) > 0 else cap.inverted())
        polygons = _outward(polygons)
    default = Faces.FRONT if closed else Faces.FRONT_AND_BACK
    return Mesh(_apply_faces(polygons, faces, default))


def _transport(x: Vector, a: Vector, b: Vector) -> Vector:
    """rotate ``x`` by the smallest rotation taking unit ``a`` onto unit ``b``"""
    k = a.cross(b)
    c = a.dot(b)
    if k.length < tolerance.epsilon:
        if c > 0:
            return x
        p = perpendicular(a)
        return p * (2.0 * x.dot(p)) - x
    return x * c + k.cross(x) + k * (k.dot(x) / (1.0 + c))


def stroke(path: Path, width: float = 0.01, detail: int = 4, material=None) -> Mesh:
    """Thicken a path into a tube of diameter ``width`` with a
    ``detail``-sided cross-section.

    Each straight run is a prism whose cross-section frame is carried
    along the path without twisting; runs meet in mitred rings shared
    by both neighbours.  A closed path whose frame comes back rotated
    spreads the difference evenly over its runs.
    """
    sides = max(detail, 3)
    points: List[Vector] = []
    for p in path.points:
        if not points or not points[-1].is_equal(p.position):
            points.append(p.position)
    closed = path.is_closed
    if closed and len(points) > 1 and points[0].is_equal(points[-1]):
        points.pop()
    count = len(points)
    if count < 2 or width <= 0:
        return Mesh()
    if closed and count < 3:
        closed = False
    radius = width / 2.0

    runs = count if closed else count - 1
    directions = [(points[(j + 1) % count] - points[j]).normalized() for j in range(runs)]
    frames = [perpendicular(directions[0])]
    for j in range(1, runs):
        frames.append(_transport(frames[-1], directions[j - 1], directions[j]).normalized())
    if closed:
        e0, u0 = directions[0], frames[0]
        back = _transport(frames[-1], directions[-1], e0)
        twist = math.atan2(u0.cross(back).dot(e0), u0.dot(back))
        for j in range(1, runs):
            e, u = directions[j], frames[j]
            a = -twist * j / runs
            frames[j] = u * math.cos(a) + e.cross(u) * math.sin(a)

    def ring_at(k: int, run: int) -> List[Vertex]:
        e, u = directions[run], frames[run]
        v = e.cross(u)
        if k == run and (closed or k > 0):
            mitre = (directions[k - 1] + e).normalized()
            if mitre == ZERO:
                mitre = e
        else:
            mitre = e
        ring = []
        for s in range(sides):
            a = 2.0 * math.pi * s / sides
            offset = (u * math.cos(a) + v * math.sin(a)) * radius
            # slide along the run until the mitre plane is reached
            along = -offset.dot(mitre) / e.dot(mitre)
            position = points[k] + offset + e * along
            ring.append(Vertex(position, (position - points[k]).normalized()))
        return ring

    rings = [ring_at(k, min(k, runs - 1)) for k in range(count)]

    polygons: List[Polygon] = []
    for j in range(runs):
        lower, upper = rings[j], rings[(j + 1) % count]
        polygons.extend(_bridge(lower + lower[:1], upper + upper[:1], material))
    if not closed:
        start = polygon([r.with_normal(ZERO) for r in rings[0]], material)
        end = polygon([r.with_normal(ZERO) for r in rings[-1]], material)
        if start is not None:
            polygons.append(start.inverted())
        if end is not None:
            polygons.append(end)
    return Mesh(_outward(polygons))


__all__ = ['Faces', 'cube', 'sphere', 'cylinder', 'cone', 'fill', 'extrude', 'lathe',
           'loft', 'stroke']
