## point-loop predicates for polyCSG
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

"""Predicates and measurements over loops of points.

These functions operate on plain sequences of :class:`Vector` and are
shared by polygon validation, triangulation, path handling and the
convex hull.  Loops are implicitly closed: the last point connects
back to the first.

Several tests work in two dimensions by dropping the dominant axis of
the loop normal (see :func:`projector`).  The projection preserves
winding, so a loop that is counter-clockwise about its normal is
counter-clockwise in the flattened coordinates too.
"""

from __future__ import annotations

import math
from typing import Callable, List, Sequence, Tuple

import mpmath as mpm

from polycsg import tolerance
from polycsg.vector import ZERO, Vector

Point2D = Tuple[float, float]

# extra working precision for orientation tests that floats cannot decide
_EXACT_DPS = 60


def face_normal(points: Sequence[Vector]) -> Vector:
    """Newell best-fit normal of a loop, or the zero vector.

    The normal follows the right-hand rule with respect to the loop
    winding and is insensitive to small amounts of collinear noise.
    """
    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        a = points[i]
        b = points[(i + 1) % count]
        nx += (a.y - b.y) * (a.z + b.z)
        ny += (a.z - b.z) * (a.x + b.x)
        nz += (a.x - b.x) * (a.y + b.y)
    n = Vector(nx, ny, nz)
    if n.length < tolerance.epsilon * tolerance.epsilon:
        return ZERO
    return n.normalized()


def projector(normal: Vector) -> Callable[[Vector], Point2D]:
    """Return a function mapping 3D points to 2D by dropping the
    dominant component of ``normal`` while preserving winding."""
    ax, ay, az = abs(normal.x), abs(normal.y), abs(normal.z)
    if az >= ax and az >= ay:
        if normal.z >= 0:
            return lambda p: (p.x, p.y)
        return lambda p: (p.y, p.x)
    if ax >= ay:
        if normal.x >= 0:
            return lambda p: (p.y, p.z)
        return lambda p: (p.z, p.y)
    if normal.y >= 0:
        return lambda p: (p.z, p.x)
    return lambda p: (p.x, p.z)


def flatten(points: Sequence[Vector], normal: Vector | None = None) -> List[Point2D]:
    if normal is None:
        normal = face_normal(points)
    project = projector(normal)
    return [project(p) for p in points]


def signed_area_2d(loop: Sequence[Point2D]) -> float:
    total = 0.0
    count = len(loop)
    for i in range(count):
        x0, y0 = loop[i]
        x1, y1 = loop[(i + 1) % count]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def flattened_points_are_clockwise(loop: Sequence[Point2D]) -> bool:
    return signed_area_2d(loop) < 0


def cross_2d(o: Point2D, a: Point2D, b: Point2D) -> float:
    """z component of (a - o) x (b - o)"""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def point_in_triangle_2d(p: Point2D, a: Point2D, b: Point2D, c: Point2D,
                         tol: float | None = None) -> bool:
    """True if ``p`` is inside or on the boundary of CCW triangle abc"""
    if tol is None:
        tol = tolerance.epsilon
    return (cross_2d(a, b, p) >= -tol and
            cross_2d(b, c, p) >= -tol and
            cross_2d(c, a, p) >= -tol)


def point_in_loop_2d(p: Point2D, loop: Sequence[Point2D]) -> bool:
    """even-odd containment test; boundary points are unspecified"""
    x, y = p
    inside = False
    count = len(loop)
    j = count - 1
    for i in range(count):
        xi, yi = loop[i]
        xj, yj = loop[j]
        if (yi > y) != (yj > y):
            xcross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < xcross:
                inside = not inside
        j = i
    return inside


def point_on_segment_2d(p: Point2D, a: Point2D, b: Point2D,
                        tol: float | None = None) -> bool:
    if tol is None:
        tol = tolerance.epsilon
    if abs(cross_2d(a, b, p)) > tol * max(1.0, abs(b[0] - a[0]) + abs(b[1] - a[1])):
        return False
    return (min(a[0], b[0]) - tol <= p[0] <= max(a[0], b[0]) + tol and
            min(a[1], b[1]) - tol <= p[1] <= max(a[1], b[1]) + tol)


def segments_intersect_2d(a0: Point2D, a1: Point2D, b0: Point2D, b1: Point2D,
                          tol: float | None = None) -> bool:
    """True if two segments cross or touch"""
    if tol is None:
        tol = tolerance.epsilon
    d1 = cross_2d(b0, b1, a0)
    d2 = cross_2d(b0, b1, a1)
    d3 = cross_2d(a0, a1, b0)
    d4 = cross_2d(a0, a1, b1)
    if ((d1 > tol and d2 < -tol) or (d1 < -tol and d2 > tol)) and \
       ((d3 > tol and d4 < -tol) or (d3 < -tol and d4 > tol)):
        return True
    return (point_on_segment_2d(a0, b0, b1, tol) or
            point_on_segment_2d(a1, b0, b1, tol) or
            point_on_segment_2d(b0, a0, a1, tol) or
            point_on_segment_2d(b1, a0, a1, tol))


def points_are_collinear(points: Sequence[Vector]) -> bool:
    """True if every point lies on the line through the first two
    distinct points (or if there are fewer than two distinct points)"""
    if len(points) < 3:
        return True
    a = points[0]
    direction = None
    for p in points[1:]:
        d = p - a
        if d.length > tolerance.epsilon:
            direction = d.normalized()
            break
    if direction is None:
        return True
    for p in points:
        offset = p - a
        if offset.cross(direction).length > tolerance.epsilon:
            return False
    return True


def points_are_degenerate(points: Sequence[Vector]) -> bool:
    """True if a loop has fewer than three points, a zero-length edge,
    or no area at all"""
    count = len(points)
    if count < 3:
        return True
    for i in range(count):
        if points[i].is_equal(points[(i + 1) % count]):
            return True
    return points_are_collinear(points)


def points_are_coplanar(points: Sequence[Vector], normal: Vector | None = None) -> bool:
    if len(points) < 4:
        return True
    if normal is None:
        normal = face_normal(points)
    if normal == ZERO:
        return True
    origin = points[0]
    for p in points[1:]:
        if abs(normal.dot(p - origin)) > tolerance.plane_epsilon:
            return False
    return True


def points_are_convex(points: Sequence[Vector], normal: Vector | None = None) -> bool:
    """True if every corner of the loop turns the same way as
    ``normal`` (collinear corners are allowed)"""
    count = len(points)
    if count < 3:
        return False
    if count == 3:
        return True
    if normal is None:
        normal = face_normal(points)
    if normal == ZERO:
        return False
    loop = flatten(points, normal)
    turning = 0.0
    for i in range(count):
        c = cross_2d(loop[i - 1], loop[i], loop[(i + 1) % count])
        if c < -tolerance.epsilon:
            return False
        turning += c
    # a star-shaped loop winding twice also has only left turns
    total_angle = 0.0
    for i in range(count):
        ax = loop[i][0] - loop[i - 1][0]
        ay = loop[i][1] - loop[i - 1][1]
        bx = loop[(i + 1) % count][0] - loop[i][0]
        by = loop[(i + 1) % count][1] - loop[i][1]
        total_angle += math.atan2(ax * by - ay * bx, ax * bx + ay * by)
    return turning > 0 and total_angle < 2.0 * math.pi + 1e-6


def points_are_self_intersecting(points: Sequence[Vector], normal: Vector | None = None) -> bool:
    """True if any two non-adjacent edges of the flattened loop touch"""
    count = len(points)
    if count < 4:
        return False
    loop = flatten(points, normal)
    for i in range(count):
        a0, a1 = loop[i], loop[(i + 1) % count]
        for j in range(i + 2, count):
            if i == 0 and j == count - 1:
                continue
            b0, b1 = loop[j], loop[(j + 1) % count]
            if segments_intersect_2d(a0, a1, b0, b1):
                return True
    return False


def orient3d(a: Vector, b: Vector, c: Vector, d: Vector) -> float:
    """Signed volume test: positive if ``d`` lies on the side of plane
    abc that the right-hand normal of triangle abc points toward.

    Results the float computation cannot resolve are recomputed with
    extended precision, so the sign is reliable for nearly coplanar
    input.
    """
    adx, ady, adz = b.x - a.x, b.y - a.y, b.z - a.z
    bdx, bdy, bdz = c.x - a.x, c.y - a.y, c.z - a.z
    cdx, cdy, cdz = d.x - a.x, d.y - a.y, d.z - a.z
    det = (adx * (bdy * cdz - bdz * cdy) +
           ady * (bdz * cdx - bdx * cdz) +
           adz * (bdx * cdy - bdy * cdx))
    permanent = (abs(adx) * (abs(bdy * cdz) + abs(bdz * cdy)) +
                 abs(ady) * (abs(bdz * cdx) + abs(bdx * cdz)) +
                 abs(adz) * (abs(bdx * cdy) + abs(bdy * cdx)))
    if abs(det) > 1e-14 * permanent:
        return det
    with mpm.workdps(_EXACT_DPS):
        ax, ay, az = mpm.mpf(a.x), mpm.mpf(a.y), mpm.mpf(a.z)
        u = [mpm.mpf(b.x) - ax, mpm.mpf(b.y) - ay, mpm.mpf(b.z) - az]
        v = [mpm.mpf(c.x) - ax, mpm.mpf(c.y) - ay, mpm.mpf(c.z) - az]
        w = [mpm.mpf(d.x) - ax, mpm.mpf(d.y) - ay, mpm.mpf(d.z) - az]
        exact = (u[0] * (v[1] * w[2] - v[2] * w[1]) +
                 u[1] * (v[2] * w[0] - v[0] * w[2]) +
                 u[2] * (v[0] * w[1] - v[1] * w[0]))
        return float(exact)


def loop_area(points: Sequence[Vector]) -> float:
    """area enclosed by a planar loop"""
    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        c = points[i].cross(points[(i + 1) % count])
        nx += c.x
        ny += c.y
        nz += c.z
    return Vector(nx, ny, nz).length / 2.0


__all__ = [
    'face_normal',
    'projector',
    'flatten',
    'signed_area_2d',
    'flattened_points_are_clockwise',
    'cross_2d',
    'point_in_triangle_2d',
    'point_in_loop_2d',
    'point_on_segment_2d',
    'segments_intersect_2d',
    'points_are_collinear',
    'points_are_degenerate',
    'points_are_coplanar',
    'points_are_convex',
    'points_are_self_intersecting',
    'orient3d',
    'loop_area',
]
