## oriented planes for polyCSG
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

"""Oriented planes.

A :class:`Plane` is the set of points ``p`` with ``normal . p == w``;
its front side is the half-space the unit normal points into.  Side
tests use ``tolerance.plane_epsilon`` as the plane's half-thickness.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

from polycsg import tolerance
from polycsg.geom_util import face_normal, points_are_coplanar
from polycsg.line import Line
from polycsg.vector import ZERO, Vector, VectorLike, direction, perpendicular, vector


class PlaneComparison(enum.IntFlag):
    """Classification of a point or polygon against a plane.

    Values combine with ``|``: a polygon with vertices in front and
    behind compares as ``FRONT | BACK == SPANNING``.
    """
    COPLANAR = 0
    FRONT = 1
    BACK = 2
    SPANNING = 3


@dataclass(frozen=True, slots=True)
class Plane:
    normal: Vector
    w: float

    def __repr__(self) -> str:
        return f'Plane(normal={self.normal!r}, w={self.w!r})'

    @classmethod
    def through(cls, normal: VectorLike, point: VectorLike) -> 'Plane':
        """plane with the given normal passing through ``point``"""
        n = direction(normal)
        return cls(n, n.dot(vector(point)))

    def inverted(self) -> 'Plane':
        return Plane(-self.normal, -self.w)

    def distance(self, point: Vector) -> float:
        """signed distance of ``point`` from the plane"""
        return self.normal.dot(point) - self.w

    def compare(self, point: Vector) -> PlaneComparison:
        d = self.normal.dot(point) - self.w
        if d > tolerance.plane_epsilon:
            return PlaneComparison.FRONT
        if d < -tolerance.plane_epsilon:
            return PlaneComparison.BACK
        return PlaneComparison.COPLANAR

    def contains_point(self, point: Vector) -> bool:
        return abs(self.distance(point)) <= tolerance.plane_epsilon

    def project(self, point: Vector) -> Vector:
        """closest point on the plane"""
        return point - self.normal * self.distance(point)

    @property
    def origin(self) -> Vector:
        """the point on the plane nearest the world origin"""
        return self.normal * self.w

    def is_equal(self, other: 'Plane', tol: float | None = None) -> bool:
        if tol is None:
            tol = tolerance.plane_epsilon
        return (self.normal.is_equal(other.normal, tol) and
                abs(self.w - other.w) <= tol)

    def intersection_with_line(self, line: Line) -> Vector | None:
        """point where ``line`` pierces the plane, or None if parallel"""
        denom = self.normal.dot(line.direction)
        if abs(denom) < tolerance.epsilon:
            return None
        t = (self.w - self.normal.dot(line.origin)) / denom
        return line.origin + line.direction * t

    def intersection_with_plane(self, other: 'Plane') -> Line | None:
        """line shared by two planes, or None if they are parallel"""
        direction = self.normal.cross(other.normal)
        lsq = direction.length_squared
        if lsq < tolerance.epsilon:
            return None
        origin = (other.normal.cross(direction) * self.w +
                  direction.cross(self.normal) * other.w) / lsq
        return Line(origin, direction.normalized())

    def basis(self) -> tuple:
        """two orthonormal in-plane axes ``(u, v)`` with ``u x v == normal``"""
        u = perpendicular(self.normal)
        v = self.normal.cross(u)
        return u, v


def plane(normal: VectorLike, w: float) -> Plane | None:
    """A plane from a normal and offset, or None for a zero normal.

    The normal is normalized and ``w`` rescaled to match.
    """
    n = vector(normal)
    length = n.length
    if length < tolerance.epsilon:
        return None
    return Plane(n / length, float(w) / length)


def plane_from_points(points: Sequence[VectorLike]) -> Plane | None:
    """Best-fit plane of a loop of points, oriented by its winding.

    Returns None if the points are collinear, too few, or not coplanar
    within ``tolerance.plane_epsilon``.
    """
    pts = [vector(p) for p in points]
    if len(pts) < 3:
        return None
    normal = face_normal(pts)
    if normal == ZERO:
        return None
    if not points_are_coplanar(pts, normal):
        return None
    # average offset over all points for a best fit
    w = sum(normal.dot(p) for p in pts) / len(pts)
    return Plane(normal, w)


XY = Plane(Vector(0.0, 0.0, 1.0), 0.0)
XZ = Plane(Vector(0.0, 1.0, 0.0), 0.0)
YZ = Plane(Vector(1.0, 0.0, 0.0), 0.0)

__all__ = ['Plane', 'PlaneComparison', 'plane', 'plane_from_points', 'XY', 'XZ', 'YZ']
