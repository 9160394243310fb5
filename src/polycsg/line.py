"""Infinite lines and finite line segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from polycsg import tolerance
from polycsg.vector import Vector, VectorLike, vector


@dataclass(frozen=True, slots=True)
class Line:
    """an infinite line; ``direction`` is unit length"""
    origin: Vector
    direction: Vector

    @classmethod
    def through(cls, a: VectorLike, b: VectorLike) -> 'Line | None':
        a, b = vector(a), vector(b)
        d = b - a
        if d.length < tolerance.epsilon:
            return None
        return cls(a, d.normalized())

    def project(self, point: Vector) -> Vector:
        """closest point on the line"""
        return self.origin + self.direction * self.direction.dot(point - self.origin)

    def distance(self, point: Vector) -> float:
        return (point - self.project(point)).length

    def contains_point(self, point: Vector) -> bool:
        return self.distance(point) <= tolerance.epsilon

    def shortest_line_to(self, other: 'Line') -> Tuple[Vector, Vector] | None:
        """closest pair of points between two lines, None if parallel"""
        p1, d1 = self.origin, self.direction
        p2, d2 = other.origin, other.direction
        r = p1 - p2
        b = d1.dot(d2)
        denom = 1.0 - b * b
        if abs(denom) < tolerance.epsilon:
            return None
        c = d1.dot(r)
        f = d2.dot(r)
        s = (b * f - c) / denom
        t = (f - b * c) / denom
        return p1 + d1 * s, p2 + d2 * t

    def intersection(self, other: 'Line') -> Vector | None:
        pair = self.shortest_line_to(other)
        if pair is None:
            return None
        a, b = pair
        if not a.is_equal(b):
            return None
        return a


@dataclass(frozen=True, slots=True)
class LineSegment:
    """an ordered pair of distinct end points"""
    start: Vector
    end: Vector

    @property
    def vector(self) -> Vector:
        return self.end - self.start

    @property
    def length(self) -> float:
        return (self.end - self.start).length

    @property
    def direction(self) -> Vector:
        return (self.end - self.start).normalized()

    @property
    def line(self) -> Line:
        return Line(self.start, self.direction)

    def inverted(self) -> 'LineSegment':
        return LineSegment(self.end, self.start)

    def undirected(self) -> 'LineSegment':
        """the same segment with its end points in a canonical order"""
        if (self.end.x, self.end.y, self.end.z) < (self.start.x, self.start.y, self.start.z):
            return LineSegment(self.end, self.start)
        return self

    def closest_point(self, point: Vector) -> Vector:
        d = self.end - self.start
        lsq = d.length_squared
        if lsq == 0.0:
            return self.start
        t = max(0.0, min(1.0, d.dot(point - self.start) / lsq))
        return self.start + d * t

    def distance(self, point: Vector) -> float:
        return (point - self.closest_point(point)).length

    def contains_point(self, point: Vector, tol: float | None = None) -> bool:
        """True if ``point`` lies on the segment, end points included"""
        if tol is None:
            tol = tolerance.epsilon
        return self.distance(point) <= tol

    def interior_contains_point(self, point: Vector, tol: float | None = None) -> bool:
        """True if ``point`` lies on the segment but is not an end point"""
        if tol is None:
            tol = tolerance.epsilon
        if point.is_equal(self.start, tol) or point.is_equal(self.end, tol):
            return False
        return self.distance(point) <= tol

    def intersection(self, other: 'LineSegment') -> Vector | None:
        """point shared by two segments, or None"""
        pair = self.line.shortest_line_to(other.line)
        if pair is None:
            for p in (other.start, other.end):
                if self.contains_point(p):
                    return p
            for p in (self.start, self.end):
                if other.contains_point(p):
                    return p
            return None
        a, b = pair
        if not a.is_equal(b) or not self.contains_point(a) or not other.contains_point(b):
            return None
        return a

    def intersects(self, other: 'LineSegment') -> bool:
        return self.intersection(other) is not None

    def split(self, plane) -> Tuple['LineSegment | None', 'LineSegment | None']:
        """``(front, back)`` parts of the segment relative to ``plane``"""
        ds = plane.distance(self.start)
        de = plane.distance(self.end)
        eps = tolerance.plane_epsilon
        if ds >= -eps and de >= -eps:
            return self, None
        if ds <= eps and de <= eps:
            return None, self
        t = ds / (ds - de)
        mid = self.start.lerp(self.end, t)
        if ds > 0:
            return LineSegment(self.start, mid), LineSegment(mid, self.end)
        return LineSegment(mid, self.end), LineSegment(self.start, mid)

    def transformed(self, transform) -> 'LineSegment':
        return LineSegment(transform.apply(self.start), transform.apply(self.end))


def line_segment(start: VectorLike, end: VectorLike) -> LineSegment | None:
    """segment between two points, or None if they coincide"""
    a, b = vector(start), vector(end)
    if a.is_equal(b):
        return None
    return LineSegment(a, b)


__all__ = ['Line', 'LineSegment', 'line_segment']
