"""Axis-aligned bounding boxes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

from polycsg import tolerance
from polycsg.plane import Plane, PlaneComparison
from polycsg.vector import Vector, max_vector, min_vector, vector

_INF = math.inf


@dataclass(frozen=True, slots=True)
class Bounds:
    min: Vector
    max: Vector

    @classmethod
    def from_points(cls, points: Iterable[Vector]) -> 'Bounds':
        lo = Vector(_INF, _INF, _INF)
        hi = Vector(-_INF, -_INF, -_INF)
        for p in points:
            lo = min_vector(lo, p)
            hi = max_vector(hi, p)
        return cls(lo, hi)

    @classmethod
    def of(cls, *items) -> 'Bounds':
        """union of the ``bounds`` of every item"""
        result = EMPTY
        for item in items:
            result = result.union(item.bounds)
        return result

    @property
    def is_empty(self) -> bool:
        return (self.max.x < self.min.x or self.max.y < self.min.y or
                self.max.z < self.min.z)

    @property
    def size(self) -> Vector:
        if self.is_empty:
            return Vector()
        return self.max - self.min

    @property
    def center(self) -> Vector:
        if self.is_empty:
            return Vector()
        return (self.min + self.max) / 2.0

    @property
    def corners(self) -> List[Vector]:
        lo, hi = self.min, self.max
        return [Vector(lo.x, lo.y, lo.z), Vector(hi.x, lo.y, lo.z),
                Vector(hi.x, hi.y, lo.z), Vector(lo.x, hi.y, lo.z),
                Vector(lo.x, lo.y, hi.z), Vector(hi.x, lo.y, hi.z),
                Vector(hi.x, hi.y, hi.z), Vector(lo.x, hi.y, hi.z)]

    def union(self, other: 'Bounds') -> 'Bounds':
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return Bounds(min_vector(self.min, other.min), max_vector(self.max, other.max))

    def intersection(self, other: 'Bounds') -> 'Bounds':
        result = Bounds(max_vector(self.min, other.min), min_vector(self.max, other.max))
        return EMPTY if result.is_empty else result

    def intersects(self, other: 'Bounds') -> bool:
        """True if the boxes overlap or touch (within epsilon)"""
        if self.is_empty or other.is_empty:
            return False
        eps = tolerance.epsilon
        return not (other.max.x + eps < self.min.x or other.min.x > self.max.x + eps or
                    other.max.y + eps < self.min.y or other.min.y > self.max.y + eps or
                    other.max.z + eps < self.min.z or other.min.z > self.max.z + eps)

    def contains_point(self, p: Vector, tol: float | None = None) -> bool:
        if self.is_empty:
            return False
        eps = tolerance.epsilon if tol is None else tol
        return (self.min.x - eps <= p.x <= self.max.x + eps and
                self.min.y - eps <= p.y <= self.max.y + eps and
                self.min.z - eps <= p.z <= self.max.z + eps)

    def contains(self, other: 'Bounds', tol: float | None = None) -> bool:
        if other.is_empty:
            return True
        return self.contains_point(other.min, tol) and self.contains_point(other.max, tol)

    def inset(self, amount) -> 'Bounds':
        """shrink by ``amount`` on every side (grow if negative)"""
        if self.is_empty:
            return self
        d = vector(amount)
        return Bounds(self.min + d, self.max - d)

    def is_equal(self, other: 'Bounds', tol: float | None = None) -> bool:
        if self.is_empty or other.is_empty:
            return self.is_empty and other.is_empty
        return self.min.is_equal(other.min, tol) and self.max.is_equal(other.max, tol)

    def compare(self, plane: Plane) -> PlaneComparison:
        result = PlaneComparison.COPLANAR
        for corner in self.corners:
            result |= plane.compare(corner)
            if result == PlaneComparison.SPANNING:
                break
        return result

    def transformed(self, transform) -> 'Bounds':
        if self.is_empty:
            return self
        return Bounds.from_points(transform.apply(c) for c in self.corners)


EMPTY = Bounds(Vector(_INF, _INF, _INF), Vector(-_INF, -_INF, -_INF))

__all__ = ['Bounds', 'EMPTY']
