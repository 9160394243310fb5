## three-component vector type for polyCSG
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

"""Immutable 3D vectors.

A :class:`Vector` is used for points, directions, offsets and texture
coordinates alike.  Directions are not a separate type: routines that
take a direction from the caller pass it through :func:`direction`,
which rejects zero-length input and returns a unit vector.

Coordinates may be supplied with two or three components; ``z``
defaults to zero, which lets 2D paths and texture coordinates share
the type.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from polycsg import tolerance


@dataclass(frozen=True, slots=True)
class Vector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z)[i]

    def __repr__(self) -> str:
        return f'Vector({self.x!r}, {self.y!r}, {self.z!r})'

    def __add__(self, other: 'Vector') -> 'Vector':
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Vector') -> 'Vector':
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> 'Vector':
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, s: float) -> 'Vector':
        return Vector(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> 'Vector':
        return Vector(self.x / s, self.y / s, self.z / s)

    def scaled(self, other: 'Vector') -> 'Vector':
        """component-wise product"""
        return Vector(self.x * other.x, self.y * other.y, self.z * other.z)

    def dot(self, other: 'Vector') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector') -> 'Vector':
        return Vector(self.y * other.z - self.z * other.y,
                      self.z * other.x - self.x * other.z,
                      self.x * other.y - self.y * other.x)

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def length(self) -> float:
        return math.sqrt(self.length_squared)

    @property
    def is_normalized(self) -> bool:
        return abs(self.length_squared - 1.0) < tolerance.epsilon

    def normalized(self) -> 'Vector':
        """unit vector in the same direction, or the zero vector"""
        length = self.length
        if length == 0.0:
            return ZERO
        if abs(length - 1.0) < 1e-15:
            return self
        return Vector(self.x / length, self.y / length, self.z / length)

    def distance(self, other: 'Vector') -> float:
        return (self - other).length

    def lerp(self, other: 'Vector', t: float) -> 'Vector':
        """linear interpolation; exact at ``t == 0`` and ``t == 1``"""
        if t == 0:
            return self
        if t == 1:
            return other
        return Vector(self.x + (other.x - self.x) * t,
                      self.y + (other.y - self.y) * t,
                      self.z + (other.z - self.z) * t)

    def angle_with(self, other: 'Vector') -> float:
        """unsigned angle in radians between two vectors"""
        denom = self.length * other.length
        if denom == 0.0:
            return 0.0
        c = max(-1.0, min(1.0, self.dot(other) / denom))
        return math.acos(c)

    def project_onto(self, other: 'Vector') -> 'Vector':
        denom = other.length_squared
        if denom == 0.0:
            return ZERO
        return other * (self.dot(other) / denom)

    def is_equal(self, other: 'Vector', tol: float | None = None) -> bool:
        """approximate equality with a per-component tolerance"""
        if tol is None:
            tol = tolerance.epsilon
        return (abs(self.x - other.x) <= tol and
                abs(self.y - other.y) <= tol and
                abs(self.z - other.z) <= tol)

    def quantized(self, precision: float | None = None) -> 'Vector':
        """snap each component to the nearest multiple of ``precision``"""
        if precision is None:
            precision = tolerance.weld_precision
        return Vector(round(self.x / precision) * precision,
                      round(self.y / precision) * precision,
                      round(self.z / precision) * precision)

    @property
    def xy(self) -> 'Vector':
        return Vector(self.x, self.y, 0.0)

    def components(self, count: int = 3) -> list:
        """list of the first ``count`` components (2 or 3)"""
        return [self.x, self.y, self.z][:count]


VectorLike = Union[Vector, Sequence[float]]

ZERO = Vector(0.0, 0.0, 0.0)
ONE = Vector(1.0, 1.0, 1.0)
UNIT_X = Vector(1.0, 0.0, 0.0)
UNIT_Y = Vector(0.0, 1.0, 0.0)
UNIT_Z = Vector(0.0, 0.0, 1.0)


def vector(*args) -> Vector:
    """Coerce the argument(s) to a :class:`Vector`.

    Accepts an existing Vector, a sequence of 1-3 numbers, a single
    number (replicated to all axes) or two or three numbers::

        vector(1, 2)        -> Vector(1, 2, 0)
        vector([1, 2, 3])   -> Vector(1, 2, 3)
        vector(2.0)         -> Vector(2, 2, 2)
    """
    if len(args) == 1:
        a = args[0]
        if isinstance(a, Vector):
            return a
        if isinstance(a, (int, float)):
            f = float(a)
            return Vector(f, f, f)
        args = tuple(a)
    if not 1 <= len(args) <= 3:
        raise ValueError(f'bad argument to vector(): {args!r}')
    values = [float(v) for v in args] + [0.0] * (3 - len(args))
    return Vector(*values)


def direction(*args) -> Vector:
    """Coerce the argument(s) like :func:`vector` and scale to unit length.

    Raises ``ValueError`` for a zero-length direction.
    """
    v = vector(*args)
    if v.length < tolerance.epsilon:
        raise ValueError(f'zero-length direction: {v!r}')
    return v.normalized()


def min_vector(a: Vector, b: Vector) -> Vector:
    return Vector(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))


def max_vector(a: Vector, b: Vector) -> Vector:
    return Vector(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))


def centroid(points: Iterable[Vector]) -> Vector:
    """average of a non-empty collection of points"""
    sx = sy = sz = 0.0
    n = 0
    for p in points:
        sx += p.x
        sy += p.y
        sz += p.z
        n += 1
    if n == 0:
        raise ValueError('centroid of an empty point collection')
    return Vector(sx / n, sy / n, sz / n)


def perpendicular(v: Vector) -> Vector:
    """some unit vector perpendicular to ``v``"""
    ax, ay, az = abs(v.x), abs(v.y), abs(v.z)
    if ax <= ay and ax <= az:
        other = UNIT_X
    elif ay <= az:
        other = UNIT_Y
    else:
        other = UNIT_Z
    return v.cross(other).normalized()


__all__ = [
    'Vector',
    'VectorLike',
    'vector',
    'direction',
    'ZERO',
    'ONE',
    'UNIT_X',
    'UNIT_Y',
    'UNIT_Z',
    'min_vector',
    'max_vector',
    'centroid',
    'perpendicular',
]
