## angles, rotations and affine transforms for polyCSG
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

"""Angles, rotations and transforms.

A :class:`Rotation` is an orthonormal 3x3 matrix stored row-major.
Vectors are treated as columns, so ``rotation.apply(v)`` computes
``M v`` and ``a * b`` is the rotation that applies ``b`` first and
then ``a``.

A :class:`Transform` applies, in order, a per-axis scale, a rotation
and a translation.  Transforms whose scale has an odd number of
negative components mirror geometry; polygon and mesh code reverses
vertex winding in that case so that normals still point outward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from polycsg import tolerance
from polycsg.vector import ONE, ZERO, Vector, VectorLike, direction, perpendicular, vector


@dataclass(frozen=True, slots=True)
class Angle:
    """an angle, stored in radians"""
    radians: float = 0.0

    @classmethod
    def from_degrees(cls, degrees: float) -> 'Angle':
        return cls(math.radians(degrees))

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    def __add__(self, other: 'Angle') -> 'Angle':
        return Angle(self.radians + other.radians)

    def __sub__(self, other: 'Angle') -> 'Angle':
        return Angle(self.radians - other.radians)

    def __neg__(self) -> 'Angle':
        return Angle(-self.radians)

    def __mul__(self, s: float) -> 'Angle':
        return Angle(self.radians * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> 'Angle':
        return Angle(self.radians / s)

    @property
    def sin(self) -> float:
        return math.sin(self.radians)

    @property
    def cos(self) -> float:
        return math.cos(self.radians)


def _as_radians(angle) -> float:
    if isinstance(angle, Angle):
        return angle.radians
    return float(angle)


_IDENTITY = (1.0, 0.0, 0.0,
             0.0, 1.0, 0.0,
             0.0, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Rotation:
    m: Tuple[float, ...] = _IDENTITY

    @classmethod
    def axis_angle(cls, axis: VectorLike, angle) -> 'Rotation | None':
        """Rotation of ``angle`` (an :class:`Angle` or radians) about
        ``axis``, or None for a zero-length axis."""
        u = vector(axis)
        if u.length < tolerance.epsilon:
            return None
        u = u.normalized()
        rad = _as_radians(angle)
        ux, uy, uz = u.x, u.y, u.z
        cang = math.cos(rad)
        cmin = 1.0 - cang
        sang = math.sin(rad)
        return cls((cang + ux * ux * cmin, ux * uy * cmin - uz * sang, ux * uz * cmin + uy * sang,
                    uy * ux * cmin + uz * sang, cang + uy * uy * cmin, uy * uz * cmin - ux * sang,
                    uz * ux * cmin - uy * sang, uz * uy * cmin + ux * sang, cang + uz * uz * cmin))

    @classmethod
    def roll(cls, angle) -> 'Rotation':
        """rotation about the Z axis"""
        return cls.axis_angle((0, 0, 1), angle)

    @classmethod
    def yaw(cls, angle) -> 'Rotation':
        """rotation about the Y axis"""
        return cls.axis_angle((0, 1, 0), angle)

    @classmethod
    def pitch(cls, angle) -> 'Rotation':
        """rotation about the X axis"""
        return cls.axis_angle((1, 0, 0), angle)

    @classmethod
    def between(cls, a: VectorLike, b: VectorLike) -> 'Rotation':
        """shortest rotation taking direction ``a`` onto direction ``b``"""
        a = direction(a)
        b = direction(b)
        axis = a.cross(b)
        c = max(-1.0, min(1.0, a.dot(b)))
        if axis.length < tolerance.epsilon:
            if c > 0:
                return IDENTITY
            return cls.axis_angle(perpendicular(a), math.pi)
        return cls.axis_angle(axis, math.acos(c))

    def apply(self, v: Vector) -> Vector:
        m = self.m
        return Vector(m[0] * v.x + m[1] * v.y + m[2] * v.z,
                      m[3] * v.x + m[4] * v.y + m[5] * v.z,
                      m[6] * v.x + m[7] * v.y + m[8] * v.z)

    def __mul__(self, other: 'Rotation') -> 'Rotation':
        a, b = self.m, other.m
        out = []
        for i in range(3):
            for j in range(3):
                out.append(a[i * 3] * b[j] + a[i * 3 + 1] * b[3 + j] + a[i * 3 + 2] * b[6 + j])
        return Rotation(tuple(out))

    def inverted(self) -> 'Rotation':
        m = self.m
        return Rotation((m[0], m[3], m[6],
                         m[1], m[4], m[7],
                         m[2], m[5], m[8]))

    @property
    def is_identity(self) -> bool:
        return all(abs(p - q) < tolerance.epsilon for p, q in zip(self.m, _IDENTITY))


IDENTITY = Rotation()


@dataclass(frozen=True, slots=True)
class Transform:
    offset: Vector = ZERO
    rotation: Rotation = field(default=IDENTITY)
    scale: Vector = ONE

    @classmethod
    def translation(cls, offset: VectorLike) -> 'Transform':
        return cls(offset=vector(offset))

    @classmethod
    def rotating(cls, rotation: Rotation) -> 'Transform':
        return cls(rotation=rotation)

    @classmethod
    def scaling(cls, scale) -> 'Transform':
        return cls(scale=vector(scale))

    @property
    def is_flipping(self) -> bool:
        """True if the transform mirrors geometry"""
        s = self.scale
        return (s.x < 0) ^ (s.y < 0) ^ (s.z < 0)

    def apply(self, point: Vector) -> Vector:
        return self.rotation.apply(point.scaled(self.scale)) + self.offset

    def apply_to_normal(self, normal: Vector) -> Vector:
        """transform a surface normal; the result is re-normalized"""
        s = self.scale
        if s.x == 0 or s.y == 0 or s.z == 0:
            return ZERO
        scaled = Vector(normal.x / s.x, normal.y / s.y, normal.z / s.z)
        return self.rotation.apply(scaled).normalized()


__all__ = ['Angle', 'Rotation', 'Transform', 'IDENTITY']
