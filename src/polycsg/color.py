"""RGBA colour values.

Colours appear both as optional per-vertex attributes and as the most
common kind of polygon material.  Combining contributions from two
operands (Minkowski sums, hulls of coloured inputs) multiplies colours
channel by channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class Color:
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0

    def __mul__(self, other: 'Color') -> 'Color':
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g,
                         self.b * other.b, self.a * other.a)
        s = float(other)
        return Color(self.r * s, self.g * s, self.b * s, self.a * s)

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b
        yield self.a

    def lerp(self, other: 'Color', t: float) -> 'Color':
        if t == 0:
            return self
        if t == 1:
            return other
        return Color(self.r + (other.r - self.r) * t,
                     self.g + (other.g - self.g) * t,
                     self.b + (other.b - self.b) * t,
                     self.a + (other.a - self.a) * t)

    def is_equal(self, other: 'Color', tol: float = 1e-8) -> bool:
        return all(abs(p - q) <= tol for p, q in zip(self, other))

    def components(self, count: int = 4) -> list:
        return [self.r, self.g, self.b, self.a][:count]


def color(value) -> Color:
    """coerce a Color or a sequence of 1, 3 or 4 floats to a Color"""
    if isinstance(value, Color):
        return value
    if isinstance(value, (int, float)):
        v = float(value)
        return Color(v, v, v, 1.0)
    values: Sequence[float] = [float(c) for c in value]
    if len(values) == 3:
        return Color(values[0], values[1], values[2], 1.0)
    if len(values) == 4:
        return Color(*values)
    raise ValueError(f'bad argument to color(): {value!r}')


def blend(a, b):
    """Multiplicatively combine two optional colours or materials.

    Colours multiply.  ``None`` yields the other value.  Any other pair
    of materials is left alone and the first one wins.
    """
    if a is None:
        return b
    if b is None:
        return a
    if isinstance(a, Color) and isinstance(b, Color):
        return a * b
    return a


WHITE = Color(1.0, 1.0, 1.0)
BLACK = Color(0.0, 0.0, 0.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
CLEAR = Color(0.0, 0.0, 0.0, 0.0)

__all__ = ['Color', 'color', 'blend', 'WHITE', 'BLACK', 'RED', 'GREEN', 'BLUE', 'CLEAR']
