"""Polygon vertices: position plus interpolated surface attributes."""

from __future__ import annotations

from dataclasses import dataclass, replace

from polycsg import tolerance
from polycsg.color import Color, color
from polycsg.vector import ZERO, Vector, vector


@dataclass(frozen=True, slots=True)
class Vertex:
    """A polygon corner.

    ``normal`` is the surface normal used for shading (zero means
    "use the face normal"), ``texcoord`` holds 2D or 3D texture
    coordinates and ``color`` is an optional per-vertex colour.
    Equality is structural over all four fields.
    """
    position: Vector
    normal: Vector = ZERO
    texcoord: Vector = ZERO
    color: Color | None = None

    def __repr__(self) -> str:
        parts = [repr(self.position)]
        if self.normal != ZERO:
            parts.append(f'normal={self.normal!r}')
        if self.texcoord != ZERO:
            parts.append(f'texcoord={self.texcoord!r}')
        if self.color is not None:
            parts.append(f'color={self.color!r}')
        return f"Vertex({', '.join(parts)})"

    def inverted(self) -> 'Vertex':
        return replace(self, normal=-self.normal)

    def with_position(self, position: Vector) -> 'Vertex':
        return replace(self, position=position)

    def with_normal(self, normal: Vector) -> 'Vertex':
        return replace(self, normal=normal)

    def with_texcoord(self, texcoord: Vector) -> 'Vertex':
        return replace(self, texcoord=texcoord)

    def with_color(self, c: Color | None) -> 'Vertex':
        return replace(self, color=c)

    def lerp(self, other: 'Vertex', t: float) -> 'Vertex':
        """interpolate every attribute; colours blend only if both exist"""
        if t == 0:
            return self
        if t == 1:
            return other
        if self.color is None and other.color is None:
            c = None
        else:
            c = (self.color or Color()).lerp(other.color or Color(), t)
        return Vertex(self.position.lerp(other.position, t),
                      self.normal.lerp(other.normal, t).normalized(),
                      self.texcoord.lerp(other.texcoord, t),
                      c)

    def is_equal(self, other: 'Vertex', tol: float | None = None) -> bool:
        if tol is None:
            tol = tolerance.epsilon
        if not self.position.is_equal(other.position, tol):
            return False
        if not self.normal.is_equal(other.normal, tol):
            return False
        if not self.texcoord.is_equal(other.texcoord, tol):
            return False
        if self.color is None or other.color is None:
            return self.color is other.color
        return self.color.is_equal(other.color, tol)

    def transformed(self, transform) -> 'Vertex':
        return Vertex(transform.apply(self.position),
                      transform.apply_to_normal(self.normal),
                      self.texcoord,
                      self.color)


def vertex(position, normal=None, texcoord=None, c=None) -> Vertex:
    """build a :class:`Vertex`, coercing vector-like arguments"""
    if isinstance(position, Vertex):
        return position
    return Vertex(vector(position),
                  ZERO if normal is None else vector(normal).normalized(),
                  ZERO if texcoord is None else vector(texcoord),
                  None if c is None else color(c))


__all__ = ['Vertex', 'vertex']
