"""Tolerance-based welding of near-duplicate vertices.

A :class:`VertexSet` hashes positions onto a grid whose cell size is
the welding precision.  Each entry is stored in the cell containing
it; a lookup scans the 27 cells around the query point, which is
enough to find every stored position within ``precision`` of it.
When several stored entries match, the earliest inserted one wins, so
welding is deterministic for a given insertion order.
"""

from __future__ import annotations

import math
from typing import Dict, List, Tuple

from polycsg import tolerance
from polycsg.vector import Vector
from polycsg.vertex import Vertex

_Key = Tuple[int, int, int]


class VertexSet:
    def __init__(self, precision: float | None = None):
        if precision is None:
            precision = tolerance.weld_precision
        if not precision > 0:
            raise ValueError(f'VertexSet precision must be positive, got {precision!r}')
        self.precision = precision
        self._cells: Dict[_Key, List[Tuple[int, Vertex]]] = {}
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def _key(self, p: Vector) -> _Key:
        s = self.precision
        return (math.floor(p.x / s), math.floor(p.y / s), math.floor(p.z / s))

    def _matches(self, p: Vector):
        kx, ky, kz = self._key(p)
        found = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dz in (-1, 0, 1):
                    entries = self._cells.get((kx + dx, ky + dy, kz + dz))
                    if entries:
                        found.extend(e for e in entries
                                     if e[1].position.is_equal(p, self.precision))
        found.sort(key=lambda e: e[0])
        return [v for _, v in found]

    def _store(self, v: Vertex) -> None:
        self._cells.setdefault(self._key(v.position), []).append((self._count, v))
        self._count += 1

    def find(self, position: Vector) -> Vertex | None:
        """earliest stored vertex within ``precision`` of ``position``"""
        matches = self._matches(position)
        return matches[0] if matches else None

    def insert(self, v: Vertex) -> Vertex:
        """Insert ``v`` and return its welded form.

        If a stored vertex matches in every attribute it is returned
        unchanged.  If only the position matches, ``v`` is snapped to
        the stored position (and to the stored normal, texcoord or
        colour where those are also close), stored, and returned.
        Otherwise ``v`` is stored as-is.
        """
        matches = self._matches(v.position)
        if not matches:
            self._store(v)
            return v
        for m in matches:
            if m.is_equal(v, self.precision):
                return m
        first = matches[0]
        normal = first.normal if first.normal.is_equal(v.normal, self.precision) else v.normal
        texcoord = (first.texcoord if first.texcoord.is_equal(v.texcoord, self.precision)
                    else v.texcoord)
        c = v.color
        if c is not None and first.color is not None and first.color.is_equal(c, self.precision):
            c = first.color
        welded = Vertex(first.position, normal, texcoord, c)
        self._store(welded)
        return welded

    def insert_position(self, position: Vector) -> Vector:
        """weld a bare position, returning the canonical position"""
        existing = self.find(position)
        if existing is not None:
            return existing.position
        self._store(Vertex(position))
        return position


__all__ = ['VertexSet']
