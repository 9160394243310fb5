## binary space partitioning for polyCSG
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

"""Binary space partition trees over polygon sets.

Each :class:`BSPNode` holds a splitting plane, the polygons lying in
that plane and facing the same way, and optional front and back
children.  A missing front child is "outside" the solid and a missing
back child is "inside", so a BSP built from a closed mesh answers
inside/outside questions for arbitrary points and polygons.

:meth:`BSP.clip` is the single primitive from which every boolean
operation is built.  It walks polygons down the tree and keeps the
fragments selected by a :class:`ClipRule`.  The rule also decides
where polygons coplanar with a node go:

==================  =====================  ===========================
rule                keeps                  coplanar, same facing
==================  =====================  ===========================
GREATER_THAN        outside                treated as inside
GREATER_THAN_EQUAL  outside                treated as outside
LESS_THAN           inside                 treated as outside
LESS_THAN_EQUAL     inside                 treated as inside
==================  =====================  ===========================

Coplanar polygons facing the other way are always tested against the
node's own polygons: the regions they overlap count as inside.

Build and clip loop over the larger half of each split and recurse
only into the smaller one, which keeps the recursion depth
logarithmic in the polygon count.  Iteration is over lists in input
order throughout, so results are reproducible.
"""

from __future__ import annotations

import enum
from typing import Iterable, Iterator, List, Sequence, Tuple

from polycsg.plane import Plane, PlaneComparison
from polycsg.polygon import Polygon, fragment_ids
from polycsg.vector import Vector


class ClipRule(enum.Enum):
    GREATER_THAN = '>'
    GREATER_THAN_EQUAL = '>='
    LESS_THAN = '<'
    LESS_THAN_EQUAL = '<='

    @property
    def keeps_front(self) -> bool:
        return self in (ClipRule.GREATER_THAN, ClipRule.GREATER_THAN_EQUAL)

    @property
    def coplanar_is_inside(self) -> bool:
        return self in (ClipRule.GREATER_THAN, ClipRule.LESS_THAN_EQUAL)


class BSPNode:
    __slots__ = ('plane', 'polygons', 'front', 'back')

    def __init__(self, plane: Plane):
        self.plane = plane
        self.polygons: List[Polygon] = []
        self.front: BSPNode | None = None
        self.back: BSPNode | None = None

    def insert(self, polygons: List[Polygon], ids: Iterator[int]) -> None:
        node = self
        while polygons:
            coplanar: List[Polygon] = []
            front: List[Polygon] = []
            back: List[Polygon] = []
            for p in polygons:
                p._split_into(node.plane, coplanar, front, back, ids)
            for p in coplanar:
                if node.plane.normal.dot(p.plane.normal) > 0:
                    node.polygons.append(p)
                else:
                    back.append(p)
            if front and node.front is None:
                node.front = BSPNode(front[0].plane)
            if back and node.back is None:
                node.back = BSPNode(back[0].plane)
            if len(front) > len(back):
                if back:
                    node.back.insert(back, ids)
                polygons, node = front, node.front
            else:
                if front:
                    node.front.insert(front, ids)
                polygons = back
                if back:
                    node = node.back

    def clip(self, polygons: List[Polygon], rule: ClipRule,
             ids: Iterator[int]) -> List[Polygon]:
        total: List[Polygon] = []
        keep_front = rule.keeps_front
        coplanar_inside = rule.coplanar_is_inside
        node = self
        while polygons:
            coplanar: List[Polygon] = []
            front: List[Polygon] = []
            back: List[Polygon] = []
            for p in polygons:
                p._split_into(node.plane, coplanar, front, back, ids)
            for p in coplanar:
                if coplanar_inside or node.plane.normal.dot(p.plane.normal) <= 0:
                    p._clip_to(node.polygons, back, front, ids)
                else:
                    front.append(p)
            if len(front) > len(back):
                if node.back is not None:
                    _add_joined(total, node.back.clip(back, rule, ids))
                elif not keep_front:
                    _add_joined(total, back)
                if node.front is None:
                    if keep_front:
                        _add_joined(total, front)
                    return total
                polygons, node = front, node.front
            else:
                if node.front is not None:
                    _add_joined(total, node.front.clip(front, rule, ids))
                elif keep_front:
                    _add_joined(total, front)
                if node.back is None:
                    if not keep_front:
                        _add_joined(total, back)
                    return total
                polygons, node = back, node.back
        return total

    def iter_nodes(self) -> Iterator['BSPNode']:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.back is not None:
                stack.append(node.back)
            if node.front is not None:
                stack.append(node.front)


def _add_joined(total: List[Polygon], polygons: Iterable[Polygon]) -> None:
    """append ``polygons``, rejoining fragments that share an id"""
    for a in polygons:
        if a.id == 0:
            total.append(a)
            continue
        for i in range(len(total) - 1, -1, -1):
            b = total[i]
            if a.id != b.id:
                continue
            joined = a._join(b)
            if joined is not None:
                a = joined
                del total[i]
        total.append(a)


class BSP:
    """A BSP tree over a polygon collection.

    Parameters
    ----------
    polygons : iterable of Polygon
        Usually the polygons of a closed mesh.
    """

    def __init__(self, polygons: Iterable[Polygon]):
        polys = [p.with_id(0) for p in polygons]
        self.root: BSPNode | None = None
        if polys:
            self.root = BSPNode(polys[0].plane)
            self.root.insert(polys, fragment_ids())

    @property
    def is_empty(self) -> bool:
        return self.root is None

    @property
    def is_convex(self) -> bool:
        """True if no node has a front child.

        A BSP built from a closed convex polyhedron is a single chain
        of back children because every face lies behind every other
        face's plane; any concavity forces a front subtree.
        """
        if self.root is None:
            return False
        return all(node.front is None for node in self.root.iter_nodes())

    def polygons(self) -> List[Polygon]:
        """every polygon stored in the tree"""
        if self.root is None:
            return []
        out: List[Polygon] = []
        for node in self.root.iter_nodes():
            out.extend(node.polygons)
        return out

    def clip(self, polygons: Sequence[Polygon], rule: ClipRule) -> List[Polygon]:
        """The fragments of ``polygons`` selected by ``rule``.

        With an empty tree everything is outside.
        """
        polys = [p.with_id(0) for p in polygons]
        if self.root is None:
            return polys if rule.keeps_front else []
        result = self.root.clip(polys, rule, fragment_ids())
        return [p.with_id(0) for p in result]

    def split(self, polygons: Sequence[Polygon], outside: ClipRule = ClipRule.GREATER_THAN,
              inside: ClipRule = ClipRule.LESS_THAN) -> Tuple[List[Polygon], List[Polygon]]:
        """``(outside, inside)`` fragments of ``polygons``"""
        if not outside.keeps_front or inside.keeps_front:
            raise ValueError(f'bad rule pair for BSP.split: {outside}, {inside}')
        return self.clip(polygons, outside), self.clip(polygons, inside)

    def contains_point(self, point: Vector) -> bool:
        """Point containment.

        Points within ``tolerance.plane_epsilon`` of a node's plane are
        classified on both sides of it and count as inside if either
        side says so, which makes surface points (and points on
        extensions of face planes through the interior) inside.
        """
        if self.root is None:
            return False
        return _contains(self.root, point)


def _contains(node: BSPNode | None, point: Vector) -> bool:
    while node is not None:
        side = node.plane.compare(point)
        if side == PlaneComparison.FRONT:
            if node.front is None:
                return False
            node = node.front
        elif side == PlaneComparison.BACK:
            if node.back is None:
                return True
            node = node.back
        else:
            if any(p.contains_point(point) for p in node.polygons):
                return True
            if node.back is None or _contains(node.back, point):
                return True
            if node.front is None:
                return False
            node = node.front
    return False


__all__ = ['BSP', 'BSPNode', 'ClipRule']
