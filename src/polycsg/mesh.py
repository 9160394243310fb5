"""Polygon meshes.

A :class:`Mesh` is an ordered, immutable collection of polygons with
lazily computed, cached derived state: bounds, a BSP tree, convexity,
watertightness and the partition into connected submeshes.  Every
operation returns a new mesh, so a cache is never stale: it is either
computed from this mesh's polygons or absent.  Recomputing any cache
from the same polygons gives the same answer, so concurrent
population is harmless.

Boolean operations live in :mod:`polycsg.csg`, hull and Minkowski sum
in :mod:`polycsg.hull` and the flattened buffer view in
:mod:`polycsg.meshview`; the methods here are thin entry points.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from polycsg import tolerance
from polycsg.bounds import Bounds
from polycsg.bsp import BSP
from polycsg.line import LineSegment
from polycsg.plane import Plane, PlaneComparison
from polycsg.polygon import Polygon, polygon, polygons_bounds
from polycsg.tessellation import MergePolicy, detessellate
from polycsg.transform import Rotation, Transform
from polycsg.vector import Vector, vector
from polycsg.vertex import Vertex
from polycsg.vertexset import VertexSet

logger = logging.getLogger(__name__)

_Edge = Tuple[Vector, Vector]


class Mesh:
    """An immutable polygon mesh.

    Parameters
    ----------
    polygons : iterable of Polygon
        Faces in a meaningful order; results of every operation are a
        deterministic function of this order.
    is_convex : bool
        Caller's promise that the mesh is a closed convex solid (see
        :attr:`is_known_convex`).
    """

    __slots__ = ('polygons', '_is_known_convex', '_bounds', '_bsp',
                 '_is_actually_convex', '_edge_counts', '_submeshes')

    def __init__(self, polygons: Iterable[Polygon] = (), *, is_convex: bool = False):
        self.polygons: Tuple[Polygon, ...] = tuple(polygons)
        for p in self.polygons:
            if not isinstance(p, Polygon):
                raise TypeError(f'bad argument to Mesh constructor: {p!r}')
        self._is_known_convex = is_convex and bool(self.polygons)
        self._bounds = None
        self._bsp = None
        self._is_actually_convex = None
        self._edge_counts = None
        self._submeshes = None

    def __repr__(self) -> str:
        return f'Mesh(<{len(self.polygons)} polygons>)'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mesh):
            return NotImplemented
        return self.polygons == other.polygons

    def __hash__(self) -> int:
        return hash(self.polygons)

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self):
        return iter(self.polygons)

    @classmethod
    def empty(cls) -> 'Mesh':
        return cls()

    # ------------------------------------------------------------------
    # cached derived state
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.polygons

    @property
    def bounds(self) -> Bounds:
        if self._bounds is None:
            self._bounds = polygons_bounds(self.polygons)
        return self._bounds

    @property
    def bsp(self) -> BSP:
        if self._bsp is None:
            self._bsp = BSP(self.polygons)
        return self._bsp

    @property
    def is_known_convex(self) -> bool:
        """Cheap convexity tag.

        True only when whoever built the mesh knew it to be a closed
        convex solid (primitives such as cubes and spheres, convex
        hulls).  False does not mean the mesh is concave.
        """
        return self._is_known_convex

    @property
    def is_actually_convex(self) -> bool:
        """Exact convexity check: the mesh is watertight and its BSP
        proves that no face lies in front of another face's plane."""
        if self._is_actually_convex is None:
            self._is_actually_convex = (bool(self.polygons) and self.is_watertight
                                        and self.bsp.is_convex)
        return self._is_actually_convex

    def _directed_edges(self) -> Dict[_Edge, int]:
        if self._edge_counts is None:
            weld = VertexSet(tolerance.weld_precision)
            counts: Dict[_Edge, int] = {}
            for p in self.polygons:
                pts = [weld.insert_position(v.position) for v in p.vertices]
                count = len(pts)
                for i in range(count):
                    a, b = pts[i], pts[(i + 1) % count]
                    if a == b:
                        continue
                    counts[(a, b)] = counts.get((a, b), 0) + 1
            self._edge_counts = counts
        return self._edge_counts

    @property
    def edges(self) -> List[LineSegment]:
        """every undirected edge, in first-seen order"""
        seen = set()
        out = []
        for a, b in self._directed_edges():
            key = LineSegment(a, b).undirected()
            if key not in seen:
                seen.add(key)
                out.append(key)
        return out

    @property
    def hole_edges(self) -> List[LineSegment]:
        """Undirected edges not shared by exactly one edge in each
        direction."""
        counts = self._directed_edges()
        seen = set()
        out = []
        for (a, b), n in counts.items():
            key = LineSegment(a, b).undirected()
            if key in seen:
                continue
            seen.add(key)
            if n != 1 or counts.get((b, a), 0) != 1:
                out.append(key)
        return out

    @property
    def is_watertight(self) -> bool:
        return not self.hole_edges

    def edges_intersecting(self, plane: Plane) -> List[LineSegment]:
        """undirected edges that cross or touch ``plane``"""
        out = []
        for edge in self.edges:
            side = plane.compare(edge.start) | plane.compare(edge.end)
            if side != PlaneComparison.FRONT and side != PlaneComparison.BACK:
                out.append(edge)
        return out

    @property
    def submeshes(self) -> List['Mesh']:
        """connected components over shared edges, in order of each
        component's first polygon"""
        if self._submeshes is None:
            self._submeshes = self._partition()
        return self._submeshes

    def _partition(self) -> List['Mesh']:
        count = len(self.polygons)
        if count == 0:
            return []
        parent = list(range(count))

        def find(i: int) -> int:
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        weld = VertexSet(tolerance.weld_precision)
        owner: Dict[LineSegment, int] = {}
        for index, p in enumerate(self.polygons):
            pts = [weld.insert_position(v.position) for v in p.vertices]
            n = len(pts)
            for i in range(n):
                if pts[i] == pts[(i + 1) % n]:
                    continue
                key = LineSegment(pts[i], pts[(i + 1) % n]).undirected()
                other = owner.setdefault(key, index)
                ra, rb = find(index), find(other)
                if ra != rb:
                    parent[max(ra, rb)] = min(ra, rb)
        groups: Dict[int, List[Polygon]] = {}
        for index, p in enumerate(self.polygons):
            groups.setdefault(find(index), []).append(p)
        if len(groups) == 1:
            return [self]
        return [Mesh(polys, is_convex=self._is_known_convex) for polys in groups.values()]

    @property
    def materials(self) -> list:
        out = []
        for p in self.polygons:
            if p.material not in out:
                out.append(p.material)
        return out

    def polygons_by_material(self) -> Dict[object, List[Polygon]]:
        out: Dict[object, List[Polygon]] = {}
        for p in self.polygons:
            out.setdefault(p.material, []).append(p)
        return out

    @property
    def volume(self) -> float:
        """enclosed volume by the divergence theorem (watertight meshes)"""
        total = 0.0
        for p in self.polygons:
            pts = p.positions
            a = pts[0]
            for i in range(1, len(pts) - 1):
                total += a.dot(pts[i].cross(pts[i + 1]))
        return total / 6.0

    @property
    def surface_area(self) -> float:
        return sum(p.area for p in self.polygons)

    def contains_point(self, point) -> bool:
        return self.bsp.contains_point(vector(point))

    # ------------------------------------------------------------------
    # derived meshes
    # ------------------------------------------------------------------

    def _with_polygons(self, polygons: Iterable[Polygon], keep_convex: bool = True) -> 'Mesh':
        return Mesh(polygons, is_convex=keep_convex and self._is_known_convex)

    def merge(self, other: 'Mesh') -> 'Mesh':
        """concatenate polygons without resolving overlaps"""
        if other.is_empty:
            return self
        if self.is_empty:
            return other
        return Mesh(self.polygons + other.polygons)

    @classmethod
    def merge_all(cls, meshes: Iterable['Mesh']) -> 'Mesh':
        meshes = [m for m in meshes if not m.is_empty]
        if len(meshes) == 1:
            return meshes[0]
        polygons: List[Polygon] = []
        for m in meshes:
            polygons.extend(m.polygons)
        return cls(polygons)

    def inverted(self) -> 'Mesh':
        return Mesh(p.inverted() for p in self.polygons)

    def with_material(self, material) -> 'Mesh':
        return self._with_polygons(p.with_material(material) for p in self.polygons)

    def replacing(self, old, new) -> 'Mesh':
        """replace one material with another"""
        return self._with_polygons(p.with_material(new) if p.material == old else p
                                   for p in self.polygons)

    def without_texcoords(self) -> 'Mesh':
        return self._with_polygons(p.without_texcoords() for p in self.polygons)

    def transformed(self, transform: Transform) -> 'Mesh':
        return self._with_polygons(p.transformed(transform) for p in self.polygons)

    def translated(self, offset) -> 'Mesh':
        offset = vector(offset)
        return self._with_polygons(p.translated(offset) for p in self.polygons)

    def rotated(self, rotation: Rotation) -> 'Mesh':
        return self.transformed(Transform(rotation=rotation))

    def scaled(self, scale) -> 'Mesh':
        s = vector(scale)
        return self.transformed(Transform(scale=s))

    def reflected(self, plane: Plane) -> 'Mesh':
        """mirror image through ``plane``"""
        n = plane.normal

        def mirror_vertex(v: Vertex) -> Vertex:
            p = v.position - n * (2.0 * plane.distance(v.position))
            normal = v.normal - n * (2.0 * n.dot(v.normal))
            return Vertex(p, normal, v.texcoord, v.color)

        out = []
        for p in self.polygons:
            verts = [mirror_vertex(v) for v in reversed(p.vertices)]
            out.append(Polygon(verts, material=p.material, is_convex=p._is_convex))
        return self._with_polygons(out)

    def triangulate(self) -> 'Mesh':
        out: List[Polygon] = []
        for p in self.polygons:
            out.extend(p.triangulate())
        return self._with_polygons(out)

    def tessellate(self, max_sides: int | None = None) -> 'Mesh':
        out: List[Polygon] = []
        for p in self.polygons:
            out.extend(p.tessellate(max_sides))
        return self._with_polygons(out)

    def detessellate(self, *, ensure_convex: bool = False, max_sides: int | None = None,
                     policy: MergePolicy = MergePolicy.MATERIAL) -> 'Mesh':
        return self._with_polygons(detessellate(self.polygons, ensure_convex=ensure_convex,
                                                max_sides=max_sides, policy=policy))

    def make_watertight(self) -> 'Mesh':
        """Close T-junction gaps by inserting hole-edge end points into
        the polygon edges they lie on.

        Idempotent, and never increases the number of hole edges.
        """
        holes = self.hole_edges
        if not holes:
            return self
        points: List[Vector] = []
        seen = set()
        for edge in holes:
            for p in (edge.start, edge.end):
                if p not in seen:
                    seen.add(p)
                    points.append(p)
        polys = list(self.polygons)
        inserted = 0
        for i in range(len(polys)):
            area = polys[i].bounds.inset(-tolerance.epsilon)
            for point in points:
                if not area.contains_point(point):
                    continue
                repaired = polys[i].insert_edge_point(point)
                if repaired is not None:
                    polys[i] = repaired
                    inserted += 1
        if not inserted:
            return self
        result = self._with_polygons(polys)
        if len(result.hole_edges) > len(holes):
            return self
        logger.debug('make_watertight inserted %d vertices, %d -> %d hole edges',
                     inserted, len(holes), len(result.hole_edges))
        return result

    # ------------------------------------------------------------------
    # booleans, delegated to polycsg.csg
    # ------------------------------------------------------------------

    def union(self, other: 'Mesh') -> 'Mesh':
        from polycsg import csg
        return csg.union(self, other)

    def subtract(self, other: 'Mesh') -> 'Mesh':
        from polycsg import csg
        return csg.subtract(self, other)

    def intersect(self, other: 'Mesh') -> 'Mesh':
        from polycsg import csg
        return csg.intersect(self, other)

    def xor(self, other: 'Mesh') -> 'Mesh':
        from polycsg import csg
        return csg.xor(self, other)

    def stencil(self, other: 'Mesh') -> 'Mesh':
        from polycsg import csg
        return csg.stencil(self, other)

    def split(self, plane: Plane) -> Tuple['Mesh', 'Mesh']:
        from polycsg import csg
        return csg.split(self, plane)

    def clipped(self, plane: Plane, fill=None) -> 'Mesh':
        from polycsg import csg
        return csg.clipped(self, plane, fill)

    @classmethod
    def union_all(cls, meshes: Iterable['Mesh']) -> 'Mesh':
        from polycsg import csg
        return csg.union_all(meshes)

    @classmethod
    def difference(cls, meshes: Iterable['Mesh']) -> 'Mesh':
        from polycsg import csg
        return csg.difference(meshes)

    @classmethod
    def intersection(cls, meshes: Iterable['Mesh']) -> 'Mesh':
        from polycsg import csg
        return csg.intersection(meshes)

    @classmethod
    def xor_all(cls, meshes: Iterable['Mesh']) -> 'Mesh':
        from polycsg import csg
        return csg.xor_all(meshes)

    # ------------------------------------------------------------------
    # hull and Minkowski sum, delegated to polycsg.hull
    # ------------------------------------------------------------------

    @classmethod
    def convex_hull(cls, *operands, material=None) -> 'Mesh':
        from polycsg import hull
        return hull.convex_hull(*operands, material=material)

    def minkowski_sum(self, other: 'Mesh') -> 'Mesh':
        from polycsg import hull
        return hull.minkowski_sum(self, other)

    # ------------------------------------------------------------------
    # flattened buffers, delegated to polycsg.meshview
    # ------------------------------------------------------------------

    def buffers(self):
        from polycsg import meshview
        return meshview.mesh_buffers(self)

    @classmethod
    def from_buffers(cls, buffers) -> 'Mesh':
        from polycsg import meshview
        return meshview.mesh_from_buffers(buffers)


def mesh(polygons: Iterable, material=None, is_convex: bool = False) -> Mesh:
    """Build a mesh from polygons or raw point loops.

    Point loops are validated with :func:`polycsg.polygon.polygon`;
    invalid ones are dropped.
    """
    out = []
    for item in polygons:
        if isinstance(item, Polygon):
            out.append(item if material is None else item.with_material(material))
            continue
        p = polygon(item, material=material)
        if p is not None:
            out.append(p)
    return Mesh(out, is_convex=is_convex)


__all__ = ['Mesh', 'mesh']
