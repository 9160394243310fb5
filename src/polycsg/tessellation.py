"""Triangulation, tessellation and detessellation of polygons.

``triangulate`` splits any simple polygon into triangles using ear
clipping in the polygon's own plane; convex polygons take a plain fan.
``tessellate`` breaks polygons into convex pieces of at most
``max_sides`` vertices, and ``detessellate`` merges coplanar fragments
back into larger faces.

Loops with holes (filled paths) go through :func:`earcut_indices`,
which delegates to ``mapbox-earcut``, the ear clipping implementation
used by Mapbox GL.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, List, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate polygons with holes"
    ) from exc

from polycsg import tolerance
from polycsg.geom_util import (
    cross_2d,
    point_in_triangle_2d,
    points_are_collinear,
    projector,
    signed_area_2d,
)
from polycsg.polygon import Polygon

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]


class MergePolicy(enum.Enum):
    """Which fragments :func:`detessellate` may merge.

    ``GEOMETRIC``
        any coplanar neighbours, keeping the first polygon's material
    ``MATERIAL``
        only neighbours with equal materials (the default)
    ``MATERIAL_AND_ID``
        only neighbours with equal materials and equal fragment ids
    """
    GEOMETRIC = 'geometric'
    MATERIAL = 'material'
    MATERIAL_AND_ID = 'material_and_id'

    def allows(self, a: Polygon, b: Polygon) -> bool:
        if self is MergePolicy.GEOMETRIC:
            return True
        if a.material != b.material:
            return False
        return self is MergePolicy.MATERIAL or a.id == b.id


def triangulate(poly: Polygon) -> List[Polygon]:
    """Split ``poly`` into triangles sharing its plane, material and id.

    Zero-area triangles from runs of collinear points are never
    produced, and every vertex of ``poly`` is kept.
    """
    verts = list(poly.vertices)
    if len(verts) == 3:
        return [poly]
    if poly.is_convex and not _has_straight_vertex(verts):
        v0 = verts[0]
        return [poly._derived([v0, verts[i], verts[i + 1]], is_convex=True)
                for i in range(1, len(verts) - 1)]
    return _ear_clip(poly)


def _has_straight_vertex(verts) -> bool:
    count = len(verts)
    for i in range(count):
        run = [verts[i - 1].position, verts[i].position, verts[(i + 1) % count].position]
        if points_are_collinear(run):
            return True
    return False


def _ear_clip(poly: Polygon) -> List[Polygon]:
    project = projector(poly.plane.normal)
    verts = list(poly.vertices)
    pts = [project(v.position) for v in verts]
    if signed_area_2d(pts) < 0:
        # winding disagrees with the stored plane
        verts.reverse()
        pts.reverse()
        flipped = True
    else:
        flipped = False
    eps = tolerance.epsilon
    triangles: List[Polygon] = []
    attempts = 0
    i = 0
    while len(verts) > 3:
        count = len(verts)
        if attempts > count:
            logger.debug('ear clipping gave up with %d vertices left', count)
            return triangles
        i %= count
        ia, ic = i - 1, (i + 1) % count
        a, b, c = pts[ia], pts[i], pts[ic]
        turn = cross_2d(a, b, c)
        if abs(turn) < eps:
            if (a[0] - b[0]) * (c[0] - b[0]) + (a[1] - b[1]) * (c[1] - b[1]) > 0:
                # spike: drop the tip
                del verts[i]
                del pts[i]
                attempts = 0
            else:
                i += 1
                attempts += 1
            continue
        if turn < 0 or not _is_ear(pts, ia % count, i, ic):
            i += 1
            attempts += 1
            continue
        tri = [verts[ia], verts[i], verts[ic]]
        triangles.append(_triangle(poly, tri, flipped))
        del verts[i]
        del pts[i]
        attempts = 0
    if len(verts) == 3 and not points_are_collinear([v.position for v in verts]):
        triangles.append(_triangle(poly, verts, flipped))
    return triangles


def _is_ear(pts: Sequence[Point2D], ia: int, ib: int, ic: int) -> bool:
    a, b, c = pts[ia], pts[ib], pts[ic]
    for k, p in enumerate(pts):
        if k in (ia, ib, ic) or p == a or p == b or p == c:
            continue
        if point_in_triangle_2d(p, a, b, c):
            return False
    return True


def _triangle(poly: Polygon, tri, flipped: bool) -> Polygon:
    if flipped:
        tri = list(reversed(tri))
    return poly._derived(tri, is_convex=True)


def tessellate(poly: Polygon, max_sides: int | None = None) -> List[Polygon]:
    """Break ``poly`` into convex pieces of at most ``max_sides`` sides.

    A convex polygon within the limit is returned as-is; a larger
    convex polygon is bisected recursively through a diagonal between
    opposite vertices; a concave polygon is triangulated and the
    triangles greedily re-merged while they stay convex.
    """
    if max_sides is not None and max_sides < 3:
        raise ValueError(f'max_sides must be at least 3, got {max_sides!r}')
    if poly.is_convex:
        if max_sides is None or len(poly.vertices) <= max_sides:
            return [poly]
        return _bisect(poly, max_sides)
    return _merge_convex(triangulate(poly), max_sides)


def _bisect(poly: Polygon, max_sides: int) -> List[Polygon]:
    verts = poly.vertices
    count = len(verts)
    if count <= max_sides:
        return [poly]
    k = count // 2
    first = poly._derived(verts[:k + 1], is_convex=True)
    second = poly._derived(verts[k:] + verts[:1], is_convex=True)
    return _bisect(first, max_sides) + _bisect(second, max_sides)


def _merge_convex(polygons: List[Polygon], max_sides: int | None) -> List[Polygon]:
    result: List[Polygon] = []
    for p in polygons:
        merged = False
        for i in range(len(result) - 1, -1, -1):
            joined = result[i]._join(p)
            if joined is None or not joined.is_convex:
                continue
            if max_sides is not None and len(joined.vertices) > max_sides:
                continue
            result[i] = joined
            merged = True
            break
        if not merged:
            result.append(p)
    return result


def detessellate(polygons: Iterable[Polygon], *, ensure_convex: bool = False,
                 max_sides: int | None = None,
                 policy: MergePolicy = MergePolicy.MATERIAL) -> List[Polygon]:
    """Merge coplanar neighbours back into larger faces.

    Pairs sharing exactly one edge are merged, in list order, until no
    more merges are possible.  ``ensure_convex`` rejects merges that
    would produce a concave face and ``max_sides`` bounds the size of
    merged faces.  ``policy`` decides which pairs are eligible at all.
    """
    result = list(polygons)
    changed = True
    while changed:
        changed = False
        i = 0
        while i < len(result):
            a = result[i]
            j = i + 1
            while j < len(result):
                b = result[j]
                merged = None
                if policy.allows(a, b):
                    merged = a._merge_unchecked(b, ensure_convex)
                if merged is not None and (max_sides is None or
                                           len(merged.vertices) <= max_sides):
                    a = merged
                    result[i] = merged
                    del result[j]
                    changed = True
                    j = i + 1
                    continue
                j += 1
            i += 1
    return result


def earcut_indices(loops: Sequence[Sequence[Point2D]]) -> List[Tuple[int, int, int]]:
    """Triangulate an outer loop minus hole loops.

    ``loops[0]`` is the outer boundary and the remaining loops are
    holes.  Returned index triples refer to the points of all loops
    concatenated in order, and every triangle is counter-clockwise.
    Degenerate loops (fewer than three distinct points) are skipped.
    """
    if not loops:
        return []
    point_map: List[Point2D] = []
    index_map: List[int] = []
    ring_ends: List[int] = []
    offset = 0
    for n, loop in enumerate(loops):
        kept = _prepare_loop(loop)
        if len(kept) < 3:
            if n == 0:
                return []
            offset += len(loop)
            continue
        for k in kept:
            point_map.append((float(loop[k][0]), float(loop[k][1])))
            index_map.append(offset + k)
        ring_ends.append(len(point_map))
        offset += len(loop)

    vertices = np.asarray(point_map, dtype=np.float64)
    ring_array = np.asarray(ring_ends, dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, ring_array)
    triangles: List[Tuple[int, int, int]] = []
    for i in range(0, len(indices), 3):
        a, b, c = int(indices[i]), int(indices[i + 1]), int(indices[i + 2])
        if cross_2d(point_map[a], point_map[b], point_map[c]) < 0:
            b, c = c, b
        triangles.append((index_map[a], index_map[b], index_map[c]))
    return triangles


def _prepare_loop(points: Sequence[Point2D]) -> List[int]:
    kept: List[int] = []
    for i, pt in enumerate(points):
        if kept and _near(points[kept[-1]], pt):
            continue
        kept.append(i)
    if len(kept) > 1 and _near(points[kept[0]], points[kept[-1]]):
        kept.pop()
    return kept


def _near(p1: Point2D, p2: Point2D) -> bool:
    eps = tolerance.epsilon
    return abs(p1[0] - p2[0]) <= eps and abs(p1[1] - p2[1]) <= eps


__all__ = ['MergePolicy', 'triangulate', 'tessellate', 'detessellate', 'earcut_indices']
