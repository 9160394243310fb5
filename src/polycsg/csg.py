"""Boolean operations on meshes.

Every operator is assembled from :meth:`polycsg.bsp.BSP.clip` with a
different pair of :class:`~polycsg.bsp.ClipRule` values.  Before any
tree is built the operands' polygons are divided by the intersection
of the two bounding boxes: polygons outside that box cannot interact
with the other operand and bypass the BSP entirely, and operands whose
boxes do not meet short-circuit without building a tree at all.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from polycsg.bounds import Bounds
from polycsg.bsp import ClipRule
from polycsg.mesh import Mesh
from polycsg.plane import Plane, PlaneComparison
from polycsg.polygon import Polygon, polygon

logger = logging.getLogger(__name__)


def _partition(polygons: Sequence[Polygon], box: Bounds) -> Tuple[List[Polygon], List[Polygon]]:
    """``(outside, inside)``: polygons whose bounds miss or meet ``box``"""
    outside: List[Polygon] = []
    inside: List[Polygon] = []
    for p in polygons:
        if p.bounds.intersects(box):
            inside.append(p)
        else:
            outside.append(p)
    return outside, inside


def _inverted(polygons: Iterable[Polygon]) -> List[Polygon]:
    return [p.inverted() for p in polygons]


def union(a: Mesh, b: Mesh) -> Mesh:
    """Everything inside either operand.

    Coplanar faces shared by both operands and facing the same way
    are kept once, from ``b``.
    """
    if b.is_empty:
        return a
    if a.is_empty:
        return b
    if not a.bounds.intersects(b.bounds):
        logger.debug('union: disjoint bounds, merging %d + %d polygons',
                     len(a.polygons), len(b.polygons))
        return a.merge(b)
    box = a.bounds.intersection(b.bounds)
    a_out, a_in = _partition(a.polygons, box)
    b_out, b_in = _partition(b.polygons, box)
    kept_a = b.bsp.clip(a_in, ClipRule.GREATER_THAN)
    kept_b = a.bsp.clip(b_in, ClipRule.GREATER_THAN_EQUAL)
    result = Mesh(a_out + kept_a + b_out + kept_b)
    logger.debug('union: %d + %d -> %d polygons', len(a.polygons), len(b.polygons),
                 len(result.polygons))
    return result


def subtract(a: Mesh, b: Mesh) -> Mesh:
    """The part of ``a`` outside ``b``."""
    if a.is_empty or b.is_empty:
        return a
    if not a.bounds.intersects(b.bounds):
        logger.debug('subtract: disjoint bounds, nothing to remove')
        return a
    box = a.bounds.intersection(b.bounds)
    a_out, a_in = _partition(a.polygons, box)
    _, b_in = _partition(b.polygons, box)
    kept_a = b.bsp.clip(a_in, ClipRule.GREATER_THAN)
    kept_b = a.bsp.clip(b_in, ClipRule.LESS_THAN)
    result = Mesh(a_out + kept_a + _inverted(kept_b))
    logger.debug('subtract: %d - %d -> %d polygons', len(a.polygons), len(b.polygons),
                 len(result.polygons))
    return result


def intersect(a: Mesh, b: Mesh) -> Mesh:
    """The region inside both operands."""
    if a.is_empty or b.is_empty or not a.bounds.intersects(b.bounds):
        logger.debug('intersect: empty operand or disjoint bounds')
        return Mesh()
    box = a.bounds.intersection(b.bounds)
    _, a_in = _partition(a.polygons, box)
    _, b_in = _partition(b.polygons, box)
    kept_a = b.bsp.clip(a_in, ClipRule.LESS_THAN)
    kept_b = a.bsp.clip(b_in, ClipRule.LESS_THAN_EQUAL)
    result = Mesh(kept_a + kept_b)
    logger.debug('intersect: %d & %d -> %d polygons', len(a.polygons), len(b.polygons),
                 len(result.polygons))
    return result


def xor(a: Mesh, b: Mesh) -> Mesh:
    """The region inside exactly one operand.

    Equivalent to ``union(subtract(a, b), subtract(b, a))`` but with one
    pass over each tree.
    """
    if b.is_empty:
        return a
    if a.is_empty:
        return b
    if not a.bounds.intersects(b.bounds):
        return a.merge(b)
    box = a.bounds.intersection(b.bounds)
    a_out, a_in = _partition(a.polygons, box)
    b_out, b_in = _partition(b.polygons, box)
    a_outside, a_inside = b.bsp.split(a_in, ClipRule.GREATER_THAN, ClipRule.LESS_THAN)
    b_outside, b_inside = a.bsp.split(b_in, ClipRule.GREATER_THAN, ClipRule.LESS_THAN)
    result = Mesh(a_out + a_outside + _inverted(b_inside) +
                  b_out + b_outside + _inverted(a_inside))
    logger.debug('xor: %d ^ %d -> %d polygons', len(a.polygons), len(b.polygons),
                 len(result.polygons))
    return result


def stencil(a: Mesh, b: Mesh) -> Mesh:
    """Paint ``a`` with ``b``.

    The surface of ``a`` is unchanged, but polygons (or fragments of
    polygons) lying inside ``b`` take the material of ``b``'s first
    polygon.
    """
    if a.is_empty or b.is_empty or not a.bounds.intersects(b.bounds):
        return a
    material = b.polygons[0].material
    box = a.bounds.intersection(b.bounds)
    a_out, a_in = _partition(a.polygons, box)
    outside, inside = b.bsp.split(a_in, ClipRule.GREATER_THAN, ClipRule.LESS_THAN_EQUAL)
    return Mesh(a_out + outside + [p.with_material(material) for p in inside])


def split(mesh: Mesh, plane: Plane) -> Tuple[Mesh, Mesh]:
    """Cut ``mesh`` into the parts in front of and behind ``plane``.

    Faces lying in the plane stay with the solid they bound: a face
    facing along the plane normal caps the part behind the plane and
    goes to the back mesh, and vice versa.  No caps are added.
    """
    comparison = mesh.bounds.compare(plane)
    if comparison == PlaneComparison.FRONT:
        return mesh, Mesh()
    if comparison == PlaneComparison.BACK:
        return Mesh(), mesh
    front: List[Polygon] = []
    back: List[Polygon] = []
    for p in mesh.polygons:
        side = p.compare(plane)
        if side == PlaneComparison.COPLANAR:
            if plane.normal.dot(p.plane.normal) > 0:
                back.append(p)
            else:
                front.append(p)
            continue
        f, b = p.split(plane)
        front.extend(f)
        back.extend(b)
    return Mesh(front), Mesh(back)


def clipped(mesh: Mesh, plane: Plane, fill=None) -> Mesh:
    """The part of ``mesh`` in front of ``plane``.

    With ``fill`` set the cut is capped, where it crosses the solid,
    by polygons lying in the plane and facing away from the kept
    part.  ``fill`` is the cap material, or ``True`` for no material.
    """
    front, _ = split(mesh, plane)
    if fill is None or fill is False or front.is_empty:
        return front
    material = None if fill is True else fill
    cap = _cross_section(mesh, plane, material)
    if not cap:
        return front
    return Mesh(front.polygons + tuple(cap))


def _cross_section(mesh: Mesh, plane: Plane, material) -> List[Polygon]:
    bounds = mesh.bounds
    center = plane.project(bounds.center)
    radius = bounds.size.length + 1.0
    u, v = plane.basis()
    u, v = u * radius, v * radius
    # wound clockwise about the plane normal so the cap faces backward
    corners = [center - u - v, center - u + v, center + u + v, center + u - v]
    rect = polygon(corners, material=material)
    if rect is None:
        return []
    return mesh.bsp.clip([rect], ClipRule.LESS_THAN)


def union_all(meshes: Iterable[Mesh]) -> Mesh:
    """Union of any number of meshes.

    Meshes are first grouped into clusters with overlapping bounds;
    each cluster is reduced with :func:`union` and the clusters, being
    mutually disjoint, are concatenated.
    """
    clusters: List[List[Mesh]] = []
    boxes: List[Bounds] = []
    for m in meshes:
        if m.is_empty:
            continue
        box = m.bounds
        group = [m]
        i = 0
        while i < len(clusters):
            if boxes[i].intersects(box):
                group = clusters.pop(i) + group
                box = boxes.pop(i).union(box)
                i = 0
                continue
            i += 1
        clusters.append(group)
        boxes.append(box)
    results = []
    for group in clusters:
        result = group[0]
        for m in group[1:]:
            result = union(result, m)
        results.append(result)
    return Mesh.merge_all(results)


def difference(meshes: Iterable[Mesh]) -> Mesh:
    """the first mesh minus every following mesh"""
    it = iter(meshes)
    result = next(it, Mesh())
    for m in it:
        if result.is_empty:
            break
        result = subtract(result, m)
    return result


def intersection(meshes: Iterable[Mesh]) -> Mesh:
    it = iter(meshes)
    result = next(it, Mesh())
    for m in it:
        if result.is_empty:
            break
        result = intersect(result, m)
    return result


def xor_all(meshes: Iterable[Mesh]) -> Mesh:
    result = Mesh()
    for m in meshes:
        result = xor(result, m)
    return result


__all__ = ['union', 'subtract', 'intersect', 'xor', 'stencil', 'split', 'clipped',
           'union_all', 'difference', 'intersection', 'xor_all']
