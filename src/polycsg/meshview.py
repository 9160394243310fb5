"""Flattened array views of meshes.

:func:`mesh_buffers` lays a mesh out the way renderers and scene-graph
bridges want it: one row per distinct vertex in numpy arrays, plus a
per-face vertex count and a flat index list.  :func:`mesh_triangles`
yields ``(normal, v0, v1, v2)`` tuples for triangle-only consumers such
as the STL writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from polycsg.color import Color
from polycsg.polygon import polygon
from polycsg.vector import ZERO, Vector
from polycsg.vertex import Vertex

Vec3 = Tuple[float, float, float]
TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


@dataclass
class MeshBuffers:
    """Indexed vertex buffers.

    ``positions`` and ``normals`` are ``(n, 3)`` float arrays,
    ``texcoords`` is ``(n, 2)`` and ``colors`` is ``(n, 4)`` or None
    when no vertex carries a colour.  Face ``i`` uses the next
    ``face_vertex_counts[i]`` entries of ``indices``.
    """
    positions: np.ndarray
    normals: np.ndarray
    texcoords: np.ndarray
    colors: Optional[np.ndarray]
    face_vertex_counts: np.ndarray
    indices: np.ndarray
    materials: List[object] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.face_vertex_counts.shape[0])


def mesh_buffers(mesh) -> MeshBuffers:
    """Flatten ``mesh``; identical vertices share a row."""
    index: Dict[Vertex, int] = {}
    rows: List[Vertex] = []
    counts: List[int] = []
    indices: List[int] = []
    materials: List[object] = []
    for p in mesh.polygons:
        face_normal = p.plane.normal
        for v in p.vertices:
            if v.normal == ZERO:
                v = v.with_normal(face_normal)
            i = index.get(v)
            if i is None:
                i = index[v] = len(rows)
                rows.append(v)
            indices.append(i)
        counts.append(len(p.vertices))
        materials.append(p.material)

    positions = np.array([tuple(v.position) for v in rows], dtype=np.float64).reshape(-1, 3)
    normals = np.array([tuple(v.normal) for v in rows], dtype=np.float64).reshape(-1, 3)
    texcoords = np.array([(v.texcoord.x, v.texcoord.y) for v in rows],
                         dtype=np.float64).reshape(-1, 2)
    colors = None
    if any(v.color is not None for v in rows):
        colors = np.array([tuple(v.color or Color()) for v in rows],
                          dtype=np.float64).reshape(-1, 4)
    return MeshBuffers(positions, normals, texcoords, colors,
                       np.array(counts, dtype=np.int64), np.array(indices, dtype=np.int64),
                       materials)


def mesh_from_buffers(buffers: MeshBuffers):
    """Rebuild a mesh from buffers; faces that fail validation are dropped."""
    from polycsg.mesh import Mesh

    positions = np.asarray(buffers.positions, dtype=np.float64)
    normals = None if buffers.normals is None else np.asarray(buffers.normals, dtype=np.float64)
    texcoords = (None if buffers.texcoords is None
                 else np.asarray(buffers.texcoords, dtype=np.float64))
    colors = None if buffers.colors is None else np.asarray(buffers.colors, dtype=np.float64)
    materials = list(buffers.materials or [])
    indices = [int(i) for i in buffers.indices]
    count = positions.shape[0]

    def make_vertex(i: int) -> Vertex:
        position = Vector(*(float(c) for c in positions[i][:3]))
        normal = ZERO if normals is None else Vector(*(float(c) for c in normals[i][:3]))
        texcoord = ZERO
        if texcoords is not None:
            row = [float(c) for c in texcoords[i]]
            texcoord = Vector(*(row + [0.0] * (3 - len(row)))[:3])
        c = None if colors is None else Color(*(float(x) for x in colors[i][:4]))
        return Vertex(position, normal, texcoord, c)

    polygons = []
    offset = 0
    for face, n in enumerate(int(k) for k in buffers.face_vertex_counts):
        face_indices = indices[offset:offset + n]
        offset += n
        if len(face_indices) != n or any(not 0 <= i < count for i in face_indices):
            continue
        material = materials[face] if face < len(materials) else None
        p = polygon([make_vertex(i) for i in face_indices], material=material)
        if p is not None:
            polygons.append(p)
    return Mesh(polygons)


def mesh_triangles(mesh) -> Iterator[TriTuple]:
    """Yield triangles as ``(normal, v0, v1, v2)`` tuples.

    Normals are the unit face normals.  Polygons with more than three
    vertices are triangulated first.
    """
    for p in mesh.polygons:
        n = tuple(p.plane.normal)
        for tri in p.triangulate():
            a, b, c = (tuple(v.position) for v in tri.vertices)
            yield n, a, b, c


__all__ = ['MeshBuffers', 'mesh_buffers', 'mesh_from_buffers', 'mesh_triangles']
