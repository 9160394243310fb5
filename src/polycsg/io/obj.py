"""Wavefront OBJ import and export.

Positions, texture coordinates and normals are written as separate
indexed pools; string materials are written as ``usemtl`` groups.
Indices are 1-based, and negative indices on import count back from
the most recent entry.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from polycsg.io.codec import FormatError
from polycsg.mesh import Mesh
from polycsg.polygon import polygon
from polycsg.vector import ZERO, Vector
from polycsg.vertex import Vertex

logger = logging.getLogger(__name__)


_NO_GROUP = object()


def _fmt(value: float) -> str:
    return repr(float(value))


def obj_text(mesh: Mesh) -> str:
    """OBJ text for ``mesh``"""
    positions: Dict[Vector, int] = {}
    texcoords: Dict[Vector, int] = {}
    normals: Dict[Vector, int] = {}
    head: List[str] = []
    body: List[str] = []

    def pool(table: Dict[Vector, int], key: Vector, line: str) -> int:
        index = table.get(key)
        if index is None:
            index = table[key] = len(table) + 1
            head.append(line)
        return index

    material: object = _NO_GROUP
    has_texcoords = any(p.has_texcoords for p in mesh.polygons)
    for p in mesh.polygons:
        name = p.material if isinstance(p.material, str) else None
        if name != material:
            material = name
            body.append(f"usemtl {name or 'default'}")
        refs = []
        for v in p.vertices:
            pos = v.position
            vi = pool(positions, pos, f'v {_fmt(pos.x)} {_fmt(pos.y)} {_fmt(pos.z)}')
            ref = str(vi)
            ti = ''
            if has_texcoords:
                t = v.texcoord
                ti = str(pool(texcoords, t, f'vt {_fmt(t.x)} {_fmt(t.y)}'))
            if v.normal != ZERO:
                n = v.normal
                ni = pool(normals, n, f'vn {_fmt(n.x)} {_fmt(n.y)} {_fmt(n.z)}')
                ref = f'{vi}/{ti}/{ni}'
            elif ti:
                ref = f'{vi}/{ti}'
            refs.append(ref)
        body.append('f ' + ' '.join(refs))
    ordered = ([line for line in head if line.startswith('v ')] +
               [line for line in head if line.startswith('vt ')] +
               [line for line in head if line.startswith('vn ')])
    return '\n'.join(ordered + body) + '\n'


def write_obj(mesh: Mesh, path_or_file) -> None:
    text = obj_text(mesh)
    if hasattr(path_or_file, 'write'):
        path_or_file.write(text)
        return
    with open(path_or_file, 'w', encoding='utf-8') as stream:
        stream.write(text)


def _floats(parts: List[str], count: int, line_no: int) -> List[float]:
    if len(parts) < count:
        raise FormatError(f'line {line_no}: expected {count} numbers')
    try:
        return [float(x) for x in parts[:count]]
    except ValueError:
        raise FormatError(f'line {line_no}: bad number in {parts!r}') from None


def _resolve(token: str, size: int, line_no: int) -> int:
    try:
        index = int(token)
    except ValueError:
        raise FormatError(f'line {line_no}: bad index {token!r}') from None
    if index < 0:
        index += size
    else:
        index -= 1
    if not 0 <= index < size:
        raise FormatError(f'line {line_no}: index {token} out of range')
    return index


def _parse(text: str) -> Mesh:
    positions: List[Vector] = []
    texcoords: List[Vector] = []
    normals: List[Vector] = []
    polygons = []
    material = None
    for line_no, raw in enumerate(text.splitlines(), 1):
        line = raw.split('#', 1)[0].strip()
        if not line:
            continue
        keyword, *parts = line.split()
        if keyword == 'v':
            positions.append(Vector(*_floats(parts, 3, line_no)))
        elif keyword == 'vt':
            values = _floats(parts, max(1, min(len(parts), 3)), line_no)
            texcoords.append(Vector(*(values + [0.0] * (3 - len(values)))))
        elif keyword == 'vn':
            normals.append(Vector(*_floats(parts, 3, line_no)))
        elif keyword == 'usemtl':
            material = parts[0] if parts else None
            if material == 'default':
                material = None
        elif keyword == 'f':
            if len(parts) < 3:
                raise FormatError(f'line {line_no}: face with fewer than 3 vertices')
            verts = []
            for ref in parts:
                fields = ref.split('/')
                position = positions[_resolve(fields[0], len(positions), line_no)]
                texcoord = ZERO
                normal = ZERO
                if len(fields) > 1 and fields[1]:
                    texcoord = texcoords[_resolve(fields[1], len(texcoords), line_no)]
                if len(fields) > 2 and fields[2]:
                    normal = normals[_resolve(fields[2], len(normals), line_no)]
                verts.append(Vertex(position, normal, texcoord))
            p = polygon(verts, material=material)
            if p is not None:
                polygons.append(p)
        # other statements (o, g, s, mtllib, ...) do not affect geometry
    return Mesh(polygons)


def obj_from_text(text: str) -> Mesh:
    """Parse OBJ text; malformed input gives an empty mesh."""
    try:
        return _parse(text)
    except FormatError as exc:
        logger.warning('unreadable OBJ data: %s', exc)
        return Mesh()


def read_obj(path_or_file) -> Mesh:
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()
    if isinstance(data, bytes):
        data = data.decode('utf-8', errors='replace')
    return obj_from_text(data)


__all__ = ['write_obj', 'read_obj', 'obj_text', 'obj_from_text']
