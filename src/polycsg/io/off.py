"""Object File Format (OFF) import and export.

Layout::

    OFF
    <vertex count> <face count> <edge count>
    x y z               (one line per vertex)
    n i0 i1 ... [r g b [a]]   (one line per face, 0-based indices)

Face colours are read as colour materials; integer colour components
are taken to be in the 0-255 range.  Comments start with ``#``.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from polycsg.color import Color
from polycsg.io.codec import FormatError
from polycsg.mesh import Mesh
from polycsg.polygon import polygon
from polycsg.vector import Vector

logger = logging.getLogger(__name__)


def off_text(mesh: Mesh) -> str:
    index: Dict[Vector, int] = {}
    points: List[Vector] = []
    faces: List[str] = []
    for p in mesh.polygons:
        refs = []
        for v in p.vertices:
            i = index.get(v.position)
            if i is None:
                i = index[v.position] = len(points)
                points.append(v.position)
            refs.append(str(i))
        line = f"{len(refs)} {' '.join(refs)}"
        if isinstance(p.material, Color):
            c = p.material
            line += f' {c.r!r} {c.g!r} {c.b!r} {c.a!r}'
        faces.append(line)
    edges = len(mesh.edges)
    lines = ['OFF', f'{len(points)} {len(faces)} {edges}']
    lines.extend(f'{p.x!r} {p.y!r} {p.z!r}' for p in points)
    lines.extend(faces)
    return '\n'.join(lines) + '\n'


def write_off(mesh: Mesh, path_or_file) -> None:
    text = off_text(mesh)
    if hasattr(path_or_file, 'write'):
        path_or_file.write(text)
        return
    with open(path_or_file, 'w', encoding='utf-8') as stream:
        stream.write(text)


def _tokens(text: str) -> List[List[str]]:
    rows = []
    for raw in text.splitlines():
        line = raw.split('#', 1)[0].split()
        if line:
            rows.append(line)
    return rows


def _int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise FormatError(f'expected an integer, got {token!r}') from None


def _float(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise FormatError(f'expected a number, got {token!r}') from None


def _face_color(tokens: List[str]) -> Color | None:
    if len(tokens) < 3:
        return None
    if all(t.lstrip('-+').isdigit() for t in tokens):
        values = [_int(t) / 255.0 for t in tokens[:4]]
    else:
        values = [_float(t) for t in tokens[:4]]
    return Color(*values)


def _parse(text: str) -> Mesh:
    rows = _tokens(text)
    if not rows or not rows[0][0].upper().endswith('OFF'):
        raise FormatError('missing OFF header')
    header = rows[0][1:]
    body = rows[1:]
    if not header:
        if not body:
            raise FormatError('missing element counts')
        header, body = body[0], body[1:]
    if len(header) < 2:
        raise FormatError(f'bad element counts {header!r}')
    nv, nf = _int(header[0]), _int(header[1])
    if nv < 0 or nf < 0:
        raise FormatError(f'negative element counts {nv}, {nf}')
    if len(body) < nv + nf:
        raise FormatError(f'expected {nv} vertices and {nf} faces, found {len(body)} lines')
    points = []
    for row in body[:nv]:
        if len(row) < 3:
            raise FormatError(f'bad vertex line {row!r}')
        points.append(Vector(_float(row[0]), _float(row[1]), _float(row[2])))
    polygons = []
    for row in body[nv:nv + nf]:
        n = _int(row[0])
        if n < 3 or len(row) < n + 1:
            raise FormatError(f'bad face line {row!r}')
        refs = [_int(t) for t in row[1:n + 1]]
        if any(not 0 <= i < nv for i in refs):
            raise FormatError(f'face index out of range in {row!r}')
        p = polygon([points[i] for i in refs], material=_face_color(row[n + 1:]))
        if p is not None:
            polygons.append(p)
    return Mesh(polygons)


def off_from_text(text: str) -> Mesh:
    """Parse OFF text; malformed input gives an empty mesh."""
    try:
        return _parse(text)
    except FormatError as exc:
        logger.warning('unreadable OFF data: %s', exc)
        return Mesh()


def read_off(path_or_file) -> Mesh:
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()
    if isinstance(data, bytes):
        data = data.decode('utf-8', errors='replace')
    return off_from_text(data)


__all__ = ['write_off', 'read_off', 'off_text', 'off_from_text']
