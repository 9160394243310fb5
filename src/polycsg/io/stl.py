"""STL import and export for polyCSG meshes."""

from __future__ import annotations

import logging
import re
import struct
from typing import Iterable, List, NamedTuple, Tuple

from polycsg import tolerance
from polycsg.color import Color
from polycsg.io.codec import FormatError
from polycsg.mesh import Mesh
from polycsg.polygon import Polygon, polygon
from polycsg.vector import Vector
from polycsg.vertex import Vertex
from polycsg.vertexset import VertexSet

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')
_COLOR_VALID = 0x8000

Vec3 = Tuple[float, float, float]


class Facet(NamedTuple):
    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3
    attribute: int = 0


def _encode_color(material) -> int:
    """15-bit facet colour with the valid bit set, or zero"""
    if not isinstance(material, Color):
        return 0

    def channel(value: float) -> int:
        return max(0, min(31, int(round(value * 31))))

    return (_COLOR_VALID | channel(material.r) << 10 |
            channel(material.g) << 5 | channel(material.b))


def _decode_color(attribute: int) -> Color | None:
    if not attribute & _COLOR_VALID:
        return None
    return Color(((attribute >> 10) & 31) / 31.0, ((attribute >> 5) & 31) / 31.0,
                 (attribute & 31) / 31.0)


def mesh_facets(mesh: Mesh, *, colors: bool = False) -> List[Facet]:
    facets = []
    for p in mesh.polygons:
        n = tuple(p.plane.normal)
        attribute = _encode_color(p.material) if colors else 0
        for tri in p.triangulate():
            a, b, c = (tuple(v.position) for v in tri.vertices)
            facets.append(Facet(n, a, b, c, attribute))
    return facets


def write_stl(mesh: Mesh, path_or_file, *, binary: bool = True, name: str = 'polyCSG',
              colors: bool = False) -> None:
    """Write ``mesh`` to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text
    stream.  Non-triangular polygons are triangulated.  With ``colors``
    set, polygons whose material is a :class:`~polycsg.color.Color`
    store it in the binary attribute word.
    """
    facets = mesh_facets(mesh, colors=colors)
    if binary:
        _write_binary(facets, path_or_file, name)
    else:
        _write_ascii(facets, path_or_file, name)


def stl_bytes(mesh: Mesh, *, name: str = 'polyCSG', colors: bool = False) -> bytes:
    """binary STL encoding of ``mesh``"""
    facets = mesh_facets(mesh, colors=colors)
    chunks = [_header(name), struct.pack('<I', len(facets))]
    chunks.extend(_pack(f) for f in facets)
    return b''.join(chunks)


def _header(name: str) -> bytes:
    header = name[:_HEADER_SIZE].encode('ascii', errors='replace')
    return header.ljust(_HEADER_SIZE, b'\0')


def _pack(f: Facet) -> bytes:
    return _STRUCT_TRIANGLE.pack(*f.normal, *f.v0, *f.v1, *f.v2, f.attribute)


def _write_binary(facets: List[Facet], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        stream.write(_header(name))
        stream.write(struct.pack('<I', len(facets)))
        for f in facets:
            stream.write(_pack(f))
    finally:
        if close_when_done:
            stream.close()


def _write_ascii(facets: Iterable[Facet], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    try:
        print(f"solid {name}", file=stream)
        for f in facets:
            print(f"  facet normal {f.normal[0]:.9e} {f.normal[1]:.9e} {f.normal[2]:.9e}",
                  file=stream)
            print("    outer loop", file=stream)
            for v in (f.v0, f.v1, f.v2):
                print(f"      vertex {v[0]:.9e} {v[1]:.9e} {v[2]:.9e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------


def _is_binary_stl(data: bytes) -> bool:
    """Binary STL is an 80-byte header, a 4-byte count and 50 bytes per
    facet.  ASCII STL starts with ``solid``, but so do some binary
    headers, so the size and body are checked too."""
    if len(data) < 84:
        return not data.lstrip()[:5].lower() == b'solid'
    if data[:80].lstrip().lower().startswith(b'solid'):
        count = struct.unpack('<I', data[80:84])[0]
        if len(data) == 84 + count * 50:
            rest = data[84:min(200, len(data))]
            return not (b'facet' in rest or b'vertex' in rest)
        return False
    return True


def _parse_binary_stl(data: bytes) -> List[Facet]:
    if len(data) < 84:
        raise FormatError('binary STL is shorter than its header')
    count = struct.unpack('<I', data[80:84])[0]
    if len(data) < 84 + count * 50:
        raise FormatError(f'binary STL declares {count} facets but holds '
                          f'{(len(data) - 84) // 50}')
    facets = []
    offset = 84
    for _ in range(count):
        values = _STRUCT_TRIANGLE.unpack_from(data, offset)
        facets.append(Facet(values[0:3], values[3:6], values[6:9], values[9:12], values[12]))
        offset += 50
    return facets


_NUMBER = r'([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)'
_TRIPLE = r'\s+'.join([_NUMBER] * 3)
_FACET_PATTERN = re.compile(
    r'facet\s+normal\s+' + _TRIPLE + r'\s+outer\s+loop\s+' +
    r'\s+'.join([r'vertex\s+' + _TRIPLE] * 3) + r'\s+endloop\s+endfacet',
    re.IGNORECASE)


def _parse_ascii_stl(text: str) -> List[Facet]:
    if not text.lstrip().lower().startswith('solid'):
        raise FormatError('ASCII STL does not start with "solid"')
    facets = []
    for match in _FACET_PATTERN.finditer(text):
        v = [float(g) for g in match.groups()]
        facets.append(Facet(tuple(v[0:3]), tuple(v[3:6]), tuple(v[6:9]), tuple(v[9:12])))
    if not facets and re.search(r'\bfacet\b', text, re.IGNORECASE):
        raise FormatError('ASCII STL facets could not be parsed')
    return facets


def _facets_to_mesh(facets: List[Facet], weld: bool) -> Mesh:
    welder = VertexSet(tolerance.weld_precision) if weld else None
    polygons: List[Polygon] = []
    for f in facets:
        normal = Vector(*f.normal)
        positions = [Vector(*v) for v in (f.v0, f.v1, f.v2)]
        if welder is not None:
            positions = [welder.insert_position(p) for p in positions]
        material = _decode_color(f.attribute)
        verts = [Vertex(pos, normal) for pos in positions]
        p = polygon(verts, material=material)
        if p is None:
            continue
        if p.plane.normal.dot(normal) < 0:
            # the stored normal wins over the vertex order
            p = polygon(verts[::-1], material=material)
        polygons.append(p)
    return Mesh(polygons)


def read_stl(path_or_file, *, weld: bool = False) -> Mesh:
    """Read an STL file, binary or ASCII, into a :class:`Mesh`.

    Each facet becomes a triangle whose vertex normals are the facet
    normal.  With ``weld`` set, coincident positions are snapped to a
    single value.  Structurally invalid data gives an empty mesh and a
    warning; I/O errors propagate.
    """
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()
    return stl_from_bytes(data, weld=weld)


def stl_from_bytes(data: bytes, *, weld: bool = False) -> Mesh:
    try:
        if _is_binary_stl(data):
            facets = _parse_binary_stl(data)
        else:
            facets = _parse_ascii_stl(data.decode('utf-8', errors='replace'))
    except FormatError as exc:
        logger.warning('unreadable STL data: %s', exc)
        return Mesh()
    return _facets_to_mesh(facets, weld)


def import_stl(path: str, *, weld: bool = False) -> Mesh:
    """Alias for :func:`read_stl`, matching the other importers."""
    return read_stl(path, weld=weld)


__all__ = ['write_stl', 'read_stl', 'import_stl', 'stl_bytes', 'stl_from_bytes']
