"""Structural encoding of geometry values.

``to_structure`` turns geometry into plain lists, dicts and numbers
ready for any serializer; ``from_structure`` reverses it for a given
target type.  Canonical rules:

* vectors are ``[x, y]`` when ``z`` is zero, otherwise ``[x, y, z]``;
  either length is accepted on decode, as is ``{"x": .., "y": ..}``
* colours are ``[r, g, b]`` when opaque, otherwise ``[r, g, b, a]``
* vertices and path points with only a position encode as that
  position; otherwise as a dict whose default-valued keys are omitted
* polygons and paths without extra attributes encode as lists of
  their points; a polygon with a material becomes
  ``{"vertices": [...], "material": ...}``
* meshes are ``{"polygons": [...]}``; a bare list is accepted on decode
* colour materials encode as ``{"color": [...]}``; other materials
  must already be serializable

Malformed structures raise :class:`FormatError`.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from polycsg.color import Color
from polycsg.mesh import Mesh
from polycsg.path import Path, PathPoint
from polycsg.plane import Plane
from polycsg.polygon import Polygon, polygon
from polycsg.vector import ZERO, Vector
from polycsg.vertex import Vertex


class FormatError(ValueError):
    """structurally invalid serialized or file data"""


def _number(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatError(f'expected a number, got {value!r}')
    return float(value)


# ----------------------------------------------------------------------
# encoding
# ----------------------------------------------------------------------

def _encode_vector(v: Vector) -> List[float]:
    if v.z == 0:
        return [v.x, v.y]
    return [v.x, v.y, v.z]


def _encode_color(c: Color) -> List[float]:
    if c.a == 1:
        return [c.r, c.g, c.b]
    return [c.r, c.g, c.b, c.a]


def _encode_material(m):
    if isinstance(m, Color):
        return {'color': _encode_color(m)}
    return m


def _encode_vertex(v: Vertex):
    if v.normal == ZERO and v.texcoord == ZERO and v.color is None:
        return _encode_vector(v.position)
    out: Dict[str, Any] = {'position': _encode_vector(v.position)}
    if v.normal != ZERO:
        out['normal'] = _encode_vector(v.normal)
    if v.texcoord != ZERO:
        out['texcoord'] = _encode_vector(v.texcoord)
    if v.color is not None:
        out['color'] = _encode_color(v.color)
    return out


def _encode_path_point(p: PathPoint):
    if p.texcoord is None and p.color is None and not p.is_curved:
        return _encode_vector(p.position)
    out: Dict[str, Any] = {'position': _encode_vector(p.position)}
    if p.texcoord is not None:
        out['texcoord'] = _encode_vector(p.texcoord)
    if p.color is not None:
        out['color'] = _encode_color(p.color)
    if p.is_curved:
        out['curved'] = True
    return out


def _encode_polygon(p: Polygon):
    verts = [_encode_vertex(v) for v in p.vertices]
    if p.material is None:
        return verts
    return {'vertices': verts, 'material': _encode_material(p.material)}


def to_structure(value) -> Any:
    """encode a geometry value as plain lists, dicts and floats"""
    if isinstance(value, Vector):
        return _encode_vector(value)
    if isinstance(value, Color):
        return _encode_color(value)
    if isinstance(value, Vertex):
        return _encode_vertex(value)
    if isinstance(value, Plane):
        return {'normal': _encode_vector(value.normal), 'w': value.w}
    if isinstance(value, Polygon):
        return _encode_polygon(value)
    if isinstance(value, PathPoint):
        return _encode_path_point(value)
    if isinstance(value, Path):
        return [_encode_path_point(p) for p in value.points]
    if isinstance(value, Mesh):
        return {'polygons': [_encode_polygon(p) for p in value.polygons]}
    raise TypeError(f'cannot encode {type(value).__name__} values')


# ----------------------------------------------------------------------
# decoding
# ----------------------------------------------------------------------

def _decode_vector(data) -> Vector:
    if isinstance(data, dict):
        try:
            return Vector(_number(data['x']), _number(data['y']), _number(data.get('z', 0.0)))
        except KeyError as exc:
            raise FormatError(f'vector is missing {exc}') from None
    if not isinstance(data, (list, tuple)) or not 2 <= len(data) <= 3:
        raise FormatError(f'expected 2 or 3 vector components, got {data!r}')
    values = [_number(c) for c in data]
    return Vector(*(values + [0.0] * (3 - len(values))))


def _decode_color(data) -> Color:
    if not isinstance(data, (list, tuple)) or len(data) not in (3, 4):
        raise FormatError(f'expected 3 or 4 colour components, got {data!r}')
    return Color(*(_number(c) for c in data))


def _decode_material(data):
    if isinstance(data, dict) and set(data) == {'color'}:
        return _decode_color(data['color'])
    return data


def _decode_vertex(data) -> Vertex:
    if isinstance(data, dict) and 'position' in data:
        color = data.get('color')
        return Vertex(_decode_vector(data['position']),
                      _decode_vector(data['normal']) if 'normal' in data else ZERO,
                      _decode_vector(data['texcoord']) if 'texcoord' in data else ZERO,
                      None if color is None else _decode_color(color))
    return Vertex(_decode_vector(data))


def _decode_path_point(data) -> PathPoint:
    if isinstance(data, dict) and 'position' in data:
        texcoord = data.get('texcoord')
        color = data.get('color')
        return PathPoint(_decode_vector(data['position']),
                         None if texcoord is None else _decode_vector(texcoord),
                         None if color is None else _decode_color(color),
                         bool(data.get('curved', False)))
    return PathPoint(_decode_vector(data))


def _decode_plane(data) -> Plane:
    if not isinstance(data, dict) or 'normal' not in data or 'w' not in data:
        raise FormatError(f'expected a plane, got {data!r}')
    normal = _decode_vector(data['normal'])
    if abs(normal.length - 1.0) > 1e-6:
        raise FormatError(f'plane normal is not unit length: {data!r}')
    return Plane(normal, _number(data['w']))


def _decode_polygon(data) -> Polygon:
    material = None
    if isinstance(data, dict):
        if 'vertices' not in data:
            raise FormatError(f'polygon has no vertices: {data!r}')
        material = _decode_material(data.get('material'))
        data = data['vertices']
    if not isinstance(data, (list, tuple)):
        raise FormatError(f'expected a vertex list, got {data!r}')
    result = polygon([_decode_vertex(v) for v in data], material=material)
    if result is None:
        raise FormatError('vertices do not form a valid polygon')
    return result


def _decode_path(data) -> Path:
    if not isinstance(data, (list, tuple)):
        raise FormatError(f'expected a point list, got {data!r}')
    return Path(_decode_path_point(p) for p in data)


def _decode_mesh(data) -> Mesh:
    if isinstance(data, dict):
        if 'polygons' not in data:
            raise FormatError('mesh has no polygons')
        data = data['polygons']
    if not isinstance(data, (list, tuple)):
        raise FormatError(f'expected a polygon list, got {type(data).__name__}')
    return Mesh(_decode_polygon(p) for p in data)


_DECODERS = {
    Vector: _decode_vector,
    Color: _decode_color,
    Vertex: _decode_vertex,
    Plane: _decode_plane,
    Polygon: _decode_polygon,
    PathPoint: _decode_path_point,
    Path: _decode_path,
    Mesh: _decode_mesh,
}


def from_structure(data, kind: type):
    """decode ``data`` as a value of type ``kind``"""
    try:
        decoder = _DECODERS[kind]
    except KeyError:
        raise TypeError(f'cannot decode {kind!r} values') from None
    return decoder(data)


def to_json(value, **kwargs) -> str:
    return json.dumps(to_structure(value), **kwargs)


def from_json(text: str, kind: type):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatError(f'invalid JSON: {exc}') from exc
    return from_structure(data, kind)


__all__ = ['FormatError', 'to_structure', 'from_structure', 'to_json', 'from_json']
