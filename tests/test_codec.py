import json

import pytest

from polycsg.color import RED, Color
from polycsg.io.codec import FormatError, from_json, from_structure, to_json, to_structure
from polycsg.mesh import Mesh
from polycsg.path import Path, PathPoint, circle, square
from polycsg.plane import Plane
from polycsg.polygon import Polygon, polygon
from polycsg.shapes import cube
from polycsg.vector import UNIT_Z, Vector
from polycsg.vertex import Vertex


class TestEncoding:

    def test_vectors(self):
        assert to_structure(Vector(1, 2)) == [1.0, 2.0]
        assert to_structure(Vector(1, 2, 3)) == [1.0, 2.0, 3.0]

    def test_colors(self):
        assert to_structure(RED) == [1.0, 0.0, 0.0]
        assert to_structure(Color(1, 0, 0, 0.5)) == [1.0, 0.0, 0.0, 0.5]

    def test_vertices(self):
        assert to_structure(Vertex(Vector(1, 2))) == [1.0, 2.0]
        full = Vertex(Vector(1, 2), UNIT_Z, Vector(0.5, 0.5), RED)
        assert to_structure(full) == {'position': [1.0, 2.0], 'normal': [0.0, 0.0, 1.0],
                                      'texcoord': [0.5, 0.5], 'color': [1.0, 0.0, 0.0]}

    def test_plane(self):
        assert to_structure(Plane(UNIT_Z, 2)) == {'normal': [0.0, 0.0, 1.0], 'w': 2}

    def test_polygon(self):
        p = Polygon([Vertex(Vector(0, 0)), Vertex(Vector(1, 0)), Vertex(Vector(0, 1))])
        assert to_structure(p) == [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]
        encoded = to_structure(p.with_material(RED))
        assert encoded['material'] == {'color': [1.0, 0.0, 0.0]}
        assert to_structure(p.with_material('steel'))['material'] == 'steel'

    def test_path(self):
        path = Path([(0, 0), PathPoint.curve((1, 0)), (1, 1)])
        assert to_structure(path) == [[0.0, 0.0], {'position': [1.0, 0.0], 'curved': True},
                                      [1.0, 1.0]]

    def test_mesh(self):
        encoded = to_structure(cube())
        assert list(encoded) == ['polygons']
        assert len(encoded['polygons']) == 6

    def test_json_is_plain(self):
        assert json.loads(to_json(cube(material='wood')))['polygons'][0]['material'] == 'wood'

    def test_unsupported(self):
        with pytest.raises(TypeError):
            to_structure(object())


class TestDecoding:

    def test_vector_forms(self):
        assert from_structure([1, 2], Vector) == Vector(1, 2)
        assert from_structure([1, 2, 3], Vector) == Vector(1, 2, 3)
        assert from_structure({'x': 1, 'y': 2}, Vector) == Vector(1, 2)

    def test_bare_list_mesh(self):
        tri = [[0, 0], [1, 0], [0, 1]]
        result = from_structure([tri], Mesh)
        assert len(result) == 1
        assert result.polygons[0].plane.normal.is_equal(UNIT_Z)

    @pytest.mark.parametrize('value', [
        cube(),
        cube(material=RED),
        cube(material='wood').translated((1, 2, 3)),
    ])
    def test_mesh_round_trip(self, value):
        assert from_json(to_json(value), Mesh) == value

    def test_other_round_trips(self):
        p = polygon([(0, 0), (2, 0), (2, 1)], material='m')
        assert from_structure(to_structure(p), Polygon) == p
        c = circle(segments=6)
        assert from_structure(to_structure(c), Path) == c
        plane = Plane(UNIT_Z, -1.5)
        decoded = from_structure(to_structure(plane), Plane)
        assert decoded.normal == plane.normal and decoded.w == plane.w
        v = Vertex(Vector(1, 2, 3), UNIT_Z, Vector(0.5, 0.25), Color(0, 1, 0, 0.5))
        assert from_structure(to_structure(v), Vertex) == v
        assert from_structure(to_structure(square()), Path) == square()

    @pytest.mark.parametrize('data, kind', [
        ([1], Vector),
        ([1, 2, 3, 4], Vector),
        (['a', 1], Vector),
        ([True, 1], Vector),
        ({'x': 1}, Vector),
        ([1, 0], Color),
        ({'normal': [0, 0, 2], 'w': 0}, Plane),
        ({'normal': [0, 0, 1]}, Plane),
        ([[0, 0], [1, 0]], Polygon),
        ([[0, 0], [1, 0], [2, 0]], Polygon),
        ({'material': 'm'}, Polygon),
        ({'faces': []}, Mesh),
        ('cube', Mesh),
        (7, Path),
    ])
    def test_malformed(self, data, kind):
        with pytest.raises(FormatError):
            from_structure(data, kind)

    def test_invalid_json(self):
        with pytest.raises(FormatError):
            from_json('{"polygons": [', Mesh)

    def test_format_error_is_value_error(self):
        assert issubclass(FormatError, ValueError)

    def test_unsupported_kind(self):
        with pytest.raises(TypeError):
            from_structure([1, 2], int)
