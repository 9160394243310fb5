import io
import logging

import pytest

from polycsg.color import RED
from polycsg.io import read_obj, read_off, write_obj, write_off
from polycsg.io.obj import obj_from_text, obj_text
from polycsg.io.off import off_from_text, off_text
from polycsg.mesh import Mesh
from polycsg.shapes import cube
from polycsg.vector import Vector


class TestObj:

    def test_round_trip(self):
        original = cube()
        assert obj_from_text(obj_text(original)) == original

    def test_pools_are_shared(self):
        text = obj_text(cube())
        lines = text.splitlines()
        assert sum(1 for line in lines if line.startswith('v ')) == 8
        assert sum(1 for line in lines if line.startswith('vt ')) == 4
        assert sum(1 for line in lines if line.startswith('vn ')) == 6
        assert sum(1 for line in lines if line.startswith('f ')) == 6

    def test_materials(self):
        original = cube().with_material('steel')
        text = obj_text(original)
        assert 'usemtl steel' in text
        assert obj_from_text(text).materials == ['steel']
        assert 'usemtl default' in obj_text(cube())
        mixed = Mesh(cube().polygons[:3] + cube().with_material('steel').polygons[3:])
        lines = [line for line in obj_text(mixed).splitlines() if line.startswith('usemtl')]
        assert lines == ['usemtl default', 'usemtl steel']
        assert obj_from_text(obj_text(mixed)).materials == [None, 'steel']

    def test_positions_only(self):
        result = obj_from_text('v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n')
        assert len(result) == 1
        assert result.polygons[0].plane.normal.is_equal(Vector(0, 0, 1))

    def test_negative_indices(self):
        text = 'v 5 5 5\nv 0 0 0\nv 1 0 0\nv 0 1 0\nf -3 -2 -1\n'
        tri = obj_from_text(text).polygons[0]
        assert tri.positions == [Vector(0, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0)]

    def test_ignored_statements(self):
        text = '# comment\nmtllib x.mtl\no thing\ng group\ns off\nv 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n'
        assert len(obj_from_text(text)) == 1

    @pytest.mark.parametrize('text', [
        'v 0 0\n',
        'f 1 2 3\n',
        'v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2\n',
        'v 0 0 0\nv 1 0 0\nv a 1 0\nf 1 2 3\n',
    ])
    def test_malformed(self, text, caplog):
        with caplog.at_level(logging.WARNING, logger='polycsg.io.obj'):
            assert obj_from_text(text).is_empty
        assert 'unreadable OBJ' in caplog.text

    def test_stream_and_file(self, tmp_path):
        buffer = io.StringIO()
        write_obj(cube(), buffer)
        buffer.seek(0)
        assert read_obj(buffer) == cube()
        target = tmp_path / 'cube.obj'
        write_obj(cube(), str(target))
        assert read_obj(str(target)) == cube()


class TestOff:

    def test_text(self):
        text = off_text(cube())
        lines = text.splitlines()
        assert lines[0] == 'OFF'
        assert lines[1] == '8 6 12'

    def test_round_trip(self):
        result = off_from_text(off_text(cube()))
        assert len(result) == 6
        assert result.is_watertight
        assert result.volume == pytest.approx(1.0)
        assert [p.positions for p in result.polygons] == [p.positions for p in cube().polygons]

    def test_colors(self):
        result = off_from_text(off_text(cube(material=RED)))
        assert result.materials == [RED]

    def test_integer_colors(self):
        text = 'OFF\n3 1 0\n0 0 0\n1 0 0\n0 1 0\n3 0 1 2 255 0 0\n'
        assert off_from_text(text).materials == [RED]

    def test_counts_on_header_line(self):
        text = 'OFF 3 1 0\n# a triangle\n0 0 0\n1 0 0\n0 1 0\n3 0 1 2\n'
        result = off_from_text(text)
        assert len(result) == 1
        assert result.materials == [None]

    @pytest.mark.parametrize('text', [
        '',
        'PLY\n',
        'OFF\n3 1 0\n0 0 0\n',
        'OFF\n3 1 0\n0 0 0\n1 0 0\n0 1 0\n3 0 1 7\n',
        'OFF\nx 1 0\n',
    ])
    def test_malformed(self, text, caplog):
        with caplog.at_level(logging.WARNING, logger='polycsg.io.off'):
            assert off_from_text(text).is_empty
        assert 'unreadable OFF' in caplog.text

    def test_stream_and_file(self, tmp_path):
        buffer = io.StringIO()
        write_off(cube(), buffer)
        buffer.seek(0)
        assert len(read_off(buffer)) == 6
        target = tmp_path / 'cube.off'
        write_off(cube(), str(target))
        assert read_off(str(target)).volume == pytest.approx(1.0)
