import math

import pytest

from polycsg.path import Path, circle, line, square
from polycsg.shapes import Faces, cone, cube, cylinder, extrude, fill, lathe, loft, sphere, stroke
from polycsg.vector import UNIT_X, UNIT_Y, UNIT_Z, Vector


def _ngon_area(radius, sides):
    return 0.5 * sides * radius * radius * math.sin(2 * math.pi / sides)


def _assert_closed_solid(m):
    assert m.is_watertight
    assert m.volume > 0


class TestCube:

    def test_face_order(self):
        normals = [p.plane.normal for p in cube().polygons]
        expected = [-UNIT_X, UNIT_X, -UNIT_Y, UNIT_Y, -UNIT_Z, UNIT_Z]
        assert all(n.is_equal(e) for n, e in zip(normals, expected))

    def test_vertex_attributes(self):
        face = cube().polygons[0]
        assert [v.texcoord for v in face.vertices] == [
            Vector(0, 0), Vector(1, 0), Vector(1, 1), Vector(0, 1)]
        assert all(v.normal == face.plane.normal for v in face.vertices)

    def test_solid(self):
        c = cube(center=(1, 2, 3), size=(1, 2, 3))
        _assert_closed_solid(c)
        assert c.volume == pytest.approx(6.0)
        assert c.bounds.center.is_equal(Vector(1, 2, 3))
        assert c.is_known_convex
        assert c.is_actually_convex

    def test_faces(self):
        assert cube(faces=Faces.BACK).volume == pytest.approx(-1.0)
        both = cube(faces=Faces.FRONT_AND_BACK)
        assert len(both) == 12
        assert not both.is_known_convex

    def test_degenerate_size(self):
        assert cube(size=0).is_empty
        assert cube(size=(1, -1, 1)).is_empty


class TestRoundPrimitives:

    def test_sphere(self):
        s = sphere(radius=1, slices=16)
        _assert_closed_solid(s)
        assert s.volume < 4.0 / 3.0 * math.pi
        assert s.bounds.max.y == pytest.approx(1.0)
        assert s.bounds.min.y == pytest.approx(-1.0)
        assert s.is_known_convex
        for p in s.polygons:
            for v in p.vertices:
                assert v.normal.is_equal(v.position)

    def test_sphere_pole_triangles(self):
        s = sphere(slices=8, stacks=4)
        assert len(s) == 8 * 4
        assert sum(1 for p in s.polygons if len(p) == 3) == 16

    def test_bad_sphere(self):
        assert sphere(radius=0).is_empty
        assert sphere(slices=2).is_empty

    def test_cylinder(self):
        c = cylinder(radius=0.5, height=2, slices=16)
        _assert_closed_solid(c)
        assert len(c) == 18
        assert c.volume == pytest.approx(_ngon_area(0.5, 16) * 2)
        assert c.bounds.min.y == pytest.approx(-1.0)
        assert c.bounds.max.y == pytest.approx(1.0)

    def test_cone(self):
        c = cone(radius=0.5, height=1, slices=16)
        _assert_closed_solid(c)
        assert len(c) == 17
        assert c.volume == pytest.approx(_ngon_area(0.5, 16) / 3.0)
        assert c.bounds.max.y == pytest.approx(0.5)

    def test_material(self):
        assert cylinder(material='brass').materials == ['brass']


class TestPathBuilders:

    def test_fill_is_two_sided(self):
        m = fill(square())
        assert len(m) == 2
        assert m.polygons[0].plane.normal.is_equal(-m.polygons[1].plane.normal)
        assert fill(square(), faces=Faces.FRONT).surface_area == pytest.approx(1.0)

    def test_fill_with_hole(self):
        frame = Path(list(square(2).points) + list(square(1).points))
        m = fill(frame, faces=Faces.FRONT)
        assert m.surface_area == pytest.approx(3.0)

    def test_extrude(self):
        box = extrude(square(), depth=2)
        _assert_closed_solid(box)
        assert len(box) == 6
        assert box.volume == pytest.approx(2.0)
        assert box.bounds.min.z == pytest.approx(-1.0)
        assert box.bounds.max.z == pytest.approx(1.0)

    def test_extrude_clockwise_path(self):
        box = extrude(square().inverted())
        _assert_closed_solid(box)
        assert box.volume == pytest.approx(1.0)

    def test_extrude_with_hole(self):
        frame = Path(list(square(2).points) + list(square(1).points))
        m = extrude(frame, depth=1)
        assert m.volume == pytest.approx(3.0)
        assert not m.contains_point(Vector(0, 0, 0))
        assert m.contains_point(Vector(0.75, 0, 0))

    def test_extrude_open_path(self):
        ribbon = extrude(line((0, 0), (1, 0)))
        assert len(ribbon) == 2
        assert ribbon.polygons[0].area == pytest.approx(1.0)

    def test_extrude_curved_path(self):
        rod = extrude(circle(segments=8), detail=1)
        _assert_closed_solid(rod)
        assert len(rod) == 16 + 2

    def test_lathe_open_profile(self):
        tube = lathe(Path([(0.5, 0.5), (0.5, -0.5)]), slices=8)
        assert len(tube) == 16
        assert not tube.is_watertight

    def test_lathe_closed_profile(self):
        ring = lathe(Path([(1, -0.5), (2, -0.5), (2, 0.5), (1, 0.5), (1, -0.5)]), slices=16)
        _assert_closed_solid(ring)
        assert ring.volume == pytest.approx(_ngon_area(2, 16) - _ngon_area(1, 16))

    def test_lathe_needs_three_slices(self):
        assert lathe(Path([(0, 1), (1, 0), (0, -1)]), slices=2).is_empty

    def test_loft(self):
        box = loft([square(), square().translated((0, 0, 1))])
        _assert_closed_solid(box)
        assert box.volume == pytest.approx(1.0)

    def test_loft_mismatched_sections(self):
        m = loft([square(), circle(segments=8).translated((0, 0, 1))])
        _assert_closed_solid(m)
        assert m.bounds.max.z == pytest.approx(1.0)

    def test_loft_single_section_fills(self):
        assert len(loft([square()])) == 2
        assert loft([]).is_empty

    def test_stroke(self):
        rod = stroke(line((0, 0), (1, 0)), width=0.1, detail=4)
        _assert_closed_solid(rod)
        assert rod.volume == pytest.approx(0.005)
        assert rod.bounds.min.x == pytest.approx(0.0)
        assert rod.bounds.max.x == pytest.approx(1.0)

    def test_stroke_closed_path(self):
        ring = stroke(square(), width=0.1, detail=6)
        _assert_closed_solid(ring)
        # mitred corners keep the full cross-section along the centre line
        assert ring.volume == pytest.approx(_ngon_area(0.05, 6) * 4)
        assert ring.make_watertight() is ring

    def test_stroke_bent_path(self):
        elbow = stroke(Path([(0, 0), (1, 0), (1, 1)]), width=0.1, detail=8)
        _assert_closed_solid(elbow)
        assert elbow.volume == pytest.approx(_ngon_area(0.05, 8) * 2)

    def test_stroke_closed_twisted_path(self):
        loop = Path([(0, 0, 0), (1, 0, 0), (1, 1, 1), (0, 1, 0), (0, 0, 0)])
        assert loop.is_closed
        _assert_closed_solid(stroke(loop, width=0.1, detail=5))

    def test_stroke_degenerate(self):
        assert stroke(Path([(0, 0)])).is_empty
        assert stroke(square(), width=0).is_empty
