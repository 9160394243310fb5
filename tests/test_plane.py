import pytest

from polycsg import tolerance
from polycsg.bounds import EMPTY, Bounds
from polycsg.line import Line, LineSegment, line_segment
from polycsg.plane import XY, Plane, PlaneComparison, plane, plane_from_points
from polycsg.transform import Transform
from polycsg.vector import UNIT_X, UNIT_Z, Vector


class TestPlane:

    def test_plane_normalizes(self):
        p = plane((0, 0, 2), 4)
        assert p.normal == UNIT_Z
        assert p.w == pytest.approx(2)
        assert plane((0, 0, 0), 1) is None

    def test_plane_from_points_follows_winding(self):
        p = plane_from_points([(0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)])
        assert p.normal.is_equal(UNIT_Z)
        assert p.w == pytest.approx(1)
        q = plane_from_points([(0, 1, 1), (1, 1, 1), (1, 0, 1), (0, 0, 1)])
        assert q.normal.is_equal(-UNIT_Z)

    def test_plane_from_bad_points(self):
        assert plane_from_points([(0, 0), (1, 0)]) is None
        assert plane_from_points([(0, 0), (1, 0), (2, 0)]) is None
        assert plane_from_points([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 1)]) is None

    def test_compare_uses_thickness(self):
        assert XY.compare(Vector(0, 0, 1)) == PlaneComparison.FRONT
        assert XY.compare(Vector(0, 0, -1)) == PlaneComparison.BACK
        assert XY.compare(Vector(5, 5, tolerance.plane_epsilon / 2)) == PlaneComparison.COPLANAR
        assert PlaneComparison.FRONT | PlaneComparison.BACK == PlaneComparison.SPANNING

    def test_inverted_and_project(self):
        p = Plane.through(UNIT_Z, (0, 0, 2))
        assert p.inverted().distance(Vector(0, 0, 3)) == pytest.approx(-1)
        assert p.project(Vector(4, 5, 9)) == Vector(4, 5, 2)
        assert p.origin == Vector(0, 0, 2)
        assert Plane.through((0, 0, 4), (0, 0, 2)).normal == UNIT_Z
        with pytest.raises(ValueError):
            Plane.through((0, 0, 0), (0, 0, 2))

    def test_intersections(self):
        line = Line(Vector(1, 1, 5), -UNIT_Z)
        assert XY.intersection_with_line(line) == Vector(1, 1, 0)
        assert XY.intersection_with_line(Line(Vector(), UNIT_X)) is None
        shared = XY.intersection_with_plane(Plane(UNIT_X, 2))
        assert shared.contains_point(Vector(2, 0, 0))
        assert abs(shared.direction.dot(UNIT_Z)) < 1e-12
        assert abs(shared.direction.dot(UNIT_X)) < 1e-12
        assert XY.intersection_with_plane(Plane(UNIT_Z, 3)) is None

    def test_basis_is_right_handed(self):
        p = Plane(Vector(1, 2, 3).normalized(), 0)
        u, v = p.basis()
        assert u.cross(v).is_equal(p.normal)
        assert abs(u.dot(v)) < 1e-12


class TestLines:

    def test_line_through(self):
        line = Line.through((0, 0, 0), (2, 0, 0))
        assert line.direction == UNIT_X
        assert line.distance(Vector(1, 3, 0)) == pytest.approx(3)
        assert Line.through((1, 1, 1), (1, 1, 1)) is None

    def test_line_intersection(self):
        a = Line.through((0, 0, 0), (1, 0, 0))
        b = Line.through((0.5, -1, 0), (0.5, 1, 0))
        assert a.intersection(b).is_equal(Vector(0.5, 0, 0))
        skew = Line.through((0, 0, 1), (0, 1, 1))
        assert a.intersection(skew) is None

    def test_segment_queries(self):
        s = line_segment((0, 0), (2, 0))
        assert s.length == 2
        assert s.contains_point(Vector(2, 0))
        assert not s.interior_contains_point(Vector(2, 0))
        assert s.interior_contains_point(Vector(1, 0))
        assert s.distance(Vector(3, 0)) == pytest.approx(1)
        assert line_segment((1, 1), (1, 1)) is None
        assert s.inverted().undirected() == s

    def test_segment_intersection(self):
        a = LineSegment(Vector(0, 0), Vector(2, 2))
        b = LineSegment(Vector(0, 2), Vector(2, 0))
        assert a.intersection(b).is_equal(Vector(1, 1))
        c = LineSegment(Vector(3, 3), Vector(4, 0))
        assert not a.intersects(c)

    def test_segment_split(self):
        s = LineSegment(Vector(0, 0, -1), Vector(0, 0, 3))
        front, back = s.split(XY)
        assert front == LineSegment(Vector(0, 0, 0), Vector(0, 0, 3))
        assert back == LineSegment(Vector(0, 0, -1), Vector(0, 0, 0))
        assert s.split(Plane(UNIT_Z, -5)) == (s, None)

    def test_segment_transformed(self):
        s = LineSegment(Vector(0, 0), Vector(1, 0))
        moved = s.transformed(Transform.translation((0, 0, 1)))
        assert moved == LineSegment(Vector(0, 0, 1), Vector(1, 0, 1))


class TestBounds:

    def test_from_points(self):
        b = Bounds.from_points([Vector(1, 2, 3), Vector(-1, 5, 0)])
        assert b.min == Vector(-1, 2, 0)
        assert b.max == Vector(1, 5, 3)
        assert b.size == Vector(2, 3, 3)
        assert b.center == Vector(0, 3.5, 1.5)
        assert len(b.corners) == 8

    def test_empty(self):
        assert EMPTY.is_empty
        assert Bounds.from_points([]).is_empty
        assert EMPTY.size == Vector()
        b = Bounds(Vector(0, 0, 0), Vector(1, 1, 1))
        assert EMPTY.union(b) == b
        assert b.union(EMPTY) == b
        assert not EMPTY.intersects(b)

    def test_intersection(self):
        a = Bounds(Vector(0, 0, 0), Vector(2, 2, 2))
        b = Bounds(Vector(1, 1, 1), Vector(3, 3, 3))
        c = Bounds(Vector(5, 5, 5), Vector(6, 6, 6))
        assert a.intersection(b) == Bounds(Vector(1, 1, 1), Vector(2, 2, 2))
        assert a.intersection(c).is_empty
        assert a.intersects(b)
        assert not a.intersects(c)
        touching = Bounds(Vector(2, 0, 0), Vector(3, 1, 1))
        assert a.intersects(touching)

    def test_containment_and_inset(self):
        a = Bounds(Vector(0, 0, 0), Vector(2, 2, 2))
        assert a.contains_point(Vector(2, 2, 2))
        assert not a.contains_point(Vector(2.1, 0, 0))
        assert a.contains(Bounds(Vector(0.5, 0.5, 0.5), Vector(1, 1, 1)))
        assert a.inset(0.5) == Bounds(Vector(0.5, 0.5, 0.5), Vector(1.5, 1.5, 1.5))
        assert a.inset(-1).contains_point(Vector(-1, -1, -1))

    def test_compare(self):
        a = Bounds(Vector(0, 0, 0), Vector(1, 1, 1))
        assert a.compare(Plane(UNIT_Z, -1)) == PlaneComparison.FRONT
        assert a.compare(Plane(UNIT_Z, 2)) == PlaneComparison.BACK
        assert a.compare(Plane(UNIT_Z, 0.5)) == PlaneComparison.SPANNING

    def test_transformed(self):
        a = Bounds(Vector(0, 0, 0), Vector(1, 1, 1))
        moved = a.transformed(Transform.translation((1, 0, 0)))
        assert moved == Bounds(Vector(1, 0, 0), Vector(2, 1, 1))
