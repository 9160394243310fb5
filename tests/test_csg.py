import logging

import pytest

from polycsg import csg
from polycsg.bounds import Bounds
from polycsg.mesh import Mesh
from polycsg.plane import Plane
from polycsg.shapes import cube, sphere
from polycsg.vector import UNIT_X, UNIT_Z, Vector


def _a():
    return cube()


def _b():
    return cube().translated((0.5, 0, 0))


def _within(inner: Bounds, outer: Bounds) -> bool:
    return outer.contains(inner, 1e-6)


class TestClosure:

    def test_subtract_bounds(self):
        a, b = _a(), _b()
        assert _within(a.subtract(b).bounds, a.bounds)

    def test_union_bounds(self):
        a, b = _a(), _b()
        assert a.union(b).bounds.is_equal(a.bounds.union(b.bounds))

    def test_intersect_bounds(self):
        a, b = _a(), _b()
        assert _within(a.intersect(b).bounds, a.bounds.intersection(b.bounds))

    def test_intersect_example(self):
        result = cube(size=1).intersect(cube(size=1).translated([0.5, 0, 0]))
        assert result.bounds.min.is_equal(Vector(0, -0.5, -0.5))
        assert result.bounds.max.is_equal(Vector(0.5, 0.5, 0.5))


class TestIdentities:

    def test_self_subtract_is_empty(self):
        a = _a()
        assert len(a.subtract(a).polygons) == 0

    def test_self_union_keeps_bounds(self):
        a = _a()
        assert a.union(a).bounds.is_equal(a.bounds)
        assert a.union(a).volume == pytest.approx(1.0)

    def test_self_xor_is_empty(self):
        a = _a()
        assert a.xor(a).is_empty

    def test_empty_operands(self):
        a = _a()
        empty = Mesh()
        assert a.union(empty) == a
        assert empty.union(a) == a
        assert a.subtract(empty) == a
        assert empty.subtract(a) == empty
        assert a.intersect(empty).is_empty
        assert a.xor(empty) == a
        assert a.stencil(empty) == a


class TestVolumes:

    def test_union(self):
        result = _a().union(_b())
        assert result.volume == pytest.approx(1.5)
        assert result.contains_point(Vector(0.9, 0, 0))
        assert result.contains_point(Vector(-0.4, 0, 0))

    def test_subtract(self):
        result = _a().subtract(_b())
        assert result.volume == pytest.approx(0.5)
        assert result.bounds.max.x == pytest.approx(0.0)
        assert not result.contains_point(Vector(0.25, 0, 0))

    def test_intersect(self):
        result = _a().intersect(_b())
        assert result.volume == pytest.approx(0.5)
        assert result.contains_point(Vector(0.25, 0, 0))
        assert not result.contains_point(Vector(-0.25, 0, 0))

    def test_xor(self):
        result = _a().xor(_b())
        assert result.volume == pytest.approx(1.0)
        assert result.contains_point(Vector(-0.25, 0, 0))
        assert result.contains_point(Vector(0.75, 0, 0))
        assert not result.contains_point(Vector(0.25, 0.1, 0.1))

    def test_subtract_hole(self):
        block = cube(size=2)
        drill = cube(size=(0.5, 0.5, 4))
        result = block.subtract(drill)
        assert result.volume == pytest.approx(8.0 - 0.5)
        assert not result.contains_point(Vector(0, 0, 0))

    def test_touching_union_removes_shared_faces(self):
        result = cube().union(cube(center=(1, 0, 0)))
        assert result.volume == pytest.approx(2.0)
        assert result.surface_area == pytest.approx(10.0)


class TestShortCircuits:

    def test_disjoint_union_merges(self):
        far = cube(center=(5, 0, 0))
        result = _a().union(far)
        assert len(result) == 12
        assert len(result.submeshes) == 2

    def test_disjoint_subtract_returns_operand(self):
        a = _a()
        assert a.subtract(cube(center=(5, 0, 0))) is a

    def test_disjoint_intersect_is_empty(self):
        assert _a().intersect(cube(center=(5, 0, 0))).is_empty

    def test_polygons_outside_the_overlap_are_untouched(self):
        a = _a()
        result = a.union(_b())
        left = a.polygons[0]
        assert left in result.polygons


def test_subtract_sphere_is_deterministic():
    counts = set()
    results = []
    for _ in range(3):
        result = cube(size=0.8).subtract(sphere(slices=16))
        counts.add(len(result.polygons))
        results.append(result)
    assert len(counts) == 1
    assert results[0] == results[1] == results[2]
    assert not results[0].is_empty
    assert _within(results[0].bounds, cube(size=0.8).bounds)


def test_stencil():
    a = _a()
    paint = cube(material='paint').translated((0.5, 0, 0))
    result = a.stencil(paint)
    assert set(result.materials) == {None, 'paint'}
    assert result.volume == pytest.approx(1.0)
    assert result.surface_area == pytest.approx(6.0)
    painted = [p for p in result.polygons if p.material == 'paint']
    assert sum(p.area for p in painted) == pytest.approx(3.0)


class TestSplitAndClip:

    def test_split(self):
        front, back = _a().split(Plane(UNIT_X, 0))
        assert front.bounds.min.x == pytest.approx(0.0)
        assert back.bounds.max.x == pytest.approx(0.0)
        assert front.surface_area + back.surface_area == pytest.approx(6.0)

    def test_split_on_face_plane(self):
        a = _a()
        front, back = a.split(Plane(UNIT_Z, 0.5))
        assert front.is_empty
        assert back == a

    def test_coplanar_faces_follow_their_solid(self):
        stack = _a().merge(cube(center=(0, 0, 1)))
        front, back = csg.split(stack, Plane(UNIT_Z, 0.5))
        assert len(front) == 6 and len(back) == 6
        assert front.bounds.min.z == pytest.approx(0.5)
        assert back.bounds.max.z == pytest.approx(0.5)

    def test_clipped_with_fill(self):
        half = _a().clipped(Plane(UNIT_Z, 0), fill=True)
        assert half.volume == pytest.approx(0.5)
        assert half.is_watertight
        caps = [p for p in half.polygons if p.plane.normal.is_equal(-UNIT_Z)
                and abs(p.plane.w) < 1e-9]
        assert len(caps) == 1
        assert caps[0].material is None

    def test_clipped_fill_material(self):
        half = _a().clipped(Plane(UNIT_Z, 0), fill='cut')
        assert 'cut' in half.materials
        assert sum(p.area for p in half.polygons if p.material == 'cut') == pytest.approx(1.0)

    def test_clipped_away_entirely(self):
        assert _a().clipped(Plane(UNIT_Z, 5), fill=True).is_empty


class TestReductions:

    def test_union_all(self):
        meshes = [cube(), cube().translated((0.5, 0, 0)), cube(center=(5, 0, 0))]
        result = Mesh.union_all(meshes)
        assert result.volume == pytest.approx(2.5)
        assert len(result.submeshes) == 2
        assert Mesh.union_all([]).is_empty

    def test_difference(self):
        meshes = [cube(size=2), cube().translated((1, 0, 0)), cube().translated((-1, 0, 0))]
        assert Mesh.difference(meshes).volume == pytest.approx(8.0 - 1.0)
        assert Mesh.difference([]).is_empty

    def test_intersection(self):
        meshes = [_a(), _b(), cube().translated((0.25, 0.5, 0))]
        assert Mesh.intersection(meshes).volume == pytest.approx(0.25)

    def test_xor_all(self):
        assert Mesh.xor_all([_a(), _b()]).volume == pytest.approx(1.0)
        assert Mesh.xor_all([]).is_empty


def test_boolean_logging(caplog):
    with caplog.at_level(logging.DEBUG, logger='polycsg.csg'):
        _a().union(_b())
    assert 'union' in caplog.text
