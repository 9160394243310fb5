import pytest

from polycsg.bounds import Bounds
from polycsg.color import RED
from polycsg.mesh import Mesh, mesh
from polycsg.plane import XY, Plane, YZ
from polycsg.polygon import polygon
from polycsg.shapes import cube
from polycsg.tessellation import MergePolicy
from polycsg.transform import Rotation
from polycsg.vector import UNIT_Z, Vector


def _t_junction_cube():
    """unit cube whose top face is split in two, leaving T-junctions"""
    base = cube()
    halves = [
        polygon([(-0.5, -0.5, 0.5), (0, -0.5, 0.5), (0, 0.5, 0.5), (-0.5, 0.5, 0.5)]),
        polygon([(0, -0.5, 0.5), (0.5, -0.5, 0.5), (0.5, 0.5, 0.5), (0, 0.5, 0.5)]),
    ]
    return Mesh(base.polygons[:5] + tuple(halves))


class TestBasics:

    def test_cube_measures(self):
        c = cube()
        assert len(c) == 6
        assert c.bounds.is_equal(Bounds(Vector(-0.5, -0.5, -0.5), Vector(0.5, 0.5, 0.5)))
        assert c.volume == pytest.approx(1.0)
        assert c.surface_area == pytest.approx(6.0)
        assert len(c.edges) == 12

    def test_empty_mesh(self):
        e = Mesh.empty()
        assert e.is_empty
        assert e.bounds.is_empty
        assert not e.is_known_convex
        assert not e.is_actually_convex
        assert e.submeshes == []
        assert e.volume == 0

    def test_constructor_rejects_non_polygons(self):
        with pytest.raises(TypeError):
            Mesh([[(0, 0), (1, 0), (0, 1)]])

    def test_mesh_factory_validates_loops(self):
        m = mesh([[(0, 0), (1, 0), (0, 1)], [(0, 0), (1, 0), (2, 0)]], material='x')
        assert len(m) == 1
        assert m.materials == ['x']

    def test_equality(self):
        assert cube() == cube()
        assert cube() != cube(size=2)
        assert hash(cube()) == hash(cube())


class TestConvexity:

    def test_known_and_actual(self):
        c = cube()
        assert c.is_known_convex
        assert c.is_actually_convex

    def test_actual_convexity_of_untagged_mesh(self):
        c = Mesh(cube().polygons)
        assert not c.is_known_convex
        assert c.is_actually_convex

    def test_open_mesh_is_not_convex(self):
        open_box = Mesh(cube().polygons[:5])
        assert not open_box.is_actually_convex

    def test_concave_mesh(self):
        l_shape = cube().union(cube(center=(1, 0, 0))).union(cube(center=(0, 1, 0)))
        assert not l_shape.is_actually_convex


class TestEdges:

    def test_watertight_cube(self):
        c = cube()
        assert c.is_watertight
        assert c.hole_edges == []

    def test_open_box_holes(self):
        open_box = Mesh(cube().polygons[:5])
        assert not open_box.is_watertight
        assert len(open_box.hole_edges) == 4

    def test_edges_intersecting(self):
        crossing = cube().edges_intersecting(XY)
        assert len(crossing) == 4
        assert all(e.start.z * e.end.z < 0 for e in crossing)

    def test_make_watertight(self):
        broken = _t_junction_cube()
        assert not broken.is_watertight
        fixed = broken.make_watertight()
        assert fixed.is_watertight
        assert fixed.volume == pytest.approx(1.0)
        assert len(fixed.hole_edges) <= len(broken.hole_edges)
        assert fixed.make_watertight() == fixed

    def test_triangulate_keeps_repaired_mesh_closed(self):
        fixed = _t_junction_cube().make_watertight()
        tris = fixed.triangulate()
        assert tris.is_watertight
        assert tris.volume == pytest.approx(1.0)

    def test_make_watertight_leaves_good_meshes_alone(self):
        c = cube()
        assert c.make_watertight() is c
        open_box = Mesh(cube().polygons[:5])
        assert len(open_box.make_watertight().hole_edges) == 4


class TestPartition:

    def test_submeshes(self):
        pair = cube().merge(cube(center=(3, 0, 0), material=RED))
        parts = pair.submeshes
        assert len(parts) == 2
        assert all(len(p) == 6 for p in parts)
        assert parts[1].materials == [RED]
        c = cube()
        assert c.submeshes == [c]

    def test_polygons_by_material(self):
        pair = cube(material='a').merge(cube(center=(3, 0, 0), material='b'))
        groups = pair.polygons_by_material()
        assert list(groups) == ['a', 'b']
        assert len(groups['b']) == 6
        assert pair.replacing('a', 'c').materials == ['c', 'b']
        assert pair.with_material(RED).materials == [RED]


class TestTransforms:

    def test_translated(self):
        moved = cube().translated((1, 2, 3))
        assert moved.bounds.center.is_equal(Vector(1, 2, 3))
        assert moved.is_known_convex

    def test_scaled(self):
        assert cube().scaled((2, 1, 1)).volume == pytest.approx(2.0)
        mirrored = cube().scaled((-1, 1, 1))
        assert mirrored.volume == pytest.approx(1.0)
        assert mirrored.is_watertight

    def test_rotated(self):
        turned = cube().rotated(Rotation.roll(0.5))
        assert turned.volume == pytest.approx(1.0)
        assert turned.contains_point(Vector(0, 0, 0))

    def test_reflected(self):
        moved = cube().translated((2, 0, 0))
        mirror = moved.reflected(YZ)
        assert mirror.bounds.center.is_equal(Vector(-2, 0, 0))
        assert mirror.volume == pytest.approx(1.0)

    def test_inverted(self):
        inside_out = cube().inverted()
        assert inside_out.volume == pytest.approx(-1.0)
        assert inside_out.inverted() == cube()

    def test_without_texcoords(self):
        bare = cube().without_texcoords()
        assert not any(p.has_texcoords for p in bare.polygons)
        assert all(p.has_texcoords for p in cube().polygons)


class TestTessellation:

    def test_triangulate(self):
        tris = cube().triangulate()
        assert len(tris) == 12
        assert tris.is_watertight
        assert tris.volume == pytest.approx(1.0)

    def test_detessellate(self):
        faces = cube().triangulate().detessellate()
        assert len(faces) == 6
        assert faces.volume == pytest.approx(1.0)

    def test_detessellate_respects_materials(self):
        tris = cube().triangulate()
        painted = Mesh([p.with_material(i % 2) for i, p in enumerate(tris.polygons)])
        assert len(painted.detessellate()) == 12
        assert len(painted.detessellate(policy=MergePolicy.GEOMETRIC)) == 6

    def test_tessellate(self):
        assert len(cube().tessellate(3)) == 12


def test_contains_point():
    c = cube()
    assert c.contains_point((0, 0, 0))
    assert c.contains_point((0.5, 0.1, 0.1))
    assert not c.contains_point((0.6, 0, 0))
    assert not Mesh().contains_point((0, 0, 0))


def test_caches_are_stable():
    c = cube()
    assert c.bsp is c.bsp
    assert c.bounds is c.bounds
    assert c.is_watertight == c.is_watertight


def test_clipped_surface_keeps_plane_side():
    half = cube().clipped(Plane(UNIT_Z, 0))
    assert half.bounds.min.z == pytest.approx(0.0)
    assert half.surface_area == pytest.approx(3.0)
