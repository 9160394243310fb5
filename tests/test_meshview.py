import numpy as np
import pytest

from polycsg.color import RED
from polycsg.mesh import Mesh, mesh
from polycsg.meshview import MeshBuffers, mesh_buffers, mesh_from_buffers, mesh_triangles
from polycsg.polygon import Polygon, polygon
from polycsg.shapes import cube
from polycsg.vertex import Vertex
from polycsg.vector import Vector


class TestBuffers:

    def test_cube_layout(self):
        b = mesh_buffers(cube())
        assert b.vertex_count == 24
        assert b.face_count == 6
        assert b.positions.shape == (24, 3)
        assert b.normals.shape == (24, 3)
        assert b.texcoords.shape == (24, 2)
        assert b.colors is None
        assert b.indices.shape == (24,)
        assert list(b.face_vertex_counts) == [4] * 6
        assert b.materials == [None] * 6

    def test_shared_rows(self):
        tris = mesh([[(0, 0), (1, 0), (0, 1)], [(1, 0), (1, 1), (0, 1)]])
        b = tris.buffers()
        assert b.vertex_count == 4
        assert list(b.indices) == [0, 1, 2, 1, 3, 2]

    def test_missing_normals_use_face_normal(self):
        p = Polygon([Vertex(Vector(0, 0)), Vertex(Vector(1, 0)), Vertex(Vector(0, 1))])
        b = mesh_buffers(Mesh([p]))
        np.testing.assert_allclose(b.normals, [[0, 0, 1]] * 3)

    def test_colors(self):
        verts = [Vertex(Vector(0, 0), color=RED), Vertex(Vector(1, 0)), Vertex(Vector(0, 1))]
        b = mesh_buffers(Mesh([polygon(verts)]))
        assert b.colors.shape == (3, 4)
        np.testing.assert_allclose(b.colors[0], [1, 0, 0, 1])
        np.testing.assert_allclose(b.colors[1], [1, 1, 1, 1])

    def test_empty(self):
        b = mesh_buffers(Mesh())
        assert b.vertex_count == 0
        assert b.face_count == 0
        assert mesh_from_buffers(b).is_empty


class TestFromBuffers:

    def test_round_trip(self):
        original = cube(material='wood')
        assert Mesh.from_buffers(original.buffers()) == original

    def test_bad_faces_are_dropped(self):
        b = mesh_buffers(cube())
        indices = b.indices.copy()
        indices[0] = 99
        broken = MeshBuffers(b.positions, b.normals, b.texcoords, None,
                             b.face_vertex_counts, indices, b.materials)
        assert len(mesh_from_buffers(broken)) == 5

    def test_optional_arrays(self):
        b = MeshBuffers(np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float),
                        None, None, None, np.array([3]), np.array([0, 1, 2]))
        result = mesh_from_buffers(b)
        assert len(result) == 1
        assert result.polygons[0].vertices[0].normal == Vector(0, 0, 1)


def test_mesh_triangles():
    tris = list(mesh_triangles(cube()))
    assert len(tris) == 12
    for normal, a, b, c in tris:
        assert np.linalg.norm(normal) == pytest.approx(1.0)
        edge = np.cross(np.subtract(b, a), np.subtract(c, a))
        assert np.dot(edge, normal) > 0
