import pytest

from polycsg.color import RED
from polycsg.vector import UNIT_Z, Vector
from polycsg.vertex import Vertex
from polycsg.vertexset import VertexSet


def test_rejects_bad_precision():
    with pytest.raises(ValueError):
        VertexSet(0)


def test_insert_welds_near_duplicates():
    welder = VertexSet(1e-6)
    a = Vertex(Vector(1, 2, 3))
    b = Vertex(Vector(1 + 1e-7, 2, 3 - 1e-7))
    assert welder.insert(a) is a
    assert welder.insert(b) is a
    assert len(welder) == 1


def test_insert_snaps_position_but_keeps_other_attributes():
    welder = VertexSet(1e-6)
    a = Vertex(Vector(0, 0, 0), UNIT_Z)
    b = Vertex(Vector(5e-7, 0, 0), -UNIT_Z, color=RED)
    welder.insert(a)
    welded = welder.insert(b)
    assert welded.position == a.position
    assert welded.normal == -UNIT_Z
    assert welded.color == RED
    assert len(welder) == 2


def test_distinct_positions_are_kept():
    welder = VertexSet(1e-6)
    welder.insert(Vertex(Vector(0, 0, 0)))
    far = Vertex(Vector(1e-3, 0, 0))
    assert welder.insert(far) is far
    assert welder.find(Vector(1e-3, 0, 0)) is far
    assert welder.find(Vector(5, 5, 5)) is None


def test_matching_across_cell_boundaries():
    welder = VertexSet(1e-3)
    stored = welder.insert_position(Vector(0.9999e-3, 0, 0))
    assert welder.insert_position(Vector(1.0001e-3, 0, 0)) == stored


def test_earliest_insert_wins():
    welder = VertexSet(1e-3)
    first = welder.insert_position(Vector(0, 0, 0))
    welder._store(Vertex(Vector(5e-4, 0, 0)))
    assert welder.insert_position(Vector(2.5e-4, 0, 0)) == first
