import math

import pytest

from polycsg.transform import IDENTITY, Angle, Rotation, Transform
from polycsg.vector import UNIT_X, UNIT_Y, UNIT_Z, ZERO, Vector


def test_angle_units():
    a = Angle.from_degrees(90)
    assert a.radians == pytest.approx(math.pi / 2)
    assert a.degrees == pytest.approx(90)
    assert (a + a).degrees == pytest.approx(180)
    assert (a * 2 - a).degrees == pytest.approx(90)
    assert a.sin == pytest.approx(1.0)


def test_axis_angle_rotation():
    r = Rotation.roll(math.pi / 2)
    assert r.apply(UNIT_X).is_equal(UNIT_Y)
    r = Rotation.axis_angle((0, 0, 1), Angle.from_degrees(90))
    assert r.apply(UNIT_X).is_equal(UNIT_Y)
    assert Rotation.pitch(math.pi / 2).apply(UNIT_Y).is_equal(UNIT_Z)
    assert Rotation.yaw(math.pi / 2).apply(UNIT_Z).is_equal(UNIT_X)


def test_zero_axis_gives_none():
    assert Rotation.axis_angle((0, 0, 0), 1.0) is None


def test_composition_and_inverse():
    a = Rotation.roll(0.3)
    b = Rotation.pitch(1.1)
    v = Vector(1, 2, 3)
    assert (a * b).apply(v).is_equal(a.apply(b.apply(v)))
    assert (a * a.inverted()).is_identity
    assert IDENTITY.is_identity


def test_between():
    r = Rotation.between(UNIT_X, UNIT_Z)
    assert r.apply(UNIT_X).is_equal(UNIT_Z)
    assert Rotation.between(UNIT_Y, UNIT_Y) is IDENTITY
    flipped = Rotation.between(UNIT_X, -UNIT_X)
    assert flipped.apply(UNIT_X).is_equal(-UNIT_X)
    assert Rotation.between((0, 0, 5), (3, 0, 0)).apply(UNIT_Z).is_equal(UNIT_X)
    with pytest.raises(ValueError):
        Rotation.between(ZERO, UNIT_X)


def test_transform_order_is_scale_rotate_translate():
    t = Transform(offset=Vector(10, 0, 0), rotation=Rotation.roll(math.pi / 2),
                  scale=Vector(2, 1, 1))
    assert t.apply(UNIT_X).is_equal(Vector(10, 2, 0))


def test_flipping_and_normals():
    assert not Transform.scaling(2).is_flipping
    assert Transform.scaling((-1, 1, 1)).is_flipping
    assert not Transform.scaling((-1, -1, 1)).is_flipping
    t = Transform.scaling((2, 1, 1))
    n = t.apply_to_normal(Vector(1, 1, 0).normalized())
    assert n.is_normalized
    assert n.is_equal(Vector(1, 2, 0).normalized())
    assert Transform.scaling((0, 1, 1)).apply_to_normal(UNIT_X) == Vector()
    assert Transform.translation((1, 2, 3)).apply(Vector()) == Vector(1, 2, 3)
