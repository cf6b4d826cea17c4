from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from numerics import Matrix3x2, Vector2
from numerics.matrix3x2 import snapped_cos_sin
from tests._utils.asserts import all_nan, assert_close


def test_identity_and_zero() -> None:
    assert Matrix3x2.identity().is_identity
    assert not Matrix3x2().is_identity
    assert Matrix3x2.identity().translation == Vector2.zero()


def test_translation_property_round_trip() -> None:
    m = Matrix3x2.identity()
    m.translation = Vector2(3.0, -4.0)
    assert (m.m31, m.m32) == (3.0, -4.0)
    assert m.translation == Vector2(3.0, -4.0)
    assert Matrix3x2.create_translation(Vector2(3.0, -4.0)) == m
    assert Matrix3x2.create_translation(3.0, -4.0) == m


@pytest.mark.parametrize(
    "radians, expected",
    [
        (0.0, (1.0, 0.0)),
        (math.pi / 2, (0.0, 1.0)),
        (math.pi, (-1.0, 0.0)),
        (-math.pi / 2, (0.0, -1.0)),
        (3 * math.pi / 2, (0.0, -1.0)),
        (2 * math.pi + 1e-6, (1.0, 0.0)),
    ],
)
def test_rotation_snaps_axis_aligned_angles(radians, expected) -> None:
    c, s = snapped_cos_sin(radians)
    assert (float(c), float(s)) == expected


def test_rotation_quarter_turn_is_exact() -> None:
    m = Matrix3x2.create_rotation(math.pi / 2)
    assert m == Matrix3x2(0.0, 1.0, -1.0, 0.0, 0.0, 0.0)
    assert Vector2.transform(Vector2(1.0, 0.0), m) == Vector2(0.0, 1.0)


def test_rotation_off_axis_uses_trig() -> None:
    m = Matrix3x2.create_rotation(0.5)
    assert m.m11 == np.float32(math.cos(0.5))
    assert m.m12 == np.float32(math.sin(0.5))


def test_rotation_about_center_keeps_center_fixed() -> None:
    c = Vector2(3.0, -2.0)
    m = Matrix3x2.create_rotation(0.7, c)
    assert_close(Vector2.transform(c, m), c, atol=1e-5)


@pytest.mark.parametrize(
    "args, expected",
    [
        ((2.0,), (2.0, 0.0, 0.0, 2.0, 0.0, 0.0)),
        ((2.0, 3.0), (2.0, 0.0, 0.0, 3.0, 0.0, 0.0)),
        ((Vector2(2.0, 3.0),), (2.0, 0.0, 0.0, 3.0, 0.0, 0.0)),
        ((2.0, Vector2(1.0, 1.0)), (2.0, 0.0, 0.0, 2.0, -1.0, -1.0)),
        ((2.0, 3.0, Vector2(1.0, 1.0)), (2.0, 0.0, 0.0, 3.0, -1.0, -2.0)),
        ((Vector2(2.0, 3.0), Vector2(1.0, 1.0)), (2.0, 0.0, 0.0, 3.0, -1.0, -2.0)),
    ],
)
def test_create_scale_forms(args, expected) -> None:
    assert Matrix3x2.create_scale(*args) == Matrix3x2(*expected)


def test_scale_about_center_keeps_center_fixed() -> None:
    c = Vector2(5.0, 7.0)
    assert Vector2.transform(c, Matrix3x2.create_scale(2.0, 3.0, c)) == c


def test_skew() -> None:
    m = Matrix3x2.create_skew(0.5, 0.0)
    assert m.m21 == np.float32(math.tan(0.5))
    assert m.m12 == 0.0
    m2 = Matrix3x2.create_skew(0.0, 0.25, Vector2(2.0, 0.0))
    assert m2.m32 == np.float32(-2.0) * np.float32(math.tan(0.25))


def test_determinant_and_invert() -> None:
    m = Matrix3x2.multiply(Matrix3x2.create_scale(2.0, 4.0), Matrix3x2.create_translation(1.0, 2.0))
    assert m.get_determinant() == np.float32(8.0)
    ok, inv = Matrix3x2.invert(m)
    assert ok
    assert_close(m * inv, Matrix3x2.identity())


def test_invert_singular_returns_nan(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="numerics.matrix3x2")
    ok, inv = Matrix3x2.invert(Matrix3x2(1.0, 2.0, 2.0, 4.0, 5.0, 6.0))
    assert ok is False
    assert all_nan(inv)
    assert "singular" in caplog.text


def test_multiply_applies_left_then_right() -> None:
    t = Matrix3x2.create_translation(1.0, 0.0)
    r = Matrix3x2.create_rotation(math.pi / 2)
    # 平行移動してから回転
    assert Vector2.transform(Vector2(1.0, 0.0), t * r) == Vector2(0.0, 2.0)
    # 回転してから平行移動
    assert Vector2.transform(Vector2(1.0, 0.0), r * t) == Vector2(1.0, 1.0)


def test_arithmetic_operators() -> None:
    a = Matrix3x2(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    b = Matrix3x2.identity()
    assert a + b == Matrix3x2(2.0, 2.0, 3.0, 5.0, 5.0, 6.0)
    assert a - a == Matrix3x2()
    assert -a == Matrix3x2(-1.0, -2.0, -3.0, -4.0, -5.0, -6.0)
    assert a * 2 == Matrix3x2(2.0, 4.0, 6.0, 8.0, 10.0, 12.0)
    assert Matrix3x2.lerp(Matrix3x2(), a, 0.5) == Matrix3x2(0.5, 1.0, 1.5, 2.0, 2.5, 3.0)
    assert a * Matrix3x2.identity() == a


def test_equality_hash_text() -> None:
    a = Matrix3x2(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    assert hash(a) == hash(Matrix3x2(1.0, 2.0, 3.0, 4.0, 5.0, 6.0))
    assert a.equals(Matrix3x2(1.0, 2.0, 3.0, 4.0, 5.0, 6.0))
    assert str(Matrix3x2.identity()) == "{ {M11:1 M12:0} {M21:0 M22:1} {M31:0 M32:0} }"
    assert str(a) == "{ {M11:1 M12:2} {M21:3 M22:4} {M31:5 M32:6} }"
