from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from numerics import (
    ArgumentOutOfRangeError,
    Matrix3x2,
    Matrix4x4,
    Plane,
    Quaternion,
    Vector2,
    Vector3,
    Vector4,
)
from tests._utils.asserts import all_nan, assert_close, assert_close_up_to_sign


def _sample() -> Matrix4x4:
    return Matrix4x4(
        1.0, 2.0, 3.0, 4.0,
        5.0, 6.0, 7.0, 8.0,
        9.0, 10.0, 11.0, 12.0,
        13.0, 14.0, 15.0, 16.0,
    )  # fmt: skip


def _affine() -> Matrix4x4:
    q = Quaternion.create_from_axis_angle(Vector3.normalize(Vector3(1.0, 1.0, 0.0)), 0.6)
    return (
        Matrix4x4.create_scale(2.0, 3.0, 4.0)
        * Matrix4x4.create_from_quaternion(q)
        * Matrix4x4.create_translation(1.0, -2.0, 3.0)
    )


# ── 基本 ──────────────────────────────────────────
def test_identity_zero_and_translation() -> None:
    assert Matrix4x4.identity().is_identity
    assert not Matrix4x4().is_identity
    m = Matrix4x4.identity()
    m.translation = Vector3(1.0, 2.0, 3.0)
    assert (m.m41, m.m42, m.m43) == (1.0, 2.0, 3.0)
    assert m == Matrix4x4.create_translation(Vector3(1.0, 2.0, 3.0))
    assert m.translation == Vector3(1.0, 2.0, 3.0)


def test_array_round_trip() -> None:
    m = _sample()
    arr = m.to_array()
    assert arr.dtype == np.float32 and arr.shape == (16,)
    assert Matrix4x4.from_array(arr) == m
    with pytest.raises(ValueError):
        Matrix4x4.from_array(np.zeros(9))


def test_from_matrix3x2_embeds_xy_plane() -> None:
    m2 = Matrix3x2.create_rotation(0.3) * Matrix3x2.create_translation(2.0, 5.0)
    m4 = Matrix4x4.from_matrix3x2(m2)
    p = Vector2(1.5, -0.5)
    assert Vector2.transform(p, m4) == Vector2.transform(p, m2)
    assert m4.m33 == 1.0 and m4.m44 == 1.0


# ── 積/行列式/逆行列 ─────────────────────────────────
def test_multiply_identity_laws(accel) -> None:
    m = _sample()
    assert m * Matrix4x4.identity() == m
    assert Matrix4x4.identity() * m == m


def test_multiply_is_row_major_product(accel) -> None:
    a, b = _sample(), Matrix4x4.transpose(_sample())
    expected = a.to_array().reshape(4, 4).astype(np.float64) @ b.to_array().reshape(4, 4)
    np.testing.assert_allclose((a * b).to_array().reshape(4, 4), expected, rtol=1e-6)


def test_multiply_by_scalar() -> None:
    m = Matrix4x4.identity() * 3
    assert m == Matrix4x4(
        3.0, 0.0, 0.0, 0.0,
        0.0, 3.0, 0.0, 0.0,
        0.0, 0.0, 3.0, 0.0,
        0.0, 0.0, 0.0, 3.0,
    )  # fmt: skip


def test_determinant(accel) -> None:
    assert Matrix4x4.create_scale(2.0, 3.0, 4.0).get_determinant() == np.float32(24.0)
    assert _sample().get_determinant() == 0.0
    assert Matrix4x4.identity().get_determinant() == 1.0


def test_invert_round_trip(accel) -> None:
    m = _affine()
    ok, inv = Matrix4x4.invert(m)
    assert ok
    assert_close(m * inv, Matrix4x4.identity(), atol=1e-5)
    assert_close(inv * m, Matrix4x4.identity(), atol=1e-5)


def test_invert_singular(accel, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="numerics.matrix4x4")
    ok, inv = Matrix4x4.invert(Matrix4x4())
    assert ok is False
    assert all_nan(inv)
    assert "singular" in caplog.text


# ── 分解 ─────────────────────────────────────────
def test_decompose_recovers_components() -> None:
    q = Quaternion.create_from_axis_angle(Vector3.normalize(Vector3(1.0, 2.0, 3.0)), 1.1)
    m = (
        Matrix4x4.create_scale(2.0, 3.0, 4.0)
        * Matrix4x4.create_from_quaternion(q)
        * Matrix4x4.create_translation(5.0, 6.0, 7.0)
    )
    res = Matrix4x4.decompose(m)
    assert res.success
    assert_close(res.scale, (2.0, 3.0, 4.0), atol=1e-5)
    assert_close_up_to_sign(res.rotation, q)
    assert res.translation == Vector3(5.0, 6.0, 7.0)


def test_decompose_recompose(accel) -> None:
    m = _affine()
    success, scale, rotation, translation = Matrix4x4.decompose(m)
    assert success
    recomposed = (
        Matrix4x4.create_scale(scale)
        * Matrix4x4.create_from_quaternion(rotation)
        * Matrix4x4.create_translation(translation)
    )
    assert_close(recomposed, m, atol=1e-4)


def test_decompose_negative_scale() -> None:
    res = Matrix4x4.decompose(Matrix4x4.create_scale(-1.0, 1.0, 1.0))
    assert res.success
    assert res.scale == Vector3(-1.0, 1.0, 1.0)
    assert_close_up_to_sign(res.rotation, Quaternion.identity())


def test_decompose_zero_scale_axis_rebuilds_basis() -> None:
    res = Matrix4x4.decompose(Matrix4x4.create_scale(2.0, 0.0, 3.0))
    assert res.success
    assert res.scale == Vector3(2.0, 0.0, 3.0)
    assert_close_up_to_sign(res.rotation, Quaternion.identity())


def test_decompose_sheared_matrix_fails(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="numerics.matrix4x4")
    m = Matrix4x4.identity()
    m.m21 = np.float32(1.0)
    m.translation = Vector3(1.0, 2.0, 3.0)
    res = Matrix4x4.decompose(m)
    assert not res.success
    assert res.rotation.is_identity
    assert res.translation == Vector3(1.0, 2.0, 3.0)
    assert_close(res.scale, (1.0, math.sqrt(2.0), 1.0))
    assert "orthonormal" in caplog.text


# ── 生成: 回転/拡大縮小 ───────────────────────────────
def test_rotation_z_quarter_turn() -> None:
    m = Matrix4x4.create_rotation_z(math.pi / 2)
    assert_close(Vector3.transform(Vector3.unit_x(), m), (0.0, 1.0, 0.0))
    assert_close(Vector3.transform(Vector3.unit_y(), m), (-1.0, 0.0, 0.0))


@pytest.mark.parametrize(
    "factory, axis",
    [
        (Matrix4x4.create_rotation_x, Vector3.unit_x()),
        (Matrix4x4.create_rotation_y, Vector3.unit_y()),
        (Matrix4x4.create_rotation_z, Vector3.unit_z()),
    ],
)
def test_axis_rotations_agree_with_axis_angle_and_quaternion(factory, axis) -> None:
    angle = 0.9
    m = factory(angle)
    assert_close(Matrix4x4.create_from_axis_angle(axis, angle), m)
    q = Quaternion.create_from_axis_angle(axis, angle)
    assert_close(Matrix4x4.create_from_quaternion(q), m)


@pytest.mark.parametrize(
    "factory",
    [Matrix4x4.create_rotation_x, Matrix4x4.create_rotation_y, Matrix4x4.create_rotation_z],
)
def test_rotation_about_center_keeps_center_fixed(factory) -> None:
    c = Vector3(1.0, -2.0, 3.0)
    assert_close(Vector3.transform(c, factory(1.3, c)), c, atol=1e-5)


def test_yaw_pitch_roll_yaw_only() -> None:
    assert_close(Matrix4x4.create_from_yaw_pitch_roll(0.4, 0.0, 0.0),
                 Matrix4x4.create_rotation_y(0.4))


def test_create_scale_forms() -> None:
    c = Vector3(1.0, 2.0, 3.0)
    assert Matrix4x4.create_scale(2.0) == Matrix4x4.create_scale(Vector3(2.0))
    assert Matrix4x4.create_scale(2.0, 3.0, 4.0) == Matrix4x4.create_scale(Vector3(2.0, 3.0, 4.0))
    assert Vector3.transform(c, Matrix4x4.create_scale(2.0, c)) == c
    assert Vector3.transform(c, Matrix4x4.create_scale(2.0, 3.0, 4.0, c)) == c
    assert Vector3.transform(c, Matrix4x4.create_scale(Vector3(2.0, 3.0, 4.0), c)) == c


# ── 生成: 投影 ───────────────────────────────────
@pytest.mark.parametrize(
    "args, param",
    [
        ((0.0, 1.0, 1.0, 10.0), "field_of_view"),
        ((math.pi, 1.0, 1.0, 10.0), "field_of_view"),
        ((1.0, 1.0, 0.0, 10.0), "near_plane_distance"),
        ((1.0, 1.0, 1.0, -1.0), "far_plane_distance"),
        ((1.0, 1.0, 10.0, 1.0), "near_plane_distance"),
        ((1.0, 1.0, 5.0, 5.0), "near_plane_distance"),
    ],
)
def test_perspective_field_of_view_validation(args, param) -> None:
    with pytest.raises(ArgumentOutOfRangeError) as ei:
        Matrix4x4.create_perspective_field_of_view(*args)
    assert ei.value.param_name == param
    assert isinstance(ei.value, ValueError)


@pytest.mark.parametrize(
    "factory, args",
    [
        (Matrix4x4.create_perspective, (2.0, 2.0, 0.0, 10.0)),
        (Matrix4x4.create_perspective, (2.0, 2.0, 10.0, 1.0)),
        (Matrix4x4.create_perspective_off_center, (-1.0, 1.0, -1.0, 1.0, -1.0, 10.0)),
    ],
)
def test_perspective_variants_validate_planes(factory, args) -> None:
    with pytest.raises(ArgumentOutOfRangeError):
        factory(*args)


def test_perspective_values() -> None:
    m = Matrix4x4.create_perspective(2.0, 2.0, 1.0, 10.0)
    assert (m.m11, m.m22, m.m34, m.m44) == (1.0, 1.0, -1.0, 0.0)
    assert m.m33 == np.float32(10.0) / np.float32(-9.0)
    assert m.m43 == m.m33
    off = Matrix4x4.create_perspective_off_center(-1.0, 1.0, -1.0, 1.0, 1.0, 10.0)
    assert off == m


def test_perspective_infinite_far_plane() -> None:
    m = Matrix4x4.create_perspective_field_of_view(1.0, 1.5, 0.5, math.inf)
    assert m.m33 == -1.0
    assert m.m43 == -0.5
    assert m.m34 == -1.0


def test_perspective_field_of_view_maps_near_plane_to_zero_depth() -> None:
    m = Matrix4x4.create_perspective_field_of_view(math.pi / 3, 1.0, 1.0, 100.0)
    near = Vector4.transform(Vector3(0.0, 0.0, -1.0), m)
    far = Vector4.transform(Vector3(0.0, 0.0, -100.0), m)
    assert math.isclose(float(near.z / near.w), 0.0, abs_tol=1e-6)
    assert math.isclose(float(far.z / far.w), 1.0, abs_tol=1e-5)


def test_orthographic_is_unvalidated() -> None:
    m = Matrix4x4.create_orthographic(2.0, 4.0, 0.0, 1.0)
    assert (m.m11, m.m22, m.m33, m.m44) == (1.0, 0.5, -1.0, 1.0)
    assert Matrix4x4.create_orthographic_off_center(-1.0, 1.0, -2.0, 2.0, 0.0, 1.0) == m
    # 零幅でも例外にはならず inf 成分になる
    degenerate = Matrix4x4.create_orthographic(0.0, 1.0, 0.0, 1.0)
    assert np.isposinf(degenerate.m11)


# ── 生成: ビュー/ワールド/ビルボード ─────────────────────
def test_look_at_moves_target_onto_negative_z() -> None:
    m = Matrix4x4.create_look_at(Vector3(0.0, 0.0, 5.0), Vector3.zero(), Vector3.unit_y())
    assert_close(Vector3.transform(Vector3.zero(), m), (0.0, 0.0, -5.0))


def test_world_with_default_orientation_is_translation() -> None:
    p = Vector3(1.0, 2.0, 3.0)
    m = Matrix4x4.create_world(p, Vector3(0.0, 0.0, -1.0), Vector3.unit_y())
    assert m == Matrix4x4.create_translation(p)


def test_world_is_inverse_of_look_at() -> None:
    eye, target, up = Vector3(3.0, 2.0, 5.0), Vector3(0.0, 1.0, 0.0), Vector3.unit_y()
    view = Matrix4x4.create_look_at(eye, target, up)
    world = Matrix4x4.create_world(eye, target - eye, up)
    assert_close(world * view, Matrix4x4.identity(), atol=1e-5)


def test_billboard_faces_camera() -> None:
    m = Matrix4x4.create_billboard(
        Vector3.zero(), Vector3(0.0, 0.0, 5.0), Vector3.unit_y(), Vector3(0.0, 0.0, -1.0)
    )
    assert_close((m.m31, m.m32, m.m33), (0.0, 0.0, -1.0))
    assert_close((m.m21, m.m22, m.m23), (0.0, 1.0, 0.0))


def test_billboard_camera_on_object_uses_camera_forward() -> None:
    p = Vector3(1.0, 2.0, 3.0)
    m = Matrix4x4.create_billboard(p, p, Vector3.unit_y(), Vector3(0.0, 0.0, -1.0))
    assert m == Matrix4x4.create_translation(p)


def test_constrained_billboard() -> None:
    args = (Vector3.zero(), Vector3(0.0, 0.0, 5.0), Vector3.unit_y(), Vector3(0.0, 0.0, -1.0))
    m = Matrix4x4.create_constrained_billboard(*args, Vector3(0.0, 0.0, -1.0))
    assert_close(m, Matrix4x4.create_billboard(*args))


def test_constrained_billboard_axis_parallel_to_view() -> None:
    m = Matrix4x4.create_constrained_billboard(
        Vector3.zero(),
        Vector3(0.0, 5.0, 0.0),
        Vector3.unit_y(),
        Vector3(0.0, 0.0, -1.0),
        Vector3(0.0, 0.0, -1.0),
    )
    assert (m.m21, m.m22, m.m23) == (0.0, 1.0, 0.0)
    assert_close((m.m31, m.m32, m.m33), (0.0, 0.0, -1.0))
    assert_close((m.m11, m.m12, m.m13), (-1.0, 0.0, 0.0))


# ── 生成: 影/反射 ─────────────────────────────────
def test_shadow_projects_onto_plane() -> None:
    m = Matrix4x4.create_shadow(Vector3.unit_y(), Plane(0.0, 1.0, 0.0, 0.0))
    assert Vector3.transform(Vector3(1.0, 5.0, 2.0), m) == Vector3(1.0, 0.0, 2.0)


def test_reflection() -> None:
    m = Matrix4x4.create_reflection(Plane(0.0, 1.0, 0.0, 0.0))
    assert Vector3.transform(Vector3(1.0, 2.0, 3.0), m) == Vector3(1.0, -2.0, 3.0)
    # y = 1 の平面（法線は内部で正規化される）
    m2 = Matrix4x4.create_reflection(Plane(0.0, 2.0, 0.0, -2.0))
    assert_close(Vector3.transform(Vector3(0.0, 3.0, 0.0), m2), (0.0, -1.0, 0.0))


# ── 変換/算術/テキスト ─────────────────────────────────
def test_transform_by_quaternion_keeps_fourth_column(accel) -> None:
    q = Quaternion.create_from_axis_angle(Vector3.unit_z(), 0.5)
    p = Matrix4x4.create_perspective_field_of_view(1.0, 1.0, 1.0, 10.0)
    out = Matrix4x4.transform(p, q)
    assert (out.m14, out.m24, out.m34, out.m44) == (p.m14, p.m24, p.m34, p.m44)
    assert_close(Matrix4x4.transform(Matrix4x4.identity(), q), Matrix4x4.create_from_quaternion(q))


def test_transform_by_quaternion_rotates_translation_row(accel) -> None:
    quarter = Quaternion.create_from_axis_angle(Vector3.unit_z(), math.pi / 2)
    out = Matrix4x4.transform(Matrix4x4.create_translation(1.0, 0.0, 0.0), quarter)
    assert_close(out.translation, (0.0, 1.0, 0.0))
    assert out.m44 == np.float32(1.0)
    rot = Matrix4x4.create_rotation_z(math.pi / 2)
    expected = rot * Matrix4x4.create_translation(0.0, 1.0, 0.0)
    assert_close(out, expected)


def test_transpose_lerp_and_arithmetic() -> None:
    m = _sample()
    assert Matrix4x4.transpose(Matrix4x4.transpose(m)) == m
    assert Matrix4x4.transpose(m).m12 == m.m21
    assert Matrix4x4.lerp(Matrix4x4(), m, 1.0) == m
    assert Matrix4x4.lerp(Matrix4x4(), m, 0.5) == m * 0.5
    assert m - m == Matrix4x4()
    assert m + (-m) == Matrix4x4()
    assert Matrix4x4.add(m, m) == m * 2


def test_equality_hash_text() -> None:
    assert hash(_sample()) == hash(_sample())
    assert _sample().equals(_sample())
    assert not _sample().equals(Matrix4x4())
    text = str(Matrix4x4.identity())
    assert text == (
        "{ {M11:1 M12:0 M13:0 M14:0} {M21:0 M22:1 M23:0 M24:0}"
        " {M31:0 M32:0 M33:1 M34:0} {M41:0 M42:0 M43:0 M44:1} }"
    )
