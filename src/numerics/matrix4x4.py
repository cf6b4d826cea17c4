"""
どこで: `numerics.matrix4x4`
何を: 3D アフィン/射影変換行列 `Matrix4x4`。
      生成カーネル（平行移動/拡大縮小/回転/ビルボード/ルックアット/ワールド/透視・平行投影/影/反射）、
      行列式・逆行列（余因子展開）、転置、四元数による回転適用、そしてアフィン分解。
なぜ: 位置・姿勢・投影を 16 成分の値として合成/分解する中核のため。

規約:
- 行優先（M11..M44）、点は行ベクトルとして `p * M` で変換する。平行移動は 4 行目。
- 積/行列式/逆行列/回転適用は `_kernels` の共通カーネルを通す（加速フラグで numba 版を選ぶ）。
- 特異行列や分解不能は例外ではなく戻り値（成否フラグ + NaN/既定値）で伝える。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple, Optional, Tuple, Union

import numpy as np

from . import _kernels
from . import scalar as _s
from .errors import ArgumentOutOfRangeError
from .matrix3x2 import Matrix3x2
from .quaternion import Quaternion, rotation_terms
from .vector3 import Vector3

if TYPE_CHECKING:
    from .plane import Plane

logger = logging.getLogger(__name__)

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)

_FIELDS = tuple(f"m{r}{c}" for r in range(1, 5) for c in range(1, 5))

# ビルボード: 物体-カメラ間距離の二乗がこれ未満ならカメラ前方を使う
_BILLBOARD_EPSILON = np.float32(1e-4)
# 拘束ビルボード: 回転軸と視線がほぼ平行とみなす |cos| (≈ cos 3.4°)
_BILLBOARD_MIN_ANGLE = np.float32(0.998254657)
# 分解: 基底ベクトル長の縮退判定と、正規直交性の許容誤差
_DECOMPOSE_EPSILON = np.float32(1e-4)


class DecomposeResult(NamedTuple):
    """`Matrix4x4.decompose` の結果。

    `success` が False でも `scale` と `translation` は計算済み（`rotation` は恒等）。
    """

    success: bool
    scale: Vector3
    rotation: Quaternion
    translation: Vector3


class Matrix4x4:
    """4x4 行列（行優先 M11..M44、成分は `numpy.float32`）。

    Notes
    -----
    - `Matrix4x4()` は零行列。恒等行列は `Matrix4x4.identity()`（毎回新しい値）。
    - `translation` は読み書きできる（M41, M42, M43）。
    - 書き換えるとハッシュ値も変わる。set や dict のキーにした行列は変更しないこと。
    """

    __slots__ = _FIELDS

    def __init__(
        self,
        m11: Scalar = 0.0, m12: Scalar = 0.0, m13: Scalar = 0.0, m14: Scalar = 0.0,
        m21: Scalar = 0.0, m22: Scalar = 0.0, m23: Scalar = 0.0, m24: Scalar = 0.0,
        m31: Scalar = 0.0, m32: Scalar = 0.0, m33: Scalar = 0.0, m34: Scalar = 0.0,
        m41: Scalar = 0.0, m42: Scalar = 0.0, m43: Scalar = 0.0, m44: Scalar = 0.0,
    ) -> None:  # fmt: skip
        self.m11, self.m12, self.m13, self.m14 = (np.float32(v) for v in (m11, m12, m13, m14))
        self.m21, self.m22, self.m23, self.m24 = (np.float32(v) for v in (m21, m22, m23, m24))
        self.m31, self.m32, self.m33, self.m34 = (np.float32(v) for v in (m31, m32, m33, m34))
        self.m41, self.m42, self.m43, self.m44 = (np.float32(v) for v in (m41, m42, m43, m44))

    # ── 配列との相互変換 ───────────────────────────────
    def to_array(self) -> np.ndarray:
        """行優先の float32 配列（長さ 16）を返す。"""
        return np.array([getattr(self, n) for n in _FIELDS], dtype=np.float32)

    @classmethod
    def from_array(cls, values: Any) -> "Matrix4x4":
        """行優先 16 要素から生成する。"""
        arr = np.asarray(values, dtype=np.float32).reshape(-1)
        if arr.shape[0] != 16:
            raise ValueError(f"16 要素が必要です: {arr.shape[0]}")
        return cls(*arr)

    @classmethod
    def from_matrix3x2(cls, value: Matrix3x2) -> "Matrix4x4":
        """2D アフィン行列を XY 平面上の 4x4 へ埋め込む（M33 = M44 = 1）。"""
        return cls(
            value.m11, value.m12, 0.0, 0.0,
            value.m21, value.m22, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            value.m31, value.m32, 0.0, 1.0,
        )  # fmt: skip

    # ── 恒等/平行移動 ─────────────────────────────────
    @classmethod
    def identity(cls) -> "Matrix4x4":
        return cls(
            1.0, 0.0, 0.0, 0.0,
            0.0, 1.0, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0,
        )  # fmt: skip

    @property
    def is_identity(self) -> bool:
        return bool(
            self.m11 == 1.0 and self.m22 == 1.0 and self.m33 == 1.0 and self.m44 == 1.0
            and self.m12 == 0.0 and self.m13 == 0.0 and self.m14 == 0.0
            and self.m21 == 0.0 and self.m23 == 0.0 and self.m24 == 0.0
            and self.m31 == 0.0 and self.m32 == 0.0 and self.m34 == 0.0
            and self.m41 == 0.0 and self.m42 == 0.0 and self.m43 == 0.0
        )  # fmt: skip

    @property
    def translation(self) -> Vector3:
        return Vector3(self.m41, self.m42, self.m43)

    @translation.setter
    def translation(self, value: Vector3) -> None:
        self.m41 = value.x
        self.m42 = value.y
        self.m43 = value.z

    # ── 生成: ビルボード ───────────────────────────────
    @staticmethod
    def _facing(
        object_position: Vector3, camera_position: Vector3, camera_forward: Vector3
    ) -> Vector3:
        # カメラ → 物体の単位ベクトル。近すぎる場合はカメラ前方の逆向き
        d = Vector3(
            object_position.x - camera_position.x,
            object_position.y - camera_position.y,
            object_position.z - camera_position.z,
        )
        ls = d.length_squared()
        if ls < _BILLBOARD_EPSILON:
            return -camera_forward
        return Vector3.multiply(d, _s.ONE / _s.sqrt(ls))

    @staticmethod
    def create_billboard(
        object_position: Vector3,
        camera_position: Vector3,
        camera_up_vector: Vector3,
        camera_forward_vector: Vector3,
    ) -> "Matrix4x4":
        """物体位置を中心に、常にカメラを向く回転行列を生成する。"""
        z = Matrix4x4._facing(object_position, camera_position, camera_forward_vector)
        x = Vector3.normalize(Vector3.cross(camera_up_vector, z))
        y = Vector3.cross(z, x)
        p = object_position
        return Matrix4x4(
            x.x, x.y, x.z, 0.0,
            y.x, y.y, y.z, 0.0,
            z.x, z.y, z.z, 0.0,
            p.x, p.y, p.z, 1.0,
        )  # fmt: skip

    @staticmethod
    def create_constrained_billboard(
        object_position: Vector3,
        camera_position: Vector3,
        rotate_axis: Vector3,
        camera_forward_vector: Vector3,
        object_forward_vector: Vector3,
    ) -> "Matrix4x4":
        """指定軸まわりの回転だけでカメラを向くビルボード行列を生成する。

        視線が回転軸とほぼ平行なときは `object_forward_vector` を、それも平行なら
        固定軸（回転軸が Z に近ければ +X、そうでなければ -Z）を基準方向に使う。
        """
        face = Matrix4x4._facing(object_position, camera_position, camera_forward_vector)
        axis = rotate_axis
        d = Vector3.dot(rotate_axis, face)
        if _s.abs_(d) > _BILLBOARD_MIN_ANGLE:
            forward = object_forward_vector
            d = Vector3.dot(rotate_axis, forward)
            if _s.abs_(d) > _BILLBOARD_MIN_ANGLE:
                if _s.abs_(rotate_axis.z) > _BILLBOARD_MIN_ANGLE:
                    forward = Vector3(1.0, 0.0, 0.0)
                else:
                    forward = Vector3(0.0, 0.0, -1.0)
            right = Vector3.normalize(Vector3.cross(rotate_axis, forward))
            forward = Vector3.normalize(Vector3.cross(right, rotate_axis))
        else:
            right = Vector3.normalize(Vector3.cross(rotate_axis, face))
            forward = Vector3.normalize(Vector3.cross(right, axis))
        p = object_position
        return Matrix4x4(
            right.x, right.y, right.z, 0.0,
            axis.x, axis.y, axis.z, 0.0,
            forward.x, forward.y, forward.z, 0.0,
            p.x, p.y, p.z, 1.0,
        )  # fmt: skip

    # ── 生成: 平行移動/拡大縮小 ─────────────────────────
    @staticmethod
    def create_translation(
        position: Union[Vector3, Scalar],
        y_position: Optional[Scalar] = None,
        z_position: Optional[Scalar] = None,
    ) -> "Matrix4x4":
        """`create_translation(Vector3)` または `create_translation(x, y, z)`。"""
        if isinstance(position, Vector3):
            x, y, z = position.x, position.y, position.z
        else:
            if y_position is None or z_position is None:
                raise TypeError("create_translation(x, y, z) には 3 成分が必要です")
            x, y, z = position, y_position, z_position
        m = Matrix4x4.identity()
        m.m41, m.m42, m.m43 = np.float32(x), np.float32(y), np.float32(z)
        return m

    @staticmethod
    def create_scale(
        scale: Union[Vector3, Scalar],
        y_scale: Union[Vector3, Scalar, None] = None,
        z_scale: Optional[Scalar] = None,
        center_point: Optional[Vector3] = None,
    ) -> "Matrix4x4":
        """拡大縮小行列を生成する。

        受け付ける形:

        - `create_scale(s)` / `create_scale(s, center)`: 一様
        - `create_scale(sx, sy, sz)` / `create_scale(sx, sy, sz, center)`: 軸ごと
        - `create_scale(Vector3)` / `create_scale(Vector3, center)`: ベクトル指定

        中心点 c を与えると平行移動 `c * (1 - s)` が入る。
        """
        if isinstance(scale, Vector3):
            sx, sy, sz = scale.x, scale.y, scale.z
            center = y_scale
        elif y_scale is None or isinstance(y_scale, Vector3):
            sx = sy = sz = np.float32(scale)
            center = y_scale
        else:
            if z_scale is None:
                raise TypeError("create_scale(sx, sy, sz) には sz が必要です")
            sx, sy, sz = np.float32(scale), np.float32(y_scale), np.float32(z_scale)
            center = center_point
        m = Matrix4x4.identity()
        m.m11, m.m22, m.m33 = sx, sy, sz
        if center is not None:
            m.m41 = center.x * (_s.ONE - sx)
            m.m42 = center.y * (_s.ONE - sy)
            m.m43 = center.z * (_s.ONE - sz)
        return m

    # ── 生成: 回転 ───────────────────────────────────
    @staticmethod
    def create_rotation_x(radians: Scalar, center_point: Optional[Vector3] = None) -> "Matrix4x4":
        c = _s.cos(radians)
        s = _s.sin(radians)
        m = Matrix4x4.identity()
        m.m22, m.m23 = c, s
        m.m32, m.m33 = _s.ZERO - s, c
        if center_point is not None:
            cy, cz = center_point.y, center_point.z
            m.m42 = cy * (_s.ONE - c) + cz * s
            m.m43 = cz * (_s.ONE - c) - cy * s
        return m

    @staticmethod
    def create_rotation_y(radians: Scalar, center_point: Optional[Vector3] = None) -> "Matrix4x4":
        c = _s.cos(radians)
        s = _s.sin(radians)
        m = Matrix4x4.identity()
        m.m11, m.m13 = c, _s.ZERO - s
        m.m31, m.m33 = s, c
        if center_point is not None:
            cx, cz = center_point.x, center_point.z
            m.m41 = cx * (_s.ONE - c) - cz * s
            m.m43 = cz * (_s.ONE - c) + cx * s
        return m

    @staticmethod
    def create_rotation_z(radians: Scalar, center_point: Optional[Vector3] = None) -> "Matrix4x4":
        """Z 軸まわりの回転（X 軸が Y 軸へ向かう向きが正）。"""
        c = _s.cos(radians)
        s = _s.sin(radians)
        m = Matrix4x4.identity()
        m.m11, m.m12 = c, s
        m.m21, m.m22 = _s.ZERO - s, c
        if center_point is not None:
            cx, cy = center_point.x, center_point.y
            m.m41 = cx * (_s.ONE - c) + cy * s
            m.m42 = cy * (_s.ONE - c) - cx * s
        return m

    @staticmethod
    def create_from_axis_angle(axis: Vector3, angle: Scalar) -> "Matrix4x4":
        """単位長の `axis` まわりに `angle` ラジアン回転する行列。"""
        x, y, z = axis.x, axis.y, axis.z
        s = _s.sin(angle)
        c = _s.cos(angle)
        xx, yy, zz = x * x, y * y, z * z
        xy, xz, yz = x * y, x * z, y * z
        return Matrix4x4(
            xx + c * (_s.ONE - xx), xy - c * xy + s * z, xz - c * xz - s * y, 0.0,
            xy - c * xy - s * z, yy + c * (_s.ONE - yy), yz - c * yz + s * x, 0.0,
            xz - c * xz + s * y, yz - c * yz - s * x, zz + c * (_s.ONE - zz), 0.0,
            0.0, 0.0, 0.0, 1.0,
        )  # fmt: skip

    @staticmethod
    def create_from_quaternion(quaternion: Quaternion) -> "Matrix4x4":
        """単位四元数から回転行列を生成する。"""
        q = quaternion
        xx, yy, zz = q.x * q.x, q.y * q.y, q.z * q.z
        xy = q.x * q.y
        wz = q.z * q.w
        zx = q.z * q.x
        wy = q.y * q.w
        yz = q.y * q.z
        wx = q.x * q.w
        two = np.float32(2.0)
        return Matrix4x4(
            _s.ONE - two * (yy + zz), two * (xy + wz), two * (zx - wy), 0.0,
            two * (xy - wz), _s.ONE - two * (zz + xx), two * (yz + wx), 0.0,
            two * (zx + wy), two * (yz - wx), _s.ONE - two * (yy + xx), 0.0,
            0.0, 0.0, 0.0, 1.0,
        )  # fmt: skip

    @staticmethod
    def create_from_yaw_pitch_roll(yaw: Scalar, pitch: Scalar, roll: Scalar) -> "Matrix4x4":
        q = Quaternion.create_from_yaw_pitch_roll(yaw, pitch, roll)
        return Matrix4x4.create_from_quaternion(q)

    # ── 生成: 投影 ───────────────────────────────────
    @staticmethod
    def _check_near_far(near_plane_distance: np.float32, far_plane_distance: np.float32) -> None:
        if near_plane_distance <= 0.0:
            raise ArgumentOutOfRangeError("near_plane_distance", float(near_plane_distance))
        if far_plane_distance <= 0.0:
            raise ArgumentOutOfRangeError("far_plane_distance", float(far_plane_distance))
        if near_plane_distance >= far_plane_distance:
            raise ArgumentOutOfRangeError("near_plane_distance", float(near_plane_distance))

    @staticmethod
    def _depth_terms(near: np.float32, far: np.float32) -> Tuple[np.float32, np.float32]:
        # far = +inf は遠平面なしの簡約形（M33 = -1）
        m33 = np.float32(-1.0) if np.isposinf(far) else far / (near - far)
        return m33, near * m33

    @staticmethod
    def create_perspective_field_of_view(
        field_of_view: Scalar,
        aspect_ratio: Scalar,
        near_plane_distance: Scalar,
        far_plane_distance: Scalar,
    ) -> "Matrix4x4":
        """視野角ベースの透視投影行列。

        Raises
        ------
        ArgumentOutOfRangeError
            `field_of_view` が (0, π) の外、`near_plane_distance <= 0`、
            `far_plane_distance <= 0`、`near_plane_distance >= far_plane_distance`。
            この順で検査し、`param_name` に違反した引数名を入れる。
        """
        fov = np.float32(field_of_view)
        near = np.float32(near_plane_distance)
        far = np.float32(far_plane_distance)
        if fov <= 0.0 or fov >= _s.PI:
            raise ArgumentOutOfRangeError("field_of_view", float(fov))
        Matrix4x4._check_near_far(near, far)
        with _s.ieee_semantics():
            y_scale = _s.ONE / _s.tan(fov * _s.HALF)
            x_scale = y_scale / np.float32(aspect_ratio)
            m33, m43 = Matrix4x4._depth_terms(near, far)
        return Matrix4x4(
            x_scale, 0.0, 0.0, 0.0,
            0.0, y_scale, 0.0, 0.0,
            0.0, 0.0, m33, -1.0,
            0.0, 0.0, m43, 0.0,
        )  # fmt: skip

    @staticmethod
    def create_perspective(
        width: Scalar, height: Scalar, near_plane_distance: Scalar, far_plane_distance: Scalar
    ) -> "Matrix4x4":
        """近平面での視体積の幅/高さによる透視投影行列（検査は視野角以外と同じ）。"""
        near = np.float32(near_plane_distance)
        far = np.float32(far_plane_distance)
        Matrix4x4._check_near_far(near, far)
        two_near = np.float32(2.0) * near
        with _s.ieee_semantics():
            m11 = two_near / np.float32(width)
            m22 = two_near / np.float32(height)
            m33, m43 = Matrix4x4._depth_terms(near, far)
        return Matrix4x4(
            m11, 0.0, 0.0, 0.0,
            0.0, m22, 0.0, 0.0,
            0.0, 0.0, m33, -1.0,
            0.0, 0.0, m43, 0.0,
        )  # fmt: skip

    @staticmethod
    def create_perspective_off_center(
        left: Scalar,
        right: Scalar,
        bottom: Scalar,
        top: Scalar,
        near_plane_distance: Scalar,
        far_plane_distance: Scalar,
    ) -> "Matrix4x4":
        near = np.float32(near_plane_distance)
        far = np.float32(far_plane_distance)
        Matrix4x4._check_near_far(near, far)
        l, r = np.float32(left), np.float32(right)  # noqa: E741
        b, t = np.float32(bottom), np.float32(top)
        two_near = np.float32(2.0) * near
        with _s.ieee_semantics():
            m = Matrix4x4(
                two_near / (r - l), 0.0, 0.0, 0.0,
                0.0, two_near / (t - b), 0.0, 0.0,
                (l + r) / (r - l), (t + b) / (t - b), 0.0, -1.0,
                0.0, 0.0, 0.0, 0.0,
            )  # fmt: skip
            m.m33, m.m43 = Matrix4x4._depth_terms(near, far)
        return m

    @staticmethod
    def create_orthographic(
        width: Scalar, height: Scalar, z_near_plane: Scalar, z_far_plane: Scalar
    ) -> "Matrix4x4":
        """平行投影行列。引数の検査は行わない（零幅などは inf/NaN 成分になる）。"""
        zn, zf = np.float32(z_near_plane), np.float32(z_far_plane)
        with _s.ieee_semantics():
            m = Matrix4x4.identity()
            m.m11 = np.float32(2.0) / np.float32(width)
            m.m22 = np.float32(2.0) / np.float32(height)
            m.m33 = _s.ONE / (zn - zf)
            m.m43 = zn / (zn - zf)
        return m

    @staticmethod
    def create_orthographic_off_center(
        left: Scalar,
        right: Scalar,
        bottom: Scalar,
        top: Scalar,
        z_near_plane: Scalar,
        z_far_plane: Scalar,
    ) -> "Matrix4x4":
        l, r = np.float32(left), np.float32(right)  # noqa: E741
        b, t = np.float32(bottom), np.float32(top)
        zn, zf = np.float32(z_near_plane), np.float32(z_far_plane)
        with _s.ieee_semantics():
            m = Matrix4x4.identity()
            m.m11 = np.float32(2.0) / (r - l)
            m.m22 = np.float32(2.0) / (t - b)
            m.m33 = _s.ONE / (zn - zf)
            m.m41 = (l + r) / (l - r)
            m.m42 = (t + b) / (b - t)
            m.m43 = zn / (zn - zf)
        return m

    # ── 生成: ビュー/ワールド ───────────────────────────
    @staticmethod
    def create_look_at(
        camera_position: Vector3, camera_target: Vector3, camera_up_vector: Vector3
    ) -> "Matrix4x4":
        """ビュー行列（右手系、カメラは -Z を向く）。"""
        z = Vector3.normalize(camera_position - camera_target)
        x = Vector3.normalize(Vector3.cross(camera_up_vector, z))
        y = Vector3.cross(z, x)
        p = camera_position
        tx = _s.ZERO - Vector3.dot(x, p)
        ty = _s.ZERO - Vector3.dot(y, p)
        tz = _s.ZERO - Vector3.dot(z, p)
        return Matrix4x4(
            x.x, y.x, z.x, 0.0,
            x.y, y.y, z.y, 0.0,
            x.z, y.z, z.z, 0.0,
            tx, ty, tz, 1.0,
        )  # fmt: skip

    @staticmethod
    def create_world(position: Vector3, forward: Vector3, up: Vector3) -> "Matrix4x4":
        """ワールド行列（ローカル -Z が `forward`、平行移動が `position`）。"""
        z = Vector3.normalize(-forward)
        x = Vector3.normalize(Vector3.cross(up, z))
        y = Vector3.cross(z, x)
        p = position
        return Matrix4x4(
            x.x, x.y, x.z, 0.0,
            y.x, y.y, y.z, 0.0,
            z.x, z.y, z.z, 0.0,
            p.x, p.y, p.z, 1.0,
        )  # fmt: skip

    # ── 生成: 影/反射 ─────────────────────────────────
    @staticmethod
    def create_shadow(light_direction: Vector3, plane: "Plane") -> "Matrix4x4":
        """`light_direction` からの平行光で `plane` へ投影する影行列。平面は内部で正規化する。"""
        from .plane import Plane

        p = Plane.normalize(plane)
        n, lt = p.normal, light_direction
        dot = n.x * lt.x + n.y * lt.y + n.z * lt.z
        a = _s.ZERO - n.x
        b = _s.ZERO - n.y
        c = _s.ZERO - n.z
        d = _s.ZERO - p.d
        return Matrix4x4(
            a * lt.x + dot, a * lt.y, a * lt.z, 0.0,
            b * lt.x, b * lt.y + dot, b * lt.z, 0.0,
            c * lt.x, c * lt.y, c * lt.z + dot, 0.0,
            d * lt.x, d * lt.y, d * lt.z, dot,
        )  # fmt: skip

    @staticmethod
    def create_reflection(value: "Plane") -> "Matrix4x4":
        """平面に関する鏡映行列。平面は内部で正規化する。"""
        from .plane import Plane

        p = Plane.normalize(value)
        x, y, z = p.normal.x, p.normal.y, p.normal.z
        minus_two = np.float32(-2.0)
        a, b, c = minus_two * x, minus_two * y, minus_two * z
        return Matrix4x4(
            a * x + _s.ONE, b * x, c * x, 0.0,
            a * y, b * y + _s.ONE, c * y, 0.0,
            a * z, b * z, c * z + _s.ONE, 0.0,
            a * p.d, b * p.d, c * p.d, 1.0,
        )  # fmt: skip

    # ── 行列式/逆行列 ─────────────────────────────────
    def get_determinant(self) -> np.float32:
        """第 1 行の余因子展開による行列式。"""
        return np.float32(_kernels.mat4_determinant(self.to_array()))

    @staticmethod
    def invert(matrix: "Matrix4x4") -> Tuple[bool, "Matrix4x4"]:
        """逆行列を求める。

        Returns
        -------
        tuple[bool, Matrix4x4]
            `(成功, 逆行列)`。`|det| < float.Epsilon`（~1.4e-45、実質的に行列式が 0）のときは
            `(False, 全成分 NaN)`。呼び出し側は成否を確認してから結果を使うこと。
        """
        out = np.empty(16, dtype=np.float32)
        with _s.ieee_semantics():
            ok = bool(_kernels.mat4_invert(matrix.to_array(), out, _s.EPSILON))
        if not ok:
            logger.debug("Matrix4x4.invert: singular matrix")
        return ok, Matrix4x4(*out)

    # ── 分解 ─────────────────────────────────────────
    @staticmethod
    def decompose(matrix: "Matrix4x4") -> DecomposeResult:
        """アフィン行列を拡大縮小・回転・平行移動へ分解する。

        手順:
        1. 平行移動は 4 行目、拡大縮小は左上 3x3 の各行の長さ。
        2. 長さの大きい順に基底を並べ、最大の基底を正規化（縮退時は対応する座標軸で置換）。
        3. 2 番目が縮退していれば、1 番目と「1 番目の成分の絶対値で選んだ座標軸」の外積で作り直す。
        4. 3 番目が縮退していれば 1, 2 番目の外積で作り直す。
        5. 行列式が負（鏡映）なら最大基底とその拡大率の符号を反転する。
        6. `(|det| - 1)^2 > 1e-4` なら失敗（回転は恒等、拡大縮小/平行移動は計算済みのまま）。
        7. 成功時は正規直交化した行列から四元数を得る。

        Returns
        -------
        DecomposeResult
            `(success, scale, rotation, translation)`。
        """
        m = matrix
        translation = Vector3(m.m41, m.m42, m.m43)
        rows = [
            Vector3(m.m11, m.m12, m.m13),
            Vector3(m.m21, m.m22, m.m23),
            Vector3(m.m31, m.m32, m.m33),
        ]
        canonical = (Vector3.unit_x(), Vector3.unit_y(), Vector3.unit_z())
        scale = [rows[0].length(), rows[1].length(), rows[2].length()]
        sx, sy, sz = scale

        # a: 最大, b: 2 番目, c: 最小
        if sx < sy:
            if sy < sz:
                a, b, c = 2, 1, 0
            else:
                a = 1
                b, c = (2, 0) if sx < sz else (0, 2)
        elif sx < sz:
            a, b, c = 2, 0, 1
        else:
            a = 0
            b, c = (2, 1) if sy < sz else (1, 2)

        if scale[a] < _DECOMPOSE_EPSILON:
            rows[a] = canonical[a]
        rows[a] = Vector3.normalize(rows[a])

        if scale[b] < _DECOMPOSE_EPSILON:
            ax = _s.abs_(rows[a].x)
            ay = _s.abs_(rows[a].y)
            az = _s.abs_(rows[a].z)
            if ax < ay:
                cc = 0 if (ay < az or ax < az) else 2
            else:
                cc = 1 if (ax < az or ay < az) else 2
            rows[b] = Vector3.cross(rows[a], canonical[cc])
        rows[b] = Vector3.normalize(rows[b])

        if scale[c] < _DECOMPOSE_EPSILON:
            rows[c] = Vector3.cross(rows[a], rows[b])
        rows[c] = Vector3.normalize(rows[c])

        basis = Matrix4x4.identity()
        basis.m11, basis.m12, basis.m13 = rows[0]
        basis.m21, basis.m22, basis.m23 = rows[1]
        basis.m31, basis.m32, basis.m33 = rows[2]
        det = basis.get_determinant()

        if det < 0.0:
            scale[a] = _s.ZERO - scale[a]
            rows[a] = -rows[a]
            det = _s.ZERO - det
            basis.m11, basis.m12, basis.m13 = rows[0]
            basis.m21, basis.m22, basis.m23 = rows[1]
            basis.m31, basis.m32, basis.m33 = rows[2]

        det = det - _s.ONE
        det = det * det

        scale_vec = Vector3(*scale)
        if _DECOMPOSE_EPSILON < det:
            logger.debug("Matrix4x4.decompose: basis is not orthonormal (err=%r)", float(det))
            return DecomposeResult(False, scale_vec, Quaternion.identity(), translation)
        rotation = Quaternion.create_from_rotation_matrix(basis)
        return DecomposeResult(True, scale_vec, rotation, translation)

    # ── 変換 ─────────────────────────────────────────
    @staticmethod
    def transform(value: "Matrix4x4", rotation: Quaternion) -> "Matrix4x4":
        """4 行すべての xyz を四元数で回転する。

        平行移動行（M41..M43）も回転される。4 列目（M14, M24, M34, M44）は変えない。
        """
        r = np.array(rotation_terms(rotation), dtype=np.float32)
        out = np.empty(16, dtype=np.float32)
        _kernels.mat4_rotate(value.to_array(), r, out)
        return Matrix4x4(*out)

    @staticmethod
    def transpose(matrix: "Matrix4x4") -> "Matrix4x4":
        m = matrix
        return Matrix4x4(
            m.m11, m.m21, m.m31, m.m41,
            m.m12, m.m22, m.m32, m.m42,
            m.m13, m.m23, m.m33, m.m43,
            m.m14, m.m24, m.m34, m.m44,
        )  # fmt: skip

    # ── 算術 ─────────────────────────────────────────
    @staticmethod
    def lerp(matrix1: "Matrix4x4", matrix2: "Matrix4x4", amount: Scalar) -> "Matrix4x4":
        t = np.float32(amount)
        return Matrix4x4(*(a + (b - a) * t for a, b in zip(matrix1, matrix2)))

    @staticmethod
    def negate(value: "Matrix4x4") -> "Matrix4x4":
        return Matrix4x4(*(_s.ZERO - c for c in value))

    @staticmethod
    def add(value1: "Matrix4x4", value2: "Matrix4x4") -> "Matrix4x4":
        return Matrix4x4(*(a + b for a, b in zip(value1, value2)))

    @staticmethod
    def subtract(value1: "Matrix4x4", value2: "Matrix4x4") -> "Matrix4x4":
        return Matrix4x4(*(a - b for a, b in zip(value1, value2)))

    @staticmethod
    def multiply(value1: "Matrix4x4", value2: Union["Matrix4x4", Scalar]) -> "Matrix4x4":
        """行列積 `value1 * value2`（`value1` を適用してから `value2`）、またはスカラー倍。"""
        if not isinstance(value2, Matrix4x4):
            f = np.float32(value2)
            return Matrix4x4(*(c * f for c in value1))
        out = np.empty(16, dtype=np.float32)
        _kernels.mat4_multiply(value1.to_array(), value2.to_array(), out)
        return Matrix4x4(*out)

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Matrix4x4":
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4.add(self, other)

    def __sub__(self, other: Any) -> "Matrix4x4":
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4.subtract(self, other)

    def __mul__(self, other: Any) -> "Matrix4x4":
        if not isinstance(other, (Matrix4x4,) + _SCALAR_TYPES):
            return NotImplemented
        return Matrix4x4.multiply(self, other)

    def __neg__(self) -> "Matrix4x4":
        return Matrix4x4.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return all(a == b for a, b in zip(self, other))

    def __hash__(self) -> int:
        return sum(_s.component_hash(c) for c in self)

    def equals(self, other: object) -> bool:
        return isinstance(other, Matrix4x4) and self == other

    # ── 入出力 ───────────────────────────────────────
    def __iter__(self) -> Iterator[np.float32]:
        for name in _FIELDS:
            yield getattr(self, name)

    def __format__(self, format_spec: str) -> str:
        c = [_s.format_component(v, format_spec) for v in self]
        rows = []
        for r in range(4):
            cells = " ".join(f"M{r + 1}{k + 1}:{c[r * 4 + k]}" for k in range(4))
            rows.append("{" + cells + "}")
        return "{ " + " ".join(rows) + " }"

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return "Matrix4x4({})".format(", ".join(repr(float(c)) for c in self))


__all__ = ["Matrix4x4", "DecomposeResult"]
