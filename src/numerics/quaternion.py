"""
どこで: `numerics.quaternion`
何を: 回転表現 `Quaternion`（軸角/ヨー・ピッチ・ロール/回転行列からの生成、共役/逆元、slerp/lerp、合成）。
なぜ: 回転を 4 成分で保持し、行列・ベクトル・平面の回転適用に共通の 3x3 展開を供給するため。

単位長は型として強制しない。回転として使う側（変換、行列化）は正規化済みを前提とする。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Tuple, Union

import numpy as np

from . import scalar as _s

if TYPE_CHECKING:
    from .matrix4x4 import Matrix4x4
    from .vector3 import Vector3

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)

# slerp を線形補間へ切り替える cos(ω) の閾値
_SLERP_LINEAR_THRESHOLD = np.float32(0.999999)


class Quaternion:
    """四元数 (x, y, z, w)。x, y, z がベクトル部、w がスカラー部。

    成分は代入できるが、ハッシュは成分から計算する。キーに使った値は書き換えないこと。
    """

    __slots__ = ("x", "y", "z", "w")

    def __init__(
        self, x: Scalar = 0.0, y: Scalar = 0.0, z: Scalar = 0.0, w: Scalar = 0.0
    ) -> None:
        self.x = np.float32(x)
        self.y = np.float32(y)
        self.z = np.float32(z)
        self.w = np.float32(w)

    # ── ファクトリ ───────────────────────────────────
    @classmethod
    def identity(cls) -> "Quaternion":
        """恒等回転 (0, 0, 0, 1)。呼び出しごとに新しい値を返す。"""
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_vector(cls, vector_part: "Vector3", scalar_part: Scalar) -> "Quaternion":
        return cls(vector_part.x, vector_part.y, vector_part.z, scalar_part)

    @property
    def is_identity(self) -> bool:
        return bool(self.x == 0.0 and self.y == 0.0 and self.z == 0.0 and self.w == 1.0)

    @staticmethod
    def create_from_axis_angle(axis: "Vector3", angle: Scalar) -> "Quaternion":
        """`(axis * sin(angle/2), cos(angle/2))`。`axis` は単位長を仮定する。"""
        half = np.float32(angle) * _s.HALF
        s = _s.sin(half)
        c = _s.cos(half)
        return Quaternion(axis.x * s, axis.y * s, axis.z * s, c)

    @staticmethod
    def create_from_yaw_pitch_roll(yaw: Scalar, pitch: Scalar, roll: Scalar) -> "Quaternion":
        """Y 軸（yaw）・X 軸（pitch）・Z 軸（roll）の半角積から回転を合成する。

        適用順は roll → pitch → yaw（行ベクトル規約での Z·X·Y）。
        """
        half_roll = np.float32(roll) * _s.HALF
        sr, cr = _s.sin(half_roll), _s.cos(half_roll)
        half_pitch = np.float32(pitch) * _s.HALF
        sp, cp = _s.sin(half_pitch), _s.cos(half_pitch)
        half_yaw = np.float32(yaw) * _s.HALF
        sy, cy = _s.sin(half_yaw), _s.cos(half_yaw)
        return Quaternion(
            cy * sp * cr + sy * cp * sr,
            sy * cp * cr - cy * sp * sr,
            cy * cp * sr - sy * sp * cr,
            cy * cp * cr + sy * sp * sr,
        )

    @staticmethod
    def create_from_rotation_matrix(matrix: "Matrix4x4") -> "Quaternion":
        """回転行列（左上 3x3）から四元数を得る。

        トレースが正ならトレース式、そうでなければ対角成分の最大要素で 3 分岐する
        （M11 が最大 → M22 > M33 → それ以外は M33）。境界での符号/軸の選択はこの順序に依存する。
        """
        m = matrix
        trace = m.m11 + m.m22 + m.m33
        with _s.ieee_semantics():
            if trace > 0.0:
                s = _s.sqrt(trace + _s.ONE)
                w = s * _s.HALF
                s = _s.HALF / s
                return Quaternion((m.m23 - m.m32) * s, (m.m31 - m.m13) * s, (m.m12 - m.m21) * s, w)
            if m.m11 >= m.m22 and m.m11 >= m.m33:
                s = _s.sqrt(_s.ONE + m.m11 - m.m22 - m.m33)
                inv = _s.HALF / s
                return Quaternion(
                    _s.HALF * s, (m.m12 + m.m21) * inv, (m.m13 + m.m31) * inv, (m.m23 - m.m32) * inv
                )
            if m.m22 > m.m33:
                s = _s.sqrt(_s.ONE + m.m22 - m.m11 - m.m33)
                inv = _s.HALF / s
                return Quaternion(
                    (m.m21 + m.m12) * inv, _s.HALF * s, (m.m32 + m.m23) * inv, (m.m31 - m.m13) * inv
                )
            s = _s.sqrt(_s.ONE + m.m33 - m.m11 - m.m22)
            inv = _s.HALF / s
            return Quaternion(
                (m.m31 + m.m13) * inv, (m.m32 + m.m23) * inv, _s.HALF * s, (m.m12 - m.m21) * inv
            )

    # ── 長さ/正規化/逆元 ───────────────────────────────
    def length(self) -> np.float32:
        return _s.sqrt(self.length_squared())

    def length_squared(self) -> np.float32:
        return self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w

    @staticmethod
    def normalize(value: "Quaternion") -> "Quaternion":
        with _s.ieee_semantics():
            inv = _s.ONE / _s.sqrt(value.length_squared())
        return Quaternion(value.x * inv, value.y * inv, value.z * inv, value.w * inv)

    @staticmethod
    def conjugate(value: "Quaternion") -> "Quaternion":
        return Quaternion(_s.ZERO - value.x, _s.ZERO - value.y, _s.ZERO - value.z, value.w)

    @staticmethod
    def inverse(value: "Quaternion") -> "Quaternion":
        """共役を長さの二乗で割る（非単位長でも有効）。"""
        with _s.ieee_semantics():
            inv = _s.ONE / value.length_squared()
            return Quaternion(
                (_s.ZERO - value.x) * inv,
                (_s.ZERO - value.y) * inv,
                (_s.ZERO - value.z) * inv,
                value.w * inv,
            )

    @staticmethod
    def dot(quaternion1: "Quaternion", quaternion2: "Quaternion") -> np.float32:
        return (
            quaternion1.x * quaternion2.x
            + quaternion1.y * quaternion2.y
            + quaternion1.z * quaternion2.z
            + quaternion1.w * quaternion2.w
        )

    # ── 補間 ─────────────────────────────────────────
    @staticmethod
    def slerp(quaternion1: "Quaternion", quaternion2: "Quaternion", amount: Scalar) -> "Quaternion":
        """球面線形補間。

        - cos(ω) が負なら `quaternion2` 側の重みの符号を反転する（最短経路）。
        - cos(ω) > 0.999999 では 1/sin(ω) を避けて線形の重みを使う。
        """
        t = np.float32(amount)
        cos_omega = Quaternion.dot(quaternion1, quaternion2)
        flip = False
        if cos_omega < 0.0:
            flip = True
            cos_omega = _s.ZERO - cos_omega

        if cos_omega > _SLERP_LINEAR_THRESHOLD:
            s1 = _s.ONE - t
            s2 = _s.ZERO - t if flip else t
        else:
            omega = _s.acos(cos_omega)
            inv_sin = _s.ONE / _s.sin(omega)
            s1 = _s.sin((_s.ONE - t) * omega) * inv_sin
            s2 = (_s.ZERO - _s.sin(t * omega)) * inv_sin if flip else _s.sin(t * omega) * inv_sin

        q1, q2 = quaternion1, quaternion2
        return Quaternion(
            s1 * q1.x + s2 * q2.x,
            s1 * q1.y + s2 * q2.y,
            s1 * q1.z + s2 * q2.z,
            s1 * q1.w + s2 * q2.w,
        )

    @staticmethod
    def lerp(quaternion1: "Quaternion", quaternion2: "Quaternion", amount: Scalar) -> "Quaternion":
        """最短経路補正付きの線形補間の後に正規化する。"""
        t = np.float32(amount)
        t1 = _s.ONE - t
        q1, q2 = quaternion1, quaternion2
        if Quaternion.dot(q1, q2) >= 0.0:
            x = t1 * q1.x + t * q2.x
            y = t1 * q1.y + t * q2.y
            z = t1 * q1.z + t * q2.z
            w = t1 * q1.w + t * q2.w
        else:
            x = t1 * q1.x - t * q2.x
            y = t1 * q1.y - t * q2.y
            z = t1 * q1.z - t * q2.z
            w = t1 * q1.w - t * q2.w
        with _s.ieee_semantics():
            inv = _s.ONE / _s.sqrt(x * x + y * y + z * z + w * w)
            return Quaternion(x * inv, y * inv, z * inv, w * inv)

    # ── 合成 ─────────────────────────────────────────
    @staticmethod
    def _hamilton(a: "Quaternion", b: "Quaternion") -> "Quaternion":
        # 外積 + 内積の形で展開したハミルトン積 a*b
        cx = a.y * b.z - a.z * b.y
        cy = a.z * b.x - a.x * b.z
        cz = a.x * b.y - a.y * b.x
        d = a.x * b.x + a.y * b.y + a.z * b.z
        return Quaternion(
            a.x * b.w + b.x * a.w + cx,
            a.y * b.w + b.y * a.w + cy,
            a.z * b.w + b.z * a.w + cz,
            a.w * b.w - d,
        )

    @staticmethod
    def concatenate(value1: "Quaternion", value2: "Quaternion") -> "Quaternion":
        """`value1` の回転の後に `value2` の回転を行う合成（積 `value2 * value1`）。"""
        return Quaternion._hamilton(value2, value1)

    @staticmethod
    def multiply(value1: "Quaternion", value2: Union["Quaternion", Scalar]) -> "Quaternion":
        """ハミルトン積 `value1 * value2`、またはスカラー倍。"""
        if isinstance(value2, Quaternion):
            return Quaternion._hamilton(value1, value2)
        f = np.float32(value2)
        return Quaternion(value1.x * f, value1.y * f, value1.z * f, value1.w * f)

    @staticmethod
    def divide(value1: "Quaternion", value2: "Quaternion") -> "Quaternion":
        """`value1 * inverse(value2)`。"""
        return Quaternion._hamilton(value1, Quaternion.inverse(value2))

    @staticmethod
    def negate(value: "Quaternion") -> "Quaternion":
        return Quaternion(*(_s.ZERO - c for c in value))

    @staticmethod
    def add(value1: "Quaternion", value2: "Quaternion") -> "Quaternion":
        return Quaternion(*(a + b for a, b in zip(value1, value2)))

    @staticmethod
    def subtract(value1: "Quaternion", value2: "Quaternion") -> "Quaternion":
        return Quaternion(*(a - b for a, b in zip(value1, value2)))

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Quaternion":
        if not isinstance(other, Quaternion):
            return NotImplemented
        return Quaternion.add(self, other)

    def __sub__(self, other: Any) -> "Quaternion":
        if not isinstance(other, Quaternion):
            return NotImplemented
        return Quaternion.subtract(self, other)

    def __mul__(self, other: Any) -> "Quaternion":
        if not isinstance(other, (Quaternion,) + _SCALAR_TYPES):
            return NotImplemented
        return Quaternion.multiply(self, other)

    def __truediv__(self, other: Any) -> "Quaternion":
        if not isinstance(other, Quaternion):
            return NotImplemented
        return Quaternion.divide(self, other)

    def __neg__(self) -> "Quaternion":
        return Quaternion.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(
            self.x == other.x and self.y == other.y and self.z == other.z and self.w == other.w
        )

    def __hash__(self) -> int:
        return sum(_s.component_hash(c) for c in self)

    def equals(self, other: object) -> bool:
        return isinstance(other, Quaternion) and self == other

    # ── 入出力 ───────────────────────────────────────
    def __iter__(self) -> Iterator[np.float32]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __format__(self, format_spec: str) -> str:
        f = _s.format_component
        return "{{X:{} Y:{} Z:{} W:{}}}".format(*(f(c, format_spec) for c in self))

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return "Quaternion({}, {}, {}, {})".format(*(repr(float(c)) for c in self))


def rotation_terms(rotation: Quaternion) -> Tuple[np.float32, ...]:
    """四元数を行ベクトル規約の 3x3 回転 (r11, r12, r13, r21, ..., r33) に展開する。

    2 倍積（x+x, y+y, z+z）を使う展開で、ベクトル/行列/平面の回転適用はすべてこれを共有する。
    `v' = (vx*r11 + vy*r21 + vz*r31, vx*r12 + vy*r22 + vz*r32, vx*r13 + vy*r23 + vz*r33)`。
    """
    x2 = rotation.x + rotation.x
    y2 = rotation.y + rotation.y
    z2 = rotation.z + rotation.z

    wx2 = rotation.w * x2
    wy2 = rotation.w * y2
    wz2 = rotation.w * z2
    xx2 = rotation.x * x2
    xy2 = rotation.x * y2
    xz2 = rotation.x * z2
    yy2 = rotation.y * y2
    yz2 = rotation.y * z2
    zz2 = rotation.z * z2

    return (
        _s.ONE - yy2 - zz2,
        xy2 + wz2,
        xz2 - wy2,
        xy2 - wz2,
        _s.ONE - xx2 - zz2,
        yz2 + wx2,
        xz2 + wy2,
        yz2 - wx2,
        _s.ONE - xx2 - yy2,
    )


__all__ = ["Quaternion", "rotation_terms"]
