"""
どこで: `numerics.vector4`
何を: 4 成分単精度ベクトル `Vector4` と同次座標変換（2/3/4 成分の入力 × 4x4 行列/四元数）。
なぜ: 射影変換の結果（W を含む）や平面係数 (a, b, c, d) を 1 つの値として扱うため。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Union

import numpy as np

from . import _kernels
from . import scalar as _s
from .errors import check_copy_destination
from .hardware import is_hardware_accelerated
from .quaternion import Quaternion, rotation_terms
from .vector2 import Vector2
from .vector3 import Vector3

if TYPE_CHECKING:
    from .matrix4x4 import Matrix4x4

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)


class Vector4:
    """4 成分ベクトル（成分は `numpy.float32`）。

    - `Vector4(x, y, z, w)`: 成分指定
    - `Vector4(v)`: 全成分を `v` で埋める
    - `Vector4(Vector2, z, w)` / `Vector4(Vector3, w)`: 低次元ベクトルを拡張

    成分を書き換えるとハッシュ値も変わる。
    """

    __slots__ = ("x", "y", "z", "w")

    def __init__(
        self,
        x: Union[Scalar, Vector2, Vector3] = 0.0,
        y: Scalar | None = None,
        z: Scalar | None = None,
        w: Scalar | None = None,
    ) -> None:
        if isinstance(x, Vector3):
            if y is None:
                raise TypeError("Vector4(Vector3, w) には w が必要です")
            self.x, self.y, self.z, self.w = x.x, x.y, x.z, np.float32(y)
            return
        if isinstance(x, Vector2):
            if y is None or z is None:
                raise TypeError("Vector4(Vector2, z, w) には z と w が必要です")
            self.x, self.y, self.z, self.w = x.x, x.y, np.float32(y), np.float32(z)
            return
        if y is None and z is None and w is None:
            y = z = w = x
        elif y is None or z is None or w is None:
            raise TypeError("Vector4 は 1 成分（全成分）または 4 成分で指定してください")
        self.x = np.float32(x)
        self.y = np.float32(y)
        self.z = np.float32(z)
        self.w = np.float32(w)

    # ── ファクトリ ───────────────────────────────────
    @classmethod
    def zero(cls) -> "Vector4":
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def one(cls) -> "Vector4":
        return cls(1.0, 1.0, 1.0, 1.0)

    @classmethod
    def unit_x(cls) -> "Vector4":
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> "Vector4":
        return cls(0.0, 1.0, 0.0, 0.0)

    @classmethod
    def unit_z(cls) -> "Vector4":
        return cls(0.0, 0.0, 1.0, 0.0)

    @classmethod
    def unit_w(cls) -> "Vector4":
        return cls(0.0, 0.0, 0.0, 1.0)

    # ── 長さ/距離 ─────────────────────────────────────
    def length(self) -> np.float32:
        return _s.sqrt(self.length_squared())

    def length_squared(self) -> np.float32:
        return Vector4.dot(self, self)

    @staticmethod
    def distance(value1: "Vector4", value2: "Vector4") -> np.float32:
        return _s.sqrt(Vector4.distance_squared(value1, value2))

    @staticmethod
    def distance_squared(value1: "Vector4", value2: "Vector4") -> np.float32:
        d = value1 - value2
        return Vector4.dot(d, d)

    @staticmethod
    def dot(vector1: "Vector4", vector2: "Vector4") -> np.float32:
        return (
            vector1.x * vector2.x
            + vector1.y * vector2.y
            + vector1.z * vector2.z
            + vector1.w * vector2.w
        )

    @staticmethod
    def normalize(vector: "Vector4") -> "Vector4":
        """長さ 1 に正規化する（加速経路は長さで除算、通常経路は逆数を乗算）。"""
        with _s.ieee_semantics():
            if is_hardware_accelerated():
                return vector / vector.length()
            ls = (
                vector.x * vector.x
                + vector.y * vector.y
                + vector.z * vector.z
                + vector.w * vector.w
            )
            inv = _s.ONE / _s.sqrt(ls)
            return Vector4(vector.x * inv, vector.y * inv, vector.z * inv, vector.w * inv)

    # ── 成分ごとの演算 ─────────────────────────────────
    @staticmethod
    def clamp(value1: "Vector4", min: "Vector4", max: "Vector4") -> "Vector4":
        out = []
        for v, lo, hi in zip(value1, min, max):
            v = hi if v > hi else v
            v = lo if v < lo else v
            out.append(v)
        return Vector4(*out)

    @staticmethod
    def lerp(value1: "Vector4", value2: "Vector4", amount: Scalar) -> "Vector4":
        t = np.float32(amount)
        return Vector4(*(a + (b - a) * t for a, b in zip(value1, value2)))

    @staticmethod
    def min(value1: "Vector4", value2: "Vector4") -> "Vector4":
        return Vector4(*(a if a < b else b for a, b in zip(value1, value2)))

    @staticmethod
    def max(value1: "Vector4", value2: "Vector4") -> "Vector4":
        return Vector4(*(a if a > b else b for a, b in zip(value1, value2)))

    @staticmethod
    def abs(value: "Vector4") -> "Vector4":
        return Vector4(*(_s.abs_(c) for c in value))

    @staticmethod
    def square_root(value: "Vector4") -> "Vector4":
        return Vector4(*(_s.sqrt(c) for c in value))

    # ── 変換 ─────────────────────────────────────────
    @staticmethod
    def transform(
        value: Union[Vector2, Vector3, "Vector4"],
        matrix: Union["Matrix4x4", Quaternion],
    ) -> "Vector4":
        """2/3/4 成分ベクトルを同次座標で変換する。

        Parameters
        ----------
        value : Vector2 | Vector3 | Vector4
            入力。Vector2/Vector3 は W=1 の点として扱う（行列の 4 行目を加える）。
        matrix : Matrix4x4 | Quaternion
            行列なら行ベクトル × 行列。四元数なら xyz を回転し、
            W は Vector2/Vector3 入力で 1、Vector4 入力でそのまま。

        Returns
        -------
        Vector4
            変換結果。Vector4 入力の行列変換は W を暗黙に 1 とはしない。
        """
        if isinstance(matrix, Quaternion):
            return Vector4._rotate(value, matrix)
        m = matrix
        if isinstance(value, Vector4):
            out = np.empty(4, dtype=np.float32)
            src = np.array([value.x, value.y, value.z, value.w], dtype=np.float32)
            _kernels.vec4_transform(src, m.to_array(), out)
            return Vector4(*out)
        x, y = value.x, value.y
        if isinstance(value, Vector3):
            z = value.z
            return Vector4(
                x * m.m11 + y * m.m21 + z * m.m31 + m.m41,
                x * m.m12 + y * m.m22 + z * m.m32 + m.m42,
                x * m.m13 + y * m.m23 + z * m.m33 + m.m43,
                x * m.m14 + y * m.m24 + z * m.m34 + m.m44,
            )
        return Vector4(
            x * m.m11 + y * m.m21 + m.m41,
            x * m.m12 + y * m.m22 + m.m42,
            x * m.m13 + y * m.m23 + m.m43,
            x * m.m14 + y * m.m24 + m.m44,
        )

    @staticmethod
    def _rotate(value: Union[Vector2, Vector3, "Vector4"], rotation: Quaternion) -> "Vector4":
        r11, r12, r13, r21, r22, r23, r31, r32, r33 = rotation_terms(rotation)
        x, y = value.x, value.y
        if isinstance(value, Vector2):
            return Vector4(
                x * r11 + y * r21,
                x * r12 + y * r22,
                x * r13 + y * r23,
                _s.ONE,
            )
        z = value.z
        w = value.w if isinstance(value, Vector4) else _s.ONE
        return Vector4(
            x * r11 + y * r21 + z * r31,
            x * r12 + y * r22 + z * r32,
            x * r13 + y * r23 + z * r33,
            w,
        )

    # ── 名前付き算術 ───────────────────────────────────
    @staticmethod
    def add(left: "Vector4", right: "Vector4") -> "Vector4":
        return Vector4(left.x + right.x, left.y + right.y, left.z + right.z, left.w + right.w)

    @staticmethod
    def subtract(left: "Vector4", right: "Vector4") -> "Vector4":
        return Vector4(left.x - right.x, left.y - right.y, left.z - right.z, left.w - right.w)

    @staticmethod
    def multiply(left: Union["Vector4", Scalar], right: Union["Vector4", Scalar]) -> "Vector4":
        if isinstance(left, Vector4) and isinstance(right, Vector4):
            return Vector4(*(a * b for a, b in zip(left, right)))
        if isinstance(left, Vector4):
            f = np.float32(right)
            return Vector4(*(c * f for c in left))
        f = np.float32(left)
        return Vector4(*(f * c for c in right))

    @staticmethod
    def divide(left: "Vector4", right: Union["Vector4", Scalar]) -> "Vector4":
        if not isinstance(right, Vector4):
            right = Vector4(right)
        with _s.ieee_semantics():
            return Vector4(*(a / b for a, b in zip(left, right)))

    @staticmethod
    def negate(value: "Vector4") -> "Vector4":
        return Vector4(*(_s.ZERO - c for c in value))

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Vector4":
        if not isinstance(other, Vector4):
            return NotImplemented
        return Vector4.add(self, other)

    def __sub__(self, other: Any) -> "Vector4":
        if not isinstance(other, Vector4):
            return NotImplemented
        return Vector4.subtract(self, other)

    def __mul__(self, other: Any) -> "Vector4":
        if not isinstance(other, (Vector4,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector4.multiply(self, other)

    def __rmul__(self, other: Any) -> "Vector4":
        if not isinstance(other, _SCALAR_TYPES):
            return NotImplemented
        return Vector4.multiply(other, self)

    def __truediv__(self, other: Any) -> "Vector4":
        if not isinstance(other, (Vector4,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector4.divide(self, other)

    def __neg__(self) -> "Vector4":
        return Vector4.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector4):
            return NotImplemented
        return bool(
            self.x == other.x and self.y == other.y and self.z == other.z and self.w == other.w
        )

    def __hash__(self) -> int:
        return hash(tuple(_s.component_hash(c) for c in self))

    def equals(self, other: object) -> bool:
        return isinstance(other, Vector4) and self == other

    # ── 入出力 ───────────────────────────────────────
    def copy_to(self, array: Any, index: int = 0) -> None:
        check_copy_destination(array, index, 4)
        for offset, c in enumerate(self):
            array[index + offset] = c

    def __iter__(self) -> Iterator[np.float32]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __format__(self, format_spec: str) -> str:
        parts = (_s.format_component(c, format_spec) for c in self)
        return "<" + _s.LIST_SEPARATOR.join(parts) + ">"

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return "Vector4({}, {}, {}, {})".format(*(repr(float(c)) for c in self))


__all__ = ["Vector4"]
