"""
どこで: `numerics.vector3`
何を: 3 成分単精度ベクトル `Vector3`（外積・反射・4x4 行列/四元数による変換を含む）。
なぜ: 位置/方向/スケールの表現として、行列・四元数・平面の各モジュールが共通に使う値型。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Union

import numpy as np

from . import scalar as _s
from .errors import check_copy_destination
from .hardware import is_hardware_accelerated
from .quaternion import Quaternion, rotation_terms
from .vector2 import Vector2

if TYPE_CHECKING:
    from .matrix4x4 import Matrix4x4

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)


class Vector3:
    """3 成分ベクトル（成分は `numpy.float32`）。

    コンストラクタは 3 形態を受け付ける。

    - `Vector3(x, y, z)`: 成分指定
    - `Vector3(v)`: 全成分を `v` で埋める
    - `Vector3(Vector2, z)`: 2D ベクトルに z を付け足す

    成分を書き換えるとハッシュ値も変わる。
    """

    __slots__ = ("x", "y", "z")

    def __init__(
        self,
        x: Union[Scalar, Vector2] = 0.0,
        y: Scalar | None = None,
        z: Scalar | None = None,
    ) -> None:
        if isinstance(x, Vector2):
            if y is None:
                raise TypeError("Vector3(Vector2, z) には z が必要です")
            self.x, self.y, self.z = x.x, x.y, np.float32(y)
            return
        if y is None and z is None:
            y = z = x
        elif y is None or z is None:
            raise TypeError("Vector3 は 1 成分（全成分）または 3 成分で指定してください")
        self.x = np.float32(x)
        self.y = np.float32(y)
        self.z = np.float32(z)

    # ── ファクトリ ───────────────────────────────────
    @classmethod
    def zero(cls) -> "Vector3":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def one(cls) -> "Vector3":
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def unit_x(cls) -> "Vector3":
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> "Vector3":
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls) -> "Vector3":
        return cls(0.0, 0.0, 1.0)

    # ── 長さ/距離 ─────────────────────────────────────
    def length(self) -> np.float32:
        return _s.sqrt(self.length_squared())

    def length_squared(self) -> np.float32:
        return Vector3.dot(self, self)

    @staticmethod
    def distance(value1: "Vector3", value2: "Vector3") -> np.float32:
        return _s.sqrt(Vector3.distance_squared(value1, value2))

    @staticmethod
    def distance_squared(value1: "Vector3", value2: "Vector3") -> np.float32:
        if is_hardware_accelerated():
            d = value1 - value2
            return Vector3.dot(d, d)
        dx = value1.x - value2.x
        dy = value1.y - value2.y
        dz = value1.z - value2.z
        return dx * dx + dy * dy + dz * dz

    @staticmethod
    def dot(vector1: "Vector3", vector2: "Vector3") -> np.float32:
        return vector1.x * vector2.x + vector1.y * vector2.y + vector1.z * vector2.z

    @staticmethod
    def cross(vector1: "Vector3", vector2: "Vector3") -> "Vector3":
        return Vector3(
            vector1.y * vector2.z - vector1.z * vector2.y,
            vector1.z * vector2.x - vector1.x * vector2.z,
            vector1.x * vector2.y - vector1.y * vector2.x,
        )

    @staticmethod
    def normalize(value: "Vector3") -> "Vector3":
        """各成分を長さで割る。長さ 0 なら NaN 成分（例外なし）。"""
        with _s.ieee_semantics():
            if is_hardware_accelerated():
                return value / value.length()
            ls = _s.sqrt(value.x * value.x + value.y * value.y + value.z * value.z)
            return Vector3(value.x / ls, value.y / ls, value.z / ls)

    # ── 成分ごとの演算 ─────────────────────────────────
    @staticmethod
    def reflect(vector: "Vector3", normal: "Vector3") -> "Vector3":
        """法線 `normal`（単位長を仮定）の面で `vector` を反射する。"""
        d = Vector3.dot(vector, normal)
        if is_hardware_accelerated():
            return vector - normal * d * 2.0
        return Vector3(
            vector.x - normal.x * d * 2.0,
            vector.y - normal.y * d * 2.0,
            vector.z - normal.z * d * 2.0,
        )

    @staticmethod
    def clamp(value1: "Vector3", min: "Vector3", max: "Vector3") -> "Vector3":
        """成分ごとに上限 → 下限の順で制限する。"""
        x = value1.x
        x = max.x if x > max.x else x
        x = min.x if x < min.x else x
        y = value1.y
        y = max.y if y > max.y else y
        y = min.y if y < min.y else y
        z = value1.z
        z = max.z if z > max.z else z
        z = min.z if z < min.z else z
        return Vector3(x, y, z)

    @staticmethod
    def lerp(value1: "Vector3", value2: "Vector3", amount: Scalar) -> "Vector3":
        """線形補間（`amount` は [0, 1] 外でも外挿する）。"""
        t = np.float32(amount)
        if is_hardware_accelerated():
            return value1 * (_s.ONE - t) + value2 * t
        return Vector3(
            value1.x + (value2.x - value1.x) * t,
            value1.y + (value2.y - value1.y) * t,
            value1.z + (value2.z - value1.z) * t,
        )

    @staticmethod
    def min(value1: "Vector3", value2: "Vector3") -> "Vector3":
        return Vector3(
            value1.x if value1.x < value2.x else value2.x,
            value1.y if value1.y < value2.y else value2.y,
            value1.z if value1.z < value2.z else value2.z,
        )

    @staticmethod
    def max(value1: "Vector3", value2: "Vector3") -> "Vector3":
        return Vector3(
            value1.x if value1.x > value2.x else value2.x,
            value1.y if value1.y > value2.y else value2.y,
            value1.z if value1.z > value2.z else value2.z,
        )

    @staticmethod
    def abs(value: "Vector3") -> "Vector3":
        return Vector3(_s.abs_(value.x), _s.abs_(value.y), _s.abs_(value.z))

    @staticmethod
    def square_root(value: "Vector3") -> "Vector3":
        return Vector3(_s.sqrt(value.x), _s.sqrt(value.y), _s.sqrt(value.z))

    # ── 変換 ─────────────────────────────────────────
    @staticmethod
    def transform(position: "Vector3", matrix: Union["Matrix4x4", Quaternion]) -> "Vector3":
        """点を 4x4 行列（4 行目の平行移動を含む）または四元数で変換する。"""
        x, y, z = position.x, position.y, position.z
        if isinstance(matrix, Quaternion):
            r11, r12, r13, r21, r22, r23, r31, r32, r33 = rotation_terms(matrix)
            return Vector3(
                x * r11 + y * r21 + z * r31,
                x * r12 + y * r22 + z * r32,
                x * r13 + y * r23 + z * r33,
            )
        m = matrix
        return Vector3(
            x * m.m11 + y * m.m21 + z * m.m31 + m.m41,
            x * m.m12 + y * m.m22 + z * m.m32 + m.m42,
            x * m.m13 + y * m.m23 + z * m.m33 + m.m43,
        )

    @staticmethod
    def transform_normal(normal: "Vector3", matrix: "Matrix4x4") -> "Vector3":
        m = matrix
        return Vector3(
            normal.x * m.m11 + normal.y * m.m21 + normal.z * m.m31,
            normal.x * m.m12 + normal.y * m.m22 + normal.z * m.m32,
            normal.x * m.m13 + normal.y * m.m23 + normal.z * m.m33,
        )

    # ── 名前付き算術 ───────────────────────────────────
    @staticmethod
    def add(left: "Vector3", right: "Vector3") -> "Vector3":
        return Vector3(left.x + right.x, left.y + right.y, left.z + right.z)

    @staticmethod
    def subtract(left: "Vector3", right: "Vector3") -> "Vector3":
        return Vector3(left.x - right.x, left.y - right.y, left.z - right.z)

    @staticmethod
    def multiply(left: Union["Vector3", Scalar], right: Union["Vector3", Scalar]) -> "Vector3":
        if isinstance(left, Vector3) and isinstance(right, Vector3):
            return Vector3(left.x * right.x, left.y * right.y, left.z * right.z)
        if isinstance(left, Vector3):
            f = np.float32(right)
            return Vector3(left.x * f, left.y * f, left.z * f)
        f = np.float32(left)
        return Vector3(f * right.x, f * right.y, f * right.z)

    @staticmethod
    def divide(left: "Vector3", right: Union["Vector3", Scalar]) -> "Vector3":
        if not isinstance(right, Vector3):
            right = Vector3(right)
        with _s.ieee_semantics():
            return Vector3(left.x / right.x, left.y / right.y, left.z / right.z)

    @staticmethod
    def negate(value: "Vector3") -> "Vector3":
        return Vector3(_s.ZERO - value.x, _s.ZERO - value.y, _s.ZERO - value.z)

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3.add(self, other)

    def __sub__(self, other: Any) -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3.subtract(self, other)

    def __mul__(self, other: Any) -> "Vector3":
        if not isinstance(other, (Vector3,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector3.multiply(self, other)

    def __rmul__(self, other: Any) -> "Vector3":
        if not isinstance(other, _SCALAR_TYPES):
            return NotImplemented
        return Vector3.multiply(other, self)

    def __truediv__(self, other: Any) -> "Vector3":
        if not isinstance(other, (Vector3,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector3.divide(self, other)

    def __neg__(self) -> "Vector3":
        return Vector3.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return bool(self.x == other.x and self.y == other.y and self.z == other.z)

    def __hash__(self) -> int:
        return hash(tuple(_s.component_hash(c) for c in self))

    def equals(self, other: object) -> bool:
        return isinstance(other, Vector3) and self == other

    # ── 入出力 ───────────────────────────────────────
    def copy_to(self, array: Any, index: int = 0) -> None:
        """`array[index]` から x, y, z の順に書き込む。"""
        check_copy_destination(array, index, 3)
        array[index] = self.x
        array[index + 1] = self.y
        array[index + 2] = self.z

    def __iter__(self) -> Iterator[np.float32]:
        yield self.x
        yield self.y
        yield self.z

    def __format__(self, format_spec: str) -> str:
        parts = (_s.format_component(c, format_spec) for c in self)
        return "<" + _s.LIST_SEPARATOR.join(parts) + ">"

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return f"Vector3({float(self.x)!r}, {float(self.y)!r}, {float(self.z)!r})"


__all__ = ["Vector3"]
