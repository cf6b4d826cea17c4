"""
どこで: `numerics.vector2`
何を: 2 成分単精度ベクトル `Vector2` と、その算術/内積/正規化/補間/変換。
なぜ: 2D 変換（Matrix3x2）や 4x4 行列・四元数による平面上の点/方向の変換の基礎値型として。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Union

import numpy as np

from . import scalar as _s
from .errors import check_copy_destination
from .hardware import is_hardware_accelerated
from .quaternion import Quaternion, rotation_terms

if TYPE_CHECKING:
    from .matrix3x2 import Matrix3x2
    from .matrix4x4 import Matrix4x4

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)


class Vector2:
    """2 成分ベクトル（成分は `numpy.float32`）。

    `Vector2(x, y)` で成分指定、`Vector2(v)` で全成分を `v` で埋める。
    二項演算は `Vector2.add(a, b)` などの静的メソッドと演算子の両方で使える。
    成分は代入で変えられるが、ハッシュも変わる。set や dict のキーにしたら触らないこと。
    """

    __slots__ = ("x", "y")

    def __init__(self, x: Scalar = 0.0, y: Scalar | None = None) -> None:
        if y is None:
            y = x
        self.x = np.float32(x)
        self.y = np.float32(y)

    # ── ファクトリ ───────────────────────────────────
    @classmethod
    def zero(cls) -> "Vector2":
        return cls(0.0, 0.0)

    @classmethod
    def one(cls) -> "Vector2":
        return cls(1.0, 1.0)

    @classmethod
    def unit_x(cls) -> "Vector2":
        return cls(1.0, 0.0)

    @classmethod
    def unit_y(cls) -> "Vector2":
        return cls(0.0, 1.0)

    # ── 長さ/距離 ─────────────────────────────────────
    def length(self) -> np.float32:
        """ベクトルの長さ `sqrt(dot(v, v))`。"""
        if is_hardware_accelerated():
            return _s.sqrt(Vector2.dot(self, self))
        return _s.sqrt(self.x * self.x + self.y * self.y)

    def length_squared(self) -> np.float32:
        return Vector2.dot(self, self)

    @staticmethod
    def distance(value1: "Vector2", value2: "Vector2") -> np.float32:
        if is_hardware_accelerated():
            d = value1 - value2
            return _s.sqrt(Vector2.dot(d, d))
        dx = value1.x - value2.x
        dy = value1.y - value2.y
        return _s.sqrt(dx * dx + dy * dy)

    @staticmethod
    def distance_squared(value1: "Vector2", value2: "Vector2") -> np.float32:
        dx = value1.x - value2.x
        dy = value1.y - value2.y
        return dx * dx + dy * dy

    @staticmethod
    def dot(value1: "Vector2", value2: "Vector2") -> np.float32:
        return value1.x * value2.x + value1.y * value2.y

    @staticmethod
    def normalize(value: "Vector2") -> "Vector2":
        """長さ 1 に正規化したベクトルを返す。

        長さ 0 のベクトルは IEEE-754 に従い NaN 成分になる（例外は送出しない）。
        """
        with _s.ieee_semantics():
            if is_hardware_accelerated():
                return value / value.length()
            ls = value.x * value.x + value.y * value.y
            inv = _s.ONE / _s.sqrt(ls)
            return Vector2(value.x * inv, value.y * inv)

    # ── 成分ごとの演算 ─────────────────────────────────
    @staticmethod
    def reflect(vector: "Vector2", normal: "Vector2") -> "Vector2":
        """`vector - 2 * dot(vector, normal) * normal`。`normal` は単位長を仮定する。"""
        d = Vector2.dot(vector, normal)
        return Vector2(vector.x - 2.0 * d * normal.x, vector.y - 2.0 * d * normal.y)

    @staticmethod
    def clamp(value1: "Vector2", min: "Vector2", max: "Vector2") -> "Vector2":
        """成分ごとに上限 → 下限の順で制限する（`min > max` なら `min` が勝つ）。"""
        x = value1.x
        x = max.x if x > max.x else x
        x = min.x if x < min.x else x
        y = value1.y
        y = max.y if y > max.y else y
        y = min.y if y < min.y else y
        return Vector2(x, y)

    @staticmethod
    def lerp(value1: "Vector2", value2: "Vector2", amount: Scalar) -> "Vector2":
        t = np.float32(amount)
        return Vector2(
            value1.x + (value2.x - value1.x) * t,
            value1.y + (value2.y - value1.y) * t,
        )

    @staticmethod
    def min(value1: "Vector2", value2: "Vector2") -> "Vector2":
        return Vector2(
            value1.x if value1.x < value2.x else value2.x,
            value1.y if value1.y < value2.y else value2.y,
        )

    @staticmethod
    def max(value1: "Vector2", value2: "Vector2") -> "Vector2":
        return Vector2(
            value1.x if value1.x > value2.x else value2.x,
            value1.y if value1.y > value2.y else value2.y,
        )

    @staticmethod
    def abs(value: "Vector2") -> "Vector2":
        return Vector2(_s.abs_(value.x), _s.abs_(value.y))

    @staticmethod
    def square_root(value: "Vector2") -> "Vector2":
        return Vector2(_s.sqrt(value.x), _s.sqrt(value.y))

    # ── 変換 ─────────────────────────────────────────
    @staticmethod
    def transform(
        position: "Vector2", matrix: Union["Matrix3x2", "Matrix4x4", Quaternion]
    ) -> "Vector2":
        """行ベクトルとして右から行列（または四元数の回転）を掛ける。

        Matrix3x2 / Matrix4x4 では平行移動（M31,M32 / M41,M42）を加える。
        """
        if isinstance(matrix, Quaternion):
            r11, r12, _, r21, r22, _, _, _, _ = rotation_terms(matrix)
            return Vector2(
                position.x * r11 + position.y * r21,
                position.x * r12 + position.y * r22,
            )
        from .matrix3x2 import Matrix3x2

        if isinstance(matrix, Matrix3x2):
            return Vector2(
                position.x * matrix.m11 + position.y * matrix.m21 + matrix.m31,
                position.x * matrix.m12 + position.y * matrix.m22 + matrix.m32,
            )
        return Vector2(
            position.x * matrix.m11 + position.y * matrix.m21 + matrix.m41,
            position.x * matrix.m12 + position.y * matrix.m22 + matrix.m42,
        )

    @staticmethod
    def transform_normal(normal: "Vector2", matrix: Union["Matrix3x2", "Matrix4x4"]) -> "Vector2":
        """方向ベクトルを変換する（平行移動は適用しない）。"""
        return Vector2(
            normal.x * matrix.m11 + normal.y * matrix.m21,
            normal.x * matrix.m12 + normal.y * matrix.m22,
        )

    # ── 名前付き算術 ───────────────────────────────────
    @staticmethod
    def add(left: "Vector2", right: "Vector2") -> "Vector2":
        return Vector2(left.x + right.x, left.y + right.y)

    @staticmethod
    def subtract(left: "Vector2", right: "Vector2") -> "Vector2":
        return Vector2(left.x - right.x, left.y - right.y)

    @staticmethod
    def multiply(left: Union["Vector2", Scalar], right: Union["Vector2", Scalar]) -> "Vector2":
        """成分積、またはスカラー倍（スカラーは左右どちらでもよい）。"""
        if isinstance(left, Vector2) and isinstance(right, Vector2):
            return Vector2(left.x * right.x, left.y * right.y)
        if isinstance(left, Vector2):
            f = np.float32(right)
            return Vector2(left.x * f, left.y * f)
        f = np.float32(left)
        return Vector2(f * right.x, f * right.y)

    @staticmethod
    def divide(left: "Vector2", right: Union["Vector2", Scalar]) -> "Vector2":
        """成分商、またはスカラー除算（ゼロ除算は inf/NaN）。"""
        if not isinstance(right, Vector2):
            right = Vector2(right)
        with _s.ieee_semantics():
            return Vector2(left.x / right.x, left.y / right.y)

    @staticmethod
    def negate(value: "Vector2") -> "Vector2":
        return Vector2(_s.ZERO - value.x, _s.ZERO - value.y)

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Vector2":
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2.add(self, other)

    def __sub__(self, other: Any) -> "Vector2":
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2.subtract(self, other)

    def __mul__(self, other: Any) -> "Vector2":
        if not isinstance(other, (Vector2,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector2.multiply(self, other)

    def __rmul__(self, other: Any) -> "Vector2":
        if not isinstance(other, _SCALAR_TYPES):
            return NotImplemented
        return Vector2.multiply(other, self)

    def __truediv__(self, other: Any) -> "Vector2":
        if not isinstance(other, (Vector2,) + _SCALAR_TYPES):
            return NotImplemented
        return Vector2.divide(self, other)

    def __neg__(self) -> "Vector2":
        return Vector2.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return bool(self.x == other.x and self.y == other.y)

    def __hash__(self) -> int:
        return hash((_s.component_hash(self.x), _s.component_hash(self.y)))

    def equals(self, other: object) -> bool:
        """成分ごとの厳密一致。型が異なれば False。"""
        return isinstance(other, Vector2) and self == other

    # ── 入出力 ───────────────────────────────────────
    def copy_to(self, array: Any, index: int = 0) -> None:
        """`array[index]` から x, y の順に書き込む。"""
        check_copy_destination(array, index, 2)
        array[index] = self.x
        array[index + 1] = self.y

    def __iter__(self) -> Iterator[np.float32]:
        yield self.x
        yield self.y

    def __format__(self, format_spec: str) -> str:
        parts = (_s.format_component(c, format_spec) for c in self)
        return "<" + _s.LIST_SEPARATOR.join(parts) + ">"

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return f"Vector2({float(self.x)!r}, {float(self.y)!r})"


__all__ = ["Vector2"]
