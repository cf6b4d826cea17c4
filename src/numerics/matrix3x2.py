"""
どこで: `numerics.matrix3x2`
何を: 2D アフィン変換行列 `Matrix3x2`（平行移動/拡大縮小/回転/スキューの生成、行列式、逆行列、合成）。
なぜ: 2D 座標の変換を 6 成分（2x2 線形部 + 平行移動行）で値として扱うため。

行ベクトル規約: 点 p は `p * M` で変換され、平行移動は 3 行目 (M31, M32)。
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Tuple, Union

import numpy as np

from . import scalar as _s
from .vector2 import Vector2

logger = logging.getLogger(__name__)

Scalar = Union[int, float, np.number]
_SCALAR_TYPES = (int, float, np.number)

_FIELDS = ("m11", "m12", "m21", "m22", "m31", "m32")

# 軸に揃った角度へのスナップ閾値（IEEE 剰余で [-π, π] に畳んだ後の角度に適用）
_SNAP_ZERO = np.float32(1.74532943e-05)
_SNAP_HALF_PI_LO = np.float32(1.570779)
_SNAP_HALF_PI_HI = np.float32(1.57081378)
_SNAP_PI = np.float32(3.14157534)


def snapped_cos_sin(radians: Scalar) -> Tuple[np.float32, np.float32]:
    """角度を 2π の IEEE 剰余へ畳み、0°/90°/180°/270° 近傍では厳密な (cos, sin) を返す。"""
    r = _s.ieee_remainder(radians, _s.TWO_PI)
    if -_SNAP_ZERO < r < _SNAP_ZERO:
        return _s.ONE, _s.ZERO
    if _SNAP_HALF_PI_LO < r < _SNAP_HALF_PI_HI:
        return _s.ZERO, _s.ONE
    if r < -_SNAP_PI or r > _SNAP_PI:
        return np.float32(-1.0), _s.ZERO
    if -_SNAP_HALF_PI_HI < r < -_SNAP_HALF_PI_LO:
        return _s.ZERO, np.float32(-1.0)
    return _s.cos(r), _s.sin(r)


class Matrix3x2:
    """3x2 行列（行優先 M11..M32、成分は `numpy.float32`）。

    Notes
    -----
    `Matrix3x2.identity()` は毎回新しい値を返す。共有の可変シングルトンは持たない。
    `translation` などの代入でハッシュ値が変わるため、キーに使った値は変更しないこと。
    """

    __slots__ = _FIELDS

    def __init__(
        self,
        m11: Scalar = 0.0,
        m12: Scalar = 0.0,
        m21: Scalar = 0.0,
        m22: Scalar = 0.0,
        m31: Scalar = 0.0,
        m32: Scalar = 0.0,
    ) -> None:
        self.m11 = np.float32(m11)
        self.m12 = np.float32(m12)
        self.m21 = np.float32(m21)
        self.m22 = np.float32(m22)
        self.m31 = np.float32(m31)
        self.m32 = np.float32(m32)

    # ── ファクトリ ───────────────────────────────────
    @classmethod
    def identity(cls) -> "Matrix3x2":
        return cls(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @property
    def is_identity(self) -> bool:
        return bool(
            self.m11 == 1.0
            and self.m22 == 1.0
            and self.m12 == 0.0
            and self.m21 == 0.0
            and self.m31 == 0.0
            and self.m32 == 0.0
        )

    @property
    def translation(self) -> Vector2:
        return Vector2(self.m31, self.m32)

    @translation.setter
    def translation(self, value: Vector2) -> None:
        self.m31 = value.x
        self.m32 = value.y

    @staticmethod
    def create_translation(
        position: Union[Vector2, Scalar], y_position: Optional[Scalar] = None
    ) -> "Matrix3x2":
        """`create_translation(Vector2)` または `create_translation(x, y)`。"""
        if isinstance(position, Vector2):
            x, y = position.x, position.y
        else:
            if y_position is None:
                raise TypeError("create_translation(x, y) には y が必要です")
            x, y = position, y_position
        return Matrix3x2(1.0, 0.0, 0.0, 1.0, x, y)

    @staticmethod
    def create_scale(
        scale: Union[Vector2, Scalar],
        y_scale: Union[Vector2, Scalar, None] = None,
        center_point: Optional[Vector2] = None,
    ) -> "Matrix3x2":
        """拡大縮小行列を生成する。

        受け付ける形:

        - `create_scale(s)` / `create_scale(s, center)`: 一様
        - `create_scale(sx, sy)` / `create_scale(sx, sy, center)`: 軸ごと
        - `create_scale(Vector2)` / `create_scale(Vector2, center)`: ベクトル指定

        中心点 c を与えると平行移動 `c * (1 - s)` が入り、c が不動点になる。
        """
        if isinstance(scale, Vector2):
            sx, sy = scale.x, scale.y
            center = y_scale
        elif y_scale is None or isinstance(y_scale, Vector2):
            sx = sy = np.float32(scale)
            center = y_scale
        else:
            sx, sy = np.float32(scale), np.float32(y_scale)
            center = center_point
        if center is None:
            return Matrix3x2(sx, 0.0, 0.0, sy, 0.0, 0.0)
        m31 = center.x * (_s.ONE - sx)
        m32 = center.y * (_s.ONE - sy)
        return Matrix3x2(sx, 0.0, 0.0, sy, m31, m32)

    @staticmethod
    def create_skew(
        radians_x: Scalar, radians_y: Scalar, center_point: Optional[Vector2] = None
    ) -> "Matrix3x2":
        """スキュー行列（M21 = tan(radians_x), M12 = tan(radians_y)）。"""
        tx = _s.tan(radians_x)
        ty = _s.tan(radians_y)
        if center_point is None:
            return Matrix3x2(1.0, ty, tx, 1.0, 0.0, 0.0)
        m31 = (_s.ZERO - center_point.y) * tx
        m32 = (_s.ZERO - center_point.x) * ty
        return Matrix3x2(1.0, ty, tx, 1.0, m31, m32)

    @staticmethod
    def create_rotation(radians: Scalar, center_point: Optional[Vector2] = None) -> "Matrix3x2":
        """回転行列。軸に揃った角度の近傍では sin/cos を厳密な 0/±1 に置き換える。"""
        c, s = snapped_cos_sin(radians)
        if center_point is None:
            return Matrix3x2(c, s, _s.ZERO - s, c, 0.0, 0.0)
        cx, cy = center_point.x, center_point.y
        m31 = cx * (_s.ONE - c) + cy * s
        m32 = cy * (_s.ONE - c) - cx * s
        return Matrix3x2(c, s, _s.ZERO - s, c, m31, m32)

    # ── 行列式/逆行列 ─────────────────────────────────
    def get_determinant(self) -> np.float32:
        return self.m11 * self.m22 - self.m21 * self.m12

    @staticmethod
    def invert(matrix: "Matrix3x2") -> Tuple[bool, "Matrix3x2"]:
        """逆行列を求める。

        Returns
        -------
        tuple[bool, Matrix3x2]
            `(成功, 逆行列)`。`|det| < float.Epsilon`（最小の正の非正規化数）なら
            `(False, 全成分 NaN)`。例外は送出しない。
        """
        m = matrix
        det = m.m11 * m.m22 - m.m21 * m.m12
        if _s.abs_(det) < _s.EPSILON:
            logger.debug("Matrix3x2.invert: singular matrix (det=%r)", float(det))
            return False, Matrix3x2(*([_s.NAN] * 6))
        with _s.ieee_semantics():
            inv = _s.ONE / det
            return True, Matrix3x2(
                m.m22 * inv,
                (_s.ZERO - m.m12) * inv,
                (_s.ZERO - m.m21) * inv,
                m.m11 * inv,
                (m.m21 * m.m32 - m.m31 * m.m22) * inv,
                (m.m31 * m.m12 - m.m11 * m.m32) * inv,
            )

    # ── 算術 ─────────────────────────────────────────
    @staticmethod
    def lerp(matrix1: "Matrix3x2", matrix2: "Matrix3x2", amount: Scalar) -> "Matrix3x2":
        t = np.float32(amount)
        return Matrix3x2(*(a + (b - a) * t for a, b in zip(matrix1, matrix2)))

    @staticmethod
    def negate(value: "Matrix3x2") -> "Matrix3x2":
        return Matrix3x2(*(_s.ZERO - c for c in value))

    @staticmethod
    def add(value1: "Matrix3x2", value2: "Matrix3x2") -> "Matrix3x2":
        return Matrix3x2(*(a + b for a, b in zip(value1, value2)))

    @staticmethod
    def subtract(value1: "Matrix3x2", value2: "Matrix3x2") -> "Matrix3x2":
        return Matrix3x2(*(a - b for a, b in zip(value1, value2)))

    @staticmethod
    def multiply(value1: "Matrix3x2", value2: Union["Matrix3x2", Scalar]) -> "Matrix3x2":
        """行列積（`value1` を適用してから `value2`）、またはスカラー倍。

        平行移動行は `value2` の平行移動を加算する。オペランドの順序を入れ替えてはならない。
        """
        if not isinstance(value2, Matrix3x2):
            f = np.float32(value2)
            return Matrix3x2(*(c * f for c in value1))
        a, b = value1, value2
        return Matrix3x2(
            a.m11 * b.m11 + a.m12 * b.m21,
            a.m11 * b.m12 + a.m12 * b.m22,
            a.m21 * b.m11 + a.m22 * b.m21,
            a.m21 * b.m12 + a.m22 * b.m22,
            a.m31 * b.m11 + a.m32 * b.m21 + b.m31,
            a.m31 * b.m12 + a.m32 * b.m22 + b.m32,
        )

    # ── 演算子 ───────────────────────────────────────
    def __add__(self, other: Any) -> "Matrix3x2":
        if not isinstance(other, Matrix3x2):
            return NotImplemented
        return Matrix3x2.add(self, other)

    def __sub__(self, other: Any) -> "Matrix3x2":
        if not isinstance(other, Matrix3x2):
            return NotImplemented
        return Matrix3x2.subtract(self, other)

    def __mul__(self, other: Any) -> "Matrix3x2":
        if not isinstance(other, (Matrix3x2,) + _SCALAR_TYPES):
            return NotImplemented
        return Matrix3x2.multiply(self, other)

    def __neg__(self) -> "Matrix3x2":
        return Matrix3x2.negate(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3x2):
            return NotImplemented
        return all(a == b for a, b in zip(self, other))

    def __hash__(self) -> int:
        return sum(_s.component_hash(c) for c in self)

    def equals(self, other: object) -> bool:
        return isinstance(other, Matrix3x2) and self == other

    # ── 入出力 ───────────────────────────────────────
    def __iter__(self) -> Iterator[np.float32]:
        for name in _FIELDS:
            yield getattr(self, name)

    def __format__(self, format_spec: str) -> str:
        f = _s.format_component
        c = [f(v, format_spec) for v in self]
        return "{{ {{M11:{} M12:{}}} {{M21:{} M22:{}}} {{M31:{} M32:{}}} }}".format(*c)

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return "Matrix3x2({})".format(", ".join(repr(float(c)) for c in self))


__all__ = ["Matrix3x2", "snapped_cos_sin"]
