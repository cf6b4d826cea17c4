"""
どこで: `numerics.plane`
何を: 平面 `Plane`（法線 + 符号付き距離 D）の生成/正規化/変換と、ベクトルとの内積。
なぜ: 点-平面距離、クリッピング、影/反射行列の入力として平面を値で扱うため。

平面上の点 p は `dot(normal, p) + d == 0` を満たす。法線の単位長は型として強制しない。
"""

from __future__ import annotations

from typing import Any, Iterator, Union

import numpy as np

from . import scalar as _s
from .hardware import is_hardware_accelerated
from .matrix4x4 import Matrix4x4
from .quaternion import Quaternion, rotation_terms
from .vector3 import Vector3
from .vector4 import Vector4

Scalar = Union[int, float, np.number]


class Plane:
    """平面 `normal · p + d = 0`。

    - `Plane(x, y, z, d)`: 成分指定
    - `Plane(Vector3, d)`: 法線と距離
    - `Plane(Vector4)`: (x, y, z) を法線、w を距離とする

    `normal` と `d` は代入できる。ハッシュは成分から計算するので、set や dict の
    キーに入れた後は書き換えないこと。
    """

    __slots__ = ("normal", "d")

    def __init__(
        self,
        x: Union[Scalar, Vector3, Vector4] = 0.0,
        y: Scalar = 0.0,
        z: Scalar = 0.0,
        d: Scalar = 0.0,
    ) -> None:
        if isinstance(x, Vector4):
            self.normal = Vector3(x.x, x.y, x.z)
            self.d = x.w
            return
        if isinstance(x, Vector3):
            self.normal = Vector3(x.x, x.y, x.z)
            self.d = np.float32(y)
            return
        self.normal = Vector3(x, y, z)
        self.d = np.float32(d)

    # ── 生成/正規化 ───────────────────────────────────
    @staticmethod
    def create_from_vertices(point1: Vector3, point2: Vector3, point3: Vector3) -> "Plane":
        """3 点を通る平面（法線は `(p2 - p1) × (p3 - p1)` を正規化、向きは巻き順に従う）。"""
        if is_hardware_accelerated():
            n = Vector3.normalize(Vector3.cross(point2 - point1, point3 - point1))
            return Plane(n, _s.ZERO - Vector3.dot(n, point1))
        ax = point2.x - point1.x
        ay = point2.y - point1.y
        az = point2.z - point1.z
        bx = point3.x - point1.x
        by = point3.y - point1.y
        bz = point3.z - point1.z
        nx = ay * bz - az * by
        ny = az * bx - ax * bz
        nz = ax * by - ay * bx
        with _s.ieee_semantics():
            inv = _s.ONE / _s.sqrt(nx * nx + ny * ny + nz * nz)
        n = Vector3(nx * inv, ny * inv, nz * inv)
        return Plane(n, _s.ZERO - (n.x * point1.x + n.y * point1.y + n.z * point1.z))

    @staticmethod
    def normalize(value: "Plane") -> "Plane":
        """法線を単位長にし、D も同じ比率で縮める。

        法線の長さの二乗が 1 から FLT_EPSILON（1.1920929e-7）未満しか離れていなければ、
        同じ成分の新しい `Plane` を返す（引数は共有しない）。
        """
        n = value.normal
        ls = n.x * n.x + n.y * n.y + n.z * n.z
        if _s.abs_(ls - _s.ONE) < _s.FLT_EPSILON:
            return Plane(n, value.d)
        with _s.ieee_semantics():
            if is_hardware_accelerated():
                length = _s.sqrt(ls)
                return Plane(n / length, value.d / length)
            inv = _s.ONE / _s.sqrt(ls)
            return Plane(n.x * inv, n.y * inv, n.z * inv, value.d * inv)

    # ── 変換 ─────────────────────────────────────────
    @staticmethod
    def transform(plane: "Plane", matrix: Union[Matrix4x4, Quaternion]) -> "Plane":
        """平面を変換する。

        行列なら逆行列の転置で変換する（非一様スケール/せん断でも面が保たれる）。
        逆行列が存在しない場合は NaN の平面になる。四元数なら法線だけ回転し D は変えない。
        """
        x, y, z, d = plane.normal.x, plane.normal.y, plane.normal.z, plane.d
        if isinstance(matrix, Quaternion):
            r11, r12, r13, r21, r22, r23, r31, r32, r33 = rotation_terms(matrix)
            return Plane(
                x * r11 + y * r21 + z * r31,
                x * r12 + y * r22 + z * r32,
                x * r13 + y * r23 + z * r33,
                d,
            )
        # 失敗時の NaN 行列はそのまま結果に伝播させる
        _, m = Matrix4x4.invert(matrix)
        return Plane(
            x * m.m11 + y * m.m12 + z * m.m13 + d * m.m14,
            x * m.m21 + y * m.m22 + z * m.m23 + d * m.m24,
            x * m.m31 + y * m.m32 + z * m.m33 + d * m.m34,
            x * m.m41 + y * m.m42 + z * m.m43 + d * m.m44,
        )

    # ── 内積 ─────────────────────────────────────────
    @staticmethod
    def dot(plane: "Plane", value: Vector4) -> np.float32:
        """`(normal, d) · (x, y, z, w)`。"""
        n = plane.normal
        return n.x * value.x + n.y * value.y + n.z * value.z + plane.d * value.w

    @staticmethod
    def dot_coordinate(plane: "Plane", value: Vector3) -> np.float32:
        """点 `value` の符号付き距離（法線が単位長なら実距離）: `normal · value + d`。"""
        return Vector3.dot(plane.normal, value) + plane.d

    @staticmethod
    def dot_normal(plane: "Plane", value: Vector3) -> np.float32:
        return Vector3.dot(plane.normal, value)

    # ── 比較/入出力 ───────────────────────────────────
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plane):
            return NotImplemented
        return bool(self.normal == other.normal and self.d == other.d)

    def __hash__(self) -> int:
        return hash(self.normal) + _s.component_hash(self.d)

    def equals(self, other: object) -> bool:
        return isinstance(other, Plane) and self == other

    def __iter__(self) -> Iterator[np.float32]:
        yield from self.normal
        yield self.d

    def __format__(self, format_spec: str) -> str:
        return "{{Normal:{} D:{}}}".format(
            format(self.normal, format_spec), _s.format_component(self.d, format_spec)
        )

    def __str__(self) -> str:
        return format(self, "")

    def __repr__(self) -> str:
        return "Plane({}, {}, {}, {})".format(*(repr(float(c)) for c in self))


__all__ = ["Plane"]
