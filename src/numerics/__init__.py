"""
どこで: `numerics` パッケージ。
何を: 単精度の幾何値型（Vector2/3/4, Matrix3x2, Matrix4x4, Quaternion, Plane）を公開する。
なぜ: 描画・物理・アニメーションが共有する数値基盤を、値セマンティクスの型として 1 箇所に置くため。

使い方:
    from numerics import Matrix4x4, Vector3

    m = Matrix4x4.create_rotation_z(np.pi / 2)
    Vector3.transform(Vector3(1, 0, 0), m)  # -> <0, 1, 0>（丸め誤差の範囲で）
"""

from .errors import (
    ArgumentOutOfRangeError,
    DestinationTooShortError,
    NullArgumentError,
    NumericsError,
)
from .hardware import is_hardware_accelerated
from .matrix3x2 import Matrix3x2
from .matrix4x4 import DecomposeResult, Matrix4x4
from .plane import Plane
from .quaternion import Quaternion
from .vector2 import Vector2
from .vector3 import Vector3
from .vector4 import Vector4

__all__ = [
    "Vector2",
    "Vector3",
    "Vector4",
    "Matrix3x2",
    "Matrix4x4",
    "DecomposeResult",
    "Quaternion",
    "Plane",
    "is_hardware_accelerated",
    "NumericsError",
    "NullArgumentError",
    "ArgumentOutOfRangeError",
    "DestinationTooShortError",
]
