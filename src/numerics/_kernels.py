"""
どこで: `numerics._kernels`
何を: 4x4 行列の積/行列式/逆行列/回転適用と Vector4 の同次変換を、平坦な float32 配列上のカーネルとして提供する。
なぜ: 同じ式を numba でコンパイルした経路（加速）と、そのまま解釈実行する経路の両方から使い、
      2 経路の数値を同一の float32 演算順序に揃えるため。

配列レイアウト:
- 行列は長さ 16、行優先（M11, M12, M13, M14, M21, ..., M44）。
- 回転は長さ 9、四元数から得た 3x3（`rotation_terms` と同じ並び）。
- カーネル内のリテラルは float64 昇格を避けるため `np.float32(...)` で書く。
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from .hardware import is_hardware_accelerated


class _Kernel:
    """解釈実行版と numba 版を持ち、加速フラグで呼び分けるラッパ。"""

    __slots__ = ("py", "jit", "name")

    def __init__(self, fn: Callable[..., Any]) -> None:
        self.py = fn
        self.jit = njit(cache=True)(fn)
        self.name = fn.__name__

    def __call__(self, *args: Any) -> Any:
        if is_hardware_accelerated():
            return self.jit(*args)
        return self.py(*args)


def kernel(fn: Callable[..., Any]) -> _Kernel:
    return _Kernel(fn)


@kernel
def mat4_multiply(a: np.ndarray, b: np.ndarray, out: np.ndarray) -> None:
    """`out = a * b`（行優先の標準的な行列積）。"""
    for i in range(4):
        r = i * 4
        for j in range(4):
            out[r + j] = (
                a[r] * b[j] + a[r + 1] * b[4 + j] + a[r + 2] * b[8 + j] + a[r + 3] * b[12 + j]
            )


@kernel
def mat4_determinant(m: np.ndarray) -> np.float32:
    """第 1 行に沿った余因子展開。下 2 行の 2x2 小行列式 6 個を再利用する。"""
    a, b, c, d = m[0], m[1], m[2], m[3]
    e, f, g, h = m[4], m[5], m[6], m[7]
    i, j, k, l = m[8], m[9], m[10], m[11]  # noqa: E741
    mm, n, o, p = m[12], m[13], m[14], m[15]

    kp_lo = k * p - l * o
    jp_ln = j * p - l * n
    jo_kn = j * o - k * n
    ip_lm = i * p - l * mm
    io_km = i * o - k * mm
    in_jm = i * n - j * mm

    return (
        a * (f * kp_lo - g * jp_ln + h * jo_kn)
        - b * (e * kp_lo - g * ip_lm + h * io_km)
        + c * (e * jp_ln - f * ip_lm + h * in_jm)
        - d * (e * jo_kn - f * io_km + g * in_jm)
    )


@kernel
def mat4_invert(m: np.ndarray, out: np.ndarray, epsilon: np.float32) -> bool:
    """余因子/行列式で逆行列を `out` に書く。

    `|det| < epsilon` のときは `out` を NaN で埋めて False を返す。
    """
    a, b, c, d = m[0], m[1], m[2], m[3]
    e, f, g, h = m[4], m[5], m[6], m[7]
    i, j, k, l = m[8], m[9], m[10], m[11]  # noqa: E741
    mm, n, o, p = m[12], m[13], m[14], m[15]

    kp_lo = k * p - l * o
    jp_ln = j * p - l * n
    jo_kn = j * o - k * n
    ip_lm = i * p - l * mm
    io_km = i * o - k * mm
    in_jm = i * n - j * mm

    a11 = f * kp_lo - g * jp_ln + h * jo_kn
    a12 = -(e * kp_lo - g * ip_lm + h * io_km)
    a13 = e * jp_ln - f * ip_lm + h * in_jm
    a14 = -(e * jo_kn - f * io_km + g * in_jm)

    det = a * a11 + b * a12 + c * a13 + d * a14
    if abs(det) < epsilon:
        for q in range(16):
            out[q] = np.float32(np.nan)
        return False

    inv = np.float32(1.0) / det

    out[0] = a11 * inv
    out[4] = a12 * inv
    out[8] = a13 * inv
    out[12] = a14 * inv

    out[1] = -(b * kp_lo - c * jp_ln + d * jo_kn) * inv
    out[5] = (a * kp_lo - c * ip_lm + d * io_km) * inv
    out[9] = -(a * jp_ln - b * ip_lm + d * in_jm) * inv
    out[13] = (a * jo_kn - b * io_km + c * in_jm) * inv

    gp_ho = g * p - h * o
    fp_hn = f * p - h * n
    fo_gn = f * o - g * n
    ep_hm = e * p - h * mm
    eo_gm = e * o - g * mm
    en_fm = e * n - f * mm

    out[2] = (b * gp_ho - c * fp_hn + d * fo_gn) * inv
    out[6] = -(a * gp_ho - c * ep_hm + d * eo_gm) * inv
    out[10] = (a * fp_hn - b * ep_hm + d * en_fm) * inv
    out[14] = -(a * fo_gn - b * eo_gm + c * en_fm) * inv

    gl_hk = g * l - h * k
    fl_hj = f * l - h * j
    fk_gj = f * k - g * j
    el_hi = e * l - h * i
    ek_gi = e * k - g * i
    ej_fi = e * j - f * i

    out[3] = -(b * gl_hk - c * fl_hj + d * fk_gj) * inv
    out[7] = (a * gl_hk - c * el_hi + d * ek_gi) * inv
    out[11] = -(a * fl_hj - b * el_hi + d * ej_fi) * inv
    out[15] = (a * fk_gj - b * ek_gi + c * ej_fi) * inv
    return True


@kernel
def mat4_rotate(m: np.ndarray, r: np.ndarray, out: np.ndarray) -> None:
    """4 行すべて（平行移動行を含む）の xyz に回転 `r` を右から掛ける。4 列目は残す。"""
    for row in range(4):
        s = row * 4
        x, y, z = m[s], m[s + 1], m[s + 2]
        out[s] = x * r[0] + y * r[3] + z * r[6]
        out[s + 1] = x * r[1] + y * r[4] + z * r[7]
        out[s + 2] = x * r[2] + y * r[5] + z * r[8]
        out[s + 3] = m[s + 3]


@kernel
def vec4_transform(v: np.ndarray, m: np.ndarray, out: np.ndarray) -> None:
    """行ベクトル `v`（長さ 4）に行列を右から掛ける（W=1 の暗黙付与はしない）。"""
    x, y, z, w = v[0], v[1], v[2], v[3]
    for j in range(4):
        out[j] = x * m[j] + y * m[4 + j] + z * m[8 + j] + w * m[12 + j]


__all__ = [
    "kernel",
    "mat4_multiply",
    "mat4_determinant",
    "mat4_invert",
    "mat4_rotate",
    "vec4_transform",
]
