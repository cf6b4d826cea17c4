"""
どこで: `numerics.scalar`
何を: 単精度スカラーカーネル（三角関数/平方根/累乗/IEEE 剰余、定数、ビット再解釈、1 成分の文字列化）。
なぜ: すべての値型が同じ float32 丸め規則に従うよう、倍精度で計算して float32 に丸める経路を 1 箇所に集約するため。

注意:
- 成分はすべて `numpy.float32`。numpy>=2 (NEP 50) の昇格規則により Python float との演算も float32 に留まる。
- 定義域外（sqrt(-1), acos(2), sin(inf) など）は例外ではなく NaN を返す。
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

# ── 定数 ─────────────────────────────────────────────
PI = np.float32(math.pi)  # 3.14159274
TWO_PI = PI * np.float32(2.0)
EPSILON = np.nextafter(np.float32(0.0), np.float32(1.0))  # 最小の正の非正規化数 (~1.4e-45)
FLT_EPSILON = np.finfo(np.float32).eps  # 1.1920929e-07
NAN = np.float32(np.nan)
ZERO = np.float32(0.0)
ONE = np.float32(1.0)
HALF = np.float32(0.5)


def f32(value: float) -> np.float32:
    """値を float32 スカラーへ丸める。"""
    return np.float32(value)


def ieee_semantics() -> np.errstate:
    """IEEE-754 の inf/NaN 生成（ゼロ除算・オーバーフロー）を警告なしで通すコンテキスト。"""
    return np.errstate(all="ignore")


def _unary(fn: Callable[[float], float], x: float) -> np.float32:
    try:
        return np.float32(fn(float(x)))
    except ValueError:
        return NAN


# ── 初等関数（倍精度で計算 → float32 へ丸め） ─────────────
def sqrt(x: float) -> np.float32:
    return _unary(math.sqrt, x)


def sin(x: float) -> np.float32:
    return _unary(math.sin, x)


def cos(x: float) -> np.float32:
    return _unary(math.cos, x)


def tan(x: float) -> np.float32:
    return _unary(math.tan, x)


def acos(x: float) -> np.float32:
    return _unary(math.acos, x)


def abs_(x: float) -> np.float32:
    return np.float32(abs(np.float32(x)))


def pow(x: float, y: float) -> np.float32:
    """`x ** y` を float32 で返す（オーバーフローは inf、定義域外は NaN）。"""
    with ieee_semantics():
        return np.float32(np.power(np.float64(x), np.float64(y)))


def ieee_remainder(x: float, y: float) -> np.float32:
    """IEEE-754 剰余 `x - y * round_half_even(x / y)` を返す。

    `x` が無限大、または `y` が 0 のときは NaN。`y` が無限大なら `x` をそのまま返す。
    """
    xf = float(x)
    yf = float(y)
    if math.isnan(xf) or math.isnan(yf) or math.isinf(xf) or yf == 0.0:
        return NAN
    return np.float32(math.remainder(xf, yf))


# ── ビット再解釈 ───────────────────────────────────────
def all_bits_set(dtype: np.dtype | type = np.float32) -> np.generic:
    """全ビット 1 のパターンを `dtype` として再解釈した値を返す。

    float32/float64 では NaN（0xFFFFFFFF / 0xFFFFFFFFFFFFFFFF）、符号付き整数では -1 になる。
    """
    dt = np.dtype(dtype)
    ones = np.full(1, -1, dtype=np.dtype(f"i{dt.itemsize}"))
    return ones.view(dt)[0]


def bits(value: float) -> int:
    """float32 のビットパターンを符号なし整数で返す。"""
    return int(np.array([value], dtype=np.float32).view(np.uint32)[0])


def component_hash(value: np.float32) -> int:
    """成分のハッシュ。等しい値（0.0 と -0.0 を含む）は同じハッシュになる。"""
    if value != value:
        # NaN はオブジェクト依存ハッシュを避けてビット列で決める
        return hash(("nan", bits(value)))
    return hash(float(value))


# ── 文字列化 ─────────────────────────────────────────
def format_component(value: np.float32, format_spec: str = "") -> str:
    """1 成分を文字列化する。

    - `format_spec` が空なら float32 の最短往復表現（`1`, `0.5`, `3.1415927`）。
    - NaN は `NaN`、無限大は `∞` / `-∞`。
    - それ以外は `format(float(value), format_spec)`。
    """
    v = np.float32(value)
    if v != v:
        return "NaN"
    if np.isinf(v):
        return "∞" if v > 0 else "-∞"
    if format_spec:
        return format(float(v), format_spec)
    text = str(v)
    if text.endswith(".0"):
        text = text[:-2]
    return text


LIST_SEPARATOR = ", "

__all__ = [
    "PI",
    "TWO_PI",
    "EPSILON",
    "FLT_EPSILON",
    "NAN",
    "ZERO",
    "ONE",
    "HALF",
    "LIST_SEPARATOR",
    "f32",
    "ieee_semantics",
    "sqrt",
    "sin",
    "cos",
    "tan",
    "acos",
    "abs_",
    "pow",
    "ieee_remainder",
    "all_bits_set",
    "bits",
    "component_hash",
    "format_component",
]
