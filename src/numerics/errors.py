"""
どこで: `numerics.errors`
何を: 引数エラーの型と、`copy_to` 系の出力先検査（null → 範囲 → 容量の順）を提供する。
なぜ: 数値的な失敗（特異行列など）は戻り値で返し、呼び出し側の誤用だけを型付き例外で即時に伝えるため。
"""

from __future__ import annotations

from typing import Any, Optional


class NumericsError(Exception):
    """numerics パッケージが送出する例外の基底。"""


class NullArgumentError(NumericsError, TypeError):
    """必須引数に None が渡された。"""

    def __init__(self, param_name: str) -> None:
        super().__init__(f"{param_name} は None にできません")
        self.param_name = param_name


class ArgumentOutOfRangeError(NumericsError, ValueError):
    """引数が許容範囲外。`param_name` で違反した引数名を示す。"""

    def __init__(self, param_name: str, value: Any = None, message: Optional[str] = None) -> None:
        if message is None:
            message = f"{param_name} が範囲外です: {value!r}"
        super().__init__(message)
        self.param_name = param_name
        self.value = value


class DestinationTooShortError(NumericsError, ValueError):
    """出力先配列の残り容量が書き込む要素数より小さい。"""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"出力先の残り容量が不足しています（必要 {required}, 残り {available}）"
        )
        self.required = required
        self.available = available


def check_copy_destination(array: Any, index: int, count: int) -> None:
    """`array[index:index + count]` へ書き込めるか検査する。

    Raises
    ------
    NullArgumentError
        `array` が None。
    ArgumentOutOfRangeError
        `index < 0` または `index >= len(array)`。
    DestinationTooShortError
        `len(array) - index < count`。
    """
    if array is None:
        raise NullArgumentError("array")
    size = len(array)
    if index < 0 or index >= size:
        raise ArgumentOutOfRangeError("index", index)
    if size - index < count:
        raise DestinationTooShortError(count, size - index)


__all__ = [
    "NumericsError",
    "NullArgumentError",
    "ArgumentOutOfRangeError",
    "DestinationTooShortError",
    "check_copy_destination",
]
