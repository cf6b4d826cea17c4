"""
どこで: `numerics.hardware`
何を: ハードウェア加速フラグ（ベクトル形式の式 / numba カーネル経路を選ぶかどうか）を返す。
なぜ: 値型モジュールが設定層の詳細を知らずに経路を選べるようにするため。

どちらの経路も丸め誤差の範囲で同じ結果を返す。
"""

from __future__ import annotations

from common import settings


def is_hardware_accelerated() -> bool:
    """加速経路を使うなら True（`PXN_HARDWARE_ACCELERATED`）。"""
    return bool(settings.get().HARDWARE_ACCELERATED)


__all__ = ["is_hardware_accelerated"]
