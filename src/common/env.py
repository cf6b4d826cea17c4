"""
どこで: `common.env`
何を: 環境変数の軽量パースヘルパを提供。
なぜ: 設定層で `os.getenv` + 例外/境界ガードを繰り返さないため。
"""

from __future__ import annotations

import os
from typing import Optional

_TRUE_WORDS = {"true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"false", "f", "no", "n", "off"}


def env_bool(name: str, default: bool = False) -> bool:
    """真偽環境変数を取得（0/1, true/false を許容）。

    Parameters
    ----------
    name : str
        環境変数名。
    default : bool
        未設定/解釈不能時の既定値。

    Returns
    -------
    bool
        解釈した真偽値。
    """
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    try:
        # 数値優先
        return int(raw) != 0
    except ValueError:
        s = raw.strip().lower()
        if s in _TRUE_WORDS:
            return True
        if s in _FALSE_WORDS:
            return False
        return bool(default)


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """文字列環境変数を取得（空文字は未設定扱い）。"""
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw if raw else default


def coerce_bool(value: object, default: bool = False) -> bool:
    """YAML 由来の値を真偽へ寄せる（bool/数値/文字列を許容）。"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_WORDS:
            return True
        if s in _FALSE_WORDS:
            return False
    return bool(default)


__all__ = ["env_bool", "env_str", "coerce_bool"]
