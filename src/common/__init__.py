"""
どこで: `common` パッケージ。
何を: numerics から使う設定/環境変数/ロギングの共通基盤。
なぜ: 値型モジュールから実行時設定の取得経路を分離し、依存の向きを単純化するため。
"""

from . import settings
from .logging import setup_default_logging

__all__ = [
    "settings",
    "setup_default_logging",
]
