"""
どこで: `common.settings`
何を: numerics の実行時設定（ハードウェア加速フラグ、ログレベル）を型付きで一元管理する。
なぜ: `os.getenv` の散在を解消し、YAML 既定値と環境変数の優先順位を 1 箇所に固定するため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from util.utils import config_section, load_config

from .env import coerce_bool, env_bool, env_str

logger = logging.getLogger(__name__)


@dataclass
class _Settings:
    # 加速経路（numba カーネル / ベクトル形式の式）
    HARDWARE_ACCELERATED: bool = True

    # Misc
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def _yaml_section() -> Mapping[str, Any]:
    return config_section(load_config(), "numerics")


def reload_from_env() -> None:
    """YAML 既定値を読み、環境変数で上書きして設定を再構築する。

    優先順（後勝ち）:
    1) `_Settings` のフィールド既定値
    2) `configs/default.yaml` / ルート `config.yaml` の `numerics:` セクション
    3) 環境変数 `PXN_HARDWARE_ACCELERATED`, `PXN_LOG_LEVEL`
    """
    section = _yaml_section()

    accel = coerce_bool(section.get("hardware_accelerated", True), True)
    _settings.HARDWARE_ACCELERATED = env_bool("PXN_HARDWARE_ACCELERATED", accel)

    level = section.get("log_level", "INFO")
    _settings.LOG_LEVEL = (env_str("PXN_LOG_LEVEL", str(level)) or "INFO").upper()

    logger.debug(
        "settings reloaded: hardware_accelerated=%s log_level=%s",
        _settings.HARDWARE_ACCELERATED,
        _settings.LOG_LEVEL,
    )


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
