"""共通フィクスチャ。

- 乱数シード固定
- 加速経路/スカラー経路の切り替え（`accel` で両経路をパラメタライズ）
- 設定スナップショットの退避と復元
"""

from __future__ import annotations

import dataclasses
from typing import Iterator

import numpy as np
import pytest

from common import settings


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(params=[True, False], ids=["accel", "scalar"])
def accel(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> bool:
    """加速フラグを True/False の両方で実行する。"""
    monkeypatch.setattr(settings.get(), "HARDWARE_ACCELERATED", request.param)
    return request.param


@pytest.fixture()
def restore_settings() -> Iterator[None]:
    """`reload_from_env()` を呼ぶテストの後で設定値を元に戻す。"""
    snapshot = dataclasses.asdict(settings.get())
    yield
    current = settings.get()
    for name, value in snapshot.items():
        setattr(current, name, value)
