"""
どこで: `util.utils`
何を: `configs/default.yaml` とルート `config.yaml` を重ねた設定辞書を返す。
なぜ: 設定ファイルの探索と読込失敗時の扱いを `common.settings` から切り離すため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping

import yaml

logger = logging.getLogger(__name__)

# 後ろのファイルほど優先（トップレベルのキー単位で上書き）
_LAYERS = (Path("configs") / "default.yaml", Path("config.yaml"))


def _read_mapping(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        logger.debug("config ignored: %s (%s)", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.debug("config ignored: %s is not a mapping", path)
        return {}
    return data


def _find_project_root(start: Path) -> Path:
    """`pyproject.toml` か `configs/` を持つ最も近い祖先ディレクトリを返す。

    見つからなければ `start.parent.parent`（`<repo>/src/util` 想定）を返す。
    """
    here = start.resolve()
    for candidate in (here, *here.parents):
        if any((candidate / marker).exists() for marker in ("pyproject.toml", "configs")):
            return candidate
    return here.parent.parent


def _existing_layers(root: Path) -> Iterator[Path]:
    for rel in _LAYERS:
        path = root / rel
        if path.is_file():
            yield path


def load_config() -> Dict[str, Any]:
    """層を重ねた設定辞書を返す（フェイルソフト）。

    - 読めない/不正なファイルは空として扱う。
    - ネストした辞書はマージせず、トップレベルのキーを丸ごと置き換える。
    """
    merged: Dict[str, Any] = {}
    for path in _existing_layers(_find_project_root(Path(__file__).parent)):
        merged.update(_read_mapping(path))
    return merged


def config_section(cfg: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """`cfg[name]` が辞書ならそれを、そうでなければ空辞書を返す。"""
    section = cfg.get(name)
    return section if isinstance(section, dict) else {}
