from __future__ import annotations

from pathlib import Path

import pytest

import util.utils as utils
from util.utils import _find_project_root


def test_find_project_root_fallback(tmp_path: Path) -> None:
    # tmp_path/a/b のような構造（上流に pyproject.toml/configs が無い）では
    # フォールバックで start.parent.parent を返す
    a = tmp_path / "a" / "b"
    a.mkdir(parents=True)
    start = a
    got = _find_project_root(start)
    assert got == start.parent.parent


def test_find_project_root_by_configs_dir(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    start = tmp_path / "src" / "util"
    start.mkdir(parents=True)
    assert _find_project_root(start) == tmp_path


def _use_root(monkeypatch: pytest.MonkeyPatch, root: Path) -> None:
    monkeypatch.setattr(utils, "_find_project_root", lambda start: root)


def test_load_config_root_overrides_default(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "numerics:\n  hardware_accelerated: true\nother: 1\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text(
        "numerics:\n  hardware_accelerated: false\n", encoding="utf-8"
    )
    _use_root(monkeypatch, tmp_path)
    cfg = utils.load_config()
    # トップレベルのみ上書き（ディープマージしない）
    assert cfg["numerics"] == {"hardware_accelerated": False}
    assert cfg["other"] == 1


def test_load_config_is_fail_soft(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("numerics: [unclosed\n", encoding="utf-8")
    (tmp_path / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    _use_root(monkeypatch, tmp_path)
    assert utils.load_config() == {}


def test_load_config_missing_files(tmp_path: Path, monkeypatch) -> None:
    _use_root(monkeypatch, tmp_path)
    assert utils.load_config() == {}


def test_repository_default_config_is_readable() -> None:
    section = utils.load_config().get("numerics")
    assert isinstance(section, dict)
    assert "hardware_accelerated" in section


@pytest.mark.parametrize(
    "cfg, expected",
    [({"numerics": {"a": 1}}, {"a": 1}), ({"numerics": [1, 2]}, {}), ({}, {})],
)
def test_config_section_requires_mapping(cfg, expected) -> None:
    assert utils.config_section(cfg, "numerics") == expected
