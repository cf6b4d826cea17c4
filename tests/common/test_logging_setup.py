from __future__ import annotations

import logging

from common import settings, setup_default_logging


def _capture_basic_config(monkeypatch) -> list:
    calls: list = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    return calls


def test_uses_settings_level_when_unconfigured(monkeypatch) -> None:
    calls = _capture_basic_config(monkeypatch)
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    monkeypatch.setattr(settings.get(), "LOG_LEVEL", "DEBUG")
    setup_default_logging()
    assert len(calls) == 1
    assert calls[0]["level"] == logging.DEBUG
    assert "%(name)s" in calls[0]["format"]


def test_explicit_level_wins(monkeypatch) -> None:
    calls = _capture_basic_config(monkeypatch)
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    setup_default_logging(logging.WARNING)
    setup_default_logging("error")
    assert [c["level"] for c in calls] == [logging.WARNING, logging.ERROR]


def test_unknown_level_name_falls_back_to_info(monkeypatch) -> None:
    calls = _capture_basic_config(monkeypatch)
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    setup_default_logging("chatty")
    assert calls[0]["level"] == logging.INFO


def test_noop_when_root_has_handlers(monkeypatch) -> None:
    calls = _capture_basic_config(monkeypatch)
    monkeypatch.setattr(logging.getLogger(), "handlers", [logging.NullHandler()])
    setup_default_logging("DEBUG")
    assert calls == []
