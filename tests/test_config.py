from __future__ import annotations

import json
import math

import pytest

import settings_store
from quorumclock.config import (
    DEFAULT_SOURCES,
    DEFAULT_TIMEOUT,
    TimeSettings,
    TimeSource,
    load_time_settings,
    save_time_settings,
)
from quorumclock.errors import SettingsError


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings_store, "settings_path", lambda: path)
    return path


def test_defaults():
    settings = TimeSettings.from_mapping({})
    assert settings.sources == DEFAULT_SOURCES
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.parallel is False


def test_default_sources_order():
    assert [s.format for s in DEFAULT_SOURCES] == [
        "worldtimeapi",
        "timeapi",
        "worldclockapi",
    ]


def test_custom_sources_keep_order():
    data = {
        "sources": [
            {"name": "c", "url": "http://c", "format": "worldclockapi"},
            {"name": "a", "url": "http://a", "format": "worldtimeapi"},
            {"name": "b", "url": "http://b", "format": "timeapi"},
        ],
        "timeout": "2",
        "parallel": True,
    }
    settings = TimeSettings.from_mapping(data)
    assert [s.name for s in settings.sources] == ["c", "a", "b"]
    assert settings.timeout == 2.0
    assert settings.parallel is True


@pytest.mark.parametrize(
    "data",
    [
        {"sources": []},
        {"sources": [{"name": "a", "url": "http://a", "format": "timeapi"}] * 4},
        {"sources": [{"name": "a", "url": "http://a"}] * 3},
        {"sources": [{"name": "a", "url": "http://a", "format": "ntp"}] * 3},
        {"sources": ["http://a", "http://b", "http://c"]},
        {"timeout": 0},
        {"timeout": "soon"},
        {"timeout": "inf"},
        {"timeout": "nan"},
        {"sources": 5},
        {"sources": "abc"},
        {"sources": {"name": "a", "url": "http://a", "format": "timeapi"}},
        {"parallel": "false"},
        {"parallel": 1},
    ],
)
def test_invalid_settings(data):
    with pytest.raises(SettingsError):
        TimeSettings.from_mapping(data)


def test_overrides():
    base = TimeSettings(timeout=3.0, parallel=True)
    assert base.with_overrides() == base
    assert base.with_overrides(timeout=1.0).timeout == 1.0
    assert base.with_overrides(parallel=False).parallel is False


def test_override_is_validated():
    with pytest.raises(SettingsError):
        TimeSettings().with_overrides(timeout=-1)


def test_time_source_is_hashable():
    source = TimeSource(name="x", url="http://x", format="timeapi")
    assert {source: 1}[source] == 1


def test_load_and_save_round_trip_scalars(settings_file):
    settings_file.write_text(json.dumps({"custom": "kept"}), encoding="utf-8")

    save_time_settings(TimeSettings(timeout=7.5, parallel=True))

    data = json.loads(settings_file.read_text(encoding="utf-8"))
    assert data == {"custom": "kept", "parallel": True, "timeout": 7.5}
    loaded = load_time_settings()
    assert (loaded.timeout, loaded.parallel) == (7.5, True)


@pytest.mark.parametrize("timeout", [math.inf, -math.inf, math.nan])
def test_non_finite_timeout_is_rejected(timeout):
    with pytest.raises(SettingsError):
        TimeSettings(timeout=timeout)


def test_parallel_must_be_a_json_boolean():
    assert TimeSettings.from_mapping({"parallel": False}).parallel is False
    assert TimeSettings.from_mapping({"parallel": True}).parallel is True
