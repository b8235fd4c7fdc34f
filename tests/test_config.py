"""Tests for user configuration persistence."""

from __future__ import annotations

import json

import pytest

from paper_network.config import (
    UserConfig,
    _config_to_dict,
    _dict_to_config,
    get_config_path,
    load_config,
    save_config,
)
from paper_network.models import GraphPolicy


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "paper-network" / "config.json"
    monkeypatch.setattr("paper_network.config.get_config_path", lambda: path)
    return path


def test_config_path_uses_app_name():
    path = get_config_path()
    assert path.name == "config.json"
    assert path.parent.name == "paper-network"


def test_missing_file_returns_defaults(config_file):
    config = load_config()
    assert config == UserConfig()
    assert config.config_defaulted is False


def test_save_then_load(config_file):
    config = UserConfig(
        data_source="https://data.test/ai",
        fallback_title="Title unavailable",
        allow_recenter_on_node_click=False,
        request_timeout_seconds=12,
        theme_name="solarized-dark",
    )

    assert save_config(config) is True
    assert load_config() == config
    assert not list(config_file.parent.glob(".config-*.tmp"))


@pytest.mark.parametrize("payload", [[], "oops", 123])
def test_load_config_non_dict_root_returns_default(payload, config_file) -> None:
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps(payload), encoding="utf-8")

    loaded = load_config()

    assert isinstance(loaded, UserConfig)
    assert loaded.config_defaulted is True


def test_invalid_json_returns_defaults(config_file, caplog):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("{broken", encoding="utf-8")

    loaded = load_config()

    assert loaded.config_defaulted is True
    assert "invalid JSON" in caplog.text


def test_invalid_utf8_returns_defaults(config_file, caplog):
    config_file.parent.mkdir(parents=True)
    config_file.write_bytes(b'{"theme_name": "\xff\xfe"}')

    loaded = load_config()

    assert loaded.config_defaulted is True
    assert loaded.theme_name == UserConfig().theme_name
    assert "not valid UTF-8" in caplog.text


def test_wrong_types_fall_back_per_field():
    config = _dict_to_config(
        {
            "data_source": 42,
            "fallback_title": "",
            "allow_recenter_on_node_click": "yes",
            "request_timeout_seconds": True,
            "theme_name": "neon",
        }
    )
    assert config == UserConfig()


@pytest.mark.parametrize(("raw", "expected"), [(0, 1), (-5, 1), (45, 45), (10_000, 300)])
def test_request_timeout_is_clamped(raw, expected):
    assert _dict_to_config({"request_timeout_seconds": raw}).request_timeout_seconds == expected


def test_runtime_flag_not_persisted():
    data = _config_to_dict(UserConfig(config_defaulted=True))
    assert "config_defaulted" not in data


def test_graph_policy_from_config():
    config = UserConfig(fallback_title="n/a", allow_recenter_on_node_click=False)
    assert config.graph_policy() == GraphPolicy(
        fallback_title="n/a", allow_recenter_on_node_click=False
    )


def test_save_failure_returns_false(tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr(
        "paper_network.config.get_config_path", lambda: blocker / "config.json"
    )
    assert save_config(UserConfig()) is False
