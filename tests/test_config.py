"""Tests for loading moderation config from YAML."""

import pytest
import yaml

from chatmod.moderation.config import (
    CONFIG_ENV_VAR,
    config_from_dict,
    config_to_dict,
    dump_config,
    load_config,
    resolve_config,
)
from chatmod.moderation.models import ModerationConfig


def _write_config(tmp_path, data) -> str:
    path = tmp_path / "chatmod.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_load_config(tmp_path):
    path = _write_config(
        tmp_path,
        {
            "moderation": {
                "blocked_terms": ["heck", "darn"],
                "max_messages_per_window": 3,
                "rate_limit_enabled": False,
            }
        },
    )
    config = load_config(path)
    assert config.blocked_terms == ("heck", "darn")
    assert config.max_messages_per_window == 3
    assert config.rate_limit_enabled is False
    # Untouched fields keep their defaults
    assert config.similarity_threshold == 0.8


def test_load_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == ModerationConfig()


def test_load_config_rejects_unknown_keys(tmp_path):
    path = _write_config(tmp_path, {"moderation": {"max_messages": 3}})
    with pytest.raises(ValueError, match="max_messages"):
        load_config(path)


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_config_from_dict_rejects_string_terms():
    with pytest.raises(ValueError, match="blocked_terms"):
        config_from_dict({"blocked_terms": "spam"})


def test_dump_and_reload(tmp_path):
    config = ModerationConfig(blocked_terms=("one",), caps_normalization_enabled=False)
    path = tmp_path / "dumped.yaml"
    path.write_text(dump_config(config))
    assert load_config(path) == config
    assert config_to_dict(config)["blocked_terms"] == ["one"]


def test_resolve_config_uses_env(tmp_path, monkeypatch):
    path = _write_config(tmp_path, {"moderation": {"history_size": 4}})
    monkeypatch.setenv(CONFIG_ENV_VAR, path)
    assert resolve_config().history_size == 4


def test_resolve_config_defaults(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert resolve_config() == ModerationConfig()


@pytest.mark.parametrize(
    "setting, value",
    [
        ("similarity_threshold", "high"),
        ("max_messages_per_window", "ten"),
        ("rate_window_ms", 1.5),
        ("history_size", True),
        ("rate_limit_enabled", "yes"),
    ],
)
def test_load_config_rejects_wrong_types(tmp_path, setting, value):
    path = _write_config(tmp_path, {"moderation": {setting: value}})
    with pytest.raises(ValueError, match=setting):
        load_config(path)


def test_load_config_empty_section_gives_defaults(tmp_path):
    path = tmp_path / "chatmod.yaml"
    path.write_text("moderation:\n")
    assert load_config(path) == ModerationConfig()
