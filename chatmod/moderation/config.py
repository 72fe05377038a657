"""Load and dump moderation config as YAML.

File format::

    moderation:
      blocked_terms: [spam, badword]
      max_messages_per_window: 10
      rate_limit_enabled: true
"""

from __future__ import annotations

import os
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import yaml

from chatmod.moderation.models import ModerationConfig

CONFIG_ENV_VAR = "CHATMOD_CONFIG"


def config_from_dict(data: dict[str, Any] | None) -> ModerationConfig:
    """Build a config from a plain mapping, rejecting unknown keys."""
    data = dict(data or {})
    known = {f.name for f in fields(ModerationConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown moderation setting(s): {', '.join(sorted(unknown))}")
    if "blocked_terms" in data:
        terms = data["blocked_terms"] or []
        if isinstance(terms, str):
            raise ValueError("blocked_terms must be a list of terms, not a string")
        data["blocked_terms"] = tuple(str(t) for t in terms)
    return ModerationConfig(**data)


def config_to_dict(config: ModerationConfig) -> dict[str, Any]:
    data = asdict(config)
    data["blocked_terms"] = list(config.blocked_terms)
    return data


def load_config(path: str | Path) -> ModerationConfig:
    """Load a moderation config from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    section = data.get("moderation") or {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'moderation' must be a mapping")
    return config_from_dict(section)


def dump_config(config: ModerationConfig) -> str:
    return yaml.safe_dump({"moderation": config_to_dict(config)}, sort_keys=False)


def resolve_config(path: str | Path | None = None) -> ModerationConfig:
    """Load *path*, else the file named by ``CHATMOD_CONFIG``, else defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return ModerationConfig()
    return load_config(path)
