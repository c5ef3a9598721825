"""Shared JSON configuration storage."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_config_data(config_path: Path) -> dict[str, Any]:
    """Load configuration JSON data from disk.

    A missing, unreadable or malformed file yields an empty mapping so the
    application always starts with its built-in defaults.
    """
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_config_section(config_path: Path, section: str) -> dict[str, Any]:
    """Return one object-valued section of the configuration file."""
    value = load_config_data(config_path).get(section)
    return value if isinstance(value, dict) else {}


def save_config_data(config_path: Path, data: dict[str, Any]) -> None:
    """Persist configuration JSON data to disk."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
    )


def update_config_section(
    config_path: Path, section: str, values: dict[str, Any]
) -> None:
    """Merge ``values`` into one section and save the file."""
    payload = load_config_data(config_path)
    current = payload.get(section)
    merged = dict(current) if isinstance(current, dict) else {}
    merged.update(values)
    payload[section] = merged
    save_config_data(config_path, payload)
