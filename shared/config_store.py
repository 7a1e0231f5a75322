"""Centralized configuration store for the membership tools.

Reads and writes per-tool JSON config files in data/config/.
Each tool gets a single JSON file keyed by tool name (e.g., "membership-signup.json").
Tools load config values with fallback to their hardcoded defaults.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONFIG_DIR = Path(__file__).resolve().parent.parent / "data" / "config"


def load_config(tool_name: str) -> dict | None:
    """Load a tool's JSON config. Returns None if missing or unreadable."""
    path = CONFIG_DIR / f"{tool_name}.json"
    if not path.exists():
        return None
    try:
        config = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return None
    return config if isinstance(config, dict) else None


def save_config(tool_name: str, config: dict) -> None:
    """Write a tool's config to JSON. Creates dir if needed."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    path = CONFIG_DIR / f"{tool_name}.json"
    path.write_text(json.dumps(config, indent=2, ensure_ascii=False))


def get_config_value(tool_name: str, key: str, default: Any) -> Any:
    """Get a single key from a tool's config, with fallback to default."""
    config = load_config(tool_name)
    if config is None:
        return default
    return config.get(key, default)


def get_tool_settings(tool_name: str, defaults: dict[str, Any]) -> dict[str, Any]:
    """Return *defaults* overlaid with the tool's saved values.

    Keys the tool does not declare in *defaults* are ignored, and a saved
    value whose type differs from the default's falls back to the default.
    """
    config = load_config(tool_name) or {}
    merged = dict(defaults)
    for key, default in defaults.items():
        if key not in config:
            continue
        value = config[key]
        if default is None or isinstance(value, type(default)):
            merged[key] = value
        elif isinstance(default, float) and isinstance(value, int) and not isinstance(value, bool):
            merged[key] = float(value)
    return merged


def set_config_value(tool_name: str, key: str, value: Any) -> None:
    """Set a single key in a tool's config, preserving other keys."""
    config = load_config(tool_name) or {}
    config[key] = value
    save_config(tool_name, config)
