"""Tests for shared/config_store.py -- per-tool JSON config read/write and settings merge."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

import shared.config_store as config_mod


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path):
    """Redirect CONFIG_DIR to tmp_path for every test."""
    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True)
    with patch.object(config_mod, "CONFIG_DIR", config_dir):
        yield config_dir


# ── load_config ──────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_none_when_missing(self):
        assert config_mod.load_config("nonexistent") is None

    def test_reads_valid_json(self, _isolate_config_dir):
        path = _isolate_config_dir / "membership-signup.json"
        path.write_text(json.dumps({"admin_page_size": 10}))
        result = config_mod.load_config("membership-signup")
        assert result == {"admin_page_size": 10}

    def test_returns_none_on_corrupt_json(self, _isolate_config_dir):
        path = _isolate_config_dir / "bad.json"
        path.write_text("NOT VALID JSON")
        assert config_mod.load_config("bad") is None


# ── save_config ──────────────────────────────────────────────────────────


class TestSaveConfig:
    def test_creates_file(self, _isolate_config_dir):
        config_mod.save_config("membership-admin", {"draft_storage_key": "kiosk-1", "admin_page_size": 20})
        path = _isolate_config_dir / "membership-admin.json"
        assert path.exists()
        data = json.loads(path.read_text())
        assert data == {"draft_storage_key": "kiosk-1", "admin_page_size": 20}

    def test_overwrites_existing(self, _isolate_config_dir):
        config_mod.save_config("tool", {"v": 1})
        config_mod.save_config("tool", {"v": 2})
        result = config_mod.load_config("tool")
        assert result["v"] == 2


# ── get_config_value ─────────────────────────────────────────────────────


class TestGetConfigValue:
    def test_returns_default_when_no_config(self):
        assert config_mod.get_config_value("missing", "key", "default") == "default"

    def test_returns_value_when_present(self, _isolate_config_dir):
        config_mod.save_config("tool", {"timeout": 30})
        assert config_mod.get_config_value("tool", "timeout", 10) == 30

    def test_returns_default_for_missing_key(self, _isolate_config_dir):
        config_mod.save_config("tool", {"timeout": 30})
        assert config_mod.get_config_value("tool", "retries", 3) == 3

    def test_non_object_config_is_ignored(self, _isolate_config_dir):
        (_isolate_config_dir / "tool.json").write_text("[1, 2]")
        assert config_mod.get_config_value("tool", "timeout", 10) == 10


# ── set_config_value ─────────────────────────────────────────────────────


class TestSetConfigValue:
    def test_preserves_other_keys(self, _isolate_config_dir):
        config_mod.save_config("membership-signup", {"admin_page_size": 10})
        config_mod.set_config_value("membership-signup", "submission_backend", "http")
        assert config_mod.load_config("membership-signup") == {
            "admin_page_size": 10,
            "submission_backend": "http",
        }

    def test_creates_file_when_missing(self, _isolate_config_dir):
        config_mod.set_config_value("membership-signup", "admin_page_size", 20)
        assert config_mod.load_config("membership-signup") == {"admin_page_size": 20}


# ── get_tool_settings ────────────────────────────────────────────────────


class TestGetToolSettings:
    DEFAULTS = {"page_size": 10, "delay": 0.4, "backend": "local", "extra": None}

    def test_defaults_when_no_config(self):
        assert config_mod.get_tool_settings("missing", self.DEFAULTS) == self.DEFAULTS

    def test_saved_values_overlay_defaults(self, _isolate_config_dir):
        config_mod.save_config("tool", {"page_size": 25, "backend": "http"})
        merged = config_mod.get_tool_settings("tool", self.DEFAULTS)
        assert merged["page_size"] == 25
        assert merged["backend"] == "http"
        assert merged["delay"] == 0.4

    def test_int_accepted_for_float_default(self, _isolate_config_dir):
        config_mod.save_config("tool", {"delay": 2})
        merged = config_mod.get_tool_settings("tool", self.DEFAULTS)
        assert merged["delay"] == 2.0
        assert isinstance(merged["delay"], float)

    def test_mismatched_type_keeps_default(self, _isolate_config_dir):
        config_mod.save_config("tool", {"page_size": "ten", "delay": "fast"})
        merged = config_mod.get_tool_settings("tool", self.DEFAULTS)
        assert merged["page_size"] == 10
        assert merged["delay"] == 0.4

    def test_none_default_accepts_anything(self, _isolate_config_dir):
        config_mod.save_config("tool", {"extra": ["a", "b"]})
        assert config_mod.get_tool_settings("tool", self.DEFAULTS)["extra"] == ["a", "b"]

    def test_undeclared_keys_ignored(self, _isolate_config_dir):
        config_mod.save_config("tool", {"surprise": 1})
        assert "surprise" not in config_mod.get_tool_settings("tool", self.DEFAULTS)
