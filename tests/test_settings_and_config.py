# tests/test_settings_and_config.py
import json
import logging
import time

import pytest

from snippet_autocompleter.utils.config_manager import DEFAULTS, Config
from snippet_autocompleter.utils.logger_utils import Log
from snippet_autocompleter.utils.settings_store import JsonSettingsStore, MemorySettingsStore


def test_memory_store():
    store = MemorySettingsStore({"a": 1})
    assert store.get("a") == 1
    store.set("b", [1])
    assert store.get("b") == [1]
    assert store.get("missing") is None


def test_json_store_roundtrip(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = JsonSettingsStore(str(path))
    store.set("SnippetUsageCount", {"for": 2})
    assert json.loads(path.read_text())["SnippetUsageCount"] == {"for": 2}
    assert JsonSettingsStore(str(path)).get("SnippetUsageCount") == {"for": 2}


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_json_store_bad_file_reads_empty(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(content)
    assert JsonSettingsStore(str(path)).get("SnippetUsageCount") is None


def test_config_defaults_written(tmp_path):
    path = tmp_path / "config.json"
    cfg = Config(str(path))
    assert cfg.get("max_results") == 10
    assert json.loads(path.read_text()) == DEFAULTS


def test_config_set_coerces(tmp_path):
    path = tmp_path / "config.json"
    cfg = Config(str(path))
    cfg.set("max_results", "5")
    cfg.set("plugin_enabled", "no")
    cfg.set("budget_ms", 20)
    assert cfg.get("max_results") == 5
    assert cfg.get("plugin_enabled") is False
    assert cfg.get("budget_ms") == 20.0
    assert Config(str(path)).get("max_results") == 5
    with pytest.raises(KeyError):
        cfg.set("colour", "red")


@pytest.mark.parametrize("content", ["{oops", "[]"])
def test_config_bad_file_uses_defaults(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    assert dict(Config(str(path)).items()) == DEFAULTS


def test_config_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_results": 4, "extra": True}))
    cfg = Config(str(path))
    assert cfg.get("max_results") == 4
    assert cfg.get("extra") is None


def test_time_block_warns_over_budget(caplog):
    with caplog.at_level(logging.DEBUG, logger="snippet_autocompleter"):
        with Log.time_block("slow_thing", budget_ms=0.5) as t:
            time.sleep(0.01)
    assert t.elapsed_ms >= 0.5
    assert "slow_thing took" in caplog.text


def test_time_block_quiet_within_budget(caplog):
    with caplog.at_level(logging.WARNING, logger="snippet_autocompleter"):
        with Log.time_block("fast_thing", budget_ms=10_000):
            pass
    assert "fast_thing" not in caplog.text
