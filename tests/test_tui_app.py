# tests/test_tui_app.py - registration of the Textual host (no terminal needed)
import json

import pytest

from snippet_autocompleter.core.autocompleter import CALLBACK_ID
from snippet_autocompleter.tui_app import SnippetEditorApp


@pytest.mark.parametrize("enabled", [True, False])
def test_plugin_enabled_controls_registration(tmp_path, monkeypatch, enabled):
    monkeypatch.chdir(tmp_path)
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"plugin_enabled": enabled}))
    app = SnippetEditorApp(str(cfg))
    assert app.engine.is_registered is enabled
    assert (CALLBACK_ID in app.engine.host.callbacks) is enabled
    app.engine.shutdown()
