# tests/test_cli.py - CLI smoke checks
import json

import pytest

from snippet_autocompleter.cli.cli import CLI, main


@pytest.fixture
def run(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    def _run(*argv):
        code = main(["--config", str(tmp_path / "config.json"), *argv])
        return code, capsys.readouterr().out

    return _run


def test_list(run):
    code, out = run("list", "--category", "essential")
    assert code == 0
    assert "service" in out and "datastore" not in out


def test_suggest(run):
    code, out = run("suggest", "")
    assert code == 0
    assert "module" in out


def test_suggest_in_comment(run):
    code, out = run("suggest", "x = 1\\n-- for")
    assert code == 0
    assert "no suggestions" in out


def test_explain(run):
    code, out = run("explain", "module", "")
    assert code == 0
    assert "final" in out
    assert run("explain", "nope", "")[0] == 1


def test_add_remove_custom(run, tmp_path):
    assert run("add", "greet", "Say hello", "print('$1')", "--tags", "debug,print")[0] == 0
    saved = json.loads((tmp_path / "data" / "settings.json").read_text())
    assert saved["CustomSnippets"][0]["name"] == "greet"

    code, out = run("add", "for", "mine", "x")
    assert code == 1 and "conflicts" in out

    assert run("remove", "greet")[0] == 0
    assert run("remove", "greet")[0] == 1
    assert run("remove", "for")[0] == 1


def test_insert_and_stats(run, tmp_path):
    script = tmp_path / "main.lua"
    script.write_text("")
    code, out = run("insert", "service", str(script))
    assert code == 0
    assert script.read_text() == 'local $1 = game:GetService("$2")'
    assert "$1@1:9" in out

    code, out = run("stats")
    assert code == 0 and "service" in out

    assert run("reset-stats")[0] == 0
    saved = json.loads((tmp_path / "data" / "settings.json").read_text())
    assert saved["SnippetUsageCount"] == {}


def test_insert_bad_position(run, tmp_path):
    script = tmp_path / "main.lua"
    script.write_text("x")
    code, out = run("insert", "for", str(script), "--line", "5")
    assert code == 1
    assert script.read_text() == "x"


def test_stops_and_expand(run):
    code, out = run("stops", "for")
    assert code == 0 and "$0" in out
    code, out = run("expand", "service", "1=Players", "2=Players")
    assert code == 0 and "Players" in out
    assert run("expand", "service", "oops")[0] == 1


def test_api(run):
    code, out = run("api", "tween", "--kind", "services")
    assert code == 0 and "TweenService" in out


def test_disabled_plugin_gives_no_suggestions(run, tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"plugin_enabled": False}))
    code, out = run("suggest", "")
    assert code == 0
    assert "plugin_enabled is off" in out

    # insertion does not depend on the host callback
    script = tmp_path / "main.lua"
    script.write_text("")
    assert run("insert", "while", str(script))[0] == 0
    assert script.read_text().startswith("while $1 do")


def test_enabled_plugin_registers(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cli = CLI(str(tmp_path / "config.json"))
    assert cli.enabled and cli.engine.is_registered
    cli.engine.shutdown()


def test_suggest_scores_use_lookback_window(run):
    # the early "function" is outside the window, so ifelse gets no in-function bonus
    text = "local function f()\n" + "x = 1\n" * 30 + "if"
    code, out = run("suggest", text)
    assert code == 0
    assert "ifelse" in out
    assert "2.00" in out and "6.00" not in out
