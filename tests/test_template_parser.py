# tests/test_template_parser.py
import pytest

from snippet_autocompleter.core.template_parser import TabStop, expand_template, parse_tab_stops


def stops(template):
    return [ts.stop for ts in parse_tab_stops(template)]


def test_simple_order():
    assert stops('local $1 = game:GetService("$2")') == [1, 2]


def test_final_stop_last():
    assert stops("for i = $1, $2 do\n\t$0\nend") == [1, 2, 0]
    assert stops("$2 $0 $1") == [1, 2, 0]


def test_no_markers():
    assert parse_tab_stops("print('hi')") == []
    assert parse_tab_stops("") == []


def test_positions():
    first, second, final = parse_tab_stops("for i = $1, $2 do\n\t$0\nend")
    assert (first.line, first.column, first.offset) == (0, 11, 10)
    assert (second.line, second.column) == (0, 15)
    assert (final.line, final.column) == (1, 4)


def test_repeated_marker_keeps_text_order():
    out = parse_tab_stops("local $1 = {}\nfunction $1:$2()")
    assert [(ts.stop, ts.line) for ts in out] == [(1, 0), (1, 1), (2, 1)]


def test_multi_digit_marker():
    assert stops("$10 $2") == [2, 10]


def test_shifted():
    assert TabStop(1, 0, 9).shifted(3, 5) == TabStop(1, 3, 13)
    # later template lines keep their own column
    assert TabStop(0, 1, 4).shifted(3, 5) == TabStop(0, 4, 4)


def test_expand_without_values_is_identity():
    template = "local $1 = $2"
    assert expand_template(template) == template
    assert expand_template(template, {}) == template


def test_expand_values():
    assert expand_template('local $1 = game:GetService("$2")', {1: "Players", 2: "Players"}) == \
        'local Players = game:GetService("Players")'
    # string keys accepted, missing values keep their marker
    assert expand_template("$1 $2", {"2": "y"}) == "$1 y"


@pytest.mark.parametrize("key", ["name", "1a", None, 1.5])
def test_expand_rejects_non_numeric_keys(key):
    with pytest.raises(ValueError, match="stop numbers"):
        expand_template("$1", {key: "x"})
