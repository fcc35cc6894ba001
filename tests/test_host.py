# tests/test_host.py
import pytest

from snippet_autocompleter.host import LocalHost, LocalInputSource, TextDocument


def test_edit_and_cursor():
    doc = TextDocument("abc\ndef")
    doc.edit_text((1, 2), (1, 2), "XY")
    assert doc.text == "aXYbc\ndef"
    doc.edit_text((1, 1), (2, 1), "")
    assert doc.text == "def"
    doc.set_cursor(1, 4)
    assert doc.cursor == (1, 4)
    assert doc.edits == 2


def test_out_of_range_positions():
    doc = TextDocument("abc")
    with pytest.raises(ValueError):
        doc.edit_text((2, 1), (2, 1), "x")
    with pytest.raises(ValueError):
        doc.set_cursor(1, 9)
    assert doc.text == "abc"


def test_append():
    doc = TextDocument("")
    doc.append_text("one")
    doc.append_text("two")
    assert doc.text == "one\ntwo"


def test_request_at():
    doc = TextDocument("local x\nfor")
    req = doc.request_at(2, 4)
    assert req.text_before == "local x\nfor"
    assert req.text_after == ""
    assert doc.position_of(len("local x\nf")) == (2, 2)


def test_input_source_unsubscribe():
    src = LocalInputSource()
    seen = []
    sub = src.subscribe(seen.append)
    src.press("Tab", shift=True)
    sub.unsubscribe()
    sub.unsubscribe()
    src.click()
    assert [(e.kind, e.key, e.shift) for e in seen] == [("key", "tab", True)]
    assert src.subscriber_count == 0


def test_host_priority():
    host = LocalHost()
    host.register_autocomplete_callback("low", 1, lambda r: ["low"])
    host.register_autocomplete_callback("high", 100, lambda r: ["high"])
    assert host.request(None) == ["high"]
    host.deregister_autocomplete_callback("high")
    assert host.request(None) == ["low"]
