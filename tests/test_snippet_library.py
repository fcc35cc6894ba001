# tests/test_snippet_library.py
import pytest

from snippet_autocompleter.core.results import ValidationFailure
from snippet_autocompleter.core.snippet import Category, Snippet
from snippet_autocompleter.core.snippet_library import DEFAULT_SNIPPETS, SnippetLibrary


@pytest.fixture
def lib():
    return SnippetLibrary()


def test_defaults(lib):
    assert len(lib.default_snippets()) == 24
    assert lib.all_snippets()[0].name == "service"
    assert {s.category for s in DEFAULT_SNIPPETS} == {Category.ESSENTIAL, Category.COMMON, Category.ADVANCED}
    assert "for" in lib and "nope" not in lib


@pytest.mark.parametrize("record", [
    {"name": "", "description": "d", "template": "t"},
    {"name": "bad name", "description": "d", "template": "t"},
    {"name": "ok", "description": "", "template": "t"},
    {"name": "ok", "description": "d", "template": ""},
    {"name": "ok", "description": "d", "template": "t", "category": "weird"},
])
def test_invalid_snippets_rejected(lib, record):
    result = lib.add_custom_snippet(record)
    assert not result
    assert isinstance(result.error, ValidationFailure)
    assert lib.custom_snippets() == []


@pytest.mark.parametrize("name", ["has-dash", "bad\n", "\nbad", "two words"])
def test_snippet_validation_raises(name):
    with pytest.raises(ValidationFailure):
        Snippet(name, "d", "t()")


def test_add_and_collisions(lib):
    assert lib.add_custom_snippet({"name": "greet", "description": "Say hi", "template": "print('$1')"})
    assert lib.all_snippets()[-1].name == "greet"

    dup = lib.add_custom_snippet(Snippet("greet", "again", "x"))
    assert dup.reason == "Snippet name already exists"

    clash = lib.add_custom_snippet(Snippet("for", "mine", "x"))
    assert clash.reason == "Snippet name conflicts with default snippet"
    assert len(lib.custom_snippets()) == 1


def test_remove(lib):
    lib.add_custom_snippet(Snippet("greet", "d", "t"))
    assert lib.remove_custom_snippet("greet")
    assert not lib.remove_custom_snippet("greet")
    assert not lib.remove_custom_snippet("for")
    assert "for" in lib


def test_tags_cleaned():
    s = Snippet.from_dict({"name": "x", "description": "d", "template": "t", "tags": "a, b,,a "})
    assert s.tags == ("a", "b")
    assert s.category is Category.CUSTOM


def test_load_and_export(lib):
    records = [
        {"name": "one", "description": "d", "template": "t", "tags": ["x"]},
        {"name": "for", "description": "clash", "template": "t"},
        "garbage",
        {"name": "two", "description": "d", "template": "t"},
    ]
    assert lib.load_custom_snippets(records) == 2
    exported = lib.export_custom_snippets()
    assert [r["name"] for r in exported] == ["one", "two"]
    assert exported[0] == {"name": "one", "description": "d", "template": "t",
                           "category": "custom", "tags": ["x"]}


def test_load_ignores_non_list(lib):
    lib.add_custom_snippet(Snippet("keep", "d", "t"))
    assert lib.load_custom_snippets({"name": "x"}) == 0
    assert [s.name for s in lib.custom_snippets()] == ["keep"]


def test_search(lib):
    assert [s.name for s in lib.search("datastore")] == ["datastore"]
    assert "forin" in [s.name for s in lib.search("ITERATION")]
    assert len(lib.search("")) == len(lib)


def test_by_category(lib):
    assert all(s.category is Category.ADVANCED for s in lib.by_category("advanced"))
    assert lib.by_category(Category.CUSTOM) == []
