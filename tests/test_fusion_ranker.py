# tests/test_fusion_ranker.py
import pytest

from snippet_autocompleter.context.context_parser import parse_context
from snippet_autocompleter.core.fusion_ranker import (
    FusionRanker,
    initials,
    prefix_score,
    usage_score,
)
from snippet_autocompleter.core.protocols import CompletionRequest
from snippet_autocompleter.core.snippet import Snippet
from snippet_autocompleter.core.snippet_library import SnippetLibrary


@pytest.fixture
def ranker():
    return FusionRanker()


@pytest.fixture(scope="module")
def snippets():
    return SnippetLibrary().all_snippets()


def names(ranked):
    return [s.name for s in ranked]


def test_empty_document_ranking(ranker, snippets):
    out = ranker.rank_completions(CompletionRequest(text_before=""), snippets)
    assert len(out) == 10
    assert names(out)[:3] == ["module", "service", "function"]
    # remaining ties keep library order
    assert names(out)[3:] == ["remote", "wait", "ifelse", "for", "forin", "while", "spawn"]


def test_scores_for_empty_document(ranker, snippets):
    ctx = parse_context("")
    by_name = {s.name: s for s in snippets}
    # 0.5*40 + 0.3*0 + 0.2*5
    assert ranker.score(by_name["module"], ctx) == pytest.approx(21.0)
    assert ranker.score(by_name["service"], ctx) == pytest.approx(11.0)
    assert ranker.score(by_name["tween"], ctx) == pytest.approx(1.0)


def test_usage_lifts_snippet(ranker, snippets):
    out = ranker.rank_completions(CompletionRequest(text_before=""), snippets, usage={"wait": 100})
    assert names(out)[:2] == ["module", "wait"]


def test_zero_scores_dropped_while_typing(ranker, snippets):
    out = ranker.rank_completions(CompletionRequest(text_before="local x = 1\nzzz"), snippets)
    assert names(out) == ["service", "function"]


def test_prefix_match_ranks_first(ranker, snippets):
    out = ranker.rank_completions(CompletionRequest(text_before="print(1)\nx = prom"), snippets)
    assert names(out) == ["promise"]


def test_topn_respected(ranker, snippets):
    ctx = parse_context("")
    assert len(ranker.rank(ctx, snippets, topn=3)) == 3
    assert ranker.rank(ctx, snippets, topn=0) == []


def test_ties_are_stable(ranker):
    beta = Snippet("beta", "b", "b()")
    alpha = Snippet("alpha", "a", "a()")
    ctx = parse_context("print(1)\nx = 2\n")
    ranked = ranker.rank(ctx, [beta, alpha])
    assert [r.snippet.name for r in ranked] == ["beta", "alpha"]
    assert ranked[0].score == ranked[1].score


def test_rank_is_pure(ranker, snippets):
    usage = {"for": 2}
    ranker.rank_completions(CompletionRequest(text_before="for"), snippets, usage=usage)
    assert usage == {"for": 2}


def test_prefix_score():
    assert prefix_score("service", "") == 5
    assert prefix_score("service", "ser") == 10
    assert prefix_score("service", "SER") == 10
    assert prefix_score("forin", "in") == 5
    assert prefix_score("GetPlayerData", "pd") == 2
    assert prefix_score("service", "xyz") == 0


def test_initials():
    assert initials("GetPlayerData") == "gpd"
    assert initials("profile_service") == "ps"
    assert initials("HTTPRequest") == "hr"


def test_usage_score():
    assert usage_score(0) == 0
    assert usage_score(5) == 15
    assert usage_score(17) == 50
    assert usage_score(-3) == 0


def test_presets_and_weights():
    assert FusionRanker.presets() == ["balanced", "context", "habit"]
    fr = FusionRanker(weights={"context": 1, "usage": 1, "prefix": 2})
    assert fr.weights == pytest.approx({"context": 0.25, "usage": 0.25, "prefix": 0.5})
    assert FusionRanker(preset="nope").preset == "balanced"


def test_debug_contributions(ranker, snippets):
    ctx = parse_context("")
    module = next(s for s in snippets if s.name == "module")
    parts = ranker.debug_contributions(module, ctx, {"module": 2})
    assert parts["context"] == pytest.approx(20.0)
    assert parts["usage"] == pytest.approx(1.8)
    assert parts["prefix"] == pytest.approx(1.0)
    assert parts["final"] == pytest.approx(ranker.score(module, ctx, {"module": 2}))


def test_never_more_than_ten_with_many_matches(ranker):
    lib = SnippetLibrary()
    for i in range(30):
        assert lib.add_custom_snippet(Snippet(f"item{i}", "custom item", f"item{i}($1)"))
    ctx = parse_context("print(1)\nx = item")
    scored = ranker.rank(ctx, lib.all_snippets(), topn=len(lib))
    assert len(scored) >= 30 and all(s.score > 0 for s in scored)

    out = ranker.rank_completions(CompletionRequest(text_before="print(1)\nx = item"), lib.all_snippets())
    assert len(out) == 10
    assert names(out) == [f"item{i}" for i in range(10)]
