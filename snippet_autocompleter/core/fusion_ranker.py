# snippet_autocompleter/core/fusion_ranker.py
"""
FusionRanker - weighted multi-signal snippet ranker

Signals per snippet:
 - context: score_context_match(snippet, context), 0..50
 - usage:   min(usage_count * 3, 50)
 - prefix:  how well the snippet name matches the token being typed, 0..10

total = 0.5 * context + 0.3 * usage + 0.2 * prefix   (balanced preset)

Design notes:
 - Pure: usage counts are read, never written.
 - Stable ordering: snippets with equal totals keep the order the library
   enumerated them in. Python's sort is stable, so sorting on the score alone
   is enough; do not add a secondary key.
 - Snippets scoring exactly 0 are dropped unless nothing is being typed.
 - FusionRanker.debug_contributions(...) -> per-signal contributions for explainability.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from snippet_autocompleter.context.context_parser import Context, parse_context
from snippet_autocompleter.context.scorers import score_context_match
from snippet_autocompleter.core.snippet import Snippet

logger = logging.getLogger(__name__)

Weights = Dict[str, float]  # signal name -> weight
UsageStats = Mapping[str, int]

DEFAULT_TOPN = 10
USAGE_STEP = 3
USAGE_CAP = 50

# Preset weight profiles
_PRESETS: Dict[str, Weights] = {
    "balanced": {"context": 0.5, "usage": 0.3, "prefix": 0.2},
    "context":  {"context": 0.7, "usage": 0.1, "prefix": 0.2},
    "habit":    {"context": 0.3, "usage": 0.5, "prefix": 0.2},
}

WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _safe_normalize_weights(weights: Optional[Weights], preset: str = "balanced") -> Weights:
    base = dict(_PRESETS.get(preset, _PRESETS["balanced"]))
    if weights:
        base.update(weights)
    s = sum(base.values()) or 1.0
    return {k: float(v) / s for k, v in base.items()}


def initials(name: str) -> str:
    """First letter of every word; words split on separators and case changes."""
    return "".join(w[0] for w in WORD_RE.findall(name)).lower()


def prefix_score(snippet_name: str, token: str) -> float:
    """
    Match quality of the typed token against a snippet name (0..10).
    Empty token -> 5 (neutral).
    """
    if not token:
        return 5
    name = snippet_name.lower()
    tok = token.lower()
    if name.startswith(tok):
        return 10
    if tok in name:
        return 5
    if tok in initials(snippet_name):
        return 2
    return 0


def usage_score(count: int) -> float:
    return min(max(int(count or 0), 0) * USAGE_STEP, USAGE_CAP)


@dataclass(frozen=True)
class ScoredSnippet:
    snippet: Snippet
    score: float


class FusionRanker:
    """
    Combine context, usage and prefix signals into one ranking.

    Entrypoints:
      - rank(context, snippets, usage, topn) -> List[ScoredSnippet]
      - rank_completions(request, snippets, usage, topn) -> List[Snippet]
    """

    def __init__(self, preset: str = "balanced", weights: Optional[Weights] = None):
        self.preset = preset if preset in _PRESETS else "balanced"
        self.weights = _safe_normalize_weights(weights, self.preset)

    @staticmethod
    def presets() -> List[str]:
        return list(_PRESETS)

    def signals(self, snippet: Snippet, context: Context, usage: Optional[UsageStats] = None) -> Dict[str, float]:
        """Raw (unweighted) signal values for one snippet."""
        usage = usage or {}
        return {
            "context": float(score_context_match(snippet, context)),
            "usage": float(usage_score(usage.get(snippet.name, 0))),
            "prefix": float(prefix_score(snippet.name, context.current_token)),
        }

    def score(self, snippet: Snippet, context: Context, usage: Optional[UsageStats] = None) -> float:
        raw = self.signals(snippet, context, usage)
        return sum(self.weights.get(k, 0.0) * v for k, v in raw.items())

    def rank(self,
             context: Context,
             snippets: Iterable[Snippet],
             usage: Optional[UsageStats] = None,
             topn: int = DEFAULT_TOPN) -> List[ScoredSnippet]:
        """Score, filter, stable-sort and truncate."""
        keep_zero = context.current_token == ""
        scored = []
        for s in snippets:
            total = self.score(s, context, usage)
            if total > 0 or keep_zero:
                scored.append(ScoredSnippet(s, total))

        scored.sort(key=lambda ss: -ss.score)
        return scored[:max(topn, 0)]

    def rank_completions(self,
                         request,
                         snippets: Iterable[Snippet],
                         usage: Optional[UsageStats] = None,
                         topn: int = DEFAULT_TOPN) -> List[Snippet]:
        """
        Rank snippets for an autocomplete request.
        `request` needs text_before / text_after attributes; current_line is
        used when present and derived from text_before otherwise.
        """
        context = parse_context(
            getattr(request, "text_before", "") or "",
            getattr(request, "text_after", "") or "",
            getattr(request, "current_line", None),
        )
        return [ss.snippet for ss in self.rank(context, snippets, usage, topn)]

    # -----------------------------
    # Helpers: debug contributions
    # ------------------------------
    def debug_contributions(self, snippet: Snippet, context: Context,
                            usage: Optional[UsageStats] = None) -> Dict[str, float]:
        """
        Per-signal weighted contributions for one snippet plus the final score.
        Good for explainability/inspecting scores.
        """
        raw = self.signals(snippet, context, usage)
        out = {k: self.weights.get(k, 0.0) * v for k, v in raw.items()}
        out["final"] = sum(out.values())
        return out
