"""
snippet_autocompleter.core

The engine behind the snippet autocompleter.
Contains:
 - validated snippet records and the snippet library (Snippet, SnippetLibrary)
 - placeholder parsing and template expansion (parse_tab_stops, expand_template)
 - multi-signal ranking (FusionRanker)
 - the tab-stop navigation state machine (TabStopNavigator)
 - the application facade (AutoCompleter) and host protocols
"""

from .snippet import Category, Snippet
from .snippet_library import DEFAULT_SNIPPETS, SnippetLibrary
from .template_parser import TabStop, expand_template, parse_tab_stops
from .fusion_ranker import FusionRanker, ScoredSnippet, prefix_score
from .tab_stops import TabStopNavigator
from .results import (
    AutocompleteError,
    CursorPlacementFailure,
    HostUnavailable,
    InsertionFailure,
    RegistrationFailure,
    Result,
    ValidationFailure,
)
from .autocompleter import AutoCompleter, FALLBACK, PRIMARY, detect_mode

__all__ = [
    "Category",
    "Snippet",
    "DEFAULT_SNIPPETS",
    "SnippetLibrary",
    "TabStop",
    "expand_template",
    "parse_tab_stops",
    "FusionRanker",
    "ScoredSnippet",
    "prefix_score",
    "TabStopNavigator",
    "AutocompleteError",
    "CursorPlacementFailure",
    "HostUnavailable",
    "InsertionFailure",
    "RegistrationFailure",
    "Result",
    "ValidationFailure",
    "AutoCompleter",
    "FALLBACK",
    "PRIMARY",
    "detect_mode",
]
