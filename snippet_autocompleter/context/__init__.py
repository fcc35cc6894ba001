# snippet_autocompleter/context/__init__.py
# cursor context analysis and context scoring

from .context_parser import (
    Context,
    detect_pattern,
    is_in_string_or_comment,
    parse_context,
)  # turn text around the cursor into a Context
from .scorers import score_context_match  # 0..50 relevance of a snippet to a Context

__all__ = [
    "Context",
    "detect_pattern",
    "is_in_string_or_comment",
    "parse_context",
    "score_context_match",
]
