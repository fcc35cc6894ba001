"""
snippet_autocompleter

Context-aware code snippet completion with tab-stop navigation.
"""

from snippet_autocompleter.core.autocompleter import AutoCompleter
from snippet_autocompleter.core.protocols import CompletionItem, CompletionRequest
from snippet_autocompleter.core.snippet import Category, Snippet

__all__ = ["AutoCompleter", "CompletionItem", "CompletionRequest", "Category", "Snippet"]

__version__ = "0.1.0"
