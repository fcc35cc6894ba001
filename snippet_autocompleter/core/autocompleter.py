# snippet_autocompleter/core/autocompleter.py
"""
AutoCompleter - application facade.

Purpose:
 - Own the SnippetLibrary, FusionRanker, TabStopNavigator and usage counts
 - Load/save usage counts and custom snippets through a settings store
 - Decide primary vs fallback mode from the editor host's capabilities
 - Simple public API for hosts/CLI/tests:
     handle_request(request), rank_completions(request), insert_snippet(doc, snippet, pos),
     get_usage_stats(), reset_usage_stats(), add_custom_snippet(...), remove_custom_snippet(name),
     register(), unregister(), retry_registration(), shutdown()

Everything that crosses into the host goes through guarded_call, so a failing
host degrades to a failed Result (or an empty completion list) plus a log line.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from snippet_autocompleter.context.context_parser import current_line_of, is_in_string_or_comment
from snippet_autocompleter.core.fusion_ranker import DEFAULT_TOPN, FusionRanker
from snippet_autocompleter.core.protocols import (
    CompletionItem,
    CompletionRequest,
    DocumentProtocol,
    EditorHostProtocol,
    InputSourceProtocol,
    Position,
    SettingsStoreProtocol,
    Subscription,
)
from snippet_autocompleter.core.results import (
    HostUnavailable,
    InsertionFailure,
    RegistrationFailure,
    Result,
    guarded_call,
)
from snippet_autocompleter.core.snippet import Snippet
from snippet_autocompleter.core.snippet_library import SnippetLibrary
from snippet_autocompleter.core.tab_stops import TabStopNavigator
from snippet_autocompleter.core.template_parser import parse_tab_stops
from snippet_autocompleter.utils.logger_utils import Log
from snippet_autocompleter.utils.settings_store import CUSTOM_SNIPPETS_KEY, USAGE_KEY

logger = logging.getLogger(__name__)

PRIMARY = "primary"
FALLBACK = "fallback"

CALLBACK_ID = "LuaAutocomplete"
CALLBACK_PRIORITY = 100

DEFAULT_BUDGET_MS = 10.0
DEFAULT_LOOKBACK = 100


def detect_mode(host: Optional[EditorHostProtocol]) -> str:
    """`primary` when the host is there and can register completion callbacks."""
    if host is None or not getattr(host, "available", False):
        return FALLBACK
    if not callable(getattr(host, "register_autocomplete_callback", None)):
        return FALLBACK
    return PRIMARY


def _clean_usage(saved: Any) -> Dict[str, int]:
    if not isinstance(saved, Mapping):
        return {}
    out: Dict[str, int] = {}
    for name, count in saved.items():
        try:
            n = int(count)
        except (TypeError, ValueError):
            continue
        if n > 0:
            out[str(name)] = n
    return out


class AutoCompleter:
    """Snippet autocomplete engine. One per editor session."""

    def __init__(self,
                 host: Optional[EditorHostProtocol] = None,
                 settings: Optional[SettingsStoreProtocol] = None,
                 *,
                 library: Optional[SnippetLibrary] = None,
                 ranker: Optional[FusionRanker] = None,
                 input_source: Optional[InputSourceProtocol] = None,
                 navigator: Optional[TabStopNavigator] = None,
                 max_results: int = DEFAULT_TOPN,
                 budget_ms: float = DEFAULT_BUDGET_MS,
                 lookback_chars: int = DEFAULT_LOOKBACK):
        self.host = host
        self.settings = settings
        self.library = library or SnippetLibrary()
        self.ranker = ranker or FusionRanker()
        self.navigator = navigator or TabStopNavigator(input_source)
        self.max_results = max_results
        self.budget_ms = budget_ms
        self.lookback_chars = lookback_chars

        self._usage: Dict[str, int] = {}
        self._registration: Optional[Subscription] = None
        self.mode = detect_mode(host)
        if self.mode == FALLBACK:
            logger.warning("editor completion API not available, using fallback mode")

        self._restore_state()

    # Lifecycle ---------------------------------------------------------
    def __enter__(self) -> "AutoCompleter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        """Leave tab-stop mode and drop the host registration."""
        self.navigator.exit()
        self.unregister()

    # Persistence ---------------------------------------------------------
    def _restore_state(self) -> None:
        if self.settings is None:
            return
        saved_custom = guarded_call(self.settings.get, CUSTOM_SNIPPETS_KEY)
        if saved_custom and saved_custom.value is not None:
            n = self.library.load_custom_snippets(saved_custom.value)
            if n:
                logger.info("%d custom snippets loaded", n)

        saved_usage = guarded_call(self.settings.get, USAGE_KEY)
        if saved_usage:
            self.load_usage_stats(saved_usage.value)

    def _persist(self, key: str, value: Any) -> bool:
        """Best-effort save; failures are logged and in-memory state stays authoritative."""
        if self.settings is None:
            return False
        result = guarded_call(self.settings.set, key, value)
        if not result:
            logger.warning("could not persist %s: %s", key, result.reason)
        return result.ok

    # Host registration --------------------------------------------------
    @property
    def is_available(self) -> bool:
        return self.mode == PRIMARY

    @property
    def is_registered(self) -> bool:
        return self._registration is not None and self._registration.connected

    def register(self) -> Result:
        """Register handle_request with the host. Returns the subscription handle on success."""
        if self.mode != PRIMARY:
            return Result.failure("editor completion API not available",
                                  HostUnavailable("editor completion API not available"))
        if self.is_registered:
            return Result.success(self._registration, reason="callback already registered")

        result = guarded_call(self.host.register_autocomplete_callback, CALLBACK_ID, CALLBACK_PRIORITY,
                              self.handle_request, error_type=RegistrationFailure)
        if not result:
            return result

        host = self.host
        self._registration = Subscription(lambda: host.deregister_autocomplete_callback(CALLBACK_ID),
                                          name=CALLBACK_ID)
        logger.info("registered autocomplete callback %r", CALLBACK_ID)
        return Result.success(self._registration)

    def unregister(self) -> Result:
        sub, self._registration = self._registration, None
        if sub is None or not sub.connected:
            return Result.success()
        return guarded_call(sub.unsubscribe, error_type=RegistrationFailure)

    def refresh_mode(self) -> str:
        """Re-run the capability check, e.g. after the host enabled its API."""
        new_mode = detect_mode(self.host)
        if new_mode != self.mode:
            logger.info("api mode changed: %s -> %s", self.mode, new_mode)
            self.mode = new_mode
            if new_mode == FALLBACK:
                self.navigator.exit()
                self.unregister()
        return self.mode

    def retry_registration(self) -> Result:
        """Hook for the host's periodic retry: upgrade fallback -> primary and register."""
        self.refresh_mode()
        return self.register()

    # Completion -----------------------------------------------------------
    def bounded_request(self, request: CompletionRequest) -> CompletionRequest:
        """Request as the ranker sees it: text_before cut to the lookback window."""
        text_before = request.text_before or ""
        current_line = request.current_line
        if current_line is None:
            current_line = current_line_of(text_before)
        if self.lookback_chars and len(text_before) > self.lookback_chars:
            text_before = text_before[-self.lookback_chars:]
        return CompletionRequest(request.position, text_before, request.text_after or "", current_line)

    def rank_completions(self, request: CompletionRequest,
                         snippets: Optional[List[Snippet]] = None) -> List[Snippet]:
        """Top snippets for a request. Pure: usage counts are only read."""
        if snippets is None:
            snippets = self.library.all_snippets()
        return self.ranker.rank_completions(request, snippets, self._usage, topn=self.max_results)

    def handle_request(self, request: CompletionRequest) -> List[CompletionItem]:
        """
        Entry point the host calls on every keystroke.
        Never raises: unexpected errors are logged and yield no completions.
        """
        try:
            with Log.time_block("rank_completions", budget_ms=self.budget_ms):
                bounded = self.bounded_request(request)
                if is_in_string_or_comment(bounded.text_before):
                    return []
                ranked = self.rank_completions(bounded)
                return [self.format_completion_item(s) for s in ranked]
        except Exception:
            logger.exception("autocomplete request failed")
            return []

    @staticmethod
    def format_completion_item(snippet: Snippet) -> CompletionItem:
        return CompletionItem(label=snippet.name, detail=snippet.description,
                              documentation=snippet.template)

    def search_snippets(self, query: str = "") -> List[Snippet]:
        return self.library.search(query)

    # Insertion ---------------------------------------------------------------
    def insert_snippet(self,
                       document: Optional[DocumentProtocol],
                       snippet: Union[Snippet, str],
                       position: Position = (1, 1)) -> Result:
        """
        Insert `snippet` at `position` (line, column).

        primary:  one atomic edit at [position, position], then tab-stop mode
        fallback: append to the end of the document, no tab-stop mode
        Usage is only counted once the edit went through.
        """
        if document is None:
            return Result.failure("No script document provided", InsertionFailure("No script document provided"))

        if isinstance(snippet, str):
            found = self.library.get(snippet)
            if found is None:
                return Result.failure(f"Unknown snippet: {snippet}", InsertionFailure(f"Unknown snippet: {snippet}"))
            snippet = found

        if self.mode == FALLBACK:
            edit = guarded_call(document.append_text, snippet.template, error_type=InsertionFailure)
            if not edit:
                return Result.failure(f"Failed to insert snippet: {edit.reason}", edit.error)
            self._record_use(snippet.name)
            return Result.success(None, reason="appended (fallback mode)")

        line, column = position
        stops = parse_tab_stops(snippet.template)
        edit = guarded_call(document.edit_text, (line, column), (line, column), snippet.template,
                            error_type=InsertionFailure)
        if not edit:
            return Result.failure(f"Failed to insert snippet: {edit.reason}", edit.error)

        self._record_use(snippet.name)

        if not stops:
            return Result.success(None)
        session = self.navigator.start(document, [s.shifted(line, column) for s in stops])
        if not session:
            logger.warning("inserted %r but tab-stop mode did not start: %s", snippet.name, session.reason)
        return Result.success(session)

    # Usage stats --------------------------------------------------------------
    def _record_use(self, name: str) -> None:
        self._usage[name] = self._usage.get(name, 0) + 1
        self._persist(USAGE_KEY, dict(self._usage))

    def get_usage_stats(self) -> Dict[str, int]:
        return dict(self._usage)

    def load_usage_stats(self, saved: Any) -> None:
        if saved is None:
            return
        if not isinstance(saved, Mapping):
            logger.warning("ignoring malformed usage stats of type %s", type(saved).__name__)
            return
        self._usage = _clean_usage(saved)

    def reset_usage_stats(self) -> bool:
        self._usage = {}
        self._persist(USAGE_KEY, {})
        return True

    # Custom snippets ----------------------------------------------------------
    def add_custom_snippet(self, snippet: Union[Snippet, Dict[str, Any]]) -> Result:
        result = self.library.add_custom_snippet(snippet)
        if result:
            self._persist(CUSTOM_SNIPPETS_KEY, self.library.export_custom_snippets())
        return result

    def remove_custom_snippet(self, name: str) -> bool:
        removed = self.library.remove_custom_snippet(name)
        if removed:
            self._persist(CUSTOM_SNIPPETS_KEY, self.library.export_custom_snippets())
        return removed

    def stats(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "registered": self.is_registered,
            "default_snippets": len(self.library.default_snippets()),
            "custom_snippets": len(self.library.custom_snippets()),
            "tab_stop_active": self.navigator.is_active,
            "total_insertions": sum(self._usage.values()),
        }
