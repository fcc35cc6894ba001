# snippet_autocompleter/core/tab_stops.py
"""
TabStopNavigator - cursor stepping through $1, $2, ..., $0 after an insertion.

States:
    Inactive                      no stops, index 0, no listeners
    Active(i), 1 <= i <= N        cursor sits on stops[i - 1]

Transitions:
    start(doc, stops)   any -> Active(1)      (empty stops: no-op)
    next()              Active(i) -> Active(i + 1), or Inactive past the end
    previous()          Active(i > 1) -> Active(i - 1)
    exit()              any -> Inactive        (idempotent)
    typing / escape / pointer press            -> exit()
    failed cursor placement                    -> exit()

Input listeners are subscribed when a session becomes active and released
exactly once by whichever exit path ends it.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from snippet_autocompleter.core.protocols import (
    DocumentProtocol,
    InputEvent,
    InputSourceProtocol,
    Subscription,
)
from snippet_autocompleter.core.results import CursorPlacementFailure, Result, guarded_call
from snippet_autocompleter.core.template_parser import TabStop

logger = logging.getLogger(__name__)

SESSION_ENDED = "session ended"

# keys that mean "the user is editing", which ends the session
EDIT_KEYS = frozenset({"space", "enter", "return", "backspace", "delete"})
CANCEL_KEYS = frozenset({"escape", "esc"})
BACK_TAB_KEYS = frozenset({"shift+tab", "backtab"})


def is_edit_key(key: str) -> bool:
    """Single letters and digits, plus space/enter/backspace/delete."""
    if key in EDIT_KEYS:
        return True
    return len(key) == 1 and key.isascii() and key.isalnum()


class TabStopNavigator:
    """Owns the single tab-stop session of an editor."""

    def __init__(self, input_source: Optional[InputSourceProtocol] = None):
        self.input_source = input_source
        self._active = False
        self._stops: Tuple[TabStop, ...] = ()
        self._index = 0
        self._document: Optional[DocumentProtocol] = None
        self._subscriptions: List[Subscription] = []

    # Queries ----------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def stops(self) -> Tuple[TabStop, ...]:
        return self._stops

    @property
    def document(self) -> Optional[DocumentProtocol]:
        return self._document

    def current_stop(self) -> Optional[TabStop]:
        if not self._active or not (1 <= self._index <= len(self._stops)):
            return None
        return self._stops[self._index - 1]

    # Transitions ------------------------------------------------------------
    def start(self, document: DocumentProtocol, stops: Sequence[TabStop]) -> Result:
        if not stops:
            return Result.failure("no tab stops")

        self.exit()

        self._active = True
        self._document = document
        self._stops = tuple(stops)
        self._index = 1

        placed = self._place_cursor()
        if not placed:
            return placed

        self._acquire_listeners()
        logger.debug("tab-stop session started with %d stops", len(self._stops))
        return Result.success(self.current_stop())

    def next(self) -> Result:
        if not self._active:
            return Result.failure("tab-stop mode inactive")

        if self._index + 1 > len(self._stops):
            self.exit()
            return Result.failure(SESSION_ENDED)

        self._index += 1
        placed = self._place_cursor()
        if not placed:
            return placed
        return Result.success(self.current_stop())

    def previous(self) -> Result:
        if not self._active:
            return Result.failure("tab-stop mode inactive")
        if self._index <= 1:
            return Result.failure("already at first stop")

        self._index -= 1
        placed = self._place_cursor()
        if not placed:
            return placed
        return Result.success(self.current_stop())

    def exit(self) -> None:
        if not self._active:
            return
        self._active = False
        self._document = None
        self._stops = ()
        self._index = 0
        self._release_listeners()
        logger.debug("tab-stop session ended")

    # Input ---------------------------------------------------------------------
    def handle_event(self, event: InputEvent) -> Result:
        """Route one host input event. Inactive sessions ignore everything."""
        if not self._active:
            return Result.failure("tab-stop mode inactive")

        if event.kind == "pointer":
            self.exit()
            return Result.success(reason="exited on pointer press")

        key = (event.key or "").lower()
        if key == "tab":
            return self.previous() if event.shift else self.next()
        if key in BACK_TAB_KEYS:
            return self.previous()
        if key in CANCEL_KEYS:
            self.exit()
            return Result.success(reason="cancelled")
        if is_edit_key(key):
            self.exit()
            return Result.success(reason="exited on edit")
        return Result.failure(f"ignored key {key!r}")

    def handle_key(self, key: str, shift: bool = False) -> Result:
        return self.handle_event(InputEvent.keypress(key, shift))

    def handle_pointer(self) -> Result:
        return self.handle_event(InputEvent.pointer())

    # Internals ---------------------------------------------------------------
    def _place_cursor(self) -> Result:
        stop = self.current_stop()
        doc = self._document
        if stop is None or doc is None:
            self.exit()
            return Result.failure("no current stop", CursorPlacementFailure("no current stop"))
        result = guarded_call(doc.set_cursor, stop.line, stop.column, error_type=CursorPlacementFailure)
        if not result:
            self.exit()
        return result

    def _acquire_listeners(self) -> None:
        if self.input_source is None:
            return
        result = guarded_call(self.input_source.subscribe, self.handle_event)
        if result and result.value is not None:
            self._subscriptions.append(result.value)
        else:
            logger.warning("tab-stop input listeners unavailable: %s", result.reason)

    def _release_listeners(self) -> None:
        subs, self._subscriptions = self._subscriptions, []
        for sub in subs:
            guarded_call(sub.unsubscribe)
