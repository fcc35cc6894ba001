# snippet_autocompleter/host.py
# In-process host pieces: a plain-text document, an input event source and a
# minimal editor host. The CLI uses them to run insertions against files and
# the tests use them as well-behaved collaborators.

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from snippet_autocompleter.core.protocols import (
    CompletionRequest,
    InputEvent,
    InputHandler,
    Position,
    Subscription,
)

logger = logging.getLogger(__name__)


class TextDocument:
    """
    Line-based text buffer with 1-based (line, column) positions.
    Out-of-range positions raise ValueError, like a real editor rejecting the edit.
    """

    def __init__(self, text: str = "", name: str = "untitled"):
        self.name = name
        self.lines: List[str] = text.split("\n")
        self.cursor: Position = (1, 1)
        self.edits = 0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def _offset(self, pos: Position) -> int:
        line, column = pos
        if not 1 <= line <= len(self.lines):
            raise ValueError(f"line {line} out of range 1..{len(self.lines)}")
        if not 1 <= column <= len(self.lines[line - 1]) + 1:
            raise ValueError(f"column {column} out of range on line {line}")
        return sum(len(l) + 1 for l in self.lines[: line - 1]) + column - 1

    def position_of(self, offset: int) -> Position:
        before = self.text[:offset]
        return before.count("\n") + 1, offset - (before.rfind("\n") + 1) + 1

    def edit_text(self, start: Position, end: Position, text: str) -> None:
        a, b = self._offset(start), self._offset(end)
        if b < a:
            raise ValueError("edit range ends before it starts")
        full = self.text
        self.lines = (full[:a] + text + full[b:]).split("\n")
        self.edits += 1

    def append_text(self, text: str) -> None:
        full = self.text
        sep = "" if not full or full.endswith("\n") else "\n"
        self.lines = (full + sep + text).split("\n")
        self.edits += 1

    def set_cursor(self, line: int, column: int) -> None:
        self._offset((line, column))
        self.cursor = (line, column)

    def request_at(self, line: int, column: int) -> CompletionRequest:
        """Build the completion request a host would send for the cursor at (line, column)."""
        off = self._offset((line, column))
        full = self.text
        return CompletionRequest((line, column), full[:off], full[off:])


class LocalInputSource:
    """Fan-out of input events to subscribed handlers."""

    def __init__(self):
        self._handlers: Dict[int, InputHandler] = {}
        self._next_id = 0

    def subscribe(self, handler: InputHandler) -> Subscription:
        hid = self._next_id
        self._next_id += 1
        self._handlers[hid] = handler
        return Subscription(lambda: self._handlers.pop(hid, None), name=f"input-{hid}")

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def dispatch(self, event: InputEvent) -> None:
        # copy: handlers may unsubscribe while we iterate
        for handler in list(self._handlers.values()):
            handler(event)

    def press(self, key: str, shift: bool = False) -> None:
        self.dispatch(InputEvent.keypress(key, shift))

    def click(self) -> None:
        self.dispatch(InputEvent.pointer())


class LocalHost:
    """Editor host with a working completion-callback registry."""

    def __init__(self, available: bool = True):
        self.available = available
        self.callbacks: Dict[str, Tuple[int, Callable]] = {}

    def register_autocomplete_callback(self, name: str, priority: int, callback: Callable) -> None:
        self.callbacks[name] = (priority, callback)
        logger.debug("callback %s registered (priority %d)", name, priority)

    def deregister_autocomplete_callback(self, name: str) -> None:
        self.callbacks.pop(name, None)

    def request(self, request: CompletionRequest) -> Optional[list]:
        """Invoke registered callbacks in priority order; first one answers."""
        for _, (_, cb) in sorted(self.callbacks.items(), key=lambda kv: -kv[1][0]):
            return cb(request)
        return None
