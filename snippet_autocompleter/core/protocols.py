# snippet_autocompleter/core/protocols.py
"""
Protocol interfaces for the collaborators the engine talks to.

The engine never builds widgets, stores settings or inspects the editor itself.
It depends on these small Protocols instead, so tests can pass plain fakes and
hosts (the Textual demo, an LSP bridge, ...) only implement what is listed here.
Keep this file stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Tuple, runtime_checkable

Position = Tuple[int, int]  # (line, column), both 1-based


# Typed structures exchanged with hosts ---------------------------------------

@dataclass(frozen=True)
class CompletionRequest:
    """What the host sends when it wants completions."""

    position: Position = (1, 1)
    text_before: str = ""
    text_after: str = ""
    current_line: Optional[str] = None


@dataclass(frozen=True)
class CompletionItem:
    """What the host gets back, one per ranked snippet."""

    label: str
    detail: str
    documentation: str
    kind: str = "Snippet"

    def to_dict(self) -> dict:
        return {"label": self.label, "kind": self.kind, "detail": self.detail,
                "documentation": self.documentation}


@dataclass(frozen=True)
class InputEvent:
    """
    Keyboard or pointer event forwarded to the tab-stop navigator.

    kind: "key" or "pointer"
    key:  lower-case key name for key events ("tab", "escape", "a", "7", "space", ...)
    """

    kind: str
    key: str = ""
    shift: bool = False

    @classmethod
    def keypress(cls, key: str, shift: bool = False) -> "InputEvent":
        return cls("key", key.lower(), shift)

    @classmethod
    def pointer(cls) -> "InputEvent":
        return cls("pointer")


InputHandler = Callable[[InputEvent], Any]


class Subscription:
    """
    Handle returned by a registration. unsubscribe() runs the release callback
    at most once; later calls are no-ops.
    """

    def __init__(self, release: Optional[Callable[[], Any]] = None, name: str = ""):
        self._release = release
        self.name = name
        self.connected = True

    def unsubscribe(self) -> None:
        if not self.connected:
            return
        self.connected = False
        release, self._release = self._release, None
        if release is not None:
            release()

    def __repr__(self):
        return f"<Subscription {self.name or '?'} connected={self.connected}>"


# Protocols ------------------------------------------------------------------

@runtime_checkable
class DocumentProtocol(Protocol):
    """An open editor document."""

    def edit_text(self, start: Position, end: Position, text: str) -> Any:
        """Replace [start, end) with text as one atomic edit. Raise on failure."""
        ...

    def set_cursor(self, line: int, column: int) -> Any:
        """Move the caret. Raise on failure."""
        ...

    def append_text(self, text: str) -> Any:
        """Append to the end of the document (fallback insertion)."""
        ...


@runtime_checkable
class InputSourceProtocol(Protocol):
    """Where key and pointer events come from."""

    def subscribe(self, handler: InputHandler) -> Subscription:
        ...


@runtime_checkable
class SettingsStoreProtocol(Protocol):
    """Opaque key/value persistence."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


@runtime_checkable
class EditorHostProtocol(Protocol):
    """
    Capability surface of the editor. A host is `primary` when it is available
    and exposes register_autocomplete_callback; anything else runs `fallback`.
    """

    available: bool

    def register_autocomplete_callback(self, name: str, priority: int,
                                       callback: Callable[[CompletionRequest], Any]) -> Any:
        ...

    def deregister_autocomplete_callback(self, name: str) -> Any:
        ...
