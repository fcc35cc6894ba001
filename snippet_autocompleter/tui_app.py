# tui_app.py - Snippet Autocompleter TUI
# -------------------------------------------------------
# Terminal editor that hosts the autocompleter the way an IDE would.
# Features:
#  - Ranked snippet completions refreshed as you type
#  - Insert the highlighted completion with F2 (ctrl+n / ctrl+p move the highlight)
#  - Tab / Shift+Tab walk the tab stops of the inserted snippet, Escape leaves them
#  - Typing or clicking in the editor also ends tab-stop mode
#  - Latency readout against the ranking budget
# -------------------------------------------------------

from __future__ import annotations

import time
from typing import List, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static, TextArea

from snippet_autocompleter.context.context_parser import parse_context
from snippet_autocompleter.core.autocompleter import AutoCompleter
from snippet_autocompleter.core.protocols import CompletionItem, CompletionRequest
from snippet_autocompleter.host import LocalHost, LocalInputSource
from snippet_autocompleter.utils.config_manager import Config
from snippet_autocompleter.utils.logger_utils import Log, setup_logging
from snippet_autocompleter.utils.settings_store import JsonSettingsStore


class TextAreaDocument:
    """Adapts a TextArea (0-based locations) to the 1-based document interface."""

    def __init__(self, area: TextArea):
        self.area = area

    def edit_text(self, start, end, text: str) -> None:
        (l1, c1), (l2, c2) = start, end
        self.area.replace(text, (l1 - 1, c1 - 1), (l2 - 1, c2 - 1))

    def append_text(self, text: str) -> None:
        body = self.area.text
        sep = "" if not body or body.endswith("\n") else "\n"
        self.area.insert(sep + text, self.area.document.end)

    def set_cursor(self, line: int, column: int) -> None:
        lines = self.area.document.lines
        if not 1 <= line <= len(lines) or not 1 <= column <= len(lines[line - 1]) + 1:
            raise ValueError(f"position {line}:{column} outside document")
        self.area.cursor_location = (line - 1, column - 1)


class EditorArea(TextArea):
    """TextArea that reports keys and clicks to the tab-stop input source first."""

    def __init__(self, input_source: LocalInputSource, **kwargs):
        super().__init__(**kwargs)
        self.input_source = input_source

    async def _on_key(self, event: events.Key) -> None:
        self.input_source.press(event.key)
        await super()._on_key(event)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.input_source.click()


class SuggestionPanel(Static):
    """Right-side completion list with the highlighted entry marked."""

    def show(self, items: List[CompletionItem], selected: int) -> None:
        if not items:
            self.update("[dim]No suggestions[/dim]")
            return
        lines = []
        for i, item in enumerate(items):
            marker = "[b green]>[/b green]" if i == selected else " "
            lines.append(f"{marker} [b]{item.label}[/b]  [dim]{item.detail}[/dim]")
        self.update("\n".join(lines))


class StatusBar(Static):
    def set_status(self, latency_ms: float, budget_ms: float, tab_stop: str) -> None:
        color = "green" if latency_ms <= budget_ms else "red"
        self.update(f"[dim]Latency:[/dim] [{color}]{latency_ms:.1f}ms[/{color}]   {tab_stop}")


# Main Application -----------------------------------------------------------------
class SnippetEditorApp(App):
    """
    Demo editor host.
    Architecture:
     - EditorArea changes -> handle_request -> suggestion panel
     - F2 -> insert_snippet -> TabStopNavigator session
     - priority bindings for tab / shift+tab / escape so the TextArea never sees them
       while a tab-stop session is running
    """

    CSS = """
    #left { width: 2fr; }
    #right { width: 1fr; border-left: solid $accent; padding: 0 1; }
    #bottom { height: 1; }
    """

    BINDINGS = [
        Binding("tab", "next_stop", "Next stop", priority=True),
        Binding("shift+tab", "previous_stop", "Previous stop", priority=True),
        Binding("escape", "exit_stops", "Leave stops", priority=True),
        Binding("f2", "insert_selected", "Insert snippet"),
        Binding("ctrl+n", "select(1)", "Next suggestion"),
        Binding("ctrl+p", "select(-1)", "Previous suggestion"),
    ]

    suggestions = reactive(list)
    selected = reactive(0)
    latency = reactive(0.0)

    def __init__(self, config_path: str = "config.json"):
        super().__init__()
        self.cfg = Config(config_path)
        self.input_source = LocalInputSource()
        self.engine = AutoCompleter(
            LocalHost(),
            JsonSettingsStore(self.cfg.get("settings_path")),
            input_source=self.input_source,
            max_results=int(self.cfg.get("max_results")),
            budget_ms=float(self.cfg.get("budget_ms")),
            lookback_chars=int(self.cfg.get("lookback_chars")),
        )
        if self.cfg.get("plugin_enabled"):
            self.engine.register()
        self.document: Optional[TextAreaDocument] = None

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Container(id="left"):
                yield EditorArea(self.input_source, id="editor")
            with Container(id="right"):
                yield SuggestionPanel(id="suggestions")
        with Horizontal(id="bottom"):
            yield StatusBar(id="status")
        yield Footer()

    def on_mount(self) -> None:
        area = self.query_one(EditorArea)
        self.document = TextAreaDocument(area)
        area.focus()
        self.refresh_suggestions()

    def on_unmount(self) -> None:
        self.engine.shutdown()

    # Completion ------------------------------------------------------------
    def _request(self) -> CompletionRequest:
        area = self.query_one(EditorArea)
        row, col = area.cursor_location
        lines = area.document.lines
        before = "\n".join(lines[:row] + [lines[row][:col]])
        after = "\n".join([lines[row][col:]] + lines[row + 1:])
        return CompletionRequest((row + 1, col + 1), before, after)

    def refresh_suggestions(self) -> None:
        start = time.perf_counter()
        items = self.engine.host.request(self._request()) or []
        self.latency = (time.perf_counter() - start) * 1000
        self.selected = 0
        self.suggestions = items

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.refresh_suggestions()

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        self._update_status()

    # Reactive state -----------------------------------------------------------
    def watch_suggestions(self, items) -> None:
        self.query_one(SuggestionPanel).show(items, self.selected)

    def watch_selected(self, selected: int) -> None:
        self.query_one(SuggestionPanel).show(self.suggestions, selected)

    def watch_latency(self, latency: float) -> None:
        self._update_status()

    def _update_status(self) -> None:
        nav = self.engine.navigator
        stop = nav.current_stop()
        label = f"[b magenta]tab stop {nav.current_index}/{len(nav.stops)} (${stop.stop})[/b magenta]" if stop else ""
        self.query_one(StatusBar).set_status(self.latency, self.engine.budget_ms, label)

    # Actions ----------------------------------------------------------------------
    def action_select(self, step: int) -> None:
        if self.suggestions:
            self.selected = (self.selected + step) % len(self.suggestions)

    def action_insert_selected(self) -> None:
        if not self.suggestions or self.document is None:
            return
        item = self.suggestions[self.selected]
        area = self.query_one(EditorArea)
        row, col = area.cursor_location

        # replace the word being typed by the snippet
        token = parse_context(self._request().text_before).current_token
        start_col = col - len(token)
        if token:
            area.delete((row, start_col), (row, col))

        result = self.engine.insert_snippet(self.document, item.label, (row + 1, start_col + 1))
        if not result:
            self.notify(result.reason, severity="error")
            return
        Log.write(f"inserted: {item.label}")
        self._update_status()

    def action_next_stop(self) -> None:
        nav = self.engine.navigator
        if nav.is_active:
            nav.handle_key("tab")
        else:
            self.query_one(EditorArea).insert("\t")
        self._update_status()

    def action_previous_stop(self) -> None:
        self.engine.navigator.handle_key("tab", shift=True)
        self._update_status()

    def action_exit_stops(self) -> None:
        self.engine.navigator.handle_key("escape")
        self._update_status()


def main() -> None:
    setup_logging(console=False)
    SnippetEditorApp().run()


if __name__ == "__main__":
    main()
