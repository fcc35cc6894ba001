"""
cli.py - command line front end for the snippet autocompleter
Features:
- Ranked completions for a piece of code, with per-signal score breakdown
- Custom snippet management and usage statistics, persisted between runs
- Snippet insertion into files with the resulting tab stops listed
- Bundled API name search
- Uses Rich for tables and formatting
"""

import argparse
import json
import os
import shlex
from typing import List, Optional, Sequence

# ui styling with Rich
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.table import Table

from snippet_autocompleter.context.context_parser import parse_context
from snippet_autocompleter.core import api_index
from snippet_autocompleter.core.autocompleter import AutoCompleter
from snippet_autocompleter.core.fusion_ranker import FusionRanker
from snippet_autocompleter.core.protocols import CompletionRequest
from snippet_autocompleter.core.snippet import Category
from snippet_autocompleter.core.template_parser import expand_template, parse_tab_stops
from snippet_autocompleter.host import LocalHost, TextDocument
from snippet_autocompleter.utils.config_manager import Config
from snippet_autocompleter.utils.logger_utils import setup_logging
from snippet_autocompleter.utils.settings_store import JsonSettingsStore

# initialise console for rich output
console = Console()

CATEGORY_STYLE = {
    Category.ESSENTIAL: "green",
    Category.COMMON: "cyan",
    Category.ADVANCED: "magenta",
    Category.CUSTOM: "yellow",
}


def _unescape(text: str) -> str:
    # shells make literal newlines awkward, accept \n and \t
    return text.replace("\\n", "\n").replace("\\t", "\t")


class CLI:
    """Wires config, settings store and the AutoCompleter together for one command."""

    def __init__(self, config_path: str = "config.json", preset: str = "balanced"):
        self.cfg = Config(config_path)
        self.store = JsonSettingsStore(self.cfg.get("settings_path"))
        self.engine = AutoCompleter(
            LocalHost(),
            self.store,
            ranker=FusionRanker(preset=preset),
            max_results=int(self.cfg.get("max_results")),
            budget_ms=float(self.cfg.get("budget_ms")),
            lookback_chars=int(self.cfg.get("lookback_chars")),
        )
        # disabled: the host never gets a completion callback
        self.enabled = bool(self.cfg.get("plugin_enabled"))
        if self.enabled:
            self.engine.register()

    def _context_for(self, request: CompletionRequest):
        """Context built from the same lookback window handle_request ranks on."""
        bounded = self.engine.bounded_request(request)
        return parse_context(bounded.text_before, bounded.text_after, bounded.current_line)

    # LISTING -----------------------------------------------------------------------
    def list_snippets(self, query: str = "", category: Optional[str] = None) -> int:
        snippets = self.engine.search_snippets(query)
        if category:
            snippets = [s for s in snippets if s.category.value == category]
        usage = self.engine.get_usage_stats()

        table = Table(title=f"Snippets ({len(snippets)})", box=box.SIMPLE, show_edge=False)
        table.add_column("Name", style="bold")
        table.add_column("Category")
        table.add_column("Description")
        table.add_column("Tags", style="dim")
        table.add_column("Used", justify="right", style="magenta")
        for s in snippets:
            style = CATEGORY_STYLE.get(s.category, "white")
            table.add_row(s.name, f"[{style}]{s.category.value}[/{style}]", s.description,
                          ", ".join(s.tags), str(usage.get(s.name, 0)))
        console.print(table)
        return 0

    # RANKING -----------------------------------------------------------------------
    def suggest(self, text_before: str, text_after: str = "") -> int:
        text_before = _unescape(text_before)
        request = CompletionRequest(text_before=text_before, text_after=_unescape(text_after))
        items = self.engine.host.request(request) or []
        if not items:
            hint = "" if self.enabled else " - plugin_enabled is off"
            console.print(f"[dim](no suggestions{hint})[/dim]")
            return 0

        ctx = self._context_for(request)
        usage = self.engine.get_usage_stats()
        table = Table(title="Completions", box=box.SIMPLE, show_edge=False)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Snippet", style="bold")
        table.add_column("Score", justify="right", style="magenta")
        table.add_column("Detail", style="dim")
        for i, item in enumerate(items, 1):
            snippet = self.engine.library.get(item.label)
            score = self.engine.ranker.score(snippet, ctx, usage) if snippet else 0.0
            table.add_row(str(i), item.label, f"{score:.2f}", item.detail)
        console.print(table)
        if ctx.patterns:
            console.print(f"[dim]patterns: {', '.join(ctx.patterns)}[/dim]")
        return 0

    def explain(self, name: str, text_before: str) -> int:
        snippet = self.engine.library.get(name)
        if snippet is None:
            console.print(f"[red]Unknown snippet:[/red] {name}")
            return 1
        ctx = self._context_for(CompletionRequest(text_before=_unescape(text_before)))
        parts = self.engine.ranker.debug_contributions(snippet, ctx, self.engine.get_usage_stats())
        console.print(Panel(json.dumps({k: round(v, 3) for k, v in parts.items()}, indent=2),
                            title=f"Score breakdown: {name}", border_style="cyan"))
        return 0

    # CUSTOM SNIPPETS -----------------------------------------------------------------
    def add(self, name: str, description: str, template: str, tags: str = "", category: str = "custom") -> int:
        result = self.engine.add_custom_snippet({
            "name": name,
            "description": description,
            "template": _unescape(template),
            "category": category,
            "tags": [t for t in tags.split(",") if t.strip()],
        })
        if not result:
            console.print(f"[red]Error:[/red] {result.reason}")
            return 1
        console.print(f"[green]Added:[/green] {name}")
        return 0

    def remove(self, name: str) -> int:
        if self.engine.library.get(name) in self.engine.library.default_snippets():
            console.print(f"[red]Built-in snippets cannot be removed:[/red] {name}")
            return 1
        if not self.engine.remove_custom_snippet(name):
            console.print(f"[red]No custom snippet named[/red] {name}")
            return 1
        console.print(f"[yellow]Removed:[/yellow] {name}")
        return 0

    # STATS ---------------------------------------------------------------------------
    def stats(self) -> int:
        usage = sorted(self.engine.get_usage_stats().items(), key=lambda kv: -kv[1])
        t = Table(title="Usage", box=box.MINIMAL)
        t.add_column("Snippet", style="cyan")
        t.add_column("Insertions", justify="right")
        for name, count in usage:
            t.add_row(name, str(count))
        console.print(t)

        info = self.engine.stats()
        info.update({f"api_{k}": v for k, v in api_index.stats().items()})
        console.print(Panel("\n".join(f"{k:18} {v}" for k, v in info.items()), title="Engine", border_style="dim"))
        return 0

    def reset_stats(self) -> int:
        self.engine.reset_usage_stats()
        console.print("[yellow]Usage statistics cleared.[/yellow]")
        return 0

    # TEMPLATES -----------------------------------------------------------------------
    def _template_for(self, name_or_template: str) -> str:
        snippet = self.engine.library.get(name_or_template)
        return snippet.template if snippet else _unescape(name_or_template)

    def stops(self, name_or_template: str) -> int:
        template = self._template_for(name_or_template)
        table = Table(title="Tab stops", box=box.SIMPLE, show_edge=False)
        table.add_column("Order", justify="right", style="cyan")
        table.add_column("Stop", justify="right", style="bold")
        table.add_column("Line", justify="right")
        table.add_column("Column", justify="right")
        for i, ts in enumerate(parse_tab_stops(template), 1):
            table.add_row(str(i), f"${ts.stop}", str(ts.line), str(ts.column))
        console.print(Syntax(template, "lua", line_numbers=True))
        console.print(table)
        return 0

    def expand(self, name_or_template: str, assignments: Sequence[str]) -> int:
        values = {}
        for a in assignments:
            key, sep, val = a.partition("=")
            if not sep or not key.strip().isdigit():
                console.print(f"[red]Bad assignment (want N=value):[/red] {a}")
                return 1
            values[int(key)] = _unescape(val)
        console.print(Syntax(expand_template(self._template_for(name_or_template), values), "lua"))
        return 0

    # INSERTION -----------------------------------------------------------------------
    def insert(self, name: str, path: str, line: int = 1, column: int = 1) -> int:
        text = ""
        if os.path.exists(path):
            with open(path, "r", encoding="utf8") as f:
                text = f.read()
        doc = TextDocument(text, name=path)
        result = self.engine.insert_snippet(doc, name, (line, column))
        if not result:
            console.print(f"[red]Insert failed:[/red] {result.reason}")
            return 1
        with open(path, "w", encoding="utf8") as f:
            f.write(doc.text)
        console.print(f"[green]Inserted[/green] {name} into {path}")

        nav = self.engine.navigator
        if nav.is_active:
            stops = ", ".join(f"${s.stop}@{s.line}:{s.column}" for s in nav.stops)
            console.print(f"[dim]tab stops: {stops}[/dim]")
            nav.exit()
        return 0

    # API -----------------------------------------------------------------------------
    def api(self, query: str = "", kind: Optional[str] = None) -> int:
        for k, names in api_index.search(query, kind).items():
            console.print(Panel(", ".join(names) or "[dim](none)[/dim]", title=f"{k} ({len(names)})"))
        return 0

    # INTERACTIVE ---------------------------------------------------------------------
    def shell(self) -> int:
        """Prompt loop: each line is parsed like command-line arguments."""
        console.rule("[bold magenta]Snippet Autocompleter[/bold magenta]")
        console.print("Commands: suggest, explain, list, add, remove, stats, reset-stats, stops, expand, api, quit\n")
        parser = build_parser()
        while True:
            try:
                line = Prompt.ask("[green]>>[/green]", default="")
            except (EOFError, KeyboardInterrupt):
                break
            if not line.strip():
                continue
            if line.strip() in ("quit", "exit", "/q"):
                break
            try:
                args = parser.parse_args(shlex.split(line))
            except SystemExit:
                continue
            if args.command == "shell":
                continue
            dispatch(self, args)
        console.rule("[red]Exiting[/red]")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snippet-autocompleter",
                                     description="Context-aware snippet completion")
    parser.add_argument("--config", default="config.json", help="path to the JSON config")
    parser.add_argument("--preset", default="balanced", choices=FusionRanker.presets(),
                        help="ranking weight preset")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="list snippets")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--category", choices=[c.value for c in Category])

    p = sub.add_parser("suggest", help="rank snippets for the text before the cursor")
    p.add_argument("text_before")
    p.add_argument("--after", default="", help="text after the cursor")

    p = sub.add_parser("explain", help="show the score breakdown of one snippet")
    p.add_argument("name")
    p.add_argument("text_before")

    p = sub.add_parser("add", help="add a custom snippet")
    p.add_argument("name")
    p.add_argument("description")
    p.add_argument("template")
    p.add_argument("--tags", default="", help="comma separated")
    p.add_argument("--category", default="custom", choices=[c.value for c in Category])

    p = sub.add_parser("remove", help="remove a custom snippet")
    p.add_argument("name")

    sub.add_parser("stats", help="usage statistics")
    sub.add_parser("reset-stats", help="clear usage statistics")

    p = sub.add_parser("stops", help="show the tab stops of a snippet or template")
    p.add_argument("snippet")

    p = sub.add_parser("expand", help="fill placeholders, e.g. expand service 1=Players 2=Players")
    p.add_argument("snippet")
    p.add_argument("values", nargs="*")

    p = sub.add_parser("insert", help="insert a snippet into a file")
    p.add_argument("name")
    p.add_argument("path")
    p.add_argument("--line", type=int, default=1)
    p.add_argument("--column", type=int, default=1)

    p = sub.add_parser("api", help="search bundled API names")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--kind", choices=list(api_index.KINDS))

    sub.add_parser("shell", help="interactive prompt")
    return parser


def dispatch(cli: CLI, args: argparse.Namespace) -> int:
    cmd = args.command
    if cmd == "list":
        return cli.list_snippets(args.query, args.category)
    if cmd == "suggest":
        return cli.suggest(args.text_before, args.after)
    if cmd == "explain":
        return cli.explain(args.name, args.text_before)
    if cmd == "add":
        return cli.add(args.name, args.description, args.template, args.tags, args.category)
    if cmd == "remove":
        return cli.remove(args.name)
    if cmd == "stats":
        return cli.stats()
    if cmd == "reset-stats":
        return cli.reset_stats()
    if cmd == "stops":
        return cli.stops(args.snippet)
    if cmd == "expand":
        return cli.expand(args.snippet, args.values)
    if cmd == "insert":
        return cli.insert(args.name, args.path, args.line, args.column)
    if cmd == "api":
        return cli.api(args.query, args.kind)
    if cmd == "shell":
        return cli.shell()
    console.print(f"[red]Unknown command:[/red] {cmd}")
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(10 if args.verbose else 30, console=args.verbose)
    cli = CLI(args.config, args.preset)
    try:
        return dispatch(cli, args)
    finally:
        cli.engine.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
