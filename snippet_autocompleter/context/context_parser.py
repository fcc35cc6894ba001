# snippet_autocompleter/context/context_parser.py
# ----------------------------------------------------------------------
# Cursor context analysis for snippet ranking.
# Looks at a bounded window of text before the cursor and the current line,
# and summarises it as an immutable Context:
#   - the token being typed and the one before it
#   - where the cursor sits (line start, after '.' or ':')
#   - idioms recognised in the text (service access, :Connect(, local, ...)
#   - rough nesting signals (inside a function body / table literal)
# These are bounded heuristics, not a parser: keyword and brace counts do not
# understand strings, comments or nesting.
# ----------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Pattern names registered in Context.patterns
EMPTY_SCRIPT = "empty_script"
SERVICE_ACCESS = "game:"
EVENT_SUBSCRIPTION = ":Connect("
VARIABLE_DECLARATION = "local "
NUMERIC_LOOP = "for "
OBJECT_CONSTRUCTION = "Instance.new"
EVENT_HANDLER = "remote_event"

# detect_pattern() picks the first of these present in a context
PATTERN_PRIORITY: Tuple[str, ...] = (
    EMPTY_SCRIPT,
    SERVICE_ACCESS,
    EVENT_SUBSCRIPTION,
    VARIABLE_DECLARATION,
    OBJECT_CONSTRUCTION,
    EVENT_HANDLER,
    NUMERIC_LOOP,
)

EMPTY_THRESHOLD = 10

TOKEN_TAIL_RE = re.compile(r"[A-Za-z0-9_]+$")
PREV_TOKEN_RE = re.compile(r"([A-Za-z0-9_]+)\s*$")
AFTER_DOT_RE = re.compile(r"\.[A-Za-z0-9_]*$")
AFTER_COLON_RE = re.compile(r":[A-Za-z0-9_]*$")

CONNECT_OPEN_RE = re.compile(r":Connect\s*\($")
CONNECT_FUNC_RE = re.compile(r":Connect\s*\(function")
LOCAL_ONLY_RE = re.compile(r"^\s*local\s+$")
LOCAL_LINE_RE = re.compile(r"^\s*local\s+")
FOR_LINE_RE = re.compile(r"^\s*for\s+")
INSTANCE_NEW_RE = re.compile(r'Instance\.new\s*\(\s*"$')
EVENT_HANDLER_RE = re.compile(r"\.On(?:Server|Client)Event\s*:")
BLOCK_END_RE = re.compile(r"\send\s")
COMMENT_LINE_RE = re.compile(r"^\s*--")


@dataclass(frozen=True)
class Context:
    """Snapshot of the text around the cursor. Built fresh for every request."""

    current_token: str = ""
    previous_token: str = ""
    current_line: str = ""
    is_empty: bool = False
    line_start: bool = False
    after_dot: bool = False
    after_colon: bool = False
    in_function: bool = False
    in_table: bool = False
    patterns: Tuple[str, ...] = field(default_factory=tuple)

    def has(self, pattern: str) -> bool:
        return pattern in self.patterns


def current_line_of(text_before: str) -> str:
    """Text between the last newline and the cursor."""
    return text_before.rsplit("\n", 1)[-1]


def _trailing_token(text: str) -> str:
    m = TOKEN_TAIL_RE.search(text)
    return m.group(0) if m else ""


def parse_context(text_before: str, text_after: str = "", current_line: Optional[str] = None) -> Context:
    """
    Analyse the cursor surroundings.

    text_before:  text before the cursor (callers bound the lookback window)
    text_after:   text after the cursor, accepted for interface symmetry
    current_line: line content up to the cursor; derived from text_before when None
    """
    text_before = text_before or ""
    if current_line is None:
        current_line = current_line_of(text_before)

    patterns = []
    is_empty = len(text_before) < EMPTY_THRESHOLD
    if is_empty:
        patterns.append(EMPTY_SCRIPT)

    current_token = _trailing_token(text_before)
    before_token = text_before[: len(text_before) - len(current_token)]
    m = PREV_TOKEN_RE.search(before_token)
    previous_token = m.group(1) if m else ""

    after_dot = AFTER_DOT_RE.search(text_before) is not None
    after_colon = AFTER_COLON_RE.search(text_before) is not None

    line_head = current_line
    if current_token and current_line.endswith(current_token):
        line_head = current_line[: len(current_line) - len(current_token)]
    line_start = line_head.strip() == ""

    # detectors run in a fixed order, matches are appended in that order
    if SERVICE_ACCESS in text_before:
        patterns.append(SERVICE_ACCESS)

    if CONNECT_OPEN_RE.search(text_before) or CONNECT_FUNC_RE.search(text_before):
        patterns.append(EVENT_SUBSCRIPTION)

    if LOCAL_ONLY_RE.match(text_before) or LOCAL_LINE_RE.match(current_line):
        patterns.append(VARIABLE_DECLARATION)
        line_start = True

    if FOR_LINE_RE.match(current_line):
        patterns.append(NUMERIC_LOOP)

    if INSTANCE_NEW_RE.search(text_before):
        patterns.append(OBJECT_CONSTRUCTION)

    if EVENT_HANDLER_RE.search(text_before):
        patterns.append(EVENT_HANDLER)

    # naive block/table balance
    in_function = text_before.count("function") > len(BLOCK_END_RE.findall(text_before))
    in_table = text_before.count("{") > text_before.count("}")

    return Context(
        current_token=current_token,
        previous_token=previous_token,
        current_line=current_line,
        is_empty=is_empty,
        line_start=line_start,
        after_dot=after_dot,
        after_colon=after_colon,
        in_function=in_function,
        in_table=in_table,
        patterns=tuple(patterns),
    )


def detect_pattern(context: Context) -> Optional[str]:
    """Primary pattern used to pick one scoring branch, or None."""
    if context.is_empty:
        return EMPTY_SCRIPT
    for pattern in PATTERN_PRIORITY:
        if pattern in context.patterns:
            return pattern
    return None


def is_in_string_or_comment(text_before: str) -> bool:
    """
    True when the cursor line is a `--` comment or the quote count before the
    cursor is odd. Escaped quotes and long strings/comments are not handled.
    """
    text_before = text_before or ""
    if COMMENT_LINE_RE.match(current_line_of(text_before)):
        return True
    return text_before.count('"') % 2 == 1 or text_before.count("'") % 2 == 1
