# snippet_autocompleter/core/template_parser.py
# Placeholder ($1, $2, ..., $0) extraction and template expansion.

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Union

MARKER_RE = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class TabStop:
    """
    One placeholder.
    stop:   placeholder number, 0 is the final stop
    line:   line offset inside the template (0-based), or absolute line once placed
    column: 1-based column just after the marker
    offset: character offset just after the marker in the template
    """

    stop: int
    line: int
    column: int
    offset: int = 0

    def shifted(self, line: int, column: int) -> "TabStop":
        """
        Translate a template-relative stop to document coordinates for an
        insertion at (line, column). Only the first template line is shifted
        horizontally; later lines start at column 1 of their own line.
        """
        col = self.column + column - 1 if self.line == 0 else self.column
        return replace(self, line=line + self.line, column=col)


def _sort_key(ts: TabStop):
    # $0 always last, positive stops ascending
    return (ts.stop == 0, ts.stop)


def parse_tab_stops(template: str) -> List[TabStop]:
    """Scan left to right for $N markers and return them in navigation order."""
    stops: List[TabStop] = []
    if not template:
        return stops
    for m in MARKER_RE.finditer(template):
        end = m.end()
        line_start = template.rfind("\n", 0, m.start()) + 1
        stops.append(TabStop(
            stop=int(m.group(1)),
            line=template.count("\n", 0, m.start()),
            column=end - line_start + 1,
            offset=end,
        ))
    # sorted() is stable: repeated stop numbers keep their textual order
    return sorted(stops, key=_sort_key)


def expand_template(template: str,
                    values: Optional[Mapping[Union[int, str], str]] = None) -> str:
    """
    Replace $N markers with values[N].
    With no values the template comes back untouched, which is what a host
    managing its own cursor placement wants. Markers without a value are kept.
    Keys are stop numbers (int or digit string); anything else raises ValueError.
    """
    if not values:
        return template

    lookup: Dict[int, str] = {}
    for k, v in values.items():
        if isinstance(k, bool) or not (isinstance(k, int) or (isinstance(k, str) and k.strip().isdigit())):
            raise ValueError(f"placeholder keys must be stop numbers, got {k!r}")
        lookup[int(k)] = str(v)

    def _sub(m: "re.Match[str]") -> str:
        n = int(m.group(1))
        return lookup[n] if n in lookup else m.group(0)

    return MARKER_RE.sub(_sub, template)
