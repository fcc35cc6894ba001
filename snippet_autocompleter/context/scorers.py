# snippet_autocompleter/context/scorers.py
# heuristics scoring how well a snippet fits the cursor context (0..50)

from snippet_autocompleter.context.context_parser import (
    EVENT_HANDLER,
    EVENT_SUBSCRIPTION,
    NUMERIC_LOOP,
    OBJECT_CONSTRUCTION,
    SERVICE_ACCESS,
    VARIABLE_DECLARATION,
    detect_pattern,
)

MAX_CONTEXT_SCORE = 50

# names of the canonical snippets each branch rewards
MODULE_NAME = "module"
SERVICE_NAME = "service"
FUNCTION_NAME = "function"
PART_NAME = "part"
REMOTE_NAME = "remote"
LOOP_NAMES = ("for", "forin", "while")
STATEMENT_NAMES = ("service", "function", "local")


def _tag_hits(tags, wanted):
    return sum(1 for t in tags if t in wanted)


def score_empty_script(name):
    """Empty file: the module template wins, skeletons come second."""
    if name == MODULE_NAME:
        return 40
    if name in (SERVICE_NAME, FUNCTION_NAME):
        return 20
    return 0


def score_pattern(name, tags, pattern):
    """Bonus from the primary pattern branch only."""
    score = 0
    if pattern == SERVICE_ACCESS:
        if name == SERVICE_NAME:
            score += 50
        score += 30 * _tag_hits(tags, ("service",))
    elif pattern == EVENT_SUBSCRIPTION:
        if name == FUNCTION_NAME:
            score += 40
        score += 30 * _tag_hits(tags, ("function", "callback"))
    elif pattern == VARIABLE_DECLARATION:
        if name == SERVICE_NAME:
            score += 35
        elif name == FUNCTION_NAME:
            score += 30
        elif name == PART_NAME:
            score += 25
        score += 20 * _tag_hits(tags, ("variable", "declaration"))
    elif pattern == OBJECT_CONSTRUCTION:
        if name == PART_NAME:
            score += 40
        score += 25 * _tag_hits(tags, ("instance", "creation"))
    elif pattern == EVENT_HANDLER:
        if name in (REMOTE_NAME, FUNCTION_NAME):
            score += 40
    elif pattern == NUMERIC_LOOP:
        if name in LOOP_NAMES:
            score += 35
        score += 25 * _tag_hits(tags, ("loop",))
    return score


def score_structure(name, tags, context):
    """Add-ons from cursor position and nesting, applied on every branch."""
    score = 0
    if context.line_start and name in STATEMENT_NAMES:
        score += 10
    if context.in_function:
        score += 8 * _tag_hits(tags, ("conditional", "loop", "pcall"))
    if context.in_table:
        score += 10 * _tag_hits(tags, ("table",))
    return score


def score_context_match(snippet, context):
    """
    Relevance of `snippet` to `context`, clamped to 0..50.
    Name and tag comparisons are case-insensitive.
    """
    name = snippet.name.lower()
    tags = snippet.tags_lower

    if context.is_empty:
        return score_empty_script(name)

    score = score_pattern(name, tags, detect_pattern(context))
    score += score_structure(name, tags, context)
    return min(score, MAX_CONTEXT_SCORE)
