# tests/test_context_parser.py
from snippet_autocompleter.context.context_parser import (
    EMPTY_SCRIPT,
    EVENT_HANDLER,
    EVENT_SUBSCRIPTION,
    NUMERIC_LOOP,
    OBJECT_CONSTRUCTION,
    SERVICE_ACCESS,
    VARIABLE_DECLARATION,
    current_line_of,
    detect_pattern,
    is_in_string_or_comment,
    parse_context,
)


def test_empty_text_is_empty_script():
    ctx = parse_context("")
    assert ctx.is_empty
    assert ctx.patterns == (EMPTY_SCRIPT,)
    assert detect_pattern(ctx) == EMPTY_SCRIPT


def test_short_text_counts_as_empty():
    assert parse_context("local").is_empty
    assert not parse_context("local x = 1\n").is_empty


def test_service_access_wins_over_local():
    ctx = parse_context('local players = game:GetService("')
    assert ctx.patterns == (SERVICE_ACCESS, VARIABLE_DECLARATION)
    assert ctx.line_start
    assert detect_pattern(ctx) == SERVICE_ACCESS


def test_connect_open_paren():
    ctx = parse_context("local part = workspace.Part\npart.Touched:Connect(")
    assert ctx.has(EVENT_SUBSCRIPTION)
    assert detect_pattern(ctx) == EVENT_SUBSCRIPTION


def test_numeric_loop_on_current_line():
    ctx = parse_context("print(1)\nprint(2)\nfor ")
    assert ctx.patterns == (NUMERIC_LOOP,)
    assert detect_pattern(ctx) == NUMERIC_LOOP


def test_instance_new_and_event_handler():
    ctx = parse_context('local p = Instance.new("')
    assert ctx.has(OBJECT_CONSTRUCTION)
    assert detect_pattern(ctx) == VARIABLE_DECLARATION

    ctx = parse_context("remote.OnServerEvent:")
    assert ctx.has(EVENT_HANDLER)


def test_tokens():
    ctx = parse_context("local x = 1\nlocal fo")
    assert ctx.current_token == "fo"
    assert ctx.previous_token == "local"
    assert ctx.current_line == "local fo"


def test_after_dot_and_colon():
    assert parse_context("local a = workspace.Pa").after_dot
    ctx = parse_context("local a = workspace:Find")
    assert ctx.after_colon and not ctx.after_dot


def test_line_start():
    assert parse_context("print(1)\nprint(2)\nwhi").line_start
    assert not parse_context("print(1)\nprint(x wh").line_start


def test_nesting_signals():
    ctx = parse_context("local function foo()\n\tlocal x = 1\n\t")
    assert ctx.in_function
    assert not parse_context("local function foo()\n\treturn 1\n end \n").in_function
    assert parse_context("local t = {\n\t").in_table


def test_explicit_current_line_is_used():
    ctx = parse_context("print(1)\nprint(2)\nfoo", current_line="for ")
    assert ctx.has(NUMERIC_LOOP)


def test_current_line_of():
    assert current_line_of("a\nb\nlocal x") == "local x"
    assert current_line_of("") == ""


def test_no_pattern():
    assert detect_pattern(parse_context("print(1)\nprint(2)\n")) is None


def test_string_or_comment():
    assert is_in_string_or_comment("print(1)\n-- comment ")
    assert is_in_string_or_comment('print("hel')
    assert is_in_string_or_comment("print('hel")
    assert not is_in_string_or_comment('print("hi")\n')
    assert not is_in_string_or_comment("")
