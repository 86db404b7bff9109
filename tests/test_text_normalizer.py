"""Tests for escape recovery, fence stripping and broken string literal repair."""

from __future__ import annotations

import json

import pytest

from prepdeck.core.text_normalizer import (
    fix_broken_string_literals,
    get_code_string,
    has_code,
    normalize,
    stringify_code_value,
    unescape_code,
    unescape_text,
)

# === normalize() ===


def test_normalize_recovers_escaped_code_into_real_lines() -> None:
    """A single value with \\n and \\" escapes and no real newline becomes two lines."""
    raw = r"print(\"x\")\nprint(\"y\")"
    assert "\n" not in raw
    assert normalize(raw) == 'print("x")\nprint("y")'


def test_normalize_handles_double_escaped_newlines_first() -> None:
    raw = r"line one\\nline two"
    assert normalize(raw) == "line one\nline two"


def test_normalize_expands_tabs_to_four_spaces() -> None:
    assert normalize(r"if x:\n\tpass") == "if x:\n    pass"
    assert normalize(r"if x:\n\\tpass") == "if x:\n    pass"


def test_normalize_unescapes_quotes_and_backslashes() -> None:
    assert normalize(r"it\'s") == "it's"
    assert normalize(r"C:\\path") == "C:\\path"


def test_normalize_strips_surrounding_fence() -> None:
    assert normalize("```python\nx = 1\ny = 2\n```") == "x = 1\ny = 2"
    assert normalize(r"```python\nx = 1\n```") == "x = 1"


def test_normalize_strips_only_one_leading_fence() -> None:
    assert normalize("```\n```js\ncode") == "```js\ncode"


def test_normalize_trims_whitespace() -> None:
    assert normalize("   \n  hello  \n ") == "hello"


@pytest.mark.parametrize("value", [None, "", 42, ["a"], {"k": "v"}])
def test_normalize_never_raises_on_bad_input(value: object) -> None:
    assert normalize(value) == ""


@pytest.mark.parametrize(
    "text",
    [
        "plain text",
        "# Title\n\n- a\n- b",
        "```python\ncode\n```",
        "  leading and trailing  ",
        "| a | b |\n|---|---|\n| 1 | 2 |",
    ],
)
def test_normalize_is_idempotent_on_escape_free_input(text: str) -> None:
    once = normalize(text)
    assert normalize(once) == once


# === unescape_text() ===


def test_unescape_text_keeps_fences_and_whitespace() -> None:
    assert unescape_text(r"```py\nx\n```") == "```py\nx\n```"
    assert unescape_text(r"  a\n") == "  a\n"


# === fix_broken_string_literals() ===


def test_fix_broken_print_statement_with_newline() -> None:
    broken = [
        '    print("',
        '" + "=" * 60)',
        '    print("ALL TESTS PASSED!")',
    ]
    assert fix_broken_string_literals(broken) == [
        '    print("\\n" + "=" * 60)',
        '    print("ALL TESTS PASSED!")',
    ]


def test_fix_multiple_broken_strings_in_sequence() -> None:
    broken = [
        '    print("',
        '" + "=" * 60)',
        '    print("HEADER")',
        '    print("',
        '" + "-" * 40)',
    ]
    assert fix_broken_string_literals(broken) == [
        '    print("\\n" + "=" * 60)',
        '    print("HEADER")',
        '    print("\\n" + "-" * 40)',
    ]


def test_fix_leaves_correct_code_untouched() -> None:
    correct = [
        '    print("\\n" + "=" * 60)',
        '    print("ALL TESTS PASSED!")',
        '    print("=" * 60)',
    ]
    assert fix_broken_string_literals(correct) == correct


def test_fix_leaves_code_without_strings_untouched() -> None:
    normal = [
        "def calculate(x):",
        "    return x * 2",
        "",
        "result = calculate(5)",
    ]
    assert fix_broken_string_literals(normal) == normal


def test_fix_handles_single_quotes() -> None:
    broken = ["    print('", "' + '=' * 60)"]
    assert fix_broken_string_literals(broken) == ["    print('\\n' + '=' * 60)"]


def test_fix_handles_concatenation_ending() -> None:
    broken = ['    message = "Hello" + "', '" + name']
    assert fix_broken_string_literals(broken) == ['    message = "Hello" + "\\n" + name']


def test_fix_requires_quote_on_next_line() -> None:
    lines = ['    print("', "    x = 1"]
    assert fix_broken_string_literals(lines) == lines


def test_fix_ignores_trailing_open_quote_on_last_line() -> None:
    lines = ["x = 1", '    print("']
    assert fix_broken_string_literals(lines) == lines


# === unescape_code() ===


def test_unescape_code_keeps_newline_escapes_inside_string_literals() -> None:
    raw = r'print("a\nb")\nx = 1'
    assert unescape_code(raw) == 'print("a\\nb")\nx = 1'


def test_unescape_code_protects_single_quoted_literals() -> None:
    raw = r"sep = '\n'\nprint(sep)"
    assert unescape_code(raw) == "sep = '\\n'\nprint(sep)"


def test_unescape_code_strips_fences_and_expands_tabs() -> None:
    raw = r"```python\ndef f():\n\treturn 1\n```"
    assert unescape_code(raw) == "def f():\n    return 1"


def test_unescape_code_bad_input() -> None:
    assert unescape_code(None) == ""
    assert unescape_code(3.5) == ""


# === get_code_string() / has_code() / stringify_code_value() ===


def test_get_code_string_prefers_lines_and_repairs_them() -> None:
    lines = ['print("', '" + "-" * 3)']
    assert get_code_string(lines, "ignored") == 'print("\\n" + "-" * 3)'


def test_get_code_string_falls_back_to_escaped_string() -> None:
    assert get_code_string([], r"```java\nint x;\n```") == "int x;"
    assert get_code_string(None, r"a\nb") == "a\nb"


def test_get_code_string_empty() -> None:
    assert get_code_string(None, None) == ""
    assert get_code_string([], "") == ""


def test_has_code() -> None:
    assert has_code(["x"], None)
    assert has_code(None, "x")
    assert not has_code([], "")
    assert not has_code(None, None)


def test_stringify_code_value() -> None:
    assert stringify_code_value(None) == ""
    assert stringify_code_value("code") == "code"
    assert stringify_code_value(7) == "7"
    value = {"step": 1, "items": ["a"]}
    assert stringify_code_value(value) == json.dumps(value, indent=2)
