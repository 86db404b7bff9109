import json
import re
from typing import Any, List, Optional, Sequence

# Double-escaped sequences must be handled before single-escaped ones.
_ESCAPE_REPLACEMENTS = (
    ("\\\\n", "\n"),
    ("\\n", "\n"),
    ("\\\\t", "    "),
    ("\\t", "    "),
    ('\\"', '"'),
    ("\\'", "'"),
    ("\\\\", "\\"),
)

_LEADING_FENCE_RE = re.compile(r"^```[A-Za-z0-9]*\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?```$")

_UNCLOSED_CALL_STRING_RE = re.compile(r"\(\s*[\"']$")
_UNCLOSED_CONCAT_STRING_RE = re.compile(r"[\"']\s*\+\s*[\"']$")
_STRING_CONTINUATION_RE = re.compile(r"^\s*[\"']")

_DOUBLE_QUOTED_RE = re.compile(r'"(?:[^"\\]|\\.)*"')
_SINGLE_QUOTED_RE = re.compile(r"'(?:[^'\\]|\\.)*'")
_PROTECTED_NEWLINE = "\x00PROTECTED_NEWLINE\x00"


def normalize(raw: Any) -> str:
    """Recover escaped text and strip one surrounding code fence."""
    text = unescape_text(raw)
    if not text:
        return ""
    return _strip_fences(text).strip()


def unescape_text(raw: Any) -> str:
    """
    Escape recovery only: fences and surrounding whitespace are kept, so the
    result can still be fed to the block parser.
    """
    if not isinstance(raw, str) or not raw:
        return ""

    text = raw
    for escaped, real in _ESCAPE_REPLACEMENTS:
        text = text.replace(escaped, real)
    return text


def fix_broken_string_literals(lines: Sequence[str]) -> List[str]:
    """
    Re-join source lines split by a newline that belonged inside a string literal.

    Generated code such as ``print("\\n" + "=" * 60)`` sometimes reaches us with
    the escape turned into a real line break::

        print("
        " + "=" * 60)

    A line ending in ``("`` / ``('`` or in a ``" + "`` concatenation, followed by
    a line starting with a quote, is merged back with a literal ``\\n`` at the
    join. Best-effort only: no other shape is repaired.
    """
    result: List[str] = []
    i = 0
    while i < len(lines):
        current = lines[i]
        next_line = lines[i + 1] if i + 1 < len(lines) else None

        tail = current.rstrip()
        ends_unclosed = bool(
            _UNCLOSED_CALL_STRING_RE.search(tail) or _UNCLOSED_CONCAT_STRING_RE.search(tail)
        )
        continues_string = bool(next_line and _STRING_CONTINUATION_RE.match(next_line))

        if ends_unclosed and continues_string:
            result.append(current + "\\n" + next_line.strip())
            i += 2
            continue

        result.append(current)
        i += 1
    return result


def unescape_code(raw: Any) -> str:
    """
    Turn JSON-escaped source code into real lines without touching ``\\n``
    escapes that live inside string literals.
    """
    if not isinstance(raw, str) or not raw:
        return ""

    text = _strip_fences(raw)

    def _protect(match: re.Match) -> str:
        return match.group(0).replace("\\n", _PROTECTED_NEWLINE)

    text = _DOUBLE_QUOTED_RE.sub(_protect, text)
    text = _SINGLE_QUOTED_RE.sub(_protect, text)
    text = text.replace("\\n", "\n")
    text = text.replace(_PROTECTED_NEWLINE, "\\n")
    text = text.replace("\\t", "    ")
    return text.strip()


def get_code_string(lines: Optional[Sequence[str]], string_format: Optional[str]) -> str:
    """Pick the best available code representation of a solution."""
    if isinstance(lines, (list, tuple)) and lines:
        return "\n".join(fix_broken_string_literals([str(line) for line in lines]))
    if string_format:
        return normalize(string_format)
    return ""


def has_code(lines: Optional[Sequence[str]], string_format: Optional[str]) -> bool:
    if isinstance(lines, (list, tuple)) and lines:
        return True
    return bool(string_format)


def stringify_code_value(value: Any) -> str:
    """Coerce a JSON value found in a code field into displayable text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return str(value)


def _strip_fences(text: str) -> str:
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    return _TRAILING_FENCE_RE.sub("", text, count=1)
