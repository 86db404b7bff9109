import re
from typing import Iterable, List, NamedTuple, Optional, Tuple

from prepdeck.core.markup_types import Span, SpanKind

_CODE_RE = re.compile(r"`([^`]+)`")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
# A lone asterisk pair; the lookarounds keep it off the delimiters of **bold**.
_ITALIC_RE = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BARE_URL_RE = re.compile(r"https?://[^\s<]+[^<.,:;\"')\]\s]")
_BARE_CALL_RE = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\(\)")

_PATTERNS: Tuple[Tuple[SpanKind, re.Pattern], ...] = (
    (SpanKind.CODE, _CODE_RE),
    (SpanKind.BOLD, _BOLD_RE),
    (SpanKind.ITALIC, _ITALIC_RE),
    (SpanKind.LINK, _LINK_RE),
)


class _Candidate(NamedTuple):
    start: int
    end: int
    kind: SpanKind
    text: str
    url: Optional[str] = None


def parse_inline(line: str, *, autolink: bool = False, autocode: bool = False) -> List[Span]:
    """
    Split one line into inline spans.

    Every class is matched independently, then candidates are accepted
    greedily by earliest start and, on equal starts, longest match. A
    candidate overlapping an accepted one is dropped. ``autolink`` also turns
    bare http(s) URLs into links; ``autocode`` turns bare calls such as
    ``dfs()`` into code spans.
    """
    if not isinstance(line, str) or not line:
        return []

    accepted = _schedule(_collect_candidates(line, autolink=autolink, autocode=autocode))
    if not accepted:
        return [Span(SpanKind.TEXT, line)]

    spans: List[Span] = []
    cursor = 0
    for cand in accepted:
        if cand.start > cursor:
            spans.append(Span(SpanKind.TEXT, line[cursor:cand.start]))
        spans.append(Span(cand.kind, cand.text, cand.url))
        cursor = cand.end
    if cursor < len(line):
        spans.append(Span(SpanKind.TEXT, line[cursor:]))
    return spans


def spans_to_text(spans: Iterable[Span]) -> str:
    """Concatenate span payloads, i.e. the line with markup delimiters removed."""
    return "".join(span.text for span in spans)


def strip_markup(line: str) -> str:
    return spans_to_text(parse_inline(line))


def _collect_candidates(line: str, *, autolink: bool = False, autocode: bool = False) -> List[_Candidate]:
    candidates: List[_Candidate] = []
    for kind, pattern in _PATTERNS:
        for match in pattern.finditer(line):
            url = match.group(2) if kind is SpanKind.LINK else None
            candidates.append(_Candidate(match.start(), match.end(), kind, match.group(1), url))

    if autolink:
        for match in _BARE_URL_RE.finditer(line):
            url = match.group(0)
            candidates.append(_Candidate(match.start(), match.end(), SpanKind.LINK, url, url))

    if autocode:
        for match in _BARE_CALL_RE.finditer(line):
            candidates.append(_Candidate(match.start(), match.end(), SpanKind.CODE, match.group(0)))

    return candidates


def _schedule(candidates: List[_Candidate]) -> List[_Candidate]:
    ordered = sorted(candidates, key=lambda c: (c.start, -(c.end - c.start)))
    accepted: List[_Candidate] = []
    last_end = 0
    for cand in ordered:
        # accepted intervals are sorted and disjoint, so the last one bounds them all
        if accepted and cand.start < last_end:
            continue
        accepted.append(cand)
        last_end = cand.end
    return accepted
