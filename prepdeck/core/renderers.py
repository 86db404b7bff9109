import html
from typing import Any, Dict, Iterable, List

from prepdeck.core.block_parser import BlockGroup, group_blocks
from prepdeck.core.inline_parser import spans_to_text
from prepdeck.core.markup_types import Block, BlockKind, Span, SpanKind

_LANGUAGE_ALIASES = {
    "python": "python",
    "py": "python",
    "python3": "python",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "jsx",
    "typescript": "typescript",
    "ts": "typescript",
    "tsx": "tsx",
    "cpp": "cpp",
    "c++": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "c": "c",
    "h": "c",
    "csharp": "csharp",
    "c#": "csharp",
    "cs": "csharp",
    "go": "go",
    "golang": "go",
    "rust": "rust",
    "rs": "rust",
    "kotlin": "kotlin",
    "kt": "kotlin",
    "swift": "swift",
    "ruby": "ruby",
    "rb": "ruby",
    "sql": "sql",
    "bash": "bash",
    "shell": "bash",
    "sh": "bash",
    "zsh": "bash",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "html": "markup",
    "xml": "markup",
    "css": "css",
    "markdown": "markdown",
    "md": "markdown",
    "text": "text",
    "plaintext": "text",
    "txt": "text",
}

_HEADING_MAX = 6


def resolve_language(tag: Any) -> str:
    """Map a fence language tag to a highlighter name; unknown tags become plain text."""
    if not isinstance(tag, str):
        return "text"
    return _LANGUAGE_ALIASES.get(tag.strip().lower(), "text")


# ----------------------------------------------------------------------
# JSON payload
# ----------------------------------------------------------------------
def span_to_payload(span: Span) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": span.kind.value, "text": span.text}
    if span.url is not None:
        payload["url"] = span.url
    return payload


def block_to_payload(block: Block) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": block.kind.value}
    kind = block.kind

    if kind is BlockKind.CODE_BLOCK:
        payload["language"] = block.language
        payload["code"] = block.code
        payload["lines"] = list(block.lines)
        return payload

    if kind is BlockKind.TABLE_ROW:
        payload["is_header"] = block.is_header
        payload["cells"] = [
            {"text": text, "spans": [span_to_payload(s) for s in spans]}
            for text, spans in zip(block.cells, block.cell_spans)
        ]
        return payload

    if kind in (BlockKind.HORIZONTAL_RULE, BlockKind.BLANK):
        return payload

    payload["text"] = block.text
    payload["spans"] = [span_to_payload(s) for s in block.spans]
    if kind is BlockKind.HEADING:
        payload["level"] = block.level
    elif block.is_list_item:
        payload["indent"] = block.indent
        if kind is BlockKind.NUMBERED_ITEM:
            payload["ordinal"] = block.ordinal
    return payload


def blocks_to_payload(blocks: Iterable[Block]) -> List[Dict[str, Any]]:
    return [block_to_payload(block) for block in blocks]


# ----------------------------------------------------------------------
# HTML
# ----------------------------------------------------------------------
def render_inline_html(spans: Iterable[Span]) -> str:
    parts: List[str] = []
    for span in spans:
        text = html.escape(span.text)
        if span.kind is SpanKind.BOLD:
            parts.append(f"<strong>{text}</strong>")
        elif span.kind is SpanKind.ITALIC:
            parts.append(f"<em>{text}</em>")
        elif span.kind is SpanKind.CODE:
            parts.append(f'<code class="md-inline-code">{text}</code>')
        elif span.kind is SpanKind.LINK:
            href = html.escape(span.url or "", quote=True)
            parts.append(f'<a href="{href}" target="_blank" rel="noopener noreferrer">{text}</a>')
        else:
            parts.append(text)
    return "".join(parts)


def render_html(blocks: Iterable[Block]) -> str:
    """Render a block list as an HTML fragment."""
    return "\n".join(_render_group_html(group) for group in group_blocks(list(blocks)))


def _render_group_html(group: BlockGroup) -> str:
    kind = group.kind

    if kind in (BlockKind.BULLET_ITEM, BlockKind.NUMBERED_ITEM):
        tag = "ol" if kind is BlockKind.NUMBERED_ITEM else "ul"
        start = ""
        if kind is BlockKind.NUMBERED_ITEM and group.blocks[0].ordinal not in (None, 1):
            start = f' start="{group.blocks[0].ordinal}"'
        items = []
        for item in group.blocks:
            style = f' style="margin-left: {item.indent * 8}px"' if item.indent else ""
            items.append(f"<li{style}>{render_inline_html(item.spans)}</li>")
        return f"<{tag}{start}>" + "".join(items) + f"</{tag}>"

    if kind is BlockKind.TABLE_ROW:
        return _render_table_html(group.blocks)

    block = group.blocks[0]
    if kind is BlockKind.HEADING:
        level = min(max(block.level, 1), _HEADING_MAX)
        return f"<h{level}>{render_inline_html(block.spans)}</h{level}>"
    if kind is BlockKind.CODE_BLOCK:
        language = resolve_language(block.language)
        return f'<pre><code class="language-{language}">{html.escape(block.code)}</code></pre>'
    if kind is BlockKind.BLOCKQUOTE:
        return f"<blockquote>{render_inline_html(block.spans)}</blockquote>"
    if kind is BlockKind.HORIZONTAL_RULE:
        return "<hr>"
    if kind is BlockKind.BLANK:
        return '<div class="md-spacer"></div>'
    return f"<p>{render_inline_html(block.spans)}</p>"


def _render_table_html(rows: Iterable[Block]) -> str:
    head: List[str] = []
    body: List[str] = []
    for row in rows:
        cell_tag = "th" if row.is_header else "td"
        cells = "".join(
            f"<{cell_tag}>{render_inline_html(spans)}</{cell_tag}>" for spans in row.cell_spans
        )
        (head if row.is_header else body).append(f"<tr>{cells}</tr>")

    parts = ["<table>"]
    if head:
        parts.append("<thead>" + "".join(head) + "</thead>")
    if body:
        parts.append("<tbody>" + "".join(body) + "</tbody>")
    parts.append("</table>")
    return "".join(parts)


# ----------------------------------------------------------------------
# Plain text
# ----------------------------------------------------------------------
def render_text(blocks: Iterable[Block]) -> str:
    """Plain-text rendering with all markup removed (previews, search snippets)."""
    lines: List[str] = []
    for block in blocks:
        kind = block.kind
        if kind is BlockKind.CODE_BLOCK:
            lines.extend(block.lines)
        elif kind is BlockKind.TABLE_ROW:
            lines.append(" | ".join(spans_to_text(spans) for spans in block.cell_spans))
        elif kind is BlockKind.BULLET_ITEM:
            lines.append(" " * block.indent + "- " + spans_to_text(block.spans))
        elif kind is BlockKind.NUMBERED_ITEM:
            lines.append(" " * block.indent + f"{block.ordinal}. " + spans_to_text(block.spans))
        elif kind in (BlockKind.HORIZONTAL_RULE, BlockKind.BLANK):
            lines.append("")
        else:
            lines.append(spans_to_text(block.spans))
    return "\n".join(lines).strip()
