import re
from typing import Any, List, NamedTuple, Optional, Tuple

from prepdeck.core.inline_parser import parse_inline
from prepdeck.core.markup_types import (
    Block,
    BlockKind,
    ListKind,
    TableData,
)
from prepdeck.core.text_normalizer import fix_broken_string_literals, unescape_text
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

_FENCE_LANG_RE = re.compile(r"^```\s*([^\s`]*)")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_NUMBERED_RE = re.compile(r"^(\s*)(\d+)[.)]\s+(.*)$")
_BULLET_RE = re.compile(r"^(\s*)[-*•]\s+(.*)$")
_BLOCKQUOTE_RE = re.compile(r"^>\s*(.*)$")
_HR_RE = re.compile(r"^[-*_]{3,}$")
_SEPARATOR_CONTENT_RE = re.compile(r"^[-:\s]+$")

TAB_WIDTH = 4


class BlockGroup(NamedTuple):
    """A run of blocks a renderer draws as one unit (a list, a table, or a single block)."""

    kind: BlockKind
    blocks: Tuple[Block, ...]


class _ParserState:
    """Line-by-line state machine behind :func:`parse_blocks`."""

    def __init__(self) -> None:
        self.blocks: List[Block] = []

        self.in_code_fence = False
        self.code_lang = "text"
        self.code_lines: List[str] = []

        self.list_kind = ListKind.NONE
        self.list_items: List[Block] = []

        self.table_rows: List[Tuple[str, ...]] = []

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------
    def feed(self, line: str) -> None:
        stripped = line.strip()

        if stripped.startswith("```"):
            self._toggle_fence(stripped)
            return

        if self.in_code_fence:
            self.code_lines.append(line)
            return

        if _is_table_line(stripped):
            self.flush_list()
            self.table_rows.append(_split_cells(stripped))
            return
        if self.table_rows:
            self.flush_table()

        heading_match = _HEADING_RE.match(line)
        if heading_match:
            self.flush_list()
            text = heading_match.group(2).strip()
            self._emit(Block(
                BlockKind.HEADING,
                text=text,
                spans=tuple(parse_inline(text)),
                level=len(heading_match.group(1)),
            ))
            return

        numbered_match = _NUMBERED_RE.match(line)
        if numbered_match:
            text = numbered_match.group(3).strip()
            self._add_list_item(ListKind.NUMBERED, Block(
                BlockKind.NUMBERED_ITEM,
                text=text,
                spans=tuple(parse_inline(text)),
                indent=_indent_width(numbered_match.group(1)),
                ordinal=int(numbered_match.group(2)),
            ))
            return

        bullet_match = _BULLET_RE.match(line)
        if bullet_match:
            text = bullet_match.group(2).strip()
            self._add_list_item(ListKind.BULLET, Block(
                BlockKind.BULLET_ITEM,
                text=text,
                spans=tuple(parse_inline(text)),
                indent=_indent_width(bullet_match.group(1)),
            ))
            return

        quote_match = _BLOCKQUOTE_RE.match(stripped)
        if quote_match:
            self.flush_list()
            text = quote_match.group(1).strip()
            self._emit(Block(BlockKind.BLOCKQUOTE, text=text, spans=tuple(parse_inline(text))))
            return

        if _HR_RE.match(stripped):
            self.flush_list()
            self._emit(Block(BlockKind.HORIZONTAL_RULE))
            return

        if not stripped:
            self.flush_list()
            self._emit_blank()
            return

        self.flush_list()
        self._emit(Block(BlockKind.PARAGRAPH, text=stripped, spans=tuple(parse_inline(stripped))))

    def finish(self) -> List[Block]:
        if self.in_code_fence:
            logger.debug(f"Unterminated code fence closed at end of input ({len(self.code_lines)} lines)")
            self.flush_code()
        self.flush_list()
        self.flush_table()
        return self.blocks

    # ------------------------------------------------------------------
    # flushes
    # ------------------------------------------------------------------
    def flush_list(self) -> None:
        self.blocks.extend(self.list_items)
        self.list_items = []
        self.list_kind = ListKind.NONE

    def flush_table(self) -> None:
        if not self.table_rows:
            return
        rows = [row for row in self.table_rows if not _is_separator_cells(row)]
        self.table_rows = []
        if not rows:
            logger.debug("Discarded table run without a header row")
            return

        for index, cells in enumerate(rows):
            self.blocks.append(Block(
                BlockKind.TABLE_ROW,
                text=" | ".join(cells),
                cells=cells,
                cell_spans=tuple(tuple(parse_inline(cell)) for cell in cells),
                is_header=index == 0,
            ))

    def flush_code(self) -> None:
        lines = fix_broken_string_literals(self.code_lines)
        self.blocks.append(Block(BlockKind.CODE_BLOCK, language=self.code_lang, lines=tuple(lines)))
        self.in_code_fence = False
        self.code_lang = "text"
        self.code_lines = []

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _toggle_fence(self, stripped: str) -> None:
        if self.in_code_fence:
            self.flush_code()
            return

        self.flush_list()
        self.flush_table()
        lang_match = _FENCE_LANG_RE.match(stripped)
        token = lang_match.group(1).lower() if lang_match else ""
        self.in_code_fence = True
        self.code_lang = token or "text"
        self.code_lines = []

    def _add_list_item(self, kind: ListKind, item: Block) -> None:
        if self.list_kind is not kind:
            self.flush_list()
            self.list_kind = kind
        self.list_items.append(item)

    def _emit(self, block: Block) -> None:
        self.blocks.append(block)

    def _emit_blank(self) -> None:
        if self.blocks and self.blocks[-1].kind is BlockKind.BLANK:
            return
        self.blocks.append(Block(BlockKind.BLANK))


def parse_blocks(text: Any) -> List[Block]:
    """Parse normalized text into an ordered list of blocks. Never raises."""
    if not isinstance(text, str) or not text:
        return []

    state = _ParserState()
    for line in _split_lines(text):
        state.feed(line)
    return state.finish()


def parse_markup(raw: Any) -> Tuple[Block, ...]:
    """Recover escape sequences, then parse. Fences are left for the parser to see."""
    return tuple(parse_blocks(unescape_text(raw).strip("\r\n")))


def group_blocks(blocks: List[Block]) -> List[BlockGroup]:
    """Fold list runs and table runs into groups; every other block stands alone."""
    groups: List[BlockGroup] = []
    run: List[Block] = []

    def flush_run() -> None:
        if run:
            groups.append(BlockGroup(run[0].kind, tuple(run)))
            run.clear()

    for block in blocks:
        if block.is_list_item or block.kind is BlockKind.TABLE_ROW:
            if run and run[0].kind is not block.kind:
                flush_run()
            run.append(block)
            continue
        flush_run()
        groups.append(BlockGroup(block.kind, (block,)))

    flush_run()
    return groups


def parse_table_text(text: Any) -> Optional[TableData]:
    """
    Parse a standalone pipe table (dry-run traces and the like).

    Escaped newlines are recovered first; blank lines, lines without a pipe
    and separator rows are skipped. The first row with cells is the header.
    """
    if not isinstance(text, str) or not text:
        return None

    header: Tuple[str, ...] = ()
    rows: List[Tuple[str, ...]] = []
    for raw_line in _split_lines(text.replace("\\n", "\n")):
        line = raw_line.strip()
        if not line or "|" not in line:
            continue
        if _is_separator_line(line):
            continue

        cells = tuple(cell.strip() for cell in line.split("|")[1:-1])
        if not cells:
            continue
        if not header:
            header = cells
        else:
            rows.append(cells)

    if not header:
        return None
    return TableData(header=header, rows=tuple(rows))


def _is_table_line(stripped: str) -> bool:
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def _split_cells(stripped: str) -> Tuple[str, ...]:
    return tuple(cell.strip() for cell in stripped[1:-1].split("|"))


def _is_separator_line(line: str) -> bool:
    return _SEPARATOR_CONTENT_RE.match(line.replace("|", "").strip()) is not None


def _is_separator_cells(cells: Tuple[str, ...]) -> bool:
    return _is_separator_line("|".join(cells))


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(TAB_WIDTH))


def _split_lines(text: str) -> List[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
