from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SpanKind(str, Enum):
    """Inline fragment types"""

    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"


class BlockKind(str, Enum):
    """Structural block types"""

    HEADING = "heading"
    BULLET_ITEM = "bullet_item"
    NUMBERED_ITEM = "numbered_item"
    TABLE_ROW = "table_row"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "hr"
    PARAGRAPH = "paragraph"
    BLANK = "blank"


class ListKind(str, Enum):
    """Kind of the list run the block parser is currently inside"""

    NONE = "none"
    BULLET = "bullet"
    NUMBERED = "numbered"


LIST_BLOCK_KINDS = {BlockKind.BULLET_ITEM, BlockKind.NUMBERED_ITEM}


@dataclass(frozen=True)
class Span:
    kind: SpanKind
    text: str
    url: Optional[str] = None


Spans = Tuple[Span, ...]


@dataclass(frozen=True)
class Block:
    """
    One structural unit of parsed text.

    Only the fields relevant to ``kind`` are populated:
    headings use ``level``; list items use ``indent`` (and ``ordinal`` when
    numbered); table rows use ``cells``/``cell_spans``/``is_header``; code
    blocks use ``language``/``lines``. ``text`` keeps the source of the inline
    content so renderers can fall back to it.
    """

    kind: BlockKind
    text: str = ""
    spans: Spans = ()
    level: int = 0
    indent: int = 0
    ordinal: Optional[int] = None
    cells: Tuple[str, ...] = ()
    cell_spans: Tuple[Spans, ...] = ()
    is_header: bool = False
    language: str = ""
    lines: Tuple[str, ...] = ()

    @property
    def code(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_list_item(self) -> bool:
        return self.kind in LIST_BLOCK_KINDS


@dataclass(frozen=True)
class TableData:
    """Header plus data rows of a standalone table (dry-run / trace tables)"""

    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
