from collections import Counter
from functools import lru_cache
from threading import Lock
from typing import Any, Dict, Tuple

from prepdeck.config import settings
from prepdeck.core.block_parser import parse_blocks, parse_markup
from prepdeck.core.markup_types import Block
from prepdeck.core.renderers import blocks_to_payload, render_html, render_text
from prepdeck.core.text_normalizer import normalize, unescape_code
from prepdeck.utils.exceptions import MarkupTooLargeError
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

RENDER_FORMATS = ("blocks", "html", "text")
NORMALIZE_MODES = ("text", "code")


class MarkupService:
    """Normalize -> parse -> render pipeline shared by every rendering surface"""

    def __init__(self, max_chars: int | None = None, cache_size: int | None = None):
        self._max_chars = max_chars or settings.MAX_MARKUP_CHARS
        self._parse_cached = lru_cache(maxsize=cache_size or settings.RENDER_CACHE_SIZE)(self._parse)
        self._counters: Counter = Counter()
        self._counter_lock = Lock()

    # ------------------------------------------------------------------
    # public interface
    # ------------------------------------------------------------------
    def parse(self, text: Any, normalize_first: bool = True) -> Tuple[Block, ...]:
        """Parse text into blocks; results are memoized on the input string"""
        if not isinstance(text, str) or not text:
            return ()
        self._check_size(text)
        return self._parse_cached(text, normalize_first)

    def normalize(self, text: Any, mode: str = "text") -> str:
        if isinstance(text, str):
            self._check_size(text)
        self._count(f"normalize_{mode}")
        if mode == "code":
            return unescape_code(text)
        return normalize(text)

    def render(self, text: Any, fmt: str = "blocks", normalize_first: bool = True) -> Dict[str, Any]:
        """Render text as a block payload, plus HTML or plain text when asked"""
        if fmt not in RENDER_FORMATS:
            fmt = "blocks"
        blocks = self.parse(text, normalize_first)
        self._count(f"render_{fmt}")

        result: Dict[str, Any] = {
            "format": fmt,
            "blocks": blocks_to_payload(blocks),
            "html": None,
            "text": None,
        }
        if fmt == "html":
            result["html"] = render_html(blocks)
        elif fmt == "text":
            result["text"] = render_text(blocks)
        return result

    def get_stats(self) -> Dict[str, Any]:
        info = self._parse_cached.cache_info()
        with self._counter_lock:
            counters = dict(self._counters)
        return {
            "max_chars": self._max_chars,
            "cache": {
                "hits": info.hits,
                "misses": info.misses,
                "size": info.currsize,
                "max_size": info.maxsize,
            },
            "counters": counters,
        }

    def clear_cache(self) -> None:
        self._parse_cached.cache_clear()
        logger.info("Markup parse cache cleared")

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    @staticmethod
    def _parse(text: str, normalize_first: bool) -> Tuple[Block, ...]:
        if normalize_first:
            return parse_markup(text)
        return tuple(parse_blocks(text))

    def _check_size(self, text: str) -> None:
        if len(text) > self._max_chars:
            logger.warning(
                f"Rejected markup of {len(text)} chars (limit {self._max_chars})",
                extra={"chars": len(text)},
            )
            raise MarkupTooLargeError(
                f"Markup exceeds {self._max_chars} characters ({len(text)} given)"
            )

    def _count(self, key: str) -> None:
        with self._counter_lock:
            self._counters[key] += 1
