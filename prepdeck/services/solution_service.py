import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from prepdeck.core.block_parser import parse_table_text
from prepdeck.core.renderers import blocks_to_payload, resolve_language
from prepdeck.core.text_normalizer import (
    get_code_string,
    has_code,
    normalize,
    stringify_code_value,
)
from prepdeck.services.manifest_service import build_manifest
from prepdeck.services.markup_service import MarkupService
from prepdeck.utils.exceptions import (
    ConfigurationError,
    SolutionLoadError,
    SolutionNotFoundError,
)
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

_PROBLEM_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_PART_RE = re.compile(r"^(?:main|part\d+)$")

CODE_LANGUAGES = ("python", "java")

# (section key, path inside the solution JSON)
MARKDOWN_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("problem_analysis.first_impressions", ("problem_analysis", "first_impressions")),
    ("problem_analysis.pattern_recognition", ("problem_analysis", "pattern_recognition")),
    ("problem_understanding.what_changes", ("problem_understanding", "what_changes")),
    ("problem_understanding.key_insight", ("problem_understanding", "key_insight")),
    ("thinking_process.key_insight", ("thinking_process", "key_insight")),
    ("thinking_process.why_this_works", ("thinking_process", "why_this_works")),
    ("optimal_solution.explanation_md", ("optimal_solution", "explanation_md")),
    ("complexity_analysis.can_we_do_better", ("complexity_analysis", "can_we_do_better")),
    ("connection_to_next_part", ("connection_to_next_part",)),
)

DIAGRAM_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("visual_explanation.problem_visualization", ("visual_explanation", "problem_visualization")),
    ("visual_explanation.data_structure_state", ("visual_explanation", "data_structure_state")),
    ("visual_explanation.before_after", ("visual_explanation", "before_after")),
    ("visual_explanation.algorithm_flow", ("visual_explanation", "algorithm_flow")),
)

TABLE_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("visual_explanation.dry_run_table", ("visual_explanation", "dry_run_table")),
    ("dry_run.trace_table", ("dry_run", "trace_table")),
)


class SolutionService:
    """Loads generated practice solutions and renders their text fields"""

    def __init__(self, solutions_dir: Path, markup: MarkupService):
        if not str(solutions_dir).strip():
            raise ConfigurationError("SOLUTIONS_PATH is empty")
        self._dir = solutions_dir
        self._markup = markup

    @property
    def solutions_dir(self) -> Path:
        return self._dir

    # ------------------------------------------------------------------
    # public interface
    # ------------------------------------------------------------------
    def manifest(self) -> Dict[str, Any]:
        return build_manifest(self._dir)

    def load(self, problem_id: str, part: str = "main") -> Dict[str, Any]:
        """Read the raw solution JSON for one problem part"""
        if not _PROBLEM_ID_RE.match(problem_id or ""):
            raise SolutionNotFoundError(f"Invalid problem id: {problem_id!r}")
        if not _PART_RE.match(part or ""):
            raise SolutionNotFoundError(f"Invalid solution part: {part!r}")

        path = self._dir / f"{problem_id}_{part}.json"
        if not path.is_file():
            raise SolutionNotFoundError(f"No solution for {problem_id} ({part})")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                f"Failed to load solution {path.name}: {e}",
                extra={"problem_id": problem_id, "part": part},
            )
            raise SolutionLoadError(f"Failed to load solution {problem_id} ({part}): {e}") from e

        if not isinstance(data, dict):
            raise SolutionLoadError(f"Solution {problem_id} ({part}) is not a JSON object")
        return data

    def render(self, problem_id: str, part: str = "main") -> Dict[str, Any]:
        """Load a solution and render code, markdown sections, diagrams and tables"""
        data = self.load(problem_id, part)

        sections: Dict[str, List[Dict[str, Any]]] = {}
        for key, path in MARKDOWN_FIELDS:
            value = _lookup(data, path)
            if isinstance(value, str) and value.strip():
                sections[key] = self._render_markdown(value)

        diagrams: Dict[str, str] = {}
        for key, path in DIAGRAM_FIELDS:
            value = _lookup(data, path)
            if isinstance(value, str) and value.strip():
                diagrams[key] = normalize(value)

        tables: Dict[str, Dict[str, Any]] = {}
        for key, path in TABLE_FIELDS:
            table = parse_table_text(_lookup(data, path))
            if table is not None:
                tables[key] = {
                    "header": list(table.header),
                    "rows": [list(row) for row in table.rows],
                }

        result = {
            "problem_id": problem_id,
            "part": part,
            "title": data.get("problem_title"),
            "difficulty": data.get("difficulty"),
            "category": data.get("category"),
            "code": self._render_code(data),
            "sections": sections,
            "diagrams": diagrams,
            "tables": tables,
            "approaches": [self._render_approach(a) for a in data.get("approaches") or [] if isinstance(a, dict)],
        }
        logger.info(
            f"Rendered solution {problem_id} ({part}): {len(sections)} sections, "
            f"{len(tables)} tables, {len(result['code'])} code listings",
            extra={"problem_id": problem_id, "part": part},
        )
        return result

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _render_markdown(self, text: str) -> List[Dict[str, Any]]:
        return blocks_to_payload(self._markup.parse(text))

    def _render_code(self, data: Dict[str, Any]) -> Dict[str, Dict[str, str]]:
        code: Dict[str, Dict[str, str]] = {}
        for language in CODE_LANGUAGES:
            lines = data.get(f"solution_{language}_lines")
            string_format = data.get(f"solution_{language}")
            if string_format is not None and not isinstance(string_format, str):
                string_format = stringify_code_value(string_format)
            if not has_code(lines, string_format):
                continue
            code[language] = {
                "language": resolve_language(language),
                "code": get_code_string(lines, string_format),
            }
        return code

    def _render_approach(self, approach: Dict[str, Any]) -> Dict[str, Any]:
        description = approach.get("description")
        pseudocode = approach.get("pseudocode")
        return {
            "name": approach.get("name") or "",
            "time_complexity": approach.get("time_complexity"),
            "space_complexity": approach.get("space_complexity"),
            "description": self._render_markdown(description) if isinstance(description, str) else [],
            "pseudocode": get_code_string(None, pseudocode) if isinstance(pseudocode, str) else "",
        }


def _lookup(data: Dict[str, Any], path: Tuple[str, ...]) -> Optional[Any]:
    current: Any = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
