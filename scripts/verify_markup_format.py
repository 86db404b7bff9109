#!/usr/bin/env python3
"""No-network markup parsing regression checks.

This script validates:
1) Synthetic cases that previously caused rendering regressions.
2) Every practice solution JSON in the solutions directory renders without errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Tuple


AI_ROOT = Path(__file__).resolve().parents[1]

sys.path.insert(0, str(AI_ROOT))

from prepdeck.config import settings  # noqa: E402
from prepdeck.core.block_parser import parse_markup  # noqa: E402
from prepdeck.core.markup_types import BlockKind  # noqa: E402
from prepdeck.core.renderers import render_html  # noqa: E402
from prepdeck.services.markup_service import MarkupService  # noqa: E402
from prepdeck.services.solution_service import SolutionService  # noqa: E402
from prepdeck.services.manifest_service import SOLUTION_FILE_RE  # noqa: E402


def _assert(cond: bool, message: str) -> None:
    if not cond:
        raise AssertionError(message)


def run_synthetic_cases() -> None:
    cases: List[Tuple[str, str, Dict[str, str]]] = [
        (
            "escaped_code",
            "```python\\ndef solve(nums):\\n    print(\\\"\\n\\\" + \\\"=\\\" * 60)\\n    return nums\\n```",
            {
                "must_contain_1": "def solve(nums):",
                "must_contain_2": "return nums",
                "must_contain_3": 'class="language-python"',
                "must_not_contain_1": "\\\"",
            },
        ),
        (
            "table_with_separator",
            "| Step | State |\n|------|:-----:|\n| 1 | `{}` |",
            {
                "must_contain_1": "<th>Step</th>",
                "must_contain_2": '<code class="md-inline-code">{}</code>',
                "must_not_contain_1": "------",
            },
        ),
        (
            "overlapping_emphasis",
            "**a** b *c*",
            {
                "must_contain_1": "<strong>a</strong> b <em>c</em>",
                "must_not_contain_1": "*",
            },
        ),
        (
            "unterminated_fence",
            "Intro\n```java\nint x = 1;\nint y = 2;",
            {
                "must_contain_1": 'class="language-java"',
                "must_contain_2": "int y = 2;",
            },
        ),
    ]

    for name, raw, rules in cases:
        blocks = parse_markup(raw)
        rendered = render_html(blocks)
        for key, value in rules.items():
            if key.startswith("must_contain"):
                _assert(value in rendered, f"[{name}] missing required fragment: {value!r}")
            if key.startswith("must_not_contain"):
                _assert(value not in rendered, f"[{name}] forbidden fragment found: {value!r}")

        _assert(len(blocks) > 0, f"[{name}] blocks should not be empty")
        if name == "table_with_separator":
            rows = [b for b in blocks if b.kind is BlockKind.TABLE_ROW]
            _assert(len(rows) == 2, f"[table_with_separator] expected 2 rows, got {len(rows)}")
        if name == "unterminated_fence":
            code = [b for b in blocks if b.kind is BlockKind.CODE_BLOCK]
            _assert(len(code) == 1 and len(code[0].lines) == 2, "[unterminated_fence] code lines lost")


def run_solutions_scan(solutions_dir: Path) -> None:
    if not solutions_dir.is_dir():
        print(f"Solutions directory not found, skipping scan: {solutions_dir}")
        return

    service = SolutionService(solutions_dir, MarkupService())
    problems: List[Tuple[str, str]] = []
    checked = 0

    for path in sorted(solutions_dir.glob("*.json")):
        match = SOLUTION_FILE_RE.match(path.name)
        if not match:
            continue
        problem_id, part = match.groups()
        checked += 1
        try:
            rendered = service.render(problem_id, part)
        except Exception as exc:
            problems.append((path.name, f"render_failed: {exc}"))
            continue

        for language, listing in rendered["code"].items():
            if listing["code"] and "\n" not in listing["code"] and "\\n" in listing["code"]:
                problems.append((path.name, f"code_not_unescaped:{language}"))
        try:
            json.dumps(rendered)
        except (TypeError, ValueError):
            problems.append((path.name, "not_serializable"))

    print("=== Markup Format Validation ===")
    print(f"solutions={checked}")
    print(f"problem_files={len(problems)}")

    if problems:
        for name, issue in problems:
            print(f"- {name}: {issue}")
        raise AssertionError("Markup format validation failed.")


def main() -> int:
    parser = argparse.ArgumentParser(description="Markup parsing regression checks")
    parser.add_argument("--solutions", default=settings.SOLUTIONS_PATH, help="Solutions directory")
    args = parser.parse_args()

    try:
        run_synthetic_cases()
        run_solutions_scan(Path(args.solutions).expanduser())
    except Exception as exc:  # pragma: no cover - command-line failure path
        print(f"[verify_markup_format] ERROR: {exc}")
        return 1

    print("[verify_markup_format] PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
