"""Shared fixtures: a temporary solutions directory and an API client bound to it."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from prepdeck.services.markup_service import MarkupService
from prepdeck.services.solution_service import SolutionService

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from fastapi.testclient import TestClient


SAMPLE_SOLUTION_JSON = {
    "problem_title": "Two Sum",
    "difficulty": "Easy",
    "category": "Hashing",
    "solution_python_lines": [
        "def two_sum(nums, target):",
        '    print("',
        '" + "=" * 60)',
        "    seen = {}",
        "    return []",
    ],
    # escaped the way the generator double-encodes code strings
    "solution_java": "```java\\nclass Solution {\\n\\tint[] twoSum() { return null; }\\n}\\n```",
    "optimal_solution": {
        "name": "One-pass hash map",
        "explanation_md": "## Idea\\n\\nUse a **hash map** keyed by `complement`.\\n\\n- store index\\n- look up first",
    },
    "thinking_process": {
        "key_insight": "Trade space for time.",
    },
    "visual_explanation": {
        "problem_visualization": "```\\n[2, 7, 11, 15]\\n ^  ^\\n```",
        "dry_run_table": "| Step | seen |\\n|---|---|\\n| 1 | `{2: 0}` |\\n| 2 | `{2: 0, 7: 1}` |",
    },
    "approaches": [
        {
            "name": "Brute force",
            "description": "Check *every* pair.",
            "time_complexity": "O(n^2)",
            "space_complexity": "O(1)",
            "pseudocode": "for i in range(n):\\n    for j in range(i + 1, n):\\n        check(i, j)",
        },
    ],
}

SAMPLE_PART_JSON = {
    "problem_title": "Two Sum II",
    "part_number": 2,
    "solution_python": "def two_sum_sorted(nums, target):\\n    return []",
    "dry_run": {"trace_table": "| l | r |\\n|:-:|:-:|\\n| 0 | 3 |"},
}


@pytest.fixture
def solutions_dir(tmp_path: Path) -> Path:
    """Solutions directory with main + follow-up parts and some noise files."""
    directory = tmp_path / "practice_solutions"
    directory.mkdir()
    (directory / "two_sum_main.json").write_text(json.dumps(SAMPLE_SOLUTION_JSON))
    (directory / "two_sum_part3.json").write_text(json.dumps(SAMPLE_PART_JSON))
    (directory / "two_sum_part2.json").write_text(json.dumps(SAMPLE_PART_JSON))
    (directory / "lru_cache_part2.json").write_text(json.dumps(SAMPLE_PART_JSON))
    (directory / "broken_main.json").write_text("{not json")
    (directory / ".hidden_main.json").write_text("{}")
    (directory / "notes.txt").write_text("ignore me")
    (directory / "temp.json").write_text("{}")
    return directory


@pytest.fixture
def markup_service() -> MarkupService:
    return MarkupService(max_chars=10_000, cache_size=32)


@pytest.fixture
def solution_service(solutions_dir: Path, markup_service: MarkupService) -> SolutionService:
    return SolutionService(solutions_dir, markup_service)


@pytest.fixture
def client(solutions_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """API client whose lifespan picks up the temporary solutions directory."""
    from fastapi.testclient import TestClient

    from prepdeck.app import app
    from prepdeck.config import settings

    monkeypatch.setattr(settings, "SOLUTIONS_PATH", str(solutions_dir))
    with TestClient(app) as test_client:
        yield test_client
