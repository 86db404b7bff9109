"""Tests for the markup, manifest and solution services."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from prepdeck.core.markup_types import BlockKind
from prepdeck.services.manifest_service import build_manifest, summarize_manifest, write_manifest
from prepdeck.services.markup_service import MarkupService
from prepdeck.services.solution_service import SolutionService
from prepdeck.utils.exceptions import (
    ConfigurationError,
    ManifestError,
    MarkupTooLargeError,
    SolutionLoadError,
    SolutionNotFoundError,
)

if TYPE_CHECKING:
    from pathlib import Path


# === MarkupService ===


def test_parse_normalizes_escaped_input(markup_service: MarkupService) -> None:
    blocks = markup_service.parse(r"# Title\n- item")
    assert [b.kind for b in blocks] == [BlockKind.HEADING, BlockKind.BULLET_ITEM]


def test_parse_without_normalization_keeps_escapes(markup_service: MarkupService) -> None:
    blocks = markup_service.parse(r"# Title\n- item", normalize_first=False)
    assert [b.kind for b in blocks] == [BlockKind.HEADING]
    assert blocks[0].text == r"Title\n- item"


def test_parse_empty_input(markup_service: MarkupService) -> None:
    assert markup_service.parse("") == ()
    assert markup_service.parse(None) == ()


def test_parse_results_are_memoized(markup_service: MarkupService) -> None:
    first = markup_service.parse("**same** text")
    second = markup_service.parse("**same** text")
    assert first is second
    cache = markup_service.get_stats()["cache"]
    assert (cache["hits"], cache["misses"], cache["size"], cache["max_size"]) == (1, 1, 1, 32)

    markup_service.clear_cache()
    assert markup_service.get_stats()["cache"]["size"] == 0


def test_oversized_markup_is_rejected() -> None:
    service = MarkupService(max_chars=10, cache_size=4)
    with pytest.raises(MarkupTooLargeError) as exc_info:
        service.parse("x" * 11)
    assert exc_info.value.status_code == 413
    with pytest.raises(MarkupTooLargeError):
        service.normalize("y" * 11)
    assert service.parse("x" * 10)


def test_normalize_modes(markup_service: MarkupService) -> None:
    assert markup_service.normalize(r"```py\nprint(\"a\\nb\")\n```") == 'print("a\nb")'
    assert markup_service.normalize(r'```py\nprint("a\nb")\n```', mode="code") == 'print("a\\nb")'
    assert markup_service.normalize(None) == ""


def test_render_formats(markup_service: MarkupService) -> None:
    blocks_only = markup_service.render("**hi**")
    assert blocks_only["format"] == "blocks"
    assert blocks_only["html"] is None and blocks_only["text"] is None
    assert blocks_only["blocks"][0]["spans"] == [{"type": "bold", "text": "hi"}]

    assert markup_service.render("**hi**", fmt="html")["html"] == "<p><strong>hi</strong></p>"
    assert markup_service.render("**hi**", fmt="text")["text"] == "hi"
    assert markup_service.render("**hi**", fmt="pdf")["format"] == "blocks"


def test_stats_count_operations(markup_service: MarkupService) -> None:
    markup_service.render("a", fmt="html")
    markup_service.render("a", fmt="html")
    markup_service.normalize("a", mode="code")
    counters = markup_service.get_stats()["counters"]
    assert counters == {"render_html": 2, "normalize_code": 1}
    assert markup_service.get_stats()["max_chars"] == 10_000


# === manifest ===


def test_build_manifest(solutions_dir: Path) -> None:
    manifest = build_manifest(solutions_dir)
    assert manifest["total_with_solutions"] == 3
    assert manifest["solutions"] == {
        "broken": {"main": True, "parts": []},
        "lru_cache": {"main": False, "parts": [2]},
        "two_sum": {"main": True, "parts": [2, 3]},
    }
    assert manifest["generated_at"].endswith("Z")


def test_build_manifest_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        build_manifest(tmp_path / "missing")


def test_build_manifest_empty_directory(tmp_path: Path) -> None:
    manifest = build_manifest(tmp_path)
    assert manifest["total_with_solutions"] == 0
    assert manifest["solutions"] == {}


def test_write_manifest(solutions_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "solution-manifest.json"
    manifest = write_manifest(solutions_dir, output)
    assert json.loads(output.read_text(encoding="utf-8")) == manifest
    assert summarize_manifest(manifest) == {"problems": 3, "main": 2, "follow_ups": 3}


# === SolutionService ===


def test_solution_service_requires_a_path(markup_service: MarkupService) -> None:
    with pytest.raises(ConfigurationError):
        SolutionService("", markup_service)  # type: ignore[arg-type]


def test_render_main_solution(solution_service: SolutionService) -> None:
    rendered = solution_service.render("two_sum")

    assert rendered["title"] == "Two Sum"
    assert rendered["difficulty"] == "Easy"
    assert rendered["category"] == "Hashing"
    assert rendered["part"] == "main"

    assert rendered["code"]["python"] == {
        "language": "python",
        "code": (
            "def two_sum(nums, target):\n"
            '    print("\\n" + "=" * 60)\n'
            "    seen = {}\n"
            "    return []"
        ),
    }
    assert rendered["code"]["java"] == {
        "language": "java",
        "code": "class Solution {\n    int[] twoSum() { return null; }\n}",
    }

    explanation = rendered["sections"]["optimal_solution.explanation_md"]
    assert [b["type"] for b in explanation] == [
        "heading",
        "blank",
        "paragraph",
        "blank",
        "bullet_item",
        "bullet_item",
    ]
    assert {"type": "bold", "text": "hash map"} in explanation[2]["spans"]
    assert rendered["sections"]["thinking_process.key_insight"][0]["text"] == "Trade space for time."
    assert "problem_analysis.first_impressions" not in rendered["sections"]

    assert rendered["diagrams"] == {"visual_explanation.problem_visualization": "[2, 7, 11, 15]\n ^  ^"}
    assert rendered["tables"] == {
        "visual_explanation.dry_run_table": {
            "header": ["Step", "seen"],
            "rows": [["1", "`{2: 0}`"], ["2", "`{2: 0, 7: 1}`"]],
        }
    }

    (approach,) = rendered["approaches"]
    assert approach["name"] == "Brute force"
    assert approach["time_complexity"] == "O(n^2)"
    assert approach["description"][0]["spans"][1] == {"type": "italic", "text": "every"}
    assert approach["pseudocode"] == "for i in range(n):\n    for j in range(i + 1, n):\n        check(i, j)"

    json.dumps(rendered)


def test_render_follow_up_part(solution_service: SolutionService) -> None:
    rendered = solution_service.render("two_sum", "part2")
    assert rendered["code"] == {
        "python": {"language": "python", "code": "def two_sum_sorted(nums, target):\n    return []"}
    }
    assert rendered["tables"] == {"dry_run.trace_table": {"header": ["l", "r"], "rows": [["0", "3"]]}}
    assert rendered["approaches"] == []
    assert rendered["sections"] == {}


@pytest.mark.parametrize(
    ("problem_id", "part"),
    [
        ("missing", "main"),
        ("two_sum", "part9"),
        ("lru_cache", "main"),
        ("../etc/passwd", "main"),
        ("two_sum", "extra"),
        ("", "main"),
    ],
)
def test_load_not_found(solution_service: SolutionService, problem_id: str, part: str) -> None:
    with pytest.raises(SolutionNotFoundError) as exc_info:
        solution_service.load(problem_id, part)
    assert exc_info.value.status_code == 404


def test_load_invalid_json(solution_service: SolutionService) -> None:
    with pytest.raises(SolutionLoadError):
        solution_service.load("broken")


def test_load_non_object_json(solutions_dir: Path, solution_service: SolutionService) -> None:
    (solutions_dir / "listy_main.json").write_text("[1, 2]")
    with pytest.raises(SolutionLoadError):
        solution_service.load("listy")


def test_non_string_code_value_is_stringified(solutions_dir: Path, solution_service: SolutionService) -> None:
    (solutions_dir / "odd_main.json").write_text(json.dumps({"solution_python": ["a", "b"]}))
    rendered = solution_service.render("odd")
    assert rendered["code"]["python"]["code"] == '[\n  "a",\n  "b"\n]'
    assert rendered["title"] is None
