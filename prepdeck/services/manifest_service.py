import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from prepdeck.utils.exceptions import ManifestError
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

SOLUTION_FILE_RE = re.compile(r"^(.+?)_(main|part\d+)\.json$")


def build_manifest(directory: Path) -> Dict[str, Any]:
    """
    Index the practice solutions available on disk.

    Files are named ``<problem_id>_main.json`` or ``<problem_id>_partN.json``;
    anything else (dotfiles, temp files, other names) is ignored.
    """
    if not directory.exists() or not directory.is_dir():
        raise ManifestError(f"Solutions directory not found: {directory}")

    try:
        names = sorted(p.name for p in directory.iterdir() if p.is_file())
    except OSError as e:
        raise ManifestError(f"Failed to read solutions directory: {e}") from e

    solutions: Dict[str, Dict[str, Any]] = {}
    for name in names:
        if name.startswith("."):
            continue
        match = SOLUTION_FILE_RE.match(name)
        if not match:
            continue

        problem_id, part_type = match.groups()
        entry = solutions.setdefault(problem_id, {"main": False, "parts": []})
        if part_type == "main":
            entry["main"] = True
        else:
            part_num = int(part_type[len("part"):])
            if part_num not in entry["parts"]:
                entry["parts"].append(part_num)

    for entry in solutions.values():
        entry["parts"].sort()

    logger.debug(f"Manifest built for {len(solutions)} problems from {directory}")
    return {
        "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "total_with_solutions": len(solutions),
        "solutions": solutions,
    }


def write_manifest(directory: Path, output: Path) -> Dict[str, Any]:
    """Build the manifest and write it as pretty-printed JSON"""
    manifest = build_manifest(directory)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info(f"Solution manifest written to {output}")
    return manifest


def summarize_manifest(manifest: Dict[str, Any]) -> Dict[str, int]:
    solutions = manifest.get("solutions", {})
    return {
        "problems": len(solutions),
        "main": sum(1 for entry in solutions.values() if entry.get("main")),
        "follow_ups": sum(len(entry.get("parts", [])) for entry in solutions.values()),
    }
