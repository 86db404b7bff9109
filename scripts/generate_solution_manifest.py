#!/usr/bin/env python3
"""Generate the manifest of available practice solutions.

Run: python scripts/generate_solution_manifest.py [--solutions DIR] [--output FILE]
"""

import argparse
import sys
import os
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prepdeck.config import settings  # noqa: E402
from prepdeck.services.manifest_service import summarize_manifest, write_manifest  # noqa: E402
from prepdeck.utils.exceptions import ManifestError  # noqa: E402
from prepdeck.utils.logger import get_logger, setup_logging  # noqa: E402

logger = get_logger("generate_solution_manifest")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate solution_manifest.json")
    parser.add_argument("--solutions", default=settings.SOLUTIONS_PATH, help="Solutions directory")
    parser.add_argument("--output", default=settings.MANIFEST_OUTPUT_PATH, help="Manifest output file")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    try:
        manifest = write_manifest(Path(args.solutions).expanduser(), Path(args.output).expanduser())
    except ManifestError as e:
        logger.error(e.message)
        return 1

    summary = summarize_manifest(manifest)
    print("Solution manifest generated!")
    print(f"Total problems with solutions: {summary['problems']}")
    print(f"Main solutions: {summary['main']}")
    print(f"Follow-up solutions: {summary['follow_ups']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
