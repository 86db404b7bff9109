#!/usr/bin/env python3
"""Start the PrepDeck markup service"""

import argparse
import sys
import os

# make sure the project root is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main():
    from prepdeck.config import settings

    parser = argparse.ArgumentParser(description="Run PrepDeck markup service")
    parser.add_argument("--host", default=settings.HOST, help=f"Bind host (default: {settings.HOST})")
    parser.add_argument("--port", type=int, default=settings.PORT, help=f"Bind port (default: {settings.PORT})")
    parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=settings.RELOAD,
        help="Auto-reload on source changes (default: RELOAD setting)",
    )
    parser.add_argument("--workers", type=int, default=1, help="Number of workers (ignored with --reload)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="uvicorn log level")
    parser.add_argument("--solutions", help="Override SOLUTIONS_PATH for this run")
    args = parser.parse_args()

    if args.solutions:
        # picked up by the Settings of the server process
        os.environ["SOLUTIONS_PATH"] = args.solutions

    import uvicorn

    uvicorn.run(
        "prepdeck.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1 if args.reload else args.workers,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
