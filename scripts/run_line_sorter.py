#!/usr/bin/env python3
"""Run the line sorter API.

Reads configuration from the environment (a local .env is loaded first):
SORTER_STORAGE_BACKEND, DATABASE_URL, ENVIRONMENT, LOG_LEVEL, ...

Usage:
    python scripts/run_line_sorter.py
    python scripts/run_line_sorter.py --host 0.0.0.0 --port 8080
    python scripts/run_line_sorter.py --reload
"""

from __future__ import annotations

import argparse

import uvicorn
from dotenv import load_dotenv


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the line sorter API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--reload", action="store_true", help="Restart on code changes"
    )
    return parser.parse_args()


def main() -> None:
    load_dotenv()
    args = parse_args()
    uvicorn.run(
        "src.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
