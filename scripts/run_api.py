#!/usr/bin/env python3
"""Serve the adaptive scanner API with uvicorn.

Usage:
    python scripts/run_api.py [--host HOST] [--port PORT] [--reload]

Environment:
    DATABASE_URL - Required. SQLAlchemy URL of the weights store.
    TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID - Optional. Scan report delivery.
    PORT - Optional. Default port when --port is not given.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

# Ensure imports work when invoked as a script
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


def main() -> int:
    parser = argparse.ArgumentParser(description="Serve the adaptive scanner API.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", "8080")),
        help="Bind port (default: $PORT or 8080)",
    )
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not os.environ.get("DATABASE_URL"):
        print("Error: DATABASE_URL must point at the weights database", file=sys.stderr)
        return 1

    base = f"http://{args.host}:{args.port}"
    print(f"Adaptive scanner listening on {base}")
    print(f"  trigger: {base}/scan")
    print(f"  status:  {base}/scan/status")
    print(f"  weights: {base}/weights")

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload, log_level="info")
    return 0


if __name__ == "__main__":
    sys.exit(main())
