#!/usr/bin/env python
"""
Run the dashboard analytics API.

    python run_server.py --dev          # auto-reload, debug logging
    python run_server.py --workers 2    # production-style
"""

import argparse
import os

import uvicorn

APP = "grocery_analytics.main:app"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grocery dashboard analytics API")
    parser.add_argument("--dev", action="store_true", help="Reload on code changes")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", 8000)))
    parser.add_argument("--workers", type=int, default=int(os.getenv("WORKERS", 1)))
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if args.dev:
        uvicorn.run(
            APP,
            host=args.host,
            port=args.port,
            reload=True,
            reload_dirs=["grocery_analytics"],
            log_level="debug",
        )
        return

    # access logging comes from RequestLoggingMiddleware
    uvicorn.run(
        APP,
        host=args.host,
        port=args.port,
        workers=args.workers,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=False,
        proxy_headers=True,
        server_header=False,
    )


if __name__ == "__main__":
    main()
