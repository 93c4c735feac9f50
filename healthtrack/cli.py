# -*- coding: utf-8 -*-
"""
Command line entry point for the health tracker.

Usage:
    python -m healthtrack.cli init-db
    python -m healthtrack.cli serve [--host 127.0.0.1] [--port 3000] [--reload]
    python -m healthtrack.cli purge-sessions
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import settings


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create tables and seed the demo user."""
    from .app_db import init_app_db
    from .auth.storage import DEMO_PASSWORD, DEMO_USERNAME, ensure_demo_user

    init_app_db(settings.app_db_path)
    print(f"Database: {settings.app_db_path}")
    if settings.seed_demo_user:
        ensure_demo_user()
        print(f"Test credentials: {DEMO_USERNAME} / {DEMO_PASSWORD}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API under uvicorn."""
    import uvicorn

    print(f"Server running on: http://{args.host}:{args.port}")
    print(f"Database: {settings.app_db_path}")
    uvicorn.run(
        "healthtrack.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_purge_sessions(args: argparse.Namespace) -> int:
    """Delete sessions past their expiry."""
    from .app_db import init_app_db
    from .auth.sessions import purge_expired_sessions

    init_app_db(settings.app_db_path)
    count = purge_expired_sessions()
    print(f"Purged {count} expired session(s)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Health tracker service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init-db", help="Create tables and seed the demo user")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=3000, help="Port to bind to (default: 3000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    subparsers.add_parser("purge-sessions", help="Delete expired sessions")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "init-db": cmd_init_db,
        "serve": cmd_serve,
        "purge-sessions": cmd_purge_sessions,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
