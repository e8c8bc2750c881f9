#!/usr/bin/env python3
"""
User Auth API -- register, log in, and access JWT-protected routes.

Usage:
  python main.py
  python main.py --port 5000
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY            Token signing key, at least 32 characters. Required unless DEBUG=true.
  DEBUG                 true to auto-generate a throwaway SECRET_KEY for local development.
  DATABASE_URL          SQLAlchemy connection string for the user store.
  DB_NAME               SQLite file name used when DATABASE_URL is empty (default: userauth).
  TOKEN_EXPIRE_SECONDS  Token lifetime in seconds (default: 7 days).
  HOST / PORT           Listen address (default: 127.0.0.1:3000).
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Run the user auth API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
