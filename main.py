#!/usr/bin/env python3
"""
Credential Auth -- user registration, password login, and bearer tokens.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py serve --reload
  python main.py check-config

Environment variables:
  SECRET_KEY            Required. HS256 signing secret, at least 32 characters.
  TOKEN_EXPIRE_SECONDS  Token lifetime in seconds (default 3600).
  BCRYPT_ROUNDS         bcrypt cost factor (default 10).
  DATABASE_URL          SQLAlchemy URL for the users table (default: local SQLite file).
  UNIFORM_LOGIN_ERRORS  When true, login never reveals whether an email is registered.
"""

import argparse
import sys

from pydantic import ValidationError

from core.config import get_settings


def _check_config() -> int:
    """Validate the environment the same way the server does at startup."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        for err in exc.errors():
            print(f"  [!] {err['msg']}")
        return 1
    print("  [+] Configuration OK")
    print(f"      token_expire_seconds = {settings.token_expire_seconds}")
    print(f"      bcrypt_rounds        = {settings.bcrypt_rounds}")
    print(f"      uniform_login_errors = {settings.uniform_login_errors}")
    print(f"      database_url         = {settings.database_url}")
    return 0


def _serve(host: str, port: int, reload: bool) -> int:
    import uvicorn

    # Fail here, with a readable message, rather than inside the lifespan.
    if _check_config() != 0:
        return 1
    uvicorn.run("asgi:app", host=host, port=port, reload=reload)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="credential-auth",
        description="Credential authentication service.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  SECRET_KEY=$(openssl rand -hex 32) python main.py serve
  python main.py serve --port 8080 --reload
  python main.py check-config
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")

    sub.add_parser("check-config", help="Validate environment configuration and exit")

    args = parser.parse_args()

    if args.command == "serve":
        sys.exit(_serve(args.host, args.port, args.reload))
    sys.exit(_check_config())


if __name__ == "__main__":
    main()
