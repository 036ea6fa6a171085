#!/usr/bin/env python3
"""
Lab site CMS -- operational command line.

Usage:
  python main.py create-admin
  python main.py create-admin --name "Jane Doe" --email jane@lab.org
  python main.py diagnose
  python main.py diagnose --url http://localhost:5000
  python main.py serve --port 5000 --reload

Environment variables (see core/config.py):
  DATABASE_URL   SQLAlchemy URL of the site database (default: sqlite file in the repo)
  JWT_SECRET     Token signing secret used by the API server
  PORT           Port for `serve` and the default `diagnose --url`
"""

import argparse
import getpass
import re
import sys
from typing import Optional

import requests

from auth.models import Admin
from auth.store import AdminStore, DuplicateEmailError
from auth.tokens import hash_password
from content.store import ContentStore
from core.config import get_settings

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MIN_PASSWORD_LENGTH = 8


# ---------------------------------------------------------------------------
# create-admin
# ---------------------------------------------------------------------------


def create_admin(
    store: AdminStore,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    rounds: int = 12,
) -> Admin:
    """Validate the inputs, hash the password and store a new admin.

    Raises ValueError for invalid input and DuplicateEmailError if the email
    is already registered. Returns the stored Admin (without its hash).
    """
    name = name.strip()
    email = email.strip().lower()
    if not name or not email or not password:
        raise ValueError("All fields are required")
    if password != confirm_password:
        raise ValueError("Passwords do not match")
    if len(password) < _MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {_MIN_PASSWORD_LENGTH} characters long")
    if not _EMAIL_RE.match(email):
        raise ValueError("Invalid email format")
    if store.get_by_email(email) is not None:
        raise DuplicateEmailError("Admin with this email already exists")

    admin_id = store.create_admin(
        Admin(email=email, name=name, hashed_password=hash_password(password, rounds=rounds))
    )
    return store.get_by_id(admin_id)


def _cmd_create_admin(args: argparse.Namespace) -> int:
    settings = get_settings()
    print("\nLab site -- create admin user")
    print("─" * 40)

    name = args.name or input("Admin name: ")
    email = args.email or input("Admin email: ")
    if args.password:
        password = confirm = args.password
    else:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")

    store = AdminStore(settings.database_url)
    try:
        admin = create_admin(store, name, email, password, confirm, rounds=settings.bcrypt_rounds)
    except (ValueError, DuplicateEmailError) as exc:
        print(f"  [!] {exc}")
        return 1
    finally:
        store.close()

    print("\n  Admin user created.")
    print(f"  Email: {admin.email}")
    print(f"  Name:  {admin.name}\n")
    return 0


# ---------------------------------------------------------------------------
# diagnose
# ---------------------------------------------------------------------------


def check_database(database_url: str) -> bool:
    """Print collection and admin counts. Returns False if the database is unusable."""
    print("\n[1/2] Database")
    try:
        content = ContentStore(database_url)
        admins = AdminStore(database_url)
    except Exception as exc:  # noqa: BLE001 -- report any driver/connection failure
        print(f"  [!] Could not open {database_url}: {exc}")
        return False
    try:
        counts = content.count_records()
        admin_count = admins.count_admins()
    finally:
        content.close()
        admins.close()

    print(f"  Connected: {database_url}")
    for name, count in counts.items():
        print(f"    {name:<16} {count}")
    print(f"    {'admins':<16} {admin_count}")
    if admin_count == 0:
        print("  [!] No admin users found. Run: python main.py create-admin")
    return True


def check_server(base_url: str, timeout: float = 3.0) -> bool:
    """Probe the running API. Returns False if it is unreachable or unhealthy."""
    print(f"\n[2/2] API server at {base_url}")
    try:
        health = requests.get(f"{base_url}/api/health", timeout=timeout)
    except requests.RequestException as exc:
        print(f"  [!] Server is not reachable: {exc}")
        print("      Start it with: python main.py serve")
        return False
    print(f"  /api/health -> {health.status_code}")
    if health.status_code != 200 or health.json().get("status") != "healthy":
        print(f"  [!] Unhealthy response: {health.text[:200]}")
        return False

    try:
        pubs = requests.get(f"{base_url}/api/publications", timeout=timeout)
        pubs.raise_for_status()
        count = len(pubs.json())
    except (requests.RequestException, ValueError) as exc:
        print(f"  [!] /api/publications failed: {exc}")
        return False
    print(f"  /api/publications -> {pubs.status_code} ({count} records)")
    return True


def _cmd_diagnose(args: argparse.Namespace) -> int:
    settings = get_settings()
    base_url: str = (args.url or f"http://localhost:{settings.port}").rstrip("/")
    print("\nLab site diagnostics")
    print("─" * 40)
    db_ok = check_database(settings.database_url)
    server_ok = True if args.skip_server else check_server(base_url)
    print("\nAll checks passed.\n" if db_ok and server_ok else "\n[!] Some checks failed.\n")
    return 0 if db_ok and server_ok else 1


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labsite",
        description="Operational commands for the research group website backend.",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p_admin = sub.add_parser("create-admin", help="Create an admin account (prompts for missing values)")
    p_admin.add_argument("--name", help="Display name")
    p_admin.add_argument("--email", help="Login email (stored lowercased)")
    p_admin.add_argument(
        "--password",
        help="Password (avoid on shared machines: it lands in shell history). Prompted when omitted.",
    )
    p_admin.set_defaults(func=_cmd_create_admin)

    p_diag = sub.add_parser("diagnose", help="Check the database and the running API server")
    p_diag.add_argument("--url", metavar="URL", help="API base URL (default: http://localhost:$PORT)")
    p_diag.add_argument("--skip-server", action="store_true", help="Only check the database")
    p_diag.set_defaults(func=_cmd_diagnose)

    p_serve = sub.add_parser("serve", help="Run the API (and static site) with uvicorn")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
