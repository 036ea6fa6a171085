"""
auth/store.py -- SQLAlchemy Core persistence layer for admin accounts.

Pattern: Repository + Data Mapper (same as content/store.py).
AdminStore is the repository; _row_to_admin is the mapper.
Route, dependency and CLI code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  Email uniqueness is a UNIQUE constraint; create_admin() translates the
  IntegrityError into DuplicateEmailError so callers do not depend on
  SQLAlchemy exception types.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import Admin

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_admins = Table(
    "admins",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),  # stored lowercased
    Column("hashed_password", Text, nullable=False),
    Column("name", String(255), nullable=False),
    Column("created_at", String(32), nullable=False),
)


class DuplicateEmailError(Exception):
    """Raised by create_admin() when the email is already registered."""


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers are not blocked during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AdminStore:
    """Repository for Admin entities.

    Usage:
        store = AdminStore("sqlite:///labsite.db")
        store.create_admin(Admin(email="pi@lab.org", name="PI", hashed_password=hash_password("secret")))
        admin = store.get_by_email("PI@lab.org")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create_admin(self, admin: Admin) -> str:
        """Insert a new admin and return its assigned ID.

        The caller supplies hashed_password; this store never sees plaintext.
        Raises DuplicateEmailError if the (normalized) email already exists.
        """
        admin_id = uuid.uuid4().hex
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    _admins.insert().values(
                        id=admin_id,
                        email=normalize_email(admin.email),
                        hashed_password=admin.hashed_password,
                        name=admin.name,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateEmailError(f"An admin with email {admin.email!r} already exists.") from exc
        return admin_id

    def get_by_email(self, email: str) -> Admin | None:
        """Look up an admin by email, case-insensitively. Includes the password hash."""
        with self.engine.connect() as conn:
            row = conn.execute(_admins.select().where(_admins.c.email == normalize_email(email))).fetchone()
        return _row_to_admin(row) if row is not None else None

    def get_by_id(self, admin_id: str) -> Admin | None:
        """Look up an admin by primary key. The password hash is not loaded."""
        with self.engine.connect() as conn:
            row = conn.execute(
                select(_admins.c.id, _admins.c.email, _admins.c.name, _admins.c.created_at).where(
                    _admins.c.id == admin_id
                )
            ).fetchone()
        return _row_to_admin(row) if row is not None else None

    def count_admins(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_admins)).scalar()
        return result or 0

    def has_admins(self) -> bool:
        """Return True if at least one admin exists. Used by startup and diagnostics."""
        return self.count_admins() > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_admin(row) -> Admin:
    # get_by_id() selects without the hash column.
    return Admin(
        id=row.id,
        email=row.email,
        name=row.name,
        hashed_password=getattr(row, "hashed_password", None),
        created_at=row.created_at,
    )
