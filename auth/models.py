"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in content/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, core/, or content/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Admin:
    """An administrator allowed to change site content.

    email is always stored lowercased; AdminStore normalizes it on the way in
    and on every lookup. hashed_password is None on records fetched for the
    authentication gate, which never needs the hash.
    """

    email: str
    name: str
    id: str | None = None
    hashed_password: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity recovered from a verified bearer token."""

    admin_id: str
    email: str
