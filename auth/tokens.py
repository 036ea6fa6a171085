"""
auth/tokens.py -- Bearer tokens, password hashing and login verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the admin id (sub), email, iat
       and exp. TokenService.verify() raises InvalidTokenError on any failure
       -- the authentication gate turns that into a 401. There is no
       revocation list: a token stays valid until exp even if the account
       changes.

  Passwords: bcrypt used directly. Cost factor 12 by default. The
       _DUMMY_HASH constant enables timing equalization in
       authenticate_admin() so response time does not reveal whether an
       email is registered.

  Secret: TokenService receives the secret from Settings at construction
       (api/main.py lifespan). Nothing here reads configuration at import
       time.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import Admin, TokenClaims

if TYPE_CHECKING:
    from auth.store import AdminStore


_ALGORITHM = "HS256"
_DEFAULT_ROUNDS = 12


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, tampered with, or expired."""


# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = _DEFAULT_ROUNDS) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt.gensalt() draws a fresh random salt per call, so two admins with
    the same password get different hashes.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. A malformed stored hash is
    treated as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# Timing equalization dummy hash, computed once at module load so the first
# login attempt is not measurably slower than later ones.
_DUMMY_HASH: str = hash_password("labsite_timing_dummy")


def authenticate_admin(store: AdminStore, email: str, password: str) -> Admin | None:
    """Check an email/password pair. Returns the Admin on success, None otherwise.

    Always runs bcrypt whether or not the email exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash
    """
    admin = store.get_by_email(email)
    if admin is None or admin.hashed_password is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, admin.hashed_password):
        return None
    return admin


# ---------------------------------------------------------------------------
# JWT issue / verify
# ---------------------------------------------------------------------------


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    Usage:
        tokens = TokenService(settings.jwt_secret, settings.token_expire_seconds)
        token = tokens.issue(admin.id, admin.email)
        claims = tokens.verify(token)   # raises InvalidTokenError
    """

    def __init__(self, secret: str, expire_seconds: int = 24 * 60 * 60) -> None:
        self._secret = secret
        self.expire_seconds = expire_seconds

    def issue(self, admin_id: str, email: str) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": admin_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a token, returning the identity it carries.

        python-jose checks the signature and the exp claim; anything it
        rejects, and any payload missing sub or email, becomes
        InvalidTokenError.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
        admin_id = payload.get("sub")
        email = payload.get("email")
        if not admin_id or not email:
            raise InvalidTokenError("Token is missing identity claims.")
        return TokenClaims(admin_id=admin_id, email=email)
