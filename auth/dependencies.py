"""
auth/dependencies.py -- FastAPI Depends() helper guarding content writes.

require_admin() is the authentication gate in front of every mutating route:
  1. Authorization: Bearer <token> header must be present.
  2. The token must verify against the TokenService on app.state.
  3. The admin it names must still exist in the AdminStore.

Each failure is a distinct 401 message so API clients can tell an expired
session from a missing header. On success the admin is attached to
request.state.admin and returned to the handler.

Layer rule: no imports from api/ or content/.
  auth/dependencies.py may import from fastapi because it is part of the
  FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from auth.models import Admin
from auth.tokens import InvalidTokenError

logger = logging.getLogger("labsite.auth")


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_admin(request: Request) -> Admin:
    """Require a valid admin bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.post("/publications")
        def route(admin: Admin = Depends(require_admin)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "authentication_required", "message": "Authentication required"},
        )

    try:
        claims = request.app.state.token_service.verify(token)
    except InvalidTokenError as exc:
        logger.info("Rejected bearer token on %s %s: %s", request.method, request.url.path, exc)
        raise HTTPException(
            status_code=401,
            detail={"code": "invalid_token", "message": "Invalid token"},
        ) from exc

    admin = request.app.state.admin_store.get_by_id(claims.admin_id)
    if admin is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "admin_not_found", "message": "Admin not found"},
        )

    request.state.admin = admin
    return admin
