"""
api/routes/auth.py -- Admin login and session check.

Routes:
  POST /api/auth/login   -- email/password login; returns a bearer token
  GET  /api/auth/verify  -- echo the admin behind the presented token

Admins are created only by the CLI (python main.py create-admin); there is
no registration endpoint.

Security:
  authenticate_admin() provides timing equalization -- use it, never inline
  get_by_email() + verify_password().
  Wrong email and wrong password produce the same 401 message.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import AdminInfo, ErrorResponse, LoginRequest, LoginResponse, VerifyResponse
from auth.dependencies import require_admin
from auth.models import Admin
from auth.store import AdminStore
from auth.tokens import TokenService, authenticate_admin

logger = logging.getLogger("labsite.api")

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Exchange an email and password for a signed bearer token."""
    if not body.email or not body.password:
        resp = JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Email and password required", code="validation_error").model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    admin_store: AdminStore = request.app.state.admin_store
    admin = authenticate_admin(admin_store, body.email, body.password)
    if admin is None:
        logger.warning(
            "Failed login for %r from %s",
            body.email,
            request.client.host if request.client else "unknown",
        )
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(error="Invalid credentials", code="bad_credentials").model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token_service: TokenService = request.app.state.token_service
    token = token_service.issue(admin.id, admin.email)
    logger.info("Admin %s logged in", admin.email)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(token=token, admin=AdminInfo.from_admin(admin)).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/auth/verify", response_model=VerifyResponse)
def verify(admin: Admin = Depends(require_admin)) -> VerifyResponse:
    """Return the admin identity for a valid token; 401 otherwise (from the gate)."""
    return VerifyResponse(admin=AdminInfo.from_admin(admin))
