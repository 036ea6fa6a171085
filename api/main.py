"""
api/main.py -- FastAPI application entry point for the lab site CMS.

Run with:      python main.py serve
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. log_requests    -- one access-log line per request with latency
  2. CORSMiddleware  -- the public website is usually served from another origin

Lifespan builds every shared component from Settings exactly once and hangs
it on app.state (admin_store, content, token_service). Route handlers and the
authentication gate read them from there; nothing reaches for module-level
globals.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.homepage import router as homepage_router
from api.routes.news import router as news_router
from api.routes.people import router as people_router
from api.routes.publications import router as publications_router
from api.routes.research_areas import router as research_areas_router
from auth.store import AdminStore
from auth.tokens import TokenService
from content.store import ContentStore
from core.config import get_settings

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("labsite.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the stores and token service on startup; close the stores on shutdown."""
    settings = get_settings()
    logger.info("Lab site API starting up")
    if settings.using_default_secret:
        logger.warning("JWT_SECRET is not set -- signing tokens with the built-in default. Set JWT_SECRET.")

    app.state.admin_store = AdminStore(settings.database_url)
    app.state.content = ContentStore(settings.database_url)
    app.state.token_service = TokenService(settings.jwt_secret, settings.token_expire_seconds)
    if not app.state.admin_store.has_admins():
        logger.warning("No admin accounts exist. Run: python main.py create-admin")
    logger.info("Stores initialized (%s)", settings.database_url.split("://", 1)[0])

    yield

    app.state.content.close()
    app.state.admin_store.close()
    logger.info("Lab site API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Lab Site API",
    description="Content management for the research group website.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(homepage_router, prefix="/api", tags=["Home page"])
app.include_router(publications_router, prefix="/api", tags=["Publications"])
app.include_router(people_router, prefix="/api", tags=["People"])
app.include_router(news_router, prefix="/api", tags=["News"])
app.include_router(research_areas_router, prefix="/api", tags=["Research areas"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error leaves as {"error": "<message>", "code": "<code>"} so the front
# end can show error verbatim without inspecting the status code.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump(),
    )


_MISSING_ERROR_TYPES = {"missing", "string_too_short", "blank"}


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when a request body or path parameter fails validation.

    Missing or blank fields get the front end's familiar "All fields
    required". A body that is not valid JSON gets "Invalid request body".
    Anything else (bad enum value, unparseable date) names the offending
    fields.
    """
    errors = exc.errors()
    if errors and all(e.get("type") in _MISSING_ERROR_TYPES for e in errors):
        return _error(400, "All fields required", "validation_error")
    # json_invalid reports a character offset as its location, not a field.
    if any(e.get("type") == "json_invalid" for e in errors):
        return _error(400, "Invalid request body", "validation_error")
    fields = sorted({e["loc"][-1] for e in errors if e.get("loc") and isinstance(e["loc"][-1], str)})
    message = f"Invalid value for: {', '.join(fields)}" if fields else "Invalid request body"
    return _error(400, message, "validation_error")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Flatten HTTPException into the error envelope.

    Route handlers raise HTTPException(detail={"code": ..., "message": ...}).
    Starlette's own exceptions (404 for unknown paths, 405) carry a string.
    """
    if isinstance(exc.detail, dict):
        response = _error(exc.status_code, exc.detail.get("message", ""), exc.detail.get("code", "error"))
    else:
        response = _error(exc.status_code, str(exc.detail), f"http_{exc.status_code}")
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected server errors.

    The exception is logged with its traceback; the client receives only a
    generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "An unexpected error occurred.", "internal_error")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Report liveness and whether the database answers."""
    try:
        request.app.state.content.ping()
        database = "ok"
    except Exception:
        logger.exception("Health check: database unreachable")
        database = "error"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        components={"app": "ok", "database": database},
    )
