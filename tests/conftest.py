"""
tests/conftest.py -- Shared test fixtures for lab site integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for admins + content
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: module-scoped TestClient plus a valid admin token
  - fresh_client: function-scoped variant for tests that count records

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass

# Set before any app import so get_settings() resolves a throwaway secret
# instead of the built-in default.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Admin
from auth.store import AdminStore
from auth.tokens import TokenService, hash_password
from content.store import ContentStore

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"
ADMIN_EMAIL = "a@b.com"
ADMIN_PASSWORD = "secret123"


@dataclass
class ApiContext:
    client: TestClient
    token: str
    admin_id: str
    admin_store: AdminStore
    content: ContentStore
    token_service: TokenService
    admin_email: str = ADMIN_EMAIL
    admin_password: str = ADMIN_PASSWORD
    secret: str = TEST_SECRET

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[AdminStore, ContentStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    auth_url = f"sqlite:///file:test_auth_{db_suffix}?mode=memory&cache=shared&uri=true"
    content_url = f"sqlite:///file:test_content_{db_suffix}?mode=memory&cache=shared&uri=true"
    return AdminStore(auth_url), ContentStore(content_url)


def _patch_lifespan(admin_store: AdminStore, content: ContentStore, token_service: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.admin_store = admin_store
        app.state.content = content
        app.state.token_service = token_service
        yield

    return test_lifespan


@contextmanager
def _running_client(db_suffix: str) -> Iterator[ApiContext]:
    admin_store, content = _make_test_stores(db_suffix)
    token_service = TokenService(TEST_SECRET, expire_seconds=3600)

    # rounds=4 keeps the suite fast; the cost factor does not change behaviour.
    admin_id = admin_store.create_admin(
        Admin(email=ADMIN_EMAIL, name="Test Admin", hashed_password=hash_password(ADMIN_PASSWORD, rounds=4))
    )
    token = token_service.issue(admin_id, ADMIN_EMAIL)

    app.router.lifespan_context = _patch_lifespan(admin_store, content, token_service)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(
            client=client,
            token=token,
            admin_id=admin_id,
            admin_store=admin_store,
            content=content,
            token_service=token_service,
        )

    content.close()
    admin_store.close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[ApiContext, None, None]:
    """Yield an ApiContext shared by every test in a module.

    Tests using it must not assume an empty collection; use fresh_client for
    ordering and counting assertions.
    """
    with _running_client(f"module_{uuid.uuid4().hex}") as ctx:
        yield ctx


@pytest.fixture
def fresh_client() -> Generator[ApiContext, None, None]:
    """Yield an ApiContext backed by a brand-new empty database."""
    with _running_client(f"fn_{uuid.uuid4().hex}") as ctx:
        yield ctx


@pytest.fixture
def content_store() -> Generator[ContentStore, None, None]:
    """Plain in-memory ContentStore for store-level unit tests."""
    store = ContentStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def admin_store() -> Generator[AdminStore, None, None]:
    store = AdminStore("sqlite:///:memory:")
    yield store
    store.close()
