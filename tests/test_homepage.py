"""
tests/test_homepage.py -- Integration tests for GET/PUT /api/homepage.

Covers:
  - first GET seeds the default page, repeat GETs return the same row
  - admin login followed by PUT is visible to the next public GET
  - PUT body validation and the optional-field overwrite rules
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from content.models import HOMEPAGE_DEFAULTS

if TYPE_CHECKING:
    from conftest import ApiContext


def _page_body(**overrides) -> dict:
    body = {
        "heroTitle": "Catalysis for a cleaner planet",
        "heroDescription": "We make reactions greener.",
        "aboutParagraph1": "First paragraph.",
        "aboutParagraph2": "Second paragraph.",
    }
    body.update(overrides)
    return body


def test_get_seeds_defaults_and_is_stable(fresh_client: ApiContext) -> None:
    first = fresh_client.client.get("/api/homepage")
    second = fresh_client.client.get("/api/homepage")
    assert first.status_code == 200
    assert first.json()["success"] is True
    data = first.json()["data"]
    assert data["heroTitle"] == HOMEPAGE_DEFAULTS.hero_title
    assert data["siteTitle"] == HOMEPAGE_DEFAULTS.site_title
    assert data["useLogo"] is False
    assert data["logoImage"] is None
    assert second.json() == first.json()


def test_login_then_update_then_public_read(fresh_client: ApiContext) -> None:
    login = fresh_client.client.post(
        "/api/auth/login", json={"email": "a@b.com", "password": "secret123"}
    )
    assert login.status_code == 200
    token = login.json()["token"]

    resp = fresh_client.client.put(
        "/api/homepage",
        json=_page_body(heroTitle="New hero"),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["heroTitle"] == "New hero"

    public = fresh_client.client.get("/api/homepage").json()["data"]
    assert public["heroTitle"] == "New hero"
    assert public["aboutParagraph2"] == "Second paragraph."
    assert public["siteTitle"] == HOMEPAGE_DEFAULTS.site_title


def test_put_missing_hero_title_is_400_and_page_unchanged(fresh_client: ApiContext) -> None:
    before = fresh_client.client.get("/api/homepage").json()
    body = _page_body()
    del body["heroTitle"]
    resp = fresh_client.client.put("/api/homepage", json=body, headers=fresh_client.headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "All fields required"
    assert fresh_client.client.get("/api/homepage").json() == before


def test_put_without_token_is_401(fresh_client: ApiContext) -> None:
    resp = fresh_client.client.put("/api/homepage", json=_page_body())
    assert resp.status_code == 401


def test_omitted_optional_fields_are_kept(fresh_client: ApiContext) -> None:
    client, headers = fresh_client.client, fresh_client.headers
    seeded = _page_body(siteTitle="My Lab", useLogo=True, logoImage="/logo.png")
    client.put("/api/homepage", json=seeded, headers=headers)

    data = client.put("/api/homepage", json=_page_body(heroTitle="Again"), headers=headers).json()["data"]
    assert data["heroTitle"] == "Again"
    assert data["siteTitle"] == "My Lab"
    assert data["useLogo"] is True
    assert data["logoImage"] == "/logo.png"


def test_explicit_false_and_null_overwrite(fresh_client: ApiContext) -> None:
    client, headers = fresh_client.client, fresh_client.headers
    client.put("/api/homepage", json=_page_body(useLogo=True, logoImage="/logo.png"), headers=headers)

    data = client.put("/api/homepage", json=_page_body(useLogo=False, logoImage=None), headers=headers).json()["data"]
    assert data["useLogo"] is False
    assert data["logoImage"] is None


def test_null_site_title_rejected(fresh_client: ApiContext) -> None:
    resp = fresh_client.client.put("/api/homepage", json=_page_body(siteTitle=None), headers=fresh_client.headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid value for: siteTitle"
