"""
api/routes/homepage.py -- The singleton landing-page content.

Routes:
  GET /api/homepage  -- public; seeds default text on first read
  PUT /api/homepage  -- admin; overwrite the page text

Optional-field semantics for PUT: siteTitle, useLogo and logoImage are
written only when present in the body, and an explicit false / "" / null is
written as given. See HomePageUpdate.provided_optional_fields().
"""

from fastapi import APIRouter, Depends, Request

from api.models import HomePageData, HomePageResponse, HomePageUpdate
from auth.dependencies import require_admin
from content.store import ContentStore

router = APIRouter()


@router.get("/homepage", response_model=HomePageResponse)
def get_homepage(request: Request) -> HomePageResponse:
    content: ContentStore = request.app.state.content
    page = content.get_or_create_homepage()
    return HomePageResponse(data=HomePageData.from_domain(page))


@router.put("/homepage", response_model=HomePageResponse, dependencies=[Depends(require_admin)])
def update_homepage(request: Request, body: HomePageUpdate) -> HomePageResponse:
    """Replace the hero and about text; optional fields only when provided."""
    content: ContentStore = request.app.state.content
    page = content.update_homepage(
        hero_title=body.hero_title,
        hero_description=body.hero_description,
        about_paragraph1=body.about_paragraph1,
        about_paragraph2=body.about_paragraph2,
        **body.provided_optional_fields(),
    )
    return HomePageResponse(data=HomePageData.from_domain(page))
