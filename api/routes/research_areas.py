"""
api/routes/research_areas.py -- Research area routes.

Routes:
  GET    /api/research-areas        -- public; creation order
  POST   /api/research-areas        -- admin
  DELETE /api/research-areas/{id}   -- admin
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import DeleteResponse, ResearchAreaCreate, ResearchAreaResponse
from auth.dependencies import require_admin
from content.models import ResearchArea
from content.store import ContentStore

router = APIRouter()


@router.get("/research-areas", response_model=list[ResearchAreaResponse])
def list_research_areas(request: Request) -> list[ResearchAreaResponse]:
    content: ContentStore = request.app.state.content
    return [ResearchAreaResponse.from_domain(a) for a in content.list_research_areas()]


@router.post(
    "/research-areas",
    response_model=ResearchAreaResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_research_area(request: Request, body: ResearchAreaCreate) -> ResearchAreaResponse:
    content: ContentStore = request.app.state.content
    area_id = content.create_research_area(
        ResearchArea(title=body.title, description=body.description, photo=body.photo or None)
    )
    return ResearchAreaResponse.from_domain(content.get_research_area(area_id))


@router.delete(
    "/research-areas/{area_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(require_admin)],
)
def delete_research_area(request: Request, area_id: str) -> DeleteResponse:
    content: ContentStore = request.app.state.content
    if not content.delete_research_area(area_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Research area not found"},
        )
    return DeleteResponse(message="Research area deleted")
