"""
api/routes/publications.py -- Publication list routes.

Routes:
  GET    /api/publications        -- public; year desc, then newest first
  POST   /api/publications        -- admin; 201 with the stored record
  DELETE /api/publications/{id}   -- admin; 404 if the id is unknown
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import DeleteResponse, PublicationCreate, PublicationResponse
from auth.dependencies import require_admin
from content.models import Publication
from content.store import ContentStore

router = APIRouter()


@router.get("/publications", response_model=list[PublicationResponse])
def list_publications(request: Request) -> list[PublicationResponse]:
    content: ContentStore = request.app.state.content
    return [PublicationResponse.from_domain(p) for p in content.list_publications()]


@router.post(
    "/publications",
    response_model=PublicationResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_publication(request: Request, body: PublicationCreate) -> PublicationResponse:
    content: ContentStore = request.app.state.content
    pub_id = content.create_publication(
        Publication(authors=body.authors, title=body.title, journal=body.journal, year=body.year)
    )
    return PublicationResponse.from_domain(content.get_publication(pub_id))


@router.delete(
    "/publications/{publication_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(require_admin)],
)
def delete_publication(request: Request, publication_id: str) -> DeleteResponse:
    content: ContentStore = request.app.state.content
    if not content.delete_publication(publication_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Publication not found"},
        )
    return DeleteResponse(message="Publication deleted")
