"""
api/routes/people.py -- Group member routes.

Routes:
  GET    /api/people        -- public; creation order
  POST   /api/people        -- admin; category must be pi|postdoc|phd|technician
  DELETE /api/people/{id}   -- admin
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import DeleteResponse, PersonCreate, PersonResponse
from auth.dependencies import require_admin
from content.models import Person
from content.store import ContentStore

router = APIRouter()


@router.get("/people", response_model=list[PersonResponse])
def list_people(request: Request) -> list[PersonResponse]:
    content: ContentStore = request.app.state.content
    return [PersonResponse.from_domain(p) for p in content.list_people()]


@router.post("/people", response_model=PersonResponse, status_code=201, dependencies=[Depends(require_admin)])
def create_person(request: Request, body: PersonCreate) -> PersonResponse:
    content: ContentStore = request.app.state.content
    person_id = content.create_person(
        Person(
            name=body.name,
            role=body.role,
            email=body.email,
            category=body.category.value,
            photo=body.photo or None,
        )
    )
    return PersonResponse.from_domain(content.get_person(person_id))


@router.delete("/people/{person_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_person(request: Request, person_id: str) -> DeleteResponse:
    content: ContentStore = request.app.state.content
    if not content.delete_person(person_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Person not found"},
        )
    return DeleteResponse(message="Person deleted")
