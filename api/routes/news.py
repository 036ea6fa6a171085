"""
api/routes/news.py -- News feed routes.

Routes (/news/latest is registered before /news/{id} so the literal path wins):
  GET    /api/news          -- public; date desc
  GET    /api/news/latest   -- public; the 5 most recent by date
  POST   /api/news          -- admin; tag must be one of NewsTag
  DELETE /api/news/{id}     -- admin
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import DeleteResponse, NewsCreate, NewsResponse
from auth.dependencies import require_admin
from content.models import NewsItem
from content.store import ContentStore

router = APIRouter()


@router.get("/news", response_model=list[NewsResponse])
def list_news(request: Request) -> list[NewsResponse]:
    content: ContentStore = request.app.state.content
    return [NewsResponse.from_domain(n) for n in content.list_news()]


@router.get("/news/latest", response_model=list[NewsResponse])
def latest_news(request: Request) -> list[NewsResponse]:
    content: ContentStore = request.app.state.content
    return [NewsResponse.from_domain(n) for n in content.list_latest_news()]


@router.post("/news", response_model=NewsResponse, status_code=201, dependencies=[Depends(require_admin)])
def create_news(request: Request, body: NewsCreate) -> NewsResponse:
    content: ContentStore = request.app.state.content
    news_id = content.create_news(
        NewsItem(date=body.date, headline=body.headline, content=body.content, tag=body.tag.value)
    )
    return NewsResponse.from_domain(content.get_news(news_id))


@router.delete("/news/{news_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
def delete_news(request: Request, news_id: str) -> DeleteResponse:
    content: ContentStore = request.app.state.content
    if not content.delete_news(news_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "News not found"},
        )
    return DeleteResponse(message="News deleted")
