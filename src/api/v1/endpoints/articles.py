from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...dependencies import get_article_service
from ..schemas import (
    ArticleResponse,
    ArticlesListResponse,
    ArticleStatsResponse,
    Pagination,
    StandardAPIResponse,
)
from ....models.enums import NewsType
from ....services.article_service import ArticleService
from ....utils.response_utils import build_pagination

router = APIRouter()


@router.get("", response_model=StandardAPIResponse[ArticlesListResponse])
async def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    source: Optional[str] = Query(None, description="Source name contains"),
    category: Optional[str] = Query(None, description="Category slug"),
    keyword: Optional[str] = Query(None, description="Fetch keyword contains"),
    news_type: Optional[NewsType] = Query(None),
    search: Optional[str] = Query(None, description="Search title, description and author"),
    sort_by: str = Query("publishedAt", description="createdAt, publishedAt or title"),
    sort_order: str = Query("desc", description="asc or desc"),
    service: ArticleService = Depends(get_article_service)
):
    articles, total = service.list_articles(
        page=page,
        limit=limit,
        source=source,
        category=category,
        keyword=keyword,
        news_type=news_type.value if news_type else None,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return StandardAPIResponse.success(
        ArticlesListResponse(
            articles=[ArticleResponse.model_validate(article) for article in articles],
            pagination=Pagination(**build_pagination(page, limit, total)),
        )
    )


@router.get("/stats", response_model=StandardAPIResponse[ArticleStatsResponse])
async def get_article_stats(service: ArticleService = Depends(get_article_service)):
    return StandardAPIResponse.success(ArticleStatsResponse(**service.get_stats()))


@router.get("/{article_id}", response_model=StandardAPIResponse[ArticleResponse])
async def get_article(article_id: int, service: ArticleService = Depends(get_article_service)):
    return StandardAPIResponse.success(ArticleResponse.model_validate(service.get_article(article_id)))


@router.delete("/{article_id}", response_model=StandardAPIResponse[dict])
async def delete_article(article_id: int, service: ArticleService = Depends(get_article_service)):
    service.delete_article(article_id)
    return StandardAPIResponse.success({"id": article_id}, message="Article deleted successfully")
