from typing import Any, Dict, List, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from ..core.exceptions import ArticleNotFoundError, ValidationError
from ..models.article import Article
from ..repositories.article_repository import SORTABLE_FIELDS, ArticleRepository
from ..utils.response_utils import page_offset
from ..utils.validation_utils import validate_news_type

logger = structlog.get_logger(__name__)


class ArticleService:
    def __init__(self, session: Session):
        self.articles = ArticleRepository(session)

    def list_articles(
        self,
        page: int = 1,
        limit: int = 10,
        source: Optional[str] = None,
        category: Optional[str] = None,
        keyword: Optional[str] = None,
        news_type: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "publishedAt",
        sort_order: str = "desc",
    ) -> Tuple[List[Article], int]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive", error_code="INVALID_PAGINATION")
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort articles by '{sort_by}'", error_code="INVALID_SORT")
        if sort_order not in ("asc", "desc"):
            raise ValidationError("sort_order must be 'asc' or 'desc'", error_code="INVALID_SORT")
        if news_type:
            news_type = validate_news_type(news_type).value

        return self.articles.list_articles(
            source=source,
            category=category,
            keyword=keyword,
            news_type=news_type,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=page_offset(page, limit),
        )

    def get_article(self, article_id: int) -> Article:
        article = self.articles.get(article_id)
        if not article:
            raise ArticleNotFoundError(article_id)
        return article

    def delete_article(self, article_id: int) -> None:
        if not self.articles.delete(article_id):
            raise ArticleNotFoundError(article_id)
        logger.info("article_deleted", article_id=article_id)

    def get_stats(self) -> Dict[str, Any]:
        return self.articles.get_stats()
