from typing import Any, Dict, List

import structlog
from sqlalchemy.orm import Session

from ..core.exceptions import SourceNotFoundError
from ..models.enums import NewsType
from ..models.news_source import NewsSource
from ..repositories.category_repository import CategoryRepository
from ..repositories.news_source_repository import NewsSourceRepository
from .fetch_orchestrator import FetchOrchestrator

logger = structlog.get_logger(__name__)

CONNECTION_TEST_KEYWORD = "test"


class SourceService:
    def __init__(self, session: Session, orchestrator: FetchOrchestrator):
        self.session = session
        self.orchestrator = orchestrator
        self.sources = NewsSourceRepository(session)
        self.categories = CategoryRepository(session)

    def get_sources(self) -> List[Dict[str, Any]]:
        counts = self.sources.article_counts()
        return [self._with_count(source, counts.get(source.id, 0)) for source in self.sources.get_all()]

    def get_source(self, source_id: int) -> Dict[str, Any]:
        source = self._require(source_id)
        return self._with_count(source, self.sources.article_count(source_id))

    def update_source(self, source_id: int, is_active: bool) -> Dict[str, Any]:
        self._require(source_id)
        source = self.sources.set_active(source_id, is_active)
        logger.info("news_source_updated", source_id=source_id, source_name=source.name, is_active=is_active)
        return self._with_count(source, self.sources.article_count(source_id))

    def get_categories(self) -> List[Dict[str, Any]]:
        counts = self.categories.article_counts()
        return [
            {
                "id": category.id,
                "name": category.name,
                "slug": category.slug,
                "article_count": counts.get(category.id, 0),
            }
            for category in self.categories.get_all()
        ]

    async def test_connection(self, source_id: int) -> Dict[str, Any]:
        """Run a one-article fetch against a single source and report whether it worked."""
        source = self._require(source_id)
        source_name = source.name

        if not source.is_active:
            return {
                "source_id": source_id,
                "source_name": source_name,
                "connected": False,
                "articles_added": 0,
                "errors": [f"{source_name}: Source is inactive"],
            }

        result = await self.orchestrator.run([source_id], CONNECTION_TEST_KEYWORD, NewsType.GENERAL, 1)
        logger.info(
            "news_source_tested",
            source_id=source_id,
            source_name=source_name,
            connected=result.success,
            errors=result.errors,
        )
        return {
            "source_id": source_id,
            "source_name": source_name,
            "connected": result.success,
            "articles_added": result.articles_added,
            "errors": result.errors,
        }

    def _require(self, source_id: int) -> NewsSource:
        source = self.sources.get(source_id)
        if not source:
            raise SourceNotFoundError(source_id)
        return source

    @staticmethod
    def _with_count(source: NewsSource, article_count: int) -> Dict[str, Any]:
        return {
            "id": source.id,
            "name": source.name,
            "api_key_name": source.api_key_name,
            "base_url": source.base_url,
            "is_active": source.is_active,
            "created_at": source.created_at,
            "updated_at": source.updated_at,
            "article_count": article_count,
        }
