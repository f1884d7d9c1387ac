"""
Base mapper class for news sources
Defines the interface that all provider mappers must implement
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...exceptions import NormalizationError
from ...models.enums import NewsType


@dataclass
class NormalizedArticle:
    """Canonical article shape handed to the article store"""
    external_id: str
    title: str
    url: str
    source_id: int
    keyword: str
    news_type: str
    description: Optional[str] = None
    content: Optional[str] = None
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    # Slug of a seeded category, resolved by the store when it exists
    category_slug: Optional[str] = None


class BaseMapper(ABC):
    """Base class for provider mappers"""

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    def map_article(self, raw: BaseModel, source_id: int, keyword: str, news_type: NewsType) -> NormalizedArticle:
        """
        Map one typed provider item to the canonical article

        Args:
            raw: Provider payload item produced by the adapter
            source_id: Id of the news source the item was fetched from
            keyword: Search keyword of the fetch
            news_type: News type of the fetch

        Returns:
            NormalizedArticle ready for upsert

        Raises:
            NormalizationError: if the item carries no URL and cannot be identified
        """
        pass

    def require_url(self, url: Optional[str]) -> str:
        if not url or not url.strip():
            raise NormalizationError(f"{self.source_name} item has no url")
        return url.strip()

    @staticmethod
    def news_type_value(news_type) -> str:
        return news_type.value if isinstance(news_type, NewsType) else str(news_type)
