from datetime import datetime
from typing import Optional, List, Dict, Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from ...config import get_settings
from ...models.enums import FetchStatus, NewsType

T = TypeVar('T')

class StandardAPIResponse(BaseModel, Generic[T]):
    status: str = Field(..., description="success or error")
    body: Optional[T] = Field(None, description="Response body")
    message: Optional[str] = Field(None, description="Human readable message")
    error_code: Optional[str] = Field(None, description="Error code for client handling")

    @classmethod
    def success(cls, data: T, message: str = "Success"):
        return cls(status="success", body=data, message=message)

    @classmethod
    def error(cls, message: str, error_code: str = None):
        return cls(status="error", message=message, error_code=error_code)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


# ---------------------------------------------------------------------------
# Fetch jobs
# ---------------------------------------------------------------------------

class CreateFetchJobRequest(BaseModel):
    keyword: str = Field(..., min_length=1, max_length=255, description="Search keyword")
    news_type: NewsType = Field(default=NewsType.GENERAL)
    articles_per_source: int = Field(
        default_factory=lambda: get_settings().default_articles_per_source,
        ge=1,
        le=20,
        description="Articles requested from each source",
    )
    source_ids: List[int] = Field(..., min_length=1, description="Sources to fetch from")

    @field_validator("keyword")
    @classmethod
    def keyword_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("keyword must not be blank")
        return value.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "keyword": "bitcoin",
                "news_type": "financial",
                "articles_per_source": 5,
                "source_ids": [1, 2, 3]
            }
        }


class FetchJobResponse(BaseModel):
    id: int
    keyword: str
    news_type: NewsType
    articles_per_source: int
    source_ids: List[int] = Field(default=[])
    status: FetchStatus
    articles_fetched: int
    error_message: Optional[str] = None
    errors: List[str] = Field(default=[])
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FetchJobsListResponse(BaseModel):
    jobs: List[FetchJobResponse]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Sources and categories
# ---------------------------------------------------------------------------

class NewsSourceResponse(BaseModel):
    id: int
    name: str
    api_key_name: str
    base_url: str
    is_active: bool
    article_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpdateSourceRequest(BaseModel):
    is_active: bool


class SourceTestResponse(BaseModel):
    source_id: int
    source_name: str
    connected: bool
    articles_added: int
    errors: List[str] = Field(default=[])


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    article_count: int = 0


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------

class ArticleSourceInfo(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ArticleCategoryInfo(BaseModel):
    id: int
    name: str
    slug: str

    class Config:
        from_attributes = True


class ArticleResponse(BaseModel):
    id: int
    external_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    keyword: Optional[str] = None
    news_type: NewsType
    is_enhanced: bool = False
    source: Optional[ArticleSourceInfo] = None
    category: Optional[ArticleCategoryInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ArticlesListResponse(BaseModel):
    articles: List[ArticleResponse]
    pagination: Pagination


class ArticleStatsResponse(BaseModel):
    total_articles: int
    articles_this_week: int
    by_source: Dict[str, int]
    by_category: Dict[str, int]
    by_news_type: Dict[str, int]
