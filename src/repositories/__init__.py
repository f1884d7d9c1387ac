from .fetch_job_repository import FetchJobRepository
from .article_repository import ArticleRepository, UpsertResult
from .news_source_repository import NewsSourceRepository
from .category_repository import CategoryRepository

__all__ = ["FetchJobRepository", "ArticleRepository", "UpsertResult", "NewsSourceRepository", "CategoryRepository"]
