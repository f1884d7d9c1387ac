from .enums import NewsType, FetchStatus
from .news_source import NewsSource
from .category import Category
from .article import Article
from .fetch_job import FetchJob

__all__ = ["NewsType", "FetchStatus", "NewsSource", "Category", "Article", "FetchJob"]
