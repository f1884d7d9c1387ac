"""
NewsAPI.org adapter
Financial news goes through /everything with a finance-biased query,
everything else through /top-headlines.
"""

import logging
from typing import List

from .base import NewsSourceAdapter, SourceConfig, CredentialLookup
from ..mappers.newsapi_mapper import NewsAPIMapper
from ..schemas.provider_payloads import NewsAPIArticle, NewsAPIResponse
from ...models.enums import NewsType

logger = logging.getLogger(__name__)

FINANCIAL_QUERY_TERMS = "(finance OR financial OR economy OR market OR business)"


class NewsAPIAdapter(NewsSourceAdapter):
    """Adapter for the NewsAPI.org v2 API"""

    def __init__(self, config: SourceConfig, credential_lookup: CredentialLookup):
        super().__init__(config, credential_lookup, NewsAPIMapper())

    def build_request(self, keyword: str, news_type: NewsType, count: int, api_key: str):
        params = {
            "apiKey": api_key,
            "pageSize": count,
            "language": "en",
        }

        if news_type == NewsType.FINANCIAL:
            endpoint = "everything"
            params["q"] = f"{keyword} AND {FINANCIAL_QUERY_TERMS}"
            params["sortBy"] = "publishedAt"
        else:
            endpoint = "top-headlines"
            params["q"] = keyword
            if news_type == NewsType.GENERAL:
                params["category"] = "general"

        return f"{self.base_url}/{endpoint}", params

    async def fetch(self, keyword: str, news_type: NewsType, count: int) -> List[NewsAPIArticle]:
        api_key = self.get_api_key()
        url, params = self.build_request(keyword, news_type, count, api_key)

        logger.info(f"Fetching from NewsAPI: {url} q={params['q']!r} pageSize={count}")
        payload = self.parse_payload(NewsAPIResponse, await self.get_json(url, params))

        if payload.status != "ok":
            raise self.error(f"NewsAPI error: {payload.message or payload.code or 'unknown error'}")

        articles = payload.articles or []
        logger.info(f"NewsAPI returned {len(articles)} articles")
        return articles[:count]
