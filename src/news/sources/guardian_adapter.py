"""
Guardian Open Platform adapter
Financial news is restricted to the business section.
"""

import logging
from typing import List

from .base import NewsSourceAdapter, SourceConfig, CredentialLookup
from ..mappers.guardian_mapper import GuardianMapper
from ..schemas.provider_payloads import GuardianArticle, GuardianResponse
from ...models.enums import NewsType

logger = logging.getLogger(__name__)

SHOW_FIELDS = "headline,bodyText,thumbnail,byline"


class GuardianAdapter(NewsSourceAdapter):
    """Adapter for the Guardian content search API"""

    def __init__(self, config: SourceConfig, credential_lookup: CredentialLookup):
        super().__init__(config, credential_lookup, GuardianMapper())

    def build_request(self, keyword: str, news_type: NewsType, count: int, api_key: str):
        params = {
            "api-key": api_key,
            "q": keyword,
            "page-size": count,
            "show-fields": SHOW_FIELDS,
            "order-by": "newest",
        }

        if news_type == NewsType.FINANCIAL:
            params["section"] = "business"

        return f"{self.base_url}/search", params

    async def fetch(self, keyword: str, news_type: NewsType, count: int) -> List[GuardianArticle]:
        api_key = self.get_api_key()
        url, params = self.build_request(keyword, news_type, count, api_key)

        logger.info(f"Fetching from Guardian: q={keyword!r} section={params.get('section', '-')} page-size={count}")
        payload = self.parse_payload(GuardianResponse, await self.get_json(url, params))

        if payload.response is None:
            raise self.error(f"Guardian API error: {payload.message or 'missing response'}")
        if payload.response.status != "ok":
            raise self.error(f"Guardian API error: {payload.response.message or 'unknown error'}")

        results = payload.response.results or []
        logger.info(f"Guardian returned {len(results)} articles")
        return results[:count]
