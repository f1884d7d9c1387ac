"""
Alpha Vantage NEWS_SENTIMENT adapter
The API only accepts categorical input, so a free-text keyword is sent either as
a ticker (financial news for something that looks like a symbol) or as a topic.
"""

import logging
import re
from typing import List

from .base import NewsSourceAdapter, SourceConfig, CredentialLookup
from ..mappers.alpha_vantage_mapper import AlphaVantageMapper
from ..schemas.provider_payloads import AlphaVantageArticle, AlphaVantageResponse
from ...models.enums import NewsType

logger = logging.getLogger(__name__)

TICKER_PATTERN = re.compile(r"^[A-Z]{1,5}$")
FINANCIAL_TOPIC = "financial_markets"


def is_stock_symbol(text: str) -> bool:
    return bool(TICKER_PATTERN.match(text.strip().upper()))


class AlphaVantageAdapter(NewsSourceAdapter):
    """Adapter for the Alpha Vantage news & sentiment endpoint"""

    def __init__(self, config: SourceConfig, credential_lookup: CredentialLookup):
        super().__init__(config, credential_lookup, AlphaVantageMapper())

    def build_request(self, keyword: str, news_type: NewsType, count: int, api_key: str):
        params = {
            "function": "NEWS_SENTIMENT",
            "apikey": api_key,
            "limit": str(count),
        }

        if news_type == NewsType.FINANCIAL and is_stock_symbol(keyword):
            params["tickers"] = keyword.strip().upper()
            params["topics"] = FINANCIAL_TOPIC
        else:
            params["topics"] = keyword

        return self.base_url, params

    async def fetch(self, keyword: str, news_type: NewsType, count: int) -> List[AlphaVantageArticle]:
        api_key = self.get_api_key()
        url, params = self.build_request(keyword, news_type, count, api_key)

        logger.info(f"Fetching from Alpha Vantage: tickers={params.get('tickers', '-')} topics={params['topics']!r}")
        payload = self.parse_payload(AlphaVantageResponse, await self.get_json(url, params))

        if payload.provider_error:
            raise self.error(f"Alpha Vantage API error: {payload.provider_error}")

        feed = payload.feed or []
        logger.info(f"Alpha Vantage returned {len(feed)} articles")
        return feed[:count]
