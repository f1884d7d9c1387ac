"""
Alpha Vantage NEWS_SENTIMENT mapper
"""

from .base_mapper import BaseMapper, NormalizedArticle
from ..identity import clean_text, generate_external_id, parse_published_date
from ..schemas.provider_payloads import AlphaVantageArticle
from ...models.enums import NewsType


class AlphaVantageMapper(BaseMapper):
    """Mapper for Alpha Vantage news feed items"""

    def __init__(self):
        super().__init__("Alpha Vantage")

    def map_article(self, raw: AlphaVantageArticle, source_id: int, keyword: str, news_type: NewsType) -> NormalizedArticle:
        url = self.require_url(raw.url)
        authors = [author.strip() for author in (raw.authors or []) if author and author.strip()]

        return NormalizedArticle(
            external_id=generate_external_id(url),
            title=clean_text(raw.title) or "",
            url=url,
            source_id=source_id,
            keyword=keyword,
            news_type=self.news_type_value(news_type),
            description=clean_text(raw.summary),
            published_at=parse_published_date(raw.time_published),
            author=", ".join(authors) or None,
            image_url=clean_text(raw.banner_image),
        )
