"""
Guardian Open Platform mapper
The Guardian content id (e.g. "business/2024/jan/01/...") is stable and used verbatim.
"""

import logging

from .base_mapper import BaseMapper, NormalizedArticle
from ..identity import clean_text, generate_external_id, parse_published_date, truncate
from ..schemas.provider_payloads import GuardianArticle
from ...models.enums import NewsType

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 500


class GuardianMapper(BaseMapper):
    """Mapper for Guardian content search results"""

    def __init__(self):
        super().__init__("Guardian")

    def map_article(self, raw: GuardianArticle, source_id: int, keyword: str, news_type: NewsType) -> NormalizedArticle:
        url = self.require_url(raw.web_url)
        fields = raw.fields
        body_text = clean_text(fields.body_text) if fields else None

        external_id = clean_text(raw.id)
        if not external_id:
            logger.warning(f"Guardian item without id, deriving one from url: {url}")
            external_id = generate_external_id(url)

        return NormalizedArticle(
            external_id=external_id,
            title=clean_text(raw.web_title) or (clean_text(fields.headline) if fields else None) or "",
            url=url,
            source_id=source_id,
            keyword=keyword,
            news_type=self.news_type_value(news_type),
            description=truncate(body_text, DESCRIPTION_MAX_LENGTH),
            content=body_text,
            published_at=parse_published_date(raw.web_publication_date),
            author=clean_text(fields.byline) if fields else None,
            image_url=clean_text(fields.thumbnail) if fields else None,
            category_slug=clean_text(raw.section_id),
        )
