"""
NewsAPI.org mapper
NewsAPI has no stable article id, so the external id is derived from the URL.
"""

from .base_mapper import BaseMapper, NormalizedArticle
from ..identity import clean_text, generate_external_id, parse_published_date
from ..schemas.provider_payloads import NewsAPIArticle
from ...models.enums import NewsType

# NewsAPI truncates content and appends "[+1234 chars]"
TRUNCATION_MARKER = "[+"


class NewsAPIMapper(BaseMapper):
    """Mapper for NewsAPI.org everything/top-headlines articles"""

    def __init__(self):
        super().__init__("NewsAPI")

    def map_article(self, raw: NewsAPIArticle, source_id: int, keyword: str, news_type: NewsType) -> NormalizedArticle:
        url = self.require_url(raw.url)

        return NormalizedArticle(
            external_id=generate_external_id(url),
            title=clean_text(raw.title) or "",
            url=url,
            source_id=source_id,
            keyword=keyword,
            news_type=self.news_type_value(news_type),
            description=clean_text(raw.description),
            content=self._clean_content(raw.content),
            published_at=parse_published_date(raw.published_at),
            author=clean_text(raw.author),
            image_url=clean_text(raw.url_to_image),
        )

    def _clean_content(self, content):
        content = clean_text(content)
        if content and TRUNCATION_MARKER in content and content.endswith("chars]"):
            content = content[:content.rfind(TRUNCATION_MARKER)].rstrip()
        return content or None
