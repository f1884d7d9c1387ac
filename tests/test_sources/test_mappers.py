from datetime import datetime

import pytest

from src.exceptions import NormalizationError
from src.models.enums import NewsType
from src.news.identity import clean_text, generate_external_id, parse_published_date, truncate
from src.news.mappers import AlphaVantageMapper, GuardianMapper, NewsAPIMapper
from src.news.schemas.provider_payloads import (
    AlphaVantageResponse,
    GuardianArticle,
    GuardianResponse,
    NewsAPIArticle,
    NewsAPIResponse,
)


class TestIdentity:

    def test_external_id_is_sha256_of_url(self):
        external_id = generate_external_id("https://example.com/a")

        assert len(external_id) == 64
        assert external_id == generate_external_id("https://example.com/a")
        assert external_id != generate_external_id("https://example.com/b")

    def test_external_id_ignores_surrounding_whitespace(self):
        assert generate_external_id("  https://example.com/a\n") == generate_external_id("https://example.com/a")

    @pytest.mark.parametrize("value,expected", [
        ("2024-01-15T09:30:00Z", datetime(2024, 1, 15, 9, 30)),
        ("2024-01-15T11:30:00+02:00", datetime(2024, 1, 15, 9, 30)),
        ("20240115T093000", datetime(2024, 1, 15, 9, 30)),
        ("2024-01-15", datetime(2024, 1, 15)),
    ])
    def test_parse_published_date(self, value, expected):
        assert parse_published_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2024-13-45"])
    def test_unparsable_dates_are_none(self, value):
        assert parse_published_date(value) is None

    def test_clean_text_and_truncate(self):
        assert clean_text("  hello ") == "hello"
        assert clean_text("   ") is None
        assert truncate("abcdef", 3) == "abc"
        assert truncate(None, 3) is None


class TestNewsAPIMapper:

    def test_map_article(self, newsapi_payload):
        raw = NewsAPIResponse.model_validate(newsapi_payload).articles[0]

        article = NewsAPIMapper().map_article(raw, source_id=1, keyword="markets", news_type=NewsType.FINANCIAL)

        assert article.external_id == generate_external_id("https://example.com/markets-rally")
        assert article.title == "Markets rally on rate cut hopes"
        assert article.url == "https://example.com/markets-rally"
        assert article.author == "Jane Doe"
        assert article.image_url == "https://example.com/markets.jpg"
        assert article.published_at == datetime(2024, 1, 15, 9, 30)
        assert article.news_type == "financial"
        assert article.keyword == "markets"
        assert article.source_id == 1

    def test_truncation_marker_is_removed(self, newsapi_payload):
        raw = NewsAPIResponse.model_validate(newsapi_payload).articles[0]

        article = NewsAPIMapper().map_article(raw, 1, "markets", NewsType.GENERAL)

        assert article.content == "Stocks climbed on Tuesday as investors..."

    def test_missing_optional_fields(self, newsapi_payload):
        raw = NewsAPIResponse.model_validate(newsapi_payload).articles[1]

        article = NewsAPIMapper().map_article(raw, 1, "bitcoin", NewsType.GENERAL)

        assert article.description is None
        assert article.content is None
        assert article.author is None
        assert article.image_url is None

    def test_item_without_url_is_rejected(self):
        with pytest.raises(NormalizationError):
            NewsAPIMapper().map_article(NewsAPIArticle(title="No link"), 1, "bitcoin", NewsType.GENERAL)


class TestGuardianMapper:

    def test_guardian_id_is_used_verbatim(self, guardian_payload):
        raw = GuardianResponse.model_validate(guardian_payload).response.results[0]

        article = GuardianMapper().map_article(raw, 2, "inflation", NewsType.FINANCIAL)

        assert article.external_id == "business/2024/jan/15/markets-rally"
        assert article.title == "Markets rally as inflation cools"
        assert article.author == "Richard Partington"
        assert article.image_url == "https://media.guim.co.uk/thumb.jpg"
        assert article.category_slug == "business"
        assert article.published_at == datetime(2024, 1, 15, 8, 0)

    def test_description_is_truncated_body(self, guardian_payload):
        raw = GuardianResponse.model_validate(guardian_payload).response.results[0]

        article = GuardianMapper().map_article(raw, 2, "inflation", NewsType.GENERAL)

        assert len(article.description) == 500
        assert article.content.startswith(article.description)
        assert len(article.content) > 500

    def test_missing_id_falls_back_to_url_hash(self):
        raw = GuardianArticle.model_validate({
            "webTitle": "Untitled",
            "webUrl": "https://www.theguardian.com/x",
        })

        article = GuardianMapper().map_article(raw, 2, "x", NewsType.GENERAL)

        assert article.external_id == generate_external_id("https://www.theguardian.com/x")
        assert article.description is None
        assert article.author is None


class TestAlphaVantageMapper:

    def test_map_article(self, alpha_vantage_payload):
        raw = AlphaVantageResponse.model_validate(alpha_vantage_payload).feed[0]

        article = AlphaVantageMapper().map_article(raw, 3, "AAPL", NewsType.FINANCIAL)

        assert article.external_id == generate_external_id("https://example.com/apple-earnings")
        assert article.author == "Alex Smith, Sam Lee"
        assert article.description == "Apple reported better than expected earnings."
        assert article.content is None
        assert article.published_at == datetime(2024, 1, 15, 9, 30)
        assert article.image_url == "https://example.com/apple.jpg"

    def test_no_authors(self, alpha_vantage_payload):
        alpha_vantage_payload["feed"][0]["authors"] = []
        raw = AlphaVantageResponse.model_validate(alpha_vantage_payload).feed[0]

        article = AlphaVantageMapper().map_article(raw, 3, "AAPL", NewsType.FINANCIAL)

        assert article.author is None
