import asyncio
import threading

import pytest
from unittest.mock import AsyncMock, patch

from src.exceptions import PersistenceError, SourceError
from src.models import Article, NewsSource
from src.models.enums import NewsType
from src.news.schemas.provider_payloads import GuardianResponse, NewsAPIArticle, NewsAPIResponse
from src.repositories.article_repository import ArticleRepository
from src.services.fetch_orchestrator import FetchOrchestrator


class StubRegistry:
    """Returns pre-built adapters by source name; unknown names have no adapter."""

    def __init__(self, adapters):
        self.adapters = adapters

    def get_adapter(self, source):
        return self.adapters.get(source.name)


@pytest.fixture
def newsapi_items(newsapi_payload):
    return NewsAPIResponse.model_validate(newsapi_payload).articles


@pytest.fixture
def guardian_items(guardian_payload):
    return GuardianResponse.model_validate(guardian_payload).response.results


@pytest.fixture
def build_orchestrator(session_factory, newsapi_adapter, guardian_adapter, alpha_vantage_adapter):
    def build(timeout=5.0):
        registry = StubRegistry({
            "NewsAPI": newsapi_adapter,
            "Guardian": guardian_adapter,
            "Alpha Vantage": alpha_vantage_adapter,
        })
        return FetchOrchestrator(session_factory, registry, source_timeout_seconds=timeout)

    return build


class TestFetchOrchestrator:

    @pytest.mark.asyncio
    async def test_all_sources_succeed(self, build_orchestrator, sources, test_db, newsapi_adapter,
                                       guardian_adapter, newsapi_items, guardian_items):
        newsapi_adapter.fetch = AsyncMock(return_value=newsapi_items)
        guardian_adapter.fetch = AsyncMock(return_value=guardian_items)

        result = await build_orchestrator().run(
            [sources["NewsAPI"].id, sources["Guardian"].id], "markets", NewsType.FINANCIAL, 5
        )

        assert result.success
        assert result.errors == []
        assert result.articles_added == 3
        assert test_db.query(Article).count() == 3
        newsapi_adapter.fetch.assert_awaited_once_with("markets", NewsType.FINANCIAL, 5)

    @pytest.mark.asyncio
    async def test_failing_source_does_not_affect_others(self, build_orchestrator, sources, test_db,
                                                         newsapi_adapter, guardian_adapter, guardian_items):
        newsapi_adapter.fetch = AsyncMock(side_effect=SourceError("NewsAPI", "HTTP 500"))
        guardian_adapter.fetch = AsyncMock(return_value=guardian_items)

        result = await build_orchestrator().run(
            [sources["NewsAPI"].id, sources["Guardian"].id], "markets", NewsType.GENERAL, 5
        )

        assert not result.success
        assert result.errors == ["NewsAPI: HTTP 500"]
        assert result.articles_added == 1
        assert test_db.query(Article).count() == 1

    @pytest.mark.asyncio
    async def test_unexpected_adapter_exception_is_reported(self, build_orchestrator, sources,
                                                            newsapi_adapter, guardian_adapter, guardian_items):
        newsapi_adapter.fetch = AsyncMock(side_effect=RuntimeError("boom"))
        guardian_adapter.fetch = AsyncMock(return_value=guardian_items)

        result = await build_orchestrator().run(
            [sources["NewsAPI"].id, sources["Guardian"].id], "markets", NewsType.GENERAL, 5
        )

        assert result.errors == ["NewsAPI: boom"]
        assert result.articles_added == 1

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self, build_orchestrator, sources, newsapi_adapter,
                                         guardian_adapter, guardian_items):
        async def never_answers(*args):
            await asyncio.sleep(10)

        newsapi_adapter.fetch = never_answers
        guardian_adapter.fetch = AsyncMock(return_value=guardian_items)

        result = await build_orchestrator(timeout=0.05).run(
            [sources["NewsAPI"].id, sources["Guardian"].id], "markets", NewsType.GENERAL, 5
        )

        assert result.errors == ["NewsAPI: Request timed out"]
        assert result.articles_added == 1

    @pytest.mark.asyncio
    async def test_source_without_adapter(self, build_orchestrator, test_db, sources):
        reuters = NewsSource(name="Reuters", api_key_name="REUTERS", base_url="https://reuters.com", is_active=True)
        test_db.add(reuters)
        test_db.commit()

        result = await build_orchestrator().run([reuters.id], "markets", NewsType.GENERAL, 5)

        assert result.errors == ["Unknown source: Reuters"]
        assert result.articles_added == 0

    @pytest.mark.asyncio
    async def test_inactive_and_missing_sources_are_skipped(self, build_orchestrator, test_db, sources,
                                                            newsapi_adapter, guardian_adapter, newsapi_items):
        sources["Guardian"].is_active = False
        test_db.commit()
        newsapi_adapter.fetch = AsyncMock(return_value=newsapi_items)
        guardian_adapter.fetch = AsyncMock()

        result = await build_orchestrator().run(
            [sources["NewsAPI"].id, sources["Guardian"].id, 999], "markets", NewsType.GENERAL, 5
        )

        assert result.success
        assert result.articles_added == 2
        guardian_adapter.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeated_run_does_not_duplicate(self, build_orchestrator, test_db, sources,
                                                   newsapi_adapter, newsapi_items):
        newsapi_adapter.fetch = AsyncMock(return_value=newsapi_items)
        orchestrator = build_orchestrator()

        first = await orchestrator.run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)
        second = await orchestrator.run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert first.articles_added == 2
        assert second.articles_added == 0
        assert second.articles_updated == 2
        assert second.success
        assert test_db.query(Article).count() == 2

    @pytest.mark.asyncio
    async def test_item_without_url_is_skipped(self, build_orchestrator, test_db, sources,
                                               newsapi_adapter, newsapi_items):
        newsapi_adapter.fetch = AsyncMock(return_value=[NewsAPIArticle(title="No link")] + list(newsapi_items))

        result = await build_orchestrator().run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert result.success
        assert result.articles_added == 2
        assert result.outcomes[0].skipped == 1

    @pytest.mark.asyncio
    async def test_no_sources_resolved(self, build_orchestrator):
        result = await build_orchestrator().run([999], "markets", NewsType.GENERAL, 5)

        assert result.success
        assert result.articles_added == 0
        assert result.outcomes == []

    @pytest.mark.asyncio
    async def test_source_with_no_results_succeeds(self, build_orchestrator, test_db, sources,
                                                   newsapi_adapter, guardian_adapter, guardian_items):
        newsapi_adapter.fetch = AsyncMock(return_value=[])
        guardian_adapter.fetch = AsyncMock(return_value=guardian_items)

        result = await build_orchestrator().run(
            [sources["NewsAPI"].id, sources["Guardian"].id], "markets", NewsType.GENERAL, 5
        )

        assert result.success is True
        assert result.errors == []
        assert result.articles_added == 1
        newsapi_outcome = next(o for o in result.outcomes if o.source_name == "NewsAPI")
        assert newsapi_outcome.fetched == 0
        assert newsapi_outcome.added == 0

    @pytest.mark.asyncio
    async def test_only_source_with_no_results(self, build_orchestrator, test_db, sources, newsapi_adapter):
        newsapi_adapter.fetch = AsyncMock(return_value=[])

        result = await build_orchestrator().run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert result.success is True
        assert result.articles_added == 0
        assert test_db.query(Article).count() == 0

    @pytest.mark.asyncio
    async def test_failed_upsert_skips_article_without_failing_source(self, build_orchestrator, test_db, sources,
                                                                      newsapi_adapter, newsapi_items):
        extra = NewsAPIArticle(title="Oil prices slip", url="https://example.com/oil-slip")
        newsapi_adapter.fetch = AsyncMock(return_value=list(newsapi_items) + [extra])
        real_upsert = ArticleRepository.upsert

        def fail_bitcoin(repo, article):
            if article.url == "https://example.com/bitcoin-high":
                raise PersistenceError("database is locked")
            return real_upsert(repo, article)

        with patch.object(ArticleRepository, "upsert", autospec=True, side_effect=fail_bitcoin):
            result = await build_orchestrator().run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert result.success is True
        assert result.errors == []
        assert result.articles_added == 2
        assert result.outcomes[0].fetched == 3
        assert result.outcomes[0].skipped == 1
        assert {a.url for a in test_db.query(Article).all()} == {
            "https://example.com/markets-rally",
            "https://example.com/oil-slip",
        }

    @pytest.mark.asyncio
    async def test_unexpected_store_error_rolls_back_and_continues(self, build_orchestrator, test_db, sources,
                                                                   newsapi_adapter, newsapi_items):
        newsapi_adapter.fetch = AsyncMock(return_value=newsapi_items)
        real_upsert = ArticleRepository.upsert

        def crash_first(repo, article):
            if article.url == "https://example.com/markets-rally":
                raise RuntimeError("connection reset")
            return real_upsert(repo, article)

        with patch.object(ArticleRepository, "upsert", autospec=True, side_effect=crash_first):
            result = await build_orchestrator().run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert result.success is True
        assert result.articles_added == 1
        assert result.outcomes[0].skipped == 1
        assert [a.url for a in test_db.query(Article).all()] == ["https://example.com/bitcoin-high"]

    @pytest.mark.asyncio
    async def test_articles_are_stored_off_the_event_loop(self, build_orchestrator, sources,
                                                          newsapi_adapter, newsapi_items):
        newsapi_adapter.fetch = AsyncMock(return_value=newsapi_items)
        real_upsert = ArticleRepository.upsert
        store_threads = set()

        def record_thread(repo, article):
            store_threads.add(threading.get_ident())
            return real_upsert(repo, article)

        with patch.object(ArticleRepository, "upsert", autospec=True, side_effect=record_thread):
            result = await build_orchestrator().run([sources["NewsAPI"].id], "markets", NewsType.GENERAL, 5)

        assert result.articles_added == 2
        assert store_threads
        assert threading.get_ident() not in store_threads
