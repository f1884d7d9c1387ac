"""
Fetch orchestration: runs the selected provider adapters concurrently, normalizes
and stores their items, and aggregates per-source failures.
"""

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from ..exceptions import NormalizationError, PersistenceError, SourceError
from ..models.enums import NewsType
from ..news.sources.base import NewsSourceAdapter
from ..news.sources.registry import SourceAdapterRegistry
from ..repositories.article_repository import ArticleRepository, UpsertResult
from ..repositories.news_source_repository import NewsSourceRepository

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], Session]


@dataclass
class SourceOutcome:
    source_id: int
    source_name: str
    fetched: int = 0
    added: int = 0
    updated: int = 0
    skipped: int = 0
    error: Optional[str] = None


@dataclass
class FetchResult:
    articles_added: int = 0
    articles_updated: int = 0
    errors: List[str] = field(default_factory=list)
    outcomes: List[SourceOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class FetchOrchestrator:
    def __init__(
        self,
        session_factory: SessionFactory,
        registry: SourceAdapterRegistry,
        source_timeout_seconds: float = 30.0,
    ):
        self.session_factory = session_factory
        self.registry = registry
        self.source_timeout_seconds = source_timeout_seconds
        self._store_lock = threading.Lock()

    async def run(
        self,
        source_ids: Iterable[int],
        keyword: str,
        news_type: NewsType,
        count_per_source: int,
    ) -> FetchResult:
        news_type = NewsType(news_type)
        result = FetchResult()

        with self.session_factory() as session:
            sources = NewsSourceRepository(session).find_active_by_ids(source_ids)
            targets = [(source.id, source.name, self.registry.get_adapter(source)) for source in sources]

        tasks = []
        for source_id, source_name, adapter in targets:
            if adapter is None:
                logger.warning("unknown_source_requested", source_id=source_id, source_name=source_name)
                result.errors.append(f"Unknown source: {source_name}")
                continue
            tasks.append(self._run_source(source_id, source_name, adapter, keyword, news_type, count_per_source))

        logger.info(
            "fetch_orchestration_started",
            keyword=keyword,
            news_type=news_type.value,
            sources=[name for _, name, adapter in targets if adapter is not None],
            count_per_source=count_per_source,
        )

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        runnable = [(source_id, name) for source_id, name, adapter in targets if adapter is not None]
        for (source_id, source_name), outcome in zip(runnable, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("source_task_crashed", source_name=source_name, error=str(outcome))
                outcome = SourceOutcome(
                    source_id=source_id,
                    source_name=source_name,
                    error=f"{source_name}: {str(outcome) or outcome.__class__.__name__}",
                )

            result.outcomes.append(outcome)
            result.articles_added += outcome.added
            result.articles_updated += outcome.updated
            if outcome.error:
                result.errors.append(outcome.error)

        logger.info(
            "fetch_orchestration_finished",
            keyword=keyword,
            articles_added=result.articles_added,
            articles_updated=result.articles_updated,
            errors=result.errors,
            success=result.success,
        )
        return result

    async def _run_source(
        self,
        source_id: int,
        source_name: str,
        adapter: NewsSourceAdapter,
        keyword: str,
        news_type: NewsType,
        count: int,
    ) -> SourceOutcome:
        outcome = SourceOutcome(source_id=source_id, source_name=source_name)

        try:
            raw_items = await asyncio.wait_for(
                adapter.fetch(keyword, news_type, count),
                timeout=self.source_timeout_seconds,
            )
        except asyncio.TimeoutError:
            outcome.error = f"{source_name}: Request timed out"
        except SourceError as e:
            outcome.error = f"{source_name}: {e.message}"
        except Exception as e:
            logger.error("source_fetch_crashed", source_name=source_name, error=str(e), exc_info=True)
            outcome.error = f"{source_name}: {str(e) or e.__class__.__name__}"

        if outcome.error:
            logger.warning("source_fetch_failed", source_name=source_name, error=outcome.error)
            return outcome

        outcome.fetched = len(raw_items)
        # Database writes run off the event loop, one source at a time
        await asyncio.to_thread(self._store_items, outcome, adapter, raw_items, keyword, news_type)

        logger.info(
            "source_fetch_completed",
            source_name=source_name,
            fetched=outcome.fetched,
            added=outcome.added,
            updated=outcome.updated,
            skipped=outcome.skipped,
        )
        return outcome

    def _store_items(self, outcome: SourceOutcome, adapter: NewsSourceAdapter, raw_items, keyword: str, news_type: NewsType) -> None:
        with self._store_lock, self.session_factory() as session:
            articles = ArticleRepository(session)

            for raw in raw_items:
                try:
                    normalized = adapter.normalize(raw, outcome.source_id, keyword, news_type)
                    upserted = articles.upsert(normalized)
                except (NormalizationError, PersistenceError) as e:
                    outcome.skipped += 1
                    logger.warning("article_skipped", source_name=outcome.source_name, error=str(e))
                    continue
                except Exception as e:
                    outcome.skipped += 1
                    session.rollback()
                    logger.error("article_store_failed", source_name=outcome.source_name, error=str(e), exc_info=True)
                    continue

                if upserted == UpsertResult.CREATED:
                    outcome.added += 1
                else:
                    outcome.updated += 1
