import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, Optional

import structlog
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.database import SessionLocal
from ..models.enums import FetchStatus
from ..news.sources.registry import SourceAdapterRegistry
from ..repositories.fetch_job_repository import FetchJobRepository
from .fetch_orchestrator import FetchOrchestrator, FetchResult

logger = structlog.get_logger(__name__)
settings = get_settings()


def build_orchestrator(session_factory: Callable[[], Session] = SessionLocal) -> FetchOrchestrator:
    registry = SourceAdapterRegistry(
        credential_lookup=settings.get_credential,
        timeout_seconds=settings.source_request_timeout_seconds,
    )
    return FetchOrchestrator(
        session_factory=session_factory,
        registry=registry,
        source_timeout_seconds=settings.source_fetch_timeout_seconds,
    )


class FetchJobProcessor:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        orchestrator: Optional[FetchOrchestrator] = None,
        max_workers: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.orchestrator = orchestrator or build_orchestrator(session_factory)
        self.executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_concurrent_jobs,
            thread_name_prefix="fetch-job",
        )
        self.running_jobs = set()
        self.requeued_jobs = set()
        self._lock = threading.Lock()

    def submit(self, job_id: int) -> Optional[Future]:
        """Hand a job to the worker pool without waiting for it."""
        with self._lock:
            if job_id in self.running_jobs:
                # Picked up again once the in-flight run for this id has finished
                self.requeued_jobs.add(job_id)
                logger.warning("fetch_job_already_dispatched", job_id=job_id)
                return None
            self.running_jobs.add(job_id)

        future = self.executor.submit(self.process_job_sync, job_id)
        future.add_done_callback(partial(self._on_job_done, job_id))
        logger.info("fetch_job_dispatched", job_id=job_id)
        return future

    def process_job_sync(self, job_id: int) -> Optional[FetchResult]:
        """Synchronous wrapper so a job can run on the thread pool."""
        # Worker threads have no event loop of their own
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(self.process_job(job_id))
        finally:
            loop.close()

    async def process_job(self, job_id: int) -> Optional[FetchResult]:
        with self.session_factory() as session:
            jobs = FetchJobRepository(session)
            if not jobs.claim_for_run(job_id):
                logger.warning("fetch_job_not_claimed", job_id=job_id)
                return None
            job = jobs.get(job_id)
            source_ids = job.source_id_list
            keyword = job.keyword
            news_type = job.news_type
            articles_per_source = job.articles_per_source

        logger.info("fetch_job_started", job_id=job_id, keyword=keyword, source_ids=source_ids)

        try:
            result = await self.orchestrator.run(source_ids, keyword, news_type, articles_per_source)
        except Exception as e:
            logger.error("fetch_job_crashed", job_id=job_id, error=str(e), exc_info=True)
            self._mark_failed(job_id, f"Fetch job failed: {e}")
            return None

        with self.session_factory() as session:
            FetchJobRepository(session).mark_finished(
                job_id,
                success=result.success,
                articles_fetched=result.articles_added,
                errors=result.errors,
            )

        logger.info(
            "fetch_job_finished",
            job_id=job_id,
            status=FetchStatus.COMPLETED.value if result.success else FetchStatus.FAILED.value,
            articles_fetched=result.articles_added,
            articles_updated=result.articles_updated,
            errors=result.errors,
        )
        return result

    def _mark_failed(self, job_id: int, error_message: str) -> None:
        with self.session_factory() as session:
            FetchJobRepository(session).mark_failed(job_id, error_message)

    def _on_job_done(self, job_id: int, future: Future) -> None:
        with self._lock:
            self.running_jobs.discard(job_id)
            requeued = job_id in self.requeued_jobs
            self.requeued_jobs.discard(job_id)

        error = None if future.cancelled() else future.exception()
        if error is not None:
            self._fail_unfinished(job_id, error)

        if requeued:
            self.submit(job_id)

    def _fail_unfinished(self, job_id: int, error: BaseException) -> None:
        logger.error("fetch_job_worker_died", job_id=job_id, error=str(error))
        try:
            with self.session_factory() as session:
                jobs = FetchJobRepository(session)
                job = jobs.get(job_id)
                if job and not FetchStatus(job.status).is_terminal:
                    jobs.mark_failed(job_id, f"Fetch job failed: {error}")
        except Exception as e:
            logger.error("fetch_job_supervision_failed", job_id=job_id, error=str(e), exc_info=True)

    def is_job_running(self, job_id: int) -> bool:
        return job_id in self.running_jobs

    def get_running_jobs_count(self) -> int:
        return len(self.running_jobs)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


_processor: Optional[FetchJobProcessor] = None
_processor_lock = threading.Lock()


def get_fetch_job_processor() -> FetchJobProcessor:
    global _processor
    if _processor is None:
        with _processor_lock:
            if _processor is None:
                _processor = FetchJobProcessor()
    return _processor


def shutdown_fetch_job_processor(wait: bool = False) -> None:
    global _processor
    with _processor_lock:
        processor, _processor = _processor, None
    if processor is not None:
        processor.shutdown(wait=wait)
