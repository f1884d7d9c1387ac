"""
Fetch job lifecycle: creation, lookup, listing, retry and deletion.

Jobs are persisted as ``pending`` and handed to the processor without waiting;
the running state is owned by the processor. Retry and delete are refused while
a job is running, which is enforced with conditional writes rather than a
read-then-write check.
"""

from typing import List, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.exceptions import ConflictError, JobNotFoundError, ValidationError
from ..models.fetch_job import FetchJob
from ..repositories.fetch_job_repository import FetchJobRepository
from ..repositories.news_source_repository import NewsSourceRepository
from ..utils.response_utils import page_offset
from ..utils.validation_utils import (
    validate_articles_per_source,
    validate_keyword,
    validate_news_type,
    validate_source_ids,
    validate_status_filter,
)
from .fetch_job_processor import FetchJobProcessor

logger = structlog.get_logger(__name__)
settings = get_settings()


class FetchJobManager:
    def __init__(self, session: Session, processor: FetchJobProcessor):
        self.session = session
        self.processor = processor
        self.jobs = FetchJobRepository(session)
        self.sources = NewsSourceRepository(session)

    def create_job(self, keyword: str, news_type: str, articles_per_source: int, source_ids: List[int]) -> FetchJob:
        keyword = validate_keyword(keyword)
        news_type = validate_news_type(news_type)
        articles_per_source = validate_articles_per_source(articles_per_source, settings.max_articles_per_source)
        source_ids = validate_source_ids(source_ids)

        active_sources = self.sources.find_active_by_ids(source_ids)
        if not active_sources:
            raise ValidationError(
                "No active sources found for the provided IDs",
                error_code="NO_ACTIVE_SOURCES",
                details={"source_ids": source_ids},
            )

        job = self.jobs.create_job(
            keyword=keyword,
            news_type=news_type.value,
            articles_per_source=articles_per_source,
            source_ids=[source.id for source in active_sources],
        )
        logger.info(
            "fetch_job_created",
            job_id=job.id,
            keyword=keyword,
            news_type=news_type.value,
            source_ids=job.source_id_list,
        )

        self.processor.submit(job.id)
        return job

    def get_job(self, job_id: int) -> FetchJob:
        job = self.jobs.get(job_id)
        if not job:
            raise JobNotFoundError(job_id)
        self.session.refresh(job)
        return job

    def list_jobs(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> Tuple[List[FetchJob], int]:
        status_value = validate_status_filter(status).value if status else None
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive", error_code="INVALID_PAGINATION")

        jobs = self.jobs.list_jobs(status=status_value, limit=limit, offset=page_offset(page, limit))
        total = self.jobs.count_jobs(status=status_value)
        return jobs, total

    def retry_job(self, job_id: int) -> FetchJob:
        if not self.jobs.get(job_id):
            raise JobNotFoundError(job_id)

        if not self.jobs.reset_job_for_retry(job_id):
            raise ConflictError(
                "Cannot retry a running job",
                error_code="JOB_RUNNING",
                details={"job_id": job_id},
            )

        logger.info("fetch_job_retried", job_id=job_id)
        self.processor.submit(job_id)
        return self.get_job(job_id)

    def delete_job(self, job_id: int) -> None:
        if not self.jobs.get(job_id):
            raise JobNotFoundError(job_id)

        if not self.jobs.delete_job(job_id):
            raise ConflictError(
                "Cannot delete a running job",
                error_code="JOB_RUNNING",
                details={"job_id": job_id},
            )

        logger.info("fetch_job_deleted", job_id=job_id)
