from typing import List, Optional
from datetime import datetime, timezone

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..models.enums import FetchStatus
from ..models.fetch_job import FetchJob


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FetchJobRepository:
    def __init__(self, session: Session):
        self.session = session

    def create_job(self, keyword: str, news_type: str, articles_per_source: int, source_ids: List[int]) -> FetchJob:
        job = FetchJob(
            keyword=keyword,
            news_type=news_type,
            articles_per_source=articles_per_source,
            source_ids=list(source_ids),
            status=FetchStatus.PENDING.value,
            articles_fetched=0,
        )
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def get(self, job_id: int) -> Optional[FetchJob]:
        return self.session.query(FetchJob).filter(FetchJob.id == job_id).first()

    def list_jobs(self, status: Optional[str] = None, limit: int = 10, offset: int = 0) -> List[FetchJob]:
        query = self.session.query(FetchJob)
        if status:
            query = query.filter(FetchJob.status == status)
        return (
            query
            .order_by(desc(FetchJob.created_at), desc(FetchJob.id))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_jobs(self, status: Optional[str] = None) -> int:
        query = self.session.query(FetchJob)
        if status:
            query = query.filter(FetchJob.status == status)
        return query.count()

    def claim_for_run(self, job_id: int) -> bool:
        """Atomically move a pending job to running. False if it was not pending."""
        updated = (
            self.session.query(FetchJob)
            .filter(FetchJob.id == job_id, FetchJob.status == FetchStatus.PENDING.value)
            .update(
                {
                    FetchJob.status: FetchStatus.RUNNING.value,
                    FetchJob.started_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def mark_finished(self, job_id: int, success: bool, articles_fetched: int, errors: List[str]) -> bool:
        """Write the terminal state reported by the orchestrator"""
        job = self.get(job_id)
        if not job:
            return False
        job.status = FetchStatus.COMPLETED.value if success else FetchStatus.FAILED.value
        job.articles_fetched = articles_fetched
        job.error_message = "; ".join(errors) if errors else None
        job.completed_at = utcnow()
        self.session.commit()
        return True

    def mark_failed(self, job_id: int, error_message: str) -> bool:
        """Mark a job as failed with error message"""
        job = self.get(job_id)
        if job:
            job.status = FetchStatus.FAILED.value
            job.error_message = error_message
            job.completed_at = utcnow()
            self.session.commit()
            return True
        return False

    def reset_job_for_retry(self, job_id: int) -> bool:
        """Reset a non-running job back to pending. False if it is running (or missing)."""
        updated = (
            self.session.query(FetchJob)
            .filter(FetchJob.id == job_id, FetchJob.status != FetchStatus.RUNNING.value)
            .update(
                {
                    FetchJob.status: FetchStatus.PENDING.value,
                    FetchJob.articles_fetched: 0,
                    FetchJob.error_message: None,
                    FetchJob.started_at: None,
                    FetchJob.completed_at: None,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def delete_job(self, job_id: int) -> bool:
        """Delete a non-running job. False if it is running (or missing)."""
        deleted = (
            self.session.query(FetchJob)
            .filter(FetchJob.id == job_id, FetchJob.status != FetchStatus.RUNNING.value)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted == 1
