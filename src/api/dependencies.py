from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..services.article_service import ArticleService
from ..services.fetch_job_manager import FetchJobManager
from ..services.fetch_job_processor import FetchJobProcessor, get_fetch_job_processor
from ..services.fetch_orchestrator import FetchOrchestrator
from ..services.source_service import SourceService


def get_processor() -> FetchJobProcessor:
    return get_fetch_job_processor()


def get_orchestrator(processor: FetchJobProcessor = Depends(get_processor)) -> FetchOrchestrator:
    return processor.orchestrator


def get_fetch_job_manager(
    db: Session = Depends(get_db),
    processor: FetchJobProcessor = Depends(get_processor)
) -> FetchJobManager:
    return FetchJobManager(db, processor)


def get_source_service(
    db: Session = Depends(get_db),
    orchestrator: FetchOrchestrator = Depends(get_orchestrator)
) -> SourceService:
    return SourceService(db, orchestrator)


def get_article_service(db: Session = Depends(get_db)) -> ArticleService:
    return ArticleService(db)
