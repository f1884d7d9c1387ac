from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from ...dependencies import get_fetch_job_manager
from ..schemas import (
    CreateFetchJobRequest,
    FetchJobResponse,
    FetchJobsListResponse,
    Pagination,
    StandardAPIResponse,
)
from ....core.exceptions import NewsHubError
from ....models.enums import FetchStatus
from ....services.fetch_job_manager import FetchJobManager
from ....utils.response_utils import build_pagination

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", response_model=StandardAPIResponse[FetchJobResponse], status_code=201)
async def create_fetch_job(
    request: CreateFetchJobRequest,
    manager: FetchJobManager = Depends(get_fetch_job_manager)
):
    """Create a fetch job and start it in the background"""
    try:
        job = manager.create_job(
            keyword=request.keyword,
            news_type=request.news_type.value,
            articles_per_source=request.articles_per_source,
            source_ids=request.source_ids,
        )
        return StandardAPIResponse.success(
            FetchJobResponse.model_validate(job),
            message="Fetch job created successfully"
        )
    except NewsHubError:
        raise
    except Exception as e:
        logger.error("fetch_job_create_failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create fetch job")


@router.get("", response_model=StandardAPIResponse[FetchJobsListResponse])
async def list_fetch_jobs(
    status: Optional[FetchStatus] = Query(None, description="Filter by job status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    manager: FetchJobManager = Depends(get_fetch_job_manager)
):
    jobs, total = manager.list_jobs(status=status.value if status else None, page=page, limit=limit)
    return StandardAPIResponse.success(
        FetchJobsListResponse(
            jobs=[FetchJobResponse.model_validate(job) for job in jobs],
            pagination=Pagination(**build_pagination(page, limit, total)),
        )
    )


@router.get("/{job_id}", response_model=StandardAPIResponse[FetchJobResponse])
async def get_fetch_job(
    job_id: int,
    manager: FetchJobManager = Depends(get_fetch_job_manager)
):
    job = manager.get_job(job_id)
    return StandardAPIResponse.success(FetchJobResponse.model_validate(job))


@router.post("/{job_id}/retry", response_model=StandardAPIResponse[FetchJobResponse])
async def retry_fetch_job(
    job_id: int,
    manager: FetchJobManager = Depends(get_fetch_job_manager)
):
    job = manager.retry_job(job_id)
    return StandardAPIResponse.success(
        FetchJobResponse.model_validate(job),
        message="Fetch job restarted"
    )


@router.delete("/{job_id}", response_model=StandardAPIResponse[dict])
async def delete_fetch_job(
    job_id: int,
    manager: FetchJobManager = Depends(get_fetch_job_manager)
):
    manager.delete_job(job_id)
    return StandardAPIResponse.success({"id": job_id}, message="Fetch job deleted successfully")
