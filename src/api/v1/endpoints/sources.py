from typing import List

import structlog
from fastapi import APIRouter, Depends

from ...dependencies import get_source_service
from ..schemas import (
    CategoryResponse,
    NewsSourceResponse,
    SourceTestResponse,
    StandardAPIResponse,
    UpdateSourceRequest,
)
from ....services.source_service import SourceService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=StandardAPIResponse[List[NewsSourceResponse]])
async def list_sources(service: SourceService = Depends(get_source_service)):
    """All configured news sources with their article counts"""
    sources = service.get_sources()
    return StandardAPIResponse.success([NewsSourceResponse(**source) for source in sources])


@router.get("/categories", response_model=StandardAPIResponse[List[CategoryResponse]])
async def list_categories(service: SourceService = Depends(get_source_service)):
    categories = service.get_categories()
    return StandardAPIResponse.success([CategoryResponse(**category) for category in categories])


@router.get("/{source_id}", response_model=StandardAPIResponse[NewsSourceResponse])
async def get_source(source_id: int, service: SourceService = Depends(get_source_service)):
    return StandardAPIResponse.success(NewsSourceResponse(**service.get_source(source_id)))


@router.patch("/{source_id}", response_model=StandardAPIResponse[NewsSourceResponse])
async def update_source(
    source_id: int,
    request: UpdateSourceRequest,
    service: SourceService = Depends(get_source_service)
):
    source = service.update_source(source_id, request.is_active)
    state = "activated" if request.is_active else "deactivated"
    return StandardAPIResponse.success(NewsSourceResponse(**source), message=f"Source {state}")


@router.post("/{source_id}/test", response_model=StandardAPIResponse[SourceTestResponse])
async def test_source(source_id: int, service: SourceService = Depends(get_source_service)):
    """Fetch a single article from the source to check credentials and connectivity"""
    outcome = await service.test_connection(source_id)
    message = "Connection successful" if outcome["connected"] else "Connection failed"
    return StandardAPIResponse.success(SourceTestResponse(**outcome), message=message)
