from fastapi import APIRouter

from .endpoints import health, fetch, sources, articles

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(fetch.router, prefix="/fetch", tags=["fetch"])
api_router.include_router(sources.router, prefix="/sources", tags=["sources"])
api_router.include_router(articles.router, prefix="/articles", tags=["articles"])
