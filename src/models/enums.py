"""Enums shared by the persistence models and the API schemas"""

from enum import Enum


class NewsType(str, Enum):
    """Kind of news a fetch job asks the providers for"""
    FINANCIAL = "financial"
    GENERAL = "general"
    KEYWORD = "keyword"


class FetchStatus(str, Enum):
    """Fetch job lifecycle: pending -> running -> completed | failed"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (FetchStatus.COMPLETED, FetchStatus.FAILED)
