from typing import List

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from ..core.database import Base
from .enums import FetchStatus, NewsType


class FetchJob(Base):
    __tablename__ = "fetch_jobs"

    id = Column(Integer, primary_key=True, index=True)

    keyword = Column(String(255), nullable=False)
    news_type = Column(String(20), nullable=False, default=NewsType.GENERAL.value)
    articles_per_source = Column(Integer, nullable=False, default=5)
    # Plain list of source ids; jobs are never re-targeted after creation
    source_ids = Column(JSON, nullable=False, default=list)

    status = Column(String(20), nullable=False, default=FetchStatus.PENDING.value, index=True)
    articles_fetched = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)

    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def source_id_list(self) -> List[int]:
        return [int(source_id) for source_id in (self.source_ids or [])]

    @property
    def is_running(self) -> bool:
        return self.status == FetchStatus.RUNNING.value

    @property
    def errors(self) -> List[str]:
        if not self.error_message:
            return []
        return [error for error in self.error_message.split("; ") if error]
