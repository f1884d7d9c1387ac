from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.article import Article
from ..models.news_source import NewsSource


class NewsSourceRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, source_id: int) -> Optional[NewsSource]:
        return self.session.query(NewsSource).filter(NewsSource.id == source_id).first()

    def get_all(self) -> List[NewsSource]:
        return self.session.query(NewsSource).order_by(NewsSource.id).all()

    def find_active_by_ids(self, source_ids: Iterable[int]) -> List[NewsSource]:
        ids = list(dict.fromkeys(source_ids))
        if not ids:
            return []
        return (
            self.session.query(NewsSource)
            .filter(NewsSource.id.in_(ids), NewsSource.is_active.is_(True))
            .order_by(NewsSource.id)
            .all()
        )

    def article_counts(self) -> Dict[int, int]:
        rows = (
            self.session.query(Article.source_id, func.count(Article.id))
            .group_by(Article.source_id)
            .all()
        )
        return {source_id: count for source_id, count in rows}

    def article_count(self, source_id: int) -> int:
        return self.session.query(Article).filter(Article.source_id == source_id).count()

    def set_active(self, source_id: int, is_active: bool) -> Optional[NewsSource]:
        source = self.get(source_id)
        if not source:
            return None
        source.is_active = is_active
        self.session.commit()
        self.session.refresh(source)
        return source
