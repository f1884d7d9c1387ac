from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.article import Article
from ..models.category import Category


class CategoryRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[Category]:
        return self.session.query(Category).order_by(Category.name).all()

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self.session.query(Category).filter(Category.slug == slug).first()

    def article_counts(self) -> Dict[int, int]:
        rows = (
            self.session.query(Article.category_id, func.count(Article.id))
            .filter(Article.category_id.isnot(None))
            .group_by(Article.category_id)
            .all()
        )
        return {category_id: count for category_id, count in rows}
