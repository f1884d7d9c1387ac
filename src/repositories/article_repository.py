from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..exceptions import PersistenceError
from ..models.article import Article
from ..models.category import Category
from ..models.news_source import NewsSource
from ..news.mappers.base_mapper import NormalizedArticle

# Fields refreshed when an already stored article is fetched again
UPDATABLE_FIELDS = ("title", "description", "content", "published_at", "author", "image_url")

SORTABLE_FIELDS = {
    "createdAt": Article.created_at,
    "created_at": Article.created_at,
    "publishedAt": Article.published_at,
    "published_at": Article.published_at,
    "title": Article.title,
}


class UpsertResult(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


class ArticleRepository:
    def __init__(self, session: Session):
        self.session = session
        self._category_ids: Dict[str, Optional[int]] = {}

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def upsert(self, article: NormalizedArticle) -> UpsertResult:
        """
        Insert or refresh one article keyed on (external_id, source_id).

        Applying the same article twice leaves exactly one row. A concurrent insert
        of the same key from another job resolves to the update path.
        """
        try:
            existing = self.find_by_external_id(article.external_id, article.source_id)
            if existing:
                self._apply_update(existing, article)
                self.session.commit()
                return UpsertResult.UPDATED

            self.session.add(self._build(article))
            try:
                self.session.commit()
                return UpsertResult.CREATED
            except IntegrityError:
                self.session.rollback()

            existing = self.find_by_external_id(article.external_id, article.source_id)
            if existing is None:
                raise PersistenceError(
                    f"Article {article.external_id} violates a constraint other than the dedup key"
                )
            self._apply_update(existing, article)
            self.session.commit()
            return UpsertResult.UPDATED

        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to upsert article {article.external_id}: {str(e)}")

    def find_by_external_id(self, external_id: str, source_id: int) -> Optional[Article]:
        return (
            self.session.query(Article)
            .filter(Article.external_id == external_id, Article.source_id == source_id)
            .first()
        )

    def _build(self, article: NormalizedArticle) -> Article:
        return Article(
            external_id=article.external_id,
            title=article.title,
            description=article.description,
            content=article.content,
            url=article.url,
            published_at=article.published_at,
            author=article.author,
            image_url=article.image_url,
            source_id=article.source_id,
            category_id=self._resolve_category(article.category_slug),
            keyword=article.keyword,
            news_type=article.news_type,
            is_enhanced=False,
        )

    def _apply_update(self, existing: Article, article: NormalizedArticle) -> None:
        for field in UPDATABLE_FIELDS:
            value = getattr(article, field)
            if value is not None and value != "":
                setattr(existing, field, value)
        existing.updated_at = datetime.now(timezone.utc).replace(tzinfo=None)

    def _resolve_category(self, slug: Optional[str]) -> Optional[int]:
        if not slug:
            return None
        slug = slug.lower()
        if slug not in self._category_ids:
            category = self.session.query(Category).filter(Category.slug == slug).first()
            self._category_ids[slug] = category.id if category else None
        return self._category_ids[slug]

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def get(self, article_id: int) -> Optional[Article]:
        return (
            self.session.query(Article)
            .options(joinedload(Article.source), joinedload(Article.category))
            .filter(Article.id == article_id)
            .first()
        )

    def list_articles(
        self,
        source: Optional[str] = None,
        category: Optional[str] = None,
        keyword: Optional[str] = None,
        news_type: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "publishedAt",
        sort_order: str = "desc",
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Article], int]:
        query = self.session.query(Article)

        if source:
            query = query.join(Article.source).filter(NewsSource.name.contains(source))
        if category:
            query = query.join(Article.category).filter(Category.slug == category)
        if keyword:
            query = query.filter(Article.keyword.contains(keyword))
        if news_type:
            query = query.filter(Article.news_type == news_type)
        if search:
            query = query.filter(
                or_(
                    Article.title.contains(search),
                    Article.description.contains(search),
                    Article.author.contains(search),
                )
            )

        total = query.count()

        sort_column = SORTABLE_FIELDS.get(sort_by, Article.published_at)
        direction = asc if sort_order == "asc" else desc
        items = (
            query
            .options(joinedload(Article.source), joinedload(Article.category))
            .order_by(direction(sort_column), desc(Article.id))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def count(self, source_id: Optional[int] = None) -> int:
        query = self.session.query(Article)
        if source_id is not None:
            query = query.filter(Article.source_id == source_id)
        return query.count()

    def delete(self, article_id: int) -> bool:
        article = self.session.query(Article).filter(Article.id == article_id).first()
        if article:
            self.session.delete(article)
            self.session.commit()
            return True
        return False

    def get_stats(self, recent_days: int = 7) -> Dict[str, Any]:
        since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=recent_days)

        by_source = (
            self.session.query(NewsSource.name, func.count(Article.id))
            .outerjoin(Article, Article.source_id == NewsSource.id)
            .group_by(NewsSource.id, NewsSource.name)
            .all()
        )
        by_category = (
            self.session.query(Category.name, func.count(Article.id))
            .outerjoin(Article, Article.category_id == Category.id)
            .group_by(Category.id, Category.name)
            .all()
        )
        by_news_type = (
            self.session.query(Article.news_type, func.count(Article.id))
            .group_by(Article.news_type)
            .all()
        )

        return {
            "total_articles": self.count(),
            "articles_this_week": self.session.query(Article).filter(Article.created_at >= since).count(),
            "by_source": {name: count for name, count in by_source},
            "by_category": {name: count for name, count in by_category},
            "by_news_type": {news_type: count for news_type, count in by_news_type},
        }
