from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.database import Base
from .enums import NewsType


class Article(Base):
    """
    Canonical, provider-agnostic news article.
    At most one row exists per (external_id, source_id).
    """
    __tablename__ = "articles"
    __table_args__ = (
        UniqueConstraint("external_id", "source_id", name="uq_article_external_source"),
        Index("idx_articles_published_at", "published_at"),
        Index("idx_articles_keyword", "keyword"),
        Index("idx_articles_news_type", "news_type"),
        Index("idx_articles_source_category", "source_id", "category_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(255), nullable=True)

    title = Column(Text, nullable=False)
    description = Column(Text)
    content = Column(Text)
    url = Column(String(1000), nullable=False)
    published_at = Column(DateTime, nullable=True)
    author = Column(String(255))
    image_url = Column(String(1000))

    source_id = Column(Integer, ForeignKey("news_sources.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    # Fetch context
    keyword = Column(String(255))
    news_type = Column(String(20), nullable=False, default=NewsType.GENERAL.value)

    is_enhanced = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    source = relationship("NewsSource", back_populates="articles")
    category = relationship("Category", back_populates="articles")

    def __repr__(self):
        return f"<Article(id={self.id}, title='{(self.title or '')[:50]}...', source_id={self.source_id})>"
