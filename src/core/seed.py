"""
Default news sources and categories.
Seeding is idempotent: rows are matched on their unique name and never overwritten.
"""

from typing import Dict, List

import structlog
from sqlalchemy.orm import Session

from ..models.category import Category
from ..models.news_source import NewsSource

logger = structlog.get_logger(__name__)

DEFAULT_SOURCES: List[Dict[str, str]] = [
    {"name": "NewsAPI", "api_key_name": "NEWSAPIORG", "base_url": "https://newsapi.org/v2"},
    {"name": "Guardian", "api_key_name": "THEGUARDIANOPENPLATFORM", "base_url": "https://content.guardianapis.com"},
    {"name": "Alpha Vantage", "api_key_name": "ALPHAVANTAGE", "base_url": "https://www.alphavantage.co/query"},
]

DEFAULT_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Technology", "slug": "technology"},
    {"name": "Finance", "slug": "finance"},
    {"name": "Cryptocurrency", "slug": "crypto"},
    {"name": "Business", "slug": "business"},
    {"name": "Markets", "slug": "markets"},
    {"name": "Economy", "slug": "economy"},
]


def seed_defaults(session: Session) -> Dict[str, int]:
    existing_sources = {name for (name,) in session.query(NewsSource.name).all()}
    existing_categories = {name for (name,) in session.query(Category.name).all()}

    added = {"sources": 0, "categories": 0}

    for source in DEFAULT_SOURCES:
        if source["name"] not in existing_sources:
            session.add(NewsSource(**source, is_active=True))
            added["sources"] += 1

    for category in DEFAULT_CATEGORIES:
        if category["name"] not in existing_categories:
            session.add(Category(**category))
            added["categories"] += 1

    session.commit()

    if added["sources"] or added["categories"]:
        logger.info("default_data_seeded", **added)

    return added
