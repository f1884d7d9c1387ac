"""create_news_hub_tables

Revision ID: 9c1e4f2a7b3d
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9c1e4f2a7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create sources, categories, articles and fetch jobs."""
    op.create_table('news_sources',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('api_key_name', sa.String(length=100), nullable=False),
        sa.Column('base_url', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_news_sources_id', 'news_sources', ['id'])

    op.create_table('categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_categories_id', 'categories', ['id'])

    op.create_table('articles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('url', sa.String(length=1000), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('author', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('source_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('keyword', sa.String(length=255), nullable=True),
        sa.Column('news_type', sa.String(length=20), nullable=False),
        sa.Column('is_enhanced', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['source_id'], ['news_sources.id']),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id', 'source_id', name='uq_article_external_source')
    )

    # Indexes for the article list filters
    op.create_index('idx_articles_published_at', 'articles', ['published_at'])
    op.create_index('idx_articles_keyword', 'articles', ['keyword'])
    op.create_index('idx_articles_news_type', 'articles', ['news_type'])
    op.create_index('idx_articles_source_category', 'articles', ['source_id', 'category_id'])

    op.create_table('fetch_jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('keyword', sa.String(length=255), nullable=False),
        sa.Column('news_type', sa.String(length=20), nullable=False),
        sa.Column('articles_per_source', sa.Integer(), nullable=False),
        sa.Column('source_ids', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('articles_fetched', sa.Integer(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_fetch_jobs_id', 'fetch_jobs', ['id'])
    op.create_index('ix_fetch_jobs_status', 'fetch_jobs', ['status'])


def downgrade() -> None:
    """Drop all news hub tables."""
    op.drop_index('ix_fetch_jobs_status', 'fetch_jobs')
    op.drop_index('ix_fetch_jobs_id', 'fetch_jobs')
    op.drop_table('fetch_jobs')
    op.drop_index('idx_articles_source_category', 'articles')
    op.drop_index('idx_articles_news_type', 'articles')
    op.drop_index('idx_articles_keyword', 'articles')
    op.drop_index('idx_articles_published_at', 'articles')
    op.drop_table('articles')
    op.drop_index('ix_categories_id', 'categories')
    op.drop_table('categories')
    op.drop_index('ix_news_sources_id', 'news_sources')
    op.drop_table('news_sources')
