"""create_news_articles

Revision ID: 4c1d2e7a9b30
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create news_articles table."""
    op.create_table('news_articles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('url', sa.String(length=1000), nullable=False),
        sa.Column('source', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=10), nullable=True),
        sa.Column('language', sa.String(length=10), nullable=True),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('fetched_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('url')
    )

    op.create_index('idx_news_articles_published_at', 'news_articles', ['published_at'])
    op.create_index('idx_news_articles_fetched_at', 'news_articles', ['fetched_at'])
    op.create_index('idx_news_articles_filters', 'news_articles', ['country', 'language', 'category'])


def downgrade() -> None:
    """Drop news_articles table."""
    op.drop_index('idx_news_articles_filters', table_name='news_articles')
    op.drop_index('idx_news_articles_fetched_at', table_name='news_articles')
    op.drop_index('idx_news_articles_published_at', table_name='news_articles')
    op.drop_table('news_articles')
