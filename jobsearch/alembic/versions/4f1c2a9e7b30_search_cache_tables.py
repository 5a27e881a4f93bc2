"""search_cache_tables

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-19 10:12:41.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the query cache and last-successful-search tables."""
    op.create_table(
        'cached_job_searches',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('search_params_hash', sa.String(64), nullable=False),
        sa.Column('search_params', sa.JSON, nullable=False),
        sa.Column('results', sa.JSON, nullable=False),
        sa.Column('result_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('cached_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('search_source', sa.String(20), nullable=False, server_default='live'),
        sa.Column('request_duration_ms', sa.Integer, nullable=True),
    )
    op.create_index(
        'ix_cached_job_searches_search_params_hash',
        'cached_job_searches',
        ['search_params_hash'],
        unique=True,
    )
    op.create_index('ix_cached_job_searches_expires_at', 'cached_job_searches', ['expires_at'])

    op.create_table(
        'last_successful_search',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('search_params', sa.JSON, nullable=False),
        sa.Column('search_results', sa.JSON, nullable=False),
        sa.Column('result_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('cached_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_last_successful_search_cached_at', 'last_successful_search', ['cached_at'])


def downgrade() -> None:
    """Drop the cache tables."""
    op.drop_index('ix_last_successful_search_cached_at', table_name='last_successful_search')
    op.drop_table('last_successful_search')
    op.drop_index('ix_cached_job_searches_expires_at', table_name='cached_job_searches')
    op.drop_index('ix_cached_job_searches_search_params_hash', table_name='cached_job_searches')
    op.drop_table('cached_job_searches')
