"""api_key_health

Revision ID: 9b2e61d4c8a5
Revises: 4f1c2a9e7b30
Create Date: 2026-10-19 15:40:07.502931

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b2e61d4c8a5'
down_revision: Union[str, Sequence[str], None] = '4f1c2a9e7b30'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Track provider key health and label cached rows with the key used."""
    op.add_column('cached_job_searches', sa.Column('api_key_used', sa.String(50), nullable=True))

    op.create_table(
        'api_key_health',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('key_name', sa.String(50), nullable=False),
        sa.Column('last_success', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_failure', sa.DateTime(timezone=True), nullable=True),
        sa.Column('consecutive_failures', sa.Integer, nullable=False, server_default='0'),
        sa.Column('rate_limited_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('requests_date', sa.Date, nullable=True),
        sa.Column('total_requests_today', sa.Integer, nullable=False, server_default='0'),
        sa.Column('successful_requests_today', sa.Integer, nullable=False, server_default='0'),
        sa.Column('success_rate', sa.Float, nullable=False, server_default='100'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_api_key_health_key_name', 'api_key_health', ['key_name'], unique=True)


def downgrade() -> None:
    """Drop key health tracking."""
    op.drop_index('ix_api_key_health_key_name', table_name='api_key_health')
    op.drop_table('api_key_health')
    op.drop_column('cached_job_searches', 'api_key_used')
