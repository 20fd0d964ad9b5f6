"""add_is_active_to_countable_resources

Revision ID: 5c2d8e4f9a21
Revises: 3a1f0c2b7d10
Create Date: 2026-02-18 16:40:27.553201

Adds the is_active soft-delete flag to establishments, emission points,
contacts and warehouses. Existing rows become active through the column
default; nothing is recomputed per row at query time.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.db.plan_evolution import missing_column_tables


# revision identifiers, used by Alembic.
revision: str = '5c2d8e4f9a21'
down_revision: Union[str, None] = '3a1f0c2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COUNTABLE_TABLES = ('establishments', 'emission_points', 'contacts', 'warehouses')


def upgrade() -> None:
    """Add is_active (default true) where it does not exist yet."""
    from sqlalchemy import inspect

    # Check which tables already have the column (idempotent migration)
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = set(inspector.get_table_names())
    columns_by_table = {
        table: [col['name'] for col in inspector.get_columns(table)]
        for table in COUNTABLE_TABLES
        if table in existing_tables
    }

    for table in missing_column_tables(columns_by_table, 'is_active'):
        op.add_column(table, sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()))
        op.create_index(f'idx_{table}_company_active', table, ['company_id', 'is_active'], unique=False)


def downgrade() -> None:
    """Remove is_active from the countable resource tables."""
    for table in reversed(COUNTABLE_TABLES):
        op.drop_index(f'idx_{table}_company_active', table_name=table)
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_column('is_active')
