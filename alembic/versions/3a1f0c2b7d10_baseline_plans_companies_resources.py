"""baseline_plans_companies_resources

Revision ID: 3a1f0c2b7d10
Revises:
Create Date: 2026-02-14 09:12:03.114520

Creates the plan catalog, companies and countable resource tables, and seeds
the three default plans. Resource tables predate their is_active flag, which
is added by the next revision.
"""
from typing import Sequence, Union
from decimal import Decimal

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from app.core.plan_limits import DEFAULT_PLAN_CATALOG


# revision identifiers, used by Alembic.
revision: str = '3a1f0c2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create tables and seed default subscription plans."""
    plans = op.create_table(
        'subscription_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('implementation_fee', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('limits', JSONDocument, nullable=False),
        sa.Column('modules', JSONDocument, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(op.f('ix_subscription_plans_id'), 'subscription_plans', ['id'], unique=False)
    op.create_index(op.f('ix_subscription_plans_name'), 'subscription_plans', ['name'], unique=True)

    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('ruc_nit', sa.String(), nullable=False),
        sa.Column('plan_id', sa.Integer(), sa.ForeignKey('subscription_plans.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('quota_revision', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
    op.create_index(op.f('ix_companies_ruc_nit'), 'companies', ['ruc_nit'], unique=True)
    op.create_index(op.f('ix_companies_plan_id'), 'companies', ['plan_id'], unique=False)

    op.create_table(
        'establishments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('code', sa.String(3), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_establishments_id'), 'establishments', ['id'], unique=False)
    op.create_index(op.f('ix_establishments_company_id'), 'establishments', ['company_id'], unique=False)

    for table_name in ('emission_points', 'warehouses'):
        columns = [
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
            sa.Column('establishment_id', sa.Integer(), sa.ForeignKey('establishments.id'), nullable=False),
        ]
        if table_name == 'emission_points':
            columns += [
                sa.Column('code', sa.String(3), nullable=False),
                sa.Column('description', sa.String(), nullable=True),
            ]
        else:
            columns += [
                sa.Column('name', sa.String(), nullable=False),
                sa.Column('description', sa.String(), nullable=True),
            ]
        columns.append(sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()))
        op.create_table(table_name, *columns)
        op.create_index(op.f(f'ix_{table_name}_id'), table_name, ['id'], unique=False)
        op.create_index(op.f(f'ix_{table_name}_company_id'), table_name, ['company_id'], unique=False)
        op.create_index(op.f(f'ix_{table_name}_establishment_id'), table_name, ['establishment_id'], unique=False)

    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('tax_id', sa.String(), nullable=True),
        sa.Column('contact_type', sa.String(), nullable=False, server_default='client'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_contacts_id'), 'contacts', ['id'], unique=False)
    op.create_index(op.f('ix_contacts_company_id'), 'contacts', ['company_id'], unique=False)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'company_users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='seller'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('company_id', 'user_id', name='uq_company_user'),
    )
    op.create_index(op.f('ix_company_users_id'), 'company_users', ['id'], unique=False)
    op.create_index(op.f('ix_company_users_company_id'), 'company_users', ['company_id'], unique=False)
    op.create_index(op.f('ix_company_users_user_id'), 'company_users', ['user_id'], unique=False)

    op.bulk_insert(plans, [
        {
            'name': plan['name'],
            'price': Decimal(plan['price']),
            'implementation_fee': Decimal('0'),
            'limits': dict(plan['limits']),
            'modules': dict(plan['modules']),
            'is_active': True,
        }
        for plan in DEFAULT_PLAN_CATALOG
    ])


def downgrade() -> None:
    """Drop every table created by the baseline."""
    op.drop_table('company_users')
    op.drop_table('users')
    op.drop_table('contacts')
    op.drop_table('warehouses')
    op.drop_table('emission_points')
    op.drop_table('establishments')
    op.drop_table('companies')
    op.drop_table('subscription_plans')
