"""add_max_total_users_to_subscription_plans

Revision ID: 9a6d3c1e5f74
Revises: 8f5c2b0d4e63
Create Date: 2026-03-20 10:48:51.771093

Writes max_total_users on every plan that lacks it: max_sellers when the plan
has one, otherwise -1. Matches what the read path resolves for plans that
have not been migrated, so nothing changes for any company.
"""
from typing import Sequence, Union

from alembic import op

from app.db.plan_evolution import backfill_max_total_users, run_plan_limits_step


# revision identifiers, used by Alembic.
revision: str = '9a6d3c1e5f74'
down_revision: Union[str, None] = '8f5c2b0d4e63'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Backfill max_total_users where it is missing (re-running is a no-op)."""
    run_plan_limits_step(op.get_bind(), backfill_max_total_users, "upgrade")


def downgrade() -> None:
    """Remove max_total_users from the plans that have it."""
    run_plan_limits_step(op.get_bind(), backfill_max_total_users, "downgrade")
