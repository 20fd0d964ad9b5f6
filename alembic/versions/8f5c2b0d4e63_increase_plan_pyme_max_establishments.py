"""increase_plan_pyme_max_establishments

Revision ID: 8f5c2b0d4e63
Revises: 7e4b1a9c3d52
Create Date: 2026-03-09 14:22:10.402318

Plan Pyme now includes a second establishment.
"""
from typing import Sequence, Union

from alembic import op

from app.db.plan_evolution import increase_plan_pyme_max_establishments, run_plan_limits_step


# revision identifiers, used by Alembic.
revision: str = '8f5c2b0d4e63'
down_revision: Union[str, None] = '7e4b1a9c3d52'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Raise Plan Pyme max_establishments from 1 to 2."""
    run_plan_limits_step(op.get_bind(), increase_plan_pyme_max_establishments, "upgrade")


def downgrade() -> None:
    """Lower Plan Pyme max_establishments back to 1."""
    run_plan_limits_step(op.get_bind(), increase_plan_pyme_max_establishments, "downgrade")
