"""fix_plan_crecimiento_max_establishments

Revision ID: 7e4b1a9c3d52
Revises: 5c2d8e4f9a21
Create Date: 2026-03-02 11:05:44.019876

Plan Crecimiento was seeded with max_establishments = 3; the plan sells 2.
"""
from typing import Sequence, Union

from alembic import op

from app.db.plan_evolution import fix_plan_crecimiento_max_establishments, run_plan_limits_step


# revision identifiers, used by Alembic.
revision: str = '7e4b1a9c3d52'
down_revision: Union[str, None] = '5c2d8e4f9a21'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Set Plan Crecimiento max_establishments to 2."""
    run_plan_limits_step(op.get_bind(), fix_plan_crecimiento_max_establishments, "upgrade")


def downgrade() -> None:
    """Restore Plan Crecimiento max_establishments to 3."""
    run_plan_limits_step(op.get_bind(), fix_plan_crecimiento_max_establishments, "downgrade")
