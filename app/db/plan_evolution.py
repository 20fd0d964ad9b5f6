"""
Plan limits evolution steps.

Each step is a named pair of pure functions over a single plan's limits
document. Alembic revisions run them against the subscription_plans table via
run_plan_limits_step(); tests run them on plain dicts.

Steps must be re-appliable: running upgrade twice leaves the same document as
running it once.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping

from sqlalchemy import JSON, Column, Integer, MetaData, String, Table, select, update
from sqlalchemy.engine import Connection

from app.core.plan_limits import FALLBACK_RULES, materialize_fallbacks

logger = logging.getLogger(__name__)

LimitsDocument = Dict[str, Any]
LimitsTransform = Callable[[str, LimitsDocument], LimitsDocument]

# Lightweight table used by migrations: does not depend on the ORM models,
# which describe the latest schema rather than the one at migration time.
_metadata = MetaData()
subscription_plans_table = Table(
    "subscription_plans",
    _metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String),
    Column("limits", JSON),
)


@dataclass(frozen=True)
class PlanLimitsStep:
    """A named, re-appliable change to plan limits documents."""
    name: str
    upgrade: LimitsTransform
    downgrade: LimitsTransform

    def apply(self, plans: Mapping[str, LimitsDocument]) -> Dict[str, LimitsDocument]:
        """Map a {plan_name: limits} catalog to its upgraded version."""
        return {name: self.upgrade(name, dict(limits or {})) for name, limits in plans.items()}

    def revert(self, plans: Mapping[str, LimitsDocument]) -> Dict[str, LimitsDocument]:
        """Map a {plan_name: limits} catalog to its downgraded version."""
        return {name: self.downgrade(name, dict(limits or {})) for name, limits in plans.items()}


def set_plan_limit_step(name: str, plan_name: str, key: str, value: int, previous: int) -> PlanLimitsStep:
    """
    Step that sets one key on one plan (matched by name).

    The rollback writes `previous` back, mirroring the forward change.
    """
    def _set(to_value: int) -> LimitsTransform:
        def transform(current_plan: str, limits: LimitsDocument) -> LimitsDocument:
            if current_plan != plan_name:
                return limits
            result = dict(limits)
            result[key] = to_value
            return result
        return transform

    return PlanLimitsStep(name=name, upgrade=_set(value), downgrade=_set(previous))


def _backfill_fallback_keys(plan_name: str, limits: LimitsDocument) -> LimitsDocument:
    return materialize_fallbacks(limits)


def _drop_fallback_keys(plan_name: str, limits: LimitsDocument) -> LimitsDocument:
    result = dict(limits)
    for key in FALLBACK_RULES:
        result.pop(key, None)
    return result


fix_plan_crecimiento_max_establishments = set_plan_limit_step(
    "fix_plan_crecimiento_max_establishments",
    plan_name="Plan Crecimiento",
    key="max_establishments",
    value=2,
    previous=3,
)

increase_plan_pyme_max_establishments = set_plan_limit_step(
    "increase_plan_pyme_max_establishments",
    plan_name="Plan Pyme",
    key="max_establishments",
    value=2,
    previous=1,
)

# max_total_users = max_sellers (or -1) on every plan that lacks it
backfill_max_total_users = PlanLimitsStep(
    name="backfill_max_total_users",
    upgrade=_backfill_fallback_keys,
    downgrade=_drop_fallback_keys,
)

PLAN_LIMITS_STEPS: List[PlanLimitsStep] = [
    fix_plan_crecimiento_max_establishments,
    increase_plan_pyme_max_establishments,
    backfill_max_total_users,
]


def apply_steps(plans: Mapping[str, LimitsDocument], steps: Iterable[PlanLimitsStep] = None) -> Dict[str, LimitsDocument]:
    """Upgrade a catalog through every step in order."""
    result = {name: dict(limits or {}) for name, limits in plans.items()}
    for step in (PLAN_LIMITS_STEPS if steps is None else steps):
        result = step.apply(result)
    return result


def run_plan_limits_step(connection: Connection, step: PlanLimitsStep, direction: str = "upgrade") -> int:
    """
    Apply a step to the subscription_plans table.

    Only rows whose document actually changes are written, so re-running a
    step that already ran issues no UPDATE at all.

    Returns:
        Number of plans updated
    """
    if direction not in ("upgrade", "downgrade"):
        raise ValueError(f"direction must be 'upgrade' or 'downgrade', got {direction!r}")
    transform = step.upgrade if direction == "upgrade" else step.downgrade

    rows = connection.execute(
        select(subscription_plans_table.c.id, subscription_plans_table.c.name, subscription_plans_table.c.limits)
    ).fetchall()

    updated = 0
    for plan_id, plan_name, limits in rows:
        current = dict(limits or {})
        new_limits = transform(plan_name, dict(current))
        if new_limits == current:
            continue
        connection.execute(
            update(subscription_plans_table)
            .where(subscription_plans_table.c.id == plan_id)
            .values(limits=new_limits)
        )
        updated += 1
        logger.info(f"Plan limits {direction} {step.name}: plan={plan_name!r}, limits={new_limits}")

    if updated == 0:
        logger.info(f"Plan limits {direction} {step.name}: nothing to change")
    return updated


def missing_column_tables(columns_by_table: Mapping[str, Iterable[str]], column: str) -> List[str]:
    """
    Tables (present in columns_by_table) that still lack `column`.

    Used by the is_active migrations to no-op on tables already migrated.
    """
    return [table for table, columns in columns_by_table.items() if column not in set(columns)]
