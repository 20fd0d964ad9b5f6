"""
Script to set one limit on a subscription plan, by plan name.
Run: python -m scripts.set_plan_limit "Plan Pyme" max_establishments 2

Re-running with the same value changes nothing.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.core.errors import EntitlementError
from app.services.plan_catalog_service import set_plan_limit
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def update_plan_limit(plan_name: str, key: str, value: int) -> bool:
    """Set plan_name's `key` to `value`. Returns False on failure."""
    db = SessionLocal()
    try:
        changed = set_plan_limit(db, plan_name, key, value)
        if changed:
            logger.info(f"Plan {plan_name!r}: {key} is now {value}")
        return True
    except EntitlementError as e:
        db.rollback()
        logger.error(f"Could not update plan {plan_name!r}: {e}")
        return False
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating plan {plan_name!r}: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print("Usage: python -m scripts.set_plan_limit <plan name> <limit key> <value>")
        sys.exit(2)

    plan_name, key, raw_value = sys.argv[1], sys.argv[2], sys.argv[3]
    try:
        value = int(raw_value)
    except ValueError:
        print(f"\n[ERROR] Limit value must be an integer, got {raw_value!r}")
        sys.exit(2)

    if update_plan_limit(plan_name, key, value):
        print(f"\n[SUCCESS] {plan_name}: {key} = {value}")
    else:
        print(f"\n[ERROR] Failed to update {plan_name}")
        sys.exit(1)
