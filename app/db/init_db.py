"""
Create tables and seed the plan catalog without Alembic (local development).
"""
import logging

from app.db.session import engine, SessionLocal
from app.db.base import Base
from app.db import models  # noqa: F401  registers every model
from app.db.plan_evolution import PLAN_LIMITS_STEPS, run_plan_limits_step
from app.services.plan_catalog_service import seed_default_plans

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create all tables, seed default plans and bring their limits to head."""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    db = SessionLocal(bind=bind)
    try:
        seed_default_plans(db)
        connection = db.connection()
        for step in PLAN_LIMITS_STEPS:
            run_plan_limits_step(connection, step, "upgrade")
        db.commit()
    finally:
        db.close()

    logger.info("Database initialized")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
