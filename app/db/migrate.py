"""
Database migration runner for Alembic migrations.
"""
import logging
import os
from alembic.config import Config
from alembic import command
from sqlalchemy import create_engine, text

logger = logging.getLogger(__name__)

ADVISORY_LOCK_ID = 741300000


def get_alembic_config(database_url: str) -> Config:
    """Alembic config pointing at the repository's alembic.ini."""
    alembic_ini_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "alembic.ini")
    alembic_cfg = Config(alembic_ini_path)
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    alembic_cfg.attributes["url_from_caller"] = True
    return alembic_cfg


def run_migrations(database_url: str = None, revision: str = "head"):
    """
    Run Alembic migrations to the given revision.
    Uses advisory locks on PostgreSQL to prevent concurrent migrations.
    """
    from app.core import config as app_config

    database_url = database_url or app_config.DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    logger.info(f"Running alembic upgrade {revision}")

    alembic_cfg = get_alembic_config(database_url)
    is_postgres = database_url.startswith("postgresql")

    engine = create_engine(database_url, pool_pre_ping=True)
    lock_conn = None

    try:
        if is_postgres:
            # Keep the connection open to hold the lock
            lock_conn = engine.connect()
            try:
                lock_conn.execute(text(f"SELECT pg_advisory_lock({ADVISORY_LOCK_ID})"))
                lock_conn.commit()
                logger.info("Migration lock acquired")
            except Exception as lock_error:
                logger.warning(f"Could not acquire advisory lock: {lock_error}")
                lock_conn.close()
                lock_conn = None

        command.upgrade(alembic_cfg, revision)
        logger.info("Migrations complete")

    except Exception:
        logger.exception("Migration failed")
        raise
    finally:
        if lock_conn:
            try:
                lock_conn.execute(text(f"SELECT pg_advisory_unlock({ADVISORY_LOCK_ID})"))
                lock_conn.commit()
            except Exception as unlock_error:
                logger.warning(f"Could not release advisory lock: {unlock_error}")
            finally:
                lock_conn.close()
        engine.dispose()


def rollback_migrations(database_url: str = None, revision: str = "-1"):
    """Downgrade to the given revision (default: one step back)."""
    from app.core import config as app_config

    database_url = database_url or app_config.DATABASE_URL
    logger.info(f"Running alembic downgrade {revision}")
    command.downgrade(get_alembic_config(database_url), revision)
