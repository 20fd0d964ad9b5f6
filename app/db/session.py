from sqlalchemy import create_engine, event
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker
from app.core import config
DATABASE_URL = config.DATABASE_URL

# Errors meaning "the store cannot answer", as opposed to bad data or bugs
STORE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


def configure_sqlite_locking(sqlite_engine):
    """
    Start every SQLite transaction with BEGIN IMMEDIATE.

    The entitlement gate's lock-count-insert sequence needs the write lock
    up front; SQLite's deferred transactions would otherwise fail with
    "database is locked" when two writers upgrade at once.
    """
    @event.listens_for(sqlite_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
if DATABASE_URL.startswith("sqlite") and ":memory:" not in DATABASE_URL:
    configure_sqlite_locking(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database session dependency, one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
