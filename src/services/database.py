"""
Database access for the costing catalog.

The costing engine itself never touches the database. This module owns the
SQLite engine and sessions used by catalog_service to load and seed the
catalog tables:
- one process-wide engine and session factory, created lazily
- session_scope() for commit/rollback handling
- table creation and a check that the catalog tables exist
"""

from typing import Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base

logger = logging.getLogger(__name__)

# Tables a usable catalog needs; the rest may be empty or missing columns
CATALOG_TABLES = ("labor_roles", "ingredients", "recipes", "recipe_ingredients", "tier_sizes")

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or "mode=memory" in database_url


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enforce foreign keys on every SQLite connection; file databases also use WAL."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA database_list")
    file_backed = any(row[2] for row in cursor.fetchall())
    if file_backed:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build a SQLite engine.

    Args:
        database_url: Explicit URL; the configured catalog database when None
        echo: Log every SQL statement
    """
    config = get_config()
    if database_url is None:
        config.ensure_directories()
        database_url = config.database_url

    logger.info(f"Creating database engine: {database_url}")

    connect_args = {"check_same_thread": False}
    if _is_memory_url(database_url):
        # One shared connection, otherwise each session sees an empty database
        return create_engine(
            database_url, echo=echo, connect_args=connect_args, poolclass=StaticPool
        )

    connect_args["timeout"] = config.db_timeout
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing catalog tables. Existing tables and rows are untouched."""
    engine = engine or get_engine()

    # Importing the package registers every model on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info(f"Catalog tables ready ({len(Base.metadata.tables)} tables)")


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """Return the process-wide session factory bound to get_engine()."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope():
    """
    Transactional scope around a block of catalog reads or writes.

    Commits when the block finishes, rolls back and re-raises on any
    exception, and always closes the session.

    Example:
        with session_scope() as session:
            session.add(LaborRole(name="Baker", hourly_rate=21))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """True when every table in CATALOG_TABLES exists."""
    try:
        existing = set(inspect(get_engine()).get_table_names())
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        return False

    missing = [table for table in CATALOG_TABLES if table not in existing]
    if missing:
        logger.warning(f"Catalog tables missing: {', '.join(missing)}")
    return not missing


def close_connections() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _SessionFactory

    _SessionFactory = None
    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Create the configured database file and its catalog tables if needed."""
    config = get_config()
    state = "existing" if config.database_exists() else "new"
    logger.info(f"Opening {state} catalog database at: {config.database_path}")

    init_database(get_engine())

    if not verify_database():
        logger.warning("Catalog database is missing tables after initialization")
