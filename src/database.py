"""
Engine and session handling.

One engine per process, built from Settings:
- SQLite: foreign keys switched on for every connection; in-memory
  databases share a single connection (StaticPool)
- PostgreSQL: a small pre-pinged pool

get_db() is the request-scoped FastAPI dependency; get_db_context() is
the same unit of work for scripts and startup code.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured database.

    Args:
        settings: Application settings

    Returns:
        Configured SQLAlchemy Engine
    """
    options: dict[str, Any] = {"echo": settings.log_level == "DEBUG"}

    if settings.uses_sqlite:
        # Sync endpoints run in a threadpool
        options["connect_args"] = {"check_same_thread": False}
        if settings.sqlite_in_memory:
            options["poolclass"] = StaticPool
        sqlite_engine = create_engine(settings.database_url, **options)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(
        settings.database_url,
        pool_size=5,
        pool_recycle=3600,
        pool_pre_ping=True,
        **options,
    )


settings = get_settings()
settings.validate_production_config()

engine = build_engine(settings)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Unit of work outside a request.

    Commits when the block exits cleanly, rolls back when it raises.

    Usage:
        with get_db_context() as db:
            purge_expired_sessions(db)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Services commit their own writes; anything left pending is committed
    after the handler returns and rolled back if it raised.

    Usage:
        @router.get("/tasks")
        def list_tasks(db: Session = Depends(get_db)):
            ...
    """
    with get_db_context() as db:
        yield db


def init_db() -> None:
    """
    Create any missing tables.

    Used in development and tests; deployed databases are migrated with
    `alembic upgrade head`.
    """
    from src.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables ready ({engine.url.get_backend_name()})")


def check_connection() -> bool:
    """Run SELECT 1 against the database; False if it fails."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
    return True
