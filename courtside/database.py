import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from . import config

logger = logging.getLogger(__name__)

Base = declarative_base()


def engine_options(url: str) -> dict:
    """SQLite (local runs, tests) takes no pool sizing; PostgreSQL gets the tuned pool."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Test connections before using
        "pool_recycle": config.DB_POOL_RECYCLE,
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_timeout": config.DB_POOL_TIMEOUT,
    }


def log_slow_queries(bind: Engine, threshold: float) -> None:
    """Warn about any statement slower than ``threshold`` seconds"""

    @event.listens_for(bind, "before_cursor_execute")
    def _start_timer(conn, _cursor, _statement, _parameters, _context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(bind, "after_cursor_execute")
    def _check_elapsed(conn, _cursor, statement, _parameters, _context, _executemany):
        elapsed = time.perf_counter() - conn.info["query_start_time"].pop(-1)
        if elapsed > threshold:
            logger.warning(f"🐌 Slow query ({elapsed:.2f}s): {statement[:200]}...")


def create_tables(bind: Engine) -> None:
    """Create missing tables. Several workers may start at once; losing that race is fine."""
    try:
        Base.metadata.create_all(bind=bind, checkfirst=True)
    except SQLAlchemyError as e:
        error_msg = str(e)
        if "already exists" not in error_msg and "duplicate key" not in error_msg:
            logger.error(f"❌ Failed to create database tables: {e}")
            raise
        logger.info("Database tables already exist (created by another worker)")
        return
    logger.info("✅ Database tables ready")


try:
    engine = create_engine(config.DATABASE_URL, echo=False, **engine_options(config.DATABASE_URL))
    logger.info("✅ Database engine created successfully")
except Exception as e:
    logger.error(f"❌ Failed to create database engine: {e}")
    raise

if config.DB_LOG_SLOW_QUERIES:
    log_slow_queries(engine, config.DB_SLOW_QUERY_THRESHOLD)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """Session for work outside a request (cron jobs). Rolled back on error, always closed."""
    db = (factory or SessionLocal)()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
