import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from typing import Generator, Iterator
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.errors import StoreError

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("postgresql"):
        return {"pool_pre_ping": True}
    return {
        "pool_pre_ping": True,   # checks stale connections
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": settings.DB_POOL_RECYCLE_SECONDS,
        "connect_args": {
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS} -c timezone={settings.DB_TIMEZONE}",
        },
    }


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_db_connection() -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def write_transaction(db: Session, action: str) -> Iterator[Session]:
    """
    Run a multi-step write as one unit: commit on success, roll back on any error.

    Storage failures are logged with full detail and re-raised as StoreError so
    callers only ever see a generic message. Domain errors pass through untouched
    (after the rollback).
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Store failure during %s", action)
        raise StoreError(f"Could not {action}")
    except Exception:
        db.rollback()
        raise
