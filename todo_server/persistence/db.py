from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine, pool
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url``.

    SQLite connections are handed between threadpool workers, so the
    same-thread check is disabled; SQLite serializes writers itself.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            future=True,
            connect_args={"check_same_thread": False},
        )

    # QueuePool provides a fixed pool of connections shared by all threads
    return create_engine(
        database_url,
        future=True,
        poolclass=pool.QueuePool,
        pool_size=10,  # Minimum number of connections to keep in pool
        max_overflow=20,  # Additional connections beyond pool_size
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Rows are converted to plain models before the session closes, so
    # expiring on commit would only cost an extra reload.
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    from .models import TodoRecord  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready at %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:  # noqa: BLE001 - Re-raise all exceptions after rollback
        session.rollback()
        raise
    finally:
        session.close()
