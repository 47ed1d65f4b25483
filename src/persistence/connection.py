"""Database engine and session helpers."""

from __future__ import annotations

import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


@lru_cache(maxsize=None)
def get_engine(url: Optional[str] = None) -> Engine:
    return create_engine(url or get_database_url(), pool_pre_ping=True)


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    return sessionmaker(bind=engine or get_engine(), expire_on_commit=False)


@contextmanager
def get_session(engine: Optional[Engine] = None) -> Iterator[Session]:
    """Yield a session, rolling back on error. Callers commit their own work."""
    session = get_session_factory(engine)()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def session_scope(engine: Engine):
    """A zero-argument session factory bound to `engine`, for worker pools."""
    return lambda: get_session(engine)
