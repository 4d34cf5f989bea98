# src/wellcoach/infrastructure/db/uow.py
"""
Unit of Work: one transactional session per scope.

Every write path in the application runs inside `session_scope()`, which
commits on success and rolls back everything on any exception. A
recommendation batch flushed inside one scope is therefore stored completely
or not at all.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.orm import Session, scoped_session

from .base import engine, SessionLocal
from .models import Base

log = logging.getLogger(__name__)

# Thread-local sessions: FastAPI runs sync endpoints in a worker pool.
SessionScoped = scoped_session(SessionLocal)


def create_tables():
    """Create any missing tables (dev and tests; production runs alembic)."""
    log.info("Ensuring wellcoach schema: %s", ", ".join(sorted(Base.metadata.tables)))
    try:
        Base.metadata.create_all(engine)
    except Exception as e:
        log.critical("Schema creation failed on %s: %s", engine.url.render_as_string(hide_password=True), e, exc_info=True)
        raise


def drop_tables():
    Base.metadata.drop_all(engine)


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    One transaction, e.g. an event write or a whole recommendation batch.
    Commits when the block exits cleanly; any exception rolls the whole block
    back and propagates. Scopes must not be nested: the inner one would close
    the shared session.
    """
    session = SessionScoped()
    try:
        yield session
        session.commit()
        log.debug("Unit of work %x committed", id(session))
    except Exception as e:
        log.error("Unit of work %x rolled back: %s", id(session), e, exc_info=True)
        session.rollback()
        raise
    finally:
        SessionScoped.remove()
