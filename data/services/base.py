"""Shared helpers for persistence services."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from app.extensions import db
from capacity.errors import NotFoundError


@contextmanager
def transaction() -> Iterator[Session]:
    """
    Run a unit of work on the current session.

    Commits on success, rolls back on exception.

    Usage:
        with transaction() as session:
            session.add(...)
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def get_or_raise(model, identifier, entity: str | None = None):
    """Load a row by primary key or raise NotFoundError."""
    record = db.session.get(model, identifier) if identifier is not None else None
    if record is None:
        raise NotFoundError(entity or model.__name__, identifier)
    return record
