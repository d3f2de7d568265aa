import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.exceptions import StorageError

log = logging.getLogger(__name__)


@contextmanager
def smart_transaction(session: Session) -> Iterator:
    """
    Context manager that begins a transaction on the given Session.
    If a transaction is already active, start a nested SAVEPOINT (begin_nested).
    Otherwise start a normal transaction (begin).

    Every write inside the block commits together or not at all; driver and
    constraint failures are rolled back and re-raised as StorageError.
    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    try:
        with cm:
            yield
    except SQLAlchemyError as exc:
        log.exception("transaction rolled back")
        raise StorageError(str(exc)) from exc
