# Overview: Service-layer operations for concurrency; row locks, write transactions and retries.

from __future__ import annotations

import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    See begin_write_transaction() for the SQLite equivalent.
    """
    return query.with_for_update()


def begin_write_transaction(session=None) -> None:
    """
    Take the database write lock up front on SQLite.

    SQLite has no row locks; BEGIN IMMEDIATE serializes writers for the
    whole transaction instead. A no-op on every other backend, and when a
    transaction is already open on the connection.
    """
    if session is None:
        session = db.session
    if session.get_bind().dialect.name != "sqlite":
        return
    dbapi_connection = session.connection().connection.driver_connection
    if not dbapi_connection.in_transaction:
        session.execute(text("BEGIN IMMEDIATE"))


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1, retry_on: tuple = ()):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, lock timeouts) and StaleDataError
    (optimistic locking conflicts), plus any extra exception types in
    retry_on. The session is rolled back before each retry.
    """
    retryable = (OperationalError, StaleDataError) + tuple(retry_on)
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except retryable as exc:
            db.session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc
