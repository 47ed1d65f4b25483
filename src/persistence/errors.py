"""Classify database errors and retry transient ones."""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError, StatementError
from sqlalchemy.orm import Session
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_incrementing

from common.errors import (
    FatalPersistenceError,
    PersistenceError,
    SchemaDriftError,
    TransientPersistenceError,
)
from persistence.models import TAG_COLUMNS

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 4
DEFAULT_BACKOFF_SECONDS = 0.08

# SQLSTATE codes
TRANSIENT_CODES = frozenset({"40P01", "40001", "55P03"})
MISSING_COLUMN_CODES = frozenset({"42703", "PGRST204"})

TRANSIENT_MESSAGES = (
    "deadlock",
    "serialization failure",
    "could not serialize",
    "lock timeout",
    "lock not available",
    "database is locked",
)

MISSING_COLUMN_MESSAGES = (
    "could not find",
    "does not exist",
    "no such column",
    "has no column named",
    "unknown column",
)


class PersistenceErrorKind(enum.Enum):
    TRANSIENT = "transient"
    SCHEMA_DRIFT = "schema_drift"
    FATAL = "fatal"


def _driver_error(err: BaseException) -> BaseException:
    if isinstance(err, StatementError) and err.orig is not None:
        return err.orig
    return err


def _sqlstate(err: BaseException) -> Optional[str]:
    driver_err = _driver_error(err)
    for attr in ("pgcode", "sqlstate"):
        code = getattr(driver_err, attr, None)
        if isinstance(code, str) and code:
            return code
    # PostgREST-style errors carry the code directly
    if not isinstance(driver_err, SQLAlchemyError):
        code = getattr(driver_err, "code", None)
        if isinstance(code, str) and code:
            return code
    return None


def error_message(err: BaseException) -> str:
    """First line of the driver's message, without SQLAlchemy's statement dump."""
    message = str(_driver_error(err)).strip()
    return message.splitlines()[0] if message else type(err).__name__


def _mentions_tag_column(message: str) -> bool:
    return any(column in message for column in TAG_COLUMNS)


def classify_persistence_error(err: BaseException) -> PersistenceErrorKind:
    """Classify a database error as transient, schema drift or fatal.

    The driver's SQLSTATE wins when present; otherwise the message text is
    matched, which depends on upstream wording.
    """
    if isinstance(err, TransientPersistenceError):
        return PersistenceErrorKind.TRANSIENT
    if isinstance(err, SchemaDriftError):
        return PersistenceErrorKind.SCHEMA_DRIFT
    if isinstance(err, PersistenceError):
        return PersistenceErrorKind.FATAL

    code = _sqlstate(err)
    message = str(_driver_error(err)).lower()

    if code in TRANSIENT_CODES:
        return PersistenceErrorKind.TRANSIENT
    if code in MISSING_COLUMN_CODES and _mentions_tag_column(message):
        return PersistenceErrorKind.SCHEMA_DRIFT
    if code:
        return PersistenceErrorKind.FATAL

    if any(fragment in message for fragment in TRANSIENT_MESSAGES):
        return PersistenceErrorKind.TRANSIENT
    if any(fragment in message for fragment in MISSING_COLUMN_MESSAGES) and _mentions_tag_column(message):
        return PersistenceErrorKind.SCHEMA_DRIFT
    return PersistenceErrorKind.FATAL


def _is_transient(err: BaseException) -> bool:
    return classify_persistence_error(err) is PersistenceErrorKind.TRANSIENT


def run_with_retry(
    operation: str,
    fn: Callable[[], T],
    session: Optional[Session] = None,
    attempts: int = DEFAULT_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run `fn`, retrying transient database errors with linear backoff.

    The session, when given, is rolled back before every retry and after a
    final failure so it stays usable.

    Raises:
        SchemaDriftError: If the write referenced optional columns the table lacks.
        FatalPersistenceError: For any other error, or when retries run out.
    """

    def _before_sleep(retry_state: RetryCallState) -> None:
        if session is not None:
            session.rollback()
        err = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "%s hit a transient error (attempt %d/%d): %s",
            operation,
            retry_state.attempt_number,
            attempts,
            error_message(err) if err else "unknown",
        )

    retrying = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_incrementing(start=backoff_seconds, increment=backoff_seconds),
        retry=retry_if_exception(_is_transient),
        before_sleep=_before_sleep,
        sleep=sleep,
        reraise=True,
    )

    try:
        return retrying(fn)
    except Exception as err:
        if session is not None:
            session.rollback()
        if isinstance(err, (SchemaDriftError, FatalPersistenceError)):
            raise
        if classify_persistence_error(err) is PersistenceErrorKind.SCHEMA_DRIFT:
            raise SchemaDriftError(operation, error_message(err)) from err
        raise FatalPersistenceError(operation, error_message(err)) from err
