"""
core.domain.transactions — Helpers for safe state transitions.

Wraps ``transaction.atomic`` into the few patterns the service layer
needs so every write follows the same approach:

* every write runs inside ``transaction.atomic()``;
* status transitions are an atomic compare-and-set
  (``UPDATE ... WHERE pk=? AND status=?``) rather than a lock held
  across the whole request;
* a caller-supplied timeout bounds the statements of one call;
* low-level database failures surface as ``Unavailable``.

Usage::

    from core.domain.transactions import compare_and_swap, bounded_atomic

    with bounded_atomic(timeout=2.0):
        case = compare_and_swap(
            Case,
            pk=case_id,
            field="status",
            expected="PENDING",
            changes={"status": "APPROVED", "is_public": True},
        )
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Iterator, TypeVar

from django.conf import settings
from django.db import DatabaseError, connection, models, transaction

from core.domain.exceptions import Conflict, NotFound, Unavailable

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)


def _timeout_ms(timeout: float | None) -> int | None:
    if timeout is not None:
        return max(1, int(timeout * 1000))
    return getattr(settings, "PORTAL_DB_STATEMENT_TIMEOUT_MS", None) or None


@contextlib.contextmanager
def translate_db_errors() -> Iterator[None]:
    """
    Re-raise database failures (lost connection, statement timeout,
    lock timeout) as ``Unavailable``.
    """
    try:
        yield
    except DatabaseError as exc:
        logger.warning("Database failure surfaced as Unavailable: %s", exc)
        raise Unavailable() from exc


@contextlib.contextmanager
def bounded_atomic(timeout: float | None = None) -> Iterator[None]:
    """
    ``transaction.atomic()`` with a per-call statement timeout.

    ``timeout`` is in seconds; when omitted the
    ``PORTAL_DB_STATEMENT_TIMEOUT_MS`` setting applies.  Only PostgreSQL
    honours the timeout (``SET LOCAL`` scopes it to this transaction);
    other backends run unbounded.
    """
    ms = _timeout_ms(timeout)
    with translate_db_errors(), transaction.atomic():
        if ms and connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute("SET LOCAL statement_timeout = %s", [ms])
        yield


def compare_and_swap(
    model_class: type[M],
    *,
    pk: Any,
    field: str,
    expected: Any,
    changes: dict[str, Any],
) -> M:
    """
    Apply ``changes`` to the row only if ``field`` still equals ``expected``.

    Must be called inside an atomic block.

    Returns:
        The freshly re-read instance after the update.

    Raises:
        NotFound: the row no longer exists.
        Conflict: the row exists but ``field`` moved away from ``expected``
                  since the caller loaded it.
    """
    updated = (
        model_class.objects
        .filter(pk=pk, **{field: expected})
        .update(**changes)
    )
    if updated == 0:
        if not model_class.objects.filter(pk=pk).exists():
            raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")
        logger.warning(
            "Compare-and-swap lost on %s pk=%s (expected %s=%r)",
            model_class.__name__, pk, field, expected,
        )
        raise Conflict(
            f"{model_class.__name__} {pk} was modified concurrently; reload and retry."
        )
    return model_class.objects.get(pk=pk)


def advisory_xact_lock(key: int) -> None:
    """
    Take a PostgreSQL transaction-scoped advisory lock on ``key``.

    Must be called inside ``bounded_atomic``; the lock is released at
    commit or rollback.  Other backends do nothing; SQLite allows a
    single writer at a time.
    """
    if connection.vendor != "postgresql":
        return
    with translate_db_errors(), connection.cursor() as cursor:
        cursor.execute("SELECT pg_advisory_xact_lock(%s)", [key])
