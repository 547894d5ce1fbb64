"""Shared helpers for the data-access modules."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.sql.base import Executable
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trek.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


def _constraint_message(exc: IntegrityError) -> str:
    return str(exc.orig) if exc.orig is not None else str(exc)


async def _raise_domain_error(
    db: AsyncSession, exc: IntegrityError, unique_message: str | None
) -> None:
    await db.rollback()
    message = _constraint_message(exc)
    logger.warning("Constraint violation: %s", message)
    if unique_message and "unique" in message.lower():
        raise ConflictError(unique_message) from exc
    raise ValidationError(message) from exc


async def commit_or_raise(db: AsyncSession, *, unique_message: str | None = None) -> None:
    """Commit the session, turning constraint violations into domain errors.

    The session is rolled back before raising so the stored rows are
    unchanged.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await _raise_domain_error(db, exc, unique_message)


async def execute_and_commit(
    db: AsyncSession,
    statement: Executable,
    *,
    unique_message: str | None = None,
) -> Any:
    """Run one write statement and commit it, like :func:`commit_or_raise`."""
    try:
        result = await db.execute(statement)
        await db.commit()
    except IntegrityError as exc:
        await _raise_domain_error(db, exc, unique_message)
    return result
