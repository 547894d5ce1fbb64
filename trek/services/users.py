"""User data-access functions."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.errors import ConflictError, NotFoundError
from trek.models import User
from trek.models.base import utcnow
from trek.services.helpers import commit_or_raise, execute_and_commit

logger = logging.getLogger(__name__)


def _to_user(user: User) -> schemas.User:
    return schemas.User(id=user.id, name=user.name, email=user.email)


async def list_users(db: AsyncSession) -> list[schemas.User]:
    """Return all users, newest first."""
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    )
    return [_to_user(user) for user in result.scalars()]


async def get_user(db: AsyncSession, user_id: int) -> schemas.User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return _to_user(user)


async def get_user_by_name(db: AsyncSession, name: str) -> schemas.User | None:
    """Look up a user by display name (used as the sign-in username)."""
    result = await db.execute(
        select(User).where(User.name == name).order_by(User.id).limit(1)
    )
    user = result.scalar_one_or_none()
    return _to_user(user) if user else None


async def get_user_by_email(db: AsyncSession, email: str) -> schemas.User | None:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    return _to_user(user) if user else None


async def create_user(db: AsyncSession, new: schemas.NewUser) -> schemas.User:
    """Insert a user; the email must be unused."""
    if await get_user_by_email(db, new.email):
        raise ConflictError(f"Email {new.email} already registered")

    user = User(name=new.name, email=new.email)
    db.add(user)
    await commit_or_raise(db, unique_message=f"Email {new.email} already registered")
    await db.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.email)
    return _to_user(user)


async def update_user(
    db: AsyncSession, user_id: int, patch: schemas.UserPatch
) -> schemas.User:
    await get_user(db, user_id)
    values = {**patch.changes(), "updated_at": utcnow()}
    await execute_and_commit(
        db,
        update(User).where(User.id == user_id).values(**values),
        unique_message="Email already registered",
    )
    logger.info("Updated user %s: %s", user_id, sorted(patch.changes()))
    return await get_user(db, user_id)


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Delete a user; their maps go with them via FK cascade."""
    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()
    logger.info("Deleted user %s", user_id)
