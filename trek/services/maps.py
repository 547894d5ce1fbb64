"""Map data-access functions."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.errors import NotFoundError
from trek.models import Map, User
from trek.models.base import utcnow
from trek.services.helpers import commit_or_raise, execute_and_commit

logger = logging.getLogger(__name__)


def _to_map(row: Map) -> schemas.Map:
    return schemas.Map(
        id=row.id,
        title=row.title,
        description=row.description,
        user_id=row.user_id,
    )


async def list_maps(
    db: AsyncSession, user_id: int | None = None
) -> list[schemas.Map]:
    """Return maps, newest first, optionally only those owned by ``user_id``."""
    stmt = select(Map).order_by(Map.created_at.desc(), Map.id.desc())
    if user_id is not None:
        stmt = stmt.where(Map.user_id == user_id)
    result = await db.execute(stmt)
    return [_to_map(row) for row in result.scalars()]


async def get_map(db: AsyncSession, map_id: int) -> schemas.Map:
    row = await db.get(Map, map_id)
    if row is None:
        raise NotFoundError(f"Map {map_id} not found")
    return _to_map(row)


async def create_map(db: AsyncSession, new: schemas.NewMap) -> schemas.Map:
    if await db.get(User, new.user_id) is None:
        raise NotFoundError(f"User {new.user_id} not found")

    row = Map(title=new.title, description=new.description, user_id=new.user_id)
    db.add(row)
    await commit_or_raise(db)
    await db.refresh(row)
    logger.info("Created map %s for user %s", row.id, row.user_id)
    return _to_map(row)


async def update_map(
    db: AsyncSession, map_id: int, patch: schemas.MapPatch
) -> schemas.Map:
    """Apply a sparse patch; only ``title`` and ``description`` are editable."""
    await get_map(db, map_id)
    changes = patch.changes()
    await execute_and_commit(
        db,
        update(Map).where(Map.id == map_id).values(**changes, updated_at=utcnow()),
    )
    logger.info("Updated map %s: %s", map_id, sorted(changes))
    return await get_map(db, map_id)


async def delete_map(db: AsyncSession, map_id: int) -> None:
    """Delete a map; categories and markers cascade in the database."""
    await db.execute(delete(Map).where(Map.id == map_id))
    await db.commit()
    logger.info("Deleted map %s", map_id)
