"""Category data-access functions."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.errors import NotFoundError
from trek.models import Category, Map, Marker
from trek.models.base import utcnow
from trek.services.helpers import commit_or_raise, execute_and_commit

logger = logging.getLogger(__name__)


def _category_select() -> Select[Any]:
    # userId is derived from the owning map.
    return (
        select(
            Category.id,
            Category.title,
            Category.description,
            Category.color,
            Category.map_id,
            Map.user_id,
        )
        .select_from(Category)
        .join(Map, Category.map_id == Map.id)
    )


def _to_category(row: Any) -> schemas.Category:
    return schemas.Category(
        id=row.id,
        title=row.title,
        description=row.description,
        color=row.color,
        map_id=row.map_id,
        user_id=row.user_id,
    )


async def list_categories(
    db: AsyncSession,
    map_id: int | None = None,
    *,
    user_id: int | None = None,
) -> list[schemas.Category]:
    """Return categories, newest first, filtered by map and/or map owner."""
    stmt = _category_select().order_by(Category.created_at.desc(), Category.id.desc())
    if map_id is not None:
        stmt = stmt.where(Category.map_id == map_id)
    if user_id is not None:
        stmt = stmt.where(Map.user_id == user_id)
    result = await db.execute(stmt)
    return [_to_category(row) for row in result]


async def get_category(db: AsyncSession, category_id: int) -> schemas.Category:
    result = await db.execute(_category_select().where(Category.id == category_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Category {category_id} not found")
    return _to_category(row)


async def create_category(
    db: AsyncSession, new: schemas.NewCategory
) -> schemas.Category:
    if await db.get(Map, new.map_id) is None:
        raise NotFoundError(f"Map {new.map_id} not found")

    category = Category(
        title=new.title,
        description=new.description,
        color=new.color,
        map_id=new.map_id,
    )
    db.add(category)
    await commit_or_raise(db)
    logger.info("Created category %s on map %s", category.id, category.map_id)
    return await get_category(db, category.id)


async def update_category(
    db: AsyncSession, category_id: int, patch: schemas.CategoryPatch
) -> schemas.Category:
    await get_category(db, category_id)
    changes = patch.changes()
    await execute_and_commit(
        db,
        update(Category)
        .where(Category.id == category_id)
        .values(**changes, updated_at=utcnow()),
    )
    logger.info("Updated category %s: %s", category_id, sorted(changes))
    return await get_category(db, category_id)


async def delete_category(
    db: AsyncSession, category_id: int, *, delete_markers: bool = False
) -> None:
    """Delete a category.

    By default its markers stay and lose their category (``ON DELETE SET
    NULL``). With ``delete_markers`` the markers are removed too, in the same
    transaction as the category.
    """
    try:
        if delete_markers:
            await db.execute(delete(Marker).where(Marker.category_id == category_id))
        await db.execute(delete(Category).where(Category.id == category_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to delete category %s", category_id)
        raise
    logger.info(
        "Deleted category %s%s",
        category_id,
        " with its markers" if delete_markers else "",
    )
