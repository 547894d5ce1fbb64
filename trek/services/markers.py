"""Marker data-access functions.

Position is stored as one point geometry. Writes go through
``ST_SetSRID(ST_MakePoint(lng, lat), 4326)`` with both coordinates rounded to
six decimals; reads split it back into ``lat``/``lng`` with ``ST_Y``/``ST_X``.
``categoryColor`` comes from a left join on the marker's category and is
never written to the marker row.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from trek import schemas
from trek.errors import NotFoundError, ValidationError
from trek.models import Category, Map, Marker
from trek.models.base import utcnow
from trek.models.geometry import SRID_WGS84, round_coordinate
from trek.services.helpers import commit_or_raise, execute_and_commit

logger = logging.getLogger(__name__)

_NOT_NULL_DEFAULTS: dict[str, Any] = {"notes": "", "visitations": []}


def point_expression(lat: float, lng: float) -> ColumnElement[Any]:
    """SQL expression building the stored point from rounded coordinates."""
    return func.ST_SetSRID(
        func.ST_MakePoint(round_coordinate(lng), round_coordinate(lat)),
        SRID_WGS84,
    )


def _marker_select() -> Select[Any]:
    return (
        select(
            Marker.id,
            Marker.title,
            Marker.description,
            func.ST_Y(Marker.geom).label("lat"),
            func.ST_X(Marker.geom).label("lng"),
            Marker.map_id,
            Marker.category_id,
            Marker.country,
            Marker.state,
            Marker.postal,
            Marker.city,
            Marker.street,
            Marker.house_number,
            Marker.notes,
            Marker.rating,
            Marker.visitations,
            Category.color.label("category_color"),
        )
        .select_from(Marker)
        .outerjoin(Category, Marker.category_id == Category.id)
    )


def _to_marker(row: Any) -> schemas.Marker:
    return schemas.Marker(
        id=row.id,
        title=row.title,
        description=row.description,
        lat=float(row.lat),
        lng=float(row.lng),
        map_id=row.map_id,
        category_id=row.category_id,
        country=row.country,
        state=row.state,
        postal=row.postal,
        city=row.city,
        street=row.street,
        house_number=row.house_number,
        notes=row.notes or "",
        rating=row.rating,
        visitations=row.visitations or [],
        category_color=row.category_color,
    )


async def _check_category(
    db: AsyncSession, category_id: int | None, map_id: int
) -> None:
    """A marker's category has to live on the marker's own map."""
    if category_id is None:
        return
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError(f"Category {category_id} not found")
    if category.map_id != map_id:
        raise ValidationError(
            f"Category {category_id} belongs to map {category.map_id}, not {map_id}"
        )


async def list_markers(
    db: AsyncSession, map_id: int | None = None
) -> list[schemas.Marker]:
    """Return markers, newest first, optionally restricted to one map."""
    stmt = _marker_select().order_by(Marker.created_at.desc(), Marker.id.desc())
    if map_id is not None:
        stmt = stmt.where(Marker.map_id == map_id)
    result = await db.execute(stmt)
    return [_to_marker(row) for row in result]


async def get_marker(db: AsyncSession, marker_id: int) -> schemas.Marker:
    result = await db.execute(_marker_select().where(Marker.id == marker_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Marker {marker_id} not found")
    return _to_marker(row)


async def create_marker(db: AsyncSession, new: schemas.NewMarker) -> schemas.Marker:
    if await db.get(Map, new.map_id) is None:
        raise NotFoundError(f"Map {new.map_id} not found")
    await _check_category(db, new.category_id, new.map_id)

    marker = Marker(
        title=new.title,
        description=new.description,
        geom=point_expression(new.lat, new.lng),
        map_id=new.map_id,
        category_id=new.category_id,
        country=new.country,
        state=new.state,
        postal=new.postal,
        city=new.city,
        street=new.street,
        house_number=new.house_number,
        notes=new.notes or "",
        rating=new.rating,
        visitations=[v.model_dump() for v in new.visitations or []],
    )
    db.add(marker)
    await commit_or_raise(db)
    logger.info("Created marker %s on map %s", marker.id, new.map_id)
    return await get_marker(db, marker.id)


async def update_marker(
    db: AsyncSession, marker_id: int, patch: schemas.MarkerPatch
) -> schemas.Marker:
    """Apply a sparse patch to a marker.

    Keys absent from ``patch`` are left untouched. A key explicitly set to
    ``None`` clears the column; ``notes`` and ``visitations`` clear to their
    empty values instead of NULL.
    """
    current = await db.execute(
        select(Marker.map_id, Marker.category_id).where(Marker.id == marker_id)
    )
    existing = current.one_or_none()
    if existing is None:
        raise NotFoundError(f"Marker {marker_id} not found")

    changes = patch.changes()

    target_map_id = changes.get("map_id", existing.map_id)
    if target_map_id != existing.map_id and await db.get(Map, target_map_id) is None:
        raise NotFoundError(f"Map {target_map_id} not found")
    if "category_id" in changes or "map_id" in changes:
        target_category_id = changes.get("category_id", existing.category_id)
        await _check_category(db, target_category_id, target_map_id)

    values: dict[str, Any] = {}
    for key, value in changes.items():
        if key in ("lat", "lng"):
            continue
        if value is None and key in _NOT_NULL_DEFAULTS:
            value = _NOT_NULL_DEFAULTS[key]
        values[key] = value
    if "lat" in changes:
        values["geom"] = point_expression(changes["lat"], changes["lng"])
    values["updated_at"] = utcnow()

    await execute_and_commit(
        db,
        update(Marker)
        .where(Marker.id == marker_id)
        .values(**values)
        .execution_options(synchronize_session=False),
    )
    logger.info("Updated marker %s: %s", marker_id, sorted(changes))
    return await get_marker(db, marker_id)


async def delete_marker(db: AsyncSession, marker_id: int) -> None:
    await db.execute(delete(Marker).where(Marker.id == marker_id))
    await db.commit()
    logger.info("Deleted marker %s", marker_id)
