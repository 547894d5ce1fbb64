"""Map routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.database import get_db
from trek.services import maps as maps_service

router = APIRouter(prefix="/api/maps", tags=["maps"])


@router.get("", response_model=list[schemas.Map])
async def list_maps(
    user_id: int | None = None, db: AsyncSession = Depends(get_db)
) -> list[schemas.Map]:
    """List maps, newest first."""
    return await maps_service.list_maps(db, user_id)


@router.post("", response_model=schemas.Map, status_code=status.HTTP_201_CREATED)
async def create_map(
    payload: schemas.NewMap, db: AsyncSession = Depends(get_db)
) -> schemas.Map:
    return await maps_service.create_map(db, payload)


@router.get("/{map_id}", response_model=schemas.Map)
async def get_map(map_id: int, db: AsyncSession = Depends(get_db)) -> schemas.Map:
    return await maps_service.get_map(db, map_id)


@router.patch("/{map_id}", response_model=schemas.Map)
async def update_map(
    map_id: int,
    payload: schemas.MapPatch,
    db: AsyncSession = Depends(get_db),
) -> schemas.Map:
    return await maps_service.update_map(db, map_id, payload)


@router.delete("/{map_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_map(map_id: int, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete a map together with its categories and markers."""
    await maps_service.delete_map(db, map_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
