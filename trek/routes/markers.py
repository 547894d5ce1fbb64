"""Marker routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.database import get_db
from trek.services import markers as markers_service

router = APIRouter(prefix="/api", tags=["markers"])


@router.get("/maps/{map_id}/markers", response_model=list[schemas.Marker])
async def list_markers(
    map_id: int, db: AsyncSession = Depends(get_db)
) -> list[schemas.Marker]:
    """List the markers of a map, newest first."""
    return await markers_service.list_markers(db, map_id)


@router.post(
    "/markers", response_model=schemas.Marker, status_code=status.HTTP_201_CREATED
)
async def create_marker(
    payload: schemas.NewMarker, db: AsyncSession = Depends(get_db)
) -> schemas.Marker:
    return await markers_service.create_marker(db, payload)


@router.get("/markers/{marker_id}", response_model=schemas.Marker)
async def get_marker(
    marker_id: int, db: AsyncSession = Depends(get_db)
) -> schemas.Marker:
    return await markers_service.get_marker(db, marker_id)


@router.patch("/markers/{marker_id}", response_model=schemas.Marker)
async def update_marker(
    marker_id: int,
    payload: schemas.MarkerPatch,
    db: AsyncSession = Depends(get_db),
) -> schemas.Marker:
    """Update only the fields present in the request body."""
    return await markers_service.update_marker(db, marker_id, payload)


@router.delete("/markers/{marker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_marker(marker_id: int, db: AsyncSession = Depends(get_db)) -> Response:
    await markers_service.delete_marker(db, marker_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
