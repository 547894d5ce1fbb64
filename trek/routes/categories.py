"""Category routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.database import get_db
from trek.services import categories as categories_service

router = APIRouter(prefix="/api", tags=["categories"])


@router.get("/maps/{map_id}/categories", response_model=list[schemas.Category])
async def list_categories(
    map_id: int, db: AsyncSession = Depends(get_db)
) -> list[schemas.Category]:
    return await categories_service.list_categories(db, map_id)


@router.post(
    "/categories",
    response_model=schemas.Category,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    payload: schemas.NewCategory, db: AsyncSession = Depends(get_db)
) -> schemas.Category:
    return await categories_service.create_category(db, payload)


@router.patch("/categories/{category_id}", response_model=schemas.Category)
async def update_category(
    category_id: int,
    payload: schemas.CategoryPatch,
    db: AsyncSession = Depends(get_db),
) -> schemas.Category:
    return await categories_service.update_category(db, category_id, payload)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    delete_markers: bool = False,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a category; its markers are kept unless ``delete_markers`` is set."""
    await categories_service.delete_category(
        db, category_id, delete_markers=delete_markers
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
