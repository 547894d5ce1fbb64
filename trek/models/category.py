"""Category model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trek.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from trek.models.map import Map
    from trek.models.marker import Marker


class Category(TimestampMixin, Base):
    """Named, colored grouping of markers within one map."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    map_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("maps.id", ondelete="CASCADE"), index=True
    )

    map: Mapped[Map] = relationship("Map", back_populates="categories")
    markers: Mapped[list[Marker]] = relationship(
        "Marker", back_populates="category", passive_deletes=True
    )
