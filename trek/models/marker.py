"""Marker model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from geoalchemy2 import Geometry, WKBElement
from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trek.models.base import Base, TimestampMixin
from trek.models.geometry import SRID_WGS84

if TYPE_CHECKING:
    from trek.models.category import Category
    from trek.models.map import Map


class Marker(TimestampMixin, Base):
    """A user-placed point of interest."""

    __tablename__ = "markers"
    __table_args__ = (
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 10)",
            name="ck_markers_rating_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[str | None] = mapped_column(String(255), nullable=True)
    postal: Mapped[str | None] = mapped_column(String(64), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    house_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    notes: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    visitations: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list, server_default="[]"
    )

    # Only ever touched through ST_SetSRID/ST_MakePoint and ST_X/ST_Y.
    geom: Mapped[WKBElement] = mapped_column(
        Geometry(geometry_type="POINT", srid=SRID_WGS84, nullable=False),
        nullable=False,
        deferred=True,
    )

    map_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("maps.id", ondelete="CASCADE"), index=True
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    map: Mapped[Map] = relationship("Map", back_populates="markers")
    category: Mapped[Category | None] = relationship(
        "Category", back_populates="markers"
    )
