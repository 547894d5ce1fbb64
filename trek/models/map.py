"""Map model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trek.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from trek.models.category import Category
    from trek.models.marker import Marker
    from trek.models.user import User


class Map(TimestampMixin, Base):
    """A user-owned collection of markers and categories."""

    __tablename__ = "maps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    owner: Mapped[User] = relationship("User", back_populates="maps")
    categories: Mapped[list[Category]] = relationship(
        "Category",
        back_populates="map",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    markers: Mapped[list[Marker]] = relationship(
        "Marker",
        back_populates="map",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
