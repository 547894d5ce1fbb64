"""User model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trek.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from trek.models.map import Map


class User(TimestampMixin, Base):
    """User model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    maps: Mapped[list[Map]] = relationship(
        "Map",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
