"""Pydantic records exchanged between the data-access layer and the API.

Fields are snake_case in Python and camelCase on the wire. Patch models rely
on ``model_fields_set``: a key that was never sent is left alone, a key sent
as ``null`` clears the field.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Rating = Annotated[int, Field(ge=1, le=10, strict=True)]
Coordinate = Annotated[float, Field(allow_inf_nan=False)]
Title = Annotated[str, Field(min_length=1, max_length=255)]
HexColor = Annotated[str, Field(pattern=r"^#[0-9a-fA-F]{3,8}$")]


class TrekModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PatchModel(TrekModel):
    """Sparse update payload."""

    required_when_set: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self) -> PatchModel:
        for name in self.required_when_set:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were explicitly provided."""
        return self.model_dump(exclude_unset=True)


class Visitation(TrekModel):
    date: str
    text: str = ""


# Users


class User(TrekModel):
    id: int
    name: str
    email: str


class NewUser(TrekModel):
    name: Title
    email: Annotated[str, Field(min_length=3, max_length=255)]


class UserPatch(PatchModel):
    required_when_set: ClassVar[tuple[str, ...]] = ("name", "email")

    name: Title | None = None
    email: Annotated[str, Field(min_length=3, max_length=255)] | None = None


# Maps


class Map(TrekModel):
    id: int
    title: str
    description: str | None = None
    user_id: int


class NewMap(TrekModel):
    title: Title
    description: str | None = None
    user_id: int


class MapPatch(PatchModel):
    required_when_set: ClassVar[tuple[str, ...]] = ("title",)

    title: Title | None = None
    description: str | None = None


# Categories


class Category(TrekModel):
    id: int
    title: str
    description: str | None = None
    color: str | None = None
    map_id: int
    user_id: int


class NewCategory(TrekModel):
    title: Title
    description: str | None = None
    color: HexColor | None = None
    map_id: int


class CategoryPatch(PatchModel):
    required_when_set: ClassVar[tuple[str, ...]] = ("title",)

    title: Title | None = None
    description: str | None = None
    color: HexColor | None = None


# Markers


class _MarkerFields(TrekModel):
    description: str | None = None
    country: str | None = None
    state: str | None = None
    postal: str | None = None
    city: str | None = None
    street: str | None = None
    house_number: str | None = None
    rating: Rating | None = None


class Marker(_MarkerFields):
    id: int
    title: str
    lat: float
    lng: float
    map_id: int
    category_id: int | None = None
    notes: str = ""
    visitations: list[Visitation] = Field(default_factory=list)
    category_color: str | None = None


class NewMarker(_MarkerFields):
    title: Title
    lat: Coordinate
    lng: Coordinate
    map_id: int
    category_id: int | None = None
    notes: str | None = ""
    visitations: list[Visitation] | None = Field(default_factory=list)


class MarkerPatch(PatchModel):
    required_when_set: ClassVar[tuple[str, ...]] = ("title", "lat", "lng", "map_id")

    title: Title | None = None
    lat: Coordinate | None = None
    lng: Coordinate | None = None
    map_id: int | None = None
    category_id: int | None = None
    description: str | None = None
    country: str | None = None
    state: str | None = None
    postal: str | None = None
    city: str | None = None
    street: str | None = None
    house_number: str | None = None
    notes: str | None = None
    rating: Rating | None = None
    visitations: list[Visitation] | None = None

    @model_validator(mode="after")
    def _position_pair(self) -> MarkerPatch:
        has_lat = "lat" in self.model_fields_set
        has_lng = "lng" in self.model_fields_set
        if has_lat != has_lng:
            raise ValueError("lat and lng must be updated together")
        return self
