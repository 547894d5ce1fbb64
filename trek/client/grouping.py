"""Group markers by category for the side panel."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from trek import schemas

UNCATEGORIZED_KEY = "uncategorized"
UNCATEGORIZED_TITLE = "Uncategorized"


@dataclass
class MarkerGroup:
    key: str
    title: str
    color: str | None = None
    markers: list[schemas.Marker] = field(default_factory=list)


def group_markers_by_category(
    markers: Iterable[schemas.Marker],
    categories: Iterable[schemas.Category] = (),
) -> list[MarkerGroup]:
    """Bucket markers by ``category_id``.

    Groups keep the order in which their first marker appears; the
    uncategorized bucket always comes last. A group's color is the first
    non-empty ``category_color`` among its markers.
    """
    titles = {str(category.id): category.title for category in categories}
    groups: dict[str, MarkerGroup] = {}

    for marker in markers:
        if marker.category_id is None:
            key = UNCATEGORIZED_KEY
            title = UNCATEGORIZED_TITLE
        else:
            key = str(marker.category_id)
            title = titles.get(key, "Category")

        group = groups.get(key)
        if group is None:
            group = groups[key] = MarkerGroup(key=key, title=title)
        if group.color is None and marker.category_color:
            group.color = marker.category_color
        group.markers.append(marker)

    ordered = [group for key, group in groups.items() if key != UNCATEGORIZED_KEY]
    if UNCATEGORIZED_KEY in groups:
        ordered.append(groups[UNCATEGORIZED_KEY])
    return ordered
