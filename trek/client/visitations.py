"""Helpers for editing a marker's visit history."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from trek.schemas import Visitation


def sorted_visitations(visitations: Sequence[Visitation]) -> list[Visitation]:
    """Newest first; entries without a date sink to the bottom."""
    return sorted(visitations, key=lambda v: v.date, reverse=True)


def add_visitation_today(
    visitations: Sequence[Visitation], today: date | None = None
) -> list[Visitation]:
    """Append an entry for today.

    If an empty entry for today already exists, append a blank-dated row
    instead so the user has to pick the date.
    """
    day = (today or date.today()).isoformat()
    has_empty_today = any(v.date == day and not v.text for v in visitations)
    entry = Visitation(date="" if has_empty_today else day, text="")
    return [*visitations, entry]


def invalid_visitations(visitations: Sequence[Visitation]) -> list[int]:
    """Indexes of entries whose date is still blank."""
    return [index for index, v in enumerate(visitations) if not v.date.strip()]
