"""Python counterpart of the browser-side state: API client and stores."""

from trek.client.api import TrekAPIError, TrekClient
from trek.client.gestures import LongPressDetector, ScreenPoint, new_marker_at
from trek.client.grouping import MarkerGroup, group_markers_by_category
from trek.client.state import (
    ActiveMapStore,
    CategoriesStore,
    MapSettingsStore,
    MarkersStore,
    TrekState,
)
from trek.client.storage import LocalStorage

__all__ = [
    "ActiveMapStore",
    "CategoriesStore",
    "LocalStorage",
    "LongPressDetector",
    "MapSettingsStore",
    "MarkerGroup",
    "MarkersStore",
    "ScreenPoint",
    "TrekAPIError",
    "TrekClient",
    "TrekState",
    "group_markers_by_category",
    "new_marker_at",
]
