"""Map gestures that create markers."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from trek import schemas

LONG_PRESS_SECONDS = 0.6
MOVE_TOLERANCE_PX = 10.0
NEW_MARKER_TITLE = "New marker"


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float

    def distance_to(self, other: ScreenPoint) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class LongPressDetector:
    """Tell a long press apart from a pan.

    ``press`` arms the detector, ``move`` beyond the tolerance disarms it, and
    ``poll`` fires ``on_trigger`` once the threshold has elapsed with the
    press still armed. ``context_menu`` (right click) fires immediately.
    """

    def __init__(
        self,
        on_trigger: Callable[[ScreenPoint], None],
        *,
        threshold: float = LONG_PRESS_SECONDS,
        tolerance: float = MOVE_TOLERANCE_PX,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_trigger = on_trigger
        self.threshold = threshold
        self.tolerance = tolerance
        self._clock = clock
        self._origin: ScreenPoint | None = None
        self._started_at = 0.0

    @property
    def pending(self) -> bool:
        return self._origin is not None

    def press(self, point: ScreenPoint, *, touches: int = 1) -> None:
        # Multi-touch is a pinch, never a long press.
        if touches != 1:
            self.cancel()
            return
        self._origin = point
        self._started_at = self._clock()

    def move(self, point: ScreenPoint) -> None:
        if self._origin is not None and self._origin.distance_to(point) > self.tolerance:
            self.cancel()

    def release(self) -> None:
        self.cancel()

    def cancel(self) -> None:
        self._origin = None

    def poll(self) -> bool:
        """Fire if the press has been held long enough; return whether it fired."""
        if self._origin is None:
            return False
        if self._clock() - self._started_at < self.threshold:
            return False
        origin = self._origin
        self._origin = None
        self._on_trigger(origin)
        return True

    def context_menu(self, point: ScreenPoint) -> None:
        self.cancel()
        self._on_trigger(point)


def new_marker_at(lat: float, lng: float, map_id: int) -> schemas.NewMarker:
    """Default payload for a marker dropped on the map."""
    return schemas.NewMarker(
        title=NEW_MARKER_TITLE,
        lat=lat,
        lng=lng,
        map_id=map_id,
        notes="",
        visitations=[],
    )
