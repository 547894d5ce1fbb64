import pytest

from trek.client.gestures import (
    LONG_PRESS_SECONDS,
    NEW_MARKER_TITLE,
    LongPressDetector,
    ScreenPoint,
    new_marker_at,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def detector() -> tuple[LongPressDetector, FakeClock, list[ScreenPoint]]:
    clock = FakeClock()
    fired: list[ScreenPoint] = []
    return LongPressDetector(fired.append, clock=clock), clock, fired


def test_long_press_fires_after_threshold(detector) -> None:
    press, clock, fired = detector
    origin = ScreenPoint(10, 10)

    press.press(origin)
    clock.now += LONG_PRESS_SECONDS - 0.01
    assert press.poll() is False

    clock.now += 0.02
    assert press.poll() is True
    assert fired == [origin]
    assert press.poll() is False


def test_small_moves_keep_the_press(detector) -> None:
    press, clock, fired = detector

    press.press(ScreenPoint(0, 0))
    press.move(ScreenPoint(6, 8))
    clock.now += 1
    press.poll()

    assert fired == [ScreenPoint(0, 0)]


def test_pan_cancels_the_press(detector) -> None:
    press, clock, fired = detector

    press.press(ScreenPoint(0, 0))
    press.move(ScreenPoint(11, 0))
    clock.now += 1

    assert press.poll() is False
    assert fired == []


def test_release_before_threshold(detector) -> None:
    press, clock, fired = detector

    press.press(ScreenPoint(0, 0))
    clock.now += 0.3
    press.release()
    clock.now += 1

    assert press.poll() is False
    assert not press.pending
    assert fired == []


def test_multi_touch_is_ignored(detector) -> None:
    press, clock, fired = detector

    press.press(ScreenPoint(0, 0), touches=2)
    clock.now += 1

    assert press.poll() is False
    assert fired == []


def test_context_menu_fires_immediately(detector) -> None:
    press, _clock, fired = detector

    press.context_menu(ScreenPoint(5, 5))

    assert fired == [ScreenPoint(5, 5)]


def test_new_marker_defaults() -> None:
    new = new_marker_at(52.37, 4.89, map_id=3)

    assert new.title == NEW_MARKER_TITLE == "New marker"
    assert (new.lat, new.lng, new.map_id) == (52.37, 4.89, 3)
    assert new.notes == ""
    assert new.visitations == []
    assert new.category_id is None
