"""Tests for the scrub view auto-scroller."""

from uuid import uuid4

import pytest

from or_mastery.domain.errors import ValidationError
from or_mastery.domain.models import Procedure
from or_mastery.services.scrub import (
    DEFAULT_SPEED,
    EMPTY_SECTION_TEXT,
    AutoScroller,
    scrub_panel,
)


def _opened() -> AutoScroller:
    scroller = AutoScroller()
    scroller.open("workflow", content_height=100, viewport_height=50)
    return scroller


def test_open_starts_at_top_with_defaults() -> None:
    scroller = _opened()

    assert scroller.is_open
    assert scroller.running
    assert scroller.offset == 0
    assert scroller.speed == DEFAULT_SPEED == 18


def test_tick_advances_by_speed() -> None:
    scroller = _opened()

    assert scroller.tick(1.0) == pytest.approx(18)


def test_hover_and_toggle_pause_scrolling() -> None:
    scroller = _opened()
    scroller.hover(True)
    assert scroller.tick(1.0) == 0

    scroller.hover(False)
    assert scroller.toggle() is False
    assert scroller.tick(1.0) == 0


def test_wraps_to_top_after_pause() -> None:
    scroller = _opened()

    scroller.tick(2.0)
    assert scroller.tick(1.0) == 50
    assert scroller.tick(0.5) == 50
    assert scroller.tick(0.3) == 0
    assert scroller.tick(1.0) == pytest.approx(18)


def test_short_content_does_not_scroll() -> None:
    scroller = AutoScroller()
    scroller.open("draping", content_height=40, viewport_height=50)

    assert scroller.tick(5.0) == 0


def test_close_stops_and_reopen_restores_defaults() -> None:
    scroller = _opened()
    scroller.set_speed("fast")
    scroller.toggle()
    scroller.tick(1.0)

    scroller.close()
    assert not scroller.running
    assert scroller.tick(1.0) == 0

    scroller.open("instruments", content_height=100, viewport_height=50)
    assert scroller.speed == DEFAULT_SPEED
    assert scroller.enabled
    assert scroller.offset == 0


def test_set_speed_accepts_presets_and_rejects_bad_values() -> None:
    scroller = _opened()

    scroller.set_speed("slow")
    assert scroller.speed == 10
    scroller.set_speed(22)
    assert scroller.speed == 22

    with pytest.raises(ValidationError):
        scroller.set_speed("warp")
    with pytest.raises(ValidationError):
        scroller.set_speed(0)


def test_resize_clamps_offset() -> None:
    scroller = _opened()
    scroller.tick(2.0)

    scroller.resize(content_height=60, viewport_height=50)

    assert scroller.offset == 10


def test_scrub_panel_uses_placeholder_for_blank_notes() -> None:
    procedure = Procedure(
        id=uuid4(),
        user_id=uuid4(),
        surgeon_id=uuid4(),
        name="Whipple",
        draping="   ",
        instruments_trays="Major tray\nVascular set",
    )

    assert scrub_panel(procedure, "draping").body == EMPTY_SECTION_TEXT
    assert scrub_panel(procedure, "workflow").body == EMPTY_SECTION_TEXT
    panel = scrub_panel(procedure, "instruments")
    assert panel.title == "Instruments / Trays"
    assert panel.body == "Major tray\nVascular set"


def test_unknown_section_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AutoScroller().open("closing", content_height=1, viewport_height=1)
