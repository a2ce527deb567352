"""Tests for the delayed hover preview scheduler."""

from __future__ import annotations

import asyncio

import pytest

from src.services.catalog.hover_preview import HoverPreviewScheduler


class _ManualHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class _ManualLoop:
    """Deterministic stand-in for the event loop timer API."""

    def __init__(self):
        self.now = 0.0
        self._timers: list[_ManualHandle] = []

    def call_later(self, delay, callback, *args):
        handle = _ManualHandle(self.now + delay, callback, args)
        self._timers.append(handle)
        return handle

    def advance(self, seconds):
        self.now += seconds
        due = sorted(
            (h for h in self._timers if not h.cancelled and h.when <= self.now),
            key=lambda h: h.when,
        )
        for handle in due:
            self._timers.remove(handle)
            handle.callback(*handle.args)

    @property
    def live_timers(self):
        return [h for h in self._timers if not h.cancelled]


@pytest.fixture()
def loop():
    return _ManualLoop()


@pytest.fixture()
def changes():
    return []


@pytest.fixture()
def scheduler(loop, changes):
    return HoverPreviewScheduler(delay=2.0, on_change=changes.append, loop=loop)


def test_starts_idle(scheduler):
    assert scheduler.state.phase == "idle"
    assert scheduler.active_item_id is None
    assert not scheduler.has_pending_timer


def test_hover_without_event_loop_keeps_state(caplog):
    scheduler = HoverPreviewScheduler(delay=2.0)

    scheduler.hover("a")

    assert scheduler.state.phase == "idle"
    assert not scheduler.has_pending_timer
    assert "No running event loop" in caplog.text


def test_leaving_before_dwell_time_never_activates(scheduler, loop, changes):
    scheduler.hover("a")
    loop.advance(1.999)
    assert scheduler.state.phase == "pending"

    scheduler.leave()
    loop.advance(10)

    assert scheduler.state.phase == "idle"
    assert scheduler.active_item_id is None
    assert changes == []


def test_uninterrupted_dwell_activates(scheduler, loop, changes):
    scheduler.hover("a")
    loop.advance(2.0)

    assert scheduler.state.phase == "active"
    assert scheduler.active_item_id == "a"
    assert changes == ["a"]
    assert not scheduler.has_pending_timer


def test_switching_items_cancels_previous_timer(scheduler, loop, changes):
    scheduler.hover("a")
    loop.advance(1.5)
    scheduler.hover("b")

    assert len(loop.live_timers) == 1
    loop.advance(1.0)
    assert scheduler.state.phase == "pending"
    assert scheduler.state.item_id == "b"
    assert changes == []

    loop.advance(1.0)
    assert scheduler.active_item_id == "b"
    assert changes == ["b"]


def test_hovering_new_item_from_active_goes_pending(scheduler, loop, changes):
    scheduler.hover("a")
    loop.advance(2.0)
    scheduler.hover("b")

    assert scheduler.state.phase == "pending"
    assert scheduler.active_item_id is None
    assert changes == ["a", None]

    loop.advance(2.0)
    assert changes == ["a", None, "b"]


def test_leaving_active_item_returns_idle(scheduler, loop, changes):
    scheduler.hover("a")
    loop.advance(2.0)
    scheduler.leave()

    assert scheduler.state.phase == "idle"
    assert changes == ["a", None]


def test_rehovering_active_item_keeps_preview(scheduler, loop):
    scheduler.hover("a")
    loop.advance(2.0)
    scheduler.hover("a")

    assert scheduler.active_item_id == "a"
    assert loop.live_timers == []


def test_rehovering_pending_item_restarts_dwell(scheduler, loop):
    scheduler.hover("a")
    loop.advance(1.5)
    scheduler.hover("a")
    loop.advance(1.5)

    assert scheduler.state.phase == "pending"
    loop.advance(0.5)
    assert scheduler.active_item_id == "a"


def test_at_most_one_timer_outstanding(scheduler, loop):
    for item_id in ["a", "b", "c", "a", "d"]:
        scheduler.hover(item_id)

    assert len(loop.live_timers) == 1


def test_close_cancels_pending_timer_and_ignores_events(scheduler, loop, changes):
    scheduler.hover("a")
    scheduler.close()
    loop.advance(5)
    scheduler.hover("b")
    loop.advance(5)

    assert scheduler.state.phase == "idle"
    assert loop.live_timers == []
    assert changes == []


@pytest.mark.asyncio
async def test_runs_on_the_event_loop():
    activated = []
    scheduler = HoverPreviewScheduler(delay=0.05, on_change=activated.append)

    scheduler.hover("a")
    await asyncio.sleep(0.01)
    scheduler.leave()
    await asyncio.sleep(0.1)
    assert activated == []

    scheduler.hover("b")
    await asyncio.sleep(0.15)
    assert activated == ["b"]
    scheduler.close()
