"""Delayed media preview for catalog cards under a resting pointer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel

from src.config import settings

logger = logging.getLogger(__name__)

HoverPhase = Literal["idle", "pending", "active"]


class HoverPreviewState(BaseModel):
    """Snapshot of the scheduler: which card is waiting or previewing."""

    phase: HoverPhase = "idle"
    item_id: str | None = None


class HoverPreviewScheduler:
    """Activate a preview only after the pointer dwells on one item.

    At most one timer is armed at a time; every transition cancels the
    previous one before anything else happens.
    """

    def __init__(
        self,
        delay: float | None = None,
        on_change: Callable[[str | None], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.delay = settings.hover_preview_delay if delay is None else delay
        self._on_change = on_change
        self._loop = loop
        self._state = HoverPreviewState()
        self._timer: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def state(self) -> HoverPreviewState:
        return self._state

    @property
    def active_item_id(self) -> str | None:
        return self._state.item_id if self._state.phase == "active" else None

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def hover(self, item_id: str) -> None:
        """Pointer entered ``item_id``."""
        if self._closed:
            logger.debug("Ignoring hover on closed scheduler: %s", item_id)
            return
        if self._state.phase == "active" and self._state.item_id == item_id:
            return

        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("No running event loop, ignoring hover on %s", item_id)
                return

        self._cancel_timer()
        self._timer = loop.call_later(self.delay, self._on_timer, item_id)
        self._transition(HoverPreviewState(phase="pending", item_id=item_id))

    def leave(self) -> None:
        """Pointer left the current item."""
        self._cancel_timer()
        self._transition(HoverPreviewState())

    def reset(self) -> None:
        """Return to idle, e.g. when the listing is re-rendered."""
        self.leave()

    def close(self) -> None:
        """Cancel any pending preview and ignore further pointer events."""
        self.leave()
        self._closed = True

    def _on_timer(self, item_id: str) -> None:
        self._timer = None
        if self._state.phase != "pending" or self._state.item_id != item_id:
            return
        self._transition(HoverPreviewState(phase="active", item_id=item_id))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _transition(self, new_state: HoverPreviewState) -> None:
        previous_active = self.active_item_id
        self._state = new_state
        if self._on_change is not None and self.active_item_id != previous_active:
            self._on_change(self.active_item_id)
