"""Auto-hiding player controls (cancel-and-restart debounce)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

log = structlog.get_logger(__name__)

DEFAULT_HIDE_AFTER_SECONDS = 3.0


class ControlsAutoHide:
    """Owns the single pending hide timer of one session.

    Every ``show()`` cancels the previous timer before arming a new one,
    so only the most recent call can flip visibility off.
    """

    def __init__(
        self,
        *,
        hide_after: float = DEFAULT_HIDE_AFTER_SECONDS,
        on_change: Callable[[bool], None] | None = None,
    ) -> None:
        self._hide_after = hide_after
        self._on_change = on_change
        self._handle: asyncio.TimerHandle | None = None
        self._visible = True

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _set_visible(self, value: bool) -> None:
        if value == self._visible:
            return
        self._visible = value
        if self._on_change is not None:
            self._on_change(value)

    def _hide(self) -> None:
        self._handle = None
        self._set_visible(False)

    def show(self) -> None:
        """Make controls visible and restart the inactivity timer.

        Must be called from inside a running event loop.
        """
        self.cancel()
        self._set_visible(True)
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._hide_after, self._hide)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
