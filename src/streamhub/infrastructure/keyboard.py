"""In-process key event bus.

Each session owns one bus. The rendering surface forwards the key
presses aimed at that session; the session listens while open.
"""

from __future__ import annotations

import structlog

from streamhub.domain.ports.keyboard import KeyListener

log = structlog.get_logger(__name__)


class KeyEventBus:
    """Implements ``KeyboardPort``; dispatches keys to registered listeners."""

    def __init__(self) -> None:
        self._listeners: list[KeyListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: KeyListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            log.debug("key_listener_not_registered")

    def dispatch(self, key: str) -> int:
        """Deliver *key* to every listener; returns how many were notified."""
        # Listeners may unregister themselves while handling the key.
        listeners = list(self._listeners)
        for listener in listeners:
            listener(key)
        return len(listeners)
