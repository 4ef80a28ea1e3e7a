"""Tests for the in-process key event bus."""

from __future__ import annotations

from unittest.mock import MagicMock

from streamhub.domain.ports import KeyboardPort
from streamhub.infrastructure.keyboard import KeyEventBus


class TestKeyEventBus:
    def test_satisfies_port(self) -> None:
        assert isinstance(KeyEventBus(), KeyboardPort)

    def test_dispatch_to_listeners(self) -> None:
        bus = KeyEventBus()
        listener = MagicMock()
        bus.add_listener(listener)
        assert bus.dispatch("Escape") == 1
        listener.assert_called_once_with("Escape")

    def test_add_is_idempotent(self) -> None:
        bus = KeyEventBus()
        listener = MagicMock()
        bus.add_listener(listener)
        bus.add_listener(listener)
        assert bus.listener_count == 1

    def test_remove_unknown_is_noop(self) -> None:
        bus = KeyEventBus()
        bus.remove_listener(MagicMock())
        assert bus.listener_count == 0

    def test_listener_may_unregister_during_dispatch(self) -> None:
        bus = KeyEventBus()
        other = MagicMock()

        def self_removing(key: str) -> None:
            bus.remove_listener(self_removing)

        bus.add_listener(self_removing)
        bus.add_listener(other)
        assert bus.dispatch("Escape") == 2
        other.assert_called_once_with("Escape")
        assert bus.listener_count == 1
