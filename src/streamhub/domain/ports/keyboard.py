"""Port for the key events a rendering surface sends to one session."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

KeyListener = Callable[[str], None]


@runtime_checkable
class KeyboardPort(Protocol):
    @property
    def listener_count(self) -> int: ...

    def add_listener(self, listener: KeyListener) -> None: ...

    def remove_listener(self, listener: KeyListener) -> None: ...

    def dispatch(self, key: str) -> int: ...
