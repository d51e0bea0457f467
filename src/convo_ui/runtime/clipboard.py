"""
Clipboard capability.

Copying code is the only side effect the engine performs itself. The host
supplies the real clipboard; :class:`MemoryClipboard` serves headless hosts
and tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clipboard(Protocol):
    """Something that can receive text."""

    def write_text(self, text: str) -> None: ...


class MemoryClipboard:
    """Clipboard that keeps what was written in memory."""

    def __init__(self) -> None:
        self.history: list[str] = []

    def write_text(self, text: str) -> None:
        self.history.append(text)

    @property
    def text(self) -> str | None:
        """Most recently copied text."""
        return self.history[-1] if self.history else None
