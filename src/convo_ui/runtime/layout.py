"""
Layout state machines.

A UI definition's ``layout`` selects one machine for the life of the
message:

- ``card``, ``inline`` and ``banner`` share :class:`PersistentLayout`: one
  surface, mounted while visible. A successful dispatch marks the message
  dismissible.
- ``modal`` uses :class:`ModalLayout`: ``CLOSED -> OPEN -> CLOSED``. The
  surface lives in an overlay, mounted through an injected
  :class:`OverlayManager` only once the host reports it is ready.

Layouts never own field values, so opening or closing a modal does not
touch the field store.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Protocol, runtime_checkable

from convo_ui.errors import OverlayNotReadyError
from convo_ui.specs import ElementNode, Layout

logger = logging.getLogger(__name__)

OverlayHandle = int

# =============================================================================
# Overlay Manager
# =============================================================================


@runtime_checkable
class OverlayManager(Protocol):
    """Host capability for mounting content above the chat stream."""

    def is_ready(self) -> bool: ...

    def mount(self, content: ElementNode) -> OverlayHandle: ...

    def update(self, handle: OverlayHandle, content: ElementNode) -> None: ...

    def unmount(self, handle: OverlayHandle) -> None: ...


class StackOverlayManager:
    """In-process overlay manager keeping mounted overlays in mount order."""

    def __init__(self, ready: bool = True) -> None:
        self._ready = ready
        self._overlays: dict[OverlayHandle, ElementNode] = {}
        self._next_handle: OverlayHandle = 1

    def mark_ready(self) -> None:
        """Signal that the host can now accept overlays."""
        self._ready = True

    def is_ready(self) -> bool:
        return self._ready

    def mount(self, content: ElementNode) -> OverlayHandle:
        if not self._ready:
            raise OverlayNotReadyError("Overlay host is not ready")
        handle = self._next_handle
        self._next_handle += 1
        self._overlays[handle] = content
        return handle

    def update(self, handle: OverlayHandle, content: ElementNode) -> None:
        if handle in self._overlays:
            self._overlays[handle] = content

    def unmount(self, handle: OverlayHandle) -> None:
        self._overlays.pop(handle, None)

    @property
    def overlays(self) -> list[ElementNode]:
        """Currently mounted overlays, oldest first."""
        return list(self._overlays.values())


# =============================================================================
# Layout Machines
# =============================================================================


class LayoutState(StrEnum):
    """States across all layout machines."""

    VISIBLE = "visible"
    DISMISSED = "dismissed"
    CLOSED = "closed"
    OPEN = "open"


class LayoutMachine(ABC):
    """Common interface for layout machines."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.state: LayoutState = self.initial_state()

    @abstractmethod
    def initial_state(self) -> LayoutState: ...

    @abstractmethod
    def present(self, content: ElementNode, trigger: ElementNode | None) -> ElementNode | None:
        """Place rendered content and return what belongs in the chat stream."""

    @abstractmethod
    def on_action_succeeded(self) -> None:
        """React to a successful dispatch."""

    @property
    def is_modal(self) -> bool:
        return self.layout is Layout.MODAL

    def _transition(self, new_state: LayoutState) -> None:
        if new_state is not self.state:
            logger.debug("Layout %s: %s -> %s", self.layout, self.state, new_state)
            self.state = new_state


class PersistentLayout(LayoutMachine):
    """Card, inline and banner layouts."""

    def __init__(self, layout: Layout) -> None:
        super().__init__(layout)
        self.dismissible = False

    def initial_state(self) -> LayoutState:
        return LayoutState.VISIBLE

    def present(self, content: ElementNode, trigger: ElementNode | None) -> ElementNode | None:
        if self.state is LayoutState.VISIBLE:
            return content
        return None

    def on_action_succeeded(self) -> None:
        self.dismissible = True

    def dismiss(self) -> None:
        self._transition(LayoutState.DISMISSED)


class ModalLayout(LayoutMachine):
    """Modal layout: an inline trigger plus an overlay while open."""

    def __init__(self, overlays: OverlayManager) -> None:
        super().__init__(Layout.MODAL)
        self.overlays = overlays
        self._handle: OverlayHandle | None = None

    def initial_state(self) -> LayoutState:
        return LayoutState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is LayoutState.OPEN

    @property
    def is_mounted(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        self._transition(LayoutState.OPEN)

    def close(self) -> None:
        """Close from the scrim, the close control, or a successful dispatch."""
        self._transition(LayoutState.CLOSED)
        if self._handle is not None:
            self.overlays.unmount(self._handle)
            self._handle = None

    def present(self, content: ElementNode, trigger: ElementNode | None) -> ElementNode | None:
        if self.is_open and self.overlays.is_ready():
            if self._handle is None:
                self._handle = self.overlays.mount(content)
            else:
                self.overlays.update(self._handle, content)
        return trigger

    def on_action_succeeded(self) -> None:
        self.close()


def create_layout(layout: Layout, overlays: OverlayManager | None = None) -> LayoutMachine:
    """Select the layout machine for a definition's layout."""
    if layout is Layout.MODAL:
        return ModalLayout(overlays if overlays is not None else StackOverlayManager())
    return PersistentLayout(layout)
