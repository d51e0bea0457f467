"""
Engine controller: the top-level object for one rendered message.

Owns the resolved schema, the field store, the action dispatcher, and the
layout machine. The host feeds it messages and user input and asks it for
a render tree.

Lifecycle:

- A new message id discards the field store, the dispatcher and the layout.
- A change to the same message's metadata or type resolves the schema
  again: errors are cleared and newly named fields are seeded, but edited
  values are kept.
- A resolution error is terminal for the message: the error surface is
  shown and no other machinery runs until the message changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from functools import partial
from typing import Any

from convo_ui.config import EngineConfig
from convo_ui.runtime.clipboard import Clipboard, MemoryClipboard
from convo_ui.runtime.dispatcher import (
    ActionDispatcher,
    ActionHandler,
    DispatchOutcome,
    DispatchResult,
)
from convo_ui.runtime.field_store import FieldStore
from convo_ui.runtime.layout import (
    LayoutMachine,
    LayoutState,
    ModalLayout,
    OverlayManager,
    PersistentLayout,
    create_layout,
)
from convo_ui.runtime.renderer import (
    render_error_surface,
    render_modal_trigger,
    render_surface,
)
from convo_ui.runtime.resolver import Resolution, resolve_definition
from convo_ui.specs import ElementNode, Message, UIDefinition

logger = logging.getLogger(__name__)


class EngineController:
    """
    Interprets one message's UI definition.

    Example:
        controller = EngineController(message, on_action=handler)
        tree = controller.render()
        controller.set_field_value("name", "Ada")
        result = await controller.handle_action("submit")
    """

    def __init__(
        self,
        message: Message,
        *,
        on_action: ActionHandler | None = None,
        read_only: bool = False,
        config: EngineConfig | None = None,
        overlays: OverlayManager | None = None,
        clipboard: Clipboard | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or EngineConfig()
        self.read_only = read_only
        self.on_action = on_action
        self.overlays = overlays
        self.clipboard = clipboard if clipboard is not None else MemoryClipboard()
        self._clock = clock

        self.message = message
        self.store = FieldStore()
        self.dispatcher = self._new_dispatcher(message)
        self.layout: LayoutMachine | None = None
        self.resolution: Resolution = self._resolve(message)
        self._resolution_key = message.resolution_key()

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _new_dispatcher(self, message: Message) -> ActionDispatcher:
        dispatcher = ActionDispatcher(
            message,
            self.store,
            self.on_action,
            self.clipboard,
            clock=self._clock,
        )
        dispatcher.on_success = partial(self._on_dispatch_success, dispatcher)
        return dispatcher

    def _resolve(self, message: Message) -> Resolution:
        resolution = resolve_definition(message, self.config)
        definition = resolution.definition
        if definition is not None:
            self.store.seed(definition)
            if self.layout is None or self.layout.layout is not definition.layout:
                self.layout = create_layout(definition.layout, self.overlays)
        return resolution

    def update_message(self, message: Message) -> bool:
        """Accept a new version of the message.

        Returns:
            True if the schema was resolved again.
        """
        key = message.resolution_key()
        if key == self._resolution_key:
            self.message = message
            self.dispatcher.message = message
            return False

        if message.id != self.message.id:
            logger.debug("Message changed %s -> %s; resetting state", self.message.id, message.id)
            if isinstance(self.layout, ModalLayout):
                self.layout.close()
            self.store = FieldStore()
            self.layout = None
            self.dispatcher = self._new_dispatcher(message)
        else:
            self.store.clear_errors()
            self.dispatcher.message = message

        self.message = message
        self.resolution = self._resolve(message)
        self._resolution_key = key
        return True

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def definition(self) -> UIDefinition | None:
        return self.resolution.definition

    @property
    def has_error(self) -> bool:
        return self.resolution.is_error

    @property
    def values(self) -> Mapping[str, Any]:
        return self.store.values

    @property
    def errors(self) -> Mapping[str, str]:
        return self.store.errors

    @property
    def loading_action_id(self) -> str | None:
        return self.dispatcher.loading_action_id

    @property
    def visible(self) -> bool:
        """Whether the message's surface is currently shown."""
        if self.layout is None:
            return False
        return self.layout.state in (LayoutState.VISIBLE, LayoutState.OPEN)

    @property
    def dismissible(self) -> bool:
        """Set once a non-modal message's action has succeeded."""
        return isinstance(self.layout, PersistentLayout) and self.layout.dismissible

    def _is_interactive(self) -> bool:
        return self.definition is not None and not self.has_error

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def set_field_value(self, name: str, value: Any) -> bool:
        """Apply a user edit.

        Returns:
            False if the edit was refused (read-only, or nothing rendered).
        """
        if self.read_only or not self._is_interactive():
            logger.debug("Refusing edit to '%s' on message %s", name, self.message.id)
            return False
        self.store.set_value(name, value)
        return True

    async def handle_action(self, action_id: str) -> DispatchResult:
        """Dispatch an action click."""
        definition = self.definition
        if definition is None or self.has_error:
            return DispatchResult(outcome=DispatchOutcome.IGNORED, action_id=action_id)
        return await self.dispatcher.dispatch(action_id, definition, read_only=self.read_only)

    def copy_to_clipboard(self, text: str) -> None:
        """Copy control on a read-only code block."""
        self.clipboard.write_text(text)

    def open_modal(self) -> None:
        if isinstance(self.layout, ModalLayout):
            self.layout.open()

    def close_modal(self) -> None:
        if isinstance(self.layout, ModalLayout):
            self.layout.close()

    def dismiss(self) -> None:
        if isinstance(self.layout, PersistentLayout):
            self.layout.dismiss()

    def _on_dispatch_success(self, dispatcher: ActionDispatcher) -> None:
        # Only the current message's dispatcher drives the layout
        if dispatcher is not self.dispatcher:
            logger.debug("Ignoring action success from replaced message %s", dispatcher.message.id)
            return
        if self.layout is not None:
            self.layout.on_action_succeeded()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> ElementNode | None:
        """Render what belongs in the chat stream.

        Returns the error surface for a failed resolution, None when no
        custom rendering applies (the host falls back to plain text) or the
        surface has been dismissed, otherwise the surface itself (or, for a
        modal, its trigger button while the overlay is mounted separately).
        """
        if self.has_error:
            return render_error_surface(self.message)

        definition = self.definition
        if definition is None or self.layout is None:
            return None

        content = render_surface(
            definition,
            self.store.values,
            self.store.errors,
            loading_action_id=self.loading_action_id,
            read_only=self.read_only,
        )
        trigger = render_modal_trigger(definition) if self.layout.is_modal else None
        return self.layout.present(content, trigger)
