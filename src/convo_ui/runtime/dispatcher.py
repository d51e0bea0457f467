"""
Action dispatch lifecycle.

``Idle -> Dispatching(action_id) -> Idle``. At most one action is in flight
per message; while one is, every dispatch request is refused, which keeps
two clicks from racing on the same value snapshot. The handler call is the
only suspension point in the engine. There is no cancellation or timeout:
a slow handler keeps the actions disabled until it settles.

``copy_code`` never reaches the handler: the dispatcher copies the code
field (or the raw message content) to the clipboard itself.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, JsonValue
from pydantic.alias_generators import to_camel

from convo_ui.errors import ActionHandlerError, ErrorContext
from convo_ui.runtime.clipboard import Clipboard, MemoryClipboard
from convo_ui.runtime.field_store import FieldStore
from convo_ui.runtime.synthesizer import CODE_FIELD_NAME
from convo_ui.specs import COPY_CODE_ACTION_ID, Message, UIDefinition
from convo_ui.utils.values import to_text

logger = logging.getLogger(__name__)

ActionHandler = Callable[[str, dict[str, Any]], Awaitable[None] | None]


class DispatchOutcome(StrEnum):
    """What a dispatch request ended up doing."""

    COPIED = "copied"  # built-in copy performed
    INVALID = "invalid"  # validation failed, handler not called
    DISPATCHED = "dispatched"  # handler settled successfully
    FAILED = "failed"  # handler (or clipboard) raised
    BLOCKED = "blocked"  # another action was in flight
    IGNORED = "ignored"  # read-only message


class ActionPayload(BaseModel):
    """Payload passed to the external handler."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    message_id: str
    action_id: str
    values: dict[str, JsonValue]
    timestamp: str

    def to_handler_dict(self) -> dict[str, Any]:
        """Wire shape: ``{messageId, actionId, values, timestamp}``."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class DispatchResult:
    """Result of one dispatch request."""

    outcome: DispatchOutcome
    action_id: str
    payload: ActionPayload | None = None
    error: ActionHandlerError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome in (DispatchOutcome.COPIED, DispatchOutcome.DISPATCHED)


def _iso_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ActionDispatcher:
    """Runs declared actions for one message."""

    def __init__(
        self,
        message: Message,
        store: FieldStore,
        handler: ActionHandler | None = None,
        clipboard: Clipboard | None = None,
        *,
        on_success: Callable[[], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.message = message
        self.store = store
        self.handler = handler
        self.clipboard = clipboard if clipboard is not None else MemoryClipboard()
        self.on_success = on_success
        self._clock = clock or (lambda: datetime.now(UTC))
        self._loading_action_id: str | None = None

    @property
    def loading_action_id(self) -> str | None:
        """Id of the action in flight, if any."""
        return self._loading_action_id

    @property
    def is_dispatching(self) -> bool:
        return self._loading_action_id is not None

    def build_payload(self, action_id: str) -> ActionPayload:
        return ActionPayload(
            message_id=self.message.id,
            action_id=action_id,
            values=self.store.snapshot(),
            timestamp=_iso_timestamp(self._clock()),
        )

    def copy_code(self) -> DispatchResult:
        """Copy the code field, falling back to the raw message content."""
        text = self.store.get(CODE_FIELD_NAME) or self.message.content
        try:
            self.clipboard.write_text(to_text(text))
        except Exception as e:
            logger.warning("Clipboard write failed for message %s: %s", self.message.id, e)
            return DispatchResult(
                outcome=DispatchOutcome.FAILED,
                action_id=COPY_CODE_ACTION_ID,
                error=ActionHandlerError(COPY_CODE_ACTION_ID, e),
            )
        logger.debug("Copied code from message %s", self.message.id)
        return DispatchResult(outcome=DispatchOutcome.COPIED, action_id=COPY_CODE_ACTION_ID)

    async def dispatch(
        self,
        action_id: str,
        definition: UIDefinition,
        *,
        read_only: bool = False,
    ) -> DispatchResult:
        """Run one action through validation and the external handler.

        Handler exceptions are logged and reported in the result; they are
        never re-raised.
        """
        if self._loading_action_id is not None:
            logger.debug(
                "Ignoring '%s': '%s' is still in flight", action_id, self._loading_action_id
            )
            return DispatchResult(outcome=DispatchOutcome.BLOCKED, action_id=action_id)

        if read_only:
            return DispatchResult(outcome=DispatchOutcome.IGNORED, action_id=action_id)

        if action_id == COPY_CODE_ACTION_ID:
            return self.copy_code()

        action = definition.get_action(action_id)
        if action is None:
            logger.debug("Action '%s' is not declared; dispatching without validation", action_id)
        elif action.requires_validation and not self.store.validate(definition):
            return DispatchResult(outcome=DispatchOutcome.INVALID, action_id=action_id)

        payload = self.build_payload(action_id)
        self._loading_action_id = action_id
        logger.debug("Dispatching '%s' for message %s", action_id, self.message.id)
        try:
            if self.handler is not None:
                result = self.handler(action_id, payload.to_handler_dict())
                if inspect.isawaitable(result):
                    await result
        except Exception as e:
            error = ActionHandlerError(action_id, e, ErrorContext(message_id=self.message.id))
            logger.error(
                "Action failed: %s",
                error,
                exc_info=e,
                extra={"message_id": self.message.id, "action_id": action_id},
            )
            return DispatchResult(
                outcome=DispatchOutcome.FAILED, action_id=action_id, payload=payload, error=error
            )
        finally:
            self._loading_action_id = None

        if self.on_success is not None:
            self.on_success()
        return DispatchResult(
            outcome=DispatchOutcome.DISPATCHED, action_id=action_id, payload=payload
        )
