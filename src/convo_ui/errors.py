"""
Error types for message UI schema resolution, validation, and dispatch.
"""

from dataclasses import dataclass
from typing import Any, Optional


class ConvoUIError(Exception):
    """Base exception for all message UI engine errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class SchemaParseError(ConvoUIError):
    """
    Raised when a message's ``uiDefinition`` cannot be turned into a schema.

    Examples:
    - Malformed JSON string
    - Wrong shape (``sections`` not a list, unknown layout)
    - Field values that are not JSON-representable
    """

    pass


class SynthesisMiss(ConvoUIError):
    """
    Raised when implicit synthesis finds nothing to render.

    Only a failure for ``custom`` messages; for any other message type it
    simply means no custom rendering applies.
    """

    pass


class ValidationFailure(ConvoUIError):
    """
    Raised when one or more field checks fail.

    Attributes:
        errors: Mapping of field name to human-readable message
    """

    def __init__(
        self,
        errors: dict[str, str],
        context: Optional["ErrorContext"] = None,
    ):
        self.errors = dict(errors)
        names = ", ".join(sorted(self.errors))
        super().__init__(f"Validation failed for: {names}", context)


class ActionHandlerError(ConvoUIError):
    """
    Wraps an exception thrown by the external action handler.

    Attributes:
        action_id: Action that was being dispatched
        cause: The original exception
    """

    def __init__(
        self,
        action_id: str,
        cause: BaseException,
        context: Optional["ErrorContext"] = None,
    ):
        self.action_id = action_id
        self.cause = cause
        super().__init__(f"Action '{action_id}' failed: {cause}", context)


class OverlayNotReadyError(ConvoUIError):
    """Raised when an overlay is mounted before the host accepts overlays."""

    pass


@dataclass
class ErrorContext:
    """
    Where in a message an error occurred.

    Attributes:
        message_id: Id of the message being rendered
        path: Optional dotted path into the schema (``sections.0.fields.2``)
    """

    message_id: str
    path: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "message msg-1 at sections.0.fields.2"
        """
        location = f"message {self.message_id}"
        if self.path:
            location += f" at {self.path}"
        return location


def make_schema_error(
    message: str,
    message_id: str,
    loc: tuple[Any, ...] | None = None,
) -> SchemaParseError:
    """
    Helper to create a SchemaParseError with context.

    Args:
        message: Error description
        message_id: Id of the offending message
        loc: Optional location tuple as reported by pydantic

    Returns:
        SchemaParseError with context attached
    """
    path = ".".join(str(part) for part in loc) if loc else None
    return SchemaParseError(message, ErrorContext(message_id=message_id, path=path))
