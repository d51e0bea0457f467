"""
Schema resolution for a chat message.

Decides, in priority order, whether a message renders from its explicit
``uiDefinition``, from a synthesized code card, not at all (plain text
fallback), or as the error surface.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from convo_ui.config import EngineConfig
from convo_ui.errors import ConvoUIError, ErrorContext, SynthesisMiss, make_schema_error
from convo_ui.runtime.synthesizer import synthesize_definition
from convo_ui.specs import Message, UIDefinition

logger = logging.getLogger(__name__)


class ResolutionStatus(StrEnum):
    """Outcome of resolving a message's schema."""

    RESOLVED = "resolved"
    NOT_APPLICABLE = "not_applicable"
    ERROR = "error"


@dataclass(frozen=True)
class Resolution:
    """Result of :func:`resolve_definition`."""

    status: ResolutionStatus
    definition: UIDefinition | None = None
    error: ConvoUIError | None = None
    implicit: bool = False

    @property
    def is_error(self) -> bool:
        return self.status is ResolutionStatus.ERROR


def parse_definition(raw: Any, message_id: str) -> UIDefinition | None:
    """Turn a raw ``uiDefinition`` value into a validated schema.

    Args:
        raw: Structured value or JSON string.
        message_id: Used for error context.

    Returns:
        The definition, or ``None`` when the value deserializes to ``null``.

    Raises:
        SchemaParseError: If the value is not valid JSON or has the wrong shape.
    """
    data = raw
    if isinstance(raw, str | bytes):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise make_schema_error(f"Invalid JSON: {e.msg}", message_id) from e

    if data is None:
        return None

    if isinstance(data, UIDefinition):
        return data

    try:
        return UIDefinition.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        raise make_schema_error(
            f"{first['msg']} ({e.error_count()} error(s))", message_id, first["loc"]
        ) from e


def resolve_definition(message: Message, config: EngineConfig | None = None) -> Resolution:
    """Resolve the UI definition for a message.

    Never raises: parse failures and failed ``custom`` messages come back as
    an ``ERROR`` resolution carrying the underlying exception.
    """
    raw = message.ui_definition
    implicit = False

    if raw is not None and raw != "":
        try:
            definition = parse_definition(raw, message.id)
        except ConvoUIError as e:
            logger.warning(
                "Failed to parse UI definition: %s",
                e,
                exc_info=e.__cause__,
                extra={"message_id": message.id},
            )
            return Resolution(status=ResolutionStatus.ERROR, error=e)
    else:
        definition = synthesize_definition(message, config)
        implicit = definition is not None

    if definition is not None:
        logger.debug(
            "Resolved %s definition for message %s (%d sections)",
            "implicit" if implicit else "explicit",
            message.id,
            len(definition.sections),
        )
        return Resolution(
            status=ResolutionStatus.RESOLVED, definition=definition, implicit=implicit
        )

    if message.is_custom:
        error = SynthesisMiss(
            "Custom message produced no UI definition",
            ErrorContext(message_id=message.id),
        )
        logger.warning("%s", error)
        return Resolution(status=ResolutionStatus.ERROR, error=error)

    return Resolution(status=ResolutionStatus.NOT_APPLICABLE)
