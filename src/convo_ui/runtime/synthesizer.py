"""
Implicit UI definition synthesis.

Builds a code card for messages that carry code but no explicit
``uiDefinition``: an optional text preamble, one read-only ``code`` field,
and the built-in copy action.
"""

from __future__ import annotations

import logging
import re

from convo_ui.config import EngineConfig
from convo_ui.errors import ErrorContext, SynthesisMiss
from convo_ui.specs import (
    COPY_CODE_ACTION_ID,
    ActionSpec,
    ActionVariant,
    FieldSpec,
    FieldType,
    Layout,
    Message,
    SectionSpec,
    SectionType,
    ThemeSpec,
    ThemeVariant,
    UIDefinition,
)

logger = logging.getLogger(__name__)

# Field name the copy action reads from
CODE_FIELD_NAME = "code_content"

# Optional language tag, mandatory whitespace, then the shortest body up to
# the next closing fence
_FENCE_RE = re.compile(r"```(\w+)?\s(.*?)```", re.DOTALL)


def _split_fenced_block(content: str) -> tuple[str | None, str, str] | None:
    """Split content around its first fenced block.

    Returns:
        ``(language, code, remaining_text)`` or ``None`` if no fence matched.
        ``remaining_text`` is the content with the block removed, trimmed.
    """
    match = _FENCE_RE.search(content)
    if match is None:
        return None
    remaining = (content[: match.start()] + content[match.end() :]).strip()
    return match.group(1), match.group(2), remaining


def synthesize_definition(
    message: Message, config: EngineConfig | None = None
) -> UIDefinition | None:
    """Generate a code card definition for a message without an explicit schema.

    Applies only to ``code`` messages or messages flagged ``isImplicit``;
    returns ``None`` for everything else. Pure: the same message always
    yields an equal definition.
    """
    if not (message.is_code or message.is_implicit):
        return None

    config = config or EngineConfig()
    metadata = message.metadata
    content = message.content or ""

    language = str(metadata.get("language") or config.default_language)
    code = content
    preamble = ""

    split = _split_fenced_block(content)
    if split is not None:
        fence_language, code, preamble = split
        language = fence_language or language
    else:
        logger.debug("No fenced block in message %s; using whole content", message.id)

    sections: list[SectionSpec] = []
    if preamble:
        sections.append(SectionSpec(type=SectionType.BODY, content=preamble, class_name="mb-3"))

    sections.append(
        SectionSpec(
            type=SectionType.FIELD,
            fields=[
                FieldSpec(
                    name=CODE_FIELD_NAME,
                    type=FieldType.CODE,
                    label=language.upper(),
                    value=code,
                    editable=False,
                    class_name="font-mono text-xs",
                )
            ],
        )
    )

    source = metadata.get("source")
    title = metadata.get("title")
    return UIDefinition(
        layout=Layout.CARD,
        title=str(title) if title else config.default_title,
        description=f"Source: {source}" if source else None,
        theme=ThemeSpec(variant=ThemeVariant.INFO),
        sections=sections,
        actions=[
            ActionSpec(
                id=COPY_CODE_ACTION_ID,
                label="Copy Code",
                icon="check",
                variant=ActionVariant.GHOST,
            )
        ],
    )


def synthesize_definition_or_raise(
    message: Message, config: EngineConfig | None = None
) -> UIDefinition:
    """Like :func:`synthesize_definition` but raise when nothing applies.

    Raises:
        SynthesisMiss: If the message is neither a code nor an implicit message.
    """
    definition = synthesize_definition(message, config)
    if definition is None:
        raise SynthesisMiss(
            f"No implicit definition for message type '{message.message_type}'",
            ErrorContext(message_id=message.id),
        )
    return definition
