"""
Chat message record consumed by the engine.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MessageType:
    """Message types the engine reacts to."""

    CODE = "code"
    CUSTOM = "custom"


class Message(BaseModel):
    """
    A chat message as handed over by the thread layer.

    ``metadata`` is free-form; the keys read by the engine are
    ``uiDefinition``, ``isImplicit``, ``language``, ``source`` and ``title``.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str = ""
    message_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("content", mode="before")
    @classmethod
    def _missing_content_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _missing_metadata_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def ui_definition(self) -> Any:
        """Raw explicit definition (structured value or JSON string), if any."""
        return self.metadata.get("uiDefinition")

    @property
    def is_implicit(self) -> bool:
        return bool(self.metadata.get("isImplicit"))

    @property
    def is_code(self) -> bool:
        return self.message_type == MessageType.CODE

    @property
    def is_custom(self) -> bool:
        return self.message_type == MessageType.CUSTOM

    def resolution_key(self) -> tuple[str, str, str | None]:
        """Key whose change requires the schema to be resolved again."""
        return (self.id, json.dumps(self.metadata, sort_keys=True, default=str), self.message_type)
