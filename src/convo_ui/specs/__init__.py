"""
Message UI schema types.

Pydantic models for the schema carried in a chat message's metadata and for
the render tree the engine produces from it.
"""

from convo_ui.specs.actions import (
    COPY_CODE_ACTION_ID,
    ActionPosition,
    ActionSpec,
    ActionVariant,
)
from convo_ui.specs.condition import ConditionOperator, ConditionSpec
from convo_ui.specs.definition import Layout, ThemeSpec, ThemeVariant, UIDefinition
from convo_ui.specs.field import (
    DISPLAY_ONLY_TYPES,
    FieldSpec,
    FieldType,
    SelectOption,
    ValidationSpec,
)
from convo_ui.specs.message import Message, MessageType
from convo_ui.specs.section import DEFAULT_GRID_COLUMNS, SectionSpec, SectionType
from convo_ui.specs.view import ElementNode, TextNode, ViewNode, element

__all__ = [
    # Actions
    "COPY_CODE_ACTION_ID",
    "ActionPosition",
    "ActionSpec",
    "ActionVariant",
    # Conditions
    "ConditionOperator",
    "ConditionSpec",
    # Definition
    "Layout",
    "ThemeSpec",
    "ThemeVariant",
    "UIDefinition",
    # Fields
    "DISPLAY_ONLY_TYPES",
    "FieldSpec",
    "FieldType",
    "SelectOption",
    "ValidationSpec",
    # Message
    "Message",
    "MessageType",
    # Sections
    "DEFAULT_GRID_COLUMNS",
    "SectionSpec",
    "SectionType",
    # View
    "ElementNode",
    "TextNode",
    "ViewNode",
    "element",
]
