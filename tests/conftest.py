"""Shared pytest fixtures for convo-ui tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from convo_ui.runtime import MemoryClipboard, StackOverlayManager
from convo_ui.specs import (
    ActionSpec,
    ConditionSpec,
    FieldSpec,
    Layout,
    Message,
    SectionSpec,
    UIDefinition,
    ValidationSpec,
)


@pytest.fixture
def fixed_clock():
    """Clock returning a constant instant."""
    moment = datetime(2024, 1, 15, 10, 30, 45, 123000, tzinfo=UTC)
    return lambda: moment


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def overlays() -> StackOverlayManager:
    return StackOverlayManager(ready=True)


@pytest.fixture
def handler() -> AsyncMock:
    """Async external action handler."""
    return AsyncMock(return_value=None)


@pytest.fixture
def form_definition() -> UIDefinition:
    """A card with a required name, a status select, and a conditional note."""
    return UIDefinition(
        layout=Layout.CARD,
        title="Request access",
        sections=[
            SectionSpec(type="header", content="Access request"),
            SectionSpec(
                type="field",
                fields=[
                    FieldSpec(name="name", type="text", label="Name", required=True),
                    FieldSpec(
                        name="status",
                        type="select",
                        label="Status",
                        value="open",
                        options=["open", "done"],
                    ),
                    FieldSpec(
                        name="note",
                        type="textarea",
                        label="Note",
                        required=True,
                        condition=ConditionSpec(field="status", operator="equals", value="done"),
                    ),
                    FieldSpec(
                        name="email",
                        type="text",
                        label="Email",
                        validation=ValidationSpec(pattern=r"^[^@]+@[^@]+$"),
                    ),
                ],
            ),
        ],
        actions=[
            ActionSpec(id="submit", label="Submit", icon="send", requires_validation=True),
            ActionSpec(id="cancel", label="Cancel", variant="ghost"),
        ],
    )


@pytest.fixture
def form_message(form_definition: UIDefinition) -> Message:
    """Custom message carrying ``form_definition`` as structured metadata."""
    return Message(
        id="msg-1",
        content="Access request",
        message_type="custom",
        metadata={"uiDefinition": form_definition.model_dump(by_alias=True, exclude_none=True)},
    )


@pytest.fixture
def code_message() -> Message:
    return Message(
        id="msg-code",
        content='Intro text\n```json\n{"a":1}\n```',
        message_type="code",
    )
