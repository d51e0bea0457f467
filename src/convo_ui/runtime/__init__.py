"""
Message UI runtime.

Turns a chat message's UI definition into a stateful, validated,
action-dispatching surface.

This module provides:
- Schema resolution (explicit definition, synthesized code card, or error)
- Field value store and validator
- Stateless section/field renderer
- Action dispatcher with single in-flight action
- Layout state machines (card/inline/banner/modal)
- EngineController tying them together

Example usage:
    >>> from convo_ui.runtime import EngineController
    >>> from convo_ui.specs import Message
    >>>
    >>> controller = EngineController(Message(id="m1", content="```py\\nprint(1)\\n```",
    ...                                       message_type="code"))
    >>> controller.definition.title
    'Code Snippet'
"""

from convo_ui.runtime.clipboard import Clipboard, MemoryClipboard
from convo_ui.runtime.controller import EngineController
from convo_ui.runtime.dispatcher import (
    ActionDispatcher,
    ActionHandler,
    ActionPayload,
    DispatchOutcome,
    DispatchResult,
)
from convo_ui.runtime.field_store import (
    INVALID_FORMAT_MESSAGE,
    REQUIRED_MESSAGE,
    FieldStore,
    display_value,
)
from convo_ui.runtime.icons import ICONS, get_icon
from convo_ui.runtime.layout import (
    LayoutMachine,
    LayoutState,
    ModalLayout,
    OverlayManager,
    PersistentLayout,
    StackOverlayManager,
    create_layout,
)
from convo_ui.runtime.logging import setup_logging
from convo_ui.runtime.renderer import (
    render_actions,
    render_error_surface,
    render_field,
    render_modal_trigger,
    render_section,
    render_sections,
    render_surface,
)
from convo_ui.runtime.resolver import (
    Resolution,
    ResolutionStatus,
    parse_definition,
    resolve_definition,
)
from convo_ui.runtime.synthesizer import (
    CODE_FIELD_NAME,
    synthesize_definition,
    synthesize_definition_or_raise,
)

__all__ = [
    # Clipboard
    "Clipboard",
    "MemoryClipboard",
    # Controller
    "EngineController",
    # Dispatch
    "ActionDispatcher",
    "ActionHandler",
    "ActionPayload",
    "DispatchOutcome",
    "DispatchResult",
    # Field store
    "INVALID_FORMAT_MESSAGE",
    "REQUIRED_MESSAGE",
    "FieldStore",
    "display_value",
    # Icons
    "ICONS",
    "get_icon",
    # Layout
    "LayoutMachine",
    "LayoutState",
    "ModalLayout",
    "OverlayManager",
    "PersistentLayout",
    "StackOverlayManager",
    "create_layout",
    # Logging
    "setup_logging",
    # Rendering
    "render_actions",
    "render_error_surface",
    "render_field",
    "render_modal_trigger",
    "render_section",
    "render_sections",
    "render_surface",
    # Resolution
    "Resolution",
    "ResolutionStatus",
    "parse_definition",
    "resolve_definition",
    # Synthesis
    "CODE_FIELD_NAME",
    "synthesize_definition",
    "synthesize_definition_or_raise",
]
