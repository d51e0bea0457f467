"""
convo-ui - Declarative message UI engine.

Interprets the UI definition embedded in a chat message (or synthesized
from a code block) into an interactive, validated, action-dispatching
surface.
"""

from __future__ import annotations

from ._version import get_version
from .config import EngineConfig
from .errors import (
    ActionHandlerError,
    ConvoUIError,
    OverlayNotReadyError,
    SchemaParseError,
    SynthesisMiss,
    ValidationFailure,
)
from .runtime import EngineController, resolve_definition, synthesize_definition
from .specs import Message, UIDefinition
from .utils.condition_eval import evaluate

__version__ = get_version()

__all__ = [
    "__version__",
    "EngineConfig",
    "EngineController",
    "Message",
    "UIDefinition",
    "evaluate",
    "resolve_definition",
    "synthesize_definition",
    # Errors
    "ActionHandlerError",
    "ConvoUIError",
    "OverlayNotReadyError",
    "SchemaParseError",
    "SynthesisMiss",
    "ValidationFailure",
]
