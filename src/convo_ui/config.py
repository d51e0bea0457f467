"""
Engine configuration from environment variables.

Only presentation defaults live here. The reserved ``copy_code`` action id
and the ``code_content`` field name are part of the schema contract and are
not configurable.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_CODE_TITLE = "Code Snippet"
DEFAULT_LANGUAGE = "text"


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for the message UI engine."""

    default_title: str = DEFAULT_CODE_TITLE
    default_language: str = DEFAULT_LANGUAGE
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Load configuration from environment variables."""
        level_name = os.environ.get("CONVO_UI_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            logging.getLogger(__name__).warning(
                "Unknown CONVO_UI_LOG_LEVEL value '%s'. Using WARNING.", level_name
            )
            level = logging.WARNING
        return cls(
            default_title=os.environ.get("CONVO_UI_DEFAULT_TITLE", DEFAULT_CODE_TITLE),
            default_language=os.environ.get("CONVO_UI_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE),
            log_level=level,
        )
