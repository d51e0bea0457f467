"""
Icon lookup for action buttons and field labels.

Schema authors name icons with short keys (``check``, ``trash``...); the
renderer emits the icon-set glyph name. The table is built once and is
read-only.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

FALLBACK_ICON = "info"

ICONS: Mapping[str, str] = MappingProxyType(
    {
        "check": "check",
        "close": "x",
        "alert": "alert-circle",
        "info": "info",
        "send": "send",
        "trash": "trash",
        "edit": "edit",
        "calendar": "calendar",
        "chevron": "chevron-right",
        "user": "user",
        "more": "more-horizontal",
        "lock": "lock",
        "code": "code",
        "list": "check-square",
        "terminal": "terminal",
        "copy": "copy",
        "loader": "loader-2",
    }
)


def get_icon(name: str | None) -> str | None:
    """Resolve an icon key, case-insensitively.

    Returns ``None`` when no name is given and the fallback glyph for an
    unknown name.
    """
    if not name:
        return None
    return ICONS.get(name.lower(), ICONS[FALLBACK_ICON])
