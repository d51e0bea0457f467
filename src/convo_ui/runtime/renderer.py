"""
Section and field renderer.

Stateless: every function takes a piece of schema plus the current values
and errors and returns an :class:`ElementNode` (or ``None`` when nothing
should be shown). Interactive nodes carry ``field_name``, ``action_id`` or
``event`` props so the host can route input back to the controller.

Section and field types are matched exhaustively over their enums; an
unrecognised tag renders nothing.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from convo_ui.runtime.field_store import display_value
from convo_ui.runtime.icons import get_icon
from convo_ui.specs import (
    DISPLAY_ONLY_TYPES,
    ActionSpec,
    ElementNode,
    FieldSpec,
    FieldType,
    Layout,
    Message,
    SectionSpec,
    SectionType,
    ThemeVariant,
    UIDefinition,
    element,
)
from convo_ui.utils.condition_eval import evaluate
from convo_ui.utils.values import (
    ValueKind,
    classify,
    is_empty,
    loose_equals,
    to_number,
    to_text,
)

ERROR_TITLE = "Error rendering message"
READ_ONLY_LABEL = "Read Only"
SELECT_PLACEHOLDER = "Select an option..."
SWITCH_DEFAULT_LABEL = "Enable"
IMAGE_PLACEHOLDER = "/placeholder.svg"
IMAGE_DEFAULT_ALT = "Message attachment"

OPEN_MODAL_EVENT = "open_modal"
CLOSE_MODAL_EVENT = "close_modal"


def _truthy(value: Any) -> bool:
    if classify(value) in (ValueKind.LIST, ValueKind.MAPPING):
        return True
    return bool(value)


def _progress_percent(value: Any) -> int | float:
    number = to_number(value)
    if math.isnan(number):
        number = 0.0
    number = min(100.0, max(0.0, number))
    return int(number) if number.is_integer() else number


# =============================================================================
# Fields
# =============================================================================


def _field_wrapper(
    field: FieldSpec, control: ElementNode, error: str | None
) -> ElementNode:
    children: list[ElementNode] = []
    if field.label:
        label_children: list[ElementNode | str] = []
        if field.field_type is FieldType.CODE:
            label_children.append(element("Icon", name="terminal"))
        label_children.append(field.label)
        if field.required:
            label_children.append(element("RequiredMarker", "*"))
        children.append(element("Label", *label_children, html_for=field.name))
    children.append(control)
    if field.description:
        children.append(element("HelpText", field.description))
    if error:
        children.append(element("FieldError", error))
    return element(
        "Field", *children, name=field.name, type=field.type, class_name=field.class_name
    )


def _render_read_only(field: FieldSpec, value: Any) -> ElementNode | None:
    """Non-interactive presentation, or None for types that keep their normal one."""
    field_type = field.field_type
    if field_type is FieldType.CODE:
        text = to_text(value)
        return element(
            "CodeBlock",
            element("Code", text),
            element("CopyButton", element("Icon", name=get_icon("copy")), copy_text=text),
        )
    if field_type in DISPLAY_ONLY_TYPES:
        return None
    if field_type in (FieldType.SWITCH, FieldType.CHECKBOX):
        text = "Yes" if _truthy(value) else "No"
    else:
        text = to_text(value)
    return element(
        "ReadOnlyValue", text, preserve_whitespace=field_type is FieldType.TEXTAREA
    )


def _render_control(field: FieldSpec, value: Any, invalid: bool) -> ElementNode | None:
    match field.field_type:
        case FieldType.TEXT | FieldType.NUMBER:
            return element(
                "Input",
                field_name=field.name,
                input_type=field.type,
                value=value,
                placeholder=field.placeholder,
                invalid=invalid,
            )
        case FieldType.TEXTAREA | FieldType.CODE:
            return element(
                "Textarea",
                field_name=field.name,
                value=to_text(value),
                placeholder=field.placeholder,
                invalid=invalid,
                monospace=field.field_type is FieldType.CODE,
            )
        case FieldType.DATE:
            return element(
                "Input",
                element("Icon", name=get_icon("calendar")),
                field_name=field.name,
                input_type="date",
                value=value,
                invalid=invalid,
            )
        case FieldType.SELECT:
            options = [element("Option", SELECT_PLACEHOLDER, value="", disabled=True)]
            options.extend(
                element(
                    "Option",
                    opt.label,
                    value=opt.value,
                    selected=not is_empty(value) and loose_equals(value, opt.value),
                )
                for opt in field.normalized_options()
            )
            return element(
                "Select", *options, field_name=field.name, value=value, invalid=invalid
            )
        case FieldType.SWITCH | FieldType.CHECKBOX:
            return element(
                "Switch",
                element("Label", field.placeholder or SWITCH_DEFAULT_LABEL),
                field_name=field.name,
                id=f"switch-{field.name}",
                checked=_truthy(value),
            )
        case FieldType.BADGE:
            return element("Badge", to_text(value), variant="secondary")
        case FieldType.PROGRESS:
            return element("Progress", value=_progress_percent(value))
        case _:
            return None


def render_field(
    field: FieldSpec,
    value: Any,
    *,
    error: str | None = None,
    read_only: bool = False,
) -> ElementNode | None:
    """Render one field.

    Args:
        field: Field schema.
        value: Display value (stored value, default, or ``""``).
        error: Validation message to show under the control.
        read_only: Force the non-interactive presentation.
    """
    if field.field_type is None:
        return None

    if field.field_type is FieldType.IMAGE:
        return element(
            "Image",
            src=value or IMAGE_PLACEHOLDER,
            alt=field.label or IMAGE_DEFAULT_ALT,
            class_name=field.class_name,
        )

    editable = field.editable and not read_only
    control = None if editable else _render_read_only(field, value)
    if control is None:
        control = _render_control(field, value, invalid=bool(error))
    if control is None:
        return None
    return _field_wrapper(field, control, error)


# =============================================================================
# Sections
# =============================================================================


def render_section(
    section: SectionSpec,
    values: Mapping[str, Any],
    errors: Mapping[str, str],
    *,
    read_only: bool = False,
) -> ElementNode | None:
    """Render one section, or None when hidden or of an unknown type."""
    if not evaluate(section.condition, values):
        return None

    content = section.content or ""
    match section.section_type:
        case SectionType.HEADER:
            return element("Header", content, class_name=section.class_name)
        case SectionType.BODY:
            return element("Body", content, class_name=section.class_name)
        case SectionType.DIVIDER:
            return element("Divider")
        case SectionType.FIELD:
            rendered = []
            for field in section.iter_fields():
                if not evaluate(field.condition, values):
                    continue
                node = render_field(
                    field,
                    display_value(field, values),
                    error=errors.get(field.name),
                    read_only=read_only,
                )
                if node is not None:
                    rendered.append(node)
            return element("FieldGroup", *rendered, class_name=section.class_name)
        case SectionType.LIST:
            return element(
                "List",
                *(element("ListItem", to_text(item)) for item in section.iter_items()),
                class_name=section.class_name,
            )
        case SectionType.GRID:
            return element(
                "Grid",
                *(element("GridItem", to_text(item)) for item in section.iter_items()),
                columns=section.grid_columns,
                class_name=section.class_name,
            )
        case SectionType.FOOTER:
            return element(
                "Footer",
                element("Icon", name=get_icon("info")),
                content,
                class_name=section.class_name,
            )
        case _:
            return None


def render_sections(
    sections: Sequence[SectionSpec],
    values: Mapping[str, Any],
    errors: Mapping[str, str],
    *,
    read_only: bool = False,
) -> ElementNode:
    """Render all sections in order into a body container."""
    rendered = []
    for section in sections:
        node = render_section(section, values, errors, read_only=read_only)
        if node is not None:
            rendered.append(node)
    return element("Sections", *rendered)


# =============================================================================
# Actions and Chrome
# =============================================================================


def render_actions(
    actions: Sequence[ActionSpec],
    *,
    loading_action_id: str | None = None,
    read_only: bool = False,
) -> ElementNode | None:
    """Render the action row.

    Returns the read-only indicator instead when ``read_only`` is set, and
    None when there is nothing to show. Every button is disabled while any
    action is in flight.
    """
    if read_only:
        return element("ReadOnlyBadge", element("Icon", name=get_icon("lock")), READ_ONLY_LABEL)
    if not actions:
        return None

    buttons = []
    for action in actions:
        loading = loading_action_id == action.id
        icon = get_icon("loader") if loading else get_icon(action.icon)
        children: list[ElementNode | str] = []
        if icon:
            children.append(element("Icon", name=icon, spin=loading or None))
        children.append(action.label)
        buttons.append(
            element(
                "Button",
                *children,
                action_id=action.id,
                variant=action.known_variant,
                position=action.known_position,
                disabled=loading_action_id is not None,
                loading=loading,
            )
        )
    return element("Actions", *buttons)


def _render_heading(definition: UIDefinition, *, modal: bool) -> ElementNode | None:
    if not (definition.title or definition.description):
        return None
    children: list[ElementNode | str] = []
    variant = definition.theme.known_variant if definition.theme else None
    if definition.title:
        title_children: list[ElementNode | str] = []
        if variant is ThemeVariant.DESTRUCTIVE and not modal:
            title_children.append(element("Icon", name=get_icon("alert")))
        title_children.append(definition.title)
        children.append(element("Title", *title_children, level=2 if modal else 3))
    if definition.description:
        children.append(element("Description", definition.description))
    return element("Heading", *children)


def render_surface(
    definition: UIDefinition,
    values: Mapping[str, Any],
    errors: Mapping[str, str],
    *,
    loading_action_id: str | None = None,
    read_only: bool = False,
) -> ElementNode:
    """Render the full surface: heading, sections, then the action row."""
    modal = definition.layout is Layout.MODAL
    children: list[ElementNode] = []
    if modal:
        children.append(element("CloseButton", element("Icon", name="x"), event=CLOSE_MODAL_EVENT))
    heading = _render_heading(definition, modal=modal)
    if heading is not None:
        children.append(heading)
    children.append(render_sections(definition.sections, values, errors, read_only=read_only))
    actions = render_actions(
        definition.actions, loading_action_id=loading_action_id, read_only=read_only
    )
    if actions is not None:
        children.append(actions)

    theme = definition.theme
    card = element(
        "Card",
        *children,
        layout=definition.layout,
        variant=(theme and theme.known_variant) or ThemeVariant.DEFAULT,
        accent_color=theme.accent_color if theme else None,
    )
    if modal:
        return element("Overlay", element("Scrim", event=CLOSE_MODAL_EVENT), card)
    return card


def render_modal_trigger(definition: UIDefinition) -> ElementNode:
    """Inline button that opens a modal message."""
    return element(
        "Button",
        f"View: {definition.title or 'Message'}",
        event=OPEN_MODAL_EVENT,
        variant="outline",
        size="sm",
    )


def render_error_surface(message: Message) -> ElementNode:
    """Fixed surface shown when a message's schema cannot be resolved."""
    return element(
        "Card",
        element("ErrorTitle", element("Icon", name=get_icon("alert")), ERROR_TITLE),
        element("Text", message.content),
        variant=ThemeVariant.DESTRUCTIVE,
        role="alert",
    )
