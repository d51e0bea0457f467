"""
Field value store and validator.

One store exists per rendered message. It holds the current value of every
named field, seeded from schema defaults, and the validation errors shown
next to fields.

Field names are a flat namespace across all sections. Two fields sharing a
name read and write the same slot (last writer wins); this is not guarded.
"""

from __future__ import annotations

import copy
import logging
import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import JsonValue

from convo_ui.errors import ValidationFailure
from convo_ui.specs import FieldSpec, UIDefinition
from convo_ui.utils.condition_eval import evaluate
from convo_ui.utils.values import coerce_field_value, is_empty, to_number, to_text

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "This field is required"
INVALID_FORMAT_MESSAGE = "Invalid format"
INVALID_NUMBER_MESSAGE = "Must be a number"


def display_value(field: FieldSpec, values: Mapping[str, Any]) -> Any:
    """Value to present for a field: stored value, else schema default, else ``""``."""
    value = values.get(field.name)
    if value is not None:
        return value
    if field.value is not None:
        return field.value
    return ""


class FieldStore:
    """Current field values and errors for one message."""

    def __init__(self, definition: UIDefinition | None = None):
        self._values: dict[str, JsonValue] = {}
        self._errors: dict[str, str] = {}
        if definition is not None:
            self.seed(definition)

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def values(self) -> Mapping[str, JsonValue]:
        """Read-only view of the current values."""
        return MappingProxyType(self._values)

    @property
    def errors(self) -> Mapping[str, str]:
        """Read-only view of the current errors."""
        return MappingProxyType(self._errors)

    def snapshot(self) -> dict[str, JsonValue]:
        """Deep copy of the current values, safe to hand to a handler."""
        return copy.deepcopy(self._values)

    def get(self, name: str) -> JsonValue:
        """Stored value for ``name`` (``None`` if never set)."""
        return self._values.get(name)

    def read(self, field: FieldSpec) -> Any:
        """Value to present for a field."""
        return display_value(field, self._values)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def seed(self, definition: UIDefinition) -> None:
        """Seed defaults for fields that have no stored value yet.

        Existing values survive, so edits are kept when the same message's
        schema is resolved again.
        """
        for field in definition.iter_fields():
            if self._values.get(field.name) is None:
                self._values[field.name] = field.value

    def set_value(self, name: str, value: Any) -> None:
        """Store a user edit and clear that field's error.

        Does not re-run validation.

        Raises:
            pydantic.ValidationError: If the value is not JSON-shaped.
        """
        self._values[name] = coerce_field_value(value)
        self._errors.pop(name, None)

    def clear_errors(self) -> None:
        self._errors = {}

    def reset(self) -> None:
        """Discard all values and errors."""
        self._values = {}
        self._errors = {}

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, definition: UIDefinition, *, raise_on_error: bool = False) -> bool:
        """Validate every visible field and replace the error mapping.

        Sections and fields whose condition is false against the current
        values are skipped.

        Args:
            definition: Schema to validate against.
            raise_on_error: Raise instead of returning ``False``.

        Returns:
            ``True`` if every visible field passed.

        Raises:
            ValidationFailure: If ``raise_on_error`` is set and a check failed.
        """
        errors: dict[str, str] = {}

        for section in definition.sections:
            if not evaluate(section.condition, self._values):
                continue
            for field in section.iter_fields():
                if not evaluate(field.condition, self._values):
                    continue
                message = self._check_field(field, self._values.get(field.name))
                if message is not None:
                    errors[field.name] = message

        self._errors = errors
        if errors:
            logger.debug("Validation failed for fields: %s", sorted(errors))
            if raise_on_error:
                raise ValidationFailure(errors)
        return not errors

    def _check_field(self, field: FieldSpec, value: Any) -> str | None:
        """Return an error message for one field, or None."""
        if field.required and is_empty(value):
            return REQUIRED_MESSAGE

        rules = field.validation
        if rules is None or not value:
            return None

        if rules.pattern:
            try:
                matched = re.search(rules.pattern, to_text(value)) is not None
            except re.error as e:
                logger.warning("Ignoring invalid pattern on field '%s': %s", field.name, e)
                matched = True
            if not matched:
                return rules.message or INVALID_FORMAT_MESSAGE

        if rules.min is not None or rules.max is not None:
            number = to_number(value)
            if math.isnan(number):
                return rules.message or INVALID_NUMBER_MESSAGE
            if rules.min is not None and number < rules.min:
                return rules.message or f"Must be at least {rules.min:g}"
            if rules.max is not None and number > rules.max:
                return rules.message or f"Must be at most {rules.max:g}"

        return None
