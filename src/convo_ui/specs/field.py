"""
Field schema types.

Defines the data-bearing controls placed inside ``field`` sections.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

from convo_ui.specs.condition import ConditionSpec
from convo_ui.utils.values import to_text

# =============================================================================
# Field Types
# =============================================================================


class FieldType(StrEnum):
    """Known field control types."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
    BADGE = "badge"
    PROGRESS = "progress"
    IMAGE = "image"
    CHECKBOX = "checkbox"
    SWITCH = "switch"
    CODE = "code"


# Types that keep their normal presentation when not editable
DISPLAY_ONLY_TYPES = frozenset({FieldType.BADGE, FieldType.PROGRESS, FieldType.IMAGE})


# =============================================================================
# Options and Validation
# =============================================================================


class SelectOption(BaseModel):
    """Labelled choice for a ``select`` field."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: JsonValue


class ValidationSpec(BaseModel):
    """
    Validation rules for a field.

    Example:
        ValidationSpec(pattern=r"^\\d{5}$", message="Enter a 5 digit code")
        ValidationSpec(min=1, max=10)
    """

    model_config = ConfigDict(frozen=True)

    pattern: str | None = Field(default=None, description="Regular expression the value must match")
    min: float | None = Field(default=None, description="Minimum numeric value")
    max: float | None = Field(default=None, description="Maximum numeric value")
    message: str | None = Field(default=None, description="Message shown on failure")


# =============================================================================
# Fields
# =============================================================================


class FieldSpec(BaseModel):
    """
    Field schema.

    ``type`` is a plain string: a field whose type is not one of
    :class:`FieldType` parses fine and renders nothing.

    Example:
        FieldSpec(name="email", type="text", label="Email", required=True,
                  validation=ValidationSpec(pattern=r".+@.+"))
        FieldSpec(name="priority", type="select", options=["low", "high"])
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str = Field(description="Key into the field value mapping")
    type: str = Field(default=FieldType.TEXT, description="Control type")
    label: str | None = Field(default=None, description="Display label")
    value: JsonValue = Field(default=None, description="Declared default value")
    options: list[SelectOption | str | int | float] | None = Field(
        default=None, description="Choices for select fields"
    )
    class_name: str | None = Field(default=None, description="Presentation hint")
    editable: bool = Field(default=True, description="Whether the user may edit the value")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    description: str | None = Field(default=None, description="Help text")
    required: bool = Field(default=False, description="Whether an empty value is an error")
    validation: ValidationSpec | None = Field(default=None, description="Validation rules")
    condition: ConditionSpec | None = Field(default=None, description="Visibility predicate")

    @property
    def field_type(self) -> FieldType | None:
        """The known field type, or None for an unrecognised tag."""
        try:
            return FieldType(self.type)
        except ValueError:
            return None

    def normalized_options(self) -> list[SelectOption]:
        """Return options as label/value pairs."""
        return [
            opt if isinstance(opt, SelectOption) else SelectOption(label=to_text(opt), value=opt)
            for opt in self.options or []
        ]
