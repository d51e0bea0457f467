"""Tests for the field value store and validator."""

from __future__ import annotations

import pydantic
import pytest

from convo_ui.errors import ValidationFailure
from convo_ui.runtime.field_store import (
    INVALID_FORMAT_MESSAGE,
    INVALID_NUMBER_MESSAGE,
    REQUIRED_MESSAGE,
    FieldStore,
    display_value,
)
from convo_ui.specs import ConditionSpec, FieldSpec, SectionSpec, UIDefinition, ValidationSpec


def single_field(field: FieldSpec, **section_kwargs) -> UIDefinition:
    return UIDefinition(sections=[SectionSpec(type="field", fields=[field], **section_kwargs)])


class TestSeeding:
    def test_defaults_are_seeded(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)

        assert store.get("status") == "open"
        assert "name" in store.values
        assert store.get("name") is None

    def test_reseed_keeps_edits(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.set_value("status", "done")

        store.seed(form_definition)

        assert store.get("status") == "done"

    def test_reseed_fills_new_fields(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        extended = form_definition.model_copy(
            update={
                "sections": [
                    *form_definition.sections,
                    SectionSpec(type="field", fields=[FieldSpec(name="extra", value=3)]),
                ]
            }
        )
        store.seed(extended)
        assert store.get("extra") == 3

    def test_fields_outside_field_sections_are_ignored(self) -> None:
        definition = UIDefinition(
            sections=[SectionSpec(type="body", content="x", fields=[FieldSpec(name="stray")])]
        )
        assert dict(FieldStore(definition).values) == {}


class TestEdits:
    def test_set_value_clears_that_fields_error(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.set_value("email", "nope")
        store.validate(form_definition)
        assert set(store.errors) == {"name", "email"}

        store.set_value("name", "Ada")

        assert set(store.errors) == {"email"}

    def test_set_value_does_not_revalidate(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.set_value("email", "still wrong")
        assert dict(store.errors) == {}

    def test_non_json_value_is_rejected(self) -> None:
        store = FieldStore()
        with pytest.raises(pydantic.ValidationError):
            store.set_value("x", object())

    def test_snapshot_is_a_deep_copy(self) -> None:
        store = FieldStore()
        store.set_value("tags", ["a"])

        snapshot = store.snapshot()
        snapshot["tags"].append("b")

        assert store.get("tags") == ["a"]

    def test_values_view_is_read_only(self) -> None:
        store = FieldStore()
        with pytest.raises(TypeError):
            store.values["x"] = 1  # type: ignore[index]

    def test_reset(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.validate(form_definition)
        store.reset()
        assert dict(store.values) == {}
        assert dict(store.errors) == {}


class TestValidate:
    def test_required_field_blocks(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)

        assert store.validate(form_definition) is False
        assert store.errors == {"name": REQUIRED_MESSAGE}

    def test_hidden_field_is_not_validated(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.set_value("name", "Ada")

        assert store.validate(form_definition) is True

        store.set_value("status", "done")
        assert store.validate(form_definition) is False
        assert store.errors == {"note": REQUIRED_MESSAGE}

    def test_hidden_section_is_not_validated(self) -> None:
        definition = single_field(
            FieldSpec(name="x", required=True),
            condition=ConditionSpec(field="mode", operator="equals", value="advanced"),
        )
        assert FieldStore(definition).validate(definition) is True

    def test_errors_are_replaced_not_merged(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.validate(form_definition)
        store.set_value("name", "Ada")
        store.set_value("email", "bad")

        store.validate(form_definition)

        assert store.errors == {"email": INVALID_FORMAT_MESSAGE}

    def test_pattern_passes(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        store.set_value("name", "Ada")
        store.set_value("email", "ada@example.com")
        assert store.validate(form_definition)

    def test_custom_message(self) -> None:
        definition = single_field(
            FieldSpec(name="code", validation=ValidationSpec(pattern=r"^\d+$", message="Digits"))
        )
        store = FieldStore(definition)
        store.set_value("code", "12a")
        store.validate(definition)
        assert store.errors == {"code": "Digits"}

    def test_invalid_pattern_is_skipped(self) -> None:
        definition = single_field(FieldSpec(name="x", validation=ValidationSpec(pattern="(")))
        store = FieldStore(definition)
        store.set_value("x", "anything")
        assert store.validate(definition) is True

    def test_empty_value_skips_rules(self) -> None:
        definition = single_field(FieldSpec(name="x", validation=ValidationSpec(pattern="^a$")))
        store = FieldStore(definition)
        store.set_value("x", "")
        assert store.validate(definition) is True

    @pytest.mark.parametrize(
        "value,expected",
        [
            (5, None),
            ("7", None),
            (0.5, "Must be at least 1"),
            (11, "Must be at most 10"),
            ("ten", INVALID_NUMBER_MESSAGE),
        ],
    )
    def test_numeric_bounds(self, value, expected) -> None:
        definition = single_field(
            FieldSpec(name="n", type="number", validation=ValidationSpec(min=1, max=10))
        )
        store = FieldStore(definition)
        store.set_value("n", value)
        store.validate(definition)
        assert store.errors.get("n") == expected

    def test_raise_on_error(self, form_definition: UIDefinition) -> None:
        store = FieldStore(form_definition)
        with pytest.raises(ValidationFailure) as exc_info:
            store.validate(form_definition, raise_on_error=True)
        assert exc_info.value.errors == {"name": REQUIRED_MESSAGE}


class TestDisplayValue:
    def test_stored_then_default_then_empty(self) -> None:
        field = FieldSpec(name="x", value="default")
        assert display_value(field, {"x": "stored"}) == "stored"
        assert display_value(field, {}) == "default"
        assert display_value(FieldSpec(name="y"), {}) == ""

    def test_false_is_a_stored_value(self) -> None:
        assert display_value(FieldSpec(name="x", value=True), {"x": False}) is False
