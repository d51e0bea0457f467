"""Condition evaluation for section and field visibility.

Conditions are evaluated on every render and before every validation pass,
so :func:`evaluate` is pure: it only reads the value mapping it is given.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from convo_ui.specs.condition import ConditionOperator, ConditionSpec
from convo_ui.utils.values import ValueKind, classify, loose_equals, to_number, to_text


def _contains(target: Any, operand: Any) -> bool:
    """Membership for lists, substring test for everything else."""
    if classify(target) is ValueKind.LIST:
        return any(item == operand and classify(item) is classify(operand) for item in target)
    return to_text(operand) in to_text(target)


def evaluate(condition: ConditionSpec | None, values: Mapping[str, Any]) -> bool:
    """Evaluate a visibility condition against current field values.

    Args:
        condition: Condition to test, or ``None``.
        values: Flat field name -> value mapping. A missing name reads as
            ``None``.

    Returns:
        ``True`` when there is no condition or the operator is unknown
        (fail-open: show the section rather than hide it). Ordering
        comparisons involving a non-numeric operand are ``False``.
    """
    if condition is None:
        return True

    target = values.get(condition.field)

    if condition.operator == ConditionOperator.EQUALS:
        return loose_equals(target, condition.value)
    if condition.operator == ConditionOperator.NOT_EQUALS:
        return not loose_equals(target, condition.value)
    if condition.operator == ConditionOperator.CONTAINS:
        return _contains(target, condition.value)
    if condition.operator == ConditionOperator.GREATER_THAN:
        # nan compares false both ways
        return to_number(target) > to_number(condition.value)

    return True
