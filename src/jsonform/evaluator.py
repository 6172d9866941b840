"""
Visibility evaluation.

Decides whether a question should be displayed given the flat data
context. Pure functions: nothing here mutates the condition tree or the
data.

Example dependency block:

    {
        "operator": "AND",
        "conditions": [
            {"field": "age", "greaterThan": 18},
            {"field": "country", "equals": "France"}
        ]
    }

Rules:
    - No group, or a group with no conditions, is always true
      (for every operator, OR and NOT included).
    - AND / OR short-circuit.
    - NOT negates the conjunction of its conditions, not each condition.
    - Any other operator raises UnsupportedOperatorError.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from jsonform.coercion import to_number
from jsonform.conditions import (
    DEFAULT_MAX_DEPTH,
    Comparison,
    ComparisonOperator,
    ConditionGroup,
    ConditionNode,
    LogicalOperator,
    group_from_dict,
)
from jsonform.errors import ConditionDepthError, UnsupportedOperatorError


# =========================================================================
# LEAF PREDICATES
# =========================================================================

def strict_equals(value: Any, target: Any) -> bool:
    """
    Equality with matching types: "1" != 1, True != 1, 1 != 1.0.

    Lists compare element by element; mappings compare by key set and
    values, whatever the key order.
    """
    if type(value) is not type(target):
        return False
    if isinstance(value, (list, tuple)):
        return len(value) == len(target) and all(
            strict_equals(a, b) for a, b in zip(value, target)
        )
    if isinstance(value, dict):
        return value.keys() == target.keys() and all(
            strict_equals(value[k], target[k]) for k in value
        )
    return value == target


def strict_in(value: Any, values: Any) -> bool:
    if not isinstance(values, (list, tuple)):
        return False
    return any(strict_equals(value, candidate) for candidate in values)


def is_not_null(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return False
    return True


def contains(value: Any, target: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return strict_in(target, value)
    if isinstance(value, str) and isinstance(target, str):
        return target in value
    return False


def _numeric(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(value: Any, target: Any) -> bool:
        left, right = to_number(value), to_number(target)
        if left is None or right is None:
            return False
        return compare(left, right)
    return check


_LEAF_HANDLERS: Dict[ComparisonOperator, Callable[[Any, Any], bool]] = {
    ComparisonOperator.IS_NOT_NULL: lambda value, _: is_not_null(value),
    ComparisonOperator.IS_NULL: lambda value, _: not is_not_null(value),
    ComparisonOperator.HAS_VALUE: strict_equals,
    ComparisonOperator.EQUALS: strict_equals,
    ComparisonOperator.NOT_EQUALS: lambda value, target: not strict_equals(value, target),
    ComparisonOperator.IN: strict_in,
    ComparisonOperator.NOT_IN: lambda value, target: not strict_in(value, target),
    ComparisonOperator.CONTAINS: contains,
    ComparisonOperator.NOT_CONTAINS: lambda value, target: not contains(value, target),
    ComparisonOperator.GREATER_THAN: _numeric(lambda a, b: a > b),
    ComparisonOperator.LESS_THAN: _numeric(lambda a, b: a < b),
    ComparisonOperator.GREATER_THAN_OR_EQUAL: _numeric(lambda a, b: a >= b),
    ComparisonOperator.LESS_THAN_OR_EQUAL: _numeric(lambda a, b: a <= b),
}


def evaluate_comparison(comparison: Comparison, form_data: Mapping[str, Any]) -> bool:
    if comparison.field is None or comparison.operator is None:
        return False
    value = form_data.get(comparison.field)
    return _LEAF_HANDLERS[comparison.operator](value, comparison.operand)


# =========================================================================
# GROUPS
# =========================================================================

def evaluate_node(node: ConditionNode, form_data: Mapping[str, Any],
                  max_depth: int = DEFAULT_MAX_DEPTH, _depth: int = 1) -> bool:
    """Evaluate one child of a group: nested group or leaf comparison."""
    if isinstance(node, ConditionGroup):
        return _evaluate_group(node, form_data, max_depth, _depth + 1)
    if isinstance(node, Comparison):
        return evaluate_comparison(node, form_data)
    raise TypeError(f"Unsupported condition node type: {type(node)}")


def _evaluate_group(group: ConditionGroup, form_data: Mapping[str, Any],
                    max_depth: int, depth: int) -> bool:
    if depth > max_depth:
        raise ConditionDepthError(max_depth)
    if not group.conditions:
        return True

    try:
        operator = LogicalOperator(group.operator)
    except ValueError:
        raise UnsupportedOperatorError(group.operator) from None

    def all_true() -> bool:
        return all(evaluate_node(c, form_data, max_depth, depth) for c in group.conditions)

    if operator is LogicalOperator.AND:
        return all_true()
    if operator is LogicalOperator.OR:
        return any(evaluate_node(c, form_data, max_depth, depth) for c in group.conditions)
    return not all_true()


def should_display(group: Union[ConditionGroup, Mapping[str, Any], None],
                   form_data: Optional[Mapping[str, Any]],
                   max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """
    Decide whether a question with this dependency group is shown.

    Args:
        group: Parsed ConditionGroup, or the raw dependency mapping
        form_data: Flat data context keyed by question key
        max_depth: Deepest allowed group nesting

    Returns:
        True if the question should be displayed

    Raises:
        UnsupportedOperatorError: If a group operator is not AND, OR or NOT
        ConditionDepthError: If groups nest deeper than max_depth
    """
    if not group:
        return True
    if isinstance(group, Mapping):
        group = group_from_dict(group, max_depth=max_depth)
    return _evaluate_group(group, form_data or {}, max_depth, 1)
