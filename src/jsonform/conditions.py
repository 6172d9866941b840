"""
Condition trees for question visibility.

A question's "displayDependencies" block is parsed into an explicit tagged
union of frozen dataclasses:

    ConditionNode = ConditionGroup | Comparison

ConditionGroup combines child nodes with a logical operator; Comparison
tests one data field against an operand. The raw JSON shape distinguishes
the two only by key probing, so the probing happens once, here, and the
evaluator matches on types.

ARCHITECTURAL RULE:
    These objects are structure only.
    Evaluation belongs in jsonform.evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from jsonform.errors import ConditionDepthError, SchemaError


DEFAULT_MAX_DEPTH = 32


class LogicalOperator(Enum):
    """Operators accepted by a condition group."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class ComparisonOperator(Enum):
    """
    Leaf comparison operators.

    Declaration order IS the dispatch priority: when a malformed node
    carries several operator keys, the first member listed here wins.
    """

    IS_NOT_NULL = "isNotNull"
    IS_NULL = "isNull"
    HAS_VALUE = "hasValue"
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    IN = "in"
    NOT_IN = "notIn"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"


# notContains has no target of its own: it negates "contains" on the same key.
_OPERAND_KEY = {op: op.value for op in ComparisonOperator}
_OPERAND_KEY[ComparisonOperator.NOT_CONTAINS] = ComparisonOperator.CONTAINS.value


@dataclass(frozen=True)
class Comparison:
    """
    Leaf condition: one data field tested with one operator.

    Example:
        {"field": "age", "greaterThan": 18}

    Becomes:
        Comparison(field="age", operator=ComparisonOperator.GREATER_THAN, operand=18)

    Properties:
        field: Key of the data field to test (None evaluates to false)
        operator: Recognised operator, or None when the node has none
        operand: Target value read from the operator's key
    """

    field: Optional[str]
    operator: Optional[ComparisonOperator]
    operand: Any = None


@dataclass(frozen=True)
class ConditionGroup:
    """
    Boolean combination of child condition nodes.

    The operator token is kept verbatim (not as LogicalOperator) so that an
    unsupported token is reported when the group is evaluated.
    """

    operator: str = LogicalOperator.AND.value
    conditions: Tuple["ConditionNode", ...] = ()


ConditionNode = Union[ConditionGroup, Comparison]


def is_group_mapping(d: Any) -> bool:
    """True if a raw node carries both "operator" and "conditions"."""
    return isinstance(d, Mapping) and "operator" in d and "conditions" in d


def comparison_from_dict(d: Mapping[str, Any]) -> Comparison:
    operator = None
    for candidate in ComparisonOperator:
        if candidate.value in d:
            operator = candidate
            break
    operand = d.get(_OPERAND_KEY[operator]) if operator is not None else None
    return Comparison(field=d.get("field"), operator=operator, operand=operand)


def group_from_dict(d: Mapping[str, Any], max_depth: int = DEFAULT_MAX_DEPTH,
                    _depth: int = 1) -> ConditionGroup:
    if _depth > max_depth:
        raise ConditionDepthError(max_depth)
    raw_conditions = d.get("conditions") or []
    if isinstance(raw_conditions, Mapping):
        raw_conditions = list(raw_conditions.values())
    elif not isinstance(raw_conditions, (list, tuple)):
        raise SchemaError("Condition group 'conditions' must be a list")
    children = tuple(
        condition_from_dict(c, max_depth=max_depth, _depth=_depth + 1)
        for c in raw_conditions
    )
    operator = d.get("operator")
    return ConditionGroup(
        operator=LogicalOperator.AND.value if operator is None else operator,
        conditions=children,
    )


def condition_from_dict(d: Any, max_depth: int = DEFAULT_MAX_DEPTH,
                        _depth: int = 1) -> ConditionNode:
    """
    Parse one raw condition node.

    Args:
        d: Raw mapping from the schema document
        max_depth: Deepest allowed group nesting

    Returns:
        ConditionGroup if the node has both "operator" and "conditions",
        otherwise a Comparison

    Raises:
        ConditionDepthError: If groups nest deeper than max_depth
    """
    if is_group_mapping(d):
        return group_from_dict(d, max_depth=max_depth, _depth=_depth)
    if not isinstance(d, Mapping):
        return Comparison(field=None, operator=None)
    return comparison_from_dict(d)


def condition_to_dict(node: ConditionNode) -> dict:
    if isinstance(node, ConditionGroup):
        return {
            "operator": node.operator,
            "conditions": [condition_to_dict(c) for c in node.conditions],
        }
    if isinstance(node, Comparison):
        d: dict = {"field": node.field}
        if node.operator is ComparisonOperator.NOT_CONTAINS:
            d[node.operator.value] = True
        elif node.operator is not None:
            d[node.operator.value] = node.operand
        return d
    raise TypeError(f"Unsupported condition node type: {type(node)}")


def condition_depth(node: Optional[ConditionNode]) -> int:
    """Nesting depth of groups in a condition tree (a bare comparison is 0)."""
    if isinstance(node, ConditionGroup):
        return 1 + max((condition_depth(c) for c in node.conditions), default=0)
    return 0


def referenced_fields(node: Optional[ConditionNode]) -> Tuple[str, ...]:
    """Data fields a condition tree reads, in first-seen order."""
    seen: list = []

    def walk(n):
        if isinstance(n, ConditionGroup):
            for c in n.conditions:
                walk(c)
        elif isinstance(n, Comparison) and n.field is not None and n.field not in seen:
            seen.append(n.field)

    walk(node)
    return tuple(seen)
