"""
Rule Compiler

Translates structured edge rules into FEEL condition expressions
(the expression language Camunda 8 evaluates on sequence flows).
"""

from typing import Callable, Dict, Optional, Union

from schemas.flow_graph import Rule, Condition, OperatorType, CombineOperation

ConditionValue = Union[bool, int, float, str, None]

# f = field, v = formatted value
_TEMPLATES: Dict[str, Callable[[str, str], str]] = {
    OperatorType.EQUAL.value: lambda f, v: f"{f} = {v}",
    OperatorType.NOT_EQUAL.value: lambda f, v: f"{f} != {v}",
    OperatorType.GREATER_THAN.value: lambda f, v: f"{f} > {v}",
    OperatorType.GREATER_THAN_OR_EQUAL.value: lambda f, v: f"{f} >= {v}",
    OperatorType.LESS_THAN.value: lambda f, v: f"{f} < {v}",
    OperatorType.LESS_THAN_OR_EQUAL.value: lambda f, v: f"{f} <= {v}",
    OperatorType.CONTAINS.value: lambda f, v: f"contains({f}, {v})",
    OperatorType.NOT_CONTAINS.value: lambda f, v: f"not(contains({f}, {v}))",
    OperatorType.STARTS_WITH.value: lambda f, v: f"starts with({f}, {v})",
    OperatorType.ENDS_WITH.value: lambda f, v: f"ends with({f}, {v})",
    OperatorType.IS_EMPTY.value: lambda f, v: f'{f} = null or {f} = ""',
    OperatorType.IS_NOT_EMPTY.value: lambda f, v: f'{f} != null and {f} != ""',
    OperatorType.IS_TRUE.value: lambda f, v: f"{f} = true",
    OperatorType.IS_FALSE.value: lambda f, v: f"{f} = false",
}


def format_value(value: ConditionValue) -> str:
    """
    Render a condition value as a FEEL literal.

    Strings are double-quoted, booleans become true/false, numbers are
    emitted as-is (whole floats without the trailing .0).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def compile_condition(condition: Condition) -> str:
    """Compile one condition; unknown operators fall back to equality."""
    operator = condition.operator
    if isinstance(operator, OperatorType):
        operator = operator.value
    template = _TEMPLATES.get(operator, _TEMPLATES[OperatorType.EQUAL.value])
    return template(condition.field, format_value(condition.value))


def compile_rule(rule: Optional[Rule]) -> str:
    """
    Compile a rule into a single FEEL expression.

    Args:
        rule: Conditions plus one combine operation applied across all of them

    Returns:
        str: "true" for an empty rule, otherwise the conditions joined
        with " and " / " or " (no parentheses added)
    """
    if rule is None or not rule.conditions:
        return "true"

    expressions = [compile_condition(c) for c in rule.conditions]
    if len(expressions) == 1:
        return expressions[0]

    joiner = " and " if rule.combine_operation == CombineOperation.AND else " or "
    return joiner.join(expressions)


def negate_expression(expression: str) -> str:
    """Wrap an expression in FEEL not(...), used for the else branch of an If node."""
    return f"not({expression})"
