# src/pipeplan/core/conditions/__init__.py
"""
Condições de execução de steps.

    - expressions → árvore fechada (Literal, ParamRef, Compare, BoolOp) e avaliação
    - parser      → sintaxe textual `parameters.x == 'y' && !parameters.z`
"""

from typing import Any

from .expressions import (
    BoolOp,
    Compare,
    Expr,
    Literal,
    ParamRef,
    condition_from_data,
    describe_value_type,
    evaluate,
    referenced_parameters,
    to_text,
)
from .parser import parse_condition


def coerce_condition(value: Any) -> Expr:
    """Aceita texto, forma estruturada ou árvore pronta e devolve a árvore."""
    if isinstance(value, (Literal, ParamRef, Compare, BoolOp)):
        return value
    if isinstance(value, str):
        return parse_condition(value)
    return condition_from_data(value)


__all__ = [
    "BoolOp",
    "Compare",
    "Expr",
    "Literal",
    "ParamRef",
    "coerce_condition",
    "condition_from_data",
    "describe_value_type",
    "evaluate",
    "parse_condition",
    "referenced_parameters",
    "to_text",
]
