# src/pipeplan/core/conditions/expressions.py
"""
Árvore de expressões de condição do pipeplan.

Condições de steps são modeladas como uma árvore fechada de variantes
imutáveis, avaliada contra o mapeamento de parâmetros já vinculados:

    - Literal  → valor constante (str, int, bool ou None)
    - ParamRef → referência a um parâmetro (`parameters.<nome>`)
    - Compare  → comparação binária (==, !=, <, <=, >, >=)
    - BoolOp   → combinador booleano (and, or, not)

Nenhum código dinâmico é executado: a avaliação é uma travessia
explícita da árvore.

Regras de avaliação:
    - ParamRef de parâmetro opcional omitido resolve para None
    - Igualdade entre tipos diferentes é False (bool nunca é igual a int)
    - Ordenação com null (parâmetro omitido) é False; fora isso exige dois
      int ou duas str
    - O resultado final e os operandos de and/or/not devem ser bool

Limites explícitos:
    - Não faz parsing de texto (ver `parser`)
    - Não conhece templates nem jobs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Set, Tuple, Union

from pipeplan.core.exceptions import InvalidCondition

COMPARE_OPS = ("==", "!=", "<", "<=", ">", ">=")
BOOL_OPS = ("and", "or", "not")


@dataclass(frozen=True)
class Literal:
    value: Union[str, int, bool, None]


@dataclass(frozen=True)
class ParamRef:
    name: str


@dataclass(frozen=True)
class Compare:
    op: str
    left: "Expr"
    right: "Expr"

    def __post_init__(self) -> None:
        if self.op not in COMPARE_OPS:
            raise InvalidCondition(f"unsupported comparison operator '{self.op}'")


@dataclass(frozen=True)
class BoolOp:
    op: str
    operands: Tuple["Expr", ...]

    def __post_init__(self) -> None:
        if self.op not in BOOL_OPS:
            raise InvalidCondition(f"unsupported boolean operator '{self.op}'")
        if self.op == "not" and len(self.operands) != 1:
            raise InvalidCondition("'not' takes exactly one operand")
        if self.op != "not" and len(self.operands) < 2:
            raise InvalidCondition(f"'{self.op}' takes at least two operands")


Expr = Union[Literal, ParamRef, Compare, BoolOp]


def describe_value_type(value: Any) -> str:
    """Nome canônico do tipo de um valor (null, bool, int, string)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _same_type(left: Any, right: Any) -> bool:
    return describe_value_type(left) == describe_value_type(right)


def _value(expr: Expr, params: Mapping[str, Any]) -> Any:
    if isinstance(expr, Literal):
        return expr.value
    if isinstance(expr, ParamRef):
        return params.get(expr.name)
    if isinstance(expr, Compare):
        return _compare(expr, params)
    if isinstance(expr, BoolOp):
        return _combine(expr, params)
    raise InvalidCondition(f"unknown expression node {type(expr).__name__}")


def _compare(expr: Compare, params: Mapping[str, Any]) -> bool:
    left = _value(expr.left, params)
    right = _value(expr.right, params)

    if expr.op == "==":
        return _same_type(left, right) and left == right
    if expr.op == "!=":
        return not (_same_type(left, right) and left == right)

    if left is None or right is None:
        return False
    ordered = _same_type(left, right) and describe_value_type(left) in ("int", "string")
    if not ordered:
        raise InvalidCondition(
            f"cannot order {describe_value_type(left)} and {describe_value_type(right)} with '{expr.op}'"
        )
    if expr.op == "<":
        return left < right
    if expr.op == "<=":
        return left <= right
    if expr.op == ">":
        return left > right
    return left >= right


def _as_bool(value: Any, op: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidCondition(f"'{op}' expects boolean operands, got {describe_value_type(value)}")
    return value


def _combine(expr: BoolOp, params: Mapping[str, Any]) -> bool:
    if expr.op == "not":
        return not _as_bool(_value(expr.operands[0], params), "not")
    if expr.op == "and":
        # curto-circuito: operandos à direita não são avaliados
        for operand in expr.operands:
            if not _as_bool(_value(operand, params), "and"):
                return False
        return True
    for operand in expr.operands:
        if _as_bool(_value(operand, params), "or"):
            return True
    return False


def evaluate(expr: Expr, params: Mapping[str, Any]) -> bool:
    """
    Avalia a condição contra os parâmetros vinculados.

    Args:
        expr (Expr): Raiz da árvore de condição.
        params (Mapping[str, Any]): Parâmetros vinculados do job.

    Returns:
        bool: True se o step deve executar.

    Raises:
        InvalidCondition: Se o resultado não for booleano ou se houver
            comparação de ordem entre tipos incompatíveis.
    """
    result = _value(expr, params)
    if not isinstance(result, bool):
        raise InvalidCondition(f"condition must evaluate to a boolean, got {describe_value_type(result)}")
    return result


def referenced_parameters(expr: Expr) -> Set[str]:
    """Nomes de parâmetros referenciados na árvore."""
    if isinstance(expr, ParamRef):
        return {expr.name}
    if isinstance(expr, Compare):
        return referenced_parameters(expr.left) | referenced_parameters(expr.right)
    if isinstance(expr, BoolOp):
        names: Set[str] = set()
        for operand in expr.operands:
            names |= referenced_parameters(operand)
        return names
    return set()


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def to_text(expr: Expr) -> str:
    """Renderiza a árvore na sintaxe aceita por `parse_condition`."""
    if isinstance(expr, Literal):
        if expr.value is None:
            return "null"
        if isinstance(expr.value, bool):
            return "true" if expr.value else "false"
        if isinstance(expr.value, int):
            return str(expr.value)
        return _quote(expr.value)
    if isinstance(expr, ParamRef):
        return f"parameters.{expr.name}"
    if isinstance(expr, Compare):
        return f"{to_text(expr.left)} {expr.op} {to_text(expr.right)}"
    if expr.op == "not":
        return f"!({to_text(expr.operands[0])})"
    joiner = " && " if expr.op == "and" else " || "
    return "(" + joiner.join(to_text(o) for o in expr.operands) + ")"


# ---------------------------------------------------------------------------
# Forma estruturada (catálogos YAML/JSON)
# ---------------------------------------------------------------------------

_STRUCTURED_COMPARE = {
    "eq": "==",
    "ne": "!=",
    "lt": "<",
    "le": "<=",
    "gt": ">",
    "ge": ">=",
}


def condition_from_data(data: Any) -> Expr:
    """
    Constrói a árvore a partir da forma estruturada de catálogo.

    Formas aceitas:
        - {"param": "nome"}
        - {"eq": [a, b]} (e ne, lt, le, gt, ge)
        - {"and": [...]}, {"or": [...]}, {"not": x}
        - escalares str/int/bool/None → Literal

    Raises:
        InvalidCondition: Se a estrutura não corresponder a nenhuma forma.
    """
    if data is None or isinstance(data, (bool, int, str)):
        return Literal(data)

    if not isinstance(data, dict) or len(data) != 1:
        raise InvalidCondition(f"structured condition must be a single-key mapping, got {data!r}")

    (key, arg), = data.items()

    if key == "param":
        if not isinstance(arg, str) or not arg:
            raise InvalidCondition("'param' expects a parameter name")
        return ParamRef(arg)

    if key in _STRUCTURED_COMPARE:
        if not isinstance(arg, list) or len(arg) != 2:
            raise InvalidCondition(f"'{key}' expects a list of two operands")
        return Compare(_STRUCTURED_COMPARE[key], condition_from_data(arg[0]), condition_from_data(arg[1]))

    if key == "not":
        return BoolOp("not", (condition_from_data(arg),))

    if key in ("and", "or"):
        if not isinstance(arg, list):
            raise InvalidCondition(f"'{key}' expects a list of operands")
        return BoolOp(key, tuple(condition_from_data(a) for a in arg))

    raise InvalidCondition(f"unknown structured condition operator '{key}'")

