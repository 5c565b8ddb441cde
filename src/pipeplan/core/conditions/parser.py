# src/pipeplan/core/conditions/parser.py
"""
Parser da sintaxe textual de condições.

Aceita a sintaxe no estilo dos hosts de CI:

    parameters.run_tests == true && parameters.os != 'windows'
    !(parameters.retries > 3) || parameters.force

Precedência (maior para menor): `!`, comparações, `&&`, `||`.
Parênteses agrupam explicitamente. Literais: strings entre aspas
simples ou duplas (com escape `\\`), inteiros (opcionalmente negativos),
`true`, `false` e `null`.

O parser é um descendente recursivo sobre uma lista de tokens; erros
de sintaxe levantam `InvalidCondition` com a posição do token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from pipeplan.core.exceptions import InvalidCondition

from .expressions import COMPARE_OPS, BoolOp, Compare, Expr, Literal, ParamRef

_PARAM_PREFIX = "parameters."
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")
_INT = re.compile(r"-?[0-9]+")
_SYMBOLS = ("&&", "||", "==", "!=", "<=", ">=", "<", ">", "!", "(", ")")


@dataclass(frozen=True)
class Token:
    kind: str  # sym | str | int | word | param
    text: str
    pos: int


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch.isspace():
            i += 1
            continue

        if ch in ("'", '"'):
            start = i
            i += 1
            buf: List[str] = []
            while i < n and text[i] != ch:
                if text[i] == "\\" and i + 1 < n:
                    i += 1
                buf.append(text[i])
                i += 1
            if i >= n:
                raise InvalidCondition("unterminated string literal", expression=text, position=start)
            tokens.append(Token("str", "".join(buf), start))
            i += 1
            continue

        m = _INT.match(text, i)
        if m and (ch.isdigit() or (ch == "-" and m.end() > i + 1)):
            tokens.append(Token("int", m.group(0), i))
            i = m.end()
            continue

        if text.startswith(_PARAM_PREFIX, i):
            m = _IDENT.match(text, i + len(_PARAM_PREFIX))
            if not m:
                raise InvalidCondition("expected parameter name after 'parameters.'", expression=text, position=i)
            tokens.append(Token("param", m.group(0), i))
            i = m.end()
            continue

        m = _IDENT.match(text, i)
        if m:
            tokens.append(Token("word", m.group(0), i))
            i = m.end()
            continue

        for sym in _SYMBOLS:
            if text.startswith(sym, i):
                tokens.append(Token("sym", sym, i))
                i += len(sym)
                break
        else:
            raise InvalidCondition(f"unexpected character {ch!r}", expression=text, position=i)

    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _accept(self, symbol: str) -> bool:
        tok = self._peek()
        if tok is not None and tok.kind == "sym" and tok.text == symbol:
            self.index += 1
            return True
        return False

    def _fail(self, reason: str) -> InvalidCondition:
        tok = self._peek()
        pos = tok.pos if tok is not None else len(self.text)
        return InvalidCondition(reason, expression=self.text, position=pos)

    def parse(self) -> Expr:
        if not self.tokens:
            raise self._fail("empty condition")
        expr = self._or()
        if self._peek() is not None:
            raise self._fail(f"unexpected token '{self._peek().text}'")
        return expr

    def _or(self) -> Expr:
        operands = [self._and()]
        while self._accept("||"):
            operands.append(self._and())
        return operands[0] if len(operands) == 1 else BoolOp("or", tuple(operands))

    def _and(self) -> Expr:
        operands = [self._comparison()]
        while self._accept("&&"):
            operands.append(self._comparison())
        return operands[0] if len(operands) == 1 else BoolOp("and", tuple(operands))

    def _comparison(self) -> Expr:
        left = self._unary()
        tok = self._peek()
        if tok is not None and tok.kind == "sym" and tok.text in COMPARE_OPS:
            self.index += 1
            right = self._unary()
            return Compare(tok.text, left, right)
        return left

    def _unary(self) -> Expr:
        if self._accept("!"):
            return BoolOp("not", (self._unary(),))
        return self._primary()

    def _primary(self) -> Expr:
        tok = self._peek()
        if tok is None:
            raise self._fail("unexpected end of condition")

        if tok.kind == "sym" and tok.text == "(":
            self.index += 1
            expr = self._or()
            if not self._accept(")"):
                raise self._fail("expected ')'")
            return expr

        self.index += 1
        if tok.kind == "param":
            return ParamRef(tok.text)
        if tok.kind == "str":
            return Literal(tok.text)
        if tok.kind == "int":
            return Literal(int(tok.text))
        if tok.kind == "word":
            if tok.text == "true":
                return Literal(True)
            if tok.text == "false":
                return Literal(False)
            if tok.text == "null":
                return Literal(None)
            self.index -= 1
            raise self._fail(f"unknown identifier '{tok.text}' (use parameters.{tok.text})")

        self.index -= 1
        raise self._fail(f"unexpected token '{tok.text}'")


def parse_condition(text: str) -> Expr:
    """
    Converte uma condição textual em árvore de expressão.

    Raises:
        InvalidCondition: Em qualquer erro de sintaxe.
    """
    if not isinstance(text, str):
        raise InvalidCondition(f"condition text must be a string, got {type(text).__name__}")
    return _Parser(text).parse()
