# src/pipeplan/core/templates/types.py
"""
Tipos canônicos de templates do pipeplan.

Um template é uma unidade reutilizável, nomeada e versionada de
configuração de pipeline. Ele declara:

    - um schema de parâmetros (ParameterSpec), em ordem
    - uma lista ordenada de steps (StepSpec)

Componentes principais:
    - ParamType          → enum de tipos de parâmetro (string, bool, int, enum)
    - ParameterSpec      → declaração de um parâmetro
    - StepSpec           → declaração de um step (com condição opcional)
    - TemplateDefinition → template completo, imutável após a criação

Invariantes:
    - Nomes de parâmetros e ids de steps são únicos no template
    - Defaults respeitam o tipo declarado; parâmetros obrigatórios não têm default
    - `depends_on` de um step só referencia steps declarados ANTES dele
    - Toda referência de parâmetro em condições aponta para um parâmetro declarado

Violações são reportadas como `InvalidTemplate` no momento da construção,
ou seja, antes de qualquer registro.

Limites explícitos:
    - Não vincula valores (ver `binding.binder`)
    - Não registra templates (ver `registry`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pipeplan.core.conditions import Expr, describe_value_type, referenced_parameters
from pipeplan.core.exceptions import InvalidTemplate


class ParamType(str, Enum):
    """
    Tipos declaráveis de parâmetro.

    Os valores são strings para facilitar serialização em catálogos
    YAML/JSON e no Manifest.
    """
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterSpec:
    """
    Declaração de um parâmetro de template.

    Campos:
        - name: nome único no template
        - type: `ParamType`
        - required: se o chamador precisa fornecer o valor
        - default: valor aplicado quando ausente (mesmo tipo), ou None
        - allowed: valores aceitos quando `type == enum`
    """
    name: str
    type: ParamType
    required: bool = False
    default: Any = None
    allowed: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ParamType(self.type))
        object.__setattr__(self, "allowed", tuple(self.allowed))

    def accepts(self, value: Any) -> bool:
        """Verifica o valor contra o tipo declarado, sem coerção."""
        if self.type is ParamType.STRING:
            return isinstance(value, str)
        if self.type is ParamType.BOOL:
            return isinstance(value, bool)
        if self.type is ParamType.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        # enum: mesmo tipo e mesmo valor de algum permitido
        return any(
            describe_value_type(value) == describe_value_type(option) and value == option
            for option in self.allowed
        )

    def expected(self) -> str:
        """Descrição do tipo esperado (usada em `TypeMismatch`)."""
        if self.type is ParamType.ENUM:
            return "enum[" + ", ".join(repr(v) for v in self.allowed) + "]"
        return self.type.value


@dataclass(frozen=True)
class StepSpec:
    """
    Declaração de um step dentro de um template.

    Campos:
        - id: identificador único no template
        - uses: referência ao comando/ação executado pelo executor externo
        - condition: árvore de condição avaliada contra os parâmetros vinculados
        - depends_on: ids de steps anteriores do mesmo template
    """
    id: str
    uses: str
    condition: Optional[Expr] = None
    depends_on: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        depends_on = self.depends_on
        if isinstance(depends_on, str):
            depends_on = (depends_on,)
        object.__setattr__(self, "depends_on", tuple(depends_on))


@dataclass(frozen=True)
class TemplateDefinition:
    """
    Template nomeado e versionado.

    Imutável após a criação: atualizações exigem registrar uma nova
    versão. A ordem de `parameters` e `steps` é a ordem de declaração e
    é preservada em toda a cadeia (binding, resolução, Manifest).
    """
    name: str
    version: str
    parameters: Tuple[ParameterSpec, ...] = ()
    steps: Tuple[StepSpec, ...] = ()
    description: str = ""
    _by_name: Dict[str, ParameterSpec] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "steps", tuple(self.steps))

        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidTemplate(repr(self.name), "template name must be a non-empty string")
        if not isinstance(self.version, str) or not self.version.strip():
            raise InvalidTemplate(self.name, "template version must be a non-empty string")

        self._validate_parameters()
        self._validate_steps()

    @property
    def ref(self) -> str:
        return f"{self.name}@{self.version}"

    def parameter(self, name: str) -> Optional[ParameterSpec]:
        return self._by_name.get(name)

    def _validate_parameters(self) -> None:
        by_name: Dict[str, ParameterSpec] = {}
        for spec in self.parameters:
            if not spec.name:
                raise InvalidTemplate(self.ref, "parameter name must be a non-empty string")
            if spec.name in by_name:
                raise InvalidTemplate(self.ref, f"duplicate parameter '{spec.name}'")
            if spec.type is ParamType.ENUM and not spec.allowed:
                raise InvalidTemplate(self.ref, f"enum parameter '{spec.name}' declares no allowed values")
            if spec.type is not ParamType.ENUM and spec.allowed:
                raise InvalidTemplate(self.ref, f"parameter '{spec.name}' declares allowed values but is not an enum")
            if spec.required and spec.default is not None:
                raise InvalidTemplate(self.ref, f"required parameter '{spec.name}' cannot declare a default")
            if spec.default is not None and not spec.accepts(spec.default):
                raise InvalidTemplate(
                    self.ref,
                    f"default of '{spec.name}' must be {spec.expected()}, "
                    f"got {describe_value_type(spec.default)}",
                )
            by_name[spec.name] = spec
        object.__setattr__(self, "_by_name", by_name)

    def _validate_steps(self) -> None:
        seen = set()
        for step in self.steps:
            if not step.id:
                raise InvalidTemplate(self.ref, "step id must be a non-empty string")
            if step.id in seen:
                raise InvalidTemplate(self.ref, f"duplicate step id '{step.id}'")
            for dep in step.depends_on:
                # apenas referências para trás: o step precisa já ter sido visto
                if dep not in seen:
                    raise InvalidTemplate(
                        self.ref,
                        f"step '{step.id}' depends on '{dep}', which is not declared before it",
                    )
            if step.condition is not None:
                unknown = sorted(referenced_parameters(step.condition) - set(self._by_name))
                if unknown:
                    raise InvalidTemplate(
                        self.ref,
                        f"condition of step '{step.id}' references undeclared parameter '{unknown[0]}'",
                    )
            seen.add(step.id)
