# src/pipeplan/core/binding/binder.py
"""
Vinculação de parâmetros de template.

Este módulo valida os valores fornecidos pelo chamador contra o schema
declarado de um template e produz o mapeamento de parâmetros vinculados.

Política de vinculação (v1), aplicada nesta ordem:
    1. Parâmetros desconhecidos são rejeitados (`UnknownParameter`)
    2. Valores de tipo incorreto são rejeitados (`TypeMismatch`), sem coerção:
       `"true"` não é bool e `True` não é int
    3. Parâmetros obrigatórios ausentes são rejeitados (`MissingRequiredParameter`)
    4. Defaults são aplicados apenas a parâmetros ausentes

Parâmetros opcionais sem default e sem valor são omitidos do resultado.

Invariantes:
    - A função é pura: o mesmo (template, valores) sempre produz o mesmo mapeamento
    - As chaves do resultado seguem a ordem de declaração do template
    - Nenhum input é mutado

Limites explícitos:
    - Não avalia condições de steps
    - Não consulta o registry
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pipeplan.core.exceptions import MissingRequiredParameter, TypeMismatch, UnknownParameter
from pipeplan.core.conditions import describe_value_type
from pipeplan.core.templates.types import TemplateDefinition


def bind(template: TemplateDefinition, supplied: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Vincula `supplied` ao schema de `template`.

    Args:
        template (TemplateDefinition): Template alvo.
        supplied (Mapping[str, Any] | None): Valores fornecidos pelo chamador.

    Returns:
        Dict[str, Any]: Novo mapeamento de parâmetros vinculados.

    Raises:
        UnknownParameter: Se algum nome não estiver declarado (o menor em
            ordem lexicográfica é reportado).
        TypeMismatch: Se algum valor não corresponder ao tipo declarado.
        MissingRequiredParameter: Se algum parâmetro obrigatório faltar.
    """
    supplied = dict(supplied or {})
    ref = template.ref

    unknown = sorted((name for name in supplied if template.parameter(name) is None), key=str)
    if unknown:
        raise UnknownParameter(unknown[0], template=ref)

    for spec in template.parameters:
        if spec.name not in supplied:
            continue
        value = supplied[spec.name]
        if not spec.accepts(value):
            raise TypeMismatch(spec.name, spec.expected(), describe_value_type(value), template=ref)

    bound: Dict[str, Any] = {}
    for spec in template.parameters:
        if spec.name in supplied:
            bound[spec.name] = supplied[spec.name]
        elif spec.required:
            raise MissingRequiredParameter(spec.name, template=ref)
        elif spec.default is not None:
            bound[spec.name] = spec.default

    return bound
