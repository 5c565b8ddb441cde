"""
pipeplan — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do pipeplan.
Erros são artefatos do contrato operacional do engine e devem ser:

- explícitos
- serializáveis
- acionáveis

Nenhum erro é re-tentado internamente: todos indicam entrada inválida do chamador.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import PipeplanException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do pipeplan.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Template Registry
TEMPLATE_DUPLICATE = "TEMPLATE_DUPLICATE"
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
TEMPLATE_INVALID = "TEMPLATE_INVALID"
TEMPLATE_CATALOG_NOT_FOUND = "TEMPLATE_CATALOG_NOT_FOUND"

# Parameter Binder
PARAMETER_MISSING_REQUIRED = "PARAMETER_MISSING_REQUIRED"
PARAMETER_TYPE_MISMATCH = "PARAMETER_TYPE_MISMATCH"
PARAMETER_UNKNOWN = "PARAMETER_UNKNOWN"

# Condições
CONDITION_INVALID = "CONDITION_INVALID"

# Graph Resolver / Planner
PIPELINE_INVALID = "PIPELINE_INVALID"
GRAPH_CYCLIC_DEPENDENCY = "GRAPH_CYCLIC_DEPENDENCY"
GRAPH_UNRESOLVED_TEMPLATE = "GRAPH_UNRESOLVED_TEMPLATE"
GRAPH_DUPLICATE_JOB = "GRAPH_DUPLICATE_JOB"
GRAPH_UNKNOWN_DEPENDENCY = "GRAPH_UNKNOWN_DEPENDENCY"
PLAN_EMPTY = "PLAN_EMPTY"
JOB_INVALID_STATUS_TRANSITION = "JOB_INVALID_STATUS_TRANSITION"

# Manifest
MANIFEST_UNKNOWN_JOB = "MANIFEST_UNKNOWN_JOB"

# Engine
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"


def error_payload_from_exception(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - PipeplanException: já vem com code/message/details/hint.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, PipeplanException):
        return ErrorPayload(
            type=exc.code,
            message=exc.message,
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return ErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante o planejamento",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log de eventos do planejamento.",
    )
