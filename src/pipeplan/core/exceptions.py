"""
pipeplan — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do pipeplan.

Objetivo:
- Permitir que registry, binder, resolver e planner levantem falhas semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos nas validações do engine

Regras:
- Toda falha é uma validação local, síncrona e nunca é re-tentada.
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Cada exceção expõe o contexto relevante também como atributo (ex.: `exc.name`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True, eq=False)
class PipeplanException(Exception):
    """Base class para exceções internas do pipeplan.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - `code` é o identificador estável usado no ErrorPayload
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    code = "PIPEPLAN_ERROR"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Template Registry
# ---------------------------------------------------------------------------

class DuplicateTemplate(PipeplanException):
    """Já existe um template registrado com o mesmo nome e versão."""

    code = "TEMPLATE_DUPLICATE"

    def __init__(self, name: str, version: str) -> None:
        super().__init__(
            message=f"Template '{name}@{version}' is already registered",
            details={"name": name, "version": version},
            hint="Registre uma nova versão em vez de sobrescrever a existente.",
        )
        self.name = name
        self.version = version


class NotFound(PipeplanException):
    """Template inexistente no registry."""

    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, name: str, version: str) -> None:
        super().__init__(
            message=f"Template '{name}@{version}' not found",
            details={"name": name, "version": version},
        )
        self.name = name
        self.version = version


class InvalidTemplate(PipeplanException):
    """Definição de template estruturalmente inválida."""

    code = "TEMPLATE_INVALID"

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid template '{template}': {reason}",
            details={"template": template, "reason": reason},
            hint="Corrija a definição do template antes de registrá-lo.",
        )
        self.template = template
        self.reason = reason


class CatalogDirectoryNotFound(PipeplanException):
    """Diretório de catálogo inexistente ou que não é um diretório."""

    code = "TEMPLATE_CATALOG_NOT_FOUND"

    def __init__(self, directory: str) -> None:
        super().__init__(
            message=f"Template catalog directory not found: {directory}",
            details={"directory": directory},
            hint="Informe um diretório existente com documentos YAML/JSON.",
        )
        self.directory = directory


# ---------------------------------------------------------------------------
# Parameter Binder
# ---------------------------------------------------------------------------

class MissingRequiredParameter(PipeplanException):
    """Parâmetro obrigatório não foi fornecido."""

    code = "PARAMETER_MISSING_REQUIRED"

    def __init__(self, name: str, *, template: Optional[str] = None) -> None:
        super().__init__(
            message=f"Missing required parameter '{name}'",
            details={"name": name, "template": template},
            hint="Forneça o parâmetro explicitamente no job.",
        )
        self.name = name
        self.template = template


class TypeMismatch(PipeplanException):
    """Valor fornecido não corresponde ao tipo declarado (sem coerção)."""

    code = "PARAMETER_TYPE_MISMATCH"

    def __init__(
        self,
        name: str,
        expected: str,
        actual: str,
        *,
        template: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=f"Parameter '{name}' expects {expected}, got {actual}",
            details={"name": name, "expected": expected, "actual": actual, "template": template},
            hint="Use um literal do tipo declarado; strings como \"true\" não são convertidas.",
        )
        self.name = name
        self.expected = expected
        self.actual = actual
        self.template = template


class UnknownParameter(PipeplanException):
    """Parâmetro fornecido não está declarado no template."""

    code = "PARAMETER_UNKNOWN"

    def __init__(self, name: str, *, template: Optional[str] = None) -> None:
        super().__init__(
            message=f"Unknown parameter '{name}'",
            details={"name": name, "template": template},
            hint="Verifique a grafia do parâmetro ou declare-o no template.",
        )
        self.name = name
        self.template = template


# ---------------------------------------------------------------------------
# Condições
# ---------------------------------------------------------------------------

class InvalidCondition(PipeplanException):
    """Expressão de condição inválida (sintaxe ou tipos)."""

    code = "CONDITION_INVALID"

    def __init__(self, reason: str, *, expression: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__(
            message=f"Invalid condition: {reason}",
            details={"reason": reason, "expression": expression, "position": position},
        )
        self.reason = reason
        self.expression = expression
        self.position = position


# ---------------------------------------------------------------------------
# Graph Resolver / Planner
# ---------------------------------------------------------------------------

class InvalidPipeline(PipeplanException):
    """Definição de pipeline malformada."""

    code = "PIPELINE_INVALID"

    def __init__(self, pipeline: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid pipeline '{pipeline}': {reason}",
            details={"pipeline": pipeline, "reason": reason},
        )
        self.pipeline = pipeline
        self.reason = reason


class CyclicDependency(PipeplanException):
    """O grafo de jobs contém um ciclo."""

    code = "GRAPH_CYCLIC_DEPENDENCY"

    def __init__(self, cycle: Sequence[str]) -> None:
        nodes: List[str] = list(cycle)
        super().__init__(
            message=f"Cyclic dependency between jobs: {' -> '.join(nodes + nodes[:1])}",
            details={"cycle": nodes},
            hint="Remova uma das dependências `needs` que fecham o ciclo.",
        )
        self.cycle = nodes


class UnresolvedTemplateReference(PipeplanException):
    """Job referencia um template/versão ausente do registry."""

    code = "GRAPH_UNRESOLVED_TEMPLATE"

    def __init__(self, job_id: str, name: str, version: str) -> None:
        super().__init__(
            message=f"Job '{job_id}' references unknown template '{name}@{version}'",
            details={"job_id": job_id, "name": name, "version": version},
            hint="Registre o template referenciado ou ajuste a versão do job.",
        )
        self.job_id = job_id
        self.name = name
        self.version = version


class DuplicateJobId(PipeplanException):
    """Dois jobs do pipeline produzem o mesmo identificador."""

    code = "GRAPH_DUPLICATE_JOB"

    def __init__(self, job_id: str) -> None:
        super().__init__(
            message=f"Duplicate job id: {job_id}",
            details={"job_id": job_id},
        )
        self.job_id = job_id


class UnknownJobDependency(PipeplanException):
    """Job declara dependência de um job inexistente."""

    code = "GRAPH_UNKNOWN_DEPENDENCY"

    def __init__(self, job_id: str, dependency: str) -> None:
        super().__init__(
            message=f"Job '{job_id}' needs unknown job '{dependency}'",
            details={"job_id": job_id, "dependency": dependency},
        )
        self.job_id = job_id
        self.dependency = dependency


class EmptyPlan(PipeplanException):
    """Pipeline sem jobs quando a configuração proíbe planos vazios."""

    code = "PLAN_EMPTY"

    def __init__(self, pipeline: Optional[str] = None) -> None:
        super().__init__(
            message="Pipeline produced no jobs and empty plans are not allowed",
            details={"pipeline": pipeline},
            hint="Declare ao menos um job ou habilite `planner.allow_empty`.",
        )
        self.pipeline = pipeline


class InvalidStatusTransition(PipeplanException):
    """Transição de status de job não permitida."""

    code = "JOB_INVALID_STATUS_TRANSITION"

    def __init__(self, job_id: str, current: str, requested: str) -> None:
        super().__init__(
            message=f"Job '{job_id}' cannot move from {current} to {requested}",
            details={"job_id": job_id, "current": current, "requested": requested},
        )
        self.job_id = job_id
        self.current = current
        self.requested = requested


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class UnknownPlanJob(PipeplanException):
    """Status reportado para um job que não pertence ao plano registrado."""

    code = "MANIFEST_UNKNOWN_JOB"

    def __init__(self, job_id: str) -> None:
        super().__init__(
            message=f"Job '{job_id}' is not part of the recorded plan",
            details={"job_id": job_id},
            hint="Registre o plano com `record_plan` antes de reportar status.",
        )
        self.job_id = job_id


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

class EngineConfigurationError(PipeplanException):
    """Configuração inválida ou inconsistente para o planejamento."""

    code = "ENGINE_CONFIGURATION_ERROR"

    def __init__(self, message: str, *, key: Optional[str] = None, value: Any = None) -> None:
        super().__init__(
            message=message,
            details={"key": key, "value": value},
            hint="Revise a seção `planner` da configuração.",
        )
        self.key = key
