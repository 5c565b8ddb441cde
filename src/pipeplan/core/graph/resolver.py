# src/pipeplan/core/graph/resolver.py
"""
Resolução de um pipeline em grafo de jobs.

Este módulo expande uma `PipelineDefinition` em um `JobGraph`:

    1. Para cada entrada de job, localiza o template no registry
    2. Expande a matriz (se houver) em um job por combinação
    3. Vincula os parâmetros de cada job (`bind`)
    4. Avalia as condições dos steps contra os parâmetros vinculados
    5. Resolve `needs` em arestas entre jobs
    6. Rejeita o grafo se houver ciclo

Decisões arquiteturais:
    - Matriz: produto cartesiano com eixos em ordem lexicográfica e
      valores na ordem declarada; id expandido `"{id}[k1=v1,k2=v2]"`
    - `needs` apontando para um job com matriz depende de todas as expansões
    - Step com condição falsa é marcado como pulado (`condition`)
    - Step que depende de um step pulado também é pulado (`dependency skipped`)
    - Pulos são registrados no JobNode, nunca tratados como erro

Invariantes:
    - A resolução é uma função pura de (pipeline, registry)
    - Nenhum grafo parcial é retornado em caso de erro

Limites explícitos:
    - Não ordena jobs em batches (ver `engine.planner`)
    - Não registra eventos (ver `engine.engine`)
"""

from __future__ import annotations

from itertools import product
from typing import Any, Dict, List, Mapping, Tuple

from pipeplan.core.binding import bind
from pipeplan.core.conditions import evaluate, to_text
from pipeplan.core.exceptions import (
    CyclicDependency,
    DuplicateJobId,
    InvalidCondition,
    NotFound,
    UnknownJobDependency,
    UnresolvedTemplateReference,
)
from pipeplan.core.pipeline.definition import JobSpec, PipelineDefinition
from pipeplan.core.templates.registry import TemplateRegistry
from pipeplan.core.templates.types import TemplateDefinition

from .cycles import find_cycle
from .model import JobGraph, JobNode, ResolvedStep

SKIP_CONDITION = "condition"
SKIP_DEPENDENCY = "dependency skipped"


def _format_axis_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def expand_matrix(job: JobSpec) -> List[Tuple[str, Dict[str, Any]]]:
    """
    Expande a matriz de um job em (id, coordenadas).

    Sem matriz, retorna um único par (id original, {}).
    """
    if not job.matrix:
        return [(job.id, {})]

    axes = sorted(job.matrix)
    expanded: List[Tuple[str, Dict[str, Any]]] = []
    for values in product(*(job.matrix[a] for a in axes)):
        coords = dict(zip(axes, values))
        suffix = ",".join(f"{a}={_format_axis_value(v)}" for a, v in coords.items())
        expanded.append((f"{job.id}[{suffix}]", coords))
    return expanded


def resolve_steps(template: TemplateDefinition, params: Mapping[str, Any], *, job_id: str) -> Tuple[ResolvedStep, ...]:
    """Avalia as condições dos steps de `template` para um job."""
    skipped: Dict[str, str] = {}
    resolved: List[ResolvedStep] = []

    for step in template.steps:
        runs = True
        if step.condition is not None:
            try:
                runs = evaluate(step.condition, params)
            except InvalidCondition as exc:
                raise InvalidCondition(
                    f"step '{step.id}' of job '{job_id}': {exc.reason}",
                    expression=to_text(step.condition),
                ) from exc

        if not runs:
            skipped[step.id] = SKIP_CONDITION
        elif any(dep in skipped for dep in step.depends_on):
            skipped[step.id] = SKIP_DEPENDENCY

        resolved.append(
            ResolvedStep(
                id=step.id,
                uses=step.uses,
                skipped=step.id in skipped,
                skip_reason=skipped.get(step.id),
            )
        )

    return tuple(resolved)


def _lookup(registry: TemplateRegistry, job: JobSpec) -> TemplateDefinition:
    try:
        return registry.lookup(job.template, job.version)
    except NotFound:
        raise UnresolvedTemplateReference(job.id, job.template, job.version) from None


def resolve(pipeline: PipelineDefinition, registry: TemplateRegistry) -> JobGraph:
    """
    Expande `pipeline` em um grafo de jobs validado.

    Args:
        pipeline (PipelineDefinition): Definição de topo.
        registry (TemplateRegistry): Templates disponíveis.

    Returns:
        JobGraph: Grafo acíclico de JobNodes.

    Raises:
        UnresolvedTemplateReference: Template/versão ausente do registry.
        DuplicateJobId: Dois jobs com o mesmo id (inclusive após a matriz).
        UnknownJobDependency: `needs` referencia um job inexistente.
        CyclicDependency: O grafo possui ciclo (com a sequência do ciclo).
        UnknownParameter / TypeMismatch / MissingRequiredParameter: Falhas de binding.
        InvalidCondition: Condição de step não avaliável para os parâmetros vinculados.
    """
    # 1) templates + expansão de matriz (ids únicos)
    expanded: List[Tuple[JobSpec, TemplateDefinition, List[Tuple[str, Dict[str, Any]]]]] = []
    expansions: Dict[str, List[str]] = {}
    taken: set = set()

    for job in pipeline.jobs:
        if job.id in expansions:
            raise DuplicateJobId(job.id)
        template = _lookup(registry, job)
        instances = expand_matrix(job)
        for job_id, _ in instances:
            if job_id in taken:
                raise DuplicateJobId(job_id)
            taken.add(job_id)
        expansions[job.id] = [job_id for job_id, _ in instances]
        expanded.append((job, template, instances))

    # 2) needs -> predecessores
    predecessors: Dict[str, Tuple[str, ...]] = {}
    for job in pipeline.jobs:
        preds: set = set()
        for dep in job.needs:
            if dep not in expansions:
                raise UnknownJobDependency(job.id, dep)
            preds.update(expansions[dep])
        predecessors[job.id] = tuple(sorted(preds))

    # 3) binding + steps
    nodes: List[JobNode] = []
    edges: List[Tuple[str, str]] = []
    for job, template, instances in expanded:
        needs = predecessors[job.id]
        for job_id, coords in instances:
            params = bind(template, {**job.parameters, **coords})
            nodes.append(
                JobNode(
                    id=job_id,
                    template=template.ref,
                    parameters=params,
                    steps=resolve_steps(template, params, job_id=job_id),
                    needs=needs,
                    matrix=dict(coords),
                )
            )
            edges.extend((pred, job_id) for pred in needs)

    graph = JobGraph.build(nodes, edges)

    cycle = find_cycle(graph.ids, graph.successors)
    if cycle is not None:
        raise CyclicDependency(cycle)

    return graph
