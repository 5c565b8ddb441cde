# src/pipeplan/core/engine/planner.py
"""
Planejador de execução do grafo de jobs.

Este módulo recebe os JobNodes resolvidos e suas arestas e produz um
`ExecutionPlan`: uma sequência de batches em que cada batch reúne jobs
sem dependência entre si, seguros para execução concorrente por um
executor externo.

Princípios fundamentais:
    - O grafo deve formar um DAG válido
    - A ordenação é determinística para a mesma entrada
    - O plano só é publicado completo; não existe plano parcial

Decisões arquiteturais:
    - Ordenação topológica em camadas (Kahn): a cada rodada, todos os nós
      com grau de entrada zero formam o próximo batch
    - Dentro de um batch, jobs são ordenados lexicograficamente pelo id
    - Travamento (nós restantes sem grau zero) é tratado como ciclo e
      revalidado aqui, mesmo que o resolver já o rejeite

Invariantes:
    - Todo predecessor de um job aparece em um batch estritamente anterior
    - Cada job aparece em exatamente um batch
    - A mesma entrada produz sempre o mesmo `to_dict()` e o mesmo `fingerprint()`

Limites explícitos:
    - Não executa jobs
    - Não altera status de JobNodes
    - Não registra eventos (ver `engine.engine`)
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pipeplan.core.config.hashing import canonical_json
from pipeplan.core.exceptions import CyclicDependency, DuplicateJobId, EmptyPlan, UnknownJobDependency
from pipeplan.core.graph.cycles import find_cycle
from pipeplan.core.graph.model import JobGraph, JobNode


@dataclass(frozen=True)
class ExecutionPlan:
    """
    Plano de execução publicado.

    Campos:
        - batches: ids de jobs por batch, em ordem de execução
        - jobs: JobNodes do plano indexados por id
    """
    batches: Tuple[Tuple[str, ...], ...] = ()
    jobs: Dict[str, JobNode] = field(default_factory=dict)

    @property
    def order(self) -> List[str]:
        """Ordem linear (batches concatenados)."""
        return [job_id for batch in self.batches for job_id in batch]

    def batch_of(self, job_id: str) -> int:
        for i, batch in enumerate(self.batches):
            if job_id in batch:
                return i
        raise KeyError(job_id)

    @property
    def skipped_steps(self) -> Dict[str, List[str]]:
        """Steps pulados por job (apenas jobs com algum pulo)."""
        out: Dict[str, List[str]] = {}
        for job_id in sorted(self.jobs):
            skipped = [s.id for s in self.jobs[job_id].skipped_steps]
            if skipped:
                out[job_id] = skipped
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batches": [list(b) for b in self.batches],
            "jobs": {job_id: self.jobs[job_id].to_dict() for job_id in sorted(self.jobs)},
        }

    def to_json(self) -> str:
        return canonical_json(self.to_dict())

    def fingerprint(self) -> str:
        """SHA-256 da forma canônica do plano."""
        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()

    def __len__(self) -> int:
        return len(self.jobs)


def plan(
    job_nodes: Iterable[JobNode],
    edges: Iterable[Tuple[str, str]],
    *,
    allow_empty: bool = True,
    pipeline: Optional[str] = None,
) -> ExecutionPlan:
    """
    Ordena jobs em batches topológicos determinísticos.

    Args:
        job_nodes (Iterable[JobNode]): Jobs resolvidos.
        edges (Iterable[Tuple[str, str]]): Arestas (predecessor, dependente).
        allow_empty (bool): Se False, um grafo sem jobs é erro.
        pipeline (str | None): Nome do pipeline (apenas para contexto de erro).

    Returns:
        ExecutionPlan: Plano completo e validado.

    Raises:
        DuplicateJobId: Se dois JobNodes tiverem o mesmo id.
        UnknownJobDependency: Se uma aresta referenciar um job inexistente.
        EmptyPlan: Se não houver jobs e `allow_empty` for False.
        CyclicDependency: Se a ordenação travar (ciclo no grafo).
    """
    nodes: List[JobNode] = []
    seen: set = set()
    for node in job_nodes:
        if node.id in seen:
            raise DuplicateJobId(node.id)
        seen.add(node.id)
        nodes.append(node)

    edge_list: List[Tuple[str, str]] = []
    for pred, dep in edges:
        # `dependency` sempre nomeia o id desconhecido
        if pred not in seen:
            raise UnknownJobDependency(dep, pred)
        if dep not in seen:
            raise UnknownJobDependency(pred, dep)
        edge_list.append((pred, dep))

    if not nodes:
        if not allow_empty:
            raise EmptyPlan(pipeline)
        return ExecutionPlan()

    graph = JobGraph.build(nodes, edge_list)
    ids = graph.ids

    in_degree = [0] * len(graph)
    for targets in graph.successors:
        for j in targets:
            in_degree[j] += 1

    ready = sorted((i for i, d in enumerate(in_degree) if d == 0), key=lambda i: ids[i])
    batches: List[Tuple[str, ...]] = []
    placed = 0

    while ready:
        batches.append(tuple(ids[i] for i in ready))
        placed += len(ready)
        nxt: List[int] = []
        for i in ready:
            for j in graph.successors[i]:
                in_degree[j] -= 1
                if in_degree[j] == 0:
                    nxt.append(j)
        ready = sorted(nxt, key=lambda i: ids[i])

    if placed != len(graph):
        stuck = [i for i, d in enumerate(in_degree) if d > 0]
        cycle = find_cycle(ids, graph.successors, within=stuck)
        raise CyclicDependency(cycle or sorted(ids[i] for i in stuck))

    return ExecutionPlan(batches=tuple(batches), jobs={n.id: n for n in nodes})


def plan_graph(graph: JobGraph, *, allow_empty: bool = True, pipeline: Optional[str] = None) -> ExecutionPlan:
    """Atalho para planejar um `JobGraph` produzido pelo resolver."""
    return plan(graph.nodes, graph.edges, allow_empty=allow_empty, pipeline=pipeline)
