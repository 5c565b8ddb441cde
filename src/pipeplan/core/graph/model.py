# src/pipeplan/core/graph/model.py
"""
Modelo do grafo de jobs resolvido.

Componentes principais:
    - JobStatus    → enum de estados de um job (pending → running → succeeded/failed, ou skipped)
    - ResolvedStep → step de um job após a avaliação da condição
    - JobNode      → instância de um template com um binding concreto
    - JobGraph     → arena indexada de JobNodes + arestas de dependência

O `JobGraph` armazena os nós em uma tabela endereçada por índice
(`nodes[i]`), com sucessores representados por listas de índices já
ordenadas lexicograficamente pelo id do job. Algoritmos de grafo
operam sobre índices, nunca seguindo referências entre objetos.

Invariantes:
    - Ids de jobs são únicos no grafo
    - Arestas (predecessor, dependente) só referenciam nós do grafo
    - O único atributo mutável de um JobNode é `status`, alterado por `transition`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from pipeplan.core.exceptions import InvalidStatusTransition


class JobStatus(str, Enum):
    """
    Estados de um job ao longo do ciclo de vida do plano.

    Estados definidos:
        - PENDING: criado pela resolução, aguardando o executor
        - RUNNING: em execução no executor externo
        - SUCCEEDED / FAILED: estados finais reportados pelo executor
        - SKIPPED: não será executado (ex.: predecessor falhou)

    O planner nunca altera status; ele existe para que o executor
    externo anexe o resultado aos mesmos JobNodes publicados no plano.
    """
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_final(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.SKIPPED)

    def can_transition_to(self, target: Union["JobStatus", str]) -> bool:
        """Indica se `target` é um próximo estado válido; status desconhecido é False."""
        try:
            target = JobStatus(target)
        except ValueError:
            return False
        return target in _TRANSITIONS.get(self, ())


_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.RUNNING, JobStatus.SKIPPED},
    JobStatus.RUNNING: {JobStatus.SUCCEEDED, JobStatus.FAILED},
}


@dataclass(frozen=True)
class ResolvedStep:
    """Step após a resolução: executável ou pulado (com motivo)."""
    id: str
    uses: str
    skipped: bool = False
    skip_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "uses": self.uses,
            "skipped": self.skipped,
            "skip_reason": self.skip_reason,
        }


@dataclass(eq=False)
class JobNode:
    """
    Job resolvido: um template vinculado a valores concretos.

    Campos:
        - id: identificador único (inclui coordenadas de matriz quando houver)
        - template: referência `name@version`
        - parameters: parâmetros vinculados (ordem de declaração do template)
        - steps: steps resolvidos, na ordem do template
        - needs: ids dos predecessores diretos, ordenados
        - matrix: coordenadas da matriz que originou o job (vazio se não houver)
        - status: estado atual (`JobStatus.PENDING` na criação)
    """
    id: str
    template: str
    parameters: Dict[str, Any]
    steps: Tuple[ResolvedStep, ...] = ()
    needs: Tuple[str, ...] = ()
    matrix: Dict[str, Any] = field(default_factory=dict)
    status: JobStatus = JobStatus.PENDING

    @property
    def executable_steps(self) -> List[ResolvedStep]:
        return [s for s in self.steps if not s.skipped]

    @property
    def skipped_steps(self) -> List[ResolvedStep]:
        return [s for s in self.steps if s.skipped]

    def transition(self, status: JobStatus) -> None:
        """Aplica uma transição de status válida; demais levantam erro."""
        if not self.status.can_transition_to(status):
            requested = status.value if isinstance(status, JobStatus) else str(status)
            raise InvalidStatusTransition(self.id, self.status.value, requested)
        self.status = JobStatus(status)

    def to_dict(self) -> Dict[str, Any]:
        """Representação estrutural do job (sem status, que é de runtime)."""
        return {
            "id": self.id,
            "template": self.template,
            "parameters": dict(self.parameters),
            "matrix": dict(self.matrix),
            "needs": list(self.needs),
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True)
class JobGraph:
    """
    Grafo de jobs resolvido, em arena indexada.

    `successors[i]` lista os índices dos dependentes diretos de
    `nodes[i]`, ordenados pelo id do job.
    """
    nodes: Tuple[JobNode, ...]
    index: Dict[str, int]
    successors: Tuple[Tuple[int, ...], ...]

    @classmethod
    def build(cls, nodes: Sequence[JobNode], edges: Sequence[Tuple[str, str]]) -> "JobGraph":
        index = {node.id: i for i, node in enumerate(nodes)}
        succ: List[set] = [set() for _ in nodes]
        for pred, dep in edges:
            succ[index[pred]].add(index[dep])
        ordered = tuple(
            tuple(sorted(s, key=lambda i: nodes[i].id)) for s in succ
        )
        return cls(nodes=tuple(nodes), index=index, successors=ordered)

    def node(self, job_id: str) -> JobNode:
        return self.nodes[self.index[job_id]]

    @property
    def ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    @property
    def edges(self) -> List[Tuple[str, str]]:
        """Arestas (predecessor, dependente) em ordem lexicográfica."""
        return sorted(
            (self.nodes[i].id, self.nodes[j].id)
            for i, targets in enumerate(self.successors)
            for j in targets
        )

    def __iter__(self) -> Iterator[JobNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
