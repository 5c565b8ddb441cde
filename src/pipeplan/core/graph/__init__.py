# src/pipeplan/core/graph/__init__.py
"""
Resolução do pipeline em grafo de jobs.

Componentes:
    - model    → JobStatus, ResolvedStep, JobNode, JobGraph (arena indexada)
    - cycles   → detecção de ciclos (DFS iterativa em três cores)
    - resolver → `resolve(pipeline, registry)`: templates, matriz, binding,
                 condições de steps e arestas `needs`

Limites explícitos:
    - Não ordena jobs em batches (ver `engine.planner`)
"""

from .cycles import find_cycle
from .model import JobGraph, JobNode, JobStatus, ResolvedStep
from .resolver import SKIP_CONDITION, SKIP_DEPENDENCY, expand_matrix, resolve, resolve_steps

__all__ = [
    "JobGraph",
    "JobNode",
    "JobStatus",
    "ResolvedStep",
    "SKIP_CONDITION",
    "SKIP_DEPENDENCY",
    "expand_matrix",
    "find_cycle",
    "resolve",
    "resolve_steps",
]
