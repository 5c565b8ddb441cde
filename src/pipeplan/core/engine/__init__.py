# src/pipeplan/core/engine/__init__.py
"""
Engine do pipeplan.

Componentes principais:
    - planner → ordenação topológica em batches (`plan`, `ExecutionPlan`)
    - engine  → fachada resolve + plan com eventos e Manifest (`PlanningEngine`)

Princípios fundamentais:
    - Planejamento é uma função pura das entradas
    - A ordem dos batches é determinística para o mesmo grafo
    - Jobs não são executados aqui; o plano é entregue a um executor externo
"""

from .engine import PIPEPLAN_VERSION, PlanningEngine, PlanResult
from .planner import ExecutionPlan, plan, plan_graph

__all__ = [
    "PIPEPLAN_VERSION",
    "ExecutionPlan",
    "PlanResult",
    "PlanningEngine",
    "plan",
    "plan_graph",
]
