# src/pipeplan/core/pipeline/context.py
"""
Contexto de planejamento do pipeplan.

Este módulo define o `PlanningContext`, a estrutura que acompanha uma
invocação de planejamento (resolve + plan) e concentra:
    - identidade e metadados da invocação
    - configuração resolvida
    - log de eventos estruturados
    - warnings não fatais por job

Princípios fundamentais:
    - Um contexto por invocação; não existe estado global
    - Eventos são registros estruturados (dict), não texto livre
    - O log é append-only e preserva a ordem de chamada

Invariantes:
    - Todo evento inclui `run_id`, `job_id`, `level`, `message` e `timestamp`
    - Warnings são agrupados por `job_id`

Limites explícitos:
    - Não resolve nem planeja (ver `engine.engine`)
    - Não persiste eventos (ver `traceability.manifest`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class PlanningContext:
    """
    Contexto de uma invocação de planejamento.

    `job_id=None` marca eventos de escopo do pipeline (ex.: início da
    resolução, plano publicado).
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, job_id: Optional[str], level: str, message: str, **extra: Any) -> None:
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        event = {
            "run_id": self.run_id,
            "job_id": job_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, job_id: str, message: str) -> None:
        self.warnings.setdefault(job_id, []).append(message)

    def events_for(self, job_id: Optional[str]) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["job_id"] == job_id]
