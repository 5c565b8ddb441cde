# src/pipeplan/core/traceability/manifest.py
"""
Manifest de planejamento — registro auditável de uma invocação do pipeplan.

O Manifest consolida, de forma determinística:
    - metadados da invocação (run)
    - entradas semânticas (pipeline, hash da configuração)
    - o plano publicado (batches + fingerprint)
    - estado por job (template, parâmetros, steps pulados, status)
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico de todos os timestamps
    - O formato de persistência é JSON com chaves ordenadas
    - `record_job_status` existe para o executor externo anexar resultados;
      o planner nunca o chama

Limites explícitos:
    - Não resolve nem planeja
    - Transições de status seguem `JobStatus.can_transition_to`
    - Não realiza migração de versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from pipeplan.core.exceptions import InvalidStatusTransition, UnknownPlanJob
from pipeplan.core.graph.model import JobStatus

if TYPE_CHECKING:
    from pipeplan.core.engine.planner import ExecutionPlan


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Timestamps sem timezone são assumidos como UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class PlanManifest:
    """
    Manifest de uma invocação de planejamento.

    Campos principais:
        - run: run_id, created_at, pipeplan_version
        - inputs: pipeline, config_hash
        - plan: batches e fingerprint do plano publicado (vazio até `record_plan`)
        - jobs: estado por job, indexado por job_id
        - events: Event Log ordenado

    Invariantes:
        - `jobs` é sempre um dicionário indexado por job_id
        - `events` é sempre uma lista na ordem de chamada
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    plan: Dict[str, Any] = field(default_factory=dict)
    jobs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável; alterações no retorno não afetam o Manifest."""
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "plan": json.loads(json.dumps(self.plan)),
            "jobs": {k: json.loads(json.dumps(v)) for k, v in self.jobs.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanManifest":
        """Reconstrução permissiva: campos ausentes viram estruturas vazias."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            plan=dict(data.get("plan", {}) or {}),
            jobs={k: dict(v) for k, v in (data.get("jobs", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    created_at: datetime,
    pipeplan_version: str,
    pipeline: str,
    config_hash: str,
) -> PlanManifest:
    """
    Cria o Manifest inicial de uma invocação.

    O Event Log inicia vazio; nenhum evento é registrado aqui.
    """
    return PlanManifest(
        run={
            "run_id": run_id,
            "created_at": _iso(created_at),
            "pipeplan_version": pipeplan_version,
        },
        inputs={
            "pipeline": pipeline,
            "config_hash": config_hash,
        },
    )


def _get_manifest(manifest: Union[PlanManifest, Dict[str, Any]]) -> Tuple[PlanManifest, bool]:
    if isinstance(manifest, PlanManifest):
        return manifest, False
    return PlanManifest.from_dict(manifest), True


def _sync(manifest: Union[PlanManifest, Dict[str, Any]], m: PlanManifest, is_dict: bool) -> None:
    if is_dict:
        manifest.clear()
        manifest.update(m.to_dict())


def add_event(
    manifest: Union[PlanManifest, Dict[str, Any]],
    *,
    event_type: str,
    ts: datetime,
    job_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento ao Event Log.

    Cada chamada adiciona exatamente um evento; eventos não são
    reordenados nem deduplicados.
    """
    m, is_dict = _get_manifest(manifest)

    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if job_id is not None:
        ev["job_id"] = job_id
    if payload is not None:
        ev["payload"] = payload

    m.events.append(ev)
    _sync(manifest, m, is_dict)


def record_plan(manifest: Union[PlanManifest, Dict[str, Any]], plan: "ExecutionPlan", *, ts: datetime) -> None:
    """
    Registra o plano publicado: batches, fingerprint e estado inicial por job.

    Todo job entra como `pending`; steps pulados são registrados com o motivo.
    """
    m, is_dict = _get_manifest(manifest)

    fingerprint = plan.fingerprint()
    m.plan = {
        "batches": [list(b) for b in plan.batches],
        "fingerprint": fingerprint,
    }

    for batch_index, batch in enumerate(plan.batches):
        for job_id in batch:
            node = plan.jobs[job_id]
            m.jobs[job_id] = {
                "job_id": job_id,
                "template": node.template,
                "parameters": dict(node.parameters),
                "matrix": dict(node.matrix),
                "needs": list(node.needs),
                "batch": batch_index,
                "status": node.status.value,
                "skipped_steps": [
                    {"id": s.id, "reason": s.skip_reason} for s in node.skipped_steps
                ],
            }

    add_event(
        m,
        event_type="plan_recorded",
        ts=ts,
        payload={"jobs": len(plan), "batches": len(plan.batches), "fingerprint": fingerprint},
    )
    _sync(manifest, m, is_dict)


def record_job_status(
    manifest: Union[PlanManifest, Dict[str, Any]],
    *,
    job_id: str,
    status: Union[JobStatus, str],
    ts: datetime,
) -> None:
    """
    Anexa um status reportado pelo executor externo.

    A mudança segue as mesmas transições de `JobNode.transition`
    (pending → running | skipped, running → succeeded | failed).

    Raises:
        UnknownPlanJob: Se `job_id` não pertence ao plano registrado.
        InvalidStatusTransition: Se `status` for desconhecido ou não for um
            próximo estado válido a partir do status registrado.
    """
    m, is_dict = _get_manifest(manifest)

    if job_id not in m.jobs:
        raise UnknownPlanJob(job_id)

    current = JobStatus(m.jobs[job_id].get("status", JobStatus.PENDING.value))
    if not current.can_transition_to(status):
        requested = status.value if isinstance(status, JobStatus) else str(status)
        raise InvalidStatusTransition(job_id, current.value, requested)
    status = JobStatus(status)

    m.jobs[job_id]["status"] = status.value
    m.jobs[job_id]["updated_at"] = _iso(ts)

    add_event(m, event_type="job_status", ts=ts, job_id=job_id, payload={"status": status.value})
    _sync(manifest, m, is_dict)


def save_manifest(manifest: Union[PlanManifest, Dict[str, Any]], path: Path) -> None:
    """
    Persiste o Manifest em JSON (chaves ordenadas, indentado).

    Diretórios intermediários são criados automaticamente.
    """
    data = manifest.to_dict() if isinstance(manifest, PlanManifest) else manifest
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> PlanManifest:
    """Restaura um Manifest salvo por `save_manifest`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return PlanManifest.from_dict(data)
