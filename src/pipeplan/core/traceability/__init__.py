# src/pipeplan/core/traceability/__init__.py
"""
Pacote de rastreabilidade do pipeplan — Manifest de planejamento.

API pública exposta:
    - PlanManifest      → estrutura canônica do Manifest
    - create_manifest   → criação explícita do Manifest
    - add_event         → registro explícito de eventos no Event Log
    - record_plan       → registra batches, fingerprint e estado inicial dos jobs
    - record_job_status → anexa status reportado por um executor externo
    - save_manifest     → persistência do Manifest em JSON
    - load_manifest     → restauração do Manifest

Decisões arquiteturais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem de chamada
"""

from .manifest import (
    PlanManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_job_status,
    record_plan,
    save_manifest,
)

__all__ = [
    "PlanManifest",
    "create_manifest",
    "add_event",
    "record_plan",
    "record_job_status",
    "save_manifest",
    "load_manifest",
]
