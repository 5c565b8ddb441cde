# src/pipeplan/core/engine/engine.py
"""
Engine de planejamento do pipeplan.

Fachada que encadeia as etapas de uma invocação:

    1. Lê as opções do planejamento (`PlannerSettings`) de `ctx.config`
    2. Resolve o pipeline em grafo (`graph.resolver.resolve`)
    3. Ordena o grafo em batches (`planner.plan_graph`)
    4. Registra eventos no `PlanningContext` e monta o Manifest

Eventos registrados (campo `message`):
    - resolve_started : início da invocação (pipeline, número de entradas)
    - step_skipped    : um por step pulado (se `planner.record_skipped_steps`)
    - plan_built      : plano publicado (jobs, batches, fingerprint)
    - plan_failed     : falha com o ErrorPayload serializado

Decisões arquiteturais:
    - Falhas são registradas e relançadas; nenhum plano parcial é devolvido
    - Job com todos os steps pulados gera warning, não erro
    - O engine não executa jobs nem altera seus status
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from pipeplan.core.config.hashing import compute_config_hash
from pipeplan.core.config.settings import PlannerSettings
from pipeplan.core.errors import error_payload_from_exception
from pipeplan.core.graph.resolver import resolve
from pipeplan.core.pipeline.context import PlanningContext
from pipeplan.core.pipeline.definition import PipelineDefinition
from pipeplan.core.templates.registry import TemplateRegistry
from pipeplan.core.traceability.manifest import PlanManifest, create_manifest, record_plan

from .planner import ExecutionPlan, plan_graph

PIPEPLAN_VERSION = "0.1.0"


@dataclass(frozen=True)
class PlanResult:
    """Resultado de uma invocação: plano publicado + Manifest."""

    plan: ExecutionPlan
    manifest: PlanManifest


class PlanningEngine:
    """Engine canônico do pipeplan (resolver + planner)."""

    def __init__(self, *, registry: TemplateRegistry, ctx: PlanningContext):
        self.registry = registry
        self.ctx = ctx

    def _report_skips(self, plan: ExecutionPlan, settings: PlannerSettings) -> None:
        for job_id in plan.order:
            node = plan.jobs[job_id]
            if settings.record_skipped_steps:
                for step in node.skipped_steps:
                    self.ctx.log(
                        job_id=job_id,
                        level="INFO",
                        message="step_skipped",
                        step_id=step.id,
                        reason=step.skip_reason,
                    )
            if node.steps and not node.executable_steps:
                self.ctx.add_warning(job_id=job_id, message="all steps of the job were skipped")

    def run(self, pipeline: PipelineDefinition) -> PlanResult:
        """
        Resolve e planeja `pipeline`.

        Raises:
            PipeplanException: Qualquer falha de validação, após registrar
                `plan_failed` no contexto.
        """
        self.ctx.log(
            job_id=None,
            level="INFO",
            message="resolve_started",
            pipeline=pipeline.name,
            jobs=len(pipeline.jobs),
        )

        try:
            settings = PlannerSettings.from_config(self.ctx.config)
            graph = resolve(pipeline, self.registry)
            plan = plan_graph(graph, allow_empty=settings.allow_empty, pipeline=pipeline.name)
        except Exception as e:
            error = error_payload_from_exception(e)
            self.ctx.log(job_id=None, level="ERROR", message="plan_failed", error=error.to_dict())
            raise

        self._report_skips(plan, settings)

        fingerprint = plan.fingerprint()
        self.ctx.log(
            job_id=None,
            level="INFO",
            message="plan_built",
            jobs=len(plan),
            batches=len(plan.batches),
            fingerprint=fingerprint,
        )

        manifest = create_manifest(
            run_id=self.ctx.run_id,
            created_at=self.ctx.created_at,
            pipeplan_version=PIPEPLAN_VERSION,
            pipeline=pipeline.name,
            config_hash=compute_config_hash(dict(self.ctx.config or {})),
        )
        record_plan(manifest, plan, ts=datetime.now(timezone.utc))

        return PlanResult(plan=plan, manifest=manifest)
