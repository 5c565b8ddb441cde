# src/pipeplan/__init__.py
"""
pipeplan — resolução de templates de pipeline e planejamento de execução.

Fluxo de uma invocação:

    registry = TemplateRegistry()
    registry.load_catalog_directory("templates/")
    pipeline = load_pipeline_file("pipeline.yaml")
    result = PlanningEngine(registry=registry, ctx=ctx).run(pipeline)
    result.plan.batches   # [("build",), ("test[os=linux]", "test[os=windows]")]

O plano é entregue a um executor externo; o pipeplan não executa jobs.
"""

from .core.binding import bind
from .core.engine import PIPEPLAN_VERSION, ExecutionPlan, PlanningEngine, PlanResult, plan, plan_graph
from .core.graph import JobGraph, JobNode, JobStatus, ResolvedStep, resolve
from .core.pipeline import JobSpec, PipelineDefinition, PlanningContext, load_pipeline_file, pipeline_from_dict
from .core.templates import (
    ParameterSpec,
    ParamType,
    StepSpec,
    TemplateDefinition,
    TemplateRegistry,
    load_template_file,
    template_from_dict,
)

__version__ = PIPEPLAN_VERSION

__all__ = [
    "ExecutionPlan",
    "JobGraph",
    "JobNode",
    "JobSpec",
    "JobStatus",
    "ParameterSpec",
    "ParamType",
    "PipelineDefinition",
    "PlanResult",
    "PlanningContext",
    "PlanningEngine",
    "ResolvedStep",
    "StepSpec",
    "TemplateDefinition",
    "TemplateRegistry",
    "bind",
    "load_pipeline_file",
    "load_template_file",
    "pipeline_from_dict",
    "plan",
    "plan_graph",
    "resolve",
    "template_from_dict",
]
