# src/pipeplan/core/pipeline/definition.py
"""
Definição de pipeline de topo.

Um pipeline é uma lista ordenada de entradas de job. Cada entrada
referencia um template (`name@version`), fornece valores de parâmetros,
declara predecessores (`needs`) e, opcionalmente, uma matriz que a
expande em vários jobs.

A definição é parseada externamente (YAML/JSON) e entregue como
estrutura de dicionários:

    name: ci
    jobs:
      - id: build
        template: build@1.0.0
        parameters: {dotnet_version: "8.0.x"}
      - id: test
        template: test
        version: 1.0.0
        needs: [build]
        matrix:
          os: [linux, windows]

`jobs` também pode ser um mapa `id -> entrada` (estilo GitHub Actions).

Limites explícitos:
    - Não consulta o registry nem vincula parâmetros (ver `graph.resolver`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pipeplan.core.config.loader import read_document
from pipeplan.core.exceptions import InvalidPipeline

_JOB_KEYS = {"id", "template", "version", "parameters", "with", "needs", "matrix"}


def _as_tuple(value: Any) -> Tuple[Any, ...]:
    """Listas/tuplas viram tupla; um valor avulso (inclusive str) vira tupla de um item."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class JobSpec:
    """
    Entrada de job como declarada pelo chamador.

    Campos:
        - id: identificador do job (base dos ids expandidos por matriz)
        - template / version: referência ao template registrado
        - parameters: valores fornecidos ao binder
        - needs: ids de jobs predecessores
        - matrix: nome de parâmetro -> valores (produto cartesiano)
    """
    id: str
    template: str
    version: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    needs: Tuple[str, ...] = ()
    matrix: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "needs", _as_tuple(self.needs))
        object.__setattr__(self, "parameters", dict(self.parameters))
        object.__setattr__(self, "matrix", {k: _as_tuple(v) for k, v in self.matrix.items()})


@dataclass(frozen=True)
class PipelineDefinition:
    name: str
    jobs: Tuple[JobSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "jobs", tuple(self.jobs))


def _split_template_ref(pipeline: str, job_id: str, data: Dict[str, Any]) -> Tuple[str, str]:
    template = data.get("template")
    version = data.get("version")

    if isinstance(template, str) and "@" in template:
        if version is not None:
            raise InvalidPipeline(pipeline, f"job '{job_id}' sets a version both in 'template' and 'version'")
        template, version = template.rsplit("@", 1)

    if not isinstance(template, str) or not template:
        raise InvalidPipeline(pipeline, f"job '{job_id}' requires a 'template'")
    if not isinstance(version, str) or not version:
        raise InvalidPipeline(pipeline, f"job '{job_id}' requires a string template version")
    return template, version


def _job_from_dict(pipeline: str, data: Any) -> JobSpec:
    if not isinstance(data, dict):
        raise InvalidPipeline(pipeline, f"job entry must be a mapping, got {type(data).__name__}")

    job_id = data.get("id")
    if not isinstance(job_id, str) or not job_id.strip():
        raise InvalidPipeline(pipeline, "job requires a non-empty 'id'")

    extra = sorted(set(data) - _JOB_KEYS)
    if extra:
        raise InvalidPipeline(pipeline, f"job '{job_id}' has unknown field '{extra[0]}'")

    if "parameters" in data and "with" in data:
        raise InvalidPipeline(pipeline, f"job '{job_id}' declares both 'parameters' and 'with'")
    parameters = data.get("parameters", data.get("with")) or {}
    if not isinstance(parameters, dict):
        raise InvalidPipeline(pipeline, f"'parameters' of job '{job_id}' must be a mapping")

    needs = data.get("needs") or []
    if isinstance(needs, str):
        needs = [needs]
    if not isinstance(needs, list) or not all(isinstance(n, str) for n in needs):
        raise InvalidPipeline(pipeline, f"'needs' of job '{job_id}' must be a list of job ids")

    matrix = data.get("matrix") or {}
    if not isinstance(matrix, dict):
        raise InvalidPipeline(pipeline, f"'matrix' of job '{job_id}' must be a mapping")
    for key, values in matrix.items():
        if not isinstance(values, list) or not values:
            raise InvalidPipeline(pipeline, f"matrix axis '{key}' of job '{job_id}' must be a non-empty list")

    template, version = _split_template_ref(pipeline, job_id, data)
    return JobSpec(
        id=job_id,
        template=template,
        version=version,
        parameters=parameters,
        needs=tuple(needs),
        matrix=matrix,
    )


def pipeline_from_dict(data: Dict[str, Any]) -> PipelineDefinition:
    """
    Constrói a `PipelineDefinition` a partir de um documento já parseado.

    Raises:
        InvalidPipeline: Se o documento não respeitar o formato.
    """
    if not isinstance(data, dict):
        raise InvalidPipeline("<unknown>", f"pipeline document must be a mapping, got {type(data).__name__}")

    name = data.get("name") or "pipeline"
    if not isinstance(name, str):
        raise InvalidPipeline(str(name), "pipeline name must be a string")

    raw_jobs = data.get("jobs") or []
    entries: List[Any] = []
    if isinstance(raw_jobs, dict):
        for job_id, entry in raw_jobs.items():
            if isinstance(entry, dict):
                if "id" in entry and entry["id"] != job_id:
                    raise InvalidPipeline(name, f"job key '{job_id}' does not match its id '{entry['id']}'")
                entry = {"id": job_id, **entry}
            entries.append(entry)
    elif isinstance(raw_jobs, list):
        entries = list(raw_jobs)
    else:
        raise InvalidPipeline(name, "'jobs' must be a list or a mapping")

    return PipelineDefinition(name=name, jobs=tuple(_job_from_dict(name, e) for e in entries))


def load_pipeline_file(path: Union[str, Path]) -> PipelineDefinition:
    """Lê um documento de pipeline (YAML/JSON) do disco."""
    return pipeline_from_dict(read_document(path))
