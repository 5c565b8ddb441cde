# tests/core/pipeline/test_pipeline_definition.py
"""
Testes da leitura de definições de pipeline (`pipeline_from_dict`, `load_pipeline_file`).

Os testes asseguram que:
- `template: name@version` e chaves separadas são equivalentes
- `jobs` aceita lista ou mapa `id -> entrada`
- `needs` aceita string única ou lista
- documentos malformados levantam InvalidPipeline
"""

import pytest
from pathlib import Path

try:
    from pipeplan.core.exceptions import InvalidPipeline
    from pipeplan.core.pipeline.definition import JobSpec, load_pipeline_file, pipeline_from_dict
except Exception as e:  # noqa: BLE001
    InvalidPipeline = None
    JobSpec = None
    load_pipeline_file = None
    pipeline_from_dict = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing pipeline definition. Implement:\n"
            "- src/pipeplan/core/pipeline/definition.py (pipeline_from_dict, load_pipeline_file)\n"
            f"Import error: {_IMPORT_ERR}"
        )


_PIPELINE_YAML = """\
name: ci
jobs:
  - id: build
    template: build@1.0.0
    parameters:
      dotnet_version: 8.0.x
  - id: deploy
    template: deploy
    version: 1.0.0
    with:
      environment: staging
    needs: [build]
"""


def test_load_pipeline_file(tmp_path: Path):
    """
    As duas formas de referência de template produzem o mesmo formato de JobSpec.
    """
    _require_imports()
    path = tmp_path / "pipeline.yaml"
    path.write_text(_PIPELINE_YAML, encoding="utf-8")

    pipeline = load_pipeline_file(path)

    assert pipeline.name == "ci"
    assert pipeline.jobs == (
        JobSpec(id="build", template="build", version="1.0.0", parameters={"dotnet_version": "8.0.x"}),
        JobSpec(
            id="deploy",
            template="deploy",
            version="1.0.0",
            parameters={"environment": "staging"},
            needs=("build",),
        ),
    )


def test_jobs_mapping_form_preserves_order():
    _require_imports()
    pipeline = pipeline_from_dict(
        {
            "jobs": {
                "lint": {"template": "lint@1"},
                "build": {"template": "build@1", "needs": "lint"},
            }
        }
    )

    assert pipeline.name == "pipeline"
    assert [j.id for j in pipeline.jobs] == ["lint", "build"]
    assert pipeline.jobs[1].needs == ("lint",)


def test_missing_version_is_rejected():
    _require_imports()
    with pytest.raises(InvalidPipeline) as excinfo:
        pipeline_from_dict({"name": "ci", "jobs": [{"id": "build", "template": "build"}]})

    assert "version" in excinfo.value.reason


def test_version_in_both_places_is_rejected():
    _require_imports()
    with pytest.raises(InvalidPipeline):
        pipeline_from_dict({"jobs": [{"id": "b", "template": "build@1", "version": "2"}]})


def test_unknown_job_field_is_rejected():
    _require_imports()
    with pytest.raises(InvalidPipeline) as excinfo:
        pipeline_from_dict({"jobs": [{"id": "b", "template": "build@1", "runs-on": "linux"}]})

    assert "runs-on" in excinfo.value.reason


def test_empty_matrix_axis_is_rejected():
    _require_imports()
    with pytest.raises(InvalidPipeline):
        pipeline_from_dict({"jobs": [{"id": "b", "template": "build@1", "matrix": {"os": []}}]})


def test_jobs_must_be_list_or_mapping():
    _require_imports()
    with pytest.raises(InvalidPipeline):
        pipeline_from_dict({"jobs": "build"})


def test_job_spec_wraps_single_string_values():
    """
    Construído diretamente, um `JobSpec` trata string avulsa em `needs` ou
    num eixo de matriz como um único valor (nunca como sequência de chars).
    """
    _require_imports()
    job = JobSpec(
        id="test",
        template="build",
        version="1.0.0",
        needs="build",
        matrix={"dotnet_version": "8.0", "os": ["linux", "windows"]},
    )

    assert job.needs == ("build",)
    assert job.matrix == {"dotnet_version": ("8.0",), "os": ("linux", "windows")}
