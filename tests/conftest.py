# tests/conftest.py
"""
Fixtures compartilhados para testes do pipeplan.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas em YAML (defaults + override local)
- templates canônicos (`build@1.0.0`, `deploy@1.0.0`) e um registry
- contexto de planejamento controlado (PlanningContext)
- uma fábrica de JobNodes para testes do planner

Decisões arquiteturais:
    - Imports do core são realizados de forma lazy dentro das fixtures,
      para que falhas de import apareçam no teste e não na coleta
    - Dados retornados são determinísticos e isolados por teste

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture compartilha estado mutável entre testes

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def planner_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao `config.defaults.yaml` distribuído.

    Usado por:
        - Testes do loader de config
        - Testes de deep-merge e hashing
    """
    return """\
planner:
  allow_empty: true
  record_skipped_steps: true
"""


@pytest.fixture
def planner_local_yaml() -> str:
    """YAML de override local: proíbe planos vazios."""
    return """\
planner:
  allow_empty: false
"""


@pytest.fixture
def planner_config() -> dict:
    """Configuração já resolvida, com os defaults explícitos."""
    return {"planner": {"allow_empty": True, "record_skipped_steps": True}}


# =====================================================
# Template fixtures
# =====================================================

@pytest.fixture
def build_template():
    """
    Template `build@1.0.0` no formato usado pelos testes.

    Parâmetros:
        - dotnet_version: string, obrigatório
        - configuration: enum [Debug, Release], default Release
        - run_tests: bool, default true

    Steps (em ordem):
        checkout → restore → build → test (if run_tests) → publish (if Release)
    """
    from pipeplan.core.conditions import parse_condition
    from pipeplan.core.templates.types import ParameterSpec, StepSpec, TemplateDefinition

    return TemplateDefinition(
        name="build",
        version="1.0.0",
        parameters=(
            ParameterSpec(name="dotnet_version", type="string", required=True),
            ParameterSpec(name="configuration", type="enum", allowed=("Debug", "Release"), default="Release"),
            ParameterSpec(name="run_tests", type="bool", default=True),
        ),
        steps=(
            StepSpec(id="checkout", uses="actions/checkout@v4"),
            StepSpec(id="restore", uses="dotnet restore", depends_on=("checkout",)),
            StepSpec(id="build", uses="dotnet build", depends_on=("restore",)),
            StepSpec(
                id="test",
                uses="dotnet test",
                condition=parse_condition("parameters.run_tests == true"),
                depends_on=("build",),
            ),
            StepSpec(
                id="publish",
                uses="dotnet publish",
                condition=parse_condition("parameters.configuration == 'Release'"),
                depends_on=("test",),
            ),
        ),
    )


@pytest.fixture
def deploy_template():
    """Template `deploy@1.0.0` com um único step e ambiente obrigatório."""
    from pipeplan.core.templates.types import ParameterSpec, StepSpec, TemplateDefinition

    return TemplateDefinition(
        name="deploy",
        version="1.0.0",
        parameters=(
            ParameterSpec(name="environment", type="enum", required=True, allowed=("staging", "production")),
        ),
        steps=(StepSpec(id="deploy", uses="./scripts/deploy.sh"),),
    )


@pytest.fixture
def registry(build_template, deploy_template):
    """Registry com `build@1.0.0` e `deploy@1.0.0` registrados."""
    from pipeplan.core.templates.registry import TemplateRegistry

    reg = TemplateRegistry()
    reg.register(build_template)
    reg.register(deploy_template)
    return reg


# =====================================================
# Planning fixtures
# =====================================================

@pytest.fixture
def planning_ctx(planner_config):
    """
    PlanningContext determinístico para testes.

    O `created_at` é fixo para que o Manifest gerado seja comparável.
    """
    from pipeplan.core.pipeline.context import PlanningContext

    return PlanningContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=planner_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def make_node():
    """
    Fábrica de JobNodes mínimos (sem steps) para testes do planner.

    Uso:
        node = make_node("A")
    """
    from pipeplan.core.graph.model import JobNode

    def _make(job_id: str, **kwargs):
        kwargs.setdefault("template", "build@1.0.0")
        kwargs.setdefault("parameters", {})
        return JobNode(id=job_id, **kwargs)

    return _make
