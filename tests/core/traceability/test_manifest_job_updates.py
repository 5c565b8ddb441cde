# tests/core/traceability/test_manifest_job_updates.py
"""
Testes do registro do plano e de status de jobs no Manifest.

Os testes asseguram que:
- `record_plan` grava batches, fingerprint e estado inicial `pending` por job
- steps pulados são registrados com o motivo
- `record_job_status` atualiza o status e registra um evento `job_status`
- jobs fora do plano, status desconhecidos e transições inválidas são rejeitados
"""

import pytest
from datetime import datetime, timezone

try:
    from pipeplan.core.engine.planner import plan
    from pipeplan.core.exceptions import InvalidStatusTransition, UnknownPlanJob
    from pipeplan.core.graph.model import JobStatus, ResolvedStep
    from pipeplan.core.traceability.manifest import create_manifest, record_job_status, record_plan
except Exception as e:  # noqa: BLE001
    plan = None
    JobStatus = None
    ResolvedStep = None
    create_manifest = None
    record_job_status = None
    record_plan = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

TS = datetime(2026, 1, 16, 0, 0, 1, tzinfo=timezone.utc)


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing manifest updates. Implement:\n"
            "- src/pipeplan/core/traceability/manifest.py (record_plan, record_job_status)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.fixture
def recorded(make_node):
    m = create_manifest(
        run_id="run-001",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        pipeplan_version="0.1.0",
        pipeline="ci",
        config_hash="abc",
    )
    build = make_node(
        "build",
        steps=(
            ResolvedStep(id="compile", uses="make"),
            ResolvedStep(id="test", uses="make test", skipped=True, skip_reason="condition"),
        ),
    )
    execution_plan = plan([build, make_node("deploy", needs=("build",))], [("build", "deploy")])
    record_plan(m, execution_plan, ts=TS)
    return m, execution_plan


def test_record_plan(recorded):
    _require_imports()
    m, execution_plan = recorded

    assert m.plan == {"batches": [["build"], ["deploy"]], "fingerprint": execution_plan.fingerprint()}
    assert m.jobs["build"]["status"] == "pending"
    assert m.jobs["build"]["skipped_steps"] == [{"id": "test", "reason": "condition"}]
    assert m.jobs["deploy"]["needs"] == ["build"]
    assert m.events[-1]["event_type"] == "plan_recorded"
    assert m.events[-1]["payload"]["jobs"] == 2


def test_record_job_status(recorded):
    _require_imports()
    m, _ = recorded

    record_job_status(m, job_id="build", status=JobStatus.RUNNING, ts=TS)
    record_job_status(m, job_id="build", status="succeeded", ts=TS)

    assert m.jobs["build"]["status"] == "succeeded"
    assert [e["payload"]["status"] for e in m.events if e["event_type"] == "job_status"] == [
        "running",
        "succeeded",
    ]


def test_record_job_status_rejects_unknown_job(recorded):
    _require_imports()
    m, _ = recorded

    with pytest.raises(UnknownPlanJob):
        record_job_status(m, job_id="lint", status="running", ts=TS)


def test_record_job_status_rejects_unknown_status(recorded):
    _require_imports()
    m, _ = recorded

    with pytest.raises(InvalidStatusTransition) as excinfo:
        record_job_status(m, job_id="build", status="cancelled", ts=TS)

    assert excinfo.value.requested == "cancelled"


def test_final_status_cannot_move_back(recorded):
    """
    Um job `succeeded` não volta para `pending`; o Manifest permanece
    inalterado e nenhum evento extra é registrado.
    """
    _require_imports()
    m, _ = recorded
    record_job_status(m, job_id="build", status="running", ts=TS)
    record_job_status(m, job_id="build", status="succeeded", ts=TS)
    events_before = len(m.events)

    with pytest.raises(InvalidStatusTransition) as excinfo:
        record_job_status(m, job_id="build", status="pending", ts=TS)

    assert excinfo.value.details == {"job_id": "build", "current": "succeeded", "requested": "pending"}
    assert m.jobs["build"]["status"] == "succeeded"
    assert len(m.events) == events_before


def test_pending_cannot_jump_to_succeeded_in_manifest(recorded):
    _require_imports()
    m, _ = recorded

    with pytest.raises(InvalidStatusTransition):
        record_job_status(m, job_id="deploy", status=JobStatus.SUCCEEDED, ts=TS)

    assert m.jobs["deploy"]["status"] == "pending"
