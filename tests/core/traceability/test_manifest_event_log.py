# tests/core/traceability/test_manifest_event_log.py
"""
Testes do Event Log do Manifest (`add_event`).

Invariantes:
    - Cada chamada adiciona exatamente um evento, na ordem de chamada
    - `job_id` e `payload` só aparecem quando fornecidos
    - A API aceita o Manifest como objeto ou como dicionário
"""

import pytest
from datetime import datetime, timezone

try:
    from pipeplan.core.traceability.manifest import add_event, create_manifest
except Exception as e:  # noqa: BLE001
    add_event = None
    create_manifest = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing manifest. Implement:\n"
            "- src/pipeplan/core/traceability/manifest.py (add_event)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _manifest():
    return create_manifest(
        run_id="run-001",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        pipeplan_version="0.1.0",
        pipeline="ci",
        config_hash="abc",
    )


def test_events_preserve_call_order():
    _require_imports()
    m = _manifest()
    ts = datetime(2026, 1, 16, 0, 0, 1, tzinfo=timezone.utc)

    add_event(m, event_type="plan_recorded", ts=ts, payload={"jobs": 2})
    add_event(m, event_type="job_status", ts=ts, job_id="build")

    assert [e["event_type"] for e in m.events] == ["plan_recorded", "job_status"]
    assert m.events[0] == {
        "event_type": "plan_recorded",
        "timestamp": "2026-01-16T00:00:01+00:00",
        "payload": {"jobs": 2},
    }
    assert "payload" not in m.events[1]
    assert m.events[1]["job_id"] == "build"


def test_add_event_on_dict_manifest():
    """
    Um Manifest em forma de dicionário é atualizado in-place.
    """
    _require_imports()
    data = _manifest().to_dict()

    add_event(data, event_type="note", ts=datetime(2026, 1, 16, tzinfo=timezone.utc))

    assert [e["event_type"] for e in data["events"]] == ["note"]
