# tests/core/traceability/test_manifest_round_trip.py
"""
Testes de persistência do Manifest (save_manifest / load_manifest).

Os testes asseguram que o conteúdo sobrevive ao round-trip em disco e
que o JSON gravado é determinístico (chaves ordenadas).
"""

import json
import pytest
from datetime import datetime, timezone
from pathlib import Path

try:
    from pipeplan.core.engine.planner import plan
    from pipeplan.core.traceability.manifest import create_manifest, load_manifest, record_plan, save_manifest
except Exception as e:  # noqa: BLE001
    plan = None
    create_manifest = None
    load_manifest = None
    record_plan = None
    save_manifest = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing manifest persistence. Implement:\n"
            "- src/pipeplan/core/traceability/manifest.py (save_manifest, load_manifest)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_manifest_round_trip(tmp_path: Path, make_node):
    """
    Um Manifest com plano registrado é salvo e restaurado sem perdas.
    """
    _require_imports()
    m = create_manifest(
        run_id="run-001",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        pipeplan_version="0.1.0",
        pipeline="ci",
        config_hash="abc",
    )
    record_plan(
        m,
        plan([make_node("build", parameters={"os": "linux"}), make_node("deploy")], [("build", "deploy")]),
        ts=datetime(2026, 1, 16, 0, 0, 1, tzinfo=timezone.utc),
    )

    path = tmp_path / "out" / "manifest.json"
    save_manifest(m, path)
    loaded = load_manifest(path)

    assert loaded.to_dict() == m.to_dict()
    assert loaded.jobs["build"]["parameters"] == {"os": "linux"}


def test_saved_json_is_sorted(tmp_path: Path):
    _require_imports()
    m = create_manifest(
        run_id="run-001",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        pipeplan_version="0.1.0",
        pipeline="ci",
        config_hash="abc",
    )
    path = tmp_path / "manifest.json"
    save_manifest(m, path)

    text = path.read_text(encoding="utf-8")
    assert text == json.dumps(json.loads(text), ensure_ascii=False, indent=2, sort_keys=True)
    assert list(json.loads(text)) == ["events", "inputs", "jobs", "plan", "run"]
