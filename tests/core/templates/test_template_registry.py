# tests/core/templates/test_template_registry.py
"""
Testes do `TemplateRegistry`.

Os testes asseguram que:
- a identidade de um template é o par (name, version)
- registros duplicados são rejeitados com DuplicateTemplate
- lookups de name/version ausentes levantam NotFound
- catálogos em diretório são registrados em ordem lexicográfica de arquivo
"""

import json
import pytest
from pathlib import Path

try:
    from pipeplan.core.exceptions import CatalogDirectoryNotFound, DuplicateTemplate, InvalidTemplate, NotFound
    from pipeplan.core.templates.registry import TemplateRegistry
    from pipeplan.core.templates.types import TemplateDefinition
except Exception as e:  # noqa: BLE001
    DuplicateTemplate = None
    InvalidTemplate = None
    NotFound = None
    TemplateRegistry = None
    TemplateDefinition = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing registry. Implement:\n"
            "- src/pipeplan/core/templates/registry.py (TemplateRegistry)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_register_and_lookup(build_template):
    _require_imports()
    reg = TemplateRegistry()
    reg.register(build_template)

    assert reg.lookup("build", "1.0.0") is build_template
    assert ("build", "1.0.0") in reg
    assert len(reg) == 1


def test_duplicate_registration_is_rejected(build_template):
    """
    O mesmo name@version não pode ser registrado duas vezes; o original permanece.
    """
    _require_imports()
    reg = TemplateRegistry()
    reg.register(build_template)

    with pytest.raises(DuplicateTemplate) as excinfo:
        reg.register(TemplateDefinition(name="build", version="1.0.0"))

    assert excinfo.value.name == "build"
    assert excinfo.value.version == "1.0.0"
    assert reg.lookup("build", "1.0.0") is build_template


def test_lookup_missing_version_raises_not_found(registry):
    _require_imports()
    with pytest.raises(NotFound) as excinfo:
        registry.lookup("build", "2.0.0")

    assert excinfo.value.details == {"name": "build", "version": "2.0.0"}


def test_versions_and_list_follow_registration_order(registry):
    _require_imports()
    registry.register(TemplateDefinition(name="build", version="2.0.0"))

    assert registry.versions("build") == ["1.0.0", "2.0.0"]
    assert [t.ref for t in registry.list()] == ["build@1.0.0", "deploy@1.0.0", "build@2.0.0"]


def test_register_rejects_non_definitions():
    _require_imports()
    with pytest.raises(TypeError):
        TemplateRegistry().register({"name": "build", "version": "1.0.0"})


def test_load_catalog_directory(tmp_path: Path):
    """
    Arquivos YAML/JSON do diretório são registrados em ordem de nome;
    arquivos com outras extensões são ignorados.
    """
    _require_imports()
    (tmp_path / "b_lint.yaml").write_text(
        "name: lint\nversion: '1.0.0'\nsteps:\n  - id: lint\n    run: make lint\n",
        encoding="utf-8",
    )
    (tmp_path / "a_build.json").write_text(
        json.dumps({"name": "build", "version": "1.0.0", "steps": [{"id": "build", "uses": "make"}]}),
        encoding="utf-8",
    )
    (tmp_path / "README.md").write_text("# templates\n", encoding="utf-8")

    reg = TemplateRegistry()
    loaded = reg.load_catalog_directory(tmp_path)

    assert [t.ref for t in loaded] == ["build@1.0.0", "lint@1.0.0"]
    assert reg.lookup("lint", "1.0.0").steps[0].uses == "make lint"


def test_load_catalog_directory_requires_directory(tmp_path: Path):
    _require_imports()
    missing = tmp_path / "missing"
    with pytest.raises(CatalogDirectoryNotFound) as excinfo:
        TemplateRegistry().load_catalog_directory(missing)

    assert excinfo.value.details == {"directory": str(missing)}
