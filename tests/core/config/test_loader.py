# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config / read_document).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional e, quando presente, sobrescreve via deep-merge
- formatos não suportados e roots que não são mapa são rejeitados
- YAML e JSON passam pelas mesmas validações estruturais

Invariantes:
    - A configuração final é sempre um dicionário
    - Nenhuma configuração parcial é retornada em caso de erro

Limites explícitos:
    - Não valida a projeção tipada (ver test_planner_settings.py)
"""

import json
import pytest
from pathlib import Path

try:
    from pipeplan.core.config.loader import load_config, read_document
    from pipeplan.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    read_document = None
    DefaultsNotFoundError = None
    InvalidConfigRootTypeError = None
    UnsupportedConfigFormatError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o loader de configuração e suas exceções tipadas estejam disponíveis.

    Falha imediatamente, com mensagem que aponta os módulos esperados,
    quando `loader` ou `errors` não podem ser importados.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/pipeplan/core/config/loader.py (load_config, read_document)\n"
            "- src/pipeplan/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    """
    A ausência do arquivo defaults é erro fatal, antes de qualquer merge.
    """
    _require_imports()
    missing = tmp_path / "defaults.yaml"

    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(missing), local_path=None)


def test_missing_local_is_ok(tmp_path: Path, planner_defaults_yaml):
    """
    Um caminho local inexistente é ignorado e os defaults prevalecem.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))

    assert out["planner"]["allow_empty"] is True
    assert out["planner"]["record_skipped_steps"] is True


def test_load_defaults_and_local(tmp_path: Path, planner_defaults_yaml, planner_local_yaml):
    """
    Verifica o deep-merge defaults + local.

    - chaves sobrescritas assumem o valor local
    - chaves não sobrescritas preservam o default
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")
    local.write_text(planner_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=defaults, local_path=local)

    assert out["planner"]["allow_empty"] is False
    assert out["planner"]["record_skipped_steps"] is True


def test_json_defaults_are_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.json"
    defaults.write_text(json.dumps({"planner": {"allow_empty": False}}), encoding="utf-8")

    out = load_config(defaults_path=defaults)

    assert out == {"planner": {"allow_empty": False}}


def test_empty_document_is_empty_dict(tmp_path: Path):
    _require_imports()
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    assert read_document(empty) == {}


def test_invalid_root_type_raises(tmp_path: Path):
    """
    Um documento cujo root é lista é rejeitado sem normalização.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- planner\n- catalog\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=defaults)


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("[planner]\nallow_empty = true\n", encoding="utf-8")

    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=defaults)
