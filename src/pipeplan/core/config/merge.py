# src/pipeplan/core/config/merge.py
"""
Deep-merge determinístico de configuração.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito, com o caminho pontuado
      da chave (ex.: `planner.allow_empty`)

O merge é puramente funcional: nenhum input é mutado.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def _type_name(value: Any) -> str:
    return type(value).__name__


def _merge_value(base: Any, override: Any, path: str) -> Any:
    if isinstance(base, dict) and isinstance(override, dict):
        merged = {k: deepcopy(v) for k, v in base.items()}
        for key, value in override.items():
            child = f"{path}.{key}" if path else str(key)
            merged[key] = _merge_value(merged[key], value, child) if key in merged else deepcopy(value)
        return merged

    if not isinstance(override, list) and type(base) is not type(override):
        raise ConfigTypeConflictError(
            f"Conflito de tipo na chave '{path}': {_type_name(base)} vs {_type_name(override)}"
        )
    return deepcopy(override)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `base` (defaults) com `override` (config local), retornando um
    novo dicionário.

    Raises:
        ConfigTypeConflictError: Se algum dos lados não for dict, ou se a
            mesma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: {_type_name(base)} vs {_type_name(override)}"
        )
    return _merge_value(base, override, "")
