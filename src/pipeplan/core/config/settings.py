# src/pipeplan/core/config/settings.py
"""
Projeção tipada da seção `planner` da configuração.

O engine não lê chaves soltas do dicionário de configuração: toda
leitura passa por `PlannerSettings.from_config`, que aplica defaults
explícitos e rejeita tipos inválidos sem coerção.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from pipeplan.core.exceptions import EngineConfigurationError

_DEFAULTS_FILE = Path(__file__).resolve().parents[2] / "config.defaults.yaml"


def default_config_path() -> Path:
    """Caminho do `config.defaults.yaml` distribuído com o pacote."""
    return _DEFAULTS_FILE


@dataclass(frozen=True)
class PlannerSettings:
    """
    Opções do planejamento.

    Campos:
        - allow_empty: pipelines sem jobs produzem um plano vazio (True)
          ou falham com `EmptyPlan` (False)
        - record_skipped_steps: registra um evento por step pulado no
          log do `PlanningContext`
    """

    allow_empty: bool = True
    record_skipped_steps: bool = True

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "PlannerSettings":
        section = (config or {}).get("planner", {})
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise EngineConfigurationError(
                "Config section 'planner' must be a mapping",
                key="planner",
                value=type(section).__name__,
            )

        values: Dict[str, bool] = {}
        for key in ("allow_empty", "record_skipped_steps"):
            if key not in section:
                continue
            value = section[key]
            if not isinstance(value, bool):
                raise EngineConfigurationError(
                    f"Config key 'planner.{key}' must be a boolean",
                    key=f"planner.{key}",
                    value=repr(value),
                )
            values[key] = value

        return cls(**values)
