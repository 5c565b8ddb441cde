# src/pipeplan/core/config/__init__.py
"""
Camada de configuração do pipeplan.

Este pacote carrega, mescla e identifica a configuração usada pelo
engine de planejamento, além de fornecer o leitor de documentos
YAML/JSON reaproveitado pelo catálogo de templates.

A configuração é declarativa e determinística: a mesma entrada sempre
produz a mesma configuração final e o mesmo hash.

Responsabilidades do pacote:
    - Carregamento de arquivos (defaults + overrides locais)
    - Deep-merge determinístico
    - Hash canônico para rastreabilidade de planos
    - Projeção tipada da seção `planner` (`PlannerSettings`)

Limites explícitos:
    - Não resolve templates nem planeja jobs
    - Não depende de variáveis de ambiente
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import canonical_json, compute_config_hash
from .loader import load_config, read_document
from .merge import deep_merge
from .settings import PlannerSettings, default_config_path

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "canonical_json",
    "compute_config_hash",
    "load_config",
    "read_document",
    "deep_merge",
    "PlannerSettings",
    "default_config_path",
]
