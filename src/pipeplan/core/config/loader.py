# src/pipeplan/core/config/loader.py
"""
Loader canônico de configuração do pipeplan.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

O mesmo leitor de documentos (`read_document`) é reutilizado pelo
catálogo de templates, de modo que YAML e JSON recebem exatamente as
mesmas validações estruturais nas duas camadas.

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não valida semântica (ver `PlannerSettings`)
    - Não interage com registry, resolver ou planner
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
SUPPORTED_SUFFIXES = YAML_SUFFIXES | JSON_SUFFIXES


def read_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Lê um documento YAML/JSON do disco e valida sua estrutura básica.

    Arquivos vazios são interpretados como dicionários vazios.

    Args:
        path (Union[str, Path]): Caminho do documento.

    Returns:
        Dict[str, Any]: Conteúdo carregado.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    path = Path(path)
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Documento {path.name} deve ter root dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: Union[str, Path],
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva do engine.

    Política de resolução:
        - O arquivo de defaults é obrigatório
        - O arquivo local é opcional; se o caminho não existir, é ignorado
        - Quando presente, o local tem prioridade via `deep_merge`

    Args:
        defaults_path: Caminho para o arquivo de configuração base.
        local_path: Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    defaults_file = Path(defaults_path)
    if not defaults_file.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {defaults_file}")

    effective = read_document(defaults_file)

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, read_document(local_file))

    return effective
