# src/pipeplan/core/config/hashing.py
"""
Hashing canônico do pipeplan.

Gera identidades determinísticas (SHA-256 sobre JSON canônico) para a
configuração efetiva e para planos de execução. Estruturas equivalentes
produzem o mesmo hash independentemente da ordem original das chaves.
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(data: Any) -> str:
    """
    Serializa `data` em JSON canônico.

    Política (v1):
        - chaves ordenadas
        - separadores compactos
        - UTF-8 sem escape de caracteres não ASCII

    Args:
        data (Any): Estrutura JSON-serializável.

    Returns:
        str: Representação canônica e estável.
    """
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva.

    Args:
        config (Dict[str, Any]): Configuração resolvida.

    Returns:
        str: Hash SHA-256 hexadecimal (64 caracteres).

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
