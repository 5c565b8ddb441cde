# src/pipeplan/core/config/errors.py
"""
Exceções da camada de configuração do pipeplan.

Representam falhas estruturais ao ler ou mesclar documentos de
configuração (e, por reuso do leitor, documentos de catálogo).
Todas herdam de `ConfigError` e são tratadas como falhas fatais:
não existe fallback nem recuperação automática.
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração do pipeplan.

    Permite capturar de forma genérica qualquer falha de load/merge,
    separando-a das falhas de validação do engine (`PipeplanException`).
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo obrigatório (defaults ou documento de catálogo) inexistente.

    Invariantes:
        - Sem defaults não existe configuração efetiva válida
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada pelo leitor.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    O formato nunca é inferido pelo conteúdo.
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Conteúdo raiz do documento não é um mapa (`dict`).

    Listas ou escalares no root são rejeitados sem tentativa de
    normalização.
    """


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"planner": {"allow_empty": true}}
        - override: {"planner": "strict"}

    Nenhum merge parcial é produzido e nenhuma coerção é tentada.
    """
