# src/pipeplan/core/templates/registry.py
"""
Registro de templates do pipeplan.

Este módulo define o `TemplateRegistry`, que armazena definições de
template indexadas por `name@version`.

Decisões arquiteturais:
    - A identidade de um template é o par (name, version)
    - Registros são definitivos: não há substituição nem remoção
    - A ordem de registro é preservada separadamente do índice

Invariantes:
    - Cada `name@version` aparece no máximo uma vez
    - Definições registradas nunca são alteradas (são frozen)

Limites explícitos:
    - Não vincula parâmetros
    - Não resolve pipelines
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union

from pipeplan.core.config.loader import SUPPORTED_SUFFIXES
from pipeplan.core.exceptions import CatalogDirectoryNotFound, DuplicateTemplate, NotFound

from .catalog import load_template_file
from .types import TemplateDefinition


@dataclass
class TemplateRegistry:
    """
    Registro canônico de templates nomeados e versionados.

    Uso típico:
        registry = TemplateRegistry()
        registry.register(build_template)
        registry.lookup("build", "1.0.0")
    """

    _templates: Dict[Tuple[str, str], TemplateDefinition] = field(default_factory=dict, init=False, repr=False)
    _order: List[Tuple[str, str]] = field(default_factory=list, init=False, repr=False)

    def register(self, definition: TemplateDefinition) -> TemplateDefinition:
        if not isinstance(definition, TemplateDefinition):
            raise TypeError(
                f"register() expects TemplateDefinition, got {type(definition).__name__}"
            )

        key = (definition.name, definition.version)
        if key in self._templates:
            raise DuplicateTemplate(definition.name, definition.version)

        self._templates[key] = definition
        self._order.append(key)
        return definition

    def lookup(self, name: str, version: str) -> TemplateDefinition:
        try:
            return self._templates[(name, version)]
        except KeyError:
            raise NotFound(name, version) from None

    def versions(self, name: str) -> List[str]:
        """Versões registradas de `name`, em ordem de registro."""
        return [v for (n, v) in self._order if n == name]

    def list(self) -> List[TemplateDefinition]:
        return [self._templates[key] for key in self._order]

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._order)

    # -----------------------------
    # Catálogo em disco
    # -----------------------------
    def register_from_file(self, path: Union[str, Path]) -> TemplateDefinition:
        return self.register(load_template_file(path))

    def load_catalog_directory(self, directory: Union[str, Path]) -> List[TemplateDefinition]:
        """
        Registra todos os documentos YAML/JSON de um diretório.

        Os arquivos são processados em ordem lexicográfica de caminho,
        de modo que a ordem de registro é reprodutível. Subdiretórios
        não são percorridos.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise CatalogDirectoryNotFound(str(directory))

        files = sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
        )
        return [self.register_from_file(p) for p in files]
