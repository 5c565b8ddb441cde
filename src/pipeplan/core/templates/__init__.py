# src/pipeplan/core/templates/__init__.py
"""
Templates do pipeplan.

    - types    → ParamType, ParameterSpec, StepSpec, TemplateDefinition
    - registry → TemplateRegistry (register/lookup por name@version)
    - catalog  → conversão de documentos YAML/JSON em TemplateDefinition
"""

from .catalog import load_template_file, template_from_dict
from .registry import TemplateRegistry
from .types import ParameterSpec, ParamType, StepSpec, TemplateDefinition

__all__ = [
    "ParameterSpec",
    "ParamType",
    "StepSpec",
    "TemplateDefinition",
    "TemplateRegistry",
    "load_template_file",
    "template_from_dict",
]
