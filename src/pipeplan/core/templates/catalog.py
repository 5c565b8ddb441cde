# src/pipeplan/core/templates/catalog.py
"""
Conversão de documentos de catálogo em `TemplateDefinition`.

O catálogo é parseado externamente (YAML/JSON) e entregue como
estrutura de dicionários. Formato aceito:

    name: build
    version: 1.0.0
    description: Build e testes .NET
    parameters:
      - name: dotnet_version
        type: string
        required: true
      - name: configuration
        type: enum
        allowed: [Debug, Release]
        default: Release
      - name: run_tests
        type: bool
        default: true
    steps:
      - id: checkout
        uses: actions/checkout@v4
      - id: test
        uses: dotnet test
        if: parameters.run_tests == true
        depends_on: [checkout]

`parameters` também pode ser um mapa `nome -> spec`. A condição do step
pode vir em `if` ou `condition`, como texto ou na forma estruturada
(`{"eq": [{"param": "os"}, "linux"]}`).

Documentos malformados levantam `InvalidTemplate`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from pipeplan.core.conditions import coerce_condition
from pipeplan.core.config.loader import read_document
from pipeplan.core.exceptions import InvalidCondition, InvalidTemplate

from .types import ParameterSpec, ParamType, StepSpec, TemplateDefinition

_PARAM_KEYS = {"name", "type", "required", "default", "allowed", "description"}
_STEP_KEYS = {"id", "uses", "run", "if", "condition", "depends_on", "name"}


def _ref(data: Dict[str, Any]) -> str:
    return f"{data.get('name')}@{data.get('version')}"


def _parameter_from_dict(ref: str, data: Any) -> ParameterSpec:
    if not isinstance(data, dict):
        raise InvalidTemplate(ref, f"parameter entry must be a mapping, got {type(data).__name__}")

    extra = sorted(set(data) - _PARAM_KEYS)
    if extra:
        raise InvalidTemplate(ref, f"unknown parameter field '{extra[0]}'")

    try:
        ptype = ParamType(data.get("type", ParamType.STRING.value))
    except ValueError:
        raise InvalidTemplate(ref, f"parameter '{data.get('name')}' has unknown type {data.get('type')!r}") from None

    required = data.get("required", False)
    if not isinstance(required, bool):
        raise InvalidTemplate(ref, f"'required' of parameter '{data.get('name')}' must be a boolean")

    allowed = data.get("allowed", ())
    if not isinstance(allowed, (list, tuple)):
        raise InvalidTemplate(ref, f"'allowed' of parameter '{data.get('name')}' must be a list")

    name = data.get("name")
    if not isinstance(name, str):
        raise InvalidTemplate(ref, "parameter name must be a non-empty string")

    return ParameterSpec(
        name=name,
        type=ptype,
        required=required,
        default=data.get("default"),
        allowed=tuple(allowed),
    )


def _parameters_from_data(ref: str, raw: Any) -> List[ParameterSpec]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        # forma mapa: nome -> spec (a ordem do documento é preservada)
        entries = []
        for name, spec in raw.items():
            if spec is None:
                spec = {}
            if isinstance(spec, dict):
                spec = {"name": name, **spec}
            entries.append(spec)
        raw = entries
    if not isinstance(raw, list):
        raise InvalidTemplate(ref, "'parameters' must be a list or a mapping")
    return [_parameter_from_dict(ref, p) for p in raw]


def _step_from_dict(ref: str, data: Any) -> StepSpec:
    if not isinstance(data, dict):
        raise InvalidTemplate(ref, f"step entry must be a mapping, got {type(data).__name__}")

    extra = sorted(set(data) - _STEP_KEYS)
    if extra:
        raise InvalidTemplate(ref, f"unknown step field '{extra[0]}'")

    step_id = data.get("id") or data.get("name")
    if not isinstance(step_id, str) or not step_id:
        raise InvalidTemplate(ref, "step requires a non-empty 'id'")

    uses = data.get("uses", data.get("run"))
    if not isinstance(uses, str) or not uses:
        raise InvalidTemplate(ref, f"step '{step_id}' requires 'uses' or 'run'")

    if "if" in data and "condition" in data:
        raise InvalidTemplate(ref, f"step '{step_id}' declares both 'if' and 'condition'")
    raw_condition = data.get("if", data.get("condition"))

    condition = None
    if raw_condition is not None:
        try:
            condition = coerce_condition(raw_condition)
        except InvalidCondition as exc:
            raise InvalidTemplate(ref, f"step '{step_id}': {exc.message}") from exc

    depends_on = data.get("depends_on") or []
    if isinstance(depends_on, str):
        depends_on = [depends_on]
    if not isinstance(depends_on, list) or not all(isinstance(d, str) for d in depends_on):
        raise InvalidTemplate(ref, f"'depends_on' of step '{step_id}' must be a list of step ids")

    return StepSpec(id=step_id, uses=uses, condition=condition, depends_on=tuple(depends_on))


def template_from_dict(data: Dict[str, Any]) -> TemplateDefinition:
    """
    Constrói uma `TemplateDefinition` a partir de um documento de catálogo.

    Raises:
        InvalidTemplate: Se o documento não respeitar o formato do catálogo
            ou violar qualquer invariante do template.
    """
    if not isinstance(data, dict):
        raise InvalidTemplate("<unknown>", f"catalog document must be a mapping, got {type(data).__name__}")

    ref = _ref(data)
    version = data.get("version")
    # versões numéricas em YAML (ex.: 1.0) chegam como float
    if isinstance(version, (int, float)) and not isinstance(version, bool):
        raise InvalidTemplate(ref, "version must be quoted as a string")

    steps_raw = data.get("steps") or []
    if not isinstance(steps_raw, list):
        raise InvalidTemplate(ref, "'steps' must be a list")

    return TemplateDefinition(
        name=data.get("name"),
        version=version,
        parameters=tuple(_parameters_from_data(ref, data.get("parameters"))),
        steps=tuple(_step_from_dict(ref, s) for s in steps_raw),
        description=str(data.get("description") or ""),
    )


def load_template_file(path: Union[str, Path]) -> TemplateDefinition:
    """Lê um documento de catálogo (YAML/JSON) e devolve o template."""
    return template_from_dict(read_document(path))
