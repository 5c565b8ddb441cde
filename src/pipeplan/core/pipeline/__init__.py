# src/pipeplan/core/pipeline/__init__.py
"""
# Pipeline — pipeplan

Estruturas de entrada de um planejamento:

- **definition**
  - `JobSpec`: entrada de job (template, parâmetros, `needs`, matriz)
  - `PipelineDefinition`: lista ordenada de `JobSpec`
  - `pipeline_from_dict` / `load_pipeline_file`: leitura de documentos já parseados ou em disco

- **context**
  - `PlanningContext`: configuração, log de eventos e warnings de uma invocação

## Limites Explícitos

- Não consulta o registry
- Não resolve nem planeja jobs
"""

from .context import PlanningContext
from .definition import JobSpec, PipelineDefinition, load_pipeline_file, pipeline_from_dict

__all__ = ["JobSpec", "PipelineDefinition", "PlanningContext", "load_pipeline_file", "pipeline_from_dict"]
