# src/pipeplan/core/__init__.py
"""
Core do pipeplan.

Componentes principais:
    - templates    → definição, validação e registry de templates versionados
    - conditions   → expressões de condição de steps (parser + avaliação)
    - binding      → vinculação de parâmetros ao schema de um template
    - pipeline     → definição de pipeline e contexto de planejamento
    - graph        → resolução do pipeline em grafo de jobs
    - engine       → planner em batches e fachada `PlanningEngine`
    - config       → carregamento, merge e hashing de configuração
    - traceability → Manifest e Event Log do planejamento

Princípios fundamentais:
    - Toda invocação é uma função pura das entradas (templates + pipeline)
    - Nenhum plano parcial é publicado em caso de erro
    - Decisões de pulo são registradas, nunca tratadas como erro

Limites explícitos:
    - Não executa jobs nem gerencia runners
    - Não depende de variáveis de ambiente ou estado global
"""
