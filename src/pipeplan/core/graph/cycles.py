# src/pipeplan/core/graph/cycles.py
"""
Detecção de ciclos sobre a arena indexada de jobs.

DFS iterativa com coloração explícita (branco / cinza / preto): um
sucessor cinza encontrado durante a descida é uma aresta de retorno e
fecha um ciclo. A pilha é explícita, então grafos profundos não
esbarram no limite de recursão do interpretador.

Determinismo:
    - raízes são visitadas em ordem lexicográfica de id
    - sucessores são visitados na ordem recebida (já ordenada por id)
    - o ciclo reportado é rotacionado para começar no menor id,
      preservando o sentido das arestas
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

WHITE, GREY, BLACK = 0, 1, 2


def _rotate(cycle: List[str]) -> List[str]:
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]


def find_cycle(
    ids: Sequence[str],
    successors: Sequence[Sequence[int]],
    *,
    within: Optional[Sequence[int]] = None,
) -> Optional[List[str]]:
    """
    Procura um ciclo no grafo.

    Args:
        ids: Id de cada nó, por índice.
        successors: Índices dos sucessores de cada nó.
        within: Restringe a busca a um subconjunto de índices (usado pelo
            planner para inspecionar apenas os nós travados).

    Returns:
        A sequência de ids do primeiro ciclo encontrado, ou None se o
        grafo (ou subconjunto) for acíclico.
    """
    allowed = set(range(len(ids))) if within is None else set(within)
    color = [WHITE] * len(ids)

    for root in sorted(allowed, key=lambda i: ids[i]):
        if color[root] != WHITE:
            continue

        color[root] = GREY
        path: List[int] = [root]
        stack: List[Tuple[int, Iterator[int]]] = [(root, iter(successors[root]))]

        while stack:
            node, children = stack[-1]
            child = next(children, None)

            if child is None:
                color[node] = BLACK
                stack.pop()
                path.pop()
                continue

            if child not in allowed:
                continue

            if color[child] == GREY:
                cycle = path[path.index(child):]
                return _rotate([ids[i] for i in cycle])

            if color[child] == WHITE:
                color[child] = GREY
                path.append(child)
                stack.append((child, iter(successors[child])))

    return None
