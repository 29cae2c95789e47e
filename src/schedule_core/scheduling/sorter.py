# src/schedule_core/scheduling/sorter.py

"""
Deterministic topological sort of a PrecedenceGraph (Kahn's algorithm).

The ready set is a heap keyed by declaration index, so whenever several steps
are free to run, the one declared first is emitted first. Steps that are not
constrained at all therefore keep their declaration order, and identical input
always produces identical output.
"""

import heapq
import logging
from typing import List

import networkx as nx

from .exceptions import CycleDetectedError
from .graph import PrecedenceGraph

logger = logging.getLogger(__name__)


def topological_order(graph: PrecedenceGraph) -> List[str]:
    """
    Orders all nodes of `graph` so that every edge points forward.

    Args:
        graph: The precedence graph of one phase. It is not modified.

    Returns:
        The step names in execution order.

    Raises:
        CycleDetectedError: If some nodes can never become ready. The error names
                            every remaining node and one cycle per cyclic
                            component among them.
    """
    names = graph.names
    in_degree, out_edges = graph.adjacency()

    ready = [i for i, degree in enumerate(in_degree) if degree == 0]
    heapq.heapify(ready)

    order_indices: List[int] = []
    while ready:
        i = heapq.heappop(ready)
        order_indices.append(i)
        for j in out_edges[i]:
            in_degree[j] -= 1
            if in_degree[j] == 0:
                heapq.heappush(ready, j)

    if len(order_indices) < len(names):
        placed = set(order_indices)
        remaining = [name for i, name in enumerate(names) if i not in placed]
        cycles = _find_cycles(graph, remaining)
        logger.debug("Cycle detected in phase %s among: %s", graph.phase, remaining)
        raise CycleDetectedError(remaining=remaining, cycles=cycles, phase=graph.phase)

    return [names[i] for i in order_indices]


def _find_cycles(graph: PrecedenceGraph, remaining: List[str]) -> List[List[str]]:
    """
    Reports one cycle per strongly connected component among `remaining`.

    Enumerating every elementary cycle is exponential in the worst case, so each
    component contributes a single witness cycle found by a depth-first search
    from its earliest-declared step. Each cycle is rotated to start at its
    earliest-declared step, and components are listed by declaration index.
    """
    sub = graph.to_networkx(remaining)
    components = sorted(
        (sorted(c, key=graph.index_of) for c in nx.strongly_connected_components(sub)),
        key=lambda c: graph.index_of(c[0]),
    )

    cycles = []
    for component in components:
        start = component[0]
        if len(component) == 1:
            if sub.has_edge(start, start):
                cycles.append([start])
            continue
        edges = nx.find_cycle(graph.to_networkx(component), source=start)
        cycle = [u for u, _ in edges]
        first = min(range(len(cycle)), key=lambda k: graph.index_of(cycle[k]))
        cycles.append(cycle[first:] + cycle[:first])
    return cycles
