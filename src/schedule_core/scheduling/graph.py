# src/schedule_core/scheduling/graph.py

"""
Builds the precedence graph for one phase.

Nodes are keyed by primary step name and carry a stable index equal to the
step's position in the declaration order of the phase. The index is the only
tie-break the sorter uses, which keeps the resulting order independent of any
mapping's iteration order.

Edges point from the step that must run first to the step that must run later:
`R.after = A` adds `A -> R`, `R.before = B` adds `R -> B`.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from ..records import Phase, StepRecord
from ..validation import ScheduleIssueCode, ValidationIssue, ValidationIssueLevel
from .alias_index import AliasIndex

logger = logging.getLogger(__name__)


class PrecedenceGraph:
    """
    A directed precedence graph owned by a single resolution call.

    Each node has an in-degree counter and an outgoing-edge list. The graph is
    only ever read by the sorter; the sorter works on its own copy of the
    in-degree counters.
    """
    def __init__(self, phase: Phase, names: Iterable[str]):
        self.phase = phase
        self._names: List[str] = list(names)
        self._index: Dict[str, int] = {name: i for i, name in enumerate(self._names)}
        self._in_degree: List[int] = [0] * len(self._names)
        self._out_edges: List[List[int]] = [[] for _ in self._names]
        self._edge_set = set()
        self.issues: List[ValidationIssue] = []

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    @property
    def names(self) -> List[str]:
        """Node names in declaration order."""
        return list(self._names)

    def index_of(self, name: str) -> int:
        return self._index[name]

    def in_degree(self, name: str) -> int:
        return self._in_degree[self._index[name]]

    def successors(self, name: str) -> List[str]:
        return [self._names[j] for j in self._out_edges[self._index[name]]]

    def add_edge(self, source: str, target: str) -> bool:
        """Adds `source -> target`. Returns False if the edge already existed."""
        i, j = self._index[source], self._index[target]
        if (i, j) in self._edge_set:
            return False
        self._edge_set.add((i, j))
        self._out_edges[i].append(j)
        self._in_degree[j] += 1
        return True

    def edges(self) -> List[Tuple[str, str]]:
        return [
            (self._names[i], self._names[j])
            for i, targets in enumerate(self._out_edges)
            for j in targets
        ]

    def roots(self) -> List[str]:
        """Nodes without predecessors, in declaration order."""
        return [name for i, name in enumerate(self._names) if self._in_degree[i] == 0]

    def adjacency(self) -> Tuple[List[int], List[List[int]]]:
        """
        Index-level view for the sorter: a fresh copy of the in-degree counters
        and the (shared, read-only) outgoing-edge lists.
        """
        return list(self._in_degree), self._out_edges

    def to_networkx(self, nodes: Optional[Iterable[str]] = None) -> nx.DiGraph:
        """
        Returns a networkx copy of the graph (optionally restricted to `nodes`),
        used for diagnostics such as cycle reports. Nodes and edges are inserted
        in declaration order, so traversals of the copy are reproducible.
        """
        keep = set(self._names if nodes is None else nodes)
        graph = nx.DiGraph()
        graph.add_nodes_from(name for name in self._names if name in keep)
        graph.add_edges_from(
            (source, target) for source, target in self.edges()
            if source in keep and target in keep
        )
        return graph


def build_precedence_graph(
    records: Iterable[StepRecord],
    phase: Phase,
    alias_index: AliasIndex,
) -> PrecedenceGraph:
    """
    Builds the precedence graph for `phase` from `records`.

    Args:
        records: The full record set, in declaration order. Records of other
                 phases are ignored, except as targets of (ignored) references.
        phase: The phase to build the graph for.
        alias_index: The index built over the full record set.

    Returns:
        The populated PrecedenceGraph. References that do not resolve, or that
        resolve to a step of another phase, are skipped and reported as INFO
        issues on `graph.issues`.

    Raises:
        AmbiguousAliasError: Propagated from the alias index.
    """
    phase = Phase.from_string(phase)
    phase_records = [r for r in records if r.phase is phase]
    graph = PrecedenceGraph(phase, (r.name for r in phase_records))
    logger.debug("Building precedence graph for phase %s with %d step(s).", phase, len(graph))

    for record in phase_records:
        for relation, identifier in record.references():
            target = alias_index.resolve(identifier, graph.issues, phase)

            if target is None:
                logger.debug(
                    "Ignoring dangling reference %s='%s' of step '%s'.", relation, identifier, record.name
                )
                graph.issues.append(ScheduleIssueCode.REF_DANGLING.make_issue(
                    ValidationIssueLevel.INFO,
                    step=record.name, phase=phase, relation=relation, identifier=identifier,
                ))
                continue

            if target not in graph:
                target_phase = alias_index.record(target).phase
                logger.debug(
                    "Ignoring cross-phase reference %s='%s' of step '%s' (target in phase %s).",
                    relation, identifier, record.name, target_phase
                )
                graph.issues.append(ScheduleIssueCode.REF_CROSS_PHASE.make_issue(
                    ValidationIssueLevel.INFO,
                    step=record.name, phase=phase, relation=relation, identifier=identifier,
                    target=target, target_phase=target_phase,
                ))
                continue

            # A reference to the step itself becomes a self-loop; the sorter
            # reports it like any other cycle.
            if relation == "after":
                graph.add_edge(target, record.name)
            else:
                graph.add_edge(record.name, target)

    logger.debug("Precedence graph for phase %s has %d edge(s).", phase, len(graph.edges()))
    return graph
