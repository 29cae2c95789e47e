# src/schedule_core/scheduling/resolver.py

"""
The ScheduleResolver wires the scheduling components together for one
resolution call:

    records -> AliasIndex -> build_precedence_graph -> topological_order
            -> PhaseSchedule -> (optional) select_steps

A resolver holds nothing but an immutable snapshot of its input records and its
configuration. Every call builds its own alias index and graphs and discards
them afterwards, so a resolver can be shared between threads freely.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..config import ResolverConfig
from ..data_structures import PhaseSchedule
from ..records import Phase, StepRecord
from ..validation import ScheduleIssueCode, ValidationIssueLevel
from .alias_index import AliasIndex
from .exceptions import NoStepsAtPhaseError
from .graph import build_precedence_graph
from .selection import SelectionPolicy, select_steps
from .sorter import topological_order

logger = logging.getLogger(__name__)


class ScheduleResolver:
    """
    Computes a deterministic, constraint-satisfying execution order per phase.
    """
    def __init__(self, records: Iterable[StepRecord], config: Optional[ResolverConfig] = None):
        self._records = tuple(records)
        self._config = config or ResolverConfig()
        for record in self._records:
            if not isinstance(record, StepRecord):
                raise TypeError(f"ScheduleResolver expects StepRecord objects, got {type(record).__name__}.")
        logger.info("ScheduleResolver initialized with %d step record(s).", len(self._records))

    @property
    def records(self) -> tuple:
        return self._records

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def phases(self) -> List[Phase]:
        """The phases that have at least one declared step, in Phase order."""
        present = {r.phase for r in self._records}
        return [phase for phase in Phase if phase in present]

    def resolve_phase(self, phase) -> PhaseSchedule:
        """
        Resolves the execution order of a single phase.

        Raises:
            DuplicateStepNameError: Two records share a name.
            AmbiguousAliasError: A constraint references an ambiguous identifier.
            CycleDetectedError: The constraints of the phase are contradictory.
            NoStepsAtPhaseError: The phase is empty and empty phases are not allowed.
        """
        return self._resolve_with_index(self._new_index(), Phase.from_string(phase))

    def resolve_all(self) -> Dict[Phase, PhaseSchedule]:
        """Resolves every phase, sharing one alias index between them."""
        index = self._new_index()
        return {phase: self._resolve_with_index(index, phase) for phase in Phase}

    def init_steps(self) -> PhaseSchedule:
        return self.resolve_phase(Phase.INIT)

    def evolve_steps(self) -> PhaseSchedule:
        return self.resolve_phase(Phase.EVOLVE)

    def select(self, phase, policy: Optional[SelectionPolicy] = None) -> List[str]:
        """Resolves `phase` and reduces it with `policy` (see `select_steps`)."""
        return select_steps(self.resolve_phase(phase), policy)

    def _new_index(self) -> AliasIndex:
        return AliasIndex(self._records, strict_aliases=self._config.strict_aliases)

    def _resolve_with_index(self, index: AliasIndex, phase: Phase) -> PhaseSchedule:
        graph = build_precedence_graph(self._records, phase, index)

        if len(graph) == 0:
            if not self._config.allow_empty_phases:
                raise NoStepsAtPhaseError(phase=phase)
            logger.warning("No function found at %s timestep.", phase.value)
            issue = ScheduleIssueCode.PHASE_EMPTY.make_issue(ValidationIssueLevel.WARNING, phase=phase)
            return PhaseSchedule(phase=phase, order=(), roots=(), issues=(issue,))

        order = topological_order(graph)
        logger.info("Resolved phase %s: %s", phase, ", ".join(order))
        return PhaseSchedule(
            phase=phase,
            order=tuple(order),
            roots=tuple(graph.roots()),
            issues=tuple(graph.issues),
        )
