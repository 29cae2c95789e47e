# src/schedule_core/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .records import Phase
from .validation import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseSchedule:
    """
    The resolved execution order of one phase.

    `roots` are the steps without predecessors, i.e. the mutually independent
    candidates a single-step selection has to choose between.
    """
    phase: Phase
    order: Tuple[str, ...]
    roots: Tuple[str, ...]
    issues: Tuple[ValidationIssue, ...] = ()

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self):
        return iter(self.order)

    @property
    def is_empty(self) -> bool:
        return not self.order

    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.level == ValidationIssueLevel.WARNING]


@dataclass(frozen=True, eq=False)
class Schedule:
    """
    The resolved schedule of every phase of one declaration set.
    This object is a data container and holds no imperative logic.
    """
    name: str
    phases: Dict[Phase, PhaseSchedule]
    source_file: Optional[Path] = None
    selections: Dict[Phase, Tuple[str, ...]] = field(default_factory=dict)

    def order_for(self, phase) -> Tuple[str, ...]:
        return self.phases[Phase.from_string(phase)].order

    @property
    def issues(self) -> List[ValidationIssue]:
        return [issue for phase_schedule in self.phases.values() for issue in phase_schedule.issues]
