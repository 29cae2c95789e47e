# src/schedule_core/scheduling/__init__.py
from .exceptions import (
    ScheduleError,
    DuplicateStepNameError,
    AmbiguousAliasError,
    NoStepsAtPhaseError,
    CycleDetectedError,
    MultipleCandidatesRequireSelectionError,
    InvalidSelectionError,
)
from .alias_index import AliasIndex
from .graph import PrecedenceGraph, build_precedence_graph
from .sorter import topological_order
from .selection import SelectionPolicy, FirstPolicy, AllPolicy, CallbackPolicy, select_steps
from .resolver import ScheduleResolver

__all__ = [
    # Exceptions
    "ScheduleError",
    "DuplicateStepNameError",
    "AmbiguousAliasError",
    "NoStepsAtPhaseError",
    "CycleDetectedError",
    "MultipleCandidatesRequireSelectionError",
    "InvalidSelectionError",
    # Core Classes
    "AliasIndex",
    "PrecedenceGraph",
    "build_precedence_graph",
    "topological_order",
    "SelectionPolicy",
    "FirstPolicy",
    "AllPolicy",
    "CallbackPolicy",
    "select_steps",
    "ScheduleResolver",
]
