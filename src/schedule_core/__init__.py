# src/schedule_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("Schedule Core package initialized.")

from .records import Phase, StepRecord
from .config import ResolverConfig, ConfigParsingError, parse_resolver_config
from .data_structures import PhaseSchedule, Schedule
from .validation import ValidationIssue, ValidationIssueLevel, ScheduleIssueCode
from .parser import ScheduleParser, ParsedSchedule, ParsingError, SchemaValidationError
from .scheduling import (
    AliasIndex,
    PrecedenceGraph,
    build_precedence_graph,
    topological_order,
    SelectionPolicy,
    FirstPolicy,
    AllPolicy,
    CallbackPolicy,
    select_steps,
    ScheduleResolver,
    ScheduleError,
    DuplicateStepNameError,
    AmbiguousAliasError,
    NoStepsAtPhaseError,
    CycleDetectedError,
    MultipleCandidatesRequireSelectionError,
    InvalidSelectionError,
)
from .schedule_builder import ScheduleBuilder
from .errors import ScheduleCoreError, ScheduleBuildError, DiagnosableError

__all__ = [
    # Record Model
    "Phase", "StepRecord",
    # Configuration
    "ResolverConfig", "ConfigParsingError", "parse_resolver_config",
    # Data Structures
    "PhaseSchedule", "Schedule",
    # Issues
    "ValidationIssue", "ValidationIssueLevel", "ScheduleIssueCode",
    # Parser
    "ScheduleParser", "ParsedSchedule", "ParsingError", "SchemaValidationError",
    # Scheduling
    "AliasIndex", "PrecedenceGraph", "build_precedence_graph", "topological_order",
    "SelectionPolicy", "FirstPolicy", "AllPolicy", "CallbackPolicy", "select_steps",
    "ScheduleResolver",
    # Scheduling Errors
    "ScheduleError", "DuplicateStepNameError", "AmbiguousAliasError", "NoStepsAtPhaseError",
    "CycleDetectedError", "MultipleCandidatesRequireSelectionError", "InvalidSelectionError",
    # Builder
    "ScheduleBuilder",
    # Top-Level Errors
    "ScheduleCoreError", "ScheduleBuildError", "DiagnosableError",
]
