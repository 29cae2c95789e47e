# src/schedule_core/scheduling/exceptions.py
"""
Defines the custom, diagnosable exceptions for the scheduling subsystem.

Every error the resolver can produce is a concrete subclass of `ScheduleError`,
which in turn derives from the global `DiagnosableError`. Callers can therefore
catch the whole family with one `except ScheduleError:` block, or pick out a
single failure mode (a cycle, an ambiguous alias) by its type. Each class carries
the data needed to act on it and renders its own diagnostic report.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..errors import DiagnosableError, format_diagnostic_report
from ..records import Phase, StepRecord


class ScheduleError(DiagnosableError):
    """
    A concrete base class for all scheduling errors.
    """
    def get_diagnostic_report(self) -> str:
        """Fallback report for subclasses without a specific implementation."""
        return format_diagnostic_report(
            error_type="Generic Scheduling Error",
            details=str(self),
            suggestion="Review the schedule declarations for correctness.",
            context={}
        )


def _describe_record(record: StepRecord) -> str:
    alias = f", alias '{record.alias}'" if record.alias else ""
    source = f" ({record.source_file})" if record.source_file else ""
    return f"'{record.name}' [{record.phase}{alias}]{source}"


@dataclass
class DuplicateStepNameError(ScheduleError):
    """Raised when two or more records declare the same primary name."""
    name: str
    count: int

    def __str__(self):
        return f"Step name '{self.name}' is declared {self.count} times; step names must be unique."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Duplicate Step Name",
            details=str(self),
            suggestion="Rename one of the steps, or remove the duplicate declaration.",
            context={'step': self.name}
        )


@dataclass
class AmbiguousAliasError(ScheduleError):
    """
    Raised when a reference cannot be resolved to one step unambiguously: the
    identifier is both a step's name and a different step's alias, or (with
    strict aliases enabled) the alias of several steps.
    """
    identifier: str
    conflicting_records: List[StepRecord]

    def __str__(self):
        names = ", ".join(f"'{r.name}'" for r in self.conflicting_records)
        return f"Reference '{self.identifier}' is ambiguous; it matches steps {names}."

    def get_diagnostic_report(self) -> str:
        record_lines = "\n".join(f"  - {_describe_record(r)}" for r in self.conflicting_records)
        details = (
            f"The identifier '{self.identifier}' refers to more than one step.\n"
            f"Conflicting declarations:\n{record_lines}"
        )
        return format_diagnostic_report(
            error_type="Ambiguous Alias",
            details=details,
            suggestion="Give every step a unique alias that does not equal any step's name.",
            context={'user_input': self.identifier, 'steps': [r.name for r in self.conflicting_records]}
        )


@dataclass
class NoStepsAtPhaseError(ScheduleError):
    """Raised when a phase was requested that has no declared steps and empty phases are not allowed."""
    phase: Phase

    def __str__(self):
        return f"No steps are declared for phase {self.phase}."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="No Steps At Phase",
            details=str(self),
            suggestion=f"Declare at least one function at {self.phase.value}, or allow empty phases in the resolver configuration.",
            context={'phase': str(self.phase)}
        )


@dataclass
class CycleDetectedError(ScheduleError):
    """
    Raised when the precedence graph of a phase cannot be fully ordered.
    `remaining` lists every node that could not be placed, in declaration order;
    `cycles` holds one cycle per strongly connected component among them.
    """
    remaining: List[str]
    cycles: List[List[str]] = field(default_factory=list)
    phase: Optional[Phase] = None

    def __str__(self):
        return f"The schedule is cyclic; unable to order: {', '.join(self.remaining)}"

    def get_diagnostic_report(self) -> str:
        details = f"The following steps could not be ordered:\n  {', '.join(self.remaining)}"
        if self.cycles:
            cycle_lines = "\n".join(
                "  - " + " -> ".join(list(cycle) + [cycle[0]]) for cycle in self.cycles
            )
            details += f"\n\nDetected cycle(s), one per group of mutually dependent steps:\n{cycle_lines}"
        return format_diagnostic_report(
            error_type="Cyclic Schedule",
            details=details,
            suggestion="Remove or reverse one of the 'after'/'before' constraints in each listed cycle. A step must not be ordered relative to itself.",
            context={'phase': str(self.phase) if self.phase else None}
        )


@dataclass
class MultipleCandidatesRequireSelectionError(ScheduleError):
    """Raised when a single step is requested but several independent candidates exist."""
    phase: Phase
    candidates: List[str]

    def __str__(self):
        return (f"{len(self.candidates)} independent steps found at phase {self.phase} "
                f"({', '.join(self.candidates)}); a selection policy is required.")

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Multiple Candidates Require Selection",
            details=str(self),
            suggestion="Pass a selection policy (e.g. FirstPolicy or a callback) or add ordering constraints between the candidates.",
            context={'phase': str(self.phase), 'steps': self.candidates}
        )


@dataclass
class InvalidSelectionError(ScheduleError):
    """Raised when a selection policy returns a step that is not part of the phase order."""
    phase: Phase
    choice: str
    order: Sequence[str]

    def __str__(self):
        return f"'{self.choice}' is not a valid choice for phase {self.phase}. Valid choices: {', '.join(self.order)}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Selection",
            details=str(self),
            suggestion="Return one of the step names passed to the selection policy.",
            context={'phase': str(self.phase), 'user_input': self.choice}
        )
