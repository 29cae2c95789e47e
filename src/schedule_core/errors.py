# src/schedule_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class ScheduleCoreError(Exception):
    """Base class for all custom, user-facing errors in Schedule Core."""
    pass

class ScheduleBuildError(ScheduleCoreError):
    """
    Raised when building a schedule fails for any reason, from loading the
    declaration file to ordering a phase. The message is a pre-formatted,
    user-friendly diagnostic report.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    Code that only needs the report can depend on this instead of a concrete type.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    The common, concrete base class for all internal exceptions that are diagnosable.

    It inherits from `Exception`, so it can be used in `except` clauses, and it
    declares `get_diagnostic_report` abstract, so a subclass that forgets to
    implement it fails at instantiation time.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Report Formatting ---

# Context keys shown in the report header, in display order.
CONTEXT_LABELS = (
    ('step', "Step"),
    ('phase', "Phase"),
    ('steps', "Steps"),
    ('source_file', "Source File"),
    ('user_input', "User Input"),
)
_LABEL_WIDTH = 16
_RULE_WIDTH = 72


def _header_line(label: str, value: Any) -> str:
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value)
    return f"{label + ':':<{_LABEL_WIDTH}}{value}"


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats the multi-line report that every schedule error presents to the user.

    Args:
        error_type: The category of the error (e.g., "Cyclic Schedule").
        details: A description of the problem; may span several lines.
        suggestion: Advice on how to fix the declarations. May be empty.
        context: Header values keyed as in CONTEXT_LABELS. Empty values are
                 omitted, lists (e.g. `steps`) are comma-joined and
                 `user_input` is quoted.

    Returns:
        The report, starting with a blank line so it reads well after a traceback.
    """
    title = " Schedule Core: Actionable Diagnostic Report "
    lines = ["\n", title.center(_RULE_WIDTH, "="), _header_line("Error Type", error_type)]

    for key, label in CONTEXT_LABELS:
        value = context.get(key)
        if not value:
            continue
        if key == 'user_input':
            value = f"'{value}'"
        lines.append(_header_line(label, value))

    lines.append("\nDetails:")
    lines.extend(f"  {line}" for line in details.splitlines())

    if suggestion:
        lines.append("\nSuggestion:")
        lines.extend(f"  {line}" for line in suggestion.splitlines())

    lines.append("=" * _RULE_WIDTH)
    return "\n".join(lines)
