# src/schedule_core/validation/issue_codes.py
import logging
from enum import Enum

from .issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


class ScheduleIssueCode(Enum):
    """
    Registry of non-fatal schedule issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Alias Issues (ALIAS_...) ---
    ALIAS_MULTIPLE_MATCH = ("ALIAS_MULTIPLE_MATCH", "Alias '{identifier}' is declared by several steps {matches}. Using the first one declared: '{chosen}'.")

    # --- Ordering Reference Issues (REF_...) ---
    REF_DANGLING = ("REF_DANGLING", "Step '{step}' declares {relation}='{identifier}', which does not match any declared step name or alias. The constraint is ignored.")
    REF_CROSS_PHASE = ("REF_CROSS_PHASE", "Step '{step}' declares {relation}='{identifier}', which resolves to '{target}' in phase {target_phase}. Steps in different phases never constrain each other; the constraint is ignored.")

    # --- Phase Issues (PHASE_...) ---
    PHASE_EMPTY = ("PHASE_EMPTY", "No steps are declared for phase {phase}.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"

    def make_issue(self, level: ValidationIssueLevel, **kwargs) -> ValidationIssue:
        """Creates a ValidationIssue for this code, carrying every keyword as detail."""
        return ValidationIssue(
            level=level,
            code=self.code,
            message=self.format_message(**kwargs),
            step=kwargs.get('step'),
            phase=str(kwargs['phase']) if kwargs.get('phase') is not None else None,
            details=kwargs,
        )
