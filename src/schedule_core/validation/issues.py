# src/schedule_core/validation/issues.py
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class ValidationIssueLevel(Enum):
    """Severity level of a non-fatal finding."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single non-fatal finding made while resolving a schedule, such as a
    dangling ordering reference or an alias declared by several steps.
    """
    level: ValidationIssueLevel
    code: str
    message: str
    step: Optional[str] = None
    phase: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __str__(self) -> str:
        parts = [f"[{self.level.name} - {self.code}]"]
        if self.phase:
            parts.append(f"Phase: {self.phase}")
        if self.step:
            parts.append(f"Step: {self.step}")
        parts.append(f"Message: {self.message}")

        if self.details:
            filtered_details = {
                k: v for k, v in self.details.items()
                if k not in ['step', 'phase']
            }
            if filtered_details:
                details_str = ", ".join(f"{k}={v}" for k, v in sorted(filtered_details.items()))
                parts.append(f"Details: ({details_str})")

        return " ".join(parts)
