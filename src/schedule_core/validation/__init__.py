# src/schedule_core/validation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import ScheduleIssueCode

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "ScheduleIssueCode",
]
