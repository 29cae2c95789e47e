# src/schedule_core/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for the declaration loading and schema
validation stage.

`ParsingError` covers file-level and YAML syntax problems, `SchemaValidationError`
covers documents that load but do not match the Cerberus schema. Both derive
from `DiagnosableError` through `BaseParsingError` and render their own report.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """
    A local, concrete base class for all YAML parsing and schema validation errors.
    """
    def get_diagnostic_report(self) -> str:
        """Fallback report for subclasses without a specific implementation."""
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the schedule declaration file.",
            context={}
        )


@dataclass
class ParsingError(BaseParsingError):
    """
    Raised when a declaration file is missing or unreadable, or does not contain
    a YAML mapping at all.
    """
    details: str
    file_path: Optional[Path] = None

    def __str__(self):
        return f"Parsing error in '{self.file_path or '<string>'}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, has the correct read permissions, and contains valid YAML syntax.",
            context={'source_file': self.file_path}
        )


@dataclass
class SchemaValidationError(BaseParsingError):
    """
    Raised when the YAML is syntactically valid but does not conform to the
    structure of a schedule declaration (missing keys, invalid identifiers,
    duplicate step names).
    """
    errors: Dict[str, Any]
    file_path: Optional[Path] = None

    def _error_lines(self):
        return [f"  - Field '{k}': {v}" for k, v in sorted(self.errors.items(), key=lambda kv: str(kv[0]))]

    def __str__(self):
        return (
            f"YAML schema validation failed for '{self.file_path or '<string>'}':\n"
            + "\n".join(self._error_lines())
        )

    def get_diagnostic_report(self) -> str:
        details = (
            "The structure of the YAML file does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n" + "\n".join(self._error_lines())
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion="Correct the specified fields to match the documented format. Check for invalid identifiers, duplicate step names, or a missing 'schedule' section.",
            context={'source_file': self.file_path}
        )
