# src/schedule_core/parser/__init__.py
from .raw_data import ParsedSchedule
from .parser import ScheduleParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    # IR Data Structures
    "ParsedSchedule",
    # Parser and Exceptions
    "ScheduleParser",
    "ParsingError",
    "SchemaValidationError",
]
