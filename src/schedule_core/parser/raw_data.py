# src/schedule_core/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..config import ResolverConfig
from ..records import StepRecord

# The loader's output contract. Everything downstream of the parser works on
# these frozen objects, never on the raw YAML dictionaries.

@dataclass(frozen=True)
class ParsedSchedule:
    """The validated content of one schedule declaration file."""
    thorn: str
    records: Tuple[StepRecord, ...]
    resolver_config: ResolverConfig
    source_file: Optional[Path] = None
    skipped_blocks: Tuple[str, ...] = ()
