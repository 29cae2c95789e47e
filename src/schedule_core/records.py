# src/schedule_core/records.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

# The classes in this module are the record model shared by the declaration
# loader and the resolver. Records are immutable so that a single snapshot can
# be handed to any number of independent resolution calls.


class Phase(Enum):
    """
    A scheduling bucket. Each member's value is the host framework's bin name.
    Steps in different phases never constrain each other.
    """
    INIT = "CCTK_INITIAL"
    EVOLVE = "CCTK_EVOL"

    def __str__(self):
        return self.label

    @property
    def label(self) -> str:
        return "Init" if self is Phase.INIT else "Evolve"

    @classmethod
    def from_string(cls, text: str) -> Phase:
        """Accepts 'Init'/'Evolve' (any case) or the bin names CCTK_INITIAL/CCTK_EVOL."""
        if isinstance(text, Phase):
            return text
        key = str(text).strip().upper()
        for member in cls:
            if key in (member.value, member.name, member.label.upper()):
                return member
        raise ValueError(
            f"Unknown phase '{text}'. Expected one of: "
            f"{', '.join(m.label for m in cls)} (or {', '.join(m.value for m in cls)})."
        )

    @classmethod
    def is_supported_bin(cls, text: str) -> bool:
        try:
            cls.from_string(text)
        except ValueError:
            return False
        return True


def _normalize_reference(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class StepRecord:
    """
    One declared unit of work.

    `after` names a step that must run strictly before this one, `before` a step
    that must run strictly after it. Either may be a primary name or an alias.
    """
    name: str
    phase: Phase
    alias: Optional[str] = None
    after: Optional[str] = None
    before: Optional[str] = None
    source_file: Optional[Path] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"StepRecord name must be a non-empty string, got {self.name!r}.")
        # Frozen dataclass: normalization has to bypass __setattr__.
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "phase", Phase.from_string(self.phase))
        object.__setattr__(self, "alias", _normalize_reference(self.alias))
        object.__setattr__(self, "after", _normalize_reference(self.after))
        object.__setattr__(self, "before", _normalize_reference(self.before))

    def references(self) -> Iterator[Tuple[str, str]]:
        """Yields ('after', ref) and ('before', ref) for every ordering constraint that is set."""
        if self.after is not None:
            yield "after", self.after
        if self.before is not None:
            yield "before", self.before
