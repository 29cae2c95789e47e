# src/schedule_core/scheduling/alias_index.py

"""
Provides the AliasIndex, the single place where an identifier used in an
ordering constraint is classified as a step name, an alias, or neither.

The index is built once from the complete record set of a resolution call.
All name/alias collisions are classified at construction time, so lookups are
plain dictionary accesses and the ambiguity rules live in one place:

 - An identifier that is exactly one step's name (and no other step's alias)
   resolves to that name.
 - An identifier that is exactly one step's alias (and no step's name)
   resolves to the aliased step's name.
 - An identifier that is a step's name AND a different step's alias is
   ambiguous; resolving it raises `AmbiguousAliasError`.
 - An identifier declared as alias by several steps resolves to the first
   declaration with a WARNING issue, or raises `AmbiguousAliasError` when the
   resolver runs with strict aliases.
 - Anything else is a dangling reference and resolves to None.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from ..records import Phase, StepRecord
from ..validation import ScheduleIssueCode, ValidationIssue, ValidationIssueLevel
from .exceptions import AmbiguousAliasError, DuplicateStepNameError

logger = logging.getLogger(__name__)


class AliasIndex:
    """
    Bidirectional lookup between primary step names and their aliases.
    """
    def __init__(self, records: Iterable[StepRecord], strict_aliases: bool = False):
        self._records: List[StepRecord] = list(records)
        self._strict_aliases = strict_aliases
        self._by_name: Dict[str, StepRecord] = {}
        self._by_alias: Dict[str, List[StepRecord]] = {}
        self._name_alias_conflicts: Dict[str, List[StepRecord]] = {}
        self._warned_aliases = set()

        name_counts = Counter(r.name for r in self._records)
        for name, count in name_counts.items():
            if count > 1:
                raise DuplicateStepNameError(name=name, count=count)

        for record in self._records:
            self._by_name[record.name] = record
            if record.alias is not None:
                self._by_alias.setdefault(record.alias, []).append(record)

        for alias, owners in self._by_alias.items():
            named = self._by_name.get(alias)
            if named is None:
                continue
            # A step whose alias equals its own name is not a conflict.
            others = [r for r in owners if r.name != alias]
            if others:
                self._name_alias_conflicts[alias] = [named] + others

        logger.debug(
            "AliasIndex built: %d steps, %d aliases, %d name/alias conflicts.",
            len(self._by_name), len(self._by_alias), len(self._name_alias_conflicts)
        )

    def __len__(self) -> int:
        return len(self._by_name)

    @property
    def records(self) -> List[StepRecord]:
        return list(self._records)

    def record(self, name: str) -> StepRecord:
        """Returns the record with the given primary name (KeyError if unknown)."""
        return self._by_name[name]

    def is_name(self, identifier: str) -> bool:
        return identifier in self._by_name

    def is_alias(self, identifier: str) -> bool:
        return identifier in self._by_alias

    def alias_of(self, name: str) -> Optional[str]:
        """Returns the alias declared by the step `name`, or None."""
        return self._by_name[name].alias

    def conflicts(self) -> Dict[str, List[StepRecord]]:
        """All identifiers that are both a name and a different step's alias."""
        return {k: list(v) for k, v in self._name_alias_conflicts.items()}

    def resolve(
        self,
        identifier: str,
        issues: Optional[List[ValidationIssue]] = None,
        phase: Optional[Phase] = None,
    ) -> Optional[str]:
        """
        Resolves a name or alias to a primary step name.

        Args:
            identifier: The reference to resolve.
            issues: Optional list that receives a WARNING issue when the alias
                    is shared by several steps.
            phase: The phase of the referencing step, recorded on that issue.
                   Defaults to the phase of the first owner of the alias.

        Returns:
            The primary name of the referenced step, or None for a dangling reference.

        Raises:
            AmbiguousAliasError: If the identifier collides between a name and an
                                 alias (or, in strict mode, between several aliases).
        """
        conflict = self._name_alias_conflicts.get(identifier)
        if conflict is not None:
            raise AmbiguousAliasError(identifier=identifier, conflicting_records=list(conflict))

        record = self._by_name.get(identifier)
        if record is not None:
            return record.name

        owners = self._by_alias.get(identifier)
        if not owners:
            return None
        if len(owners) > 1:
            if self._strict_aliases:
                raise AmbiguousAliasError(identifier=identifier, conflicting_records=list(owners))
            self._report_multiple_match(identifier, owners, issues, phase)
        return owners[0].name

    def _report_multiple_match(
        self,
        identifier: str,
        owners: List[StepRecord],
        issues: Optional[List[ValidationIssue]],
        phase: Optional[Phase],
    ):
        matches = [r.name for r in owners]
        if identifier not in self._warned_aliases:
            self._warned_aliases.add(identifier)
            logger.warning(
                "Multiple steps declare alias '%s' (%s). Using the first one found: '%s'.",
                identifier, ", ".join(matches), matches[0]
            )
        if issues is not None:
            issue = ScheduleIssueCode.ALIAS_MULTIPLE_MATCH.make_issue(
                ValidationIssueLevel.WARNING,
                identifier=identifier, matches=matches, chosen=matches[0],
                phase=phase if phase is not None else owners[0].phase,
            )
            if issue not in issues:
                issues.append(issue)
