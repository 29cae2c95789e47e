# src/schedule_core/schedule_builder.py

"""
Defines the ScheduleBuilder, the top-level entry point used by the surrounding
code generator.

The builder accepts either an already materialized list of StepRecord objects
or the path of a YAML declaration file, resolves every phase, and optionally
reduces each phase with a selection policy. It is also the top-level error
boundary: any DiagnosableError raised by the parser or the resolver is
re-raised as a single ScheduleBuildError whose message is the formatted
diagnostic report, chained to the original typed exception.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .config import ResolverConfig
from .data_structures import Schedule
from .errors import DiagnosableError, ScheduleBuildError, format_diagnostic_report
from .parser import ScheduleParser
from .records import Phase, StepRecord
from .scheduling import ScheduleResolver, SelectionPolicy, select_steps

logger = logging.getLogger(__name__)

ScheduleSource = Union[str, Path, Iterable[StepRecord]]


class ScheduleBuilder:
    """
    Builds a resolved Schedule from declarations.
    """
    def __init__(self, config: Optional[ResolverConfig] = None):
        # An explicit config overrides the 'resolver' block of a declaration file.
        self._config = config

    def build(
        self,
        source: ScheduleSource,
        policies: Optional[Dict[Phase, SelectionPolicy]] = None,
        name: Optional[str] = None,
    ) -> Schedule:
        """
        Args:
            source: A path to a YAML declaration file, or StepRecord objects.
            policies: Optional selection policy per phase. Phases listed here get
                      an entry in `Schedule.selections`.
            name: Schedule name; defaults to the thorn name of a file, else "schedule".

        Raises:
            ScheduleBuildError: For every known failure, with the diagnostic
                                report as message.
        """
        try:
            records, config, source_file, default_name = self._load(source)
            resolver = ScheduleResolver(records, config)
            phases = resolver.resolve_all()

            selections = {}
            for phase, policy in (policies or {}).items():
                phase = Phase.from_string(phase)
                selections[phase] = tuple(select_steps(phases[phase], policy))

            schedule = Schedule(
                name=name or default_name,
                phases=phases,
                source_file=source_file,
                selections=selections,
            )
            logger.info(f"--- Schedule '{schedule.name}' resolved for {len(phases)} phase(s). ---")
            return schedule

        except DiagnosableError as e:
            raise ScheduleBuildError(e.get_diagnostic_report()) from e

        except Exception as e:
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The schedule builder encountered an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in Schedule Core. Please review the traceback.",
                context={}
            )
            raise ScheduleBuildError(report) from e

    def _load(self, source: ScheduleSource):
        if isinstance(source, (str, Path)):
            parsed = ScheduleParser().parse_file(source)
            config = self._config or parsed.resolver_config
            return list(parsed.records), config, parsed.source_file, parsed.thorn
        return list(source), self._config or ResolverConfig(), None, "schedule"
