# src/schedule_core/scheduling/selection.py

"""
Selection policies reduce a resolved phase order to the step(s) a caller
actually wants. The resolver never asks the user anything itself: interactive
choice is just another policy, supplied by the caller as a callback.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Union

from ..data_structures import PhaseSchedule
from ..records import Phase
from .exceptions import InvalidSelectionError, MultipleCandidatesRequireSelectionError

logger = logging.getLogger(__name__)

SelectionResult = Union[str, Sequence[str]]


class SelectionPolicy(ABC):
    """Strategy for picking steps out of a phase's topological order."""

    @abstractmethod
    def select(self, phase: Phase, order: Sequence[str], candidates: Sequence[str]) -> SelectionResult:
        """
        Args:
            phase: The phase being selected from.
            order: The full topological order of the phase (never empty).
            candidates: The independent roots of the phase, in declaration order.

        Returns:
            One step name or a sequence of step names taken from `order`.
        """
        raise NotImplementedError


class FirstPolicy(SelectionPolicy):
    """Takes the first entry of the topological order."""

    def select(self, phase, order, candidates):
        return [order[0]]


class AllPolicy(SelectionPolicy):
    """Keeps the entire order, for steps that are composed together."""

    def select(self, phase, order, candidates):
        return list(order)


class CallbackPolicy(SelectionPolicy):
    """
    Delegates the choice to a caller-supplied function `callback(phase, order)`,
    e.g. a prompt in an interactive front end.
    """
    def __init__(self, callback: Callable[[Phase, List[str]], SelectionResult]):
        self._callback = callback

    def select(self, phase, order, candidates):
        return self._callback(phase, list(order))


def select_steps(schedule: PhaseSchedule, policy: Optional[SelectionPolicy] = None) -> List[str]:
    """
    Reduces a resolved phase to the selected step names.

    Without a policy, exactly one step is expected: the single root of the
    phase graph. An empty phase selects nothing.

    Returns:
        The selected step names, in execution order.

    Raises:
        MultipleCandidatesRequireSelectionError: No policy was given and the phase
            has more than one independent root.
        InvalidSelectionError: The policy returned a name that is not in the order.
    """
    if schedule.is_empty:
        logger.debug("Nothing to select at phase %s.", schedule.phase)
        return []

    order = list(schedule.order)
    if policy is None:
        if len(schedule.roots) > 1:
            raise MultipleCandidatesRequireSelectionError(phase=schedule.phase, candidates=list(schedule.roots))
        return [order[0]]

    result = policy.select(schedule.phase, order, list(schedule.roots))
    chosen = [result] if isinstance(result, str) else list(result)

    positions = {name: i for i, name in enumerate(order)}
    for name in chosen:
        if name not in positions:
            raise InvalidSelectionError(phase=schedule.phase, choice=str(name), order=order)

    selected = sorted(set(chosen), key=positions.__getitem__)
    logger.debug("Selected %s at phase %s using %s.", selected, schedule.phase, type(policy).__name__)
    return selected
