# tests/test_scheduling/test_resolver.py

"""
End-to-end tests of the ScheduleResolver against the documented scenarios and
the properties every resolved order must have.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from schedule_core import (
    AmbiguousAliasError, CycleDetectedError, NoStepsAtPhaseError, Phase,
    ResolverConfig, ScheduleIssueCode, ScheduleResolver, StepRecord, ValidationIssueLevel,
)


# =========================================================================
# === Group 1: Documented Scenarios
# =========================================================================

def test_after_and_before_constraints(make_records, resolve_order):
    records = make_records("A", ("B", {"after": "A"}), ("C", {"before": "A"}))
    assert resolve_order(records) == ["C", "A", "B"]


def test_alias_reference(make_records, resolve_order):
    records = make_records(("A", {"alias": "x"}), ("B", {"after": "x"}))
    assert resolve_order(records) == ["A", "B"]


def test_contradictory_constraints_are_a_cycle(make_records):
    records = make_records(("A", {"after": "B"}), ("B", {"after": "A"}))
    with pytest.raises(CycleDetectedError) as exc_info:
        ScheduleResolver(records).resolve_phase(Phase.EVOLVE)
    assert exc_info.value.remaining == ["A", "B"]


def test_alias_colliding_with_name_is_ambiguous(make_records):
    records = make_records(("A", {"alias": "B"}), "B", ("C", {"after": "B"}))
    with pytest.raises(AmbiguousAliasError) as exc_info:
        ScheduleResolver(records).resolve_phase(Phase.EVOLVE)
    assert exc_info.value.identifier == "B"


def test_dangling_reference_is_ignored(make_records):
    records = make_records("A", "B", ("C", {"after": "Z"}))
    schedule = ScheduleResolver(records).resolve_phase(Phase.EVOLVE)
    assert list(schedule.order) == ["A", "B", "C"]
    assert [i.code for i in schedule.issues] == [ScheduleIssueCode.REF_DANGLING.code]


# =========================================================================
# === Group 2: Properties
# =========================================================================

def _random_acyclic_records(seed: int, size: int = 12):
    """Constraints only ever point at earlier-numbered steps, so the input is acyclic."""
    rng = random.Random(seed)
    names = [f"S{i}" for i in range(size)]
    records = []
    for i, name in enumerate(names):
        after = names[rng.randrange(i)] if i and rng.random() < 0.5 else None
        before = None
        if i < size - 1 and rng.random() < 0.3:
            # "before" a later step is still consistent with the numbering.
            before = names[rng.randrange(i + 1, size)]
        records.append(StepRecord(name=name, phase=Phase.EVOLVE, after=after, before=before))
    rng.shuffle(records)
    return records


@pytest.mark.parametrize("seed", range(10))
def test_completeness_and_constraint_satisfaction(seed):
    records = _random_acyclic_records(seed)
    order = list(ScheduleResolver(records).resolve_phase(Phase.EVOLVE).order)

    assert sorted(order) == sorted(r.name for r in records)
    position = {name: i for i, name in enumerate(order)}
    for record in records:
        if record.after:
            assert position[record.after] < position[record.name]
        if record.before:
            assert position[record.name] < position[record.before]


@pytest.mark.parametrize("seed", range(5))
def test_resolution_is_deterministic(seed):
    records = _random_acyclic_records(seed)
    first = ScheduleResolver(records).resolve_phase(Phase.EVOLVE)
    for _ in range(5):
        assert ScheduleResolver(records).resolve_phase(Phase.EVOLVE).order == first.order


def test_unconstrained_input_keeps_declaration_order(make_records, resolve_order):
    names = ["Zeta", "alpha", "Mid", "beta", "Aardvark"]
    assert resolve_order(make_records(*names)) == names


def test_phases_are_resolved_independently(make_records):
    records = (
        make_records("I2", ("I1", {"before": "I2"}), phase=Phase.INIT)
        + make_records("E1", ("E2", {"after": "I1"}))
    )
    resolver = ScheduleResolver(records)

    assert list(resolver.init_steps().order) == ["I1", "I2"]
    evolve = resolver.evolve_steps()
    assert list(evolve.order) == ["E1", "E2"]
    assert [i.code for i in evolve.issues] == [ScheduleIssueCode.REF_CROSS_PHASE.code]


def test_ambiguity_in_other_phase_does_not_fail_unrelated_phase(make_records):
    records = (
        make_records(("I1", {"alias": "E1"}), phase=Phase.INIT)
        + make_records("E1", ("E2", {"after": "E1"}))
    )
    resolver = ScheduleResolver(records)
    assert list(resolver.init_steps().order) == ["I1"]
    with pytest.raises(AmbiguousAliasError):
        resolver.evolve_steps()


def test_shared_alias_warning_is_attached_to_schedule(make_records):
    records = make_records(("A", {"alias": "x"}), ("B", {"alias": "x"}), ("C", {"after": "x"}))
    schedule = ScheduleResolver(records).resolve_phase(Phase.EVOLVE)
    assert list(schedule.order) == ["A", "B", "C"]
    assert [w.code for w in schedule.warnings()] == [ScheduleIssueCode.ALIAS_MULTIPLE_MATCH.code]


def test_shared_alias_warning_names_the_referencing_phase(make_records):
    records = (
        make_records(("I1", {"alias": "x"}), ("I2", {"alias": "x"}), phase=Phase.INIT)
        + make_records(("E1", {"after": "x"}))
    )
    phases = ScheduleResolver(records).resolve_all()

    evolve_warnings = phases[Phase.EVOLVE].warnings()
    assert [w.code for w in evolve_warnings] == [ScheduleIssueCode.ALIAS_MULTIPLE_MATCH.code]
    assert evolve_warnings[0].phase == str(Phase.EVOLVE)
    assert phases[Phase.INIT].warnings() == []


def test_shared_alias_fails_in_strict_mode(make_records, strict_config):
    records = make_records(("A", {"alias": "x"}), ("B", {"alias": "x"}), ("C", {"after": "x"}))
    with pytest.raises(AmbiguousAliasError):
        ScheduleResolver(records, strict_config).resolve_phase(Phase.EVOLVE)


# =========================================================================
# === Group 3: Empty Phases and Whole-Schedule Resolution
# =========================================================================

def test_empty_phase_is_a_warning_by_default(make_records, caplog):
    resolver = ScheduleResolver(make_records("E1"))
    with caplog.at_level(logging.WARNING):
        schedule = resolver.init_steps()
    assert schedule.is_empty
    assert schedule.issues[0].level == ValidationIssueLevel.WARNING
    assert schedule.issues[0].code == ScheduleIssueCode.PHASE_EMPTY.code
    assert "No function found at CCTK_INITIAL" in caplog.text


def test_empty_phase_can_be_an_error(make_records):
    resolver = ScheduleResolver(make_records("E1"), ResolverConfig(allow_empty_phases=False))
    with pytest.raises(NoStepsAtPhaseError) as exc_info:
        resolver.init_steps()
    assert exc_info.value.phase is Phase.INIT
    assert "CCTK_INITIAL" in exc_info.value.get_diagnostic_report()


def test_resolve_all_covers_every_phase(make_records):
    records = make_records("I1", phase=Phase.INIT) + make_records("E1", "E2")
    phases = ScheduleResolver(records).resolve_all()
    assert set(phases) == {Phase.INIT, Phase.EVOLVE}
    assert list(phases[Phase.INIT].order) == ["I1"]
    assert list(phases[Phase.EVOLVE].order) == ["E1", "E2"]


def test_phases_lists_declared_phases(make_records):
    assert ScheduleResolver(make_records("E1")).phases() == [Phase.EVOLVE]


def test_phase_may_be_given_as_bin_name(make_records):
    schedule = ScheduleResolver(make_records("E1")).resolve_phase("CCTK_EVOL")
    assert schedule.phase is Phase.EVOLVE


def test_non_record_input_is_rejected():
    with pytest.raises(TypeError):
        ScheduleResolver([{"name": "A"}])


def test_concurrent_resolutions_are_independent():
    inputs = [_random_acyclic_records(seed) for seed in range(8)]
    expected = [ScheduleResolver(r).resolve_phase(Phase.EVOLVE).order for r in inputs]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda r: ScheduleResolver(r).resolve_phase(Phase.EVOLVE).order, inputs * 4))

    assert results == expected * 4
