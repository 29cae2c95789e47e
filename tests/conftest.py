# tests/conftest.py
import pytest

from schedule_core import Phase, StepRecord, ScheduleResolver, ResolverConfig


def build_records(*entries, phase=Phase.EVOLVE):
    """
    Builds StepRecords from bare names or (name, fields) tuples.
    e.g. build_records("A", ("B", {"after": "A"}), ("C", {"before": "A", "alias": "c"}))
    """
    records = []
    for entry in entries:
        if isinstance(entry, str):
            records.append(StepRecord(name=entry, phase=phase))
        else:
            name, fields = entry
            fields = dict(fields)
            fields.setdefault("phase", phase)
            records.append(StepRecord(name=name, **fields))
    return records


@pytest.fixture
def make_records():
    """Exposes build_records to tests as a fixture."""
    return build_records


@pytest.fixture
def resolve_order():
    """Resolves a single phase and returns its order as a list."""
    def _resolve(records, phase=Phase.EVOLVE, config=None):
        return list(ScheduleResolver(records, config).resolve_phase(phase).order)
    return _resolve


@pytest.fixture
def strict_config():
    return ResolverConfig(strict_aliases=True)
