# tests/test_parser/test_schedule_parser.py

import pytest
from pathlib import Path

from schedule_core.parser import (
    ScheduleParser,
    ParsingError,
    SchemaValidationError,
    ParsedSchedule,
)
from schedule_core import Phase, ResolverConfig, StepRecord


def create_schedule_files(tmp_path: Path) -> Path:
    """Writes a standard set of declaration files into a temporary directory."""
    schedules_path = tmp_path / "schedules"
    valid_path = schedules_path / "valid"
    valid_path.mkdir(parents=True, exist_ok=True)

    (valid_path / "wavetoy.yaml").write_text("""
thorn: WaveToy
schedule:
  - name: WaveToy_InitialData
    at: CCTK_INITIAL
    as: wavetoy_initial
  - name: WaveToy_Evolution
    lang: C
    at: CCTK_EVOL
    as: wavetoy_evolve
  - name: WaveToy_Boundaries
    at: CCTK_EVOL
    after: wavetoy_evolve
  - name: WaveToy_Prepare
    at: Evolve
    before: WaveToy_Evolution
    description: Copies the previous time level.
""")

    (valid_path / "filtered.yaml").write_text("""
schedule:
  - name: Startup
    at: CCTK_STARTUP
  - name: FortranStep
    lang: Fortran
    at: CCTK_EVOL
  - name: EvolveGroup
    type: GROUP
    at: CCTK_EVOL
  - name: CxxStep
    lang: C++
    at: CCTK_EVOL
  - name: Analysis
    at: CCTK_ANALYSIS
""")

    (valid_path / "strict.yaml").write_text("""
thorn: Strict
resolver:
  strict_aliases: true
  allow_empty_phases: false
schedule:
  - name: OnlyStep
    at: CCTK_EVOL
    after: null
""")

    invalid_path = schedules_path / "invalid"
    invalid_path.mkdir(parents=True, exist_ok=True)

    (invalid_path / "invalid_identifier.yaml").write_text("""
schedule:
  - name: Wave-Toy
    at: CCTK_EVOL
""")

    (invalid_path / "duplicate_name.yaml").write_text("""
schedule:
  - name: Step
    at: CCTK_EVOL
  - name: Step
    at: CCTK_INITIAL
""")

    (invalid_path / "missing_at.yaml").write_text("""
schedule:
  - name: Step
""")

    (invalid_path / "unknown_key.yaml").write_text("""
schedule:
  - name: Step
    at: CCTK_EVOL
    while: forever
""")

    (invalid_path / "malformed.yaml").write_text("""
schedule:
- name: Step
   at: CCTK_EVOL
""")

    (invalid_path / "list_root.yaml").write_text("""
- name: Step
""")
    (invalid_path / "empty.yaml").write_text("")
    return schedules_path


@pytest.fixture(scope="module")
def schedules_dir(tmp_path_factory):
    """Creates the test declaration files once per module."""
    return create_schedule_files(tmp_path_factory.mktemp("schedules_root"))


class TestScheduleParser:
    """
    Tests that the ScheduleParser turns valid declarations into StepRecords and
    rejects malformed files with actionable errors.
    """

    def test_parse_wavetoy(self, schedules_dir):
        parsed = ScheduleParser().parse_file(schedules_dir / "valid" / "wavetoy.yaml")

        assert isinstance(parsed, ParsedSchedule)
        assert parsed.thorn == "WaveToy"
        assert [r.name for r in parsed.records] == [
            "WaveToy_InitialData", "WaveToy_Evolution", "WaveToy_Boundaries", "WaveToy_Prepare",
        ]
        assert parsed.records[0] == StepRecord(
            name="WaveToy_InitialData", phase=Phase.INIT, alias="wavetoy_initial",
            source_file=parsed.source_file,
        )
        assert parsed.records[2].after == "wavetoy_evolve"
        assert parsed.records[3].phase is Phase.EVOLVE
        assert parsed.records[3].before == "WaveToy_Evolution"
        assert parsed.resolver_config == ResolverConfig()
        assert parsed.skipped_blocks == ()

    def test_unschedulable_blocks_are_skipped(self, schedules_dir):
        parsed = ScheduleParser().parse_file(schedules_dir / "valid" / "filtered.yaml")
        assert [r.name for r in parsed.records] == ["CxxStep"]
        assert set(parsed.skipped_blocks) == {"Startup", "FortranStep", "EvolveGroup", "Analysis"}

    def test_thorn_defaults_to_file_stem(self, schedules_dir):
        parsed = ScheduleParser().parse_file(schedules_dir / "valid" / "filtered.yaml")
        assert parsed.thorn == "filtered"

    def test_resolver_block_is_parsed(self, schedules_dir):
        parsed = ScheduleParser().parse_file(schedules_dir / "valid" / "strict.yaml")
        assert parsed.resolver_config == ResolverConfig(strict_aliases=True, allow_empty_phases=False)
        assert parsed.records[0].after is None

    def test_parse_string(self):
        parsed = ScheduleParser().parse_string("""
schedule:
  - name: A
    at: Init
""")
        assert parsed.thorn == "anonymous"
        assert parsed.source_file is None
        assert parsed.records[0].phase is Phase.INIT

    @pytest.mark.parametrize("file_name, expected_fragment", [
        ("invalid_identifier.yaml", "Wave-Toy"),
        ("duplicate_name.yaml", "Step name 'Step' is declared by more than one block (#0, #1)"),
        ("missing_at.yaml", "required field"),
        ("unknown_key.yaml", "unknown field"),
    ])
    def test_schema_violations(self, schedules_dir, file_name, expected_fragment):
        path = schedules_dir / "invalid" / file_name
        with pytest.raises(SchemaValidationError) as exc_info:
            ScheduleParser().parse_file(path)
        assert expected_fragment in str(exc_info.value)
        report = exc_info.value.get_diagnostic_report()
        assert "YAML Schema Validation Error" in report
        assert str(path.resolve()) in report

    @pytest.mark.parametrize("file_name, expected_fragment", [
        ("malformed.yaml", "Invalid YAML syntax"),
        ("list_root.yaml", "must be a dictionary"),
        ("empty.yaml", "empty"),
        ("does_not_exist.yaml", "not found"),
    ])
    def test_file_level_errors(self, schedules_dir, file_name, expected_fragment):
        with pytest.raises(ParsingError) as exc_info:
            ScheduleParser().parse_file(schedules_dir / "invalid" / file_name)
        assert expected_fragment in exc_info.value.details

    def test_parse_string_syntax_error(self):
        with pytest.raises(ParsingError, match="Invalid YAML syntax"):
            ScheduleParser().parse_string("schedule: [unclosed")
