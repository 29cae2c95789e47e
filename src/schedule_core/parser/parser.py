# src/schedule_core/parser/parser.py
import logging
import re
import string
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import cerberus
import yaml

from ..config import parse_resolver_config
from ..records import Phase, StepRecord
from .raw_data import ParsedSchedule
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

ID_REGEX = r"^[a-zA-Z_][a-zA-Z0-9_]*$"
ALLOWED_ID_CHARS = set(string.ascii_letters + string.digits + "_")

# Languages the generated host code can embed. Fortran routines are skipped.
SUPPORTED_LANG_REGEX = re.compile(r"^C(\+\+|XX)?$", re.IGNORECASE)


def _lower(value):
    return value.lower() if isinstance(value, str) else value


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator enforcing identifier syntax and unique step names."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_step_names'] = {'schema': {'type': 'boolean'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        """
        Validates identifier syntax. Null values are left to the 'nullable' rule.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or value is None: return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return

        if not re.match(ID_REGEX, value):
            invalid_chars = sorted(list(set(value) - ALLOWED_ID_CHARS))
            message = (
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore, "
                "and can only contain letters, numbers, and underscores. "
                f"This identifier contains the following forbidden character(s): {invalid_chars}"
            )
            self._error(field, message)

    def _validate_unique_step_names(self, constraint: bool, field: str, value: List[Dict]):
        """
        Validates that no two schedule blocks declare the same step name. The
        error names the offending blocks by position so they can be found in
        the file. Aliases are not checked here; shared aliases are classified
        by the resolver.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or not isinstance(value, list):
            return

        positions: Dict[str, List[int]] = {}
        for position, block in enumerate(value):
            if isinstance(block, dict) and isinstance(block.get('name'), str):
                positions.setdefault(block['name'], []).append(position)

        for name, found_at in positions.items():
            if len(found_at) > 1:
                blocks = ", ".join(f"#{p}" for p in found_at)
                self._error(field, f"Step name '{name}' is declared by more than one block ({blocks}).")


class ScheduleParser:
    """
    Loads and validates a YAML schedule declaration file and turns its function
    blocks into StepRecord objects.

    Only blocks the resolver can schedule become records: functions (not groups),
    written in C or C++, scheduled at CCTK_INITIAL or CCTK_EVOL. Everything else
    is skipped and listed in `ParsedSchedule.skipped_blocks`.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}
    _reference_rule = {"type": "string", "required": False, "nullable": True, "id_regex": True}

    _block_schema = {
        "name": _id_rule,
        "type": {"type": "string", "coerce": _lower, "allowed": ["function", "group"], "default": "function"},
        "lang": {"type": "string", "empty": False, "default": "C"},
        "at": {"type": "string", "required": True, "empty": False},
        "as": _reference_rule,
        "after": _reference_rule,
        "before": _reference_rule,
        "description": {"type": "string", "required": False},
    }

    _schema = {
        "thorn": {"type": "string", "required": False, "id_regex": True},
        "resolver": {
            "type": "dict", "required": False, "schema": {
                "strict_aliases": {"type": "boolean"},
                "allow_empty_phases": {"type": "boolean"},
            },
        },
        "schedule": {
            "type": "list", "required": True, "unique_step_names": True,
            "schema": {"type": "dict", "schema": _block_schema},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.info("ScheduleParser initialized with strict structural validation rules.")

    def parse_file(self, yaml_path: Union[str, Path]) -> ParsedSchedule:
        """Parses a declaration file from disk."""
        source = Path(yaml_path).resolve()
        logger.info(f"Parsing schedule declarations from: {source}")
        content = self._load_yaml(source)
        return self._build(content, source, default_thorn=source.stem)

    def parse_string(self, text: str, source: Optional[Path] = None) -> ParsedSchedule:
        """Parses declarations held in memory. `source` is only used for diagnostics."""
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        self._check_root(content, source)
        default_thorn = source.stem if source is not None else "anonymous"
        return self._build(content, source, default_thorn=default_thorn)

    def _build(self, content: Dict[str, Any], source: Optional[Path], default_thorn: str) -> ParsedSchedule:
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, source)
        validated_data = self._validator.document

        thorn = validated_data.get("thorn", default_thorn)
        records, skipped = self._extract_records(validated_data["schedule"], source)
        logger.info(
            "Parsed %d schedulable function(s) for '%s' (%d block(s) skipped).",
            len(records), thorn, len(skipped)
        )
        return ParsedSchedule(
            thorn=thorn,
            records=tuple(records),
            resolver_config=parse_resolver_config(validated_data.get("resolver")),
            source_file=source,
            skipped_blocks=tuple(skipped),
        )

    def _extract_records(self, blocks: List[Dict[str, Any]], source: Optional[Path]) -> Tuple[List[StepRecord], List[str]]:
        records: List[StepRecord] = []
        skipped: List[str] = []
        for block in blocks:
            name = block["name"]
            if block["type"] != "function":
                logger.debug("Skipping '%s': only functions are scheduled, not %ss.", name, block["type"])
                skipped.append(name)
                continue
            if not SUPPORTED_LANG_REGEX.match(block["lang"]):
                logger.debug("Skipping '%s': language '%s' is not supported.", name, block["lang"])
                skipped.append(name)
                continue
            if not Phase.is_supported_bin(block["at"]):
                logger.debug("Skipping '%s': bin '%s' is not an Init or Evolve phase.", name, block["at"])
                skipped.append(name)
                continue

            records.append(StepRecord(
                name=name,
                phase=Phase.from_string(block["at"]),
                alias=block.get("as"),
                after=block.get("after"),
                before=block.get("before"),
                source_file=source,
            ))
        return records, skipped

    @staticmethod
    def _check_root(content: Any, source: Optional[Path]):
        if content is None:
            raise ParsingError(details="The YAML document is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML document must be a dictionary (mapping).", file_path=source)

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ParsingError(details=f"Schedule declaration file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        self._check_root(content, source)
        return content
