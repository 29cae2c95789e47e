# src/schedule_core/config.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during resolver configuration parsing."""
    pass


@dataclass(frozen=True)
class ResolverConfig:
    """
    Behavioural switches for a resolution call.

    strict_aliases: treat an alias declared by several steps as an ambiguity
        error instead of picking the first declaration with a warning.
    allow_empty_phases: return an empty schedule for a phase without steps
        instead of raising NoStepsAtPhaseError.
    """
    strict_aliases: bool = False
    allow_empty_phases: bool = True


_KNOWN_KEYS = ("strict_aliases", "allow_empty_phases")


def parse_resolver_config(raw_config: Optional[Dict[str, Any]]) -> ResolverConfig:
    """
    Parses a raw 'resolver' configuration block into a ResolverConfig.
    A missing or empty block yields the defaults.
    """
    if not raw_config:
        return ResolverConfig()
    if not isinstance(raw_config, dict):
        raise ConfigParsingError(f"Resolver configuration must be a mapping, got {type(raw_config).__name__}.")

    unknown = sorted(set(raw_config) - set(_KNOWN_KEYS))
    if unknown:
        raise ConfigParsingError(f"Unknown resolver configuration key(s): {unknown}. Allowed keys: {list(_KNOWN_KEYS)}.")

    values = {}
    for key, value in raw_config.items():
        if not isinstance(value, bool):
            raise ConfigParsingError(f"Resolver option '{key}' must be a boolean, got {value!r}.")
        values[key] = value

    config = ResolverConfig(**values)
    logger.debug("Parsed resolver configuration: %s", config)
    return config
