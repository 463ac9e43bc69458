"""Configuration for the scheduling engine (JSON or YAML)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigError


@dataclass(frozen=True)
class SearchOptions:
    """Simulated annealing parameters."""

    max_iterations: int = 5000
    start_temperature: float = 100.0
    cooling_rate: float = 0.95
    min_temperature: float = 1e-4  # floor so exp() never divides by zero
    seed: Optional[int] = None
    verbose: bool = False

    # camelCase keys used by request payloads
    _ALIASES = {
        "maxIterations": "max_iterations",
        "startTemperature": "start_temperature",
        "coolingRate": "cooling_rate",
        "minTemperature": "min_temperature",
    }

    def __post_init__(self):
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 0:
            raise ConfigError(f"max_iterations must be a non-negative integer, got {self.max_iterations}")
        if self.start_temperature <= 0:
            raise ConfigError(f"start_temperature must be positive, got {self.start_temperature}")
        if not 0 < self.cooling_rate < 1:
            raise ConfigError(f"cooling_rate must be in (0, 1), got {self.cooling_rate}")
        if self.min_temperature <= 0:
            raise ConfigError(f"min_temperature must be positive, got {self.min_temperature}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SearchOptions":
        """Build options from a request/config mapping; missing keys keep their defaults."""
        if not data:
            return cls()
        normalised = {cls._ALIASES.get(k, k): v for k, v in data.items() if v is not None}
        return cls(**_checked_kwargs(cls, normalised, "options"))


@dataclass(frozen=True)
class RuleSettings:
    """Tunable parameters of the hard rules."""

    min_rest_hours: float = 8.0

    def __post_init__(self):
        if self.min_rest_hours < 0:
            raise ConfigError(f"min_rest_hours must be >= 0, got {self.min_rest_hours}")


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights of the soft penalty dimensions.

    Night-shift fairness is always scored. Every other dimension is off
    while its weight is 0.
    """

    night_fairness: float = 10.0
    avoided_shift_type: float = 0.0
    non_preferred_shift_type: float = 0.0
    avoided_date: float = 0.0
    preferred_date_unused: float = 0.0
    weekend_fairness: float = 0.0
    hours_fairness: float = 0.0
    hours_deviation_threshold: float = 4.0

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ConfigError(f"Scoring weight {f.name} must be >= 0")


@dataclass(frozen=True)
class SchedulerConfig:
    search: SearchOptions = field(default_factory=SearchOptions)
    rules: RuleSettings = field(default_factory=RuleSettings)
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    def with_search(self, **overrides) -> "SchedulerConfig":
        """Copy with some search options replaced (None values are ignored)."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, search=replace(self.search, **overrides))


def _checked_kwargs(cls, data: Mapping[str, Any], section: str) -> Dict[str, Any]:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {sorted(unknown)}")
    return dict(data)


def config_from_dict(data: Optional[Mapping[str, Any]]) -> SchedulerConfig:
    """Build a SchedulerConfig from the parsed contents of a config file."""
    data = dict(data or {})
    unknown = set(data) - {"search", "rules", "weights"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {sorted(unknown)}")
    try:
        return SchedulerConfig(
            search=SearchOptions.from_mapping(data.get("search")),
            rules=RuleSettings(**_checked_kwargs(RuleSettings, data.get("rules") or {}, "rules")),
            weights=ScoringWeights(**_checked_kwargs(ScoringWeights, data.get("weights") or {}, "weights")),
        )
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file; None gives the defaults

    Returns:
        SchedulerConfig

    Raises:
        ConfigError: If the file cannot be read or contains invalid settings
    """
    if path is None:
        return SchedulerConfig()

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ConfigError(f"Unsupported config format '{suffix}' (use .json, .yaml or .yml)")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return config_from_dict(data)
