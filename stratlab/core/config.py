"""Core configuration management module.

Two kinds of documents are loaded here:

* ``Settings`` - host-level options (logging, price provider).
* ``StrategyConfig`` - a strategy document: scanner/buy/sell rule sets plus
  the simulation window and portfolio constraints. Field names accept both
  snake_case and the camelCase used by exported strategy documents
  (``scannerConfig``, ``initialCapital``, ...).
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from stratlab.core.exceptions import ConfigError


class Indicator(str, Enum):
    PRICE = "price"
    VOLUME = "volume"
    PRICE_CHANGE = "priceChange"


class Operator(str, Enum):
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    EQ = "=="


class ExitRuleType(str, Enum):
    STOP_LOSS = "stopLoss"
    TAKE_PROFIT = "takeProfit"


_EXIT_TYPES = frozenset(t.value for t in ExitRuleType)


class IndicatorRule(BaseModel):
    """Compare an indicator value against a threshold.

    ``indicator`` and ``operator`` stay plain strings: an unknown indicator
    or operator is a rule that never matches, not a configuration error.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["indicator"] = "indicator"
    indicator: str
    operator: str
    value: float


class ExitRule(BaseModel):
    """Stop-loss / take-profit threshold, as a percentage of entry price."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exit"] = "exit"
    type: ExitRuleType
    value: float


class UnrecognizedRule(BaseModel):
    """Any condition payload that matches neither known shape."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unrecognized"] = "unrecognized"
    raw: Any = None


Condition = Union[IndicatorRule, ExitRule, UnrecognizedRule]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_condition(raw: Any) -> Condition:
    """Classify a raw condition payload. Never raises."""
    if isinstance(raw, (IndicatorRule, ExitRule, UnrecognizedRule)):
        return raw
    if not isinstance(raw, Mapping):
        return UnrecognizedRule(raw=raw)

    value = raw.get("value")
    if not _is_number(value):
        return UnrecognizedRule(raw=dict(raw))

    rule_type = raw.get("type")
    if isinstance(rule_type, str) and rule_type in _EXIT_TYPES:
        return ExitRule(type=ExitRuleType(rule_type), value=value)

    indicator = raw.get("indicator")
    operator = raw.get("operator")
    if isinstance(indicator, str) and indicator and isinstance(operator, str) and operator:
        return IndicatorRule(indicator=indicator, operator=operator, value=value)

    return UnrecognizedRule(raw=dict(raw))


class RuleSet(BaseModel):
    """Ordered list of conditions. Combinator semantics live in the matcher."""

    model_config = ConfigDict(frozen=True)

    conditions: list[Condition] = Field(default_factory=list)

    @field_validator("conditions", mode="before")
    @classmethod
    def classify_conditions(cls, v: Any) -> list[Condition]:
        if v is None:
            return []
        if isinstance(v, (str, bytes, Mapping)) or not isinstance(v, Iterable):
            raise ValueError("conditions must be a list")
        return [parse_condition(item) for item in v]

    @property
    def is_empty(self) -> bool:
        return not self.conditions


class SimulationConfig(BaseModel):
    """Simulation window and portfolio constraints."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    start_date: date
    end_date: date
    initial_capital: float = Field(gt=0, allow_inf_nan=False)
    symbols: list[str] = Field(min_length=1)
    max_positions: int = Field(ge=1)
    position_size: float = Field(gt=0, le=100)  # percent of initial capital per trade

    @field_validator("symbols")
    @classmethod
    def validate_symbols(cls, v: list[str]) -> list[str]:
        """Symbols must be non-blank and unique; order is the buy priority."""
        seen: set[str] = set()
        for symbol in v:
            if not symbol.strip():
                raise ValueError("Each symbol must be a non-empty string")
            if symbol in seen:
                raise ValueError(f"Duplicate symbol: {symbol}")
            seen.add(symbol)
        return v

    @model_validator(mode="after")
    def validate_date_range(self) -> SimulationConfig:
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self


class StrategyConfig(BaseModel):
    """A strategy document: rule sets plus simulation parameters."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str = "unnamed"
    description: str | None = None
    scanner_config: RuleSet = Field(default_factory=RuleSet)
    buy_config: RuleSet = Field(default_factory=RuleSet)
    sell_config: RuleSet = Field(default_factory=RuleSet)
    simulation_config: SimulationConfig

    @field_validator("scanner_config", "buy_config", "sell_config", mode="before")
    @classmethod
    def default_empty_rule_set(cls, v: Any) -> Any:
        return {} if v is None else v


class SystemConfig(BaseModel):
    """System-level configuration."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = "stratlab"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str | None = None


class ProviderConfig(BaseModel):
    """Price series provider configuration."""

    model_config = ConfigDict(use_enum_values=True)

    type: Literal["synthetic", "csv"] = "synthetic"
    data_dir: str = "data/prices"
    seed: int = 0
    fetch_workers: int = 4

    @field_validator("fetch_workers")
    @classmethod
    def validate_fetch_workers(cls, v: int) -> int:
        """Validate that fetch_workers is positive."""
        if v <= 0:
            raise ValueError("fetch_workers must be positive")
        return v


class Settings(BaseModel):
    """Root settings configuration."""

    model_config = ConfigDict(use_enum_values=True)

    system: SystemConfig = SystemConfig()
    provider: ProviderConfig = ProviderConfig()


def _read_yaml(path: Path | str) -> dict[str, Any]:
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_path}")
    return raw_config


def load_settings(path: Path | str) -> Settings:
    """Load settings from a YAML configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        FileNotFoundError: If configuration file does not exist.
        ConfigError: If the YAML is invalid or fails validation.
    """
    raw_config = _read_yaml(path)
    try:
        return Settings.model_validate(raw_config)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc


def parse_strategy(data: StrategyConfig | Mapping[str, Any]) -> StrategyConfig:
    """Validate a strategy document.

    Raises:
        ConfigError: If the document violates a configuration invariant
            (non-positive capital, empty symbol list, position size outside
            (0, 100], inverted date range, ...).
    """
    if isinstance(data, StrategyConfig):
        return data
    try:
        return StrategyConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid strategy: {exc}") from exc


def load_strategy(path: Path | str) -> StrategyConfig:
    """Load and validate a strategy document from YAML (or JSON) on disk."""
    return parse_strategy(_read_yaml(path))
