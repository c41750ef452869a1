# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Shop FinSight.

This module is responsible for:
- loading the main application configuration from a TOML file,
- exposing the engine tuning constants (year length, forecast clamps and
  thresholds) as typed, frozen dataclasses,
- exposing the data paths, balance-sheet inputs and display options used
  by the CLI.

Engine modules never read configuration files themselves: they receive an
``EngineSettings`` (or fall back to ``DEFAULT_SETTINGS``).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomllib  # Python 3.11+

from .models import CapitalSnapshot

DEFAULT_CONFIG_FILE = "shop_finsight_config.toml"

DISPLAY_MODES = ("table", "csv", "both")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ForecastSettings:
    """
    Tuning constants for the pattern-based cash-flow forecaster.

    Attributes:
        horizon_months: Default number of projected months.
        step_days: Days between two projected months.
        growth_window: Number of earliest / most recent entries compared to
            estimate the growth rate.
        growth_cap: Absolute bound on the growth rate.
        confidence_floor: Lower bound of a subcategory confidence.
        confidence_ceiling: Upper bound of a subcategory confidence.
        high_threshold: Mean confidence above which the tier is 'high'.
        medium_threshold: Mean confidence above which the tier is 'medium'.
    """

    horizon_months: int = 12
    step_days: int = 30
    growth_window: int = 6
    growth_cap: float = 0.5
    confidence_floor: float = 0.3
    confidence_ceiling: float = 0.95
    high_threshold: float = 0.8
    medium_threshold: float = 0.6


@dataclass(frozen=True)
class EngineSettings:
    """Engine-wide constants."""

    year_length_days: float = 365.25
    # No accounts-receivable ledger is modeled.
    receivables_turnover: float = 12.0
    forecast: ForecastSettings = field(default_factory=ForecastSettings)


DEFAULT_SETTINGS = EngineSettings()


@dataclass(frozen=True)
class DataPaths:
    """CSV snapshot locations (resolved against the config file directory)."""

    fixed_assets: Optional[Path]
    cash_flows: Optional[Path]


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for Shop FinSight.

    This aggregates:
    - the CSV data paths,
    - the balance-sheet snapshot and inventory valuation inputs,
    - the engine settings,
    - display and logging options for the CLI.
    """

    data: DataPaths
    capital_snapshot: Optional[CapitalSnapshot]
    inventory_value: float
    engine: EngineSettings
    display_mode: str
    decimals: int
    log_level: str


def default_app_config() -> AppConfig:
    """Configuration used when no TOML file is available."""
    return AppConfig(
        data=DataPaths(fixed_assets=None, cash_flows=None),
        capital_snapshot=None,
        inventory_value=0.0,
        engine=DEFAULT_SETTINGS,
        display_mode="table",
        decimals=2,
        log_level="WARNING",
    )


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(parent: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = parent.get(name) or {}
    if not isinstance(value, Mapping):
        return {}
    return value


def _number(section: Mapping[str, Any], key: str, default: float, where: str) -> float:
    raw = section.get(key, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{where}.{key}' in the configuration. "
            "Expected a number."
        ) from exc


def _integer(section: Mapping[str, Any], key: str, default: int, where: str) -> int:
    raw = section.get(key, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{where}.{key}' in the configuration. "
            "Expected an integer."
        ) from exc


def parse_engine_settings(engine_section: Mapping[str, Any]) -> EngineSettings:
    """
    Build EngineSettings from an [engine] table, keeping defaults for any
    missing key.

    Raises:
        ValueError: if a value is not numeric or the bounds are inconsistent.
    """
    defaults = DEFAULT_SETTINGS
    fc_defaults = defaults.forecast
    forecast_section = _section(engine_section, "forecast")

    forecast = ForecastSettings(
        horizon_months=_integer(
            forecast_section,
            "horizon_months",
            fc_defaults.horizon_months,
            "engine.forecast",
        ),
        step_days=_integer(
            forecast_section, "step_days", fc_defaults.step_days, "engine.forecast"
        ),
        growth_window=_integer(
            forecast_section,
            "growth_window",
            fc_defaults.growth_window,
            "engine.forecast",
        ),
        growth_cap=_number(
            forecast_section, "growth_cap", fc_defaults.growth_cap, "engine.forecast"
        ),
        confidence_floor=_number(
            forecast_section,
            "confidence_floor",
            fc_defaults.confidence_floor,
            "engine.forecast",
        ),
        confidence_ceiling=_number(
            forecast_section,
            "confidence_ceiling",
            fc_defaults.confidence_ceiling,
            "engine.forecast",
        ),
        high_threshold=_number(
            forecast_section,
            "high_threshold",
            fc_defaults.high_threshold,
            "engine.forecast",
        ),
        medium_threshold=_number(
            forecast_section,
            "medium_threshold",
            fc_defaults.medium_threshold,
            "engine.forecast",
        ),
    )

    if forecast.growth_window <= 0 or forecast.step_days <= 0:
        raise ValueError(
            "engine.forecast.growth_window and step_days must be positive."
        )
    if forecast.growth_cap < 0:
        raise ValueError("engine.forecast.growth_cap cannot be negative.")
    if not 0.0 <= forecast.confidence_floor <= forecast.confidence_ceiling <= 1.0:
        raise ValueError(
            "engine.forecast confidence bounds must satisfy "
            "0 <= confidence_floor <= confidence_ceiling <= 1."
        )

    year_length_days = _number(
        engine_section, "year_length_days", defaults.year_length_days, "engine"
    )
    if year_length_days <= 0:
        raise ValueError("engine.year_length_days must be positive.")

    return EngineSettings(
        year_length_days=year_length_days,
        receivables_turnover=_number(
            engine_section,
            "receivables_turnover",
            defaults.receivables_turnover,
            "engine",
        ),
        forecast=forecast,
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the Shop FinSight application configuration from a TOML file.

    Expected top-level sections in the TOML file
    --------------------------------------------
    [data]
        ``fixed_assets`` and ``cash_flows`` CSV paths.

    [inputs]
        ``inventory_value`` (float) used by the ratios.

    [inputs.balance_sheet]
        CapitalSnapshot fields (total_assets, total_liabilities,
        working_capital, retained_earnings, short_term_debt, ...). When the
        table is absent, no snapshot is available and ratios are skipped.

    [engine] / [engine.forecast]
        Engine tuning constants (see EngineSettings / ForecastSettings).

    [display]
        ``mode`` (table, csv, both) and ``decimals``.

    [logging]
        ``level`` (DEBUG, INFO, WARNING, ...).

    All file paths in the TOML are resolved relative to the directory of
    the TOML file itself.

    Parameters
    ----------
    config_path : str, optional
        Path to the TOML configuration file. Defaults to
        ``shop_finsight_config.toml`` in the current directory.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    # 1) Data paths
    data_section = _section(raw, "data")

    def _resolve_optional(rel: Any) -> Optional[Path]:
        if not rel:
            return None
        return (base_dir / str(rel)).resolve()

    data = DataPaths(
        fixed_assets=_resolve_optional(data_section.get("fixed_assets")),
        cash_flows=_resolve_optional(data_section.get("cash_flows")),
    )

    # 2) Inputs: balance sheet snapshot and inventory valuation
    inputs_section = _section(raw, "inputs")
    inventory_value = _number(inputs_section, "inventory_value", 0.0, "inputs")

    capital_snapshot: Optional[CapitalSnapshot] = None
    if isinstance(inputs_section.get("balance_sheet"), Mapping):
        capital_snapshot = CapitalSnapshot.from_mapping(
            inputs_section["balance_sheet"]
        )

    # 3) Engine settings
    engine = parse_engine_settings(_section(raw, "engine"))

    # 4) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table")).lower()
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid value {display_mode!r} for 'display.mode' in the "
            f"configuration. Expected one of: {', '.join(DISPLAY_MODES)}."
        )
    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError):
        decimals = 2

    # 5) Logging
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level", "WARNING")).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid value {log_level!r} for 'logging.level' in the "
            f"configuration. Expected one of: {', '.join(LOG_LEVELS)}."
        )

    return AppConfig(
        data=data,
        capital_snapshot=capital_snapshot,
        inventory_value=inventory_value,
        engine=engine,
        display_mode=display_mode,
        decimals=decimals,
        log_level=log_level,
    )
