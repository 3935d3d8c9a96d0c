"""Configuration for the compare command.

Example config file (compare.yaml):

    base: "USD"
    targets:
      - "EUR"
      - "bitcoin"
    colors:
      - "#1f77b4"
      - "#ff7f0e"
    date_range:
      start: "2024-01-01"
      end: "2024-03-01"
    max_points: 20              # Optional
    axis_policy: "union"        # Optional: union | first-series
    container: "chart-1"        # Optional
    output: "usd_chart.png"     # Optional
    sources:                    # Optional
      timeout: 10
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ratechart.exceptions import ConfigError
from ratechart.types import (AxisPolicy, ChartRequest, CompareConfig,
                             ContainerId, DateRange, SourceSettings)

VALID_AXIS_POLICIES = frozenset(policy.value for policy in AxisPolicy)


def parse_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string or pass through date objects.

    :param value: Date string, date or datetime.
    :returns: Calendar date.
    :raises ConfigError: If parsing fails.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError as e:
        raise ConfigError(f"Invalid date format: {value}") from e


def _parse_axis_policy(value: str) -> AxisPolicy:
    if value not in VALID_AXIS_POLICIES:
        raise ConfigError(
            f"Invalid axis_policy '{value}'. "
            f"Valid options: {sorted(VALID_AXIS_POLICIES)}"
        )
    return AxisPolicy(value)


def _parse_str_list(raw_config: dict[str, Any], field: str) -> list[str]:
    raw = raw_config[field]
    if not isinstance(raw, list) or len(raw) == 0:
        raise ConfigError(f"'{field}' must be a non-empty list")
    return [str(item) for item in raw]


def build_compare_config(raw_config: dict[str, Any]) -> CompareConfig:
    """Validate a raw configuration mapping.

    :param raw_config: Mapping as loaded from YAML or built from CLI arguments.
    :returns: Validated CompareConfig object.
    :raises ConfigError: If the configuration is invalid.
    """
    required_fields = ["base", "targets", "colors", "date_range"]
    for field in required_fields:
        if field not in raw_config:
            raise ConfigError(f"Missing required field: {field}")

    base = raw_config["base"]
    if not isinstance(base, str) or not base:
        raise ConfigError("'base' must be a non-empty string")

    targets = _parse_str_list(raw_config, "targets")
    colors = _parse_str_list(raw_config, "colors")
    if len(colors) != len(targets):
        raise ConfigError(
            f"'colors' must have one entry per target "
            f"({len(targets)} targets, {len(colors)} colors)"
        )

    raw_date_range = raw_config["date_range"]
    if not isinstance(raw_date_range, dict):
        raise ConfigError("'date_range' must be a mapping with 'start' and 'end'")
    if "start" not in raw_date_range or "end" not in raw_date_range:
        raise ConfigError("'date_range' must contain 'start' and 'end'")

    start = parse_date(raw_date_range["start"])
    end = parse_date(raw_date_range["end"])
    if start > end:
        raise ConfigError("'date_range.start' must not be after 'date_range.end'")

    max_points = raw_config.get("max_points", 20)
    if isinstance(max_points, bool) or not isinstance(max_points, int) or max_points < 1:
        raise ConfigError("'max_points' must be a positive integer")

    axis_policy = _parse_axis_policy(raw_config.get("axis_policy", AxisPolicy.UNION.value))

    raw_sources = raw_config.get("sources", {})
    if not isinstance(raw_sources, dict):
        raise ConfigError("'sources' must be a mapping")

    try:
        sources = SourceSettings(**raw_sources)
        request = ChartRequest(
            base=base,
            targets=targets,
            colors=colors,
            date_range=DateRange(start=start, end=end),
            container=ContainerId(str(raw_config.get("container", "chart-1"))),
            max_points=max_points,
            axis_policy=axis_policy,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    output = raw_config.get("output")
    return CompareConfig(
        request=request,
        output=str(output) if output is not None else None,
        sources=sources,
    )


def merge_overrides(raw_config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Return ``raw_config`` with ``overrides`` applied on top.

    A partial ``date_range`` override (only ``start`` or ``end``) is merged
    into the configured range instead of replacing it.
    """
    merged = dict(raw_config)
    for field, value in overrides.items():
        current = merged.get(field)
        if field == "date_range" and isinstance(current, dict) and isinstance(value, dict):
            merged[field] = {**current, **value}
        else:
            merged[field] = value
    return merged


def load_compare_config(
    config_path: str | Path,
    overrides: dict[str, Any] | None = None,
) -> CompareConfig:
    """Parse and validate a compare configuration file.

    :param config_path: Path to YAML configuration file.
    :param overrides: Fields taking precedence over the file, e.g. from
        command-line flags.
    :returns: Validated CompareConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    if overrides:
        raw_config = merge_overrides(raw_config, overrides)
    return build_compare_config(raw_config)
