"""Directory check configuration and environment setup.

The compensation and depth thresholds are business policy and live in
``orgchart.validation.rules``; they are intentionally not configurable here.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from orgchart.utils.io import FilePath, load_config_file
from orgchart.utils.types import ConfigValue, ReportFormat

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class DirectoryConfig:
    input_path: Path | None
    report_format: ReportFormat
    log_level: str
    strict_ids: bool
    output_dir: Path | None = None


def load_directory_config(env: str = "production") -> DirectoryConfig:
    match env:
        case "production":
            return DirectoryConfig(
                input_path=Path("data/employees.csv"),
                report_format=ReportFormat.TABLE,
                log_level="WARNING",
                strict_ids=False,
            )
        case "development":
            return DirectoryConfig(
                input_path=Path("data/employees.csv"),
                report_format=ReportFormat.TABLE,
                log_level="DEBUG",
                strict_ids=False,
            )
        case "test":
            return DirectoryConfig(
                input_path=None,
                report_format=ReportFormat.SUMMARY,
                log_level="WARNING",
                strict_ids=False,
            )
        case other:
            raise ValueError(f"Unknown environment: {other}")


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _parse_flag(key: str, value: ConfigValue) -> bool:
    match value:
        case bool():
            return value
        case int():
            return value != 0
        case str() if value.strip().lower() in _TRUE_STRINGS:
            return True
        case str() if value.strip().lower() in _FALSE_STRINGS:
            return False
        case _:
            raise ValueError(f"Invalid boolean for {key}: {value!r}")


def _coerce_override(key: str, value: ConfigValue) -> object:
    match key:
        case "input_path" | "output_dir":
            return Path(value) if value else None
        case "report_format":
            return ReportFormat(str(value).lower())
        case "log_level":
            level = str(value).upper()
            if level not in LOG_LEVELS:
                raise ValueError(f"Unknown log level: {value}")
            return level
        case "strict_ids":
            return _parse_flag(key, value)
        case _:
            raise KeyError(key)


def apply_overrides(config: DirectoryConfig, overrides: Mapping[str, ConfigValue]) -> DirectoryConfig:
    """Return a copy of ``config`` with known keys replaced; unknown keys are skipped."""
    changes: dict[str, object] = {}
    for key, value in overrides.items():
        try:
            changes[key] = _coerce_override(key, value)
        except KeyError:
            logger.warning("Ignoring unknown config key: %s", key)
    return replace(config, **changes)


def load_config(env: str = "production", path: FilePath | None = None) -> DirectoryConfig:
    """Build the environment config, layering an optional TOML/YAML file on top.

    Settings may sit at the top level of the file or under an ``[orgchart]``
    table.
    """
    config = load_directory_config(env)
    if path is None:
        return config

    data = load_config_file(path)
    section = data.get("orgchart", data)
    if not isinstance(section, Mapping):
        raise ValueError(f"Config section 'orgchart' in {path} must be a table")
    logger.debug("Applying %d config override(s) from %s", len(section), path)
    return apply_overrides(config, section)
