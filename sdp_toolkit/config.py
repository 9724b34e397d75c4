"""
Configuration for sdp-analyze.

Settings are resolved in this order, later sources winning:
- built-in defaults
- an optional YAML file, validated against schemas/config.yml
- environment variables (SDP_COLUMN_POLICY, SDP_TABLEFMT, SDP_LOG_LEVEL)
- command-line flags (applied by the CLI)

Example file:
    column_policy: lenient
    skip_invalid: true
    tablefmt: github
    log_level: INFO
    export_dir: out/graphs
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yamale
import yaml

from sdp_toolkit.reader import COLUMN_POLICIES, STRICT

SCHEMA_PATH = Path(__file__).parent / "schemas" / "config.yml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_OVERRIDES = {
    "SDP_COLUMN_POLICY": "column_policy",
    "SDP_TABLEFMT": "tablefmt",
    "SDP_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""
    pass


class ColumnPolicyValidator(yamale.validators.Validator):
    tag = "column_policy"

    def _is_valid(self, value):
        return value in COLUMN_POLICIES


@dataclass(frozen=True)
class Settings:
    column_policy: str = STRICT
    skip_invalid: bool = False
    tablefmt: str = "simple"
    log_level: str = "WARNING"
    export_dir: Optional[str] = None

    def merged(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _load_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file {config_path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def validate_config(data: Dict[str, Any], source: str = "configuration") -> None:
    """
    Validate configuration data against the packaged schema.

    Raises:
        ConfigError: If a key is unknown or a value has the wrong type
    """
    validators = yamale.validators.DefaultValidators.copy()
    validators[ColumnPolicyValidator.tag] = ColumnPolicyValidator
    schema = yamale.make_schema(str(SCHEMA_PATH), validators=validators)
    try:
        yamale.validate(schema, yamale.make_data(content=yaml.safe_dump(data)))
    except yamale.YamaleError as e:
        raise ConfigError(f"Invalid {source}:\n{e}") from e


def load_settings(config_path: Optional[Union[str, Path]] = None,
                  environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Resolve settings from defaults, an optional file and the environment.

    Args:
        config_path: YAML configuration file; skipped when None
        environ: Environment mapping (default: os.environ)

    Raises:
        ConfigError: If the file or an environment override is invalid
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        values.update(_load_yaml(config_path))
        validate_config(values, source=f"configuration file {config_path}")

    for variable, key in ENV_OVERRIDES.items():
        if environ.get(variable):
            values[key] = environ[variable]

    column_policy = values.get("column_policy", STRICT)
    if column_policy not in COLUMN_POLICIES:
        raise ConfigError(f"Invalid column_policy {column_policy!r}; expected one of {COLUMN_POLICIES}")
    log_level = str(values.get("log_level", "WARNING")).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log_level {log_level!r}; expected one of {LOG_LEVELS}")
    values["log_level"] = log_level

    return Settings().merged(**values)
