"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
A minimal config only needs a ``features`` mapping.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from feature_registry.config.settings import (
    ConfigTable,
    LoggingConfig,
    RegistryConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in {path}: {e}"
            raise ValueError(msg) from e
    return _process_config_values(data) if data else {}


def load_feature_table(data: dict[str, Any]) -> ConfigTable:
    """
    Build a config table from a raw ``features`` mapping.

    Entries may be written in short form (``chat-widget: true``) or in full
    form (``chat-widget: {enabled: true, config: {...}}``).

    Raises:
        ValueError: If the mapping or one of its entries is malformed.
    """
    if not isinstance(data, dict):
        msg = f"'features' must be a mapping of feature id to entry, got {type(data).__name__}"
        raise ValueError(msg)

    entries: dict[str, Any] = {}
    for feature_id, entry in data.items():
        if isinstance(entry, bool | str):
            entry = {"enabled": entry}
        elif entry is None:
            msg = f"Feature '{feature_id}' has an empty entry; set at least 'enabled'"
            raise ValueError(msg)
        entries[str(feature_id)] = entry

    return ConfigTable.model_validate(entries)


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> RegistryConfig:
    """
    Load registry configuration from YAML file(s).

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.
            When omitted, a ``base.yaml`` next to the main file is used if
            present.

    Returns:
        Fully validated RegistryConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)

    merged = _deep_merge(base_data, main_data)

    features = merged.get("features")
    table = load_feature_table(features if features is not None else {})

    modules = merged.get("modules") or []
    if not isinstance(modules, list):
        msg = "'modules' must be a list of dotted module paths"
        raise ValueError(msg)

    logging_data = merged.get("logging")
    if logging_data is None:
        logging_data = {}
    elif not isinstance(logging_data, dict):
        msg = f"'logging' must be a mapping, got {type(logging_data).__name__}"
        raise ValueError(msg)
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json=logging_data.get("json", False),
    )

    return RegistryConfig(
        features=table,
        modules=[str(m) for m in modules],
        logging=logging_config,
    )
