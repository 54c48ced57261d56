"""
Feature configuration: the config table and its loaders.

The config table maps feature ids to ``{enabled, config}`` entries and is
read, never written, by the rest of the package.
"""

from feature_registry.config.defaults import DEFAULT_FEATURE_CONFIG, default_table
from feature_registry.config.loader import load_config, load_feature_table
from feature_registry.config.settings import (
    ConfigTable,
    FeatureConfigEntry,
    LoggingConfig,
    RegistryConfig,
)
from feature_registry.config.table import (
    get_disabled_features,
    get_enabled_features,
    get_feature_config,
    is_feature_enabled,
)

__all__ = [
    "DEFAULT_FEATURE_CONFIG",
    "ConfigTable",
    "FeatureConfigEntry",
    "LoggingConfig",
    "RegistryConfig",
    "default_table",
    "get_disabled_features",
    "get_enabled_features",
    "get_feature_config",
    "is_feature_enabled",
    "load_config",
    "load_feature_table",
]
