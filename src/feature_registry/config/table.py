"""
Config table reads.

Module-level helpers over a ConfigTable. Without an explicit table they read
the packaged defaults, which is the behavior callers get when no registry
or deployment config is in play.
"""

from functools import lru_cache
from typing import Any

from feature_registry.config.defaults import default_table
from feature_registry.config.settings import ConfigTable


@lru_cache(maxsize=1)
def _default() -> ConfigTable:
    return default_table()


def _resolve(table: ConfigTable | None) -> ConfigTable:
    return table if table is not None else _default()


def is_feature_enabled(feature_id: str, table: ConfigTable | None = None) -> bool:
    """
    Check whether a feature is switched on in the config table.

    Args:
        feature_id: Feature identifier.
        table: Table to read. Defaults to the packaged table.

    Returns:
        The entry's ``enabled`` flag, or False when the id has no entry.
    """
    return _resolve(table).is_feature_enabled(feature_id)


def get_feature_config(
    feature_id: str, table: ConfigTable | None = None
) -> dict[str, Any] | None:
    """Get a feature's settings payload, or None when absent."""
    return _resolve(table).get_feature_config(feature_id)


def get_enabled_features(table: ConfigTable | None = None) -> list[str]:
    """List ids switched on in the table, in table order."""
    return _resolve(table).get_enabled_features()


def get_disabled_features(table: ConfigTable | None = None) -> list[str]:
    """List ids switched off in the table, in table order."""
    return _resolve(table).get_disabled_features()
