"""
Typed configuration models using Pydantic.

The config table is plain declarative data supplied by the host application
at deploy time. Nothing here has side effects.
"""

import copy
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


class FeatureConfigEntry(BaseModel):
    """Per-feature switch plus optional feature-specific settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(description="Whether the feature is switched on")
    config: dict[str, Any] | None = Field(
        default=None, description="Opaque settings handed to the feature"
    )


class ConfigTable(RootModel[dict[str, FeatureConfigEntry]]):
    """
    Mapping from feature id to its config entry.

    Iteration order is the declaration order of the source mapping and is
    preserved by every listing.
    """

    model_config = ConfigDict(frozen=True)

    root: dict[str, FeatureConfigEntry] = Field(default_factory=dict)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def get_entry(self, feature_id: str) -> FeatureConfigEntry | None:
        """Get the raw entry for a feature, or None when the id is absent."""
        return self.root.get(feature_id)

    def is_feature_enabled(self, feature_id: str) -> bool:
        """Closed by default: ids without an entry are disabled."""
        entry = self.root.get(feature_id)
        return entry.enabled if entry is not None else False

    def get_feature_config(self, feature_id: str) -> dict[str, Any] | None:
        """Get a copy of the feature's settings payload, if any."""
        entry = self.root.get(feature_id)
        if entry is None or entry.config is None:
            return None
        return copy.deepcopy(entry.config)

    def get_enabled_features(self) -> list[str]:
        """Ids whose entry is switched on, in table order."""
        return [fid for fid, entry in self.root.items() if entry.enabled]

    def get_disabled_features(self) -> list[str]:
        """Ids whose entry is switched off, in table order."""
        return [fid for fid, entry in self.root.items() if not entry.enabled]


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(
        default=False, alias="json", description="Render logs as JSON lines"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            msg = f"level must be one of {sorted(valid)}, got: {v!r}"
            raise ValueError(msg)
        return v.upper()


class RegistryConfig(BaseModel):
    """Complete configuration for bootstrapping a registry.

    ``modules`` lists the dotted import paths of feature modules in
    registration order. That order matters: a feature whose dependency is
    registered after it will stay disabled.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    features: ConfigTable = Field(default_factory=ConfigTable)
    modules: list[str] = Field(
        default_factory=list, description="Feature modules, in registration order"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def table(self) -> ConfigTable:
        """Convenience accessor for the feature config table."""
        return self.features
