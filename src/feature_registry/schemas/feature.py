"""
Feature definition models.

A FeatureDefinition is declared once, usually at module import time of the
feature package, and never changes afterwards. Only its membership in a
registry's enabled set changes over the process lifetime.
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from feature_registry.schemas.extensions import (
    BookingStep,
    NavItem,
    Overlay,
    PropertyPageSection,
    SearchFilter,
)

InitializeHook = Callable[[], Awaitable[None] | None]
CleanupHook = Callable[[], None]


class FeatureCategory(str, Enum):
    """Classification of features for grouping. No behavioral effect."""

    CORE = "core"  # Search, booking
    ENGAGEMENT = "engagement"  # Chat, reviews, favorites
    AI = "ai"  # Assistant, recommendations
    SOCIAL = "social"  # Sharing, referrals
    ANALYTICS = "analytics"  # Tracking
    EXPERIMENTAL = "experimental"


class FeatureStatus(str, Enum):
    """Maturity of a feature. Advisory only."""

    STABLE = "stable"
    BETA = "beta"
    EXPERIMENTAL = "experimental"
    DEPRECATED = "deprecated"


class FeatureDependencies(BaseModel):
    """What a feature needs.

    Only ``features`` is enforced by the registry. ``env_vars`` and
    ``services`` are informational and surface in the audit report.
    """

    model_config = ConfigDict(frozen=True)

    features: list[str] = Field(
        default_factory=list, description="Feature ids that must be enabled first"
    )
    env_vars: list[str] = Field(
        default_factory=list, description="Environment variables the feature reads"
    )
    services: list[str] = Field(
        default_factory=list, description="External services (cms, payments, ...)"
    )


class FeatureProvides(BaseModel):
    """Contributions a feature makes to the application's extension points."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    components: dict[str, Any] = Field(default_factory=dict)
    hooks: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    api: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    nav_items: list[NavItem] = Field(default_factory=list)
    overlays: list[Overlay] = Field(default_factory=list)
    property_page_sections: list[PropertyPageSection] = Field(default_factory=list)
    booking_steps: list[BookingStep] = Field(default_factory=list)
    search_filters: list[SearchFilter] = Field(default_factory=list)


class FeatureDefinition(BaseModel):
    """Immutable declaration of a feature."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(min_length=1, description="Unique key, stable across versions")
    name: str
    description: str = ""
    category: FeatureCategory
    status: FeatureStatus = FeatureStatus.STABLE
    version: str = "1.0.0"
    default_enabled: bool = False
    dependencies: FeatureDependencies = Field(default_factory=FeatureDependencies)
    provides: FeatureProvides = Field(default_factory=FeatureProvides)
    initialize: InitializeHook | None = Field(default=None, exclude=True)
    cleanup: CleanupHook | None = Field(default=None, exclude=True)

    @property
    def required_features(self) -> list[str]:
        """Feature ids this feature depends on."""
        return list(self.dependencies.features)
