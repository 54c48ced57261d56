"""
Feature and extension-point models.

All models are frozen pydantic models: once declared, a feature never
changes.
"""

from feature_registry.schemas.extensions import (
    BookingStep,
    FilterType,
    NavItem,
    NavPosition,
    Overlay,
    PropertyPageSection,
    SearchFilter,
    SectionPosition,
)
from feature_registry.schemas.feature import (
    FeatureCategory,
    FeatureDefinition,
    FeatureDependencies,
    FeatureProvides,
    FeatureStatus,
)

__all__ = [
    "BookingStep",
    "FeatureCategory",
    "FeatureDefinition",
    "FeatureDependencies",
    "FeatureProvides",
    "FeatureStatus",
    "FilterType",
    "NavItem",
    "NavPosition",
    "Overlay",
    "PropertyPageSection",
    "SearchFilter",
    "SectionPosition",
]
