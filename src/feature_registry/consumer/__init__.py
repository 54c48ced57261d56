"""Consumer facade: read-only feature queries for application code."""

from feature_registry.consumer.context import (
    ConfigOnlyFeatures,
    FeatureAccess,
    FeatureContext,
    FeatureState,
    feature_context,
    use_feature,
    use_features,
)
from feature_registry.consumer.gate import feature_gate, feature_overlays, with_feature

__all__ = [
    "ConfigOnlyFeatures",
    "FeatureAccess",
    "FeatureContext",
    "FeatureState",
    "feature_context",
    "feature_gate",
    "feature_overlays",
    "use_feature",
    "use_features",
    "with_feature",
]
