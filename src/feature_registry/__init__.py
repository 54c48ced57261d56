"""
Feature Registry: runtime catalog of togglable application features.

Features are declared once with metadata, dependencies and lifecycle hooks,
switched on or off through a config table, and contribute navigation items,
overlays, page sections, booking steps and search filters to the host
application.
"""

from importlib.metadata import version

from feature_registry.registry.store import FeatureRegistry, create_registry
from feature_registry.schemas.feature import FeatureDefinition

__version__ = version("feature-registry")

__all__ = ["FeatureDefinition", "FeatureRegistry", "__version__", "create_registry"]
