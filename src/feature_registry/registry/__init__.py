"""Feature registry: storage, lifecycle and extension-point aggregation."""

from feature_registry.registry.errors import (
    CleanupError,
    DuplicateRegistrationError,
    FeatureError,
    InitializationError,
    MissingDependencyError,
    UnknownFeatureError,
)
from feature_registry.registry.extensions import (
    get_api,
    get_booking_steps,
    get_component,
    get_hook,
    get_nav_items,
    get_overlays,
    get_property_page_sections,
    get_search_filters,
)
from feature_registry.registry.store import (
    FeatureEvent,
    FeatureRegistry,
    Listener,
    RegistryState,
    create_registry,
)

__all__ = [
    "CleanupError",
    "DuplicateRegistrationError",
    "FeatureError",
    "FeatureEvent",
    "FeatureRegistry",
    "InitializationError",
    "Listener",
    "MissingDependencyError",
    "RegistryState",
    "UnknownFeatureError",
    "create_registry",
    "get_api",
    "get_booking_steps",
    "get_component",
    "get_hook",
    "get_nav_items",
    "get_overlays",
    "get_property_page_sections",
    "get_search_filters",
]
