"""
Extension-point aggregation.

These functions collect contributions from all enabled features of a
registry into ordered lists for the UI shell. They are pure projections of
registry state: calling them twice without an intervening enable/disable
gives identical results.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from feature_registry.registry.store import FeatureRegistry
from feature_registry.schemas.extensions import (
    BookingStep,
    NavItem,
    NavPosition,
    Overlay,
    PropertyPageSection,
    SearchFilter,
    SectionPosition,
)
from feature_registry.schemas.feature import FeatureProvides

T = TypeVar("T")


def _order_key(item: Any) -> int:
    order = getattr(item, "order", None)
    return order if order is not None else 0


def _collect(
    registry: FeatureRegistry,
    select: Callable[[FeatureProvides], Iterable[T]],
) -> list[T]:
    """Flatten one contribution list across enabled features, sorted by order.

    ``sorted`` is stable, so equal orders keep registration order.
    """
    items: list[T] = []
    for feature in registry.get_enabled_features():
        items.extend(select(feature.provides))
    return sorted(items, key=_order_key)


def get_nav_items(
    registry: FeatureRegistry, position: NavPosition | str | None = None
) -> list[NavItem]:
    """Navigation items of enabled features, optionally for one position."""
    items = _collect(registry, lambda p: p.nav_items)
    if position is None:
        return items
    wanted = NavPosition(position)
    return [item for item in items if item.position == wanted]


def get_property_page_sections(
    registry: FeatureRegistry, position: SectionPosition | str | None = None
) -> list[PropertyPageSection]:
    """Property-page sections of enabled features, optionally for one position."""
    sections = _collect(registry, lambda p: p.property_page_sections)
    if position is None:
        return sections
    wanted = SectionPosition(position)
    return [s for s in sections if s.position == wanted]


def get_booking_steps(registry: FeatureRegistry) -> list[BookingStep]:
    """Booking-flow steps of enabled features."""
    return _collect(registry, lambda p: p.booking_steps)


def get_search_filters(registry: FeatureRegistry) -> list[SearchFilter]:
    """Search filters of enabled features."""
    return _collect(registry, lambda p: p.search_filters)


def get_overlays(registry: FeatureRegistry) -> list[Overlay]:
    """Overlays of enabled features."""
    return _collect(registry, lambda p: p.overlays)


def get_component(registry: FeatureRegistry, name: str) -> Any | None:
    """First component called ``name`` among enabled features."""
    for feature in registry.get_enabled_features():
        if name in feature.provides.components:
            return feature.provides.components[name]
    return None


def get_hook(registry: FeatureRegistry, name: str) -> Callable[..., Any] | None:
    """First hook called ``name`` among enabled features."""
    for feature in registry.get_enabled_features():
        if name in feature.provides.hooks:
            return feature.provides.hooks[name]
    return None


def get_api(registry: FeatureRegistry, name: str) -> Callable[..., Any] | None:
    """First api function called ``name`` among enabled features."""
    for feature in registry.get_enabled_features():
        if name in feature.provides.api:
            return feature.provides.api[name]
    return None
