"""Tests for extension-point aggregation."""

from collections.abc import Callable

import pytest

from feature_registry.registry import (
    FeatureRegistry,
    get_api,
    get_booking_steps,
    get_component,
    get_hook,
    get_nav_items,
    get_overlays,
    get_property_page_sections,
    get_search_filters,
)
from feature_registry.schemas.extensions import (
    BookingStep,
    NavItem,
    NavPosition,
    Overlay,
    PropertyPageSection,
    SearchFilter,
)
from feature_registry.schemas.feature import FeatureDefinition

MakeFeature = Callable[..., FeatureDefinition]


def _nav(item_id: str, position: str = "header", order: int | None = None) -> NavItem:
    return NavItem(
        id=item_id, label=item_id.title(), href=f"/{item_id}", position=position, order=order
    )


class TestNavItems:
    """Tests for get_nav_items."""

    def test_sorted_by_order(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test that items from all enabled features are merged and sorted."""
        registry.register_feature(
            make_feature("a", provides={"nav_items": [_nav("x", order=2)]})
        )
        registry.register_feature(
            make_feature("b", provides={"nav_items": [_nav("y", order=1)]})
        )

        assert [item.id for item in get_nav_items(registry, "header")] == ["y", "x"]

    def test_missing_order_sorts_as_zero(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test that items without order sit with order 0, ties kept in place."""
        registry.register_feature(
            make_feature(
                "a",
                provides={
                    "nav_items": [_nav("late", order=5), _nav("plain"), _nav("zero", order=0)]
                },
            )
        )
        registry.register_feature(
            make_feature("b", provides={"nav_items": [_nav("first", order=-1)]})
        )

        assert [item.id for item in get_nav_items(registry)] == [
            "first",
            "plain",
            "zero",
            "late",
        ]

    def test_equal_order_keeps_registration_order(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test stable sorting across features."""
        for feature_id in ["c", "a", "b"]:
            registry.register_feature(
                make_feature(feature_id, provides={"nav_items": [_nav(feature_id, order=1)]})
            )

        assert [item.id for item in get_nav_items(registry)] == ["c", "a", "b"]

    def test_position_filter(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test filtering by position, as enum or string."""
        registry.register_feature(
            make_feature(
                "a",
                provides={
                    "nav_items": [
                        _nav("top", position="header"),
                        _nav("bottom", position="footer"),
                        _nav("me", position="account"),
                    ]
                },
            )
        )

        assert [i.id for i in get_nav_items(registry, "footer")] == ["bottom"]
        assert [i.id for i in get_nav_items(registry, NavPosition.ACCOUNT)] == ["me"]
        assert get_nav_items(registry, "mobile") == []
        assert len(get_nav_items(registry)) == 3

    def test_invalid_position(self, registry: FeatureRegistry) -> None:
        """Test that an unknown position is rejected."""
        with pytest.raises(ValueError):
            get_nav_items(registry, "sidebar")

    def test_disabled_features_excluded(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test that only enabled features contribute."""
        registry.register_feature(
            make_feature("on", provides={"nav_items": [_nav("on")]})
        )
        registry.register_feature(
            make_feature(
                "off", default_enabled=False, provides={"nav_items": [_nav("off")]}
            )
        )

        assert [i.id for i in get_nav_items(registry)] == ["on"]

        registry.disable_feature("on")
        registry.enable_feature("off")
        assert [i.id for i in get_nav_items(registry)] == ["off"]

    def test_idempotent(self, registry: FeatureRegistry, make_feature: MakeFeature) -> None:
        """Test that repeated calls give equal results."""
        registry.register_feature(
            make_feature("a", provides={"nav_items": [_nav("x", order=3), _nav("y")]})
        )
        assert get_nav_items(registry) == get_nav_items(registry)

    def test_empty_registry(self, registry: FeatureRegistry) -> None:
        """Test that an empty registry yields empty lists everywhere."""
        assert get_nav_items(registry) == []
        assert get_overlays(registry) == []
        assert get_property_page_sections(registry) == []
        assert get_booking_steps(registry) == []
        assert get_search_filters(registry) == []


class TestOtherExtensionPoints:
    """Tests for sections, booking steps, filters and overlays."""

    def test_property_page_sections(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test sorting and position filtering of sections."""
        registry.register_feature(
            make_feature(
                "reviews",
                provides={
                    "property_page_sections": [
                        PropertyPageSection(
                            id="reviews", title="Reviews", component="Reviews",
                            position="main", order=20,
                        ),
                        PropertyPageSection(
                            id="rating", title="Rating", component="Rating",
                            position="sidebar",
                        ),
                    ]
                },
            )
        )
        registry.register_feature(
            make_feature(
                "availability",
                provides={
                    "property_page_sections": [
                        PropertyPageSection(
                            id="calendar", title="Availability", component="Calendar",
                            position="main", order=10,
                        )
                    ]
                },
            )
        )

        main = get_property_page_sections(registry, "main")
        assert [s.id for s in main] == ["calendar", "reviews"]
        assert [s.id for s in get_property_page_sections(registry, "sidebar")] == ["rating"]

    def test_booking_steps(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test that booking steps are ordered across features."""
        registry.register_feature(
            make_feature(
                "travel-insurance",
                provides={
                    "booking_steps": [
                        BookingStep(
                            id="insurance", label="Insurance", icon="shield",
                            component="InsuranceStep", order=30,
                        )
                    ]
                },
            )
        )
        registry.register_feature(
            make_feature(
                "guest-details",
                provides={
                    "booking_steps": [
                        BookingStep(
                            id="guests", label="Guests", icon="users",
                            component="GuestStep", order=10, required=True,
                        )
                    ]
                },
            )
        )

        steps = get_booking_steps(registry)
        assert [s.id for s in steps] == ["guests", "insurance"]
        assert steps[0].required

    def test_search_filters(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test search filter aggregation."""
        registry.register_feature(
            make_feature(
                "price-filter",
                provides={
                    "search_filters": [
                        SearchFilter(id="price", label="Price", type="range", order=2),
                        SearchFilter(id="pets", label="Pets allowed", type="checkbox", order=1),
                    ]
                },
            )
        )

        assert [f.id for f in get_search_filters(registry)] == ["pets", "price"]

    def test_overlays(self, registry: FeatureRegistry, make_feature: MakeFeature) -> None:
        """Test overlay aggregation keeps component values untouched."""
        widget = object()
        registry.register_feature(
            make_feature(
                "chat-widget",
                provides={"overlays": [Overlay(id="chat", component=widget, order=100)]},
            )
        )
        registry.register_feature(
            make_feature(
                "cookie-banner",
                provides={"overlays": [Overlay(id="cookies", component="Banner")]},
            )
        )

        overlays = get_overlays(registry)
        assert [o.id for o in overlays] == ["cookies", "chat"]
        assert overlays[1].component is widget


class TestNamedLookups:
    """Tests for component, hook and api lookup by name."""

    def test_first_enabled_match_wins(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test lookup order and exclusion of disabled features."""
        registry.register_feature(
            make_feature(
                "off", default_enabled=False, provides={"components": {"Widget": "off"}}
            )
        )
        registry.register_feature(make_feature("a", provides={"components": {"Widget": "a"}}))
        registry.register_feature(make_feature("b", provides={"components": {"Widget": "b"}}))

        assert get_component(registry, "Widget") == "a"
        assert get_component(registry, "Missing") is None

    def test_hooks_and_api(
        self, registry: FeatureRegistry, make_feature: MakeFeature
    ) -> None:
        """Test hook and api lookups return the registered callables."""

        def use_chat() -> str:
            return "chat"

        def send_message(text: str) -> str:
            return text.upper()

        registry.register_feature(
            make_feature(
                "chat",
                provides={"hooks": {"use_chat": use_chat}, "api": {"send": send_message}},
            )
        )

        assert get_hook(registry, "use_chat") is use_chat
        assert get_api(registry, "send")("hi") == "HI"
        assert get_hook(registry, "send") is None

        registry.disable_feature("chat")
        assert get_api(registry, "send") is None
