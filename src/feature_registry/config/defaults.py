"""
Default feature config table of the booking site.

Enable or disable features here. Each feature can be toggled without
affecting other parts of the site. Deployments override this table with a
YAML file (see ``feature_registry.config.loader``).
"""

from typing import Any

from feature_registry.config.settings import ConfigTable

DEFAULT_FEATURE_CONFIG: dict[str, dict[str, Any]] = {
    # Core
    "property-search": {
        "enabled": True,
        "config": {"show_ai_search": True, "show_map_view": True, "default_view": "grid"},
    },
    "property-booking": {
        "enabled": True,
        "config": {"show_addons": True, "show_insurance": True, "allow_split_payment": True},
    },
    "property-favorites": {
        "enabled": True,
        "config": {"persist_to_local_storage": True, "sync_to_account": True},
    },
    "property-compare": {
        "enabled": True,
        "config": {"max_properties": 4},
    },
    # Engagement
    "chat-widget": {
        "enabled": True,
        "config": {"position": "bottom-right", "show_on_mobile": True, "ai_powered": True},
    },
    "reviews": {
        "enabled": True,
        "config": {"allow_guest_reviews": True, "require_verified_stay": False},
    },
    "notifications": {
        "enabled": True,
        "config": {"show_bell": True, "enable_push": False},
    },
    # AI
    "sandy-ai": {
        "enabled": True,
        "config": {
            "show_on_property_page": True,
            "show_dream_matcher": True,
            "show_voice_search": True,
        },
    },
    "ai-recommendations": {
        "enabled": True,
        "config": {"show_similar_properties": True, "show_personalized": True},
    },
    # Social
    "social-sharing": {
        "enabled": True,
        "config": {"platforms": ["facebook", "twitter", "pinterest", "email", "copy"]},
    },
    "referral-program": {
        "enabled": False,  # Referral backend not live yet
        "config": {"reward_amount": 50},
    },
    # Gamification
    "loyalty-program": {
        "enabled": True,
        "config": {"show_points_on_booking": True, "show_tier_badges": True},
    },
    "achievements": {
        "enabled": False,
        "config": {"show_notifications": True},
    },
    # Weather & local
    "weather-widget": {
        "enabled": True,
        "config": {"show_on_property_page": True, "show_surf_report": True},
    },
    "local-guide": {
        "enabled": True,
        "config": {"show_dining": True, "show_activities": True, "show_events": True},
    },
    # Accessibility
    "accessibility-controls": {
        "enabled": True,
        "config": {"show_panel": True, "show_skip_links": True, "show_keyboard_shortcuts": True},
    },
    # Experimental
    "virtual-tours": {
        "enabled": True,
        "config": {"provider": "matterport"},
    },
    "ar-beach-finder": {"enabled": False},
    "voice-assistant": {"enabled": False},
    # Analytics
    "analytics": {
        "enabled": False,
        "config": {"provider": "azure-insights"},
    },
    "recently-viewed": {
        "enabled": True,
        "config": {"max_items": 10, "persist_days": 30},
    },
}


def default_table() -> ConfigTable:
    """Build the packaged default config table."""
    return ConfigTable.model_validate(DEFAULT_FEATURE_CONFIG)
