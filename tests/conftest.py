"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from feature_registry.config.settings import ConfigTable
from feature_registry.registry.store import FeatureRegistry, create_registry
from feature_registry.schemas.feature import FeatureCategory, FeatureDefinition


class HookStub:
    """Callable that counts its calls and optionally raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self.error = error

    def __call__(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def hook_stub() -> type[HookStub]:
    """Factory for call-counting lifecycle hooks."""
    return HookStub


@pytest.fixture
def make_feature() -> Callable[..., FeatureDefinition]:
    """Build feature definitions with sensible test defaults."""

    def _make(
        feature_id: str,
        deps: list[str] | None = None,
        default_enabled: bool = True,
        **kwargs: Any,
    ) -> FeatureDefinition:
        return FeatureDefinition(
            id=feature_id,
            name=kwargs.pop("name", feature_id.title()),
            category=kwargs.pop("category", FeatureCategory.CORE),
            default_enabled=default_enabled,
            dependencies={"features": deps or []},
            **kwargs,
        )

    return _make


@pytest.fixture
def empty_table() -> ConfigTable:
    """Config table without entries: every feature follows its default."""
    return ConfigTable()


@pytest.fixture
def registry(empty_table: ConfigTable) -> FeatureRegistry:
    """Isolated registry with an empty config table."""
    return create_registry(empty_table)


@pytest.fixture
def sample_table() -> ConfigTable:
    """Small config table mixing enabled and disabled entries."""
    return ConfigTable.model_validate(
        {
            "property-search": {"enabled": True, "config": {"default_view": "grid"}},
            "chat-widget": {"enabled": True, "config": {"position": "bottom-right"}},
            "referral-program": {"enabled": False, "config": {"reward_amount": 50}},
            "voice-assistant": {"enabled": False},
        }
    )
