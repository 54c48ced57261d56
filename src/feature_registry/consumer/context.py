"""
Consumer-side access to feature state.

A FeatureContext is the read-only view the rest of the application uses. It
is installed for a block of code with ``feature_context`` and looked up with
``use_features``. Outside any context, lookups fall back to the config table
alone, without a registry cross-check.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from feature_registry.config.settings import ConfigTable
from feature_registry.config.table import get_feature_config, is_feature_enabled
from feature_registry.registry.extensions import get_overlays
from feature_registry.registry.store import FeatureEvent, FeatureRegistry
from feature_registry.schemas.extensions import Overlay
from feature_registry.schemas.feature import FeatureDefinition
from feature_registry.utils.logging import get_logger

log = get_logger(__name__)


class FeatureAccess(ABC):
    """Read-only feature queries available to application code."""

    enabled_features: list[str]
    all_features: list[FeatureDefinition]

    @abstractmethod
    def is_enabled(self, feature_id: str) -> bool:
        """Whether the feature should be active for the caller."""
        ...

    @abstractmethod
    def get_config(self, feature_id: str) -> dict[str, Any] | None:
        """The feature's settings payload, if any."""
        ...

    @abstractmethod
    def overlays(self) -> list[Overlay]:
        """Overlays to mount in the layout."""
        ...


class FeatureContext(FeatureAccess):
    """
    Snapshot of a registry for consumers.

    ``is_enabled`` requires both the config table and the registry to agree
    that a feature is on. A feature enabled at runtime without a config
    entry therefore reads as disabled here.
    """

    def __init__(
        self,
        registry: FeatureRegistry,
        table: ConfigTable | None = None,
        *,
        live: bool = False,
    ) -> None:
        """
        Initialize the context and take the first snapshot.

        Args:
            registry: Registry to read runtime state from.
            table: Config table. Defaults to the registry's own table.
            live: Refresh the snapshot on every registry transition.
        """
        self.registry = registry
        self.table = table if table is not None else registry.config
        self.enabled_features: list[str] = []
        self.all_features: list[FeatureDefinition] = []
        self._unsubscribe = registry.subscribe(self._on_event) if live else None
        self.refresh()

    def refresh(self) -> None:
        """Re-read the enabled and registered features from the registry."""
        self.enabled_features = self.registry.get_enabled_feature_ids()
        self.all_features = self.registry.get_all_features()

    def is_enabled(self, feature_id: str) -> bool:
        return self.table.is_feature_enabled(feature_id) and self.registry.is_enabled(
            feature_id
        )

    def get_config(self, feature_id: str) -> dict[str, Any] | None:
        return self.table.get_feature_config(feature_id)

    def overlays(self) -> list[Overlay]:
        return get_overlays(self.registry)

    def close(self) -> None:
        """Stop following registry transitions."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_event(self, event: FeatureEvent) -> None:
        log.debug(
            "Refreshing feature context",
            feature=event.feature_id,
            enabled=event.enabled,
        )
        self.refresh()


class ConfigOnlyFeatures(FeatureAccess):
    """Fallback used outside any FeatureContext: config table reads only."""

    def __init__(self, table: ConfigTable | None = None) -> None:
        self.table = table
        self.enabled_features: list[str] = []
        self.all_features: list[FeatureDefinition] = []

    def is_enabled(self, feature_id: str) -> bool:
        return is_feature_enabled(feature_id, self.table)

    def get_config(self, feature_id: str) -> dict[str, Any] | None:
        return get_feature_config(feature_id, self.table)

    def overlays(self) -> list[Overlay]:
        return []


_current: ContextVar[FeatureContext | None] = ContextVar(
    "feature_context", default=None
)


@contextmanager
def feature_context(context: FeatureContext) -> Iterator[FeatureContext]:
    """
    Install a FeatureContext for the duration of the block.

    Example:
        with feature_context(FeatureContext(registry)):
            render_layout()  # use_features() sees the registry

    Args:
        context: Context to make current.

    Yields:
        The installed context.
    """
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


def use_features() -> FeatureAccess:
    """The current FeatureContext, or the config-only fallback."""
    context = _current.get()
    if context is None:
        return ConfigOnlyFeatures()
    return context


@dataclass(frozen=True)
class FeatureState:
    """Enabled flag and settings of one feature, as seen by a consumer."""

    enabled: bool
    config: dict[str, Any] | None


def use_feature(feature_id: str) -> FeatureState:
    """Look up one feature through the current context."""
    features = use_features()
    return FeatureState(
        enabled=features.is_enabled(feature_id),
        config=features.get_config(feature_id),
    )
