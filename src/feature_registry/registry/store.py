"""
Feature registry: storage, dependency resolution and lifecycle.

A registry owns the registered feature definitions and the set of enabled
feature ids. Each instance is isolated; create one per application (or per
test) with ``create_registry``.

Registration order matters. Dependencies are checked when a feature is
enabled, against what is enabled at that moment. A feature registered
before its dependency stays disabled and is not retried.
"""

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from feature_registry.config.defaults import default_table
from feature_registry.config.settings import ConfigTable
from feature_registry.registry.errors import (
    DuplicateRegistrationError,
    FeatureError,
    InitializationError,
    MissingDependencyError,
    UnknownFeatureError,
)
from feature_registry.registry.lifecycle import (
    await_initialize,
    call_cleanup,
    call_initialize,
    has_running_loop,
    run_initialize_to_completion,
)
from feature_registry.schemas.feature import (
    FeatureCategory,
    FeatureDefinition,
    FeatureStatus,
)
from feature_registry.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class RegistryState:
    """Snapshot of a registry's contents."""

    features: dict[str, FeatureDefinition] = field(default_factory=dict)
    enabled_features: set[str] = field(default_factory=set)
    initialized: bool = False


@dataclass(frozen=True)
class FeatureEvent:
    """Emitted to listeners on every enable/disable transition."""

    feature_id: str
    enabled: bool


Listener = Callable[[FeatureEvent], None]


class FeatureRegistry:
    """
    In-memory catalog of features and their enabled state.

    All mutation goes through ``register_feature``, ``enable_feature``,
    ``enable_feature_async`` and ``disable_feature``. None of them raises
    for feature failures: they return a success flag, log the classified
    error and record it for ``last_error``.
    """

    def __init__(self, config: ConfigTable | None = None) -> None:
        """
        Initialize an empty registry.

        Args:
            config: Config table consulted at registration time. Defaults to
                the packaged table.
        """
        self.config = config if config is not None else default_table()
        self._state = RegistryState()
        self._listeners: list[Listener] = []
        self._pending: dict[str, asyncio.Future[Any]] = {}
        self._enabling: dict[str, asyncio.Future[bool]] = {}
        self._errors: dict[str, FeatureError] = {}

    # Registration

    def register_feature(self, definition: FeatureDefinition) -> None:
        """
        Register a feature and enable it if configured to.

        The config entry, when present, decides whether the feature starts
        enabled; otherwise ``default_enabled`` does.
        """
        if definition.id in self._state.features:
            error = DuplicateRegistrationError(definition.id)
            log.warning(
                str(error), feature=definition.id, error_type=error.error_type
            )
            return

        self._state.features[definition.id] = definition

        entry = self.config.get_entry(definition.id)
        should_enable = entry.enabled if entry is not None else definition.default_enabled

        enabled = self.enable_feature(definition.id) if should_enable else False

        log.info(
            "Registered feature",
            feature=definition.id,
            requested=should_enable,
            enabled=enabled,
        )

    def mark_initialized(self) -> None:
        """Flag the end of the bootstrap registration sequence."""
        self._state.initialized = True

    # Lifecycle

    def enable_feature(self, feature_id: str) -> bool:
        """
        Enable a registered feature.

        If ``initialize`` returns an awaitable while an event loop is
        running, the feature is enabled immediately and the awaitable runs
        as a task; a later failure disables the feature again. Use
        ``wait_initialized`` to observe that outcome. Without a running
        loop the awaitable is run to completion first.

        While an ``enable_feature_async`` call for the same id is still
        awaiting ``initialize``, this returns False without calling
        ``initialize`` again; ``wait_initialized`` gives the outcome.

        Returns:
            True if the feature is enabled afterwards.
        """
        definition = self._check_enable(feature_id)
        if definition is None:
            return False
        if feature_id in self._state.enabled_features:
            return True
        if feature_id in self._enabling:
            log.info("Enable already in progress", feature=feature_id)
            return False

        outcome = call_initialize(definition)
        if outcome.error is not None:
            self._fail_initialize(outcome.error)
            return False

        if outcome.pending is not None:
            if has_running_loop():
                self._schedule_initialize(feature_id, outcome.pending)
            else:
                error = run_initialize_to_completion(feature_id, outcome.pending)
                if error is not None:
                    self._fail_initialize(error)
                    return False

        self._set_enabled(feature_id)
        return True

    async def enable_feature_async(self, feature_id: str) -> bool:
        """
        Enable a registered feature, awaiting an asynchronous ``initialize``.

        The feature only becomes enabled once ``initialize`` has completed
        successfully and its dependencies are still enabled. Concurrent
        calls for the same id share one ``initialize`` run. A
        ``disable_feature`` issued while ``initialize`` is awaited wins: the
        enable is abandoned and ``cleanup`` runs.

        Returns:
            True if the feature is enabled afterwards.
        """
        definition = self._check_enable(feature_id)
        if definition is None:
            return False
        if feature_id in self._state.enabled_features:
            return True

        in_flight = self._enabling.get(feature_id)
        if in_flight is not None:
            await asyncio.wait({in_flight})
            return not in_flight.cancelled() and in_flight.result()

        outcome = call_initialize(definition)
        if outcome.error is not None:
            self._fail_initialize(outcome.error)
            return False
        if outcome.pending is None:
            self._set_enabled(feature_id)
            return True

        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._enabling[feature_id] = future
        try:
            error = await await_initialize(feature_id, outcome.pending)
        except asyncio.CancelledError:
            if self._enabling.get(feature_id) is future:
                del self._enabling[feature_id]
            future.cancel()
            raise

        superseded = self._enabling.get(feature_id) is not future
        if not superseded:
            del self._enabling[feature_id]

        enabled = self._settle_async_enable(definition, error, superseded)
        future.set_result(enabled)
        return enabled

    def disable_feature(self, feature_id: str) -> bool:
        """
        Disable a feature, running its ``cleanup`` hook.

        The feature is removed from the enabled set even if ``cleanup``
        fails. Pending asynchronous initialization is not cancelled, but its
        outcome no longer changes the enabled state.

        Returns:
            False for unknown ids, True otherwise.
        """
        definition = self._state.features.get(feature_id)
        if definition is None:
            error = UnknownFeatureError(feature_id)
            log.debug(str(error), feature=feature_id, error_type=error.error_type)
            return False

        if self._enabling.pop(feature_id, None) is not None:
            log.info("Abandoned pending enable", feature=feature_id)

        if feature_id not in self._state.enabled_features:
            return True

        self._run_cleanup(definition)
        self._state.enabled_features.discard(feature_id)
        self._pending.pop(feature_id, None)
        log.info("Disabled feature", feature=feature_id)
        self._notify(FeatureEvent(feature_id, enabled=False))
        return True

    async def wait_initialized(self, feature_id: str) -> bool:
        """
        Wait for a pending asynchronous ``initialize`` to settle.

        Returns:
            Whether the feature is enabled once initialization has settled.
        """
        waiting = [
            f
            for f in (self._pending.get(feature_id), self._enabling.get(feature_id))
            if f is not None
        ]
        if waiting:
            await asyncio.wait(waiting)
        return self.is_enabled(feature_id)

    def pending_initialization(self, feature_id: str) -> asyncio.Future[Any] | None:
        """Get the in-flight ``initialize`` task of a feature, if any."""
        return self._pending.get(feature_id)

    # Queries

    def is_enabled(self, feature_id: str) -> bool:
        """Check whether a feature is currently enabled."""
        return feature_id in self._state.enabled_features

    def get_feature(self, feature_id: str) -> FeatureDefinition | None:
        """Get a registered feature definition."""
        return self._state.features.get(feature_id)

    def get_all_features(self) -> list[FeatureDefinition]:
        """All registered features, in registration order."""
        return list(self._state.features.values())

    def get_enabled_features(self) -> list[FeatureDefinition]:
        """Enabled features, in registration order."""
        return [
            f
            for f in self._state.features.values()
            if f.id in self._state.enabled_features
        ]

    def get_enabled_feature_ids(self) -> list[str]:
        """Ids of enabled features, in registration order."""
        return [f.id for f in self.get_enabled_features()]

    def list_by_category(self, category: FeatureCategory) -> list[FeatureDefinition]:
        """Registered features of one category."""
        return [f for f in self._state.features.values() if f.category == category]

    def list_by_status(self, status: FeatureStatus) -> list[FeatureDefinition]:
        """Registered features with one status."""
        return [f for f in self._state.features.values() if f.status == status]

    def get_dependencies(self, feature_id: str) -> list[FeatureDefinition]:
        """Registered features that ``feature_id`` depends on."""
        definition = self.get_feature(feature_id)
        if definition is None:
            return []
        return [
            self._state.features[dep]
            for dep in definition.required_features
            if dep in self._state.features
        ]

    def get_dependents(self, feature_id: str) -> list[FeatureDefinition]:
        """Registered features that depend on ``feature_id``."""
        return [
            f
            for f in self._state.features.values()
            if feature_id in f.dependencies.features
        ]

    def can_enable(self, feature_id: str) -> tuple[bool, str | None]:
        """
        Check, without side effects, whether a feature could be enabled now.

        Returns:
            Tuple of (can_enable, reason_if_not).
        """
        definition = self.get_feature(feature_id)
        if definition is None:
            return False, str(UnknownFeatureError(feature_id))
        error = self._missing_dependency(definition)
        if error is not None:
            return False, str(error)
        return True, None

    def can_disable(self, feature_id: str) -> tuple[bool, str | None]:
        """
        Check whether disabling would leave enabled dependents behind.

        Disabling is never blocked; this is advisory.

        Returns:
            Tuple of (can_disable_cleanly, reason_if_not).
        """
        enabled_dependents = [
            d.id for d in self.get_dependents(feature_id) if self.is_enabled(d.id)
        ]
        if enabled_dependents:
            return False, f"Required by: {', '.join(enabled_dependents)}"
        return True, None

    def last_error(self, feature_id: str) -> FeatureError | None:
        """The most recent failure recorded for a feature, if any."""
        return self._errors.get(feature_id)

    def state(self) -> RegistryState:
        """Copy of the registry state."""
        return RegistryState(
            features=dict(self._state.features),
            enabled_features=set(self._state.enabled_features),
            initialized=self._state.initialized,
        )

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for enable/disable transitions.

        Returns:
            Callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Internals

    def _check_enable(self, feature_id: str) -> FeatureDefinition | None:
        definition = self._state.features.get(feature_id)
        if definition is None:
            error = UnknownFeatureError(feature_id)
            self._errors[feature_id] = error
            log.warning(str(error), feature=feature_id, error_type=error.error_type)
            return None

        if feature_id in self._state.enabled_features:
            return definition

        missing = self._missing_dependency(definition)
        if missing is not None:
            self._errors[feature_id] = missing
            log.warning(
                str(missing),
                feature=feature_id,
                dependency=missing.dependency,
                error_type=missing.error_type,
            )
            return None
        return definition

    def _missing_dependency(
        self, definition: FeatureDefinition
    ) -> MissingDependencyError | None:
        for dep in definition.required_features:
            if dep not in self._state.enabled_features:
                return MissingDependencyError(definition.id, dep)
        return None

    def _run_cleanup(self, definition: FeatureDefinition) -> None:
        cleanup_error = call_cleanup(definition)
        if cleanup_error is not None:
            self._errors[definition.id] = cleanup_error
            log.error(
                str(cleanup_error),
                feature=definition.id,
                error_type=cleanup_error.error_type,
            )

    def _settle_async_enable(
        self,
        definition: FeatureDefinition,
        error: InitializationError | None,
        superseded: bool,
    ) -> bool:
        """Apply the result of an awaited ``initialize`` to the enabled set."""
        if error is not None:
            self._fail_initialize(error)
            return False

        if superseded:
            log.info("Discarding initialization after disable", feature=definition.id)
            self._run_cleanup(definition)
            return False

        # Dependencies may have been disabled while initialize was awaited
        missing = self._missing_dependency(definition)
        if missing is not None:
            self._errors[definition.id] = missing
            log.warning(
                str(missing),
                feature=definition.id,
                dependency=missing.dependency,
                error_type=missing.error_type,
            )
            self._run_cleanup(definition)
            return False

        if definition.id not in self._state.enabled_features:
            self._set_enabled(definition.id)
        return True

    def _fail_initialize(self, error: InitializationError) -> None:
        self._errors[error.feature_id] = error
        log.error(
            str(error),
            feature=error.feature_id,
            error_type=error.error_type,
            cause=repr(error.__cause__),
        )

    def _set_enabled(self, feature_id: str) -> None:
        self._state.enabled_features.add(feature_id)
        self._errors.pop(feature_id, None)
        log.info("Enabled feature", feature=feature_id)
        self._notify(FeatureEvent(feature_id, enabled=True))

    def _schedule_initialize(self, feature_id: str, pending: Any) -> None:
        task = asyncio.ensure_future(pending)
        self._pending[feature_id] = task
        task.add_done_callback(functools.partial(self._on_initialized, feature_id))

    def _on_initialized(self, feature_id: str, task: asyncio.Future[Any]) -> None:
        if self._pending.get(feature_id) is not task:
            # Disabled (or re-enabled) while initializing; outcome is stale
            if not task.cancelled():
                task.exception()
            return
        del self._pending[feature_id]

        if task.cancelled():
            cause: BaseException = asyncio.CancelledError()
        else:
            exc = task.exception()
            if exc is None:
                log.debug("Asynchronous initialization finished", feature=feature_id)
                return
            cause = exc

        self._fail_initialize(InitializationError(feature_id, cause))
        if feature_id in self._state.enabled_features:
            self._state.enabled_features.discard(feature_id)
            log.info("Rolled back feature after failed initialization", feature=feature_id)
            self._notify(FeatureEvent(feature_id, enabled=False))

    def _notify(self, event: FeatureEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception(
                    "Feature listener failed",
                    feature=event.feature_id,
                    enabled=event.enabled,
                )


def create_registry(config: ConfigTable | None = None) -> FeatureRegistry:
    """
    Create an isolated registry.

    Args:
        config: Config table to consult at registration time. Defaults to
            the packaged table.

    Returns:
        A new, empty FeatureRegistry.
    """
    return FeatureRegistry(config)
