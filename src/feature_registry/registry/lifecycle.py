"""
Error boundaries around feature lifecycle hooks.

``initialize`` may be a plain function or return an awaitable (typically a
coroutine). The helpers here call the hooks, classify failures and hand
awaitables back to the registry, which decides how to drive them.
"""

import asyncio
import inspect
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from feature_registry.registry.errors import CleanupError, InitializationError
from feature_registry.schemas.feature import FeatureDefinition


@dataclass
class InitializeOutcome:
    """Result of calling a feature's ``initialize`` hook.

    Attributes:
        error: Set when the hook raised synchronously.
        pending: Awaitable returned by the hook that still has to run.
    """

    error: InitializationError | None = None
    pending: Awaitable[Any] | None = None

    @property
    def ok(self) -> bool:
        """True when the synchronous part of the hook succeeded."""
        return self.error is None


def call_initialize(definition: FeatureDefinition) -> InitializeOutcome:
    """
    Call ``initialize`` inside an error boundary.

    Args:
        definition: Feature whose hook to call.

    Returns:
        Outcome with the classified error or the pending awaitable.
    """
    if definition.initialize is None:
        return InitializeOutcome()

    try:
        result = definition.initialize()
    except Exception as exc:
        return InitializeOutcome(error=InitializationError(definition.id, exc))

    if inspect.isawaitable(result):
        return InitializeOutcome(pending=result)
    return InitializeOutcome()


async def await_initialize(
    feature_id: str, pending: Awaitable[Any]
) -> InitializationError | None:
    """Await the asynchronous part of ``initialize`` and classify a failure."""
    try:
        await pending
    except Exception as exc:
        return InitializationError(feature_id, exc)
    return None


def run_initialize_to_completion(
    feature_id: str, pending: Awaitable[Any]
) -> InitializationError | None:
    """
    Drive a pending ``initialize`` awaitable when no event loop is running.

    Must not be called from inside a running loop.
    """
    return asyncio.run(await_initialize(feature_id, pending))


def call_cleanup(definition: FeatureDefinition) -> CleanupError | None:
    """Call ``cleanup`` inside an error boundary."""
    if definition.cleanup is None:
        return None

    try:
        definition.cleanup()
    except Exception as exc:
        return CleanupError(definition.id, exc)
    return None


def has_running_loop() -> bool:
    """Check whether the caller runs inside an asyncio event loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True
