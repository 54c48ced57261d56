"""Conditional helpers built on the current feature context."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from feature_registry.consumer.context import use_feature, use_features

T = TypeVar("T")
F = TypeVar("F")


def feature_gate(feature: str, children: T, fallback: F | None = None) -> T | F | None:
    """
    Return ``children`` if the feature is enabled, else ``fallback``.

    Args:
        feature: Feature id to check.
        children: Value to return when enabled.
        fallback: Value to return when disabled.
    """
    if not use_feature(feature).enabled:
        return fallback
    return children


def with_feature(
    feature_id: str,
    fallback: Callable[..., Any] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorate a callable so it only runs while a feature is enabled.

    The check happens on every call. When the feature is disabled the call
    goes to ``fallback`` with the same arguments, or returns None.

    Example:
        @with_feature("reviews", fallback=render_placeholder)
        def render_reviews(property_id: str) -> str: ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not use_feature(feature_id).enabled:
                return fallback(*args, **kwargs) if fallback is not None else None
            return func(*args, **kwargs)

        return wrapper

    return decorator


def feature_overlays() -> list[Any]:
    """Overlay components to mount, in order. Empty outside a context."""
    return [overlay.component for overlay in use_features().overlays()]
