"""
Registration of feature modules at application start.

A feature module declares its definition as a module attribute, either
``FEATURE`` (one definition) or ``FEATURES`` (a sequence). Modules are
imported and registered in the order given, which is the dependency order.
"""

import importlib
from collections.abc import Iterable
from types import ModuleType

from feature_registry.registry.store import FeatureRegistry
from feature_registry.schemas.feature import FeatureDefinition
from feature_registry.utils.logging import get_logger, log_context

log = get_logger(__name__)


def definitions_from_module(module: ModuleType) -> list[FeatureDefinition]:
    """
    Extract feature definitions from a module.

    Returns:
        Definitions in declaration order; empty if the module has none.

    Raises:
        TypeError: If ``FEATURE``/``FEATURES`` holds something other than
            FeatureDefinition instances.
    """
    if hasattr(module, "FEATURE"):
        candidates = [module.FEATURE]
    elif hasattr(module, "FEATURES"):
        candidates = list(module.FEATURES)
    else:
        return []

    for candidate in candidates:
        if not isinstance(candidate, FeatureDefinition):
            msg = (
                f"{module.__name__} exports {type(candidate).__name__}, "
                "expected FeatureDefinition"
            )
            raise TypeError(msg)
    return candidates


def bootstrap(registry: FeatureRegistry, modules: Iterable[str]) -> FeatureRegistry:
    """
    Import feature modules and register their definitions in order.

    Import errors propagate: a module that cannot be imported is a
    deployment error, not a feature failure.

    Args:
        registry: Registry to register into.
        modules: Dotted module paths, in registration order.

    Returns:
        The same registry, marked initialized.
    """
    for module_name in modules:
        with log_context(module=module_name):
            module = importlib.import_module(module_name)
            definitions = definitions_from_module(module)
            if not definitions:
                log.warning("Module declares no features, skipping")
                continue
            for definition in definitions:
                registry.register_feature(definition)

    registry.mark_initialized()
    log.info(
        "Feature bootstrap complete",
        registered=len(registry.get_all_features()),
        enabled=len(registry.get_enabled_feature_ids()),
    )
    return registry
