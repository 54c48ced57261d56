"""
Failure taxonomy for registry operations.

These exceptions classify what went wrong for logging and for
``FeatureRegistry.last_error``. The registry never raises them to its
callers; every operation degrades to "disabled" instead.
"""


class FeatureError(Exception):
    """Base class for feature registry failures."""

    def __init__(self, feature_id: str, message: str) -> None:
        super().__init__(message)
        self.feature_id = feature_id

    @property
    def error_type(self) -> str:
        """Name used as the ``error_type`` log field."""
        return type(self).__name__


class DuplicateRegistrationError(FeatureError):
    """A feature id was registered twice. The first registration is kept."""

    def __init__(self, feature_id: str) -> None:
        super().__init__(
            feature_id, f"Feature '{feature_id}' is already registered, skipping"
        )


class UnknownFeatureError(FeatureError):
    """An operation referenced a feature id that was never registered."""

    def __init__(self, feature_id: str) -> None:
        super().__init__(feature_id, f"Unknown feature '{feature_id}'")


class MissingDependencyError(FeatureError):
    """Enabling was blocked because a dependency is not enabled."""

    def __init__(self, feature_id: str, dependency: str) -> None:
        super().__init__(
            feature_id,
            f"Cannot enable '{feature_id}': missing dependency '{dependency}'",
        )
        self.dependency = dependency


class InitializationError(FeatureError):
    """The feature's ``initialize`` hook failed, synchronously or not."""

    def __init__(self, feature_id: str, cause: BaseException) -> None:
        super().__init__(
            feature_id, f"Failed to initialize feature '{feature_id}': {cause}"
        )
        self.__cause__ = cause


class CleanupError(FeatureError):
    """The feature's ``cleanup`` hook failed. The disable still happened."""

    def __init__(self, feature_id: str, cause: BaseException) -> None:
        super().__init__(
            feature_id, f"Failed to clean up feature '{feature_id}': {cause}"
        )
        self.__cause__ = cause
