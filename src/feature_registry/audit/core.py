"""
Consistency audit between a config table and a bootstrapped registry.

The registry degrades silently by design: a misconfigured feature just ends
up disabled. The audit makes those cases visible after bootstrap.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from feature_registry.config.settings import ConfigTable
from feature_registry.registry.store import FeatureRegistry
from feature_registry.schemas.feature import FeatureStatus
from feature_registry.utils.logging import get_logger

log = get_logger(__name__)


class CheckStatus(Enum):
    """Status of an individual check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class CheckResult:
    """
    Result of a single audit check.

    Attributes:
        name: Check name.
        status: Pass/warn/fail/skip.
        message: Human-readable description.
        details: Optional additional details.
        n_checked: Number of items checked.
        n_failed: Number of items failing.
        offenders: Feature ids (or id pairs) that failed, for display.
    """

    name: str
    status: CheckStatus
    message: str
    details: str | None = None
    n_checked: int = 0
    n_failed: int = 0
    offenders: list[str] = field(default_factory=list)

    @property
    def n_passed(self) -> int:
        """Items that passed."""
        return self.n_checked - self.n_failed


@dataclass
class AuditResult:
    """
    Result of a full audit.

    Attributes:
        checks: List of individual check results.
    """

    checks: list[CheckResult] = field(default_factory=list)

    @property
    def overall_status(self) -> CheckStatus:
        """Determine overall status from individual checks."""
        if any(c.status == CheckStatus.FAIL for c in self.checks):
            return CheckStatus.FAIL
        if any(c.status == CheckStatus.WARN for c in self.checks):
            return CheckStatus.WARN
        if all(c.status == CheckStatus.SKIP for c in self.checks):
            return CheckStatus.SKIP
        return CheckStatus.PASS

    @property
    def n_passed(self) -> int:
        """Count checks that passed."""
        return sum(1 for c in self.checks if c.status == CheckStatus.PASS)

    @property
    def n_failed(self) -> int:
        """Count checks that failed."""
        return sum(1 for c in self.checks if c.status == CheckStatus.FAIL)

    @property
    def n_warned(self) -> int:
        """Count checks with warnings."""
        return sum(1 for c in self.checks if c.status == CheckStatus.WARN)

    def get(self, name: str) -> CheckResult:
        """Look up a check by name."""
        for check in self.checks:
            if check.name == name:
                return check
        msg = f"Unknown check '{name}'"
        raise KeyError(msg)


class AuditRunner:
    """
    Runs all audit checks against one registry.

    Environment variables declared by features are informational; missing
    ones are reported as warnings, never failures.
    """

    def __init__(
        self,
        registry: FeatureRegistry,
        table: ConfigTable | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize audit runner.

        Args:
            registry: Bootstrapped registry to audit.
            table: Config table. Defaults to the registry's own table.
            environ: Environment to check declared variables against.
                Defaults to ``os.environ``.
        """
        self.registry = registry
        self.table = table if table is not None else registry.config
        self.environ = environ if environ is not None else os.environ

    def run(self) -> AuditResult:
        """
        Run full audit suite.

        Returns:
            AuditResult with all check results.
        """
        log.info(
            "Starting feature audit",
            registered=len(self.registry.get_all_features()),
            configured=len(self.table),
        )

        result = AuditResult()
        result.checks.append(self._check_config_registered())
        result.checks.append(self._check_registrations_configured())
        result.checks.append(self._check_dependencies_registered())
        result.checks.append(self._check_registration_order())
        result.checks.append(self._check_requested_enabled())
        result.checks.append(self._check_env_vars())
        result.checks.append(self._check_deprecated())

        log.info(
            "Audit complete",
            overall=result.overall_status.value,
            passed=result.n_passed,
            failed=result.n_failed,
            warned=result.n_warned,
        )
        return result

    def _check_config_registered(self) -> CheckResult:
        """Config entries whose feature was never registered."""
        name = "config_entries_registered"
        if len(self.table) == 0:
            return CheckResult(name, CheckStatus.SKIP, "Config table is empty")

        orphans = [fid for fid in self.table if self.registry.get_feature(fid) is None]
        if orphans:
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(orphans)} config entries have no registered feature",
                details="Enable/disable calls for these ids are no-ops",
                n_checked=len(self.table),
                n_failed=len(orphans),
                offenders=orphans,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "Every config entry has a registered feature",
            n_checked=len(self.table),
        )

    def _check_registrations_configured(self) -> CheckResult:
        """Registered features without a config entry."""
        name = "registrations_configured"
        features = self.registry.get_all_features()
        if not features:
            return CheckResult(name, CheckStatus.SKIP, "No features registered")

        missing = [f.id for f in features if f.id not in self.table]
        if missing:
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(missing)} registered features have no config entry",
                details="These follow default_enabled and read as disabled to consumers",
                n_checked=len(features),
                n_failed=len(missing),
                offenders=missing,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "Every registered feature has a config entry",
            n_checked=len(features),
        )

    def _check_dependencies_registered(self) -> CheckResult:
        """Dependencies that point at ids nobody registered."""
        name = "dependencies_registered"
        features = self.registry.get_all_features()
        edges = [(f.id, dep) for f in features for dep in f.dependencies.features]
        if not edges:
            return CheckResult(name, CheckStatus.SKIP, "No feature dependencies declared")

        dangling = [
            f"{fid} -> {dep}" for fid, dep in edges if self.registry.get_feature(dep) is None
        ]
        if dangling:
            return CheckResult(
                name,
                CheckStatus.FAIL,
                f"{len(dangling)} dependencies reference unregistered features",
                details="Dependent features can never be enabled",
                n_checked=len(edges),
                n_failed=len(dangling),
                offenders=dangling,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "All dependencies are registered",
            n_checked=len(edges),
        )

    def _check_registration_order(self) -> CheckResult:
        """Dependencies registered after the feature that needs them."""
        name = "registration_order"
        features = self.registry.get_all_features()
        position = {f.id: i for i, f in enumerate(features)}
        edges = [
            (f.id, dep)
            for f in features
            for dep in f.dependencies.features
            if dep in position
        ]
        if not edges:
            return CheckResult(name, CheckStatus.SKIP, "No registered dependencies")

        late = [f"{fid} -> {dep}" for fid, dep in edges if position[dep] > position[fid]]
        if late:
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(late)} dependencies were registered after their dependents",
                details="Dependents are not re-enabled once their dependency registers",
                n_checked=len(edges),
                n_failed=len(late),
                offenders=late,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "Dependencies are registered before their dependents",
            n_checked=len(edges),
        )

    def _check_requested_enabled(self) -> CheckResult:
        """Features that config or default asked for but that ended up disabled."""
        name = "requested_features_enabled"
        features = self.registry.get_all_features()
        if not features:
            return CheckResult(name, CheckStatus.SKIP, "No features registered")

        requested = []
        for feature in features:
            entry = self.table.get_entry(feature.id)
            wanted = entry.enabled if entry is not None else feature.default_enabled
            if wanted:
                requested.append(feature.id)

        failed = [fid for fid in requested if not self.registry.is_enabled(fid)]
        if failed:
            reasons = []
            for fid in failed:
                error = self.registry.last_error(fid)
                reasons.append(f"{fid}: {error}" if error else fid)
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(failed)} requested features are disabled",
                details="; ".join(reasons),
                n_checked=len(requested),
                n_failed=len(failed),
                offenders=failed,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "All requested features are enabled",
            n_checked=len(requested),
        )

    def _check_env_vars(self) -> CheckResult:
        """Declared environment variables of enabled features."""
        name = "env_vars_present"
        pairs = [
            (f.id, var)
            for f in self.registry.get_enabled_features()
            for var in f.dependencies.env_vars
        ]
        if not pairs:
            return CheckResult(name, CheckStatus.SKIP, "No environment variables declared")

        missing = [f"{fid}: {var}" for fid, var in pairs if not self.environ.get(var)]
        if missing:
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(missing)} declared environment variables are unset",
                n_checked=len(pairs),
                n_failed=len(missing),
                offenders=missing,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "All declared environment variables are set",
            n_checked=len(pairs),
        )

    def _check_deprecated(self) -> CheckResult:
        """Enabled features marked deprecated."""
        name = "deprecated_features"
        enabled = self.registry.get_enabled_features()
        if not enabled:
            return CheckResult(name, CheckStatus.SKIP, "No features enabled")

        deprecated = [f.id for f in enabled if f.status == FeatureStatus.DEPRECATED]
        if deprecated:
            return CheckResult(
                name,
                CheckStatus.WARN,
                f"{len(deprecated)} deprecated features are enabled",
                n_checked=len(enabled),
                n_failed=len(deprecated),
                offenders=deprecated,
            )
        return CheckResult(
            name,
            CheckStatus.PASS,
            "No deprecated features are enabled",
            n_checked=len(enabled),
        )
