"""
Reporter for audit results.

Formats audit results for console output using Rich.
"""

from typing import ClassVar

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from feature_registry.audit.core import AuditResult, CheckResult, CheckStatus


class AuditReporter:
    """
    Formats and displays audit results.

    Uses Rich for formatted console output.
    """

    STATUS_STYLES: ClassVar[dict[CheckStatus, tuple[str, str]]] = {
        CheckStatus.PASS: ("PASS", "green"),
        CheckStatus.WARN: ("WARN", "yellow"),
        CheckStatus.FAIL: ("FAIL", "red"),
        CheckStatus.SKIP: ("SKIP", "dim"),
    }

    def __init__(self, console: Console | None = None) -> None:
        """
        Initialize reporter.

        Args:
            console: Rich console for output. Creates new if not provided.
        """
        self.console = console or Console()

    def print_results(self, result: AuditResult) -> None:
        """
        Print full audit results.

        Args:
            result: AuditResult to display.
        """
        self.console.print()
        self._print_checks_table(result)

        self.console.print()
        self._print_summary(result)

        flagged = [
            c for c in result.checks if c.status in (CheckStatus.FAIL, CheckStatus.WARN)
        ]
        if flagged:
            self.console.print()
            self._print_offenders(flagged)

    def _print_checks_table(self, result: AuditResult) -> None:
        table = Table(title="Feature Audit", show_header=True, header_style="bold")
        table.add_column("Check", style="cyan", min_width=25)
        table.add_column("Status", justify="center", min_width=8)
        table.add_column("Result", min_width=40)
        table.add_column("Checked", justify="right")
        table.add_column("Failed", justify="right")

        for check in result.checks:
            status_text, status_style = self.STATUS_STYLES[check.status]
            table.add_row(
                check.name,
                Text(status_text, style=status_style),
                check.message,
                str(check.n_checked) if check.n_checked > 0 else "-",
                str(check.n_failed) if check.n_failed > 0 else "-",
            )

        self.console.print(table)

    def _print_summary(self, result: AuditResult) -> None:
        status_text, status_style = self.STATUS_STYLES[result.overall_status]

        summary = Table(show_header=False, box=None)
        summary.add_column("Label", style="bold")
        summary.add_column("Value")

        summary.add_row("Overall Status:", Text(status_text, style=status_style))
        summary.add_row("Checks Passed:", Text(str(result.n_passed), style="green"))
        summary.add_row(
            "Checks Failed:",
            Text(str(result.n_failed), style="red" if result.n_failed > 0 else "dim"),
        )
        summary.add_row(
            "Checks Warned:",
            Text(
                str(result.n_warned), style="yellow" if result.n_warned > 0 else "dim"
            ),
        )

        self.console.print(Panel(summary, title="Summary", border_style=status_style))

    def _print_offenders(self, checks: list[CheckResult]) -> None:
        for check in checks:
            _, style = self.STATUS_STYLES[check.status]
            self.console.print(f"[{style}]{check.name}[/{style}]: {check.message}")
            if check.details:
                self.console.print(f"  [dim]{check.details}[/dim]")
            for offender in check.offenders[:10]:
                self.console.print(f"  - {offender}")
            if len(check.offenders) > 10:
                self.console.print(f"  [dim]... and {len(check.offenders) - 10} more[/dim]")
