"""Command-line interface for inspecting feature configuration and state."""

import sys
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

from feature_registry.utils.logging import configure_logging

if TYPE_CHECKING:
    from feature_registry.config.settings import RegistryConfig
    from feature_registry.registry.store import FeatureRegistry

app = typer.Typer(
    name="feature-registry",
    help="Inspect feature configuration, runtime state and extension points.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to feature configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
ModuleOption = Annotated[
    list[str] | None,
    typer.Option(
        "--module",
        "-m",
        help="Feature module to register after those listed in the config. Repeatable.",
    ),
]
PathOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--path",
        "-p",
        help="Directory to make importable before loading feature modules. Repeatable.",
        exists=True,
        file_okay=False,
    ),
]


class ExtensionPoint(str, Enum):
    """Extension points that can be listed."""

    NAV = "nav"
    OVERLAYS = "overlays"
    SECTIONS = "sections"
    BOOKING = "booking"
    FILTERS = "filters"


def _bootstrap(
    config: Path,
    modules: list[str] | None,
    paths: list[Path] | None,
) -> tuple["RegistryConfig", "FeatureRegistry"]:
    """Load config, configure logging and register all feature modules."""
    from feature_registry.bootstrap import bootstrap
    from feature_registry.config.loader import load_config
    from feature_registry.registry.store import create_registry

    registry_config = load_config(config)
    configure_logging(
        level=registry_config.logging.level,
        json_output=registry_config.logging.json_output,
    )

    for path in paths or []:
        if str(path) not in sys.path:
            sys.path.insert(0, str(path))

    registry = create_registry(registry_config.features)
    bootstrap(registry, [*registry_config.modules, *(modules or [])])
    return registry_config, registry


@app.command()
def status(
    config: ConfigOption,
    module: ModuleOption = None,
    path: PathOption = None,
) -> None:
    """Register all feature modules and show each feature's state."""
    try:
        registry_config, registry = _bootstrap(config, module, path)
    except (ImportError, TypeError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Features")
    table.add_column("Feature", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Config", justify="center")
    table.add_column("Runtime", justify="center")
    table.add_column("Reason", style="dim")

    for feature in registry.get_all_features():
        entry = registry_config.features.get_entry(feature.id)
        if entry is None:
            config_flag = "[dim]default[/dim]"
        else:
            config_flag = "[green]on[/green]" if entry.enabled else "[red]off[/red]"
        runtime = (
            "[green]enabled[/green]"
            if registry.is_enabled(feature.id)
            else "[yellow]disabled[/yellow]"
        )
        error = registry.last_error(feature.id)
        table.add_row(
            feature.id,
            feature.category.value,
            feature.status.value,
            config_flag,
            runtime,
            str(error) if error else "",
        )

    console.print(table)
    console.print(
        f"[blue]{len(registry.get_enabled_feature_ids())} of "
        f"{len(registry.get_all_features())} features enabled[/blue]"
    )


@app.command(name="config")
def show_config(config: ConfigOption) -> None:
    """Show the config table without registering any features."""
    from feature_registry.config.loader import load_config

    try:
        registry_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    feature_table = registry_config.features
    table = Table(title=f"Config table ({config})")
    table.add_column("Feature", style="cyan", no_wrap=True)
    table.add_column("Enabled", justify="center")
    table.add_column("Settings", style="dim")

    for feature_id in feature_table:
        entry = feature_table.get_entry(feature_id)
        if entry is None:
            continue
        table.add_row(
            feature_id,
            "[green]yes[/green]" if entry.enabled else "[red]no[/red]",
            ", ".join(f"{k}={v}" for k, v in (entry.config or {}).items()),
        )

    console.print(table)
    console.print(
        f"[blue]Enabled: {len(feature_table.get_enabled_features())}, "
        f"disabled: {len(feature_table.get_disabled_features())}[/blue]"
    )


@app.command()
def extensions(
    config: ConfigOption,
    point: Annotated[
        ExtensionPoint,
        typer.Option("--point", "-e", help="Extension point to list."),
    ] = ExtensionPoint.NAV,
    position: Annotated[
        str | None,
        typer.Option(
            "--position",
            help="Filter nav items or page sections by position.",
        ),
    ] = None,
    module: ModuleOption = None,
    path: PathOption = None,
) -> None:
    """List the aggregated contributions of enabled features to an extension point."""
    from feature_registry.registry import extensions as points

    try:
        _, registry = _bootstrap(config, module, path)
        if point is ExtensionPoint.NAV:
            items = points.get_nav_items(registry, position)
        elif point is ExtensionPoint.SECTIONS:
            items = points.get_property_page_sections(registry, position)
        elif point is ExtensionPoint.BOOKING:
            items = points.get_booking_steps(registry)
        elif point is ExtensionPoint.FILTERS:
            items = points.get_search_filters(registry)
        else:
            items = points.get_overlays(registry)
    except (ImportError, TypeError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Extension point: {point.value}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Item", style="cyan")
    table.add_column("Order", justify="right")
    table.add_column("Position")

    for i, item in enumerate(items, start=1):
        order = getattr(item, "order", None)
        item_position = getattr(item, "position", None)
        table.add_row(
            str(i),
            item.id,
            str(order) if order is not None else "-",
            item_position.value if item_position is not None else "-",
        )

    console.print(table)


@app.command()
def audit(
    config: ConfigOption,
    module: ModuleOption = None,
    path: PathOption = None,
) -> None:
    """Check the registry against the config table after bootstrap."""
    from feature_registry.audit import AuditReporter, AuditRunner, CheckStatus

    console.print("[blue]Running feature audit...[/blue]")

    try:
        registry_config, registry = _bootstrap(config, module, path)
    except (ImportError, TypeError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    result = AuditRunner(registry, registry_config.features).run()
    AuditReporter(console).print_results(result)

    if result.overall_status == CheckStatus.FAIL:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    from feature_registry import __version__

    console.print(f"feature-registry version {__version__}")


if __name__ == "__main__":
    app()
