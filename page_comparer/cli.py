"""CLI entry point for the page comparer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from page_comparer.errors import ComparerError
from page_comparer.models.config import ComparerConfig, RouteConfig
from page_comparer.models.run_result import RouteState, RunResult
from page_comparer.orchestrator import Orchestrator

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str) -> ComparerConfig:
    try:
        return ComparerConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'page-comparer init' to create a default config.")
        sys.exit(1)


def _results_table(result: RunResult) -> Table:
    table = Table(title=f"Run {result.run_id} ({result.status})")
    table.add_column("Route", style="bold")
    table.add_column("State")
    table.add_column("Attempts", justify="right")
    table.add_column("Difference")
    for route in result.route_results:
        state = "[green]done[/green]" if route.state == RouteState.DONE else f"[red]{route.state.value}[/red]"
        diffs = ", ".join(
            f"{d.device} {d.difference_percentage:.2f}%" for d in route.devices
        ) or (route.error or "")
        table.add_row(route.name, state, str(route.attempts), diffs)
    return table


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression comparison of two versions of a site."""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default="compare-config.json", help="Config file path")
def run(config: str) -> None:
    """Capture, diff and archive every configured route."""
    cfg = _load_config(config)
    if not cfg.routes:
        console.print("[yellow]No routes configured. Add one with 'page-comparer route add'.[/yellow]")
        sys.exit(1)

    orchestrator = Orchestrator(cfg)
    try:
        result = orchestrator.run_full_pipeline()
    except ComparerError as e:
        console.print(f"[red]Run aborted:[/red] {e}")
        console.print(f"Partial archive: [blue]{cfg.archive_path}[/blue]")
        sys.exit(1)

    console.print("\n[bold green]Comparison Complete[/bold green]")
    console.print(_results_table(result))
    console.print(f"  Archive: [blue]{result.archive_path}[/blue]")
    console.print(f"  Report: [blue]{cfg.report_path}[/blue]")


@cli.command()
@click.option("--before", "-b", prompt="Before URL", help="Origin of the current version")
@click.option("--after", "-a", prompt="After URL", help="Origin of the new version")
@click.option("--config", "-c", default="compare-config.json", help="Config file path")
def init(before: str, after: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = ComparerConfig(
        before_url=before,
        after_url=after,
        routes=[RouteConfig(name="Home", path="/")],
    )
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nAdd the pages to compare and run:")
    console.print('  [blue]page-comparer route add "About" /about[/blue]')
    console.print("  [blue]page-comparer run[/blue]")


@cli.group()
def route() -> None:
    """Manage the routes to compare."""
    pass


@route.command("add")
@click.argument("name")
@click.argument("path")
@click.option("--config", "-c", default="compare-config.json", help="Config file path")
def route_add(name: str, path: str, config: str) -> None:
    """Add a route to the configuration."""
    cfg = _load_config(config)
    if any(r.name == name for r in cfg.routes):
        console.print(f"[red]A route named '{name}' already exists[/red]")
        sys.exit(1)
    cfg.routes.append(RouteConfig(name=name, path=path))
    cfg.save(config)
    console.print(f"[green]Added route:[/green] {name} ({path})")


@route.command("list")
@click.option("--config", "-c", default="compare-config.json", help="Config file path")
def route_list(config: str) -> None:
    """List all configured routes."""
    cfg = _load_config(config)
    if not cfg.routes:
        console.print("[yellow]No routes configured[/yellow]")
        return
    for i, r in enumerate(cfg.routes, 1):
        console.print(f"  {i}. {r.name} [dim]{r.path}[/dim]")


@route.command("clear")
@click.option("--config", "-c", default="compare-config.json", help="Config file path")
def route_clear(config: str) -> None:
    """Remove all routes."""
    cfg = _load_config(config)
    cfg.routes = []
    cfg.save(config)
    console.print("[green]All routes cleared[/green]")


if __name__ == "__main__":
    cli()
