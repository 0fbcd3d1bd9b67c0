"""
CLI Output Utilities

Rich console formatting utilities for CLI output.
"""

from typing import Any

from rich.console import Console
from rich.table import Table

from stargazer.api.siqs.calculator import SiqsResult
from stargazer.api.siqs.display import format_siqs, recommendation, siqs_color, siqs_label


console = Console()

_use_unicode = console.is_terminal and not console.legacy_windows


def print_success(message: str) -> None:
    """Print success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message in blue."""
    info_icon = "ℹ" if _use_unicode else "i"
    console.print(f"[blue]{info_icon}[/blue] {message}")


def print_json(data: dict[str, Any] | list[Any]) -> None:
    """Print data as JSON."""
    import json

    console.print_json(json.dumps(data, default=str))


def print_siqs_result(result: SiqsResult, title: str) -> None:
    """
    Print a SIQS score with its factor breakdown.

    Args:
        result: Score to display
        title: Heading, usually the location
    """
    color = siqs_color(result.score)
    console.print(f"\n[bold cyan]{title}[/bold cyan]\n")
    console.print(
        f"SIQS: [bold {color}]{format_siqs(result.score)}[/bold {color}] "
        f"([{color}]{siqs_label(result.score)}[/{color}])  "
        f"[dim]source: {result.source}, {result.calculation_type}[/dim]"
    )

    if result.factors:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Factor", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Details", style="dim")
        for factor in result.factors:
            factor_color = siqs_color(factor.score)
            table.add_row(factor.name, f"[{factor_color}]{factor.score:.1f}[/{factor_color}]", factor.description)
        console.print(table)

    console.print(f"\n{recommendation(result.score)}")
    if not result.is_viable:
        print_warning("Conditions are below the viable imaging threshold")
