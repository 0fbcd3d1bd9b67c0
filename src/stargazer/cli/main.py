"""
Stargazer CLI - Main Application

This is the main entry point for the Stargazer command-line interface.
"""

import logging

import typer
from click import Context
from dotenv import load_dotenv
from rich.console import Console
from typer.core import TyperGroup

from stargazer.cli.commands import bortle, siqs


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


# Create main app
app = typer.Typer(
    name="stargazer",
    help="Sky Imaging Quality Score (SIQS) for astrophotography",
    add_completion=True,
    rich_markup_mode="rich",
    cls=SortedCommandsGroup,
)

# Console for rich output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Stargazer - Sky Imaging Quality Score CLI

    Rate how good tonight is for astrophotography at any location.

    [bold green]Examples:[/bold green]

        stargazer score --lat 34.05 --lon -118.25 --bortle 8
        stargazer night --lat 44.5 --lon -110.5 --bortle 2
        stargazer bortle --sqm 21.3

    [bold blue]Environment Variables:[/bold blue]

        STARGAZER_CACHE_TTL_SECONDS  - Result cache lifetime
        STARGAZER_NIGHT_START_HOUR   - Hour the night window opens
        STARGAZER_VIABLE_THRESHOLD   - Minimum viable score
    """
    load_dotenv()

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")
    else:
        logging.basicConfig(level=logging.WARNING)


@app.command(rich_help_panel="Utilities")
def version() -> None:
    """Show the CLI version."""
    from stargazer.cli import __version__

    console.print(f"[bold]Stargazer CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command("config", rich_help_panel="Configuration")
def show_config(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show the resolved engine settings.

    Settings come from built-in defaults, then the settings file, then
    STARGAZER_* environment variables.

    Example:
        stargazer config
        stargazer config --json
    """
    from dataclasses import asdict

    from rich.table import Table

    from stargazer.api.core.exceptions import InvalidConfigurationError
    from stargazer.api.core.settings import ENV_PREFIX, get_settings_path, load_settings
    from stargazer.cli.utils.output import print_error, print_info, print_json

    settings_path = get_settings_path()
    try:
        settings = load_settings()
    except InvalidConfigurationError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        print_json(
            {
                "settings": asdict(settings),
                "config_file": {
                    "path": str(settings_path),
                    "exists": settings_path.exists(),
                },
            }
        )
        return

    table = Table(title="Stargazer Settings", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Environment Variable", style="dim")
    for name, value in asdict(settings).items():
        table.add_row(name, str(value), f"{ENV_PREFIX}{name.upper()}")
    console.print(table)

    if settings_path.exists():
        print_info(f"Settings file: {settings_path}")
    else:
        print_info(f"No settings file (create {settings_path} to override defaults)")


# Scoring
app.command("score", rich_help_panel="Scoring")(siqs.score)
app.command("night", rich_help_panel="Scoring")(siqs.night)
app.command("fallback", rich_help_panel="Scoring")(siqs.fallback)
app.command("batch", rich_help_panel="Scoring")(siqs.batch)

# Light Pollution
app.command("bortle", rich_help_panel="Light Pollution")(bortle.bortle)


if __name__ == "__main__":
    app()
