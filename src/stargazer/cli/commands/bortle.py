"""
Bortle Commands

Estimate light pollution for a site without a measured value.
"""

import typer

from stargazer.api.core.exceptions import InvalidBortleScaleError
from stargazer.api.location.light_pollution import (
    bortle_from_star_count,
    describe_bortle,
    estimate_bortle_from_name,
    limiting_magnitude,
    sqm_to_bortle,
    validate_bortle,
)
from stargazer.api.siqs.factors import light_pollution_score
from stargazer.cli.utils.output import console, print_error, print_json


def bortle(
    value: float | None = typer.Option(None, "--value", help="Known Bortle scale (1-9)"),
    sqm: float | None = typer.Option(None, "--sqm", help="Sky Quality Meter reading (mag/arcsec²)"),
    stars: int | None = typer.Option(None, "--stars", min=0, help="Naked-eye star count"),
    name: str | None = typer.Option(None, "--name", help="Place name to estimate from"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Determine the Bortle scale and what it means for imaging.

    Exactly one source is used, in order: --value, --sqm, --stars, --name.

    Examples:
        stargazer bortle --sqm 21.5
        stargazer bortle --stars 450
        stargazer bortle --name "Cherry Springs State Park"
    """
    if value is not None:
        source = "value"
        try:
            result = validate_bortle(value)
        except InvalidBortleScaleError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
    elif sqm is not None:
        source = "sqm"
        result = sqm_to_bortle(sqm)
    elif stars is not None:
        source = "star_count"
        result = float(bortle_from_star_count(stars))
    elif name is not None:
        source = "name"
        result = float(estimate_bortle_from_name(name))
    else:
        print_error("Provide one of --value, --sqm, --stars or --name")
        raise typer.Exit(code=1)

    data = {
        "bortle": result,
        "source": source,
        "description": describe_bortle(result),
        "limiting_magnitude": round(limiting_magnitude(result), 2),
        "light_pollution_score": round(light_pollution_score(result), 1),
    }
    if json_output:
        print_json(data)
        return

    console.print(f"\n[bold cyan]{data['description']}[/bold cyan]")
    console.print(f"Naked-eye limiting magnitude: [green]{data['limiting_magnitude']:.1f}[/green]")
    console.print(f"Light pollution score: [green]{data['light_pollution_score']:.1f}[/green] / 10")
    if source == "name":
        console.print("[dim]Estimated from the place name; measure with an SQM for accuracy[/dim]")
