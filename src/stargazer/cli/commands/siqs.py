"""
SIQS Commands

Score observing locations for astrophotography.
"""

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path

import typer

from stargazer.api.core.exceptions import InvalidConfigurationError, StargazerError, WeatherError
from stargazer.api.core.settings import SiqsSettings, load_settings
from stargazer.api.location.weather import fetch_forecast
from stargazer.api.siqs.batch import load_spots, score_prioritized, score_spots
from stargazer.api.siqs.calculator import calculate_fallback_siqs
from stargazer.api.siqs.display import format_siqs, siqs_color, siqs_label
from stargazer.api.siqs.nighttime import calculate_nighttime_siqs, tonight_window
from stargazer.api.siqs.service import calculate_realtime_siqs, validate_coordinates
from stargazer.cli.utils.output import console, print_error, print_info, print_json, print_siqs_result


logger = logging.getLogger(__name__)


def _settings() -> SiqsSettings:
    try:
        return load_settings()
    except InvalidConfigurationError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1) from e


def _location_title(latitude: float, longitude: float) -> str:
    lat_dir = "N" if latitude >= 0 else "S"
    lon_dir = "E" if longitude >= 0 else "W"
    return f"Sky Quality: {abs(latitude):.4f}°{lat_dir}, {abs(longitude):.4f}°{lon_dir}"


def score(
    latitude: float = typer.Option(..., "--lat", help="Latitude in degrees (-90 to 90)"),
    longitude: float = typer.Option(..., "--lon", help="Longitude in degrees (-180 to 180)"),
    bortle: float = typer.Option(5.0, "--bortle", "-b", help="Bortle scale (1-9)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore cached results"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Calculate real-time SIQS for a location.

    Uses tonight's forecast when available. Falls back to a light-pollution
    estimate when weather cannot be fetched.

    Examples:
        stargazer score --lat 34.05 --lon -118.25 --bortle 8
        stargazer score --lat 31.96 --lon -111.6 -b 2 --json
    """
    settings = _settings()
    try:
        result = asyncio.run(
            calculate_realtime_siqs(latitude, longitude, bortle, use_cache=not no_cache, settings=settings)
        )
    except StargazerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print_json({"latitude": latitude, "longitude": longitude, "bortle": bortle, **result.to_dict()})
        return

    print_siqs_result(result, _location_title(latitude, longitude))
    if result.source == "fallback":
        print_info("Weather data unavailable, score is based on light pollution only")


def night(
    latitude: float = typer.Option(..., "--lat", help="Latitude in degrees (-90 to 90)"),
    longitude: float = typer.Option(..., "--lon", help="Longitude in degrees (-180 to 180)"),
    bortle: float = typer.Option(5.0, "--bortle", "-b", help="Bortle scale (1-9)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Score tonight from cloud cover and light pollution only.

    Any night with more than 40% average cloud cover scores 0.

    Example:
        stargazer night --lat 44.5 --lon -110.5 --bortle 2
    """
    settings = _settings()
    try:
        validate_coordinates(latitude, longitude)
        forecast = asyncio.run(fetch_forecast(latitude, longitude, settings=settings))
        start, end = tonight_window(forecast.local_now(), settings.night_start_hour, settings.night_end_hour)
        tonight = [s for s in forecast.hourly if start <= s.timestamp < end]
        result = calculate_nighttime_siqs(
            tonight,
            bortle,
            start_hour=settings.night_start_hour,
            end_hour=settings.night_end_hour,
            prime_start_hour=settings.prime_start_hour,
            prime_end_hour=settings.prime_end_hour,
            prime_weight=settings.prime_hour_weight,
            viable_threshold=settings.viable_threshold,
        )
    except WeatherError as e:
        print_error(f"Weather data unavailable: {e}")
        raise typer.Exit(code=1) from e
    except StargazerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if result is None:
        print_error("No nighttime forecast hours available")
        raise typer.Exit(code=1)

    if json_output:
        print_json(
            {
                "latitude": latitude,
                "longitude": longitude,
                "night_start": start.isoformat(),
                "night_end": end.isoformat(),
                **result.to_dict(),
            }
        )
        return

    print_siqs_result(result, f"Tonight ({start:%a %H:%M} - {end:%a %H:%M})")
    evening = result.metadata.get("evening_cloud_cover")
    morning = result.metadata.get("morning_cloud_cover")
    if evening is not None:
        console.print(f"[dim]Evening cloud cover: {evening:.0f}%[/dim]")
    if morning is not None:
        console.print(f"[dim]Morning cloud cover: {morning:.0f}%[/dim]")


def fallback(
    latitude: float = typer.Option(..., "--lat", help="Latitude in degrees (-90 to 90)"),
    bortle: float = typer.Option(5.0, "--bortle", "-b", help="Bortle scale (1-9)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Estimate SIQS from light pollution alone, without fetching weather.

    Example:
        stargazer fallback --lat 60.1 --bortle 3
    """
    settings = _settings()
    try:
        validate_coordinates(latitude, 0.0)
        result = calculate_fallback_siqs(latitude, bortle, viable_threshold=settings.viable_threshold)
    except StargazerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print_json(result.to_dict())
        return
    print_siqs_result(result, f"Light-pollution estimate (Bortle {bortle:g})")


def batch(
    spots_file: Path = typer.Argument(..., help="JSON file with a list of spots", exists=True, dir_okay=False),
    prioritized: bool = typer.Option(
        False, "--prioritized", help="Score dark-sky reserves and certified sites first"
    ),
    batch_size: int = typer.Option(3, "--batch-size", min=1, help="Spots scored concurrently"),
    delay: float = typer.Option(0.2, "--delay", min=0.0, help="Seconds to wait between batches"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Score a list of spots and rank them.

    The spots file holds objects with name, latitude, longitude and
    optionally bortle_scale, certification, is_dark_sky_reserve and spot_id.

    Example:
        stargazer batch spots.json --prioritized
    """
    from rich.table import Table

    try:
        spots = load_spots(spots_file)
    except StargazerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if prioritized:
        scored = asyncio.run(score_prioritized(spots))
    else:
        scored = asyncio.run(score_spots(spots, batch_size=batch_size, delay_seconds=delay))

    if json_output:
        print_json(
            [
                {
                    "spot": asdict(s.spot),
                    "result": s.result.to_dict() if s.result else None,
                    "error": s.error,
                }
                for s in scored
            ]
        )
        return

    table = Table(title=f"SIQS for {len(scored)} spots", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Spot", style="cyan")
    table.add_column("Bortle", justify="right")
    table.add_column("SIQS", justify="right")
    table.add_column("Rating")
    table.add_column("Source", style="dim")

    for rank, item in enumerate(scored, start=1):
        if item.result is None:
            table.add_row(str(rank), item.spot.name, f"{item.spot.bortle_scale:g}", "-", "[red]Error[/red]", item.error)
            continue
        color = siqs_color(item.result.score)
        table.add_row(
            str(rank),
            item.spot.name,
            f"{item.spot.bortle_scale:g}",
            f"[{color}]{format_siqs(item.result.score)}[/{color}]",
            siqs_label(item.result.score),
            item.result.source,
        )
    console.print(table)
