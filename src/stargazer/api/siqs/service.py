"""
Real-time SIQS Service

Fetches live weather for a location, scores tonight's conditions and caches
the result. When weather cannot be fetched the service degrades to a
light-pollution-only estimate instead of failing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import UTC, datetime

from stargazer.api.astronomy.moon import get_moon_info
from stargazer.api.core.exceptions import InvalidCoordinateError, WeatherError, WeatherParseError
from stargazer.api.core.settings import SiqsSettings
from stargazer.api.location.light_pollution import validate_bortle
from stargazer.api.location.weather import WeatherData, WeatherForecast, fetch_forecast
from stargazer.api.siqs.anomalies import TemporalSmoother, assess_data_reliability, correct_physical_impossibilities
from stargazer.api.siqs.cache import SiqsCache
from stargazer.api.siqs.calculator import SiqsInputs, SiqsResult, calculate_fallback_siqs, calculate_siqs
from stargazer.api.siqs.nighttime import NightSummary, summarize_night, tonight_window


logger = logging.getLogger(__name__)


__all__ = [
    "calculate_realtime_siqs",
    "clear_siqs_caches",
    "get_default_cache",
    "validate_coordinates",
]


_default_cache: SiqsCache | None = None
_default_smoother = TemporalSmoother()


def get_default_cache(settings: SiqsSettings | None = None) -> SiqsCache:
    """Shared process-wide cache, created on first use."""
    global _default_cache
    if _default_cache is None:
        settings = settings or SiqsSettings()
        _default_cache = SiqsCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
            precision=settings.cache_precision,
        )
    return _default_cache


def clear_siqs_caches() -> None:
    """Drop cached results and remembered scores."""
    if _default_cache is not None:
        _default_cache.clear()
    _default_smoother.clear()
    logger.debug("SIQS caches cleared")


def validate_coordinates(latitude: float, longitude: float) -> None:
    """
    Raises:
        InvalidCoordinateError: If latitude or longitude is out of range or not finite
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError(f"Coordinates must be finite, got ({latitude}, {longitude})")
    if not -90 <= latitude <= 90:
        raise InvalidCoordinateError(f"Latitude must be -90 to +90 degrees, got {latitude}")
    if not -180 <= longitude <= 180:
        raise InvalidCoordinateError(f"Longitude must be -180 to +180 degrees, got {longitude}")


def _prefer(night_value: float | None, current_value: float | None) -> float | None:
    return night_value if night_value is not None else current_value


def _build_inputs(bortle: float, current: WeatherData | None, night: NightSummary | None) -> SiqsInputs:
    current = current or WeatherData()
    if night is None:
        return SiqsInputs(
            bortle_scale=bortle,
            cloud_cover=current.cloud_cover_percent,
            temperature=current.temperature_c,
            humidity=current.humidity_percent,
            wind_speed=current.wind_speed_kmh,
            precipitation=current.precipitation_mm,
        )
    return SiqsInputs(
        bortle_scale=bortle,
        cloud_cover=night.cloud_cover,
        temperature=_prefer(night.temperature, current.temperature_c),
        humidity=_prefer(night.humidity, current.humidity_percent),
        wind_speed=_prefer(night.wind_speed, current.wind_speed_kmh),
        precipitation=_prefer(night.precipitation, current.precipitation_mm),
    )


def _score_forecast(
    forecast: WeatherForecast,
    bortle: float,
    settings: SiqsSettings,
) -> tuple[SiqsResult, SiqsInputs, dict[str, object]]:
    now = forecast.local_now()
    start, end = tonight_window(now, settings.night_start_hour, settings.night_end_hour)
    this_hour = now.replace(minute=0, second=0, microsecond=0)
    tonight = [s for s in forecast.hourly if start <= s.timestamp < end and s.timestamp >= this_hour]

    summary = summarize_night(
        tonight,
        settings.night_start_hour,
        settings.night_end_hour,
        settings.prime_start_hour,
        settings.prime_end_hour,
        settings.prime_hour_weight,
    )
    night = summary if summary.sample_count and summary.cloud_cover is not None else None
    logger.debug(f"{summary.sample_count} nighttime samples between {start:%Y-%m-%d %H:%M} and {end:%H:%M}")
    if night is None and forecast.current is None:
        raise WeatherParseError("Forecast has no current conditions and no hours left tonight")

    inputs = _build_inputs(bortle, forecast.current, night)
    result = calculate_siqs(
        inputs,
        viable_threshold=settings.viable_threshold,
        calculation_type="nighttime" if night else "standard",
    )
    metadata: dict[str, object] = {
        "night_window": f"{settings.night_start_hour:02d}:00-{settings.night_end_hour:02d}:00",
        "night_start": start.isoformat(),
        "night_end": end.isoformat(),
        "nighttime_samples": summary.sample_count,
    }
    if night:
        metadata["evening_cloud_cover"] = night.evening_cloud_cover
        metadata["morning_cloud_cover"] = night.morning_cloud_cover
    reliability = assess_data_reliability(forecast.current, forecast.hourly, now)
    metadata["reliability"] = {
        "reliable": reliability.reliable,
        "confidence_score": reliability.confidence_score,
        "issues": reliability.issues,
    }
    return result, inputs, metadata


async def calculate_realtime_siqs(
    latitude: float,
    longitude: float,
    bortle: float,
    *,
    use_cache: bool = True,
    settings: SiqsSettings | None = None,
    cache: SiqsCache | None = None,
    smoother: TemporalSmoother | None = None,
) -> SiqsResult:
    """
    Calculate SIQS for a location from live weather.

    Tonight's forecast hours drive the score when available, otherwise
    current conditions are used. With neither, or when the forecast cannot be
    fetched, the light-pollution fallback is returned. Results are cached per
    rounded location.

    Args:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        bortle: Bortle scale (1-9)
        use_cache: Return a cached result when one is fresh
        settings: Engine settings (default: SiqsSettings())
        cache: Result cache (default: shared process cache)
        smoother: Temporal smoother (default: shared process smoother)

    Returns:
        SiqsResult with source "realtime", "cached" or "fallback"

    Raises:
        InvalidCoordinateError: If coordinates are out of range
        InvalidBortleScaleError: If the Bortle scale is outside 1-9
    """
    settings = settings or SiqsSettings()
    validate_coordinates(latitude, longitude)
    bortle = validate_bortle(bortle)
    cache = cache if cache is not None else get_default_cache(settings)
    smoother = smoother if smoother is not None else _default_smoother

    if use_cache:
        cached = cache.get(latitude, longitude, bortle)
        if cached is not None:
            return cached.with_source("cached")

    try:
        forecast = await fetch_forecast(latitude, longitude, settings=settings)
        result, inputs, metadata = _score_forecast(forecast, bortle, settings)
    except WeatherError as e:
        logger.warning(f"Weather unavailable for ({latitude:.4f}, {longitude:.4f}), using fallback: {e}")
        fallback = calculate_fallback_siqs(latitude, bortle, viable_threshold=settings.viable_threshold)
        return replace(fallback, metadata={**fallback.metadata, "error": str(e)})

    effective = WeatherData(cloud_cover_percent=inputs.cloud_cover, precipitation_mm=inputs.precipitation)
    result = correct_physical_impossibilities(result, effective, settings.viable_threshold)
    result = smoother.smooth(result, latitude, longitude, settings.viable_threshold)

    now = datetime.now(UTC)
    moon = get_moon_info(now)
    result = replace(
        result,
        source="realtime",
        metadata={
            **result.metadata,
            **metadata,
            "calculated_at": now.isoformat(),
            "moon_phase": round(moon.phase, 3),
            "moon_phase_name": str(moon.name),
            "moon_illumination": moon.illumination_percent,
        },
    )
    cache.set(latitude, longitude, bortle, result)
    return result
