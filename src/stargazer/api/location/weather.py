"""
Weather API Integration

Provides current conditions and an hourly forecast for scoring a location.
Uses Open-Meteo API (free, no API key required).

All values are metric: temperature in °C, humidity and cloud cover in
percent, wind speed in km/h and precipitation in mm.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import aiohttp
import numpy as np
from returns.result import Failure, Result, Success

from stargazer.api.core.exceptions import WeatherFetchError, WeatherParseError
from stargazer.api.core.settings import SiqsSettings


logger = logging.getLogger(__name__)


__all__ = [
    "HourlyForecast",
    "WeatherData",
    "WeatherForecast",
    "fetch_forecast",
    "parse_forecast_payload",
]


_VARIABLES = [
    "temperature_2m",
    "relative_humidity_2m",
    "cloud_cover",
    "wind_speed_10m",
    "precipitation",
]


@dataclass
class WeatherData:
    """Current weather conditions at a location."""

    temperature_c: float | None = None
    humidity_percent: float | None = None
    cloud_cover_percent: float | None = None
    wind_speed_kmh: float | None = None
    precipitation_mm: float | None = None
    observed_at: datetime | None = None  # Local time at the location


@dataclass
class HourlyForecast:
    """One hour of forecast data."""

    timestamp: datetime  # Naive local time at the location
    temperature_c: float | None = None
    humidity_percent: float | None = None
    cloud_cover_percent: float | None = None
    wind_speed_kmh: float | None = None
    precipitation_mm: float | None = None


@dataclass
class WeatherForecast:
    """Current conditions together with the hourly forecast."""

    current: WeatherData | None  # None when the response had no current block
    hourly: list[HourlyForecast] = field(default_factory=list)
    timezone: str | None = None
    utc_offset_seconds: int = 0

    def local_now(self) -> datetime:
        """Current naive local time at the forecast location."""
        return (datetime.now(UTC) + timedelta(seconds=self.utc_offset_seconds)).replace(tzinfo=None)


def _safe_float(value: Any) -> float | None:
    """Convert value to float, returning None if NaN or None."""
    if value is None:
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if np.isnan(number):
        return None
    return number


def _parse_time(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _column(hourly: dict[str, Any], name: str, index: int) -> float | None:
    values = hourly.get(name) or []
    return _safe_float(values[index]) if index < len(values) else None


def parse_forecast_payload(data: Any) -> Result[WeatherForecast, str]:
    """
    Decode an Open-Meteo forecast response.

    Hours with an unparseable timestamp are skipped. NaN and missing values
    become None, as does the current block when the response has none.
    An hourly column that is not a list fails the whole payload.

    Args:
        data: Decoded JSON response body

    Returns:
        Success with WeatherForecast or Failure with error message
    """
    if not isinstance(data, dict):
        return Failure(f"Expected JSON object, got {type(data).__name__}")

    current = data.get("current")
    hourly = data.get("hourly")
    if not isinstance(current, dict) and not isinstance(hourly, dict):
        return Failure("Response has neither 'current' nor 'hourly' data")

    hourly_block = hourly if isinstance(hourly, dict) else {}
    for name in ("time", *_VARIABLES):
        column = hourly_block.get(name)
        if column is not None and not isinstance(column, list):
            return Failure(f"Hourly '{name}' must be a list, got {type(column).__name__}")

    weather: WeatherData | None = None
    if isinstance(current, dict):
        weather = WeatherData(
            temperature_c=_safe_float(current.get("temperature_2m")),
            humidity_percent=_safe_float(current.get("relative_humidity_2m")),
            cloud_cover_percent=_safe_float(current.get("cloud_cover")),
            wind_speed_kmh=_safe_float(current.get("wind_speed_10m")),
            precipitation_mm=_safe_float(current.get("precipitation")),
            observed_at=_parse_time(current.get("time")),
        )

    forecasts: list[HourlyForecast] = []
    for i, raw_time in enumerate(hourly_block.get("time") or []):
        timestamp = _parse_time(raw_time)
        if timestamp is None:
            continue
        forecasts.append(
            HourlyForecast(
                timestamp=timestamp,
                temperature_c=_column(hourly_block, "temperature_2m", i),
                humidity_percent=_column(hourly_block, "relative_humidity_2m", i),
                cloud_cover_percent=_column(hourly_block, "cloud_cover", i),
                wind_speed_kmh=_column(hourly_block, "wind_speed_10m", i),
                precipitation_mm=_column(hourly_block, "precipitation", i),
            )
        )

    offset = _safe_float(data.get("utc_offset_seconds"))
    return Success(
        WeatherForecast(
            current=weather,
            hourly=forecasts,
            timezone=data.get("timezone"),
            utc_offset_seconds=int(offset) if offset is not None else 0,
        )
    )


async def fetch_forecast(
    latitude: float,
    longitude: float,
    days: int | None = None,
    settings: SiqsSettings | None = None,
) -> WeatherForecast:
    """
    Fetch current conditions and hourly forecast from Open-Meteo.

    Timestamps are returned in the location's local time (timezone=auto).

    Args:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        days: Forecast days (default from settings)
        settings: Engine settings (default: SiqsSettings())

    Returns:
        WeatherForecast for the location

    Raises:
        WeatherFetchError: If the request fails or returns a non-200 status
        WeatherParseError: If the response cannot be decoded
    """
    settings = settings or SiqsSettings()
    params: dict[str, str | int | float] = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(_VARIABLES),
        "hourly": ",".join(_VARIABLES),
        "timezone": "auto",
        "forecast_days": days if days is not None else settings.forecast_days,
        "wind_speed_unit": "kmh",
        "temperature_unit": "celsius",
    }

    try:
        async with (
            aiohttp.ClientSession() as session,
            session.get(
                settings.api_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=settings.request_timeout_seconds),
            ) as response,
        ):
            if response.status != 200:
                logger.warning(f"Open-Meteo API returned status {response.status}")
                raise WeatherFetchError(f"HTTP {response.status}")

            data = await response.json()
    except (aiohttp.ClientError, TimeoutError, ValueError) as e:
        # ValueError: body is not valid JSON
        logger.warning(f"Error fetching forecast from Open-Meteo: {e}")
        raise WeatherFetchError(f"Could not fetch forecast: {e}") from e

    result = parse_forecast_payload(data)
    if isinstance(result, Failure):
        raise WeatherParseError(result.failure())

    forecast = result.unwrap()
    logger.debug(f"Fetched {len(forecast.hourly)} forecast hours for ({latitude:.4f}, {longitude:.4f})")
    return forecast
