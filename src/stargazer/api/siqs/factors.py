"""
SIQS Factor Scores

Each weather or light-pollution input is mapped to a sub-score on the 0-10
scale, where 10 is ideal for imaging. Forecast values outside their
physical range are clamped (with a warning) before scoring.
"""

from __future__ import annotations

import logging
import math

import deal

from stargazer.api.core.constants import MAX_SIQS, MIN_SIQS


logger = logging.getLogger(__name__)


__all__ = [
    "clamp_score",
    "cloud_cover_score",
    "describe_cloud_cover",
    "describe_humidity",
    "describe_light_pollution",
    "describe_precipitation",
    "describe_temperature",
    "describe_wind",
    "humidity_score",
    "light_pollution_score",
    "precipitation_score",
    "temperature_score",
    "wind_score",
]


def clamp_score(score: float) -> float:
    """Clamp a score to the 0-10 range."""
    return max(MIN_SIQS, min(MAX_SIQS, score))


def _clamp_input(name: str, value: float, low: float, high: float | None = None) -> float:
    if math.isnan(value):
        raise ValueError(f"{name} must be a number, got NaN")
    if value < low:
        logger.warning(f"{name} {value} below {low}, clamping")
        return low
    if high is not None and value > high:
        logger.warning(f"{name} {value} above {high}, clamping")
        return high
    return value


def _linear(value: float, best: float, worst: float) -> float:
    """10 at or below best, 0 at or above worst, linear between."""
    if value <= best:
        return MAX_SIQS
    if value >= worst:
        return MIN_SIQS
    return MAX_SIQS * (worst - value) / (worst - best)


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def cloud_cover_score(cloud_cover_percent: float) -> float:
    """
    Score cloud cover.

    Args:
        cloud_cover_percent: Cloud cover (0-100%)

    Returns:
        10 at 10% or less, 0 at 90% or more, linear between
    """
    cloud = _clamp_input("Cloud cover", cloud_cover_percent, 0.0, 100.0)
    return _linear(cloud, 10.0, 90.0)


@deal.pre(lambda bortle: 1 <= bortle <= 9, message="Bortle scale must be 1-9")
@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def light_pollution_score(bortle: float) -> float:
    """
    Score light pollution from the Bortle scale.

    Bortle 1 scores 9.1 and Bortle 9 scores 1.9.
    """
    return clamp_score(MAX_SIQS - bortle * 0.9)


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def temperature_score(temperature_c: float) -> float:
    """
    Score air temperature.

    5-20°C is ideal. Colder loses 0.4 per degree (dew, battery drain),
    warmer loses 0.5 per degree (sensor noise).
    """
    temperature_c = _clamp_input("Temperature", temperature_c, -273.15)
    if temperature_c < 5.0:
        return clamp_score(MAX_SIQS - (5.0 - temperature_c) * 0.4)
    if temperature_c > 20.0:
        return clamp_score(MAX_SIQS - (temperature_c - 20.0) * 0.5)
    return MAX_SIQS


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def humidity_score(humidity_percent: float) -> float:
    """Score relative humidity: 10 at 40% or less, 0 at 95% or more."""
    humidity = _clamp_input("Humidity", humidity_percent, 0.0, 100.0)
    return _linear(humidity, 40.0, 95.0)


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def wind_score(wind_speed_kmh: float) -> float:
    """Score wind speed: 10 at 10 km/h or less, 0 at 40 km/h or more."""
    wind = _clamp_input("Wind speed", wind_speed_kmh, 0.0)
    return _linear(wind, 10.0, 40.0)


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def precipitation_score(precipitation_mm: float) -> float:
    """Score precipitation: 10 when dry, otherwise 5 minus the amount in mm."""
    precipitation = _clamp_input("Precipitation", precipitation_mm, 0.0)
    if precipitation == 0:
        return MAX_SIQS
    return clamp_score(5.0 - precipitation)


# ============================================================================
# Descriptions
# ============================================================================


def describe_cloud_cover(cloud_cover_percent: float) -> str:
    if cloud_cover_percent <= 10:
        return "Clear skies (0-10%), excellent for imaging"
    elif cloud_cover_percent <= 20:
        return "Mostly clear (10-20%), very good for imaging"
    elif cloud_cover_percent <= 40:
        return "Partly cloudy (20-40%), good for imaging"
    elif cloud_cover_percent <= 60:
        return "Considerable clouds (40-60%), fair for imaging"
    elif cloud_cover_percent <= 80:
        return "Mostly cloudy (60-80%), poor for imaging"
    return "Heavy cloud cover (80-100%), not recommended for imaging"


def describe_light_pollution(bortle: float) -> str:
    if bortle <= 2:
        return f"Bortle {bortle:g}: excellent dark sky"
    elif bortle <= 4:
        return f"Bortle {bortle:g}: rural sky, good for deep-sky imaging"
    elif bortle <= 6:
        return f"Bortle {bortle:g}: suburban sky, faint objects washed out"
    return f"Bortle {bortle:g}: urban sky, bright targets only"


def describe_temperature(temperature_c: float) -> str:
    if temperature_c < 5:
        return f"Cold ({temperature_c:.0f}°C), watch for dew and battery drain"
    elif temperature_c > 20:
        return f"Warm ({temperature_c:.0f}°C), expect higher sensor noise"
    return f"Comfortable ({temperature_c:.0f}°C)"


def describe_humidity(humidity_percent: float) -> str:
    if humidity_percent <= 40:
        return f"Dry air ({humidity_percent:.0f}%), good transparency"
    elif humidity_percent <= 70:
        return f"Moderate humidity ({humidity_percent:.0f}%)"
    elif humidity_percent < 95:
        return f"High humidity ({humidity_percent:.0f}%), dew likely"
    return f"Saturated air ({humidity_percent:.0f}%), fog or dew certain"


def describe_wind(wind_speed_kmh: float) -> str:
    if wind_speed_kmh <= 10:
        return f"Calm ({wind_speed_kmh:.0f} km/h)"
    elif wind_speed_kmh <= 25:
        return f"Breezy ({wind_speed_kmh:.0f} km/h), may affect long exposures"
    elif wind_speed_kmh < 40:
        return f"Windy ({wind_speed_kmh:.0f} km/h), tracking will suffer"
    return f"Strong wind ({wind_speed_kmh:.0f} km/h), not suitable for imaging"


def describe_precipitation(precipitation_mm: float) -> str:
    if precipitation_mm <= 0:
        return "No precipitation"
    elif precipitation_mm < 1:
        return f"Light precipitation ({precipitation_mm:.1f} mm)"
    return f"Precipitation ({precipitation_mm:.1f} mm), keep equipment covered"
