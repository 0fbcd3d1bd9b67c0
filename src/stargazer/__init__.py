"""
Stargazer SIQS Library

Sky Imaging Quality Score (SIQS) engine for astrophotography planning.
Combines weather forecasts and light pollution (Bortle scale) into a 0-10
score describing how good a location is for imaging tonight.

Example:
    >>> import asyncio
    >>> from stargazer import calculate_realtime_siqs
    >>> result = asyncio.run(calculate_realtime_siqs(31.96, -111.6, bortle=2))
    >>> print(result.score, result.is_viable)
    >>> from stargazer import SiqsInputs, calculate_siqs
    >>> calculate_siqs(SiqsInputs(bortle_scale=3, cloud_cover=5, humidity=35)).score
"""

# Exceptions
from stargazer.api.core.exceptions import (
    ConfigurationError,
    InvalidBortleScaleError,
    InvalidConfigurationError,
    InvalidCoordinateError,
    InvalidSpotError,
    LightPollutionError,
    LocationError,
    StargazerError,
    WeatherError,
    WeatherFetchError,
    WeatherParseError,
)

# Configuration
from stargazer.api.core.settings import SiqsSettings, load_settings

# Scoring
from stargazer.api.siqs.batch import AstroSpot, ScoredSpot, score_prioritized, score_spots
from stargazer.api.siqs.cache import SiqsCache
from stargazer.api.siqs.calculator import (
    SiqsFactor,
    SiqsInputs,
    SiqsResult,
    calculate_fallback_siqs,
    calculate_siqs,
    weighted_score,
)
from stargazer.api.siqs.nighttime import calculate_nighttime_siqs
from stargazer.api.siqs.service import calculate_realtime_siqs, clear_siqs_caches


__version__ = "0.1.0"

__all__ = [
    "AstroSpot",
    "ConfigurationError",
    "InvalidBortleScaleError",
    "InvalidConfigurationError",
    "InvalidCoordinateError",
    "InvalidSpotError",
    "LightPollutionError",
    "LocationError",
    "ScoredSpot",
    "SiqsCache",
    "SiqsFactor",
    "SiqsInputs",
    "SiqsResult",
    "SiqsSettings",
    "StargazerError",
    "WeatherError",
    "WeatherFetchError",
    "WeatherParseError",
    "calculate_fallback_siqs",
    "calculate_nighttime_siqs",
    "calculate_realtime_siqs",
    "calculate_siqs",
    "clear_siqs_caches",
    "load_settings",
    "score_prioritized",
    "score_spots",
    "weighted_score",
]
