"""
Custom exception classes for the Stargazer SIQS engine.

This module defines specific exceptions for the different kinds of errors
that can occur while scoring a location's sky quality.
"""

from __future__ import annotations


__all__ = [
    # Configuration exceptions
    "ConfigurationError",
    "InvalidBortleScaleError",
    "InvalidConfigurationError",
    "InvalidCoordinateError",
    "InvalidSpotError",
    # Light pollution exceptions
    "LightPollutionError",
    # Location exceptions
    "LocationError",
    # Base exception
    "StargazerError",
    # Weather exceptions
    "WeatherError",
    "WeatherFetchError",
    "WeatherParseError",
]


class StargazerError(Exception):
    """
    Base exception for all Stargazer errors.

    All custom exceptions in this library inherit from this base class,
    making it easy to catch every scoring-related error at once.
    """

    pass


# ============================================================================
# Location Exceptions
# ============================================================================


class LocationError(StargazerError):
    """Base exception for location-related errors."""

    pass


class InvalidCoordinateError(LocationError):
    """
    Raised when coordinates are out of valid range.

    This occurs when attempting to use coordinates that are:
    - Latitude outside -90 to +90 degrees
    - Longitude outside -180 to +180 degrees
    - Not finite numbers (NaN or infinity)
    """

    pass


class InvalidSpotError(LocationError):
    """Raised when an AstroSpot definition is malformed or cannot be loaded."""

    pass


# ============================================================================
# Light Pollution Exceptions
# ============================================================================


class LightPollutionError(StargazerError):
    """Base exception for light pollution errors."""

    pass


class InvalidBortleScaleError(LightPollutionError):
    """Raised when a Bortle scale value is outside 1-9."""

    pass


# ============================================================================
# Weather Exceptions
# ============================================================================


class WeatherError(StargazerError):
    """Base exception for weather data errors."""

    pass


class WeatherFetchError(WeatherError):
    """
    Raised when the weather forecast cannot be fetched.

    This can occur when:
    - The forecast API returns a non-200 status
    - The network is unreachable
    - The request times out
    """

    pass


class WeatherParseError(WeatherError):
    """Raised when the forecast payload is missing required blocks."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(StargazerError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid."""

    pass
