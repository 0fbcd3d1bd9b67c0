"""
SIQS Anomaly Correction

Catches scores that contradict the weather they were computed from, damps
implausible jumps between consecutive calculations for one location and
rates how much the underlying data can be trusted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from cachetools import TTLCache

from stargazer.api.core.constants import (
    CRITICAL_CLOUD_COVER,
    MAX_SCORE_DELTA,
    MAX_SIQS,
    MIN_SIQS,
    PRECIPITATION_SCORE_CAP,
    VIABLE_THRESHOLD,
)
from stargazer.api.location.weather import HourlyForecast, WeatherData
from stargazer.api.siqs.calculator import SiqsResult


logger = logging.getLogger(__name__)


__all__ = [
    "DataReliability",
    "TemporalSmoother",
    "assess_data_reliability",
    "correct_physical_impossibilities",
]


def _with_score(result: SiqsResult, score: float, viable_threshold: float, correction: str) -> SiqsResult:
    score = round(max(MIN_SIQS, min(MAX_SIQS, score)), 1)
    corrections = [*result.metadata.get("corrections", []), correction]
    return replace(
        result,
        score=score,
        is_viable=score >= viable_threshold,
        metadata={**result.metadata, "corrections": corrections},
    )


def correct_physical_impossibilities(
    result: SiqsResult,
    weather: WeatherData,
    viable_threshold: float = VIABLE_THRESHOLD,
) -> SiqsResult:
    """
    Cap scores that the observed weather makes impossible.

    Heavy cloud (80% or more) limits the score to ``10 - cloud / 20`` and any
    active precipitation caps it at 6.0.

    Args:
        result: Calculated SIQS
        weather: Conditions the score was computed from
        viable_threshold: Minimum score considered viable

    Returns:
        The corrected result (unchanged when nothing contradicts it)
    """
    if result.score <= 0:
        return result

    cloud = weather.cloud_cover_percent
    if cloud is not None and cloud >= CRITICAL_CLOUD_COVER and result.score > 5:
        corrected = min(result.score, MAX_SIQS - cloud / 20)
        logger.warning(f"{cloud:.0f}% cloud cover but SIQS {result.score:.1f}, corrected to {corrected:.1f}")
        result = _with_score(result, corrected, viable_threshold, "cloud_cover")

    precipitation = weather.precipitation_mm
    if precipitation is not None and precipitation > 0 and result.score > PRECIPITATION_SCORE_CAP:
        logger.warning(f"Active precipitation, capping SIQS {result.score:.1f} at {PRECIPITATION_SCORE_CAP}")
        result = _with_score(result, PRECIPITATION_SCORE_CAP, viable_threshold, "precipitation")

    return result


class TemporalSmoother:
    """
    Limits how far a location's score can move between calculations.

    The previous score for each location is remembered for two hours. A new
    score more than ``max_delta`` away is pulled back to exactly
    ``max_delta`` from the previous one.
    """

    def __init__(
        self,
        max_delta: float = MAX_SCORE_DELTA,
        memory_seconds: float = 7200.0,
        max_locations: int = 1000,
        precision: int = 4,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_delta = max_delta
        self.precision = precision
        self._previous: TTLCache[tuple[float, float], float] = TTLCache(
            maxsize=max_locations, ttl=memory_seconds, timer=timer
        )

    def _key(self, latitude: float, longitude: float) -> tuple[float, float]:
        return (round(latitude, self.precision), round(longitude, self.precision))

    def smooth(
        self,
        result: SiqsResult,
        latitude: float,
        longitude: float,
        viable_threshold: float = VIABLE_THRESHOLD,
    ) -> SiqsResult:
        """Smooth result against the last score and remember the outcome."""
        key = self._key(latitude, longitude)
        previous = self._previous.get(key)
        if previous is not None and abs(result.score - previous) > self.max_delta:
            direction = 1 if result.score > previous else -1
            smoothed = previous + self.max_delta * direction
            logger.warning(f"SIQS jumped from {previous:.1f} to {result.score:.1f}, smoothed to {smoothed:.1f}")
            result = _with_score(result, smoothed, viable_threshold, "temporal")
        self._previous[key] = result.score
        return result

    def clear(self) -> None:
        self._previous.clear()


@dataclass(frozen=True)
class DataReliability:
    """Confidence in the data behind a score."""

    reliable: bool
    confidence_score: float  # 0-10
    issues: list[str] = field(default_factory=list)


def assess_data_reliability(
    current: WeatherData | None,
    hourly: Sequence[HourlyForecast] | None,
    now: datetime | None = None,
) -> DataReliability:
    """
    Rate how trustworthy the weather data is.

    Starts at 10 and loses 5 for missing current conditions, 3 for a
    missing forecast and up to 3 for observations more than two hours old.

    Args:
        current: Current conditions
        hourly: Hourly forecast
        now: Current time in the same timezone as ``current.observed_at``
            (age is not checked when omitted)

    Returns:
        DataReliability; reliable when confidence is at least 6
    """
    issues: list[str] = []
    confidence = 10.0

    if current is None:
        issues.append("Missing weather data")
        confidence -= 5
    if not hourly:
        issues.append("Missing forecast data")
        confidence -= 3

    if current is not None and current.observed_at is not None and now is not None:
        age_minutes = (now - current.observed_at).total_seconds() / 60
        if age_minutes > 120:
            issues.append(f"Weather data is {round(age_minutes)} minutes old")
            confidence -= min(3.0, age_minutes / 60)

    confidence = max(0.0, min(10.0, confidence))
    return DataReliability(reliable=confidence >= 6, confidence_score=round(confidence, 1), issues=issues)
