"""
SIQS Calculator

Combines factor sub-scores into the Sky Imaging Quality Score (SIQS), a
0-10 rating of how suitable a location is for astrophotography.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field, replace
from typing import Any

import deal
import numpy as np

from stargazer.api.core.constants import (
    HIGH_LATITUDE_BONUS,
    HIGH_LATITUDE_THRESHOLD,
    MAX_SIQS,
    MIN_SIQS,
    SIQS_WEIGHTS,
    VIABLE_THRESHOLD,
)
from stargazer.api.location.light_pollution import validate_bortle
from stargazer.api.siqs import factors


logger = logging.getLogger(__name__)


__all__ = [
    "FACTOR_NAMES",
    "SiqsFactor",
    "SiqsInputs",
    "SiqsResult",
    "calculate_fallback_siqs",
    "calculate_siqs",
    "is_missing",
    "weighted_score",
]


FACTOR_NAMES: dict[str, str] = {
    "cloud": "Cloud Cover",
    "light_pollution": "Light Pollution",
    "temperature": "Temperature",
    "humidity": "Humidity",
    "wind": "Wind",
    "precipitation": "Precipitation",
}


@dataclass(frozen=True)
class SiqsInputs:
    """Conditions to score. Only the Bortle scale is required."""

    bortle_scale: float
    cloud_cover: float | None = None  # %
    temperature: float | None = None  # °C
    humidity: float | None = None  # %
    wind_speed: float | None = None  # km/h
    precipitation: float | None = None  # mm


@dataclass(frozen=True)
class SiqsFactor:
    """One scored factor of a SIQS result."""

    name: str
    score: float
    description: str


@dataclass(frozen=True)
class SiqsResult:
    """A SIQS score with its contributing factors."""

    score: float
    is_viable: bool
    factors: tuple[SiqsFactor, ...] = ()
    source: str = "calculated"  # calculated, realtime, cached, fallback
    calculation_type: str = "standard"  # standard, nighttime, fallback
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_source(self, source: str) -> SiqsResult:
        return replace(self, source=source)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_missing(value: float | None) -> bool:
    """True for None or NaN."""
    return value is None or math.isnan(value)


@deal.post(lambda result: 0.0 <= result <= 10.0, message="Score must be 0-10")
def weighted_score(scores: Mapping[str, float | None], weights: Mapping[str, float] = SIQS_WEIGHTS) -> float:
    """
    Weighted average of factor scores.

    Factors that are missing (None/NaN) or carry no weight are dropped and
    the remaining weights re-normalised, so partial data still produces a
    score on the full 0-10 scale.

    Args:
        scores: Sub-scores keyed by factor name
        weights: Weights keyed by factor name

    Returns:
        Weighted score in [0, 10], or 0 when no factor is present
    """
    present = [
        (score, weights[name])
        for name, score in scores.items()
        if name in weights and weights[name] > 0 and not is_missing(score)
    ]
    if not present:
        return MIN_SIQS
    values, factor_weights = zip(*present, strict=True)
    average = float(np.average(np.array(values, dtype=float), weights=np.array(factor_weights, dtype=float)))
    return max(MIN_SIQS, min(MAX_SIQS, average))


_SCORERS: dict[str, tuple[str, Callable[[float], float], Callable[[float], str]]] = {
    "cloud": ("cloud_cover", factors.cloud_cover_score, factors.describe_cloud_cover),
    "temperature": ("temperature", factors.temperature_score, factors.describe_temperature),
    "humidity": ("humidity", factors.humidity_score, factors.describe_humidity),
    "wind": ("wind_speed", factors.wind_score, factors.describe_wind),
    "precipitation": ("precipitation", factors.precipitation_score, factors.describe_precipitation),
}


def calculate_siqs(
    inputs: SiqsInputs,
    weights: Mapping[str, float] = SIQS_WEIGHTS,
    *,
    viable_threshold: float = VIABLE_THRESHOLD,
    calculation_type: str = "standard",
) -> SiqsResult:
    """
    Calculate SIQS from a set of conditions.

    Args:
        inputs: Conditions to score
        weights: Factor weights (default: six-factor weights)
        viable_threshold: Minimum score considered viable
        calculation_type: Label stored on the result

    Returns:
        SiqsResult rounded to one decimal

    Raises:
        InvalidBortleScaleError: If the Bortle scale is outside 1-9
    """
    bortle = validate_bortle(inputs.bortle_scale)

    scores: dict[str, float | None] = {"light_pollution": factors.light_pollution_score(bortle)}
    scored: list[SiqsFactor] = []
    for key, (attribute, scorer, describe) in _SCORERS.items():
        value = getattr(inputs, attribute)
        if is_missing(value) or weights.get(key, 0) <= 0:
            continue
        scores[key] = scorer(value)
        scored.append(SiqsFactor(FACTOR_NAMES[key], round(scores[key], 1), describe(value)))

    lp_factor = SiqsFactor(
        FACTOR_NAMES["light_pollution"],
        round(scores["light_pollution"], 1),
        factors.describe_light_pollution(bortle),
    )
    # Light pollution is listed after cloud cover
    position = 1 if scored and scored[0].name == FACTOR_NAMES["cloud"] else 0
    scored.insert(position, lp_factor)

    score = round(weighted_score(scores, weights), 1)
    logger.debug(f"SIQS {score} from factors {sorted(k for k, v in scores.items() if v is not None)}")
    return SiqsResult(
        score=score,
        is_viable=score >= viable_threshold,
        factors=tuple(scored),
        calculation_type=calculation_type,
    )


def calculate_fallback_siqs(
    latitude: float,
    bortle: float,
    *,
    viable_threshold: float = VIABLE_THRESHOLD,
) -> SiqsResult:
    """
    Estimate SIQS from light pollution alone.

    Used when weather data is unavailable. High-latitude sites get a small
    bonus for their longer, darker nights.

    Args:
        latitude: Latitude in degrees
        bortle: Bortle scale (1-9)
        viable_threshold: Minimum score considered viable

    Returns:
        SiqsResult with source "fallback"

    Raises:
        InvalidBortleScaleError: If the Bortle scale is outside 1-9
    """
    bortle = validate_bortle(bortle)
    base = factors.light_pollution_score(bortle)
    bonus = HIGH_LATITUDE_BONUS if abs(latitude) > HIGH_LATITUDE_THRESHOLD else 0.0
    score = round(min(MAX_SIQS, base + bonus), 1)
    return SiqsResult(
        score=score,
        is_viable=score >= viable_threshold,
        factors=(
            SiqsFactor(
                FACTOR_NAMES["light_pollution"],
                round(base, 1),
                f"{factors.describe_light_pollution(bortle)} (weather data unavailable)",
            ),
        ),
        source="fallback",
        calculation_type="fallback",
        metadata={"high_latitude_bonus": bonus},
    )
