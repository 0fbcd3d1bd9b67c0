"""
Nighttime SIQS

Extracts the nighttime hours from an hourly forecast and scores them.
Imaging happens at night, so daytime clouds or wind should not drag a
location's score down.

Hours are local to the location (forecast timestamps are naive local time).
By default night runs from 18:00 to 07:00, with 22:00-04:00 counted as
prime imaging hours.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta

import numpy as np

from stargazer.api.core.constants import (
    EVENING_WEIGHT,
    IMAGING_IMPOSSIBLE_CLOUD_COVER,
    NIGHTTIME_WEIGHTS,
    VIABLE_THRESHOLD,
)
from stargazer.api.location.light_pollution import validate_bortle
from stargazer.api.location.weather import HourlyForecast
from stargazer.api.siqs import factors
from stargazer.api.siqs.calculator import FACTOR_NAMES, SiqsFactor, SiqsResult, is_missing, weighted_score


logger = logging.getLogger(__name__)


__all__ = [
    "NightSummary",
    "average_cloud_cover",
    "calculate_nighttime_siqs",
    "filter_nighttime",
    "is_nighttime",
    "is_prime_hour",
    "summarize_night",
    "tonight_window",
]


def _in_window(hour: int, start: int, end: int) -> bool:
    if start <= end:
        return start <= hour < end
    # Window wraps past midnight
    return hour >= start or hour < end


def is_nighttime(timestamp: datetime, start_hour: int = 18, end_hour: int = 7) -> bool:
    """True if the local hour of timestamp falls in the night window."""
    return _in_window(timestamp.hour, start_hour, end_hour)


def is_prime_hour(timestamp: datetime, start_hour: int = 22, end_hour: int = 4) -> bool:
    """True during the darkest hours of the night."""
    return _in_window(timestamp.hour, start_hour, end_hour)


def filter_nighttime(
    samples: Iterable[HourlyForecast],
    start_hour: int = 18,
    end_hour: int = 7,
) -> list[HourlyForecast]:
    """Keep only nighttime samples, in their original order."""
    return [s for s in samples if is_nighttime(s.timestamp, start_hour, end_hour)]


def tonight_window(now: datetime, start_hour: int = 18, end_hour: int = 7) -> tuple[datetime, datetime]:
    """
    Start and end of the night that is in progress or comes next.

    Args:
        now: Current local time
        start_hour: Hour night begins
        end_hour: Hour night ends

    Returns:
        (start, end) datetimes in the same timezone as now
    """
    today = now.date()
    if start_hour > end_hour and now.hour < end_hour:
        # Early morning: still inside last evening's night
        start_day = today - timedelta(days=1)
    elif start_hour <= end_hour and now.hour >= end_hour:
        start_day = today + timedelta(days=1)
    else:
        start_day = today
    start = datetime.combine(start_day, time(hour=start_hour), tzinfo=now.tzinfo)
    end_day = start_day + timedelta(days=1) if start_hour > end_hour else start_day
    end = datetime.combine(end_day, time(hour=end_hour), tzinfo=now.tzinfo)
    return start, end


def _weighted_mean(values: Sequence[float | None], weights: Sequence[float]) -> float | None:
    pairs = [(v, w) for v, w in zip(values, weights, strict=True) if not is_missing(v)]
    if not pairs:
        return None
    vals, ws = zip(*pairs, strict=True)
    return float(np.average(np.array(vals, dtype=float), weights=np.array(ws, dtype=float)))


def average_cloud_cover(
    samples: Sequence[HourlyForecast],
    prime_weighting: bool = True,
    prime_start_hour: int = 22,
    prime_end_hour: int = 4,
    prime_weight: float = 2.0,
) -> float | None:
    """
    Average cloud cover across samples.

    Prime hours count double by default since that is when most imaging
    happens.

    Returns:
        Weighted mean cloud cover, or None if no sample has a cloud value
    """
    weights = [
        prime_weight if prime_weighting and is_prime_hour(s.timestamp, prime_start_hour, prime_end_hour) else 1.0
        for s in samples
    ]
    return _weighted_mean([s.cloud_cover_percent for s in samples], weights)


@dataclass(frozen=True)
class NightSummary:
    """Aggregated conditions for one night."""

    sample_count: int
    cloud_cover: float | None
    evening_cloud_cover: float | None
    morning_cloud_cover: float | None
    temperature: float | None
    humidity: float | None
    wind_speed: float | None
    precipitation: float | None


def _mean(values: Iterable[float | None]) -> float | None:
    present = [v for v in values if not is_missing(v)]
    return float(np.mean(present)) if present else None


def summarize_night(
    samples: Sequence[HourlyForecast],
    start_hour: int = 18,
    end_hour: int = 7,
    prime_start_hour: int = 22,
    prime_end_hour: int = 4,
    prime_weight: float = 2.0,
) -> NightSummary:
    """
    Aggregate nighttime samples.

    Evening hours (start to midnight) and morning hours (midnight to end)
    are averaged separately for cloud cover. Wind and humidity weight the
    evening 1.5x.

    Args:
        samples: Hourly forecast, already limited to the night of interest
        start_hour: Hour night begins
        end_hour: Hour night ends
        prime_start_hour: Hour prime imaging begins
        prime_end_hour: Hour prime imaging ends
        prime_weight: Weight of prime hours in the cloud average

    Returns:
        NightSummary over the nighttime samples
    """
    night = filter_nighttime(samples, start_hour, end_hour)
    evening = [s for s in night if s.timestamp.hour >= start_hour]
    morning = [s for s in night if s.timestamp.hour < end_hour]
    evening_weights = [EVENING_WEIGHT if s.timestamp.hour >= start_hour else 1.0 for s in night]

    return NightSummary(
        sample_count=len(night),
        cloud_cover=average_cloud_cover(night, True, prime_start_hour, prime_end_hour, prime_weight),
        evening_cloud_cover=average_cloud_cover(evening, prime_weighting=False),
        morning_cloud_cover=average_cloud_cover(morning, prime_weighting=False),
        temperature=_mean(s.temperature_c for s in night),
        humidity=_weighted_mean([s.humidity_percent for s in night], evening_weights),
        wind_speed=_weighted_mean([s.wind_speed_kmh for s in night], evening_weights),
        precipitation=_mean(s.precipitation_mm for s in night),
    )


def calculate_nighttime_siqs(
    samples: Sequence[HourlyForecast],
    bortle: float,
    *,
    start_hour: int = 18,
    end_hour: int = 7,
    prime_start_hour: int = 22,
    prime_end_hour: int = 4,
    prime_weight: float = 2.0,
    viable_threshold: float = VIABLE_THRESHOLD,
    summarize: Callable[[Sequence[HourlyForecast]], NightSummary] | None = None,
) -> SiqsResult | None:
    """
    Score tonight from cloud cover and light pollution only.

    An average night cloud cover above 40% rules imaging out entirely and
    scores 0.

    Args:
        samples: Hourly forecast samples
        bortle: Bortle scale (1-9)
        start_hour: Hour night begins
        end_hour: Hour night ends
        prime_start_hour: Hour prime imaging begins
        prime_end_hour: Hour prime imaging ends
        prime_weight: Weight of prime hours in the cloud average
        viable_threshold: Minimum score considered viable
        summarize: Aggregation to use (default: summarize_night with the given window)

    Returns:
        SiqsResult with calculation_type "nighttime", or None without
        nighttime cloud data

    Raises:
        InvalidBortleScaleError: If the Bortle scale is outside 1-9
    """
    bortle = validate_bortle(bortle)
    if summarize is None:
        summary = summarize_night(samples, start_hour, end_hour, prime_start_hour, prime_end_hour, prime_weight)
    else:
        summary = summarize(samples)
    if summary.sample_count == 0 or summary.cloud_cover is None:
        logger.debug("No nighttime cloud data, cannot score night")
        return None

    cloud = summary.cloud_cover
    logger.debug(f"Night cloud cover {cloud:.1f}% over {summary.sample_count} hours")
    metadata = {
        "night_cloud_cover": round(cloud, 1),
        "evening_cloud_cover": summary.evening_cloud_cover,
        "morning_cloud_cover": summary.morning_cloud_cover,
        "sample_count": summary.sample_count,
    }

    if cloud > IMAGING_IMPOSSIBLE_CLOUD_COVER:
        return SiqsResult(
            score=0.0,
            is_viable=False,
            factors=(
                SiqsFactor(FACTOR_NAMES["cloud"], 0.0, f"Cloud cover of {round(cloud)}% makes imaging impossible"),
            ),
            calculation_type="nighttime",
            metadata=metadata,
        )

    cloud_score = factors.cloud_cover_score(cloud)
    lp_score = factors.light_pollution_score(bortle)
    score = round(weighted_score({"cloud": cloud_score, "light_pollution": lp_score}, NIGHTTIME_WEIGHTS), 1)
    return SiqsResult(
        score=score,
        is_viable=score >= viable_threshold,
        factors=(
            SiqsFactor(FACTOR_NAMES["cloud"], round(cloud_score, 1), factors.describe_cloud_cover(cloud)),
            SiqsFactor(FACTOR_NAMES["light_pollution"], round(lp_score, 1), factors.describe_light_pollution(bortle)),
        ),
        calculation_type="nighttime",
        metadata=metadata,
    )
