"""
SIQS Scoring Constants

Weights and thresholds used throughout the Stargazer API for calculations.
"""

from types import MappingProxyType
from typing import Final


__all__ = [
    "CRITICAL_CLOUD_COVER",
    "EVENING_WEIGHT",
    "HIGH_LATITUDE_BONUS",
    "HIGH_LATITUDE_THRESHOLD",
    "IMAGING_IMPOSSIBLE_CLOUD_COVER",
    "MAX_SCORE_DELTA",
    "MAX_SIQS",
    "MIN_SIQS",
    "NIGHTTIME_WEIGHTS",
    "PRECIPITATION_SCORE_CAP",
    "SIQS_WEIGHTS",
    "VIABLE_THRESHOLD",
]


# Score bounds
MIN_SIQS: Final[float] = 0.0
"""Lowest possible SIQS."""

MAX_SIQS: Final[float] = 10.0
"""Highest possible SIQS."""

VIABLE_THRESHOLD: Final[float] = 4.0
"""Scores at or above this are considered worth setting up for."""

# Factor weights (sum to 1.0)
SIQS_WEIGHTS: Final = MappingProxyType(
    {
        "cloud": 0.35,
        "light_pollution": 0.25,
        "temperature": 0.10,
        "humidity": 0.10,
        "wind": 0.10,
        "precipitation": 0.10,
    }
)
"""Weights for the full six-factor score."""

NIGHTTIME_WEIGHTS: Final = MappingProxyType(
    {
        "cloud": 0.80,
        "light_pollution": 0.20,
    }
)
"""Weights for the nighttime score, dominated by tonight's cloud cover."""

# Nighttime aggregation
IMAGING_IMPOSSIBLE_CLOUD_COVER: Final[float] = 40.0
"""Average night cloud cover (%) above which imaging is ruled out."""

EVENING_WEIGHT: Final[float] = 1.5
"""Relative weight of evening hours when averaging wind and humidity."""

# Anomaly correction
CRITICAL_CLOUD_COVER: Final[float] = 80.0
"""Cloud cover (%) that cannot coexist with a high score."""

MAX_SCORE_DELTA: Final[float] = 4.0
"""Largest change allowed between consecutive scores for one location."""

PRECIPITATION_SCORE_CAP: Final[float] = 6.0
"""Maximum score while precipitation is falling."""

# Fallback scoring
HIGH_LATITUDE_THRESHOLD: Final[float] = 45.0
"""Absolute latitude above which the fallback adds a bonus."""

HIGH_LATITUDE_BONUS: Final[float] = 1.0
"""Bonus added to the fallback score at high latitudes."""
