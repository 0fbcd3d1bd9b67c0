"""
Light Pollution Helpers

Provides Bortle scale conversions from SQM (Sky Quality Meter) readings,
naked-eye star counts and place names, for use when no measured
light-pollution value is available for an observing location.
"""

from __future__ import annotations

import logging
import math
import re
from enum import IntEnum

import deal

from stargazer.api.core.exceptions import InvalidBortleScaleError


logger = logging.getLogger(__name__)


__all__ = [
    "BORTLE_DESCRIPTIONS",
    "BortleClass",
    "bortle_from_star_count",
    "describe_bortle",
    "estimate_bortle_from_name",
    "limiting_magnitude",
    "sqm_to_bortle",
    "validate_bortle",
]


class BortleClass(IntEnum):
    """
    Bortle Dark-Sky Scale (1-9).

    Class 1: Excellent dark-sky site
    Class 2: Typical truly dark site
    Class 3: Rural sky
    Class 4: Rural/suburban transition
    Class 5: Suburban sky
    Class 6: Bright suburban sky
    Class 7: Suburban/urban transition
    Class 8: City sky
    Class 9: Inner-city sky
    """

    CLASS_1 = 1
    CLASS_2 = 2
    CLASS_3 = 3
    CLASS_4 = 4
    CLASS_5 = 5
    CLASS_6 = 6
    CLASS_7 = 7
    CLASS_8 = 8
    CLASS_9 = 9


BORTLE_DESCRIPTIONS: dict[BortleClass, str] = {
    BortleClass.CLASS_1: "Excellent dark-sky site",
    BortleClass.CLASS_2: "Typical truly dark site",
    BortleClass.CLASS_3: "Rural sky",
    BortleClass.CLASS_4: "Rural/suburban transition",
    BortleClass.CLASS_5: "Suburban sky",
    BortleClass.CLASS_6: "Bright suburban sky",
    BortleClass.CLASS_7: "Suburban/urban transition",
    BortleClass.CLASS_8: "City sky",
    BortleClass.CLASS_9: "Inner-city sky",
}

# SQM (mag/arcsec²) lower bounds, with half-class transitions
_SQM_BREAKPOINTS: tuple[tuple[float, float], ...] = (
    (22.00, 1.0),
    (21.89, 1.5),
    (21.69, 2.0),
    (21.30, 2.5),
    (20.49, 3.0),
    (20.00, 3.5),
    (19.50, 4.0),
    (19.25, 4.5),
    (18.94, 5.0),
    (18.70, 5.5),
    (18.38, 6.0),
    (18.10, 6.5),
    (17.80, 7.0),
    (17.30, 7.5),
    (17.00, 8.0),
    (16.50, 8.5),
)

# Minimum naked-eye star count for each class (exclusive)
_STAR_COUNT_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (2500, 1),
    (1500, 2),
    (800, 3),
    (400, 4),
    (200, 5),
    (100, 6),
    (50, 7),
    (20, 8),
)

# Naked-eye limiting magnitude at Bortle 1..9
_LIMITING_MAGNITUDES: tuple[float, ...] = (8.0, 7.5, 7.0, 6.2, 5.5, 5.0, 4.5, 4.0, 3.5)

# Checked in order; first match wins
_NAME_KEYWORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (
        8,
        (
            "beijing",
            "shanghai",
            "tokyo",
            "new york",
            "nyc",
            "los angeles",
            "london",
            "paris",
            "chicago",
            "seoul",
            "mumbai",
            "delhi",
            "mexico city",
            "cairo",
            "singapore",
            "hong kong",
            "downtown",
            "city center",
        ),
    ),
    (1, ("observatory", "mauna kea", "atacama", "la palma", "dark sky")),
    (7, ("city", "urban", "metro", "municipal")),
    (6, ("suburb", "residential", "borough", "district")),
    (5, ("town", "township", "village")),
    (4, ("rural", "countryside", "farmland", "agricultural")),
    (2, ("desert", "mountain", "remote", "wilderness", "isolated")),
    (3, ("park", "forest", "national", "reserve", "preserve")),
)

DEFAULT_BORTLE = 5


def validate_bortle(value: float) -> float:
    """
    Validate a Bortle scale value.

    Args:
        value: Bortle scale (1-9, half steps allowed)

    Returns:
        The value as float

    Raises:
        InvalidBortleScaleError: If value is not a finite number in 1-9
    """
    try:
        bortle = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidBortleScaleError(f"Bortle scale must be a number, got {value!r}") from e
    if not math.isfinite(bortle) or not 1.0 <= bortle <= 9.0:
        raise InvalidBortleScaleError(f"Bortle scale must be 1-9, got {value}")
    return bortle


@deal.post(lambda result: 1.0 <= result <= 9.0, message="Bortle must be 1-9")
def sqm_to_bortle(sqm: float) -> float:
    """
    Convert an SQM reading to a Bortle value.

    Half steps mark transitions between classes (e.g. 4.5 sits between
    rural/suburban and suburban skies).

    Args:
        sqm: Sky brightness in magnitudes per square arcsecond

    Returns:
        Bortle value from 1.0 to 9.0
    """
    for threshold, bortle in _SQM_BREAKPOINTS:
        if sqm >= threshold:
            return bortle
    return 9.0


@deal.pre(lambda star_count: star_count >= 0, message="Star count cannot be negative")
@deal.post(lambda result: 1 <= result <= 9, message="Bortle must be 1-9")
def bortle_from_star_count(star_count: int) -> int:
    """
    Derive a Bortle class from the number of stars visible to the naked eye.

    More visible stars means a darker sky, so a lower Bortle class.

    Args:
        star_count: Number of stars counted

    Returns:
        Bortle class 1-9
    """
    for minimum, bortle in _STAR_COUNT_BREAKPOINTS:
        if star_count > minimum:
            return bortle
    return 9


def limiting_magnitude(bortle: float) -> float:
    """
    Naked-eye limiting magnitude for a Bortle value.

    Half-step values are linearly interpolated between neighbouring classes.

    Raises:
        InvalidBortleScaleError: If bortle is outside 1-9
    """
    bortle = validate_bortle(bortle)
    lower = int(math.floor(bortle))
    upper = min(lower + 1, 9)
    fraction = bortle - lower
    low_mag = _LIMITING_MAGNITUDES[lower - 1]
    high_mag = _LIMITING_MAGNITUDES[upper - 1]
    return low_mag + (high_mag - low_mag) * fraction


def estimate_bortle_from_name(location_name: str) -> int:
    """
    Guess a Bortle class from a place name.

    Used when no light pollution measurement exists for a location.
    Matching is case-insensitive on whole words.

    Args:
        location_name: Free-form place name (e.g. "Joshua Tree National Park")

    Returns:
        Estimated Bortle class (5 when nothing matches)
    """
    name = location_name.lower()
    for bortle, keywords in _NAME_KEYWORDS:
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}", name):
                logger.debug(f"Estimated Bortle {bortle} for '{location_name}' (matched '{keyword}')")
                return bortle
    return DEFAULT_BORTLE


def describe_bortle(bortle: float) -> str:
    """Human-readable description of a Bortle value."""
    bortle = validate_bortle(bortle)
    rounded = BortleClass(int(round(bortle)))
    description = BORTLE_DESCRIPTIONS[rounded]
    if bortle != int(bortle):
        return f"Bortle {bortle:.1f}: {description}"
    return f"Bortle {int(bortle)}: {description}"
