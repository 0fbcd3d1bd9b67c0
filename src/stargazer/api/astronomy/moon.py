"""
Moon Phase Calculations

Lightweight moon phase estimates from the mean synodic month. Accurate to
within about a day, which is enough to flag bright-moon nights.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

import deal


__all__ = [
    "MoonInfo",
    "MoonPhase",
    "calculate_moon_phase",
    "get_moon_info",
    "is_good_for_astronomy",
    "moon_illumination",
    "moon_phase_name",
    "next_full_moon",
    "next_new_moon",
]


SYNODIC_MONTH_DAYS = 29.53059
REFERENCE_NEW_MOON_JD = 2451550.1  # 2000-01-06
_UNIX_EPOCH_JD = 2440587.5


class MoonPhase(StrEnum):
    """Moon phase names."""

    NEW_MOON = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL_MOON = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"


@dataclass(frozen=True)
class MoonInfo:
    """Moon phase summary for a moment in time."""

    phase: float  # 0 = new, 0.5 = full
    name: MoonPhase
    illumination_percent: int
    good_for_astronomy: bool


def _julian_date(dt: datetime) -> float:
    # Naive datetimes are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp() / 86400.0 + _UNIX_EPOCH_JD


@deal.post(lambda result: 0.0 <= result < 1.0, message="Phase must be in [0, 1)")
def calculate_moon_phase(dt: datetime | None = None) -> float:
    """
    Calculate the moon phase as a fraction of the synodic month.

    Args:
        dt: Moment to evaluate (default: now). Naive values are treated as UTC.

    Returns:
        Phase in [0, 1): 0 = New Moon, 0.5 = Full Moon
    """
    dt = dt or datetime.now(UTC)
    days = (_julian_date(dt) - REFERENCE_NEW_MOON_JD) % SYNODIC_MONTH_DAYS
    return (days / SYNODIC_MONTH_DAYS) % 1.0


def moon_phase_name(phase: float) -> MoonPhase:
    """Name of the phase for a phase fraction (values outside [0, 1) wrap)."""
    phase = phase % 1.0
    if phase < 0.025 or phase >= 0.975:
        return MoonPhase.NEW_MOON
    elif phase < 0.25:
        return MoonPhase.WAXING_CRESCENT
    elif phase < 0.275:
        return MoonPhase.FIRST_QUARTER
    elif phase < 0.475:
        return MoonPhase.WAXING_GIBBOUS
    elif phase < 0.525:
        return MoonPhase.FULL_MOON
    elif phase < 0.725:
        return MoonPhase.WANING_GIBBOUS
    elif phase < 0.775:
        return MoonPhase.LAST_QUARTER
    return MoonPhase.WANING_CRESCENT


def moon_illumination(phase: float) -> int:
    """
    Approximate illuminated percentage of the lunar disc.

    Rises linearly from 0% at new moon to 100% at full moon and back.
    """
    phase = phase % 1.0
    fraction = phase * 2 if phase <= 0.5 else (1 - phase) * 2
    return round(fraction * 100)


def is_good_for_astronomy(phase: float) -> bool:
    """True within about 4.5 days of new moon."""
    phase = phase % 1.0
    return phase < 0.15 or phase > 0.85


def get_moon_info(dt: datetime | None = None) -> MoonInfo:
    """Phase, name and illumination for a moment in time."""
    phase = calculate_moon_phase(dt)
    return MoonInfo(
        phase=phase,
        name=moon_phase_name(phase),
        illumination_percent=moon_illumination(phase),
        good_for_astronomy=is_good_for_astronomy(phase),
    )


def next_full_moon(dt: datetime | None = None) -> datetime:
    """Estimated time of the next full moon after dt."""
    dt = dt or datetime.now(UTC)
    phase = calculate_moon_phase(dt)
    remaining = (0.5 - phase) % 1.0 or 1.0
    return dt + timedelta(days=remaining * SYNODIC_MONTH_DAYS)


def next_new_moon(dt: datetime | None = None) -> datetime:
    """Estimated time of the next new moon after dt."""
    dt = dt or datetime.now(UTC)
    phase = calculate_moon_phase(dt)
    return dt + timedelta(days=(1.0 - phase) * SYNODIC_MONTH_DAYS)
