"""
SIQS Display Helpers

Labels, colors and recommendations for presenting scores. Colors are rich
style names so the helpers can be shared by the CLI and any other
terminal interface.
"""

from __future__ import annotations

import math


__all__ = [
    "format_siqs",
    "normalize_to_siqs_scale",
    "recommendation",
    "siqs_color",
    "siqs_label",
]


def normalize_to_siqs_scale(score: float | None) -> float:
    """
    Bring a score onto the 0-10 scale.

    Scores in (10, 100] are assumed to be percentages and divided by 10.
    Anything else is clamped. None and non-finite values give 0.
    """
    if score is None or not math.isfinite(score):
        return 0.0
    if 10 < score <= 100:
        return score / 10
    return max(0.0, min(10.0, score))


def siqs_label(score: float) -> str:
    if score >= 8:
        return "Excellent"
    elif score >= 6:
        return "Good"
    elif score >= 5:
        return "Above Average"
    elif score >= 4:
        return "Fair"
    elif score >= 2:
        return "Poor"
    return "Bad"


def siqs_color(score: float) -> str:
    """Rich color for a score."""
    if score >= 8:
        return "bright_green"
    elif score >= 6:
        return "green"
    elif score >= 5:
        return "chartreuse3"
    elif score >= 4:
        return "yellow"
    elif score >= 2:
        return "orange3"
    return "red"


def recommendation(score: float) -> str:
    if score >= 8:
        return "Excellent conditions for astrophotography. Optimal imaging possible."
    elif score >= 6:
        return "Good conditions for imaging. Minor adjustments may be needed."
    elif score >= 5:
        return "Above average conditions. Good for many imaging targets."
    elif score >= 4:
        return "Fair conditions. Expect some challenges with image quality."
    elif score >= 2:
        return "Poor conditions. Consider rescheduling or changing location."
    return "Unsuitable conditions. Not recommended for imaging."


def format_siqs(score: float | None) -> str:
    """Score with one decimal, or "N/A" when there is no meaningful score."""
    normalized = normalize_to_siqs_scale(score)
    if normalized <= 0:
        return "N/A"
    return f"{normalized:.1f}"
