"""
Batch SIQS Scoring

Scores many observing spots at once. Spots are processed in small
concurrent batches with a pause between batches to stay within the
weather API's rate limits.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stargazer.api.core.exceptions import InvalidSpotError
from stargazer.api.siqs.calculator import SiqsResult
from stargazer.api.siqs.service import calculate_realtime_siqs


logger = logging.getLogger(__name__)


__all__ = [
    "AstroSpot",
    "ScoredSpot",
    "load_spots",
    "prioritize_spots",
    "score_prioritized",
    "score_spots",
]


Scorer = Callable[[float, float, float], Awaitable[SiqsResult]]


@dataclass(frozen=True)
class AstroSpot:
    """A named observing location."""

    name: str
    latitude: float
    longitude: float
    bortle_scale: float = 5.0
    certification: str | None = None  # e.g. "Gold Tier Dark Sky Park"
    is_dark_sky_reserve: bool = False
    spot_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AstroSpot:
        """
        Build a spot from a JSON object.

        Raises:
            InvalidSpotError: If name or coordinates are missing or not numeric
        """
        try:
            return cls(
                name=str(data["name"]),
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
                bortle_scale=float(data.get("bortle_scale", 5.0)),
                certification=data.get("certification"),
                is_dark_sky_reserve=bool(data.get("is_dark_sky_reserve", False)),
                spot_id=str(data["spot_id"]) if data.get("spot_id") is not None else None,
            )
        except KeyError as e:
            raise InvalidSpotError(f"Spot is missing required field {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidSpotError(f"Invalid spot {data!r}: {e}") from e


@dataclass(frozen=True)
class ScoredSpot:
    """A spot with its SIQS, or the error that prevented scoring it."""

    spot: AstroSpot
    result: SiqsResult | None = None
    error: str | None = None

    @property
    def score(self) -> float | None:
        return self.result.score if self.result else None


async def _default_scorer(latitude: float, longitude: float, bortle: float) -> SiqsResult:
    return await calculate_realtime_siqs(latitude, longitude, bortle)


def _sort_by_score(scored: Iterable[ScoredSpot]) -> list[ScoredSpot]:
    # Failures sort last
    return sorted(scored, key=lambda s: s.score if s.score is not None else -1.0, reverse=True)


async def _score_in_batches(
    spots: Sequence[AstroSpot],
    batch_size: int,
    delay_seconds: float,
    scorer: Scorer,
) -> list[ScoredSpot]:
    scored: list[ScoredSpot] = []
    for start in range(0, len(spots), batch_size):
        if start > 0 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        batch = spots[start : start + batch_size]
        results = await asyncio.gather(
            *(scorer(s.latitude, s.longitude, s.bortle_scale) for s in batch),
            return_exceptions=True,
        )
        for spot, outcome in zip(batch, results, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(f"Could not score spot '{spot.name}': {outcome}")
                scored.append(ScoredSpot(spot=spot, error=str(outcome)))
            elif isinstance(outcome, SiqsResult):
                scored.append(ScoredSpot(spot=spot, result=outcome))
            else:
                # BaseException such as CancelledError
                raise outcome
        logger.info(f"Scored {len(scored)}/{len(spots)} spots")
    return scored


async def score_spots(
    spots: Sequence[AstroSpot],
    batch_size: int = 3,
    delay_seconds: float = 0.2,
    scorer: Scorer | None = None,
) -> list[ScoredSpot]:
    """
    Score spots in sequential batches, concurrently within each batch.

    A spot that fails to score is kept with ``result=None`` and an error
    message rather than aborting the batch.

    Args:
        spots: Spots to score
        batch_size: Spots scored concurrently
        delay_seconds: Pause between batches
        scorer: Async scoring function (default: real-time SIQS)

    Returns:
        Scored spots, best score first
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    scored = await _score_in_batches(list(spots), batch_size, delay_seconds, scorer or _default_scorer)
    failures = sum(1 for s in scored if s.result is None)
    logger.info(f"Batch complete: {len(scored) - failures} scored, {failures} failed")
    return _sort_by_score(scored)


def prioritize_spots(spots: Iterable[AstroSpot]) -> list[AstroSpot]:
    """Order spots: dark-sky reserves, then certified sites, then darkest skies."""
    return sorted(
        spots,
        key=lambda s: (not s.is_dark_sky_reserve, s.certification is None, s.bortle_scale),
    )


async def score_prioritized(
    spots: Sequence[AstroSpot],
    high_priority_count: int = 10,
    scorer: Scorer | None = None,
) -> list[ScoredSpot]:
    """
    Score the most promising spots first, in larger and faster batches.

    The top ``high_priority_count`` spots go in batches of 5 with a 0.1s
    pause; the remainder in batches of 3 with a 0.3s pause.

    Returns:
        All scored spots, best score first
    """
    ordered = prioritize_spots(spots)
    high, rest = ordered[:high_priority_count], ordered[high_priority_count:]
    scored = await score_spots(high, batch_size=5, delay_seconds=0.1, scorer=scorer)
    if rest:
        scored += await score_spots(rest, batch_size=3, delay_seconds=0.3, scorer=scorer)
    return _sort_by_score(scored)


def load_spots(path: Path) -> list[AstroSpot]:
    """
    Read spots from a JSON file containing a list of spot objects.

    Raises:
        InvalidSpotError: If the file is unreadable, not a JSON list, or a spot is malformed
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidSpotError(f"Could not read spots from {path}: {e}") from e
    if not isinstance(data, list):
        raise InvalidSpotError(f"{path} must contain a JSON list of spots")
    spots: list[AstroSpot] = []
    for item in data:
        if not isinstance(item, dict):
            raise InvalidSpotError(f"Spot must be a JSON object, got {item!r}")
        spots.append(AstroSpot.from_dict(item))
    logger.debug(f"Loaded {len(spots)} spots from {path}")
    return spots
