"""
Rating normalizers.

Both normalizers rescale the raw values observed across the current candidate
set onto the 1.0..9.9 rating scale:
- `convert_price_to_rating`: cheaper premium -> higher rating (inverse)
- `convert_numeric_to_rating`: larger amount -> higher rating (direct)

A rating map is only valid for the candidate set (and price column) it was built
from; callers build a new one per query.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterable

from coverfinder.domain.models import RatingMap

RATING_MIN = 1.0
RATING_MAX = 9.9
RATING_SPAN = 8.9


def round1(x: float) -> float:
    """Round to one decimal with halves rounded up (8.565 -> 8.6)."""
    return math.floor(float(x) * 10 + 0.5) / 10


def _valid_values(values: Iterable[float]) -> list[float]:
    return [float(v) for v in values if math.isfinite(float(v)) and float(v) > 0]


def _build_rating_map(values: Iterable[float], *, inverse: bool) -> RatingMap:
    valid = _valid_values(values)
    if not valid:
        return MappingProxyType({})

    low = min(valid)
    high = max(valid)
    spread = high - low

    ratings: dict[float, float] = {}
    for value in valid:
        if spread == 0:
            # A single observed price/amount is the best on offer either way.
            normalized = 0.0 if inverse else 1.0
        else:
            normalized = (value - low) / spread
        if inverse:
            rating = RATING_MAX - normalized * RATING_SPAN
        else:
            rating = RATING_MIN + normalized * RATING_SPAN
        ratings[value] = round1(rating)
    return MappingProxyType(ratings)


def convert_price_to_rating(prices: Iterable[float]) -> RatingMap:
    """Map each positive price to a 1.0..9.9 rating (lowest price -> 9.9)."""
    return _build_rating_map(prices, inverse=True)


def convert_numeric_to_rating(values: Iterable[float]) -> RatingMap:
    """Map each positive amount to a 1.0..9.9 rating (largest amount -> 9.9)."""
    return _build_rating_map(values, inverse=False)
