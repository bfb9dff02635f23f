"""
Finder score combiner.

The dynamic finder score blends the price rating and the weighted feature score
into one 0..10 number. The customer's stated priority decides which signal
dominates:
- Price:    85% price rating + 15% feature score
- Features: 85% feature score + 15% price rating
"""

from __future__ import annotations

from coverfinder.domain.models import Priority
from coverfinder.scoring.normalize import round1

DOMINANT_WEIGHT = 0.85
SECONDARY_WEIGHT = 0.15

SCORE_MIN = 0.0
SCORE_MAX = 10.0


def clamp(x: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    """Clamp a number into the [lo, hi] range."""
    return max(lo, min(hi, float(x)))


def dynamic_finder_score(price_rating: float, average_feature_score: float, priority: Priority) -> float:
    """Blend price rating and feature score per priority, rounded to one decimal."""
    try:
        priority = Priority(priority)
    except ValueError as e:
        raise ValueError(f"Unknown priority {priority!r}; expected 'Price' or 'Features'.") from e

    if priority is Priority.PRICE:
        blended = price_rating * DOMINANT_WEIGHT + average_feature_score * SECONDARY_WEIGHT
    else:
        blended = average_feature_score * DOMINANT_WEIGHT + price_rating * SECONDARY_WEIGHT
    return clamp(round1(blended))
