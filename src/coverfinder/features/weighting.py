# src/coverfinder/features/weighting.py
"""
Feature weighting.

Combines the five feature sub-scores into one 0..10 "average feature score",
giving extra weight to the features the customer marked as priorities.

Weight table (per feature):

    selected | each selected | each other
    ---------+---------------+------------
        0    |     0.20      |   0.20
        1    |     0.60      |   0.10
        2    |     0.40      |   0.2 / 3
        3    |     0.30      |   0.05
        4    |     0.25      |   0.00
        5    |     0.20      |    -

Every row sums to 1.0. Selections are sets: naming a feature twice counts once.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from coverfinder.domain.models import ALL_FEATURES, Feature
from coverfinder.scoring.composite import clamp
from coverfinder.scoring.normalize import round1

# selected count -> (weight per selected feature, total weight shared by the rest)
SELECTED_WEIGHT_TABLE: dict[int, tuple[float, float]] = {
    1: (0.60, 0.40),
    2: (0.40, 0.20),
    3: (0.30, 0.10),
    4: (0.25, 0.0),
    5: (0.20, 0.0),
}

EQUAL_WEIGHT = 1.0 / len(ALL_FEATURES)


def _equal_weights() -> dict[Feature, float]:
    return {f: EQUAL_WEIGHT for f in ALL_FEATURES}


def feature_weights(selected: Iterable[Feature]) -> dict[Feature, float]:
    """Return the weight applied to each of the five features for a selection."""
    chosen = frozenset(Feature(f) for f in selected)
    count = len(chosen)

    # Nothing selected and everything selected are both plain equal fifths.
    if count == 0 or count == len(ALL_FEATURES):
        return _equal_weights()

    selected_weight, remaining_weight = SELECTED_WEIGHT_TABLE[count]
    others = len(ALL_FEATURES) - count
    other_weight = remaining_weight / others if others else 0.0
    return {f: (selected_weight if f in chosen else other_weight) for f in ALL_FEATURES}


def weighted_feature_score(sub_scores: Mapping[Feature, float], selected: Iterable[Feature]) -> float:
    """Weighted 0..10 average of the five sub-scores, rounded to one decimal."""
    weights = feature_weights(selected)
    total = sum(float(sub_scores.get(f, 0.0)) * w for f, w in weights.items())
    return clamp(round1(total))
