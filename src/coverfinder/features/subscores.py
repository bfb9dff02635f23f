# src/coverfinder/features/subscores.py
"""
Feature sub-scores (product-level).

Each of the five coverage features becomes a 0..10 sub-score:
- STORM, WINDSCREEN, ACCIDENTAL_DAMAGE, NEW_CAR_REPLACEMENT are yes/no flags: 10 or 0.
- PERSONAL_EFFECTS is a coverage amount. Amounts are rated 1.0..9.9 relative to the
  whole candidate set (largest amount -> 9.9); an amount of 0 scores 0.

Catalog values arrive as strings, so this module also owns the lenient parsers
used across the engine. Parsing never raises: anything unreadable becomes 0 / False.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable

from coverfinder.domain.models import Feature, RatingMap, RawProductRecord
from coverfinder.scoring.normalize import convert_numeric_to_rating

# Catalog attribute that holds each feature's raw value.
FEATURE_COLUMNS: dict[Feature, str] = {
    Feature.STORM: "STORM",
    Feature.WINDSCREEN: "WINDSCREEN",
    Feature.PERSONAL_EFFECTS: "PERSONAL_EFFECTS",
    Feature.ACCIDENTAL_DAMAGE: "ACCIDENTAL_DAMAGE",
    Feature.NEW_CAR_REPLACEMENT: "NEW_CAR_REPLACEMENT",
}

FLAG_SCORES: MappingProxyType[bool, float] = MappingProxyType({True: 10.0, False: 0.0})

# Leading decimal number, e.g. "500", " 1000.50 ", "750 (per claim)".
_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_number(text: str | None) -> float:
    """Parse the leading number of a catalog string; 0.0 when missing or unreadable."""
    if text is None:
        return 0.0
    match = _LEADING_NUMBER.match(str(text))
    if not match:
        return 0.0
    value = float(match.group(1))
    return value if math.isfinite(value) else 0.0


def is_numeric_text(text: str | None) -> bool:
    """True when the string starts with a number (blank counts as a missing 0)."""
    text = str(text or "")
    return not text.strip() or _LEADING_NUMBER.match(text) is not None


def parse_flag(text: str | None) -> bool:
    """Catalog yes/no flags: only a case-insensitive "yes" counts as True."""
    return str(text or "").strip().lower() == "yes"


@dataclass(frozen=True)
class FeatureScoreMaps:
    """Per-query lookup tables turning raw feature values into sub-scores."""

    personal_effects: RatingMap
    flags: RatingMap = field(default_factory=lambda: FLAG_SCORES)

    def sub_scores(self, record: RawProductRecord) -> dict[Feature, float]:
        scores: dict[Feature, float] = {}
        for feature, column in FEATURE_COLUMNS.items():
            raw = record.get(column, "")
            if feature is Feature.PERSONAL_EFFECTS:
                scores[feature] = self.personal_effects.get(parse_number(raw), 0.0)
            else:
                scores[feature] = self.flags.get(parse_flag(raw), 0.0)
        return scores


def build_feature_score_maps(records: Iterable[RawProductRecord]) -> FeatureScoreMaps:
    """Build sub-score tables over the full candidate set."""
    amounts = [parse_number(r.get(FEATURE_COLUMNS[Feature.PERSONAL_EFFECTS], "")) for r in records]
    personal_effects = dict(convert_numeric_to_rating(amounts))
    # No cover is an explicit 0, not a lookup miss.
    personal_effects[0.0] = 0.0
    return FeatureScoreMaps(personal_effects=MappingProxyType(personal_effects))
