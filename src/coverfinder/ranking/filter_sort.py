"""
Candidate filtering and ordering.

- `filter_by_features`: keep products that offer *every* selected feature.
- `sort_products`: order by price rating or dynamic finder score, highest first.

Python's sort is stable, so equal scores keep their input order. Sponsored
placement is a display concern handled in `coverfinder.presentation.sponsorship`.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from coverfinder.domain.models import Feature, ProcessedProduct, SortKey
from coverfinder.features.subscores import parse_number


def _has_personal_effects(product: ProcessedProduct) -> bool:
    return parse_number(product.features.personal_effects) > 0


_FEATURE_CHECKS: dict[Feature, Callable[[ProcessedProduct], bool]] = {
    Feature.STORM: lambda p: p.features.storm,
    Feature.WINDSCREEN: lambda p: p.features.windscreen,
    Feature.PERSONAL_EFFECTS: _has_personal_effects,
    Feature.ACCIDENTAL_DAMAGE: lambda p: p.features.accidental_damage,
    Feature.NEW_CAR_REPLACEMENT: lambda p: p.features.new_car_replacement,
}


def has_feature(product: ProcessedProduct, feature: Feature) -> bool:
    return bool(_FEATURE_CHECKS[Feature(feature)](product))


def filter_by_features(
    products: Sequence[ProcessedProduct], selected: Iterable[Feature]
) -> list[ProcessedProduct]:
    """Keep only products offering all selected features (no selection keeps everything)."""
    required = frozenset(Feature(f) for f in selected)
    if not required:
        return list(products)
    return [p for p in products if all(has_feature(p, f) for f in required)]


_SORT_FIELDS: dict[SortKey, Callable[[ProcessedProduct], float]] = {
    SortKey.PRICE_RATING: lambda p: p.price_rating,
    SortKey.FINDER_SCORE: lambda p: p.dynamic_finder_score,
}


def sort_products(products: Iterable[ProcessedProduct], sort_by: SortKey) -> list[ProcessedProduct]:
    """Sort descending by the requested key; ties keep input order."""
    try:
        key = _SORT_FIELDS[SortKey(sort_by)]
    except ValueError as e:
        raise ValueError(f"Unknown sort key {sort_by!r}; expected 'priceRating' or 'finderScore'.") from e
    return sorted(products, key=key, reverse=True)
