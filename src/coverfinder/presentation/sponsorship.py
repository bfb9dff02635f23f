"""
Sponsored placement (display policy).

Sponsorship is commercial, not a score: the engine never computes it. Adapters
(API, CLI) flag products from the configured sponsor list and may then show
sponsored products first.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from coverfinder.domain.models import ProcessedProduct


def flag_sponsored(
    products: Iterable[ProcessedProduct], sponsored_names: Iterable[str]
) -> list[ProcessedProduct]:
    """Return copies of sponsored products with `sponsored=True`; others pass through."""
    names = set(sponsored_names)
    return [p.model_copy(update={"sponsored": True}) if p.name in names else p for p in products]


def display_order(products: Iterable[ProcessedProduct]) -> list[ProcessedProduct]:
    """Sponsored first, then by dynamic finder score (highest first, ties keep order)."""
    return sorted(products, key=lambda p: (p.sponsored, p.dynamic_finder_score), reverse=True)


def sponsored_links(
    products: Sequence[ProcessedProduct], provider_urls: Mapping[str, str]
) -> list[dict]:
    return [
        {
            "name": p.name,
            "redirectUrl": provider_urls.get(p.name, "#"),
            "dynamicFinderScore": p.dynamic_finder_score,
        }
        for p in products
        if p.sponsored
    ]
