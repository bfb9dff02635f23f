from __future__ import annotations

from types import MappingProxyType

import pytest

from coverfinder.domain.models import FeatureDetails, ProcessedProduct

NSW_MALE_UNDER_25 = "2025-AUFCI-NSW-M-20"


def make_record(
    product_id: str,
    price: float | str | None,
    *,
    name: str | None = None,
    column: str = NSW_MALE_UNDER_25,
    storm: str = "No",
    windscreen: str = "No",
    personal_effects: str = "0",
    accidental_damage: str = "No",
    new_car_replacement: str = "No",
    **extra: str,
):
    """Build one read-only catalog row with only the attributes a test cares about."""
    row = {
        "ID": product_id,
        "NAME": name or f"Product {product_id}",
        "PROVIDER_ID": f"prov-{product_id}",
        "ACTIVE": "TRUE",
        "STORM": storm,
        "WINDSCREEN": windscreen,
        "PERSONAL_EFFECTS": personal_effects,
        "ACCIDENTAL_DAMAGE": accidental_damage,
        "NEW_CAR_REPLACEMENT": new_car_replacement,
        **extra,
    }
    if price is not None:
        row[column] = str(price)
    return MappingProxyType(row)


def make_product(product_id: str, **overrides) -> ProcessedProduct:
    """Build a ProcessedProduct directly (for filter/sort tests that skip the engine)."""
    features = overrides.pop("features", {})
    payload = {
        "id": product_id,
        "name": f"Product {product_id}",
        "price": 800.0,
        "price_rating": 5.0,
        "storm_score": 0.0,
        "windscreen_score": 0.0,
        "personal_effects_score": 0.0,
        "accidental_damage_score": 0.0,
        "new_car_replacement_score": 0.0,
        "average_feature_score": 0.0,
        "dynamic_finder_score": 5.0,
        **overrides,
    }
    return ProcessedProduct(**payload, features=FeatureDetails(**features))


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def product_factory():
    return make_product
