from __future__ import annotations

# This module is the "orchestrator" for one comparison query.
# It wires together:
# - domain input (raw catalog records + CustomerCriteria)
# - price column resolution + price rating map (built once per query)
# - per-product feature sub-scores and weighting
# - finder score blending, feature filtering and sorting
#
# Both the HTTP API and the CLI call `rank_products`; no formula lives anywhere else.

import logging
import time
from typing import Sequence

from coverfinder.domain.models import (
    CustomerCriteria,
    Feature,
    FeatureDetails,
    Gender,
    Priority,
    ProcessedProduct,
    QuoteSummary,
    RatingMap,
    RawProductRecord,
    SortKey,
)
from coverfinder.features.subscores import (
    FeatureScoreMaps,
    build_feature_score_maps,
    parse_flag,
    parse_number,
)
from coverfinder.features.weighting import weighted_feature_score
from coverfinder.ranking.filter_sort import filter_by_features, sort_products
from coverfinder.scoring.composite import dynamic_finder_score
from coverfinder.scoring.normalize import RATING_MIN, convert_price_to_rating, round1
from coverfinder.scoring.price_column import resolve_price_column

logger = logging.getLogger(__name__)


def default_sort_key(priority: Priority) -> SortKey:
    """Price-first customers see the cheapest first; feature-first see the best blend first."""
    return SortKey.PRICE_RATING if Priority(priority) is Priority.PRICE else SortKey.FINDER_SCORE


def _text(record: RawProductRecord, column: str, default: str = "") -> str:
    value = record.get(column)
    return value if value else default


def feature_details(record: RawProductRecord) -> FeatureDetails:
    """Collect the display/filter facts of a catalog row."""
    return FeatureDetails(
        agreed_or_market_value=_text(record, "AGREED_OR_MARKET_VALUE"),
        choice_of_repairer=parse_flag(record.get("CHOICE_OF_REPAIRER")),
        lifetime_guarantee=parse_flag(record.get("LIFETIME_GUARANTEE_ON_REPAIRS")),
        new_car_replacement=parse_flag(record.get("NEW_CAR_REPLACEMENT")),
        new_car_replacement_details=_text(record, "NEWCAR_REPLACEMENT_DETAILS"),
        personal_effects=_text(record, "PERSONAL_EFFECTS"),
        personal_effects_details=_text(record, "PERSONALEFFECTS_DETAILS"),
        roadside_assistance=parse_flag(record.get("ROADSIDE_ASSISTANCE")),
        roadside_assistance_cost=_text(record, "ROADSIDE_ASSISTANCE_COST", "0"),
        storm=parse_flag(record.get("STORM")),
        towing=parse_flag(record.get("TOWING")),
        key_replacement=_text(record, "KEY_REPLACEMENT"),
        key_replacement_details=_text(record, "KEYREPLACEMENT_DETAILS"),
        child_seat_replacement=parse_flag(record.get("CHILD_SEAT_BABY_CAPSULES")),
        child_seat_details=_text(record, "CHILD_SEAT_BABY_CAPSULES_DETAILS"),
        emergency_transport=parse_flag(record.get("EMERGENCY_TRANSPORT_AND_ACCOMMODATION")),
        emergency_transport_details=_text(record, "EMERGENCY_TRANSPORT_ACCOMMODATION_DETAILS"),
        essential_repairs=_text(record, "ESSENTIAL_EMERGENCY_REPAIRS"),
        essential_repairs_details=_text(record, "ESSENTIAL_EMERGENCY_REPAIR_DETAILS"),
        hire_car_after_accident=_text(record, "HIRE_CAR_AFTER_ACCIDENT"),
        restricted_driver_option=_text(record, "RESTRICTED_DRIVER_OPTION"),
        no_excess_windscreen=parse_flag(record.get("NO_EXCESS_WINDSCREEN")),
        windscreen=parse_flag(record.get("WINDSCREEN")),
        pay_monthly=parse_flag(record.get("PAY_MONTHLY_YES")),
        reduced_excess_windscreen=_text(record, "REDUCED_EXCESS_WINDSCREEN"),
        accidental_damage=parse_flag(record.get("ACCIDENTAL_DAMAGE")),
    )


def process_product(
    record: RawProductRecord,
    *,
    price_column: str,
    price_ratings: RatingMap,
    feature_maps: FeatureScoreMaps,
    criteria: CustomerCriteria,
) -> ProcessedProduct | None:
    """Score one catalog row; returns None when it has no usable price for this profile."""
    price = parse_number(record.get(price_column))
    if price <= 0:
        return None

    # The map holds every positive price of the candidate set; a miss is unexpected.
    price_rating = price_ratings.get(price, RATING_MIN)

    sub_scores = feature_maps.sub_scores(record)
    average_feature_score = weighted_feature_score(sub_scores, criteria.selected_features)

    return ProcessedProduct(
        id=_text(record, "ID"),
        name=_text(record, "NAME"),
        provider_id=_text(record, "PROVIDER_ID"),
        price=price,
        price_rating=price_rating,
        price_score=parse_number(record.get("PRICE_SCORE")),
        cover_score=parse_number(record.get("COVER_SCORE")),
        finder_score=parse_number(record.get("FINDER_SCORE")),
        storm_score=sub_scores[Feature.STORM],
        windscreen_score=sub_scores[Feature.WINDSCREEN],
        personal_effects_score=sub_scores[Feature.PERSONAL_EFFECTS],
        accidental_damage_score=sub_scores[Feature.ACCIDENTAL_DAMAGE],
        new_car_replacement_score=sub_scores[Feature.NEW_CAR_REPLACEMENT],
        average_feature_score=average_feature_score,
        dynamic_finder_score=dynamic_finder_score(price_rating, average_feature_score, criteria.priority),
        features=feature_details(record),
    )


def rank_products(
    records: Sequence[RawProductRecord],
    criteria: CustomerCriteria,
    *,
    sort_by: SortKey | None = None,
    other_gender_as: Gender = Gender.FEMALE,
) -> list[ProcessedProduct]:
    """Score, filter and order a catalog for one customer. Records are never mutated."""
    t0 = time.monotonic()

    # ---- Step 1: Which premium column applies to this customer ----
    price_column = resolve_price_column(
        criteria.region, criteria.gender, criteria.age_bracket, other_gender_as=other_gender_as
    )

    # ---- Step 2: Rating tables over the FULL candidate set (fresh per query) ----
    price_ratings = convert_price_to_rating(parse_number(r.get(price_column)) for r in records)
    feature_maps = build_feature_score_maps(records)

    # ---- Step 3: Score every product; unpriced products drop out here ----
    processed = [
        p
        for p in (
            process_product(
                r,
                price_column=price_column,
                price_ratings=price_ratings,
                feature_maps=feature_maps,
                criteria=criteria,
            )
            for r in records
        )
        if p is not None
    ]

    # ---- Step 4: Must-have features, then ordering ----
    filtered = filter_by_features(processed, criteria.selected_features)
    ranked = sort_products(filtered, sort_by or default_sort_key(criteria.priority))

    logger.debug(
        "Ranked %d/%d products (column=%s, priced=%d, features=%s) in %.1fms",
        len(ranked),
        len(records),
        price_column,
        len(processed),
        ",".join(sorted(f.value for f in criteria.selected_features)) or "-",
        (time.monotonic() - t0) * 1000,
    )
    return ranked


def summarize(products: Sequence[ProcessedProduct]) -> QuoteSummary:
    """Average price rating and feature score across a ranked list (0.0 when empty)."""
    total = len(products)
    if total == 0:
        return QuoteSummary(total_products=0, average_price_rating=0.0, average_feature_score=0.0)
    return QuoteSummary(
        total_products=total,
        average_price_rating=round1(sum(p.price_rating for p in products) / total),
        average_feature_score=round1(sum(p.average_feature_score for p in products) / total),
    )
