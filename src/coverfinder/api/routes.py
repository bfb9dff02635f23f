"""
API routes.

Endpoints:
- POST `/api/insurance/compare`: full comparison for a customer profile.
- POST `/api/insurance/quick-quote`: top picks + averages, no feature selection.
- GET  `/api/insurance/product/{product_id}`: one product plus alternatives.
- GET  `/api/catalog/quality`: offline catalog quality report.
- GET  `/api/health`: liveness + loaded product count.

All scoring goes through `coverfinder.recommender.compare`; this module only
validates input, applies display policy (sponsorship, limits) and shapes JSON.
"""

from __future__ import annotations

import csv
import logging
from functools import lru_cache
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request

from coverfinder.catalog.loader import ProductCatalog
from coverfinder.config.settings import Settings, get_settings
from coverfinder.core.rate_limit import FixedWindowRateLimiter
from coverfinder.domain.models import (
    AgeBracket,
    CompareRequest,
    CustomerCriteria,
    Gender,
    ProcessedProduct,
    QuickQuoteRequest,
    RawProductRecord,
    Region,
    SortKey,
    ordered_features,
)
from coverfinder.presentation.sponsorship import flag_sponsored, sponsored_links
from coverfinder.quality.report import build_quality_report
from coverfinder.recommender.compare import rank_products, summarize

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _catalog() -> ProductCatalog:
    settings = get_settings()
    return ProductCatalog(settings.catalog.path, active_only=settings.catalog.active_only)


@lru_cache
def _rate_limiter() -> FixedWindowRateLimiter | None:
    limits = get_settings().api.rate_limit
    if not limits.enabled:
        return None
    return FixedWindowRateLimiter(max_requests=limits.max_requests, window_seconds=limits.window_seconds)


def enforce_rate_limit(request: Request) -> None:
    """Per-client request budget (keyed by client host)."""
    limiter = _rate_limiter()
    if limiter is None:
        return
    key = request.client.host if request.client else "unknown"
    if not limiter.try_acquire(key):
        raise HTTPException(
            status_code=429,
            detail={"code": "RATE_LIMITED", "message": "Too many requests from this client, please try again later."},
            headers={"Retry-After": str(int(limiter.retry_after(key)) + 1)},
        )


def _dump(product: ProcessedProduct) -> dict:
    return product.model_dump(mode="json", by_alias=True)


def _records() -> tuple[RawProductRecord, ...]:
    """Catalog rows, or a 500 INTERNAL_ERROR when the catalog cannot be loaded."""
    try:
        return _catalog().records()
    except (OSError, ValueError, csv.Error) as e:
        logger.exception("Catalog could not be loaded")
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": f"Catalog unavailable: {e}"},
        ) from e


def _ranked(criteria: CustomerCriteria, settings: Settings, *, sort_by: SortKey | None = None) -> list[ProcessedProduct]:
    """Run the shared engine and flag sponsored products for display."""
    records = _records()
    try:
        products = rank_products(
            records,
            criteria,
            sort_by=sort_by,
            other_gender_as=Gender(settings.pricing.other_gender_as),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    return flag_sponsored(products, settings.sponsorship.names)


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok", "products": len(_records())}


@router.post("/api/insurance/compare", dependencies=[Depends(enforce_rate_limit)])
def post_compare(request: CompareRequest) -> dict:
    """Rank the catalog for a customer profile and return the top products."""
    settings = get_settings()
    criteria = request.to_criteria()
    products = _ranked(criteria, settings)

    features = [f.value for f in ordered_features(criteria.selected_features)]
    comparison_url = "/compare?" + urlencode(
        {
            "state": criteria.region.value,
            "age": criteria.age_bracket.value,
            "gender": criteria.gender.value,
            "priority": criteria.priority.value,
            "features": ",".join(features),
        }
    )

    return {
        "success": True,
        "data": {
            "topPick": _dump(products[0]) if products else None,
            "products": [_dump(p) for p in products[: settings.api.compare_limit]],
            "totalFound": len(products),
            "criteria": {
                "state": criteria.region.value,
                "ageGroup": criteria.age_bracket.value,
                "gender": criteria.gender.value,
                "priority": criteria.priority.value,
                "selectedFeatures": features,
            },
            "sponsoredProducts": sponsored_links(products, settings.sponsorship.provider_urls),
            "comparisonUrl": comparison_url,
        },
    }


@router.post("/api/insurance/quick-quote", dependencies=[Depends(enforce_rate_limit)])
def post_quick_quote(request: QuickQuoteRequest) -> dict:
    """Top picks and catalog-wide averages for a profile (no feature filtering)."""
    settings = get_settings()
    products = _ranked(request.to_criteria(), settings)
    summary = summarize(products)
    return {
        "success": True,
        "data": {
            "recommendedProducts": [_dump(p) for p in products[: settings.api.quick_quote_limit]],
            **summary.model_dump(mode="json", by_alias=True),
        },
    }


@router.get("/api/insurance/product/{product_id}", dependencies=[Depends(enforce_rate_limit)])
def get_product(product_id: str, state: Region, ageGroup: AgeBracket, gender: Gender) -> dict:
    """One product scored for a profile, with the next best alternatives."""
    settings = get_settings()
    criteria = CustomerCriteria(region=state, gender=gender, age_bracket=ageGroup)
    products = _ranked(criteria, settings, sort_by=SortKey.FINDER_SCORE)

    product = next((p for p in products if p.id == product_id), None)
    if product is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": "Product not found"})

    alternatives = [p for p in products if p.id != product_id][: settings.api.alternatives_limit]
    return {
        "success": True,
        "data": {
            "product": _dump(product),
            "alternatives": [_dump(p) for p in alternatives],
            "redirectUrl": settings.sponsorship.provider_urls.get(product.name) if product.sponsored else None,
            "isSponsored": product.sponsored,
        },
    }


@router.get("/api/catalog/quality")
def get_catalog_quality() -> dict:
    """Return the offline catalog quality report."""
    return build_quality_report(_records())
