import pytest
from starlette.testclient import TestClient

import coverfinder.api.routes as routes
from coverfinder.api.app import app
from coverfinder.catalog.loader import ProductCatalog
from coverfinder.core.rate_limit import FixedWindowRateLimiter


@pytest.fixture
def client(monkeypatch, record_factory):
    # Keep API tests offline and deterministic: inject an in-memory catalog.
    records = [
        record_factory("p1", 780, name="Coles Comprehensive", storm="Yes", personal_effects="500"),
        record_factory("p2", 850, name="Budget Gold", windscreen="Yes", storm="Yes", personal_effects="1000"),
        record_factory("p3", 920, name="Plain Cover"),
        record_factory("p4", 0, name="Unpriced Cover", storm="Yes"),
    ]
    monkeypatch.setattr(routes, "_catalog", lambda: ProductCatalog.from_records(records))
    monkeypatch.setattr(routes, "_rate_limiter", lambda: None)
    with TestClient(app) as c:
        yield c


def _compare_payload(**overrides):
    payload = {"state": "NSW", "ageGroup": "< 25 years", "gender": "Male", "priority": "Price"}
    payload.update(overrides)
    return payload


def test_compare_returns_ranked_products(client):
    resp = client.post("/api/insurance/compare", json=_compare_payload())
    assert resp.status_code == 200

    data = resp.json()["data"]
    assert data["totalFound"] == 3
    assert [p["id"] for p in data["products"]] == ["p1", "p2", "p3"]
    assert data["topPick"]["id"] == "p1"
    assert data["topPick"]["priceRating"] == 9.9
    assert data["criteria"]["selectedFeatures"] == []
    assert data["comparisonUrl"].startswith("/compare?state=NSW")


def test_compare_flags_sponsored_products(client):
    data = client.post("/api/insurance/compare", json=_compare_payload()).json()["data"]

    assert data["sponsoredProducts"] == [
        {
            "name": "Coles Comprehensive",
            "redirectUrl": "https://www.coles.com.au/insurance",
            "dynamicFinderScore": data["topPick"]["dynamicFinderScore"],
        }
    ]
    assert data["topPick"]["sponsored"] is True


def test_compare_filters_on_selected_features(client):
    payload = _compare_payload(priority="Features", selectedFeatures=["STORM", "WINDSCREEN", "STORM"])
    data = client.post("/api/insurance/compare", json=payload).json()["data"]

    assert [p["id"] for p in data["products"]] == ["p2"]
    assert data["criteria"]["selectedFeatures"] == ["STORM", "WINDSCREEN"]


def test_compare_rejects_unknown_feature(client):
    resp = client.post("/api/insurance/compare", json=_compare_payload(selectedFeatures=["SUNROOF"]))
    assert resp.status_code == 422


def test_compare_requires_priority(client):
    payload = _compare_payload()
    payload.pop("priority")
    assert client.post("/api/insurance/compare", json=payload).status_code == 422


def test_quick_quote_returns_averages(client):
    resp = client.post("/api/insurance/quick-quote", json={"state": "NSW", "ageGroup": "< 25 years", "gender": "Male"})
    assert resp.status_code == 200

    data = resp.json()["data"]
    assert data["totalProducts"] == 3
    assert data["averagePriceRating"] == 5.5
    assert len(data["recommendedProducts"]) == 3


def test_product_details_with_alternatives(client):
    resp = client.get(
        "/api/insurance/product/p2", params={"state": "NSW", "ageGroup": "< 25 years", "gender": "Male"}
    )
    assert resp.status_code == 200

    data = resp.json()["data"]
    assert data["product"]["id"] == "p2"
    assert [p["id"] for p in data["alternatives"]] == ["p1", "p3"]
    assert data["isSponsored"] is False
    assert data["redirectUrl"] is None


def test_product_details_not_found(client):
    resp = client.get(
        "/api/insurance/product/p4", params={"state": "NSW", "ageGroup": "< 25 years", "gender": "Male"}
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "NOT_FOUND"


def test_catalog_quality_and_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "products": 4}
    report = client.get("/api/catalog/quality").json()
    assert report["product_count"] == 4


def test_rate_limit_returns_429(client, monkeypatch):
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)
    monkeypatch.setattr(routes, "_rate_limiter", lambda: limiter)

    assert client.post("/api/insurance/compare", json=_compare_payload()).status_code == 200
    resp = client.post("/api/insurance/compare", json=_compare_payload())
    assert resp.status_code == 429
    assert resp.json()["detail"]["code"] == "RATE_LIMITED"


def test_missing_catalog_is_internal_error(monkeypatch, tmp_path):
    monkeypatch.setattr(routes, "_catalog", lambda: ProductCatalog(tmp_path / "missing.csv"))
    monkeypatch.setattr(routes, "_rate_limiter", lambda: None)
    with TestClient(app) as c:
        resp = c.post("/api/insurance/compare", json=_compare_payload())
    assert resp.status_code == 500
    assert resp.json()["detail"]["code"] == "INTERNAL_ERROR"


@pytest.mark.parametrize("path", ["/api/health", "/api/catalog/quality"])
def test_missing_catalog_is_internal_error_on_status_routes(monkeypatch, tmp_path, path):
    monkeypatch.setattr(routes, "_catalog", lambda: ProductCatalog(tmp_path / "missing.csv"))
    monkeypatch.setattr(routes, "_rate_limiter", lambda: None)
    with TestClient(app) as c:
        resp = c.get(path)
    assert resp.status_code == 500
    assert resp.json()["detail"]["code"] == "INTERNAL_ERROR"
