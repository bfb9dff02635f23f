import pytest

from coverfinder.catalog import loader
from coverfinder.catalog.loader import ProductCatalog, load_records

CSV_TEXT = """ID,ACTIVE,NAME,STORM,PERSONAL_EFFECTS,2025-AUFCI-NSW-M-20
p1,TRUE,Alpha Comprehensive,Yes,500,780
p2,FALSE,Retired Cover,Yes,0,650

p3,true,Gamma Cover, no ,,920
"""


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "insurance-data.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_load_records_keeps_active_rows_only(catalog_csv):
    records = load_records(catalog_csv)

    assert [r["ID"] for r in records] == ["p1", "p3"]
    # Values are stripped; empty cells stay empty strings.
    assert records[1]["STORM"] == "no"
    assert records[1]["PERSONAL_EFFECTS"] == ""


def test_load_records_can_include_inactive_rows(catalog_csv):
    records = load_records(catalog_csv, active_only=False)
    assert [r["ID"] for r in records] == ["p1", "p2", "p3"]


def test_loaded_records_are_read_only(catalog_csv):
    record = load_records(catalog_csv)[0]
    with pytest.raises(TypeError):
        record["NAME"] = "changed"  # type: ignore[index]


def test_missing_catalog_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_records(tmp_path / "nope.csv")


def test_product_catalog_loads_once(monkeypatch, catalog_csv):
    calls = []
    real = loader.load_records

    def counting(path, *, active_only=True):
        calls.append(path)
        return real(path, active_only=active_only)

    monkeypatch.setattr(loader, "load_records", counting)
    catalog = ProductCatalog(catalog_csv)

    first = catalog.records()
    second = catalog.records()

    assert first is second
    assert len(calls) == 1


def test_product_catalog_from_records_copies_input(record_factory):
    source = [dict(record_factory("a", 700))]
    catalog = ProductCatalog.from_records(source)
    source[0]["ID"] = "mutated"
    assert catalog.records()[0]["ID"] == "a"
