"""
Insurance product catalog loader.

The catalog is a local CSV file (default: `data/insurance-data.csv`) with one row
per product and one column per attribute, all values as strings. Rows are frozen
into read-only mappings so the scoring engine can share them across requests
without any risk of mutation.
"""

from __future__ import annotations

import csv
import logging
import threading
from pathlib import Path
from types import MappingProxyType

from coverfinder.core.env import resolve_project_path
from coverfinder.domain.models import RawProductRecord

logger = logging.getLogger(__name__)


def _is_active(record: RawProductRecord) -> bool:
    return str(record.get("ACTIVE", "")).strip().upper() == "TRUE"


def load_records(path: str | Path, *, active_only: bool = True) -> tuple[RawProductRecord, ...]:
    """Read the catalog CSV into immutable string mappings."""
    resolved = resolve_project_path(path)
    records: list[RawProductRecord] = []
    with resolved.open(encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            values = {str(k).strip(): (v or "").strip() for k, v in row.items() if k is not None}
            if not any(values.values()):
                continue
            records.append(MappingProxyType(values))

    loaded = len(records)
    if active_only:
        records = [r for r in records if _is_active(r)]
    logger.info("Loaded %d catalog rows from %s (%d active)", loaded, resolved, len(records))
    return tuple(records)


class ProductCatalog:
    """Load-once handle over the catalog file.

    The first call to `records()` reads the file; later calls return the same
    immutable tuple.
    """

    def __init__(self, path: str | Path, *, active_only: bool = True) -> None:
        self.path = Path(path)
        self.active_only = active_only
        self._records: tuple[RawProductRecord, ...] | None = None
        self._lock = threading.Lock()

    def records(self) -> tuple[RawProductRecord, ...]:
        if self._records is None:
            with self._lock:
                if self._records is None:
                    self._records = load_records(self.path, active_only=self.active_only)
        return self._records

    @classmethod
    def from_records(cls, records: list[RawProductRecord] | tuple[RawProductRecord, ...]) -> "ProductCatalog":
        """Wrap an in-memory collection (tests, embedding callers)."""
        catalog = cls("<memory>")
        catalog._records = tuple(MappingProxyType(dict(r)) for r in records)
        return catalog
