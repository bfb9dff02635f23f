"""
Offline catalog quality report.

Goal: a deterministic view of "is the loaded catalog complete and sane?"
Used by:
- CLI debugging (`coverfinder quality-report`)
- API status endpoint (`GET /api/catalog/quality`)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from coverfinder.domain.models import Feature, RawProductRecord
from coverfinder.features.subscores import FEATURE_COLUMNS, is_numeric_text, parse_number
from coverfinder.scoring.price_column import all_price_columns


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def catalog_issues(records: Sequence[RawProductRecord]) -> list[Issue]:
    issues: list[Issue] = []
    if not records:
        return [Issue(severity="error", code="CATALOG_EMPTY", message="Catalog has no usable rows.")]

    ids = Counter(r.get("ID", "") for r in records)
    dup = sorted(i for i, n in ids.items() if n > 1 and i)
    if dup:
        issues.append(
            Issue(
                severity="error",
                code="CATALOG_DUPLICATE_ID",
                message="Duplicate product ids in catalog.",
                count=len(dup),
                sample=dup[:8],
            )
        )

    missing_id = [r.get("NAME", "") or "<unnamed>" for r in records if not r.get("ID")]
    if missing_id:
        issues.append(
            Issue(
                severity="warning",
                code="CATALOG_MISSING_ID",
                message="Some products are missing `ID`.",
                count=len(missing_id),
                sample=missing_id[:8],
            )
        )

    for column in all_price_columns():
        unpriced = [r.get("ID", "") for r in records if parse_number(r.get(column)) <= 0]
        if len(unpriced) == len(records):
            issues.append(
                Issue(
                    severity="error",
                    code="PRICE_COLUMN_EMPTY",
                    message=f"No product has a price in `{column}`.",
                    count=len(unpriced),
                )
            )
        elif unpriced:
            issues.append(
                Issue(
                    severity="info",
                    code="PRICE_COLUMN_GAPS",
                    message=f"Some products have no price in `{column}`; they are excluded for that profile.",
                    count=len(unpriced),
                    sample=unpriced[:8],
                )
            )

    effects_column = FEATURE_COLUMNS[Feature.PERSONAL_EFFECTS]
    unreadable = [r.get("ID", "") for r in records if not is_numeric_text(r.get(effects_column, ""))]
    if unreadable:
        issues.append(
            Issue(
                severity="warning",
                code="PERSONAL_EFFECTS_UNREADABLE",
                message="Some Personal Effects amounts are not numbers; they score 0.",
                count=len(unreadable),
                sample=unreadable[:8],
            )
        )
    return issues


def build_quality_report(records: Sequence[RawProductRecord]) -> dict[str, Any]:
    """Summarize catalog completeness: counts, price coverage and issues."""
    issues = catalog_issues(records)
    coverage = {
        column: sum(1 for r in records if parse_number(r.get(column)) > 0) for column in all_price_columns()
    }
    severities = Counter(i.severity for i in issues)
    return {
        "product_count": len(records),
        "price_coverage": coverage,
        "issue_counts": {s: severities.get(s, 0) for s in ("error", "warning", "info")},
        "issues": [i.as_dict() for i in issues],
    }
