"""
CoverFinder CLI entrypoint.

This CLI is intended for quick local comparisons and catalog debugging without the API.
It delegates all scoring to `coverfinder.recommender.compare.rank_products`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from coverfinder.catalog.loader import load_records
from coverfinder.config.settings import get_settings
from coverfinder.core.logging import configure_logging
from coverfinder.domain.models import AgeBracket, CustomerCriteria, Feature, Gender, Priority, Region, SortKey
from coverfinder.presentation.sponsorship import display_order, flag_sponsored
from coverfinder.quality.report import build_quality_report
from coverfinder.recommender.compare import rank_products
from coverfinder.scoring.explain import one_line_summary, sub_score_summary


def _catalog_records(args: argparse.Namespace):
    settings = get_settings()
    path = args.catalog or settings.catalog.path
    return load_records(path, active_only=settings.catalog.active_only)


def _cmd_compare(args: argparse.Namespace) -> int:
    """Handle the `compare` subcommand."""
    settings = get_settings()

    criteria = CustomerCriteria(
        region=Region(args.state),
        gender=Gender(args.gender),
        age_bracket=AgeBracket(args.age),
        priority=Priority(args.priority),
        selected_features=frozenset(Feature(f) for f in args.feature),
    )
    products = rank_products(
        _catalog_records(args),
        criteria,
        sort_by=SortKey(args.sort) if args.sort else None,
        other_gender_as=Gender(settings.pricing.other_gender_as),
    )
    products = flag_sponsored(products, settings.sponsorship.names)
    # An explicit --sort keeps the engine order as requested.
    if not args.sort and not args.no_sponsored_first:
        products = display_order(products)
    shown = products[: int(args.limit)]

    if args.json:
        payload = {
            "criteria": criteria.model_dump(mode="json", by_alias=True),
            "total_found": len(products),
            "products": [p.model_dump(mode="json", by_alias=True) for p in shown],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"{len(products)} products found for {criteria.region.value} / {criteria.gender.value} / {criteria.age_bracket.value}")
    for i, product in enumerate(shown, start=1):
        badge = " [sponsored]" if product.sponsored else ""
        print(f"{i:>2}. {product.name}{badge}  {one_line_summary(product)}")
        print(f"    - {sub_score_summary(product)}")
    return 0


def _cmd_quality_report(args: argparse.Namespace) -> int:
    report = build_quality_report(_catalog_records(args))
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CoverFinder CLI."""
    parser = argparse.ArgumentParser(prog="coverfinder")
    sub = parser.add_subparsers(dest="command", required=True)

    cmp_ = sub.add_parser("compare", help="Rank insurance products for a customer profile.")
    cmp_.add_argument("--state", required=True, choices=[r.value for r in Region])
    cmp_.add_argument("--age", required=True, choices=[a.value for a in AgeBracket], help='e.g. "< 25 years"')
    cmp_.add_argument("--gender", required=True, choices=[g.value for g in Gender])
    cmp_.add_argument("--priority", default=Priority.PRICE.value, choices=[p.value for p in Priority])
    cmp_.add_argument(
        "--feature",
        action="append",
        default=[],
        choices=[f.value for f in Feature],
        help="Repeatable. Products must offer every selected feature.",
    )
    cmp_.add_argument("--sort", default=None, choices=[s.value for s in SortKey], help="Defaults from priority.")
    cmp_.add_argument("--limit", type=int, default=10)
    cmp_.add_argument("--catalog", type=str, default=None, help="Catalog CSV (defaults to settings).")
    cmp_.add_argument(
        "--no-sponsored-first",
        action="store_true",
        help="Keep pure engine order instead of listing sponsored products first (implied by --sort).",
    )
    cmp_.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    cmp_.set_defaults(func=_cmd_compare)

    q = sub.add_parser("quality-report", help="Offline data quality report for the catalog.")
    q.add_argument("--catalog", type=str, default=None)
    q.set_defaults(func=_cmd_quality_report)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m coverfinder.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
