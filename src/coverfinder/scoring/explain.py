"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of ranked products.
"""

from __future__ import annotations

from coverfinder.domain.models import ALL_FEATURES, ProcessedProduct


def one_line_summary(product: ProcessedProduct) -> str:
    """Render a compact single-line summary of a product's scores."""
    parts = [
        f"finder={product.dynamic_finder_score:.1f}",
        f"price={product.price:.2f} (rating {product.price_rating:.1f})",
        f"features={product.average_feature_score:.1f}",
    ]
    return " | ".join(parts)


def sub_score_summary(product: ProcessedProduct) -> str:
    """Render the five feature sub-scores, e.g. `STORM=10.0 WINDSCREEN=0.0 ...`."""
    return " ".join(f"{f.value}={product.sub_score(f):.1f}" for f in ALL_FEATURES)
