"""
==============================================================================
Catalog Statistics Module
==============================================================================

Summary metrics derived from one store snapshot.

Output Structure:
----------------
{
  "totalProducts": 3,
  "inStockProducts": 2,
  "outOfStockProducts": 1,
  "categoryBreakdown": {"electronics": 2, "kitchen": 1},
  "priceStatistics": {"min": 50, "max": 1200, "average": 683.33}
}

==============================================================================
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

from .models import Product


def price_statistics(prices: List[float]) -> Dict[str, float]:
    """Min, max and mean rounded to 2 places; all zero when empty."""
    if not prices:
        return {"min": 0, "max": 0, "average": 0}

    return {
        "min": round(min(prices), 2),
        "max": round(max(prices), 2),
        "average": round(sum(prices) / len(prices), 2),
    }


def compute_stats(products: List[Product]) -> Dict[str, Any]:
    """
    Aggregate catalog statistics.

    Out-of-stock is derived as total minus in-stock so the two counts
    always add up to the total.
    """
    total = len(products)
    in_stock = sum(1 for p in products if p.in_stock)

    return {
        "totalProducts": total,
        "inStockProducts": in_stock,
        "outOfStockProducts": total - in_stock,
        "categoryBreakdown": dict(Counter(p.category for p in products)),
        "priceStatistics": price_statistics([p.price for p in products]),
    }
