"""
Analysis service: trend scores, category aggregates, market growth and
mock sales-trend series computed over in-memory product lists.
"""
import logging
import math
import random
from collections import OrderedDict
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sellsight.schemas.product import Product

logger = logging.getLogger(__name__)

# Trend score weights
SALES_WEIGHT = 0.4
RATING_WEIGHT = 0.3
RECENCY_WEIGHT = 0.3
SALES_NORMALIZER = 10000
RECENCY_WINDOW_SECONDS = 365 * 24 * 60 * 60

SALES_TREND_START = 12000
SALES_TREND_FLOOR = 8000


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.345 -> 2.35), unlike round()'s banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def average(products: Sequence[Product], field: str) -> float:
    """Mean of `field` over products; 0 for an empty list."""
    if not products:
        return 0.0
    return sum(getattr(p, field) for p in products) / len(products)


def _month_labels(months: int, today: date) -> List[str]:
    labels = []
    year, month = today.year, today.month
    for _ in range(months):
        labels.append(date(year, month, 1).strftime("%b %Y"))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(labels))


class AnalysisService:
    """
    Stateless aggregate computations used by the dashboard, insights and
    scraper endpoints.
    """

    @staticmethod
    def calculate_trend_score(product: Product, now: Optional[datetime] = None) -> float:
        now = now or datetime.now(timezone.utc)
        sales_component = min(product.sales / SALES_NORMALIZER, 1) * SALES_WEIGHT
        rating_component = (product.rating / 5) * RATING_WEIGHT
        age_seconds = (now - product.last_update).total_seconds()
        recency = min(1.0, max(0.0, 1 - age_seconds / RECENCY_WINDOW_SECONDS))
        recency_component = recency * RECENCY_WEIGHT

        return round_half_up(sales_component + rating_component + recency_component, 2)

    @staticmethod
    def calculate_market_growth(products: Sequence[Product]) -> Dict[str, float]:
        if not products:
            return {"growth_rate": 0.0, "quarter_growth": 0.0}

        total_sales = sum(p.sales for p in products)
        avg_rating = average(products, "rating")
        return {
            "growth_rate": round_half_up(total_sales / 1_000_000, 2),
            "quarter_growth": round_half_up((avg_rating - 3.5) * 2, 2),
        }

    @staticmethod
    def get_category_insights(products: Sequence[Product]) -> Dict[str, Dict[str, Any]]:
        """
        Per-category totals and averages, keyed by category name in order of
        first appearance.
        """
        totals: "OrderedDict[str, Dict[str, float]]" = OrderedDict()
        for product in products:
            stats = totals.setdefault(
                product.category,
                {"total_sales": 0, "count": 0, "price_sum": 0.0, "rating_sum": 0.0},
            )
            stats["total_sales"] += product.sales
            stats["count"] += 1
            stats["price_sum"] += product.price
            stats["rating_sum"] += product.rating

        insights: Dict[str, Dict[str, Any]] = OrderedDict()
        for category, stats in totals.items():
            count = stats["count"]
            insights[category] = {
                "total_sales": stats["total_sales"],
                "count": count,
                "avg_sales": int(round_half_up(stats["total_sales"] / count)),
                "avg_price": round_half_up(stats["price_sum"] / count, 2),
                "avg_rating": round_half_up(stats["rating_sum"] / count, 1),
            }
        return insights

    @staticmethod
    def category_sales(insights: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Bar-chart rows sorted by average sales, highest first."""
        rows = [
            {"category": category, "avg_sales": stats["avg_sales"]}
            for category, stats in insights.items()
        ]
        return sorted(rows, key=lambda row: row["avg_sales"], reverse=True)

    @staticmethod
    def generate_sales_trend(
        months: int = 12,
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Mock monthly sales series: a random walk that never drops below the floor."""
        rng = rng or random.Random()
        today = today or datetime.now(timezone.utc).date()

        sales = SALES_TREND_START
        series = []
        for label in _month_labels(months, today):
            sales += rng.randrange(-500, 1500)
            series.append({"date": label, "sales": max(sales, SALES_TREND_FLOOR)})
        return series

    @staticmethod
    def top_performers(products: Sequence[Product], limit: int = 5) -> List[Product]:
        return sorted(products, key=lambda p: p.sales * p.rating, reverse=True)[:limit]

    @staticmethod
    def generate_recommendations(
        products: Sequence[Product],
        rng: Optional[random.Random] = None,
        limit: int = 3,
    ) -> List[Dict[str, Any]]:
        """Mock recommendations for the strongest categories by avg sales x avg rating."""
        rng = rng or random.Random()
        insights = AnalysisService.get_category_insights(products)
        ranked = sorted(
            insights.items(),
            key=lambda item: item[1]["avg_sales"] * item[1]["avg_rating"],
            reverse=True,
        )[:limit]

        recommendations = []
        for category, stats in ranked:
            avg_price = stats["avg_price"]
            recommendations.append({
                "category": category,
                "confidence": rng.randint(70, 100),
                "reason": f"High performance with {stats['avg_sales']} avg sales and {stats['avg_rating']} rating",
                "suggested_price_range": {
                    "min": int(round_half_up(avg_price * 0.8)),
                    "max": int(round_half_up(avg_price * 1.2)),
                },
                "market_gap": f"Consider products under ${int(round_half_up(avg_price * 0.5))}",
            })
        return recommendations
