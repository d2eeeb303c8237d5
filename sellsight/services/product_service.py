"""
Product listing and analysis-insight queries.
"""
import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sellsight.db.query import ProductQuery, SORTABLE_FIELDS
from sellsight.db.repository import ProductRepository
from sellsight.services.analysis_service import AnalysisService, average

logger = logging.getLogger(__name__)

# The listing takes the dashboard filter label; insights and export take "all"
LISTING_ALL_CATEGORIES = {"", "All Categories"}
ALL_CATEGORIES = {"", "all", "All Categories"}
RECENT_WINDOW = timedelta(days=365)
TIMEFRAME_PATTERN = re.compile(r"^(\d+)d$")


def build_product_query(
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    sort_by: str = "sales",
    sort_order: str = "desc",
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    min_rating: Optional[float] = None,
    show_recent: bool = False,
    now: Optional[datetime] = None,
) -> ProductQuery:
    """
    Translate listing parameters into a ProductQuery.

    Raises:
        ValueError: for unknown sort fields, sort orders or bad page bounds
    """
    if sort_by not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{sort_by}'")
    if sort_order not in ("asc", "desc"):
        raise ValueError("sortOrder must be 'asc' or 'desc'")
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive")

    now = now or datetime.now(timezone.utc)
    search = search.strip() if search else None

    return ProductQuery(
        category=None if category is None or category in LISTING_ALL_CATEGORIES else category,
        search=search or None,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        updated_since=now - RECENT_WINDOW if show_recent else None,
        sort_by=sort_by,
        descending=sort_order == "desc",
        offset=(page - 1) * limit,
        limit=limit,
    )


def list_products(repo: ProductRepository, query: ProductQuery) -> Dict[str, Any]:
    products, total = repo.find_products(query)
    page = query.offset // query.limit + 1
    min_price, max_price = repo.price_range()

    logger.info(f"Found {total} products, returning page {page}")
    return {
        "products": products,
        "pagination": {
            "page": page,
            "limit": query.limit,
            "total": total,
            "pages": math.ceil(total / query.limit),
        },
        "filters": {
            "categories": repo.distinct_categories(),
            "price_range": {"min": min_price, "max": max_price},
        },
    }


def parse_timeframe(timeframe: str) -> Optional[timedelta]:
    """'30d' -> 30 days, 'all' -> None."""
    if timeframe == "all":
        return None
    match = TIMEFRAME_PATTERN.match(timeframe)
    if not match:
        raise ValueError(f"Invalid timeframe '{timeframe}', expected e.g. '30d' or 'all'")
    return timedelta(days=int(match.group(1)))


def get_insights(
    repo: ProductRepository,
    category: str = "all",
    timeframe: str = "30d",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    window = parse_timeframe(timeframe)
    now = now or datetime.now(timezone.utc)

    query = ProductQuery(
        category=None if category in ALL_CATEGORIES else category,
        updated_since=now - window if window is not None else None,
    )
    products, total = repo.find_products(query)

    return {
        "total_products": total,
        "avg_price": average(products, "price"),
        "avg_sales": average(products, "sales"),
        "avg_rating": average(products, "rating"),
        "top_performers": AnalysisService.top_performers(products),
        "trending_categories": AnalysisService.get_category_insights(products),
        "recommendations": AnalysisService.generate_recommendations(products),
    }
