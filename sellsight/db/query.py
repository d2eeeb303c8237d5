"""
Storage-independent description of a product listing query.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# API sort keys mapped to stored column names
SORTABLE_FIELDS = {
    "sales": "sales",
    "price": "price",
    "rating": "rating",
    "title": "title",
    "lastUpdate": "last_update",
    "last_update": "last_update",
    "trendScore": "trend_score",
    "trend_score": "trend_score",
    "downloads": "downloads",
    "reviews": "reviews",
}


@dataclass
class ProductQuery:
    category: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: Optional[float] = None
    updated_since: Optional[datetime] = None
    sort_by: str = "sales"
    descending: bool = True
    offset: int = 0
    limit: Optional[int] = None
