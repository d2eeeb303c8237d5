# sellsight/schemas/analytics.py

from datetime import datetime
from typing import Dict, List

from pydantic import Field

from sellsight.schemas.base import CamelModel
from sellsight.schemas.product import Product
from sellsight.schemas.scrape import ScrapeLog


class CategoryInsight(CamelModel):
    total_sales: int = Field(..., description="Sum of sales across the category")
    count: int = Field(..., description="Number of products in this category")
    avg_sales: int = Field(..., description="Average sales, rounded to a whole number")
    avg_price: float = Field(..., description="Average price, rounded to cents")
    avg_rating: float = Field(..., description="Average rating, rounded to one decimal")


class CategorySales(CamelModel):
    category: str
    avg_sales: int


class SalesTrendPoint(CamelModel):
    date: str = Field(..., description="Month label, e.g. 'Jan 2024'")
    sales: int


class Overview(CamelModel):
    total_products: int
    last_scrape_date: datetime
    avg_price: float
    market_growth: float
    quarter_growth: float


class DashboardResponse(CamelModel):
    overview: Overview
    category_sales: List[CategorySales]
    sales_trend: List[SalesTrendPoint]
    recent_activity: List[ScrapeLog]


class SuggestedPriceRange(CamelModel):
    min: int
    max: int


class Recommendation(CamelModel):
    category: str
    confidence: int = Field(..., ge=70, le=100, description="Confidence percentage")
    reason: str
    suggested_price_range: SuggestedPriceRange
    market_gap: str


class InsightsResponse(CamelModel):
    total_products: int
    avg_price: float
    avg_sales: float
    avg_rating: float
    top_performers: List[Product]
    trending_categories: Dict[str, CategoryInsight]
    recommendations: List[Recommendation]
