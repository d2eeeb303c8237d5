# sellsight/schemas/product.py

"""
Pydantic schemas for Product API
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import Field

from sellsight.schemas.base import CamelModel


class PricePoint(CamelModel):
    """A price point for a specific date"""
    date: datetime
    price: float = Field(..., ge=0)


class Product(CamelModel):
    """A catalog product as stored and served by the API"""
    product_id: str = Field(..., description="Unique product identifier")
    title: str
    category: str
    price: float = Field(..., ge=0, description="Product price in USD")
    sales: int = Field(..., ge=0, description="Total number of sales")
    rating: float = Field(..., ge=0, le=5, description="Product rating (0-5)")
    last_update: datetime
    tags: List[str] = []
    description: Optional[str] = None
    author: Optional[str] = None
    thumbnail: Optional[str] = None
    live_preview: Optional[str] = None
    downloads: Optional[int] = Field(None, ge=0)
    reviews: Optional[int] = Field(None, ge=0)
    created_date: Optional[datetime] = None
    last_sale: Optional[datetime] = None
    price_history: List[PricePoint] = []
    scraped_at: Optional[datetime] = None
    analysis_score: Optional[float] = None
    trend_score: Optional[float] = None


class ScrapedProduct(CamelModel):
    """
    Shape of a product record extracted from a scraped marketplace page.
    Published as JSON schema so extraction tools know what to produce.
    """
    id: str = Field(..., description="Unique product identifier")
    title: str = Field(..., description="Product title/name")
    category: str = Field(..., description="Product category")
    price: float = Field(..., ge=0, description="Product price in USD")
    sales: int = Field(..., ge=0, description="Total number of sales")
    rating: float = Field(..., ge=0, le=5, description="Product rating (0-5)")
    last_update: date = Field(..., description="Last update date (YYYY-MM-DD)")
    tags: Optional[List[str]] = Field(None, description="Product tags/keywords")
    description: Optional[str] = Field(None, description="Product description")
    author: Optional[str] = Field(None, description="Product author/creator")
    thumbnail: Optional[str] = Field(None, description="Product thumbnail URL")
    live_preview: Optional[str] = Field(None, description="Live preview URL")
    downloads: Optional[int] = Field(None, ge=0, description="Number of downloads")
    reviews: Optional[int] = Field(None, ge=0, description="Number of reviews")
    created_date: Optional[date] = Field(None, description="Product creation date")
    last_sale: Optional[date] = Field(None, description="Last sale date")
    price_history: Optional[List[PricePoint]] = None


# --- Product listing ---
class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class PriceRange(CamelModel):
    min: Optional[float] = None
    max: Optional[float] = None


class ProductFilters(CamelModel):
    """Filter options the front end can offer for the current catalog"""
    categories: List[str]
    price_range: PriceRange


class ProductListResponse(CamelModel):
    """Response for the products listing endpoint"""
    products: List[Product]
    pagination: Pagination
    filters: ProductFilters


class ProductSchemaResponse(CamelModel):
    """Response for the product JSON schema endpoint"""
    schema_: Dict = Field(..., alias="schema")
    description: str
    version: str
