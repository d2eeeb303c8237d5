"""
Schemas package initialization
"""

from sellsight.schemas.product import Product, ScrapedProduct, ProductListResponse
from sellsight.schemas.scrape import ScrapeLog
from sellsight.schemas.idea import Idea

__all__ = [
    "Product",
    "ScrapedProduct",
    "ProductListResponse",
    "ScrapeLog",
    "Idea",
]
