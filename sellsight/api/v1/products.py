# sellsight/api/v1/products.py

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sellsight.api.deps import get_repository
from sellsight.config import settings
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.schemas.product import ProductListResponse, ProductSchemaResponse, ScrapedProduct
from sellsight.services.product_service import build_product_query, list_products

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/products", response_model=ProductListResponse, summary="List products")
def get_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = None,
    sort_by: str = Query("sales", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    search: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    show_recent: bool = Query(False, alias="showRecent"),
    repo: ProductRepository = Depends(get_repository),
):
    """
    Filtered, sorted and paginated product catalog.

    - **category**: exact category, or "All Categories" for every category
    - **search**: case-insensitive match on title, description or tags
    - **showRecent**: only products updated within the last year
    """
    try:
        query = build_product_query(
            page=page,
            limit=limit,
            category=category,
            sort_by=sort_by,
            sort_order=sort_order,
            search=search,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            show_recent=show_recent,
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Invalid input parameter: {str(ve)}")

    logger.info(f"Fetching products with filters: {query}")
    try:
        return list_products(repo, query)
    except RepositoryError as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/schema/product", response_model=ProductSchemaResponse, summary="Get product JSON schema")
async def get_product_schema():
    """JSON schema that scraped product records are expected to follow."""
    return {
        "schema": ScrapedProduct.model_json_schema(by_alias=True),
        "description": "JSON schema for scraped product data",
        "version": settings.API_VERSION,
    }
