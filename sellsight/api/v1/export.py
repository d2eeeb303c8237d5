# sellsight/api/v1/export.py

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from sellsight.api.deps import get_repository
from sellsight.db.query import ProductQuery
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.services.export_service import products_to_csv, products_to_records
from sellsight.services.product_service import ALL_CATEGORIES

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/products", summary="Export products")
def export_products(
    format: Literal["json", "csv"] = "json",
    category: str = "all",
    repo: ProductRepository = Depends(get_repository),
):
    """Download the catalog, optionally restricted to one category, as JSON or CSV."""
    query = ProductQuery(category=None if category in ALL_CATEGORIES else category)
    try:
        products, _ = repo.find_products(query)
    except RepositoryError as e:
        logger.error(f"Error exporting products: {e}")
        raise HTTPException(status_code=500, detail="Failed to export products")

    logger.info(f"Exporting {len(products)} products in {format} format")

    if format == "csv":
        return Response(
            content=products_to_csv(products),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=products.csv"},
        )
    return JSONResponse(
        content=products_to_records(products),
        headers={"Content-Disposition": "attachment; filename=products.json"},
    )
