# sellsight/api/v1/dashboard.py

import logging

from fastapi import APIRouter, Depends, HTTPException

from sellsight.api.deps import get_repository
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.schemas.analytics import DashboardResponse
from sellsight.services.dashboard_service import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, summary="Get dashboard data")
def get_dashboard(repo: ProductRepository = Depends(get_repository)):
    """
    Overview numbers, average sales per category, the monthly sales trend and
    the five most recent scrape sessions. Seeds mock products on first use.
    """
    logger.info("Fetching dashboard data")
    try:
        data = build_dashboard(repo)
    except RepositoryError as e:
        logger.error(f"Error fetching dashboard data: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data")

    logger.info("Dashboard data fetched successfully")
    return data
