# sellsight/api/v1/analysis.py

import logging

from fastapi import APIRouter, Depends, HTTPException

from sellsight.api.deps import get_repository
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.schemas.analytics import InsightsResponse
from sellsight.services.product_service import get_insights

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/insights", response_model=InsightsResponse, summary="Get analysis insights")
def get_analysis_insights(
    category: str = "all",
    timeframe: str = "30d",
    repo: ProductRepository = Depends(get_repository),
):
    """
    Averages, top performers, per-category statistics and recommendations.

    - **category**: category name or "all"
    - **timeframe**: only products updated in the last N days ("30d"), or "all"
    """
    logger.info(f"Fetching analysis insights for category: {category}, timeframe: {timeframe}")
    try:
        return get_insights(repo, category=category, timeframe=timeframe)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Invalid input parameter: {str(ve)}")
    except RepositoryError as e:
        logger.error(f"Error fetching analysis insights: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch analysis insights")
