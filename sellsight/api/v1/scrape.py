# sellsight/api/v1/scrape.py

import logging
import math
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from sellsight.api.deps import get_repository
from sellsight.db.repository import ProductRepository, RepositoryError
from sellsight.schemas.scrape import (
    ProcessHtmlRequest,
    ProcessHtmlResponse,
    ScrapeLog,
    ScrapeLogsResponse,
    StartScrapeRequest,
    StartScrapeResponse,
)
from sellsight.services.scraper_service import ScraperService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/start", response_model=StartScrapeResponse, summary="Start a scrape session")
def start_scrape(
    background_tasks: BackgroundTasks,
    body: Optional[StartScrapeRequest] = None,
    repo: ProductRepository = Depends(get_repository),
):
    """
    Schedule a scrape session and return immediately. Poll
    /scrape/status/{scrapeId} with the returned id to follow its progress.
    """
    options = body.options if body else {}
    try:
        scrape_log = ScraperService.open_scrape_session(repo, options)
    except RepositoryError as e:
        logger.error(f"Error starting scrape: {e}")
        raise HTTPException(status_code=500, detail="Failed to start scraping")

    background_tasks.add_task(
        ScraperService.run_scrape_session_in_background, repo, scrape_log.scrape_id
    )
    return {
        "message": "Scraping started",
        "scrape_id": scrape_log.scrape_id,
        "estimated_time": "5-10 minutes",
    }


@router.post("/process-html", response_model=ProcessHtmlResponse, summary="Process raw HTML")
def process_html(body: ProcessHtmlRequest, repo: ProductRepository = Depends(get_repository)):
    """
    Extract products from scraped HTML and upsert them into the catalog.
    """
    if not body.html_data:
        raise HTTPException(status_code=400, detail="HTML data is required")

    logger.info(f"Processing HTML data for scrape: {body.scrape_id}")
    try:
        result = ScraperService.process_raw_html(body.html_data, body.scrape_id)
        ScraperService.upsert_with_trend_scores(repo, result["products"])
    except RepositoryError as e:
        logger.error(f"Error processing HTML: {e}")
        raise HTTPException(status_code=500, detail="Failed to process HTML data")

    return {
        "message": "HTML processed successfully",
        "products_extracted": len(result["products"]),
        "processing_time": result["processing_time"],
        "errors": result["errors"],
    }


@router.get("/status/{scrape_id}", response_model=ScrapeLog, summary="Get scrape status")
def get_scrape_status(scrape_id: str, repo: ProductRepository = Depends(get_repository)):
    try:
        scrape_log = repo.get_scrape_log(scrape_id)
    except RepositoryError as e:
        logger.error(f"Error fetching scrape status: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch scrape status")

    if scrape_log is None:
        raise HTTPException(status_code=404, detail="Scrape session not found")
    return scrape_log


@router.get("/logs", response_model=ScrapeLogsResponse, summary="List scrape logs")
def get_scrape_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repo: ProductRepository = Depends(get_repository),
):
    """Scrape sessions, newest first."""
    try:
        logs = repo.list_scrape_logs((page - 1) * limit, limit)
        total = repo.count_scrape_logs()
    except RepositoryError as e:
        logger.error(f"Error fetching scrape logs: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch scrape logs")

    return {
        "logs": logs,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }
