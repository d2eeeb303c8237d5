from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from sellsight.schemas.base import CamelModel
from sellsight.schemas.product import Pagination

ScrapeStatus = Literal["running", "completed", "failed"]


class ScrapeLog(CamelModel):
    """Tracking record of one scrape session."""
    scrape_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    status: ScrapeStatus = "running"
    products_scraped: int = 0
    errors: List[str] = []
    metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None


class ScrapeLogsResponse(CamelModel):
    logs: List[ScrapeLog]
    pagination: Pagination


class StartScrapeRequest(CamelModel):
    options: Dict[str, Any] = {}


class StartScrapeResponse(CamelModel):
    message: str
    scrape_id: str
    estimated_time: str


class ProcessHtmlRequest(CamelModel):
    html_data: Optional[str] = None
    scrape_id: Optional[str] = None


class ProcessHtmlResponse(CamelModel):
    message: str
    products_extracted: int
    processing_time: int = Field(..., description="Mock processing time in milliseconds")
    errors: List[str]
