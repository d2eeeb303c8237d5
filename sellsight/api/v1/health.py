# sellsight/api/v1/health.py

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from sellsight.config import settings

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health", summary="Health check")
async def health_check():
    """A public health check endpoint to confirm the API is running."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "version": settings.API_VERSION,
        "dataSource": settings.DATA_SOURCE,
    }
