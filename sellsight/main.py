# sellsight/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sellsight.api.deps import get_repository
from sellsight.api.v1 import analysis, dashboard, export, health, ideas, products, scrape
from sellsight.config import settings
from sellsight.logging_config import configure_logging
from sellsight.services.scraper_service import ScraperService

logger = logging.getLogger(__name__)

ENDPOINTS = [
    ("GET", "/api/health", "Health check"),
    ("GET", "/api/dashboard", "Dashboard data"),
    ("GET", "/api/products", "Products listing"),
    ("POST", "/api/scrape/start", "Start scraping"),
    ("POST", "/api/scrape/process-html", "Process raw HTML"),
    ("GET", "/api/scrape/status/{id}", "Get scrape status"),
    ("GET", "/api/scrape/logs", "Get scrape logs"),
    ("GET", "/api/analysis/insights", "Get analysis insights"),
    ("GET", "/api/export/products", "Export products data"),
    ("GET", "/api/schema/product", "Get product JSON schema"),
    ("GET", "/api/ideas", "Brainstorming ideas"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info(f"SellSight API starting (data source: {settings.DATA_SOURCE})")
    logger.info("Available endpoints:")
    for method, path, description in ENDPOINTS:
        logger.info(f"  {method:<5}{path} - {description}")

    if settings.SEED_ON_STARTUP:
        # A failed seed must not stop the API from serving
        try:
            ScraperService.seed_if_empty(get_repository())
        except Exception as e:
            logger.error(f"Error initializing mock data: {e}")

    yield

    logger.info("Shutting down gracefully")


app = FastAPI(
    title="SellSight API",
    description="Backend API for the SellSight market-analytics dashboard.",
    version=settings.API_VERSION,
    lifespan=lifespan,
)

# --- CORS (Cross-Origin Resource Sharing) ---
# The dashboard runs on a different origin than the API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    client_ip = request.client.host if request.client else "unknown"
    logger.info(
        f"{request.method} {request.url.path} ip={client_ip} "
        f"user_agent={request.headers.get('user-agent', '-')}"
    )
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def log_unknown_routes(request: Request, exc: StarletteHTTPException):
    # Matched routes carry their endpoint in the scope
    if exc.status_code == 404 and "endpoint" not in request.scope:
        logger.warning(f"404 - Route not found: {request.method} {request.url.path}")
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.is_development else "Something went wrong",
        },
    )


# --- API Routers ---
app.include_router(health.router, prefix="/api", tags=["Health Check"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])
app.include_router(products.router, prefix="/api", tags=["Products"])
app.include_router(scrape.router, prefix="/api/scrape", tags=["Scrape"])
app.include_router(analysis.router, prefix="/api/analysis", tags=["Analysis"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
app.include_router(ideas.router, prefix="/api/ideas", tags=["Ideas"])
