"""
Scraper service (mock implementation).

Scrape sessions regenerate a fixed-size batch of randomized products and
upsert them, tracking progress in a scrape log. Raw HTML processing returns
a mock extraction result; no page is fetched or parsed.
"""
import logging
import random
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sellsight.config import settings
from sellsight.db.repository import ProductRepository
from sellsight.schemas.product import Product
from sellsight.schemas.scrape import ScrapeLog
from sellsight.services.analysis_service import AnalysisService
from sellsight.services.mock_data import generate_mock_products

logger = logging.getLogger(__name__)


def new_scrape_id() -> str:
    """scrape-<epoch millis>-<suffix>; the suffix keeps same-millisecond sessions apart."""
    return f"scrape-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def _rng() -> random.Random:
    return random.Random(settings.MOCK_SEED)


class ScraperService:

    @staticmethod
    def with_trend_scores(products: Iterable[Product], now: Optional[datetime] = None) -> List[Product]:
        now = now or datetime.now(timezone.utc)
        return [
            product.model_copy(update={
                "trend_score": AnalysisService.calculate_trend_score(product, now),
                "scraped_at": now,
            })
            for product in products
        ]

    @staticmethod
    def upsert_with_trend_scores(repo: ProductRepository, products: Iterable[Product]) -> int:
        """Score and upsert each product; returns how many were written."""
        written = 0
        for product in ScraperService.with_trend_scores(products):
            repo.upsert_product(product)
            written += 1
        return written

    @staticmethod
    def process_raw_html(html_data: str, scrape_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Extract products from raw marketplace HTML.

        Extraction is mocked: the payload is only logged by size and a batch
        of generated products is returned in its place.
        """
        logger.info(f"Processing raw HTML data for scrape: {scrape_id} ({len(html_data)} chars)")
        rng = _rng()
        products = generate_mock_products(settings.MOCK_HTML_PRODUCT_COUNT, rng=rng)
        result = {
            "products": products,
            "total_found": len(products),
            "processing_time": rng.randrange(1000, 6000),
            "errors": [],
        }
        logger.info(f"Processed {result['total_found']} products in {result['processing_time']}ms")
        return result

    @staticmethod
    def open_scrape_session(
        repo: ProductRepository,
        options: Optional[Dict[str, Any]] = None,
        scrape_id: Optional[str] = None,
    ) -> ScrapeLog:
        """Record a new session as running so its id can be polled right away."""
        options = options or {}
        scrape_id = scrape_id or new_scrape_id()
        logger.info(f"Starting scrape session: {scrape_id} options={options}")
        return repo.create_scrape_log(ScrapeLog(
            scrape_id=scrape_id,
            start_time=datetime.now(timezone.utc),
            status="running",
            metadata=options,
        ))

    @staticmethod
    def execute_scrape_session(repo: ProductRepository, scrape_id: str) -> Dict[str, Any]:
        """
        Collect products for an opened session.

        The scrape log moves to completed, or to failed with the error message
        recorded, in which case the error is re-raised.
        """
        try:
            products = generate_mock_products(settings.MOCK_PRODUCT_COUNT, rng=_rng())
            scraped = ScraperService.upsert_with_trend_scores(repo, products)

            repo.update_scrape_log(scrape_id, {
                "end_time": datetime.now(timezone.utc),
                "status": "completed",
                "products_scraped": scraped,
            })
            logger.info(f"Scrape completed: {scrape_id}, products: {scraped}")
            return {"scrape_id": scrape_id, "products_scraped": scraped, "status": "completed"}

        except Exception as e:
            logger.error(f"Scrape failed: {scrape_id}: {e}")
            ScraperService._record_failure(repo, scrape_id, e)
            raise

    @staticmethod
    def _record_failure(repo: ProductRepository, scrape_id: str, error: Exception) -> None:
        # The caller re-raises the original error; a failing update must not replace it
        try:
            repo.update_scrape_log(scrape_id, {
                "end_time": datetime.now(timezone.utc),
                "status": "failed",
                "errors": [str(error)],
            })
        except Exception as update_error:
            logger.error(f"Could not mark scrape {scrape_id} as failed: {update_error}")

    @staticmethod
    def run_scrape_session(
        repo: ProductRepository,
        options: Optional[Dict[str, Any]] = None,
        scrape_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Open and execute one mock scrape session end to end."""
        scrape_id = scrape_id or new_scrape_id()
        try:
            ScraperService.open_scrape_session(repo, options, scrape_id)
        except Exception as e:
            logger.error(f"Scrape failed: {scrape_id}: {e}")
            raise
        return ScraperService.execute_scrape_session(repo, scrape_id)

    @staticmethod
    def run_scrape_session_in_background(repo: ProductRepository, scrape_id: str) -> None:
        """Background-task entry point for an opened session; failures are already on its log."""
        try:
            result = ScraperService.execute_scrape_session(repo, scrape_id)
            logger.info(f"Scrape completed successfully: {result}")
        except Exception as e:
            logger.error(f"Background scrape {scrape_id} failed: {e}")

    @staticmethod
    def seed_if_empty(repo: ProductRepository) -> int:
        """Insert a mock catalog when the store holds no products."""
        if repo.count_products() > 0:
            return 0
        logger.info("Database is empty, generating mock data...")
        products = ScraperService.with_trend_scores(
            generate_mock_products(settings.MOCK_PRODUCT_COUNT, rng=_rng())
        )
        inserted = repo.insert_products(products)
        logger.info(f"Generated {inserted} mock products")
        return inserted
