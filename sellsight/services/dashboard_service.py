"""
Builds the dashboard payload: catalog overview, category sales, sales trend
and recent scrape activity.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from sellsight.db.query import ProductQuery
from sellsight.db.repository import ProductRepository
from sellsight.services.analysis_service import AnalysisService, average, round_half_up
from sellsight.services.scraper_service import ScraperService

logger = logging.getLogger(__name__)

DASHBOARD_PRODUCT_LIMIT = 1000
RECENT_ACTIVITY_LIMIT = 5


def build_dashboard(repo: ProductRepository) -> Dict[str, Any]:
    """
    Assemble dashboard data, seeding a mock catalog first if the store is empty.
    """
    if ScraperService.seed_if_empty(repo):
        logger.info("Generated mock data for empty database")

    products, _ = repo.find_products(ProductQuery(limit=DASHBOARD_PRODUCT_LIMIT))
    total_products = repo.count_products()

    category_insights = AnalysisService.get_category_insights(products)
    market_growth = AnalysisService.calculate_market_growth(products)
    latest_log = repo.latest_scrape_log()

    return {
        "overview": {
            "total_products": total_products,
            "last_scrape_date": latest_log.created_at if latest_log else datetime.now(timezone.utc),
            "avg_price": round_half_up(average(products, "price"), 2),
            "market_growth": market_growth["growth_rate"],
            "quarter_growth": market_growth["quarter_growth"],
        },
        "category_sales": AnalysisService.category_sales(category_insights),
        "sales_trend": AnalysisService.generate_sales_trend(),
        "recent_activity": repo.list_scrape_logs(0, RECENT_ACTIVITY_LIMIT),
    }
