"""
Randomized product records standing in for scraped marketplace data.
"""
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sellsight.schemas.product import Product

CATEGORIES = ["Electronics", "Books", "Sports", "Home & Garden", "Beauty", "Toys"]

YEAR = timedelta(days=365)


def _title_tier(category: str) -> str:
    if "Electronics" in category:
        return "Premium"
    if "Books" in category:
        return "Deluxe"
    return "Standard"


def generate_mock_product(
    index: int,
    rng: random.Random,
    now: datetime,
) -> Product:
    category = rng.choice(CATEGORIES)
    singular = category[:-1]
    return Product(
        product_id=f"product-{index}",
        title=f"Product {index} - {_title_tier(category)} {singular}",
        category=category,
        price=round(rng.uniform(50, 250), 2),
        sales=rng.randrange(1000, 16000),
        rating=round(rng.uniform(3, 5), 1),
        last_update=now - timedelta(seconds=rng.randrange(int(YEAR.total_seconds()))),
        tags=[f"tag-{index}", f"category-{category.lower()}"],
        description=f"High-quality {singular.lower()} with premium features",
        author=f"Author{index}",
        thumbnail=f"https://example.com/thumb-{index}.jpg",
        downloads=rng.randrange(50000),
        reviews=rng.randrange(1000),
        analysis_score=rng.random(),
        trend_score=rng.random(),
    )


def generate_mock_products(
    count: int = 50,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[Product]:
    """
    Generate `count` products with ids product-1 .. product-{count}.

    Ids are stable across calls so repeated scrape sessions update the
    same records instead of growing the catalog.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    return [generate_mock_product(i, rng, now) for i in range(1, count + 1)]
