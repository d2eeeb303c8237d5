import os

# Configure the app for tests before anything imports sellsight.config
os.environ["DATA_SOURCE"] = "memory"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["ENVIRONMENT"] = "development"

import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from sellsight.api.deps import get_repository
from sellsight.db.repository import InMemoryRepository
from sellsight.main import app
from sellsight.schemas.product import Product

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_product(product_id="product-1", **overrides) -> Product:
    fields = dict(
        product_id=product_id,
        title=f"Title {product_id}",
        category="Electronics",
        price=100.0,
        sales=5000,
        rating=4.0,
        last_update=datetime.now(timezone.utc) - timedelta(days=10),
        tags=[f"tag-{product_id}"],
        description="A product",
    )
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def rng():
    return random.Random(1234)
