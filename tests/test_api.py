"""
Test the SellSight HTTP endpoints against the in-memory store
"""
import csv
import io
import logging
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient

from sellsight import main
from sellsight.api.deps import get_repository
from sellsight.api.v1.scrape import get_scrape_status, start_scrape
from sellsight.config import settings
from sellsight.db.repository import RepositoryError
from sellsight.main import app
from sellsight.services.scraper_service import ScraperService

from tests.conftest import make_product


@pytest.fixture
def catalog(repo):
    repo.insert_products([
        make_product("p1", category="Books", price=10.0, sales=1000, rating=4.0, title="Python Cookbook"),
        make_product("p2", category="Books", price=30.0, sales=3000, rating=5.0),
        make_product("p3", category="Toys", price=20.0, sales=2000, rating=3.0, tags=["robots"],
                     last_update=datetime.now(timezone.utc) - timedelta(days=90)),
    ])
    return repo


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"] == settings.API_VERSION
    assert body["uptime"] >= 0


class TestDashboard:

    def test_seeds_empty_store(self, client, repo):
        response = client.get("/api/dashboard")
        assert response.status_code == 200
        body = response.json()

        assert repo.count_products() == settings.MOCK_PRODUCT_COUNT
        assert body["overview"]["totalProducts"] == settings.MOCK_PRODUCT_COUNT
        assert len(body["salesTrend"]) == 12
        assert body["recentActivity"] == []

    def test_overview_and_category_sales(self, client, catalog):
        body = client.get("/api/dashboard").json()

        overview = body["overview"]
        assert overview["totalProducts"] == 3
        assert overview["avgPrice"] == 20.0
        assert overview["marketGrowth"] == 0.01
        assert overview["quarterGrowth"] == 1.0
        assert body["categorySales"] == [
            {"category": "Books", "avgSales": 2000},
            {"category": "Toys", "avgSales": 2000},
        ]

    def test_recent_activity_and_last_scrape_date(self, client, catalog):
        ScraperService.run_scrape_session(catalog, scrape_id="scrape-recent")
        body = client.get("/api/dashboard").json()
        assert body["recentActivity"][0]["scrapeId"] == "scrape-recent"
        assert body["overview"]["lastScrapeDate"] == body["recentActivity"][0]["createdAt"]

    def test_storage_failure_is_500(self, client, repo, monkeypatch):
        def broken_count():
            raise RepositoryError("down")

        monkeypatch.setattr(repo, "count_products", broken_count)
        response = client.get("/api/dashboard")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch dashboard data"


class TestProducts:

    def test_default_listing(self, client, catalog):
        body = client.get("/api/products").json()

        assert [p["productId"] for p in body["products"]] == ["p2", "p3", "p1"]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 3, "pages": 1}
        assert body["filters"]["categories"] == ["Books", "Toys"]
        assert body["filters"]["priceRange"] == {"min": 10.0, "max": 30.0}

    def test_filters_and_sorting(self, client, catalog):
        body = client.get("/api/products", params={
            "category": "Books", "sortBy": "price", "sortOrder": "asc",
        }).json()
        assert [p["productId"] for p in body["products"]] == ["p1", "p2"]

        body = client.get("/api/products", params={"search": "robot"}).json()
        assert [p["productId"] for p in body["products"]] == ["p3"]

        body = client.get("/api/products", params={"minPrice": 15, "maxPrice": 25}).json()
        assert [p["productId"] for p in body["products"]] == ["p3"]

        body = client.get("/api/products", params={"minRating": 4.5}).json()
        assert [p["productId"] for p in body["products"]] == ["p2"]

        body = client.get("/api/products", params={"category": "All Categories"}).json()
        assert body["pagination"]["total"] == 3

    def test_pagination(self, client, catalog):
        body = client.get("/api/products", params={"page": 2, "limit": 2}).json()
        assert [p["productId"] for p in body["products"]] == ["p1"]
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_show_recent(self, client, repo):
        repo.insert_products([
            make_product("new"),
            make_product("old", last_update=datetime.now(timezone.utc) - timedelta(days=500)),
        ])
        body = client.get("/api/products", params={"showRecent": "true"}).json()
        assert [p["productId"] for p in body["products"]] == ["new"]

    @pytest.mark.parametrize("params", [
        {"sortBy": "secret"},
        {"sortOrder": "up"},
        {"page": 0},
        {"limit": 1000},
    ])
    def test_invalid_parameters(self, client, catalog, params):
        response = client.get("/api/products", params=params)
        assert response.status_code in (400, 422)


class TestScrape:

    def test_start_runs_session_with_returned_id(self, client, repo):
        response = client.post("/api/scrape/start", json={"options": {"pages": 2}})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Scraping started"
        assert body["estimatedTime"] == "5-10 minutes"

        # TestClient runs background tasks before returning
        status = client.get(f"/api/scrape/status/{body['scrapeId']}").json()
        assert status["status"] == "completed"
        assert status["productsScraped"] == settings.MOCK_PRODUCT_COUNT
        assert status["metadata"] == {"pages": 2}

    def test_returned_id_is_trackable_before_background_work(self, repo):
        background_tasks = BackgroundTasks()
        response = start_scrape(background_tasks, None, repo)

        log = get_scrape_status(response["scrape_id"], repo)
        assert log.status == "running"
        assert repo.count_products() == 0
        assert len(background_tasks.tasks) == 1

    def test_start_storage_failure_is_500(self, client, repo, monkeypatch):
        def broken_create(log):
            raise RepositoryError("down")

        monkeypatch.setattr(repo, "create_scrape_log", broken_create)
        response = client.post("/api/scrape/start")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to start scraping"

    def test_start_without_body(self, client):
        response = client.post("/api/scrape/start")
        assert response.status_code == 200

    def test_unknown_status_is_404(self, client):
        response = client.get("/api/scrape/status/scrape-nope")
        assert response.status_code == 404
        assert response.json()["detail"] == "Scrape session not found"

    def test_process_html(self, client, repo):
        response = client.post("/api/scrape/process-html", json={
            "htmlData": "<div class='item'>...</div>", "scrapeId": "scrape-1",
        })
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "HTML processed successfully"
        assert body["productsExtracted"] == settings.MOCK_HTML_PRODUCT_COUNT
        assert body["errors"] == []
        assert repo.count_products() == settings.MOCK_HTML_PRODUCT_COUNT

    @pytest.mark.parametrize("payload", [{}, {"htmlData": ""}])
    def test_process_html_requires_data(self, client, payload):
        response = client.post("/api/scrape/process-html", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "HTML data is required"

    def test_logs_paginated_newest_first(self, client, repo):
        for i in range(3):
            ScraperService.run_scrape_session(repo, scrape_id=f"scrape-{i}")

        body = client.get("/api/scrape/logs", params={"limit": 2}).json()
        assert [log["scrapeId"] for log in body["logs"]] == ["scrape-2", "scrape-1"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


class TestInsights:

    def test_all_timeframe(self, client, catalog):
        body = client.get("/api/analysis/insights", params={"timeframe": "all"}).json()

        assert body["totalProducts"] == 3
        assert body["avgPrice"] == 20.0
        assert body["avgSales"] == 2000.0
        assert body["avgRating"] == 4.0
        assert [p["productId"] for p in body["topPerformers"]] == ["p2", "p3", "p1"]
        assert body["trendingCategories"]["Books"]["avgSales"] == 2000
        assert [r["category"] for r in body["recommendations"]] == ["Books", "Toys"]

    def test_default_timeframe_excludes_stale_products(self, client, catalog):
        body = client.get("/api/analysis/insights").json()
        assert body["totalProducts"] == 2

    def test_category_filter(self, client, catalog):
        body = client.get("/api/analysis/insights", params={"category": "Toys", "timeframe": "all"}).json()
        assert body["totalProducts"] == 1
        assert list(body["trendingCategories"]) == ["Toys"]

    def test_empty_result_has_zero_averages(self, client):
        body = client.get("/api/analysis/insights").json()
        assert body["totalProducts"] == 0
        assert body["avgPrice"] == 0
        assert body["recommendations"] == []

    def test_malformed_timeframe(self, client):
        response = client.get("/api/analysis/insights", params={"timeframe": "soon"})
        assert response.status_code == 400


class TestExport:

    def test_json(self, client, catalog):
        response = client.get("/api/export/products")
        assert response.status_code == 200
        assert "filename=products.json" in response.headers["content-disposition"]
        assert {p["productId"] for p in response.json()} == {"p1", "p2", "p3"}

    def test_csv_by_category(self, client, catalog):
        response = client.get("/api/export/products", params={"format": "csv", "category": "Toys"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "filename=products.csv" in response.headers["content-disposition"]

        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert [row["productId"] for row in rows] == ["p3"]
        assert rows[0]["tags"] == "robots"

    def test_unknown_format(self, client):
        assert client.get("/api/export/products", params={"format": "xml"}).status_code == 422


def test_product_schema(client):
    body = client.get("/api/schema/product").json()
    schema = body["schema"]
    assert body["version"] == settings.API_VERSION
    assert set(schema["required"]) == {"id", "title", "category", "price", "sales", "rating", "lastUpdate"}
    assert schema["properties"]["rating"]["maximum"] == 5


class TestIdeas:

    def test_crud(self, client):
        created = client.post("/api/ideas", json={
            "title": "Competitor dashboard",
            "category": "New Feature",
            "priority": "high",
            "tags": ["Analytics", " Competition "],
        })
        assert created.status_code == 201
        idea = created.json()
        assert idea["status"] == "new"
        assert idea["tags"] == ["Analytics", "Competition"]

        updated = client.put(f"/api/ideas/{idea['id']}", json={"description": "Side by side prices"})
        assert updated.json()["description"] == "Side by side prices"
        assert updated.json()["createdAt"] == idea["createdAt"]

        moved = client.patch(f"/api/ideas/{idea['id']}/status", json={"status": "completed"})
        assert moved.json()["status"] == "completed"

        assert [i["id"] for i in client.get("/api/ideas").json()] == [idea["id"]]
        assert client.delete(f"/api/ideas/{idea['id']}").status_code == 204
        assert client.get("/api/ideas").json() == []

    def test_missing_idea(self, client):
        assert client.put("/api/ideas/nope", json={"title": "x"}).status_code == 404
        assert client.patch("/api/ideas/nope/status", json={"status": "archived"}).status_code == 404
        assert client.delete("/api/ideas/nope").status_code == 404

    def test_invalid_category(self, client):
        response = client.post("/api/ideas", json={"title": "x", "category": "Gossip"})
        assert response.status_code == 422

    def test_prompts_and_generation(self, client):
        prompts = client.get("/api/ideas/prompts").json()
        assert len(prompts) == 6

        body = client.post("/api/ideas/generate", json={"prompts": ["market-gaps"]}).json()
        assert 1 <= len(body["ideas"]) <= 2
        assert all("inspiration" in idea for idea in body["ideas"])

        response = client.post("/api/ideas/generate", json={"prompts": ["nonsense"]})
        assert response.status_code == 400


class TestAppWiring:

    def test_unknown_route_is_404_and_logged(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="sellsight.main"):
            response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}
        assert "404 - Route not found: GET /api/does-not-exist" in caplog.text

    def test_handled_404_is_not_reported_as_unknown_route(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="sellsight.main"):
            response = client.get("/api/scrape/status/scrape-nope")

        assert response.json() == {"detail": "Scrape session not found"}
        assert "Route not found" not in caplog.text

    def test_requests_are_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="sellsight.main"):
            client.get("/api/health", headers={"User-Agent": "pytest-agent"})

        assert "GET /api/health ip=testclient user_agent=pytest-agent" in caplog.text

    def test_startup_seeds_empty_store(self, repo, monkeypatch):
        monkeypatch.setattr(settings, "SEED_ON_STARTUP", True)
        monkeypatch.setattr(main, "get_repository", lambda: repo)

        with TestClient(app):
            pass

        assert repo.count_products() == settings.MOCK_PRODUCT_COUNT

    def test_startup_seed_failure_does_not_stop_the_api(self, monkeypatch):
        def unavailable():
            raise RepositoryError("down")

        monkeypatch.setattr(settings, "SEED_ON_STARTUP", True)
        monkeypatch.setattr(main, "get_repository", unavailable)

        with TestClient(app) as client:
            assert client.get("/api/health").status_code == 200


@pytest.fixture
def exploding_client(repo, monkeypatch):
    def explode(query):
        raise KeyError("unexpected")

    monkeypatch.setattr(repo, "find_products", explode)
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()


class TestUnhandledErrors:

    def test_development_includes_error_text(self, exploding_client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")
        response = exploding_client.get("/api/export/products")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "message": "'unexpected'"}

    def test_production_hides_error_text(self, exploding_client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = exploding_client.get("/api/export/products")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "message": "Something went wrong"}
