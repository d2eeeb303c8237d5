"""
Tests for mock scrape sessions, HTML processing and startup seeding
"""
import re

import pytest

from sellsight.config import settings
from sellsight.db.query import ProductQuery
from sellsight.db.repository import RepositoryError
from sellsight.services.scraper_service import ScraperService, new_scrape_id


def test_scrape_id_format_and_uniqueness():
    ids = {new_scrape_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"scrape-\d{13}-[0-9a-f]{6}", scrape_id) for scrape_id in ids)


def test_session_upserts_products_and_completes(repo):
    result = ScraperService.run_scrape_session(repo, {"source": "test"}, scrape_id="scrape-1")

    assert result == {
        "scrape_id": "scrape-1",
        "products_scraped": settings.MOCK_PRODUCT_COUNT,
        "status": "completed",
    }
    log = repo.get_scrape_log("scrape-1")
    assert log.status == "completed"
    assert log.products_scraped == settings.MOCK_PRODUCT_COUNT
    assert log.metadata == {"source": "test"}
    assert log.end_time is not None

    products, total = repo.find_products(ProductQuery())
    assert total == settings.MOCK_PRODUCT_COUNT
    assert all(0 <= p.trend_score <= 1 for p in products)
    assert all(p.scraped_at is not None for p in products)


def test_repeated_sessions_update_the_same_products(repo):
    ScraperService.run_scrape_session(repo, scrape_id="scrape-a")
    ScraperService.run_scrape_session(repo, scrape_id="scrape-b")

    assert repo.count_products() == settings.MOCK_PRODUCT_COUNT
    assert repo.count_scrape_logs() == 2


def test_failed_session_is_recorded_and_reraised(repo, monkeypatch):
    def broken_upsert(product):
        raise RepositoryError("disk full")

    monkeypatch.setattr(repo, "upsert_product", broken_upsert)

    with pytest.raises(RepositoryError):
        ScraperService.run_scrape_session(repo, scrape_id="scrape-x")

    log = repo.get_scrape_log("scrape-x")
    assert log.status == "failed"
    assert log.errors == ["disk full"]
    assert log.end_time is not None


def test_background_runner_swallows_after_recording(repo, monkeypatch):
    def broken_upsert(product):
        raise RuntimeError("boom")

    monkeypatch.setattr(repo, "upsert_product", broken_upsert)

    ScraperService.open_scrape_session(repo, {}, "scrape-bg")
    ScraperService.run_scrape_session_in_background(repo, "scrape-bg")

    assert repo.get_scrape_log("scrape-bg").status == "failed"


def test_opened_session_is_running_before_execution(repo):
    log = ScraperService.open_scrape_session(repo, {"pages": 1})

    stored = repo.get_scrape_log(log.scrape_id)
    assert stored.status == "running"
    assert stored.metadata == {"pages": 1}
    assert repo.count_products() == 0

    ScraperService.execute_scrape_session(repo, log.scrape_id)
    assert repo.get_scrape_log(log.scrape_id).status == "completed"


def test_failure_to_open_session_is_logged(repo, monkeypatch, caplog):
    def broken_create(log):
        raise RepositoryError("no table")

    monkeypatch.setattr(repo, "create_scrape_log", broken_create)

    with caplog.at_level("ERROR"), pytest.raises(RepositoryError, match="no table"):
        ScraperService.run_scrape_session(repo, scrape_id="scrape-x")

    assert "Scrape failed: scrape-x: no table" in caplog.text
    assert repo.count_products() == 0


def test_failed_status_update_does_not_mask_original_error(repo, monkeypatch):
    def broken_upsert(product):
        raise RuntimeError("upstream timeout")

    def broken_update(scrape_id, changes):
        raise RepositoryError("connection lost")

    monkeypatch.setattr(repo, "upsert_product", broken_upsert)
    monkeypatch.setattr(repo, "update_scrape_log", broken_update)

    with pytest.raises(RuntimeError, match="upstream timeout"):
        ScraperService.run_scrape_session(repo, scrape_id="scrape-y")

    assert repo.get_scrape_log("scrape-y").status == "running"


def test_process_raw_html_returns_mock_batch():
    result = ScraperService.process_raw_html("<html></html>", "scrape-1")

    assert result["total_found"] == settings.MOCK_HTML_PRODUCT_COUNT
    assert len(result["products"]) == settings.MOCK_HTML_PRODUCT_COUNT
    assert 1000 <= result["processing_time"] < 6000
    assert result["errors"] == []


def test_seed_if_empty_only_seeds_once(repo):
    assert ScraperService.seed_if_empty(repo) == settings.MOCK_PRODUCT_COUNT
    assert ScraperService.seed_if_empty(repo) == 0
    assert repo.count_products() == settings.MOCK_PRODUCT_COUNT
