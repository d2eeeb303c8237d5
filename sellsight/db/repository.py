"""
Storage backends for products, scrape logs and brainstorming ideas.

Two implementations share the ProductRepository interface:
SupabaseRepository for deployed environments and InMemoryRepository
for local development and tests (DATA_SOURCE=memory).
"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sellsight.config import Settings, settings as default_settings
from sellsight.db.query import ProductQuery, SORTABLE_FIELDS
from sellsight.schemas.idea import Idea
from sellsight.schemas.product import Product
from sellsight.schemas.scrape import ScrapeLog

logger = logging.getLogger(__name__)

FETCH_PAGE_SIZE = 1000


class RepositoryError(Exception):
    """Raised when the storage backend fails to complete an operation."""


class ProductRepository(ABC):

    # --- Products ---
    @abstractmethod
    def find_products(self, query: ProductQuery) -> Tuple[List[Product], int]:
        """Return one page of matching products and the total match count."""

    @abstractmethod
    def count_products(self) -> int: ...

    @abstractmethod
    def upsert_product(self, product: Product) -> Product:
        """Insert the product, or replace the stored one with the same product_id."""

    @abstractmethod
    def insert_products(self, products: List[Product]) -> int: ...

    @abstractmethod
    def distinct_categories(self) -> List[str]: ...

    @abstractmethod
    def price_range(self) -> Tuple[Optional[float], Optional[float]]: ...

    # --- Scrape logs ---
    @abstractmethod
    def create_scrape_log(self, log: ScrapeLog) -> ScrapeLog: ...

    @abstractmethod
    def update_scrape_log(self, scrape_id: str, changes: Dict[str, Any]) -> Optional[ScrapeLog]: ...

    @abstractmethod
    def get_scrape_log(self, scrape_id: str) -> Optional[ScrapeLog]: ...

    @abstractmethod
    def list_scrape_logs(self, offset: int = 0, limit: int = 10) -> List[ScrapeLog]:
        """Scrape logs, newest first."""

    @abstractmethod
    def count_scrape_logs(self) -> int: ...

    def latest_scrape_log(self) -> Optional[ScrapeLog]:
        logs = self.list_scrape_logs(0, 1)
        return logs[0] if logs else None

    # --- Ideas ---
    @abstractmethod
    def list_ideas(self) -> List[Idea]:
        """Ideas, newest first."""

    @abstractmethod
    def get_idea(self, idea_id: str) -> Optional[Idea]: ...

    @abstractmethod
    def save_idea(self, idea: Idea) -> Idea: ...

    @abstractmethod
    def delete_idea(self, idea_id: str) -> bool: ...


def _matches(product: Product, query: ProductQuery) -> bool:
    if query.category and product.category != query.category:
        return False
    if query.search:
        needle = query.search.lower()
        haystack = [product.title, product.description or ""] + list(product.tags)
        if not any(needle in value.lower() for value in haystack):
            return False
    if query.min_price is not None and product.price < query.min_price:
        return False
    if query.max_price is not None and product.price > query.max_price:
        return False
    if query.min_rating is not None and product.rating < query.min_rating:
        return False
    if query.updated_since is not None and product.last_update < query.updated_since:
        return False
    return True


class InMemoryRepository(ProductRepository):
    """Process-local store guarded by a lock. Contents are lost on restart."""

    def __init__(self):
        self._lock = threading.Lock()
        self._products: Dict[str, Product] = {}
        self._scrape_logs: Dict[str, ScrapeLog] = {}
        self._ideas: Dict[str, Idea] = {}

    def find_products(self, query: ProductQuery) -> Tuple[List[Product], int]:
        column = SORTABLE_FIELDS.get(query.sort_by, "sales")
        with self._lock:
            matched = [p for p in self._products.values() if _matches(p, query)]

        present = [p for p in matched if getattr(p, column) is not None]
        missing = [p for p in matched if getattr(p, column) is None]
        present.sort(key=lambda p: getattr(p, column), reverse=query.descending)
        ordered = present + missing

        end = query.offset + query.limit if query.limit is not None else None
        page = ordered[query.offset:end]
        return [p.model_copy(deep=True) for p in page], len(matched)

    def count_products(self) -> int:
        with self._lock:
            return len(self._products)

    def upsert_product(self, product: Product) -> Product:
        with self._lock:
            self._products[product.product_id] = product.model_copy(deep=True)
        return product

    def insert_products(self, products: List[Product]) -> int:
        with self._lock:
            seen = set(self._products)
            for product in products:
                if product.product_id in seen:
                    raise RepositoryError(f"Duplicate product_id: {product.product_id}")
                seen.add(product.product_id)
            for product in products:
                self._products[product.product_id] = product.model_copy(deep=True)
        return len(products)

    def distinct_categories(self) -> List[str]:
        with self._lock:
            return sorted({p.category for p in self._products.values()})

    def price_range(self) -> Tuple[Optional[float], Optional[float]]:
        with self._lock:
            prices = [p.price for p in self._products.values()]
        if not prices:
            return None, None
        return min(prices), max(prices)

    def create_scrape_log(self, log: ScrapeLog) -> ScrapeLog:
        if log.created_at is None:
            log = log.model_copy(update={"created_at": datetime.now(timezone.utc)})
        with self._lock:
            if log.scrape_id in self._scrape_logs:
                raise RepositoryError(f"Duplicate scrape_id: {log.scrape_id}")
            self._scrape_logs[log.scrape_id] = log.model_copy(deep=True)
        return log

    def update_scrape_log(self, scrape_id: str, changes: Dict[str, Any]) -> Optional[ScrapeLog]:
        with self._lock:
            current = self._scrape_logs.get(scrape_id)
            if current is None:
                return None
            updated = ScrapeLog.model_validate({**current.model_dump(), **changes})
            self._scrape_logs[scrape_id] = updated
            return updated.model_copy(deep=True)

    def get_scrape_log(self, scrape_id: str) -> Optional[ScrapeLog]:
        with self._lock:
            log = self._scrape_logs.get(scrape_id)
            return log.model_copy(deep=True) if log else None

    def list_scrape_logs(self, offset: int = 0, limit: int = 10) -> List[ScrapeLog]:
        with self._lock:
            logs = sorted(self._scrape_logs.values(), key=lambda log: log.created_at, reverse=True)
            return [log.model_copy(deep=True) for log in logs[offset:offset + limit]]

    def count_scrape_logs(self) -> int:
        with self._lock:
            return len(self._scrape_logs)

    def list_ideas(self) -> List[Idea]:
        with self._lock:
            ideas = sorted(self._ideas.values(), key=lambda idea: idea.created_at, reverse=True)
            return [idea.model_copy(deep=True) for idea in ideas]

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        with self._lock:
            idea = self._ideas.get(idea_id)
            return idea.model_copy(deep=True) if idea else None

    def save_idea(self, idea: Idea) -> Idea:
        with self._lock:
            self._ideas[idea.id] = idea.model_copy(deep=True)
        return idea

    def delete_idea(self, idea_id: str) -> bool:
        with self._lock:
            return self._ideas.pop(idea_id, None) is not None


class SupabaseRepository(ProductRepository):
    """
    Repository backed by Supabase (PostgREST) tables.
    Expects products.product_id, scrape_logs.scrape_id and ideas.id to be unique.
    """

    def __init__(self, client, config: Settings = default_settings):
        self.client = client
        self.products_table = config.PRODUCTS_TABLE
        self.scrape_logs_table = config.SCRAPE_LOGS_TABLE
        self.ideas_table = config.IDEAS_TABLE

    def _execute(self, builder, action: str):
        try:
            return builder.execute()
        except Exception as e:
            logger.error(f"Supabase error while trying to {action}: {e}")
            raise RepositoryError(f"Failed to {action}") from e

    @staticmethod
    def _search_filter(search: str) -> str:
        """
        PostgREST `or` filter for a literal, case-insensitive search.

        Commas, parentheses and braces are filter syntax and `*` is PostgREST's
        wildcard alias, so they are dropped. LIKE wildcards are escaped.
        Tags are matched as whole elements (`cs`), since PostgREST has no
        substring operator for array members.
        """
        term = "".join(ch for ch in search if ch not in ",(){}*").strip()
        pattern = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"title.ilike.%{pattern}%,description.ilike.%{pattern}%,tags.cs.{{{term}}}"

    def _select_products(self, query: ProductQuery):
        builder = self.client.table(self.products_table).select("*", count="exact")

        if query.category:
            builder = builder.eq("category", query.category)
        if query.search:
            builder = builder.or_(self._search_filter(query.search))
        if query.min_price is not None:
            builder = builder.gte("price", query.min_price)
        if query.max_price is not None:
            builder = builder.lte("price", query.max_price)
        if query.min_rating is not None:
            builder = builder.gte("rating", query.min_rating)
        if query.updated_since is not None:
            builder = builder.gte("last_update", query.updated_since.isoformat())

        column = SORTABLE_FIELDS.get(query.sort_by, "sales")
        return builder.order(column, desc=query.descending)

    # --- Products ---
    def find_products(self, query: ProductQuery) -> Tuple[List[Product], int]:
        if query.limit is not None:
            builder = self._select_products(query).range(query.offset, query.offset + query.limit - 1)
            response = self._execute(builder, "query products")
            rows = response.data or []
            total = response.count
        else:
            # No limit means every match; PostgREST caps each response at its max-rows setting
            rows, total = [], None
            start = query.offset
            while True:
                builder = self._select_products(query).range(start, start + FETCH_PAGE_SIZE - 1)
                response = self._execute(builder, "query products")
                batch = response.data or []
                rows.extend(batch)
                if response.count is not None:
                    total = response.count
                if not batch or (total is not None and query.offset + len(rows) >= total):
                    break
                start += len(batch)

        products = [Product.model_validate(row) for row in rows]
        return products, total if total is not None else len(products)

    def count_products(self) -> int:
        response = self._execute(
            self.client.table(self.products_table).select("product_id", count="exact").limit(1),
            "count products",
        )
        return response.count or 0

    def upsert_product(self, product: Product) -> Product:
        row = product.model_dump(mode="json")
        self._execute(
            self.client.table(self.products_table).upsert(row, on_conflict="product_id"),
            f"upsert product {product.product_id}",
        )
        return product

    def insert_products(self, products: List[Product]) -> int:
        if not products:
            return 0
        rows = [product.model_dump(mode="json") for product in products]
        self._execute(self.client.table(self.products_table).insert(rows), "insert products")
        return len(rows)

    def distinct_categories(self) -> List[str]:
        response = self._execute(
            self.client.table(self.products_table).select("category"),
            "list categories",
        )
        return sorted({row["category"] for row in response.data or [] if row.get("category")})

    def price_range(self) -> Tuple[Optional[float], Optional[float]]:
        lowest = self._execute(
            self.client.table(self.products_table).select("price").order("price").limit(1),
            "read minimum price",
        )
        highest = self._execute(
            self.client.table(self.products_table).select("price").order("price", desc=True).limit(1),
            "read maximum price",
        )
        min_price = lowest.data[0]["price"] if lowest.data else None
        max_price = highest.data[0]["price"] if highest.data else None
        return min_price, max_price

    # --- Scrape logs ---
    def create_scrape_log(self, log: ScrapeLog) -> ScrapeLog:
        if log.created_at is None:
            log = log.model_copy(update={"created_at": datetime.now(timezone.utc)})
        self._execute(
            self.client.table(self.scrape_logs_table).insert(log.model_dump(mode="json")),
            f"create scrape log {log.scrape_id}",
        )
        return log

    def update_scrape_log(self, scrape_id: str, changes: Dict[str, Any]) -> Optional[ScrapeLog]:
        payload = {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in changes.items()
        }
        response = self._execute(
            self.client.table(self.scrape_logs_table).update(payload).eq("scrape_id", scrape_id),
            f"update scrape log {scrape_id}",
        )
        if not response.data:
            return None
        return ScrapeLog.model_validate(response.data[0])

    def get_scrape_log(self, scrape_id: str) -> Optional[ScrapeLog]:
        response = self._execute(
            self.client.table(self.scrape_logs_table).select("*").eq("scrape_id", scrape_id).limit(1),
            f"fetch scrape log {scrape_id}",
        )
        if not response.data:
            return None
        return ScrapeLog.model_validate(response.data[0])

    def list_scrape_logs(self, offset: int = 0, limit: int = 10) -> List[ScrapeLog]:
        response = self._execute(
            self.client.table(self.scrape_logs_table)
            .select("*")
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1),
            "list scrape logs",
        )
        return [ScrapeLog.model_validate(row) for row in response.data or []]

    def count_scrape_logs(self) -> int:
        response = self._execute(
            self.client.table(self.scrape_logs_table).select("scrape_id", count="exact").limit(1),
            "count scrape logs",
        )
        return response.count or 0

    # --- Ideas ---
    def list_ideas(self) -> List[Idea]:
        response = self._execute(
            self.client.table(self.ideas_table).select("*").order("created_at", desc=True),
            "list ideas",
        )
        return [Idea.model_validate(row) for row in response.data or []]

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        response = self._execute(
            self.client.table(self.ideas_table).select("*").eq("id", idea_id).limit(1),
            f"fetch idea {idea_id}",
        )
        if not response.data:
            return None
        return Idea.model_validate(response.data[0])

    def save_idea(self, idea: Idea) -> Idea:
        self._execute(
            self.client.table(self.ideas_table).upsert(idea.model_dump(mode="json"), on_conflict="id"),
            f"save idea {idea.id}",
        )
        return idea

    def delete_idea(self, idea_id: str) -> bool:
        response = self._execute(
            self.client.table(self.ideas_table).delete().eq("id", idea_id),
            f"delete idea {idea_id}",
        )
        return bool(response.data)


def create_repository(config: Settings = default_settings) -> ProductRepository:
    """Build the repository selected by DATA_SOURCE."""
    source = config.DATA_SOURCE.lower()
    if source == "memory":
        logger.info("Using in-memory data store")
        return InMemoryRepository()
    if source == "supabase":
        from sellsight.db.supabase_client import get_supabase_client

        return SupabaseRepository(get_supabase_client(), config)
    raise ValueError(f"Unknown DATA_SOURCE '{config.DATA_SOURCE}', expected 'supabase' or 'memory'")
