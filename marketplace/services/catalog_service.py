"""Catalog queries: service categories, providers, products and search."""
import logging
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from opentelemetry import trace
from pydantic import BaseModel

from marketplace.errors import ValidationError
from marketplace.monitoring import catalog_views_counter, search_requests_counter
from marketplace.schemas import Product, Provider, SearchResults, SearchScope, ServiceCategory
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Fields matched by free-text search, per entity kind
SEARCH_FIELDS = {
    EntityKind.SERVICE_CATEGORIES: ("name", "description"),
    EntityKind.PRODUCTS: ("name", "description", "category"),
    EntityKind.PROVIDERS: ("business_name", "specialty", "description"),
}


def _matches(record: BaseModel, fields: Iterable[str], needle: str) -> bool:
    for field in fields:
        value = getattr(record, field)
        if value and needle in value.lower():
            return True
    return False


class CatalogService:
    """Read-only views over the catalog collections."""

    def __init__(self, storage: Storage):
        """
        Initialize catalog service.

        Args:
            storage: Entity store
        """
        self.storage = storage
        self.tracer = trace.get_tracer(__name__)

    def _list(self, kind: EntityKind) -> List[Any]:
        with self.tracer.start_as_current_span("store.list") as span:
            span.set_attribute("store.kind", kind.value)
            records = self.storage.list(kind)
            span.set_attribute("store.rows_returned", len(records))
        return records

    def _get(self, kind: EntityKind, id: str) -> Optional[Any]:
        with self.tracer.start_as_current_span("store.get") as span:
            span.set_attribute("store.kind", kind.value)
            span.set_attribute("store.id", id)
            record = self.storage.get(kind, id)
            span.set_attribute("store.rows_returned", 0 if record is None else 1)
        return record

    # Service categories

    def list_service_categories(self) -> List[ServiceCategory]:
        catalog_views_counter.add(1, {"kind": "service_categories"})
        return self._list(EntityKind.SERVICE_CATEGORIES)

    def create_service_category(self, data: Dict[str, Any]) -> ServiceCategory:
        return self.storage.create(EntityKind.SERVICE_CATEGORIES, data)

    # Providers

    def list_providers(self, category: Optional[str] = None) -> List[Provider]:
        """
        List providers, optionally narrowed to a specialty.

        Args:
            category: Free text matched against the provider's specialty

        Returns:
            Matching providers
        """
        catalog_views_counter.add(1, {"kind": "providers"})
        if category:
            return self.providers_by_specialty(category)
        return self._list(EntityKind.PROVIDERS)

    def providers_by_specialty(self, token: str) -> List[Provider]:
        """Providers whose specialty contains ``token``, ignoring case."""
        needle = token.lower()
        return [p for p in self._list(EntityKind.PROVIDERS) if needle in p.specialty.lower()]

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self._get(EntityKind.PROVIDERS, provider_id)

    def create_provider(self, data: Dict[str, Any]) -> Provider:
        return self.storage.create(EntityKind.PROVIDERS, data)

    # Products

    def list_products(self, category: Optional[str] = None, featured: bool = False) -> List[Product]:
        """
        List products.

        ``featured`` takes precedence over ``category`` when both are given.

        Args:
            category: Exact category name, case-insensitive
            featured: Only promoted products

        Returns:
            Matching products
        """
        catalog_views_counter.add(1, {"kind": "products"})
        if featured:
            return self.featured_products()
        if category:
            return self.products_by_category(category)
        return self._list(EntityKind.PRODUCTS)

    def products_by_category(self, category: str) -> List[Product]:
        """Products whose category equals ``category``, ignoring case."""
        wanted = category.lower()
        return [p for p in self._list(EntityKind.PRODUCTS) if p.category.lower() == wanted]

    def featured_products(self) -> List[Product]:
        return [p for p in self._list(EntityKind.PRODUCTS) if p.featured]

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._get(EntityKind.PRODUCTS, product_id)

    def create_product(self, data: Dict[str, Any]) -> Product:
        return self.storage.create(EntityKind.PRODUCTS, data)

    # Search

    def search(self, query: str, scope: SearchScope = SearchScope.ALL) -> SearchResults:
        """
        Case-insensitive substring search across the catalog.

        No minimum length is applied here; callers decide when a query
        is too short to be worth running.

        Args:
            query: Text to look for
            scope: Entity kinds to inspect

        Returns:
            Hits per kind; kinds outside ``scope`` are empty

        Raises:
            ValidationError: If the query is empty
        """
        if not query:
            raise ValidationError.for_field("q", "Search query is required")

        scope = SearchScope(scope)
        needle = query.lower()
        results = SearchResults()

        with self.tracer.start_as_current_span("catalog.search") as span:
            span.set_attribute("search.scope", scope.value)

            if scope in (SearchScope.SERVICES, SearchScope.ALL):
                results.services = self._search_kind(EntityKind.SERVICE_CATEGORIES, needle)
            if scope in (SearchScope.PRODUCTS, SearchScope.ALL):
                results.products = self._search_kind(EntityKind.PRODUCTS, needle)
            if scope in (SearchScope.PROVIDERS, SearchScope.ALL):
                results.providers = self._search_kind(EntityKind.PROVIDERS, needle)

            hits = len(results.services) + len(results.products) + len(results.providers)
            span.set_attribute("search.hits", hits)

        search_requests_counter.add(1, {"scope": scope.value})
        logger.info("Search executed", extra={"scope": scope.value, "hits": hits})
        return results

    def _search_kind(self, kind: EntityKind, needle: str) -> List[T]:
        fields = SEARCH_FIELDS[kind]
        return [record for record in self._list(kind) if _matches(record, fields, needle)]
