import pytest
from fastapi.testclient import TestClient

from marketplace.database import DatabaseStorage, create_db_engine, init_db
from marketplace.main import create_app
from marketplace.seed import seed_storage
from marketplace.services.booking_service import BookingService
from marketplace.services.cart_service import CartService
from marketplace.services.catalog_service import CatalogService
from marketplace.services.order_service import OrderService
from marketplace.storage import MemoryStorage


@pytest.fixture
def storage():
    """Fresh seeded in-memory store per test."""
    store = MemoryStorage()
    seed_storage(store)
    return store


@pytest.fixture
def db_storage():
    """Seeded SQL store on a private in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    store = DatabaseStorage(engine)
    seed_storage(store)
    yield store
    engine.dispose()


@pytest.fixture
def catalog(storage):
    return CatalogService(storage)


@pytest.fixture
def cart_service(storage):
    return CartService(storage, merge_duplicates=True)


@pytest.fixture
def order_service(storage, cart_service):
    return OrderService(storage, cart_service)


@pytest.fixture
def booking_service(storage):
    return BookingService(storage)


@pytest.fixture
def client(storage):
    app = create_app(storage=storage)
    with TestClient(app) as test_client:
        yield test_client
