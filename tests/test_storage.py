import pytest

from marketplace.schemas import CartItem, Product
from marketplace.seed import PRODUCTS, seed_storage
from marketplace.storage import EntityKind, MemoryStorage


def test_create_assigns_unique_ids():
    store = MemoryStorage()
    first = store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "prod1", "quantity": 1})
    second = store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "prod1", "quantity": 1})

    assert isinstance(first, CartItem)
    assert first.id and second.id
    assert first.id != second.id
    assert store.count(EntityKind.CART_ITEMS) == 2


def test_create_ignores_caller_supplied_id():
    store = MemoryStorage()
    item = store.create(EntityKind.CART_ITEMS, {"id": "mine", "user_id": "u1", "product_id": "p", "quantity": 1})

    assert item.id != "mine"
    assert store.get(EntityKind.CART_ITEMS, "mine") is None


def test_get_missing_returns_none(storage):
    assert storage.get(EntityKind.PRODUCTS, "nope") is None
    assert storage.get(EntityKind.PROVIDERS, "nope") is None


def test_seeded_catalog(storage):
    assert storage.count(EntityKind.SERVICE_CATEGORIES) == 6
    assert storage.count(EntityKind.PROVIDERS) == 3
    assert storage.count(EntityKind.PRODUCTS) == 8

    kente = storage.get(EntityKind.PRODUCTS, "prod1")
    assert isinstance(kente, Product)
    assert kente.name == "Handwoven Kente Cloth"
    assert kente.price == 25000


def test_update_replaces_record():
    store = MemoryStorage()
    item = store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "p", "quantity": 1})

    updated = store.update(EntityKind.CART_ITEMS, item.id, {"quantity": 4})

    assert updated.quantity == 4
    assert store.get(EntityKind.CART_ITEMS, item.id).quantity == 4
    # earlier references are untouched
    assert item.quantity == 1


def test_update_unknown_id_returns_none():
    store = MemoryStorage()
    assert store.update(EntityKind.CART_ITEMS, "missing", {"quantity": 2}) is None


def test_delete_reports_presence():
    store = MemoryStorage()
    item = store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "p", "quantity": 1})

    assert store.delete(EntityKind.CART_ITEMS, item.id) is True
    assert store.delete(EntityKind.CART_ITEMS, item.id) is False


def test_filter_matches_all_criteria():
    store = MemoryStorage()
    store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "a", "quantity": 1})
    store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "b", "quantity": 1})
    store.create(EntityKind.CART_ITEMS, {"user_id": "u2", "product_id": "a", "quantity": 1})

    assert len(store.filter(EntityKind.CART_ITEMS, user_id="u1")) == 2
    assert len(store.filter(EntityKind.CART_ITEMS, user_id="u1", product_id="a")) == 1


def test_transaction_rolls_back_on_error():
    store = MemoryStorage()
    kept = store.create(EntityKind.CART_ITEMS, {"user_id": "u1", "product_id": "a", "quantity": 1})

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.create(EntityKind.ORDERS, {"user_id": "u1", "total": 10, "shipping_address": "x"})
            store.update(EntityKind.CART_ITEMS, kept.id, {"quantity": 9})
            store.delete(EntityKind.CART_ITEMS, kept.id)
            raise RuntimeError("boom")

    assert store.count(EntityKind.ORDERS) == 0
    assert store.get(EntityKind.CART_ITEMS, kept.id).quantity == 1


def test_transaction_commits_on_success():
    store = MemoryStorage()
    with store.transaction():
        store.create(EntityKind.ORDERS, {"user_id": "u1", "total": 10, "shipping_address": "x"})

    assert store.count(EntityKind.ORDERS) == 1


def test_user_lock_is_shared_per_user():
    store = MemoryStorage()
    assert store.user_lock("u1") is store.user_lock("u1")
    assert store.user_lock("u1") is not store.user_lock("u2")


def test_user_locks_are_released_when_unused():
    store = MemoryStorage()
    lock = store.user_lock("u1")
    store.user_lock("u2")

    assert len(store.user_lock) == 1
    del lock
    assert len(store.user_lock) == 0


def test_held_user_lock_is_reused():
    store = MemoryStorage()
    lock = store.user_lock("u1")
    with lock:
        assert store.user_lock("u1") is lock


def test_seeded_stores_do_not_share_records():
    first, second = MemoryStorage(), MemoryStorage()
    seed_storage(first)
    seed_storage(second)

    kente = first.get(EntityKind.PRODUCTS, "prod1")
    kente.images.append("https://example.com/extra.jpg")

    assert kente is not PRODUCTS[0]
    assert second.get(EntityKind.PRODUCTS, "prod1") is not kente
    assert len(second.get(EntityKind.PRODUCTS, "prod1").images) == 1
    assert len(PRODUCTS[0].images) == 1
