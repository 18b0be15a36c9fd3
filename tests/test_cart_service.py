import threading

import pytest

from marketplace.errors import ValidationError
from marketplace.services.cart_service import CartService
from marketplace.storage import EntityKind

USER_ID = "demo-user"


def test_add_item_creates_row(cart_service):
    item = cart_service.add_item(USER_ID, "prod1", 2)

    assert item.user_id == USER_ID
    assert item.product_id == "prod1"
    assert item.quantity == 2
    assert [i.id for i in cart_service.get_cart_items(USER_ID)] == [item.id]


def test_add_item_defaults_to_one(cart_service):
    assert cart_service.add_item(USER_ID, "prod1").quantity == 1


def test_repeated_adds_merge_into_one_row(cart_service):
    first = cart_service.add_item(USER_ID, "prod1", 2)
    second = cart_service.add_item(USER_ID, "prod1", 3)

    items = cart_service.items_for_user(USER_ID)
    assert len(items) == 1
    assert second.id == first.id
    assert items[0].quantity == 5


def test_merge_is_per_user(cart_service):
    cart_service.add_item(USER_ID, "prod1", 1)
    cart_service.add_item("someone-else", "prod1", 1)

    assert len(cart_service.get_cart_items(USER_ID)) == 1
    assert len(cart_service.get_cart_items("someone-else")) == 1


def test_without_merge_each_add_is_a_row(storage):
    cart_service = CartService(storage, merge_duplicates=False)
    cart_service.add_item(USER_ID, "prod1", 2)
    cart_service.add_item(USER_ID, "prod1", 3)

    items = cart_service.items_for_user(USER_ID)
    assert len(items) == 2
    assert sum(i.quantity for i in items if i.product_id == "prod1") == 5


@pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True, None])
def test_add_item_rejects_bad_quantity(cart_service, quantity):
    with pytest.raises(ValidationError) as exc_info:
        cart_service.add_item(USER_ID, "prod1", quantity)
    assert exc_info.value.errors[0]["field"] == "quantity"


@pytest.mark.parametrize("product_id", ["", "   ", None])
def test_add_item_rejects_missing_product_id(cart_service, product_id):
    with pytest.raises(ValidationError):
        cart_service.add_item(USER_ID, product_id, 1)


def test_add_item_accepts_unknown_product(cart_service):
    item = cart_service.add_item(USER_ID, "ghost", 1)
    [joined] = cart_service.items_for_user(USER_ID)
    assert joined.id == item.id
    assert joined.product is None


def test_items_are_joined_with_products(cart_service):
    cart_service.add_item(USER_ID, "prod3", 1)
    [item] = cart_service.items_for_user(USER_ID)
    assert item.product.name == "Beaded Jewelry Set"


def test_update_item(cart_service):
    item = cart_service.add_item(USER_ID, "prod1", 1)
    updated = cart_service.update_item(item.id, 7)

    assert updated.quantity == 7
    assert cart_service.get_cart_items(USER_ID)[0].quantity == 7


@pytest.mark.parametrize("quantity", [0, -3, 2.5])
def test_update_item_rejects_non_positive(cart_service, quantity):
    item = cart_service.add_item(USER_ID, "prod1", 1)
    with pytest.raises(ValidationError):
        cart_service.update_item(item.id, quantity)
    assert cart_service.get_cart_items(USER_ID)[0].quantity == 1


def test_update_missing_item_returns_none(cart_service):
    assert cart_service.update_item("missing", 2) is None


@pytest.mark.parametrize("quantity", [0, -1])
def test_set_quantity_below_one_removes(cart_service, quantity):
    item = cart_service.add_item(USER_ID, "prod1", 2)

    assert cart_service.set_quantity(item.id, quantity) is None
    assert cart_service.items_for_user(USER_ID) == []


def test_set_quantity_positive_updates(cart_service):
    item = cart_service.add_item(USER_ID, "prod1", 2)
    assert cart_service.set_quantity(item.id, 3).quantity == 3


def test_remove_item_twice(cart_service):
    item = cart_service.add_item(USER_ID, "prod1", 1)

    assert cart_service.remove_item(item.id) is True
    assert cart_service.remove_item(item.id) is False


def test_cart_totals(cart_service):
    cart_service.add_item(USER_ID, "prod1", 2)
    cart_service.add_item(USER_ID, "prod3", 1)

    summary = cart_service.cart_summary(USER_ID)
    assert summary.total_items == 3
    assert summary.total_price == 65000


def test_cart_totals_treat_missing_product_as_free(cart_service, storage):
    cart_service.add_item(USER_ID, "prod1", 1)
    cart_service.add_item(USER_ID, "ghost", 4)

    summary = cart_service.cart_summary(USER_ID)
    assert summary.total_items == 5
    assert summary.total_price == 25000


def test_deleted_product_leaves_empty_join(cart_service, storage):
    cart_service.add_item(USER_ID, "prod2", 1)
    storage.delete(EntityKind.PRODUCTS, "prod2")

    [item] = cart_service.items_for_user(USER_ID)
    assert item.product is None
    assert cart_service.cart_summary(USER_ID).total_price == 0


def test_clear_cart(cart_service):
    cart_service.add_item(USER_ID, "prod1", 1)
    cart_service.add_item(USER_ID, "prod2", 1)
    cart_service.add_item("other", "prod2", 1)

    assert cart_service.clear_cart(USER_ID) == 2
    assert cart_service.get_cart_items(USER_ID) == []
    assert len(cart_service.get_cart_items("other")) == 1


def _after_first_filter(storage, monkeypatch, action):
    """Run ``action`` once, right after the first cart lookup returns."""
    original_filter = storage.filter
    fired = []

    def filter_then_act(kind, **criteria):
        rows = original_filter(kind, **criteria)
        if not fired and kind == EntityKind.CART_ITEMS and rows:
            fired.append(True)
            action(rows[0])
        return rows

    monkeypatch.setattr(storage, "filter", filter_then_act)


def test_merge_falls_back_to_create_when_row_vanishes(cart_service, storage, monkeypatch):
    cart_service.add_item(USER_ID, "prod1", 1)
    _after_first_filter(storage, monkeypatch,
                        lambda row: storage.delete(EntityKind.CART_ITEMS, row.id))

    item = cart_service.add_item(USER_ID, "prod1", 2)

    assert item.quantity == 2
    assert [(i.id, i.quantity) for i in cart_service.get_cart_items(USER_ID)] == [(item.id, 2)]


def test_remove_waits_for_merging_add(cart_service, storage, monkeypatch):
    first = cart_service.add_item(USER_ID, "prod1", 1)
    removals = []
    remover = threading.Thread(target=lambda: removals.append(cart_service.remove_item(first.id)))

    def start_remover(row):
        remover.start()
        remover.join(timeout=0.2)
        # blocked on the user's cart lock held by add_item
        assert remover.is_alive()

    _after_first_filter(storage, monkeypatch, start_remover)

    merged = cart_service.add_item(USER_ID, "prod1", 2)
    remover.join()

    assert merged.id == first.id
    assert merged.quantity == 3
    assert removals == [True]
    assert cart_service.get_cart_items(USER_ID) == []
