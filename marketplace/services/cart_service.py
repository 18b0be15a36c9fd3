"""Cart management service."""
import logging
from threading import RLock
from typing import List, Optional

from opentelemetry import trace

from marketplace.errors import ValidationError
from marketplace.monitoring import cart_additions_counter, cart_removals_counter
from marketplace.schemas import CartItem, CartItemWithProduct, CartSummary
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class CartService:
    """Service for managing per-user shopping carts."""

    def __init__(self, storage: Storage, merge_duplicates: bool = True):
        """
        Initialize cart service.

        Args:
            storage: Entity store
            merge_duplicates: Fold repeated adds of a product into one row
        """
        self.storage = storage
        self.merge_duplicates = merge_duplicates
        self.tracer = trace.get_tracer(__name__)

    def user_lock(self, user_id: str) -> RLock:
        """Critical section shared by every cart mutation of ``user_id``."""
        return self.storage.user_lock(user_id)

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> CartItem:
        """
        Add a product to the user's cart.

        With merging enabled an existing row for the same product gets its
        quantity increased; otherwise every call creates a new row. The
        product is not required to exist and stock is not checked.

        Args:
            user_id: User identifier
            product_id: Product identifier
            quantity: Quantity to add

        Returns:
            The created or merged cart row

        Raises:
            ValidationError: If product_id is blank or quantity is not a positive integer
        """
        if not isinstance(product_id, str) or not product_id.strip():
            raise ValidationError.for_field("productId", "Product id is required")
        if not _is_positive_int(quantity):
            raise ValidationError.for_field("quantity", "Quantity must be a positive integer")

        span = trace.get_current_span()
        span.set_attribute("product.id", product_id)
        span.set_attribute("quantity", quantity)

        with self.user_lock(user_id):
            existing = None
            if self.merge_duplicates:
                existing = next(
                    iter(self.storage.filter(EntityKind.CART_ITEMS, user_id=user_id, product_id=product_id)),
                    None,
                )

            if existing is not None:
                with self.tracer.start_as_current_span("store.update") as db_span:
                    db_span.set_attribute("store.kind", EntityKind.CART_ITEMS.value)
                    db_span.set_attribute("cart_item.id", existing.id)
                    item = self.storage.update(
                        EntityKind.CART_ITEMS, existing.id, {"quantity": existing.quantity + quantity}
                    )
                if item is None:
                    # row vanished between lookup and update
                    existing = None

            if existing is None:
                with self.tracer.start_as_current_span("store.create") as db_span:
                    db_span.set_attribute("store.kind", EntityKind.CART_ITEMS.value)
                    item = self.storage.create(EntityKind.CART_ITEMS, {
                        "user_id": user_id,
                        "product_id": product_id,
                        "quantity": quantity,
                    })
                    db_span.set_attribute("cart_item.id", item.id)

        cart_additions_counter.add(1, {"merged": str(existing is not None).lower()})

        logger.info("Added product to cart", extra={
            "user_id": user_id,
            "product_id": product_id,
            "cart_item_id": item.id,
            "quantity": quantity,
            "merged": existing is not None
        })

        return item

    def update_item(self, item_id: str, quantity: int) -> Optional[CartItem]:
        """
        Set the quantity of a cart row.

        Args:
            item_id: Cart item identifier
            quantity: New quantity

        Returns:
            The updated row, or None if it does not exist

        Raises:
            ValidationError: If quantity is not a positive integer
        """
        if not _is_positive_int(quantity):
            raise ValidationError.for_field("quantity", "Invalid quantity")

        item = self.storage.get(EntityKind.CART_ITEMS, item_id)
        if item is None:
            return None

        with self.user_lock(item.user_id):
            return self.storage.update(EntityKind.CART_ITEMS, item_id, {"quantity": quantity})

    def set_quantity(self, item_id: str, quantity: int) -> Optional[CartItem]:
        """Like ``update_item`` but a quantity below one removes the row."""
        if quantity < 1:
            self.remove_item(item_id)
            return None
        return self.update_item(item_id, quantity)

    def remove_item(self, item_id: str) -> bool:
        """
        Remove a cart row under its owner's cart lock.

        Returns:
            True if the row existed
        """
        item = self.storage.get(EntityKind.CART_ITEMS, item_id)
        if item is None:
            return False

        with self.user_lock(item.user_id):
            with self.tracer.start_as_current_span("store.delete") as db_span:
                db_span.set_attribute("store.kind", EntityKind.CART_ITEMS.value)
                db_span.set_attribute("cart_item.id", item_id)
                removed = self.storage.delete(EntityKind.CART_ITEMS, item_id)
                db_span.set_attribute("store.rows_affected", int(removed))

        if removed:
            cart_removals_counter.add(1, {"reason": "user"})
        return removed

    def get_cart_items(self, user_id: str) -> List[CartItem]:
        """
        Get raw cart rows for user.

        Args:
            user_id: User identifier

        Returns:
            List of cart items
        """
        with self.tracer.start_as_current_span("store.filter") as db_span:
            db_span.set_attribute("store.kind", EntityKind.CART_ITEMS.value)
            db_span.set_attribute("user.id", user_id)

            cart_items = self.storage.filter(EntityKind.CART_ITEMS, user_id=user_id)

            db_span.set_attribute("store.rows_returned", len(cart_items))

            return cart_items

    def items_for_user(self, user_id: str) -> List[CartItemWithProduct]:
        """Cart rows joined with their products; a vanished product leaves ``product`` empty."""
        items = []
        for item in self.get_cart_items(user_id):
            product = self.storage.get(EntityKind.PRODUCTS, item.product_id)
            items.append(CartItemWithProduct(**item.model_dump(), product=product))
        return items

    def cart_summary(self, user_id: str) -> CartSummary:
        """
        Get user's cart contents with totals.

        Args:
            user_id: User identifier

        Returns:
            Cart contents with item count and price total
        """
        items = self.items_for_user(user_id)
        return CartSummary(
            user_id=user_id,
            items=items,
            total_items=total_items(items),
            total_price=total_price(items),
        )

    def clear_cart(self, user_id: str) -> int:
        """
        Remove every row in the user's cart.

        Args:
            user_id: User identifier

        Returns:
            Number of rows removed
        """
        with self.user_lock(user_id):
            with self.tracer.start_as_current_span("store.delete_cart_items") as db_span:
                db_span.set_attribute("store.kind", EntityKind.CART_ITEMS.value)
                db_span.set_attribute("user.id", user_id)

                deleted_count = 0
                for item in self.storage.filter(EntityKind.CART_ITEMS, user_id=user_id):
                    if self.storage.delete(EntityKind.CART_ITEMS, item.id):
                        deleted_count += 1

                db_span.set_attribute("store.rows_affected", deleted_count)

        if deleted_count:
            cart_removals_counter.add(deleted_count, {"reason": "clear"})
        return deleted_count


def total_items(items: List[CartItemWithProduct]) -> int:
    """Sum of quantities."""
    return sum(item.quantity for item in items)


def total_price(items: List[CartItemWithProduct]) -> int:
    """Sum of quantity times unit price; rows without a product count as zero."""
    return sum((item.product.price if item.product else 0) * item.quantity for item in items)
