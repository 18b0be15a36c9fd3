"""Order management service."""
import logging
from typing import List, Optional

from opentelemetry import trace

from marketplace.errors import ValidationError
from marketplace.monitoring import cart_removals_counter, order_amount_histogram, orders_created_counter
from marketplace.schemas import Order, OrderItem, OrderStatus, OrderWithItems
from marketplace.services.cart_service import CartService
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)


class OrderService:
    """Service for turning carts into orders."""

    def __init__(self, storage: Storage, cart_service: CartService):
        """
        Initialize order service.

        Args:
            storage: Entity store
            cart_service: Cart service instance
        """
        self.storage = storage
        self.cart_service = cart_service
        self.tracer = trace.get_tracer(__name__)

    def place_order(self, user_id: str, total: int, shipping_address: str) -> OrderWithItems:
        """
        Place an order from the user's current cart and empty the cart.

        Runs inside the user's cart lock and a storage transaction: an
        item added concurrently either lands in this order or stays in the
        cart afterwards, and a failure part-way leaves both the cart and
        the order collection untouched. ``total`` is recorded as given.

        Args:
            user_id: User identifier
            total: Order total as computed by the client
            shipping_address: Delivery address

        Returns:
            The pending order with one line per former cart row

        Raises:
            ValidationError: If total is negative or the address is blank
        """
        errors = []
        if not isinstance(total, int) or isinstance(total, bool) or total < 0:
            errors.append({"field": "total", "message": "Total must be a non-negative integer"})
        if not isinstance(shipping_address, str) or not shipping_address.strip():
            errors.append({"field": "shippingAddress", "message": "Shipping address is required"})
        if errors:
            raise ValidationError("Invalid order data", errors)

        span = trace.get_current_span()
        span.set_attribute("user.id", user_id)
        span.set_attribute("order.total", total)

        with self.cart_service.user_lock(user_id):
            with self.tracer.start_as_current_span("store.transaction.place_order") as db_span:
                with self.storage.transaction():
                    cart_items = self.cart_service.items_for_user(user_id)

                    order = self.storage.create(EntityKind.ORDERS, {
                        "user_id": user_id,
                        "total": total,
                        "shipping_address": shipping_address,
                        "status": OrderStatus.PENDING,
                    })

                    order_items = [
                        self.storage.create(EntityKind.ORDER_ITEMS, {
                            "order_id": order.id,
                            "product_id": item.product_id,
                            "quantity": item.quantity,
                            "price": item.product.price if item.product else 0,
                        })
                        for item in cart_items
                    ]

                    drained = 0
                    for item in cart_items:
                        if self.storage.delete(EntityKind.CART_ITEMS, item.id):
                            drained += 1

                db_span.set_attribute("order.id", order.id)
                db_span.set_attribute("cart.item_count", len(cart_items))
                db_span.set_attribute("store.rows_affected", drained)

        orders_created_counter.add(1)
        order_amount_histogram.record(total)
        if drained:
            cart_removals_counter.add(drained, {"reason": "checkout"})

        logger.info("Order placed", extra={
            "user_id": user_id,
            "order_id": order.id,
            "amount": total,
            "item_count": len(order_items)
        })

        return OrderWithItems(**order.model_dump(), items=order_items)

    def list_orders(self, user_id: str) -> List[Order]:
        """
        Get all orders for a user.

        Args:
            user_id: User identifier

        Returns:
            List of orders
        """
        with self.tracer.start_as_current_span("store.filter") as db_span:
            db_span.set_attribute("store.kind", EntityKind.ORDERS.value)
            db_span.set_attribute("user.id", user_id)

            orders = self.storage.filter(EntityKind.ORDERS, user_id=user_id)

            db_span.set_attribute("store.rows_returned", len(orders))

            return orders

    def get_order(self, order_id: str) -> Optional[OrderWithItems]:
        order = self.storage.get(EntityKind.ORDERS, order_id)
        if order is None:
            return None
        return OrderWithItems(**order.model_dump(), items=self.get_order_items(order_id))

    def get_order_items(self, order_id: str) -> List[OrderItem]:
        return self.storage.filter(EntityKind.ORDER_ITEMS, order_id=order_id)
