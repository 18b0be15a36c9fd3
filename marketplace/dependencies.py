"""Dependency injection for services."""
from fastapi import Request

from marketplace.config import DEMO_USER_ID
from marketplace.services.booking_service import BookingService
from marketplace.services.cart_service import CartService
from marketplace.services.catalog_service import CatalogService
from marketplace.services.order_service import OrderService
from marketplace.services.user_service import UserService
from marketplace.storage import Storage


def get_storage(request: Request) -> Storage:
    """Get the entity store from app state."""
    return request.app.state.storage


def get_current_user_id() -> str:
    """Every request acts as the single placeholder user."""
    return DEMO_USER_ID


def get_catalog_service(request: Request) -> CatalogService:
    """Get catalog service instance."""
    return CatalogService(get_storage(request))


def get_cart_service(request: Request) -> CartService:
    """Get cart service instance."""
    return CartService(get_storage(request), merge_duplicates=request.app.state.merge_cart_items)


def get_order_service(request: Request) -> OrderService:
    """Get order service instance."""
    return OrderService(get_storage(request), get_cart_service(request))


def get_booking_service(request: Request) -> BookingService:
    """Get booking service instance."""
    return BookingService(get_storage(request))


def get_user_service(request: Request) -> UserService:
    """Get user service instance."""
    return UserService(get_storage(request))
