"""Pydantic schemas for marketplace records and request/response validation.

Attributes are snake_case in Python and camelCase on the wire
(``businessName``, ``shippingAddress``); inbound payloads accept either.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RateType(str, Enum):
    """Billing unit of a provider's rate."""
    PER_DAY = "per day"
    PER_HOUR = "per hour"
    PER_SESSION = "per session"
    PER_VISIT = "per visit"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SearchScope(str, Enum):
    """Entity kinds a search call inspects."""
    SERVICES = "services"
    PRODUCTS = "products"
    PROVIDERS = "providers"
    ALL = "all"


# Stored records

class UserProfile(CamelModel):
    """User as exposed over the API, without credentials."""
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    city: Optional[str] = None
    is_provider: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


class User(UserProfile):
    password: str


class ServiceCategory(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: str
    color: str
    starting_price: int


class Provider(CamelModel):
    id: str
    user_id: str
    business_name: str
    specialty: str
    description: str
    experience: int
    rate: int
    rate_type: RateType
    rating: str = "0.0"
    review_count: int = 0
    profile_image: Optional[str] = None
    work_images: List[str] = Field(default_factory=list)
    service_areas: List[str] = Field(default_factory=list)
    verified: bool = False


class Product(CamelModel):
    id: str
    name: str
    description: str
    price: int
    category: str
    images: List[str] = Field(default_factory=list)
    rating: str = "0.0"
    review_count: int = 0
    stock: int = Field(default=0, ge=0)
    seller_id: str
    featured: bool = False


class CartItem(CamelModel):
    id: str
    user_id: str
    product_id: str
    quantity: int = Field(default=1, ge=1)


class CartItemWithProduct(CartItem):
    """Cart row joined with its product; ``product`` is None when it no longer exists."""
    product: Optional[Product] = None


class Order(CamelModel):
    id: str
    user_id: str
    total: int
    status: OrderStatus = OrderStatus.PENDING
    shipping_address: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class OrderItem(CamelModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: int


class Booking(CamelModel):
    id: str
    user_id: str
    provider_id: str
    service_description: str
    scheduled_date: datetime
    status: BookingStatus = BookingStatus.PENDING
    total_cost: int
    created_at: datetime = Field(default_factory=datetime.utcnow)


# Requests

class AddToCartRequest(CamelModel):
    """Schema for add to cart request."""
    product_id: str
    quantity: StrictInt = 1


class UpdateCartItemRequest(CamelModel):
    """Schema for cart quantity update."""
    quantity: StrictInt


class CreateOrderRequest(CamelModel):
    """Schema for order placement."""
    total: StrictInt = Field(ge=0)
    shipping_address: str = Field(min_length=1)


class CreateBookingRequest(CamelModel):
    """Schema for booking a provider."""
    provider_id: str = Field(min_length=1)
    service_description: str = Field(min_length=1)
    scheduled_date: datetime
    total_cost: StrictInt = Field(ge=0)


# Responses

class CartSummary(CamelModel):
    """Cart contents with computed aggregates."""
    user_id: str
    items: List[CartItemWithProduct]
    total_items: int
    total_price: int


class OrderWithItems(Order):
    items: List[OrderItem] = Field(default_factory=list)


class SearchResults(CamelModel):
    """Search hits per entity kind; kinds outside the scope stay empty."""
    services: List[ServiceCategory] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)
    providers: List[Provider] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
