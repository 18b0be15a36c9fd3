"""Database models for the SQL storage backend."""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """User model."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String)
    city = Column(String)
    is_provider = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class ServiceCategory(Base):
    """Service category model."""
    __tablename__ = "service_categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=False)
    starting_price = Column(Integer, nullable=False)


class Provider(Base):
    """Service provider model."""
    __tablename__ = "providers"

    id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    business_name = Column(String, nullable=False)
    specialty = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    experience = Column(Integer, nullable=False)
    rate = Column(Integer, nullable=False)
    rate_type = Column(String, nullable=False)
    rating = Column(String(4), default="0.0")
    review_count = Column(Integer, default=0)
    profile_image = Column(String)
    work_images = Column(JSON, default=list)
    service_areas = Column(JSON, default=list)
    verified = Column(Boolean, default=False)


class Product(Base):
    """Product model."""
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    category = Column(String, index=True, nullable=False)
    images = Column(JSON, default=list)
    rating = Column(String(4), default="0.0")
    review_count = Column(Integer, default=0)
    stock = Column(Integer, default=0)
    seller_id = Column(String, nullable=False)
    featured = Column(Boolean, default=False)


class CartItem(Base):
    """Cart item model."""
    __tablename__ = "cart_items"

    id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    product_id = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)


class Order(Base):
    """Order model."""
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    total = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="pending")
    shipping_address = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class OrderItem(Base):
    """Order line item model."""
    __tablename__ = "order_items"

    id = Column(String, primary_key=True)
    order_id = Column(String, index=True, nullable=False)
    product_id = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)


class Booking(Base):
    """Service booking model."""
    __tablename__ = "bookings"

    id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    provider_id = Column(String, nullable=False)
    service_description = Column(Text, nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="pending")
    total_cost = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
