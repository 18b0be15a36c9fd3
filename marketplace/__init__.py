"""Marketplace backend: service categories, providers, products, carts, orders and bookings."""

__version__ = "1.0.0"
