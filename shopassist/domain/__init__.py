"""
Domain Layer - Storefront Entities

This layer contains Pydantic models representing storefront entities
and the envelopes every assistant tool returns.

Author: TM3
Date: 2026-10-14
"""
from shopassist.domain.product import Product, Review, ALLOWED_UPDATE_FIELDS
from shopassist.domain.order import Order, OrderItem, ShippingAddress
from shopassist.domain.cart import Cart, CartItem

__all__ = [
    'Product',
    'Review',
    'ALLOWED_UPDATE_FIELDS',
    'Order',
    'OrderItem',
    'ShippingAddress',
    'Cart',
    'CartItem',
]
