"""
Pytest fixtures and configuration for ShopAssist tests

This file provides shared fixtures that can be used across all test modules.
The storefront REST API is replaced by an in-memory fake served through
httpx.MockTransport, so no test needs a running server.

Author: TM3
Date: 2026-10-17
"""
import copy
import json
from datetime import datetime, timezone

import httpx
import pytest

from shopassist.connectors.store_api_connector import StoreApiConnector
from shopassist.services.tool_context import ToolContext
from shopassist.state.cart_store import CartStore
from shopassist.state.query_cache import QueryCache
from shopassist.state.storage import MemoryStorage

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

PRODUCTS = [
    {
        "_id": "p1",
        "name": "Airpods Wireless Bluetooth Headphones",
        "image": "/images/airpods.jpg",
        "description": "Bluetooth technology lets you connect it with compatible devices wirelessly",
        "brand": "Apple",
        "category": "Electronics",
        "price": 89.99,
        "countInStock": 10,
        "rating": 4.5,
        "numReviews": 2,
        "reviews": [
            {"name": "John Doe", "rating": 5, "comment": "Great sound", "createdAt": "2024-05-01T10:00:00.000Z"},
            {"rating": 4, "comment": "Good battery life"},
        ],
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-06-01T00:00:00.000Z",
    },
    {
        "_id": "p2",
        "name": "iPhone 13 Pro 256GB Memory",
        "image": "/images/phone.jpg",
        "description": "Introducing the iPhone 13 Pro",
        "brand": "Apple",
        "category": "Electronics",
        "price": 599.99,
        "countInStock": 7,
        "rating": 4.0,
        "numReviews": 0,
        "reviews": [],
        "updatedAt": "2024-06-01T00:00:00.000Z",
    },
    {
        "_id": "p3",
        "name": "Cannon EOS 80D DSLR Camera",
        "image": "/images/camera.jpg",
        "description": "Characterized by versatile imaging specs",
        "brand": "Cannon",
        "category": "Electronics",
        "price": 929.99,
        "countInStock": 5,
        "rating": 3,
        "numReviews": 0,
        "reviews": [],
    },
    {
        "_id": "p5",
        "name": "Amazon Echo Dot 3rd Generation",
        "image": "/images/alexa.jpg",
        "description": "Meet Echo Dot",
        "brand": "Amazon",
        "category": "Electronics",
        "price": 29.99,
        "countInStock": 0,
        "rating": 2,
        "numReviews": 0,
        "reviews": [],
    },
    {
        "_id": "p6",
        "name": "Sony Playstation 5",
        "image": "/images/playstation.jpg",
        "description": "The ultimate home entertainment center",
        "brand": "Sony",
        "category": "Gaming",
        "price": 399.99,
        "countInStock": 11,
        "rating": 5,
        "numReviews": 0,
        "reviews": [],
    },
]

SHIPPING = {"address": "123 Main St", "city": "Boston", "postalCode": "02101", "country": "USA"}

ORDERS = [
    {
        "_id": "o1",
        "user": {"_id": "u1", "name": "John Doe", "email": "john@example.com"},
        "orderItems": [
            {"_id": "i1", "name": "Airpods Wireless Bluetooth Headphones", "qty": 1, "price": 89.99, "product": "p1"},
        ],
        "shippingAddress": SHIPPING,
        "paymentMethod": "PayPal",
        "itemsPrice": 89.99,
        "taxPrice": 0.01,
        "shippingPrice": 10,
        "totalPrice": 100.0,
        "isPaid": True,
        "paidAt": "2024-06-10T09:05:00.000Z",
        "isDelivered": True,
        "deliveredAt": "2024-06-12T15:00:00.000Z",
        "createdAt": "2024-06-10T09:00:00.000Z",
        "updatedAt": "2024-06-12T15:00:00.000Z",
    },
    {
        "_id": "o2",
        "user": "u1",
        "orderItems": [
            {"_id": "i2", "name": "Logitech G-Series Gaming Mouse", "qty": 2, "price": 20.0, "product": "p4"},
        ],
        "shippingAddress": SHIPPING,
        "paymentMethod": "PayPal",
        "totalPrice": 50.0,
        "isPaid": True,
        "isDelivered": False,
        # exactly 30 days before NOW
        "createdAt": "2024-05-16T12:00:00.000Z",
    },
    {
        "_id": "o3",
        "user": "u1",
        "orderItems": [
            {"_id": "i3", "name": "Amazon Echo Dot 3rd Generation", "qty": 1, "price": 29.99, "product": "p5"},
        ],
        "paymentMethod": "PayPal",
        "totalPrice": 30.0,
        "isPaid": False,
        "isDelivered": False,
        "createdAt": "2024-02-01T08:00:00.000Z",
    },
]

OTHER_CUSTOMER_ORDER = {
    "_id": "o4",
    "user": "u2",
    "orderItems": [
        {"_id": "i4", "name": "Airpods Wireless Bluetooth Headphones", "qty": 2, "price": 89.99, "product": "p1"},
    ],
    "totalPrice": 200.0,
    "isPaid": True,
    "isDelivered": True,
    "createdAt": "2023-12-20T10:00:00.000Z",
}


class FakeStorefront:
    """In-memory storefront API; records every request it serves"""

    def __init__(self, products, my_orders, all_orders):
        self.products = {p["_id"]: p for p in copy.deepcopy(products)}
        self.my_orders = copy.deepcopy(my_orders)
        self.all_orders = copy.deepcopy(all_orders)
        self.requests = []
        self.fail_put = set()
        self.fail_search = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/products" and request.method == "GET":
            if self.fail_search:
                return httpx.Response(500, json={"message": "Server error"})
            keyword = request.url.params.get("keyword", "").lower()
            products = [p for p in self.products.values() if keyword in p["name"].lower()]
            return httpx.Response(200, json={"products": products, "page": 1, "pages": 1})

        if path.startswith("/api/products/"):
            product_id = path.rsplit("/", 1)[1]
            product = self.products.get(product_id)
            if product is None:
                return httpx.Response(404, json={"message": "Product not found"})
            if request.method == "PUT":
                if product_id in self.fail_put:
                    return httpx.Response(500, json={"message": "Server error"})
                body = json.loads(request.content)
                product.update({k: v for k, v in body.items() if k != "productId"})
                product["updatedAt"] = "2024-06-15T12:00:00.000Z"
            return httpx.Response(200, json=product)

        if path == "/api/orders/mine":
            return httpx.Response(200, json=self.my_orders)

        if path == "/api/orders":
            return httpx.Response(200, json=self.all_orders)

        if path.startswith("/api/orders/"):
            order_id = path.rsplit("/", 1)[1]
            for order in self.all_orders:
                if order["_id"] == order_id:
                    return httpx.Response(200, json=order)
            return httpx.Response(404, json={"message": "Order not found"})

        return httpx.Response(404, json={"message": "Not found"})

    def requests_for(self, method: str):
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def storefront():
    """
    Provides a fresh fake storefront per test

    Scope: function (mutations never leak between tests)
    """
    return FakeStorefront(PRODUCTS, ORDERS, ORDERS + [OTHER_CUSTOMER_ORDER])


@pytest.fixture
def storage():
    """Provides empty in-memory client storage"""
    return MemoryStorage()


@pytest.fixture
def ctx(storefront, storage):
    """
    Provides a ToolContext wired to the fake storefront

    The clock is frozen at NOW; the connector and the context share one
    query cache.
    """
    cache = QueryCache(ttl_seconds=60)
    connector = StoreApiConnector(
        base_url="http://store.test",
        token="test-token",
        cache=cache,
        transport=httpx.MockTransport(storefront.handler),
    )
    return ToolContext(
        connector=connector,
        storage=storage,
        cart_store=CartStore(storage),
        cache=cache,
        clock=lambda: NOW,
    )


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data in the storefront's wire format
    """
    return copy.deepcopy(PRODUCTS[0])


@pytest.fixture
def sample_order_data():
    """
    Provides sample order data in the storefront's wire format
    """
    return copy.deepcopy(ORDERS[0])
