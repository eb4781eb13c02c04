"""
Storefront REST API Connector
Handles all interactions with the storefront's product and order endpoints

Author: TM3
Date: 2026-10-15
"""
import logging
from typing import Dict, List, Optional, Any

import httpx

from shopassist.core.exceptions import StoreApiError, StoreConnectionError
from shopassist.state.query_cache import QueryCache

logger = logging.getLogger(__name__)


class StoreApiConnector:
    """
    Connector for the storefront REST API

    Handles:
    - Product search and lookup (optionally cached by tag)
    - Full-object product replacement
    - Order retrieval (own orders, single order, all orders)

    Every non-OK response raises StoreApiError; transport failures raise
    StoreConnectionError. Nothing is retried.
    """

    def __init__(self, base_url: str = None, token: str = None, timeout: float = 30.0,
                 cache: Optional[QueryCache] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize storefront connector

        Args:
            base_url: Storefront origin (e.g., 'http://localhost:5000')
            token: Optional bearer token forwarded to the storefront
            timeout: Request timeout in seconds
            cache: Optional query cache for product reads
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not base_url:
            raise ValueError("Storefront API not configured. Set STORE_API_URL")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.cache = cache
        self.transport = transport
        self.headers = {'Accept': 'application/json'}
        if token:
            self.headers['Authorization'] = f'Bearer {token}'
        self.api_calls = 0

    async def _request(self, method: str, path: str, failure: str,
                       params: Optional[Dict] = None, json: Optional[Dict] = None) -> Any:
        """
        Make a request to the storefront API

        Args:
            method: HTTP method
            path: API path (e.g., '/api/products/123')
            failure: Message prefix used when the response is not OK
            params: Query parameters
            json: JSON body

        Returns:
            Parsed JSON response
        """
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport,
                                     timeout=self.timeout) as client:
            try:
                response = await client.request(method, path, params=params, json=json, headers=self.headers)
            except httpx.HTTPError as e:
                logger.error(f"Storefront request error: {method} {path}: {e}")
                raise StoreConnectionError(f"Could not reach storefront API: {e}") from e

        self.api_calls += 1

        if response.is_error:
            logger.error(f"Storefront request failed: {method} {path} -> {response.status_code}")
            raise StoreApiError(f"{failure} with status {response.status_code}", response.status_code)

        return response.json()

    async def _cached_get(self, key: str, tags: List[str], path: str, failure: str,
                          params: Optional[Dict] = None, fresh: bool = False) -> Any:
        if self.cache is not None and not fresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        data = await self._request("GET", path, failure, params=params)

        if self.cache is not None:
            self.cache.set(key, data, tags)
        return data

    # ==================== PRODUCTS ====================

    async def search_products(self, keyword: str = "") -> List[Dict]:
        """
        Keyword search over the catalog

        Args:
            keyword: Free text matched server-side; empty lists everything

        Returns:
            Products in server order
        """
        params = {'keyword': keyword} if keyword else None
        data = await self._cached_get(
            f"products?keyword={keyword}", ['Products'],
            "/api/products", "API request failed", params=params
        )
        return data.get('products', []) if isinstance(data, dict) else []

    async def get_product(self, product_id: str, fresh: bool = False) -> Dict:
        """
        Get a single product

        Args:
            product_id: Storefront product ID
            fresh: Skip the cache (mutations read their baseline this way)
        """
        return await self._cached_get(
            f"product:{product_id}", ['Product'],
            f"/api/products/{product_id}", "Product not found", fresh=fresh
        )

    async def update_product(self, product_id: str, body: Dict) -> Dict:
        """Replace a product with ``body`` (must carry every writable field)"""
        return await self._request("PUT", f"/api/products/{product_id}", "Failed to update product", json=body)

    # ==================== ORDERS ====================

    async def get_my_orders(self) -> List[Dict]:
        """Orders of the user the token belongs to"""
        return await self._request("GET", "/api/orders/mine", "Failed to fetch orders")

    async def get_order(self, order_id: str) -> Dict:
        return await self._request("GET", f"/api/orders/{order_id}", "Order not found")

    async def get_all_orders(self) -> List[Dict]:
        """Every order in the store (admin endpoint)"""
        return await self._request("GET", "/api/orders", "Failed to fetch orders")
