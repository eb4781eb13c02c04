"""
Client State - persisted cart/session blobs, cart store and query cache

Author: TM3
Date: 2026-10-15
"""
from shopassist.state.storage import ClientStorage, MemoryStorage, FileStorage
from shopassist.state.cart_store import CartStore
from shopassist.state.query_cache import QueryCache, PRODUCT_TAGS

__all__ = [
    'ClientStorage',
    'MemoryStorage',
    'FileStorage',
    'CartStore',
    'QueryCache',
    'PRODUCT_TAGS',
]
