"""
Tool Context

Bundles the collaborators every storefront tool needs, so tools receive
them explicitly instead of importing shared singletons.

Author: TM3
Date: 2026-10-15
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from shopassist.connectors.store_api_connector import StoreApiConnector
from shopassist.core.config import Settings
from shopassist.domain.order import as_utc
from shopassist.state.cart_store import CartStore
from shopassist.state.query_cache import QueryCache, PRODUCT_TAGS
from shopassist.state.storage import ClientStorage, FileStorage

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ToolContext:
    """Injected dependencies for the tool functions"""
    connector: StoreApiConnector
    storage: ClientStorage
    cart_store: CartStore
    cache: Optional[QueryCache] = None
    clock: Callable[[], datetime] = field(default=utc_now)

    def now(self) -> datetime:
        """Current time, always timezone-aware"""
        return as_utc(self.clock())

    def invalidate_product_cache(self, tags: Iterable[str] = PRODUCT_TAGS) -> None:
        """
        Drop cached product queries after a mutation.

        A failure here is logged and swallowed; it never changes the outcome
        of the mutation that triggered it.
        """
        if self.cache is None:
            return
        try:
            self.cache.invalidate_tags(tags)
        except Exception as e:
            logger.warning(f"Failed to invalidate cache: {e}")


def build_tool_context(settings: Settings, storage: Optional[ClientStorage] = None) -> ToolContext:
    """Wire a ToolContext from application settings"""
    cache = QueryCache(ttl_seconds=settings.PRODUCT_CACHE_TTL)
    storage = storage or FileStorage(settings.CLIENT_STATE_DIR)
    connector = StoreApiConnector(
        base_url=settings.STORE_API_URL,
        token=settings.STORE_API_TOKEN or None,
        timeout=settings.STORE_API_TIMEOUT,
        cache=cache,
    )
    return ToolContext(
        connector=connector,
        storage=storage,
        cart_store=CartStore(storage),
        cache=cache,
    )
