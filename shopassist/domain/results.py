"""
Tool Result Envelopes

Every storefront tool returns one of these models, on success and on
failure alike. Failure envelopes keep every domain field at a safe default
(empty list, zero, null) so callers can read them without branching, and
carry ``error_kind`` so a typed caller can tell the failure branch apart.

Author: TM3
Date: 2026-10-15
"""
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from shopassist.core.exceptions import ErrorKind
from shopassist.domain.cart import Cart, CartItem
from shopassist.domain.product import Product


class ToolResult(BaseModel):
    """Fields shared by every envelope"""
    success: bool = False
    message: str = ""
    raw_data: Optional[Any] = None
    error_kind: Optional[ErrorKind] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def is_error(self) -> bool:
        return not self.success

    def to_dict(self) -> dict:
        """camelCase JSON shape handed to the UI and to Claude"""
        return self.model_dump(by_alias=True, mode="json")


# ============================================================================
# CATALOG
# ============================================================================

class SearchProductsResult(ToolResult):
    products: List[Product] = Field(default_factory=list)
    total_results: int = 0


class TopRatedLowStockResult(ToolResult):
    products: List[Product] = Field(default_factory=list)
    total_results: int = 0
    criteria: Dict[str, Any] = Field(default_factory=dict)


class ReviewsResult(ToolResult):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    question: Optional[str] = None
    reviews: List[Dict[str, Any]] = Field(default_factory=list)
    review_count: int = 0
    average_rating: float = 0


# ============================================================================
# CART
# ============================================================================

class CartResult(ToolResult):
    cart: Optional[Cart] = None
    product: Optional[CartItem] = None
    cart_items_count: int = 0
    cart_total: str = "0.00"


# ============================================================================
# ORDERS
# ============================================================================

class OrderHistoryResult(ToolResult):
    orders: List[Dict[str, Any]] = Field(default_factory=list)
    total_orders: int = 0
    total_spent: float = 0
    delivered_orders: int = 0
    paid_orders: int = 0
    pending_orders: int = 0
    average_order_value: float = 0
    filters: Dict[str, Any] = Field(default_factory=dict)


class OrderDetailsResult(ToolResult):
    order: Optional[Dict[str, Any]] = None


class OrderStatistics(BaseModel):
    total_orders: int = 0
    total_spent: float = 0
    average_order_value: float = 0
    delivered_orders: int = 0
    paid_orders: int = 0
    pending_orders: int = 0
    delivery_rate: float = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderStatisticsResult(ToolResult):
    period: str = "all"
    statistics: Optional[OrderStatistics] = None
    top_products: List[Dict[str, Any]] = Field(default_factory=list)
    monthly_spending: List[Dict[str, Any]] = Field(default_factory=list)


# ============================================================================
# ADMIN
# ============================================================================

class FieldChange(BaseModel):
    field: str
    old_value: Optional[Any] = None
    new_value: Optional[Any] = None
    changed: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductUpdateResult(ToolResult):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    updated_product: Optional[Dict[str, Any]] = None
    previous_product: Optional[Dict[str, Any]] = None
    changes: List[FieldChange] = Field(default_factory=list)
    fields_updated: List[str] = Field(default_factory=list)


class AdminProductResult(ToolResult):
    product: Optional[Dict[str, Any]] = None


class BulkItemResult(BaseModel):
    product_id: str
    success: bool
    product_name: Optional[str] = None
    message: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BulkUpdateResult(ToolResult):
    product_ids: List[str] = Field(default_factory=list)
    updates: Dict[str, Any] = Field(default_factory=dict)
    results: List[BulkItemResult] = Field(default_factory=list)
    success_count: int = 0
    failure_count: int = 0
    total_processed: int = 0
    fields_updated: List[str] = Field(default_factory=list)


class StockUpdateResult(ToolResult):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    old_stock_level: int = 0
    new_stock_level: int = 0
    operation: Optional[str] = None
    stock_change: int = 0
    updated_product: Optional[Dict[str, Any]] = None
