"""
Order Domain Models

Represents storefront orders as returned by the orders endpoints.
Status is derived from the paid/delivered flags and never stored.

Author: TM3
Date: 2026-10-14
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any
from datetime import datetime, timezone


ORDER_STATUSES = ('pending', 'paid', 'delivered')


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so they compare with aware ones"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OrderItem(BaseModel):
    """
    Order Item domain model - represents a line item in an order

    Fields:
        id: Line item ID
        name: Product name at order time
        qty: Units ordered
        price: Unit price at order time
        product: Referenced product ID
        image: Product image at order time
    """

    id: Optional[str] = Field(None, alias="_id", description="Line item ID")
    name: str = Field("", description="Product name at order time")
    qty: int = Field(0, description="Quantity ordered", ge=0)
    price: float = Field(0, description="Price per unit", ge=0)
    product: Optional[str] = Field(None, description="Product ID")
    image: Optional[str] = Field(None, description="Product image")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @property
    def total(self) -> float:
        return self.qty * self.price


class ShippingAddress(BaseModel):
    """Shipping address embedded in orders and carts"""
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "city": self.city,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class OrderUser(BaseModel):
    """Order owner (populated by the single-order endpoint)"""
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Order(BaseModel):
    """
    Order domain model - represents a customer order

    Fields:
        id: Storefront order ID (``_id`` on the wire)
        order_items: Line items, in checkout order
        items_price / tax_price / shipping_price / total_price: Computed totals
        is_paid / paid_at: Payment flag and timestamp
        is_delivered / delivered_at: Delivery flag and timestamp
        payment_method: Method chosen at checkout
        payment_result: Processor response, if any
        shipping_address: Destination
        user: Owner (ID string, or populated object)
        report: Optional delivery report
        created_at / updated_at: Server timestamps
    """

    id: Optional[str] = Field(None, alias="_id", description="Storefront order ID")
    order_items: List[OrderItem] = Field(default_factory=list, description="Line items")
    items_price: float = Field(0, description="Items subtotal")
    tax_price: float = Field(0, description="Tax")
    shipping_price: float = Field(0, description="Shipping")
    total_price: float = Field(0, description="Order total")
    is_paid: bool = Field(False, description="Whether the order was paid")
    paid_at: Optional[datetime] = Field(None, description="Payment timestamp")
    is_delivered: bool = Field(False, description="Whether the order was delivered")
    delivered_at: Optional[datetime] = Field(None, description="Delivery timestamp")
    payment_method: Optional[str] = Field(None, description="Payment method")
    payment_result: Optional[Any] = Field(None, description="Payment processor result")
    shipping_address: Optional[ShippingAddress] = Field(None, description="Shipping address")
    user: Optional[Any] = Field(None, description="Owning user")
    report: Optional[Any] = Field(None, description="Delivery report")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    # Pydantic v2 configuration
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @field_validator('created_at', 'updated_at', 'paid_at', 'delivered_at')
    @classmethod
    def _normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator('total_price', 'items_price', 'tax_price', 'shipping_price', mode='before')
    @classmethod
    def _missing_price_is_zero(cls, value):
        return 0 if value is None else value

    # Computed properties
    @property
    def status(self) -> str:
        """delivered beats paid beats pending"""
        if self.is_delivered:
            return 'delivered'
        if self.is_paid:
            return 'paid'
        return 'pending'

    @property
    def items_count(self) -> int:
        return len(self.order_items)

    def owner(self) -> Optional[OrderUser]:
        """Owner details when the API populated them"""
        if isinstance(self.user, dict):
            return OrderUser.model_validate(self.user)
        return None

    def to_summary(self) -> dict:
        """Shape used by the order history tool"""
        return {
            "id": self.id,
            "createdAt": _iso(self.created_at),
            "totalPrice": self.total_price,
            "status": self.status,
            "isPaid": self.is_paid,
            "isDelivered": self.is_delivered,
            "paidAt": _iso(self.paid_at),
            "deliveredAt": _iso(self.delivered_at),
            "paymentMethod": self.payment_method,
            "itemsCount": self.items_count,
            "items": [
                {
                    "name": item.name,
                    "quantity": item.qty,
                    "price": item.price,
                    "total": item.total,
                }
                for item in self.order_items
            ],
            "shippingAddress": self.shipping_address.to_dict() if self.shipping_address else None,
        }

    def to_detail(self) -> dict:
        """Shape used by the order details tool"""
        owner = self.owner()
        return {
            "id": self.id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "totalPrice": self.total_price,
            "itemsPrice": self.items_price,
            "taxPrice": self.tax_price,
            "shippingPrice": self.shipping_price,
            "status": self.status,
            "isPaid": self.is_paid,
            "isDelivered": self.is_delivered,
            "paidAt": _iso(self.paid_at),
            "deliveredAt": _iso(self.delivered_at),
            "paymentMethod": self.payment_method,
            "paymentResult": self.payment_result,
            "itemsCount": self.items_count,
            "items": [
                {
                    "id": item.id,
                    "name": item.name,
                    "quantity": item.qty,
                    "price": item.price,
                    "total": item.total,
                    "product": item.product,
                }
                for item in self.order_items
            ],
            "shippingAddress": self.shipping_address.to_dict() if self.shipping_address else None,
            "user": {"name": owner.name, "email": owner.email} if owner else None,
            "report": self.report,
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
